from app.db.models.request_log import RequestLog


def test_correlation_id_header_present_on_404(client):
    resp = client.get("/this-path-does-not-exist")
    assert resp.status_code == 404
    assert "X-Correlation-ID" in resp.headers


def test_supplied_correlation_id_is_echoed(client):
    resp = client.get("/this-path-does-not-exist", headers={"X-Correlation-ID": "checkout-42"})
    assert resp.headers["X-Correlation-ID"] == "checkout-42"


def test_service_errors_carry_correlation_id(client, make_user, login_as):
    login_as(make_user())
    resp = client.post("/groups/999/join", headers={"X-Correlation-ID": "join-999"})
    assert resp.status_code == 404
    assert resp.json()["error"]["correlation_id"] == "join-999"


def test_inbound_requests_are_logged(client, db_session):
    client.get("/this-path-does-not-exist", headers={"X-Correlation-ID": "logged-1"})
    db_session.expire_all()
    rows = db_session.query(RequestLog).filter_by(correlation_id="logged-1").all()
    assert [r.direction for r in rows] == ["inbound"]
    assert rows[0].status_code == 404
