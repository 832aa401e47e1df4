def test_group_id_path_injection_returns_422(client, make_user, login_as):
    login_as(make_user())
    resp = client.get("/groups/1 OR 1=1")
    assert resp.status_code == 422


def test_order_id_path_injection_returns_422(client, make_user, login_as):
    login_as(make_user())
    resp = client.post("/orders/1; DROP TABLE users;--/status", json={"status": "processing"})
    assert resp.status_code == 422


def test_groups_query_params_injection_returns_422(client, make_user, login_as):
    login_as(make_user())
    resp = client.get("/groups?skip=0; DROP TABLE shopping_groups;--&limit=100")
    assert resp.status_code == 422


def test_body_injection_on_wallet_delta_returns_422(client, make_user, login_as):
    login_as(make_user())
    resp = client.post("/wallet/me/transactions", json={"amount": "1 OR 1=1", "type": "topup"})
    assert resp.status_code == 422


def test_room_code_is_bound_not_interpolated(client, make_user, login_as):
    login_as(make_user())
    resp = client.post("/groups/join", json={"room_code": "' OR '1'='1"})
    assert resp.status_code == 404
