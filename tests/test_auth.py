def _register(client, email="meera@example.com", password="s3cretpass"):
    return client.post("/auth/register", json={"email": email, "name": "Meera", "password": password})


def test_register_then_login_issues_working_token(client):
    resp = _register(client)
    assert resp.status_code == 201
    assert resp.json()["email"] == "meera@example.com"

    resp = client.post("/auth/login", data={"username": "meera@example.com", "password": "s3cretpass"})
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Meera"
    assert me.json()["balance"] == 0


def test_register_duplicate_email_conflicts(client):
    assert _register(client).status_code == 201
    resp = _register(client, email="MEERA@example.com")
    assert resp.status_code == 409
    assert resp.json()["error"]["error_code"] == "EMAIL_EXISTS"


def test_login_wrong_password_and_unknown_email_look_the_same(client):
    _register(client)
    wrong = client.post("/auth/login", data={"username": "meera@example.com", "password": "nope-nope"})
    unknown = client.post("/auth/login", data={"username": "ghost@example.com", "password": "s3cretpass"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["error"]["error_code"] == unknown.json()["error"]["error_code"] == "AUTH_FAILED"


def test_protected_routes_require_a_token(client):
    assert client.get("/groups").status_code == 401
    assert client.get("/wallet/me").status_code == 401
    assert client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401
