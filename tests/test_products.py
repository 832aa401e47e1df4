def test_admin_adds_product_and_members_browse(client, make_user, login_as):
    login_as(make_user("Admin", is_superuser=True))
    resp = client.post("/products", json={"name": "Atlas", "price": 450, "category": "books", "module": "read"})
    assert resp.status_code == 201
    assert resp.json()["module"] == "read"

    client.post("/products", json={"name": "Beanbag", "price": 2999, "category": "home"})

    login_as(make_user("Asha"))
    names = [p["name"] for p in client.get("/products").json()]
    assert names == ["Atlas", "Beanbag"]
    assert [p["name"] for p in client.get("/products?module=social").json()] == ["Beanbag"]
    assert [p["name"] for p in client.get("/products?category=books").json()] == ["Atlas"]


def test_only_admins_add_products(client, make_user, login_as):
    login_as(make_user("Asha"))
    resp = client.post("/products", json={"name": "Pen", "price": 10, "category": "stationery"})
    assert resp.status_code == 403


def test_unknown_module_rejected(client, make_user, login_as):
    login_as(make_user("Admin", is_superuser=True))
    resp = client.post("/products", json={"name": "Pen", "price": 10, "category": "stationery", "module": "garage"})
    assert resp.status_code == 422
