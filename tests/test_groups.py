import pytest

from app.db.models.group_member import GroupMember
from app.db.models.shopping_group import ShoppingGroup
from app.repositories.cart_item import CartItemRepository
from app.repositories.group import GroupRepository
from app.repositories.group_member import GroupMemberRepository
from app.repositories.product import ProductRepository
from app.services.exceptions import GroupNotFoundError, NotFoundError, PersistenceError, ValidationError
from app.services.group_services import GroupService


def _service(db):
    return GroupService(
        group_repo=GroupRepository(db),
        member_repo=GroupMemberRepository(db),
        cart_repo=CartItemRepository(db),
        product_repo=ProductRepository(db),
    )


def test_create_group_book_club(client, db_session, make_user, login_as):
    creator = make_user("Asha")
    login_as(creator)

    resp = client.post("/groups", json={"name": "Book Club", "description": "monthly reads"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["member_count"] == 1
    assert len(body["room_code"]) == 6
    assert body["room_code"].isalnum() and body["room_code"].upper() == body["room_code"]
    assert body["is_active"] is True
    assert body["total_cart"] == 0

    roles = [m.role for m in db_session.query(GroupMember).filter_by(group_id=body["id"]).all()]
    assert roles == ["creator"]


def test_create_group_rejects_blank_name(client, make_user, login_as):
    login_as(make_user())
    resp = client.post("/groups", json={"name": "   "})
    assert resp.status_code == 400
    assert resp.json()["error"]["error_code"] == "VALIDATION_ERROR"


def test_room_code_is_stable_across_reads(client, make_user, login_as):
    login_as(make_user())
    created = client.post("/groups", json={"name": "Stable"}).json()

    first = client.get("/groups").json()
    second = client.get("/groups").json()
    assert first == second
    assert first[0]["room_code"] == created["room_code"]
    assert client.get(f"/groups/{created['id']}").json()["room_code"] == created["room_code"]


def test_join_then_duplicate_join_conflicts(client, make_user, login_as):
    creator, friend = make_user("Asha"), make_user("Ravi")
    login_as(creator)
    group_id = client.post("/groups", json={"name": "Weekend"}).json()["id"]

    login_as(friend)
    resp = client.post(f"/groups/{group_id}/join")
    assert resp.status_code == 200
    assert resp.json()["member_count"] == 2

    again = client.post(f"/groups/{group_id}/join")
    assert again.status_code == 409
    assert again.json()["error"]["error_code"] == "ALREADY_MEMBER"


def test_join_missing_or_closed_group_is_not_found(client, make_user, login_as):
    creator, friend = make_user("Asha"), make_user("Ravi")
    login_as(friend)
    assert client.post("/groups/999/join").status_code == 404

    login_as(creator)
    group_id = client.post("/groups", json={"name": "Short lived"}).json()["id"]
    assert client.post(f"/groups/{group_id}/close").status_code == 200

    login_as(friend)
    resp = client.post(f"/groups/{group_id}/join")
    assert resp.status_code == 404
    assert resp.json()["error"]["error_code"] == "GROUP_NOT_FOUND"


def test_join_full_group_rejected(client, db_session, make_user, login_as):
    creator = make_user("Asha")
    login_as(creator)
    group_id = client.post("/groups", json={"name": "Tiny"}).json()["id"]
    db_session.query(ShoppingGroup).filter_by(id=group_id).update({"max_members": 2})
    db_session.commit()

    login_as(make_user("Ravi"))
    assert client.post(f"/groups/{group_id}/join").status_code == 200

    login_as(make_user("Kiran"))
    resp = client.post(f"/groups/{group_id}/join")
    assert resp.status_code == 400
    assert resp.json()["error"]["error_code"] == "GROUP_FULL"


def test_join_by_room_code_is_case_insensitive(client, make_user, login_as):
    login_as(make_user("Asha"))
    created = client.post("/groups", json={"name": "Codes"}).json()

    login_as(make_user("Ravi"))
    resp = client.post("/groups/join", json={"room_code": created["room_code"].lower()})
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]

    assert client.post("/groups/join", json={"room_code": "ZZZZZZZ"}).status_code == 404


def test_list_groups_newest_first_with_aggregates(client, make_user, make_product, login_as):
    creator = make_user("Asha")
    login_as(creator)
    older = client.post("/groups", json={"name": "Older"}).json()
    newer = client.post("/groups", json={"name": "Newer"}).json()

    book = make_product("Novel", price=250)
    pen = make_product("Pen", price=40)
    client.post(f"/groups/{older['id']}/cart", json={"product_id": book.id, "quantity": 2})
    client.post(f"/groups/{older['id']}/cart", json={"product_id": pen.id, "quantity": 3})

    listed = client.get("/groups").json()
    assert [g["id"] for g in listed] == [newer["id"], older["id"]]
    assert listed[1]["total_cart"] == 250 * 2 + 40 * 3
    assert listed[0]["total_cart"] == 0
    assert all(g["member_count"] == 1 for g in listed)


def test_closed_groups_drop_out_of_listing(client, make_user, login_as):
    login_as(make_user())
    group_id = client.post("/groups", json={"name": "Gone"}).json()["id"]
    client.post(f"/groups/{group_id}/close")
    assert client.get("/groups").json() == []
    assert client.get("/groups/mine").json() == []


def test_only_creator_can_close(client, make_user, login_as):
    login_as(make_user("Asha"))
    group_id = client.post("/groups", json={"name": "Mine"}).json()["id"]

    login_as(make_user("Ravi"))
    client.post(f"/groups/{group_id}/join")
    resp = client.post(f"/groups/{group_id}/close")
    assert resp.status_code == 403
    assert resp.json()["error"]["error_code"] == "GROUP_PERMISSION_DENIED"


def test_leave_group_rules(client, make_user, login_as):
    creator, friend = make_user("Asha"), make_user("Ravi")
    login_as(creator)
    group_id = client.post("/groups", json={"name": "Leavers"}).json()["id"]

    assert client.post(f"/groups/{group_id}/leave").status_code == 400

    login_as(friend)
    assert client.post(f"/groups/{group_id}/leave").status_code == 404
    client.post(f"/groups/{group_id}/join")
    assert client.post(f"/groups/{group_id}/leave").status_code == 204
    assert client.get(f"/groups/{group_id}").json()["member_count"] == 1


def test_members_list_creator_first(client, make_user, login_as):
    creator = make_user("Asha")
    login_as(creator)
    group_id = client.post("/groups", json={"name": "Roster"}).json()["id"]
    for name in ("Ravi", "Kiran"):
        login_as(make_user(name))
        client.post(f"/groups/{group_id}/join")

    members = client.get(f"/groups/{group_id}/members").json()
    assert members[0] == {**members[0], "user_id": creator.id, "role": "creator"}
    assert [m["name"] for m in members] == ["Asha", "Ravi", "Kiran"]


def test_cart_requires_membership_and_product(client, make_user, make_product, login_as):
    login_as(make_user("Asha"))
    group_id = client.post("/groups", json={"name": "Cart"}).json()["id"]
    product = make_product(price=99)

    assert client.post(f"/groups/{group_id}/cart", json={"product_id": 12345}).status_code == 404

    login_as(make_user("Outsider"))
    resp = client.post(f"/groups/{group_id}/cart", json={"product_id": product.id})
    assert resp.status_code == 404
    assert resp.json()["error"]["error_code"] == "MEMBERSHIP_NOT_FOUND"


def test_group_cart_lines_and_total(client, make_user, make_product, login_as):
    login_as(make_user("Asha"))
    group_id = client.post("/groups", json={"name": "Cart"}).json()["id"]
    product = make_product("Atlas", price=120)

    line = client.post(f"/groups/{group_id}/cart", json={"product_id": product.id, "quantity": 3})
    assert line.status_code == 201
    assert line.json()["line_total"] == 360

    cart = client.get(f"/groups/{group_id}/cart").json()
    assert cart["total"] == 360
    assert [i["product_name"] for i in cart["items"]] == ["Atlas"]


def test_aggregate_cart_of_group_without_lines_is_zero(db_session, make_user):
    creator = make_user()
    service = _service(db_session)
    group = service.create_group(db_session, "Empty", "", creator.id)
    assert service.get_aggregate_cart(group.id) == 0
    assert service.get_aggregate_cart(424242) == 0


def test_create_group_store_failure_writes_nothing(db_session, make_user, monkeypatch):
    from sqlalchemy.exc import OperationalError

    creator = make_user()
    service = _service(db_session)

    def _boom(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(service.member_repo, "add_member", _boom)
    with pytest.raises(PersistenceError):
        service.create_group(db_session, "Doomed", "", creator.id)
    assert db_session.query(ShoppingGroup).count() == 0


def test_service_errors_carry_http_semantics(db_session, make_user):
    service = _service(db_session)
    with pytest.raises(ValidationError):
        service.create_group(db_session, "", "", make_user().id)
    with pytest.raises(GroupNotFoundError) as exc:
        service.join_group(db_session, 77, 1)
    assert isinstance(exc.value, NotFoundError)
    assert exc.value.http_status == 404


def test_aggregate_cart_sums_price_times_quantity(db_session, make_user, make_product):
    creator = make_user()
    service = _service(db_session)
    group = service.create_group(db_session, "Totals", "", creator.id)
    book = make_product("Novel", price=120)
    pen = make_product("Pen", price=15)

    service.add_cart_item(db_session, group.id, creator.id, book.id, 2)
    service.add_cart_item(db_session, group.id, creator.id, pen.id, 4)

    assert CartItemRepository(db_session).group_total(group.id) == 300
    assert service.get_aggregate_cart(group.id) == 300
    assert service.get_group_cart(group.id).total == 300


def test_join_locks_group_row_before_counting(db_session, make_user):
    creator, friend = make_user("Asha"), make_user("Ravi")
    service = _service(db_session)
    group = service.create_group(db_session, "Locked", "", creator.id)

    locked = []
    original = service.group_repo.get_for_update

    def _spy(group_id):
        locked.append(group_id)
        return original(group_id)

    service.group_repo.get_for_update = _spy
    service.join_group(db_session, group.id, friend.id)
    assert locked == [group.id]
