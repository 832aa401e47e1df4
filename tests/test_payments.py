import base64
from datetime import datetime, timedelta, timezone

import pytest

from app.repositories.group import GroupRepository
from app.repositories.group_member import GroupMemberRepository
from app.services.exceptions import MembershipNotFoundError, ValidationError
from app.services.group_services import GroupService
from app.services.payment_services import PaymentIntentService, build_upi_uri

FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@pytest.fixture()
def group_with_member(db_session, make_user):
    creator = make_user("Asha")
    group = GroupService(
        group_repo=GroupRepository(db_session),
        member_repo=GroupMemberRepository(db_session),
    ).create_group(db_session, "Books", "", creator.id)
    return group, creator


def _service(db, clock=lambda: FIXED_NOW):
    return PaymentIntentService(
        clock=clock,
        group_repo=GroupRepository(db),
        member_repo=GroupMemberRepository(db),
    )


def test_generate_intent_for_group_item(db_session, group_with_member):
    group, member = group_with_member
    intent = _service(db_session).generate_intent(group.id, 9, member.id, 250)

    assert intent.upi_uri.startswith("upi://pay?")
    assert "am=250" in intent.upi_uri
    assert "cu=INR" in intent.upi_uri
    assert intent.reference_id == f"GRP{group.id}_ITM9_USR{member.id}_1704067200000"
    assert f"tr={intent.reference_id}" in intent.upi_uri
    assert intent.expires_at == FIXED_NOW + timedelta(hours=24)
    assert len(intent.instructions) == 4

    prefix = "data:image/png;base64,"
    assert intent.qr_code.startswith(prefix)
    assert base64.b64decode(intent.qr_code[len(prefix):]).startswith(PNG_MAGIC)


def test_each_call_gets_its_own_reference(db_session, group_with_member):
    group, member = group_with_member
    ticks = iter([FIXED_NOW, FIXED_NOW + timedelta(milliseconds=5)])
    service = _service(db_session, clock=lambda: next(ticks))

    first = service.generate_intent(group.id, 1, member.id, 100)
    second = service.generate_intent(group.id, 1, member.id, 100)
    assert first.reference_id != second.reference_id


def test_amount_must_be_positive(db_session, group_with_member):
    group, member = group_with_member
    for amount in (0, -5):
        with pytest.raises(ValidationError):
            _service(db_session).generate_intent(group.id, 1, member.id, amount)


def test_non_member_cannot_generate_intent(db_session, group_with_member, make_user):
    group, _ = group_with_member
    with pytest.raises(MembershipNotFoundError):
        _service(db_session).generate_intent(group.id, 1, make_user("Outsider").id, 100)


def test_upi_uri_encodes_note_and_name():
    uri = build_upi_uri("shop@icici", "Vyrona Mart", 99, "INR", "Group contribution Room 3", "GRP3_ITM1_USR1_1")
    assert uri == (
        "upi://pay?pa=shop@icici&pn=Vyrona%20Mart&am=99&cu=INR"
        "&tn=Group%20contribution%20Room%203&tr=GRP3_ITM1_USR1_1"
    )


def test_intent_endpoint(client, make_user, login_as):
    login_as(make_user("Asha"))
    group_id = client.post("/groups", json={"name": "Books"}).json()["id"]

    resp = client.post("/payments/intents", json={"group_id": group_id, "item_id": 9, "amount": 250})
    assert resp.status_code == 201
    body = resp.json()
    assert "am=250" in body["upi_uri"]
    assert body["currency"] == "INR"

    assert client.post("/payments/intents", json={"group_id": group_id, "item_id": 9, "amount": 0}).status_code == 422


def test_render_failure_maps_to_bad_gateway(client, make_user, login_as, monkeypatch):
    import app.services.payment_services as payment_services

    def _broken(data):
        raise OSError("PIL backend unavailable")

    monkeypatch.setattr(payment_services, "render_qr_data_uri", _broken)

    login_as(make_user("Asha"))
    group_id = client.post("/groups", json={"name": "Books"}).json()["id"]
    resp = client.post("/payments/intents", json={"group_id": group_id, "item_id": 1, "amount": 10})
    assert resp.status_code == 502
    assert resp.json()["error"]["error_code"] == "PAYMENT_INTENT_RENDER_FAILED"
