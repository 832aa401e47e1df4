import threading

import pytest

from app.db.models.user import User
from app.db.models.wallet_transaction import WalletTransaction
from app.db.session import SessionLocal
from app.repositories.group import GroupRepository
from app.repositories.group_member import GroupMemberRepository
from app.repositories.user import UserRepository
from app.repositories.wallet_transaction import WalletTransactionRepository
from app.services.exceptions import (
    InsufficientFundsError,
    ServiceError,
    UserNotFoundError,
    ValidationError,
)
from app.services.wallet_services import CONTRIBUTION_TYPE, WalletService


def _service(db):
    return WalletService(
        user_repo=UserRepository(db),
        transaction_repo=WalletTransactionRepository(db),
        group_repo=GroupRepository(db),
        member_repo=GroupMemberRepository(db),
    )


def _ledger(db, user_id):
    db.expire_all()
    return db.query(WalletTransaction).filter_by(user_id=user_id).order_by(WalletTransaction.id).all()


def test_debit_entire_balance(db_session, make_user):
    user = make_user(balance=500)
    result = _service(db_session).apply_delta(db_session, user.id, -500, "purchase")

    assert result.balance == 0
    assert result.transaction.amount == -500
    rows = _ledger(db_session, user.id)
    assert [(t.amount, t.type) for t in rows] == [(-500, "purchase")]


def test_sequential_deltas_accumulate(db_session, make_user):
    user = make_user(balance=100)
    service = _service(db_session)
    for amount in (50, -30, 200, -120):
        service.apply_delta(db_session, user.id, amount, "adjustment")

    assert service.get_balance(user.id).balance == 100 + 50 - 30 + 200 - 120
    assert sum(t.amount for t in _ledger(db_session, user.id)) == 100
    assert len(_ledger(db_session, user.id)) == 4


def test_zero_delta_still_records_a_transaction(db_session, make_user):
    user = make_user(balance=40)
    result = _service(db_session).apply_delta(db_session, user.id, 0, "noop", "audit marker")
    assert result.balance == 40
    assert [t.amount for t in _ledger(db_session, user.id)] == [0]


def test_overdraw_is_rejected_and_changes_nothing(db_session, make_user):
    user = make_user(balance=30)
    with pytest.raises(InsufficientFundsError):
        _service(db_session).apply_delta(db_session, user.id, -31, "purchase")

    db_session.expire_all()
    assert db_session.get(User, user.id).balance == 30
    assert _ledger(db_session, user.id) == []


def test_unknown_user_and_bad_type(db_session, make_user):
    service = _service(db_session)
    with pytest.raises(UserNotFoundError):
        service.apply_delta(db_session, 9999, 10, "topup")
    with pytest.raises(UserNotFoundError):
        service.get_balance(9999)

    user = make_user()
    with pytest.raises(ValidationError):
        service.apply_delta(db_session, user.id, 10, "   ")
    with pytest.raises(ValidationError):
        service.apply_delta(db_session, user.id, 10.5, "topup")


def test_concurrent_debits_cannot_overdraw(db_session, make_user):
    user = make_user(balance=100)
    barrier = threading.Barrier(2)
    outcomes = []
    lock = threading.Lock()

    def _debit():
        db = SessionLocal()
        try:
            barrier.wait()
            _service(db).apply_delta(db, user.id, -100, "purchase")
            result = "ok"
        except ServiceError as exc:
            result = exc.error_code
        finally:
            db.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=_debit) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert len(outcomes) == 2
    assert outcomes.count("ok") == 1

    db_session.expire_all()
    assert db_session.get(User, user.id).balance == 0
    assert [t.amount for t in _ledger(db_session, user.id)] == [-100]


def test_wallet_endpoints(client, make_user, login_as):
    user = make_user(balance=10)
    login_as(user)

    resp = client.post("/wallet/me/transactions", json={"amount": 90, "type": "topup", "description": "UPI top up"})
    assert resp.status_code == 201
    assert resp.json()["balance"] == 100

    client.post("/wallet/me/transactions", json={"amount": -25, "type": "purchase"})

    balance = client.get("/wallet/me").json()
    assert balance == {"user_id": user.id, "balance": 75, "reward_points": 0}

    history = client.get("/wallet/me/transactions").json()
    assert [t["amount"] for t in history] == [-25, 90]


def test_overdraw_over_http_is_bad_request(client, make_user, login_as):
    login_as(make_user(balance=5))
    resp = client.post("/wallet/me/transactions", json={"amount": -6, "type": "purchase"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["error_code"] == "INSUFFICIENT_FUNDS"
    assert body["detail"] == "Your wallet balance is too low for this transaction."


def test_contributions_credit_wallet_and_list_per_group(client, make_user, login_as):
    creator, friend = make_user("Asha"), make_user("Ravi")
    login_as(creator)
    group_id = client.post("/groups", json={"name": "Trip"}).json()["id"]
    login_as(friend)
    client.post(f"/groups/{group_id}/join")

    resp = client.post("/wallet/contributions", json={"group_id": group_id, "amount": 250})
    assert resp.status_code == 201
    assert resp.json()["balance"] == 250
    assert resp.json()["transaction"]["type"] == CONTRIBUTION_TYPE

    login_as(creator)
    client.post("/wallet/contributions", json={"group_id": group_id, "amount": 100, "payment_method": "wallet"})

    listing = client.get(f"/groups/{group_id}/contributions").json()
    assert listing["total"] == 350
    assert sorted(c["user_id"] for c in listing["contributions"]) == sorted([creator.id, friend.id])


def test_contribution_requires_membership(client, make_user, login_as):
    login_as(make_user("Asha"))
    group_id = client.post("/groups", json={"name": "Closed circle"}).json()["id"]

    login_as(make_user("Outsider"))
    resp = client.post("/wallet/contributions", json={"group_id": group_id, "amount": 10})
    assert resp.status_code == 404
    assert resp.json()["error"]["error_code"] == "MEMBERSHIP_NOT_FOUND"


@pytest.mark.parametrize("reserved", [CONTRIBUTION_TYPE, "payment"])
def test_group_tagged_types_cannot_be_posted_directly(client, make_user, login_as, reserved):
    login_as(make_user("Asha"))
    group_id = client.post("/groups", json={"name": "Trip"}).json()["id"]

    outsider = make_user("Outsider")
    login_as(outsider)
    resp = client.post(
        "/wallet/me/transactions",
        json={"amount": 99999, "type": reserved, "group_id": group_id},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["error_code"] == "VALIDATION_ERROR"

    assert client.get("/wallet/me").json()["balance"] == 0
    assert client.get(f"/groups/{group_id}/contributions").json()["total"] == 0


def test_reads_do_not_change_wallet(client, make_user, login_as):
    login_as(make_user(balance=40))
    client.post("/wallet/me/transactions", json={"amount": 10, "type": "topup"})

    first = (client.get("/wallet/me").json(), client.get("/wallet/me/transactions").json())
    second = (client.get("/wallet/me").json(), client.get("/wallet/me/transactions").json())
    assert first == second
    assert first[0]["balance"] == 50
    assert len(first[1]) == 1
