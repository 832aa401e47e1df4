"""UPI payment intents for group contributions.

An intent is a ``upi://pay`` URI plus the same URI rendered as a PNG QR
code. Settlement happens out of band in the payer's UPI app; nothing here is
persisted and the expiry is advisory.
"""

import base64
from datetime import datetime, timedelta, timezone
from io import BytesIO
from typing import Callable, List, Optional
from urllib.parse import quote

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from app.core.config import settings
from app.core.observability import log_outbound_call
from app.repositories.group import GroupRepository
from app.repositories.group_member import GroupMemberRepository
from app.schemas.payment import PaymentIntent
from app.services.base import BaseService
from app.services.exceptions import (
    GroupNotFoundError,
    MembershipNotFoundError,
    PaymentIntentRenderError,
    ValidationError,
)

PAYMENT_INSTRUCTIONS: List[str] = [
    "Scan the QR code with any UPI app",
    "Verify the amount and merchant details",
    "Complete the payment",
    "Your contribution will be updated automatically",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_reference_id(group_id: int, item_id: int, user_id: int, at: datetime) -> str:
    epoch_millis = int(at.timestamp() * 1000)
    return f"GRP{group_id}_ITM{item_id}_USR{user_id}_{epoch_millis}"


def build_upi_uri(payee: str, payee_name: str, amount: int, currency: str, note: str, reference_id: str) -> str:
    return (
        f"upi://pay?pa={quote(payee, safe='@.')}"
        f"&pn={quote(payee_name)}"
        f"&am={amount}"
        f"&cu={currency}"
        f"&tn={quote(note)}"
        f"&tr={reference_id}"
    )


def render_qr_data_uri(data: str) -> str:
    """Render ``data`` as a PNG QR code and return it as a base64 data URI."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=settings.QR_BOX_SIZE,
        border=settings.QR_BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


class PaymentIntentService(BaseService):
    """Builds UPI payment intents for group members."""

    group_repo: GroupRepository
    member_repo: GroupMemberRepository

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
        **repositories,
    ):
        super().__init__(correlation_id)
        self.clock = clock
        self._set_repositories(**repositories)

    def generate_intent(self, group_id: int, item_id: int, user_id: int, amount: int) -> PaymentIntent:
        """Build a fresh intent. Each call gets its own reference id.

        Raises:
            ValidationError: amount is not positive
            GroupNotFoundError: group missing or closed
            MembershipNotFoundError: user is not in the group
            PaymentIntentRenderError: QR rendering failed
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("amount", "must be a positive integer", self.correlation_id)

        group = self.group_repo.get_by_id(group_id)
        if group is None or not group.is_active:
            raise GroupNotFoundError(group_id, self.correlation_id)
        if not self.member_repo.is_member(group_id, user_id):
            raise MembershipNotFoundError(group_id, user_id, self.correlation_id)

        now = self.clock()
        reference_id = build_reference_id(group_id, item_id, user_id, now)
        upi_uri = build_upi_uri(
            payee=settings.UPI_PAYEE_ID,
            payee_name=settings.UPI_PAYEE_NAME,
            amount=amount,
            currency=settings.UPI_CURRENCY,
            note=f"Group contribution Room {group_id}",
            reference_id=reference_id,
        )

        try:
            qr_code = log_outbound_call(
                "qrcode", reference_id, "render_png", self.correlation_id,
                lambda: render_qr_data_uri(upi_uri),
            )
        except Exception as exc:
            self.logger.error(
                "QR rendering failed",
                extra={"correlation_id": self.correlation_id, "reference_id": reference_id, "error": str(exc)},
            )
            raise PaymentIntentRenderError(str(exc), self.correlation_id) from exc

        self.log_operation("generate_intent", group_id=group_id, item_id=item_id, user_id=user_id, amount=amount)
        return PaymentIntent(
            reference_id=reference_id,
            upi_uri=upi_uri,
            qr_code=qr_code,
            amount=amount,
            currency=settings.UPI_CURRENCY,
            expires_at=now + timedelta(hours=settings.PAYMENT_INTENT_TTL_HOURS),
            instructions=list(PAYMENT_INSTRUCTIONS),
        )
