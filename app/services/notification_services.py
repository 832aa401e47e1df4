"""Order status emails rendered from Jinja2 templates."""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.db.models.order import Order
from app.repositories.user import UserRepository
from app.services.base import BaseService
from app.services.email_client import EmailClient

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates", "email")

env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def _format_inr(value: int) -> str:
    return f"₹{value:,}"


env.filters["inr"] = _format_inr

# One template and subject per status an order can move into
STATUS_EMAILS = {
    "processing": ("order_processing.html", "Order Confirmed #{order_id} - We're preparing your items"),
    "shipped": ("order_shipped.html", "Order Shipped #{order_id} - Your package is on the way"),
    "out_for_delivery": ("order_out_for_delivery.html", "Out for Delivery #{order_id} - Arriving today"),
    "delivered": ("order_delivered.html", "Order Delivered #{order_id} - Thank you for shopping with us"),
}


def render_email(template_name: str, context: dict) -> str:
    return env.get_template(template_name).render(**context)


class OrderNotifier(BaseService):
    """Sends at most one email per status transition, best effort."""

    user_repo: UserRepository

    def __init__(self, email_client: EmailClient, correlation_id: Optional[str] = None, **repositories):
        super().__init__(correlation_id)
        self.email_client = email_client
        self._set_repositories(**repositories)

    def notify_status_change(self, order: Order, status: str) -> bool:
        """Render and send the email for ``status``. Returns whether the send succeeded.

        Failures are logged and reported as False; they never propagate to
        the caller, whose status change is already committed.
        """
        if status not in STATUS_EMAILS:
            return False

        template_name, subject_template = STATUS_EMAILS[status]
        log_extra = {"correlation_id": self.correlation_id, "order_id": order.id, "status": status}

        try:
            customer = self.user_repo.get_by_id(order.user_id)
            if customer is None:
                self.logger.warning("Order owner not found; status email skipped", extra=log_extra)
                return False

            html = render_email(template_name, {
                "customer_name": customer.name,
                "order_id": order.id,
                "order_total": order.total_amount,
                "module": order.module,
                "status": status,
            })
            result = self.email_client.send(customer.email, subject_template.format(order_id=order.id), html)
        except Exception as exc:
            self.logger.error("Status email failed: %s", exc, extra=log_extra)
            return False

        if not result.success:
            self.logger.warning("Status email not delivered: %s", result.error, extra=log_extra)
            return False

        self.log_operation("notify_status_change", order_id=order.id, status=status, message_id=result.message_id)
        return True
