"""Transactional email delivery through the Brevo SMTP API."""

import logging
import re
from typing import Optional, Protocol
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel

from app.core.config import settings
from app.core.observability import log_outbound_call

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


class SendResult(BaseModel):
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class EmailClient(Protocol):
    def send(self, to_address: str, subject: str, html_body: str) -> SendResult:
        ...


class BrevoEmailClient:
    """Single-attempt sender. Never raises; failures come back as ``SendResult(success=False)``."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        sender_name: Optional[str] = None,
        sender_address: Optional[str] = None,
        timeout: Optional[float] = None,
        correlation_id: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.BREVO_API_KEY
        self.api_url = api_url or settings.BREVO_API_URL
        self.sender_name = sender_name or settings.EMAIL_SENDER_NAME
        self.sender_address = sender_address or settings.EMAIL_SENDER_ADDRESS
        self.timeout = timeout or settings.BREVO_TIMEOUT_SECONDS
        self.correlation_id = correlation_id
        self.transport = transport

    def _payload(self, to_address: str, subject: str, html_body: str) -> dict:
        return {
            "sender": {"name": self.sender_name, "email": self.sender_address},
            "to": [{"email": to_address, "name": to_address.split("@")[0]}],
            "subject": subject,
            "htmlContent": html_body,
            "textContent": _TAG_RE.sub("", html_body),
        }

    def _post(self, payload: dict) -> httpx.Response:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "api-key": self.api_key,
        }
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            return client.post(self.api_url, json=payload, headers=headers)

    def send(self, to_address: str, subject: str, html_body: str) -> SendResult:
        if not self.api_key:
            logger.warning("BREVO_API_KEY is not configured; email not sent", extra={"correlation_id": self.correlation_id})
            return SendResult(success=False, error="missing_api_key")

        payload = self._payload(to_address, subject, html_body)
        try:
            response = log_outbound_call(
                "brevo", urlparse(self.api_url).netloc, "send_email", self.correlation_id,
                lambda: self._post(payload),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Brevo rejected email: %s %s", e.response.status_code, e.response.text[:200],
                extra={"correlation_id": self.correlation_id},
            )
            return SendResult(success=False, error=f"http_{e.response.status_code}")
        except httpx.RequestError as e:
            logger.warning("Brevo request failed: %s", e, extra={"correlation_id": self.correlation_id})
            return SendResult(success=False, error=type(e).__name__)

        try:
            body = response.json()
        except ValueError:
            body = None
        message_id = body.get("messageId") if isinstance(body, dict) else None
        logger.info("Brevo email sent", extra={"correlation_id": self.correlation_id, "message_id": message_id})
        return SendResult(success=True, message_id=message_id)
