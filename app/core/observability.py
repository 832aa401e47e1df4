from __future__ import annotations

import logging
import time
import uuid
from random import random
from typing import Callable, Optional, Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.background import BackgroundTask

from app.core.config import settings
from app.db.session import SessionLocal
from app.repositories.request_log import RequestLogRepository

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def generate_correlation_id(existing: Optional[str]) -> str:
	if existing and existing.strip():
		return existing.strip()[:64]
	return str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Assign a correlation id to every request and record it in request_logs."""

	async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
		correlation_id = generate_correlation_id(request.headers.get(CORRELATION_HEADER))
		request.state.correlation_id = correlation_id

		if not settings.ENABLE_REQUEST_LOGGING:
			response = await call_next(request)
			response.headers[CORRELATION_HEADER] = correlation_id
			return response

		sampled_out = settings.LOG_SAMPLE_RATE < 1.0 and random() > float(settings.LOG_SAMPLE_RATE)

		start_ns = time.monotonic_ns()
		response = await call_next(request)
		duration_ms = int((time.monotonic_ns() - start_ns) / 1_000_000)

		response.headers[CORRELATION_HEADER] = correlation_id
		if not sampled_out:
			payload = _build_inbound_payload(request, correlation_id, response.status_code, duration_ms)
			response.background = BackgroundTask(_insert_inbound, payload)

		return response


def _build_inbound_payload(request: Request, correlation_id: str, status_code: int, duration_ms: int) -> dict:
	# Route template is unavailable for 404s
	route = request.scope.get("route")
	endpoint = request.scope.get("endpoint")
	path_template = getattr(route, "path", None)
	route_name = getattr(endpoint, "__name__", None)

	xff = request.headers.get("x-forwarded-for")
	client_ip = xff.split(",")[0].strip() if xff else (request.client.host if request.client else None)

	auth_header = (request.headers.get("authorization") or "").lower()
	if auth_header.startswith("bearer "):
		auth_type = "bearer"
	elif auth_header.startswith("basic "):
		auth_type = "basic"
	else:
		auth_type = "none"

	return {
		"correlation_id": correlation_id,
		"connection_type": "http",
		"method": request.method,
		"raw_path": request.url.path,
		"path_template": path_template or request.url.path,
		"route_name": route_name,
		"status_code": status_code,
		"duration_ms": duration_ms,
		"client_ip": client_ip,
		"user_agent": request.headers.get("user-agent") or "",
		"auth_type": auth_type,
		"user_id": getattr(request.state, "user_id", None),
	}


def _write_log(insert: Callable[[RequestLogRepository], None]) -> None:
	db = SessionLocal()
	try:
		insert(RequestLogRepository(db))
	except Exception as exc:
		# Telemetry must never fail the caller
		db.rollback()
		logger.warning("request log insert failed: %s", exc)
	finally:
		db.close()


def _insert_inbound(payload: dict) -> None:
	_write_log(lambda repo: repo.insert_inbound(payload))


def log_outbound_call(provider: str, target: str, operation: str, correlation_id: Optional[str], call: Callable[[], Any]) -> Any:
	"""Execute an outbound call and record its duration and outcome.

	Args:
		provider: External provider name (e.g., brevo, qrcode)
		target: Target entity (e.g., API host, payment reference)
		operation: Operation name
		correlation_id: Correlation ID for linkage
		call: Callable that performs the operation

	Returns:
		Result of `call()`. Exceptions from `call()` propagate after logging.
	"""
	if not settings.ENABLE_OUTBOUND_LOGGING:
		return call()

	start_ns = time.monotonic_ns()
	error_code: Optional[str] = None
	status_code: Optional[int] = None
	try:
		result = call()
		status_code = getattr(result, "status_code", None)
		return result
	except Exception as e:
		error_code = type(e).__name__
		raise
	finally:
		duration_ms = int((time.monotonic_ns() - start_ns) / 1_000_000)
		payload = {
			"correlation_id": correlation_id or str(uuid.uuid4()),
			"connection_type": "http" if provider == "brevo" else "sdk",
			"provider": provider,
			"target": f"{target}:{operation}",
			"status_code": status_code,
			"duration_ms": duration_ms,
			"error_code": error_code,
		}
		_write_log(lambda repo: repo.insert_outbound(payload))
