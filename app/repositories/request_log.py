from typing import Optional, Dict, Any
from sqlalchemy.orm import Session

from app.db.models.request_log import RequestLog


def _clip(value: Optional[str], max_len: int) -> Optional[str]:
	if value is None:
		return None
	return str(value)[:max_len]


class RequestLogRepository:
	"""Insert-only repository for inbound request and outbound call telemetry.

	Each insert commits on its own session so telemetry never shares a
	transaction with business writes.
	"""

	def __init__(self, db: Session):
		self.db = db

	def _common(self, payload: Dict[str, Any]) -> Dict[str, Any]:
		return {
			"correlation_id": _clip(payload.get("correlation_id"), 64) or "unknown",
			"status_code": payload.get("status_code"),
			"duration_ms": int(payload.get("duration_ms", 0)),
		}

	def insert_inbound(self, payload: Dict[str, Any]) -> None:
		self.db.add(RequestLog(
			direction="inbound",
			connection_type=_clip(payload.get("connection_type"), 16),
			method=_clip(payload.get("method"), 16),
			path_template=_clip(payload.get("path_template"), 512),
			raw_path=_clip(payload.get("raw_path"), 512),
			route_name=_clip(payload.get("route_name"), 128),
			client_ip=_clip(payload.get("client_ip"), 64),
			user_agent=_clip(payload.get("user_agent"), 256),
			auth_type=_clip(payload.get("auth_type"), 16),
			user_id=payload.get("user_id"),
			**self._common(payload),
		))
		self.db.commit()

	def insert_outbound(self, payload: Dict[str, Any]) -> None:
		self.db.add(RequestLog(
			direction="outbound",
			connection_type=_clip(payload.get("connection_type") or "sdk", 16),
			provider=_clip(payload.get("provider"), 64),
			target=_clip(payload.get("target"), 256),
			error_code=_clip(payload.get("error_code"), 64),
			**self._common(payload),
		))
		self.db.commit()
