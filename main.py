# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.endpoints import auth, user, products, groups, wallet, payments, orders
from app.core.logging_config import setup_logging
from app.core.observability import RequestLoggingMiddleware
# Import all models to ensure relationships are properly resolved
from app.db import base  # noqa: F401
from app.services.exceptions import ErrorSeverity, ServiceError, create_error_response

setup_logging()
logger = logging.getLogger("vyronamart")

app = FastAPI(title="VyronaMart Group Commerce API")
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.correlation_id is None:
        exc.correlation_id = getattr(request.state, "correlation_id", None)
    log = logger.error if exc.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL) else logger.info
    log("%s %s -> %s", request.method, request.url.path, exc, extra={"correlation_id": exc.correlation_id})
    return JSONResponse(status_code=exc.http_status.value, content=create_error_response(exc))


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(user.router, prefix="/users", tags=["users"])
app.include_router(products.router, prefix="/products", tags=["products"])
app.include_router(groups.router, prefix="/groups", tags=["groups"])
app.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
app.include_router(payments.router, prefix="/payments", tags=["payments"])
app.include_router(orders.router, prefix="/orders", tags=["orders"])
