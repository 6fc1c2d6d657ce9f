from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from subscription_gateway.payments.exceptions import (
    GatewayConfigError,
    GatewayConnectionError,
    GatewayError,
    GatewayNotFoundError,
    GatewayRequestError,
    SubscriptionNotFoundError,
    UnsupportedCurrencyError,
)

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc):
    detail = getattr(exc, "detail", None)
    # Unmatched routes carry Starlette's generic "Not Found"
    if not detail or detail == "Not Found":
        detail = f"'{request.url.path}' not found"
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "message": detail,
            "path": request.url.path,
        },
    )


async def gateway_not_found_handler(request: Request, exc: GatewayError):
    return JSONResponse(
        status_code=404,
        content={"error": "Not Found", "message": str(exc)},
    )


async def gateway_config_error_handler(request: Request, exc: GatewayConfigError):
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid Configuration", "message": str(exc), "fields": exc.errors},
    )


async def unsupported_currency_handler(request: Request, exc: UnsupportedCurrencyError):
    return JSONResponse(
        status_code=422,
        content={"error": "Unsupported Currency", "message": str(exc)},
    )


async def gateway_upstream_error_handler(request: Request, exc: GatewayError):
    logger.error(f"Gateway error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content={"error": "Bad Gateway", "message": str(exc)},
    )


async def internal_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "Check server logs.",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(404, not_found_handler)
    app.add_exception_handler(GatewayNotFoundError, gateway_not_found_handler)
    app.add_exception_handler(SubscriptionNotFoundError, gateway_not_found_handler)
    app.add_exception_handler(GatewayConfigError, gateway_config_error_handler)
    app.add_exception_handler(UnsupportedCurrencyError, unsupported_currency_handler)
    app.add_exception_handler(GatewayRequestError, gateway_upstream_error_handler)
    app.add_exception_handler(GatewayConnectionError, gateway_upstream_error_handler)
    app.add_exception_handler(GatewayError, gateway_upstream_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
