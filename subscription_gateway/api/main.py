"""
Subscription Gateway - FastAPI Application

Host API around subscription gateway adapters: creates subscription records,
hands them to gateways, and receives gateway callbacks and webhooks.

Usage:
    uvicorn subscription_gateway.api.main:app --reload --host 0.0.0.0 --port 8000

Docs:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from subscription_gateway.core.config import CORS_ORIGINS, LOG_LEVEL
from subscription_gateway.core.exceptions import register_exception_handlers
from subscription_gateway.core.lifespan import lifespan
from subscription_gateway.core.logging import setup_logger
from subscription_gateway.core.middleware import request_logger

setup_logger(getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(
    title="Subscription Gateway API",
    description="Subscription billing through pluggable payment gateway adapters.",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(request_logger)
register_exception_handlers(app)


# Health endpoints
@app.get("/", tags=["Health"])
async def root():
    return {
        "name": "Subscription Gateway API",
        "version": API_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
def health_check():
    health = {"status": "healthy", "components": {"api": "ok"}}
    try:
        from subscription_gateway.database.session import engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        health["components"]["database"] = "ok"
    except Exception as e:
        health["status"] = "degraded"
        health["components"]["database"] = f"error: {str(e)}"
    return health


# Register routers
from subscription_gateway.api.routers import gateways, subscriptions, webhooks  # noqa: E402

app.include_router(subscriptions.router, prefix="/subscriptions", tags=["Subscriptions"])
app.include_router(gateways.router, prefix="/gateways", tags=["Gateways"])
app.include_router(webhooks.router, prefix="/gateways", tags=["Webhooks"])

logger.info("Routers registered: subscriptions, gateways, webhooks")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("subscription_gateway.api.main:app", host="0.0.0.0", port=8000, reload=True)
