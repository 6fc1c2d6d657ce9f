import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlalchemy import text

from subscription_gateway.core.config import SCHEDULER_ENABLED

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Subscription Gateway API starting...")

    # Database
    try:
        from subscription_gateway.database.session import engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection OK")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")

    # Gateways
    from subscription_gateway.payments import get_registry
    logger.info(f"Gateway registry: {get_registry().list_identifiers()}")

    # Scheduler
    if SCHEDULER_ENABLED:
        from subscription_gateway.core.services.scheduler_service import start_scheduler
        start_scheduler()
    else:
        logger.info("Scheduler disabled (SCHEDULER_ENABLED=false)")

    yield

    logger.info("Subscription Gateway API shutting down...")

    if SCHEDULER_ENABLED:
        from subscription_gateway.core.services.scheduler_service import shutdown_scheduler
        shutdown_scheduler()
