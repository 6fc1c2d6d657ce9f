"""
Scheduler Service - APScheduler integration for subscription status checks.

Every SUBSCRIPTION_CHECK_INTERVAL_HOURS (12 by default) each active
subscription is checked against its gateway; subscriptions the gateway no
longer reports as active are expired.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.pool import ThreadPoolExecutor

from subscription_gateway.core.config import SUBSCRIPTION_CHECK_INTERVAL_HOURS
from subscription_gateway.database.repositories.subscription_repository import SubscriptionRepository
from subscription_gateway.database.session import get_session
from subscription_gateway.payments import GatewayError, GatewayHttpClient, get_gateway

logger = logging.getLogger(__name__)

CHECK_JOB_ID = "subscription_status_check"

_scheduler: Optional[BackgroundScheduler] = None


def get_scheduler() -> BackgroundScheduler:
    """Get or create the singleton scheduler."""
    global _scheduler

    if _scheduler is None:
        _scheduler = BackgroundScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": ThreadPoolExecutor(2)},
            job_defaults={"coalesce": True, "max_instances": 1},
        )
        logger.info("APScheduler initialized")

    return _scheduler


def start_scheduler(interval_hours: int = SUBSCRIPTION_CHECK_INTERVAL_HOURS):
    """Start the scheduler and register the status check job."""
    scheduler = get_scheduler()
    if not scheduler.running:
        scheduler.add_job(
            func=run_subscription_checks,
            trigger=IntervalTrigger(hours=interval_hours),
            id=CHECK_JOB_ID,
            replace_existing=True,
        )
        scheduler.start()
        logger.info(f"APScheduler started (status check every {interval_hours}h)")


def shutdown_scheduler():
    """Shutdown the scheduler gracefully."""
    scheduler = get_scheduler()
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("APScheduler shutdown")


def get_scheduler_jobs() -> List[dict]:
    """List all scheduler jobs."""
    scheduler = get_scheduler()
    return [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if getattr(job, "next_run_time", None) else None,
            "trigger": str(job.trigger),
        }
        for job in scheduler.get_jobs()
    ]


def run_subscription_checks(http_client: Optional[GatewayHttpClient] = None) -> Dict[str, int]:
    """
    Check every active subscription with its gateway (called by APScheduler).

    Args:
        http_client: Client handed to the gateways (default: one shared GatewayHttpClient)

    Returns:
        Summary with checked, expired and errors counts
    """
    http_client = http_client or GatewayHttpClient()
    summary = {"checked": 0, "expired": 0, "errors": 0}

    with get_session() as db:
        subscriptions = SubscriptionRepository(db).get_active()
        logger.info(f"[Scheduler] Checking {len(subscriptions)} active subscription(s)")

        gateways = {}
        for subscription in subscriptions:
            try:
                gateway = gateways.get(subscription.gateway)
                if gateway is None:
                    gateway = get_gateway(subscription.gateway, session=db, http_client=http_client)
                    gateways[subscription.gateway] = gateway
                still_active = gateway.check_subscription(subscription)
            except GatewayError as e:
                logger.error(f"[Scheduler] Check failed for subscription {subscription.id}: {e}")
                summary["errors"] += 1
                continue
            except Exception:
                logger.exception(f"[Scheduler] Unexpected error checking subscription {subscription.id}")
                summary["errors"] += 1
                continue

            subscription.last_checked_at = datetime.now(timezone.utc)
            summary["checked"] += 1
            if not still_active:
                subscription.expire()
                summary["expired"] += 1
                logger.info(f"[Scheduler] Subscription {subscription.id} is no longer active, expired")

    logger.info(
        f"[Scheduler] Done: {summary['checked']} checked, "
        f"{summary['expired']} expired, {summary['errors']} error(s)"
    )
    return summary
