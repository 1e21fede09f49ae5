"""Clock/trigger for plan renewal: hourly interval job plus a delayed startup check."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from workplan.logic.renewal.engine import RenewalEngine
from workplan.utilities.config import RENEWAL_INTERVAL_HOURS, STARTUP_CHECK_DELAY_SECONDS

logger = logging.getLogger(__name__)

HOURLY_JOB_ID = "plan-renewal-hourly"
STARTUP_JOB_ID = "plan-renewal-startup"


def run_renewal(engine: RenewalEngine) -> str:
    """Scheduler entry point; the outcome is only logged."""
    outcome = engine.check_and_renew(datetime.now())
    logger.info("Scheduled plan renewal check: %s", outcome)
    return outcome


def build_scheduler(engine: RenewalEngine, *, interval_hours: int = RENEWAL_INTERVAL_HOURS,
                    startup_delay_seconds: int = STARTUP_CHECK_DELAY_SECONDS) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_renewal, IntervalTrigger(hours=interval_hours), args=[engine],
        id=HOURLY_JOB_ID, max_instances=1, coalesce=True, replace_existing=True,
    )
    scheduler.add_job(
        run_renewal, DateTrigger(run_date=datetime.now() + timedelta(seconds=startup_delay_seconds)),
        args=[engine], id=STARTUP_JOB_ID, replace_existing=True,
    )
    return scheduler


def start_scheduler(engine: RenewalEngine) -> BackgroundScheduler:
    scheduler = build_scheduler(engine)
    scheduler.start()
    logger.info("Plan renewal scheduler started (every %dh, first check in %ds)",
                RENEWAL_INTERVAL_HOURS, STARTUP_CHECK_DELAY_SECONDS)
    return scheduler
