import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from config import get_settings
from recurrence import RecurringExpenseGenerator
from store import ExpenseStore


logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

DAILY_JOB_ID = "generate_due_daily"
CATCH_UP_JOB_ID = "generate_due_catch_up"


class SchedulerManager:
    """Runs the "generate due expenses" batch against a caller-owned store.

    One pass at startup, one at the configured local time each day and a
    catch-up pass every few hours for runs missed while the host slept.
    """

    def __init__(self, store: ExpenseStore) -> None:
        self.settings = get_settings()
        self.store = store
        self.generator = RecurringExpenseGenerator(store)
        self.scheduler = BackgroundScheduler(timezone=self.settings.timezone)

    def generate(self, trigger: str = "manual") -> int:
        advanced = self.generator.generate_due()
        logger.info(f"generation_pass: trigger={trigger} advanced={advanced}")
        return advanced

    def _schedule(self) -> None:
        hour = self.settings.generate_hour
        minute = self.settings.generate_minute
        jobs = (
            (DAILY_JOB_ID, CronTrigger(hour=hour, minute=minute), "daily", 3600),
            (
                CATCH_UP_JOB_ID,
                IntervalTrigger(hours=self.settings.safety_net_hours),
                "catch_up",
                300,
            ),
        )
        for job_id, trigger, label, grace in jobs:
            self.scheduler.add_job(
                self.generate,
                trigger,
                args=[label],
                id=job_id,
                replace_existing=True,
                misfire_grace_time=grace,
            )

    def start(self) -> None:
        self.generate("startup")
        self._schedule()
        self.scheduler.start()
        logger.info(
            f"generation_jobs_scheduled: daily={self.settings.generate_hour:02d}:"
            f"{self.settings.generate_minute:02d} "
            f"catch_up_every={self.settings.safety_net_hours}h"
        )

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("generation_jobs_stopped")
