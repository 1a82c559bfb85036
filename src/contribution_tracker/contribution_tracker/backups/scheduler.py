from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..common.datetime_utils import to_iso
from ..core.constants import DEFAULT_SWEEP_INTERVAL_MINUTES
from ..core.exceptions import validation_failure

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "backup-sweep"


class BackupScheduler:
    """Runs the backup sweep on a fixed interval.

    ``start`` runs one sweep right away and then every ``interval_minutes``;
    starting again replaces the running schedule. The scheduler handle lives
    on the instance and is created/torn down by the app lifecycle.
    """

    def __init__(self, sweep: Callable[[], object]):
        self._sweep = sweep
        self._scheduler: Optional[BackgroundScheduler] = None
        self._interval_minutes: Optional[float] = None
        self._lock = threading.RLock()

    @property
    def running(self) -> bool:
        with self._lock:
            return self._scheduler is not None

    def start(self, interval_minutes: float = DEFAULT_SWEEP_INTERVAL_MINUTES) -> None:
        if interval_minutes is None or float(interval_minutes) <= 0:
            raise validation_failure("interval_minutes must be positive", field="interval_minutes")

        with self._lock:
            if self._scheduler is not None:
                self._shutdown()
                logger.info("Previous backup schedule cleared")

            scheduler = BackgroundScheduler()
            scheduler.add_job(
                self._run_sweep,
                trigger=IntervalTrigger(minutes=float(interval_minutes)),
                id=SWEEP_JOB_ID,
                name="backup sweep",
                next_run_time=datetime.now(scheduler.timezone),
                max_instances=1,
                coalesce=True,
                misfire_grace_time=None,
            )
            scheduler.start()
            self._scheduler = scheduler
            self._interval_minutes = float(interval_minutes)

        logger.info("Automatic backups scheduled every %s minutes", interval_minutes)

    def stop(self) -> None:
        with self._lock:
            if self._scheduler is None:
                return
            self._shutdown()
        logger.info("Scheduled backups stopped")

    def status(self) -> dict:
        with self._lock:
            next_run_at = None
            if self._scheduler is not None:
                job = self._scheduler.get_job(SWEEP_JOB_ID)
                if job is not None and job.next_run_time is not None:
                    next_run_at = to_iso(job.next_run_time)
            return {
                "scheduled": self._scheduler is not None,
                "interval_minutes": self._interval_minutes,
                "next_run_at": next_run_at,
            }

    def _shutdown(self) -> None:
        scheduler, self._scheduler = self._scheduler, None
        self._interval_minutes = None
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)

    def _run_sweep(self) -> None:
        try:
            self._sweep()
        except Exception:
            logger.exception("Scheduled backup sweep failed")
