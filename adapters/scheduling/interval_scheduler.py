import threading
from typing import Callable

import schedule
import structlog

from ports.scheduler import SchedulerPort

logger = structlog.get_logger(__name__)

class IntervalScheduler(SchedulerPort):
    """Roda `job` a cada `interval_sec` segundos numa thread daemon."""

    def __init__(self, job: Callable[[], object], interval_sec: int, tick_sec: float = 1.0):
        self.job = job
        self.interval_sec = interval_sec
        self.tick_sec = tick_sec
        self._scheduler = schedule.Scheduler()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self):
        logger.info("scheduler.start", interval_sec=self.interval_sec)
        self._scheduler.every(self.interval_sec).seconds.do(self._run_job)
        self._thread = threading.Thread(target=self._loop, name="mailgun-refresh", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.tick_sec * 5)
        self._scheduler.clear()
        logger.info("scheduler.stop")

    def run_once(self):
        self._run_job()

    def _run_job(self):
        try:
            self.job()
        except Exception:
            # mantém o loop vivo; o próximo tick tenta de novo
            logger.exception("scheduler.job.error")

    def _loop(self):
        while not self._stop.is_set():
            self._scheduler.run_pending()
            self._stop.wait(self.tick_sec)
