import threading

from adapters.scheduling.interval_scheduler import IntervalScheduler


class TestIntervalScheduler:
    def test_runs_job_periodically_until_stopped(self):
        ran = threading.Event()
        calls = []

        def job():
            calls.append(1)
            ran.set()

        scheduler = IntervalScheduler(job, interval_sec=1, tick_sec=0.05)
        scheduler.start()
        try:
            assert ran.wait(timeout=5)
        finally:
            scheduler.stop()

        assert calls
        assert not scheduler._thread.is_alive()

    def test_run_once_swallows_job_errors(self):
        def job():
            raise RuntimeError("boom")

        IntervalScheduler(job, interval_sec=60).run_once()

    def test_job_error_does_not_kill_loop(self):
        calls = []
        done = threading.Event()

        def job():
            calls.append(1)
            if len(calls) >= 2:
                done.set()
            raise RuntimeError("boom")

        scheduler = IntervalScheduler(job, interval_sec=1, tick_sec=0.05)
        scheduler.start()
        try:
            assert done.wait(timeout=5)
        finally:
            scheduler.stop()
