import threading
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from config import (
    setup_logger, MarketState, UPDATE_INTERVAL_OPEN, UPDATE_INTERVAL_CLOSED, SUMMARY_RETENTION_DAYS
)
from repositories import StockRepository, MarketRepository, IPORepository
from utils import format_market_hours

logger = setup_logger(name="Scheduler")

NEPAL_TZ = "Asia/Kathmandu"
UPDATE_JOB_ID = "market_update"


class UpdateScheduler:
    """
    Polls the fetch chain and persists each cycle.

    The poll interval follows the market session: short while the market is
    open, long otherwise. The interval job is rescheduled whenever the
    session state flips.
    """

    def __init__(self, fetch_service, clock, stock_repo=None, market_repo=None, ipo_repo=None,
                 analytics=None, scheduler=None,
                 open_interval=UPDATE_INTERVAL_OPEN, closed_interval=UPDATE_INTERVAL_CLOSED):
        self.fetch_service = fetch_service
        self.clock = clock
        self.stock_repo = stock_repo or StockRepository()
        self.market_repo = market_repo or MarketRepository()
        self.ipo_repo = ipo_repo or IPORepository()
        self.analytics = analytics
        self.scheduler = scheduler
        self.open_interval = open_interval
        self.closed_interval = closed_interval

        self.is_running = False
        self.current_interval = None
        self.last_update_time = None
        self.update_count = 0
        self.last_error = None
        self._update_lock = threading.Lock()

    def desired_interval(self):
        return self.open_interval if self.clock.is_market_open() else self.closed_interval

    def start(self):
        if self.is_running:
            logger.warning("Scheduler already running")
            return
        try:
            self.clock.sync()
        except Exception as e:
            logger.error(f"Initial time sync failed: {e}")

        if self.scheduler is None:
            self.scheduler = BackgroundScheduler(timezone=NEPAL_TZ)

        self.current_interval = self.desired_interval()
        self.scheduler.add_job(
            self._run_update,
            IntervalTrigger(seconds=self.current_interval),
            id=UPDATE_JOB_ID,
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.add_job(
            self.clean_old_summaries,
            CronTrigger(hour=0, minute=0, timezone=NEPAL_TZ),
            id="summary_cleanup",
            replace_existing=True,
        )
        self.scheduler.add_job(
            self.clock.sync,
            IntervalTrigger(seconds=self.clock.sync_interval),
            id="time_sync",
            replace_existing=True,
        )
        if self.analytics is not None:
            self.analytics.register_jobs(self.scheduler)

        self.scheduler.start()
        self.is_running = True
        logger.info(f"Scheduler started, polling every {self.current_interval}s ({self.clock.get_market_state()})")

    def stop(self):
        if self.scheduler is not None and self.is_running:
            self.scheduler.shutdown(wait=False)
        self.is_running = False
        if self.analytics is not None:
            self.analytics.shutdown()
        self.stock_repo.store.flush()
        logger.info("Scheduler stopped")

    def _run_update(self):
        self.perform_update()
        self.adjust_interval()

    def adjust_interval(self):
        """Reschedule the poll job when the session state changed the interval."""
        desired = self.desired_interval()
        if desired == self.current_interval:
            return False
        logger.info(f"Market state {self.clock.get_market_state()}: poll interval {self.current_interval}s -> {desired}s")
        self.current_interval = desired
        if self.scheduler is not None:
            self.scheduler.reschedule_job(UPDATE_JOB_ID, trigger=IntervalTrigger(seconds=desired))
        return True

    def clean_old_summaries(self):
        return self.market_repo.clean_old_summaries(SUMMARY_RETENTION_DAYS)

    def perform_update(self, force=False):
        """
        Run one fetch-and-persist cycle.

        Weekend cycles are skipped unless forced or nothing has been stored
        yet. A cycle that starts while another is running is rejected.

        Returns:
            bool: True when data was fetched and saved
        """
        if not self._update_lock.acquire(blocking=False):
            logger.info("Update already in progress, skipping")
            return False
        try:
            state = self.clock.get_market_state()
            if state == MarketState.WEEKEND and not force and self.stock_repo.get_stock_count() > 0:
                logger.info("Weekend - skipping update")
                return False

            data = self.fetch_service.fetch_with_retry()
            if not data:
                self.last_error = "All data sources failed"
                logger.error("Update failed: no data from any source")
                return False

            saved = self.stock_repo.save_stocks(data["stocks"])
            if data.get("ipos"):
                self.ipo_repo.save_ipos(data["ipos"])
            if data.get("market_summary"):
                summary = {
                    **data["market_summary"],
                    "is_open": state == MarketState.OPEN,
                    "state": state,
                    "source": data.get("source"),
                }
                self.market_repo.save_market_summary(summary)
            if data.get("top_movers"):
                self.market_repo.save_top_movers(data["top_movers"])

            self.update_count += 1
            self.last_update_time = datetime.now().isoformat()
            self.last_error = None
            logger.info(f"Update #{self.update_count} saved {saved} stocks from {data.get('source')}")
            return True
        except Exception as e:
            self.last_error = str(e)
            logger.error(f"Update failed: {e}")
            return False
        finally:
            self._update_lock.release()

    def force_update(self):
        logger.info("Force update requested")
        return self.perform_update(force=True)

    def get_update_status(self):
        state = self.clock.get_market_state()
        return {
            "is_running": self.is_running,
            "is_market_open": state == MarketState.OPEN,
            "market_state": state,
            "last_update_time": self.last_update_time,
            "update_count": self.update_count,
            "last_error": self.last_error,
            "current_nst": self.clock.get_nst_time_string(),
            "market_hours": format_market_hours(self.clock.hours),
            "current_interval": self.current_interval,
            "data_source": self.fetch_service.get_fetch_status()["data_source"],
        }
