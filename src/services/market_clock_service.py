import time
import threading
from datetime import datetime, timedelta, timezone

from adaptors import TimeAdaptor
from config import setup_logger, MarketHoursConfig, MarketState, TIME_SYNC_INTERVAL
from utils import get_market_state, format_market_hours, to_nst

logger = setup_logger(name="TimeSync")

WARN_OFFSET_SECONDS = 60 * 60
MAX_OFFSET_SECONDS = 24 * 60 * 60


class MarketClockService:
    """
    Nepal Standard Time clock corrected against public time APIs.

    The host clock may drift; the offset between it and the first time source
    that answers is applied to every reading. Offsets above a day are treated
    as bad data and ignored.
    """

    def __init__(self, time_adaptor=None, hours=MarketHoursConfig, sync_interval=TIME_SYNC_INTERVAL):
        self.time_adaptor = time_adaptor or TimeAdaptor(logger=logger)
        self.hours = hours
        self.sync_interval = sync_interval
        self.offset_seconds = 0.0
        self.last_sync = None
        self.synced_source = None
        self.initial_sync_complete = False
        self._lock = threading.Lock()

    def sync(self):
        """Refresh the clock offset. Returns True when a source was accepted."""
        for name, server_epoch in self.time_adaptor.readings():
            offset = server_epoch - time.time()
            if abs(offset) > MAX_OFFSET_SECONDS:
                logger.warning(f"Offset too extreme ({round(offset)}s). Ignoring {name} data.")
                continue
            if abs(offset) > WARN_OFFSET_SECONDS:
                logger.warning(f"Large offset detected: {round(offset)}s. System clock may be incorrect.")

            with self._lock:
                self.offset_seconds = offset
                self.last_sync = time.time()
                self.synced_source = name
                self.initial_sync_complete = True
            logger.info(f"Synced with {name}. Offset {round(offset)}s, Nepal time {self.now_nst():%H:%M:%S}")
            return True

        with self._lock:
            self.initial_sync_complete = True
        logger.error("All external time sources failed. Using system time.")
        return False

    def needs_sync(self):
        return self.last_sync is None or time.time() - self.last_sync >= self.sync_interval

    def now_utc(self):
        return datetime.now(timezone.utc) + timedelta(seconds=self.offset_seconds)

    def now_nst(self):
        return to_nst(self.now_utc())

    def get_market_state(self):
        return get_market_state(self.now_nst(), self.hours)

    def is_market_open(self):
        return self.get_market_state() == MarketState.OPEN

    def get_nst_time_string(self):
        return self.now_nst().strftime("%H:%M:%S")

    def get_time_sync_status(self):
        nst_now = self.now_nst()
        return {
            "synced": self.initial_sync_complete,
            "source": self.synced_source,
            "last_sync_age": f"{round(time.time() - self.last_sync)}s ago" if self.last_sync else "never",
            "offset_ms": round(self.offset_seconds * 1000),
            "offset_seconds": round(self.offset_seconds),
            "nepse_time": nst_now.strftime("%H:%M:%S"),
            "nepse_day": nst_now.strftime("%A"),
            "market_state": get_market_state(nst_now, self.hours),
            "market_hours": format_market_hours(self.hours),
        }
