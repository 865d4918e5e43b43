import time

import pandas as pd

from config import setup_logger, TIME_SOURCES, TIME_SYNC_TIMEOUT
from utils import build_session


NST_OFFSET_SECONDS = (5 * 60 + 45) * 60


class TimeAdaptor:
    """Reads the current UTC time from public time APIs."""

    def __init__(self, logger=None, sources=None, session=None):
        self.logger = logger or setup_logger(name="TimeSync")
        self.sources = TIME_SOURCES if sources is None else sources
        self.session = session or build_session()

    @staticmethod
    def parse_utc_epoch(source, payload):
        """Epoch seconds from a source payload; local-time sources are NST wall clock."""
        ts = pd.Timestamp(payload[source["field"]])
        if ts.tzinfo is not None:
            return ts.timestamp()
        epoch = ts.tz_localize("UTC").timestamp()
        if source.get("is_local"):
            epoch -= NST_OFFSET_SECONDS
        return epoch

    def fetch_reading(self, source):
        """
        Query one source.

        Returns:
            (server_utc_epoch, latency_seconds) with the server time already
            advanced by half the round trip.
        """
        start = time.time()
        response = self.session.get(source["url"], timeout=TIME_SYNC_TIMEOUT)
        response.raise_for_status()
        latency = (time.time() - start) / 2
        return self.parse_utc_epoch(source, response.json()) + latency, latency

    def readings(self):
        """Yield (source_name, corrected_utc_epoch) for every source that answers."""
        for source in self.sources:
            try:
                server_time, _ = self.fetch_reading(source)
            except Exception as e:
                self.logger.warning(f"Failed to fetch time from {source['name']}: {e}")
                continue
            yield source["name"], server_time
