from datetime import datetime, timedelta

from config import setup_logger, MARKET_HISTORY_LIMIT
from utils import StoreManager, parse_timestamp

logger = setup_logger(name="MarketRepository")

SUMMARY_KEY = "market_summary"
HISTORY_KEY = "market_history"
MOVERS_KEY = "top_movers"

EMPTY_MOVERS = {"turnover": [], "trade": [], "volume": [], "gainers": [], "losers": []}


class MarketRepository:

    def __init__(self, store=None):
        self._store = store

    @property
    def store(self):
        return self._store or StoreManager.get_store()

    def _history(self):
        return self.store.load(HISTORY_KEY, [])

    def save_market_summary(self, summary):
        """Replace the latest summary and push it to the front of the history."""
        now = datetime.now().isoformat()
        record = {**summary, "updated_at": now}
        record.setdefault("timestamp", now)
        with self.store.lock:
            self.store.load(SUMMARY_KEY, None)
            self.store.set(SUMMARY_KEY, record)
            history = self._history()
            history.insert(0, record)
            del history[MARKET_HISTORY_LIMIT:]
        self.store.save(SUMMARY_KEY)
        self.store.save(HISTORY_KEY)
        return record

    def get_latest_market_summary(self):
        with self.store.lock:
            return self.store.load(SUMMARY_KEY, None)

    def get_market_summary_history(self, hours=24, limit=100):
        cutoff = datetime.now() - timedelta(hours=hours)
        with self.store.lock:
            history = list(self._history())
        recent = []
        for record in history:
            ts = parse_timestamp(record.get("timestamp"))
            if ts is not None and ts >= cutoff:
                recent.append(record)
        return recent[:limit]

    def get_market_summary_by_date(self, day):
        """Latest summary recorded on a calendar date (date or 'YYYY-MM-DD')."""
        if isinstance(day, str):
            day = datetime.strptime(day, "%Y-%m-%d").date()
        with self.store.lock:
            history = list(self._history())
        for record in history:
            ts = parse_timestamp(record.get("timestamp"))
            if ts is not None and ts.date() == day:
                return record
        return None

    def clean_old_summaries(self, days=30):
        cutoff = datetime.now() - timedelta(days=days)
        with self.store.lock:
            history = self._history()
            kept = [
                r for r in history
                if (parse_timestamp(r.get("timestamp")) or datetime.min) >= cutoff
            ]
            removed = len(history) - len(kept)
            history[:] = kept
        if removed:
            self.store.save(HISTORY_KEY)
        logger.info(f"Cleaned {removed} market summaries older than {days} days")
        return removed

    def save_top_movers(self, movers):
        with self.store.lock:
            current = self.store.load(MOVERS_KEY, dict(EMPTY_MOVERS))
            for key in EMPTY_MOVERS:
                if movers.get(key):
                    current[key] = movers[key]
            current["updated_at"] = datetime.now().isoformat()
        self.store.save(MOVERS_KEY)

    def get_top_movers(self):
        with self.store.lock:
            return dict(self.store.load(MOVERS_KEY, dict(EMPTY_MOVERS)))

    def get_market_stats(self):
        with self.store.lock:
            latest = self.store.load(SUMMARY_KEY, None)
            total = len(self._history())
        return {"latest": latest, "total_records": total, "has_data": latest is not None}
