import os
import threading

from config import setup_logger, DATA_DIR
from utils import read_json, write_json_atomic

logger = setup_logger(name="Analytics")

DECAY_FACTOR = 0.9
SEARCH_WEIGHT = 2


class AnalyticsService:
    """
    Popularity scores per symbol, used for the trending list.

    score = views + 2 * searches. Scores decay hourly so interest fades, and
    are saved periodically rather than on every hit.
    """

    def __init__(self, data_dir=DATA_DIR):
        self.data_path = os.path.join(data_dir, "analytics.json")
        self.scores = {}
        self.is_dirty = False
        self._lock = threading.Lock()

    @staticmethod
    def calculate_score(views, searches):
        return views + searches * SEARCH_WEIGHT

    def load(self):
        data = read_json(self.data_path, None)
        if isinstance(data, dict):
            with self._lock:
                self.scores = data
            logger.info(f"Loaded {len(self.scores)} stock scores from file")
        else:
            logger.info("No existing analytics file, starting fresh")

    def save(self):
        with self._lock:
            if not self.is_dirty:
                return False
            snapshot = {symbol: dict(entry) for symbol, entry in self.scores.items()}
            self.is_dirty = False
        try:
            write_json_atomic(self.data_path, snapshot)
        except OSError as e:
            logger.error(f"Failed to save analytics: {e}")
            with self._lock:
                self.is_dirty = True
            return False
        return True

    def _record(self, key, field):
        if not key:
            return
        symbol = key.strip().upper()
        with self._lock:
            entry = self.scores.setdefault(symbol, {"views": 0, "searches": 0, "score": 0})
            entry[field] += 1
            entry["score"] = self.calculate_score(entry["views"], entry["searches"])
            self.is_dirty = True

    def record_view(self, symbol):
        self._record(symbol, "views")

    def record_search(self, query):
        self._record(query, "searches")

    def apply_decay(self):
        """Scale every counter by 0.9 (floored) and forget entries whose score drops below 1."""
        with self._lock:
            for symbol in list(self.scores):
                entry = self.scores[symbol]
                entry["views"] = int(entry["views"] * DECAY_FACTOR)
                entry["searches"] = int(entry["searches"] * DECAY_FACTOR)
                entry["score"] = self.calculate_score(entry["views"], entry["searches"])
                if entry["score"] < 1:
                    del self.scores[symbol]
            self.is_dirty = True
            remaining = len(self.scores)
        logger.info(f"Applied decay, {remaining} stocks still trending")

    def get_trending(self, limit=6):
        with self._lock:
            ranked = sorted(self.scores.items(), key=lambda item: item[1]["score"], reverse=True)
        return [{"symbol": symbol, **entry} for symbol, entry in ranked[:limit]]

    def register_jobs(self, scheduler):
        scheduler.add_job(self.save, "interval", minutes=5, id="analytics_save", replace_existing=True)
        scheduler.add_job(self.apply_decay, "interval", hours=1, id="analytics_decay", replace_existing=True)

    def shutdown(self):
        self.save()
        logger.info("Analytics shutdown complete")
