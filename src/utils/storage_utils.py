"""
Storage Utilities

JSON-file persistence: atomic writes plus a debounced, per-key file store that
keeps every entity in memory and flushes it to `<data_dir>/<key>.json`.
"""
import os
import json
import threading
from typing import Dict, Optional

from config import setup_logger, DATA_DIR, SAVE_DEBOUNCE_SECONDS

logger = setup_logger(name="Storage")


def _json_default(value):
    # numpy scalars coming out of pandas aggregations
    if hasattr(value, "item"):
        return value.item()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_json_atomic(file_path: str, data) -> None:
    """
    Write JSON to `file_path` via a sibling .tmp file and an atomic rename.

    Readers never observe a half-written file; the tmp file is removed if
    serialization or the rename fails.
    """
    os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)
    tmp_path = f"{file_path}.tmp"
    try:
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, default=_json_default)
        os.replace(tmp_path, file_path)
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def read_json(file_path: str, default=None):
    if not os.path.exists(file_path):
        return default
    try:
        with open(file_path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading {file_path}: {e}")
        return default


class JsonFileStore:
    """
    In-memory entity maps backed by one JSON file per key.

    save() is debounced: every call restarts the key's timer and the current
    in-memory value is serialized when the timer fires. save_now() cancels any
    pending timer and writes at once. Each key has a write lock; a debounced
    write that finds it held is dropped because the immediate writer already
    persisted newer state.

    Snapshots are taken under the write lock, so callers must release `lock`
    before calling save_now().
    """

    def __init__(self, data_dir: str = DATA_DIR, debounce_seconds: float = SAVE_DEBOUNCE_SECONDS):
        self.data_dir = data_dir
        self.debounce_seconds = debounce_seconds
        self.lock = threading.RLock()
        self._data: Dict[str, object] = {}
        self._timers: Dict[str, threading.Timer] = {}
        self._write_locks: Dict[str, threading.Lock] = {}
        os.makedirs(self.data_dir, exist_ok=True)

    def path_for(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{key}.json")

    def load(self, key: str, default):
        """Load a key from disk into memory (once) and return the live value."""
        with self.lock:
            if key not in self._data:
                self._data[key] = read_json(self.path_for(key), default)
            return self._data[key]

    def get(self, key: str, default=None):
        with self.lock:
            return self._data.get(key, default)

    def set(self, key: str, value) -> None:
        with self.lock:
            self._data[key] = value

    def _write_lock(self, key: str) -> threading.Lock:
        with self.lock:
            if key not in self._write_locks:
                self._write_locks[key] = threading.Lock()
            return self._write_locks[key]

    def _cancel_timer(self, key: str) -> None:
        with self.lock:
            timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()

    def _snapshot(self, key: str):
        with self.lock:
            return json.loads(json.dumps(self._data.get(key), default=_json_default))

    def _perform_write(self, key: str, immediate: bool) -> None:
        write_json_atomic(self.path_for(key), self._snapshot(key))
        logger.debug(f"Saved {key}{' (immediate)' if immediate else ''}")

    def _debounced_write(self, key: str) -> None:
        with self.lock:
            self._timers.pop(key, None)
        write_lock = self._write_lock(key)
        if not write_lock.acquire(blocking=False):
            logger.debug(f"Skipping debounced write for {key} - immediate write in progress")
            return
        try:
            self._perform_write(key, immediate=False)
        except Exception as e:
            logger.error(f"Error saving {key}: {e}")
        finally:
            write_lock.release()

    def save(self, key: str) -> None:
        """Schedule a debounced write of `key`."""
        self._cancel_timer(key)
        timer = threading.Timer(self.debounce_seconds, self._debounced_write, args=(key,))
        timer.daemon = True
        with self.lock:
            self._timers[key] = timer
        timer.start()

    def save_now(self, key: str) -> None:
        """Write `key` immediately, superseding any pending debounced write."""
        self._cancel_timer(key)
        with self._write_lock(key):
            self._perform_write(key, immediate=True)

    def has_pending(self, key: str) -> bool:
        with self.lock:
            return key in self._timers

    def flush(self) -> None:
        """Persist every key with a pending write (shutdown path)."""
        with self.lock:
            pending = list(self._timers.keys())
        for key in pending:
            try:
                self.save_now(key)
            except Exception as e:
                logger.error(f"Error flushing {key}: {e}")
        if pending:
            logger.info(f"Flushed {len(pending)} pending writes")


class StoreManager:
    """Process-wide JsonFileStore shared by every repository."""

    _store: Optional[JsonFileStore] = None

    @classmethod
    def init_store(cls, data_dir: str = DATA_DIR, debounce_seconds: float = SAVE_DEBOUNCE_SECONDS) -> JsonFileStore:
        if cls._store is not None:
            cls._store.flush()
        cls._store = JsonFileStore(data_dir, debounce_seconds)
        logger.info(f"Data store initialized at {data_dir}")
        return cls._store

    @classmethod
    def get_store(cls) -> JsonFileStore:
        if cls._store is None:
            cls.init_store()
        return cls._store
