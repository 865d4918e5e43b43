import os
import queue
import logging
from datetime import datetime

from pythonjsonlogger import jsonlogger


LOG_DIR = os.getenv("NEPSE_LOG_DIR", "logs")
LOG_LEVEL = getattr(logging, os.getenv("NEPSE_LOG_LEVEL", "INFO").upper(), logging.INFO)
PLAIN_FORMAT = '%(levelname)s | %(name)s | %(message)s'

# Every logger built by setup_logger feeds this queue; GET /api/logs/stream drains it.
sse_log_queue: queue.Queue = queue.Queue(maxsize=2000)


class SSELogHandler(logging.Handler):
    """Pushes formatted log lines into sse_log_queue without blocking the caller."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sse_log_queue.put_nowait(self.format(record))
        except queue.Full:
            pass  # no stream consumer


_sse_handler = SSELogHandler()
_sse_handler.setLevel(logging.INFO)
_sse_handler.setFormatter(logging.Formatter(PLAIN_FORMAT))


def _json_file_handler(log_dir):
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f"nepse_tracker_{datetime.now():%Y-%m-%d}.log")
    handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    handler.setFormatter(jsonlogger.JsonFormatter(
        '%(asctime)s %(levelname)s %(name)s %(message)s',
        rename_fields={'asctime': 'timestamp', 'levelname': 'level'}
    ))
    return handler


def setup_logger(name="NepseTracker", log_dir=LOG_DIR):
    """
    Build a named logger writing JSON lines to a daily file, plain lines to
    the console, and the same plain lines to the live log stream.

    Parameters:
        name (str): Logger name, one per module
        log_dir (str): Directory for the daily log file

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)

    # Re-running setup for the same name must not stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    logger.addHandler(_json_file_handler(log_dir))
    logger.addHandler(console_handler)
    logger.addHandler(_sse_handler)
    return logger
