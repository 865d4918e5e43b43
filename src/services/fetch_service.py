from time import sleep
from datetime import datetime

from adaptors import MockAdaptor, NepseAdaptor, ProxyAdaptor, ScraperAdaptor
from config import (
    setup_logger, USE_MOCK_DATA, FETCH_MAX_RETRIES, FETCH_RETRY_DELAY, UNHEALTHY_FAILURE_COUNT
)
from repositories import SymbolsRepository
from utils import calculate_market_summary, enrich_stocks, rank_movers


logger = setup_logger(name="DataFetcher")


def is_valid_data(data):
    """
    A source result is usable when it carries a non-empty stock list whose
    records have symbols.
    """
    if not data or not isinstance(data, dict):
        return False
    stocks = data.get("stocks")
    if not isinstance(stocks, list) or not stocks:
        return False
    return all(isinstance(s, dict) and s.get("symbol") for s in stocks)


class FetchService:
    """
    Walks the source chain and returns the first valid result.

    Order: mock (development only), the exchange API, proxy mirrors, and the
    scraper. One source failing, raising or returning junk moves the chain on.
    """

    def __init__(self, adaptors=None, use_mock=USE_MOCK_DATA, market_open_fn=None, symbol_table=None):
        if adaptors is None:
            adaptors = [
                NepseAdaptor(market_open_fn=market_open_fn),
                ProxyAdaptor(),
                ScraperAdaptor(),
            ]
            if use_mock:
                adaptors.insert(0, MockAdaptor())
        self.adaptors = adaptors
        self._symbol_table = symbol_table
        self.last_data_source = None
        self.last_update_time = None
        self.consecutive_failures = 0

    @property
    def symbol_table(self):
        if self._symbol_table is None:
            self._symbol_table = SymbolsRepository.get_symbol_table()
        return self._symbol_table

    def _try_adaptor(self, adaptor):
        name = getattr(adaptor, "name", type(adaptor).__name__)
        try:
            logger.info(f"Trying source: {name}")
            data = adaptor.fetch_data()
        except Exception as e:
            logger.error(f"Source {name} failed: {e}")
            return None
        if not is_valid_data(data):
            logger.warning(f"Source {name} returned no usable data")
            return None
        return data

    def fetch_data(self):
        """
        Fetch one cycle of market data.

        Returns:
            dict with stocks, market_summary, ipos, top_movers and source, or
            None when every source failed
        """
        for adaptor in self.adaptors:
            data = self._try_adaptor(adaptor)
            if data is None:
                continue

            enrich_stocks(data["stocks"], self.symbol_table)
            data["market_summary"] = calculate_market_summary(data["stocks"], data.get("market_summary"))
            data.setdefault("ipos", [])
            upstream = {k: v for k, v in (data.get("top_movers") or {}).items() if v}
            data["top_movers"] = {**rank_movers(data["stocks"]), **upstream}

            self.last_data_source = data.get("source")
            self.last_update_time = datetime.now().isoformat()
            self.consecutive_failures = 0
            logger.info(f"Fetched {len(data['stocks'])} stocks from {self.last_data_source}")
            return data

        self.consecutive_failures += 1
        logger.error(f"All data sources failed ({self.consecutive_failures} consecutive failures)")
        return None

    def fetch_with_retry(self, max_retries=FETCH_MAX_RETRIES, delay=FETCH_RETRY_DELAY):
        for attempt in range(1, max_retries + 1):
            data = self.fetch_data()
            if data:
                return data
            if attempt < max_retries:
                logger.info(f"Retry {attempt}/{max_retries - 1} in {delay}s...")
                sleep(delay)
        logger.error(f"Fetch failed after {max_retries} attempts")
        return None

    def get_fetch_status(self):
        return {
            "data_source": self.last_data_source,
            "last_update_time": self.last_update_time,
            "consecutive_failures": self.consecutive_failures,
            "is_healthy": self.consecutive_failures < UNHEALTHY_FAILURE_COUNT,
        }
