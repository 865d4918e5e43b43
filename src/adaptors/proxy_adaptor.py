from datetime import datetime

from config import (
    setup_logger, NEPSE_BASE_URL, PROXY_API_SOURCES, SHARESANSAR_LIVE_URL,
    IPO_ENDPOINTS, REQUEST_TIMEOUT
)
from utils import build_session, normalize_stocks, normalize_ipo, unwrap_list, to_float, to_int


class ProxyAdaptor:
    """
    Generic client over third-party mirrors of the exchange data.

    Tries the exchange's unauthenticated today-price page, ShareSansar live
    trading, then each configured mirror API in turn.
    """
    name = "proxy"

    def __init__(self, logger=None, sources=None, session=None):
        self.logger = logger or setup_logger(name="ProxyAdaptor")
        self.sources = PROXY_API_SOURCES if sources is None else sources
        self.session = session or build_session()

    def _get_json(self, url, **kwargs):
        response = self.session.get(url, timeout=REQUEST_TIMEOUT, **kwargs)
        response.raise_for_status()
        return response.json()

    def fetch_today_price(self):
        try:
            data = self._get_json(
                f"{NEPSE_BASE_URL}/api/nots/nepse-data/today-price",
                headers={"Referer": f"{NEPSE_BASE_URL}/"}
            )
        except Exception as e:
            self.logger.debug(f"Today-price fetch failed: {e}")
            return None
        stocks = normalize_stocks(data if isinstance(data, list) else [])
        return self._result(stocks, None, "nepalpha") if stocks else None

    def fetch_sharesansar(self):
        try:
            data = self._get_json(SHARESANSAR_LIVE_URL, headers={"Referer": "https://www.sharesansar.com/"})
        except Exception as e:
            self.logger.debug(f"ShareSansar fetch failed: {e}")
            return None
        stocks = normalize_stocks(unwrap_list(data, ("data",)))
        return self._result(stocks, None, "sharesansar") if stocks else None

    def fetch_market_summary(self, source):
        try:
            data = self._get_json(f"{source['base_url']}{source['market_endpoint']}")
        except Exception as e:
            self.logger.debug(f"Market summary fetch from {source['name']} failed: {e}")
            return None
        if not isinstance(data, dict):
            return None
        info = data.get("marketOpen") or data.get("market")
        if not isinstance(info, dict):
            info = data
        return {
            "index_value": to_float(info.get("index") or info.get("nepseIndex")),
            "index_change": to_float(info.get("change") or info.get("pointChange")),
            "index_change_percent": to_float(info.get("perChange") or info.get("percentChange")),
            "total_transactions": to_int(info.get("totalTransactions")),
            "total_turnover": to_float(info.get("totalTurnover")),
            "total_volume": to_int(info.get("totalVolume")),
            "active_companies": to_int(info.get("tradedScrip")),
            "advanced_companies": to_int(info.get("positive")),
            "declined_companies": to_int(info.get("negative")),
            "unchanged_companies": to_int(info.get("neutral")),
        }

    def fetch_source_stocks(self, source):
        try:
            data = self._get_json(f"{source['base_url']}{source['stocks_endpoint']}")
        except Exception as e:
            self.logger.debug(f"Stocks fetch from {source['name']} failed: {e}")
            return []
        return normalize_stocks(unwrap_list(data, ("data", "securities", "stocks")))

    def fetch_ipos(self, source):
        for endpoint in IPO_ENDPOINTS:
            try:
                data = self._get_json(f"{source['base_url']}{endpoint}")
            except Exception as e:
                self.logger.debug(f"IPO endpoint {endpoint} on {source['name']} failed: {e}")
                continue
            ipos = [ipo for ipo in map(normalize_ipo, unwrap_list(data, ("data", "ipos"))) if ipo]
            if ipos:
                return ipos
        return []

    def _result(self, stocks, summary, source, ipos=None):
        return {
            "stocks": stocks,
            "market_summary": summary,
            "ipos": ipos or [],
            "source": source,
            "timestamp": datetime.now().isoformat(),
        }

    def fetch_data(self):
        self.logger.info("Fetching data using proxy sources...")
        for fetch in (self.fetch_today_price, self.fetch_sharesansar):
            result = fetch()
            if result:
                self.logger.info(f"Proxy: {len(result['stocks'])} stocks from {result['source']}")
                return result

        for source in self.sources:
            stocks = self.fetch_source_stocks(source)
            if not stocks:
                continue
            summary = self.fetch_market_summary(source)
            ipos = self.fetch_ipos(source)
            self.logger.info(f"Proxy: {len(stocks)} stocks from {source['name']}")
            return self._result(stocks, summary, f"proxy-{source['name']}", ipos)

        self.logger.warning("Proxy: no data received from any source")
        return None
