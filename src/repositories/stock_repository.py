from datetime import datetime

from config import setup_logger
from utils import StoreManager, is_within

logger = setup_logger(name="StockRepository")

STOCKS_KEY = "stocks"

# Fields that describe a price; they survive an update that reports no price.
PRICE_FIELDS = ("ltp", "change", "change_percent", "open", "high", "low", "close", "previous_close")
TRANSIENT_FLAGS = ("is_top_gainer", "is_top_loser")


def _ltp(stock):
    try:
        return float(stock.get("ltp") or 0)
    except (TypeError, ValueError):
        return 0.0


def merge_stock(existing, incoming, timestamp):
    """
    Merge an incoming stock record over the stored one.

    A record whose LTP is zero or missing never overwrites a stored non-zero
    LTP: the stored price fields are kept and only the remaining fields
    (volume, name, ...) are taken from the incoming record.
    """
    incoming = {k: v for k, v in incoming.items() if k not in TRANSIENT_FLAGS}
    merged = {**(existing or {}), **incoming, "updated_at": timestamp}

    if _ltp(incoming) <= 0 and existing and _ltp(existing) > 0:
        for field in PRICE_FIELDS:
            if field in existing:
                merged[field] = existing[field]
    return merged


class StockRepository:

    def __init__(self, store=None):
        self._store = store

    @property
    def store(self):
        return self._store or StoreManager.get_store()

    def _stocks(self):
        return self.store.load(STOCKS_KEY, {})

    def save_stocks(self, stocks):
        """Upsert a batch with the anti-regression merge. Returns the number saved."""
        if not stocks:
            return 0
        timestamp = datetime.now().isoformat()
        shielded = 0
        saved = 0
        with self.store.lock:
            stored = self._stocks()
            for stock in stocks:
                symbol = (stock.get("symbol") or "").upper()
                if not symbol:
                    continue
                existing = stored.get(symbol)
                if _ltp(stock) <= 0 and existing and _ltp(existing) > 0:
                    shielded += 1
                stored[symbol] = merge_stock(existing, {**stock, "symbol": symbol}, timestamp)
                saved += 1
        self.store.save(STOCKS_KEY)
        if shielded:
            logger.info(f"Kept last known price for {shielded} stocks with zero LTP")
        return saved

    def get_all_stocks(self, skip=0, limit=500, sort_by="symbol", sort_order="asc", include_zero_ltp=True):
        with self.store.lock:
            stocks = list(self._stocks().values())

        if not include_zero_ltp:
            stocks = [s for s in stocks if _ltp(s) > 0]

        reverse = sort_order in ("desc", -1, "-1")
        sample = next((s.get(sort_by) for s in stocks if s.get(sort_by) is not None), None)
        if isinstance(sample, str):
            stocks.sort(key=lambda s: str(s.get(sort_by) or "").lower(), reverse=reverse)
        else:
            stocks.sort(key=lambda s: s.get(sort_by) or 0, reverse=reverse)
        return stocks[skip:skip + limit]

    def get_stock_by_symbol(self, symbol):
        with self.store.lock:
            return self._stocks().get(symbol.upper())

    def search_stocks(self, query, limit=50):
        """Symbol or company name contains the query (case-insensitive)."""
        q = query.lower()
        with self.store.lock:
            stocks = list(self._stocks().values())
        matches = [
            s for s in stocks
            if q in (s.get("symbol") or "").lower() or q in (s.get("name") or "").lower()
        ]
        return matches[:limit]

    def get_stocks_by_sector(self, sector):
        target = sector.lower()
        with self.store.lock:
            stocks = list(self._stocks().values())
        return [s for s in stocks if (s.get("sector") or "").lower() == target]

    def get_recently_updated(self, seconds=30):
        with self.store.lock:
            stocks = list(self._stocks().values())
        return [s for s in stocks if is_within(s.get("updated_at"), seconds)]

    def get_stock_count(self):
        with self.store.lock:
            return len(self._stocks())

    def get_all_sectors(self):
        with self.store.lock:
            stocks = list(self._stocks().values())
        return sorted({s.get("sector") for s in stocks if s.get("sector")})

    def get_top_gainers(self, limit=10):
        with self.store.lock:
            stocks = list(self._stocks().values())
        gainers = [s for s in stocks if (s.get("change_percent") or 0) > 0]
        gainers.sort(key=lambda s: s["change_percent"], reverse=True)
        return gainers[:limit]

    def get_top_losers(self, limit=10):
        with self.store.lock:
            stocks = list(self._stocks().values())
        losers = [s for s in stocks if (s.get("change_percent") or 0) < 0]
        losers.sort(key=lambda s: s["change_percent"])
        return losers[:limit]

    def get_unchanged_stocks(self):
        with self.store.lock:
            stocks = list(self._stocks().values())
        return [s for s in stocks if (s.get("change_percent") or 0) == 0 and _ltp(s) > 0]

    def get_top_traded(self, limit=10):
        with self.store.lock:
            stocks = list(self._stocks().values())
        stocks.sort(key=lambda s: s.get("volume") or 0, reverse=True)
        return stocks[:limit]

    def clear_all_stocks(self):
        with self.store.lock:
            self._stocks().clear()
        self.store.save_now(STOCKS_KEY)
        logger.info("Cleared all stocks")

    def delete_inactive_stocks(self):
        """Remove symbols that have never traded (zero LTP)."""
        with self.store.lock:
            stored = self._stocks()
            inactive = [symbol for symbol, stock in stored.items() if _ltp(stock) <= 0]
            for symbol in inactive:
                del stored[symbol]
        if inactive:
            self.store.save(STOCKS_KEY)
        return len(inactive)

    def cleanup_inactive_stocks(self):
        deleted = self.delete_inactive_stocks()
        remaining = self.get_stock_count()
        logger.info(f"Removed {deleted} inactive stocks, {remaining} remaining")
        return {"removed": deleted, "remaining": remaining}

    def cleanup_invalid_stocks(self, valid_symbols):
        """Drop every stored symbol that is not in `valid_symbols`."""
        valid = {s.upper() for s in valid_symbols}
        with self.store.lock:
            stored = self._stocks()
            removed_symbols = sorted(symbol for symbol in stored if symbol not in valid)
            for symbol in removed_symbols:
                del stored[symbol]
            remaining = len(stored)
        if removed_symbols:
            self.store.save(STOCKS_KEY)
        return {"removed": len(removed_symbols), "remaining": remaining, "removed_symbols": removed_symbols}
