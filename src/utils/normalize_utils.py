"""
Normalize Utilities

Map heterogeneous upstream payloads onto the canonical stock and IPO records.
Every upstream names the same numbers differently; the alias tables below are
walked in order and the first usable value wins.
"""
import re
import time
import unicodedata
from datetime import datetime
from typing import Dict, List, Optional


SYMBOL_UNSAFE_CHARS = re.compile(r"[/\\.#$\[\]]")

STOCK_ALIASES = {
    "symbol": ["symbol", "securitySymbol", "scrip", "s"],
    "name": ["securityName", "companyName", "name", "n"],
    "sector": ["sectorName", "sector", "instrumentType"],
    "ltp": ["lastTradedPrice", "ltp", "closePrice", "close", "l"],
    "open": ["openPrice", "open", "o"],
    "high": ["highPrice", "high", "h"],
    "low": ["lowPrice", "low", "lo"],
    "close": ["closePrice", "close"],
    "previous_close": ["previousClose", "previousDayClosePrice", "pc"],
    "change": ["pointChange", "change", "diff", "c"],
    "change_percent": ["percentageChange", "perChange", "changePercent", "percentChange", "cp"],
    "volume": ["totalTradedQuantity", "totalTradeQuantity", "volume", "qty", "v"],
    "turnover": ["totalTradedValue", "turnover", "amount", "t"],
    "trades": ["totalTrades", "noOfTrades", "noOfTransactions"],
    "fifty_two_week_high": ["fiftyTwoWeekHigh"],
    "fifty_two_week_low": ["fiftyTwoWeekLow"],
}

NESTED_GROUPS = {
    "prices": {
        "ltp": "ltp", "open": "openPrice", "high": "highPrice", "low": "lowPrice",
        "close": "closePrice", "previousClose": "previousClose",
        "change": "pointChange", "changePercent": "percentageChange",
    },
    "trading": {"volume": "volume", "turnover": "turnover", "totalTrades": "totalTrades"},
    "fiftyTwoWeek": {"high": "fiftyTwoWeekHigh", "low": "fiftyTwoWeekLow"},
}

IPO_STATUSES = ("upcoming", "open", "closed", "completed")


def to_float(value) -> float:
    """Parse anything number-like; commas are thousands separators."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        return 0.0


def to_int(value) -> int:
    return int(to_float(value))


def first_value(raw: Dict, keys: List[str]):
    """Return the first alias whose value is present and not zero-ish."""
    for key in keys:
        value = raw.get(key)
        if value in (None, "", 0, "0"):
            continue
        return value
    return None


def sanitize_symbol(symbol) -> str:
    if not symbol:
        return ""
    return SYMBOL_UNSAFE_CHARS.sub("_", str(symbol).strip()).upper()


def _flatten(raw: Dict) -> Dict:
    # Nested {prices: {...}, trading: {...}} payloads are lifted to flat aliases
    flat = dict(raw)
    for group, mapping in NESTED_GROUPS.items():
        nested = raw.get(group)
        if not isinstance(nested, dict):
            continue
        for nested_key, flat_key in mapping.items():
            if flat.get(flat_key) in (None, "") and nested.get(nested_key) is not None:
                flat[flat_key] = nested[nested_key]
    return flat


def compute_change(ltp: float, open_price: float, previous_close: float, market_open=None):
    """
    Derive (change, change_percent) from prices.

    During the session the move is measured against today's open; outside it,
    against the previous close.
    """
    if market_open and open_price > 0:
        base = open_price
    else:
        base = previous_close
    change = ltp - base if base > 0 else 0.0
    change_percent = (change / base) * 100 if base > 0 else 0.0
    return round(change, 2), round(change_percent, 2)


def normalize_stock(raw: Dict, market_open: Optional[bool] = None) -> Optional[Dict]:
    """
    Convert one upstream stock payload into the canonical stock record.

    Parameters:
        raw: Upstream record in any of the supported shapes
        market_open: When known, selects intraday vs overnight change derivation

    Returns:
        Canonical stock dict, or None when the record carries no symbol
    """
    if not isinstance(raw, dict):
        return None
    flat = _flatten(raw)

    symbol = sanitize_symbol(first_value(flat, STOCK_ALIASES["symbol"]))
    if not symbol:
        return None

    ltp = to_float(first_value(flat, STOCK_ALIASES["ltp"]))
    open_price = to_float(first_value(flat, STOCK_ALIASES["open"]))
    previous_close = to_float(first_value(flat, STOCK_ALIASES["previous_close"]))
    volume = to_int(first_value(flat, STOCK_ALIASES["volume"]))

    turnover = to_float(first_value(flat, STOCK_ALIASES["turnover"]))
    if turnover == 0 and volume > 0 and ltp > 0:
        turnover = ltp * volume

    raw_change = first_value(flat, STOCK_ALIASES["change"])
    raw_percent = first_value(flat, STOCK_ALIASES["change_percent"])
    if raw_change is None and raw_percent is None:
        change, change_percent = compute_change(ltp, open_price, previous_close, market_open)
    else:
        change = round(to_float(raw_change), 2)
        if raw_change is None and previous_close > 0:
            change = round(previous_close * to_float(raw_percent) / 100, 2)
        if raw_percent is None:
            change_percent = round(change / previous_close * 100, 2) if previous_close > 0 else 0.0
        else:
            change_percent = round(to_float(raw_percent), 2)

    now = datetime.now().isoformat()
    return {
        "symbol": symbol,
        "name": str(first_value(flat, STOCK_ALIASES["name"]) or symbol).strip(),
        "sector": str(first_value(flat, STOCK_ALIASES["sector"]) or "Others").strip(),
        "ltp": round(ltp, 2),
        "open": round(open_price or ltp, 2),
        "high": round(to_float(first_value(flat, STOCK_ALIASES["high"])) or ltp, 2),
        "low": round(to_float(first_value(flat, STOCK_ALIASES["low"])) or ltp, 2),
        "close": round(to_float(first_value(flat, STOCK_ALIASES["close"])) or ltp, 2),
        "previous_close": round(previous_close, 2),
        "change": change,
        "change_percent": change_percent,
        "volume": volume,
        "turnover": round(turnover, 2),
        "trades": to_int(first_value(flat, STOCK_ALIASES["trades"])),
        "fifty_two_week_high": to_float(first_value(flat, STOCK_ALIASES["fifty_two_week_high"])),
        "fifty_two_week_low": to_float(first_value(flat, STOCK_ALIASES["fifty_two_week_low"])),
        "last_updated": flat.get("lastUpdated") or flat.get("timestamp") or now,
    }


def normalize_stocks(raw_stocks, market_open: Optional[bool] = None) -> List[Dict]:
    """Normalize a batch, dropping records without a symbol."""
    stocks = []
    for raw in raw_stocks or []:
        stock = normalize_stock(raw, market_open=market_open)
        if stock:
            stocks.append(stock)
    return stocks


def _needs_name(stock: Dict) -> bool:
    name = stock.get("name") or ""
    return (
        not name
        or name.startswith("COM")
        or name == stock.get("symbol")
        or len(name) < 3
    )


def enrich_stocks(stocks: List[Dict], symbol_table: Dict[str, Dict]) -> List[Dict]:
    """
    Fill missing or placeholder company names and sectors from the static table.

    Returns the same list, modified in place.
    """
    for stock in stocks:
        info = symbol_table.get(stock.get("symbol"))
        if not info:
            continue
        if _needs_name(stock):
            stock["name"] = info["name"]
            if stock.get("sector") in (None, "", "Others"):
                stock["sector"] = info["sector"]
        elif stock.get("sector") in (None, "", "Others", "NEPSE Index"):
            stock["sector"] = info["sector"]
    return stocks


def map_ipo_status(status) -> str:
    if not status:
        return "upcoming"
    text = str(status).lower()
    if "open" in text:
        return "open"
    if "close" in text:
        return "closed"
    if "complete" in text or "allot" in text:
        return "completed"
    return "upcoming"


def _date_string(value) -> Optional[str]:
    if not value:
        return None
    return str(value)


def normalize_ipo(raw: Dict) -> Optional[Dict]:
    """Canonical IPO record from an upstream payload. Requires a company name."""
    if not isinstance(raw, dict):
        return None
    company_name = str(raw.get("companyName") or raw.get("name") or "").strip()
    if not company_name:
        return None

    unit_price = to_float(raw.get("pricePerUnit"))
    return {
        "company_name": company_name,
        "sector": raw.get("sector") or raw.get("instrumentType") or "Others",
        "share_registrar": raw.get("shareRegistrar") or raw.get("shareManager") or "",
        "issue_manager": raw.get("issueManager") or "",
        "price_min": unit_price or to_float(raw.get("minPrice")) or 100.0,
        "price_max": unit_price or to_float(raw.get("maxPrice")) or 100.0,
        "total_shares": to_int(raw.get("totalShares") or raw.get("units")),
        "status": map_ipo_status(raw.get("status") or raw.get("ipoStatus")),
        "announcement_date": _date_string(raw.get("announcementDate")),
        "opening_date": _date_string(raw.get("openDate") or raw.get("issueOpenDate")),
        "closing_date": _date_string(raw.get("closeDate") or raw.get("issueCloseDate")),
        "result_date": _date_string(raw.get("resultDate")),
        "allotment_date": _date_string(raw.get("allotmentDate")),
        "subscription_ratio": to_float(raw.get("subscriptionTimes") or raw.get("subscriptionRatio")),
        "minimum_shares": to_int(raw.get("minUnit") or raw.get("minUnits")) or 10,
        "maximum_shares": to_int(raw.get("maxUnit") or raw.get("maxUnits")),
        "issued_shares": to_int(raw.get("issuedShares")),
    }


def generate_safe_key(company_name, fallback_id=None, existing_keys=None) -> str:
    """
    Build a storage key from a company name.

    "Nabil Bank Ltd." -> "nabil_bank_ltd". Diacritics are stripped, anything
    non-alphanumeric collapses to a single underscore. When the key is already
    taken, fallback_id (or a time-based token) is appended.
    """
    if not company_name or not isinstance(company_name, str):
        return fallback_id or f"ipo_{int(time.time() * 1000)}"

    key = unicodedata.normalize("NFKD", company_name)
    key = "".join(ch for ch in key if not unicodedata.combining(ch))
    key = re.sub(r"[^A-Za-z0-9]", "_", key).lower()
    key = re.sub(r"_+", "_", key).strip("_")

    if not key:
        return fallback_id or f"ipo_{int(time.time() * 1000)}"

    if existing_keys is not None and key in existing_keys:
        suffix = fallback_id or format(int(time.time() * 1000), "x")
        key = f"{key}_{suffix}"
    return key
