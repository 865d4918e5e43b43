from .date_utils import get_market_state, format_market_hours, format_uptime, parse_timestamp, is_within, to_nst
from .http_utils import build_session, unwrap_list
from .market_utils import calculate_market_summary, rank_movers
from .normalize_utils import (
    to_float, to_int, first_value, sanitize_symbol, compute_change, normalize_stock, normalize_stocks,
    enrich_stocks, map_ipo_status, normalize_ipo, generate_safe_key, IPO_STATUSES
)
from .storage_utils import JsonFileStore, StoreManager, write_json_atomic, read_json


__all__ = [
    "get_market_state",
    "format_market_hours",
    "format_uptime",
    "parse_timestamp",
    "is_within",
    "to_nst",
    "build_session",
    "unwrap_list",
    "calculate_market_summary",
    "rank_movers",
    "to_float",
    "to_int",
    "first_value",
    "sanitize_symbol",
    "compute_change",
    "normalize_stock",
    "normalize_stocks",
    "enrich_stocks",
    "map_ipo_status",
    "normalize_ipo",
    "generate_safe_key",
    "IPO_STATUSES",
    "JsonFileStore",
    "StoreManager",
    "write_json_atomic",
    "read_json",
]
