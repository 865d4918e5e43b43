"""
Market Utilities

Aggregate a normalized stock batch into a market summary.
"""
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd


SUMMARY_DEFAULTS = {
    "index_value": 0.0,
    "index_change": 0.0,
    "index_change_percent": 0.0,
    "total_turnover": 0.0,
    "total_volume": 0,
    "total_transactions": 0,
    "total_market_cap": 0.0,
    "active_companies": 0,
    "advanced_companies": 0,
    "declined_companies": 0,
    "unchanged_companies": 0,
    "sub_indices": [],
}


def calculate_market_summary(stocks: List[Dict], upstream_summary: Optional[Dict] = None) -> Dict:
    """
    Build the market summary for a fetch cycle.

    Totals and breadth are computed from the stock batch; a stock counts as
    traded only when its volume is positive. Non-zero values reported by the
    upstream summary take precedence over computed ones.

    Parameters:
        stocks: Normalized stock records
        upstream_summary: Summary reported by the source, if any

    Returns:
        dict: Market summary record
    """
    summary = dict(SUMMARY_DEFAULTS)
    summary.update(upstream_summary or {})

    computed = {
        "total_turnover": 0.0,
        "total_volume": 0,
        "total_transactions": 0,
        "active_companies": 0,
        "advanced_companies": 0,
        "declined_companies": 0,
        "unchanged_companies": 0,
    }
    if stocks:
        df = pd.DataFrame(stocks)
        for col in ["turnover", "volume", "trades", "change"]:
            if col not in df.columns:
                df[col] = 0
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)

        traded = df[df["volume"] > 0]
        computed = {
            "total_turnover": round(float(df["turnover"].sum()), 2),
            "total_volume": int(df["volume"].sum()),
            "total_transactions": int(df["trades"].sum()),
            "active_companies": int(len(traded)),
            "advanced_companies": int((traded["change"] > 0).sum()),
            "declined_companies": int((traded["change"] < 0).sum()),
            "unchanged_companies": int((traded["change"] == 0).sum()),
        }

    for key, value in computed.items():
        if not summary.get(key):
            summary[key] = value

    summary["timestamp"] = summary.get("timestamp") or datetime.now().isoformat()
    return summary


def _records(df: pd.DataFrame) -> List[Dict]:
    # NaN is not valid JSON
    return df.astype(object).where(df.notna(), None).to_dict("records")


def rank_movers(stocks: List[Dict], limit: int = 10) -> Dict[str, List[Dict]]:
    """Top movers by turnover, trades, volume and percent change."""
    movers = {"turnover": [], "trade": [], "volume": [], "gainers": [], "losers": []}
    if not stocks:
        return movers

    columns = ["symbol", "name", "ltp", "change", "change_percent", "volume", "turnover", "trades"]
    df = pd.DataFrame(stocks).reindex(columns=columns)
    df = df[df["ltp"].fillna(0) > 0]

    movers["turnover"] = _records(df.nlargest(limit, "turnover"))
    movers["trade"] = _records(df.nlargest(limit, "trades"))
    movers["volume"] = _records(df.nlargest(limit, "volume"))
    movers["gainers"] = _records(df[df["change_percent"] > 0].nlargest(limit, "change_percent"))
    movers["losers"] = _records(df[df["change_percent"] < 0].nsmallest(limit, "change_percent"))
    return movers
