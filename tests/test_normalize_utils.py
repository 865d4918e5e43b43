from utils import (
    to_float, first_value, sanitize_symbol, compute_change, normalize_stock, normalize_stocks,
    enrich_stocks, map_ipo_status, normalize_ipo, generate_safe_key
)


def test_to_float_handles_commas_and_junk():
    assert to_float("1,234.50") == 1234.5
    assert to_float(None) == 0.0
    assert to_float("n/a") == 0.0
    assert to_float(7) == 7.0


def test_first_value_skips_zero_and_empty():
    raw = {"lastTradedPrice": 0, "ltp": "", "closePrice": 450}
    assert first_value(raw, ["lastTradedPrice", "ltp", "closePrice"]) == 450
    assert first_value({}, ["ltp"]) is None


def test_sanitize_symbol():
    assert sanitize_symbol(" nabil ") == "NABIL"
    assert sanitize_symbol("a.b/c") == "A_B_C"
    assert sanitize_symbol(None) == ""


def test_normalize_flat_record(raw_stocks):
    stock = normalize_stock(raw_stocks[0])

    assert stock["symbol"] == "NABIL"
    assert stock["name"] == "Nabil Bank Limited"
    assert stock["sector"] == "Commercial Banks"
    assert stock["ltp"] == 1020.5
    assert stock["volume"] == 12000
    assert stock["trades"] == 340
    # No upstream change: derived from previous close outside the session
    assert stock["change"] == 20.5
    assert stock["change_percent"] == 2.05


def test_normalize_nested_record(raw_stocks):
    stock = normalize_stock(raw_stocks[1])

    assert stock["symbol"] == "NICA"
    assert stock["ltp"] == 560.0
    assert stock["previous_close"] == 575.0
    assert stock["volume"] == 5000
    assert stock["turnover"] == 2800000.0
    assert stock["change"] == -15.0
    assert stock["sector"] == "Others"


def test_normalize_short_keys_with_zero_price(raw_stocks):
    stock = normalize_stock(raw_stocks[2])

    assert stock["symbol"] == "UPPER"
    assert stock["ltp"] == 0.0
    assert stock["change"] == 0.0
    assert stock["change_percent"] == 0.0


def test_normalize_stocks_drops_records_without_symbol(raw_stocks):
    stocks = normalize_stocks(raw_stocks)
    assert [s["symbol"] for s in stocks] == ["NABIL", "NICA", "UPPER"]


def test_upstream_change_is_kept_and_percent_derived():
    stock = normalize_stock({"symbol": "ADBL", "ltp": 300, "previousClose": 290, "pointChange": 10})
    assert stock["change"] == 10.0
    assert stock["change_percent"] == 3.45


def test_turnover_falls_back_to_price_times_volume():
    stock = normalize_stock({"symbol": "ADBL", "ltp": 300, "volume": 10})
    assert stock["turnover"] == 3000.0


def test_compute_change_intraday_vs_overnight():
    assert compute_change(110, 100, 105, market_open=True) == (10.0, 10.0)
    assert compute_change(110, 100, 100, market_open=False) == (10.0, 10.0)
    assert compute_change(110, 0, 0) == (0.0, 0.0)


def test_enrich_fills_placeholder_names_and_sectors():
    table = {"NABIL": {"name": "Nabil Bank Limited", "sector": "Commercial Banks"}}
    stocks = [
        {"symbol": "NABIL", "name": "NABIL", "sector": "Others"},
        {"symbol": "XYZ", "name": "XYZ", "sector": "Others"},
    ]

    enrich_stocks(stocks, table)

    assert stocks[0]["name"] == "Nabil Bank Limited"
    assert stocks[0]["sector"] == "Commercial Banks"
    assert stocks[1]["name"] == "XYZ"


def test_enrich_keeps_real_name_but_fixes_sector():
    table = {"NABIL": {"name": "Nabil Bank Limited", "sector": "Commercial Banks"}}
    stocks = [{"symbol": "NABIL", "name": "Nabil Bank Ltd.", "sector": "NEPSE Index"}]

    enrich_stocks(stocks, table)

    assert stocks[0]["name"] == "Nabil Bank Ltd."
    assert stocks[0]["sector"] == "Commercial Banks"


def test_map_ipo_status():
    assert map_ipo_status("Open") == "open"
    assert map_ipo_status("Closed") == "closed"
    assert map_ipo_status("Allotted") == "completed"
    assert map_ipo_status(None) == "upcoming"


def test_normalize_ipo_defaults():
    ipo = normalize_ipo({"companyName": "Sanima Hydropower Ltd", "status": "open", "units": "1,000,000"})

    assert ipo["company_name"] == "Sanima Hydropower Ltd"
    assert ipo["status"] == "open"
    assert ipo["price_min"] == 100.0
    assert ipo["minimum_shares"] == 10
    assert ipo["total_shares"] == 1000000
    assert normalize_ipo({"status": "open"}) is None


def test_generate_safe_key():
    assert generate_safe_key("Nabil Bank Ltd.") == "nabil_bank_ltd"
    assert generate_safe_key("Café  Hydro (P.) Ltd") == "cafe_hydro_p_ltd"
    assert generate_safe_key("Nabil Bank Ltd.", fallback_id="2", existing_keys={"nabil_bank_ltd"}) == "nabil_bank_ltd_2"
    assert generate_safe_key("", fallback_id="ipo_1") == "ipo_1"
