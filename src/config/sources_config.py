"""
Upstream source catalogue.

Endpoints are unofficial and change without notice; everything here is data,
the adaptors only know how to walk it.
"""

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
}

NEPSE_HEADERS = {
    "Content-Type": "application/json",
    "Referer": "https://nepalstock.com.np/",
    "Origin": "https://nepalstock.com.np",
}

NEPSE_INDEX_ID = 58

SECTOR_IDS = {
    58: "NEPSE Index",
    57: "Sensitive Index",
    51: "Commercial Banks",
    52: "Hotels And Tourism",
    53: "Others",
    54: "Hydro Power",
    55: "Development Banks",
    56: "Manufacturing And Processing",
    59: "Non Life Insurance",
    60: "Finance",
    61: "Trading",
    64: "Microfinance",
    65: "Life Insurance",
    66: "Mutual Fund",
    67: "Investment",
}

NEPSE_PUBLIC_ENDPOINTS = [
    "/api/nots/nepse-data/today-price",
    "/api/nots/security",
    "/api/nots/securityDailyTradeStat",
]

SHARESANSAR_LIVE_URL = "https://www.sharesansar.com/live-trading"
MEROLAGANI_LIVE_URL = "https://merolagani.com/handlers/weaboradataaborahandler.ashx"

PROXY_API_SOURCES = [
    {
        "name": "NepseAPI",
        "base_url": "https://nepse-api.herokuapp.com",
        "stocks_endpoint": "/api/stocks",
        "market_endpoint": "/api/market",
    },
    {
        "name": "NepseData",
        "base_url": "https://nepsedata.com",
        "stocks_endpoint": "/api/v1/stocks",
        "market_endpoint": "/api/v1/market",
    },
]

IPO_ENDPOINTS = ["/api/ipo", "/ipos", "/api/ipos"]

TIME_SOURCES = [
    {
        "name": "WorldTimeAPI-Kathmandu",
        "url": "http://worldtimeapi.org/api/timezone/Asia/Kathmandu",
        "field": "utc_datetime",
        "is_local": False,
    },
    {
        "name": "TimeAPI-Kathmandu",
        "url": "https://timeapi.io/api/Time/current/zone?timeZone=Asia/Kathmandu",
        "field": "dateTime",
        "is_local": True,
    },
    {
        "name": "WorldTimeAPI-UTC",
        "url": "http://worldtimeapi.org/api/timezone/Etc/UTC",
        "field": "utc_datetime",
        "is_local": False,
    },
]
