import os

from .app_config import APP_ENV, DATA_DIR, USE_MOCK_DATA


class Config:
    API_TITLE = "NEPSE Tracker"
    API_VERSION = "v1"
    OPENAPI_VERSION = "3.0.3"
    OPENAPI_URL_PREFIX = "/"
    OPENAPI_SWAGGER_UI_PATH = "/swagger-ui"
    OPENAPI_SWAGGER_UI_URL = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"
    OPENAPI_REDOC_PATH = "/redoc"
    OPENAPI_REDOC_URL = "https://cdn.jsdelivr.net/npm/redoc@latest/bundles/redoc.standalone.js"
    API_SPEC_OPTIONS = {
        "tags": [
            {"name": "Stocks", "description": "Live stock prices and screens"},
            {"name": "IPOs", "description": "Initial public offerings"},
            {"name": "Market", "description": "Market summary, history and movers"},
            {"name": "System", "description": "Health, scheduler and time sync"},
        ],
        "x-tagGroups": [
            {"name": "Market Data", "tags": ["Stocks", "IPOs", "Market"]},
            {"name": "Operations", "tags": ["System"]},
        ]
    }
    APP_ENV = APP_ENV
    DATA_DIR = DATA_DIR
    USE_MOCK_DATA = USE_MOCK_DATA
    START_SCHEDULER = True
    CORS_ORIGINS = [
        origin for origin in [
            os.getenv("CORS_ORIGIN"),
            "http://localhost:3000",
            "http://localhost:5173",
        ] if origin
    ]
