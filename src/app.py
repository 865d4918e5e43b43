import atexit
import time

from flask import Flask, render_template
from flask_cors import CORS

from adaptors import MockAdaptor, NepseAdaptor, ProxyAdaptor, ScraperAdaptor
from api.error_handlers import NepseApi
from api.v1.routes import stocks_bp, ipos_bp, market_bp, system_bp
from config import Config, setup_logger
from services import MarketClockService, FetchService, AnalyticsService, UpdateScheduler
from utils import StoreManager

logger = setup_logger(name="App")


def build_services(app):
    """Wire the clock, fetch chain, analytics and scheduler for one app instance"""
    clock = MarketClockService()
    nepse_adaptor = NepseAdaptor(market_open_fn=clock.is_market_open)

    adaptors = [nepse_adaptor, ProxyAdaptor(), ScraperAdaptor()]
    if app.config["USE_MOCK_DATA"]:
        adaptors.insert(0, MockAdaptor())
    fetch_service = FetchService(adaptors=adaptors)

    analytics = AnalyticsService(app.config["DATA_DIR"])
    analytics.load()

    scheduler = UpdateScheduler(fetch_service, clock, analytics=analytics)
    return {
        "clock": clock,
        "nepse_adaptor": nepse_adaptor,
        "fetch_service": fetch_service,
        "analytics": analytics,
        "scheduler": scheduler,
        "started_at": time.time(),
    }


def create_app(config_class=Config):
    """Application factory"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    StoreManager.init_store(app.config["DATA_DIR"])
    CORS(app, origins=app.config["CORS_ORIGINS"])

    api = NepseApi(app)
    api.register_blueprint(stocks_bp)
    api.register_blueprint(ipos_bp)
    api.register_blueprint(market_bp)
    api.register_blueprint(system_bp)

    services = build_services(app)
    app.extensions["nepse"] = services

    @app.route("/")
    def dashboard():
        """Render the live market dashboard"""
        return render_template("dashboard.html")

    if app.config.get("START_SCHEDULER"):
        services["scheduler"].start()
        atexit.register(services["scheduler"].stop)

    logger.info(f"NEPSE Tracker ready ({app.config.get('APP_ENV')})")
    return app
