import queue
import time
from datetime import datetime

from flask import Response, current_app, stream_with_context
from flask.views import MethodView
from flask_smorest import Blueprint

from config import setup_logger, sse_log_queue
from repositories import MarketRepository, StockRepository
from schemas import MessageSchema, HealthSchema, SchedulerStatusResponseSchema, TimeSyncResponseSchema
from utils import format_uptime, format_market_hours

logger = setup_logger(name="SystemAPI")

blp = Blueprint("system", __name__, url_prefix="/api", description="Health, scheduler and time sync")
market_repo = MarketRepository()
stock_repo = StockRepository()


def _services():
    return current_app.extensions["nepse"]


@blp.route("/health")
class Health(MethodView):
    @blp.doc(tags=["System"])
    @blp.response(200, HealthSchema)
    def get(self):
        """Server, scheduler, market and data health"""
        services = _services()
        status = services["scheduler"].get_update_status()
        fetch_status = services["fetch_service"].get_fetch_status()
        uptime = int(time.time() - services["started_at"])
        return {
            "success": True,
            "status": "running",
            "server": {
                "uptime": uptime,
                "uptime_formatted": format_uptime(uptime),
                "environment": current_app.config.get("APP_ENV"),
            },
            "scheduler": {
                "is_running": status["is_running"],
                "last_update": status["last_update_time"],
                "update_count": status["update_count"],
                "last_error": status["last_error"],
            },
            "market": {
                "is_open": status["is_market_open"],
                "state": status["market_state"],
                "current_nst": status["current_nst"],
                "hours": status["market_hours"],
            },
            "data": {
                "source": fetch_status["data_source"],
                "stock_count": stock_repo.get_stock_count(),
                "has_market_data": market_repo.get_market_stats()["has_data"],
                "is_healthy": fetch_status["is_healthy"],
                "consecutive_failures": fetch_status["consecutive_failures"],
            },
        }


@blp.route("/scheduler-status")
class SchedulerStatus(MethodView):
    @blp.doc(tags=["System"])
    @blp.response(200, SchedulerStatusResponseSchema)
    def get(self):
        """Update scheduler state"""
        return {"success": True, "data": _services()["scheduler"].get_update_status()}


@blp.route("/force-update")
class ForceUpdate(MethodView):
    @blp.doc(tags=["System"])
    @blp.response(200, MessageSchema)
    def post(self):
        """Run a fetch cycle now, ignoring the weekend skip"""
        logger.info("Force update requested via API")
        success = _services()["scheduler"].force_update()
        return {
            "success": success,
            "message": "Update completed successfully" if success else "Update failed",
            "timestamp": datetime.now().isoformat(),
        }


@blp.route("/time-sync")
class TimeSync(MethodView):
    @blp.doc(tags=["System"])
    @blp.response(200, TimeSyncResponseSchema)
    def get(self):
        """Clock offset and Nepal time"""
        clock = _services()["clock"]
        return {"success": True, "data": {**clock.get_time_sync_status(), "market_hours": format_market_hours(clock.hours)}}


@blp.route("/logs/stream")
class LogStream(MethodView):
    def get(self):
        """SSE stream of server log lines"""
        def _generate():
            while True:
                try:
                    msg = sse_log_queue.get(timeout=30)
                    # Escape newlines so SSE stays single-line per event
                    safe = msg.replace('\n', ' ').replace('\r', '')
                    yield f"data: {safe}\n\n"
                except queue.Empty:
                    yield "data: [PING]\n\n"

        return Response(
            stream_with_context(_generate()),
            mimetype='text/event-stream',
            headers={
                'Cache-Control': 'no-cache',
                'X-Accel-Buffering': 'no',
            }
        )
