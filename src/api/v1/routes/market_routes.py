from flask.views import MethodView
from flask_smorest import Blueprint, abort

from repositories import MarketRepository, StockRepository
from schemas import (
    MarketHistoryQuerySchema, MarketSummaryResponseSchema, MarketHistoryResponseSchema,
    MarketStatsResponseSchema, TopMoversResponseSchema
)

blp = Blueprint("market", __name__, url_prefix="/api", description="Market summary, history and movers")
market_repo = MarketRepository()
stock_repo = StockRepository()


@blp.route("/market-summary")
class MarketSummary(MethodView):
    @blp.doc(tags=["Market"])
    @blp.response(200, MarketSummaryResponseSchema)
    def get(self):
        """Latest market summary"""
        summary = market_repo.get_latest_market_summary()
        if not summary:
            abort(404, message="No market summary data available")
        return {"success": True, "data": summary}


@blp.route("/market-history")
class MarketHistory(MethodView):
    @blp.doc(tags=["Market"])
    @blp.arguments(MarketHistoryQuerySchema, location="query")
    @blp.response(200, MarketHistoryResponseSchema)
    def get(self, args):
        """Market summaries recorded in the last N hours (newest first)"""
        history = market_repo.get_market_summary_history(args["hours"])
        return {"success": True, "data": history, "count": len(history), "hours": args["hours"]}


@blp.route("/market-stats")
class MarketStats(MethodView):
    @blp.doc(tags=["Market"])
    @blp.response(200, MarketStatsResponseSchema)
    def get(self):
        """Store statistics with stock and sector counts"""
        sectors = stock_repo.get_all_sectors()
        return {
            "success": True,
            "data": {
                **market_repo.get_market_stats(),
                "stock_count": stock_repo.get_stock_count(),
                "sector_count": len(sectors),
                "sectors": sectors,
            },
        }


@blp.route("/top-movers")
class TopMovers(MethodView):
    @blp.doc(tags=["Market"])
    @blp.response(200, TopMoversResponseSchema)
    def get(self):
        """Top movers by turnover, trades, volume and percent change"""
        return {"success": True, "data": market_repo.get_top_movers()}
