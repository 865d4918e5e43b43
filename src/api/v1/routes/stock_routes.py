from flask import current_app
from flask.views import MethodView
from flask_smorest import Blueprint, abort

from config import setup_logger
from repositories import StockRepository
from schemas import (
    StockListQuerySchema, SearchQuerySchema, LimitQuerySchema, TrendingQuerySchema, RecentQuerySchema,
    StockResponseSchema, StockListResponseSchema, SectorListResponseSchema, TrendingResponseSchema,
    CleanupResponseSchema
)

logger = setup_logger(name="StocksAPI")

blp = Blueprint("stocks", __name__, url_prefix="/api/stocks", description="Live stock prices and screens")
stock_repo = StockRepository()


def _analytics():
    return current_app.extensions["nepse"]["analytics"]


def _listing(stocks, **extra):
    return {"success": True, "data": stocks, "count": len(stocks), **extra}


@blp.route("/")
class StockList(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(StockListQuerySchema, location="query")
    @blp.response(200, StockListResponseSchema)
    def get(self, args):
        """List stocks with pagination and sorting"""
        stocks = stock_repo.get_all_stocks(**args)
        total = stock_repo.get_stock_count()
        return {
            "success": True,
            "data": stocks,
            "count": total,
            "pagination": {"skip": args["skip"], "limit": args["limit"], "total": total},
        }


@blp.route("/search")
class StockSearch(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(SearchQuerySchema, location="query")
    @blp.response(200, StockListResponseSchema)
    def get(self, args):
        """Search stocks by symbol or company name"""
        query = args["q"].strip()
        if not query:
            abort(400, message="Search query is required")
        _analytics().record_search(query)
        return _listing(stock_repo.search_stocks(query), query=query)


@blp.route("/sectors")
class SectorList(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.response(200, SectorListResponseSchema)
    def get(self):
        """List every sector with stored stocks"""
        return _listing(stock_repo.get_all_sectors())


@blp.route("/top-gainers")
class TopGainers(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(LimitQuerySchema, location="query")
    @blp.response(200, StockListResponseSchema)
    def get(self, args):
        """Biggest percentage gainers"""
        return _listing(stock_repo.get_top_gainers(args["limit"]))


@blp.route("/top-losers")
class TopLosers(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(LimitQuerySchema, location="query")
    @blp.response(200, StockListResponseSchema)
    def get(self, args):
        """Biggest percentage losers"""
        return _listing(stock_repo.get_top_losers(args["limit"]))


@blp.route("/top-traded")
class TopTraded(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(LimitQuerySchema, location="query")
    @blp.response(200, StockListResponseSchema)
    def get(self, args):
        """Most traded stocks by volume"""
        return _listing(stock_repo.get_top_traded(args["limit"]))


@blp.route("/unchanged")
class Unchanged(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.response(200, StockListResponseSchema)
    def get(self):
        """Stocks whose price did not move"""
        return _listing(stock_repo.get_unchanged_stocks())


@blp.route("/sector/<string:sector>")
class StocksBySector(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.response(200, StockListResponseSchema)
    def get(self, sector):
        """Stocks in a sector (case-insensitive)"""
        return _listing(stock_repo.get_stocks_by_sector(sector))


@blp.route("/recent")
class RecentlyUpdated(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(RecentQuerySchema, location="query")
    @blp.response(200, StockListResponseSchema)
    def get(self, args):
        """Stocks updated within the last N seconds"""
        seconds = args["seconds"]
        return _listing(stock_repo.get_recently_updated(seconds), window=f"{seconds} seconds")


@blp.route("/trending")
class Trending(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(TrendingQuerySchema, location="query")
    @blp.response(200, TrendingResponseSchema)
    def get(self, args):
        """Most viewed and searched symbols"""
        return _listing(_analytics().get_trending(args["limit"]))


@blp.route("/<string:symbol>")
class StockDetail(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.response(200, StockResponseSchema)
    def get(self, symbol):
        """Fetch one stock by symbol"""
        stock = stock_repo.get_stock_by_symbol(symbol)
        if not stock:
            abort(404, message=f"Stock with symbol '{symbol.upper()}' not found")
        _analytics().record_view(symbol)
        return {"success": True, "data": stock}


@blp.route("/admin/cleanup")
class CleanupInactive(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.response(200, CleanupResponseSchema)
    def post(self):
        """Delete stocks that have no traded price"""
        logger.info("Running cleanup to delete inactive stocks...")
        result = stock_repo.cleanup_inactive_stocks()
        return {"success": True, "message": "Inactive stocks cleanup completed", **result}


@blp.route("/admin/validate")
class ValidateSymbols(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.response(200, CleanupResponseSchema)
    def post(self):
        """Delete stocks that the exchange no longer lists"""
        logger.info("Validating stocks against official NEPSE data...")
        adaptor = current_app.extensions["nepse"]["nepse_adaptor"]
        try:
            valid_symbols = adaptor.fetch_valid_symbols()
        except Exception as e:
            logger.error(f"Validation failed: {e}")
            abort(502, message=f"Could not load the official symbol list: {e}")
        if not valid_symbols:
            abort(502, message="Official symbol list is empty")

        result = stock_repo.cleanup_invalid_stocks(valid_symbols)
        return {
            "success": True,
            "message": "Stock validation completed",
            "valid_nepse_stocks": len(valid_symbols),
            **result,
        }
