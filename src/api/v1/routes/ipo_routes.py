from flask.views import MethodView
from flask_smorest import Blueprint, abort

from repositories import IPORepository
from schemas import (
    IPOListQuerySchema, SearchQuerySchema, IPOResponseSchema, IPOListResponseSchema, IPOCountsResponseSchema
)
from utils import IPO_STATUSES

blp = Blueprint("ipos", __name__, url_prefix="/api/ipos", description="Initial public offerings")
ipo_repo = IPORepository()


@blp.route("/")
class IPOList(MethodView):
    @blp.doc(tags=["IPOs"])
    @blp.arguments(IPOListQuerySchema, location="query")
    @blp.response(200, IPOListResponseSchema)
    def get(self, args):
        """List IPOs, optionally filtered by status"""
        ipos = ipo_repo.get_all_ipos(**args)
        return {"success": True, "data": ipos, "count": len(ipos), "statistics": ipo_repo.get_ipo_counts()}


@blp.route("/active")
class ActiveIPOs(MethodView):
    @blp.doc(tags=["IPOs"])
    @blp.response(200, IPOListResponseSchema)
    def get(self):
        """IPOs that are open or upcoming"""
        ipos = ipo_repo.get_active_ipos()
        return {"success": True, "data": ipos, "count": len(ipos)}


@blp.route("/search")
class IPOSearch(MethodView):
    @blp.doc(tags=["IPOs"])
    @blp.arguments(SearchQuerySchema, location="query")
    @blp.response(200, IPOListResponseSchema)
    def get(self, args):
        """Search IPOs by company name, sector or issue manager"""
        query = args["q"].strip()
        if not query:
            abort(400, message="Search query is required")
        ipos = ipo_repo.search_ipos(query)
        return {"success": True, "data": ipos, "count": len(ipos), "query": query}


@blp.route("/counts")
class IPOCounts(MethodView):
    @blp.doc(tags=["IPOs"])
    @blp.response(200, IPOCountsResponseSchema)
    def get(self):
        """Number of IPOs per status"""
        return {"success": True, "data": ipo_repo.get_ipo_counts()}


@blp.route("/status/<string:status>")
class IPOsByStatus(MethodView):
    @blp.doc(tags=["IPOs"])
    @blp.response(200, IPOListResponseSchema)
    def get(self, status):
        """IPOs with a given status"""
        status = status.lower()
        if status not in IPO_STATUSES:
            abort(400, message=f"Invalid status. Must be one of: {', '.join(IPO_STATUSES)}")
        ipos = ipo_repo.get_ipos_by_status(status)
        return {"success": True, "data": ipos, "count": len(ipos), "status": status}


@blp.route("/<string:company_name>")
class IPODetail(MethodView):
    @blp.doc(tags=["IPOs"])
    @blp.response(200, IPOResponseSchema)
    def get(self, company_name):
        """Fetch one IPO by company name"""
        ipo = ipo_repo.get_ipo_by_company_name(company_name)
        if not ipo:
            abort(404, message=f"IPO for '{company_name}' not found")
        return {"success": True, "data": ipo}
