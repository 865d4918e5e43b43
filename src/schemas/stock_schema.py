from marshmallow import Schema, fields, validate


class StockSchema(Schema):
    symbol = fields.Str(required=True, metadata={"example": "NABIL"})
    name = fields.Str(metadata={"example": "Nabil Bank Limited"})
    sector = fields.Str(metadata={"example": "Commercial Banks"})
    ltp = fields.Float(metadata={"description": "Last traded price"})
    open = fields.Float()
    high = fields.Float()
    low = fields.Float()
    close = fields.Float()
    previous_close = fields.Float()
    change = fields.Float()
    change_percent = fields.Float()
    volume = fields.Int()
    turnover = fields.Float()
    trades = fields.Int()
    fifty_two_week_high = fields.Float()
    fifty_two_week_low = fields.Float()
    last_updated = fields.Str()
    updated_at = fields.Str()


class StockListQuerySchema(Schema):
    skip = fields.Int(load_default=0, validate=validate.Range(min=0))
    limit = fields.Int(load_default=500, validate=validate.Range(min=1, max=5000))
    sort_by = fields.Str(
        load_default="symbol",
        validate=validate.OneOf(["symbol", "name", "sector", "ltp", "change", "change_percent",
                                 "volume", "turnover", "trades"]),
    )
    sort_order = fields.Str(load_default="asc", validate=validate.OneOf(["asc", "desc"]))
    include_zero_ltp = fields.Boolean(
        load_default=True,
        metadata={"description": "Include symbols that have no traded price yet"}
    )


class SearchQuerySchema(Schema):
    q = fields.Str(load_default="", metadata={"description": "Symbol or company name fragment", "example": "bank"})


class LimitQuerySchema(Schema):
    limit = fields.Int(load_default=10, validate=validate.Range(min=1, max=500))


class TrendingQuerySchema(Schema):
    limit = fields.Int(load_default=6, validate=validate.Range(min=1, max=50))


class RecentQuerySchema(Schema):
    seconds = fields.Int(load_default=30, validate=validate.Range(min=1))


class PaginationSchema(Schema):
    skip = fields.Int()
    limit = fields.Int()
    total = fields.Int()


class StockResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.Nested(StockSchema)


class StockListResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.List(fields.Nested(StockSchema))
    count = fields.Int()
    pagination = fields.Nested(PaginationSchema)
    query = fields.Str()
    window = fields.Str()


class SectorListResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.List(fields.Str())
    count = fields.Int()


class TrendingSchema(Schema):
    symbol = fields.Str()
    views = fields.Int()
    searches = fields.Int()
    score = fields.Int()


class TrendingResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.List(fields.Nested(TrendingSchema))
    count = fields.Int()


class CleanupResponseSchema(Schema):
    success = fields.Boolean()
    message = fields.Str()
    removed = fields.Int()
    remaining = fields.Int()
    valid_nepse_stocks = fields.Int()
    removed_symbols = fields.List(fields.Str())
