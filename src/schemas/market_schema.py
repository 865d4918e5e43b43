from marshmallow import Schema, fields, validate


class SubIndexSchema(Schema):
    name = fields.Str()
    value = fields.Float()
    change = fields.Float()
    change_percent = fields.Float()


class MarketSummarySchema(Schema):
    index_value = fields.Float(metadata={"example": 2045.32})
    index_change = fields.Float()
    index_change_percent = fields.Float()
    high = fields.Float()
    low = fields.Float()
    previous_close = fields.Float()
    total_turnover = fields.Float()
    total_volume = fields.Int()
    total_transactions = fields.Int()
    total_market_cap = fields.Float()
    active_companies = fields.Int()
    advanced_companies = fields.Int()
    declined_companies = fields.Int()
    unchanged_companies = fields.Int()
    sub_indices = fields.List(fields.Nested(SubIndexSchema))
    is_open = fields.Boolean()
    state = fields.Str()
    source = fields.Str()
    timestamp = fields.Str()
    updated_at = fields.Str()


class MarketHistoryQuerySchema(Schema):
    hours = fields.Int(load_default=24, validate=validate.Range(min=1, max=24 * 90))


class MarketSummaryResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.Nested(MarketSummarySchema)


class MarketHistoryResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.List(fields.Nested(MarketSummarySchema))
    count = fields.Int()
    hours = fields.Int()


class MarketStatsSchema(Schema):
    latest = fields.Nested(MarketSummarySchema, allow_none=True)
    total_records = fields.Int()
    has_data = fields.Boolean()
    stock_count = fields.Int()
    sector_count = fields.Int()
    sectors = fields.List(fields.Str())


class MarketStatsResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.Nested(MarketStatsSchema)


class MoverSchema(Schema):
    symbol = fields.Str()
    name = fields.Str(allow_none=True)
    ltp = fields.Float(allow_none=True)
    change = fields.Float(allow_none=True)
    change_percent = fields.Float(allow_none=True)
    volume = fields.Int(allow_none=True)
    turnover = fields.Float(allow_none=True)
    trades = fields.Int(allow_none=True)


class TopMoversSchema(Schema):
    turnover = fields.List(fields.Nested(MoverSchema))
    trade = fields.List(fields.Nested(MoverSchema))
    volume = fields.List(fields.Nested(MoverSchema))
    gainers = fields.List(fields.Nested(MoverSchema))
    losers = fields.List(fields.Nested(MoverSchema))
    updated_at = fields.Str()


class TopMoversResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.Nested(TopMoversSchema)
