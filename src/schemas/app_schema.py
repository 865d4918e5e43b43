from marshmallow import Schema, fields


class MessageSchema(Schema):
    success = fields.Boolean()
    message = fields.Str()
    timestamp = fields.Str()


class MarketHoursSchema(Schema):
    open = fields.Str(metadata={"example": "11:00"})
    close = fields.Str(metadata={"example": "15:00"})


class SchedulerStatusSchema(Schema):
    is_running = fields.Boolean()
    is_market_open = fields.Boolean()
    market_state = fields.Str()
    last_update_time = fields.Str(allow_none=True)
    update_count = fields.Int()
    last_error = fields.Str(allow_none=True)
    current_nst = fields.Str()
    market_hours = fields.Nested(MarketHoursSchema)
    current_interval = fields.Int(allow_none=True)
    data_source = fields.Str(allow_none=True)


class SchedulerStatusResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.Nested(SchedulerStatusSchema)


class TimeSyncSchema(Schema):
    synced = fields.Boolean()
    source = fields.Str(allow_none=True)
    last_sync_age = fields.Str()
    offset_ms = fields.Int()
    offset_seconds = fields.Int()
    nepse_time = fields.Str()
    nepse_day = fields.Str()
    market_state = fields.Str()
    market_hours = fields.Nested(MarketHoursSchema)


class TimeSyncResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.Nested(TimeSyncSchema)


class ServerInfoSchema(Schema):
    uptime = fields.Int()
    uptime_formatted = fields.Str()
    environment = fields.Str()


class SchedulerHealthSchema(Schema):
    is_running = fields.Boolean()
    last_update = fields.Str(allow_none=True)
    update_count = fields.Int()
    last_error = fields.Str(allow_none=True)


class MarketHealthSchema(Schema):
    is_open = fields.Boolean()
    state = fields.Str()
    current_nst = fields.Str()
    hours = fields.Nested(MarketHoursSchema)


class DataHealthSchema(Schema):
    source = fields.Str(allow_none=True)
    stock_count = fields.Int()
    has_market_data = fields.Boolean()
    is_healthy = fields.Boolean()
    consecutive_failures = fields.Int()


class HealthSchema(Schema):
    success = fields.Boolean()
    status = fields.Str(metadata={"example": "running"})
    server = fields.Nested(ServerInfoSchema)
    scheduler = fields.Nested(SchedulerHealthSchema)
    market = fields.Nested(MarketHealthSchema)
    data = fields.Nested(DataHealthSchema)
