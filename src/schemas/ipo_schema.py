from marshmallow import Schema, fields, validate

IPO_STATUSES = ["upcoming", "open", "closed", "completed"]


class IPOSchema(Schema):
    key = fields.Str(metadata={"example": "sanima_hydropower_ltd"})
    company_name = fields.Str(required=True)
    sector = fields.Str()
    share_registrar = fields.Str()
    issue_manager = fields.Str()
    price_min = fields.Float()
    price_max = fields.Float()
    total_shares = fields.Int()
    status = fields.Str(validate=validate.OneOf(IPO_STATUSES))
    announcement_date = fields.Str(allow_none=True)
    opening_date = fields.Str(allow_none=True)
    closing_date = fields.Str(allow_none=True)
    result_date = fields.Str(allow_none=True)
    allotment_date = fields.Str(allow_none=True)
    subscription_ratio = fields.Float()
    minimum_shares = fields.Int()
    maximum_shares = fields.Int()
    issued_shares = fields.Int()
    updated_at = fields.Str()


class IPOListQuerySchema(Schema):
    skip = fields.Int(load_default=0, validate=validate.Range(min=0))
    limit = fields.Int(load_default=100, validate=validate.Range(min=1, max=1000))
    status = fields.Str(load_default=None, validate=validate.OneOf(IPO_STATUSES))


class IPOCountsSchema(Schema):
    upcoming = fields.Int()
    open = fields.Int()
    closed = fields.Int()
    completed = fields.Int()
    total = fields.Int()


class IPOResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.Nested(IPOSchema)


class IPOListResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.List(fields.Nested(IPOSchema))
    count = fields.Int()
    statistics = fields.Nested(IPOCountsSchema)
    query = fields.Str()
    status = fields.Str()


class IPOCountsResponseSchema(Schema):
    success = fields.Boolean()
    data = fields.Nested(IPOCountsSchema)
