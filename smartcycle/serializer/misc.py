"""
Request Serializers
-------------------

Schemas for the bodies and query strings of requests that
do not map directly onto a model.
"""

from marshmallow import Schema, validates_schema, ValidationError
from marshmallow.fields import Integer, String, Nested, Date
from marshmallow.validate import Length, Range, OneOf

from smartcycle.models import CycleStatus
from smartcycle.serializer import EnumField
from smartcycle.serializer.models import FeedbackSchema

ANALYTICS_PERIODS = {"1d": 1, "7d": 7, "30d": 30, "90d": 90}


class RideStartSchema(Schema):
    """The schema of the ride start request."""
    cycle_identifier = String(required=True, validate=Length(min=1), metadata={"description": "The scanned QR code."})
    station_id = Integer(required=True, metadata={"description": "The station the ride starts from."})


class RideEndSchema(RideStartSchema):
    """The schema of the ride end request."""
    feedback = Nested(FeedbackSchema())


class CycleStatusSchema(Schema):
    status = EnumField(CycleStatus, required=True)


class PaginationSchema(Schema):
    page = Integer(load_default=1, validate=Range(min=1))
    limit = Integer(load_default=10, validate=Range(min=1, max=100))


class CycleFilterSchema(PaginationSchema):
    status = EnumField(CycleStatus)
    station_id = Integer()


class AnalyticsQuerySchema(Schema):
    period = String(load_default="7d", validate=OneOf(ANALYTICS_PERIODS))


class ReportQuerySchema(Schema):
    start_date = Date()
    end_date = Date()

    @validates_schema
    def assert_complete_range(self, data, **kwargs):
        """Asserts that a date range is either fully supplied or not at all."""
        if ("start_date" in data) != ("end_date" in data):
            raise ValidationError("Both start_date and end_date must be supplied together.")
        if "start_date" in data and data["start_date"] > data["end_date"]:
            raise ValidationError("The start_date must not be after the end_date.")
