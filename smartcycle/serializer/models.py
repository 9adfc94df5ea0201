"""
Model Serializers
-----------------

Defines serializers for the various models in the system.
"""

from marshmallow import Schema, validates_schema, ValidationError
from marshmallow.fields import Integer, Boolean, String, Email, Nested, DateTime, Date, Float, Url
from marshmallow.validate import Length, Range, Regexp

from smartcycle.models import CycleStatus, CycleCondition, RideStatus, UserRole
from .fields import EnumField, Many


class CoordinatesSchema(Schema):
    latitude = Float(required=True, validate=Range(min=-90, max=90))
    longitude = Float(required=True, validate=Range(min=-180, max=180))


class StationSummarySchema(Schema):
    id = Integer()
    name = String()
    location = String()


class StationSchema(Schema):
    """The schema corresponding to the :class:`~smartcycle.models.station.Station` model."""

    id = Integer()
    url = Url(relative=True)
    name = String(required=True, validate=Length(min=2, max=100))
    location = String(required=True, validate=Length(min=1, max=255))
    description = String(allow_none=True, validate=Length(max=500))
    capacity = Integer(validate=Range(min=1))
    coordinates = Nested(CoordinatesSchema(), required=True)
    is_active = Boolean()

    available_cycles = Integer()
    total_cycles = Integer()

    created_at = DateTime()
    updated_at = DateTime()


class CycleSummarySchema(Schema):
    identifier = String()
    model = String()
    color = String()


class CycleSchema(Schema):
    """The schema corresponding to the :class:`~smartcycle.models.cycle.Cycle` model."""

    id = Integer()
    url = Url(relative=True)
    identifier = String(required=True, validate=Length(min=1, max=64))

    station = Nested(StationSummarySchema())
    station_id = Integer(required=True)
    station_url = Url(relative=True)

    status = EnumField(CycleStatus)
    model = String(required=True, validate=Length(min=1, max=100))
    color = String(validate=Length(min=1, max=50))
    condition = EnumField(CycleCondition)
    last_maintenance = DateTime()
    qr_code = String(allow_none=True)
    is_active = Boolean()

    created_at = DateTime()
    updated_at = DateTime()


class UserSchema(Schema):
    """The schema corresponding to the :class:`~smartcycle.models.user.User` model."""

    id = Integer()
    auth_id = String()
    name = String(required=True, validate=Length(min=2, max=255))
    email = Email(required=True)
    phone = String(allow_none=True, validate=Regexp(r"^[0-9]{10}$", error="Phone number must be 10 digits."))
    role = EnumField(UserRole)
    is_active = Boolean()
    created_at = DateTime()


class UserSummarySchema(Schema):
    id = Integer()
    name = String()
    email = String()


class FeedbackSchema(Schema):
    rating = Integer(validate=Range(min=1, max=5))
    comment = String(validate=Length(max=500))


class RideSchema(Schema):
    """The schema corresponding to the :class:`~smartcycle.models.ride.Ride` model."""

    id = Integer(required=True)

    user_id = Integer()
    user_url = Url(relative=True)

    cycle = Nested(CycleSummarySchema())
    cycle_id = Integer()
    cycle_url = Url(relative=True)

    start_station = Nested(StationSummarySchema())
    start_station_id = Integer()
    end_station = Nested(StationSummarySchema(), allow_none=True)
    end_station_id = Integer(allow_none=True)

    start_time = DateTime(required=True)
    end_time = DateTime(allow_none=True)
    duration = Integer()
    formatted_duration = String()
    cost = Float()

    status = EnumField(RideStatus, required=True)
    is_active = Boolean(required=True)
    feedback = Nested(FeedbackSchema(), allow_none=True)

    @validates_schema
    def assert_end_time_with_status(self, data, **kwargs):
        """
        Asserts that a ride that has ended includes its end time.
        """
        if data["status"] in RideStatus.terminating_types() and data.get("end_time") is None:
            raise ValidationError("A ride that has ended must include its end time.")

    @validates_schema
    def assert_url_included_with_foreign_key(self, data, **kwargs):
        """
        Asserts that when a user_id or cycle_id is sent that a user_url or cycle_url is sent with it.
        """
        if "user_id" in data and "user_url" not in data:
            raise ValidationError("User ID was included, but User URL was not.")
        if "cycle_id" in data and "cycle_url" not in data:
            raise ValidationError("Cycle ID was included, but Cycle URL was not.")


class PaginationInfoSchema(Schema):
    page = Integer(required=True)
    limit = Integer(required=True)
    total = Integer(required=True)
    pages = Integer(required=True)


class RideStatsSchema(Schema):
    total_rides = Integer(required=True)
    total_duration = Integer(required=True)
    total_cost = Float(required=True)
    avg_duration = Float(required=True)


class CycleCountsSchema(Schema):
    total = Integer()
    available = Integer()
    in_use = Integer()
    maintenance = Integer()
    out_of_service = Integer()


class StationRideStatsSchema(Schema):
    total_rides = Integer()
    total_duration = Integer()
    avg_duration = Float()


class StationStatsSchema(Schema):
    station = Nested(StationSchema())
    cycles = Nested(CycleCountsSchema())
    rides = Nested(StationRideStatsSchema())


class DashboardStatsSchema(Schema):
    total_users = Integer()
    total_stations = Integer()
    total_cycles = Integer()
    total_rides = Integer()
    active_rides = Integer()
    today_rides = Integer()
    total_revenue = Float()


class RecentActivitySchema(Schema):
    rides = Many(RideSchema())
    users = Many(UserSchema())


class DashboardSchema(Schema):
    stats = Nested(DashboardStatsSchema())
    recent_activity = Nested(RecentActivitySchema())


class AnalyticsSummarySchema(Schema):
    total_rides = Integer()
    total_duration = Integer()
    total_revenue = Float()
    average_duration = Float()


class DailyRidesSchema(Schema):
    date = Date()
    rides = Integer()
    duration = Integer()
    revenue = Float()


class AnalyticsSchema(Schema):
    period = String()
    start_date = DateTime()
    summary = Nested(AnalyticsSummarySchema())
    rides_by_date = Many(DailyRidesSchema())
    rides = Many(RideSchema())


class ReportSummarySchema(Schema):
    total_rides = Integer()
    total_users = Integer()
    total_stations = Integer()
    total_cycles = Integer()
    total_revenue = Float()


class UserUsageSchema(Schema):
    user = Nested(UserSummarySchema())
    rides = Integer()
    total_duration = Integer()
    total_spent = Float()


class StationUsageSchema(Schema):
    station = Nested(StationSummarySchema())
    rides = Integer()


class ReportSchema(Schema):
    summary = Nested(ReportSummarySchema())
    top_users = Many(UserUsageSchema())
    top_stations = Many(StationUsageSchema())