"""
Admin Views
-----------

The administrator dashboard. Every view here requires a token
belonging to an active administrator.
"""
from smartcycle.models import User
from smartcycle.permissions import requires, UserIsAdmin
from smartcycle.serializer import EnvelopeSchema, Many, expects_query, returns
from smartcycle.serializer.misc import AnalyticsQuerySchema, ReportQuerySchema, CycleFilterSchema, PaginationSchema
from smartcycle.serializer.models import DashboardSchema, AnalyticsSchema, ReportSchema, StationSchema, CycleSchema, \
    UserSchema, PaginationInfoSchema
from smartcycle.service.access.cycles import get_cycles
from smartcycle.service.access.stations import get_stations, get_cycle_counts, serialize_with_counts
from smartcycle.service.access.users import get_user, get_users
from smartcycle.service.reports import get_dashboard, get_ride_analytics, get_comprehensive_report
from smartcycle.views.base import BaseView
from smartcycle.views.decorators import match_getter, GetFrom

with_admin = match_getter(get_user, 'user', auth_id=GetFrom.AUTH_HEADER)


class DashboardView(BaseView):
    url = "/admin/dashboard"
    name = "admin_dashboard"

    @with_admin
    @requires(UserIsAdmin())
    @returns(EnvelopeSchema.of(dashboard=DashboardSchema()))
    async def get(self, user: User):
        return {
            "success": True,
            "data": {"dashboard": await get_dashboard(self.request.app.router)}
        }


class RideAnalyticsView(BaseView):
    """
    Summarizes the rides started in the last day, week, month or quarter.
    """
    url = "/admin/analytics/rides"
    name = "admin_ride_analytics"

    @with_admin
    @requires(UserIsAdmin())
    @expects_query(AnalyticsQuerySchema())
    @returns(EnvelopeSchema.of(analytics=AnalyticsSchema()))
    async def get(self, user: User):
        return {
            "success": True,
            "data": {"analytics": await get_ride_analytics(self.request["query"]["period"], self.request.app.router)}
        }


class ComprehensiveReportView(BaseView):
    """
    Reports on the riders and stations, optionally between two dates.
    """
    url = "/admin/reports/comprehensive"
    name = "admin_comprehensive_report"

    @with_admin
    @requires(UserIsAdmin())
    @expects_query(ReportQuerySchema())
    @returns(EnvelopeSchema.of(report=ReportSchema()))
    async def get(self, user: User):
        return {
            "success": True,
            "data": {"report": await get_comprehensive_report(**self.request["query"])}
        }


class AdminStationsView(BaseView):
    """
    Lists every station, including the deactivated ones.
    """
    url = "/admin/stations"
    name = "admin_stations"

    @with_admin
    @requires(UserIsAdmin())
    @returns(EnvelopeSchema.of(stations=Many(StationSchema())))
    async def get(self, user: User):
        stations = await get_stations(include_inactive=True)
        counts = await get_cycle_counts()
        return {
            "success": True,
            "data": {
                "stations": [serialize_with_counts(station, counts, self.request.app.router) for station in stations]
            }
        }


class AdminCyclesView(BaseView):
    """
    Lists every cycle, including the deactivated ones.
    """
    url = "/admin/cycles"
    name = "admin_cycles"

    @with_admin
    @requires(UserIsAdmin())
    @expects_query(CycleFilterSchema())
    @returns(EnvelopeSchema.of(cycles=Many(CycleSchema()), pagination=PaginationInfoSchema()))
    async def get(self, user: User):
        cycles, pagination = await get_cycles(**self.request["query"], include_inactive=True)
        return {
            "success": True,
            "data": {
                "cycles": [cycle.serialize(self.request.app.router) for cycle in cycles],
                "pagination": pagination
            }
        }


class AdminUsersView(BaseView):
    """
    Lists every user, including the deactivated ones.
    """
    url = "/admin/users"
    name = "admin_users"

    @with_admin
    @requires(UserIsAdmin())
    @expects_query(PaginationSchema())
    @returns(EnvelopeSchema.of(users=Many(UserSchema()), pagination=PaginationInfoSchema()))
    async def get(self, user: User):
        users, pagination = await get_users(**self.request["query"], include_inactive=True)
        return {
            "success": True,
            "data": {"users": [target.serialize() for target in users], "pagination": pagination}
        }
