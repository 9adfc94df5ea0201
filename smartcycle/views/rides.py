"""
Ride Related Views
---------------------

The rides of the authenticated user. A ride is started and
ended by scanning the QR code on a cycle, which supplies the
``cycle_identifier`` of these requests.
"""
from http import HTTPStatus

from smartcycle.models import User
from smartcycle.permissions import requires, UserIsActive
from smartcycle.serializer import EnvelopeSchema, Many, expects, expects_query, returns
from smartcycle.serializer.misc import RideStartSchema, RideEndSchema, PaginationSchema
from smartcycle.serializer.models import RideSchema, PaginationInfoSchema, RideStatsSchema
from smartcycle.service import RideError
from smartcycle.service.access.rides import get_ride_history, get_user_stats
from smartcycle.service.access.users import get_user
from smartcycle.views.base import BaseView, error_outputs
from smartcycle.views.decorators import match_getter, GetFrom

with_caller = match_getter(get_user, 'user', auth_id=GetFrom.AUTH_HEADER)


class RideStartView(BaseView):
    """
    Starts a ride on the scanned cycle.
    """
    url = "/rides/start"
    name = "ride_start"

    @with_caller
    @requires(UserIsActive())
    @expects(RideStartSchema())
    @returns(
        ok=(EnvelopeSchema.of(ride=RideSchema()), HTTPStatus.CREATED),
        **error_outputs("conflict", "invalid_state", "not_found")
    )
    async def post(self, user: User):
        try:
            ride = await self.ride_manager.start(user, **self.request["data"])
        except RideError as error:
            return self.service_error(error)

        return "ok", {
            "success": True,
            "message": "Ride started successfully.",
            "data": {"ride": ride.serialize(self.request.app.router)}
        }


class RideEndView(BaseView):
    """
    Ends the active ride by scanning the cycle at the destination station.
    """
    url = "/rides/end"
    name = "ride_end"

    @with_caller
    @requires(UserIsActive())
    @expects(RideEndSchema())
    @returns(
        ok=EnvelopeSchema.of(ride=RideSchema()),
        **error_outputs("invalid_state", "not_found")
    )
    async def post(self, user: User):
        try:
            ride = await self.ride_manager.finish(user, **self.request["data"])
        except RideError as error:
            return self.service_error(error)

        return "ok", {
            "success": True,
            "message": "Ride ended successfully.",
            "data": {"ride": ride.serialize(self.request.app.router)}
        }


class RideCancelView(BaseView):
    """
    Cancels the active ride, leaving the cycle where it was picked up.
    """
    url = "/rides/cancel"
    name = "ride_cancel"

    @with_caller
    @requires(UserIsActive())
    @returns(
        ok=EnvelopeSchema.of(ride=RideSchema()),
        **error_outputs("invalid_state")
    )
    async def post(self, user: User):
        try:
            ride = await self.ride_manager.cancel(user)
        except RideError as error:
            return self.service_error(error)

        return "ok", {
            "success": True,
            "message": "Ride cancelled successfully.",
            "data": {"ride": ride.serialize(self.request.app.router)}
        }


class ActiveRideView(BaseView):
    """
    Gets the active ride, if there is one.
    """
    url = "/rides/active"
    name = "ride_active"

    @with_caller
    @requires(UserIsActive())
    @returns(EnvelopeSchema.of(ride=RideSchema()))
    async def get(self, user: User):
        ride = await self.ride_manager.active_ride(user)
        if ride is None:
            return {"success": True, "message": "No active ride.", "data": {"ride": None}}

        return {"success": True, "data": {"ride": ride.serialize(self.request.app.router)}}


class RideHistoryView(BaseView):
    """
    Gets the completed rides, most recent first.
    """
    url = "/rides/history"
    name = "ride_history"

    @with_caller
    @requires(UserIsActive())
    @expects_query(PaginationSchema())
    @returns(EnvelopeSchema.of(rides=Many(RideSchema()), pagination=PaginationInfoSchema()))
    async def get(self, user: User):
        rides, pagination = await get_ride_history(user, **self.request["query"])
        return {
            "success": True,
            "data": {
                "rides": [ride.serialize(self.request.app.router) for ride in rides],
                "pagination": pagination
            }
        }


class RideStatsView(BaseView):
    """
    Gets the totals over the completed rides.
    """
    url = "/rides/stats"
    name = "ride_stats"

    @with_caller
    @requires(UserIsActive())
    @returns(EnvelopeSchema.of(stats=RideStatsSchema()))
    async def get(self, user: User):
        return {
            "success": True,
            "data": {"stats": await get_user_stats(user)}
        }
