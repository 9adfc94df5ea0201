"""
Cycle Related Views
-------------------

Handles the cycle CRUD. The ``qr`` view resolves the identifier
read from a scanned QR code, so that a client can show the cycle
before the ride is started.
"""
from http import HTTPStatus

from smartcycle.models import Cycle, User
from smartcycle.permissions import requires, UserIsAdmin
from smartcycle.serializer import EnvelopeSchema, Many, expects, expects_query, returns
from smartcycle.serializer.envelope import failure
from smartcycle.serializer.misc import CycleStatusSchema, CycleFilterSchema
from smartcycle.serializer.models import CycleSchema, PaginationInfoSchema
from smartcycle.service.access.cycles import get_cycles, get_cycle, create_cycle, update_cycle, set_cycle_status, \
    delete_cycle, CycleExistsError, CycleStatusError
from smartcycle.service.access.stations import get_station
from smartcycle.service.access.users import get_user
from smartcycle.views.base import BaseView, error_outputs
from smartcycle.views.decorators import match_getter, GetFrom

with_caller = match_getter(get_user, 'user', auth_id=GetFrom.AUTH_HEADER)


def station_missing(station_id: int):
    return "not_found", failure("Station not found.", errors=[
        {"kind": "not_found", "message": f"There is no station with id {station_id}."}
    ])


class CyclesView(BaseView):
    """
    Gets or adds to the list of cycles.
    """
    url = "/cycles"
    name = "cycles"

    @expects_query(CycleFilterSchema())
    @returns(EnvelopeSchema.of(cycles=Many(CycleSchema()), pagination=PaginationInfoSchema()))
    async def get(self):
        cycles, pagination = await get_cycles(**self.request["query"])
        return {
            "success": True,
            "data": {
                "cycles": [cycle.serialize(self.request.app.router) for cycle in cycles],
                "pagination": pagination
            }
        }

    @with_caller
    @requires(UserIsAdmin())
    @expects(CycleSchema(only=("identifier", "station_id", "model", "color", "condition")))
    @returns(
        ok=(EnvelopeSchema.of(cycle=CycleSchema()), HTTPStatus.CREATED),
        **error_outputs("conflict", "not_found")
    )
    async def post(self, user: User):
        data = dict(self.request["data"])
        station_id = data.pop("station_id")
        station = await get_station(station_id)
        if station is None:
            return station_missing(station_id)

        try:
            cycle = await create_cycle(station=station, **data)
        except CycleExistsError as error:
            return self.service_error(error)

        return "ok", {
            "success": True,
            "message": "Cycle created successfully.",
            "data": {"cycle": cycle.serialize(self.request.app.router, include_qr_code=True)}
        }


class CycleView(BaseView):
    """
    Gets, updates or deactivates a single cycle.
    """
    url = "/cycles/{id:[0-9]+}"
    name = "cycle"
    with_cycle = match_getter(get_cycle, 'cycle', cycle_id='id')

    @with_cycle
    @returns(EnvelopeSchema.of(cycle=CycleSchema()))
    async def get(self, cycle: Cycle):
        return {
            "success": True,
            "data": {"cycle": cycle.serialize(self.request.app.router, include_qr_code=True)}
        }

    @with_caller
    @with_cycle
    @requires(UserIsAdmin())
    @expects(CycleSchema(only=("station_id", "model", "color", "condition"), partial=True))
    @returns(
        ok=EnvelopeSchema.of(cycle=CycleSchema()),
        **error_outputs("not_found")
    )
    async def put(self, user: User, cycle: Cycle):
        data = dict(self.request["data"])
        if "station_id" in data:
            station_id = data.pop("station_id")
            data["station"] = await get_station(station_id)
            if data["station"] is None:
                return station_missing(station_id)

        cycle = await update_cycle(cycle, **data)
        return "ok", {
            "success": True,
            "message": "Cycle updated successfully.",
            "data": {"cycle": cycle.serialize(self.request.app.router)}
        }

    @with_caller
    @with_cycle
    @requires(UserIsAdmin())
    @returns(
        ok=EnvelopeSchema(),
        **error_outputs("invalid_state")
    )
    async def delete(self, user: User, cycle: Cycle):
        try:
            await delete_cycle(cycle)
        except CycleStatusError as error:
            return self.service_error(error)

        return "ok", {"success": True, "message": "Cycle deactivated successfully."}


class CycleStatusView(BaseView):
    """
    Moves a cycle in or out of maintenance.
    """
    url = "/cycles/{id:[0-9]+}/status"
    name = "cycle_status"
    with_cycle = match_getter(get_cycle, 'cycle', cycle_id='id')

    @with_caller
    @with_cycle
    @requires(UserIsAdmin())
    @expects(CycleStatusSchema())
    @returns(
        ok=EnvelopeSchema.of(cycle=CycleSchema()),
        **error_outputs("invalid_state")
    )
    async def patch(self, user: User, cycle: Cycle):
        try:
            cycle = await set_cycle_status(cycle, self.request["data"]["status"])
        except CycleStatusError as error:
            return self.service_error(error)

        return "ok", {
            "success": True,
            "message": "Cycle status updated successfully.",
            "data": {"cycle": cycle.serialize(self.request.app.router)}
        }


class CycleQRView(BaseView):
    """
    Gets the cycle with the scanned identifier.
    """
    url = "/cycles/qr/{identifier}"
    name = "cycle_qr"
    with_cycle = match_getter(get_cycle, 'cycle', identifier=('identifier', str))

    @with_cycle
    @returns(EnvelopeSchema.of(cycle=CycleSchema()))
    async def get(self, cycle: Cycle):
        return {
            "success": True,
            "data": {"cycle": cycle.serialize(self.request.app.router)}
        }
