"""
Station Related Views
---------------------

Anyone may browse the stations and the cycles ready to ride at them,
only administrators may change them.
"""
from http import HTTPStatus

from marshmallow.fields import Integer

from smartcycle.models import Station, User
from smartcycle.permissions import requires, UserIsAdmin
from smartcycle.serializer import EnvelopeSchema, Many, expects, returns
from smartcycle.serializer.models import StationSchema, CycleSchema, StationStatsSchema
from smartcycle.service.access.stations import get_stations, get_station, create_station, update_station, \
    delete_station, get_available_cycles, get_cycle_counts, serialize_with_counts, count_stations
from smartcycle.service.access.users import get_user
from smartcycle.service.reports import get_station_stats
from smartcycle.views.base import BaseView
from smartcycle.views.decorators import match_getter, GetFrom

STATION_FIELDS = ("name", "location", "description", "capacity", "coordinates")

with_caller = match_getter(get_user, 'user', auth_id=GetFrom.AUTH_HEADER)


class StationsView(BaseView):
    """
    Gets or adds to the list of stations.
    """
    url = "/stations"
    name = "stations"

    @returns(EnvelopeSchema.of(stations=Many(StationSchema())))
    async def get(self):
        stations = await get_stations()
        counts = await get_cycle_counts()
        return {
            "success": True,
            "data": {
                "stations": [serialize_with_counts(station, counts, self.request.app.router) for station in stations]
            }
        }

    @with_caller
    @requires(UserIsAdmin())
    @expects(StationSchema(only=STATION_FIELDS))
    @returns(EnvelopeSchema.of(station=StationSchema()), HTTPStatus.CREATED)
    async def post(self, user: User):
        station = await create_station(**self.request["data"])
        return {
            "success": True,
            "message": "Station created successfully.",
            "data": {"station": station.serialize(self.request.app.router, available_cycles=0, total_cycles=0)}
        }


class StationView(BaseView):
    """
    Gets, updates or deactivates a single station.
    """
    url = "/stations/{id:[0-9]+}"
    name = "station"
    with_station = match_getter(get_station, 'station', station_id='id')

    @with_station
    @returns(EnvelopeSchema.of(station=StationSchema()))
    async def get(self, station: Station):
        counts = await get_cycle_counts(station.id)
        return {
            "success": True,
            "data": {"station": serialize_with_counts(station, counts, self.request.app.router)}
        }

    @with_caller
    @with_station
    @requires(UserIsAdmin())
    @expects(StationSchema(only=STATION_FIELDS, partial=True))
    @returns(EnvelopeSchema.of(station=StationSchema()))
    async def put(self, user: User, station: Station):
        station = await update_station(station, **self.request["data"])
        counts = await get_cycle_counts(station.id)
        return {
            "success": True,
            "message": "Station updated successfully.",
            "data": {"station": serialize_with_counts(station, counts, self.request.app.router)}
        }

    @with_caller
    @with_station
    @requires(UserIsAdmin())
    @returns(EnvelopeSchema())
    async def delete(self, user: User, station: Station):
        await delete_station(station)
        return {"success": True, "message": "Station deactivated successfully."}


class StationCyclesView(BaseView):
    """
    Gets the cycles ready to ride at a station.
    """
    url = "/stations/{id:[0-9]+}/cycles"
    name = "station_cycles"
    with_station = match_getter(get_station, 'station', station_id='id')

    @with_station
    @returns(EnvelopeSchema.of(cycles=Many(CycleSchema())))
    async def get(self, station: Station):
        cycles = await get_available_cycles(station)
        return {
            "success": True,
            "data": {"cycles": [cycle.serialize(self.request.app.router) for cycle in cycles]}
        }


class StationStatsView(BaseView):
    """
    Gets the cycle counts and ride totals of a station.
    """
    url = "/stations/{id:[0-9]+}/stats"
    name = "station_stats"
    with_station = match_getter(get_station, 'station', station_id='id')

    @with_caller
    @with_station
    @requires(UserIsAdmin())
    @returns(EnvelopeSchema.of(stats=StationStatsSchema()))
    async def get(self, user: User, station: Station):
        return {
            "success": True,
            "data": {"stats": await get_station_stats(station, self.request.app.router)}
        }


class StationCountsView(BaseView):
    """
    Gets how many stations and cycles are on record.
    """
    url = "/stations/stats"
    name = "stations_stats"

    @returns(EnvelopeSchema.of(total_stations=Integer(), total_cycles=Integer()))
    async def get(self):
        return {
            "success": True,
            "data": await count_stations()
        }
