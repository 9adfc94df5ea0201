"""
Stations
--------

Handles the CRUD for stations. Stations are never removed,
only deactivated, so every read filters on ``is_active``
unless told otherwise.
"""
from collections import defaultdict
from typing import Optional, List, Dict

from tortoise.functions import Count

from smartcycle.models import Station, Cycle, CycleStatus


async def get_stations(*, include_inactive=False) -> List[Station]:
    """Gets all the stations, in order of creation."""
    query = Station.all() if include_inactive else Station.filter(is_active=True)
    return await query.order_by("id")


async def get_station(station_id: int, *, include_inactive=False) -> Optional[Station]:
    """
    Gets a single station.

    :param station_id: The id of the station to get.
    :param include_inactive: Whether to also find deactivated stations.
    """
    query = Station.filter(id=station_id)
    if not include_inactive:
        query = query.filter(is_active=True)
    return await query.first()


async def get_cycle_counts(*station_ids: int) -> Dict[int, Dict[CycleStatus, int]]:
    """
    Counts the active cycles homed at each station, by status.

    :param station_ids: The stations to count for. If none are given, counts for all of them.
    :return: A mapping of station id to a mapping of status to count.
    """
    query = Cycle.filter(is_active=True)
    if station_ids:
        query = query.filter(station_id__in=station_ids)

    rows = await query.annotate(count=Count("id")).group_by("station_id", "status").values(
        "station_id", "status", "count"
    )

    counts: Dict[int, Dict[CycleStatus, int]] = defaultdict(lambda: defaultdict(int))
    for row in rows:
        counts[row["station_id"]][CycleStatus(row["status"])] += row["count"]
    return counts


def serialize_with_counts(station: Station, counts: Dict[int, Dict[CycleStatus, int]], router=None):
    """Serializes the station including how many of its cycles are available."""
    station_counts = counts.get(station.id, {})
    return station.serialize(
        router,
        available_cycles=station_counts.get(CycleStatus.AVAILABLE, 0),
        total_cycles=sum(station_counts.values()),
    )


async def create_station(
    *, name: str, location: str, coordinates: Dict[str, float], description: str = None, capacity: int = 10
) -> Station:
    return await Station.create(
        name=name,
        location=location,
        description=description,
        capacity=capacity,
        latitude=coordinates["latitude"],
        longitude=coordinates["longitude"],
    )


async def update_station(station: Station, **fields) -> Station:
    """
    Updates the supplied fields of a station.

    Coordinates are supplied as a ``{latitude, longitude}`` mapping, either of which may be missing.
    """
    coordinates = fields.pop("coordinates", None) or {}
    for key in ("latitude", "longitude"):
        if key in coordinates:
            fields[key] = coordinates[key]

    for key, value in fields.items():
        setattr(station, key, value)

    if fields:
        await station.save(update_fields=[*fields, "updated_at"])
    return station


async def delete_station(station: Station) -> Station:
    """Deactivates the station."""
    station.is_active = False
    await station.save(update_fields=["is_active", "updated_at"])
    return station


async def get_available_cycles(station: Station) -> List[Cycle]:
    """Gets the cycles at the station that are ready to ride."""
    return await Cycle.filter(
        station_id=station.id, is_active=True, status=CycleStatus.AVAILABLE
    ).order_by("identifier")


async def count_stations() -> Dict[str, int]:
    """Counts every station and cycle on record, deactivated ones included."""
    return {
        "total_stations": await Station.all().count(),
        "total_cycles": await Cycle.all().count(),
    }
