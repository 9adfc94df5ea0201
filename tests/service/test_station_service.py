from smartcycle.models import CycleStatus
from smartcycle.service.access.stations import get_stations, get_station, create_station, update_station, \
    delete_station, get_cycle_counts, get_available_cycles, serialize_with_counts, count_stations


async def test_create_station(database):
    station = await create_station(
        name="Main Campus Station", location="Near Main Library",
        coordinates={"latitude": 40.7128, "longitude": -74.0060}, capacity=15
    )

    assert station.capacity == 15
    assert station.serialize()["coordinates"] == {"latitude": 40.7128, "longitude": -74.0060}


async def test_update_station_partial_coordinates(random_station):
    longitude = random_station.longitude
    station = await update_station(random_station, name="Renamed", coordinates={"latitude": 10.0})

    station = await get_station(station.id)
    assert station.name == "Renamed"
    assert station.latitude == 10.0
    assert station.longitude == longitude


async def test_update_deleted_station(random_station):
    """Assert that editing a station loaded before it was deleted keeps it deactivated."""
    await delete_station(await get_station(random_station.id))
    await update_station(random_station, name="Renamed")

    station = await get_station(random_station.id, include_inactive=True)
    assert station.name == "Renamed"
    assert not station.is_active


async def test_delete_station(random_station, other_station):
    """Assert that a deleted station is hidden rather than removed."""
    await delete_station(random_station)

    assert await get_station(random_station.id) is None
    assert await get_station(random_station.id, include_inactive=True) is not None
    assert [station.id for station in await get_stations()] == [other_station.id]
    assert len(await get_stations(include_inactive=True)) == 2


async def test_cycle_counts(random_station, other_station, random_cycle_factory):
    await random_cycle_factory(random_station)
    await random_cycle_factory(random_station)
    await random_cycle_factory(random_station, status=CycleStatus.MAINTENANCE)
    await random_cycle_factory(random_station, is_active=False)
    await random_cycle_factory(other_station, status=CycleStatus.OUT_OF_SERVICE)

    counts = await get_cycle_counts()
    assert counts[random_station.id][CycleStatus.AVAILABLE] == 2
    assert counts[random_station.id][CycleStatus.MAINTENANCE] == 1
    assert counts[other_station.id][CycleStatus.OUT_OF_SERVICE] == 1

    data = serialize_with_counts(random_station, counts)
    assert data["available_cycles"] == 2
    assert data["total_cycles"] == 3

    assert serialize_with_counts(other_station, await get_cycle_counts(random_station.id))["total_cycles"] == 0


async def test_available_cycles(random_station, random_cycle_factory, ride_manager, random_user):
    """Assert that only cycles ready to ride are listed."""
    ridden = await random_cycle_factory(random_station)
    available = await random_cycle_factory(random_station)
    await random_cycle_factory(random_station, status=CycleStatus.MAINTENANCE)
    await ride_manager.start(random_user, ridden.identifier, random_station.id)

    assert [cycle.id for cycle in await get_available_cycles(random_station)] == [available.id]


async def test_count_stations(random_station, other_station, random_cycle_factory):
    await random_cycle_factory(random_station)
    await random_cycle_factory(other_station)
    await delete_station(other_station)

    assert await count_stations() == {"total_stations": 2, "total_cycles": 2}
