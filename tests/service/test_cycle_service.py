import pytest

from smartcycle.models import Cycle, CycleStatus, CycleCondition
from smartcycle.service.access.cycles import get_cycles, get_cycle, create_cycle, update_cycle, set_cycle_status, \
    delete_cycle, CycleExistsError, CycleStatusError


async def test_create_cycle(random_station):
    """Assert that a new cycle is available and carries its QR code."""
    cycle = await create_cycle(identifier="CYCLE100", station=random_station, model="Hybrid Bike")

    assert cycle.status == CycleStatus.AVAILABLE
    assert cycle.condition == CycleCondition.GOOD
    assert cycle.qr_code.startswith("data:image/svg+xml;base64,")


async def test_create_duplicate_cycle(random_cycle, random_station):
    with pytest.raises(CycleExistsError):
        await create_cycle(identifier=random_cycle.identifier, station=random_station, model="City Bike")


async def test_get_cycle_by_identifier(random_cycle):
    cycle = await get_cycle(identifier=random_cycle.identifier)
    assert cycle.id == random_cycle.id


async def test_get_cycle_requires_key(database):
    with pytest.raises(TypeError):
        await get_cycle()


async def test_get_cycles_filters(random_cycle_factory, random_station, other_station):
    """Assert that cycles can be filtered by status and station."""
    await random_cycle_factory(random_station)
    await random_cycle_factory(random_station, status=CycleStatus.MAINTENANCE)
    await random_cycle_factory(other_station)
    await random_cycle_factory(other_station, is_active=False)

    cycles, pagination = await get_cycles(station_id=random_station.id)
    assert len(cycles) == 2
    assert pagination["total"] == 2

    cycles, _ = await get_cycles(status=CycleStatus.AVAILABLE)
    assert len(cycles) == 2

    cycles, _ = await get_cycles(include_inactive=True)
    assert len(cycles) == 4


async def test_get_cycles_paginates(random_cycle_factory, random_station):
    for _ in range(5):
        await random_cycle_factory(random_station)

    cycles, pagination = await get_cycles(page=2, limit=2)

    assert [cycle.identifier for cycle in cycles] == ["CYCLE003", "CYCLE004"]
    assert pagination == {"page": 2, "limit": 2, "total": 5, "pages": 3}


async def test_update_cycle(random_cycle, other_station):
    cycle = await update_cycle(random_cycle, station=other_station, condition=CycleCondition.FAIR)
    assert (await Cycle.get(id=cycle.id)).station_id == other_station.id
    assert (await Cycle.get(id=cycle.id)).condition == CycleCondition.FAIR


async def test_update_ridden_cycle(random_ride, random_cycle):
    """Assert that editing a cycle loaded before its ride started leaves it in use."""
    await update_cycle(random_cycle, color="Red")

    cycle = await Cycle.get(id=random_cycle.id)
    assert cycle.status == CycleStatus.IN_USE
    assert cycle.color == "Red"


async def test_set_cycle_maintenance(random_cycle):
    """Assert that sending a cycle to maintenance records when it happened."""
    before = random_cycle.last_maintenance
    cycle = await set_cycle_status(random_cycle, CycleStatus.MAINTENANCE)

    assert cycle.status == CycleStatus.MAINTENANCE
    assert cycle.last_maintenance >= before


async def test_set_cycle_in_use(random_cycle):
    """Assert that a cycle cannot be put in use by hand."""
    with pytest.raises(CycleStatusError):
        await set_cycle_status(random_cycle, CycleStatus.IN_USE)


async def test_set_ridden_cycle_status(random_ride, random_cycle):
    """Assert that a cycle being ridden cannot be taken out of use by hand."""
    with pytest.raises(CycleStatusError):
        await set_cycle_status(random_cycle, CycleStatus.AVAILABLE)

    assert (await Cycle.get(id=random_cycle.id)).status == CycleStatus.IN_USE


async def test_delete_cycle(random_cycle):
    await delete_cycle(random_cycle)
    assert await get_cycle(random_cycle.id) is None
    assert await get_cycle(random_cycle.id, include_inactive=True) is not None


async def test_delete_ridden_cycle(random_ride, random_cycle):
    with pytest.raises(CycleStatusError):
        await delete_cycle(random_cycle)

    assert (await Cycle.get(id=random_cycle.id)).is_active
