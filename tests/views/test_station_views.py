from aiohttp.test_utils import TestClient

from smartcycle.models import Station, User
from smartcycle.serializer import EnvelopeSchema, Many
from smartcycle.serializer.models import StationSchema, CycleSchema, StationStatsSchema


def auth(user: User):
    return {"Authorization": f"Bearer {user.auth_id}"}


NEW_STATION = {
    "name": "Main Campus Station",
    "location": "Near Main Library",
    "description": "Primary station for campus access",
    "capacity": 15,
    "coordinates": {"latitude": 40.7128, "longitude": -74.0060},
}


class TestStationsView:

    async def test_get_stations(self, client: TestClient, random_station, random_cycle_factory,
                                random_station_factory):
        """Assert that anyone can list the active stations with their cycle counts."""
        await random_cycle_factory(random_station)
        await random_station_factory(is_active=False)

        response_schema = EnvelopeSchema.of(stations=Many(StationSchema()))
        response = await client.get('/api/v1/stations')

        stations = response_schema.load(await response.json())["data"]["stations"]
        assert len(stations) == 1
        assert stations[0]["id"] == random_station.id
        assert stations[0]["available_cycles"] == 1
        assert stations[0]["total_cycles"] == 1
        assert stations[0]["url"] == f"/api/v1/stations/{random_station.id}"

    async def test_create_station(self, client: TestClient, random_admin):
        response = await client.post('/api/v1/stations', json=NEW_STATION, headers=auth(random_admin))

        assert response.status == 201
        station = EnvelopeSchema.of(station=StationSchema()).load(await response.json())["data"]["station"]
        assert station["name"] == NEW_STATION["name"]
        assert station["coordinates"] == NEW_STATION["coordinates"]
        assert await Station.all().count() == 1

    async def test_create_station_not_admin(self, client: TestClient, random_user):
        """Assert that only administrators may create stations."""
        response = await client.post('/api/v1/stations', json=NEW_STATION, headers=auth(random_user))

        assert response.status == 403
        assert await Station.all().count() == 0

    async def test_create_station_no_token(self, client: TestClient, database):
        response = await client.post('/api/v1/stations', json=NEW_STATION)
        assert response.status == 401

    async def test_create_station_bad_coordinates(self, client: TestClient, random_admin):
        data = dict(NEW_STATION, coordinates={"latitude": 100, "longitude": 0})
        response = await client.post('/api/v1/stations', json=data, headers=auth(random_admin))

        assert response.status == 400
        assert "coordinates" in (await response.json())["errors"]


class TestStationView:

    async def test_get_station(self, client: TestClient, random_station):
        response = await client.get(f'/api/v1/stations/{random_station.id}')

        station = EnvelopeSchema.of(station=StationSchema()).load(await response.json())["data"]["station"]
        assert station["name"] == random_station.name
        assert station["total_cycles"] == 0

    async def test_get_missing_station(self, client: TestClient, database):
        response = await client.get('/api/v1/stations/9999')

        assert response.status == 404
        response_data = await response.json()
        assert not response_data["success"]
        assert response_data["errors"][0]["kind"] == "not_found"

    async def test_update_station(self, client: TestClient, random_admin, random_station):
        """Assert that a station can be partially updated."""
        response = await client.put(f'/api/v1/stations/{random_station.id}', json={"capacity": 20},
                                    headers=auth(random_admin))

        station = EnvelopeSchema.of(station=StationSchema()).load(await response.json())["data"]["station"]
        assert station["capacity"] == 20
        assert station["name"] == random_station.name

    async def test_delete_station(self, client: TestClient, random_admin, random_station):
        """Assert that a deleted station is no longer found."""
        response = await client.delete(f'/api/v1/stations/{random_station.id}', headers=auth(random_admin))
        assert response.status == 200
        assert (await response.json())["message"] == "Station deactivated successfully."

        response = await client.get(f'/api/v1/stations/{random_station.id}')
        assert response.status == 404
        assert await Station.filter(id=random_station.id).exists()


class TestStationCyclesView:

    async def test_get_available_cycles(self, client: TestClient, ride_manager, random_user, random_station,
                                        random_cycle_factory):
        ridden = await random_cycle_factory(random_station)
        available = await random_cycle_factory(random_station)
        await ride_manager.start(random_user, ridden.identifier, random_station.id)

        response = await client.get(f'/api/v1/stations/{random_station.id}/cycles')

        cycles = EnvelopeSchema.of(cycles=Many(CycleSchema())).load(await response.json())["data"]["cycles"]
        assert [cycle["identifier"] for cycle in cycles] == [available.identifier]


class TestStationStatsView:

    async def test_get_stats(self, client: TestClient, random_admin, random_station, random_cycle):
        response = await client.get(f'/api/v1/stations/{random_station.id}/stats', headers=auth(random_admin))

        stats = EnvelopeSchema.of(stats=StationStatsSchema()).load(await response.json())["data"]["stats"]
        assert stats["cycles"]["available"] == 1
        assert stats["rides"]["total_rides"] == 0

    async def test_get_stats_not_admin(self, client: TestClient, random_user, random_station):
        response = await client.get(f'/api/v1/stations/{random_station.id}/stats', headers=auth(random_user))
        assert response.status == 403


class TestStationCountsView:

    async def test_get_counts(self, client: TestClient, random_station, random_station_factory,
                              random_cycle_factory):
        """Assert that anyone can count the stations and cycles on record."""
        await random_cycle_factory(random_station)
        await random_cycle_factory(random_station, is_active=False)
        await random_station_factory(is_active=False)

        response = await client.get('/api/v1/stations/stats')

        assert response.status == 200
        response_data = (await response.json())["data"]
        assert response_data == {"total_stations": 2, "total_cycles": 2}

    async def test_get_counts_empty(self, client: TestClient, database):
        response = await client.get('/api/v1/stations/stats')

        assert response.status == 200
        assert (await response.json())["data"] == {"total_stations": 0, "total_cycles": 0}
