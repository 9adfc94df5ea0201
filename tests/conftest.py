from itertools import count

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient
from faker import Faker
from faker.providers import address, internet, misc, person
from tortoise import Tortoise

from smartcycle.config import api_root
from smartcycle.middleware import error_middleware, validate_token_middleware
from smartcycle.models import User, UserRole, Station, Cycle, Ride
from smartcycle.service.manager.ride_manager import RideManager
from smartcycle.service.verify_token import DummyVerifier
from smartcycle.signals import register_signals, MODELS
from smartcycle.views import register_views

fake = Faker()
fake.add_provider(address)
fake.add_provider(internet)
fake.add_provider(misc)
fake.add_provider(person)


@pytest.fixture
async def database():
    """Gives each test a fresh in-memory database."""
    await Tortoise.init(db_url="sqlite://:memory:", modules=MODELS)
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def random_user_factory(database):
    async def create_user(is_admin=False, is_active=True):
        return await User.create(
            auth_id=fake.sha1(), name=fake.name(), email=fake.unique.email(), phone=fake.numerify("##########"),
            role=UserRole.ADMIN if is_admin else UserRole.USER, is_active=is_active
        )

    return create_user


@pytest.fixture
def random_station_factory(database):
    async def create_station(is_active=True):
        return await Station.create(
            name=fake.street_name()[:100], location=fake.street_address(), capacity=10,
            latitude=float(fake.latitude()), longitude=float(fake.longitude()), is_active=is_active
        )

    return create_station


@pytest.fixture
def random_cycle_factory(database):
    identifier = count(1)

    async def create_cycle(station: Station, **kwargs):
        return await Cycle.create(
            identifier=f"CYCLE{next(identifier):03}", station=station, model="City Bike",
            color=fake.color_name(), **kwargs
        )

    return create_cycle


@pytest.fixture
def ride_manager(database):
    return RideManager()


@pytest.fixture
async def client(aiohttp_client, database, ride_manager) -> TestClient:
    app = web.Application(middlewares=[error_middleware, validate_token_middleware])

    app['ride_manager'] = ride_manager
    app['token_verifier'] = DummyVerifier()

    register_signals(app, manage_database=False)  # we get the database from a fixture
    register_views(app, api_root)

    return await aiohttp_client(app)


@pytest.fixture
async def random_user(random_user_factory) -> User:
    """Creates a random user in the database."""
    return await random_user_factory()


@pytest.fixture
async def random_admin(random_user_factory) -> User:
    return await random_user_factory(True)


@pytest.fixture
async def random_station(random_station_factory) -> Station:
    return await random_station_factory()


@pytest.fixture
async def other_station(random_station_factory) -> Station:
    return await random_station_factory()


@pytest.fixture
async def random_cycle(random_cycle_factory, random_station) -> Cycle:
    """Creates an available cycle at the random station."""
    return await random_cycle_factory(random_station)


@pytest.fixture
async def random_ride(ride_manager, random_user, random_cycle, random_station) -> Ride:
    """Starts a ride for the random user on the random cycle."""
    return await ride_manager.start(random_user, random_cycle.identifier, random_station.id)
