"""
Seeder
------

Loads a small set of sample stations, cycles and users, so
that a development server has something to ride. In development
the token of each sample user is its ``auth_id``.
"""
from tortoise import Tortoise
from tortoise.transactions import in_transaction

from smartcycle import logger
from smartcycle.models import User, UserRole, Station, Cycle, CycleCondition, Ride
from smartcycle.service.qr import generate_qr_code

USERS = [
    {"auth_id": "a0a0a0a0", "name": "Admin User", "email": "admin@smartcycle.com", "phone": "1234567890",
     "role": UserRole.ADMIN},
    {"auth_id": "b1b1b1b1", "name": "John Doe", "email": "john@example.com", "phone": "9876543210"},
    {"auth_id": "c2c2c2c2", "name": "Jane Smith", "email": "jane@example.com", "phone": "5555555555"},
]

STATIONS = [
    {"name": "Main Campus Station", "location": "Near Main Library",
     "description": "Primary station for campus access", "capacity": 15, "latitude": 40.7128, "longitude": -74.0060},
    {"name": "Engineering Building Station", "location": "Engineering Complex",
     "description": "Station near engineering departments", "capacity": 10, "latitude": 40.7138,
     "longitude": -74.0070},
    {"name": "Student Center Station", "location": "Student Union Building",
     "description": "Central hub for student activities", "capacity": 12, "latitude": 40.7118,
     "longitude": -74.0050},
]

CYCLES = [
    {"identifier": "CYCLE001", "model": "Mountain Bike", "color": "Blue", "condition": CycleCondition.EXCELLENT},
    {"identifier": "CYCLE002", "model": "City Bike", "color": "Red", "condition": CycleCondition.GOOD},
    {"identifier": "CYCLE003", "model": "Hybrid Bike", "color": "Green", "condition": CycleCondition.GOOD},
    {"identifier": "CYCLE004", "model": "Mountain Bike", "color": "Black", "condition": CycleCondition.FAIR},
    {"identifier": "CYCLE005", "model": "City Bike", "color": "White", "condition": CycleCondition.EXCELLENT},
    {"identifier": "CYCLE006", "model": "Hybrid Bike", "color": "Yellow", "condition": CycleCondition.GOOD},
    {"identifier": "CYCLE007", "model": "Mountain Bike", "color": "Orange", "condition": CycleCondition.GOOD},
    {"identifier": "CYCLE008", "model": "City Bike", "color": "Purple", "condition": CycleCondition.EXCELLENT},
]

CYCLES_PER_STATION = 3


async def destroy_data():
    """Removes every ride, cycle, station and user."""
    async with in_transaction():
        for model in (Ride, Cycle, Station, User):
            await model.all().delete()
    logger.info("Cleared existing data")


async def import_data():
    """Replaces the contents of the database with the sample data."""
    await destroy_data()

    async with in_transaction():
        users = [await User.create(**user) for user in USERS]
        logger.info("Created %s users", len(users))

        stations = [await Station.create(**station) for station in STATIONS]
        logger.info("Created %s stations", len(stations))

        for index, cycle in enumerate(CYCLES):
            await Cycle.create(
                **cycle,
                station=stations[index // CYCLES_PER_STATION],
                qr_code=generate_qr_code(cycle["identifier"])
            )
        logger.info("Created %s cycles", len(CYCLES))

    for user in users:
        logger.info("%s (%s) may use the token %s", user.name, user.role.value, user.auth_id)


async def seed(db_url: str, destroy=False):
    """
    Connects to the database and loads (or, with ``destroy``, removes) the sample data.
    """
    await Tortoise.init(db_url=db_url, modules={'models': ['smartcycle.models']})
    await Tortoise.generate_schemas(safe=True)
    try:
        if destroy:
            await destroy_data()
        else:
            await import_data()
    finally:
        await Tortoise.close_connections()
