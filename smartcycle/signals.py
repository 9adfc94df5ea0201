"""
Signals
-------

Defines a number of signals that the aiohttp server uses
to facilitate some of the advanced functionality.

Each signal must accept an the ``app`` argument.
"""
import asyncio

from aiohttp.abc import Application
from tortoise import Tortoise

from smartcycle import logger

MODELS = {'models': ['smartcycle.models']}


async def initialize_database(app: Application):
    """Initializes and generates the schema for our database."""
    logger.info("Connecting to %s", app['database_uri'].split("://")[0])
    await Tortoise.init(db_url=app['database_uri'], modules=MODELS)
    await Tortoise.generate_schemas(safe=True)


async def enable_debug(app: Application):
    """Puts the event loop into debug mode."""
    asyncio.get_running_loop().set_debug(True)


async def close_database_connections(app: Application):
    """Closes the open database connections."""
    await Tortoise.close_connections()


def register_signals(app, manage_database=True, debug=False):
    """
    Registers all the signals at the appropriate hooks.

    :param manage_database: Whether the app opens and closes the database itself.
    :param debug: Whether to run the event loop in debug mode.
    """
    if debug:
        app.on_startup.append(enable_debug)

    if manage_database:
        app.on_startup.append(initialize_database)
        app.on_cleanup.append(close_database_connections)
