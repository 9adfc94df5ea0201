"""
The entry points for the CLI tools
"""
import argparse
import asyncio

from aiohttp import web

from smartcycle import logger
from smartcycle.config import database_url
from smartcycle.version import __version__, name


def run():
    """Builds and runs the app."""
    from smartcycle.app import build_app

    parser = argparse.ArgumentParser(prog="smartcycle", description="Runs the SmartCycle API server.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--db", default=database_url, help="The tortoise database url.")
    args = parser.parse_args()

    logger.info('Starting %s %s!', name, __version__)
    web.run_app(build_app(args.db), host=args.host, port=args.port)


def seed():
    """Loads or removes the sample data."""
    from smartcycle.seeder import seed as seed_database

    parser = argparse.ArgumentParser(prog="smartcycle-seed", description="Loads the SmartCycle sample data.")
    parser.add_argument("-d", "--destroy", action="store_true", help="Remove the sample data instead.")
    parser.add_argument("--db", default=database_url, help="The tortoise database url.")
    args = parser.parse_args()

    asyncio.run(seed_database(args.db, destroy=args.destroy))


if __name__ == '__main__':
    run()
