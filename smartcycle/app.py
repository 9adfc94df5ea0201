"""
App
-----
"""

import sentry_sdk
import uvloop
from aiohttp import web
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from smartcycle import logger
from smartcycle.config import server_mode, api_root, database_url, jwt_secret, jwt_algorithm, sentry_dsn
from smartcycle.middleware import error_middleware, validate_token_middleware
from smartcycle.service.manager.ride_manager import RideManager
from smartcycle.service.verify_token import JWTVerifier, DummyVerifier
from smartcycle.signals import register_signals
from smartcycle.version import __version__, name
from smartcycle.views import register_views


def build_app(db_uri=None, *, manage_database=True):
    """
    Sets up the app and installs uvloop.

    :param db_uri: The tortoise database url, defaulting to the configured one.
    :param manage_database: Whether the app connects to (and disconnects from) the database itself.
    :raises RuntimeError: If no JWT secret is configured outside of development.
    """
    app = web.Application(middlewares=[error_middleware, validate_token_middleware])
    uvloop.install()

    app['ride_manager'] = RideManager()
    app['database_uri'] = db_uri if db_uri is not None else database_url

    if server_mode == "development":
        verifier = DummyVerifier()
    elif jwt_secret:
        verifier = JWTVerifier(jwt_secret, jwt_algorithm)
    else:
        raise RuntimeError("You must specify the JWT_SECRET in the environment variables.")

    app['token_verifier'] = verifier

    register_signals(app, manage_database, debug=server_mode in ("development", "testing"))

    # register views
    register_views(app, api_root)

    # set up sentry exception tracking
    if server_mode != "development" and sentry_dsn:
        logger.info("Starting Sentry Logging")
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=server_mode,
            release=f"{name}@{__version__}",
            integrations=[AioHttpIntegration()]
        )

    return app
