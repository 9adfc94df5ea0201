"""
.. autoclasstree:: smartcycle.views

This package contains the server API for browsing stations and cycles,
riding cycles, and administering the system.

API Conventions
---------------

The API conforms as best as possible to the REST standard. For a quick primer, look at `Web Api Design`_. In short,
the api must:

* Be ordered in terms of resources (nouns such as station)
* Have multiple ways of accessing the same resource (GET, POST, PUT, PATCH, DELETE)
* Accept and return JSON with snake_case key naming
* Have idempotent_ GET, PUT, PATCH, and DELETE operations
* Support filtering (if necessary) using the query string

API Expected Responses
----------------------

The server responds to every request with an envelope of the form
``{"success": ..., "data": ..., "message": ..., "errors": ...}``.
Failures always include a message.

.. _`Web Api Design`: https://pages.apigee.com/rs/apigee/images/api-design-ebook-2012-03.pdf
.. _idempotent: https://www.w3.org/Protocols/rfc2616/rfc2616-sec9.html#sec9.1.2
"""

import aiohttp_cors
from aiohttp.abc import Application

from smartcycle import logger
from .admin import DashboardView, RideAnalyticsView, ComprehensiveReportView, AdminStationsView, AdminCyclesView, \
    AdminUsersView
from .cycles import CyclesView, CycleView, CycleStatusView, CycleQRView
from .misc import HealthView
from .rides import RideStartView, RideEndView, RideCancelView, ActiveRideView, RideHistoryView, RideStatsView
from .stations import StationsView, StationView, StationCyclesView, StationStatsView, StationCountsView
from .users import UsersView, UserCountsView, UserView, UserRidesView, UserStatsView, UserRideCancelView, MeView

views = [
    RideStartView, RideEndView, RideCancelView, ActiveRideView, RideHistoryView, RideStatsView,
    StationsView, StationView, StationCyclesView, StationStatsView, StationCountsView,
    CyclesView, CycleView, CycleStatusView, CycleQRView,
    MeView, UsersView, UserCountsView, UserView, UserRidesView, UserStatsView, UserRideCancelView,
    DashboardView, RideAnalyticsView, ComprehensiveReportView, AdminStationsView, AdminCyclesView, AdminUsersView,
    HealthView,
]


def register_views(app: Application, base: str):
    """
    Registers all the API views onto the given router at a specific root url.

    :param app: The app to register the views to.
    :param base: The base URL.
    """
    cors = aiohttp_cors.setup(app, defaults={
        "*": aiohttp_cors.ResourceOptions(
            allow_credentials=True,
            expose_headers="*",
            allow_headers="*",
            allow_methods="*",
        )
    })

    for view in views:
        logger.debug("Registered %s at %s", view.__name__, base + view.url)
        view.register_route(app, base)
        view.enable_cors(cors)
