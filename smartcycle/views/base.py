"""
Base
------------------------

The base view for the API. This view contains functionality
required in all other views.
"""

from http import HTTPStatus
from typing import Optional, Tuple, Dict, Any

from aiohttp.abc import Application
from aiohttp.web import View, AbstractRoute
from aiohttp_cors import CorsConfig, CorsViewMixin, ResourceOptions

from smartcycle.serializer import EnvelopeSchema, failure
from smartcycle.serializer.envelope import error_details
from smartcycle.service.manager.ride_manager import RideManager

ERROR_STATUSES = {
    "conflict": HTTPStatus.BAD_REQUEST,
    "invalid_state": HTTPStatus.BAD_REQUEST,
    "not_found": HTTPStatus.NOT_FOUND,
}
"""Maps the kind of a service error to the status code it is reported with."""


def error_outputs(*kinds: str) -> Dict[str, Tuple[EnvelopeSchema, HTTPStatus]]:
    """Builds the named @returns outputs for the given kinds of service error."""
    return {kind: (EnvelopeSchema(), ERROR_STATUSES[kind]) for kind in kinds}


class ViewConfigurationError(Exception):
    """
    Raised if the view doesn't provide a URL.
    """


class BaseView(View, CorsViewMixin):
    """
    The base view that all other views extend. Contains some useful
    helper functions that the extending classes can use.
    """

    url: str
    name: Optional[str]
    route: AbstractRoute
    ride_manager: RideManager

    cors_config = {
        "*": ResourceOptions(
            allow_credentials=True,
            expose_headers="*",
            allow_headers="*",
            allow_methods="*",
        )
    }

    @classmethod
    def register_route(cls, app: Application, base: Optional[str] = None):
        """
        Registers the view with the given router.

        :raises ViewConfigurationError: If the URL hasn't been set on the given view.
        """
        try:
            url = base + cls.url if base is not None else cls.url
        except AttributeError:
            raise ViewConfigurationError("No URL provided!")

        kwargs = {}
        name = getattr(cls, "name", None)
        if name is not None:
            kwargs["name"] = name

        cls.route = app.router.add_view(url, cls, **kwargs)
        cls.ride_manager = app["ride_manager"]

    @classmethod
    def enable_cors(cls, cors: CorsConfig):
        """Enables CORS on the view."""
        try:
            cors.add(cls.route, webview=True)
        except AttributeError as error:
            raise ViewConfigurationError("No route assigned. Please register the route first.") from error

    @staticmethod
    def service_error(error: Exception) -> Tuple[str, Dict[str, Any]]:
        """
        Reports a service error using the named output for its kind.

        Views that use this must declare a ``@returns`` output for each kind they may raise.
        """
        return error.kind, failure(str(error), errors=error_details(error))
