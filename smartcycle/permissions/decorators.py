"""
Decorators
----------
"""

from functools import wraps
from http import HTTPStatus

from aiohttp import web
from aiohttp.web_urldispatcher import View

from smartcycle.permissions.permission import RoutePermissionError, Permission
from smartcycle.serializer import EnvelopeSchema, failure


def requires(permission: Permission):
    """
    A decorator that requires the given permission to be met to continue.

    A request without a verified token is answered with a 401,
    a request whose token lacks the permission with a 403.
    """

    if not isinstance(permission, Permission):
        raise TypeError

    def decorator(original_function):

        @wraps(original_function)
        async def new_func(self: View, **kwargs):
            try:
                await permission(self, **kwargs)
            except RoutePermissionError as error:
                status = HTTPStatus.FORBIDDEN if "token" in self.request else HTTPStatus.UNAUTHORIZED
                return web.json_response(EnvelopeSchema().dump(failure(
                    f"You cannot do that because {str(error)}.",
                    errors=error.serialize()
                )), status=status)

            return await original_function(self, **kwargs)

        return new_func

    return decorator
