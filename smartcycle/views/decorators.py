"""
Decorators
-------------------------
"""
from enum import Enum
from functools import wraps
from inspect import isawaitable
from typing import Union, Any, Dict, Tuple

from aiohttp import web
from aiohttp.web_request import Request
from aiohttp.web_urldispatcher import View

from smartcycle.serializer import EnvelopeSchema, failure


class Optional:
    """Signify the match map entry to be optional."""

    def __init__(self, value):
        self.value = value


class GetFrom(Enum):
    AUTH_HEADER = "Authorization"


class MissingTokenError(ValueError):
    """Raised when a match map requires a token the request did not supply."""


def flatten(error):
    errors = []
    for sub_error in error.args:
        if isinstance(sub_error, Exception):
            errors += flatten(sub_error)
        else:
            errors.append(sub_error)
    return errors


def resolve_match_map(request: Request, match_map) -> Dict[str, Any]:
    """
    Resolves the keyword arguments of a getter from the url and the verified token.

    The token itself is verified by the token middleware, which stores its subject on the request.
    """
    resolved_matches = {}
    errors = []

    for key, value in match_map.items():

        if isinstance(value, Optional):
            value = value.value
            is_optional = True
        else:
            is_optional = False

        if isinstance(value, str):
            value = (value, int)

        if isinstance(value, tuple):
            param = request.match_info.get(value[0])
            if param is None and is_optional:
                continue
            try:
                resolved_matches[key] = value[1](param)
            except (ValueError, TypeError):
                errors.append(ValueError(
                    f'Could not convert url parameter "{param}" to expected type {value[1].__name__}.'))
        elif value == GetFrom.AUTH_HEADER:
            if "token" not in request:
                if not is_optional:
                    raise MissingTokenError("Missing Authorization header.")
                continue
            resolved_matches[key] = request["token"]
        else:
            raise TypeError(f"match_getter incorrectly configured (doesn't support {type(value)})")

    if errors:
        raise ValueError(*errors)
    return resolved_matches


def match_getter(getter_function, *injection_parameters: Union[str, Optional],
                 **match_map: Union[str, GetFrom, Optional, Tuple[str, type]]):
    """
    Automatically fetches and includes an item, or 404's if it doesn't exist.

    .. code-block:: python

        # example usage
        @match_getter(get_station, 'station', station_id='id')
        async def get(self, station: Station)
            return web.json_response(data=station.serialize())

    :param getter_function: The function to fetch the item from.
    :param injection_parameters: The name of the parameter to pass the object as.
    :param match_map: Associates a kwarg on the ``getter_function`` to a url variable, or to the token.
    :return: A decorator that wraps the response and passes in the object.
    """

    def attach_instance(original_function):

        @wraps(original_function)
        async def new_func(self: View, **kwargs):
            try:
                params = resolve_match_map(self.request, match_map)
            except MissingTokenError as error:
                raise web.HTTPUnauthorized(
                    text=EnvelopeSchema().dumps(failure(
                        "You must be logged in to do that.", errors=flatten(error)
                    )),
                    content_type='application/json'
                )
            except ValueError as error:
                raise web.HTTPBadRequest(
                    text=EnvelopeSchema().dumps(failure("Errors with your request.", errors=flatten(error))),
                    content_type='application/json'
                )

            item = getter_function(**params)
            if isawaitable(item):
                item = await item

            # if the getter function returns multiple items,
            # and there are multiple parameter names,
            # then set those keys in the decorated function
            if isinstance(injection_parameters, tuple) and isinstance(item, tuple) and len(injection_parameters) == len(
                item):
                optional_injected_kwargs = dict(zip(injection_parameters, item))
            else:
                optional_injected_kwargs = {injection_parameters[0]: item}

            not_found = []
            injected_kwargs = {}
            for key, item in optional_injected_kwargs.items():
                if item is None and not isinstance(key, Optional):
                    not_found.append(key)
                elif isinstance(key, Optional):
                    injected_kwargs[key.value] = item
                else:
                    injected_kwargs[key] = item

            if not_found:
                raise web.HTTPNotFound(
                    text=EnvelopeSchema().dumps(failure(
                        f'Could not find {", ".join(not_found)} with the given params.',
                        errors=[{"kind": "not_found", "message": f"{key.capitalize()} not found."} for key in not_found],
                    )),
                    content_type='application/json'
                )

            return await original_function(self, **kwargs, **injected_kwargs)

        return new_func

    return attach_instance
