"""
Middleware
----------
"""
from http import HTTPStatus

import sentry_sdk
from aiohttp import web
from aiohttp.abc import Request
from aiohttp.web_middlewares import middleware

from smartcycle import logger
from smartcycle.serializer import EnvelopeSchema, failure
from smartcycle.service.verify_token import verify_token, TokenVerificationError

response_schema = EnvelopeSchema()


@middleware
async def error_middleware(request: Request, handler):
    """
    Wraps any unhandled error in the response envelope.

    Errors raised by the views themselves already carry an envelope and pass through,
    an unknown route gets a 404 envelope, and anything unexpected is logged and reported as a 500.
    """
    try:
        return await handler(request)
    except web.HTTPNotFound as error:
        if error.content_type == "application/json":
            raise
        return web.json_response(response_schema.dump(failure(
            "Route not found.", errors=[{"kind": "not_found", "message": f"{request.method} {request.path}"}]
        )), status=HTTPStatus.NOT_FOUND)
    except web.HTTPException:
        raise
    except Exception as error:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        sentry_sdk.capture_exception(error)
        return web.json_response(response_schema.dump(failure(
            "Something went wrong on our end.", errors=[{"kind": "internal", "message": type(error).__name__}]
        )), status=HTTPStatus.INTERNAL_SERVER_ERROR)


@middleware
async def validate_token_middleware(request: Request, handler):
    """
    Ensures that any Authorization header given to the application is valid,
    and stores its subject on the request as the "token".
    """

    if "Authorization" in request.headers:
        try:
            request["token"] = verify_token(request)
        except TokenVerificationError as error:
            return web.json_response(response_schema.dump(failure(
                "Supplied authorization token is invalid.", errors=list(error.args)
            )), status=HTTPStatus.UNAUTHORIZED)

    return await handler(request)
