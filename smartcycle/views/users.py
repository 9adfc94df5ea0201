"""
User Related Views
-------------------------

Handles all the user CRUD, along with the ride history and
statistics of a user.
"""
from http import HTTPStatus

from aiohttp import web
from marshmallow.fields import Integer

from smartcycle.models import User
from smartcycle.permissions import UserMatchesToken, UserIsAdmin, requires, ValidToken
from smartcycle.serializer import EnvelopeSchema, Many, expects, expects_query, returns, failure
from smartcycle.serializer.misc import PaginationSchema
from smartcycle.serializer.models import UserSchema, UserSummarySchema, RideSchema, RideStatsSchema, \
    PaginationInfoSchema
from smartcycle.service import RideError
from smartcycle.service.access.rides import get_ride_history, get_user_stats
from smartcycle.service.access.users import get_users, get_user, create_user, update_user, delete_user, \
    count_users, UserExistsError
from smartcycle.views.base import BaseView, error_outputs
from smartcycle.views.decorators import match_getter, GetFrom

USER_IDENTIFIER_REGEX = "[0-9]+"


class UsersView(BaseView):
    """
    Gets or adds to the list of users.
    """
    url = "/users"
    name = "users"
    with_user = match_getter(get_user, 'user', auth_id=GetFrom.AUTH_HEADER)

    @with_user
    @requires(UserIsAdmin())
    @expects_query(PaginationSchema())
    @returns(EnvelopeSchema.of(users=Many(UserSchema()), pagination=PaginationInfoSchema()))
    async def get(self, user: User):
        users, pagination = await get_users(**self.request["query"])
        return {
            "success": True,
            "data": {"users": [target.serialize() for target in users], "pagination": pagination}
        }

    @requires(ValidToken())
    @expects(UserSchema(only=('name', 'email', 'phone')))
    @returns(
        created=(EnvelopeSchema.of(user=UserSchema()), HTTPStatus.CREATED),
        updated=EnvelopeSchema.of(user=UserSchema()),
        **error_outputs("conflict")
    )
    async def post(self):
        """
        Anyone who has already authenticated can then create a user in the system.
        This must be done before you use the rest of the system, but only has to be done once.
        Posting again updates the details of the existing user.
        """
        user = await get_user(auth_id=self.request["token"])

        try:
            if user is None:
                user = await create_user(**self.request["data"], auth_id=self.request["token"])
                outcome = "created"
            else:
                user = await update_user(user, **self.request["data"])
                outcome = "updated"
        except UserExistsError as error:
            return "conflict", failure(str(error), errors=error.errors)

        return outcome, {
            "success": True,
            "message": f"User {outcome} successfully.",
            "data": {"user": user.serialize()}
        }


class UserCountsView(BaseView):
    """
    Gets how many users there are, how many are active and how many are administrators.
    """
    url = "/users/stats"
    name = "users_stats"
    with_user = match_getter(get_user, 'user', auth_id=GetFrom.AUTH_HEADER)

    @with_user
    @requires(UserIsAdmin())
    @returns(EnvelopeSchema.of(total_users=Integer(), active_users=Integer(), admin_users=Integer()))
    async def get(self, user: User):
        return {
            "success": True,
            "data": await count_users()
        }


class UserView(BaseView):
    """
    Gets, updates or deactivates a single user.
    """
    url = f"/users/{{id:{USER_IDENTIFIER_REGEX}}}"
    name = "user"
    with_user = match_getter(get_user, 'user', user_id='id')

    @with_user
    @requires(UserMatchesToken() | UserIsAdmin())
    @returns(EnvelopeSchema.of(user=UserSchema()))
    async def get(self, user: User):
        return {
            "success": True,
            "data": {"user": user.serialize()}
        }

    @with_user
    @requires(UserIsAdmin())
    @expects(UserSchema(only=('name', 'email', 'phone', 'role', 'is_active'), partial=True))
    @returns(
        ok=EnvelopeSchema.of(user=UserSchema()),
        **error_outputs("conflict")
    )
    async def put(self, user: User):
        try:
            user = await update_user(user, **self.request["data"])
        except UserExistsError as error:
            return "conflict", failure(str(error), errors=error.errors)

        return "ok", {
            "success": True,
            "message": "User updated successfully.",
            "data": {"user": user.serialize()}
        }

    @with_user
    @requires(UserIsAdmin())
    @returns(EnvelopeSchema.of(user=UserSchema()))
    async def delete(self, user: User):
        user = await delete_user(user)
        return {
            "success": True,
            "message": "User deactivated successfully.",
            "data": {"user": user.serialize()}
        }


class UserRidesView(BaseView):
    """
    Gets the completed rides of a user, most recent first.
    """
    url = f"/users/{{id:{USER_IDENTIFIER_REGEX}}}/rides"
    name = "user_rides"
    with_user = match_getter(get_user, 'user', user_id='id')

    @with_user
    @requires(UserMatchesToken() | UserIsAdmin())
    @expects_query(PaginationSchema())
    @returns(EnvelopeSchema.of(rides=Many(RideSchema()), pagination=PaginationInfoSchema()))
    async def get(self, user: User):
        rides, pagination = await get_ride_history(user, **self.request["query"])
        return {
            "success": True,
            "data": {
                "rides": [ride.serialize(self.request.app.router) for ride in rides],
                "pagination": pagination
            }
        }


class UserStatsView(BaseView):
    """
    Gets the totals over the completed rides of a user.
    """
    url = f"/users/{{id:{USER_IDENTIFIER_REGEX}}}/stats"
    name = "user_stats"
    with_user = match_getter(get_user, 'user', user_id='id')

    @with_user
    @requires(UserMatchesToken() | UserIsAdmin())
    @returns(EnvelopeSchema.of(user=UserSummarySchema(), stats=RideStatsSchema()))
    async def get(self, user: User):
        return {
            "success": True,
            "data": {"user": user.summary(), "stats": await get_user_stats(user)}
        }


class UserRideCancelView(BaseView):
    """
    Cancels the active ride of a user on their behalf.
    """
    url = f"/users/{{id:{USER_IDENTIFIER_REGEX}}}/rides/cancel"
    name = "user_ride_cancel"
    with_user = match_getter(get_user, 'user', user_id='id')

    @with_user
    @requires(UserIsAdmin())
    @returns(
        ok=EnvelopeSchema.of(ride=RideSchema()),
        **error_outputs("invalid_state")
    )
    async def post(self, user: User):
        try:
            ride = await self.ride_manager.cancel(user)
        except RideError as error:
            return self.service_error(error)

        return "ok", {
            "success": True,
            "message": "Ride cancelled successfully.",
            "data": {"ride": ride.serialize(self.request.app.router)}
        }


class MeView(BaseView):
    """
    Redirects requests for the currently authenticated user.
    """

    url = "/users/me{tail:.*}"
    name = "me"

    async def get(self):
        return await self._me_handler()

    async def post(self):
        return await self._me_handler()

    async def put(self):
        return await self._me_handler()

    async def patch(self):
        return await self._me_handler()

    async def delete(self):
        return await self._me_handler()

    @requires(ValidToken())
    async def _me_handler(self):
        """
        Accepts all types of request, does some checking against the user, and forwards them on to the appropriate user.
        """
        user = await get_user(auth_id=self.request["token"])

        if user is None:
            create_user_url = str(self.request.app.router['users'].url_for())
            return web.json_response(EnvelopeSchema().dump(failure(
                "User does not exist. Please use your token to create a user and try again.",
                url=create_user_url,
                method="POST"
            )), status=HTTPStatus.NOT_FOUND)

        concrete_url = MeView._get_concrete_user_url(self.request.path, self.request.match_info.get("tail"), user)
        raise web.HTTPTemporaryRedirect(concrete_url)

    @staticmethod
    def _get_concrete_user_url(path, tail, user) -> str:
        """
        Given a relative "me" url, and a user, rewrites the url to a concrete user.

        :param path: The current path of the "me" url.
        :param tail: The tail section of the url (after the "me")
        :param user: The user to rewrite to.
        """
        url_without_tail = path[:len(path) - len(tail)]
        user_url = url_without_tail[:-2] + str(user.id)
        return user_url + tail
