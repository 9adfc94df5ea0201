from aiohttp.web_urldispatcher import View

from smartcycle.models import User
from smartcycle.permissions.permission import RoutePermissionError, Permission
from smartcycle.service.access.users import get_user


class ValidToken(Permission):
    """Asserts that the request carries a verified token."""

    async def __call__(self, view: View, **kwargs):
        if "token" not in view.request:
            raise RoutePermissionError("No valid token was included in the Authorization header.")


class UserIsAdmin(Permission):
    """Asserts that a given user is an admin."""

    async def __call__(self, view: View, user: User = None, **kwargs):
        if user is None:
            raise RoutePermissionError("User does not exist.")

        if "token" not in view.request:
            raise RoutePermissionError("No admin token was included in the Authorization header.")

        if not view.request["token"] == user.auth_id:
            # an admin is fetching a user's details; we need to get the admin's details
            user = await get_user(auth_id=view.request["token"])

        if user is None or not user.is_active or not user.is_admin:
            raise RoutePermissionError("The supplied token doesn't have admin rights.")


class UserMatchesToken(Permission):
    """Asserts that the given user matches the token."""

    async def __call__(self, view: View, user: User = None, **kwargs):
        if "token" not in view.request:
            raise RoutePermissionError("No token was included in the Authorization header.")

        if user is None or not user.auth_id == view.request["token"]:
            raise RoutePermissionError("The supplied token doesn't have access to this resource.")


class UserIsActive(Permission):
    """Asserts that the given user has not been deactivated."""

    async def __call__(self, view: View, user: User = None, **kwargs):
        if user is None or not user.is_active:
            raise RoutePermissionError("This account has been deactivated.")
