"""
Users
-----
"""
from typing import Union, Optional, List, Tuple, Dict, Any

from tortoise.exceptions import IntegrityError

from smartcycle.models import User, UserRole
from smartcycle.service.access.pagination import paginate


class UserExistsError(Exception):
    kind = "conflict"

    def __init__(self, errors):
        super().__init__("User with that item already exists!")
        self.errors = errors


def _unique_errors(error: IntegrityError) -> Dict[str, str]:
    """Picks out the fields that violated a unique constraint."""
    errors = {}
    for message in (str(arg) for arg in error.args):
        if "unique" in message.lower():
            field = message.split('.')[-1].strip()
            errors[field] = "User with that item already exists!"
    return errors


async def get_users(*, name: str = None, include_inactive=False, page: int = 1, limit: int = 10) -> Tuple[
    List[User], Dict[str, Any]]:
    """
    Gets a page of the users in the system, newest first.

    :param name: An optional name to filter by.
    """

    query = User.all() if include_inactive else User.filter(is_active=True)

    if name is not None:
        query = query.filter(name__icontains=name)

    return await paginate(query.order_by("-created_at", "-id"), page, limit)


async def get_user(*, auth_id=None, user_id=None) -> Optional[User]:
    """
    :param auth_id: The token subject of the user to get.
    :param user_id: The user id of the user to get.
    :return: The user with the given details.
    """

    kwargs = {}
    if auth_id is not None:
        kwargs["auth_id"] = auth_id

    if user_id is not None:
        kwargs["id"] = user_id

    if not kwargs:
        return None

    return await User.filter(**kwargs).first()


async def create_user(name: str, email: str, auth_id: str, phone: str = None, role: UserRole = UserRole.USER) -> User:
    """
    Creates a new user.

    :raises UserExistsError: When the user with the given credentials already exists.
    """
    try:
        return await User.create(name=name, email=email, auth_id=auth_id, phone=phone, role=role)
    except IntegrityError as error:
        errors = _unique_errors(error)
        if not errors:
            raise error
        raise UserExistsError(errors) from error


async def update_user(target: Union[User, int], **fields) -> User:
    """
    Updates the supplied fields of a user.

    :raises UserExistsError: When the new email is taken.
    """
    if isinstance(target, int):
        user = await User.get(id=target)
    else:
        user = target

    for key, value in fields.items():
        setattr(user, key, value)

    try:
        await user.save(update_fields=[*fields, "updated_at"])
    except IntegrityError as error:
        errors = _unique_errors(error)
        if not errors:
            raise error
        raise UserExistsError(errors) from error

    return user


async def delete_user(user: User) -> User:
    """Deactivates the user."""
    user.is_active = False
    await user.save(update_fields=["is_active", "updated_at"])
    return user


async def count_users() -> Dict[str, int]:
    return {
        "total_users": await User.all().count(),
        "active_users": await User.filter(is_active=True).count(),
        "admin_users": await User.filter(role=UserRole.ADMIN).count(),
    }
