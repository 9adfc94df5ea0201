"""
Permission
----------

Permissions compose with the boolean operators, so that a route can
declare who may access it in a single expression:

.. code-block:: python

    @requires(UserIsActive() & (UserMatchesToken() | UserIsAdmin()))
    async def get(self, user: User):
        ...
"""

from abc import ABC, abstractmethod
from itertools import chain
from typing import List

from aiohttp.web_urldispatcher import View


class RoutePermissionError(Exception):

    def __init__(self, *messages, qualifier=None, sub_errors: List['RoutePermissionError'] = None):
        """
        :param messages: The reasons the permission failed.
        :param qualifier: How the sub-errors combine ("and" / "or").
        :param sub_errors: Any additional sub-errors encountered.
        """

        if messages and (qualifier is not None or sub_errors is not None):
            raise ValueError("RoutePermissionError may either return a message or sub errors.")

        self.messages = messages
        self.sub_errors = sub_errors if sub_errors is not None else []
        self.qualifier = qualifier

    def __str__(self):
        """Prints a friendly description of the error."""
        friendly_errors = [str(error) for error in self.sub_errors]
        if len(friendly_errors) > 1:
            friendly_errors[-1] = f"{self.qualifier} {friendly_errors[-1]}"

        messages = [m.lower().strip(".") for m in self.messages]
        return ", ".join(messages + friendly_errors)

    def serialize(self) -> List[str]:
        """Appends the messages of an error to the messages of its sub-errors."""
        return list(self.messages) + list(chain.from_iterable(err.serialize() for err in self.sub_errors))


class Permission(ABC):
    """
    The base class for permissions. Implements the boolean logic.
    """

    def __and__(self, other):
        return AndPermission.combine(self, other)

    def __or__(self, other):
        return OrPermission.combine(self, other)

    def __repr__(self):
        return type(self).__name__

    @abstractmethod
    async def __call__(self, view: View, **kwargs) -> None:
        """
        Evaluates the permission object.

        :returns: None
        :raises RoutePermissionError: If the permission failed.
        """


class CompositePermission(Permission, ABC):
    """A group of permissions joined by a single operator."""

    operator: str
    qualifier: str

    def __init__(self, *permissions: Permission):
        self.permissions = permissions

    @classmethod
    def combine(cls, *permissions: Permission) -> 'CompositePermission':
        """Joins the permissions, flattening any that are already joined by the same operator."""
        flat = []
        for permission in permissions:
            if isinstance(permission, cls):
                flat.extend(permission.permissions)
            else:
                flat.append(permission)
        return cls(*flat)

    def __repr__(self):
        return "(" + f" {self.operator} ".join(repr(p) for p in self.permissions) + ")"

    def __len__(self):
        return len(self.permissions)


class AndPermission(CompositePermission):
    """Passes when every one of its permissions passes."""
    operator = "&"
    qualifier = "and"

    async def __call__(self, view, **kwargs):
        errors = []
        for permission in self.permissions:
            try:
                await permission(view, **kwargs)
            except RoutePermissionError as error:
                errors.append(error)

        if errors:
            raise RoutePermissionError(qualifier=self.qualifier, sub_errors=errors)


class OrPermission(CompositePermission):
    """Passes as soon as one of its permissions passes."""
    operator = "|"
    qualifier = "or"

    async def __call__(self, view, **kwargs):
        errors = []
        for permission in self.permissions:
            try:
                await permission(view, **kwargs)
            except RoutePermissionError as error:
                errors.append(error)
            else:
                return

        raise RoutePermissionError(qualifier=self.qualifier, sub_errors=errors)
