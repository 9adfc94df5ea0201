"""
.. autoclasstree:: smartcycle.permissions

This module contains the various permission types. A permission is essentially
just an object (either function or class) that can be called asynchronously
and raises a RoutePermissionError in the case of a failed permission.
"""

from smartcycle.permissions.decorators import requires
from smartcycle.permissions.permission import Permission, RoutePermissionError
from smartcycle.permissions.users import UserMatchesToken, UserIsAdmin, UserIsActive, ValidToken
