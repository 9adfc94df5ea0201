"""
Rides
-----

Read side queries over rides. Every mutation of a ride
goes through the :class:`~smartcycle.service.manager.ride_manager.RideManager`.
"""
from typing import Union, Optional, List, Tuple, Dict, Any

from smartcycle.models import Ride, RideStatus, User
from smartcycle.models.util import resolve_id
from smartcycle.pricing import get_price
from smartcycle.service.access.pagination import paginate

RIDE_RELATIONS = ("cycle", "start_station", "end_station")


async def get_ride(ride_id: int) -> Optional[Ride]:
    return await Ride.filter(id=ride_id).first().prefetch_related(*RIDE_RELATIONS)


async def get_rides(*, user: Union[User, int] = None, status: RideStatus = None) -> List[Ride]:
    """
    Gets rides, newest first.

    :param user: Only get the rides of the given user.
    :param status: Only get the rides in the given state.
    """
    query = Ride.all()
    if user is not None:
        query = query.filter(user_id=resolve_id(user))
    if status is not None:
        query = query.filter(status=status)
    return await query.order_by("-start_time", "-id").prefetch_related(*RIDE_RELATIONS)


async def get_ride_history(user: Union[User, int], *, page: int = 1, limit: int = 10) -> Tuple[
    List[Ride], Dict[str, Any]]:
    """
    Gets a page of the completed rides of a user, most recently ended first.
    """
    query = Ride.filter(user_id=resolve_id(user), status=RideStatus.COMPLETED)
    return await paginate(query.order_by("-end_time", "-id").prefetch_related(*RIDE_RELATIONS), page, limit)


def summarize_rides(rides: List[Ride]) -> Dict[str, Any]:
    """
    Reduces a set of completed rides to their totals.

    The average is the plain quotient of the total duration
    over the number of rides, and zero when there are none.
    """
    total_rides = len(rides)
    total_duration = sum(ride.duration for ride in rides)
    return {
        "total_rides": total_rides,
        "total_duration": total_duration,
        "total_cost": sum(get_price(ride.duration) for ride in rides),
        "avg_duration": total_duration / total_rides if total_rides else 0,
    }


async def get_user_stats(user: Union[User, int]) -> Dict[str, Any]:
    """Summarizes the completed rides of the given user."""
    rides = await Ride.filter(user_id=resolve_id(user), status=RideStatus.COMPLETED).only("id", "duration")
    return summarize_rides(rides)
