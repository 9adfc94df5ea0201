"""
Ride Manager
------------

This module is what handles all the rides in the system.

Responsibilities
================

This object handles the lifecycle of a ride, and keeps the status of
the ridden cycle in step with it.

- starting a ride
- ending a ride
- cancelling a ride
- getting the active ride of a user

Consistency
===========

The manager holds no state of its own, so any number of processes may
serve rides at once. Every transition touches a ride and its cycle in a
single database transaction, and each begins with a conditional update
that only succeeds from the expected state:

- starting a ride moves the cycle ``available -> in-use``
- ending or cancelling a ride moves the ride ``active -> completed | cancelled``

While a ride is active its ``active_rider`` and ``active_cycle`` columns
are set, and both are unique. A request that loses a race for the same
cycle or the same rider therefore fails straight away, and its transaction
rolls back without leaving anything behind.
"""

from typing import Union, Optional, Dict, Any

from tortoise import timezone
from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from smartcycle import logger
from smartcycle.models import Cycle, CycleStatus, Ride, RideStatus, User
from smartcycle.models.util import resolve_id
from smartcycle.pricing import get_duration
from smartcycle.service.access.cycles import get_cycle
from smartcycle.service.access.rides import RIDE_RELATIONS
from smartcycle.service.access.stations import get_station


class RideError(Exception):
    """The base class for the failures of a ride transition."""

    kind = "invalid_state"
    message = "The ride could not be updated."

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class ActiveRideError(RideError):
    """Raised when an user tries to do an operation that requires no active ride."""

    kind = "conflict"
    message = "You already have an active ride."

    def __init__(self, ride_id: int = None):
        super().__init__()
        self.ride_id = ride_id


class InactiveRideError(RideError):
    """Raised when an user tries to do an operation that requires an active ride."""

    message = "No active ride found."


class CycleUnavailableError(RideError):
    message = "Cycle is not available for use."


class CycleMismatchError(RideError):
    """Raised when the scanned cycle is not the one being ridden."""

    message = "Cycle does not match your active ride."


class CycleNotFoundError(RideError):
    kind = "not_found"
    message = "Cycle not found."


class StationNotFoundError(RideError):
    kind = "not_found"
    message = "Station not found."


class RideManager:
    """
    Handles the lifecycle of the rides in the system.
    """

    async def start(self, user: User, cycle_identifier: str, station_id: int) -> Ride:
        """
        Starts a new ride for a user on the scanned cycle.

        :raises ActiveRideError: If the user already has a ride active.
        :raises CycleNotFoundError: If no active cycle has the given identifier.
        :raises CycleUnavailableError: If the cycle is not available.
        :raises StationNotFoundError: If the station does not exist.
        """
        active_ride = await self.active_ride(user)
        if active_ride is not None:
            raise ActiveRideError(active_ride.id)

        cycle = await get_cycle(identifier=cycle_identifier)
        if cycle is None:
            raise CycleNotFoundError

        if cycle.status != CycleStatus.AVAILABLE:
            raise CycleUnavailableError

        station = await get_station(station_id)
        if station is None:
            raise StationNotFoundError

        start_time = timezone.now()

        try:
            async with in_transaction() as connection:
                claimed = await Cycle.filter(
                    id=cycle.id, status=CycleStatus.AVAILABLE, is_active=True
                ).using_db(connection).update(status=CycleStatus.IN_USE, updated_at=start_time)

                if not claimed:
                    raise CycleUnavailableError

                ride = await Ride.create(
                    user=user,
                    cycle=cycle,
                    start_station=station,
                    start_time=start_time,
                    status=RideStatus.ACTIVE,
                    active_rider=user.id,
                    active_cycle=cycle.id,
                    using_db=connection,
                )
        except IntegrityError as error:
            active_ride = await self.active_ride(user)
            if active_ride is not None:
                raise ActiveRideError(active_ride.id) from error
            raise CycleUnavailableError from error

        cycle.status = CycleStatus.IN_USE
        logger.info("%s started ride %s on cycle %s at station %s", user, ride.id, cycle.identifier, station.id)
        return ride

    async def finish(
        self, user: User, cycle_identifier: str, station_id: int, feedback: Dict[str, Any] = None
    ) -> Ride:
        """
        Completes the active ride of a user, returning the cycle at the given station.

        :raises InactiveRideError: If the user has no active ride.
        :raises CycleNotFoundError: If no cycle has the given identifier.
        :raises CycleMismatchError: If the scanned cycle is not the one being ridden.
        :raises StationNotFoundError: If the station does not exist.
        """
        ride = await self.active_ride(user)
        if ride is None:
            raise InactiveRideError

        cycle = await get_cycle(identifier=cycle_identifier, include_inactive=True)
        if cycle is None:
            raise CycleNotFoundError

        if cycle.id != ride.cycle_id:
            raise CycleMismatchError

        station = await get_station(station_id)
        if station is None:
            raise StationNotFoundError

        end_time = timezone.now()
        feedback = feedback or {}

        async with in_transaction() as connection:
            ended = await Ride.filter(id=ride.id, status=RideStatus.ACTIVE).using_db(connection).update(
                status=RideStatus.COMPLETED,
                end_time=end_time,
                end_station_id=station.id,
                duration=get_duration(self._aware(ride.start_time), end_time),
                rating=feedback.get("rating"),
                comment=feedback.get("comment"),
                active_rider=None,
                active_cycle=None,
                updated_at=end_time,
            )

            if not ended:
                raise InactiveRideError

            await Cycle.filter(id=cycle.id).using_db(connection).update(
                status=CycleStatus.AVAILABLE, station_id=station.id, updated_at=end_time
            )

        ride = await self._reload(ride)
        logger.info("%s completed ride %s at station %s (%s minutes)", user, ride.id, station.id, ride.duration)
        return ride

    async def cancel(self, user: Union[User, int]) -> Ride:
        """
        Cancels the active ride of a user, effective immediately, waiving the fee.
        The cycle stays at the station the ride started from.

        :raises InactiveRideError: If the user has no active ride.
        """
        ride = await self.active_ride(user)
        if ride is None:
            raise InactiveRideError

        end_time = timezone.now()

        async with in_transaction() as connection:
            ended = await Ride.filter(id=ride.id, status=RideStatus.ACTIVE).using_db(connection).update(
                status=RideStatus.CANCELLED,
                end_time=end_time,
                duration=0,
                active_rider=None,
                active_cycle=None,
                updated_at=end_time,
            )

            if not ended:
                raise InactiveRideError

            await Cycle.filter(id=ride.cycle_id).using_db(connection).update(
                status=CycleStatus.AVAILABLE, updated_at=end_time
            )

        ride = await self._reload(ride)
        logger.info("User %s cancelled ride %s", resolve_id(user), ride.id)
        return ride

    async def active_ride(self, user: Union[User, int]) -> Optional[Ride]:
        """Gets the active ride for a given user, or None."""
        return await Ride.filter(
            user_id=resolve_id(user), status=RideStatus.ACTIVE
        ).first().prefetch_related(*RIDE_RELATIONS)

    async def has_active_ride(self, user: Union[User, int]) -> bool:
        return await Ride.filter(user_id=resolve_id(user), status=RideStatus.ACTIVE).exists()

    @staticmethod
    async def _reload(ride: Ride) -> Ride:
        return await Ride.get(id=ride.id).prefetch_related(*RIDE_RELATIONS)

    @staticmethod
    def _aware(value):
        """Database backends without timezone support hand back naive times."""
        return value if timezone.is_aware(value) else timezone.make_aware(value)

    def __repr__(self):
        return "<RideManager>"
