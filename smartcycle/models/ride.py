"""
Ride
---------------------------

A single rental session, from scanning a cycle at one station to scanning
it again at another (or cancelling).

A ride is created ``active`` and moves exactly once to either ``completed``
or ``cancelled``. While it is active, ``active_rider`` and ``active_cycle``
mirror the rider and cycle ids. Both columns are unique, so the database
itself refuses a second active ride for the same rider or cycle; they are
cleared when the ride ends.
"""
from enum import Enum
from typing import Dict, Any, Optional

from tortoise import Model, fields
from tortoise.validators import MinValueValidator, MaxValueValidator

from smartcycle.models.util import fetched
from smartcycle.pricing import get_price, format_duration


class RideStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @staticmethod
    def terminating_types():
        """The states that end the ride."""
        return RideStatus.COMPLETED, RideStatus.CANCELLED


class Ride(Model):
    id = fields.IntField(primary_key=True)
    user = fields.ForeignKeyField("models.User", related_name="rides")
    cycle = fields.ForeignKeyField("models.Cycle", related_name="rides")
    start_station = fields.ForeignKeyField("models.Station", related_name="departures")
    end_station = fields.ForeignKeyField("models.Station", related_name="arrivals", null=True)

    start_time = fields.DatetimeField()
    end_time = fields.DatetimeField(null=True)
    duration = fields.IntField(default=0)
    """The length of the ride (in minutes)."""

    status = fields.CharEnumField(RideStatus, default=RideStatus.ACTIVE)

    rating = fields.SmallIntField(null=True, validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = fields.CharField(max_length=500, null=True)

    active_rider = fields.IntField(null=True, unique=True)
    active_cycle = fields.IntField(null=True, unique=True)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    @property
    def is_active(self) -> bool:
        return self.status == RideStatus.ACTIVE

    @property
    def cost(self) -> float:
        """The price of the ride (zero until it is completed)."""
        return get_price(self.duration) if self.status == RideStatus.COMPLETED else 0

    @property
    def formatted_duration(self) -> str:
        return format_duration(None if self.is_active else self.duration)

    @property
    def feedback(self) -> Optional[Dict[str, Any]]:
        if self.rating is None and self.comment is None:
            return None

        feedback = {}
        if self.rating is not None:
            feedback["rating"] = self.rating
        if self.comment is not None:
            feedback["comment"] = self.comment
        return feedback

    def serialize(self, router=None) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "cycle_id": self.cycle_id,
            "start_station_id": self.start_station_id,
            "end_station_id": self.end_station_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
            "formatted_duration": self.formatted_duration,
            "cost": self.cost,
            "status": self.status,
            "is_active": self.is_active,
            "feedback": self.feedback,
        }

        if router is not None:
            data["user_url"] = router["user"].url_for(id=str(self.user_id)).path
            data["cycle_url"] = router["cycle"].url_for(id=str(self.cycle_id)).path

        cycle = fetched(self.cycle)
        if cycle is not None:
            data["cycle"] = cycle.summary()

        start_station = fetched(self.start_station)
        if start_station is not None:
            data["start_station"] = start_station.summary()

        end_station = fetched(self.end_station)
        if end_station is not None:
            data["end_station"] = end_station.summary()

        return data

    def __str__(self):
        return f"[{self.id}] {RideStatus(self.status).value} ride of user {self.user_id} on cycle {self.cycle_id}"
