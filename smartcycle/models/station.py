"""
Station
---------------------------

A physical docking location. Cycles are homed at a station, and every ride
starts (and, when completed, ends) at one.
"""
from typing import Dict, Any

from tortoise import Model, fields
from tortoise.validators import MinValueValidator


class Station(Model):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=100)
    location = fields.CharField(max_length=255)
    description = fields.CharField(max_length=500, null=True)
    capacity = fields.IntField(default=10, validators=[MinValueValidator(1)])

    latitude = fields.FloatField()
    longitude = fields.FloatField()

    is_active = fields.BooleanField(default=True)
    """Stations are never deleted, only deactivated."""

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    def serialize(self, router=None, *, available_cycles: int = None, total_cycles: int = None) -> Dict[str, Any]:
        """
        Serializes a station into a json format.

        :param available_cycles: The optional number of cycles ready to ride.
        :param total_cycles: The optional number of cycles homed at the station.
        """
        data = {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "description": self.description,
            "capacity": self.capacity,
            "coordinates": {
                "latitude": self.latitude,
                "longitude": self.longitude,
            },
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

        if router is not None:
            data["url"] = router["station"].url_for(id=str(self.id)).path

        if available_cycles is not None:
            data["available_cycles"] = available_cycles
        if total_cycles is not None:
            data["total_cycles"] = total_cycles

        return data

    def summary(self) -> Dict[str, Any]:
        """The short form used when a station is embedded in another resource."""
        return {"id": self.id, "name": self.name, "location": self.location}

    def __str__(self):
        return f"[{self.id}] {self.name}"
