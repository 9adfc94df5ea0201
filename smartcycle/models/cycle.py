"""
Cycle
-------------------------

Represents a physical bicycle. Each cycle carries a QR code that encodes
its ``identifier``; scanning that code is how a rider starts and ends a ride.

The ``status`` of a cycle is ``in-use`` exactly while an active
:class:`~smartcycle.models.ride.Ride` references it. Only the
:class:`~smartcycle.service.manager.ride_manager.RideManager` moves a cycle
in or out of that state; administrators may only move it between the others.
"""
from enum import Enum
from typing import Dict, Any

from tortoise import Model, fields

from smartcycle.models.util import fetched


class CycleStatus(str, Enum):
    """We subclass string to make json serialization work."""

    AVAILABLE = "available"
    IN_USE = "in-use"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out-of-service"

    @staticmethod
    def manual_states():
        """The states an administrator may set directly."""
        return CycleStatus.AVAILABLE, CycleStatus.MAINTENANCE, CycleStatus.OUT_OF_SERVICE


class CycleCondition(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class Cycle(Model):
    id = fields.IntField(primary_key=True)
    identifier = fields.CharField(max_length=64, unique=True)
    """The external identifier, as encoded in the QR code."""

    station = fields.ForeignKeyField("models.Station", related_name="cycles")
    status = fields.CharEnumField(CycleStatus, default=CycleStatus.AVAILABLE)

    model = fields.CharField(max_length=100)
    color = fields.CharField(max_length=50, default="Black")
    condition = fields.CharEnumField(CycleCondition, default=CycleCondition.GOOD)
    last_maintenance = fields.DatetimeField(auto_now_add=True)

    qr_code = fields.TextField(null=True)
    """A data url of the rendered QR code."""

    is_active = fields.BooleanField(default=True)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    def serialize(self, router=None, *, include_qr_code=False) -> Dict[str, Any]:
        """
        Serializes the cycle into a format that can be turned into JSON.

        :param include_qr_code: Whether to include the (large) QR code data url.
        """
        data = {
            "id": self.id,
            "identifier": self.identifier,
            "station_id": self.station_id,
            "status": self.status,
            "model": self.model,
            "color": self.color,
            "condition": self.condition,
            "last_maintenance": self.last_maintenance,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

        station = fetched(self.station)
        if station is not None:
            data["station"] = station.summary()

        if router is not None:
            data["url"] = router["cycle"].url_for(id=str(self.id)).path
            data["station_url"] = router["station"].url_for(id=str(self.station_id)).path

        if include_qr_code:
            data["qr_code"] = self.qr_code

        return data

    def summary(self) -> Dict[str, Any]:
        return {"identifier": self.identifier, "model": self.model, "color": self.color}

    @property
    def is_available(self) -> bool:
        return self.is_active and self.status == CycleStatus.AVAILABLE

    def __str__(self):
        return f"[{CycleStatus(self.status).value}] {self.identifier}"
