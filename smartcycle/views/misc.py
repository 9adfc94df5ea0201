"""
Miscellaneous Views
-------------------
"""
from marshmallow.fields import String, DateTime
from tortoise import timezone

from smartcycle.serializer import EnvelopeSchema, returns
from smartcycle.version import __version__
from smartcycle.views.base import BaseView


class HealthView(BaseView):
    """
    Reports that the server is up.
    """
    url = "/health"
    name = "health"

    @returns(EnvelopeSchema.of(status=String(), version=String(), time=DateTime()))
    async def get(self):
        return {
            "success": True,
            "message": "SmartCycle API is running.",
            "data": {"status": "ok", "version": __version__, "time": timezone.now()}
        }
