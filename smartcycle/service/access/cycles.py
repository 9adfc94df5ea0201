"""
Cycles
------

Handles the CRUD for cycles.

The ``in-use`` status belongs to the ride lifecycle: a cycle can only be
moved into or out of it by starting or ending a ride. Administrators may
move a cycle between the remaining states, and the update is applied
conditionally so that it can never overwrite a ride that started in the
meantime.
"""
from typing import Optional, List, Tuple, Dict, Any

from tortoise import timezone
from tortoise.exceptions import IntegrityError

from smartcycle.models import Cycle, CycleStatus, CycleCondition, Station
from smartcycle.service.access.pagination import paginate
from smartcycle.service.qr import generate_qr_code


class CycleExistsError(Exception):
    """Raised when a cycle with the same identifier is already registered."""
    kind = "conflict"


class CycleStatusError(Exception):
    """Raised when a status change would break the ride lifecycle."""
    kind = "invalid_state"


async def get_cycles(
    *, status: CycleStatus = None, station_id: int = None, include_inactive=False, page: int = 1, limit: int = 10
) -> Tuple[List[Cycle], Dict[str, Any]]:
    """
    Gets a page of cycles, optionally filtered by status and station.

    :return: The cycles and the pagination info.
    """
    query = Cycle.all() if include_inactive else Cycle.filter(is_active=True)

    if status is not None:
        query = query.filter(status=status)
    if station_id is not None:
        query = query.filter(station_id=station_id)

    return await paginate(query.order_by("identifier").prefetch_related("station"), page, limit)


async def get_cycle(cycle_id: int = None, *, identifier: str = None, include_inactive=False) -> Optional[Cycle]:
    """
    Gets a single cycle, either by its id or by the identifier encoded in its QR code.
    """
    kwargs = {}
    if cycle_id is not None:
        kwargs["id"] = cycle_id
    if identifier is not None:
        kwargs["identifier"] = identifier
    if not include_inactive:
        kwargs["is_active"] = True

    if "id" not in kwargs and "identifier" not in kwargs:
        raise TypeError("Must supply either a cycle id or identifier.")

    return await Cycle.filter(**kwargs).first().prefetch_related("station")


async def create_cycle(
    *, identifier: str, station: Station, model: str, color: str = None, condition: CycleCondition = None
) -> Cycle:
    """
    Registers a new cycle at the given station, rendering its QR code.

    :raises CycleExistsError: When a cycle with the identifier already exists.
    """
    kwargs = {}
    if color is not None:
        kwargs["color"] = color
    if condition is not None:
        kwargs["condition"] = condition

    try:
        cycle = await Cycle.create(
            identifier=identifier, station=station, model=model, qr_code=generate_qr_code(identifier), **kwargs
        )
    except IntegrityError as error:
        raise CycleExistsError(f"Cycle with identifier {identifier} already exists.") from error

    cycle.station = station
    return cycle


async def update_cycle(
    cycle: Cycle, *, station: Station = None, model: str = None, color: str = None, condition: CycleCondition = None
) -> Cycle:
    """
    Updates the descriptive attributes of a cycle, or moves it to another station.

    Only the supplied columns are written, so the status set by a ride is never overwritten.
    """
    changed = []
    if station is not None:
        cycle.station = station
        changed.append("station_id")
    if model is not None:
        cycle.model = model
        changed.append("model")
    if color is not None:
        cycle.color = color
        changed.append("color")
    if condition is not None:
        cycle.condition = condition
        changed.append("condition")

    if changed:
        await cycle.save(update_fields=changed + ["updated_at"])
    return cycle


async def set_cycle_status(cycle: Cycle, status: CycleStatus) -> Cycle:
    """
    Sets the status of a cycle on behalf of an administrator.

    :raises CycleStatusError: If the cycle would be moved into or out of ``in-use``.
    """
    if status not in CycleStatus.manual_states():
        raise CycleStatusError("Cycles are only put in use by starting a ride.")

    changes: Dict[str, Any] = {"status": status, "updated_at": timezone.now()}
    if status == CycleStatus.MAINTENANCE:
        changes["last_maintenance"] = changes["updated_at"]

    updated = await Cycle.filter(id=cycle.id).exclude(status=CycleStatus.IN_USE).update(**changes)
    if not updated:
        raise CycleStatusError("The cycle is in use, end or cancel its ride first.")

    await cycle.refresh_from_db()
    return cycle


async def delete_cycle(cycle: Cycle) -> Cycle:
    """
    Deactivates the cycle.

    :raises CycleStatusError: If the cycle is being ridden.
    """
    updated = await Cycle.filter(id=cycle.id).exclude(status=CycleStatus.IN_USE).update(
        is_active=False, updated_at=timezone.now()
    )
    if not updated:
        raise CycleStatusError("The cycle is in use, end or cancel its ride first.")

    cycle.is_active = False
    return cycle
