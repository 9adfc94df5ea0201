"""
Reports
-------

Read-only aggregates over the rides in the system, used by the
administrator dashboard. Nothing here is cached; every report is
recomputed from the stored records on request.

Revenue is only ever earned by completed rides, and is charged at the
same rate as a single ride.
"""
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Dict, Any, List, Iterable

from tortoise import timezone

from smartcycle.models import Cycle, CycleStatus, Ride, RideStatus, Station, User
from smartcycle.serializer.misc import ANALYTICS_PERIODS
from smartcycle.service.access.rides import RIDE_RELATIONS, summarize_rides
from smartcycle.service.access.stations import get_cycle_counts, serialize_with_counts

RECENT_ACTIVITY_LIMIT = 5
TOP_LIMIT = 10


def _revenue(rides: Iterable[Ride]) -> float:
    return round(sum(ride.cost for ride in rides), 2)


def _start_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def _local_date(value: datetime) -> date:
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return timezone.localtime(value).date()


async def get_dashboard(router=None) -> Dict[str, Any]:
    """
    Gets the totals for the dashboard, along with the most recent rides and users.
    """
    today = _start_of_day(timezone.localtime().date())
    recent_rides = await Ride.all().order_by("-start_time", "-id").limit(RECENT_ACTIVITY_LIMIT).prefetch_related(
        *RIDE_RELATIONS)
    recent_users = await User.all().order_by("-created_at", "-id").limit(RECENT_ACTIVITY_LIMIT)
    completed_rides = await Ride.filter(status=RideStatus.COMPLETED).only("id", "duration", "status")

    return {
        "stats": {
            "total_users": await User.all().count(),
            "total_stations": await Station.all().count(),
            "total_cycles": await Cycle.all().count(),
            "total_rides": await Ride.all().count(),
            "active_rides": await Ride.filter(status=RideStatus.ACTIVE).count(),
            "today_rides": await Ride.filter(start_time__gte=today).count(),
            "total_revenue": _revenue(completed_rides),
        },
        "recent_activity": {
            "rides": [ride.serialize(router) for ride in recent_rides],
            "users": [user.serialize() for user in recent_users],
        }
    }


async def get_ride_analytics(period: str = "7d", router=None) -> Dict[str, Any]:
    """
    Summarizes the rides started within the period, along with a per day breakdown.

    :param period: One of ``1d``, ``7d``, ``30d`` or ``90d``.
    :raises KeyError: If the period is not known.
    """
    start_date = timezone.now() - timedelta(days=ANALYTICS_PERIODS[period])
    rides = await Ride.filter(start_time__gte=start_date).order_by("start_time", "id").prefetch_related(
        *RIDE_RELATIONS)

    by_date: Dict[date, List[Ride]] = defaultdict(list)
    for ride in rides:
        by_date[_local_date(ride.start_time)].append(ride)

    total_duration = sum(ride.duration for ride in rides)
    return {
        "period": period,
        "start_date": start_date,
        "summary": {
            "total_rides": len(rides),
            "total_duration": total_duration,
            "total_revenue": _revenue(rides),
            "average_duration": total_duration / len(rides) if rides else 0,
        },
        "rides_by_date": [
            {
                "date": day,
                "rides": len(day_rides),
                "duration": sum(ride.duration for ride in day_rides),
                "revenue": _revenue(day_rides),
            }
            for day, day_rides in sorted(by_date.items())
        ],
        "rides": [ride.serialize(router) for ride in rides],
    }


async def get_comprehensive_report(start_date: date = None, end_date: date = None) -> Dict[str, Any]:
    """
    Reports on the rides started between the two dates (inclusive), or on every ride.

    The most active riders and the busiest starting stations are ranked by number of rides.
    """
    query = Ride.all()
    if start_date is not None and end_date is not None:
        query = query.filter(
            start_time__gte=_start_of_day(start_date),
            start_time__lt=_start_of_day(end_date + timedelta(days=1)),
        )
    rides = await query.prefetch_related("user", "start_station")

    users: Dict[int, Dict[str, Any]] = {}
    stations: Dict[int, Dict[str, Any]] = {}
    for ride in rides:
        usage = users.setdefault(ride.user_id, {
            "user": ride.user.summary(), "rides": 0, "total_duration": 0, "total_spent": 0
        })
        usage["rides"] += 1
        usage["total_duration"] += ride.duration
        usage["total_spent"] += ride.cost

        station_usage = stations.setdefault(ride.start_station_id, {
            "station": ride.start_station.summary(), "rides": 0
        })
        station_usage["rides"] += 1

    return {
        "summary": {
            "total_rides": len(rides),
            "total_users": await User.all().count(),
            "total_stations": await Station.all().count(),
            "total_cycles": await Cycle.all().count(),
            "total_revenue": _revenue(rides),
        },
        "top_users": sorted(users.values(), key=lambda usage: usage["rides"], reverse=True)[:TOP_LIMIT],
        "top_stations": sorted(stations.values(), key=lambda usage: usage["rides"], reverse=True)[:TOP_LIMIT],
    }


async def get_station_stats(station: Station, router=None) -> Dict[str, Any]:
    """Counts the cycles at a station, and summarizes the completed rides that started there."""
    all_counts = await get_cycle_counts(station.id)
    counts = all_counts.get(station.id, {})
    rides = await Ride.filter(start_station_id=station.id, status=RideStatus.COMPLETED).only("id", "duration")
    ride_stats = summarize_rides(rides)

    return {
        "station": serialize_with_counts(station, all_counts, router),
        "cycles": {
            "total": sum(counts.values()),
            "available": counts.get(CycleStatus.AVAILABLE, 0),
            "in_use": counts.get(CycleStatus.IN_USE, 0),
            "maintenance": counts.get(CycleStatus.MAINTENANCE, 0),
            "out_of_service": counts.get(CycleStatus.OUT_OF_SERVICE, 0),
        },
        "rides": {
            "total_rides": ride_stats["total_rides"],
            "total_duration": ride_stats["total_duration"],
            "avg_duration": ride_stats["avg_duration"],
        },
    }
