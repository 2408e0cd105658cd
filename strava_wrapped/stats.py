from __future__ import annotations

from collections import Counter
from datetime import timedelta
from typing import Callable, Iterable, Sequence, TypeVar

from .models import (
    Activity,
    BusiestDay,
    FastestFiveK,
    FrequencyMode,
    Highlights,
    LongestByDistance,
    LongestByTime,
    MostCommonType,
    OverallTotals,
    PaceRecord,
    RunningHighlights,
    Stats,
    Streak,
    TypeStats,
)
from .units import (
    METERS_PER_5K,
    MILES_PER_METER,
    meters_to_feet,
    meters_to_miles,
    round_half_up,
    seconds_to_minutes,
)
from .variants import ALL_ACTIVITIES, ReportVariant

T = TypeVar("T")

PACE_TYPES = frozenset({"Run", "Walk", "Hike"})
LONG_RUN_MIN_METERS = 3.0 / MILES_PER_METER


def shows_pace(activity_type: str) -> bool:
    return activity_type in PACE_TYPES


def first_max(items: Iterable[T], key: Callable[[T], float]) -> T | None:
    """Largest item by ``key``; an exact tie keeps the earlier item."""
    best: T | None = None
    best_value = 0.0
    for item in items:
        value = key(item)
        if best is None or value > best_value:
            best, best_value = item, value
    return best


def first_min(items: Iterable[T], key: Callable[[T], float]) -> T | None:
    return first_max(items, lambda item: -key(item))


def _totals(activities: Sequence[Activity]) -> tuple[float, int, int]:
    distance = sum(a.distance for a in activities)
    moving_time = sum(a.moving_time for a in activities)
    elevation = sum(a.total_elevation_gain for a in activities)
    return (
        round_half_up(meters_to_miles(distance), 1),
        int(round_half_up(seconds_to_minutes(moving_time))),
        int(round_half_up(meters_to_feet(elevation))),
    )


def group_by_type(activities: Sequence[Activity]) -> tuple[TypeStats, ...]:
    groups: dict[str, list[Activity]] = {}
    for activity in activities:
        groups.setdefault(activity.type, []).append(activity)

    rows = []
    for activity_type, members in groups.items():
        distance_miles, moving_minutes, elevation_feet = _totals(members)
        rows.append(
            TypeStats(
                type=activity_type,
                count=len(members),
                distance_miles=distance_miles,
                moving_time_minutes=moving_minutes,
                elevation_gain_feet=elevation_feet,
            )
        )
    # sorted() is stable, so equal counts keep first-seen order
    return tuple(sorted(rows, key=lambda row: row.count, reverse=True))


def longest_by_distance(activities: Sequence[Activity]) -> LongestByDistance | None:
    best = first_max(activities, lambda a: a.distance)
    if best is None:
        return None
    return LongestByDistance(
        name=best.name,
        type=best.type,
        date=best.local_date,
        distance_miles=round_half_up(meters_to_miles(best.distance), 2),
    )


def longest_by_time(activities: Sequence[Activity]) -> LongestByTime | None:
    best = first_max(activities, lambda a: a.moving_time)
    if best is None:
        return None
    return LongestByTime(
        name=best.name,
        type=best.type,
        date=best.local_date,
        duration_minutes=int(round_half_up(seconds_to_minutes(best.moving_time))),
    )


def busiest_day(activities: Sequence[Activity]) -> BusiestDay | None:
    # Counter keeps insertion order, so ties go to the first day seen
    day_counts = Counter(activity.local_date for activity in activities)
    best = first_max(day_counts.items(), lambda entry: entry[1])
    if best is None:
        return None
    return BusiestDay(date=best[0], count=best[1])


def most_common_type(by_type: Sequence[TypeStats]) -> MostCommonType | None:
    if not by_type:
        return None
    head = by_type[0]
    return MostCommonType(type=head.type, count=head.count)


def pace_min_per_mile(activity: Activity) -> float:
    return seconds_to_minutes(activity.moving_time) / meters_to_miles(activity.distance)


def fastest_5k(activities: Sequence[Activity]) -> FastestFiveK | None:
    """Average pace scaled to 5 km. An estimate, not a split analysis."""
    candidates = [a for a in activities if a.distance >= METERS_PER_5K]
    best = first_min(candidates, lambda a: a.moving_time / a.distance)
    if best is None:
        return None
    return FastestFiveK(
        name=best.name,
        date=best.local_date,
        estimated_minutes=seconds_to_minutes(best.moving_time / best.distance * METERS_PER_5K),
    )


def fastest_pace(activities: Sequence[Activity]) -> PaceRecord | None:
    candidates = [a for a in activities if a.distance >= LONG_RUN_MIN_METERS]
    best = first_min(candidates, pace_min_per_mile)
    if best is None:
        return None
    return PaceRecord(
        name=best.name,
        date=best.local_date,
        distance_miles=round_half_up(meters_to_miles(best.distance), 2),
        pace_min_per_mile=pace_min_per_mile(best),
    )


def longest_streak(activities: Sequence[Activity]) -> Streak | None:
    days = sorted({activity.local_date for activity in activities})
    if not days:
        return None

    best = current = Streak(days=1, start=days[0], end=days[0])
    for previous, day in zip(days, days[1:]):
        if day - previous == timedelta(days=1):
            current = Streak(days=current.days + 1, start=current.start, end=day)
        else:
            current = Streak(days=1, start=day, end=day)
        if current.days > best.days:
            best = current
    return best


def lowest_mode(values: Iterable[int]) -> FrequencyMode | None:
    """Most frequent value; ties go to the lowest value."""
    counts = Counter(values)
    if not counts:
        return None
    value, count = min(counts.items(), key=lambda entry: (-entry[1], entry[0]))
    return FrequencyMode(value=value, count=count)


def most_common_weekday(activities: Sequence[Activity]) -> FrequencyMode | None:
    # Monday is 0
    return lowest_mode(activity.local_start.weekday() for activity in activities)


def most_common_hour(activities: Sequence[Activity]) -> FrequencyMode | None:
    return lowest_mode(activity.local_start.hour for activity in activities)


def compute_running_highlights(activities: Sequence[Activity]) -> RunningHighlights:
    return RunningHighlights(
        fastest_5k=fastest_5k(activities),
        fastest_pace=fastest_pace(activities),
        longest_streak=longest_streak(activities),
        most_common_weekday=most_common_weekday(activities),
        most_common_hour=most_common_hour(activities),
    )


def compute_stats(
    activities: Sequence[Activity],
    year: int,
    variant: ReportVariant = ALL_ACTIVITIES,
) -> Stats:
    distance_miles, moving_minutes, elevation_feet = _totals(activities)
    by_type = group_by_type(activities)

    return Stats(
        year=year,
        variant=variant.name,
        title=variant.title,
        overall=OverallTotals(
            total_activities=len(activities),
            distance_miles=distance_miles,
            moving_time_minutes=moving_minutes,
            elevation_gain_feet=elevation_feet,
        ),
        by_type=by_type,
        highlights=Highlights(
            longest_by_distance=longest_by_distance(activities),
            longest_by_time=longest_by_time(activities),
            busiest_day=busiest_day(activities),
            most_common_type=most_common_type(by_type),
        ),
        running=compute_running_highlights(activities) if variant.running_highlights else None,
    )
