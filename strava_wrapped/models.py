from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


def parse_local_timestamp(value: str) -> datetime:
    """Parse Strava's ``start_date_local``.

    Strava stamps local wall-clock times with a ``Z`` suffix even though they
    are not UTC, so the offset is dropped and the naive local time is kept.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00").replace(" ", "T"))
    return parsed.replace(tzinfo=None)


def _float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class Activity:
    id: int
    name: str
    type: str
    sport_type: str
    start_date: str
    start_date_local: str
    distance: float
    moving_time: int
    elapsed_time: int
    total_elevation_gain: float
    average_speed: float
    max_speed: float

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Activity:
        activity_type = str(payload.get("type") or "")
        return cls(
            id=_int(payload.get("id")),
            name=str(payload.get("name") or ""),
            type=activity_type,
            sport_type=str(payload.get("sport_type") or activity_type),
            start_date=str(payload.get("start_date") or ""),
            start_date_local=str(payload.get("start_date_local") or payload.get("start_date") or ""),
            distance=_float(payload.get("distance")),
            moving_time=_int(payload.get("moving_time")),
            elapsed_time=_int(payload.get("elapsed_time")),
            total_elevation_gain=_float(payload.get("total_elevation_gain")),
            average_speed=_float(payload.get("average_speed")),
            max_speed=_float(payload.get("max_speed")),
        )

    @property
    def is_valid(self) -> bool:
        if self.moving_time <= 0 or not self.start_date_local:
            return False
        try:
            parse_local_timestamp(self.start_date_local)
        except ValueError:
            return False
        return True

    @property
    def local_start(self) -> datetime:
        return parse_local_timestamp(self.start_date_local)

    @property
    def local_date(self) -> date:
        return self.local_start.date()


@dataclass(frozen=True)
class TypeStats:
    type: str
    count: int
    distance_miles: float
    moving_time_minutes: int
    elevation_gain_feet: int


@dataclass(frozen=True)
class OverallTotals:
    total_activities: int
    distance_miles: float
    moving_time_minutes: int
    elevation_gain_feet: int


@dataclass(frozen=True)
class LongestByDistance:
    name: str
    type: str
    date: date
    distance_miles: float


@dataclass(frozen=True)
class LongestByTime:
    name: str
    type: str
    date: date
    duration_minutes: int


@dataclass(frozen=True)
class BusiestDay:
    date: date
    count: int


@dataclass(frozen=True)
class MostCommonType:
    type: str
    count: int


@dataclass(frozen=True)
class PaceRecord:
    name: str
    date: date
    distance_miles: float
    pace_min_per_mile: float


@dataclass(frozen=True)
class FastestFiveK:
    name: str
    date: date
    estimated_minutes: float


@dataclass(frozen=True)
class Streak:
    days: int
    start: date
    end: date


@dataclass(frozen=True)
class FrequencyMode:
    value: int
    count: int


@dataclass(frozen=True)
class Highlights:
    longest_by_distance: LongestByDistance | None = None
    longest_by_time: LongestByTime | None = None
    busiest_day: BusiestDay | None = None
    most_common_type: MostCommonType | None = None


@dataclass(frozen=True)
class RunningHighlights:
    fastest_5k: FastestFiveK | None = None
    fastest_pace: PaceRecord | None = None
    longest_streak: Streak | None = None
    most_common_weekday: FrequencyMode | None = None
    most_common_hour: FrequencyMode | None = None


@dataclass(frozen=True)
class Stats:
    year: int
    variant: str
    title: str
    overall: OverallTotals
    by_type: tuple[TypeStats, ...]
    highlights: Highlights
    running: RunningHighlights | None = None
