from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .models import Activity

ActivityFilter = Callable[[Activity], bool]


def any_activity(_activity: Activity) -> bool:
    return True


def is_run(activity: Activity) -> bool:
    # TrailRun reports type "Run"; VirtualRun is a type of its own and is left out
    return activity.type == "Run"


@dataclass(frozen=True)
class ReportVariant:
    """Which activities a report covers and which highlight sets it computes."""

    name: str
    title: str
    include: ActivityFilter
    running_highlights: bool
    path_template: str
    commit_template: str

    def output_path(self, year: int) -> str:
        return self.path_template.format(year=year)

    def commit_message(self, year: int) -> str:
        return self.commit_template.format(year=year)


ALL_ACTIVITIES = ReportVariant(
    name="all",
    title="Strava Wrapped",
    include=any_activity,
    running_highlights=False,
    path_template="wrapped/{year}.md",
    commit_template="🏃 Add Strava Wrapped {year}",
)

RUNNING_ONLY = ReportVariant(
    name="running",
    title="Strava Running Wrapped",
    include=is_run,
    running_highlights=True,
    path_template="wrapped/{year}-running.md",
    commit_template="🏃 Add Strava Running Wrapped {year}",
)


def select_variant(runs_only: bool) -> ReportVariant:
    return RUNNING_ONLY if runs_only else ALL_ACTIVITIES
