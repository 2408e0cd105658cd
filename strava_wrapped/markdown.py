"""Markdown rendering for a year of stats."""

from __future__ import annotations

import calendar
from datetime import date

from .models import RunningHighlights, Stats, TypeStats
from .stats import shows_pace
from .units import (
    format_clock,
    format_date,
    format_duration,
    format_hour,
    format_long_date,
    format_number,
    format_pace,
    format_speed,
)

DEFAULT_EMOJI = "🏅"

ACTIVITY_EMOJI = {
    "Run": "🏃",
    "Ride": "🚴",
    "Swim": "🏊",
    "Walk": "🚶",
    "Hike": "🥾",
    "WeightTraining": "🏋️",
    "Workout": "💪",
    "Yoga": "🧘",
    "CrossFit": "🏋️",
    "Elliptical": "🔄",
    "StairStepper": "🪜",
    "Rowing": "🚣",
    "Kayaking": "🛶",
    "Canoeing": "🛶",
    "Surfing": "🏄",
    "Skateboard": "🛹",
    "InlineSkate": "🛼",
    "IceSkate": "⛸️",
    "Snowboard": "🏂",
    "AlpineSki": "⛷️",
    "NordicSki": "🎿",
    "Golf": "⛳",
    "Soccer": "⚽",
    "Tennis": "🎾",
    "Pickleball": "🏓",
    "Badminton": "🏸",
    "RockClimbing": "🧗",
    "VirtualRide": "🖥️🚴",
    "VirtualRun": "🖥️🏃",
    "EBikeRide": "🔋🚴",
    "Handcycle": "🦽",
    "Wheelchair": "🦽",
}


def activity_emoji(activity_type: str) -> str:
    return ACTIVITY_EMOJI.get(activity_type, DEFAULT_EMOJI)


def _type_section(type_stats: TypeStats) -> list[str]:
    lines = [
        f"### {activity_emoji(type_stats.type)} {type_stats.type}",
        "",
        "| Stat | Value |",
        "|------|-------|",
        f"| Activities | {type_stats.count} |",
    ]
    if type_stats.distance_miles > 0:
        lines.append(f"| Distance | {format_number(type_stats.distance_miles)} mi |")
    lines.append(f"| Time | {format_duration(type_stats.moving_time_minutes)} |")
    if type_stats.elevation_gain_feet > 0:
        lines.append(f"| Elevation | {format_number(type_stats.elevation_gain_feet)} ft |")

    if type_stats.distance_miles > 0 and type_stats.moving_time_minutes > 0:
        if shows_pace(type_stats.type):
            avg_pace = type_stats.moving_time_minutes / type_stats.distance_miles
            lines.append(f"| Avg Pace | {format_pace(avg_pace)} |")
        else:
            avg_speed = type_stats.distance_miles / (type_stats.moving_time_minutes / 60)
            lines.append(f"| Avg Speed | {format_speed(avg_speed)} |")
    lines.append("")
    return lines


def _callout(heading: str, headline: str, detail: str) -> list[str]:
    return [heading, f"> {headline}", ">", f"> {detail}", ""]


def _running_sections(running: RunningHighlights) -> list[str]:
    lines: list[str] = []

    if running.fastest_5k:
        h = running.fastest_5k
        lines += _callout(
            "### ⚡ Fastest 5K (estimated)",
            f"🏃 **{h.name}**",
            f"{format_clock(h.estimated_minutes)} • {format_date(h.date)}",
        )

    if running.fastest_pace:
        h = running.fastest_pace
        lines += _callout(
            "### 🚀 Fastest Pace (3+ miles)",
            f"🏃 **{h.name}**",
            f"{format_pace(h.pace_min_per_mile)} • {format_number(h.distance_miles)} miles • {format_date(h.date)}",
        )

    if running.longest_streak:
        h = running.longest_streak
        lines += _callout(
            "### 🔗 Longest Streak",
            f"🔥 **{h.days} days in a row**",
            f"{format_date(h.start)} – {format_date(h.end)}",
        )

    if running.most_common_weekday:
        h = running.most_common_weekday
        lines += _callout(
            "### 📆 Favorite Day",
            f"🗓️ **{calendar.day_name[h.value]}**",
            f"{h.count} runs",
        )

    if running.most_common_hour:
        h = running.most_common_hour
        lines += _callout(
            "### ⏰ Favorite Start Time",
            f"🕐 **{format_hour(h.value)}**",
            f"{h.count} runs started in this hour",
        )

    return lines


def render_markdown(stats: Stats, generated_on: date | None = None) -> str:
    generated_on = generated_on or date.today()
    overall = stats.overall
    lines: list[str] = [
        f"# 🎉 {stats.title} {stats.year}",
        "",
        f"> ✨ Your year in motion — {overall.total_activities} activities and counting!",
        "",
        "## 📊 Year at a Glance",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| 🔢 **Activities** | {overall.total_activities} |",
        f"| 📏 **Distance** | {format_number(overall.distance_miles)} miles |",
        f"| ⏱️ **Moving Time** | {format_duration(overall.moving_time_minutes)} |",
        f"| ⛰️ **Elevation Gain** | {format_number(overall.elevation_gain_feet)} ft |",
        "",
        "## 🏅 By Activity Type",
        "",
    ]

    for type_stats in stats.by_type:
        lines += _type_section(type_stats)

    lines += ["## 🏆 Highlights", ""]
    highlights = stats.highlights

    if highlights.longest_by_distance:
        h = highlights.longest_by_distance
        lines += _callout(
            "### 📏 Longest by Distance",
            f"{activity_emoji(h.type)} **{h.name}**",
            f"{format_number(h.distance_miles)} miles • {h.type} • {format_date(h.date)}",
        )

    if highlights.longest_by_time:
        h = highlights.longest_by_time
        lines += _callout(
            "### ⏱️ Longest by Time",
            f"{activity_emoji(h.type)} **{h.name}**",
            f"{format_duration(h.duration_minutes)} • {h.type} • {format_date(h.date)}",
        )

    if highlights.busiest_day:
        h = highlights.busiest_day
        lines += _callout(
            "### 📅 Busiest Day",
            f"🔥 **{format_date(h.date)}**",
            f"{h.count} activities in one day!",
        )

    if highlights.most_common_type:
        h = highlights.most_common_type
        lines += _callout(
            "### ❤️ Favorite Activity",
            f"{activity_emoji(h.type)} **{h.type}**",
            f"{h.count} times this year",
        )

    if stats.running is not None:
        lines += _running_sections(stats.running)

    lines += [
        "---",
        "",
        '<p align="center">',
        f"  <em>Generated on {format_long_date(generated_on)} • Powered by Strava</em>",
        "</p>",
    ]
    return "\n".join(lines)
