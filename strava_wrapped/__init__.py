"""Yearly Strava activity summaries published to GitHub."""

__version__ = "0.1.0"
