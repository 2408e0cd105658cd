from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import requests

from .config import StravaCredentials
from .errors import ApiError
from .models import Activity
from .variants import ActivityFilter

STRAVA_TOKEN_URL = "https://www.strava.com/oauth/token"
STRAVA_API_BASE = "https://www.strava.com/api/v3"
PER_PAGE = 200


@dataclass
class TokenHolder:
    """Bearer token state for one run. Replaced wholesale on refresh."""

    access_token: str
    refresh_token: str
    expires_at: int | None = None

    def is_expired(self, now: float | None = None) -> bool:
        if self.expires_at is None:
            return False
        current = time.time() if now is None else now
        return current >= self.expires_at


def year_bounds(year: int) -> tuple[int, int]:
    """Local-midnight epoch seconds for Jan 1 of ``year`` and of ``year + 1``."""
    start = datetime(year, 1, 1)
    end = datetime(year + 1, 1, 1)
    return int(start.timestamp()), int(end.timestamp())


class StravaClient:
    def __init__(
        self,
        credentials: StravaCredentials,
        tokens: TokenHolder | None = None,
        per_page: int = PER_PAGE,
    ) -> None:
        self.credentials = credentials
        self.tokens = tokens or TokenHolder(
            access_token=credentials.access_token,
            refresh_token=credentials.refresh_token,
        )
        self.per_page = per_page

    def refresh_access_token(self) -> TokenHolder:
        print("Refreshing Strava access token...")
        try:
            response = requests.post(
                STRAVA_TOKEN_URL,
                data={
                    "client_id": self.credentials.client_id,
                    "client_secret": self.credentials.client_secret,
                    "refresh_token": self.tokens.refresh_token,
                    "grant_type": "refresh_token",
                },
                timeout=60,
            )
        except requests.RequestException as exc:
            raise ApiError(f"Failed to refresh token: {exc}") from exc

        if not response.ok:
            raise ApiError(
                f"Failed to refresh token: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError("Token refresh response was not valid JSON", status_code=response.status_code) from exc
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise ApiError(
                "Token refresh response did not include an access token",
                status_code=response.status_code,
            )

        self.tokens = TokenHolder(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token") or self.tokens.refresh_token,
            expires_at=payload.get("expires_at"),
        )
        print("Token refreshed successfully")
        return self.tokens

    def request_json(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{STRAVA_API_BASE}{endpoint}"
        if self.tokens.is_expired():
            self.refresh_access_token()

        retried = False
        while True:
            try:
                response = requests.get(
                    url,
                    headers={"Authorization": f"Bearer {self.tokens.access_token}"},
                    params=params,
                    timeout=30,
                )
            except requests.RequestException as exc:
                raise ApiError(f"Strava API request failed for {url}: {exc}") from exc

            if response.status_code == 401 and not retried:
                retried = True
                self.refresh_access_token()
                continue

            if not response.ok:
                raise ApiError(
                    f"Strava API error: {response.status_code} {response.text}",
                    status_code=response.status_code,
                )
            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(
                    f"Strava API returned invalid JSON for {url}",
                    status_code=response.status_code,
                ) from exc

    def fetch_activities_for_year(self, year: int, include: ActivityFilter | None = None) -> list[Activity]:
        after, before = year_bounds(year)
        print(f"Fetching activities for {year}...")

        activities: list[Activity] = []
        page = 1
        while True:
            batch = self.request_json(
                "/athlete/activities",
                {"after": after, "before": before, "page": page, "per_page": self.per_page},
            )
            if not isinstance(batch, list):
                raise ApiError("Unexpected activities response from Strava API")
            if not batch:
                break

            parsed = [Activity.from_api(item) for item in batch if isinstance(item, dict)]
            valid = [
                activity
                for activity in parsed
                if activity.is_valid and (include is None or include(activity))
            ]
            activities.extend(valid)
            print(f"  Page {page}: {len(batch)} activities ({len(valid)} valid)")

            if len(batch) < self.per_page:
                break
            page += 1

        print(f"Found {len(activities)} total activities for {year}")
        return activities
