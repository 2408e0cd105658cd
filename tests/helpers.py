from __future__ import annotations

from typing import Any

import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from strava_wrapped.models import Activity
from strava_wrapped.units import MILES_PER_METER


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "", json_error: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.json_error = json_error

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self.json_error:
            raise requests.JSONDecodeError("Expecting value", self.text, 0)
        return self._payload


def miles_to_meters(miles: float) -> float:
    return miles / MILES_PER_METER


def make_activity(
    activity_id: int = 1,
    name: str = "Morning Run",
    activity_type: str = "Run",
    miles: float = 3.0,
    minutes: float = 30.0,
    local: str = "2024-03-01T07:00:00Z",
    elevation_m: float = 0.0,
) -> Activity:
    return Activity(
        id=activity_id,
        name=name,
        type=activity_type,
        sport_type=activity_type,
        start_date=local,
        start_date_local=local,
        distance=miles_to_meters(miles),
        moving_time=int(minutes * 60),
        elapsed_time=int(minutes * 60),
        total_elevation_gain=elevation_m,
        average_speed=0.0,
        max_speed=0.0,
    )


def activity_payload(activity_id: int, moving_time: int = 1800, activity_type: str = "Run") -> dict[str, Any]:
    return {
        "id": activity_id,
        "name": f"Activity {activity_id}",
        "type": activity_type,
        "sport_type": activity_type,
        "start_date": "2024-05-01T12:00:00Z",
        "start_date_local": "2024-05-01T08:00:00Z",
        "distance": 5000.0,
        "moving_time": moving_time,
        "elapsed_time": moving_time,
        "total_elevation_gain": 10.0,
        "average_speed": 2.8,
        "max_speed": 4.1,
    }


def generate_rsa_keypair() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")
    return private_pem, public_pem
