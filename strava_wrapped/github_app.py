"""GitHub App authentication.

A short-lived RS256 JWT identifies the app itself; GitHub exchanges it for an
installation token scoped to the repositories the app is installed on.
"""

from __future__ import annotations

import time
from pathlib import Path

import requests
from jose import jwt
from jose.exceptions import JOSEError

from .errors import AuthError

GITHUB_API_BASE = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
JWT_BACKDATE_SECONDS = 60
JWT_LIFETIME_SECONDS = 600


def github_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }


def load_private_key(path: Path) -> str:
    try:
        return Path(path).expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        raise AuthError(f"Cannot read GitHub App private key {path}: {exc}") from exc


def create_app_jwt(app_id: str, private_key: str, now: int | None = None) -> str:
    issued = int(time.time()) if now is None else now
    claims = {
        # backdated to absorb clock skew against GitHub
        "iat": issued - JWT_BACKDATE_SECONDS,
        "exp": issued + JWT_LIFETIME_SECONDS,
        "iss": str(app_id),
    }
    try:
        return jwt.encode(claims, private_key, algorithm="RS256")
    except JOSEError as exc:
        raise AuthError(f"Failed to sign GitHub App JWT: {exc}") from exc


def get_installation_token(app_id: str, installation_id: str, private_key_path: Path) -> str:
    print("Getting GitHub App installation token...")
    app_jwt = create_app_jwt(app_id, load_private_key(private_key_path))

    url = f"{GITHUB_API_BASE}/app/installations/{installation_id}/access_tokens"
    try:
        response = requests.post(url, headers=github_headers(app_jwt), timeout=60)
    except requests.RequestException as exc:
        raise AuthError(f"Failed to get installation token: {exc}") from exc

    if not response.ok:
        raise AuthError(
            f"Failed to get installation token: {response.status_code} {response.text}",
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise AuthError("Installation token response was not valid JSON", status_code=response.status_code) from exc

    token = payload.get("token") if isinstance(payload, dict) else None
    if not token:
        raise AuthError("Installation token response did not include a token")
    print("Installation token obtained")
    return token
