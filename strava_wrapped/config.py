from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

ENV_FILE_VAR = "STRAVA_WRAPPED_ENV_FILE"
DEFAULT_PRIVATE_KEY_PATH = "./private-key.pem"

REQUIRED_VARS = (
    "STRAVA_ACCESS_TOKEN",
    "STRAVA_REFRESH_TOKEN",
    "STRAVA_CLIENT_ID",
    "STRAVA_CLIENT_SECRET",
    "GITHUB_APP_ID",
    "GITHUB_INSTALLATION_ID",
    "GITHUB_OWNER",
    "GITHUB_REPO",
)
OPTIONAL_VARS = (
    "YEAR",
    "GITHUB_PRIVATE_KEY_PATH",
    "DRY_RUN",
    "RUNS_ONLY",
)
SECRET_VARS = frozenset(
    {
        "STRAVA_ACCESS_TOKEN",
        "STRAVA_REFRESH_TOKEN",
        "STRAVA_CLIENT_SECRET",
    }
)

# Secrets are deliberately absent: the settings file is for values safe to commit.
YAML_KEYS: dict[str, tuple[str, ...]] = {
    "YEAR": ("year",),
    "DRY_RUN": ("dry_run",),
    "RUNS_ONLY": ("runs_only",),
    "STRAVA_CLIENT_ID": ("strava", "client_id"),
    "GITHUB_APP_ID": ("github", "app_id"),
    "GITHUB_INSTALLATION_ID": ("github", "installation_id"),
    "GITHUB_PRIVATE_KEY_PATH": ("github", "private_key_path"),
    "GITHUB_OWNER": ("github", "owner"),
    "GITHUB_REPO": ("github", "repo"),
}


@dataclass(frozen=True)
class StravaCredentials:
    access_token: str
    refresh_token: str
    client_id: str
    client_secret: str


@dataclass(frozen=True)
class GitHubSettings:
    app_id: str
    installation_id: str
    private_key_path: Path
    owner: str
    repo: str


@dataclass(frozen=True)
class Config:
    year: int
    strava: StravaCredentials
    github: GitHubSettings
    dry_run: bool = False
    runs_only: bool = False


def is_readable_file(path: Path) -> bool:
    return path.exists() and path.is_file() and os.access(path, os.R_OK)


def parse_dotenv(path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    if not is_readable_file(path):
        return values

    with path.open("r", encoding="utf-8") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export ") :].strip()
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()
            if not key:
                continue
            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            values[key] = value
    return values


def discover_env_files(explicit: str | Path | None = None) -> list[Path]:
    candidate_paths: list[Path] = []
    for raw in (explicit, os.getenv(ENV_FILE_VAR)):
        if raw:
            path = Path(raw).expanduser()
            if path not in candidate_paths:
                candidate_paths.append(path)

    cwd_env = Path.cwd() / ".env"
    if cwd_env not in candidate_paths:
        candidate_paths.append(cwd_env)
    return candidate_paths


def load_settings_file(path: str | Path) -> dict[str, str]:
    settings_path = Path(path).expanduser()
    try:
        with settings_path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read settings file {settings_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {settings_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Expected a mapping at the top of {settings_path}")

    values: dict[str, str] = {}
    for var_name, key_path in YAML_KEYS.items():
        node: Any = payload
        for key in key_path:
            node = node.get(key) if isinstance(node, dict) else None
        if node is None:
            continue
        if isinstance(node, bool):
            node = "true" if node else "false"
        values[var_name] = str(node)
    return values


def resolve_settings(
    overrides: dict[str, str] | None = None,
    env_file: str | Path | None = None,
    settings_file: str | Path | None = None,
) -> tuple[dict[str, str], dict[str, str], list[Path]]:
    """Collect raw setting values and where each one came from.

    Precedence: overrides (CLI flags) -> environment -> .env files -> settings file.
    """
    names = REQUIRED_VARS + OPTIONAL_VARS
    values: dict[str, str] = {}
    sources: dict[str, str] = {}

    for var_name, value in (overrides or {}).items():
        if value:
            values[var_name] = value
            sources[var_name] = "cli"

    for var_name in names:
        if var_name in values:
            continue
        env_value = os.getenv(var_name)
        if env_value:
            values[var_name] = env_value
            sources[var_name] = "environment"

    env_files = discover_env_files(env_file)
    for path in env_files:
        if all(var_name in values for var_name in names):
            break
        if not is_readable_file(path):
            continue
        env_values = parse_dotenv(path)
        for var_name in names:
            if var_name in values:
                continue
            env_value = env_values.get(var_name)
            if env_value:
                values[var_name] = env_value
                sources[var_name] = f"dotenv:{path}"

    if settings_file:
        for var_name, value in load_settings_file(settings_file).items():
            if var_name in values or not value:
                continue
            values[var_name] = value
            sources[var_name] = f"settings:{settings_file}"

    return values, sources, env_files


def format_missing_settings_message(missing_vars: list[str], searched_env_files: list[Path]) -> str:
    env_locations = ", ".join(str(path) for path in searched_env_files)
    missing = ", ".join(missing_vars)
    return (
        f"Missing required settings: {missing}\n"
        "Lookup order: command line -> environment variables -> .env files -> settings file.\n"
        f"Searched .env paths: {env_locations}"
    )


def parse_flag(value: str | None) -> bool:
    return (value or "").strip().lower() == "true"


def parse_year(value: str | None) -> int:
    if not value:
        return datetime.now().year
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"YEAR must be an integer, got {value!r}") from exc


def build_config(values: dict[str, str], searched_env_files: list[Path] | None = None) -> Config:
    missing_vars = [var for var in REQUIRED_VARS if not values.get(var)]
    if missing_vars:
        raise ConfigError(format_missing_settings_message(missing_vars, searched_env_files or []))

    return Config(
        year=parse_year(values.get("YEAR")),
        strava=StravaCredentials(
            access_token=values["STRAVA_ACCESS_TOKEN"],
            refresh_token=values["STRAVA_REFRESH_TOKEN"],
            client_id=values["STRAVA_CLIENT_ID"],
            client_secret=values["STRAVA_CLIENT_SECRET"],
        ),
        github=GitHubSettings(
            app_id=values["GITHUB_APP_ID"],
            installation_id=values["GITHUB_INSTALLATION_ID"],
            private_key_path=Path(values.get("GITHUB_PRIVATE_KEY_PATH") or DEFAULT_PRIVATE_KEY_PATH).expanduser(),
            owner=values["GITHUB_OWNER"],
            repo=values["GITHUB_REPO"],
        ),
        dry_run=parse_flag(values.get("DRY_RUN")),
        runs_only=parse_flag(values.get("RUNS_ONLY")),
    )


def load_config(
    overrides: dict[str, str] | None = None,
    env_file: str | Path | None = None,
    settings_file: str | Path | None = None,
) -> Config:
    values, _sources, searched = resolve_settings(overrides, env_file, settings_file)
    return build_config(values, searched)
