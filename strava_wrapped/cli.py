from __future__ import annotations

import argparse
from pathlib import Path

from .config import OPTIONAL_VARS, REQUIRED_VARS, SECRET_VARS, build_config, resolve_settings
from .errors import WrappedError
from .runner import run


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="strava-wrapped",
        description="Summarize a year of Strava activities and commit the report to GitHub",
    )
    parser.add_argument("--year", type=int, help="Year to summarize (default: YEAR or the current year)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the report instead of committing it.",
    )
    parser.add_argument(
        "--runs-only",
        action="store_true",
        help="Only include runs and add pace, streak and habit highlights.",
    )
    parser.add_argument("--env-file", help="Extra .env file to read settings from.")
    parser.add_argument("--config", help="YAML settings file for non-secret values.")
    parser.add_argument("--output", help="Also write the rendered Markdown to this path.")
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Show where each setting comes from and exit without calling any API.",
    )
    return parser.parse_args(argv)


def cli_overrides(args: argparse.Namespace) -> dict[str, str]:
    overrides: dict[str, str] = {}
    if args.year is not None:
        overrides["YEAR"] = str(args.year)
    if args.dry_run:
        overrides["DRY_RUN"] = "true"
    if args.runs_only:
        overrides["RUNS_ONLY"] = "true"
    return overrides


def print_settings_report(values: dict[str, str], sources: dict[str, str]) -> None:
    print("Strava Wrapped settings:")
    for var in REQUIRED_VARS + OPTIONAL_VARS:
        if var not in values:
            label = "MISSING" if var in REQUIRED_VARS else "default"
            print(f"- {var}: {label}")
            continue
        shown = "set" if var in SECRET_VARS else values[var]
        print(f"- {var}: {shown} ({sources[var]})")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    print("Strava Wrapped Generator")

    try:
        values, sources, searched_env_files = resolve_settings(
            cli_overrides(args), env_file=args.env_file, settings_file=args.config
        )
        if args.check_config:
            print_settings_report(values, sources)
            build_config(values, searched_env_files)
            return

        config = build_config(values, searched_env_files)
        print(f"Year: {config.year}")
        print(f"Target: {config.github.owner}/{config.github.repo}")
        print(f"Dry Run: {config.dry_run}")

        run(config, output_path=Path(args.output).expanduser() if args.output else None)
    except WrappedError as exc:
        raise SystemExit(f"Error: {exc}") from exc


if __name__ == "__main__":
    main()
