from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import Config
from .github_app import get_installation_token
from .markdown import render_markdown
from .publish import GitHubContentsClient
from .stats import compute_stats
from .strava import StravaClient
from .variants import select_variant

RULE = "=" * 60


@dataclass
class RunResult:
    activity_count: int
    path: str
    markdown: str | None = None
    published: bool = False


def write_local_copy(path: Path, markdown: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(markdown, encoding="utf-8")
    print(f"Wrote local copy to {path}")


def run(config: Config, output_path: Path | None = None) -> RunResult:
    variant = select_variant(config.runs_only)
    target_path = variant.output_path(config.year)

    client = StravaClient(config.strava)
    activities = client.fetch_activities_for_year(config.year, variant.include)
    if not activities:
        print("No activities found for this year. Exiting.")
        return RunResult(activity_count=0, path=target_path)

    print("Computing stats...")
    stats = compute_stats(activities, config.year, variant)

    print("Generating Markdown...")
    markdown = render_markdown(stats)
    result = RunResult(activity_count=len(activities), path=target_path, markdown=markdown)

    if output_path is not None:
        write_local_copy(output_path, markdown)

    if config.dry_run:
        print(RULE)
        print("DRY RUN - Generated Markdown:")
        print(RULE)
        print(markdown)
        print(RULE)
        print(f"File would be written to: {target_path}")
        print(RULE)
        return result

    token = get_installation_token(
        config.github.app_id,
        config.github.installation_id,
        config.github.private_key_path,
    )
    contents = GitHubContentsClient(token, config.github.owner, config.github.repo)
    result.published = contents.publish(target_path, markdown, variant.commit_message(config.year))

    print(f"Done! Check {config.github.owner}/{config.github.repo}/{target_path}")
    return result
