from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

from helpers import make_activity

from strava_wrapped.config import Config, GitHubSettings, StravaCredentials
from strava_wrapped.errors import PublishError
from strava_wrapped.runner import run


def make_config(dry_run: bool = False, runs_only: bool = False) -> Config:
    return Config(
        year=2024,
        strava=StravaCredentials("access", "refresh", "12345", "secret"),
        github=GitHubSettings("999", "42", Path("key.pem"), "octo", "fitness"),
        dry_run=dry_run,
        runs_only=runs_only,
    )


ACTIVITIES = [
    make_activity(1, "Easy Run", "Run", miles=3.0, minutes=27.0, local="2024-04-01T07:00:00Z"),
    make_activity(2, "Commute", "Ride", miles=10.0, minutes=40.0, local="2024-04-02T08:00:00Z"),
]


@patch("strava_wrapped.runner.GitHubContentsClient")
@patch("strava_wrapped.runner.get_installation_token", return_value="inst-token")
@patch("strava_wrapped.runner.StravaClient")
class TestRun(TestCase):
    def test_publishes_report_for_all_activities(self, mock_strava, mock_token, mock_contents):
        mock_strava.return_value.fetch_activities_for_year.return_value = ACTIVITIES
        mock_contents.return_value.publish.return_value = True

        result = run(make_config())

        mock_token.assert_called_once_with("999", "42", Path("key.pem"))
        mock_contents.assert_called_once_with("inst-token", "octo", "fitness")
        path, markdown, message = mock_contents.return_value.publish.call_args.args
        self.assertEqual(path, "wrapped/2024.md")
        self.assertEqual(message, "🏃 Add Strava Wrapped 2024")
        self.assertTrue(markdown.startswith("# 🎉 Strava Wrapped 2024"))
        self.assertTrue(result.published)
        self.assertEqual(result.activity_count, 2)

    def test_runs_only_uses_running_path_and_filter(self, mock_strava, mock_token, mock_contents):
        mock_strava.return_value.fetch_activities_for_year.return_value = ACTIVITIES[:1]

        run(make_config(runs_only=True))

        _, include = mock_strava.return_value.fetch_activities_for_year.call_args.args
        self.assertTrue(include(ACTIVITIES[0]))
        self.assertFalse(include(ACTIVITIES[1]))
        path, markdown, message = mock_contents.return_value.publish.call_args.args
        self.assertEqual(path, "wrapped/2024-running.md")
        self.assertEqual(message, "🏃 Add Strava Running Wrapped 2024")
        self.assertIn("Longest Streak", markdown)

    def test_dry_run_never_touches_github(self, mock_strava, mock_token, mock_contents):
        mock_strava.return_value.fetch_activities_for_year.return_value = ACTIVITIES

        with patch("builtins.print") as mock_print:
            result = run(make_config(dry_run=True))

        mock_token.assert_not_called()
        mock_contents.assert_not_called()
        self.assertFalse(result.published)
        printed = [call.args[0] for call in mock_print.call_args_list if call.args]
        self.assertIn(result.markdown, printed)
        self.assertIn("File would be written to: wrapped/2024.md", printed)

    def test_no_activities_stops_before_publishing(self, mock_strava, mock_token, mock_contents):
        mock_strava.return_value.fetch_activities_for_year.return_value = []

        result = run(make_config())

        self.assertEqual(result.activity_count, 0)
        self.assertIsNone(result.markdown)
        mock_token.assert_not_called()
        mock_contents.assert_not_called()

    def test_output_path_receives_local_copy(self, mock_strava, mock_token, mock_contents):
        mock_strava.return_value.fetch_activities_for_year.return_value = ACTIVITIES
        output = Path(__file__).resolve().parent / "tmp_output" / "report.md"

        try:
            result = run(make_config(dry_run=True), output_path=output)
            self.assertEqual(output.read_text(encoding="utf-8"), result.markdown)
        finally:
            output.unlink(missing_ok=True)
            output.parent.rmdir()

    def test_publish_errors_propagate(self, mock_strava, mock_token, mock_contents):
        mock_strava.return_value.fetch_activities_for_year.return_value = ACTIVITIES
        mock_contents.return_value.publish.side_effect = PublishError("Failed to upsert file: 409", status_code=409)

        with self.assertRaises(PublishError):
            run(make_config())
