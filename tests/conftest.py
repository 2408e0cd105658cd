import sys
from pathlib import Path

import pytest

# Shared helpers live next to the tests
sys.path.insert(0, str(Path(__file__).parent))

from helpers import generate_rsa_keypair  # noqa: E402

from strava_wrapped.config import GitHubSettings, StravaCredentials  # noqa: E402


@pytest.fixture(scope="session")
def rsa_keypair() -> tuple[str, str]:
    return generate_rsa_keypair()


@pytest.fixture
def private_key_file(tmp_path: Path, rsa_keypair) -> Path:
    path = tmp_path / "app.pem"
    path.write_text(rsa_keypair[0], encoding="utf-8")
    return path


@pytest.fixture
def strava_credentials() -> StravaCredentials:
    return StravaCredentials(
        access_token="initial-access",
        refresh_token="refresh-token",
        client_id="12345",
        client_secret="client-secret",
    )


@pytest.fixture
def github_settings(private_key_file: Path) -> GitHubSettings:
    return GitHubSettings(
        app_id="999",
        installation_id="42",
        private_key_path=private_key_file,
        owner="octo",
        repo="fitness",
    )
