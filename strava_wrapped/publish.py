from __future__ import annotations

import base64
from dataclasses import dataclass
from urllib.parse import quote

import requests

from .errors import PublishError
from .github_app import GITHUB_API_BASE, github_headers


@dataclass(frozen=True)
class RemoteDocument:
    path: str
    sha: str
    content: bytes


class GitHubContentsClient:
    """Create-or-update a single file through the GitHub contents API."""

    def __init__(self, token: str, owner: str, repo: str, api_base: str = GITHUB_API_BASE) -> None:
        self.token = token
        self.owner = owner
        self.repo = repo
        self.api_base = api_base

    def contents_url(self, path: str) -> str:
        return f"{self.api_base}/repos/{self.owner}/{self.repo}/contents/{quote(path)}"

    def get_existing_file(self, path: str) -> RemoteDocument | None:
        try:
            response = requests.get(self.contents_url(path), headers=github_headers(self.token), timeout=30)
        except requests.RequestException as exc:
            raise PublishError(f"Failed to get file {path}: {exc}") from exc

        if response.status_code == 404:
            return None
        if not response.ok:
            raise PublishError(
                f"Failed to get file: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise PublishError(f"Invalid JSON for file {path}", status_code=response.status_code) from exc
        if not isinstance(payload, dict) or not payload.get("sha"):
            raise PublishError(f"{path} is not a file in {self.owner}/{self.repo}", status_code=response.status_code)

        # GitHub wraps base64 content at 60 columns; b64decode drops the newlines
        try:
            content = base64.b64decode(payload.get("content") or "")
        except ValueError as exc:
            raise PublishError(f"Cannot decode content of {path}: {exc}") from exc
        return RemoteDocument(path=path, sha=payload["sha"], content=content)

    def upsert_file(self, path: str, content: str, message: str, sha: str | None = None) -> None:
        body = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if sha:
            body["sha"] = sha

        try:
            response = requests.put(
                self.contents_url(path),
                headers=github_headers(self.token),
                json=body,
                timeout=30,
            )
        except requests.RequestException as exc:
            raise PublishError(f"Failed to upsert file {path}: {exc}") from exc

        if not response.ok:
            raise PublishError(
                f"Failed to upsert file: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

    def publish(self, path: str, content: str, message: str) -> bool:
        """Write ``content`` to ``path`` unless it is already there. Returns True on write."""
        print(f"Checking for existing file: {path}")
        existing = self.get_existing_file(path)

        if existing is not None:
            if existing.content == content.encode("utf-8"):
                print("File already exists with identical content. Skipping commit.")
                return False
            print(f"File exists, will update (sha: {existing.sha[:7]})")
        else:
            print("File does not exist, will create")

        print(f"Committing: {message}")
        self.upsert_file(path, content, message, existing.sha if existing else None)
        return True
