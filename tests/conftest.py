"""Shared fixtures for gitpush tests."""

import base64

import httpx
import pytest

from gitpush import RepositoryConfig, RepositorySync

API = "https://api.github.com"


def file_payload(path: str, sha: str = "sha-file", content: bytes | None = b"hello") -> dict:
    """Contents API object for a single file."""
    name = path.rsplit("/", 1)[-1]
    data = {
        "name": name,
        "path": path,
        "sha": sha,
        "size": len(content or b""),
        "url": f"{API}/repos/octo/repo/contents/{path}?ref=main",
        "html_url": f"https://github.com/octo/repo/blob/main/{path}",
        "git_url": f"{API}/repos/octo/repo/git/blobs/{sha}",
        "download_url": f"https://raw.githubusercontent.com/octo/repo/main/{path}",
        "type": "file",
    }
    if content is not None:
        encoded = base64.b64encode(content).decode("ascii")
        # GitHub wraps the payload at 60 characters
        data["content"] = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60)) + "\n"
        data["encoding"] = "base64"
    return data


def dir_payload(path: str, sha: str = "sha-dir") -> dict:
    """Contents API listing item for a directory."""
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "sha": sha,
        "size": 0,
        "url": f"{API}/repos/octo/repo/contents/{path}?ref=main",
        "html_url": f"https://github.com/octo/repo/tree/main/{path}",
        "git_url": f"{API}/repos/octo/repo/git/trees/{sha}",
        "download_url": None,
        "type": "dir",
    }


def put_payload(path: str, sha: str = "sha-new") -> dict:
    """Create/update response."""
    return {
        "content": {
            "name": path.rsplit("/", 1)[-1],
            "path": path,
            "sha": sha,
            "html_url": f"https://github.com/octo/repo/blob/main/{path}",
            "download_url": f"https://raw.githubusercontent.com/octo/repo/main/{path}",
        },
        "commit": {"sha": "commit-sha"},
    }


class Recorder:
    """Mock transport that records requests and answers through a handler."""

    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def methods(self) -> list[str]:
        return [r.method for r in self.requests]


@pytest.fixture
def config() -> RepositoryConfig:
    return RepositoryConfig(username="octo", repository="repo", token="ghp_secret1234", branch="main")


@pytest.fixture
def make_sync():
    """Build a RepositorySync and its recorder from a request handler."""

    def factory(handler):
        recorder = Recorder(handler)
        return RepositorySync(transport=recorder.transport), recorder

    return factory
