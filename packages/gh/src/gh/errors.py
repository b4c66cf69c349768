"""GitHub API errors."""

import httpx


class GitHubError(Exception):
    """Base error for the GitHub client."""


class GitHubAPIError(GitHubError):
    """Non-success response from the GitHub API."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        self.message = message
        super().__init__(message or f"GitHub API error {status_code}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "GitHubAPIError":
        """Build the error from a response, keeping GitHub's ``message`` field."""
        message = None
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            message = str(data["message"])
        return cls(response.status_code, message)


class NotAFileError(GitHubError):
    """A file was requested but the path resolved to a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path is not a file: {path}")


class GitHubResponseError(GitHubError):
    """A success response whose body is not the expected shape."""

    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Unexpected response from {endpoint}: {reason}")
