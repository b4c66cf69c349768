"""GitHub API client utilities."""

from .client import GitHubClient, get_token
from .errors import GitHubAPIError, GitHubError, GitHubResponseError, NotAFileError
from .models import ContentListing, DirectoryListing, GitHubContent, PutFileResult, SingleFile

__all__ = [
    "GitHubClient",
    "GitHubContent",
    "GitHubError",
    "GitHubAPIError",
    "NotAFileError",
    "GitHubResponseError",
    "ContentListing",
    "DirectoryListing",
    "SingleFile",
    "PutFileResult",
    "get_token",
]
