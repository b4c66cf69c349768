"""GitHub API client."""

import logging
import os
import subprocess
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from .errors import GitHubAPIError, GitHubResponseError, NotAFileError
from .models import ContentListing, DirectoryListing, GitHubContent, PutFileResult, SingleFile

logger = logging.getLogger(__name__)

# Retry configuration (reads only; one attempt unless a caller asks for more)
DEFAULT_MAX_RETRIES = 1
DEFAULT_MIN_WAIT = 1  # seconds
DEFAULT_MAX_WAIT = 10  # seconds

# Retryable exceptions
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
    httpx.PoolTimeout,
    httpx.NetworkError,
)


def get_token_from_gh_cli() -> str | None:
    """
    Get GitHub token from gh cli.

    Returns:
        Token string or None if gh cli not available/authenticated
    """
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            logger.info("Using token from gh cli")
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("gh cli not available: %s", e)
    return None


def get_token(token: str | None = None, use_gh_cli: bool = False) -> str | None:
    """
    Get GitHub token from various sources.

    Priority:
    1. Explicitly provided token
    2. Environment variable GH_TOKEN / GITHUB_TOKEN
    3. gh cli (`gh auth token`) - only if use_gh_cli=True

    Args:
        token: Explicitly provided token
        use_gh_cli: Whether to use gh cli credentials (requires user consent)

    Returns:
        GitHub token or None
    """
    if token:
        logger.debug("Using explicitly provided token")
        return token

    env_token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if env_token:
        logger.info("Using token from environment variable")
        return env_token

    if use_gh_cli:
        return get_token_from_gh_cli()

    return None


def create_retry_decorator(max_retries: int = DEFAULT_MAX_RETRIES):
    """Create a retry decorator with specified max retries."""
    return retry(
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        stop=stop_after_attempt(max(1, max_retries)),
        wait=wait_exponential(multiplier=1, min=DEFAULT_MIN_WAIT, max=DEFAULT_MAX_WAIT),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def contents_endpoint(owner: str, repo: str, path: str) -> str:
    """Build the contents endpoint for a repository path."""
    clean = path.strip("/")
    return f"/repos/{quote(owner)}/{quote(repo)}/contents/{quote(clean, safe='/')}"


class GitHubClient:
    """Async GitHub REST client for the repository contents API."""

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        use_gh_cli: bool = False,
        max_retries: int = DEFAULT_MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token (optional)
            base_url: Custom base URL (defaults to GitHub API)
            timeout: Request timeout in seconds
            use_gh_cli: Use gh cli credentials (requires user consent)
            max_retries: Attempts for reads on transport errors (default: 1)
            transport: Custom httpx transport (mainly for tests)
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.transport = transport
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "gitpush",
        }

        resolved_token = get_token(token, use_gh_cli=use_gh_cli)

        if resolved_token:
            self.headers["Authorization"] = f"token {resolved_token}"
            logger.debug("GitHub client initialized with token")
        else:
            logger.warning("GitHub client initialized without token (rate limited)")
        logger.debug("GitHub client ready, base_url=%s, max_retries=%d", self.base_url, max_retries)

    async def _request(
        self, method: str, endpoint: str, retryable: bool = True, **kwargs: Any
    ) -> httpx.Response:
        """Make HTTP request to GitHub API; non-2xx raises GitHubAPIError."""
        url = f"{self.base_url}{endpoint}"

        async def do_request() -> httpx.Response:
            logger.debug("Request: %s %s", method, url)
            async with httpx.AsyncClient(
                timeout=self.timeout, headers=self.headers, transport=self.transport
            ) as client:
                response = await client.request(method, url, **kwargs)
                logger.debug(
                    "Response: %s %s (status=%d)",
                    method,
                    endpoint,
                    response.status_code,
                )
                if not response.is_success:
                    raise GitHubAPIError.from_response(response)
                return response

        if retryable:
            do_request = create_retry_decorator(self.max_retries)(do_request)
        return await do_request()

    async def get_contents(
        self, owner: str, repo: str, path: str = "", ref: str = "main"
    ) -> ContentListing:
        """
        Get repository contents.

        The contents endpoint answers with an array for directories and an
        object for files; both shapes are kept apart in the returned variant.

        Args:
            owner: Repository owner
            repo: Repository name
            path: Path in repository (empty for root)
            ref: Branch/tag/commit (default: main)

        Returns:
            DirectoryListing or SingleFile
        """
        endpoint = contents_endpoint(owner, repo, path)
        params = {"ref": ref} if ref else {}
        logger.info("Fetching contents: %s/%s path=%s ref=%s", owner, repo, path, ref)
        response = await self._request("GET", endpoint, params=params)

        try:
            data = response.json()
            if isinstance(data, dict):
                logger.debug("Single file response: %s", data.get("name"))
                return SingleFile(entry=GitHubContent(**data))
            if not isinstance(data, list):
                raise TypeError(f"expected object or array, got {type(data).__name__}")
            logger.debug("Directory listing: %d items", len(data))
            return DirectoryListing(entries=[GitHubContent(**item) for item in data])
        except (ValueError, TypeError, ValidationError) as e:
            logger.error("Unparseable contents response for %s: %s", endpoint, e)
            raise GitHubResponseError(endpoint, str(e)) from e

    async def get_file(
        self, owner: str, repo: str, path: str, ref: str = "main"
    ) -> GitHubContent:
        """
        Get a single file with its inline base64 content.

        Raises:
            NotAFileError: if the path is a directory
        """
        logger.info("Fetching file: %s/%s path=%s ref=%s", owner, repo, path, ref)
        listing = await self.get_contents(owner, repo, path, ref)
        if isinstance(listing, DirectoryListing):
            logger.error("Path is not a file: %s", path)
            raise NotAFileError(path)
        return listing.entry

    async def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str = "main",
        sha: str | None = None,
    ) -> PutFileResult:
        """
        Create or update a file. Never retried.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in repository
            content: Base64 encoded file content
            message: Commit message
            branch: Target branch
            sha: Blob SHA of the file being replaced (omit to create)

        Returns:
            PutFileResult with the written object's metadata
        """
        endpoint = contents_endpoint(owner, repo, path)
        body: dict[str, Any] = {"message": message, "content": content, "branch": branch}
        if sha:
            body["sha"] = sha
        logger.info(
            "Writing file: %s/%s path=%s branch=%s (%s)",
            owner, repo, path, branch, "update" if sha else "create",
        )
        response = await self._request("PUT", endpoint, retryable=False, json=body)
        try:
            data = response.json()
            commit = data.get("commit") or {}
            return PutFileResult(content=data["content"], commit_sha=commit.get("sha"))
        except (ValueError, TypeError, KeyError, AttributeError, ValidationError) as e:
            logger.error("Unparseable write response for %s: %s", endpoint, e)
            raise GitHubResponseError(endpoint, str(e)) from e
