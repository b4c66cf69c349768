"""Repository sync client: create-or-update uploads and content reads."""

import logging
from pathlib import Path

import httpx
from gh import (
    ContentListing,
    GitHubAPIError,
    GitHubClient,
    GitHubContent,
    GitHubError,
    PutFileResult,
    SingleFile,
)

from .codec import encode
from .errors import FetchFailed, UploadFailed
from .files import FileReadFailure, LocalFile, read_local_file
from .models import RepositoryConfig, UploadOutcome

logger = logging.getLogger(__name__)

UPLOAD_FALLBACK_MESSAGE = "An error occurred during upload."
NETWORK_FALLBACK_MESSAGE = "Network error or unexpected failure."
LIST_FALLBACK_MESSAGE = "Failed to fetch contents"
FILE_FALLBACK_MESSAGE = "Failed to fetch file"


def remote_path(destination: str, file_name: str) -> str:
    """Join a destination directory and a file name into a repository path."""
    directory = destination.strip("/") if destination else ""
    return f"{directory}/{file_name}" if directory else file_name


def _fetch_error(error: Exception, fallback: str) -> FetchFailed:
    if isinstance(error, GitHubAPIError):
        return FetchFailed(error.message or fallback, status_code=error.status_code)
    return FetchFailed(str(error) or fallback)


class RepositorySync:
    """Reads and writes repository contents for a given RepositoryConfig."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the sync client.

        Args:
            base_url: Custom API base URL (GitHub Enterprise)
            timeout: Request timeout in seconds
            max_retries: Attempts for reads on transport errors
            transport: Custom httpx transport (mainly for tests)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.transport = transport

    def client_for(self, config: RepositoryConfig) -> GitHubClient:
        """GitHub client authenticated with the config's token."""
        config.require_complete()
        return GitHubClient(
            token=config.token,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=self.max_retries,
            transport=self.transport,
        )

    async def list(self, config: RepositoryConfig, path: str = "") -> ContentListing:
        """
        Fetch the contents at a path on the configured branch.

        Returns:
            DirectoryListing for a directory, SingleFile for a file

        Raises:
            ConfigIncomplete: if the config is missing a field
            FetchFailed: on a non-success response or network error
        """
        client = self.client_for(config)
        try:
            return await client.get_contents(
                config.username, config.repository, path.strip("/"), config.branch
            )
        except (GitHubError, httpx.HTTPError) as e:
            logger.error("Failed to list %s: %s", path or "/", e)
            raise _fetch_error(e, LIST_FALLBACK_MESSAGE) from e

    async def get_file(self, config: RepositoryConfig, path: str) -> GitHubContent:
        """
        Fetch a single file with its inline content.

        Raises:
            ConfigIncomplete: if the config is missing a field
            FetchFailed: on a non-success response, network error, or directory path
        """
        client = self.client_for(config)
        try:
            return await client.get_file(config.username, config.repository, path, config.branch)
        except (GitHubError, httpx.HTTPError) as e:
            logger.error("Failed to fetch file %s: %s", path, e)
            raise _fetch_error(e, FILE_FALLBACK_MESSAGE) from e

    async def existing_sha(self, client: GitHubClient, config: RepositoryConfig, path: str) -> str | None:
        """
        Blob SHA of the file at path, or None.

        Any failure is treated as "no existing file", including auth errors,
        which then surface at write time instead.
        """
        try:
            listing = await client.get_contents(config.username, config.repository, path, config.branch)
        except Exception as e:
            logger.debug("Existence check for %s failed, creating: %s", path, e)
            return None
        if isinstance(listing, SingleFile):
            logger.debug("Existing file %s sha=%s", path, listing.entry.sha)
            return listing.entry.sha
        logger.debug("Path %s is a directory, creating", path)
        return None

    async def write(
        self,
        client: GitHubClient,
        config: RepositoryConfig,
        path: str,
        content: str,
        name: str,
        sha: str | None,
    ) -> PutFileResult:
        """
        Issue the create (no sha) or update (sha) request.

        Raises:
            UploadFailed: with the server message, or the exception text
        """
        verb = "Update" if sha else "Upload"
        try:
            return await client.put_file(
                config.username,
                config.repository,
                path,
                content,
                message=f"{verb} {name} via gitpush",
                branch=config.branch,
                sha=sha,
            )
        except GitHubAPIError as e:
            raise UploadFailed(e.message or UPLOAD_FALLBACK_MESSAGE, status_code=e.status_code) from e
        except Exception as e:
            raise UploadFailed(str(e) or NETWORK_FALLBACK_MESSAGE) from e

    async def put(
        self,
        local_file: LocalFile | FileReadFailure | str | Path,
        config: RepositoryConfig,
        destination: str = "",
    ) -> UploadOutcome:
        """
        Create or update a file in the repository.

        Never raises for read, HTTP or network failures; they come back as an
        unsuccessful outcome.

        Args:
            local_file: Local path, or an already read LocalFile
            config: Repository config (must be complete)
            destination: Directory in the repository ("" for root)

        Raises:
            ConfigIncomplete: if the config is missing a field
        """
        client = self.client_for(config)
        if isinstance(local_file, (str, Path)):
            local_file = await read_local_file(local_file)
        if isinstance(local_file, FileReadFailure):
            return UploadOutcome(success=False, message=local_file.reason or "Failed to read file")

        content = encode(local_file.data)
        path = remote_path(destination, local_file.name)
        logger.info("Uploading %s to %s:%s", local_file.name, config.slug, path)

        sha = await self.existing_sha(client, config, path)

        try:
            result = await self.write(client, config, path, content, local_file.name, sha)
        except UploadFailed as e:
            logger.error("Upload of %s failed (status=%s): %s", path, e.status_code, e.message)
            return UploadOutcome(success=False, message=e.message, path=path, status_code=e.status_code)

        logger.info("%s %s -> %s", "Updated" if sha else "Uploaded", path, result.content.html_url)
        return UploadOutcome(
            success=True,
            url=result.content.html_url,
            path=path,
            updated=sha is not None,
            commit_sha=result.commit_sha,
            message="File updated successfully!" if sha else "File uploaded successfully!",
        )
