"""Path-driven repository explorer."""

import logging
from enum import Enum

from gh import DirectoryListing, GitHubContent
from pydantic import BaseModel, Field

from .codec import decode_entry
from .errors import ContentFormatError, FetchFailed
from .models import PreviewState, RepositoryConfig
from .sync import RepositorySync

logger = logging.getLogger(__name__)


class ExplorerState(str, Enum):
    IDLE = "idle"
    LISTING = "listing"
    LISTED = "listed"
    PREVIEW_LOADING = "preview_loading"
    PREVIEWING = "previewing"
    FAILED = "failed"


class ExplorerSnapshot(BaseModel):
    """Read-only view of the explorer for presentation."""

    state: ExplorerState
    current_path: str = ""
    last_path: str | None = None
    entries: list[GitHubContent] = Field(default_factory=list)
    preview: PreviewState | None = None
    error: str | None = None


class Explorer:
    """
    Explorer navigation over one repository.

    Each navigation takes a new generation number. A response that arrives
    after a newer navigation started is dropped, so the last request wins.
    """

    def __init__(self, sync: RepositorySync, config: RepositoryConfig):
        self.sync = sync
        self.config = config.require_complete()
        self.state = ExplorerState.IDLE
        self.current_path = ""
        self.last_path: str | None = None
        self.entries: list[GitHubContent] = []
        self.preview: PreviewState | None = None
        self.error: str | None = None
        self._generation = 0

    @property
    def busy(self) -> bool:
        return self.state in (ExplorerState.LISTING, ExplorerState.PREVIEW_LOADING)

    def snapshot(self) -> ExplorerSnapshot:
        return ExplorerSnapshot(
            state=self.state,
            current_path=self.current_path,
            last_path=self.last_path,
            entries=list(self.entries),
            preview=self.preview,
            error=self.error,
        )

    def _begin(self, state: ExplorerState) -> int:
        self._generation += 1
        self.state = state
        self.error = None
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug("Dropping stale response (generation %d < %d)", generation, self._generation)
            return True
        return False

    def _fail(self, message: str) -> None:
        logger.warning("Explorer failed: %s", message)
        self.state = ExplorerState.FAILED
        self.entries = []
        self.preview = None
        self.error = message

    def _show(self, entry: GitHubContent) -> None:
        try:
            decoded = decode_entry(entry)
        except ContentFormatError as e:
            self._fail(str(e))
            return
        self.preview = PreviewState.from_decoded(entry, decoded)
        self.state = ExplorerState.PREVIEWING
        logger.info("Previewing %s", entry.path)

    async def submit(self, path: str) -> ExplorerSnapshot:
        """Fetch a path: a directory is listed, a file goes straight to preview."""
        generation = self._begin(ExplorerState.LISTING)
        self.last_path = path
        logger.info("Submitting path: %s", path or "/")
        try:
            listing = await self.sync.list(self.config, path)
        except FetchFailed as e:
            if not self._is_stale(generation):
                self._fail(e.message)
            return self.snapshot()

        if self._is_stale(generation):
            return self.snapshot()

        if isinstance(listing, DirectoryListing):
            self.entries = listing.entries
            self.current_path = path
            self.preview = None
            self.state = ExplorerState.LISTED
            logger.info("Listed %s (%d entries)", path or "/", len(listing.entries))
        else:
            self.entries = []
            self._show(listing.entry)
        return self.snapshot()

    async def select(self, entry: GitHubContent) -> ExplorerSnapshot:
        """Open a listed entry: recurse into directories, preview files."""
        if entry.is_dir:
            return await self.submit(entry.path)

        generation = self._begin(ExplorerState.PREVIEW_LOADING)
        try:
            file_entry = await self.sync.get_file(self.config, entry.path)
        except FetchFailed as e:
            if not self._is_stale(generation):
                self._fail(e.message)
            return self.snapshot()

        if not self._is_stale(generation):
            self._show(file_entry)
        return self.snapshot()

    async def retry(self) -> ExplorerSnapshot:
        """Re-submit the last attempted path."""
        return await self.submit(self.last_path or "")

    def reset(self) -> ExplorerSnapshot:
        """Back to idle, dropping any in-flight response."""
        self._generation += 1
        self.state = ExplorerState.IDLE
        self.current_path = ""
        self.entries = []
        self.preview = None
        self.error = None
        return self.snapshot()
