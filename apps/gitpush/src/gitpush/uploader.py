"""Upload files and record the outcome in history."""

import logging
from pathlib import Path

from .files import read_local_file
from .models import RepositoryConfig, UploadOutcome, UploadRecord
from .store import History
from .sync import RepositorySync

logger = logging.getLogger(__name__)


class Uploader:
    """Runs uploads through RepositorySync and keeps the history."""

    def __init__(self, sync: RepositorySync, history: History):
        self.sync = sync
        self.history = history

    async def upload(
        self, file_path: str | Path, config: RepositoryConfig, destination: str = ""
    ) -> tuple[UploadOutcome, UploadRecord]:
        """Upload one file; a record is added for every completed attempt."""
        config.require_complete()
        local_file = await read_local_file(file_path)
        outcome = await self.sync.put(local_file, config, destination)
        record = UploadRecord.from_outcome(local_file.name, outcome)
        self.history.add(record)
        if outcome.success:
            logger.info("Recorded upload of %s: %s", record.name, record.url)
        else:
            logger.warning("Recorded failed upload of %s: %s", record.name, record.error_message)
        return outcome, record
