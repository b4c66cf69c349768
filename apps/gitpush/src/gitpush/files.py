"""Local file reading."""

import asyncio
import logging
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class LocalFile(BaseModel):
    """A local file read fully into memory."""

    name: str
    data: bytes


class FileReadFailure(BaseModel):
    """A local file that could not be read."""

    name: str
    reason: str


async def read_local_file(path: str | Path) -> LocalFile | FileReadFailure:
    """Read a local file off the event loop; failures are returned, not raised."""
    file_path = Path(path)
    try:
        data = await asyncio.to_thread(file_path.read_bytes)
    except OSError as e:
        logger.error("Failed to read %s: %s", file_path, e)
        return FileReadFailure(name=file_path.name, reason=e.strerror or str(e))
    logger.debug("Read %s (%d bytes)", file_path, len(data))
    return LocalFile(name=file_path.name, data=data)
