"""Browse and publish files to a GitHub repository."""

from .codec import decode, decode_entry, encode, extension_of
from .errors import ConfigIncomplete, ContentFormatError, FetchFailed, GitPushError, UploadFailed
from .explorer import Explorer, ExplorerSnapshot, ExplorerState
from .files import FileReadFailure, LocalFile, read_local_file
from .models import (
    ImageContent,
    PreviewState,
    RepositoryConfig,
    TextContent,
    UploadOutcome,
    UploadRecord,
)
from .store import ConfigStore, History, HistoryStore
from .sync import RepositorySync, remote_path
from .uploader import Uploader

__all__ = [
    "RepositoryConfig",
    "RepositorySync",
    "Explorer",
    "ExplorerState",
    "ExplorerSnapshot",
    "Uploader",
    "ConfigStore",
    "HistoryStore",
    "History",
    "UploadOutcome",
    "UploadRecord",
    "PreviewState",
    "TextContent",
    "ImageContent",
    "LocalFile",
    "FileReadFailure",
    "read_local_file",
    "encode",
    "decode",
    "decode_entry",
    "extension_of",
    "remote_path",
    "GitPushError",
    "ConfigIncomplete",
    "FetchFailed",
    "UploadFailed",
    "ContentFormatError",
]
