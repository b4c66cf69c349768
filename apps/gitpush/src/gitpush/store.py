"""JSON stores for repository config and upload history."""

import json
import logging
import os
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .models import RepositoryConfig, UploadRecord

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
HISTORY_FILE = "history.json"

_records = TypeAdapter(list[UploadRecord])


def default_home() -> Path:
    """Store directory: $GITPUSH_HOME or ~/.config/gitpush."""
    env_home = os.environ.get("GITPUSH_HOME")
    if env_home:
        return Path(env_home)
    return Path.home() / ".config" / "gitpush"


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2, default=str)


class ConfigStore:
    """Persisted RepositoryConfig."""

    def __init__(self, path: Path | None = None):
        self.path = path or default_home() / CONFIG_FILE

    def load(self) -> RepositoryConfig | None:
        """Load config; None when missing or unreadable."""
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return RepositoryConfig(**json.load(f))
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.path, e)
            return None

    def save(self, config: RepositoryConfig) -> None:
        """Save config."""
        _write_json(self.path, config.model_dump(mode="json"))
        logger.debug("Saved config to %s", self.path)


class HistoryStore:
    """Persisted upload history, newest first."""

    def __init__(self, path: Path | None = None):
        self.path = path or default_home() / HISTORY_FILE

    def load(self) -> list[UploadRecord]:
        """Load history; [] when missing or unreadable."""
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return _records.validate_python(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Ignoring unreadable history %s: %s", self.path, e)
            return []

    def save(self, records: list[UploadRecord]) -> None:
        """Replace stored history."""
        _write_json(self.path, _records.dump_python(records, mode="json"))
        logger.debug("Saved %d history records to %s", len(records), self.path)


class History:
    """Upload history kept in memory and saved on every change."""

    def __init__(self, store: HistoryStore):
        self.store = store
        self.records = store.load()

    def _persist(self) -> bool:
        try:
            self.store.save(self.records)
        except OSError as e:
            logger.error("Failed to save history to %s: %s", self.store.path, e)
            return False
        return True

    def add(self, record: UploadRecord) -> bool:
        """Prepend a record; False if it could not be written to disk."""
        self.records = [record, *self.records]
        return self._persist()

    def clear(self) -> bool:
        self.records = []
        return self._persist()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
