"""gitpush data models."""

import uuid
from datetime import datetime, timezone
from typing import Literal

from gh import GitHubContent
from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigIncomplete


class RepositoryConfig(BaseModel):
    """Credentials and target of every repository operation."""

    model_config = ConfigDict(frozen=True)

    username: str = ""
    repository: str = ""
    token: str = ""
    branch: str = "main"

    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty."""
        return [
            name
            for name in ("username", "repository", "token", "branch")
            if not getattr(self, name).strip()
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def require_complete(self) -> "RepositoryConfig":
        """Return self, or raise ConfigIncomplete if any field is empty."""
        missing = self.missing_fields()
        if missing:
            raise ConfigIncomplete(missing)
        return self

    @property
    def slug(self) -> str:
        return f"{self.username}/{self.repository}"

    @property
    def masked_token(self) -> str:
        if len(self.token) <= 4:
            return "*" * len(self.token)
        return "*" * (len(self.token) - 4) + self.token[-4:]


class UploadOutcome(BaseModel):
    """Result of one create-or-update upload."""

    success: bool
    message: str
    url: str | None = None
    path: str | None = None
    updated: bool = False
    commit_sha: str | None = None
    status_code: int | None = None


class UploadRecord(BaseModel):
    """History entry for a completed upload attempt."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    url: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: Literal["success", "error"]
    error_message: str | None = None

    @classmethod
    def from_outcome(cls, name: str, outcome: UploadOutcome) -> "UploadRecord":
        return cls(
            name=name,
            url=outcome.url or "",
            status="success" if outcome.success else "error",
            error_message=None if outcome.success else outcome.message,
        )


class TextContent(BaseModel):
    """Decoded text body."""

    kind: Literal["text"] = "text"
    text: str

    @property
    def is_empty(self) -> bool:
        return self.text == ""


class ImageContent(BaseModel):
    """Image body as a self-describing data URI."""

    kind: Literal["image"] = "image"
    mime_type: str
    data_uri: str


DecodedContent = TextContent | ImageContent


class PreviewState(BaseModel):
    """What the explorer shows for the selected file."""

    name: str
    path: str
    html_url: str
    image_src: str | None = None
    is_text: bool = False
    text: str | None = None

    @classmethod
    def from_decoded(cls, entry: GitHubContent, decoded: DecodedContent) -> "PreviewState":
        if isinstance(decoded, ImageContent):
            return cls(
                name=entry.name,
                path=entry.path,
                html_url=entry.html_url,
                image_src=decoded.data_uri,
            )
        return cls(
            name=entry.name,
            path=entry.path,
            html_url=entry.html_url,
            is_text=True,
            text=decoded.text,
        )
