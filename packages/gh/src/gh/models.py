"""GitHub API data models."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class GitHubContent(BaseModel):
    """GitHub content item (file or directory)."""

    name: str
    path: str
    sha: str
    size: int = 0
    url: str = ""
    html_url: str = ""
    git_url: str | None = None
    download_url: str | None = None
    type: Literal["file", "dir", "symlink", "submodule"]
    content: str | None = None  # Base64 encoded content for files
    encoding: str | None = None  # Usually "base64" for files

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


class DirectoryListing(BaseModel):
    """Contents response for a directory path."""

    kind: Literal["directory"] = "directory"
    entries: list[GitHubContent] = Field(default_factory=list)


class SingleFile(BaseModel):
    """Contents response for a file path."""

    kind: Literal["file"] = "file"
    entry: GitHubContent


ContentListing = Annotated[DirectoryListing | SingleFile, Field(discriminator="kind")]


class CommitContent(BaseModel):
    """The ``content`` part of a create/update response."""

    name: str
    path: str
    sha: str
    html_url: str = ""
    download_url: str | None = None


class PutFileResult(BaseModel):
    """Create/update file response."""

    content: CommitContent
    commit_sha: str | None = None
