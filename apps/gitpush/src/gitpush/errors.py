"""gitpush errors."""


class GitPushError(Exception):
    """Base error."""


class ConfigIncomplete(GitPushError):
    """One or more repository credential fields are empty."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Repository config incomplete, missing: {', '.join(missing)}")


class FetchFailed(GitPushError):
    """A read against the repository failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class UploadFailed(GitPushError):
    """A write against the repository failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ContentFormatError(GitPushError):
    """Content could not be rendered as text or image."""
