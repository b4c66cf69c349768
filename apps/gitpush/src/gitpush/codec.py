"""Base64 content codec for the contents API."""

import base64
import binascii
import logging
import re

from gh import GitHubContent

from .errors import ContentFormatError
from .models import DecodedContent, ImageContent, TextContent

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "svg", "webp"})

_WHITESPACE = re.compile(r"\s+")


def encode(raw: bytes) -> str:
    """Encode raw bytes as standard base64 text."""
    return base64.b64encode(raw).decode("ascii")


def extension_of(name: str) -> str:
    """Lowercase extension of a file name, without the dot."""
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def decode(content: str, extension: str) -> DecodedContent:
    """
    Decode base64 content into displayable text or an image data URI.

    Image extensions are passed through as a data URI without decoding.
    Everything else is read as UTF-8, falling back to latin-1 so that a
    binary file still gets a best-effort preview.

    Args:
        content: Base64 text, possibly wrapped in lines
        extension: File extension (case-insensitive)

    Returns:
        TextContent or ImageContent

    Raises:
        ContentFormatError: if the payload cannot be turned into text
    """
    payload = _WHITESPACE.sub("", content or "")
    if not payload:
        return TextContent(text="")

    ext = extension.lower().lstrip(".")
    if ext in IMAGE_EXTENSIONS:
        mime_type = f"image/{ext}"
        return ImageContent(mime_type=mime_type, data_uri=f"data:{mime_type};base64,{payload}")

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning("Invalid base64 payload: %s", e)
        raise ContentFormatError("Analysis failed: unsupported content format.") from e

    try:
        return TextContent(text=raw.decode("utf-8"))
    except UnicodeDecodeError:
        logger.debug("Content is not UTF-8, falling back to single-byte decoding")

    try:
        return TextContent(text=raw.decode("latin-1"))
    except UnicodeDecodeError as e:
        raise ContentFormatError("Analysis failed: unsupported content format.") from e


def decode_entry(entry: GitHubContent) -> DecodedContent:
    """Decode the inline content of a file entry."""
    if entry.content is None:
        logger.debug("No inline content for %s", entry.path)
        return TextContent(text="")
    return decode(entry.content, extension_of(entry.name))
