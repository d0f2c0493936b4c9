"""
RU: Классификация входной строки: data URI -> base64 -> путь к файлу.
EN: Input classification for ``decode``.

Precedence:
    1. ``data:`` URI  -> embedded payload -> luminance buffer
    2. standard base64 of the whole string -> luminance buffer
    3. anything else is a filesystem path (nothing is read here)

Once (1) or (2) has parsed, a payload that is not an image fails the call;
only a parse failure of the encoding itself falls through to the next rule.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Final, Optional, Union
from urllib.parse import unquote_to_bytes

from barcode_bridge.codec.imaging import decode_image_bytes
from barcode_bridge.engine.base import PixelBuffer
from barcode_bridge.exceptions import ImageCodecError, InputResolutionError

logger = logging.getLogger(__name__)

__all__ = [
    "FilePath",
    "PixelBuffer",
    "InputRepresentation",
    "parse_data_uri",
    "parse_base64",
    "resolve_input",
]

VECTOR_EXTENSION: Final[str] = "svg"

_DATA_URI: Final = re.compile(
    r"^data:(?P<meta>[^,]*),(?P<payload>.*)$", re.IGNORECASE | re.DOTALL
)
_WHITESPACE: Final = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class FilePath:
    path: str

    @property
    def extension(self) -> str:
        """Extension without the dot, as written (no case folding)."""
        return PurePath(self.path).suffix[1:]

    @property
    def is_vector(self) -> bool:
        return self.extension == VECTOR_EXTENSION


InputRepresentation = Union[FilePath, PixelBuffer]


def _strict_b64decode(text: str) -> Optional[bytes]:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return None


def parse_data_uri(value: str) -> Optional[bytes]:
    """
    Parse ``data:[<mediatype>][;base64],<data>``.

    Returns:
        Payload bytes, or None when ``value`` is not a well-formed data URI.
    """
    match = _DATA_URI.match(value.strip())
    if match is None:
        return None
    params = [p.strip().lower() for p in match.group("meta").split(";")]
    payload = match.group("payload")
    if params[-1] == "base64":
        text = unquote_to_bytes(payload).decode("ascii", "replace")
        return _strict_b64decode(_WHITESPACE.sub("", text))
    return unquote_to_bytes(payload)


def parse_base64(value: str) -> Optional[bytes]:
    """Standard-alphabet base64 of the whole string, or None (empty counts as None)."""
    if not value:
        return None
    return _strict_b64decode(value) or None


def _to_pixels(raw: bytes, source: str) -> PixelBuffer:
    try:
        return decode_image_bytes(raw)
    except ImageCodecError as e:
        raise InputResolutionError(f"{source} payload is not a decodable image") from e


def resolve_input(value: str) -> InputRepresentation:
    """
    Classify ``value`` and decode embedded images.

    Raises:
        TypeError: ``value`` is not a string.
        InputResolutionError: data URI/base64 parsed but is not an image.
    """
    if not isinstance(value, str):
        raise TypeError(f"decode input must be str, got {type(value)!r}")

    raw = parse_data_uri(value)
    if raw:
        logger.debug("Input classified as data URI (%d payload bytes)", len(raw))
        return _to_pixels(raw, "data URI")

    raw = parse_base64(value)
    if raw:
        logger.debug("Input classified as base64 (%d payload bytes)", len(raw))
        return _to_pixels(raw, "base64")

    logger.debug("Input classified as file path: %s", value)
    return FilePath(value)
