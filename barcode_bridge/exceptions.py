"""
Иерархия исключений barcode_bridge.

Internal components raise these; the public ``decode``/``encode`` functions
catch ``BarcodeBridgeError``, log the cause and return ``None``.
"""

from __future__ import annotations

__all__ = [
    "BarcodeBridgeError",
    "InputResolutionError",
    "ImageCodecError",
    "EngineError",
    "NotFoundError",
    "WriterError",
    "SerializationError",
]


class BarcodeBridgeError(Exception):
    """Base class for every failure scoped to a single decode/encode call."""


class InputResolutionError(BarcodeBridgeError):
    """Input was recognised as a data URI / base64 payload but is not an image."""


class ImageCodecError(BarcodeBridgeError):
    """Image file could not be read or rasterised."""


class EngineError(BarcodeBridgeError):
    """Recognition/generation engine reported a failure."""


class NotFoundError(EngineError):
    """No symbol was detected in the image."""


class WriterError(EngineError):
    """Data cannot be encoded with the requested symbology or hints."""


class SerializationError(BarcodeBridgeError):
    """Symbol matrix could not be serialised or persisted."""
