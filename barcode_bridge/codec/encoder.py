"""
RU: Конвейер генерации: матрица символа -> байты изображения -> файл.
EN: Encode dispatch and the public ``encode`` entry point.

Serialization happens in memory; when ``output_file`` is given the same
bytes are written there. No temporary file is created.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from barcode_bridge.codec.format_catalog import to_engine
from barcode_bridge.codec.hints import EncodeParameters, resolve_encode_parameters
from barcode_bridge.codec.imaging import image_format_for_path, serialize_matrix
from barcode_bridge.config import DEFAULT_CONFIG, get_config
from barcode_bridge.engine.base import SymbologyEngine
from barcode_bridge.exceptions import BarcodeBridgeError, SerializationError
from barcode_bridge.model.options import EncodeOptions, coerce_options

logger = logging.getLogger(__name__)

__all__ = [
    "EncodeDispatcher",
    "encode",
]


class EncodeDispatcher:
    """Runs the writer and serializes its matrix."""

    def __init__(
        self, engine: SymbologyEngine, config: Optional[Mapping[str, Any]] = None
    ) -> None:
        self._engine = engine
        self._config: Mapping[str, Any] = get_config() if config is None else config

    def image_format(self, params: EncodeParameters) -> str:
        default = str(self._config.get("image_format", DEFAULT_CONFIG["image_format"]))
        if params.output_file:
            return image_format_for_path(params.output_file, default="PNG")
        return default

    def run(self, data: str, options: EncodeOptions) -> bytes:
        """
        Raises:
            BarcodeBridgeError: writer, serialization or file write failed.
        """
        params = resolve_encode_parameters(options, self._config)
        logger.debug(
            "Encoding %d chars as %s, %dx%d",
            len(data),
            params.barcode_format.value,
            params.width,
            params.height,
        )
        image_format = self.image_format(params)
        matrix = self._engine.encode(
            data,
            to_engine(params.barcode_format),
            params.width,
            params.height,
            dict(params.hints),
        )
        payload = serialize_matrix(matrix, image_format)

        if params.output_file:
            try:
                Path(params.output_file).write_bytes(payload)
            except OSError as e:
                raise SerializationError(
                    f"Cannot write output file {params.output_file}: {e}"
                ) from e
            logger.info("Barcode written to %s (%d bytes)", params.output_file, len(payload))
        return payload


def _default_engine() -> SymbologyEngine:
    from barcode_bridge.engine.default import DefaultEngine

    return DefaultEngine()


def encode(
    data: str,
    options: Union[EncodeOptions, Mapping[str, Any], None] = None,
    *,
    engine: Optional[SymbologyEngine] = None,
    config: Optional[Mapping[str, Any]] = None,
) -> Optional[bytes]:
    """
    Encode ``data`` as a barcode image.

    Args:
        data: Contents to encode.
        options: ``EncodeOptions`` or a mapping (snake_case or camelCase keys).
        engine: Engine to use; a new ``DefaultEngine`` per call if omitted.
        config: Defaults overriding the loaded configuration for this call.

    Returns:
        Image bytes (PNG unless ``output_file`` names another format), or
        None when the data cannot be encoded.

    Raises:
        TypeError: ``data`` is not a string or ``options`` has a wrong type.
        ValueError: ``options`` mapping contains unknown keys or bad values.

    Examples:
        >>> png = encode("HELLO123", {"barcodeFormat": "qrcode", "width": 300})
        >>> encode("HELLO123", {"outputFile": "hello.svg"})
    """
    if not isinstance(data, str):
        raise TypeError(f"encode data must be str, got {type(data)!r}")
    opts = coerce_options(options, EncodeOptions)

    try:
        dispatcher = EncodeDispatcher(
            engine if engine is not None else _default_engine(), config
        )
        return dispatcher.run(data, opts)
    except BarcodeBridgeError as e:
        logger.warning("Encode failed: %s", e)
        return None
