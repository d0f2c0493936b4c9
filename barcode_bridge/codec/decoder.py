"""
RU: Диспетчер распознавания: выбор стратегии загрузки и кардинальности.
EN: Decode dispatch and the public ``decode``/``decode_pixels`` entry points.

Both axes are decided before the engine runs:

- input kind: file (raster or ``svg`` vector) or in-memory luminance buffer;
- cardinality: ``decode_multi is True`` selects multi-result detection.

Every failure scoped to the call (unresolvable input, unreadable file,
nothing detected) is logged and reported as ``None``; there are no partial
results.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Mapping, Optional, Union

from barcode_bridge.codec.format_catalog import from_engine
from barcode_bridge.codec.hints import build_decode_hints
from barcode_bridge.codec.imaging import load_raster_file, load_vector_file
from barcode_bridge.codec.input_resolver import (
    FilePath,
    InputRepresentation,
    resolve_input,
)
from barcode_bridge.engine.base import EngineResult, PixelBuffer, SymbologyEngine
from barcode_bridge.exceptions import (
    BarcodeBridgeError,
    InputResolutionError,
    NotFoundError,
)
from barcode_bridge.model.options import DecodeOptions, coerce_options
from barcode_bridge.model.results import DecodeResult

logger = logging.getLogger(__name__)

__all__ = [
    "DecodeStrategy",
    "DecodeDispatcher",
    "DecodeOutcome",
    "decode",
    "decode_pixels",
]

DecodeOutcome = Union[DecodeResult, List[DecodeResult], None]


class DecodeStrategy(str, Enum):
    FILE_RASTER = "file_raster"
    FILE_VECTOR = "file_vector"
    BUFFER_RASTER = "buffer_raster"


class DecodeDispatcher:
    """
    Routes a resolved input to the right loader and detection call.

    Examples:
        >>> dispatcher = DecodeDispatcher(engine)
        >>> dispatcher.select_strategy(FilePath("label.svg"))
        <DecodeStrategy.FILE_VECTOR: 'file_vector'>
    """

    def __init__(self, engine: SymbologyEngine) -> None:
        self._engine = engine

    @staticmethod
    def select_strategy(source: InputRepresentation) -> DecodeStrategy:
        if isinstance(source, PixelBuffer):
            return DecodeStrategy.BUFFER_RASTER
        if isinstance(source, FilePath):
            return DecodeStrategy.FILE_VECTOR if source.is_vector else DecodeStrategy.FILE_RASTER
        raise TypeError(f"Unknown input representation: {type(source)!r}")

    def load(self, source: InputRepresentation, strategy: DecodeStrategy) -> PixelBuffer:
        if strategy == DecodeStrategy.BUFFER_RASTER and isinstance(source, PixelBuffer):
            return source
        if strategy == DecodeStrategy.FILE_VECTOR and isinstance(source, FilePath):
            return load_vector_file(source.path)
        if strategy == DecodeStrategy.FILE_RASTER and isinstance(source, FilePath):
            return load_raster_file(source.path)
        raise TypeError(f"Strategy {strategy.name} cannot load {type(source).__name__}")

    def dispatch(
        self, source: InputRepresentation, hints: Mapping[Any, Any], multi: bool
    ) -> List[EngineResult]:
        """
        Load the image and run detection.

        Returns:
            One engine result (single) or all of them (multi), never empty.

        Raises:
            BarcodeBridgeError: loading or detection failed.
        """
        strategy = self.select_strategy(source)
        logger.debug("Decode strategy: %s, multi=%s", strategy.value, multi)
        image = self.load(source, strategy)
        if multi:
            results = self._engine.detect_multiple(image, hints)
            if not results:
                raise NotFoundError("Engine returned an empty result list")
            return list(results)
        return [self._engine.detect_single(image, hints)]


def _to_decode_result(result: EngineResult) -> DecodeResult:
    return DecodeResult(
        text=result.text,
        raw_bytes=bytes(result.raw_bytes),
        num_bits=result.num_bits,
        format=from_engine(result.format),
    )


def _default_engine() -> SymbologyEngine:
    from barcode_bridge.engine.default import DefaultEngine

    return DefaultEngine()


def _run(
    source_factory: Any,
    options: Union[DecodeOptions, Mapping[str, Any], None],
    engine: Optional[SymbologyEngine],
    label: str,
) -> DecodeOutcome:
    opts = coerce_options(options, DecodeOptions)
    hints = build_decode_hints(opts)
    multi = opts.decode_multi is True

    try:
        source = source_factory()
        dispatcher = DecodeDispatcher(engine if engine is not None else _default_engine())
        results = dispatcher.dispatch(source, hints, multi)
    except NotFoundError as e:
        logger.info("No barcode detected in %s: %s", label, e)
        return None
    except BarcodeBridgeError as e:
        logger.warning("Decode failed for %s: %s", label, e)
        return None

    mapped = [_to_decode_result(r) for r in results]
    logger.info(
        "Decoded %d symbol(s) from %s: %s",
        len(mapped),
        label,
        ", ".join(r.format.value for r in mapped),
    )
    return mapped if multi else mapped[0]


def decode(
    input: str,
    options: Union[DecodeOptions, Mapping[str, Any], None] = None,
    *,
    engine: Optional[SymbologyEngine] = None,
) -> DecodeOutcome:
    """
    Decode a barcode from a file path, ``data:`` URI or base64 image string.

    Args:
        input: Filesystem path, data URI or standard base64 of an image.
        options: ``DecodeOptions`` or a mapping (snake_case or camelCase keys).
        engine: Engine to use; a new ``DefaultEngine`` per call if omitted.

    Returns:
        ``DecodeResult`` (single), list of them (``decode_multi=True``) or
        None when nothing could be decoded.

    Raises:
        TypeError: ``input`` is not a string or ``options`` has a wrong type.
        ValueError: ``options`` mapping contains unknown keys.

    Examples:
        >>> result = decode("label.png", {"barcodeFormat": ["qrcode"]})
        >>> result.text
        'HELLO123'
    """
    if not isinstance(input, str):
        raise TypeError(f"decode input must be str, got {type(input)!r}")
    label = input if len(input) <= 64 else f"{input[:61]}..."
    return _run(lambda: resolve_input(input), options, engine, label)


def decode_pixels(
    pixels: bytes,
    width: int,
    height: int,
    options: Union[DecodeOptions, Mapping[str, Any], None] = None,
    *,
    engine: Optional[SymbologyEngine] = None,
) -> DecodeOutcome:
    """Decode from an 8-bit luminance buffer (row-major, ``width * height`` bytes)."""

    def make_buffer() -> PixelBuffer:
        try:
            return PixelBuffer(pixels=bytes(pixels), width=width, height=height)
        except (TypeError, ValueError) as e:
            raise InputResolutionError(f"Invalid luminance buffer: {e}") from e

    return _run(make_buffer, options, engine, f"{width}x{height} luminance buffer")
