"""
RU: Построение словарей подсказок (hints) для движка из разреженных опций.
EN: Sparse options -> hint dictionaries.

Only options that were explicitly supplied become hints, so an unset field
never forces a zero/false value onto the engine. Two defaults apply:

- decode: an unset ``try_harder`` stays unset (engine default applies);
- encode: ``margin`` is always present (0 unless configured), and height
  mirrors the resolved width for square symbologies when not given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, TypeVar

from barcode_bridge.codec.format_catalog import to_engine_set
from barcode_bridge.config import DEFAULT_CONFIG
from barcode_bridge.model.enums import (
    DEFAULT_BARCODE_FORMAT,
    BarcodeFormat,
    DecodeHintType,
    EncodeHintType,
)
from barcode_bridge.model.options import DecodeOptions, EncodeOptions

logger = logging.getLogger(__name__)

__all__ = [
    "DecodeHints",
    "EncodeHints",
    "EncodeParameters",
    "build_decode_hints",
    "build_encode_hints",
    "resolve_dimensions",
    "resolve_encode_parameters",
]

DecodeHints = Dict[DecodeHintType, Any]
EncodeHints = Dict[EncodeHintType, Any]

_K = TypeVar("_K")


def _fold(pairs: Iterable[Tuple[_K, Optional[Any]]]) -> Dict[_K, Any]:
    """Insert only the pairs whose value is present."""
    hints: Dict[_K, Any] = {}
    for key, value in pairs:
        if value is not None:
            hints[key] = value
    return hints


def build_decode_hints(options: DecodeOptions) -> DecodeHints:
    possible_formats = (
        to_engine_set(options.barcode_format) if options.barcode_format is not None else None
    )
    hints = _fold(
        [
            (DecodeHintType.OTHER, options.other),
            (DecodeHintType.PURE_BARCODE, options.pure_barcode),
            (DecodeHintType.CHARACTER_SET, options.character_set),
            (DecodeHintType.ALLOWED_LENGTHS, options.allowed_lengths),
            (DecodeHintType.ASSUME_CODE_39_CHECK_DIGIT, options.assume_code39_check_digit),
            (DecodeHintType.ASSUME_GS1, options.assume_gs1),
            (DecodeHintType.RETURN_CODABAR_START_END, options.return_codabar_start_end),
            (DecodeHintType.ALLOWED_EAN_EXTENSIONS, options.allowed_ean_extensions),
            (DecodeHintType.ALSO_INVERTED, options.also_inverted),
            (DecodeHintType.TRY_HARDER, options.try_harder),
            (DecodeHintType.POSSIBLE_FORMATS, possible_formats),
        ]
    )
    logger.debug("Decode hints: %s", sorted(h.value for h in hints))
    return hints


def build_encode_hints(options: EncodeOptions, margin: int) -> EncodeHints:
    """Margin is mandatory for the writer; every other hint is optional."""
    hints = _fold(
        [
            (EncodeHintType.MARGIN, margin),
            (EncodeHintType.ERROR_CORRECTION, options.error_correction),
            (EncodeHintType.CHARACTER_SET, options.character_set),
            (EncodeHintType.DATA_MATRIX_COMPACT, options.data_matrix_compact),
            (EncodeHintType.PDF417_COMPACT, options.pdf417_compact),
            (EncodeHintType.PDF417_COMPACTION, options.pdf417_compaction),
            (EncodeHintType.PDF417_AUTO_ECI, options.pdf417_auto_eci),
            (EncodeHintType.AZTEC_LAYERS, options.aztec_layers),
            (EncodeHintType.QR_VERSION, options.qr_version),
            (EncodeHintType.QR_MASK_PATTERN, options.qr_mask_pattern),
            (EncodeHintType.QR_COMPACT, options.qr_compact),
            (EncodeHintType.GS1_FORMAT, options.gs1_format),
            (EncodeHintType.FORCE_CODE_SET, options.force_code_set),
            (EncodeHintType.FORCE_C40, options.force_c40),
            (EncodeHintType.CODE128_COMPACT, options.code128_compact),
        ]
    )
    logger.debug("Encode hints: %s", sorted(h.value for h in hints))
    return hints


def resolve_dimensions(
    barcode_format: BarcodeFormat,
    width: Optional[int],
    height: Optional[int],
    default_width: int = DEFAULT_CONFIG["default_width"],
    default_height: int = DEFAULT_CONFIG["default_height"],
) -> Tuple[int, int]:
    """
    Resolve output size.

    Width falls back to ``default_width``. Height falls back to the resolved
    width for square symbologies (QR, Aztec, Data Matrix, MaxiCode) and to
    ``default_height`` otherwise.
    """
    resolved_width = default_width if width is None else width
    if height is not None:
        return resolved_width, height
    if barcode_format.is_square:
        return resolved_width, resolved_width
    return resolved_width, default_height


@dataclass(frozen=True, slots=True)
class EncodeParameters:
    barcode_format: BarcodeFormat
    width: int
    height: int
    hints: EncodeHints
    output_file: Optional[str]


def _default_format(config: Mapping[str, Any]) -> BarcodeFormat:
    value = config.get("default_format")
    if value is None:
        return DEFAULT_BARCODE_FORMAT
    try:
        return BarcodeFormat.parse(value)
    except (TypeError, ValueError):
        logger.warning(
            "Invalid default_format %r in configuration, using %s",
            value,
            DEFAULT_BARCODE_FORMAT.name,
        )
        return DEFAULT_BARCODE_FORMAT


def resolve_encode_parameters(
    options: EncodeOptions, config: Optional[Mapping[str, Any]] = None
) -> EncodeParameters:
    """Apply format/size/margin defaults and build the encode hint dictionary."""
    cfg: Mapping[str, Any] = DEFAULT_CONFIG if config is None else config
    barcode_format = (
        options.barcode_format if options.barcode_format is not None else _default_format(cfg)
    )
    width, height = resolve_dimensions(
        barcode_format,
        options.width,
        options.height,
        default_width=int(cfg.get("default_width", DEFAULT_CONFIG["default_width"])),
        default_height=int(cfg.get("default_height", DEFAULT_CONFIG["default_height"])),
    )
    margin = (
        options.margin
        if options.margin is not None
        else int(cfg.get("default_margin", DEFAULT_CONFIG["default_margin"]))
    )
    return EncodeParameters(
        barcode_format=barcode_format,
        width=width,
        height=height,
        hints=build_encode_hints(options, margin),
        output_file=options.output_file or None,
    )
