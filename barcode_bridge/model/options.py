"""
RU: Опции декодирования и кодирования. Все поля опциональны: None означает
«не ограничивать движок по этой оси», а не значение по умолчанию.

EN: Sparse option records accepted by ``decode``/``encode``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

from .enums import BarcodeFormat

logger = logging.getLogger(__name__)

__all__ = [
    "DecodeOptions",
    "EncodeOptions",
    "coerce_options",
]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

_OptionsT = TypeVar("_OptionsT", "DecodeOptions", "EncodeOptions")


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _int_tuple(values: Any, name: str) -> Tuple[int, ...]:
    if isinstance(values, (str, bytes)) or not hasattr(values, "__iter__"):
        raise TypeError(f"{name} must be a sequence of integers, got {type(values)!r}")
    result = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} must contain integers, got {value!r}")
        if value < 0:
            raise ValueError(f"{name} must contain non-negative integers, got {value}")
        result.append(value)
    return tuple(result)


def _from_mapping(cls: Type[_OptionsT], data: Mapping[str, Any]) -> _OptionsT:
    known = {f.name for f in fields(cls)}
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        name = _snake_case(key)
        if name not in known:
            raise ValueError(f"Unknown option {key!r} for {cls.__name__}")
        kwargs[name] = value
    return cls(**kwargs)


@dataclass(slots=True)
class DecodeOptions:
    """
    Optional decode settings.

    Every field defaults to ``None``; only the fields that are set become
    engine hints.

    Example:
        >>> opts = DecodeOptions(try_harder=True, barcode_format=[BarcodeFormat.QR_CODE])
        >>> opts = DecodeOptions.from_dict({"decodeMulti": True})
    """

    try_harder: Optional[bool] = None
    decode_multi: Optional[bool] = None
    barcode_format: Optional[Tuple[BarcodeFormat, ...]] = None
    pure_barcode: Optional[bool] = None
    character_set: Optional[str] = None
    allowed_lengths: Optional[Tuple[int, ...]] = None
    assume_code39_check_digit: Optional[bool] = None
    assume_gs1: Optional[bool] = None
    return_codabar_start_end: Optional[bool] = None
    allowed_ean_extensions: Optional[Tuple[int, ...]] = None
    also_inverted: Optional[bool] = None
    other: Optional[str] = None

    def __post_init__(self) -> None:
        if self.barcode_format is not None:
            formats: Any = self.barcode_format
            if isinstance(formats, (str, BarcodeFormat)):
                formats = [formats]
            self.barcode_format = tuple(BarcodeFormat.parse(f) for f in formats)
        if self.allowed_lengths is not None:
            self.allowed_lengths = _int_tuple(self.allowed_lengths, "allowed_lengths")
        if self.allowed_ean_extensions is not None:
            self.allowed_ean_extensions = _int_tuple(
                self.allowed_ean_extensions, "allowed_ean_extensions"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DecodeOptions":
        """Build options from snake_case or camelCase keys; unknown keys raise ValueError."""
        return _from_mapping(cls, data)


@dataclass(slots=True)
class EncodeOptions:
    """
    Optional encode settings.

    ``barcode_format`` defaults to QR code; ``width``/``height``/``margin``
    default at dispatch time (see ``barcode_bridge.codec.hints``). The
    symbology-specific fields are forwarded to the writer only when set.
    """

    barcode_format: Optional[BarcodeFormat] = None
    width: Optional[int] = None
    height: Optional[int] = None
    margin: Optional[int] = None
    error_correction: Optional[str] = None
    character_set: Optional[str] = None
    data_matrix_compact: Optional[bool] = None
    pdf417_compact: Optional[bool] = None
    pdf417_compaction: Optional[str] = None
    pdf417_auto_eci: Optional[bool] = None
    aztec_layers: Optional[int] = None
    qr_version: Optional[str] = None
    qr_mask_pattern: Optional[str] = None
    qr_compact: Optional[bool] = None
    gs1_format: Optional[bool] = None
    force_code_set: Optional[str] = None
    force_c40: Optional[bool] = None
    code128_compact: Optional[bool] = None
    output_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.barcode_format is not None:
            self.barcode_format = BarcodeFormat.parse(self.barcode_format)
        for name in ("width", "height", "margin"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise TypeError(f"{name} must be an integer, got {value!r}")
        if self.output_file is not None:
            # os.PathLike тоже допустим
            self.output_file = str(self.output_file)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EncodeOptions":
        """Build options from snake_case or camelCase keys; unknown keys raise ValueError."""
        return _from_mapping(cls, data)


def coerce_options(
    options: Union[_OptionsT, Mapping[str, Any], None], cls: Type[_OptionsT]
) -> _OptionsT:
    """Normalize ``None``/mapping/record into an options record of type ``cls``."""
    if options is None:
        return cls()
    if isinstance(options, cls):
        return options
    if isinstance(options, Mapping):
        return cls.from_dict(options)
    raise TypeError(f"options must be {cls.__name__}, a mapping or None, got {type(options)!r}")
