"""
model/enums.py

(Краткое RU: Перечисления публичного API: форматы штрихкодов и ключи подсказок движка.)

EN: Public enums for barcode_bridge.

- BarcodeFormat: closed catalog of symbologies exposed to the host, with the
  ``UNSUPPORTED_FORMAT`` sentinel.
- DecodeHintType / EncodeHintType: identities of the optional settings passed
  to the recognition/generation engine.

NO engine logic here! Engine identifiers live in ``barcode_bridge.engine.base``
and the mapping between both sides in ``barcode_bridge.codec.format_catalog``.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Final, Literal

_logger: Final[logging.Logger] = logging.getLogger(__name__)

__all__ = [
    "BarcodeFormat",
    "DecodeHintType",
    "EncodeHintType",
    "DEFAULT_BARCODE_FORMAT",
]

_NAME_NORMALIZER: Final = re.compile(r"[^a-z0-9]")


class BarcodeFormat(str, Enum):
    AZTEC = "aztec"
    CODABAR = "codabar"
    CODE_39 = "code39"
    CODE_93 = "code93"
    CODE_128 = "code128"
    DATA_MATRIX = "datamatrix"
    EAN_8 = "ean8"
    EAN_13 = "ean13"
    ITF = "itf"
    MAXICODE = "maxicode"
    PDF_417 = "pdf417"
    QR_CODE = "qrcode"
    RSS_14 = "rss14"
    RSS_EXPANDED = "rssexpanded"
    UPC_A = "upca"
    UPC_E = "upce"
    UPC_EAN_EXTENSION = "upceanextension"  # Not a stand-alone format
    UNSUPPORTED_FORMAT = "unsupported"

    @property
    def is_square(self) -> bool:
        """Symbologies rendered into a square canvas when no height is given."""
        return self in {
            BarcodeFormat.AZTEC,
            BarcodeFormat.DATA_MATRIX,
            BarcodeFormat.MAXICODE,
            BarcodeFormat.QR_CODE,
        }

    @classmethod
    def parse(cls, value: Any) -> "BarcodeFormat":
        """
        Coerce a member, its value or its name into a BarcodeFormat.

        Names are matched ignoring case and separators, so ``"QR_CODE"``,
        ``"QrCode"`` and ``"qrcode"`` are the same format.

        Raises:
            TypeError: value is not a string or BarcodeFormat.
            ValueError: value does not name a known format.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"barcode format must be str or BarcodeFormat, got {type(value)!r}")
        key = _NAME_NORMALIZER.sub("", value.lower())
        for member in cls:
            if key == member.value or key == _NAME_NORMALIZER.sub("", member.name.lower()):
                return member
        _logger.debug("Unknown barcode format %r", value)
        raise ValueError(f"Unknown barcode format: {value!r}")

    def localized_name(self, lang: Literal["ru", "en"] = "ru") -> str:
        names_ru = {
            self.AZTEC: "Aztec",
            self.CODABAR: "Codabar",
            self.CODE_39: "Code 39",
            self.CODE_93: "Code 93",
            self.CODE_128: "Code 128",
            self.DATA_MATRIX: "DataMatrix",
            self.EAN_8: "EAN-8",
            self.EAN_13: "EAN-13",
            self.ITF: "Interleaved 2 of 5",
            self.MAXICODE: "MaxiCode",
            self.PDF_417: "PDF417",
            self.QR_CODE: "QR код",
            self.RSS_14: "GS1 DataBar (RSS-14)",
            self.RSS_EXPANDED: "GS1 DataBar Expanded",
            self.UPC_A: "UPC-A",
            self.UPC_E: "UPC-E",
            self.UPC_EAN_EXTENSION: "Расширение UPC/EAN",
            self.UNSUPPORTED_FORMAT: "Неподдерживаемый формат",
        }
        names_en = {
            self.QR_CODE: "QR code",
            self.RSS_14: "GS1 DataBar (RSS-14)",
            self.RSS_EXPANDED: "GS1 DataBar Expanded",
            self.UPC_EAN_EXTENSION: "UPC/EAN extension",
            self.UNSUPPORTED_FORMAT: "Unsupported format",
        }
        if lang == "ru":
            return names_ru.get(self, self.value)
        return names_en.get(self, names_ru.get(self, self.value))


DEFAULT_BARCODE_FORMAT: Final[BarcodeFormat] = BarcodeFormat.QR_CODE


class DecodeHintType(str, Enum):
    OTHER = "other"
    PURE_BARCODE = "pure_barcode"
    POSSIBLE_FORMATS = "possible_formats"
    TRY_HARDER = "try_harder"
    CHARACTER_SET = "character_set"
    ALLOWED_LENGTHS = "allowed_lengths"
    ASSUME_CODE_39_CHECK_DIGIT = "assume_code_39_check_digit"
    ASSUME_GS1 = "assume_gs1"
    RETURN_CODABAR_START_END = "return_codabar_start_end"
    ALLOWED_EAN_EXTENSIONS = "allowed_ean_extensions"
    ALSO_INVERTED = "also_inverted"


class EncodeHintType(str, Enum):
    MARGIN = "margin"
    ERROR_CORRECTION = "error_correction"
    CHARACTER_SET = "character_set"
    DATA_MATRIX_COMPACT = "data_matrix_compact"
    PDF417_COMPACT = "pdf417_compact"
    PDF417_COMPACTION = "pdf417_compaction"
    PDF417_AUTO_ECI = "pdf417_auto_eci"
    AZTEC_LAYERS = "aztec_layers"
    QR_VERSION = "qr_version"
    QR_MASK_PATTERN = "qr_mask_pattern"
    QR_COMPACT = "qr_compact"
    GS1_FORMAT = "gs1_format"
    FORCE_CODE_SET = "force_code_set"
    FORCE_C40 = "force_c40"
    CODE128_COMPACT = "code128_compact"
