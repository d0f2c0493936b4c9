"""
RU: Распознавание штрихкодов через zxing-cpp.
EN: Symbol detection backed by zxing-cpp (``zxingcpp``).

Hints without a zxing-cpp switch (``OTHER``, ``ASSUME_GS1``,
``ASSUME_CODE_39_CHECK_DIGIT``, ``RETURN_CODABAR_START_END``) are logged at
DEBUG and ignored. ``CHARACTER_SET`` re-decodes the raw payload and
``ALLOWED_LENGTHS`` filters ITF results by length, as ZXing readers do.
``ALLOWED_EAN_EXTENSIONS`` requires an add-on and drops EAN/UPC results whose
add-on length is not listed. An allow-list with no zxing-cpp counterpart does
not restrict detection.
"""

from __future__ import annotations

import functools
import logging
import operator
from typing import Any, Dict, Final, List, Mapping, Optional

import zxingcpp
from PIL import Image

from barcode_bridge.engine.base import EngineFormat, EngineResult, PixelBuffer
from barcode_bridge.exceptions import EngineError, NotFoundError
from barcode_bridge.model.enums import DecodeHintType

logger = logging.getLogger(__name__)

__all__ = [
    "ZXingReader",
    "to_zxing_format",
    "from_zxing_format",
    "add_on_length",
]

# EngineFormat -> имя члена zxingcpp.BarcodeFormat
_ZXING_NAMES: Final[Dict[EngineFormat, str]] = {
    EngineFormat.AZTEC: "Aztec",
    EngineFormat.CODABAR: "Codabar",
    EngineFormat.CODE_39: "Code39",
    EngineFormat.CODE_93: "Code93",
    EngineFormat.CODE_128: "Code128",
    EngineFormat.DATA_MATRIX: "DataMatrix",
    EngineFormat.EAN_8: "EAN8",
    EngineFormat.EAN_13: "EAN13",
    EngineFormat.ITF: "ITF",
    EngineFormat.MAXICODE: "MaxiCode",
    EngineFormat.PDF_417: "PDF417",
    EngineFormat.QR_CODE: "QRCode",
    EngineFormat.RSS_14: "DataBar",
    EngineFormat.RSS_EXPANDED: "DataBarExpanded",
    EngineFormat.UPC_A: "UPCA",
    EngineFormat.UPC_E: "UPCE",
}
_FROM_ZXING_NAMES: Final[Dict[str, EngineFormat]] = {v: k for k, v in _ZXING_NAMES.items()}

_IGNORED_HINTS: Final = frozenset(
    {
        DecodeHintType.OTHER,
        DecodeHintType.ASSUME_GS1,
        DecodeHintType.ASSUME_CODE_39_CHECK_DIGIT,
        DecodeHintType.RETURN_CODABAR_START_END,
    }
)

_UPC_EAN_FORMATS: Final = frozenset(
    {EngineFormat.EAN_8, EngineFormat.EAN_13, EngineFormat.UPC_A, EngineFormat.UPC_E}
)


def to_zxing_format(engine_format: EngineFormat) -> Optional[Any]:
    """zxingcpp.BarcodeFormat member, or None when zxing-cpp has no counterpart."""
    name = _ZXING_NAMES.get(engine_format)
    if name is None:
        return None
    return getattr(zxingcpp.BarcodeFormat, name)


def from_zxing_format(zx_format: Any) -> EngineFormat:
    name = getattr(zx_format, "name", str(zx_format))
    return _FROM_ZXING_NAMES.get(name, EngineFormat.UNSUPPORTED_FORMAT)


def add_on_length(text: str) -> int:
    """Length of the 2- or 5-digit add-on zxing-cpp appends after a space, 0 if none."""
    _, sep, add_on = text.rpartition(" ")
    return len(add_on) if sep else 0


class ZXingReader:
    """
    Detection via ``zxingcpp.read_barcodes`` on a luminance image.

    This reader performs no semantic correction; results are returned as
    zxing-cpp reports them, restricted only by the supplied hints.
    """

    def reader_options(self, hints: Mapping[Any, Any]) -> Dict[str, Any]:
        """Translate a decode hint dictionary into ``zxingcpp.read_barcodes`` kwargs."""
        kwargs: Dict[str, Any] = {}

        possible = hints.get(DecodeHintType.POSSIBLE_FORMATS)
        if possible is not None:
            zx_formats = [f for f in (to_zxing_format(p) for p in possible) if f is not None]
            if zx_formats:
                kwargs["formats"] = functools.reduce(operator.or_, zx_formats)
            else:
                # ни одного читаемого формата: ограничение не применяется
                logger.debug(
                    "No detectable format in %s; reading all formats",
                    sorted(f.value for f in possible),
                )

        try_harder = hints.get(DecodeHintType.TRY_HARDER)
        if try_harder is not None:
            kwargs["try_rotate"] = bool(try_harder)
            kwargs["try_downscale"] = bool(try_harder)

        if DecodeHintType.PURE_BARCODE in hints:
            kwargs["is_pure"] = bool(hints[DecodeHintType.PURE_BARCODE])

        if DecodeHintType.ALSO_INVERTED in hints:
            kwargs["try_invert"] = bool(hints[DecodeHintType.ALSO_INVERTED])

        if hints.get(DecodeHintType.ALLOWED_EAN_EXTENSIONS):
            kwargs["ean_add_on_symbol"] = zxingcpp.EanAddOnSymbol.Require

        for hint in hints:
            if hint in _IGNORED_HINTS:
                logger.debug("Hint %s has no zxing-cpp equivalent; ignored", hint.value)
        return kwargs

    def _read(self, image: PixelBuffer, hints: Mapping[Any, Any]) -> List[EngineResult]:
        kwargs = self.reader_options(hints)
        pil_image = Image.frombytes("L", (image.width, image.height), image.pixels)
        try:
            raw_results = zxingcpp.read_barcodes(pil_image, **kwargs)
        except Exception as e:
            logger.error("zxing-cpp detection error: %r", e)
            raise EngineError(f"zxing-cpp detection failed: {e}") from e

        charset = hints.get(DecodeHintType.CHARACTER_SET)
        allowed_lengths = hints.get(DecodeHintType.ALLOWED_LENGTHS)
        allowed_extensions = hints.get(DecodeHintType.ALLOWED_EAN_EXTENSIONS)
        results: List[EngineResult] = []
        for raw in raw_results:
            result = self._to_engine_result(raw, charset)
            if (
                allowed_lengths
                and result.format == EngineFormat.ITF
                and len(result.text) not in allowed_lengths
            ):
                logger.debug("ITF result of length %d filtered out", len(result.text))
                continue
            if (
                allowed_extensions
                and result.format in _UPC_EAN_FORMATS
                and add_on_length(result.text) not in allowed_extensions
            ):
                logger.debug(
                    "%s result with %d-digit add-on filtered out",
                    result.format.value,
                    add_on_length(result.text),
                )
                continue
            results.append(result)
        return results

    @staticmethod
    def _to_engine_result(raw: Any, charset: Optional[str]) -> EngineResult:
        raw_bytes = bytes(raw.bytes)
        text = raw.text
        if charset:
            try:
                text = raw_bytes.decode(charset)
            except (LookupError, UnicodeDecodeError) as e:
                logger.debug("Cannot re-decode payload as %s: %r", charset, e)
        return EngineResult(
            text=text,
            raw_bytes=raw_bytes,
            num_bits=len(raw_bytes) * 8,
            format=from_zxing_format(raw.format),
        )

    def detect_single(self, image: PixelBuffer, hints: Mapping[Any, Any]) -> EngineResult:
        results = self._read(image, hints)
        if not results:
            raise NotFoundError("No barcode found")
        return results[0]

    def detect_multiple(
        self, image: PixelBuffer, hints: Mapping[Any, Any]
    ) -> List[EngineResult]:
        results = self._read(image, hints)
        if not results:
            raise NotFoundError("No barcodes found")
        return results
