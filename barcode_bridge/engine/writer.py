"""
RU: Генерация матрицы символа для всех поддерживаемых форматов (QR, PDF417,
Aztec, DataMatrix, MaxiCode, 1D коды) с масштабированием до заданного размера.

EN: Multi-format writer producing a ``SymbolMatrix`` scaled to the requested
width x height.

Backends per format family:
- QR code: qrcode
- PDF417: pdf417gen
- Code 39 / Code 128 / EAN-8 / EAN-13 / UPC-A / ITF: python-barcode
- Aztec / Data Matrix / Codabar / Code 93 / UPC-E: zxing-cpp
- MaxiCode / RSS-14 / RSS Expanded: treepoem (+ Ghostscript), optional

Scaling follows ZXing: 2D symbols get a uniform integer module size,
centred, with ``margin`` modules of quiet zone on every side; 1D symbols get
a horizontal integer multiple and full-height bars, ``margin`` modules of
quiet zone in total.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Final, Iterable, Mapping, Optional, Set

import barcode as pybarcode
import pdf417gen
import qrcode
import zxingcpp
from barcode.errors import BarcodeNotFoundError
from PIL import Image
from qrcode.constants import (
    ERROR_CORRECT_H,
    ERROR_CORRECT_L,
    ERROR_CORRECT_M,
    ERROR_CORRECT_Q,
)

from barcode_bridge.engine.base import EngineFormat, SymbolMatrix
from barcode_bridge.engine.zxing_reader import to_zxing_format
from barcode_bridge.exceptions import WriterError
from barcode_bridge.model.enums import EncodeHintType

logger = logging.getLogger(__name__)

__all__ = [
    "MultiFormatWriter",
    "scale_modules",
]

_QR_ERROR_CORRECTION: Final[Dict[str, int]] = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

# zxing-cpp ec_level: шкала 0..8; буквы QR переводятся в середину своего диапазона
_ZXING_QR_LEVELS: Final[Dict[str, int]] = {"L": 2, "M": 4, "Q": 6, "H": 8}

# 0 (чёрный пиксель) -> 1 (тёмный модуль), всё остальное -> 0
_PIXEL_TO_BIT: Final[bytes] = bytes([1]) + bytes(255)

# Порог яркости для растровых бэкендов
_DARK_THRESHOLD: Final[int] = 128


def _parse_int(value: Any, name: str, low: int, high: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise WriterError(f"{name} must be an integer, got {value!r}") from e
    if not low <= number <= high:
        raise WriterError(f"{name} must be within [{low}, {high}], got {number}")
    return number


def _image_to_modules(img: Image.Image) -> SymbolMatrix:
    gray = img.convert("L")
    table = bytes(1 if p < _DARK_THRESHOLD else 0 for p in range(256))
    return SymbolMatrix(width=gray.width, height=gray.height, bits=gray.tobytes().translate(table))


def scale_modules(
    modules: SymbolMatrix, width: int, height: int, margin: int, one_dimensional: bool
) -> SymbolMatrix:
    """
    Scale a module grid into an output matrix.

    The output is never smaller than the symbol plus quiet zone; when the
    requested size is larger the symbol is scaled by the largest integer
    multiple that fits and centred.
    """
    if modules.width == 0 or modules.height == 0:
        raise WriterError("Writer produced an empty symbol")

    if one_dimensional:
        full_width = modules.width + margin
        output_width = max(width, full_width)
        output_height = max(1, height)
        multiple = output_width // full_width
        left = (output_width - modules.width * multiple) // 2
        row = bytearray(output_width)
        for x, cell in enumerate(modules.bits[: modules.width]):
            if cell:
                start = left + x * multiple
                row[start : start + multiple] = b"\x01" * multiple
        return SymbolMatrix(output_width, output_height, bytes(row) * output_height)

    input_width = modules.width + 2 * margin
    input_height = modules.height + 2 * margin
    output_width = max(width, input_width)
    output_height = max(height, input_height)
    multiple = min(output_width // input_width, output_height // input_height)
    left = (output_width - modules.width * multiple) // 2
    top = (output_height - modules.height * multiple) // 2

    out = bytearray(output_width * output_height)
    for y, module_row in enumerate(modules.rows()):
        line = bytearray(output_width)
        for x, cell in enumerate(module_row):
            if cell:
                start = left + x * multiple
                line[start : start + multiple] = b"\x01" * multiple
        for dy in range(multiple):
            offset = (top + y * multiple + dy) * output_width
            out[offset : offset + output_width] = line
    return SymbolMatrix(output_width, output_height, bytes(out))


class MultiFormatWriter:
    """
    Universal writer: contents + format + size + hints -> SymbolMatrix.

    Hints a backend cannot honour are logged at DEBUG and ignored; invalid
    contents or hint values raise ``WriterError``.

    Examples:
        >>> writer = MultiFormatWriter()
        >>> matrix = writer.encode("HELLO", EngineFormat.QR_CODE, 200, 200, {EncodeHintType.MARGIN: 0})
        >>> matrix.width
        200
    """

    _qr_formats: Set[EngineFormat] = {EngineFormat.QR_CODE}
    _pdf417_formats: Set[EngineFormat] = {EngineFormat.PDF_417}
    _pybarcode_support: Dict[EngineFormat, str] = {
        EngineFormat.CODE_39: "code39",
        EngineFormat.CODE_128: "code128",
        EngineFormat.EAN_8: "ean8",
        EngineFormat.EAN_13: "ean13",
        EngineFormat.UPC_A: "upca",
        EngineFormat.ITF: "itf",
    }
    _zxing_formats: Set[EngineFormat] = {
        EngineFormat.AZTEC,
        EngineFormat.DATA_MATRIX,
        EngineFormat.CODABAR,
        EngineFormat.CODE_93,
        EngineFormat.UPC_E,
    }
    _treepoem_support: Dict[EngineFormat, str] = {
        EngineFormat.MAXICODE: "maxicode",
        EngineFormat.RSS_14: "databaromni",
        EngineFormat.RSS_EXPANDED: "databarexpanded",
    }

    @classmethod
    def supported_formats(cls) -> Set[EngineFormat]:
        return (
            cls._qr_formats
            | cls._pdf417_formats
            | set(cls._pybarcode_support)
            | cls._zxing_formats
            | set(cls._treepoem_support)
        )

    def encode(
        self,
        contents: str,
        barcode_format: EngineFormat,
        width: int,
        height: int,
        hints: Mapping[Any, Any],
    ) -> SymbolMatrix:
        if not isinstance(contents, str) or not contents:
            raise WriterError("Found empty contents")
        if width < 0 or height < 0:
            raise WriterError(f"Requested dimensions can't be negative: {width}x{height}")
        if barcode_format not in self.supported_formats():
            logger.error("No encoder available for format %r", barcode_format)
            raise WriterError(f"No encoder available for format {barcode_format.value}")
        margin = _parse_int(hints.get(EncodeHintType.MARGIN, 0), "margin", 0, 10_000)

        if barcode_format in self._qr_formats:
            modules = self._encode_qr(contents, hints)
            matrix = scale_modules(modules, width, height, margin, one_dimensional=False)
        elif barcode_format in self._pdf417_formats:
            modules = self._encode_pdf417(contents, hints)
            matrix = scale_modules(modules, width, height, margin, one_dimensional=False)
        elif barcode_format in self._pybarcode_support:
            modules = self._encode_linear(contents, barcode_format, hints)
            matrix = scale_modules(modules, width, height, margin, one_dimensional=True)
        elif barcode_format in self._zxing_formats:
            matrix = self._encode_zxing(contents, barcode_format, width, height, margin, hints)
        else:
            modules = self._encode_treepoem(contents, barcode_format, hints)
            matrix = scale_modules(modules, width, height, margin, one_dimensional=False)

        logger.info(
            "Symbol encoded: %s, %d chars -> %dx%d",
            barcode_format.value,
            len(contents),
            matrix.width,
            matrix.height,
        )
        return matrix

    @staticmethod
    def _log_ignored(hints: Mapping[Any, Any], honoured: Iterable[Any], backend: str) -> None:
        accepted = set(honoured) | {EncodeHintType.MARGIN}
        for hint in hints:
            if hint not in accepted:
                logger.debug("Hint %s not supported by %s; ignored", getattr(hint, "value", hint), backend)

    # --- QR

    def _encode_qr(self, contents: str, hints: Mapping[Any, Any]) -> SymbolMatrix:
        self._log_ignored(
            hints,
            {
                EncodeHintType.ERROR_CORRECTION,
                EncodeHintType.QR_VERSION,
                EncodeHintType.QR_MASK_PATTERN,
                EncodeHintType.CHARACTER_SET,
            },
            "qrcode",
        )
        level = str(hints.get(EncodeHintType.ERROR_CORRECTION, "L")).upper()
        if level not in _QR_ERROR_CORRECTION:
            raise WriterError(f"QR error correction must be one of L/M/Q/H, got {level!r}")

        version: Optional[int] = None
        if EncodeHintType.QR_VERSION in hints:
            version = _parse_int(hints[EncodeHintType.QR_VERSION], "qr_version", 1, 40)
        mask: Optional[int] = None
        if EncodeHintType.QR_MASK_PATTERN in hints:
            mask = _parse_int(hints[EncodeHintType.QR_MASK_PATTERN], "qr_mask_pattern", 0, 7)

        charset = hints.get(EncodeHintType.CHARACTER_SET)
        try:
            payload: Any = contents.encode(charset) if charset else contents
            qr = qrcode.QRCode(
                version=version,
                error_correction=_QR_ERROR_CORRECTION[level],
                box_size=1,
                border=0,
                mask_pattern=mask,
            )
            qr.add_data(payload)
            qr.make(fit=version is None)
            return SymbolMatrix.from_rows(qr.get_matrix())
        except Exception as e:
            logger.error("QR generation error: %r", e)
            raise WriterError(f"QR code generation failed: {e}") from e

    # --- PDF417

    def _encode_pdf417(self, contents: str, hints: Mapping[Any, Any]) -> SymbolMatrix:
        self._log_ignored(
            hints,
            {
                EncodeHintType.ERROR_CORRECTION,
                EncodeHintType.CHARACTER_SET,
                EncodeHintType.PDF417_COMPACTION,
            },
            "pdf417gen",
        )
        pdf_opts: Dict[str, Any] = {}
        if EncodeHintType.ERROR_CORRECTION in hints:
            pdf_opts["security_level"] = _parse_int(
                hints[EncodeHintType.ERROR_CORRECTION], "error_correction", 0, 8
            )
        if EncodeHintType.CHARACTER_SET in hints:
            pdf_opts["encoding"] = hints[EncodeHintType.CHARACTER_SET]
        compaction = hints.get(EncodeHintType.PDF417_COMPACTION)
        if compaction is not None and str(compaction).upper() in ("BYTE", "BINARY"):
            pdf_opts["force_binary"] = True

        try:
            codes = pdf417gen.encode(contents, **pdf_opts)
            img = pdf417gen.render_image(codes, scale=1, ratio=3, padding=0)
        except Exception as e:
            logger.error("PDF417 generation error: %r", e)
            raise WriterError(f"PDF417 generation failed: {e}") from e
        return _image_to_modules(img)

    # --- 1D (python-barcode)

    def _encode_linear(
        self, contents: str, barcode_format: EngineFormat, hints: Mapping[Any, Any]
    ) -> SymbolMatrix:
        self._log_ignored(hints, {EncodeHintType.GS1_FORMAT}, "python-barcode")
        name = self._pybarcode_support[barcode_format]
        kwargs: Dict[str, Any] = {}
        if barcode_format == EngineFormat.CODE_39:
            kwargs["add_checksum"] = False
        if barcode_format == EngineFormat.CODE_128 and hints.get(EncodeHintType.GS1_FORMAT):
            name = "gs1_128"

        try:
            bclass = pybarcode.get_barcode_class(name)
            lines = bclass(contents, writer=None, **kwargs).build()
        except BarcodeNotFoundError as e:
            raise WriterError(f"Barcode class not found for type: {name}") from e
        except Exception as e:
            logger.error("Linear barcode generation error (%s): %r", name, e)
            raise WriterError(f"{name} generation failed: {e}") from e

        line = lines[0] if lines else ""
        return SymbolMatrix(
            width=len(line), height=1, bits=bytes(1 if c == "1" else 0 for c in line)
        )

    # --- zxing-cpp writer

    def _encode_zxing(
        self,
        contents: str,
        barcode_format: EngineFormat,
        width: int,
        height: int,
        margin: int,
        hints: Mapping[Any, Any],
    ) -> SymbolMatrix:
        self._log_ignored(hints, {EncodeHintType.ERROR_CORRECTION}, "zxing-cpp")
        kwargs: Dict[str, Any] = {"width": width, "height": height, "quiet_zone": margin}
        if EncodeHintType.ERROR_CORRECTION in hints:
            level = str(hints[EncodeHintType.ERROR_CORRECTION]).upper()
            kwargs["ec_level"] = _ZXING_QR_LEVELS.get(level) or _parse_int(
                level, "error_correction", 0, 8
            )

        zx_format = to_zxing_format(barcode_format)
        try:
            bitmatrix = zxingcpp.write_barcode(zx_format, contents, **kwargs)
            view = memoryview(bitmatrix)
            rows, cols = view.shape[0], view.shape[1]
            bits = view.tobytes().translate(_PIXEL_TO_BIT)
        except Exception as e:
            logger.error("zxing-cpp generation error (%s): %r", barcode_format.value, e)
            raise WriterError(f"{barcode_format.value} generation failed: {e}") from e
        return SymbolMatrix(width=cols, height=rows, bits=bits)

    # --- treepoem (BWIPP)

    def _encode_treepoem(
        self, contents: str, barcode_format: EngineFormat, hints: Mapping[Any, Any]
    ) -> SymbolMatrix:
        self._log_ignored(hints, (), "treepoem")
        try:
            import treepoem
        except ImportError as e:
            logger.error("treepoem not installed for %s", barcode_format.value)
            raise WriterError("treepoem not installed (pip install treepoem)") from e

        try:
            img = treepoem.generate_barcode(
                barcode_type=self._treepoem_support[barcode_format],
                data=contents,
                scale=1,
            )
        except Exception as e:
            logger.error("treepoem generation error (%s): %r", barcode_format.value, e)
            raise WriterError(f"{barcode_format.value} generation failed: {e}") from e

        if not isinstance(img, Image.Image):
            raise WriterError(f"{barcode_format.value} generation did not produce an image")
        return _image_to_modules(img)
