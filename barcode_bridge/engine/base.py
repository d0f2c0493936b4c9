from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Sequence

__all__ = [
    "EngineFormat",
    "EngineResult",
    "PixelBuffer",
    "SymbolMatrix",
    "SymbologyEngine",
]


class EngineFormat(str, Enum):
    """Format identifiers as the recognition/generation engine names them."""

    AZTEC = "AZTEC"
    CODABAR = "CODABAR"
    CODE_39 = "CODE_39"
    CODE_93 = "CODE_93"
    CODE_128 = "CODE_128"
    DATA_MATRIX = "DATA_MATRIX"
    EAN_8 = "EAN_8"
    EAN_13 = "EAN_13"
    ITF = "ITF"
    MAXICODE = "MAXICODE"
    PDF_417 = "PDF_417"
    QR_CODE = "QR_CODE"
    RSS_14 = "RSS_14"
    RSS_EXPANDED = "RSS_EXPANDED"
    UPC_A = "UPC_A"
    UPC_E = "UPC_E"
    UPC_EAN_EXTENSION = "UPC_EAN_EXTENSION"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"


@dataclass(frozen=True, slots=True)
class PixelBuffer:
    """8-bit grayscale pixels, row-major, ``width * height`` bytes."""

    pixels: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if len(self.pixels) != self.width * self.height:
            raise ValueError(
                f"Expected {self.width * self.height} luminance bytes, got {len(self.pixels)}"
            )


@dataclass(frozen=True, slots=True)
class EngineResult:
    text: str
    raw_bytes: bytes
    num_bits: int
    format: EngineFormat


@dataclass(frozen=True, slots=True)
class SymbolMatrix:
    """
    Rendered symbol: ``width x height`` cells, 1 = dark, 0 = light.

    Cells are stored row-major in ``bits``; the matrix is already scaled to
    the requested output size, one cell per output pixel.
    """

    width: int
    height: int
    bits: bytes

    def __post_init__(self) -> None:
        if len(self.bits) != self.width * self.height:
            raise ValueError(
                f"Matrix {self.width}x{self.height} needs {self.width * self.height} cells, "
                f"got {len(self.bits)}"
            )

    def get(self, x: int, y: int) -> bool:
        return self.bits[y * self.width + x] == 1

    def rows(self) -> Iterator[bytes]:
        for y in range(self.height):
            yield self.bits[y * self.width : (y + 1) * self.width]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Any]]) -> "SymbolMatrix":
        """Build from nested truthy/falsy cells (e.g. ``qrcode`` module lists)."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        bits = bytearray()
        for row in rows:
            if len(row) != width:
                raise ValueError("All matrix rows must have the same length")
            bits.extend(1 if cell else 0 for cell in row)
        return cls(width=width, height=height, bits=bytes(bits))


class SymbologyEngine(ABC):
    """
    Narrow interface to the recognition/generation engine.

    IMPORTANT:
    - Implementations signal failure by raising ``EngineError`` subclasses
      (``NotFoundError`` when nothing is detected, ``WriterError`` on encode).
    - Implementations must not keep state between calls.
    """

    @abstractmethod
    def detect_single(
        self, image: PixelBuffer, hints: Mapping[Any, Any]
    ) -> EngineResult:
        raise NotImplementedError

    @abstractmethod
    def detect_multiple(
        self, image: PixelBuffer, hints: Mapping[Any, Any]
    ) -> List[EngineResult]:
        raise NotImplementedError

    @abstractmethod
    def encode(
        self,
        contents: str,
        barcode_format: EngineFormat,
        width: int,
        height: int,
        hints: Dict[Any, Any],
    ) -> SymbolMatrix:
        raise NotImplementedError
