"""
Engine used by ``decode``/``encode`` when the caller does not inject one.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from barcode_bridge.engine.base import (
    EngineFormat,
    EngineResult,
    PixelBuffer,
    SymbolMatrix,
    SymbologyEngine,
)
from barcode_bridge.engine.writer import MultiFormatWriter
from barcode_bridge.engine.zxing_reader import ZXingReader

__all__ = ["DefaultEngine"]


class DefaultEngine(SymbologyEngine):
    """zxing-cpp detection combined with the multi-format writer."""

    def __init__(
        self,
        reader: Optional[ZXingReader] = None,
        writer: Optional[MultiFormatWriter] = None,
    ) -> None:
        self._reader = reader or ZXingReader()
        self._writer = writer or MultiFormatWriter()

    def detect_single(self, image: PixelBuffer, hints: Mapping[Any, Any]) -> EngineResult:
        return self._reader.detect_single(image, hints)

    def detect_multiple(
        self, image: PixelBuffer, hints: Mapping[Any, Any]
    ) -> List[EngineResult]:
        return self._reader.detect_multiple(image, hints)

    def encode(
        self,
        contents: str,
        barcode_format: EngineFormat,
        width: int,
        height: int,
        hints: Dict[Any, Any],
    ) -> SymbolMatrix:
        return self._writer.encode(contents, barcode_format, width, height, hints)
