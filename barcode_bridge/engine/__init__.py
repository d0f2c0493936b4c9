"""
engine

Движок распознавания и генерации штрихкодов.

Public API:
    - SymbologyEngine: абстрактный интерфейс движка (detect_single, detect_multiple, encode)
    - DefaultEngine: zxing-cpp (распознавание) + MultiFormatWriter (генерация)
    - EngineFormat, EngineResult, PixelBuffer, SymbolMatrix: типы обмена с движком

Зависимости:
    zxing-cpp, Pillow, qrcode, pdf417gen, python-barcode, treepoem (опционально)
"""

from barcode_bridge.engine.base import (
    EngineFormat,
    EngineResult,
    PixelBuffer,
    SymbolMatrix,
    SymbologyEngine,
)
from barcode_bridge.engine.default import DefaultEngine
from barcode_bridge.engine.writer import MultiFormatWriter
from barcode_bridge.engine.zxing_reader import ZXingReader

__all__ = [
    "EngineFormat",
    "EngineResult",
    "PixelBuffer",
    "SymbolMatrix",
    "SymbologyEngine",
    "DefaultEngine",
    "MultiFormatWriter",
    "ZXingReader",
]
