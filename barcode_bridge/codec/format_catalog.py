"""
RU: Таблица соответствия публичных форматов и идентификаторов движка.
EN: Closed bijection between ``BarcodeFormat`` and ``EngineFormat``.

Adding a symbology means adding one row to ``_TO_ENGINE``; the reverse
direction is derived from it and both enums are checked for full coverage
at import time.
"""

from __future__ import annotations

from typing import Dict, Final, Iterable, FrozenSet

from barcode_bridge.engine.base import EngineFormat
from barcode_bridge.model.enums import BarcodeFormat

__all__ = [
    "to_engine",
    "from_engine",
    "to_engine_set",
]

_TO_ENGINE: Final[Dict[BarcodeFormat, EngineFormat]] = {
    BarcodeFormat.AZTEC: EngineFormat.AZTEC,
    BarcodeFormat.CODABAR: EngineFormat.CODABAR,
    BarcodeFormat.CODE_39: EngineFormat.CODE_39,
    BarcodeFormat.CODE_93: EngineFormat.CODE_93,
    BarcodeFormat.CODE_128: EngineFormat.CODE_128,
    BarcodeFormat.DATA_MATRIX: EngineFormat.DATA_MATRIX,
    BarcodeFormat.EAN_8: EngineFormat.EAN_8,
    BarcodeFormat.EAN_13: EngineFormat.EAN_13,
    BarcodeFormat.ITF: EngineFormat.ITF,
    BarcodeFormat.MAXICODE: EngineFormat.MAXICODE,
    BarcodeFormat.PDF_417: EngineFormat.PDF_417,
    BarcodeFormat.QR_CODE: EngineFormat.QR_CODE,
    BarcodeFormat.RSS_14: EngineFormat.RSS_14,
    BarcodeFormat.RSS_EXPANDED: EngineFormat.RSS_EXPANDED,
    BarcodeFormat.UPC_A: EngineFormat.UPC_A,
    BarcodeFormat.UPC_E: EngineFormat.UPC_E,
    BarcodeFormat.UPC_EAN_EXTENSION: EngineFormat.UPC_EAN_EXTENSION,
    BarcodeFormat.UNSUPPORTED_FORMAT: EngineFormat.UNSUPPORTED_FORMAT,
}

_FROM_ENGINE: Final[Dict[EngineFormat, BarcodeFormat]] = {
    engine: public for public, engine in _TO_ENGINE.items()
}

if set(_TO_ENGINE) != set(BarcodeFormat) or set(_FROM_ENGINE) != set(EngineFormat):
    raise RuntimeError("Format catalog does not cover every BarcodeFormat/EngineFormat member")


def to_engine(barcode_format: BarcodeFormat) -> EngineFormat:
    return _TO_ENGINE[barcode_format]


def from_engine(engine_format: EngineFormat) -> BarcodeFormat:
    return _FROM_ENGINE[engine_format]


def to_engine_set(formats: Iterable[BarcodeFormat]) -> FrozenSet[EngineFormat]:
    """Map a format allow-list; duplicates collapse, order is irrelevant."""
    return frozenset(_TO_ENGINE[f] for f in formats)
