"""Общие фикстуры: фейковый движок и тестовые изображения."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest
from PIL import Image

from barcode_bridge.engine.base import (
    EngineFormat,
    EngineResult,
    PixelBuffer,
    SymbolMatrix,
    SymbologyEngine,
)
from barcode_bridge.exceptions import EngineError, NotFoundError

HELLO_RESULT = EngineResult(
    text="HELLO123",
    raw_bytes=b"HELLO123",
    num_bits=64,
    format=EngineFormat.QR_CODE,
)

CHECKER_MATRIX = SymbolMatrix(width=2, height=2, bits=bytes([1, 0, 0, 1]))


class FakeEngine(SymbologyEngine):
    """Engine double that records calls and returns canned values."""

    def __init__(
        self,
        results: Optional[Sequence[EngineResult]] = None,
        matrix: Optional[SymbolMatrix] = None,
        error: Optional[EngineError] = None,
    ) -> None:
        self.results: List[EngineResult] = list(results) if results is not None else [HELLO_RESULT]
        self.matrix = matrix if matrix is not None else CHECKER_MATRIX
        self.error = error
        self.calls: List[Tuple[Any, ...]] = []

    def detect_single(self, image: PixelBuffer, hints: Any) -> EngineResult:
        self.calls.append(("single", image, dict(hints)))
        if self.error is not None:
            raise self.error
        if not self.results:
            raise NotFoundError("nothing here")
        return self.results[0]

    def detect_multiple(self, image: PixelBuffer, hints: Any) -> List[EngineResult]:
        self.calls.append(("multi", image, dict(hints)))
        if self.error is not None:
            raise self.error
        return list(self.results)

    def encode(
        self,
        contents: str,
        barcode_format: EngineFormat,
        width: int,
        height: int,
        hints: Dict[Any, Any],
    ) -> SymbolMatrix:
        self.calls.append(("encode", contents, barcode_format, width, height, dict(hints)))
        if self.error is not None:
            raise self.error
        return self.matrix


def make_png(size: Tuple[int, int] = (8, 6), color: int = 128, mode: str = "L") -> bytes:
    img = Image.new(mode, size, color)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_file(tmp_path: Path, png_bytes: bytes) -> Path:
    path = tmp_path / "label.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def svg_file(tmp_path: Path) -> Path:
    path = tmp_path / "label.svg"
    path.write_text(
        '<svg xmlns="http://www.w3.org/2000/svg" width="8" height="6">'
        '<rect width="8" height="6" fill="#808080"/></svg>',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def engine_factory():
    """``FakeEngine`` class for tests that need custom results or errors."""
    return FakeEngine
