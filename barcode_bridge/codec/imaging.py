"""
RU: Работа с изображениями: загрузка растровых/SVG файлов в яркостный буфер,
сериализация матрицы символа в PNG/JPEG/SVG.

EN: Image codec glue around Pillow (raster) and cairosvg (vector input).

Requirements: Pillow; cairosvg (+ libcairo) only for ``.svg`` inputs.
"""

from __future__ import annotations

import logging
import os
from io import BytesIO
from pathlib import Path
from typing import Final, Union

from PIL import Image

from barcode_bridge.engine.base import PixelBuffer, SymbolMatrix
from barcode_bridge.exceptions import ImageCodecError, SerializationError

logger = logging.getLogger(__name__)

__all__ = [
    "SVG_FORMAT",
    "image_to_luminance",
    "decode_image_bytes",
    "load_raster_file",
    "load_vector_file",
    "render_matrix_image",
    "matrix_to_svg",
    "image_format_for_path",
    "serialize_matrix",
]

SVG_FORMAT: Final[str] = "SVG"

# 1 (тёмный модуль) -> 0 (чёрный), 0 -> 255 (белый)
_MATRIX_TO_GRAY: Final[bytes] = bytes([255, 0]) + bytes(254)

PathLike = Union[str, "os.PathLike[str]"]


def image_to_luminance(image: Image.Image) -> PixelBuffer:
    """Convert any Pillow image to 8-bit luminance, flattening alpha onto white."""
    if image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    ):
        rgba = image.convert("RGBA")
        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        background.alpha_composite(rgba)
        image = background
    gray = image.convert("L")
    return PixelBuffer(pixels=gray.tobytes(), width=gray.width, height=gray.height)


def decode_image_bytes(raw: bytes) -> PixelBuffer:
    """Decode an in-memory PNG/JPEG/... byte stream without touching the filesystem."""
    try:
        with Image.open(BytesIO(raw)) as img:
            img.load()
            return image_to_luminance(img)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageCodecError(f"Cannot decode image bytes ({len(raw)} bytes): {e}") from e


def load_raster_file(path: PathLike) -> PixelBuffer:
    try:
        with Image.open(path) as img:
            img.load()
            return image_to_luminance(img)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageCodecError(f"Cannot read image file {path!s}: {e}") from e


def load_vector_file(path: PathLike) -> PixelBuffer:
    """Rasterise an SVG file with cairosvg and return its luminance."""
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        # OSError: пакет установлен, но нет системной libcairo
        logger.error("cairosvg unavailable for SVG input: %r", e)
        raise ImageCodecError("cairosvg not installed (pip install cairosvg)") from e

    try:
        png = cairosvg.svg2png(url=os.fspath(path))
    except Exception as e:
        logger.debug("SVG rasterisation failed for %s: %r", path, e)
        raise ImageCodecError(f"Cannot rasterise SVG file {path!s}: {e}") from e
    if not png:
        raise ImageCodecError(f"SVG file {path!s} produced no image")
    return decode_image_bytes(png)


def render_matrix_image(matrix: SymbolMatrix) -> Image.Image:
    """Symbol matrix -> grayscale image, one pixel per cell."""
    if matrix.width <= 0 or matrix.height <= 0:
        raise SerializationError(f"Cannot render empty matrix {matrix.width}x{matrix.height}")
    return Image.frombytes("L", (matrix.width, matrix.height), matrix.bits.translate(_MATRIX_TO_GRAY))


def matrix_to_svg(matrix: SymbolMatrix) -> bytes:
    """Vector rendering: one path made of horizontal runs of dark cells."""
    segments = []
    for y, row in enumerate(matrix.rows()):
        x = 0
        while x < matrix.width:
            if row[x]:
                start = x
                while x < matrix.width and row[x]:
                    x += 1
                run = x - start
                segments.append(f"M{start} {y}h{run}v1h-{run}z")
            else:
                x += 1
    svg = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
        f'width="{matrix.width}" height="{matrix.height}" '
        f'viewBox="0 0 {matrix.width} {matrix.height}">'
        f'<rect width="100%" height="100%" fill="#FFFFFF"/>'
        f'<path fill="#000000" d="{"".join(segments)}"/>'
        "</svg>\n"
    )
    return svg.encode("utf-8")


def image_format_for_path(path: PathLike, default: str = "PNG") -> str:
    """
    Pick the output format from a file extension.

    Returns ``SVG_FORMAT`` for ``.svg``, the Pillow format registered for the
    extension otherwise, and ``default`` when there is no extension.

    Raises:
        SerializationError: extension is not known to Pillow.
    """
    suffix = Path(path).suffix.lower()
    if not suffix:
        return default.upper()
    if suffix == ".svg":
        return SVG_FORMAT
    fmt = Image.registered_extensions().get(suffix)
    if fmt is None:
        raise SerializationError(f"Unsupported output image extension: {suffix}")
    return fmt


def serialize_matrix(matrix: SymbolMatrix, image_format: str = "PNG") -> bytes:
    """Encode the matrix as ``image_format`` bytes (any Pillow writer, or SVG)."""
    fmt = image_format.upper()
    if fmt == SVG_FORMAT:
        return matrix_to_svg(matrix)
    img = render_matrix_image(matrix)
    buf = BytesIO()
    try:
        img.save(buf, format=fmt)
    except (KeyError, ValueError, OSError) as e:
        raise SerializationError(f"Cannot serialise matrix as {fmt}: {e}") from e
    logger.debug("Matrix serialised as %s (%d bytes)", fmt, buf.getbuffer().nbytes)
    return buf.getvalue()
