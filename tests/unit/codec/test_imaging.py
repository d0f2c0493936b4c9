import sys
from io import BytesIO
from pathlib import Path
from unittest import mock

import pytest
from PIL import Image

from barcode_bridge.codec.imaging import (
    SVG_FORMAT,
    decode_image_bytes,
    image_format_for_path,
    image_to_luminance,
    load_raster_file,
    load_vector_file,
    matrix_to_svg,
    render_matrix_image,
    serialize_matrix,
)
from barcode_bridge.engine.base import SymbolMatrix
from barcode_bridge.exceptions import ImageCodecError, SerializationError

DIAGONAL = SymbolMatrix(width=3, height=2, bits=bytes([1, 1, 0, 0, 0, 1]))


def test_transparent_pixels_become_white() -> None:
    img = Image.new("RGBA", (2, 1), (0, 0, 0, 0))
    img.putpixel((1, 0), (0, 0, 0, 255))
    buffer = image_to_luminance(img)
    assert buffer.pixels == bytes([255, 0])


def test_rgb_to_luminance() -> None:
    buffer = image_to_luminance(Image.new("RGB", (3, 2), (255, 255, 255)))
    assert (buffer.width, buffer.height) == (3, 2)
    assert buffer.pixels == bytes([255]) * 6


def test_decode_image_bytes(png_bytes: bytes) -> None:
    assert decode_image_bytes(png_bytes).width == 8
    with pytest.raises(ImageCodecError):
        decode_image_bytes(b"definitely not an image")


def test_load_raster_file(png_file: Path, tmp_path: Path) -> None:
    assert load_raster_file(png_file).height == 6
    with pytest.raises(ImageCodecError):
        load_raster_file(tmp_path / "missing.png")


def test_load_vector_file_uses_cairosvg(svg_file: Path, png_factory) -> None:
    fake = mock.Mock()
    fake.svg2png.return_value = png_factory((4, 4), 0)
    with mock.patch.dict(sys.modules, {"cairosvg": fake}):
        buffer = load_vector_file(svg_file)
    fake.svg2png.assert_called_once_with(url=str(svg_file))
    assert buffer.pixels == bytes(16)


def test_load_vector_file_without_cairosvg(svg_file: Path) -> None:
    with mock.patch.dict(sys.modules, {"cairosvg": None}):
        with pytest.raises(ImageCodecError, match="cairosvg"):
            load_vector_file(svg_file)


def test_load_vector_file_wraps_render_errors(svg_file: Path) -> None:
    fake = mock.Mock()
    fake.svg2png.side_effect = ValueError("broken svg")
    with mock.patch.dict(sys.modules, {"cairosvg": fake}):
        with pytest.raises(ImageCodecError, match="broken svg"):
            load_vector_file(svg_file)


def test_render_matrix_image() -> None:
    img = render_matrix_image(DIAGONAL)
    assert img.size == (3, 2)
    assert list(img.getdata()) == [0, 0, 255, 255, 255, 0]


def test_render_empty_matrix_rejected() -> None:
    with pytest.raises(SerializationError):
        render_matrix_image(SymbolMatrix(width=0, height=0, bits=b""))


def test_matrix_to_svg_runs() -> None:
    svg = matrix_to_svg(DIAGONAL).decode("utf-8")
    assert 'width="3" height="2"' in svg
    assert 'd="M0 0h2v1h-2zM2 1h1v1h-1z"' in svg


@pytest.mark.parametrize(
    "path,expected",
    [
        ("out.png", "PNG"),
        ("out.PNG", "PNG"),
        ("out.jpg", "JPEG"),
        ("out.bmp", "BMP"),
        ("out.svg", SVG_FORMAT),
        ("out", "PNG"),
    ],
)
def test_image_format_for_path(path: str, expected: str) -> None:
    assert image_format_for_path(path) == expected


def test_unknown_extension_rejected() -> None:
    with pytest.raises(SerializationError):
        image_format_for_path("out.barcode")


def test_serialize_matrix_png_round_trip() -> None:
    data = serialize_matrix(DIAGONAL, "png")
    assert data.startswith(b"\x89PNG")
    with Image.open(BytesIO(data)) as img:
        assert img.size == (3, 2)
        assert list(img.convert("L").getdata()) == [0, 0, 255, 255, 255, 0]


def test_serialize_matrix_svg() -> None:
    assert serialize_matrix(DIAGONAL, "svg").startswith(b"<?xml")


def test_serialize_matrix_unknown_format() -> None:
    with pytest.raises(SerializationError):
        serialize_matrix(DIAGONAL, "NOPE")
