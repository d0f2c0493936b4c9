import sys
from types import SimpleNamespace
from unittest import mock

import pytest
from PIL import Image

from barcode_bridge.engine.base import EngineFormat, SymbolMatrix
from barcode_bridge.engine.writer import MultiFormatWriter, scale_modules
from barcode_bridge.exceptions import WriterError
from barcode_bridge.model.enums import EncodeHintType

MARGIN0 = {EncodeHintType.MARGIN: 0}


class TestScaleModules:
    def test_2d_uniform_multiple_centred(self) -> None:
        modules = SymbolMatrix(width=2, height=2, bits=bytes([1, 0, 0, 1]))
        out = scale_modules(modules, 10, 10, margin=1, one_dimensional=False)
        # input 4x4 with quiet zone -> multiple 2, symbol 4x4 px at offset 3
        assert (out.width, out.height) == (10, 10)
        dark = {(x, y) for y in range(10) for x in range(10) if out.get(x, y)}
        assert dark == {(3, 3), (4, 3), (3, 4), (4, 4), (5, 5), (6, 5), (5, 6), (6, 6)}

    def test_2d_never_smaller_than_symbol(self) -> None:
        modules = SymbolMatrix(width=3, height=3, bits=bytes([1] * 9))
        out = scale_modules(modules, 0, 0, margin=2, one_dimensional=False)
        assert (out.width, out.height) == (7, 7)
        assert out.get(2, 2) and not out.get(1, 1)

    def test_2d_non_square_uses_smaller_ratio(self) -> None:
        modules = SymbolMatrix(width=2, height=1, bits=bytes([1, 1]))
        out = scale_modules(modules, 20, 4, margin=0, one_dimensional=False)
        assert (out.width, out.height) == (20, 4)
        assert sum(out.bits) == 2 * 4 * 4

    def test_1d_full_height_bars(self) -> None:
        modules = SymbolMatrix(width=3, height=1, bits=bytes([1, 0, 1]))
        out = scale_modules(modules, 9, 2, margin=0, one_dimensional=True)
        expected_row = bytes([1, 1, 1, 0, 0, 0, 1, 1, 1])
        assert list(out.rows()) == [expected_row, expected_row]

    def test_1d_margin_counts_once(self) -> None:
        modules = SymbolMatrix(width=3, height=1, bits=bytes([1, 0, 1]))
        out = scale_modules(modules, 0, 1, margin=4, one_dimensional=True)
        assert out.width == 7
        assert out.bits == bytes([0, 0, 1, 0, 1, 0, 0])

    def test_empty_grid_rejected(self) -> None:
        with pytest.raises(WriterError):
            scale_modules(SymbolMatrix(0, 0, b""), 10, 10, 0, one_dimensional=False)


class TestMultiFormatWriter:
    @pytest.fixture
    def writer(self) -> MultiFormatWriter:
        return MultiFormatWriter()

    def test_supported_formats(self) -> None:
        supported = MultiFormatWriter.supported_formats()
        assert EngineFormat.UPC_EAN_EXTENSION not in supported
        assert EngineFormat.UNSUPPORTED_FORMAT not in supported
        assert len(supported) == len(EngineFormat) - 2

    def test_qr_minimal_size(self, writer: MultiFormatWriter) -> None:
        matrix = writer.encode("HELLO", EngineFormat.QR_CODE, 0, 0, MARGIN0)
        assert (matrix.width, matrix.height) == (21, 21)
        # finder pattern corner
        assert matrix.get(0, 0) and matrix.get(6, 6) and not matrix.get(7, 7)

    def test_qr_scaled(self, writer: MultiFormatWriter) -> None:
        matrix = writer.encode("HELLO", EngineFormat.QR_CODE, 200, 200, {EncodeHintType.MARGIN: 4})
        assert (matrix.width, matrix.height) == (200, 200)
        assert not matrix.get(0, 0)

    def test_qr_version_and_error_correction(self, writer: MultiFormatWriter) -> None:
        hints = {EncodeHintType.MARGIN: 0, EncodeHintType.QR_VERSION: "5", EncodeHintType.ERROR_CORRECTION: "h"}
        matrix = writer.encode("HELLO", EngineFormat.QR_CODE, 0, 0, hints)
        assert matrix.width == 37

    @pytest.mark.parametrize(
        "hints",
        [
            {EncodeHintType.ERROR_CORRECTION: "Z"},
            {EncodeHintType.QR_VERSION: "41"},
            {EncodeHintType.QR_VERSION: "one"},
            {EncodeHintType.QR_MASK_PATTERN: "8"},
            {EncodeHintType.MARGIN: -1},
        ],
    )
    def test_qr_invalid_hints(self, writer: MultiFormatWriter, hints) -> None:
        with pytest.raises(WriterError):
            writer.encode("HELLO", EngineFormat.QR_CODE, 0, 0, hints)

    def test_qr_data_overflow(self, writer: MultiFormatWriter) -> None:
        hints = {EncodeHintType.MARGIN: 0, EncodeHintType.QR_VERSION: 1}
        with pytest.raises(WriterError, match="QR code generation failed"):
            writer.encode("X" * 200, EngineFormat.QR_CODE, 0, 0, hints)

    def test_ean13_modules(self, writer: MultiFormatWriter) -> None:
        matrix = writer.encode("5901234123457", EngineFormat.EAN_13, 0, 10, MARGIN0)
        assert (matrix.width, matrix.height) == (95, 10)
        # start guard 101
        assert [matrix.get(x, 5) for x in range(3)] == [True, False, True]

    def test_code128_scaled_width(self, writer: MultiFormatWriter) -> None:
        narrow = writer.encode("ABC", EngineFormat.CODE_128, 0, 1, MARGIN0)
        wide = writer.encode("ABC", EngineFormat.CODE_128, narrow.width * 3, 1, MARGIN0)
        assert wide.width == narrow.width * 3
        assert sum(wide.bits) == 3 * sum(narrow.bits)

    def test_gs1_selects_gs1_128(self, writer: MultiFormatWriter) -> None:
        with mock.patch("barcode_bridge.engine.writer.pybarcode.get_barcode_class") as get_class:
            get_class.return_value.return_value.build.return_value = ["1101"]
            writer.encode(
                "(01)12345678901231",
                EngineFormat.CODE_128,
                0,
                1,
                {EncodeHintType.MARGIN: 0, EncodeHintType.GS1_FORMAT: True},
            )
        get_class.assert_called_once_with("gs1_128")

    def test_invalid_ean_contents(self, writer: MultiFormatWriter) -> None:
        with pytest.raises(WriterError):
            writer.encode("ABC", EngineFormat.EAN_13, 0, 0, MARGIN0)

    def test_pdf417(self, writer: MultiFormatWriter) -> None:
        matrix = writer.encode("PDF417 DATA", EngineFormat.PDF_417, 0, 0, MARGIN0)
        assert matrix.width > matrix.height > 0
        assert any(matrix.bits)

    def test_pdf417_hints_forwarded(self, writer: MultiFormatWriter) -> None:
        with mock.patch("barcode_bridge.engine.writer.pdf417gen") as pdf:
            pdf.render_image.return_value = Image.new("L", (4, 2), 0)
            writer.encode(
                "DATA",
                EngineFormat.PDF_417,
                0,
                0,
                {
                    EncodeHintType.MARGIN: 0,
                    EncodeHintType.ERROR_CORRECTION: "5",
                    EncodeHintType.PDF417_COMPACTION: "BYTE",
                    EncodeHintType.PDF417_COMPACT: True,
                },
            )
        pdf.encode.assert_called_once_with("DATA", security_level=5, force_binary=True)

    def test_zxing_writer_output_converted(self, writer: MultiFormatWriter) -> None:
        bitmap = memoryview(bytes([0, 255, 0, 255, 0, 255])).cast("B", shape=[2, 3])
        with mock.patch("barcode_bridge.engine.writer.zxingcpp") as zx:
            zx.write_barcode.return_value = bitmap
            matrix = writer.encode(
                "HELLO",
                EngineFormat.DATA_MATRIX,
                30,
                20,
                {EncodeHintType.MARGIN: 1, EncodeHintType.ERROR_CORRECTION: "M"},
            )
        assert (matrix.width, matrix.height) == (3, 2)
        assert matrix.bits == bytes([1, 0, 1, 0, 1, 0])
        kwargs = zx.write_barcode.call_args.kwargs
        assert kwargs == {"width": 30, "height": 20, "quiet_zone": 1, "ec_level": 4}

    def test_zxing_writer_errors_wrapped(self, writer: MultiFormatWriter) -> None:
        with mock.patch("barcode_bridge.engine.writer.zxingcpp") as zx:
            zx.write_barcode.side_effect = ValueError("Invalid character")
            with pytest.raises(WriterError, match="Invalid character"):
                writer.encode("hello", EngineFormat.CODABAR, 0, 0, MARGIN0)

    def test_treepoem_missing(self, writer: MultiFormatWriter) -> None:
        with mock.patch.dict(sys.modules, {"treepoem": None}):
            with pytest.raises(WriterError, match="treepoem not installed"):
                writer.encode("HELLO", EngineFormat.MAXICODE, 0, 0, MARGIN0)

    def test_treepoem_image_thresholded(self, writer: MultiFormatWriter) -> None:
        img = Image.new("L", (2, 2), 255)
        img.putpixel((0, 0), 0)
        fake = SimpleNamespace(generate_barcode=mock.Mock(return_value=img))
        with mock.patch.dict(sys.modules, {"treepoem": fake}):
            matrix = writer.encode("(01)00012345678905", EngineFormat.RSS_14, 0, 0, MARGIN0)
        fake.generate_barcode.assert_called_once_with(
            barcode_type="databaromni", data="(01)00012345678905", scale=1
        )
        assert matrix.bits == bytes([1, 0, 0, 0])

    @pytest.mark.parametrize("contents", ["", None])
    def test_empty_contents(self, writer: MultiFormatWriter, contents) -> None:
        with pytest.raises(WriterError, match="empty contents"):
            writer.encode(contents, EngineFormat.EAN_13, 0, 0, MARGIN0)

    def test_negative_dimensions(self, writer: MultiFormatWriter) -> None:
        with pytest.raises(WriterError, match="negative"):
            writer.encode("HELLO", EngineFormat.QR_CODE, -1, 10, MARGIN0)

    @pytest.mark.parametrize(
        "fmt", [EngineFormat.UPC_EAN_EXTENSION, EngineFormat.UNSUPPORTED_FORMAT]
    )
    def test_no_encoder(self, writer: MultiFormatWriter, fmt: EngineFormat) -> None:
        with pytest.raises(WriterError, match="No encoder"):
            writer.encode("12", fmt, 0, 0, MARGIN0)
