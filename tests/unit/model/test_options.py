from pathlib import Path

import pytest

from barcode_bridge.model.enums import BarcodeFormat
from barcode_bridge.model.options import DecodeOptions, EncodeOptions, coerce_options
from barcode_bridge.model.results import DecodeResult


def test_decode_options_default_to_none() -> None:
    opts = DecodeOptions()
    assert all(getattr(opts, name) is None for name in opts.__slots__)


def test_decode_options_from_camel_case_dict() -> None:
    opts = DecodeOptions.from_dict(
        {
            "tryHarder": True,
            "decodeMulti": True,
            "barcodeFormat": ["qrcode", "EAN_13"],
            "assumeCode39CheckDigit": False,
            "allowedLengths": [6, 8],
        }
    )
    assert opts.try_harder is True
    assert opts.decode_multi is True
    assert opts.barcode_format == (BarcodeFormat.QR_CODE, BarcodeFormat.EAN_13)
    assert opts.assume_code39_check_digit is False
    assert opts.allowed_lengths == (6, 8)


def test_single_format_is_wrapped() -> None:
    assert DecodeOptions(barcode_format="aztec").barcode_format == (BarcodeFormat.AZTEC,)


def test_unknown_key_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown option"):
        DecodeOptions.from_dict({"tryHardest": True})
    with pytest.raises(ValueError):
        EncodeOptions.from_dict({"colour": "red"})


@pytest.mark.parametrize("lengths", [[-1], "12", [1.5]])
def test_allowed_lengths_validation(lengths: object) -> None:
    with pytest.raises((TypeError, ValueError)):
        DecodeOptions(allowed_lengths=lengths)  # type: ignore[arg-type]


def test_encode_options_coercion() -> None:
    opts = EncodeOptions.from_dict(
        {"barcodeFormat": "PDF_417", "width": 300, "outputFile": Path("out.png"), "gs1Format": True}
    )
    assert opts.barcode_format is BarcodeFormat.PDF_417
    assert opts.output_file == "out.png"
    assert opts.gs1_format is True
    assert opts.height is None


@pytest.mark.parametrize("field", ["width", "height", "margin"])
def test_encode_options_reject_non_integer_size(field: str) -> None:
    with pytest.raises(TypeError):
        EncodeOptions(**{field: "10"})
    with pytest.raises(TypeError):
        EncodeOptions(**{field: True})


def test_coerce_options() -> None:
    assert coerce_options(None, DecodeOptions) == DecodeOptions()
    opts = EncodeOptions(width=10)
    assert coerce_options(opts, EncodeOptions) is opts
    assert coerce_options({"width": 10}, EncodeOptions) == opts
    with pytest.raises(TypeError):
        coerce_options(["width"], EncodeOptions)  # type: ignore[arg-type]


def test_decode_result_to_dict() -> None:
    result = DecodeResult(text="AB", raw_bytes=b"AB", num_bits=16, format=BarcodeFormat.CODE_128)
    assert result.to_dict() == {
        "text": "AB",
        "rawBytes": [65, 66],
        "numBits": 16,
        "format": "code128",
    }
