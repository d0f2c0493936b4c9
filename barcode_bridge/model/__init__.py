from .enums import BarcodeFormat, DecodeHintType, EncodeHintType
from .options import DecodeOptions, EncodeOptions
from .results import DecodeResult

__all__ = [
    "BarcodeFormat",
    "DecodeHintType",
    "EncodeHintType",
    "DecodeOptions",
    "EncodeOptions",
    "DecodeResult",
]
