from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .enums import BarcodeFormat

__all__ = ["DecodeResult"]


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """
    Single decoded symbol.

    `text` is exactly what the engine produced; `raw_bytes` is the payload
    before character decoding, `num_bits` its length in bits.
    """

    text: str
    raw_bytes: bytes
    num_bits: int
    format: BarcodeFormat

    def to_dict(self) -> Dict[str, Any]:
        """Host-friendly representation (camelCase keys, list of ints for bytes)."""
        return {
            "text": self.text,
            "rawBytes": list(self.raw_bytes),
            "numBits": self.num_bits,
            "format": self.format.value,
        }
