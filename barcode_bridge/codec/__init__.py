"""
codec

Трансляция опций в подсказки движка, нормализация входа и диспетчеризация
decode/encode.

Public API:
    - decode, decode_pixels: распознавание (файл, data URI, base64, буфер яркости)
    - encode: генерация изображения штрихкода
    - DecodeDispatcher, DecodeStrategy, EncodeDispatcher
    - to_engine, from_engine: таблица соответствия форматов
"""

from barcode_bridge.codec.decoder import (
    DecodeDispatcher,
    DecodeStrategy,
    decode,
    decode_pixels,
)
from barcode_bridge.codec.encoder import EncodeDispatcher, encode
from barcode_bridge.codec.format_catalog import from_engine, to_engine

__all__ = [
    "DecodeDispatcher",
    "DecodeStrategy",
    "EncodeDispatcher",
    "decode",
    "decode_pixels",
    "encode",
    "from_engine",
    "to_engine",
]
