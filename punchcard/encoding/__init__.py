"""Character tables: IBM 029 Hollerith punch codes and their EBCDIC bytes."""

from .ebcdic import EBCDIC_TABLE, EbcdicTable, byte_to_char, char_to_byte
from .hollerith import (
    HOLLERITH_TABLE,
    ROWS,
    HollerithCode,
    HollerithTable,
    decode,
    encode_char,
    normalize_text,
)

__all__ = [
    "ROWS",
    "HollerithCode",
    "HollerithTable",
    "HOLLERITH_TABLE",
    "encode_char",
    "decode",
    "normalize_text",
    "EbcdicTable",
    "EBCDIC_TABLE",
    "char_to_byte",
    "byte_to_char",
]
