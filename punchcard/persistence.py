"""
Byte images of punch cards.

Text cards are stored as 80 EBCDIC bytes, one per column. Reading a text card
re-punches the decoded characters through the IBM 029 table, so a loaded card
always carries canonical punch patterns. Binary cards are delegated to the
IBM 1130 object deck image in :mod:`punchcard.ibm1130`.

The column-binary image keeps all twelve rows of every column (two bytes per
column) and is the lossless format for arbitrary punch patterns.
"""

import logging
from typing import List, Union

from .card import CARD_COLUMNS, CardType, Column, PunchCard
from .encoding.ebcdic import EBCDIC_SPACE, byte_to_char, char_to_byte
from .encoding.hollerith import ROW_COUNT, HollerithCode, decode
from .exceptions import LengthMismatchError
from .ibm1130 import binary_to_bytes
from .text import PLACEHOLDER, encode_text
from .utils.logging_utils import log_data_processing, log_debug_operation

logger = logging.getLogger(__name__)

TEXT_CARD_BYTES = CARD_COLUMNS
COLUMN_BINARY_BYTES = CARD_COLUMNS * 2

BytesLike = Union[bytes, bytearray, memoryview]


def _check_length(data: BytesLike, expected: int, kind: str) -> bytes:
    raw = bytes(data)
    if len(raw) != expected:
        raise LengthMismatchError(
            f"{kind} must be exactly {expected} bytes",
            context={"length": len(raw), "expected": expected},
        )
    return raw


def _column_byte(column: Column) -> int:
    if column.printed is not None:
        byte = char_to_byte(column.printed)
        if byte is not None:
            return byte
    char = decode(column.punches)
    if char is None:
        char = PLACEHOLDER
    byte = char_to_byte(char)
    return EBCDIC_SPACE if byte is None else byte


def to_bytes(card: PunchCard) -> bytes:
    """
    Serialize a card to its stored byte image.

    Text cards become 80 EBCDIC bytes. Binary cards become the IBM 1130
    object deck image (see :func:`punchcard.ibm1130.binary_to_bytes`).
    """
    if card.card_type is CardType.BINARY:
        return binary_to_bytes(card)

    data = bytes(_column_byte(col) for col in card)
    log_data_processing(logger, "Serialized text card", f"{len(data)} bytes")
    return data


def from_bytes(data: BytesLike) -> PunchCard:
    """
    Load an 80-byte EBCDIC text card.

    Unmapped bytes are read as the placeholder character. The result is
    re-encoded with the IBM 029 table and is always a TEXT card.

    Raises:
        LengthMismatchError: ``data`` is not exactly 80 bytes.
    """
    raw = _check_length(data, TEXT_CARD_BYTES, "Text card")
    chars: List[str] = []
    unmapped = 0
    for byte in raw:
        char = byte_to_char(byte)
        if char is None:
            unmapped += 1
            char = PLACEHOLDER
        chars.append(char)
    if unmapped:
        log_debug_operation(logger, "Unmapped EBCDIC bytes read as placeholder", unmapped)
    return encode_text("".join(chars))


def to_column_binary(card: PunchCard) -> bytes:
    """Serialize every punch of ``card`` as 160 bytes.

    Each column is a little-endian 16-bit word; bit 0 is row 12, bit 1 row 11,
    bit 2 row 0 and bits 3..11 rows 1..9. Bits 12..15 are always zero.
    """
    out = bytearray()
    for col in card:
        word = 0
        for bit, punched in enumerate(col.punches.as_array()):
            if punched:
                word |= 1 << bit
        out += word.to_bytes(2, "little")
    return bytes(out)


def from_column_binary(data: BytesLike) -> PunchCard:
    """Load a 160-byte column-binary image as a BINARY card."""
    raw = _check_length(data, COLUMN_BINARY_BYTES, "Column binary image")
    columns = []
    for offset in range(0, COLUMN_BINARY_BYTES, 2):
        word = int.from_bytes(raw[offset : offset + 2], "little")
        if word >> ROW_COUNT:
            log_debug_operation(
                logger,
                "Ignoring bits above row 9",
                f"column {offset // 2 + 1}: 0x{word:04X}",
            )
        code = HollerithCode.from_array([bool(word & (1 << bit)) for bit in range(ROW_COUNT)])
        columns.append(Column(code))
    return PunchCard(CardType.BINARY, columns)
