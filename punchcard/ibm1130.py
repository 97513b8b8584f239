"""
IBM 1130 card formats.

Assembler source cards are ordinary text cards with fixed fields: label in
columns 1-5, continuation mark in column 6, opcode in columns 7-10 and
operands/comments in columns 11-80.

Object deck cards carry 16-bit machine words in columns 1-72 using the 4:3
rule: four 12-row columns hold exactly three words (4 x 12 = 3 x 16 = 48
bits). The three words are concatenated most significant bit first and the
48-bit stream is cut into four 12-bit column patterns, the first bit of each
pattern landing in row 12 and the last in row 9. Columns 73-80 hold the deck
identification/sequence field, punched as Hollerith text.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .card import CARD_COLUMNS, CardType, Column, PunchCard
from .encoding.ebcdic import byte_to_char, char_to_byte
from .encoding.hollerith import ROW_COUNT, HollerithCode, decode, encode_char, normalize_text
from .exceptions import (
    CardFormatError,
    FieldOverflowError,
    InvalidColumnCountError,
    InvalidWordCountError,
    LengthExceededError,
    LengthMismatchError,
    UnsupportedCharacterError,
)
from .text import PLACEHOLDER, decode_text, encode_text
from .utils.logging_utils import log_data_processing

logger = logging.getLogger(__name__)

WORD_BITS = 16
WORD_MASK = (1 << WORD_BITS) - 1
GROUP_WORDS = 3
GROUP_COLUMNS = 4

DATA_COLUMNS = 72
MAX_WORDS = DATA_COLUMNS // GROUP_COLUMNS * GROUP_WORDS
IDENT_FIRST_COLUMN = DATA_COLUMNS + 1
IDENT_COLUMNS = CARD_COLUMNS - DATA_COLUMNS

DECK_DATA_BYTES = MAX_WORDS * 2
DECK_BYTES_WITH_IDENT = DECK_DATA_BYTES + IDENT_COLUMNS

# Source card fields as (first column, width).
LABEL_FIELD = (1, 5)
CONTINUATION_COLUMN = 6
OPCODE_FIELD = (7, 4)
OPERAND_FIELD = (11, 70)

EXAMPLE_SOURCE = ("START", "DC", "0             IBM 1130 EXAMPLE PROGRAM")

# LD, A, STO and WAIT, then the operands, result and a spare word.
EXAMPLE_OBJECT_WORDS = (
    0xC004,
    0x8004,
    0xD004,
    0x3000,
    0x0000,
    0x0005,
    0x0007,
    0x0000,
    0x0000,
)
EXAMPLE_SEQUENCE = "00000001"

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass
class SourceStatement:
    """Fields of an assembler source card, trailing blanks removed."""

    label: str
    continuation: str
    opcode: str
    operands: str


def pack_4_3(words: Sequence[int]) -> List[bool]:
    """
    Convert 16-bit words to column punch bits using the 4:3 rule.

    Args:
        words: Machine words; the count must be a multiple of three and fit
            in the 72-column data region (at most 54 words).

    Returns:
        ``len(words) // 3 * 48`` flags. Each consecutive run of 12 is one
        column in physical row order (row 12 first).

    Raises:
        InvalidWordCountError: word count not a multiple of 3, or more than
            72 columns would be needed.
    """
    count = len(words)
    if count % GROUP_WORDS:
        raise InvalidWordCountError(
            "Word count must be a multiple of 3",
            context={"word_count": count},
        )
    columns = count // GROUP_WORDS * GROUP_COLUMNS
    if columns > DATA_COLUMNS:
        raise InvalidWordCountError(
            "Words do not fit in the 72-column data region",
            context={"word_count": count, "columns": columns, "max_columns": DATA_COLUMNS},
        )

    bits: List[bool] = []
    for word in words:
        if not 0 <= word <= WORD_MASK:
            raise ValueError(f"Word value out of range: {word!r}")
        bits.extend(bool(word >> shift & 1) for shift in range(WORD_BITS - 1, -1, -1))
    log_data_processing(logger, "Packed words 4:3", f"{count} words -> {columns} columns")
    return bits


def _punch_identification(card: PunchCard, identification: str) -> None:
    if len(identification) > IDENT_COLUMNS:
        raise LengthExceededError(
            "Identification does not fit in columns 73-80",
            context={"length": len(identification), "max_len": IDENT_COLUMNS},
        )
    normalized = normalize_text(identification)
    for offset, (original, char) in enumerate(zip(identification, normalized)):
        index = IDENT_FIRST_COLUMN + offset
        code = encode_char(char)
        if code is None:
            raise UnsupportedCharacterError(
                "Character cannot be punched on an IBM 029",
                context={"character": original, "column": index},
            )
        card.punch_code(index, code)


def card_from_bits(
    bits: Sequence[bool], identification: Optional[str] = None
) -> PunchCard:
    """
    Build a BINARY card from column punch bits (as produced by ``pack_4_3``).

    Columns after the supplied bits stay blank. Columns 73-80 are only
    punched when ``identification`` is given.

    Raises:
        InvalidColumnCountError: bit count is not whole columns or exceeds
            the 72-column data region.
    """
    if len(bits) % ROW_COUNT or len(bits) > DATA_COLUMNS * ROW_COUNT:
        raise InvalidColumnCountError(
            "Bits must fill whole columns within columns 1-72",
            context={"bit_count": len(bits), "max_bits": DATA_COLUMNS * ROW_COUNT},
        )
    columns = [
        Column(HollerithCode.from_array(bits[start : start + ROW_COUNT]))
        for start in range(0, len(bits), ROW_COUNT)
    ]
    columns.extend(Column() for _ in range(CARD_COLUMNS - len(columns)))
    card = PunchCard(CardType.BINARY, columns)
    if identification:
        _punch_identification(card, identification)
    return card


def encode_words(
    words: Sequence[int], identification: Optional[str] = None
) -> PunchCard:
    """Pack ``words`` 4:3 into a BINARY object deck card."""
    return card_from_bits(pack_4_3(words), identification)


def _used_data_columns(card: PunchCard) -> int:
    """Return the 1-based index of the last punched column in 1..72, or 0."""
    for index in range(DATA_COLUMNS, 0, -1):
        if not card.columns[index - 1].is_blank:
            return index
    return 0


def unpack_4_3(card: PunchCard, column_count: Optional[int] = None) -> List[int]:
    """
    Read 16-bit words back from the data region of ``card``.

    Args:
        card: Card to read; its type is not checked.
        column_count: Number of leading columns holding packed data. Must be
            a multiple of 4 between 0 and 72. Defaults to the columns in use,
            i.e. up to the last punched column of the data region.

    Returns:
        ``column_count // 4 * 3`` words.

    Raises:
        InvalidColumnCountError: the column count (given or in use) is not a
            multiple of 4 or lies outside the data region.
    """
    if column_count is None:
        count = _used_data_columns(card)
        if count % GROUP_COLUMNS:
            raise InvalidColumnCountError(
                "Punched data columns do not form whole 4-column groups",
                context={"used_columns": count},
            )
    else:
        count = column_count
    if not 0 <= count <= DATA_COLUMNS or count % GROUP_COLUMNS:
        raise InvalidColumnCountError(
            "Column count must be a multiple of 4 within columns 1-72",
            context={"column_count": count},
        )

    bits: List[bool] = []
    for col in card.columns[:count]:
        bits.extend(col.punches.as_array())

    words = []
    for start in range(0, len(bits), WORD_BITS):
        word = 0
        for bit in bits[start : start + WORD_BITS]:
            word = (word << 1) | int(bit)
        words.append(word)
    log_data_processing(logger, "Unpacked words 4:3", f"{count} columns -> {len(words)} words")
    return words


def identification_text(card: PunchCard, placeholder: str = PLACEHOLDER) -> str:
    """Characters punched in columns 73-80."""
    return decode_text(card, placeholder)[DATA_COLUMNS:]


def binary_to_bytes(card: PunchCard) -> bytes:
    """
    Serialize the object deck image of ``card``.

    Columns 1-72 become 54 big-endian words (108 bytes) with the ``pack_4_3``
    bit layout. When columns 73-80 carry punches, their characters follow as
    8 EBCDIC bytes (116 bytes in total).
    """
    data = bytearray()
    for word in unpack_4_3(card, DATA_COLUMNS):
        data += word.to_bytes(2, "big")
    ident_columns = card.columns[DATA_COLUMNS:]
    if any(not col.is_blank for col in ident_columns):
        for col in ident_columns:
            char = decode(col.punches)
            byte = char_to_byte(PLACEHOLDER if char is None else char)
            data.append(byte if byte is not None else 0x40)
    log_data_processing(logger, "Serialized object deck card", f"{len(data)} bytes")
    return bytes(data)


def binary_from_bytes(data: BytesLike) -> PunchCard:
    """
    Load an object deck image written by ``binary_to_bytes``.

    Raises:
        LengthMismatchError: ``data`` is neither 108 nor 116 bytes.
    """
    raw = bytes(data)
    if len(raw) not in (DECK_DATA_BYTES, DECK_BYTES_WITH_IDENT):
        raise LengthMismatchError(
            "Object deck image must be 108 or 116 bytes",
            context={
                "length": len(raw),
                "expected": f"{DECK_DATA_BYTES} or {DECK_BYTES_WITH_IDENT}",
            },
        )
    words = [
        int.from_bytes(raw[offset : offset + 2], "big")
        for offset in range(0, DECK_DATA_BYTES, 2)
    ]
    identification = None
    if len(raw) == DECK_BYTES_WITH_IDENT:
        identification = "".join(
            byte_to_char(byte) or PLACEHOLDER for byte in raw[DECK_DATA_BYTES:]
        )
    return encode_words(words, identification)


def _fit(value: str, width: int, field_name: str) -> str:
    if len(value) > width:
        raise FieldOverflowError(
            f"{field_name} field is wider than {width} columns",
            context={"field": field_name, "value": value, "width": width},
        )
    return value.ljust(width)


def format_source_line(
    label: str = "", opcode: str = "", operands: str = "", continuation: str = " "
) -> str:
    """Lay out assembler fields in their card columns, trailing blanks removed."""
    if len(continuation) != 1:
        raise FieldOverflowError(
            "Continuation field is exactly one column",
            context={"field": "continuation", "value": continuation, "width": 1},
        )
    line = (
        _fit(label, LABEL_FIELD[1], "label")
        + continuation
        + _fit(opcode, OPCODE_FIELD[1], "opcode")
        + _fit(operands, OPERAND_FIELD[1], "operands")
    )
    return line.rstrip()


def validate_source_format(card: PunchCard) -> None:
    """Raise CardFormatError unless ``card`` can be an assembler source card."""
    if card.card_type is not CardType.TEXT:
        raise CardFormatError(
            "Source cards must be text cards",
            context={"card_type": card.card_type.value},
        )


def validate_object_format(card: PunchCard) -> None:
    """Raise CardFormatError unless ``card`` can be an object deck card."""
    if card.card_type is not CardType.BINARY:
        raise CardFormatError(
            "Object cards must be binary cards",
            context={"card_type": card.card_type.value},
        )
    if card.punched_count() == 0:
        raise CardFormatError("Object card cannot be blank")


def parse_source_card(card: PunchCard) -> SourceStatement:
    """Split an assembler source card into its fields."""
    validate_source_format(card)
    text = decode_text(card)
    label_start, label_width = LABEL_FIELD
    opcode_start, opcode_width = OPCODE_FIELD
    return SourceStatement(
        label=text[label_start - 1 : label_start - 1 + label_width].rstrip(),
        continuation=text[CONTINUATION_COLUMN - 1],
        opcode=text[opcode_start - 1 : opcode_start - 1 + opcode_width].strip(),
        operands=text[OPERAND_FIELD[0] - 1 :].rstrip(),
    )


def example_source_card() -> PunchCard:
    """A sample IBM 1130 assembler source card."""
    return encode_text(format_source_line(*EXAMPLE_SOURCE))


def example_object_deck_card() -> PunchCard:
    """A sample IBM 1130 object deck card: a short program plus sequence number."""
    return encode_words(EXAMPLE_OBJECT_WORDS, EXAMPLE_SEQUENCE)
