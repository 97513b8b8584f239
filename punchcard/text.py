"""
Text <-> punch card conversion using the IBM 029 Hollerith table.

Encoding aborts on the first character the keypunch cannot produce; decoding
never fails and shows unknown punch patterns as a placeholder character.
"""

import logging
from typing import List

from .card import CARD_COLUMNS, CardType, Column, PunchCard
from .encoding.hollerith import HollerithCode, decode, encode_char, normalize_text
from .exceptions import LengthExceededError, UnsupportedCharacterError
from .utils.logging_utils import log_data_processing

logger = logging.getLogger(__name__)

# Shown for columns whose punches spell no IBM 029 character.
PLACEHOLDER = "?"


def encode_text(text: str, max_len: int = CARD_COLUMNS) -> PunchCard:
    """
    Punch ``text`` into a new text card, one character per column.

    Args:
        text: Characters to punch, starting at column 1. Lowercase ASCII
            letters are uppercased first.
        max_len: Longest text accepted (at most 80).

    Returns:
        A TEXT card whose printed characters are the normalized input.

    Raises:
        LengthExceededError: ``text`` is longer than ``max_len``.
        UnsupportedCharacterError: a character is outside the IBM 029 set.
    """
    if not 0 <= max_len <= CARD_COLUMNS:
        raise ValueError(f"max_len must be between 0 and {CARD_COLUMNS}, got {max_len}")
    if len(text) > max_len:
        raise LengthExceededError(
            "Text does not fit on the card",
            context={"length": len(text), "max_len": max_len},
        )

    normalized = normalize_text(text)
    columns: List[Column] = []
    for index, (original, char) in enumerate(zip(text, normalized), start=1):
        code = encode_char(char)
        if code is None:
            raise UnsupportedCharacterError(
                "Character cannot be punched on an IBM 029",
                context={"character": original, "column": index},
            )
        columns.append(Column(code, char))
    columns.extend(Column() for _ in range(CARD_COLUMNS - len(columns)))

    log_data_processing(logger, "Encoded text card", f"{len(text)} characters")
    return PunchCard(CardType.TEXT, columns)


def decode_code(code: HollerithCode, placeholder: str = PLACEHOLDER) -> str:
    char = decode(code)
    return placeholder if char is None else char


def decode_text(
    card: PunchCard, placeholder: str = PLACEHOLDER, trim: bool = False
) -> str:
    """
    Read the characters punched on ``card``.

    Args:
        card: Card to read.
        placeholder: Character reported for columns that spell nothing.
        trim: Strip trailing blanks from the result.

    Returns:
        One character per column (80 unless trimmed).
    """
    text = "".join(decode_code(col.punches, placeholder) for col in card)
    return text.rstrip(" ") if trim else text
