"""
EBCDIC byte codes for the IBM 029 character repertoire.

Text cards are stored one EBCDIC byte per column. The code points come from
IBM Code Page 037 (the stdlib ``cp037`` codec), restricted to the characters
a keypunch can produce.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from .hollerith import HOLLERITH_TABLE

logger = logging.getLogger(__name__)

DEFAULT_CODEPAGE = "cp037"
EBCDIC_SPACE = 0x40


class EbcdicTable:
    """Bidirectional character <-> EBCDIC byte table over a fixed repertoire."""

    def __init__(
        self, characters: Iterable[str], codepage: str = DEFAULT_CODEPAGE
    ) -> None:
        self.codepage = codepage
        self._char_to_byte: Dict[str, int] = {}
        self._byte_to_char: Dict[int, str] = {}
        for char in characters:
            try:
                encoded = char.encode(codepage)
            except UnicodeEncodeError as e:
                raise ValueError(
                    f"Character {char!r} has no {codepage} code point"
                ) from e
            if len(encoded) != 1:
                raise ValueError(f"Character {char!r} is not a single {codepage} byte")
            byte = encoded[0]
            if byte in self._byte_to_char:
                raise ValueError(
                    f"Byte 0x{byte:02X} assigned to both "
                    f"{self._byte_to_char[byte]!r} and {char!r}"
                )
            self._char_to_byte[char] = byte
            self._byte_to_char[byte] = char
        logger.debug(
            f"Built {codepage} table with {len(self._char_to_byte)} characters"
        )

    @property
    def characters(self) -> Tuple[str, ...]:
        return tuple(self._char_to_byte)

    def char_to_byte(self, char: str) -> Optional[int]:
        """Return the EBCDIC byte for ``char`` or None outside the repertoire."""
        return self._char_to_byte.get(char)

    def byte_to_char(self, byte: int) -> Optional[str]:
        """Return the character for ``byte`` or None when the byte is not mapped."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"Byte value out of range: {byte}")
        return self._byte_to_char.get(byte)

    def __len__(self) -> int:
        return len(self._char_to_byte)


EBCDIC_TABLE = EbcdicTable(HOLLERITH_TABLE.characters)


def char_to_byte(char: str) -> Optional[int]:
    return EBCDIC_TABLE.char_to_byte(char)


def byte_to_char(byte: int) -> Optional[str]:
    return EBCDIC_TABLE.byte_to_char(byte)
