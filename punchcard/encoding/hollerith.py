"""
Hollerith punch codes for the IBM 029 keypunch.

A card column has twelve punch positions. Reading top to bottom they are the
zone rows 12, 11 and 0 followed by the numeric rows 1 through 9. Digits use a
single numeric punch, letters combine one zone punch with one numeric punch,
and the special characters add an 8 punch to a zone/numeric pair.
"""

import logging
import string
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Physical row order, top of the card first.
ROWS: Tuple[int, ...] = (12, 11, 0, 1, 2, 3, 4, 5, 6, 7, 8, 9)
ZONE_ROWS: Tuple[int, ...] = (12, 11, 0)
ROW_COUNT = len(ROWS)
FULL_COLUMN_BITS = (1 << ROW_COUNT) - 1

_ROW_SET: FrozenSet[int] = frozenset(ROWS)
_ROW_INDEX: Dict[int, int] = {row: idx for idx, row in enumerate(ROWS)}

# The keypunch has no lowercase; only ASCII letters are folded.
_KEYPUNCH_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def normalize_text(text: str) -> str:
    """Fold ASCII lowercase letters to uppercase, as the keypunch keyboard does.

    Every other character, including non-ASCII letters, is returned unchanged
    so the result always has the same length as ``text``.
    """
    return text.translate(_KEYPUNCH_UPPER)


class HollerithCode:
    """Set of punched rows for one card column.

    Rows are stored as an unordered set; ``rows`` reports them in physical
    order (12, 11, 0, 1..9). Any subset of the twelve rows is a legal code,
    whether or not it spells a character.
    """

    __slots__ = ("_rows",)

    def __init__(self, rows: Iterable[int] = ()) -> None:
        row_set = frozenset(rows)
        invalid = row_set - _ROW_SET
        if invalid:
            raise ValueError(f"Invalid punch rows: {sorted(invalid)}")
        self._rows = row_set

    @classmethod
    def empty(cls) -> "HollerithCode":
        """Code with no punches (blank column)."""
        return cls()

    @classmethod
    def from_array(cls, punches: Sequence[bool]) -> "HollerithCode":
        """Build a code from 12 flags given in physical row order."""
        if len(punches) != ROW_COUNT:
            raise ValueError(
                f"Punch array must have {ROW_COUNT} entries, got {len(punches)}"
            )
        return cls(row for row, punched in zip(ROWS, punches) if punched)

    @classmethod
    def from_bits(cls, value: int) -> "HollerithCode":
        """Build a code from a 12-bit value; the most significant bit is row 12."""
        if not 0 <= value <= FULL_COLUMN_BITS:
            raise ValueError(f"Column value out of range: 0x{value:X}")
        return cls(
            row
            for idx, row in enumerate(ROWS)
            if value & (1 << (ROW_COUNT - 1 - idx))
        )

    @property
    def rows(self) -> Tuple[int, ...]:
        """Punched rows in physical order."""
        return tuple(row for row in ROWS if row in self._rows)

    @property
    def is_blank(self) -> bool:
        return not self._rows

    def is_punched(self, row: int) -> bool:
        return row in self._rows

    def as_array(self) -> List[bool]:
        """Return 12 flags in physical row order (index 0 is row 12)."""
        return [row in self._rows for row in ROWS]

    def to_bits(self) -> int:
        """Return the 12-bit value of this column; row 12 is the most significant bit."""
        value = 0
        for row in self._rows:
            value |= 1 << (ROW_COUNT - 1 - _ROW_INDEX[row])
        return value

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[int]:
        return iter(self.rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HollerithCode):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"HollerithCode({list(self.rows)!r})"


def _build_ibm029_punches() -> Dict[str, Tuple[int, ...]]:
    punches: Dict[str, Tuple[int, ...]] = {" ": ()}
    for digit in range(10):
        punches[str(digit)] = (digit,)
    for letter, digit in zip("ABCDEFGHI", range(1, 10)):
        punches[letter] = (12, digit)
    for letter, digit in zip("JKLMNOPQR", range(1, 10)):
        punches[letter] = (11, digit)
    for letter, digit in zip("STUVWXYZ", range(2, 10)):
        punches[letter] = (0, digit)
    punches.update(
        {
            "&": (12,),
            "-": (11,),
            "/": (0, 1),
            # 12-8 specials
            "¢": (12, 2, 8),
            ".": (12, 3, 8),
            "<": (12, 4, 8),
            "(": (12, 5, 8),
            "+": (12, 6, 8),
            "|": (12, 7, 8),
            # 11-8 specials
            "!": (11, 2, 8),
            "$": (11, 3, 8),
            "*": (11, 4, 8),
            ")": (11, 5, 8),
            ";": (11, 6, 8),
            "¬": (11, 7, 8),
            # 0-8 specials
            "\\": (0, 2, 8),
            ",": (0, 3, 8),
            "%": (0, 4, 8),
            "_": (0, 5, 8),
            ">": (0, 6, 8),
            "?": (0, 7, 8),
            # 8 specials
            ":": (2, 8),
            "#": (3, 8),
            "@": (4, 8),
            "'": (5, 8),
            "=": (6, 8),
            '"': (7, 8),
        }
    )
    return punches


class HollerithTable:
    """Bidirectional IBM 029 character <-> punch code table.

    The table does not case-fold; callers normalize text before lookup.
    """

    def __init__(self, punches: Optional[Dict[str, Tuple[int, ...]]] = None) -> None:
        source = punches if punches is not None else _build_ibm029_punches()
        self._char_to_code: Dict[str, HollerithCode] = {}
        self._code_to_char: Dict[HollerithCode, str] = {}
        for char, rows in source.items():
            code = HollerithCode(rows)
            existing = self._code_to_char.get(code)
            if existing is not None:
                raise ValueError(
                    f"Punch code {list(code.rows)} assigned to both {existing!r} and {char!r}"
                )
            self._char_to_code[char] = code
            self._code_to_char[code] = char
        logger.debug(f"Built Hollerith table with {len(self._char_to_code)} characters")

    @property
    def characters(self) -> Tuple[str, ...]:
        return tuple(self._char_to_code)

    def encode_char(self, char: str) -> Optional[HollerithCode]:
        """Return the punch code for ``char`` or None when it is not in the table."""
        return self._char_to_code.get(char)

    def decode(self, code: HollerithCode) -> Optional[str]:
        """Return the character punched as ``code`` or None when no entry matches exactly."""
        return self._code_to_char.get(code)

    def __contains__(self, char: object) -> bool:
        return char in self._char_to_code

    def __len__(self) -> int:
        return len(self._char_to_code)


HOLLERITH_TABLE = HollerithTable()


def encode_char(char: str) -> Optional[HollerithCode]:
    """Look up the IBM 029 punch code for a single character."""
    return HOLLERITH_TABLE.encode_char(char)


def decode(code: HollerithCode) -> Optional[str]:
    """Look up the character for a punch code."""
    return HOLLERITH_TABLE.decode(code)
