"""80-column punch card model."""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .encoding.hollerith import HollerithCode, decode, encode_char, normalize_text
from .exceptions import ColumnIndexError, LengthMismatchError, UnsupportedCharacterError

logger = logging.getLogger(__name__)

CARD_COLUMNS = 80


class CardType(Enum):
    """Kind of card: printed text (IBM 029) or unprinted binary (object deck)."""

    TEXT = "text"
    BINARY = "binary"


@dataclass(frozen=True)
class Column:
    """One card column: its punch pattern and the character printed above it."""

    punches: HollerithCode = field(default_factory=HollerithCode.empty)
    printed: Optional[str] = None

    @classmethod
    def blank(cls) -> "Column":
        return cls()

    @classmethod
    def from_code(
        cls, code: HollerithCode, printed: Optional[str] = None
    ) -> "Column":
        return cls(punches=code, printed=printed)

    @property
    def is_blank(self) -> bool:
        return self.punches.is_blank

    def to_char(self) -> Optional[str]:
        """Character spelled by the punches, or None for an unknown pattern."""
        return decode(self.punches)


_BLANK_COLUMN = Column()


class PunchCard:
    """Exactly 80 columns plus a card type.

    Column indexes are 1-based throughout the public API. Columns are
    immutable; every change replaces whole columns.
    """

    def __init__(
        self,
        card_type: CardType = CardType.TEXT,
        columns: Optional[Iterable[Column]] = None,
    ) -> None:
        if columns is None:
            self._columns: List[Column] = [_BLANK_COLUMN] * CARD_COLUMNS
        else:
            column_list = list(columns)
            if len(column_list) != CARD_COLUMNS:
                raise LengthMismatchError(
                    "A punch card has exactly 80 columns",
                    context={"length": len(column_list), "expected": CARD_COLUMNS},
                )
            self._columns = column_list
        self.card_type = card_type

    @classmethod
    def blank(cls, card_type: CardType = CardType.TEXT) -> "PunchCard":
        """Create a card with no punches."""
        return cls(card_type)

    @classmethod
    def from_columns(
        cls, columns: Iterable[Column], card_type: CardType = CardType.TEXT
    ) -> "PunchCard":
        return cls(card_type, columns)

    @property
    def columns(self) -> Tuple[Column, ...]:
        return tuple(self._columns)

    def _offset(self, index: int) -> int:
        if not isinstance(index, int) or not 1 <= index <= CARD_COLUMNS:
            raise ColumnIndexError(
                "Column index out of range",
                context={"column": index, "valid": f"1..{CARD_COLUMNS}"},
            )
        return index - 1

    def column(self, index: int) -> Column:
        """Return column ``index`` (1..80)."""
        return self._columns[self._offset(index)]

    def punch(self, index: int, char: str) -> Column:
        """Punch one keypunch character into column ``index``.

        The character is uppercased first. Characters the IBM 029 cannot
        punch raise UnsupportedCharacterError and leave the card unchanged.
        Binary cards get the punches only; nothing is printed.
        """
        offset = self._offset(index)
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        normalized = normalize_text(char)
        code = encode_char(normalized)
        if code is None:
            raise UnsupportedCharacterError(
                "Character cannot be punched on an IBM 029",
                context={"character": char, "column": index},
            )
        printed = None if self.card_type is CardType.BINARY else normalized
        new_column = Column(code, printed)
        self._columns[offset] = new_column
        return new_column

    def punch_code(self, index: int, code: HollerithCode) -> Column:
        """Replace column ``index`` with a raw punch pattern and no printing."""
        new_column = Column(code)
        self._columns[self._offset(index)] = new_column
        return new_column

    def clear_column(self, index: int) -> None:
        self._columns[self._offset(index)] = _BLANK_COLUMN

    def clear(self) -> None:
        """Blank every column; the card type is kept."""
        self._columns = [_BLANK_COLUMN] * CARD_COLUMNS

    def punched_count(self) -> int:
        """Number of columns with at least one punch."""
        return sum(1 for col in self._columns if not col.is_blank)

    def copy(self) -> "PunchCard":
        return PunchCard(self.card_type, self._columns)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the card to a dictionary for JSON serialization."""
        return {
            "card_type": self.card_type.value,
            "columns": [
                {"rows": list(col.punches.rows), "printed": col.printed}
                for col in self._columns
            ],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PunchCard":
        """Create a card from dictionary data produced by ``to_dict``."""
        card_type = CardType(data.get("card_type", CardType.TEXT.value))
        raw_columns = data.get("columns", [])
        if len(raw_columns) != CARD_COLUMNS:
            raise LengthMismatchError(
                "Card data must describe exactly 80 columns",
                context={"length": len(raw_columns), "expected": CARD_COLUMNS},
            )
        columns = [
            Column(HollerithCode(item.get("rows", [])), item.get("printed"))
            for item in raw_columns
        ]
        return cls(card_type, columns)

    @classmethod
    def from_json(cls, json_str: str) -> "PunchCard":
        return cls.from_dict(json.loads(json_str))

    def __len__(self) -> int:
        return CARD_COLUMNS

    def __iter__(self) -> Iterator[Column]:
        return iter(tuple(self._columns))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PunchCard):
            return NotImplemented
        return self.card_type == other.card_type and self._columns == other._columns

    def __repr__(self) -> str:
        preview = "".join(col.to_char() or "?" for col in self._columns[:20]).rstrip()
        return (
            f"PunchCard(type={self.card_type.value}, punched={self.punched_count()}, "
            f"text={preview!r})"
        )
