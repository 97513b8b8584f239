"""Exceptions for punchcard with contextual information."""

from typing import Any, Dict, Optional


class PunchCardError(Exception):
    """Base error for punchcard with contextual information."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        """
        Initialize a punchcard error.

        Args:
            message: Error message
            context: Optional context information (character, column, length, expected, etc.)
            original_exception: Original exception that caused this error
        """
        super().__init__(message)
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        """Get string representation with context."""
        base_msg = super().__str__()
        if self.context:
            context_items = []
            for key, value in self.context.items():
                if isinstance(value, str) and len(value) > 50:
                    value = value[:47] + "..."
                context_items.append(f"{key}={value!r}")
            context_str = ", ".join(context_items)
            return f"{base_msg} (Context: {context_str})"
        return base_msg

    def __repr__(self) -> str:
        base_repr = super().__repr__()
        if self.context:
            return f"{base_repr} (context={self.context!r})"
        return base_repr

    def add_context(self, key: str, value: Any) -> None:
        """
        Add context information to the exception.

        Args:
            key: Context key
            value: Context value
        """
        self.context[key] = value

    def get_context(self, key: str, default: Any = None) -> Any:
        """
        Get context information from the exception.

        Args:
            key: Context key
            default: Default value if key not found

        Returns:
            Context value or default
        """
        return self.context.get(key, default)


class UnsupportedCharacterError(PunchCardError):
    """Character outside the IBM 029 repertoire met while encoding."""

    pass


class LengthExceededError(PunchCardError):
    """Text is longer than the card (or the requested maximum) allows."""

    pass


class LengthMismatchError(PunchCardError):
    """A byte buffer or column sequence does not have the required length."""

    pass


class InvalidWordCountError(PunchCardError):
    """4:3 packing was given a word count it cannot place on a card."""

    pass


class InvalidColumnCountError(PunchCardError):
    """4:3 unpacking was asked for a column count it cannot regroup."""

    pass


class ColumnIndexError(PunchCardError, IndexError):
    """Column index outside 1..80."""

    pass


class FieldOverflowError(PunchCardError):
    """Assembler source field does not fit its card columns."""

    pass


class CardFormatError(PunchCardError):
    """Card does not follow the IBM 1130 source or object deck conventions."""

    pass
