import pytest

from punchcard.exceptions import (
    CardFormatError,
    ColumnIndexError,
    FieldOverflowError,
    InvalidColumnCountError,
    InvalidWordCountError,
    LengthExceededError,
    LengthMismatchError,
    PunchCardError,
    UnsupportedCharacterError,
)


@pytest.mark.parametrize(
    "error_cls",
    [
        UnsupportedCharacterError,
        LengthExceededError,
        LengthMismatchError,
        InvalidWordCountError,
        InvalidColumnCountError,
        ColumnIndexError,
        FieldOverflowError,
        CardFormatError,
    ],
)
def test_all_errors_share_base(error_cls):
    assert issubclass(error_cls, PunchCardError)


def test_column_index_error_is_index_error():
    assert issubclass(ColumnIndexError, IndexError)


def test_str_without_context():
    assert str(PunchCardError("boom")) == "boom"


def test_str_with_context():
    error = UnsupportedCharacterError(
        "Character cannot be punched", context={"character": "~", "column": 3}
    )
    assert str(error) == "Character cannot be punched (Context: character='~', column=3)"


def test_long_context_values_truncated():
    error = PunchCardError("bad", context={"value": "X" * 80})
    assert "X" * 47 + "..." in str(error)
    assert "X" * 48 not in str(error)


def test_add_and_get_context():
    error = LengthMismatchError("short")
    assert error.get_context("length") is None
    assert error.get_context("length", 0) == 0
    error.add_context("length", 79)
    assert error.get_context("length") == 79
    assert "context=" in repr(error)


def test_original_exception_kept():
    cause = ValueError("inner")
    error = PunchCardError("outer", original_exception=cause)
    assert error.original_exception is cause
    assert error.context == {}
