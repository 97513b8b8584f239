"""
punchcard package init.
Exports the IBM 029 / IBM 1130 punch card encoders, card model and byte formats.
"""

import argparse
import datetime
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .card import CARD_COLUMNS, CardType, Column, PunchCard
from .encoding import (
    EBCDIC_TABLE,
    HOLLERITH_TABLE,
    ROWS,
    EbcdicTable,
    HollerithCode,
    HollerithTable,
    byte_to_char,
    char_to_byte,
    decode,
    encode_char,
    normalize_text,
)
from .exceptions import (
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
from .ibm1130 import (
    DECK_BYTES_WITH_IDENT,
    DECK_DATA_BYTES,
    SourceStatement,
    binary_from_bytes,
    binary_to_bytes,
    card_from_bits,
    encode_words,
    example_object_deck_card,
    example_source_card,
    format_source_line,
    identification_text,
    pack_4_3,
    parse_source_card,
    unpack_4_3,
    validate_object_format,
    validate_source_format,
)
from .persistence import (
    COLUMN_BINARY_BYTES,
    TEXT_CARD_BYTES,
    from_bytes,
    from_column_binary,
    to_bytes,
    to_column_binary,
)
from .text import PLACEHOLDER, decode_text, encode_text
from .utils.logging_utils import log_command_error, log_command_handling

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    """JSON formatter with structured logging support."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.datetime.now().isoformat(),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        command = getattr(record, "command", None)
        if command:
            log_entry["command"] = command

        extra = getattr(record, "punchcard_extra", {})
        if extra:
            log_entry.update(extra)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Setup basic logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults
            to $PUNCHCARD_LOG_LEVEL, then WARNING.
    """
    if level is None:
        level = os.environ.get("PUNCHCARD_LOG_LEVEL", "WARNING")
    use_json = os.environ.get("PUNCHCARD_LOG_JSON", "false").lower() == "true"
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    if use_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    else:
        logging.basicConfig(level=getattr(logging, level.upper()))


def load_card_file(path: Path) -> PunchCard:
    """Load a card image, choosing the format from the file size."""
    data = path.read_bytes()
    if len(data) == TEXT_CARD_BYTES:
        return from_bytes(data)
    if len(data) in (DECK_DATA_BYTES, DECK_BYTES_WITH_IDENT):
        return binary_from_bytes(data)
    if len(data) == COLUMN_BINARY_BYTES:
        return from_column_binary(data)
    raise LengthMismatchError(
        "Unrecognized card image size",
        context={
            "path": str(path),
            "length": len(data),
            "expected": f"{TEXT_CARD_BYTES}, {DECK_DATA_BYTES}, "
            f"{DECK_BYTES_WITH_IDENT} or {COLUMN_BINARY_BYTES}",
        },
    )


def _emit_card(card: PunchCard, output: Optional[str], as_json: bool) -> None:
    if as_json:
        print(card.to_json())
    if output:
        data = to_bytes(card)
        Path(output).write_bytes(data)
        logger.info(f"Wrote {len(data)} bytes to {output}")
    elif not as_json:
        print(decode_text(card, trim=True))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="punchcard", description="punchcard - IBM 029 / IBM 1130 punch card encoder"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default $PUNCHCARD_LOG_LEVEL or WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    encode_cmd = sub.add_parser("encode", help="Punch text onto a text card")
    encode_cmd.add_argument("text", help="Up to 80 characters")
    encode_cmd.add_argument("-o", "--output", help="Write the 80-byte EBCDIC card here")
    encode_cmd.add_argument("--json", action="store_true", help="Print the card as JSON")

    decode_cmd = sub.add_parser("decode", help="Print the characters on a card file")
    decode_cmd.add_argument("path", help="Card image (80, 108, 116 or 160 bytes)")
    decode_cmd.add_argument("--trim", action="store_true", help="Strip trailing blanks")
    decode_cmd.add_argument("--json", action="store_true", help="Print the card as JSON")

    example_cmd = sub.add_parser("example", help="Produce an IBM 1130 example card")
    example_cmd.add_argument("kind", choices=["source", "object"])
    example_cmd.add_argument("-o", "--output", help="Write the card image here")
    example_cmd.add_argument("--json", action="store_true", help="Print the card as JSON")

    words_cmd = sub.add_parser("words", help="Dump the 4:3 packed words of a card file")
    words_cmd.add_argument("path", help="Card image (80, 108, 116 or 160 bytes)")
    words_cmd.add_argument(
        "--columns",
        type=int,
        default=None,
        help="Data columns to read (multiple of 4, default the columns in use)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    log_command_handling(logger, args.command)

    try:
        if args.command == "encode":
            _emit_card(encode_text(args.text), args.output, args.json)
        elif args.command == "decode":
            card = load_card_file(Path(args.path))
            if args.json:
                print(card.to_json())
            else:
                print(decode_text(card, trim=args.trim))
        elif args.command == "example":
            if args.kind == "source":
                card = example_source_card()
            else:
                card = example_object_deck_card()
            _emit_card(card, args.output, args.json)
        elif args.command == "words":
            card = load_card_file(Path(args.path))
            words = unpack_4_3(card, args.columns)
            print(" ".join(f"{word:04X}" for word in words))
    except (PunchCardError, OSError) as e:
        log_command_error(logger, args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())


__all__ = [
    # Model
    "CARD_COLUMNS",
    "CardType",
    "Column",
    "PunchCard",
    # Tables
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
    # Text
    "PLACEHOLDER",
    "encode_text",
    "decode_text",
    # Byte images
    "to_bytes",
    "from_bytes",
    "to_column_binary",
    "from_column_binary",
    # IBM 1130
    "SourceStatement",
    "pack_4_3",
    "unpack_4_3",
    "card_from_bits",
    "encode_words",
    "binary_to_bytes",
    "binary_from_bytes",
    "identification_text",
    "format_source_line",
    "parse_source_card",
    "validate_source_format",
    "validate_object_format",
    "example_source_card",
    "example_object_deck_card",
    # Errors
    "PunchCardError",
    "UnsupportedCharacterError",
    "LengthExceededError",
    "LengthMismatchError",
    "InvalidWordCountError",
    "InvalidColumnCountError",
    "ColumnIndexError",
    "FieldOverflowError",
    "CardFormatError",
    # Logging / CLI
    "JSONFormatter",
    "setup_logging",
    "load_card_file",
    "main",
]
