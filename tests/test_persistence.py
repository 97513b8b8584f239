import pytest

from punchcard import (
    PLACEHOLDER,
    ROWS,
    CardType,
    HollerithCode,
    LengthMismatchError,
    PunchCard,
    binary_to_bytes,
    decode_text,
    encode_char,
    encode_text,
    from_bytes,
    from_column_binary,
    to_bytes,
    to_column_binary,
)

HELLO_WORLD_EBCDIC = bytes.fromhex("c8c5d3d3d640e6d6d9d3c4")


def test_to_bytes_text_card(hello_card):
    data = to_bytes(hello_card)
    assert len(data) == 80
    assert data == HELLO_WORLD_EBCDIC + b"\x40" * 69


def test_to_bytes_blank_card(blank_card):
    assert to_bytes(blank_card) == b"\x40" * 80


def test_to_bytes_falls_back_to_punches(blank_card):
    blank_card.punch_code(1, encode_char("Q"))
    assert to_bytes(blank_card)[0] == 0xD8


def test_to_bytes_unknown_punches_use_placeholder(blank_card):
    blank_card.punch_code(1, HollerithCode([12, 11, 0]))
    assert to_bytes(blank_card)[0] == 0x6F  # '?'


def test_to_bytes_binary_card_uses_deck_image(object_card):
    assert to_bytes(object_card) == binary_to_bytes(object_card)


def test_from_bytes_regenerates_punches():
    card = from_bytes(HELLO_WORLD_EBCDIC + b"\x40" * 69)
    assert card.card_type is CardType.TEXT
    assert decode_text(card, trim=True) == "HELLO WORLD"
    assert card.column(1).printed == "H"
    assert card.column(1).punches == encode_char("H")
    assert card.column(80).printed == " "


def test_from_bytes_unmapped_byte_is_placeholder():
    card = from_bytes(b"\x00" + b"\x40" * 79)
    assert card.column(1).printed == PLACEHOLDER
    assert card.column(1).punches == encode_char(PLACEHOLDER)


def test_from_bytes_accepts_bytearray_and_memoryview():
    data = bytearray(b"\xc1" * 80)
    assert decode_text(from_bytes(data)) == "A" * 80
    assert decode_text(from_bytes(memoryview(bytes(data)))) == "A" * 80


@pytest.mark.parametrize("length", [0, 79, 81, 108, 160])
def test_from_bytes_length_mismatch(length):
    with pytest.raises(LengthMismatchError) as excinfo:
        from_bytes(b"\x40" * length)
    assert excinfo.value.get_context("length") == length
    assert excinfo.value.get_context("expected") == 80


def test_text_round_trip_keeps_printed_characters():
    card = encode_text("LOOP  LD   X        COMMENT, $1.00 (NET)")
    loaded = from_bytes(to_bytes(card))
    assert decode_text(loaded) == decode_text(card)
    for before, after in zip(card, loaded):
        assert (before.printed or " ") == after.printed


def test_column_binary_blank(blank_card):
    assert to_column_binary(blank_card) == bytes(160)


def test_column_binary_bit_layout(blank_card):
    blank_card.punch_code(1, HollerithCode([12]))
    blank_card.punch_code(2, HollerithCode([9]))
    blank_card.punch_code(3, HollerithCode(ROWS))
    data = to_column_binary(blank_card)
    assert data[0:2] == b"\x01\x00"
    assert data[2:4] == b"\x00\x08"
    assert data[4:6] == b"\xff\x0f"


def test_column_binary_round_trip(hello_card):
    hello_card.punch_code(80, HollerithCode(ROWS))
    loaded = from_column_binary(to_column_binary(hello_card))
    assert loaded.card_type is CardType.BINARY
    assert [col.punches for col in loaded] == [col.punches for col in hello_card]
    assert all(col.printed is None for col in loaded)


def test_column_binary_ignores_high_bits():
    data = bytearray(160)
    data[1] = 0xF0
    card = from_column_binary(bytes(data))
    assert card.column(1).is_blank


def test_column_binary_length_mismatch():
    with pytest.raises(LengthMismatchError):
        from_column_binary(bytes(80))


def test_blank_binary_card_to_bytes():
    assert to_bytes(PunchCard.blank(CardType.BINARY)) == bytes(108)
