import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from punchcard import (
    HOLLERITH_TABLE,
    ROWS,
    HollerithCode,
    LengthExceededError,
    LengthMismatchError,
    UnsupportedCharacterError,
    card_from_bits,
    decode,
    decode_text,
    encode_char,
    encode_text,
    encode_words,
    from_bytes,
    from_column_binary,
    pack_4_3,
    to_bytes,
    to_column_binary,
    unpack_4_3,
)
from punchcard.card import CardType, Column, PunchCard

REPERTOIRE = "".join(HOLLERITH_TABLE.characters)
KEYPUNCH_TEXT = st.text(
    alphabet=REPERTOIRE + "abcdefghijklmnopqrstuvwxyz", max_size=80
)
OUTSIDE = st.characters().filter(lambda c: c not in REPERTOIRE and c.upper() not in REPERTOIRE)
WORDS = st.integers(min_value=0, max_value=18).flatmap(
    lambda groups: st.lists(
        st.integers(min_value=0, max_value=0xFFFF),
        min_size=groups * 3,
        max_size=groups * 3,
    )
)
CODES = st.sets(st.sampled_from(ROWS)).map(HollerithCode)


@pytest.mark.property
class TestHollerithProperties:
    """Property-based tests for the IBM 029 tables and text encoding."""

    @given(st.sampled_from(HOLLERITH_TABLE.characters))
    def test_table_is_bijective(self, char):
        assert decode(encode_char(char)) == char

    @given(OUTSIDE)
    def test_outside_repertoire_not_encoded(self, char):
        assert encode_char(char) is None

    @given(OUTSIDE, st.integers(min_value=0, max_value=79))
    def test_encode_text_rejects_outside_repertoire(self, char, position):
        text = "A" * position + char
        with pytest.raises(UnsupportedCharacterError) as excinfo:
            encode_text(text)
        assert excinfo.value.get_context("column") == position + 1

    @given(KEYPUNCH_TEXT)
    def test_decode_encode_is_uppercase(self, text):
        card = encode_text(text)
        assert decode_text(card) == text.upper().ljust(80)
        assert decode_text(card, trim=True) == text.upper().rstrip(" ")

    @given(st.text(alphabet="AB", min_size=81, max_size=120))
    def test_long_text_rejected(self, text):
        with pytest.raises(LengthExceededError):
            encode_text(text)

    @given(CODES)
    def test_bits_round_trip(self, code):
        assert HollerithCode.from_bits(code.to_bits()) == code
        assert HollerithCode.from_array(code.as_array()) == code


@pytest.mark.property
class TestPersistenceProperties:
    @given(KEYPUNCH_TEXT)
    def test_ebcdic_round_trip_keeps_printed_characters(self, text):
        card = encode_text(text)
        loaded = from_bytes(to_bytes(card))
        assert [col.printed or " " for col in card] == [col.printed for col in loaded]

    @given(st.binary(max_size=200).filter(lambda data: len(data) != 80))
    def test_from_bytes_length_checked(self, data):
        with pytest.raises(LengthMismatchError):
            from_bytes(data)

    @given(st.binary(min_size=80, max_size=80))
    def test_from_bytes_never_fails_on_80_bytes(self, data):
        card = from_bytes(data)
        assert card.card_type is CardType.TEXT
        assert len(decode_text(card)) == 80

    @given(st.lists(CODES, min_size=80, max_size=80))
    @settings(max_examples=50)
    def test_column_binary_round_trip(self, codes):
        card = PunchCard.from_columns([Column(code) for code in codes], CardType.BINARY)
        assert from_column_binary(to_column_binary(card)) == card


@pytest.mark.property
class TestPackingProperties:
    @given(WORDS)
    def test_pack_unpack_round_trip(self, words):
        bits = pack_4_3(words)
        assert len(bits) == len(words) // 3 * 48
        card = card_from_bits(bits)
        assert unpack_4_3(card, len(words) // 3 * 4) == words

    @given(WORDS)
    def test_packing_stays_in_data_region(self, words):
        card = card_from_bits(pack_4_3(words))
        assert all(col.is_blank for col in card.columns[72:])

    @given(WORDS.filter(lambda words: not words or words[-1] & 0x0FFF))
    def test_unpack_default_reads_back_packed_words(self, words):
        # the last packed column holds the low 12 bits of the final word
        assert unpack_4_3(encode_words(words)) == words
