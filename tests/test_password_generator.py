# Tests for packing, cutting and entry creation

import string

import pytest

from chaos.utils.Entry import Entry, FormatChoice, bytes_to_b64
from chaos.utils.errors import Base64DecodeFailure, MalformedStoreDocument, UnknownFormat
from chaos.utils.password_generator import (
    cut,
    derive_password,
    generate_meat,
    generate_salt,
    new_entry,
    pack,
)

RAW = bytes([1, 1, 88, 240, 120, 150, 13, 21, 34, 55])


# ── pack / cut ────────────────────────────────────────────────────────


@pytest.mark.parametrize("format, length, expected", [
    (5, 8, "11000011"),
    (5, 6, "110000"),
    (4, 8, "11800031"),
    (4, 6, "118000"),
    (3, 8, "bbKGqUnv"),
    (3, 6, "bbKGqU"),
    (2, 8, "bbA26Anv"),
    (2, 6, "bbA26A"),
    (1, 8, "\"\"yU;Y.6"),
    (1, 6, "\"\"yU;Y"),
])
def test_cut_vectors(format, length, expected):
    assert cut(RAW, format, length) == expected


def test_cut_accepts_format_choice():
    assert cut(RAW, FormatChoice.BINARY, 8) == "11000011"


def test_pack_one_char_per_byte():
    for format in FormatChoice:
        assert len(pack(RAW, format)) == len(RAW)


def test_pack_uses_modulo():
    # 255 % 10 == 5, 255 % 94 == 67 -> chr(0x21 + 67) == "d"
    assert pack(bytes([255]), FormatChoice.NUMERIC_ONLY) == "5"
    assert pack(bytes([255]), FormatChoice.SYMBOL_RICH) == "d"


def test_pack_stays_in_alphabet():
    raw = bytes(range(256))
    assert set(pack(raw, 2)) == set(string.ascii_letters + string.digits)
    assert set(pack(raw, 3)) == set(string.ascii_letters)
    assert set(pack(raw, 4)) == set(string.digits)
    assert set(pack(raw, 5)) == {"0", "1"}
    assert len(set(pack(raw, 1))) == 94


@pytest.mark.parametrize("format", [0, 6, -1, 255])
def test_pack_unknown_format(format):
    with pytest.raises(UnknownFormat):
        pack(RAW, format)


def test_cut_longer_than_stream_returns_everything():
    assert cut(RAW, 4, 50) == pack(RAW, 4)


def test_cut_zero_length():
    assert cut(RAW, 4, 0) == ""


def test_cut_negative_length():
    with pytest.raises(ValueError):
        cut(RAW, 4, -1)


# ── salt / meat ───────────────────────────────────────────────────────


def test_generate_salt():
    salt1 = generate_salt()
    salt2 = generate_salt()
    assert len(salt1) == 24
    assert salt1 != salt2


@pytest.mark.parametrize("length", [0, 1, 8, 100])
def test_generate_meat_length(length):
    assert len(generate_meat(length)) == length


def test_generate_meat_random():
    assert generate_meat(8) != generate_meat(8)


def test_generate_meat_negative():
    with pytest.raises(ValueError):
        generate_meat(-1)


def test_random_source_is_injectable(counting_rng):
    assert generate_salt(counting_rng) == bytes(range(24))
    assert generate_meat(3, counting_rng) == bytes([1, 2, 3])


# ── new_entry ─────────────────────────────────────────────────────────


class TestNewEntry:

    def test_fields(self, counting_rng):
        entry = new_entry(2, 16, "work account", rng=counting_rng)

        assert entry.salt_bytes() == bytes(range(24))
        assert entry.meat_bytes() == bytes(range(1, 17))
        assert entry.text == "work account"
        assert entry.format is FormatChoice.ALPHA_NUMERIC
        assert entry.length == 16

    def test_defaults(self):
        entry = new_entry()
        assert entry.format is FormatChoice.SYMBOL_RICH
        assert entry.length == 20
        assert entry.text == ""

    def test_fresh_salt_each_time(self):
        assert new_entry().salt != new_entry().salt

    @pytest.mark.parametrize("length", [0, -3, 1025])
    def test_length_out_of_range(self, length):
        with pytest.raises(ValueError):
            new_entry(1, length)

    def test_unknown_format(self):
        with pytest.raises(UnknownFormat):
            new_entry(9, 10)


# ── derive_password ───────────────────────────────────────────────────


class TestDerivePassword:

    def test_deterministic(self, key):
        entry = new_entry(2, 16)
        password = derive_password(key, entry)

        assert derive_password(key, entry) == password
        assert len(password) == 16
        assert password.isalnum() and password.isascii()

    @pytest.mark.parametrize("format", list(FormatChoice))
    def test_alphabet(self, key, format):
        password = derive_password(key, new_entry(format, 64))
        assert set(password) <= set(format.alphabet)

    def test_key_changes_password(self, key):
        entry = new_entry(1, 32)
        other = bytes(reversed(key))
        assert derive_password(key, entry) != derive_password(other, entry)

    def test_text_does_not_change_password(self, key):
        entry = new_entry(1, 32)
        annotated = Entry(entry.salt, entry.meat, "new note", entry.format)
        assert derive_password(key, entry) == derive_password(key, annotated)

    def test_bad_salt(self, key):
        entry = Entry(salt="%%%", meat=bytes_to_b64(bytes(8)))
        with pytest.raises(Base64DecodeFailure):
            derive_password(key, entry)

    def test_bad_meat(self, key):
        entry = Entry(salt=bytes_to_b64(bytes(24)), meat="not*base64")
        with pytest.raises(Base64DecodeFailure):
            derive_password(key, entry)

    def test_empty_meat(self, key):
        entry = Entry(salt=bytes_to_b64(bytes(24)), meat="")
        with pytest.raises(MalformedStoreDocument):
            derive_password(key, entry)
