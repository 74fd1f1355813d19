import pytest

from bitops import BitReader
from modes import (
    ByteCodec,
    Mode,
    UnsupportedModeError,
    classify,
    default_codecs,
    get_codec,
)


def test_indicator_bits_are_four_bit_constants():
    assert Mode.BYTE.indicator_bits() == (0b0100, 4)
    assert Mode.NUMERIC.indicator_bits() == (0b0001, 4)
    assert Mode.ALPHANUMERIC.indicator_bits() == (0b0010, 4)
    assert Mode.KANJI.indicator_bits() == (0b1000, 4)
    assert ByteCodec().indicator_bits() == (0b0100, 4)


def test_classify_defaults_to_byte():
    assert classify("HELLO 123") == Mode.BYTE
    assert classify("0123") == Mode.BYTE
    assert classify(b"\x00\xff") == Mode.BYTE
    assert classify("") == Mode.BYTE


def test_classify_without_capable_codec_raises():
    codecs = {Mode.BYTE: ByteCodec("iso-8859-1")}
    with pytest.raises(UnsupportedModeError):
        classify("€", codecs)


def test_get_codec_unknown_mode_raises():
    with pytest.raises(UnsupportedModeError):
        get_codec(Mode.KANJI, default_codecs())


def test_default_codecs_returns_fresh_table():
    first = default_codecs()
    first.pop(Mode.BYTE)
    assert Mode.BYTE in default_codecs()


def test_byte_payload_is_raw_utf8():
    codec = ByteCodec()
    text = "hé"
    payload = codec.encode_payload(text)
    assert codec.char_count(text) == 3
    assert len(payload) == 24
    assert payload.to_bytes() == text.encode("utf-8")


def test_byte_payload_latin1_and_bytes_passthrough():
    codec = ByteCodec("iso-8859-1")
    assert codec.encode_payload("hé").to_bytes() == b"h\xe9"
    assert codec.char_count("hé") == 2
    assert codec.encode_payload(b"\x01\x02").to_bytes() == b"\x01\x02"
    assert not codec.can_encode("€")


def test_byte_decode_payload_reads_count_bytes():
    reader = BitReader(b"abc")
    assert ByteCodec().decode_payload(reader, 2) == b"ab"
