import pytest

from bitops import BitWriter, BitReader, BitSequence


def test_bitwriter_write_bits_msb_first():
    bw = BitWriter()
    bw.write_bits(0b1010, 4)
    bw.write_bits(0b11110000, 8)
    seq = bw.to_sequence()
    assert len(seq) == 12
    assert seq.to_bin() == "101011110000"
    assert seq.to_bytes() == bytes([0b10101111, 0b00000000])


def test_write_bits_ignores_high_bits_of_value():
    bw = BitWriter()
    bw.write_bits(0xFF5, 4)
    assert bw.to_sequence().to_bin() == "0101"


def test_write_zero_bits_is_noop():
    bw = BitWriter()
    bw.write_bits(0xAA, 8)
    bw.write_bits(0xFFFF, 0)
    assert len(bw) == 8
    assert bw.to_sequence().to_bytes() == bytes([0xAA])


def test_write_negative_width_raises():
    bw = BitWriter()
    with pytest.raises(ValueError):
        bw.write_bits(1, -1)


def test_write_bytes_does_not_realign():
    bw = BitWriter()
    bw.write_bits(0b0100, 4)
    bw.write_bytes(b"A")
    assert len(bw) == 12
    assert bw.to_sequence().to_bin() == "0100" + "01000001"


def test_write_sequence_appends_partial_byte():
    inner = BitWriter()
    inner.write_bits(0b101, 3)
    bw = BitWriter()
    bw.write_bits(0b1, 1)
    bw.write_sequence(inner.to_sequence())
    assert bw.to_sequence().to_bin() == "1101"


def test_to_sequence_leaves_writer_usable():
    bw = BitWriter()
    bw.write_bits(0b1, 1)
    first = bw.to_sequence()
    bw.write_bits(0b0, 1)
    assert len(first) == 1
    assert len(bw.to_sequence()) == 2


def test_bitsequence_indexing_and_iteration():
    seq = BitSequence(bytes([0b10000001]), 8)
    assert seq[0] is True
    assert seq[1] is False
    assert seq[-1] is True
    assert list(seq) == [True] + [False] * 6 + [True]
    with pytest.raises(IndexError):
        _ = seq[8]


def test_bitsequence_masks_unused_tail_bits():
    seq = BitSequence(b"\xFF", 3)
    assert seq.to_bytes() == b"\xE0"
    assert seq == BitSequence(b"\xE0", 3)
    assert not seq.is_byte_aligned()


def test_bitsequence_rejects_mismatched_length():
    with pytest.raises(ValueError):
        BitSequence(b"\x00\x00", 3)


def test_bitreader_read_bits_and_bytes_alignment():
    data = bytes([0b11001010, 0xFF, 0x00])
    br = BitReader(data)
    first3 = br.read_bits(3)
    assert first3 == 0b110
    next5 = br.read_bits(5)
    assert next5 == 0b01010
    b = br.read_bytes(2)
    assert b == bytes([0xFF, 0x00])
    assert br.bits_consumed == 24


def test_bitreader_read_bytes_unaligned():
    br = BitReader(bytes([0x44, 0x10]))
    assert br.read_bits(4) == 0b0100
    assert br.read_bytes(1) == b"A"
    assert br.bits_consumed == 12


def test_bitreader_eoferror_on_insufficient_data():
    br = BitReader(b"\xF0")
    with pytest.raises(EOFError):
        _ = br.read_bits(9)
    with pytest.raises(EOFError):
        _ = BitReader(b"\x00").read_bytes(2)
