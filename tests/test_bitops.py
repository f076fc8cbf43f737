import pytest

from bitops import BitWriter, BitReader, BitSequence


def test_bitwriter_write_bits_and_flush_basic():
    bw = BitWriter()
    bw.write_bits(0b1010, 4)
    bw.write_bits(0b11110000, 8)
    out = bw.flush()
    assert isinstance(out, (bytes, bytearray))
    assert len(out) == 2
    assert out[0] == 0b10101111
    assert out[1] == 0b00000000


def test_bitwriter_write_bytes_aligns():
    bw = BitWriter()
    bw.write_bits(0b1, 1)
    bw.write_bytes(b"AB")
    out = bw.flush()
    assert out[0] == 0b10000000
    assert out[1:] == b"AB"


def test_bitreader_read_bits_and_bytes_alignment():
    data = bytes([0b11001010, 0xFF, 0x00])
    br = BitReader(data)
    assert br.read_bits(3) == 0b110
    assert br.read_bits(5) == 0b01010
    assert br.read_bytes(2) == bytes([0xFF, 0x00])
    assert br.at_end()


def test_bitreader_eoferror_on_insufficient_data():
    br = BitReader(b"\xF0")
    with pytest.raises(EOFError):
        _ = br.read_bits(9)
    with pytest.raises(EOFError):
        _ = BitReader(b"ab").read_bytes(3)


def test_write_zero_bits_is_noop_and_flush_padding():
    bw = BitWriter()
    bw.write_bits(0xAA, 8)
    bw.write_bits(0, 0)
    assert bw.flush() == bytes([0xAA])


def test_bitsequence_append_and_index():
    seq = BitSequence()
    seq.append_bits("101")
    seq.append_bits("")
    seq.append_bits("11110000")
    assert len(seq) == 11
    assert list(seq) == [1, 0, 1, 1, 1, 1, 1, 0, 0, 0, 0]
    assert seq[0] == 1 and seq[1] == 0 and seq[6] == 1
    assert seq[-1] == 0
    with pytest.raises(IndexError):
        _ = seq[11]


def test_bitsequence_rejects_non_bit_characters_without_partial_append():
    seq = BitSequence()
    seq.append_bits("1")
    with pytest.raises(ValueError):
        seq.append_bits("102")
    assert len(seq) == 1


def test_bitsequence_packing_pads_with_zeros():
    seq = BitSequence()
    seq.append_bits("10111110" + "000")
    assert seq.to_bytes() == bytes([0xBE, 0x00])

    restored = BitSequence.from_bytes(bytes([0xBE, 0x00]), 11)
    assert restored == seq
    assert len(restored) == 11


def test_bitsequence_from_bytes_validates_size_and_padding():
    with pytest.raises(ValueError):
        BitSequence.from_bytes(bytes([0xBE]), 11)
    with pytest.raises(ValueError):
        BitSequence.from_bytes(bytes([0xBE, 0x00, 0x00]), 11)
    with pytest.raises(ValueError):
        BitSequence.from_bytes(bytes([0xBE, 0x01]), 11)
    assert len(BitSequence.from_bytes(b"", 0)) == 0


def test_bitsequence_equality_depends_on_length():
    a = BitSequence()
    a.append_bits("1")
    b = BitSequence()
    b.append_bits("10")
    assert a != b
    a.append_bits("0")
    assert a == b
