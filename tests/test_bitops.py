import io

import pytest

from bitops import (
    BitListSink,
    BitReader,
    BitSink,
    BitWriter,
    StreamBitSink,
    is_bit,
    pack_bits,
    unpack_bits,
)


def _write(bw, bits):
    for bit in bits:
        bw.write_bit(bit)


def test_bitwriter_write_bit_and_flush_basic():
    bw = BitWriter()
    _write(bw, [1, 0, 1, 0])
    _write(bw, [1, 1, 1, 1, 0, 0, 0, 0])
    out = bw.flush()
    assert isinstance(out, (bytes, bytearray))
    assert len(out) == 2
    assert out[0] == 0b10101111
    assert out[1] == 0b00000000


def test_bitwriter_take_keeps_pending_bits():
    bw = BitWriter()
    _write(bw, [1, 0, 1, 1, 0, 0, 1, 1, 1])
    assert bw.take() == bytes([0b10110011])
    assert bw.bit_count == 1
    assert bw.flush() == bytes([0b10000000])


@pytest.mark.parametrize("bad", [2, -1, True, 1.0, "1"])
def test_bitwriter_rejects_non_bits(bad):
    bw = BitWriter()
    with pytest.raises(ValueError):
        bw.write_bit(bad)


def test_is_bit():
    assert is_bit(0) and is_bit(1)
    assert not any(is_bit(v) for v in (2, True, False, 1.0, 0.0, "0", None))


def test_bitreader_iter_bits():
    data = bytes([0b11001010, 0xFF])
    br = BitReader(data)
    assert list(br.iter_bits(3)) == [1, 1, 0]
    assert list(br.iter_bits(5)) == [0, 1, 0, 1, 0]
    assert br.read_bit() == 1
    assert br.pos == 2


def test_bitreader_eoferror_on_insufficient_bits():
    br = BitReader(b"\xF0")
    with pytest.raises(EOFError):
        _ = list(br.iter_bits(9))


def test_flush_without_pending_bits_adds_no_padding():
    bw = BitWriter()
    _write(bw, [1, 0, 1, 0, 1, 0, 1, 0])
    out = bw.flush()
    assert out == bytes([0xAA])
    assert bw.flush() == b""


def test_bit_sink_is_abstract():
    with pytest.raises(TypeError):
        BitSink()


def test_pack_and_unpack_bits():
    bits = [1, 0, 1, 1, 0, 0, 1, 0, 1, 1]
    data = pack_bits(bits)
    assert data == bytes([0b10110010, 0b11000000])
    assert unpack_bits(data, len(bits)) == bits
    with pytest.raises(EOFError):
        unpack_bits(data, 17)


def test_bit_list_sink_collects_bits():
    sink = BitListSink()
    sink.write_bits((1, 0))
    sink.write_bits([1])
    sink.flush()
    assert sink.bits == [1, 0, 1]
    with pytest.raises(ValueError):
        sink.write_bits([3])


def test_stream_sink_packed():
    out = io.BytesIO()
    sink = StreamBitSink(out)
    sink.write_bits((1, 1, 0))
    sink.write_bits((1, 0, 1, 0, 1, 1))
    assert out.getvalue() == bytes([0b11010101])
    sink.flush()
    assert out.getvalue() == bytes([0b11010101, 0b10000000])
    assert sink.bit_count == 9


def test_stream_sink_unpacked_writes_byte_per_bit():
    out = io.BytesIO()
    sink = StreamBitSink(out, packed=False)
    sink.write_bits((1, 0, 1))
    sink.flush()
    assert out.getvalue() == b"\x01\x00\x01"
    assert sink.bit_count == 3
