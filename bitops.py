import abc
from typing import BinaryIO, Iterable, Iterator, List


def is_bit(value) -> bool:
    """Return ``True`` only for the ints ``0`` and ``1`` (not bools or floats)."""
    return type(value) is int and value in (0, 1)


def _check_bit(bit) -> int:
    if not is_bit(bit):
        raise ValueError(f"Got unexpected bit: {bit!r}")
    return bit


class BitWriter:
    """Bit-packing writer.

    Accumulates individual bits into bytes, MSB first, and buffers them
    until taken or flushed.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    """

    def __init__(self):
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0

    def write_bit(self, bit: int):
        """Append a single bit.

        :param int bit: ``0`` or ``1``.
        :raises ValueError: If ``bit`` is not ``0`` or ``1``.
        """
        self.bit_buffer = (self.bit_buffer << 1) | _check_bit(bit)
        self.bit_count += 1
        if self.bit_count == 8:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def take(self) -> bytes:
        """Remove and return the complete bytes written so far.

        Pending bits of an unfinished byte stay in ``bit_buffer``.

        :rtype: bytes
        """
        data = bytes(self.buffer)
        self.buffer.clear()
        return data

    def flush(self) -> bytes:
        """Flush remaining bits (if any) and return the full byte buffer.

        Any partial byte in ``bit_buffer`` is padded with zeros to complete
        the byte before being appended.

        :returns: The accumulated bytes not yet taken.
        :rtype: bytes
        """
        if self.bit_count > 0:
            self.bit_buffer <<= (8 - self.bit_count)
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0
        return self.take()


class BitReader:
    """Reads bits MSB first from a bytes-like object.

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar pos: Current position in ``data`` (byte index).
    :type pos: int
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    """

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0

    def read_bit(self) -> int:
        """Read the next bit.

        :raises EOFError: If the data is exhausted.
        """
        if self.bit_count == 0:
            if self.pos >= len(self.data):
                raise EOFError("Unexpected end of data")
            self.bit_buffer = self.data[self.pos]
            self.pos += 1
            self.bit_count = 8
        self.bit_count -= 1
        return (self.bit_buffer >> self.bit_count) & 1

    def iter_bits(self, nbits: int) -> Iterator[int]:
        """Yield the next ``nbits`` bits one at a time.

        :raises EOFError: Lazily, when the data holds fewer than ``nbits``.
        """
        for _ in range(nbits):
            yield self.read_bit()


class BitSink(abc.ABC):
    """Output sink accepting code bits.

    Subclasses implement :meth:`write_bits` and :meth:`flush`; either may
    raise :class:`OSError`, which coders report as a sink failure.
    """

    @abc.abstractmethod
    def write_bits(self, bits: Iterable[int]):
        """Accept ``bits`` in order."""

    @abc.abstractmethod
    def flush(self):
        """Push any buffered bits to the destination."""


class BitListSink(BitSink):
    """Collects every written bit as one element of :attr:`bits`."""

    def __init__(self):
        self.bits: List[int] = []

    def write_bits(self, bits: Iterable[int]):
        self.bits.extend(_check_bit(bit) for bit in bits)

    def flush(self):
        pass


class StreamBitSink(BitSink):
    """Writes bits to a binary stream.

    With ``packed`` set (the default) eight bits go into each byte, MSB
    first, and :meth:`flush` pads the last byte with zeros; since padding is
    indistinguishable from data the reader needs :attr:`bit_count`.
    Otherwise every bit is written as its own ``0x00``/``0x01`` byte.

    :ivar out: Destination stream with ``write`` and optionally ``flush``.
    :type out: BinaryIO
    :ivar packed: Whether bits are packed eight per byte.
    :type packed: bool
    :ivar bit_count: Number of bits written so far.
    :type bit_count: int
    """

    def __init__(self, out: BinaryIO, packed: bool = True):
        self.out = out
        self.packed = packed
        self.bit_count = 0
        self._writer = BitWriter()

    def write_bits(self, bits: Iterable[int]):
        if self.packed:
            for bit in bits:
                self._writer.write_bit(bit)
                self.bit_count += 1
            data = self._writer.take()
        else:
            data = bytes(_check_bit(bit) for bit in bits)
            self.bit_count += len(data)
        if data:
            self.out.write(data)

    def flush(self):
        if self.packed:
            data = self._writer.flush()
            if data:
                self.out.write(data)
        if hasattr(self.out, "flush"):
            self.out.flush()


def pack_bits(bits: Iterable[int]) -> bytes:
    """Pack ``bits`` eight per byte, MSB first, zero padded.

    :param bits: Sequence of ``0``/``1`` ints.
    :type bits: Iterable[int]
    :rtype: bytes
    """
    writer = BitWriter()
    for bit in bits:
        writer.write_bit(bit)
    return writer.flush()


def unpack_bits(data: bytes, nbits: int) -> List[int]:
    """Unpack the first ``nbits`` bits of ``data``.

    :param data: Packed bytes as produced by :func:`pack_bits`.
    :type data: bytes
    :param nbits: Number of meaningful bits (excludes padding).
    :type nbits: int
    :rtype: List[int]
    :raises EOFError: If ``data`` holds fewer than ``nbits`` bits.
    """
    return list(BitReader(data).iter_bits(nbits))
