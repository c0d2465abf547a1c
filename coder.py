import abc
import logging
from types import MappingProxyType
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

from bitops import BitListSink, BitReader, BitSink, is_bit
from canonical import Lengths, canonical_codes, decode_table, sorted_lengths
from errors import (
    EmptyAlphabetError,
    MalformedBitstreamError,
    SinkError,
    SourceError,
    UnknownSymbolError,
)
from huffman import SINGLE_SYMBOL_CODE, HuffmanTree

logger = logging.getLogger(__name__)

CLASSICAL = "classical"  #: Decode by walking the Huffman tree
CANONICAL = "canonical"  #: Decode from the canonical length table
MODES = (CLASSICAL, CANONICAL)

_MISSING = object()


class Coder(abc.ABC):
    """Encoder/decoder bound to one code table.

    The table is shared and never modified; all per-call state (tree cursor,
    bit buffer) lives inside :meth:`encode` and :meth:`decode`, so one tree
    can back any number of coders.

    :ivar codes: Mapping from symbol to its code bits.
    :type codes: Mapping[Any, Tuple[int, ...]]
    """

    mode: str = ""

    def __init__(self, codes: Mapping[Any, Tuple[int, ...]]):
        self.codes = codes

    def encode(self, symbols: Iterable[Any],
               sink: Optional[BitSink] = None) -> Optional[List[int]]:
        """Write the code of every symbol to ``sink`` and flush it.

        Bits written for earlier symbols stay in the sink when a later
        symbol fails; callers that need all-or-nothing output must buffer.

        :param symbols: Symbols to encode.
        :type symbols: Iterable[Any]
        :param sink: Destination for the bits. When omitted the bits are
            collected in memory and returned.
        :type sink: BitSink | None
        :returns: The encoded bits if no ``sink`` was given, else ``None``.
        :rtype: List[int] | None
        :raises EmptyAlphabetError: If the table has no codes at all.
        :raises UnknownSymbolError: If a symbol has no code in the table.
        :raises SinkError: If the sink fails to write or flush.
        """
        collect = sink is None
        if collect:
            sink = BitListSink()

        encoded = 0
        for symbol in symbols:
            code = self._lookup(symbol)
            try:
                sink.write_bits(code)
            except OSError as e:
                raise SinkError(
                    f"Sink failed after {encoded} symbols: {e}"
                ) from e
            encoded += 1

        try:
            sink.flush()
        except OSError as e:
            raise SinkError(f"Sink failed to flush: {e}") from e

        logger.debug("Encoded %d symbols (%s)", encoded, self.mode)
        return sink.bits if collect else None

    def _lookup(self, symbol) -> Tuple[int, ...]:
        try:
            return self.codes[symbol]
        except (KeyError, TypeError):
            if not self.codes:
                raise EmptyAlphabetError(symbol) from None
            raise UnknownSymbolError(symbol) from None

    def decode(self, bits: Iterable[int]) -> List[Any]:
        """Decode a sequence of bits back into symbols.

        :param bits: ``0``/``1`` values, e.g. the output of :meth:`encode`.
        :type bits: Iterable[int]
        :returns: Decoded symbols.
        :rtype: List[Any]
        :raises MalformedBitstreamError: If the bits do not form whole
            codewords of this table.
        :raises SourceError: If reading ``bits`` fails.
        """
        symbols = self._decode(self._read(bits))
        logger.debug("Decoded %d symbols (%s)", len(symbols), self.mode)
        return symbols

    def decode_bytes(self, data: bytes, nbits: int) -> List[Any]:
        """Decode the first ``nbits`` bits of packed ``data``.

        :param data: Bytes written by a packed :class:`~bitops.StreamBitSink`.
        :type data: bytes
        :param nbits: Number of encoded bits, excluding padding.
        :type nbits: int
        :rtype: List[Any]
        :raises SourceError: If ``data`` is shorter than ``nbits`` bits.
        """
        return self.decode(BitReader(data).iter_bits(nbits))

    @staticmethod
    def _read(bits: Iterable[int]) -> Iterator[int]:
        iterator = iter(bits)
        position = 0
        while True:
            try:
                bit = next(iterator)
            except StopIteration:
                return
            except (OSError, EOFError) as e:
                raise SourceError(f"Bit source failed: {e}") from e
            if not is_bit(bit):
                raise MalformedBitstreamError(f"Not a bit: {bit!r}", position)
            position += 1
            yield bit

    @abc.abstractmethod
    def _decode(self, bits: Iterator[int]) -> List[Any]:
        """Decode validated bits; implemented per table representation."""


class ClassicalCoder(Coder):
    """Coder for the classical code, decoding by walking the tree.

    :ivar tree: The Huffman tree whose leaf paths are the codes.
    :type tree: HuffmanTree
    """

    mode = CLASSICAL

    def __init__(self, tree: HuffmanTree):
        super().__init__(tree.classical_codes)
        self.tree = tree

    def _decode(self, bits: Iterator[int]) -> List[Any]:
        root = self.tree.root
        symbols = []
        node = root
        consumed = 0
        for bit in bits:
            if root is None:
                raise MalformedBitstreamError(
                    "Code table is empty", consumed
                )
            if node.is_leaf:
                # One-leaf tree: the only codeword is SINGLE_SYMBOL_CODE
                if (bit,) != SINGLE_SYMBOL_CODE:
                    raise MalformedBitstreamError(
                        "Invalid code for single-symbol table", consumed
                    )
                symbols.append(node.symbol)
            else:
                node = node.right if bit else node.left
                if node.is_leaf:
                    symbols.append(node.symbol)
                    node = root
            consumed += 1

        if node is not root:
            raise MalformedBitstreamError(
                "Bit stream ends inside a codeword", consumed
            )
        return symbols


class CanonicalCoder(Coder):
    """Coder for the canonical code, needing only the length table.

    :ivar lengths: ``(symbol, length)`` pairs in canonical order.
    :type lengths: List[Tuple[Any, int]]
    :ivar max_length: Longest code length, ``0`` for an empty table.
    :type max_length: int
    """

    mode = CANONICAL

    def __init__(self, lengths: Lengths):
        """Rebuild the canonical code from code lengths.

        :param lengths: Mapping ``symbol -> length`` or pairs.
        :type lengths: Mapping[Any, int] | Iterable[Tuple[Any, int]]
        :raises ValueError: If the lengths cannot form a prefix-free code.
        """
        self.lengths = sorted_lengths(lengths)
        super().__init__(MappingProxyType(canonical_codes(self.lengths)))
        self._table = decode_table(self.lengths)
        self.max_length = self.lengths[-1][1] if self.lengths else 0

    @classmethod
    def from_tree(cls, tree: HuffmanTree) -> "CanonicalCoder":
        return cls(tree.lengths())

    def _decode(self, bits: Iterator[int]) -> List[Any]:
        symbols = []
        code = 0
        length = 0
        consumed = 0
        for bit in bits:
            code = (code << 1) | bit
            length += 1
            consumed += 1
            symbol = self._table.get((length, code), _MISSING)
            if symbol is not _MISSING:
                symbols.append(symbol)
                code = 0
                length = 0
            elif length >= self.max_length:
                raise MalformedBitstreamError(
                    "No canonical code matches", consumed - 1
                )

        if length:
            raise MalformedBitstreamError(
                "Bit stream ends inside a codeword", consumed
            )
        return symbols


def get_coder(tree: HuffmanTree, mode: str = CANONICAL) -> Coder:
    """Return a coder for ``tree`` in the requested ``mode``.

    :param tree: Tree to take the code table from.
    :type tree: HuffmanTree
    :param mode: :data:`CLASSICAL` or :data:`CANONICAL`.
    :type mode: str
    :rtype: Coder
    :raises ValueError: If ``mode`` is unknown.
    """
    if mode == CLASSICAL:
        return ClassicalCoder(tree)
    elif mode == CANONICAL:
        return CanonicalCoder.from_tree(tree)
    else:
        raise ValueError(f"Unknown coder mode: {mode!r}")


def decode_classical(tree: HuffmanTree, bits: Iterable[int]) -> List[Any]:
    """Decode ``bits`` by walking ``tree``."""
    return ClassicalCoder(tree).decode(bits)


def decode_canonical(lengths: Lengths, bits: Iterable[int]) -> List[Any]:
    """Decode ``bits`` using only the canonical length table."""
    return CanonicalCoder(lengths).decode(bits)
