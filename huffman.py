import abc
import heapq
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from canonical import canonical_codes, sorted_lengths
from frequency import FrequencyTable

logger = logging.getLogger(__name__)

SINGLE_SYMBOL_CODE = (0,)  #: Code of the only symbol of a one-leaf tree


class HuffmanNode(abc.ABC):
    """Base node of a binary Huffman tree.

    Nodes are ordered for the priority queue by :meth:`rank`, a total order:
    frequency ascending, leaves before internal nodes, then symbol (leaves)
    or creation order (internal nodes).

    :ivar freq: Frequency (weight) of the subtree rooted at this node.
    :type freq: int
    """

    is_leaf = False

    def __init__(self, freq: int):
        self.freq = freq

    @abc.abstractmethod
    def rank(self) -> tuple:
        """Return the sort key placing this node in the priority queue."""

    def __lt__(self, other):
        """Order nodes by :meth:`rank` (for priority queues).

        :param other: Another node to compare with.
        :type other: HuffmanNode
        :rtype: bool
        """
        return self.rank() < other.rank()


class Leaf(HuffmanNode):
    """Leaf node holding one symbol of the alphabet.

    :ivar symbol: The symbol coded by the path to this leaf.
    """

    is_leaf = True

    def __init__(self, symbol, freq: int):
        super().__init__(freq)
        self.symbol = symbol

    def rank(self) -> tuple:
        return self.freq, 0, self.symbol

    def __repr__(self):
        return f"Leaf({self.symbol!r}, {self.freq})"


class Internal(HuffmanNode):
    """Internal node owning exactly two children.

    :ivar left: Child reached with bit ``0``.
    :type left: HuffmanNode
    :ivar right: Child reached with bit ``1``.
    :type right: HuffmanNode
    :ivar order: Creation sequence number within the merge loop.
    :type order: int
    """

    def __init__(self, left: HuffmanNode, right: HuffmanNode, order: int):
        super().__init__(left.freq + right.freq)
        self.left = left
        self.right = right
        self.order = order

    def rank(self) -> tuple:
        return self.freq, 1, self.order

    def __repr__(self):
        return f"Internal({self.left!r}, {self.right!r}, {self.freq})"


FrequencyInput = Union[FrequencyTable, Mapping[Any, int],
                       Iterable[Tuple[Any, int]]]


class HuffmanTree:
    """Huffman tree together with the classical and canonical code maps.

    The tree and both maps are read-only once built; coders borrow them.

    :ivar root: Root node, ``None`` when built from an empty alphabet.
    :type root: HuffmanNode | None
    :ivar frequencies: Frequencies the tree was built from.
    :type frequencies: FrequencyTable
    :ivar classical_codes: Symbol to tree-path bits (``0`` left, ``1`` right).
    :type classical_codes: Mapping[Any, Tuple[int, ...]]
    :ivar code_lengths: Symbol to code length in bits.
    :type code_lengths: Mapping[Any, int]
    :ivar canonical_codes: Symbol to canonical bits of the same length.
    :type canonical_codes: Mapping[Any, Tuple[int, ...]]
    """

    def __init__(self, root: Optional[HuffmanNode],
                 frequencies: FrequencyTable):
        """Wrap an already built ``root`` and derive its code maps.

        :param root: Root node or ``None`` for an empty alphabet.
        :type root: HuffmanNode | None
        :param frequencies: Frequencies the tree was built from.
        :type frequencies: FrequencyTable
        """
        self.root = root
        self.frequencies = frequencies
        classical = self._derive_codes(root)
        self.classical_codes = MappingProxyType(classical)
        self.code_lengths = MappingProxyType(
            {symbol: len(code) for symbol, code in classical.items()}
        )
        self.canonical_codes = MappingProxyType(
            canonical_codes(self.code_lengths)
        )

    @classmethod
    def build(cls, frequencies: FrequencyInput) -> "HuffmanTree":
        """Build a tree with the greedy two-minimum merge.

        :param frequencies: A :class:`FrequencyTable`, a mapping
            ``symbol -> count`` or ``(symbol, count)`` pairs.
        :type frequencies: FrequencyTable | Mapping[Any, int] |
            Iterable[Tuple[Any, int]]
        :returns: The finished tree.
        :rtype: HuffmanTree
        """
        if not isinstance(frequencies, FrequencyTable):
            if isinstance(frequencies, Mapping):
                frequencies = FrequencyTable.from_mapping(frequencies)
            else:
                frequencies = FrequencyTable(frequencies)

        if not len(frequencies):
            logger.warning("Building Huffman tree from an empty alphabet")
            return cls(None, frequencies)

        heap: List[HuffmanNode] = [
            Leaf(symbol, freq) for symbol, freq in frequencies
        ]
        heapq.heapify(heap)

        merges = 0
        while len(heap) > 1:
            left = heapq.heappop(heap)
            right = heapq.heappop(heap)
            heapq.heappush(heap, Internal(left, right, merges))
            merges += 1

        tree = cls(heap[0], frequencies)
        logger.debug(
            "Built Huffman tree: %d symbols, %d merges, weighted length %d",
            len(frequencies), merges, tree.weighted_length(),
        )
        return tree

    @staticmethod
    def _derive_codes(root: Optional[HuffmanNode]) -> Dict[Any, Tuple]:
        """Collect the path to every leaf, ``0`` left and ``1`` right.

        :param root: Root node or ``None``.
        :type root: HuffmanNode | None
        :returns: Mapping from symbol to its path bits.
        :rtype: Dict[Any, Tuple[int, ...]]
        """
        codes: Dict[Any, Tuple[int, ...]] = {}
        if root is None:
            return codes
        if root.is_leaf:
            codes[root.symbol] = SINGLE_SYMBOL_CODE
            return codes

        stack = [(root, ())]
        while stack:
            node, path = stack.pop()
            if node.is_leaf:
                codes[node.symbol] = path
            else:
                stack.append((node.right, path + (1,)))
                stack.append((node.left, path + (0,)))
        return codes

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def lengths(self) -> List[Tuple[Any, int]]:
        """Return ``(symbol, length)`` pairs in canonical order.

        This is all a canonical decoder needs to rebuild the code table.
        """
        return sorted_lengths(self.code_lengths)

    def weighted_length(self) -> int:
        """Sum of frequency times code length over all symbols.

        :returns: Number of bits needed to encode the counted input.
        :rtype: int
        """
        return sum(
            freq * self.code_lengths[symbol]
            for symbol, freq in self.frequencies
        )

    def __repr__(self):
        return f"HuffmanTree({self.root!r})"


def build_tree(symbols: Iterable[Any]) -> HuffmanTree:
    """Count ``symbols`` and build their Huffman tree.

    :param symbols: Input sequence of hashable, ordered symbols.
    :type symbols: Iterable[Any]
    :returns: Tree with classical and canonical code maps.
    :rtype: HuffmanTree
    """
    return HuffmanTree.build(FrequencyTable.count(symbols))
