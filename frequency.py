from collections import Counter
from typing import Any, Dict, Iterable, Iterator, List, Tuple


class FrequencyTable:
    """Occurrence counts of the symbols of an input sequence.

    Entries are kept ascending by symbol so that every consumer (tree
    construction in particular) sees the same enumeration order.

    :ivar entries: ``(symbol, count)`` pairs sorted by symbol.
    :type entries: List[Tuple[Any, int]]
    """

    def __init__(self, entries: Iterable[Tuple[Any, int]] = ()):
        """Create a table from ``(symbol, count)`` pairs.

        :param entries: Pairs with unique symbols and positive counts.
        :type entries: Iterable[Tuple[Any, int]]
        :raises ValueError: If a count is not a positive integer or a
            symbol repeats.
        """
        counts: Dict[Any, int] = {}
        for symbol, count in entries:
            if type(count) is not int or count < 1:
                raise ValueError(
                    f"Count for {symbol!r} must be a positive integer, "
                    f"got {count!r}"
                )
            if symbol in counts:
                raise ValueError(f"Duplicate symbol: {symbol!r}")
            counts[symbol] = count
        self._counts = counts
        self.entries: List[Tuple[Any, int]] = sorted(counts.items())

    @classmethod
    def count(cls, symbols: Iterable[Any]) -> "FrequencyTable":
        """Count every symbol of ``symbols``.

        :param symbols: Input sequence; may be empty.
        :type symbols: Iterable[Any]
        :returns: Table ordered ascending by symbol.
        :rtype: FrequencyTable
        """
        return cls(Counter(symbols).items())

    @classmethod
    def from_mapping(cls, frequencies: Dict[Any, int]) -> "FrequencyTable":
        """Build a table from an existing ``symbol -> count`` mapping."""
        return cls(frequencies.items())

    @property
    def total(self) -> int:
        """Sum of all counts, i.e. the length of the counted input."""
        return sum(self._counts.values())

    def __getitem__(self, symbol) -> int:
        return self._counts[symbol]

    def __contains__(self, symbol) -> bool:
        return symbol in self._counts

    def __iter__(self) -> Iterator[Tuple[Any, int]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"FrequencyTable({self.entries!r})"


def count(symbols: Iterable[Any]) -> List[Tuple[Any, int]]:
    """Return ``(symbol, count)`` pairs for ``symbols``, ascending by symbol.

    :param symbols: Input sequence.
    :type symbols: Iterable[Any]
    :returns: Sorted frequency entries.
    :rtype: List[Tuple[Any, int]]
    """
    return list(FrequencyTable.count(symbols).entries)
