import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

logger = logging.getLogger(__name__)

Lengths = Union[Mapping[Any, int], Iterable[Tuple[Any, int]]]


def int_to_bits(value: int, length: int) -> Tuple[int, ...]:
    """Render the lowest ``length`` bits of ``value``, MSB first.

    :param int value: Code value.
    :param int length: Number of bits to render.
    :returns: Tuple of ``0``/``1`` ints.
    :rtype: Tuple[int, ...]
    """
    return tuple((value >> i) & 1 for i in range(length - 1, -1, -1))


def sorted_lengths(lengths: Lengths) -> List[Tuple[Any, int]]:
    """Validate a length table and return it in canonical order.

    Canonical order is ascending by code length, then ascending by symbol.

    :param lengths: Mapping ``symbol -> length`` or ``(symbol, length)``
        pairs.
    :type lengths: Mapping[Any, int] | Iterable[Tuple[Any, int]]
    :returns: ``(symbol, length)`` pairs in canonical order.
    :rtype: List[Tuple[Any, int]]
    :raises ValueError: If a length is not a positive integer or a symbol
        appears twice.
    """
    pairs = lengths.items() if isinstance(lengths, Mapping) else lengths
    seen = set()
    result = []
    for symbol, length in pairs:
        if type(length) is not int or length < 1:
            raise ValueError(
                f"Code length for {symbol!r} must be a positive integer, "
                f"got {length!r}"
            )
        if symbol in seen:
            raise ValueError(f"Duplicate symbol in length table: {symbol!r}")
        seen.add(symbol)
        result.append((symbol, length))
    result.sort(key=lambda pair: (pair[1], pair[0]))
    return result


def canonical_code_values(lengths: Lengths) -> Dict[Any, Tuple[int, int]]:
    """Assign canonical codes as ``symbol -> (code, length)`` integers.

    The running code starts at zero with the first (shortest) length, is
    shifted left whenever the length grows and incremented after every
    assignment.

    :param lengths: Code length per symbol.
    :type lengths: Mapping[Any, int] | Iterable[Tuple[Any, int]]
    :returns: Mapping from symbol to ``(code, length)``.
    :rtype: Dict[Any, Tuple[int, int]]
    :raises ValueError: If the lengths violate the Kraft inequality, i.e. a
        code would not fit in its length.
    """
    ordered = sorted_lengths(lengths)
    codes: Dict[Any, Tuple[int, int]] = {}
    if not ordered:
        return codes

    code = 0
    prev_length = ordered[0][1]
    for symbol, length in ordered:
        code <<= (length - prev_length)
        if code >> length:
            raise ValueError(
                f"Code lengths are oversubscribed: no {length}-bit code "
                f"left for {symbol!r}"
            )
        codes[symbol] = (code, length)
        code += 1
        prev_length = length

    logger.debug(
        "Assigned %d canonical codes, max length %d",
        len(codes), prev_length,
    )
    return codes


def canonical_codes(lengths: Lengths) -> Dict[Any, Tuple[int, ...]]:
    """Derive the canonical code of every symbol from its length alone.

    The result has the same length per symbol as ``lengths``; only the bit
    patterns depend on the ordering rule, so the table can be rebuilt from
    the lengths without the tree.

    :param lengths: Code length per symbol.
    :type lengths: Mapping[Any, int] | Iterable[Tuple[Any, int]]
    :returns: Mapping from symbol to its bit tuple.
    :rtype: Dict[Any, Tuple[int, ...]]
    """
    return {
        symbol: int_to_bits(code, length)
        for symbol, (code, length) in canonical_code_values(lengths).items()
    }


def decode_table(lengths: Lengths) -> Dict[Tuple[int, int], Any]:
    """Build the ``(length, code) -> symbol`` lookup used for decoding.

    :param lengths: Code length per symbol.
    :type lengths: Mapping[Any, int] | Iterable[Tuple[Any, int]]
    :returns: Mapping keyed by code length and code value.
    :rtype: Dict[Tuple[int, int], Any]
    """
    return {
        (length, code): symbol
        for symbol, (code, length) in canonical_code_values(lengths).items()
    }
