class HuffmanError(Exception):
    """Base class for all errors raised by the Huffman coders."""


class UnknownSymbolError(HuffmanError, KeyError):
    """Raised when encoding a symbol that has no code in the bound table.

    :ivar symbol: The symbol that could not be encoded.
    """

    def __init__(self, symbol, message=None):
        self.symbol = symbol
        super().__init__(message or f"Symbol has no code: {symbol!r}")

    def __str__(self):
        # KeyError would repr() the message otherwise
        return str(self.args[0])


class EmptyAlphabetError(UnknownSymbolError):
    """Raised when encoding against a table built from empty input."""

    def __init__(self, symbol):
        super().__init__(
            symbol, f"Code table is empty, cannot encode {symbol!r}"
        )


class MalformedBitstreamError(HuffmanError, ValueError):
    """Raised when a bit sequence does not decode to whole codewords.

    :ivar position: Index of the offending bit (or the input length when
        the input ends inside a codeword).
    """

    def __init__(self, message, position=None):
        self.position = position
        if position is not None:
            message = f"{message} (at bit {position})"
        super().__init__(message)


class SinkError(HuffmanError, IOError):
    """Raised when the output sink fails to accept or flush bits."""


class SourceError(HuffmanError, IOError):
    """Raised when the input bit source fails while being read."""
