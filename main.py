import argparse
import io
import logging
import sys

from typing import List, Optional
from bitops import StreamBitSink
from coder import CANONICAL, CLASSICAL, MODES, get_coder
from huffman import HuffmanTree, build_tree

BOTH = "both"  #: ``codes`` shows classical and canonical side by side


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Huffman prefix codes for the bytes of a file"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    codes = subparsers.add_parser(
        "codes", aliases=["c"], help="Print the code table of a file"
    )
    codes.add_argument("file", help="File whose bytes are counted")
    codes.add_argument(
        "-m",
        "--mode",
        choices=MODES + (BOTH,),
        default=BOTH,
        help="Which code to print (default: both)",
    )

    roundtrip = subparsers.add_parser(
        "roundtrip",
        aliases=["r"],
        help="Encode a file, decode it back and verify the result",
    )
    roundtrip.add_argument("file", help="File to encode")
    roundtrip.add_argument(
        "-m",
        "--mode",
        choices=MODES,
        default=CANONICAL,
        help="Code used for encoding and decoding (default: canonical)",
    )
    roundtrip.add_argument(
        "-U",
        "--unpacked",
        action="store_true",
        help="Write one byte per bit instead of packing eight bits per byte",
    )

    return parser


def _read_file(path: str) -> Optional[bytes]:
    """Read ``path`` fully, reporting a missing file to the user.

    :param path: File to read.
    :type path: str
    :returns: File contents, or ``None`` if the file does not exist.
    :rtype: bytes | None
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        print(f"[!] File not found: {path}")
        return None


def _fmt_symbol(symbol: int) -> str:
    """Format a byte value for the code table.

    :param symbol: Byte value (0-255).
    :type symbol: int
    :returns: Printable character in quotes, or hex for other bytes.
    :rtype: str
    """
    ch = chr(symbol)
    if ch.isprintable() and not ch.isspace():
        return f"'{ch}'"
    return f"0x{symbol:02x}"


def _fmt_bits(bits) -> str:
    return "".join(str(bit) for bit in bits)


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


def format_code_table(tree: HuffmanTree, mode: str = BOTH) -> List[str]:
    """Render one line per symbol with its count and code(s).

    :param tree: Tree whose codes are shown.
    :type tree: HuffmanTree
    :param mode: ``classical``, ``canonical`` or ``both``.
    :type mode: str
    :returns: Table lines in canonical order (length, then symbol).
    :rtype: List[str]
    """
    header = ["symbol", "count", "len"]
    if mode in (CLASSICAL, BOTH):
        header.append("classical")
    if mode in (CANONICAL, BOTH):
        header.append("canonical")
    lines = ["\t".join(header)]
    for symbol, length in tree.lengths():
        row = [_fmt_symbol(symbol), str(tree.frequencies[symbol]), str(length)]
        if mode in (CLASSICAL, BOTH):
            row.append(_fmt_bits(tree.classical_codes[symbol]))
        if mode in (CANONICAL, BOTH):
            row.append(_fmt_bits(tree.canonical_codes[symbol]))
        lines.append("\t".join(row))
    return lines


def show_codes(path: str, mode: str = BOTH) -> int:
    """Print the code table for the bytes of ``path``.

    :param path: Input file.
    :type path: str
    :param mode: Which code(s) to print.
    :type mode: str
    :returns: Process exit status.
    :rtype: int
    """
    data = _read_file(path)
    if data is None:
        return 1
    tree = build_tree(data)
    for line in format_code_table(tree, mode):
        print(line)
    print(f"Distinct symbols: {len(tree.frequencies)}")
    print(f"Weighted length: {tree.weighted_length()} bits")
    return 0


def roundtrip_file(path: str, mode: str = CANONICAL,
                   packed: bool = True) -> int:
    """Encode the bytes of ``path``, decode them and compare.

    :param path: Input file.
    :type path: str
    :param mode: ``classical`` or ``canonical``.
    :type mode: str
    :param packed: Pack eight bits per byte instead of one bit per byte.
    :type packed: bool
    :returns: ``0`` on success, ``1`` if the file is missing, ``2`` if the
        decoded data differs from the input.
    :rtype: int
    """
    data = _read_file(path)
    if data is None:
        return 1
    tree = build_tree(data)
    coder = get_coder(tree, mode)

    out = io.BytesIO()
    sink = StreamBitSink(out, packed=packed)
    coder.encode(data, sink)
    encoded = out.getvalue()

    if packed:
        decoded = coder.decode_bytes(encoded, sink.bit_count)
    else:
        decoded = coder.decode(encoded)

    print("Size before encoding: ", _fmt_bytes(len(data)))
    print("Size after encoding: ", _fmt_bytes(len(encoded)))
    if encoded:
        print(f"Compression ratio: {len(data) / len(encoded):.2f}")

    if bytes(decoded) != data:
        print("[!] Decoded data does not match the input")
        return 2
    print(f"Round trip OK ({sink.bit_count} bits, {mode})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse instead of ``sys.argv``.
    :type argv: List[str] | None
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd in ["codes", "c"]:
        return show_codes(args.file, args.mode)
    elif args.cmd in ["roundtrip", "r"]:
        return roundtrip_file(
            args.file, args.mode, not getattr(args, "unpacked", False)
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
