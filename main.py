import argparse
import sys

from typing import List, Optional

from framer import FrameEncoder
from modes import ByteCodec, Mode
from versions import ErrorCorrection, Version, MAX_VERSION, MIN_VERSION

OUTPUT_FORMATS = ("hex", "bin")  #: Accepted values of ``--format``


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Frame text into the data codewords of a QR symbol"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    encode = subparsers.add_parser(
        "encode", aliases=["e"], help="Encode text into padded data codewords"
    )
    encode.add_argument("text", help="Text to encode")
    _add_version_arguments(encode)
    encode.add_argument(
        "-m",
        "--mode",
        choices=[m.name.lower() for m in Mode],
        default=None,
        help="Encoding mode (default: narrowest mode that fits)",
    )
    encode.add_argument(
        "--encoding",
        default="utf-8",
        help="Text encoding used in byte mode (default: utf-8)",
    )
    encode.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        default="hex",
        help="Output format (default: hex)",
    )

    decode = subparsers.add_parser(
        "decode", aliases=["d"], help="Read the payload back from codewords"
    )
    decode.add_argument("codewords", help="Data codewords as hex")
    _add_version_arguments(decode)
    decode.add_argument(
        "--encoding",
        default="utf-8",
        help="Text encoding used to print byte-mode payloads",
    )

    capacity = subparsers.add_parser(
        "capacity", aliases=["c"], help="Show data capacity of a version"
    )
    _add_version_arguments(capacity)

    return parser


def _add_version_arguments(parser: argparse.ArgumentParser) -> None:
    """Attach ``--symbol-version`` and ``--error-correction`` to a subcommand.

    :param parser: Subcommand parser.
    :type parser: argparse.ArgumentParser
    :returns: None
    :rtype: None
    """
    parser.add_argument(
        "-V",
        "--symbol-version",
        dest="version",
        type=int,
        required=True,
        help=f"Symbol version ({MIN_VERSION}-{MAX_VERSION})",
    )
    parser.add_argument(
        "-e",
        "--error-correction",
        choices=[level.name for level in ErrorCorrection],
        default="L",
        help="Error-correction level (default: L)",
    )


def _format_bits(bits, fmt: str) -> str:
    """Render a bit sequence as grouped hex bytes or binary octets.

    :param bits: Bits to render.
    :type bits: bitops.BitSequence
    :param fmt: One of ``OUTPUT_FORMATS``.
    :type fmt: str
    :returns: Space separated groups, one per byte.
    :rtype: str
    """
    if fmt == "bin":
        text = bits.to_bin()
        return " ".join(text[i:i + 8] for i in range(0, len(text), 8))
    return bits.to_bytes().hex(" ")


def encode_text(
    text: str,
    version: Version,
    mode: Optional[str] = None,
    encoding: str = "utf-8",
    fmt: str = "hex",
) -> int:
    """Encode ``text`` and print the mode and codewords.

    :param text: Text to encode.
    :type text: str
    :param version: Target version.
    :type version: Version
    :param mode: Mode name, or ``None`` to classify automatically.
    :type mode: Optional[str]
    :param encoding: Text encoding for byte mode.
    :type encoding: str
    :param fmt: Output format.
    :type fmt: str
    :returns: Process exit status.
    :rtype: int
    """
    codec = ByteCodec(encoding)
    encoder = FrameEncoder()
    encoder.register(codec)
    try:
        # Surface encoding problems before classification hides them.
        codec.to_bytes(text)
        if mode is None:
            selected, bits = encoder.encode(text, version)
        else:
            selected = Mode[mode.upper()]
            bits = encoder.encode_with_mode(text, selected, version)
    except UnicodeEncodeError as e:
        print(f"[!] Text cannot be encoded as {encoding}: {e.reason}")
        return 1
    except LookupError:
        print(f"[!] Unknown text encoding: {encoding}")
        return 1
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    print(f"Mode: {selected.name.lower()}")
    print(f"Bits: {len(bits)}")
    print(_format_bits(bits, fmt))
    return 0


def decode_codewords(codewords: str, version: Version, encoding: str = "utf-8") -> int:
    """Decode hex ``codewords`` and print the mode and payload.

    :param codewords: Data codewords as hex, whitespace allowed.
    :type codewords: str
    :param version: Version the codewords were encoded for.
    :type version: Version
    :param encoding: Encoding used to display byte-mode payloads.
    :type encoding: str
    :returns: Process exit status.
    :rtype: int
    """
    try:
        data = bytes.fromhex(codewords)
    except ValueError:
        print(f"[!] Not a hex string: {codewords}")
        return 1
    try:
        mode, payload = FrameEncoder().decode(data, version)
    except EOFError:
        print("[!] Codewords end before the payload does")
        return 1
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    try:
        text = payload.decode(encoding, errors="replace")
    except LookupError:
        print(f"[!] Unknown text encoding: {encoding}")
        return 1
    print(f"Mode: {mode.name.lower()}")
    print(text)
    return 0


def show_capacity(version: Version) -> int:
    """Print the data capacity and count-field widths of ``version``.

    :param version: Version to describe.
    :type version: Version
    :returns: Process exit status.
    :rtype: int
    """
    bits = version.total_capacity_bits()
    print(f"Version {version.number}-{version.error_correction.name}")
    print(f"Capacity: {bits} bits ({bits // 8} codewords)")
    for mode in Mode:
        width = version.char_count_field_width(mode)
        print(f"  {mode.name.lower():<13} count field {width:>2} bits")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments, ``sys.argv[1:]`` when omitted.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    try:
        version = Version(
            args.version, ErrorCorrection[args.error_correction]
        )
    except ValueError as e:
        print(f"[!] {e}")
        return 2

    if args.cmd in ["encode", "e"]:
        return encode_text(
            args.text, version, args.mode, args.encoding, args.format
        )
    elif args.cmd in ["decode", "d"]:
        return decode_codewords(args.codewords, version, args.encoding)
    elif args.cmd in ["capacity", "c"]:
        return show_capacity(version)
    return 2


if __name__ == "__main__":
    sys.exit(main())
