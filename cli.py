import argparse
import logging
import os
import sys

import compressor
from config import Config, configure_logging
from container import SYMBOL_MODES
from errors import AuthenticationError, HuffvaultError

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="huffvault",
        description="Huffman compression with optional password protection.",
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--compress", action="store_true", help="Compress the input file")
    action.add_argument("--decompress", action="store_true", help="Decompress the input file")
    action.add_argument("--serve", action="store_true", help="Start the HTTP server")
    parser.add_argument("--input", default="input.txt", help="Input file name")
    parser.add_argument("--output", default="output.bin", help="Output file name")
    parser.add_argument("--password", default="", help="Password protecting the compressed data")
    parser.add_argument("--symbols", choices=SYMBOL_MODES, default=Config.DEFAULT_SYMBOLS,
                        help="Code single bytes or UTF-8 characters")
    parser.add_argument("--lenient", action="store_true",
                        help="Drop trailing bits that do not form a code instead of failing")
    parser.add_argument("--port", type=int, default=Config.PORT, help="Port for the HTTP server")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    return parser


def run_compress(args) -> None:
    with open(args.input, "rb") as f:
        data = f.read()
    result = compressor.compress(data, args.password, args.symbols)
    with open(args.output, "wb") as f:
        f.write(result.container)
    os.chmod(args.output, 0o644)
    print(f"Compression successful. Output written to {args.output}")


def run_decompress(args) -> None:
    with open(args.input, "rb") as f:
        blob = f.read()
    data = compressor.decompress(blob, args.password, strict=not args.lenient)
    with open(args.output, "wb") as f:
        f.write(data)
    os.chmod(args.output, 0o644)
    print(f"Decompression successful. Output written to {args.output}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    if args.serve:
        from app import create_app

        application = create_app({"LOG_LEVEL": "DEBUG" if args.verbose else Config.LOG_LEVEL})
        application.run(host=application.config["HOST"], port=args.port)
        return 0

    try:
        if args.compress:
            run_compress(args)
        else:
            run_decompress(args)
    except AuthenticationError:
        print("Error reading encoded data: Invalid password", file=sys.stderr)
        return 1
    except HuffvaultError as e:
        log.debug("failed: %r", e)
        print(f"Error: {e.user_message} ({e.detail or type(e).__name__})", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
