from dataclasses import dataclass
import logging
from typing import Dict, List, Mapping, Optional, Union

import authenticator
import container
from container import SYMBOL_MODES, SYMBOLS_BYTES, SYMBOLS_TEXT, Container
from errors import EmptyInputError, MalformedContainerError, UnsupportedInputError
import huffman

log = logging.getLogger(__name__)

# Stands in for "\n" in text mode so the line-oriented container stays intact
NEWLINE_SENTINEL = "\x00"


@dataclass
class CompressionResult:
    code_table: Dict[int, str]
    encoded: str
    container: bytes
    original_size: int
    symbols: str
    encrypted: bool

    @property
    def compressed_size(self) -> int:
        return (len(self.encoded) + 7) // 8

    def as_dict(self) -> dict:
        return {
            "encodedData": self.encoded,
            "codes": {str(symbol): code for symbol, code in sorted(self.code_table.items())},
            "compressedSize": self.compressed_size,
            "originalSize": self.original_size,
            "symbols": self.symbols,
            "encrypted": self.encrypted,
        }


def to_symbols(data: bytes, symbols: str) -> List[int]:
    if symbols == SYMBOLS_BYTES:
        return list(data)
    if symbols != SYMBOLS_TEXT:
        raise ValueError(f"unknown symbol mode {symbols!r}")

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        raise UnsupportedInputError("text mode needs UTF-8 input") from None
    if NEWLINE_SENTINEL in text:
        raise UnsupportedInputError("text mode input may not contain NUL characters")
    return [ord(ch) for ch in text.replace("\n", NEWLINE_SENTINEL)]


def from_symbols(values: List[int], symbols: str) -> bytes:
    try:
        if symbols == SYMBOLS_BYTES:
            return bytes(values)
        text = "".join(chr(value) for value in values)
        return text.replace(NEWLINE_SENTINEL, "\n").encode("utf-8")
    except (ValueError, OverflowError):
        raise MalformedContainerError("code table holds symbols outside the alphabet") from None


def compress(data: bytes, password: Optional[str] = None, symbols: str = SYMBOLS_BYTES) -> CompressionResult:
    """
    Huffman-code ``data`` and pack it into a container.

    When ``password`` is non-empty the container is sealed with
    :func:`authenticator.encrypt`.
    """
    if not data:
        raise EmptyInputError("input is empty")

    values = to_symbols(data, symbols)
    tree = huffman.build_tree(huffman.frequency_table(values))
    codes = huffman.generate_codes(tree)
    encoded = huffman.encode(values, codes)

    blob = container.serialize(Container(codes, encoded, symbols))
    encrypted = bool(password)
    if encrypted:
        blob = authenticator.encrypt(blob, password)

    log.info(
        "compressed %d bytes into %d bits with %d codes (%s, %s)",
        len(data), len(encoded), len(codes), symbols,
        "encrypted" if encrypted else "plain",
    )
    return CompressionResult(codes, encoded, blob, len(data), symbols, encrypted)


def decompress(blob: bytes, password: Optional[str] = None, strict: bool = True) -> bytes:
    """
    Reverse :func:`compress`.

    The password is checked before any parsing, so a wrong one is reported as
    AuthenticationError rather than as a broken container.
    """
    if password:
        blob = authenticator.decrypt(blob, password)

    parsed = container.parse(blob)
    values = huffman.decode(parsed.payload, parsed.table, strict=strict)
    out = from_symbols(values, parsed.symbols)
    log.info("decompressed %d bits into %d bytes", len(parsed.payload), len(out))
    return out


def decode_table(
    encoded: str,
    codes: Mapping[Union[str, int], str],
    symbols: str = SYMBOLS_TEXT,
    strict: bool = True,
) -> bytes:
    """Decode a bare bitstring against a code table received as JSON."""
    if symbols not in SYMBOL_MODES:
        raise ValueError(f"unknown symbol mode {symbols!r}")
    try:
        table = {int(symbol): str(code) for symbol, code in codes.items()}
    except (TypeError, ValueError):
        raise MalformedContainerError("code table keys must be integers") from None
    if not table or not huffman.is_prefix_free(table):
        raise MalformedContainerError("code table is empty or not prefix-free")
    if any(not code or code.strip("01") for code in table.values()):
        raise MalformedContainerError("codes must be non-empty bitstrings")

    values = huffman.decode(encoded, table, strict=strict)
    return from_symbols(values, symbols)
