"""
Line-oriented container holding an encoded payload and its code table.

Layout, one item per line::

    0101101110100
    ----DATA----
    97:0
    98:10
    ----END CODES----
    symbols:bytes

Table keys are integers (byte values or code points), so colons, newlines and
other control symbols never clash with the structure. The trailer is optional
and defaults to ``text``, which is what files written without it contain.
"""
from dataclasses import dataclass, field
import re
from typing import Dict

from errors import MalformedContainerError
from huffman import is_prefix_free

DATA_DELIMITER = "----DATA----"
END_DELIMITER = "----END CODES----"
SYMBOLS_PREFIX = "symbols:"

SYMBOLS_BYTES = "bytes"
SYMBOLS_TEXT = "text"
SYMBOL_MODES = (SYMBOLS_BYTES, SYMBOLS_TEXT)

_TABLE_LINE = re.compile(r"^([0-9]+):([01]+)$")
_BITS = re.compile(r"^[01]*$")


@dataclass(frozen=True)
class Container:
    table: Dict[int, str] = field(hash=False)
    payload: str
    symbols: str = SYMBOLS_BYTES


def serialize(container: Container) -> bytes:
    if container.symbols not in SYMBOL_MODES:
        raise ValueError(f"unknown symbol mode {container.symbols!r}")

    lines = [container.payload, DATA_DELIMITER]
    for symbol in sorted(container.table):
        lines.append(f"{symbol}:{container.table[symbol]}")
    lines.append(END_DELIMITER)
    lines.append(SYMBOLS_PREFIX + container.symbols)
    return ("\n".join(lines) + "\n").encode("utf-8")


def parse(blob: bytes) -> Container:
    try:
        text = blob.decode("utf-8")
    except UnicodeDecodeError:
        raise MalformedContainerError("container is not UTF-8 text") from None

    lines = iter(text.split("\n"))
    payload = next(lines)
    if not _BITS.match(payload):
        raise MalformedContainerError("payload is not a bitstring")

    for line in lines:
        if line == DATA_DELIMITER:
            break
    else:
        raise MalformedContainerError(f"missing {DATA_DELIMITER} delimiter")

    table = {}
    for line in lines:
        if line == END_DELIMITER:
            break
        match = _TABLE_LINE.match(line)
        if not match:
            raise MalformedContainerError(f"bad code table line {line[:40]!r}")
        symbol = int(match.group(1))
        if symbol in table:
            raise MalformedContainerError(f"symbol {symbol} listed twice")
        table[symbol] = match.group(2)

    # End of input may stand in for the end delimiter
    symbols = SYMBOLS_TEXT
    for line in lines:
        if not line:
            continue
        if not line.startswith(SYMBOLS_PREFIX):
            raise MalformedContainerError(f"unexpected trailer line {line[:40]!r}")
        symbols = line[len(SYMBOLS_PREFIX):]
        if symbols not in SYMBOL_MODES:
            raise MalformedContainerError(f"unknown symbol mode {symbols!r}")

    if not table:
        raise MalformedContainerError("code table is empty")
    if symbols == SYMBOLS_BYTES and max(table) > 0xFF:
        raise MalformedContainerError("byte symbol out of range")
    if symbols == SYMBOLS_TEXT and max(table) > 0x10FFFF:
        raise MalformedContainerError("code point out of range")
    if not is_prefix_free(table):
        raise MalformedContainerError("code table is not prefix-free")

    return Container(table, payload, symbols)
