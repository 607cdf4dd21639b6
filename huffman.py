from collections import Counter
import heapq
import logging
from typing import Dict, Iterable, List, Mapping, Optional

from errors import EmptyInputError, IncompleteDecodeError, UnknownSymbolError

log = logging.getLogger(__name__)

CodeTable = Dict[int, str]


class Node:
    def __init__(self, symbol=None, freq=0, left=None, right=None):
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"Node(symbol={self.symbol!r}, freq={self.freq})"
        return f"Node(freq={self.freq})"


def frequency_table(symbols: Iterable[int]) -> Counter:
    return Counter(symbols)


def build_tree(frequencies: Mapping[int, int]) -> Node:
    """
    Build the Huffman tree for a symbol -> count mapping.

    The two lightest nodes are merged until one remains. Equal weights are
    ordered by a push counter so that the same table always yields the same
    tree, whatever order the mapping was filled in.
    """
    if not frequencies:
        raise EmptyInputError("frequency table is empty")

    heap = []
    for seq, (symbol, freq) in enumerate(
        sorted(frequencies.items(), key=lambda item: (item[1], item[0]))
    ):
        if freq <= 0:
            raise ValueError(f"frequency of symbol {symbol!r} must be positive, got {freq}")
        heap.append((freq, seq, Node(symbol, freq)))
    heapq.heapify(heap)

    # A single symbol stays a bare leaf
    seq = len(heap)
    while len(heap) > 1:
        lo_freq, _, lo = heapq.heappop(heap)
        hi_freq, _, hi = heapq.heappop(heap)
        merged = Node(None, lo_freq + hi_freq, lo, hi)
        heapq.heappush(heap, (merged.freq, seq, merged))
        seq += 1

    return heap[0][2]


def generate_codes(root: Node) -> CodeTable:
    """
    Walk the tree and produce the symbol -> bitstring table.
    """
    if root.is_leaf:
        # No path to follow: a lone symbol is always coded as "0"
        return {root.symbol: "0"}

    codebook = {}
    stack = [(root, "")]
    while stack:
        node, prefix = stack.pop()
        if node.is_leaf:
            codebook[node.symbol] = prefix
            continue
        stack.append((node.right, prefix + "1"))
        stack.append((node.left, prefix + "0"))
    return codebook


def is_prefix_free(table: Mapping[int, str]) -> bool:
    # After sorting, any code that prefixes another sits directly before one it prefixes
    codes = sorted(table.values())
    for shorter, longer in zip(codes, codes[1:]):
        if longer.startswith(shorter):
            return False
    return True


def encode(symbols: Iterable[int], table: Mapping[int, str]) -> str:
    parts = []
    for symbol in symbols:
        try:
            parts.append(table[symbol])
        except KeyError:
            raise UnknownSymbolError(symbol) from None
    return "".join(parts)


def decode(bits: str, table: Mapping[int, str], strict: bool = False) -> List[int]:
    """
    Turn a bitstring back into symbols with the given code table.

    Bits left over after the last complete code are dropped, or raise
    IncompleteDecodeError when strict is set.
    """
    rev = {code: symbol for symbol, code in table.items()}

    result = []
    buf = ""
    for bit in bits:
        buf += bit
        symbol: Optional[int] = rev.get(buf)
        if symbol is not None:
            result.append(symbol)
            buf = ""

    if buf:
        if strict:
            raise IncompleteDecodeError(buf)
        log.warning("dropping %d trailing bits that do not form a code", len(buf))
    return result
