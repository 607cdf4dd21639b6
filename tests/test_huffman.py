import random

import pytest

import huffman
from errors import EmptyInputError, IncompleteDecodeError, UnknownSymbolError

A, B, C, D = (ord(ch) for ch in "abcd")
SCENARIO_TABLE = {A: "0", B: "10", C: "110", D: "111"}


def _walk(node):
    yield node
    if not node.is_leaf:
        yield from _walk(node.left)
        yield from _walk(node.right)


def _assert_tree_sums(root):
    for node in _walk(root):
        if node.is_leaf:
            assert node.symbol is not None
        else:
            assert node.left is not None and node.right is not None
            assert node.symbol is None
            assert node.freq == node.left.freq + node.right.freq


def test_build_tree_scenario_frequencies():
    freqs = {A: 5, B: 2, C: 1, D: 3}
    root = huffman.build_tree(freqs)

    assert root.freq == 11
    _assert_tree_sums(root)
    leaves = {node.symbol: node.freq for node in _walk(root) if node.is_leaf}
    assert leaves == freqs


def test_build_tree_root_is_input_length():
    data = b"the quick brown fox jumps over the lazy dog"
    root = huffman.build_tree(huffman.frequency_table(data))
    assert root.freq == len(data)
    _assert_tree_sums(root)


def test_build_tree_empty_table():
    with pytest.raises(EmptyInputError):
        huffman.build_tree({})


def test_build_tree_rejects_non_positive_count():
    with pytest.raises(ValueError):
        huffman.build_tree({A: 3, B: 0})


def test_build_tree_is_deterministic_regardless_of_insertion_order():
    freqs = {A: 2, B: 2, C: 2, D: 2}
    reordered = dict(reversed(list(freqs.items())))
    assert huffman.generate_codes(huffman.build_tree(freqs)) == \
        huffman.generate_codes(huffman.build_tree(reordered))


def test_single_symbol_tree_is_a_leaf():
    root = huffman.build_tree(huffman.frequency_table(b"aaaa"))
    assert root.is_leaf
    assert root.freq == 4
    assert huffman.generate_codes(root) == {A: "0"}


def test_generate_codes_two_leaves():
    root = huffman.Node(None, 2, huffman.Node(A, 1), huffman.Node(B, 1))
    assert huffman.generate_codes(root) == {A: "0", B: "1"}


def test_generated_codes_are_prefix_free():
    rng = random.Random(1234)
    for size in (2, 3, 17, 256, 2000):
        data = [rng.randrange(0, 300) for _ in range(size)]
        codes = huffman.generate_codes(huffman.build_tree(huffman.frequency_table(data)))
        assert huffman.is_prefix_free(codes)
        assert all(codes.values())


def test_more_frequent_symbols_get_shorter_codes():
    codes = huffman.generate_codes(huffman.build_tree({A: 50, B: 20, C: 5, D: 1}))
    assert len(codes[A]) <= len(codes[B]) <= len(codes[C]) <= len(codes[D])


def test_is_prefix_free_detects_prefix_and_duplicates():
    assert not huffman.is_prefix_free({A: "0", B: "01"})
    assert not huffman.is_prefix_free({A: "10", B: "10"})
    assert huffman.is_prefix_free(SCENARIO_TABLE)


def test_encode_scenario():
    assert huffman.encode(b"abcdaba", SCENARIO_TABLE) == "0101101110100"


def test_decode_scenario():
    assert bytes(huffman.decode("0101101110100", SCENARIO_TABLE)) == b"abcdaba"


def test_encode_unknown_symbol():
    with pytest.raises(UnknownSymbolError) as exc:
        huffman.encode(b"abz", SCENARIO_TABLE)
    assert exc.value.symbol == ord("z")


def test_decode_drops_trailing_bits_by_default():
    assert bytes(huffman.decode("0101", SCENARIO_TABLE)) == b"ab"


def test_decode_strict_reports_trailing_bits():
    with pytest.raises(IncompleteDecodeError) as exc:
        huffman.decode("01011", SCENARIO_TABLE, strict=True)
    assert exc.value.leftover == "11"


def test_decode_symbol_zero():
    table = {0: "0", 10: "1"}
    assert huffman.decode("0110", table) == [0, 10, 10, 0]


def test_encode_decode_random_bytes():
    rng = random.Random(99)
    data = bytes(rng.getrandbits(8) for _ in range(4096))
    codes = huffman.generate_codes(huffman.build_tree(huffman.frequency_table(data)))
    assert bytes(huffman.decode(huffman.encode(data, codes), codes, strict=True)) == data
