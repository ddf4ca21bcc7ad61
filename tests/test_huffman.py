import random

import pytest

import huffman as huff


def assert_prefix_free(codes):
    values = sorted(codes.values())
    # after sorting, a prefix would sit right before one of its extensions
    for a, b in zip(values, values[1:]):
        assert not b.startswith(a), (a, b)


def test_freq_table_counts_only_present_bytes():
    assert huff.freq_table(b"abracadabra") == {97: 5, 98: 2, 114: 2, 99: 1, 100: 1}
    assert huff.freq_table(b"") == {}


def test_merge_freq_tables_matches_whole_input():
    data = bytes(random.Random(7).randrange(0, 40) for _ in range(5000))
    chunks = [data[i:i + 613] for i in range(0, len(data), 613)]
    merged = huff.merge_freq_tables(*(huff.freq_table(c) for c in chunks))
    assert merged == huff.freq_table(data)


def test_empty_table_rejected():
    with pytest.raises(ValueError):
        huff.build_huffman_tree({})


def test_single_symbol_is_a_lone_leaf_with_one_bit_code():
    root = huff.build_huffman_tree({0x41: 3})
    assert isinstance(root, huff.Leaf)
    assert root.symbol == 0x41 and root.frequency == 3
    assert huff.count_internal_nodes(root) == 0
    assert huff.generate_huffman_codes(root) == {0x41: "0"}


def test_two_symbols():
    root = huff.build_huffman_tree({1: 5, 2: 3})
    assert isinstance(root, huff.Internal)
    assert root.frequency == 8
    # lower frequency is popped first and becomes the left child
    assert huff.generate_huffman_codes(root) == {2: "0", 1: "1"}


def test_equal_frequencies_break_ties_by_symbol_then_creation():
    root = huff.build_huffman_tree({3: 1, 0: 1, 2: 1, 1: 1})
    # merges: (0,1) -> n0, (2,3) -> n1, (n0,n1) -> root
    assert huff.generate_huffman_codes(root) == {0: "00", 1: "01", 2: "10", 3: "11"}


def test_leaf_wins_tie_against_internal_node():
    # after merging 1 and 2 (freq 2) the heap holds leaf 3 (freq 2) and the new internal node
    root = huff.build_huffman_tree({1: 1, 2: 1, 3: 2})
    assert isinstance(root.left, huff.Leaf) and root.left.symbol == 3
    assert huff.generate_huffman_codes(root) == {3: "0", 1: "10", 2: "11"}


def test_internal_node_frequency_is_sum_of_children():
    root = huff.build_huffman_tree(huff.freq_table(b"the quick brown fox jumps over the lazy dog"))
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, huff.Internal):
            assert node.frequency == node.left.frequency + node.right.frequency
            stack += [node.left, node.right]


@pytest.mark.parametrize("seed", [1, 2, 3, 4])
def test_tree_shape_invariants(seed):
    rng = random.Random(seed)
    table = {s: rng.randint(1, 500) for s in rng.sample(range(256), rng.randint(2, 256))}
    root = huff.build_huffman_tree(table)
    codes = huff.generate_huffman_codes(root)

    assert huff.count_internal_nodes(root) == len(table) - 1
    assert set(codes) == set(table)
    assert {s: len(c) for s, c in codes.items()} == huff.leaf_depths(root)
    assert_prefix_free(codes)


def test_codes_are_deterministic_regardless_of_insertion_order():
    rng = random.Random(99)
    items = [(s, rng.choice([1, 2, 3, 5, 8])) for s in range(200)]
    first = huff.generate_huffman_codes(huff.build_huffman_tree(dict(items)))
    rng.shuffle(items)
    second = huff.generate_huffman_codes(huff.build_huffman_tree(dict(items)))
    assert first == second


def test_more_frequent_symbols_get_codes_no_longer():
    table = {0: 1000, 1: 100, 2: 10, 3: 1}
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(table))
    lengths = [len(codes[s]) for s in (0, 1, 2, 3)]
    assert lengths == sorted(lengths)


def test_deep_chain_tree_does_not_recurse():
    # fibonacci frequencies produce a maximally skewed tree
    fib = [1, 1]
    while len(fib) < 60:
        fib.append(fib[-1] + fib[-2])
    table = {i: f for i, f in enumerate(fib)}
    root = huff.build_huffman_tree(table)
    codes = huff.generate_huffman_codes(root)
    assert max(len(c) for c in codes.values()) == len(table) - 1
    assert_prefix_free(codes)
