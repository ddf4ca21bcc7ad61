import heapq
from typing import Dict, List, Tuple, Union

SYMBOLS = 256 # byte alphabet; internal node ordering starts after it


class Leaf: # Huffman tree leaf, carries a byte value
    __slots__ = ("symbol", "frequency", "order")

    def __init__(self, symbol: int, frequency: int):
        self.symbol = symbol
        self.frequency = frequency
        self.order = symbol # equal frequencies: smaller symbol first

    def __repr__(self):
        return f"Leaf({self.symbol!r}, {self.frequency})"


class Internal: # merge of two subtrees
    __slots__ = ("frequency", "left", "right", "order")

    def __init__(self, frequency: int, left: "HuffmanNode", right: "HuffmanNode", order: int):
        self.frequency = frequency
        self.left = left
        self.right = right
        self.order = order # SYMBOLS + creation sequence number

    def __repr__(self):
        return f"Internal({self.frequency}, {self.left!r}, {self.right!r})"


HuffmanNode = Union[Leaf, Internal]


def freq_table(data: bytes) -> Dict[int, int]: # counts per byte value, only for bytes that occur
    ft: Dict[int, int] = {}
    for b in data:
        ft[b] = ft.get(b, 0) + 1
    return ft


def merge_freq_tables(*tables: Dict[int, int]) -> Dict[int, int]: # sum tables counted over separate chunks
    merged: Dict[int, int] = {}
    for table in tables:
        for symbol, count in table.items():
            merged[symbol] = merged.get(symbol, 0) + count
    return merged


def build_huffman_tree(frequency_table: Dict[int, int]) -> HuffmanNode:
    """
    Build the Huffman tree for a non-empty frequency table.

    Heap entries are keyed on (frequency, order) so ties never depend on
    dict or heap internals: leaves sort by symbol, internal nodes by creation
    sequence, and a leaf sorts before an internal node of the same frequency.
    The first node popped becomes the left child.
    """
    if not frequency_table:
        raise ValueError("cannot build a Huffman tree from an empty frequency table")

    priority_queue: List[Tuple[int, int, HuffmanNode]] = []
    for symbol, frequency in frequency_table.items():
        leaf = Leaf(symbol, frequency)
        priority_queue.append((leaf.frequency, leaf.order, leaf))
    heapq.heapify(priority_queue)

    created = 0
    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged = Internal(left.frequency + right.frequency, left, right, SYMBOLS + created)
        created += 1
        heapq.heappush(priority_queue, (merged.frequency, merged.order, merged))

    return priority_queue[0][2] # root; a lone Leaf when only one symbol occurs


def generate_huffman_codes(root: HuffmanNode) -> Dict[int, str]:
    """
    Map every symbol to its code ('0' = left edge, '1' = right edge).

    Walks the tree with an explicit stack so chain-shaped trees cannot hit
    the recursion limit. A root that is itself a leaf gets the code '0'.
    """
    if isinstance(root, Leaf):
        return {root.symbol: "0"}

    codes: Dict[int, str] = {}
    stack: List[Tuple[HuffmanNode, str]] = [(root, "")]
    while stack:
        node, code = stack.pop()
        if isinstance(node, Leaf):
            codes[node.symbol] = code
            continue
        # right pushed first so the left subtree is visited first
        stack.append((node.right, code + "1"))
        stack.append((node.left, code + "0"))
    return codes


def count_internal_nodes(root: HuffmanNode) -> int:
    count = 0
    stack: List[HuffmanNode] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Internal):
            count += 1
            stack.append(node.left)
            stack.append(node.right)
    return count


def leaf_depths(root: HuffmanNode) -> Dict[int, int]: # symbol -> depth of its leaf
    depths: Dict[int, int] = {}
    stack: List[Tuple[HuffmanNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Leaf):
            depths[node.symbol] = depth
        else:
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
    return depths
