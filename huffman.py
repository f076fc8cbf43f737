import heapq
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union


def count_frequencies(data: bytes) -> Dict[int, int]:
    """Count how often each byte value occurs in ``data``.

    :param data: Input bytes, scanned once.
    :type data: bytes
    :returns: Mapping from byte value (0-255) to its positive count. Bytes
        that never occur are absent; empty input gives an empty mapping.
    :rtype: Dict[int, int]
    """
    return dict(Counter(data))


@dataclass(frozen=True)
class Leaf:
    """Tree node carrying one distinct byte value and its frequency."""

    byte: int
    freq: int


@dataclass(frozen=True)
class Internal:
    """Merge of two subtrees.

    ``left`` is ``None`` only for the root of a single-symbol tree, whose
    only leaf hangs off ``right``.
    """

    left: Optional["Node"]
    right: "Node"
    freq: int


Node = Union[Leaf, Internal]


def compare_nodes(a: Node, b: Node) -> int:
    """Total order over subtrees used for both heap order and merge sides.

    Lower frequency sorts first. On equal frequency both left spines are
    walked in lockstep: the side reaching a leaf first sorts first, and two
    leaves reached at the same depth are ordered by byte value.

    :param a: First subtree.
    :type a: Leaf | Internal
    :param b: Second subtree.
    :type b: Leaf | Internal
    :returns: Negative if ``a`` sorts before ``b``, positive if after, ``0``
        only when both spines end on leaves holding the same byte.
    :rtype: int
    """
    if a.freq != b.freq:
        return -1 if a.freq < b.freq else 1
    while isinstance(a, Internal) and isinstance(b, Internal):
        a, b = a.left, b.left
    a_leaf = isinstance(a, Leaf)
    b_leaf = isinstance(b, Leaf)
    if a_leaf != b_leaf:
        return -1 if a_leaf else 1
    return (a.byte > b.byte) - (a.byte < b.byte)


class _HeapEntry:
    """Wraps a subtree so :mod:`heapq` orders it with :func:`compare_nodes`."""

    __slots__ = ("node",)

    def __init__(self, node: Node):
        self.node = node

    def __lt__(self, other: "_HeapEntry") -> bool:
        return compare_nodes(self.node, other.node) < 0


class HuffmanTree:
    """Immutable Huffman prefix-code tree.

    Built once from a frequency table and only read afterwards, by
    :func:`derive_codes` and by the decoder.

    :ivar root: Root node of the tree.
    :type root: Leaf | Internal
    :ivar frequency: Total frequency, equal to the length of the input the
        table was counted from.
    :type frequency: int
    """

    def __init__(self, root: Node):
        self.root = root
        self.frequency = root.freq

    @classmethod
    def build_from_frequencies(cls, frequencies: Mapping[int, int]) -> "HuffmanTree":
        """Build the tree for a symbol frequency table.

        The result depends only on the key/count pairs, never on the
        iteration order of ``frequencies``, so the decoder regenerates the
        exact tree the encoder used.

        :param frequencies: Mapping from byte value to observed count.
        :type frequencies: Mapping[int, int]
        :returns: The constructed tree. An empty table yields a lone
            placeholder leaf for byte 0 with frequency 0; a single distinct
            byte yields an internal root with only a right leaf.
        :rtype: HuffmanTree
        """
        if not frequencies:
            return cls(Leaf(0, 0))

        if len(frequencies) == 1:
            byte, count = next(iter(frequencies.items()))
            return cls(Internal(None, Leaf(byte, count), count))

        heap = [_HeapEntry(Leaf(byte, count)) for byte, count in frequencies.items()]
        heapq.heapify(heap)

        while len(heap) > 1:
            first = heapq.heappop(heap).node
            second = heapq.heappop(heap).node
            if compare_nodes(first, second) <= 0:
                left, right = first, second
            else:
                left, right = second, first
            merged = Internal(left, right, left.freq + right.freq)
            heapq.heappush(heap, _HeapEntry(merged))

        return cls(heap[0].node)

    @property
    def left(self) -> Optional[Node]:
        if isinstance(self.root, Internal):
            return self.root.left
        return None

    @property
    def right(self) -> Optional[Node]:
        if isinstance(self.root, Internal):
            return self.root.right
        return None

    def leaves(self) -> List[Tuple[int, int]]:
        """List ``(byte, frequency)`` for every leaf, left to right."""
        return list(_iter_leaves(self.root))

    def __eq__(self, other) -> bool:
        if not isinstance(other, HuffmanTree):
            return NotImplemented
        return self.root == other.root

    def __repr__(self) -> str:
        return f"HuffmanTree(frequency={self.frequency}, leaves={self.leaves()})"


def _iter_leaves(node: Optional[Node]) -> Iterator[Tuple[int, int]]:
    if node is None:
        return
    if isinstance(node, Leaf):
        yield node.byte, node.freq
    else:
        yield from _iter_leaves(node.left)
        yield from _iter_leaves(node.right)


def derive_codes(tree: HuffmanTree) -> Dict[int, str]:
    """Derive the byte -> bit-string code table by walking ``tree``.

    Moving left appends ``'0'``, moving right appends ``'1'``. Only leaves
    carry codes, so the result is prefix-free.

    :param tree: Tree built by :meth:`HuffmanTree.build_from_frequencies`.
    :type tree: HuffmanTree
    :returns: One entry per distinct byte of the table the tree came from;
        empty for the placeholder tree of an empty input.
    :rtype: Dict[int, str]
    """
    codes: Dict[int, str] = {}
    if isinstance(tree.root, Leaf):
        return codes
    _assign_codes(tree.root, "", codes)
    return codes


def _assign_codes(node: Optional[Node], prefix: str, codes: Dict[int, str]):
    if node is None:
        return
    if isinstance(node, Leaf):
        codes[node.byte] = prefix
    else:
        _assign_codes(node.left, prefix + "0", codes)
        _assign_codes(node.right, prefix + "1", codes)
