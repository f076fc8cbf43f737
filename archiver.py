from typing import Callable, Dict, Optional

from bitops import BitSequence
from container import VERSION as CONTAINER_VERSION
from container import (
    Container,
    load_container,
    persist_container,
    read_all_bytes,
    write_all_bytes,
)
from errors import MalformedStream, MissingCode
from huffman import HuffmanTree, Leaf, count_frequencies, derive_codes

ProgressCallback = Callable[[int, int], None]

PROGRESS_STEP = 1 << 16  #: Units (bytes or bits) between progress reports


def _report(on_progress: Optional[ProgressCallback], done: int, total: int):
    if on_progress is not None:
        try:
            on_progress(done, total)
        except Exception:
            pass


def encode(
    data: bytes,
    codes: Dict[int, str],
    on_progress: Optional[ProgressCallback] = None,
) -> BitSequence:
    """Concatenate the code of every byte of ``data``, in input order.

    :param data: Input bytes.
    :type data: bytes
    :param codes: Code table from :func:`huffman.derive_codes`.
    :type codes: Dict[int, str]
    :param on_progress: Optional callback ``on_progress(done, total)`` called
        with the number of input bytes consumed.
    :type on_progress: Optional[Callable[[int, int], None]]
    :returns: The encoded bits.
    :rtype: BitSequence
    :raises MissingCode: If a byte of ``data`` has no entry in ``codes``.
    """
    bits = BitSequence()
    total = len(data)
    for pos, byte in enumerate(data, 1):
        try:
            code = codes[byte]
        except KeyError:
            raise MissingCode(byte) from None
        bits.append_bits(code)
        if pos % PROGRESS_STEP == 0:
            _report(on_progress, pos, total)
    _report(on_progress, total, total)
    return bits


def decode(
    bits: BitSequence,
    tree: HuffmanTree,
    on_progress: Optional[ProgressCallback] = None,
) -> bytes:
    """Walk ``tree`` along ``bits`` and emit a byte at every leaf reached.

    :param bits: Encoded bits.
    :type bits: BitSequence
    :param tree: Tree rebuilt from the same frequency table used to encode.
    :type tree: HuffmanTree
    :param on_progress: Optional callback ``on_progress(done, total)`` called
        with the number of bits consumed.
    :type on_progress: Optional[Callable[[int, int], None]]
    :returns: Decoded bytes.
    :rtype: bytes
    :raises MalformedStream: If a bit has no branch to follow or the bits
        run out in the middle of a code.
    """
    root = tree.root
    total = len(bits)
    if isinstance(root, Leaf):
        if total:
            raise MalformedStream(f"{total} bits given for an empty input")
        return b""

    output = bytearray()
    node = root
    for pos, bit in enumerate(bits):
        child = node.right if bit else node.left
        if child is None:
            raise MalformedStream(f"No branch for bit {bit} at position {pos}")
        if isinstance(child, Leaf):
            output.append(child.byte)
            node = root
        else:
            node = child
        if (pos + 1) % PROGRESS_STEP == 0:
            _report(on_progress, pos + 1, total)

    if node is not root:
        raise MalformedStream("Encoded bits end in the middle of a code")
    _report(on_progress, total, total)
    return bytes(output)


class Archiver:
    """Runs the whole compress / decompress flow on in-memory bytes.

    Holds no state between calls: every run builds its own frequency
    table, tree and code table, so one instance can be reused freely.

    :ivar VERSION: Container layout version written by :meth:`compress`.
    :type VERSION: int
    """

    VERSION = CONTAINER_VERSION

    def compress(
        self,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Container:
        """Compress ``data`` into a :class:`Container`.

        One pass counts byte frequencies, a second pass encodes with the
        codes of the tree built from them.

        :param data: Input bytes; may be empty.
        :type data: bytes
        :param on_progress: Optional callback ``on_progress(done, total)``
            for the encoding pass.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Frequency table and encoded bits.
        :rtype: Container
        """
        frequencies = count_frequencies(data)
        tree = HuffmanTree.build_from_frequencies(frequencies)
        codes = derive_codes(tree)
        bits = encode(data, codes, on_progress=on_progress)
        return Container(frequencies, bits)

    def decompress(
        self,
        container: Container,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Restore the original bytes from ``container``.

        The tree is rebuilt from the stored frequency table.

        :param container: Output of :meth:`compress`.
        :type container: Container
        :param on_progress: Optional callback ``on_progress(done, total)``
            for the decoding pass.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Original bytes.
        :rtype: bytes
        :raises MalformedStream: If the bits do not decode cleanly or decode
            to a different number of bytes than the frequency table
            accounts for.
        """
        tree = HuffmanTree.build_from_frequencies(container.frequencies)
        data = decode(container.bits, tree, on_progress=on_progress)
        if len(data) != tree.frequency:
            raise MalformedStream(
                f"Decoded {len(data)} bytes, expected {tree.frequency}"
            )
        return data


def zip_file(
    source: str,
    destination: str,
    on_progress: Optional[ProgressCallback] = None,
) -> Container:
    """Compress the file ``source`` into ``destination``, overwriting it.

    :returns: The container that was written.
    :rtype: Container
    """
    container = Archiver().compress(read_all_bytes(source), on_progress=on_progress)
    persist_container(container, destination)
    return container


def unzip_file(
    archive: str,
    destination: str,
    on_progress: Optional[ProgressCallback] = None,
) -> bytes:
    """Restore the file stored in ``archive`` to ``destination``.

    :returns: The restored bytes.
    :rtype: bytes
    """
    data = Archiver().decompress(load_container(archive), on_progress=on_progress)
    write_all_bytes(destination, data)
    return data
