from types import MappingProxyType
from typing import Mapping

from bitops import BitReader, BitSequence, BitWriter
from errors import BadMagic, CorruptContainer, UnsupportedVersion

MAGIC = b"MZIP"  #: Container magic number
VERSION = 1  #: Current container layout version

_MAX_COUNT = 0xFFFFFFFF


class Container:
    """Persisted unit of a compression run: frequency table plus encoded bits.

    The code table and the tree are deliberately absent; the decoder
    rebuilds both from :attr:`frequencies`.

    Layout of :meth:`to_bytes` (big-endian, bits MSB-first):

    - Magic: ``b"MZIP"`` (4 bytes)
    - Version: uint8
    - Distinct byte count ``N``: uint16
    - ``N`` entries in ascending byte order:
    - - Byte value: uint8
    - - Count: uint32
    - Bit length ``L``: uint64
    - Packed bits: ``ceil(L / 8)`` bytes, last byte zero-padded

    :ivar frequencies: Read-only mapping from byte value to count.
    :type frequencies: Mapping[int, int]
    :ivar bits: The encoded bit sequence.
    :type bits: BitSequence
    """

    __slots__ = ("_frequencies", "_bits")

    def __init__(self, frequencies: Mapping[int, int], bits: BitSequence):
        object.__setattr__(self, "_frequencies", MappingProxyType(dict(frequencies)))
        object.__setattr__(self, "_bits", bits)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def frequencies(self) -> Mapping[int, int]:
        return self._frequencies

    @property
    def bits(self) -> BitSequence:
        return self._bits

    @property
    def original_size(self) -> int:
        """Number of bytes the container decodes to."""
        return sum(self._frequencies.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Container):
            return NotImplemented
        return (
            dict(self._frequencies) == dict(other._frequencies)
            and self._bits == other._bits
        )

    def __repr__(self) -> str:
        return (
            f"Container(distinct={len(self._frequencies)}, "
            f"original_size={self.original_size}, bits={len(self._bits)})"
        )

    def to_bytes(self) -> bytes:
        """Serialize the container.

        :returns: Serialized container bytes.
        :rtype: bytes
        :raises ValueError: If a count does not fit in 32 bits.
        """
        out = BitWriter()
        out.write_bytes(MAGIC)
        out.write_bits(VERSION, 8)
        out.write_bits(len(self._frequencies), 16)
        for byte in sorted(self._frequencies):
            count = self._frequencies[byte]
            if count > _MAX_COUNT:
                raise ValueError(
                    f"Count {count} for byte 0x{byte:02x} exceeds 32 bits"
                )
            out.write_bits(byte, 8)
            out.write_bits(count, 32)
        out.write_bits(len(self._bits), 64)
        out.write_bytes(self._bits.to_bytes())
        return out.flush()

    @classmethod
    def from_bytes(cls, blob: bytes) -> "Container":
        """Parse bytes produced by :meth:`to_bytes`.

        :param blob: Serialized container.
        :type blob: bytes
        :returns: The restored container.
        :rtype: Container
        :raises BadMagic: If the magic number does not match.
        :raises UnsupportedVersion: If the version is not understood.
        :raises CorruptContainer: If the body is truncated, inconsistent or
            followed by trailing data.
        """
        reader = BitReader(blob)
        try:
            if reader.read_bytes(len(MAGIC)) != MAGIC:
                raise BadMagic("Invalid container format (bad magic)")
            version = reader.read_bits(8)
            if version != VERSION:
                raise UnsupportedVersion(f"Unsupported version: {version}")

            distinct = reader.read_bits(16)
            if distinct > 256:
                raise CorruptContainer(f"Too many distinct bytes: {distinct}")
            frequencies = {}
            for _ in range(distinct):
                byte = reader.read_bits(8)
                count = reader.read_bits(32)
                if byte in frequencies:
                    raise CorruptContainer(f"Duplicate entry for byte 0x{byte:02x}")
                if count == 0:
                    raise CorruptContainer(f"Zero count for byte 0x{byte:02x}")
                frequencies[byte] = count

            bit_length = reader.read_bits(64)
            payload = reader.read_bytes((bit_length + 7) // 8)
        except EOFError as e:
            raise CorruptContainer("Truncated container") from e

        if not reader.at_end():
            raise CorruptContainer("Trailing data after encoded bits")
        try:
            bits = BitSequence.from_bytes(payload, bit_length)
        except ValueError as e:
            raise CorruptContainer(str(e)) from e
        return cls(frequencies, bits)


def read_all_bytes(path: str) -> bytes:
    """Return the whole content of the file at ``path``."""
    with open(path, "rb") as f:
        return f.read()


def write_all_bytes(path: str, data: bytes) -> None:
    """Create or overwrite the file at ``path`` with ``data``."""
    with open(path, "wb") as f:
        f.write(data)


def persist_container(container: Container, path: str) -> None:
    write_all_bytes(path, container.to_bytes())


def load_container(path: str) -> Container:
    return Container.from_bytes(read_all_bytes(path))
