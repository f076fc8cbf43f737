from typing import Iterator


class BitWriter:
    """Bit-packing writer.

    Accumulates individual bits into bytes and buffers them until
    flushed.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    """

    def __init__(self):
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value`` to the buffer, MSB first.

        :param value: Integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write.
        :type nbits: int
        :returns: None
        :rtype: None
        """
        for i in range(nbits - 1, -1, -1):
            self.bit_buffer = (self.bit_buffer << 1) | ((value >> i) & 1)
            self.bit_count += 1
            if self.bit_count == 8:
                self.buffer.append(self.bit_buffer)
                self.bit_buffer = 0
                self.bit_count = 0

    def write_bytes(self, data: bytes):
        """Write raw bytes, aligning pending bits to the next byte boundary.

        :param data: Byte sequence to append to the output.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self._align()
        self.buffer.extend(data)

    def flush(self) -> bytes:
        """Flush remaining bits (if any) and return the full byte buffer.

        Any partial byte is padded with zeros before being appended.

        :returns: The accumulated bytes written so far.
        :rtype: bytes
        """
        self._align()
        return bytes(self.buffer)

    def _align(self):
        if self.bit_count > 0:
            self.bit_buffer <<= (8 - self.bit_count)
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0


class BitReader:
    """Bit-unpacking reader over a bytes-like object.

    :ivar data: Input data to read bits/bytes from.
    :type data: bytes
    :ivar pos: Current position in ``data`` (byte index).
    :type pos: int
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    """

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0

    def read_bits(self, nbits: int) -> int:
        """Read ``nbits`` bits from the stream and return them as an integer.

        Bits are returned MSB-first in the integer.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: The integer value composed of the next ``nbits`` bits.
        :rtype: int
        :raises EOFError: If the end of data is reached before reading ``nbits``.
        """
        result = 0
        for _ in range(nbits):
            if self.bit_count == 0:
                if self.pos >= len(self.data):
                    raise EOFError("Unexpected end of data")
                self.bit_buffer = self.data[self.pos]
                self.pos += 1
                self.bit_count = 8
            result = (result << 1) | ((self.bit_buffer >> (self.bit_count - 1)) & 1)
            self.bit_count -= 1
        return result

    def read_bytes(self, nbytes: int) -> bytes:
        """Read exactly ``nbytes`` raw bytes from the stream.

        Any pending bits are discarded (byte-aligns the stream) before reading.

        :param nbytes: Number of bytes to read.
        :type nbytes: int
        :returns: The next ``nbytes`` bytes.
        :rtype: bytes
        :raises EOFError: If fewer than ``nbytes`` bytes remain.
        """
        self.bit_count = 0
        if self.pos + nbytes > len(self.data):
            raise EOFError("Unexpected end of data")
        result = bytes(self.data[self.pos:self.pos + nbytes])
        self.pos += nbytes
        return result

    def at_end(self) -> bool:
        """Return ``True`` once every byte of ``data`` has been consumed."""
        return self.pos >= len(self.data)


class BitSequence:
    """Growable sequence of bits with random access.

    Bits are kept packed MSB-first in a ``bytearray``; ``length`` tracks how
    many of them are meaningful so the zero padding of the last byte is
    never observable.

    :ivar length: Number of bits appended so far.
    :type length: int
    """

    def __init__(self):
        self._data = bytearray()
        self.length = 0

    def append_bits(self, code: str):
        """Append a bit-string such as ``"0110"`` to the end of the sequence.

        :param code: Characters ``'0'`` and ``'1'`` only; may be empty.
        :type code: str
        :returns: None
        :rtype: None
        :raises ValueError: If ``code`` contains any other character.
        """
        if code.strip("01"):
            raise ValueError(f"Invalid bit string: {code!r}")
        for ch in code:
            offset = self.length & 7
            if offset == 0:
                self._data.append(0)
            if ch == "1":
                self._data[-1] |= 0x80 >> offset
            self.length += 1

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, index: int) -> int:
        if index < 0:
            index += self.length
        if not 0 <= index < self.length:
            raise IndexError("bit index out of range")
        return (self._data[index >> 3] >> (7 - (index & 7))) & 1

    def __iter__(self) -> Iterator[int]:
        for i in range(self.length):
            yield (self._data[i >> 3] >> (7 - (i & 7))) & 1

    def __eq__(self, other) -> bool:
        if not isinstance(other, BitSequence):
            return NotImplemented
        return self.length == other.length and self._data == other._data

    def __repr__(self) -> str:
        bits = "".join(str(b) for b in self)
        return f"BitSequence('{bits}')"

    def to_bytes(self) -> bytes:
        """Return the bits packed MSB-first with a zero-padded last byte.

        :returns: ``ceil(len(self) / 8)`` bytes.
        :rtype: bytes
        """
        return bytes(self._data)

    @classmethod
    def from_bytes(cls, data: bytes, bit_length: int) -> "BitSequence":
        """Rebuild a sequence from :meth:`to_bytes` output and its bit length.

        :param data: Packed bits.
        :type data: bytes
        :param bit_length: Number of meaningful bits in ``data``.
        :type bit_length: int
        :returns: The restored sequence.
        :rtype: BitSequence
        :raises ValueError: If ``data`` has the wrong size for
            ``bit_length`` or its padding bits are not zero.
        """
        if bit_length < 0 or len(data) != (bit_length + 7) // 8:
            raise ValueError(
                f"{len(data)} bytes cannot hold exactly {bit_length} bits"
            )
        pad = (8 - bit_length % 8) % 8
        if pad and data[-1] & ((1 << pad) - 1):
            raise ValueError("Non-zero padding bits after end of sequence")
        seq = cls()
        seq._data = bytearray(data)
        seq.length = bit_length
        return seq
