from typing import Iterator, Optional


class BitSequence:
    """Immutable, finalized sequence of bits.

    Bits are stored packed MSB-first in ``data``; ``length`` tells how many
    of them are meaningful. Any unused low bits of the last byte are zero.

    :ivar data: Packed bits.
    :type data: bytes
    :ivar length: Number of valid bits.
    :type length: int
    """

    __slots__ = ("_data", "_length")

    def __init__(self, data: bytes = b"", length: Optional[int] = None):
        """Wrap packed ``data`` as a bit sequence.

        :param data: Packed bits, MSB-first.
        :type data: bytes
        :param length: Number of valid bits; defaults to ``8 * len(data)``.
        :type length: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``length`` does not fit in ``data``.
        """
        if length is None:
            length = len(data) * 8
        if length < 0 or (length + 7) // 8 != len(data):
            raise ValueError(
                f"Bit length {length} does not match {len(data)} data bytes"
            )
        data = bytearray(data)
        if length % 8:
            data[-1] &= (0xFF << (8 - length % 8)) & 0xFF
        self._data = bytes(data)
        self._length = length

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index: int) -> bool:
        """Return the bit at position ``index``.

        :param index: Bit position; negative values count from the end.
        :type index: int
        :returns: ``True`` for a set bit.
        :rtype: bool
        :raises IndexError: If ``index`` is out of range.
        """
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError("bit index out of range")
        return bool((self._data[index >> 3] >> (7 - (index & 7))) & 1)

    def __iter__(self) -> Iterator[bool]:
        for i in range(self._length):
            yield self[i]

    def __eq__(self, other):
        if not isinstance(other, BitSequence):
            return NotImplemented
        return self._length == other._length and self._data == other._data

    def __hash__(self):
        return hash((self._length, self._data))

    def __repr__(self):
        return f"BitSequence({self.to_bin()!r})"

    def is_byte_aligned(self) -> bool:
        return self._length % 8 == 0

    def to_bytes(self) -> bytes:
        """Return the packed bits; a trailing partial byte is zero-filled."""
        return self._data

    def to_bin(self) -> str:
        return "".join("1" if bit else "0" for bit in self)

    def to_hex(self) -> str:
        return self._data.hex()


class BitWriter:
    """Bit-packing writer.

    Accumulates individual bits into bytes. Unlike a byte-oriented stream,
    the writer never pads on its own: the bit length is exactly the sum of
    all widths written.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0

    def __len__(self) -> int:
        return len(self.buffer) * 8 + self.bit_count

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value`` to the buffer, MSB first.

        Bits of ``value`` above ``nbits`` are ignored. Writing zero bits is a
        no-op.

        :param value: Non-negative integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write.
        :type nbits: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``nbits`` is negative.
        """
        if nbits < 0:
            raise ValueError(f"Cannot write a negative number of bits: {nbits}")
        for i in range(nbits - 1, -1, -1):
            self.bit_buffer = (self.bit_buffer << 1) | ((value >> i) & 1)
            self.bit_count += 1
            if self.bit_count == 8:
                self.buffer.append(self.bit_buffer)
                self.bit_buffer = 0
                self.bit_count = 0

    def write_bytes(self, data: bytes):
        """Write raw bytes, 8 bits each, MSB first, at the current position.

        The stream is not realigned: if pending bits exist, each byte
        straddles the current byte boundary.

        :param data: Byte sequence to append to the output.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        if self.bit_count == 0:
            self.buffer.extend(data)
            return
        for byte in data:
            self.write_bits(byte, 8)

    def write_sequence(self, bits: BitSequence):
        """Append every bit of ``bits`` in order.

        :param bits: Bits to append.
        :type bits: BitSequence
        :returns: None
        :rtype: None
        """
        whole, rest = divmod(len(bits), 8)
        data = bits.to_bytes()
        self.write_bytes(data[:whole])
        if rest:
            self.write_bits(data[whole] >> (8 - rest), rest)

    def to_sequence(self) -> BitSequence:
        """Finalize the written bits into an immutable :class:`BitSequence`.

        The writer itself is left untouched and may keep growing.

        :returns: The bits written so far.
        :rtype: BitSequence
        """
        data = bytearray(self.buffer)
        if self.bit_count > 0:
            data.append(self.bit_buffer << (8 - self.bit_count))
        return BitSequence(bytes(data), len(self))


class BitReader:
    """Efficient bit-packing reader.

    Reads arbitrary bit lengths from a bytes-like object.

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar pos: Current position in ``data`` (byte index).
    :type pos: int
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    """

    def __init__(self, data: bytes):
        """Create a bit reader for the given input ``data``.

        :param data: Source data to read from.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self.data = data
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0

    @property
    def bits_consumed(self) -> int:
        return self.pos * 8 - self.bit_count

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
        """Read ``nbytes`` bytes, 8 bits each, from the current bit position.

        :param nbytes: Number of bytes to read.
        :type nbytes: int
        :returns: The next ``nbytes`` bytes.
        :rtype: bytes
        :raises EOFError: If fewer than ``nbytes`` whole bytes remain.
        """
        if self.bit_count == 0:
            result = self.data[self.pos:self.pos + nbytes]
            if len(result) != nbytes:
                raise EOFError("Unexpected end of data")
            self.pos += nbytes
            return bytes(result)
        return bytes(self.read_bits(8) for _ in range(nbytes))
