from typing import Optional, Tuple, Union

from bitops import BitReader, BitSequence, BitWriter
from modes import (
    MODE_INDICATOR_WIDTH,
    Codecs,
    Mode,
    ModeCodec,
    Text,
    classify,
    default_codecs,
    get_codec,
)

#: Pad codewords appended after the terminator, cycled from index 0.
PAD_CODEWORDS = (0xEC, 0x11)

#: Upper bound of the terminator: four zero bits.
TERMINATOR_WIDTH = 4


class FrameError(ValueError):
    """Base error for frames that cannot be built or read."""


class DataTooLargeError(FrameError):
    """The character count does not fit in the count field."""


class CapacityError(FrameError):
    """Header and payload exceed the data capacity of the version."""


class FrameEncoder:
    """Builds the data region bit stream of a QR symbol.

    The frame is laid out as mode indicator, character-count field,
    payload, terminator, alignment bits and pad codewords, filling the
    version's data capacity exactly.

    The version argument of every method is any object providing
    ``total_capacity_bits()`` and ``char_count_field_width(mode)``, such as
    :class:`versions.Version`.

    :ivar codecs: Mapping from mode to the codec handling it.
    :type codecs: Dict[Mode, ModeCodec]
    """

    def __init__(self, codecs: Optional[Codecs] = None):
        """Create an encoder.

        :param codecs: Codec table to use; :func:`modes.default_codecs`
            when omitted. The mapping is copied.
        :type codecs: Optional[Dict[Mode, ModeCodec]]
        :returns: None
        :rtype: None
        """
        self.codecs = dict(default_codecs() if codecs is None else codecs)

    def register(self, codec: ModeCodec):
        """Add ``codec`` for its mode, replacing any previous one.

        :param codec: Codec to install.
        :type codec: ModeCodec
        :returns: None
        :rtype: None
        """
        self.codecs[codec.mode] = codec

    def encode(self, text: Text, version) -> Tuple[Mode, BitSequence]:
        """Encode ``text`` in the narrowest mode that can hold it.

        :param text: Input text or raw bytes.
        :type text: Union[str, bytes]
        :param version: Capacity and count-field width provider.
        :returns: Tuple ``(mode, bits)``.
        :rtype: Tuple[Mode, BitSequence]
        :raises DataTooLargeError: If the count overflows its field.
        :raises CapacityError: If the data does not fit in the version.
        """
        mode = classify(text, self.codecs)
        return mode, self.encode_with_mode(text, mode, version)

    def encode_with_mode(self, text: Text, mode: Mode, version) -> BitSequence:
        """Encode ``text`` in the given ``mode``.

        :param text: Input text or raw bytes.
        :type text: Union[str, bytes]
        :param mode: Encoding mode; a codec for it must be registered.
        :type mode: Mode
        :param version: Capacity and count-field width provider.
        :returns: Byte-aligned bits, exactly
            ``version.total_capacity_bits()`` long.
        :rtype: BitSequence
        :raises UnsupportedModeError: If no codec handles ``mode``.
        :raises DataTooLargeError: If the count overflows its field.
        :raises CapacityError: If the data does not fit in the version, or
            the capacity is not a whole number of bytes.
        """
        codec = get_codec(mode, self.codecs)
        capacity = version.total_capacity_bits()
        if capacity < 0 or capacity % 8:
            raise CapacityError(
                f"Capacity must be a non-negative multiple of 8 bits, got {capacity}"
            )

        count = codec.char_count(text)
        count_width = version.char_count_field_width(mode)
        if count >= 1 << count_width:
            raise DataTooLargeError(
                f"Character count {count} does not fit in {count_width} bits"
            )

        output = BitWriter()
        output.write_bits(*codec.indicator_bits())
        output.write_bits(count, count_width)
        output.write_sequence(codec.encode_payload(text))

        if len(output) > capacity:
            raise CapacityError(
                f"Frame needs {len(output)} bits but {version!r} holds {capacity}"
            )

        self._pad(output, capacity)
        return output.to_sequence()

    @staticmethod
    def _pad(output: BitWriter, capacity: int):
        """Fill ``output`` up to ``capacity`` bits.

        Appends the terminator (at most four zero bits), zero bits up to the
        next byte boundary, then alternating pad codewords.

        :param output: Writer holding header and payload.
        :type output: BitWriter
        :param capacity: Target length in bits, a multiple of 8.
        :type capacity: int
        :returns: None
        :rtype: None
        """
        output.write_bits(0, min(capacity - len(output), TERMINATOR_WIDTH))
        output.write_bits(0, (capacity - len(output)) % 8)

        index = 0
        while len(output) < capacity:
            output.write_bits(PAD_CODEWORDS[index % len(PAD_CODEWORDS)], 8)
            index += 1

    def decode(self, data: Union[bytes, BitSequence], version) -> Tuple[Mode, bytes]:
        """Read the mode and payload back out of a frame.

        Padding after the payload is not validated.

        :param data: Frame bits, as produced by :meth:`encode`, or raw bytes.
        :type data: Union[bytes, BitSequence]
        :param version: Count-field width provider used when encoding.
        :returns: Tuple ``(mode, payload_bytes)``.
        :rtype: Tuple[Mode, bytes]
        :raises FrameError: If the mode indicator is unknown.
        :raises UnsupportedModeError: If no codec handles the mode read.
        :raises EOFError: If ``data`` ends inside the header or payload.
        """
        if isinstance(data, BitSequence):
            data = data.to_bytes()
        reader = BitReader(data)

        indicator = reader.read_bits(MODE_INDICATOR_WIDTH)
        try:
            mode = Mode(indicator)
        except ValueError:
            raise FrameError(f"Unknown mode indicator: {indicator:04b}") from None
        codec = get_codec(mode, self.codecs)

        count = reader.read_bits(version.char_count_field_width(mode))
        return mode, codec.decode_payload(reader, count)


_default_encoder = FrameEncoder()


def encode(text: Text, version) -> Tuple[Mode, BitSequence]:
    """Encode ``text`` with the default codecs; see :meth:`FrameEncoder.encode`."""
    return _default_encoder.encode(text, version)


def encode_with_mode(text: Text, mode: Mode, version) -> BitSequence:
    """See :meth:`FrameEncoder.encode_with_mode`."""
    return _default_encoder.encode_with_mode(text, mode, version)


def decode(data: Union[bytes, BitSequence], version) -> Tuple[Mode, bytes]:
    """See :meth:`FrameEncoder.decode`."""
    return _default_encoder.decode(data, version)
