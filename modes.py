from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Dict, Optional, Tuple, Union

from bitops import BitReader, BitSequence, BitWriter

Text = Union[str, bytes]

MODE_INDICATOR_WIDTH = 4


class Mode(IntEnum):
    """QR data encoding modes.

    Each member's value is its 4-bit mode indicator.
    """

    NUMERIC = 0b0001
    ALPHANUMERIC = 0b0010
    BYTE = 0b0100
    KANJI = 0b1000

    def indicator_bits(self) -> Tuple[int, int]:
        """Return the mode indicator as ``(value, width)``.

        :returns: Indicator value and its width in bits.
        :rtype: Tuple[int, int]
        """
        return int(self), MODE_INDICATOR_WIDTH


#: Narrowest first; ``classify`` picks the first mode that can hold the text.
CLASSIFY_ORDER = (Mode.NUMERIC, Mode.ALPHANUMERIC, Mode.KANJI, Mode.BYTE)


class UnsupportedModeError(ValueError):
    """No codec is registered for the requested mode."""


class ModeCodec(ABC):
    """Converts text to and from the payload bits of one mode.

    :ivar mode: The mode this codec implements.
    :type mode: Mode
    """

    mode: Mode

    def indicator_bits(self) -> Tuple[int, int]:
        return self.mode.indicator_bits()

    @abstractmethod
    def can_encode(self, text: Text) -> bool:
        """Tell whether ``text`` is representable losslessly in this mode."""

    @abstractmethod
    def char_count(self, text: Text) -> int:
        """Value written into the character-count field for ``text``."""

    @abstractmethod
    def encode_payload(self, text: Text) -> BitSequence:
        """Convert ``text`` into payload bits.

        The bit count must be a pure function of ``char_count(text)``.
        """

    @abstractmethod
    def decode_payload(self, reader: BitReader, count: int) -> bytes:
        """Read the payload of ``count`` characters back from ``reader``."""


class ByteCodec(ModeCodec):
    """8-bit byte mode.

    Text is passed through as raw bytes: ``str`` input is encoded with
    ``encoding`` and ``bytes`` input is used as is. Every byte becomes
    8 payload bits, MSB first, in the original order.

    :ivar encoding: Codec used to turn ``str`` input into bytes.
    :type encoding: str
    """

    mode = Mode.BYTE

    def __init__(self, encoding: str = "utf-8"):
        """Create a byte-mode codec.

        :param encoding: Text encoding for ``str`` input, for example
            ``"utf-8"`` or ``"iso-8859-1"``.
        :type encoding: str
        :returns: None
        :rtype: None
        """
        self.encoding = encoding

    def to_bytes(self, text: Text) -> bytes:
        """Return the raw byte representation of ``text``.

        :param text: Input text or bytes.
        :type text: Union[str, bytes]
        :returns: Bytes to place in the payload.
        :rtype: bytes
        :raises UnicodeEncodeError: If ``text`` cannot be represented in
            ``encoding``.
        """
        if isinstance(text, (bytes, bytearray)):
            return bytes(text)
        return text.encode(self.encoding)

    def can_encode(self, text: Text) -> bool:
        try:
            self.to_bytes(text)
        except UnicodeEncodeError:
            return False
        return True

    def char_count(self, text: Text) -> int:
        # Byte length, not code points: multi-byte characters count per byte.
        return len(self.to_bytes(text))

    def encode_payload(self, text: Text) -> BitSequence:
        writer = BitWriter()
        writer.write_bytes(self.to_bytes(text))
        return writer.to_sequence()

    def decode_payload(self, reader: BitReader, count: int) -> bytes:
        return reader.read_bytes(count)


Codecs = Dict[Mode, ModeCodec]


def default_codecs() -> Codecs:
    """Build a fresh codec table with the codecs available out of the box.

    Only byte mode is provided; numeric, alphanumeric and kanji codecs can
    be added by registering a :class:`ModeCodec` for them.

    :returns: Mapping from mode to codec.
    :rtype: Dict[Mode, ModeCodec]
    """
    return {Mode.BYTE: ByteCodec()}


def get_codec(mode: Mode, codecs: Codecs) -> ModeCodec:
    """Look up the codec for ``mode``.

    :param mode: Mode to look up.
    :type mode: Mode
    :param codecs: Codec table to search.
    :type codecs: Dict[Mode, ModeCodec]
    :returns: The registered codec.
    :rtype: ModeCodec
    :raises UnsupportedModeError: If no codec handles ``mode``.
    """
    try:
        return codecs[mode]
    except KeyError:
        raise UnsupportedModeError(
            f"No codec registered for {Mode(mode).name} mode"
        ) from None


def classify(text: Text, codecs: Optional[Codecs] = None) -> Mode:
    """Choose the narrowest mode able to represent ``text`` losslessly.

    :param text: Input text or bytes.
    :type text: Union[str, bytes]
    :param codecs: Codecs to consider; :func:`default_codecs` when omitted.
    :type codecs: Optional[Dict[Mode, ModeCodec]]
    :returns: Selected mode. With only the byte codec available this is
        always :attr:`Mode.BYTE`.
    :rtype: Mode
    :raises UnsupportedModeError: If no codec can encode ``text``.
    """
    if codecs is None:
        codecs = default_codecs()
    for mode in CLASSIFY_ORDER:
        codec = codecs.get(mode)
        if codec is not None and codec.can_encode(text):
            return mode
    raise UnsupportedModeError("No registered codec can encode the input")
