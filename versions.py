from enum import IntEnum

from modes import Mode

MIN_VERSION = 1
MAX_VERSION = 40


class ErrorCorrection(IntEnum):
    """Error-correction level; the value indexes the codeword table."""

    L = 0
    M = 1
    Q = 2
    H = 3


# Total error-correction codewords (all blocks) per version, for L/M/Q/H.
EC_CODEWORDS = (
    (7, 10, 13, 17), (10, 16, 22, 28), (15, 26, 36, 44), (20, 36, 52, 64),
    (26, 48, 72, 88), (36, 64, 96, 112), (40, 72, 108, 130), (48, 88, 132, 156),
    (60, 110, 160, 192), (72, 130, 192, 224), (80, 150, 224, 264), (96, 176, 260, 308),
    (104, 198, 288, 352), (120, 216, 320, 384), (132, 240, 360, 432), (144, 280, 408, 480),
    (168, 308, 448, 532), (180, 338, 504, 588), (196, 364, 546, 650), (224, 416, 600, 700),
    (224, 442, 644, 750), (252, 476, 690, 816), (270, 504, 750, 900), (300, 560, 810, 960),
    (312, 588, 870, 1050), (336, 644, 952, 1110), (360, 700, 1020, 1200), (390, 728, 1050, 1260),
    (420, 784, 1140, 1350), (450, 812, 1200, 1440), (480, 868, 1290, 1530), (510, 924, 1350, 1620),
    (540, 980, 1440, 1710), (570, 1036, 1530, 1800), (570, 1064, 1590, 1890), (600, 1120, 1680, 1980),
    (630, 1204, 1770, 2100), (660, 1260, 1860, 2220), (720, 1316, 1950, 2310), (750, 1372, 2040, 2430),
)

# Character-count field widths for versions 1-9, 10-26 and 27-40.
CHAR_COUNT_WIDTHS = {
    Mode.NUMERIC: (10, 12, 14),
    Mode.ALPHANUMERIC: (9, 11, 13),
    Mode.BYTE: (8, 16, 16),
    Mode.KANJI: (8, 10, 12),
}


def raw_data_modules(number: int) -> int:
    """Count the modules of a symbol left for data and EC codewords.

    That is everything except finder, timing and alignment patterns,
    format and version information.

    :param number: Version number (1-40).
    :type number: int
    :returns: Number of modules, including remainder bits.
    :rtype: int
    """
    result = (16 * number + 128) * number + 64
    if number >= 2:
        num_align = number // 7 + 2
        result -= (25 * num_align - 10) * num_align - 55
        if number >= 7:
            result -= 36
    return result


class Version:
    """A QR symbol version paired with an error-correction level.

    Exposes the two lookups the frame encoder needs: the data capacity and
    the width of the character-count field.

    :ivar number: Version number, 1 to 40.
    :type number: int
    :ivar error_correction: Error-correction level.
    :type error_correction: ErrorCorrection
    """

    def __init__(self, number: int, error_correction: ErrorCorrection = ErrorCorrection.L):
        """Create a version.

        :param number: Version number, 1 to 40.
        :type number: int
        :param error_correction: Error-correction level.
        :type error_correction: ErrorCorrection
        :returns: None
        :rtype: None
        :raises ValueError: If ``number`` is outside 1-40.
        """
        if not MIN_VERSION <= number <= MAX_VERSION:
            raise ValueError(
                f"Version must be between {MIN_VERSION} and {MAX_VERSION}, got {number}"
            )
        self.number = number
        self.error_correction = ErrorCorrection(error_correction)

    def __repr__(self):
        return f"Version({self.number}-{self.error_correction.name})"

    def __eq__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return (self.number, self.error_correction) == (other.number, other.error_correction)

    def __hash__(self):
        return hash((self.number, self.error_correction))

    def total_capacity_bits(self) -> int:
        """Return the data capacity of the symbol in bits.

        :returns: Data codewords times 8; always a multiple of 8.
        :rtype: int
        """
        total_codewords = raw_data_modules(self.number) // 8
        ec = EC_CODEWORDS[self.number - 1][self.error_correction]
        return (total_codewords - ec) * 8

    def char_count_field_width(self, mode: Mode) -> int:
        """Return the character-count field width for ``mode``.

        :param mode: Encoding mode.
        :type mode: Mode
        :returns: Width in bits.
        :rtype: int
        """
        if self.number <= 9:
            band = 0
        elif self.number <= 26:
            band = 1
        else:
            band = 2
        return CHAR_COUNT_WIDTHS[Mode(mode)][band]
