"""Bit-field extraction for 16-bit CHIP-8 instruction words."""

from chex import dataclass

from chip8vm.constants import ADDRESS_MASK, BYTE_MASK, WORD_MASK


@dataclass(frozen=True)
class BitFields:
    """A 16-bit instruction word split into its addressable fields."""
    raw: int     # Full 16-bit word
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    @property
    def nibbles(self) -> tuple[int, int, int, int]:
        """The four nibbles, most significant first."""
        return self.opcode, self.x, self.y, self.n

    @property
    def high(self) -> int:
        return self.raw >> 8

    @property
    def low(self) -> int:
        return self.nn


def join(high: int, low: int) -> int:
    """Pack two bytes into a 16-bit word."""
    return ((high & BYTE_MASK) << 8) | (low & BYTE_MASK)


def split_word(word: int) -> BitFields:
    """Split a 16-bit word into its fields."""
    word = int(word) & WORD_MASK
    return BitFields(
        raw=word,
        opcode=(word & 0xF000) >> 12,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nn=word & BYTE_MASK,
        nnn=word & ADDRESS_MASK
    )


def split(high: int, low: int) -> BitFields:
    """Split the two bytes of an instruction into its fields."""
    return split_word(join(int(high), int(low)))
