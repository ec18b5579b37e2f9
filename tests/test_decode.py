"""Tests for bit splitting and instruction decoding."""

import pytest

from chip8vm import decode, decode_word, split, split_word, join, InvalidOpcodeError
from chip8vm.instruction import (
    SysCall, ClearScreen, Return, Goto, Call, SkipEqConst, SkipNeqConst, SkipEqReg,
    SetConst, AddConst, SetReg, Or, And, Xor, AddReg, SubReg, ShiftRight, SubRegReversed,
    ShiftLeft, SkipNeqReg, SetI, JumpV0, Rand, Draw, SkipKeyPressed, SkipKeyNotPressed,
    SetRegFromDelay, WaitKey, SetDelay, SetSound, AddToI, SetIToFontAddr, StoreBCD,
    RegDump, RegLoad
)


class TestBitFields:
    """Test splitting words into fields."""

    def test_split_fields(self):
        fields = split(0xAB, 0xCD)
        assert fields.raw == 0xABCD
        assert fields.opcode == 0xA
        assert fields.x == 0xB
        assert fields.y == 0xC
        assert fields.n == 0xD
        assert fields.nn == 0xCD
        assert fields.nnn == 0xBCD

    def test_nibbles_and_bytes(self):
        fields = split_word(0x1234)
        assert fields.nibbles == (0x1, 0x2, 0x3, 0x4)
        assert fields.high == 0x12
        assert fields.low == 0x34

    def test_join(self):
        assert join(0x12, 0x34) == 0x1234
        assert join(0x00, 0xFF) == 0x00FF

    def test_split_matches_split_word(self):
        assert split(0xD1, 0x2F) == split_word(0xD12F)


DECODE_CASES = [
    (0x00E0, ClearScreen()),
    (0x00EE, Return()),
    (0x0123, SysCall(0x123)),
    (0x1ABC, Goto(0xABC)),
    (0x2DEF, Call(0xDEF)),
    (0x3A42, SkipEqConst(0xA, 0x42)),
    (0x4B17, SkipNeqConst(0xB, 0x17)),
    (0x5120, SkipEqReg(0x1, 0x2)),
    (0x6C99, SetConst(0xC, 0x99)),
    (0x7D01, AddConst(0xD, 0x01)),
    (0x8AB0, SetReg(0xA, 0xB)),
    (0x8AB1, Or(0xA, 0xB)),
    (0x8AB2, And(0xA, 0xB)),
    (0x8AB3, Xor(0xA, 0xB)),
    (0x8AB4, AddReg(0xA, 0xB)),
    (0x8AB5, SubReg(0xA, 0xB)),
    (0x8AB6, ShiftRight(0xA)),
    (0x8AB7, SubRegReversed(0xA, 0xB)),
    (0x8ABE, ShiftLeft(0xA)),
    (0x9340, SkipNeqReg(0x3, 0x4)),
    (0xA123, SetI(0x123)),
    (0xB456, JumpV0(0x456)),
    (0xC7F0, Rand(0x7, 0xF0)),
    (0xD125, Draw(0x1, 0x2, 0x5)),
    (0xE59E, SkipKeyPressed(0x5)),
    (0xE6A1, SkipKeyNotPressed(0x6)),
    (0xF107, SetRegFromDelay(0x1)),
    (0xF20A, WaitKey(0x2)),
    (0xF315, SetDelay(0x3)),
    (0xF418, SetSound(0x4)),
    (0xF51E, AddToI(0x5)),
    (0xF629, SetIToFontAddr(0x6)),
    (0xF733, StoreBCD(0x7)),
    (0xF855, RegDump(0x8)),
    (0xF965, RegLoad(0x9)),
]


class TestDecode:
    """Test decoding of every opcode."""

    @pytest.mark.parametrize("word,expected", DECODE_CASES)
    def test_decode_word(self, word, expected):
        assert decode_word(word) == expected

    @pytest.mark.parametrize("word,expected", DECODE_CASES)
    def test_decode_bytes(self, word, expected):
        assert decode(word >> 8, word & 0xFF) == expected

    @pytest.mark.parametrize("word,expected", DECODE_CASES)
    def test_decoded_operands_in_range(self, word, expected):
        assert decode_word(word).validate() == expected

    def test_every_family_covered(self):
        assert len({type(expected) for _, expected in DECODE_CASES}) == 35

    def test_shift_ignores_y(self):
        assert decode_word(0x8006) == decode_word(0x80F6) == ShiftRight(0x0)

    def test_zero_word_is_syscall(self):
        assert decode_word(0x0000) == SysCall(0x000)


class TestInvalidOpcodes:
    """Test words that match no instruction."""

    @pytest.mark.parametrize("word", [
        0x5121,  # 5XY0 with N != 0
        0x912F,  # 9XY0 with N != 0
        0x8AB8, 0x8AB9, 0x8ABA, 0x8ABF,  # unassigned ALU operations
        0xE19F, 0xE1A0,  # unknown key operations
        0xF100, 0xF108, 0xF130, 0xF175, 0xF1FF,  # unknown misc operations
    ])
    def test_invalid_opcode_raises(self, word):
        with pytest.raises(InvalidOpcodeError) as exc_info:
            decode_word(word)
        assert exc_info.value.word == word
        assert f"0x{word:04X}" in str(exc_info.value)
