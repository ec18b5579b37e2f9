"""Tests for display operations (DXYN)."""

import numpy as np
import pytest

from chip8vm import Devices, DummyInput, DummyOutput, SequenceRandomSource, MemoryAccessError
from conftest import run_word, run_words, setup_memory


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state, devices):
        """Test basic sprite drawing without collision."""
        # Simple 2x2 box sprite
        state = setup_memory(fresh_state, 0x300, [0xC0, 0xC0])

        state = run_words(state, [0x600A, 0x6105, 0xA300, 0xD012], devices)

        pixels = devices.output.pixels
        assert pixels[10, 5] and pixels[11, 5]
        assert pixels[10, 6] and pixels[11, 6]
        assert not pixels[12, 5]
        assert pixels.sum() == 4
        assert state.V[15] == 0

    def test_collision_detection(self, fresh_state, devices):
        """Test collision flag when sprite overlaps existing pixels."""
        state = setup_memory(fresh_state, 0x400, [0x80])
        state = run_words(state, [0x6014, 0x610A, 0xA400], devices)

        state = run_word(state, 0xD011, devices)
        assert devices.output.get(20, 10) == 1
        assert state.V[15] == 0

        state = run_word(state, 0xD011, devices)
        assert devices.output.get(20, 10) == 0
        assert state.V[15] == 1

    def test_draw_twice_erases(self, fresh_state, devices):
        """Drawing the same sprite twice restores a blank screen."""
        state = setup_memory(fresh_state, 0x500, [0xF0, 0x90, 0xF0])
        state = run_words(state, [0x6008, 0x610F, 0xA500, 0xD013], devices)
        assert devices.output.pixels.sum() == 10

        state = run_word(state, 0xD013, devices)
        assert not np.any(devices.output.pixels)
        assert state.V[15] == 1

    def test_disjoint_sprites_do_not_collide(self, fresh_state, devices):
        state = setup_memory(fresh_state, 0x500, [0xFF])
        state = run_words(state, [0x6000, 0x6100, 0xA500, 0xD011], devices)

        state = run_words(state, [0x6008, 0xD011], devices)
        assert state.V[15] == 0
        state = run_words(state, [0x6101, 0xD011], devices)
        assert state.V[15] == 0
        assert devices.output.pixels.sum() == 24

    def test_partial_overlap_collides(self, fresh_state, devices):
        """One shared pixel is enough to report a collision."""
        state = setup_memory(fresh_state, 0x500, [0x81])
        state = run_words(state, [0x6000, 0x6100, 0xA500, 0xD011], devices)

        state = run_words(state, [0x6007, 0xD011], devices)

        assert state.V[15] == 1
        assert devices.output.get(7, 0) == 0
        assert devices.output.get(0, 0) == 1
        assert devices.output.get(14, 0) == 1

    def test_font_glyph(self, fresh_state, devices):
        """Draw the built-in glyph for 0."""
        state = run_words(fresh_state, [0x6000, 0xF029, 0xD005], devices)

        expected = np.array([
            [1, 1, 1, 1],
            [1, 0, 0, 1],
            [1, 0, 0, 1],
            [1, 0, 0, 1],
            [1, 1, 1, 1],
        ], dtype=bool)
        assert np.array_equal(devices.output.pixels[:4, :5].T, expected)


class TestScreenBoundaries:
    """Test sprite clipping at the edges of the framebuffer."""

    def test_right_edge_clipping(self, fresh_state, devices):
        """Pixels past x = 63 are dropped by the output."""
        state = setup_memory(fresh_state, 0x600, [0xFF])

        state = run_words(state, [0x603C, 0x6100, 0xA600, 0xD011], devices)

        pixels = devices.output.pixels
        assert all(pixels[x, 0] for x in range(60, 64))
        assert not pixels[0, 0]
        assert pixels.sum() == 4

    def test_bottom_edge_clipping(self, fresh_state, devices):
        """Rows past y = 31 are dropped by the output."""
        state = setup_memory(fresh_state, 0x700, [0x80, 0x80, 0x80])

        state = run_words(state, [0x6000, 0x611E, 0xA700, 0xD013], devices)

        pixels = devices.output.pixels
        assert pixels[0, 30] and pixels[0, 31]
        assert not pixels[0, 0]
        assert pixels.sum() == 2

    def test_coordinates_passed_through(self, fresh_state):
        """The sparse output receives unwrapped coordinates."""
        output = DummyOutput()
        devices = Devices(input=DummyInput(), output=output, random=SequenceRandomSource([0]))
        state = setup_memory(fresh_state, 0x800, [0x80])

        state = run_words(state, [0x6046, 0x6125, 0xA800, 0xD011], devices)

        assert output.get(70, 37) == 1
        assert output.get(6, 5) == 0


class TestSpriteVariations:
    """Test different sprite configurations."""

    def test_different_sprite_heights(self, fresh_state, devices):
        """Only N rows are drawn."""
        state = setup_memory(fresh_state, 0x900, [0x80, 0x40, 0x20, 0x10, 0x08])

        state = run_words(state, [0x600A, 0x6108, 0xA900, 0xD013], devices)

        assert devices.output.get(10, 8) == 1
        assert devices.output.get(11, 9) == 1
        assert devices.output.get(12, 10) == 1
        assert devices.output.get(13, 11) == 0

    def test_zero_height_sprite(self, fresh_state, devices):
        state = run_words(fresh_state, [0x6F01, 0xD000], devices)

        assert not np.any(devices.output.pixels)
        assert state.V[15] == 0

    def test_vf_cleared_without_collision(self, fresh_state, devices):
        """VF is overwritten even when nothing collides."""
        state = setup_memory(fresh_state, 0xB00, [0x80])

        state = run_words(state, [0x6F01, 0x6005, 0x6105, 0xAB00, 0xD011], devices)

        assert state.V[15] == 0

    def test_vf_as_coordinate(self, fresh_state, devices):
        """VF used as a coordinate is read before being overwritten."""
        state = setup_memory(fresh_state, 0xB00, [0x80])

        state = run_words(state, [0x6F03, 0x6002, 0xAB00, 0xDF01], devices)

        assert devices.output.get(3, 2) == 1
        assert state.V[15] == 0

    def test_sprite_past_end_of_memory(self, fresh_state, devices):
        """Reading sprite rows beyond 0xFFF is a fault."""
        state = run_word(fresh_state, 0xAFFE, devices)

        with pytest.raises(MemoryAccessError):
            run_word(state, 0xD003, devices)
