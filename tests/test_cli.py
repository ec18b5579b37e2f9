"""Tests for the command line configuration."""

import pytest
from omegaconf import OmegaConf
from PIL import Image

from chip8vm import InvalidOpcodeError
from chip8vm.cli import RunConfig, run_from_config
from conftest import program_bytes


@pytest.fixture
def rom(tmp_path):
    path = tmp_path / "draw.ch8"
    # Draw the glyph for 0 at (0, 0), then spin
    path.write_bytes(program_bytes(0x6000, 0xF029, 0xD005, 0x1206))
    return path


def make_config(**overrides):
    return OmegaConf.structured(RunConfig(**overrides))


class TestRunFromConfig:
    """Test headless runs driven by a config."""

    def test_headless_run(self, rom, tmp_path):
        log_file = tmp_path / "run.log"
        cfg = make_config(rom=str(rom), frontend="headless", steps=20, log_file=str(log_file))

        steps = run_from_config(cfg)

        assert steps == 20
        assert "Run finished after 20 steps" in log_file.read_text()

    def test_screenshot(self, rom, tmp_path):
        screenshot = tmp_path / "screen.png"
        cfg = make_config(rom=str(rom), frontend="headless", steps=5, scale=1,
                          screenshot=str(screenshot), log_file=str(tmp_path / "run.log"))

        run_from_config(cfg)

        image = Image.open(screenshot)
        assert image.size == (64, 32)
        assert image.getpixel((0, 0)) == (0, 255, 0)
        assert image.getpixel((1, 1)) == (0, 0, 0)

    def test_unknown_frontend(self, rom):
        cfg = make_config(rom=str(rom), frontend="vga")
        with pytest.raises(ValueError):
            run_from_config(cfg)

    def test_fault_propagates(self, tmp_path):
        bad_rom = tmp_path / "bad.ch8"
        bad_rom.write_bytes(program_bytes(0x8008))
        cfg = make_config(rom=str(bad_rom), frontend="headless", steps=5, log_file=str(tmp_path / "run.log"))

        with pytest.raises(InvalidOpcodeError):
            run_from_config(cfg)

    def test_rom_is_required(self):
        cfg = OmegaConf.structured(RunConfig)
        assert OmegaConf.is_missing(cfg, "rom")
