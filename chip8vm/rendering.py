"""Framebuffer rendering: RGB arrays, colour schemes, PNG and text dumps."""

from typing import Tuple

import numpy as np
from PIL import Image

from chip8vm.io import ArrayOutput

Color = Tuple[int, int, int]

# name -> (on, off)
COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def display_to_rgb(
    display: np.ndarray,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Convert a boolean framebuffer to an RGB image array.

    Args:
        display: Boolean array of shape (width, height), indexed [x, y]
        scale: Size in image pixels of one framebuffer pixel
        on_color: RGB color for set pixels
        off_color: RGB color for cleared pixels

    Returns:
        uint8 array of shape (height*scale, width*scale, 3), rows first
    """
    lit = np.asarray(display, dtype=np.bool_).T[..., np.newaxis]
    rgb = np.where(
        lit, np.array(on_color, dtype=np.uint8), np.array(off_color, dtype=np.uint8)
    )
    if scale > 1:
        rgb = rgb.repeat(scale, axis=0).repeat(scale, axis=1)
    return rgb


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Return the ``(on_color, off_color)`` pair for a named scheme."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}"
        ) from None


def save_frame(
    output: ArrayOutput, filename: str, scale: int = 8, color_scheme: str = "classic"
) -> None:
    """Write the current contents of an output device to an image file."""
    rgb = display_to_rgb(output.pixels, scale, *create_color_scheme(color_scheme))
    Image.fromarray(rgb).save(filename)


def display_to_text(display: np.ndarray, on: str = "█", off: str = " ") -> str:
    """Render a boolean (width, height) display as lines of text."""
    rows = np.asarray(display, dtype=np.bool_).T
    return "\n".join("".join(on if pixel else off for pixel in row) for row in rows)
