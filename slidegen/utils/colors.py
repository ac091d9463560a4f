"""
Color helpers for theme contrast checks and variations.
"""

import colorsys
from typing import Tuple

FALLBACK_RGB = (128, 128, 128)


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB. Unparseable input maps to mid gray."""
    hex_color = (hex_color or "").lstrip("#")
    if len(hex_color) == 3:
        hex_color = "".join(c * 2 for c in hex_color)
    try:
        return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return FALLBACK_RGB


def rgb_to_hex(rgb: Tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(max(0, min(255, int(round(c)))) for c in rgb))


def get_luminance(hex_color: str) -> float:
    """Relative luminance according to WCAG."""
    r, g, b = [x / 255.0 for x in hex_to_rgb(hex_color)]

    # Apply gamma correction
    r = r / 12.92 if r <= 0.03928 else ((r + 0.055) / 1.055) ** 2.4
    g = g / 12.92 if g <= 0.03928 else ((g + 0.055) / 1.055) ** 2.4
    b = b / 12.92 if b <= 0.03928 else ((b + 0.055) / 1.055) ** 2.4

    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def get_contrast_ratio(color1: str, color2: str) -> float:
    lum1 = get_luminance(color1)
    lum2 = get_luminance(color2)
    if lum1 < lum2:
        lum1, lum2 = lum2, lum1
    return (lum1 + 0.05) / (lum2 + 0.05)


def shift_hue(hex_color: str, degrees: float) -> str:
    r, g, b = [x / 255.0 for x in hex_to_rgb(hex_color)]
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    h = (h + degrees / 360.0) % 1.0
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return rgb_to_hex((r * 255, g * 255, b * 255))
