"""Font management module for text rendering on overlays.

This module provides the FontManager class which handles font loading and text
measurement for the overlay composer.
"""

import logging
import os
from typing import Dict, Optional, Tuple

from PIL import ImageDraw, ImageFont

logger = logging.getLogger(__name__)

# Tried in order when no custom font is given
REGULAR_FONTS = ("DejaVuSans.ttf", "Arial.ttf", "Helvetica.ttc")
BOLD_FONTS = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "Arialbd.ttf")

MIN_FIT_SIZE = 12


class FontManager:
    """Loads fonts by size and measures text."""

    def __init__(self, font_file: Optional[str] = None):
        """Initialize the font manager.

        Args:
            font_file: Optional path to a TrueType font file (.ttf), used for
                regular and bold text alike
        """
        self.font_file = font_file if font_file and os.path.exists(font_file) else None
        if font_file and self.font_file is None:
            logger.warning(f"Font file not found: {font_file}, using system fonts")
        self._fonts: Dict[Tuple[int, bool], ImageFont.ImageFont] = {}

    def get_font(self, size: int, bold: bool = False):
        """Return a font of ``size`` pixels, loading it on first use."""
        key = (size, bold)
        if key not in self._fonts:
            self._fonts[key] = self._load(size, bold)
        return self._fonts[key]

    def _load(self, size: int, bold: bool):
        candidates = ((self.font_file,) if self.font_file else ()) + (BOLD_FONTS if bold else REGULAR_FONTS)
        for candidate in candidates:
            try:
                font = ImageFont.truetype(candidate, size)
                logger.debug(f"Loaded font {candidate} with size {size}")
                return font
            except OSError:
                continue
        logger.info(f"No TrueType font available, using Pillow's default font at size {size}")
        return ImageFont.load_default(size=size)

    def get_text_size(self, draw: ImageDraw.ImageDraw, text: str, size: int,
                      bold: bool = False) -> Tuple[int, int]:
        """Get the (width, height) of text when rendered."""
        left, top, right, bottom = draw.textbbox((0, 0), text, font=self.get_font(size, bold))
        return right - left, bottom - top

    def fit_size(self, draw: ImageDraw.ImageDraw, text: str, size: int, max_width: int,
                 bold: bool = False, min_size: int = MIN_FIT_SIZE) -> int:
        """Return the largest size up to ``size`` at which ``text`` fits ``max_width``.

        Never goes below ``min_size``; the text is kept whole.
        """
        while size > min_size and self.get_text_size(draw, text, size, bold)[0] > max_width:
            size -= 1
        return size

    def fit_text(self, draw: ImageDraw.ImageDraw, text: str, size: int, max_width: int,
                 bold: bool = False) -> str:
        """Shorten ``text`` with an ellipsis until it fits ``max_width``."""
        if self.get_text_size(draw, text, size, bold)[0] <= max_width:
            return text
        shortened = text
        while shortened and self.get_text_size(draw, shortened + "...", size, bold)[0] > max_width:
            shortened = shortened[:-1]
        return shortened.rstrip() + "..."
