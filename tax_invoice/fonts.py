"""Font discovery and text rendering helpers."""

from __future__ import annotations

import os
import threading
from typing import List, Optional, Tuple

from fpdf import FPDF  # type: ignore

from .errors import RenderError

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

LINE_HEIGHT_FACTOR = 1.2


def find_font_path(env_var: str, candidates: List[str]) -> Optional[str]:
    override = os.getenv(env_var)
    if override and os.path.exists(override):
        return override

    for path in candidates:
        if os.path.exists(path):
            return path
    return None


FONT_INIT_LOCK = threading.Lock()


class FontManager:
    """Registers a Unicode TTF family so the rupee sign renders."""

    FAMILY = "InvoiceFont"
    BUNDLED_REGULAR = os.path.join(_PROJECT_ROOT, "fonts", "DejaVuSans.ttf")
    BUNDLED_BOLD = os.path.join(_PROJECT_ROOT, "fonts", "DejaVuSans-Bold.ttf")
    SYSTEM_REGULAR_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/TTF/DejaVuSans.ttf",
        "/Library/Fonts/DejaVuSans.ttf",
    ]
    SYSTEM_BOLD_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
        "/Library/Fonts/DejaVuSans-Bold.ttf",
    ]

    @classmethod
    def regular_font_path(cls) -> Optional[str]:
        return find_font_path(
            "INVOICE_FONT_PATH",
            [cls.BUNDLED_REGULAR, *cls.SYSTEM_REGULAR_CANDIDATES],
        )

    def __init__(self, pdf: FPDF) -> None:
        self.pdf = pdf
        self.family = self.FAMILY
        self.has_bold = False

        regular_path = self.regular_font_path()
        if not regular_path:
            raise RenderError(
                "Unicode font not found. Set INVOICE_FONT_PATH to a valid TTF file."
            )

        bold_path = find_font_path(
            "INVOICE_FONT_BOLD_PATH",
            [self.BUNDLED_BOLD, *self.SYSTEM_BOLD_CANDIDATES],
        )

        with FONT_INIT_LOCK:
            self.pdf.add_font(self.FAMILY, "", regular_path)
            if bold_path:
                self.pdf.add_font(self.FAMILY, "B", bold_path)
                self.has_bold = True

    def set_font(self, size: int, bold: bool = False) -> None:
        style = "B" if bold and self.has_bold else ""
        self.pdf.set_font(self.family, style, size)

    def draw_block(
        self,
        x: float,
        y: float,
        width: float,
        text: str,
        size: int,
        color: Tuple[int, int, int],
        align: str = "L",
        bold: bool = False,
    ) -> None:
        """Draw ``text`` with its top edge at ``y``, wrapping inside ``width``."""
        self.pdf.set_text_color(*color)
        self.set_font(size, bold=bold)
        self.pdf.set_xy(x, y)
        self.pdf.multi_cell(width, size * LINE_HEIGHT_FACTOR, text, align=align)
