"""fpdf2-backed drawing surface."""

from __future__ import annotations

import io
from typing import Any, Optional, Tuple

from fpdf import FPDF  # type: ignore

from .errors import RenderError
from .fonts import FontManager
from .formatting import hex_to_rgb


class PdfSurface:
    """Draws plan operations onto a single fpdf2 page.

    When ``output_path`` is set, ``finalize`` writes the document there and
    returns the bytes read back from disk.
    """

    def __init__(self, output_path: Optional[str] = None) -> None:
        self.output_path = output_path
        self.pdf: Optional[FPDF] = None
        self.fonts: Optional[FontManager] = None

    def _require_pdf(self) -> FPDF:
        if self.pdf is None:
            raise RenderError("Drawing surface used before new_document().")
        return self.pdf

    def _require_fonts(self) -> FontManager:
        if self.fonts is None:
            raise RenderError("Drawing surface used before new_document().")
        return self.fonts

    def new_document(self, page_size: Tuple[float, float], margin: float) -> None:
        self.pdf = FPDF(unit="pt", format=page_size)
        self.pdf.set_auto_page_break(False)
        self.pdf.set_margins(margin, margin, margin)
        # Text is placed at exact coordinates, so no inner cell padding.
        self.pdf.c_margin = 0
        self.pdf.add_page()
        self.fonts = FontManager(self.pdf)

    def draw_text(
        self,
        content: str,
        x: float,
        y: float,
        width: Optional[float] = None,
        align: str = "L",
        size: int = 10,
        color: str = "#000000",
        bold: bool = False,
    ) -> None:
        pdf = self._require_pdf()
        fonts = self._require_fonts()
        if width is None:
            width = pdf.w - pdf.r_margin - x
        fonts.draw_block(x, y, width, content, size, hex_to_rgb(color), align=align, bold=bold)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: float) -> None:
        pdf = self._require_pdf()
        pdf.set_draw_color(*hex_to_rgb(color))
        pdf.set_line_width(width)
        pdf.line(x1, y1, x2, y2)

    def draw_image(self, asset: Any, x: float, y: float, width: float) -> None:
        pdf = self._require_pdf()
        if isinstance(asset, (bytes, bytearray)):
            asset = io.BytesIO(asset)
        pdf.image(asset, x, y, w=width)

    def finalize(self) -> bytes:
        pdf = self._require_pdf()
        if self.output_path:
            pdf.output(self.output_path)
            with open(self.output_path, "rb") as handle:
                return handle.read()
        return bytes(pdf.output())
