"""Render plans: the ordered draw operations for one invoice."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from .layout import ACCENT, FOOTER, MUTED, ImageBox, InvoiceLayout, Rule, TextBox
from .pdf_constants import COLOR_FOOTER, COLOR_MUTED, COLOR_RULE, COLOR_TEXT, MARGIN, PAGE_SIZE, RULE_WIDTH
from .surface import DrawingSurface


@dataclass(frozen=True)
class NewDocument:
    page_size: Tuple[float, float]
    margin: float


@dataclass(frozen=True)
class DrawText:
    content: str
    x: float
    y: float
    width: Optional[float] = None
    align: str = "L"
    size: int = 10
    color: str = COLOR_TEXT
    bold: bool = False


@dataclass(frozen=True)
class DrawLine:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = COLOR_RULE
    width: float = RULE_WIDTH


@dataclass(frozen=True)
class DrawImage:
    x: float
    y: float
    width: float
    height: float


Operation = Union[NewDocument, DrawText, DrawLine, DrawImage]


@dataclass(frozen=True)
class RenderPlan:
    operations: Tuple[Operation, ...]

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self):
        return iter(self.operations)

    def texts(self) -> Tuple[str, ...]:
        return tuple(op.content for op in self.operations if isinstance(op, DrawText))


def _color_for(role: str, accent: str) -> str:
    if role == ACCENT:
        return accent
    if role == FOOTER:
        return COLOR_FOOTER
    if role == MUTED:
        return COLOR_MUTED
    return COLOR_TEXT


def emit_render_plan(layout: InvoiceLayout) -> RenderPlan:
    operations = [NewDocument(page_size=PAGE_SIZE, margin=MARGIN)]
    for band in layout.bands:
        for item in band.items:
            if isinstance(item, TextBox):
                operations.append(
                    DrawText(
                        content=item.text,
                        x=item.x,
                        y=item.y,
                        width=item.width,
                        align=item.align,
                        size=item.size,
                        color=_color_for(item.role, layout.accent_color),
                        bold=item.bold,
                    )
                )
            elif isinstance(item, Rule):
                operations.append(DrawLine(item.x1, item.y, item.x2, item.y))
            elif isinstance(item, ImageBox):
                operations.append(DrawImage(item.x, item.y, item.width, item.height))
    return RenderPlan(tuple(operations))


def draw_plan(plan: RenderPlan, surface: DrawingSurface, asset: Any) -> bytes:
    """Replay ``plan`` on ``surface`` and return the finished document.

    ``asset`` is whatever the surface accepts for images: a path, a file-like
    object or raw bytes.
    """
    for op in plan.operations:
        if isinstance(op, NewDocument):
            surface.new_document(op.page_size, op.margin)
        elif isinstance(op, DrawText):
            surface.draw_text(
                op.content,
                op.x,
                op.y,
                width=op.width,
                align=op.align,
                size=op.size,
                color=op.color,
                bold=op.bold,
            )
        elif isinstance(op, DrawLine):
            surface.draw_line(op.x1, op.y1, op.x2, op.y2, color=op.color, width=op.width)
        elif isinstance(op, DrawImage):
            surface.draw_image(asset, op.x, op.y, width=op.width)
    return surface.finalize()
