"""The drawing-surface capability a render plan is replayed against."""

from __future__ import annotations

from typing import Any, Optional, Protocol, Tuple


class DrawingSurface(Protocol):
    def new_document(self, page_size: Tuple[float, float], margin: float) -> None:
        ...

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
        ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: float) -> None:
        ...

    def draw_image(self, asset: Any, x: float, y: float, width: float) -> None:
        ...

    def finalize(self) -> bytes:
        ...
