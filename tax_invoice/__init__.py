"""Public package API for tax invoice generation."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional


def render_invoice(
    data: Dict[str, Any],
    logo_bytes: bytes,
    mime_type: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> bytes:
    from .rendering import render_invoice as _render_invoice

    return _render_invoice(data, logo_bytes, mime_type=mime_type, generated_at=generated_at)


def run(host: str = "0.0.0.0", port: int = 3000) -> None:
    from .server import run as _run

    _run(host, port)


__all__ = ["render_invoice", "run"]
