"""Invoice rendering: validation, layout, plan emission and drawing."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .config import OUTPUT_DIR, UPLOAD_DIR
from .errors import InvoiceError, RenderError, ValidationError
from .layout import LayoutEngine
from .models import InvoiceRequest, LogoAsset
from .plan import RenderPlan, draw_plan, emit_render_plan
from .storage import RenderWorkspace
from .surface import DrawingSurface
from .uploads import inspect_logo
from .validation import validate_invoice

logger = logging.getLogger(__name__)


def build_render_plan(
    data: Dict[str, Any],
    logo: Optional[LogoAsset],
    generated_at: Optional[datetime] = None,
) -> RenderPlan:
    """Validate ``data`` and lay it out; raises ValidationError with every problem."""
    errors = validate_invoice(data, logo)
    # A missing logo is already among the errors.
    if errors or logo is None:
        raise ValidationError(errors)

    invoice = InvoiceRequest.from_dict(data)
    try:
        layout = LayoutEngine().layout(invoice, logo.size, generated_at or datetime.now())
    except InvoiceError:
        raise
    except Exception as exc:
        raise RenderError(f"Layout failed: {exc}") from exc
    if layout.overflows:
        logger.warning(
            "Invoice %s content reaches the footer (%d products, terms end at y=%.0f)",
            invoice.invoice_details.invoice_number,
            len(invoice.products),
            layout.terms_bottom,
        )
    return emit_render_plan(layout)


def _draw(plan: RenderPlan, surface: DrawingSurface, asset: Any) -> bytes:
    try:
        return draw_plan(plan, surface, asset)
    except InvoiceError:
        raise
    except Exception as exc:
        raise RenderError(f"Drawing surface failed: {exc}") from exc


def render_invoice(
    data: Dict[str, Any],
    logo_bytes: bytes,
    mime_type: Optional[str] = None,
    generated_at: Optional[datetime] = None,
    surface: Optional[DrawingSurface] = None,
) -> bytes:
    """Render an invoice in memory and return the PDF bytes."""
    logo = inspect_logo(logo_bytes, mime_type)
    plan = build_render_plan(data, logo, generated_at)
    if surface is None:
        from .pdf_surface import PdfSurface

        surface = PdfSurface()
    return _draw(plan, surface, logo.data)


def generate_invoice_file(
    data: Dict[str, Any],
    logo: LogoAsset,
    token: str,
    upload_dir: str = UPLOAD_DIR,
    output_dir: str = OUTPUT_DIR,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Render through temporary files named by ``token``.

    The uploaded logo and the generated PDF are removed before returning,
    whether the render succeeded or not.
    """
    from .pdf_surface import PdfSurface

    with RenderWorkspace(upload_dir, output_dir, token) as workspace:
        logo_path = workspace.save_logo(logo.data, logo.extension)
        plan = build_render_plan(data, logo, generated_at)
        surface = PdfSurface(output_path=workspace.output_path)
        pdf_bytes = _draw(plan, surface, logo_path)
    logger.info("Generated invoice %s (%d bytes)", token, len(pdf_bytes))
    return pdf_bytes
