"""Band-by-band placement of invoice content on the fixed A4 page."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from .formatting import DATETIME_PATTERN, format_currency, format_date, format_quantity, split_terms
from .models import InvoiceRequest, InvoiceTotals
from .pdf_constants import (
    BILL_TO_X,
    COLUMN_WIDTHS,
    DELIVERY_X,
    FONT_SIZE_FOOTNOTE,
    FONT_SIZE_HEADING,
    FONT_SIZE_NORMAL,
    FONT_SIZE_SMALL,
    FONT_SIZE_STORE,
    FONT_SIZE_TITLE,
    FOOTER_GENERATED_Y,
    FOOTER_THANKS_Y,
    HEADER_LINE_H,
    HEADER_RULE_Y,
    ITEM_ROW_H,
    LOGO_W,
    LOGO_X,
    LOGO_Y,
    META_INFO_Y,
    META_TITLE_Y,
    META_X,
    PARTY_INFO_Y,
    PARTY_LABEL_Y,
    PARTY_LINE_H,
    STORE_INFO_Y,
    STORE_NAME_Y,
    STORE_X,
    SUMMARY_GAP,
    SUMMARY_LABEL_X,
    SUMMARY_ROW_H,
    SUMMARY_RULE_GAP,
    SUMMARY_VALUE_X,
    TABLE_HEADERS,
    TABLE_RULE_Y,
    TABLE_TOP,
    TERMS_GAP,
    TERMS_LINE_H,
    TERMS_TEXT_GAP,
    USABLE_W,
    X_LEFT,
    X_RIGHT,
)

# Style roles resolved to colours when the plan is emitted.
ACCENT = "accent"
BODY = "body"
FOOTER = "footer"
MUTED = "muted"


@dataclass(frozen=True)
class TextBox:
    text: str
    x: float
    y: float
    size: int
    role: str = BODY
    width: Optional[float] = None
    align: str = "L"
    bold: bool = False


@dataclass(frozen=True)
class Rule:
    y: float
    x1: float = X_LEFT
    x2: float = X_RIGHT


@dataclass(frozen=True)
class ImageBox:
    x: float
    y: float
    width: float
    height: float


Placement = Union[TextBox, Rule, ImageBox]


@dataclass(frozen=True)
class Band:
    name: str
    top: float
    bottom: float
    items: Tuple[Placement, ...]


@dataclass(frozen=True)
class RowLayout:
    index: int
    y: float
    item_total: Decimal


@dataclass(frozen=True)
class InvoiceLayout:
    bands: Tuple[Band, ...]
    rows: Tuple[RowLayout, ...]
    totals: InvoiceTotals
    accent_color: str
    terms_bottom: float

    @property
    def overflows(self) -> bool:
        """True when the terms band runs into the pinned footer."""
        return self.terms_bottom > FOOTER_THANKS_Y

    def band(self, name: str) -> Band:
        for band in self.bands:
            if band.name == name:
                return band
        raise KeyError(name)


def logo_height(logo_size: Tuple[int, int], width: float = LOGO_W) -> float:
    pixel_w, pixel_h = logo_size
    if pixel_w <= 0 or pixel_h <= 0:
        return width
    return round(width * pixel_h / pixel_w, 2)


class LayoutEngine:
    """Computes absolute positions for every block of a single-page invoice.

    The engine is pure: the same invoice, logo size and timestamp always give
    an equal layout. Rows advance by a fixed height and terms lines are not
    re-flowed, so very long inputs run past the footer; ``overflows`` reports
    that case instead of paginating.
    """

    def layout(
        self,
        invoice: InvoiceRequest,
        logo_size: Tuple[int, int],
        generated_at: datetime,
    ) -> InvoiceLayout:
        header = self._header_band(invoice, logo_size)
        parties = self._parties_band(invoice)
        table, rows, rows_end = self._table_band(invoice)
        totals = invoice.totals
        summary, summary_top = self._summary_band(invoice, totals, rows_end)
        terms = self._terms_band(invoice, summary_top)
        footer = self._footer_band(invoice, generated_at)

        return InvoiceLayout(
            bands=(header, parties, table, summary, terms, footer),
            rows=rows,
            totals=totals,
            accent_color=invoice.color,
            terms_bottom=terms.bottom,
        )

    def _header_band(self, invoice: InvoiceRequest, logo_size: Tuple[int, int]) -> Band:
        store = invoice.store_details
        details = invoice.invoice_details
        logo = ImageBox(LOGO_X, LOGO_Y, LOGO_W, logo_height(logo_size))

        items: List[Placement] = [
            logo,
            TextBox(invoice.store_name, STORE_X, STORE_NAME_Y, FONT_SIZE_STORE, ACCENT, bold=True),
        ]
        store_lines = [store.address, store.city, f"Phone: {store.phone}", f"Email: {store.email}"]
        for i, line in enumerate(store_lines):
            items.append(TextBox(line, STORE_X, STORE_INFO_Y + i * HEADER_LINE_H, FONT_SIZE_NORMAL))

        items.append(TextBox("TAX INVOICE", META_X, META_TITLE_Y, FONT_SIZE_TITLE, ACCENT, bold=True))
        meta_lines = [
            f"Invoice No: {details.invoice_number}",
            f"Order No: {details.order_number}",
            f"Date: {format_date(details.date)}",
            f"Time: {details.time}",
        ]
        for i, line in enumerate(meta_lines):
            items.append(TextBox(line, META_X, META_INFO_Y + i * HEADER_LINE_H, FONT_SIZE_NORMAL))

        items.append(Rule(HEADER_RULE_Y))
        return Band("header", LOGO_Y, HEADER_RULE_Y, tuple(items))

    def _parties_band(self, invoice: InvoiceRequest) -> Band:
        customer = invoice.customer
        partner = invoice.delivery_partner

        bill_to = [customer.name, customer.address, customer.city, f"Phone: {customer.phone}"]
        if customer.email:
            bill_to.append(f"Email: {customer.email}")
        delivery = [
            f"Partner: {partner.name}",
            f"Tracking ID: {partner.tracking_id}",
            f"Estimated Delivery: {partner.estimated_delivery}",
        ]

        items: List[Placement] = [
            TextBox("Bill To:", BILL_TO_X, PARTY_LABEL_Y, FONT_SIZE_HEADING, ACCENT),
        ]
        for i, line in enumerate(bill_to):
            items.append(TextBox(line, BILL_TO_X, PARTY_INFO_Y + i * PARTY_LINE_H, FONT_SIZE_NORMAL))
        items.append(TextBox("Delivery Details:", DELIVERY_X, PARTY_LABEL_Y, FONT_SIZE_HEADING, ACCENT))
        for i, line in enumerate(delivery):
            items.append(TextBox(line, DELIVERY_X, PARTY_INFO_Y + i * PARTY_LINE_H, FONT_SIZE_NORMAL))

        bottom = PARTY_INFO_Y + max(len(bill_to), len(delivery)) * PARTY_LINE_H
        return Band("parties", PARTY_LABEL_Y, bottom, tuple(items))

    def _table_band(self, invoice: InvoiceRequest) -> Tuple[Band, Tuple[RowLayout, ...], float]:
        items: List[Placement] = []
        x = X_LEFT
        for header, width in zip(TABLE_HEADERS, COLUMN_WIDTHS):
            items.append(TextBox(header, x, TABLE_TOP, FONT_SIZE_NORMAL, ACCENT, width=width))
            x += width
        items.append(Rule(TABLE_RULE_Y))

        rows: List[RowLayout] = []
        y = TABLE_TOP + ITEM_ROW_H
        for index, product in enumerate(invoice.products):
            item_total = product.item_total
            expiry = format_date(product.expiry) if product.expiry else ""
            cells = (
                f"{product.name}\n{product.brand}",
                f"{product.batch}\n{expiry}",
                format_quantity(product.quantity),
                format_currency(product.mrp),
                format_currency(product.price),
                format_currency(item_total),
            )
            x = X_LEFT
            for cell, width in zip(cells, COLUMN_WIDTHS):
                items.append(TextBox(cell, x, y, FONT_SIZE_SMALL, width=width))
                x += width
            rows.append(RowLayout(index=index, y=y, item_total=item_total))
            # Fixed row pitch; wrapped cells are not measured.
            y += ITEM_ROW_H

        return Band("table", TABLE_TOP, y, tuple(items)), tuple(rows), y

    def _summary_band(
        self,
        invoice: InvoiceRequest,
        totals: InvoiceTotals,
        rows_end: float,
    ) -> Tuple[Band, float]:
        rule_y = rows_end + SUMMARY_RULE_GAP
        top = rows_end + SUMMARY_GAP
        rows = (
            ("Total MRP:", format_currency(totals.total_mrp)),
            ("Total Discount:", format_currency(totals.total_discount)),
            ("Net Amount:", format_currency(totals.total_amount)),
            ("Payment Method:", invoice.payment_method),
        )

        items: List[Placement] = [Rule(rule_y)]
        value_width = X_RIGHT - SUMMARY_VALUE_X
        for i, (label, value) in enumerate(rows):
            y = top + i * SUMMARY_ROW_H
            items.append(TextBox(label, SUMMARY_LABEL_X, y, FONT_SIZE_NORMAL))
            items.append(TextBox(value, SUMMARY_VALUE_X, y, FONT_SIZE_NORMAL, width=value_width, align="R"))

        bottom = top + len(rows) * SUMMARY_ROW_H
        return Band("summary", rule_y, bottom, tuple(items)), top

    def _terms_band(self, invoice: InvoiceRequest, summary_top: float) -> Band:
        heading_y = summary_top + TERMS_GAP
        items: List[Placement] = [
            TextBox("Terms and Conditions:", X_LEFT, heading_y, FONT_SIZE_HEADING, ACCENT),
        ]
        y = heading_y + TERMS_TEXT_GAP
        for i, line in enumerate(split_terms(invoice.terms_and_conditions)):
            items.append(TextBox(line, X_LEFT, y + i * TERMS_LINE_H, FONT_SIZE_SMALL, width=USABLE_W))

        line_count = len(items) - 1
        bottom = y + line_count * TERMS_LINE_H
        return Band("terms", heading_y, bottom, tuple(items))

    def _footer_band(self, invoice: InvoiceRequest, generated_at: datetime) -> Band:
        items: Tuple[Placement, ...] = (
            TextBox(
                f"Thank you for choosing {invoice.store_name}",
                X_LEFT,
                FOOTER_THANKS_Y,
                FONT_SIZE_NORMAL,
                FOOTER,
                width=USABLE_W,
                align="C",
            ),
            TextBox(
                f"Generated on {format_date(generated_at, DATETIME_PATTERN)}",
                X_LEFT,
                FOOTER_GENERATED_Y,
                FONT_SIZE_FOOTNOTE,
                MUTED,
                width=USABLE_W,
                align="C",
            ),
        )
        return Band("footer", FOOTER_THANKS_Y, FOOTER_GENERATED_Y + FONT_SIZE_FOOTNOTE, items)


def layout_invoice(
    invoice: InvoiceRequest,
    logo_size: Tuple[int, int],
    generated_at: datetime,
) -> InvoiceLayout:
    return LayoutEngine().layout(invoice, logo_size, generated_at)
