"""Declarative description of the fields an invoice submission must carry.

The validator walks these tables generically; adding a field means adding a
row here, not another conditional.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Tuple, Union

from .formatting import to_decimal

TEXT = "text"
DATE = "date"
COLOR = "color"
QUANTITY = "quantity"
AMOUNT = "amount"

# Upper bound for quantities, prices and line totals. Invoice totals stay well
# inside the precision Decimal needs to round them to paise.
MAX_VALUE = Decimal("1000000000")


@dataclass(frozen=True)
class Field:
    name: str
    label: str
    required: bool = True
    kind: str = TEXT


@dataclass(frozen=True)
class Section:
    name: str
    label: str
    fields: Tuple[Field, ...]


ItemRule = Callable[[Dict[str, Any]], Optional[str]]


@dataclass(frozen=True)
class Collection:
    name: str
    label: str
    fields: Tuple[Field, ...]
    empty_message: str
    rules: Tuple[ItemRule, ...] = ()


SchemaNode = Union[Field, Section, Collection]


def price_within_mrp(product: Dict[str, Any]) -> Optional[str]:
    try:
        price = to_decimal(product.get("price"))
        mrp = to_decimal(product.get("mrp"))
    except ValueError:
        # Missing or non-numeric values are reported by the field checks.
        return None
    if price > mrp:
        return "Price cannot be greater than MRP"
    return None


def line_total_within_limit(product: Dict[str, Any]) -> Optional[str]:
    try:
        quantity = to_decimal(product.get("quantity"))
        mrp = to_decimal(product.get("mrp"))
    except ValueError:
        return None
    if quantity * mrp > MAX_VALUE:
        return "Line total is too large"
    return None


PRODUCT_FIELDS: Tuple[Field, ...] = (
    Field("name", "name"),
    Field("brand", "brand", required=False),
    Field("batch", "batch", required=False),
    Field("expiry", "expiry date", required=False, kind=DATE),
    Field("quantity", "quantity", kind=QUANTITY),
    Field("mrp", "MRP", kind=AMOUNT),
    Field("price", "price", kind=AMOUNT),
)

INVOICE_SCHEMA: Tuple[SchemaNode, ...] = (
    Field("storeName", "Store name"),
    Section(
        "storeDetails",
        "Store details",
        (
            Field("address", "Store address"),
            Field("city", "Store city"),
            Field("phone", "Store phone"),
            Field("email", "Store email"),
        ),
    ),
    Section(
        "invoiceDetails",
        "Invoice details",
        (
            Field("invoiceNumber", "Invoice number"),
            Field("orderNumber", "Order number"),
            Field("date", "Invoice date", kind=DATE),
            Field("time", "Invoice time"),
        ),
    ),
    Section(
        "customer",
        "Customer details",
        (
            Field("name", "Customer name"),
            Field("address", "Customer address"),
            Field("city", "Customer city"),
            Field("phone", "Customer phone"),
            Field("email", "Customer email", required=False),
        ),
    ),
    Section(
        "deliveryPartner",
        "Delivery partner",
        (
            Field("name", "Delivery partner name"),
            Field("trackingId", "Tracking ID"),
            Field("estimatedDelivery", "Estimated delivery date"),
        ),
    ),
    Field("color", "accent color", required=False, kind=COLOR),
    Field("paymentMethod", "Payment method"),
    Field("termsAndConditions", "Terms and conditions"),
    Collection(
        "products",
        "Product",
        PRODUCT_FIELDS,
        empty_message="At least one product is required",
        rules=(price_within_mrp, line_total_within_limit),
    ),
)
