"""Typed views over a validated invoice submission."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from .formatting import quantize_money, to_decimal
from .pdf_constants import DEFAULT_ACCENT


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


@dataclass(frozen=True)
class StoreDetails:
    address: str
    city: str
    phone: str
    email: str


@dataclass(frozen=True)
class InvoiceDetails:
    invoice_number: str
    order_number: str
    date: str
    time: str


@dataclass(frozen=True)
class Customer:
    name: str
    address: str
    city: str
    phone: str
    email: Optional[str] = None


@dataclass(frozen=True)
class DeliveryPartner:
    name: str
    tracking_id: str
    estimated_delivery: str


@dataclass(frozen=True)
class Product:
    name: str
    quantity: Decimal
    mrp: Decimal
    price: Decimal
    brand: str = ""
    batch: str = ""
    expiry: Optional[str] = None

    @property
    def item_total(self) -> Decimal:
        return self.price * self.quantity

    @property
    def mrp_total(self) -> Decimal:
        return self.mrp * self.quantity

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        return cls(
            name=_text(data.get("name")),
            quantity=to_decimal(data.get("quantity")),
            mrp=to_decimal(data.get("mrp")),
            price=to_decimal(data.get("price")),
            brand=_text(data.get("brand")),
            batch=_text(data.get("batch")),
            expiry=_optional_text(data.get("expiry")),
        )


@dataclass(frozen=True)
class InvoiceTotals:
    total_mrp: Decimal
    total_amount: Decimal

    @property
    def total_discount(self) -> Decimal:
        return self.total_mrp - self.total_amount

    @classmethod
    def from_products(cls, products: Iterable[Product]) -> "InvoiceTotals":
        total_mrp = Decimal("0")
        total_amount = Decimal("0")
        for product in products:
            total_mrp += product.mrp_total
            total_amount += product.item_total
        return cls(total_mrp=quantize_money(total_mrp), total_amount=quantize_money(total_amount))


@dataclass(frozen=True)
class InvoiceRequest:
    store_name: str
    store_details: StoreDetails
    invoice_details: InvoiceDetails
    customer: Customer
    delivery_partner: DeliveryPartner
    payment_method: str
    terms_and_conditions: str
    products: Tuple[Product, ...]
    color: str = DEFAULT_ACCENT

    @property
    def totals(self) -> InvoiceTotals:
        return InvoiceTotals.from_products(self.products)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceRequest":
        """Build a request from a payload that has already passed validation."""
        store = data.get("storeDetails") or {}
        details = data.get("invoiceDetails") or {}
        customer = data.get("customer") or {}
        partner = data.get("deliveryPartner") or {}

        return cls(
            store_name=_text(data.get("storeName")),
            store_details=StoreDetails(
                address=_text(store.get("address")),
                city=_text(store.get("city")),
                phone=_text(store.get("phone")),
                email=_text(store.get("email")),
            ),
            invoice_details=InvoiceDetails(
                invoice_number=_text(details.get("invoiceNumber")),
                order_number=_text(details.get("orderNumber")),
                date=_text(details.get("date")),
                time=_text(details.get("time")),
            ),
            customer=Customer(
                name=_text(customer.get("name")),
                address=_text(customer.get("address")),
                city=_text(customer.get("city")),
                phone=_text(customer.get("phone")),
                email=_optional_text(customer.get("email")),
            ),
            delivery_partner=DeliveryPartner(
                name=_text(partner.get("name")),
                tracking_id=_text(partner.get("trackingId")),
                estimated_delivery=_text(partner.get("estimatedDelivery")),
            ),
            payment_method=_text(data.get("paymentMethod")),
            # Leading blank lines are meaningful in the terms band.
            terms_and_conditions=str(data.get("termsAndConditions") or ""),
            products=tuple(Product.from_dict(item) for item in data.get("products") or []),
            color=_optional_text(data.get("color")) or DEFAULT_ACCENT,
        )


@dataclass(frozen=True)
class LogoAsset:
    data: bytes
    mime_type: str
    width: int
    height: int

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def extension(self) -> str:
        return ".png" if self.mime_type == "image/png" else ".jpg"
