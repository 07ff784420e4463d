"""Field presence and business-rule checks for invoice submissions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .formatting import is_hex_color, parse_date, to_decimal
from .schema import AMOUNT, COLOR, DATE, INVOICE_SCHEMA, MAX_VALUE, QUANTITY, Collection, Field, SchemaNode, Section


@dataclass(frozen=True)
class FieldError:
    path: str
    message: str

    def __str__(self) -> str:
        return self.message


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _capitalize(label: str) -> str:
    return label[:1].upper() + label[1:]


def _check_value(field: Field, value: Any) -> Optional[str]:
    if isinstance(value, (dict, list)):
        return f"Invalid {field.label}"

    if field.kind == DATE:
        if parse_date(value if isinstance(value, str) else str(value)) is None:
            return f"Invalid {field.label}"
    elif field.kind == COLOR:
        if not is_hex_color(value):
            return f"Invalid {field.label}"
    elif field.kind in (QUANTITY, AMOUNT):
        try:
            number = to_decimal(value)
        except ValueError:
            return f"{_capitalize(field.label)} must be a number"
        if field.kind == QUANTITY and number <= 0:
            return f"{_capitalize(field.label)} must be greater than zero"
        if field.kind == AMOUNT and number < 0:
            return f"{_capitalize(field.label)} cannot be negative"
        if number > MAX_VALUE:
            return f"{_capitalize(field.label)} is too large"
    return None


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _check_nodes(
    values: Dict[str, Any],
    nodes: Sequence[SchemaNode],
    path: str,
    prefix: str,
    errors: List[FieldError],
) -> None:
    for node in nodes:
        node_path = _join(path, node.name)

        if isinstance(node, Section):
            section = values.get(node.name)
            if section is None:
                section = {}
            elif not isinstance(section, dict):
                errors.append(FieldError(node_path, f"{prefix}Invalid {node.label}"))
                section = {}
            # A missing section reports each of its required fields.
            _check_nodes(section, node.fields, node_path, prefix, errors)
            continue

        if isinstance(node, Collection):
            _check_collection(values.get(node.name), node, node_path, errors)
            continue

        value = values.get(node.name)
        if is_blank(value):
            if node.required:
                errors.append(FieldError(node_path, f"{prefix}Missing {node.label}"))
            continue

        message = _check_value(node, value)
        if message:
            errors.append(FieldError(node_path, f"{prefix}{message}"))


def _check_collection(
    items: Any,
    node: Collection,
    path: str,
    errors: List[FieldError],
) -> None:
    if not isinstance(items, list) or not items:
        errors.append(FieldError(path, node.empty_message))
        return

    for index, item in enumerate(items, start=1):
        item_path = f"{path}[{index - 1}]"
        prefix = f"{node.label} {index}: "
        if not isinstance(item, dict):
            errors.append(FieldError(item_path, f"{prefix}Invalid {node.label.lower()}"))
            continue
        _check_nodes(item, node.fields, item_path, prefix, errors)
        for rule in node.rules:
            message = rule(item)
            if message:
                errors.append(FieldError(item_path, f"{prefix}{message}"))


def validate_invoice(
    data: Any,
    logo: Optional[object] = None,
    require_logo: bool = True,
) -> List[FieldError]:
    """Return every problem with ``data``; an empty list means it can be rendered.

    All checks run on every call so callers get the complete set in one
    round trip. ``logo`` is the already-checked upload, or None when the
    request carried no logo.
    """
    if not isinstance(data, dict):
        return [FieldError("", "Invoice data must be an object")]

    errors: List[FieldError] = []
    _check_nodes(data, INVOICE_SCHEMA, "", "", errors)
    if require_logo and logo is None:
        errors.append(FieldError("logo", "Missing logo"))
    return errors
