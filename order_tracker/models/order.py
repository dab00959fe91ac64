# order_tracker/models/order.py
"""
Order form and write payload.
Records coming back from the store stay plain dicts; the form is a struct of
the text the user sees, and the payload is what gets written.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

STATUSES = ("pending", "paid", "packed", "shipped", "delivered", "cancelled")
DELIVERY_METHODS = ("jnt", "walkin", "lalamove", "lbc")

DEFAULT_STATUS = "pending"
DEFAULT_DELIVERY = "jnt"
WALKIN = "walkin"


@dataclass
class OrderForm:
    customer_name: str = ""
    fb_profile: str = ""
    order_details: str = ""
    status: str = DEFAULT_STATUS
    order_date: str = ""
    delivery_method: str = DEFAULT_DELIVERY
    paid_product: str = ""
    paid_shipping: str = ""
    notes: str = ""


def _text(value: Any) -> str:
    return str(value) if value else ""


def _amount_text(value: Any) -> str:
    # 0 stays visible, missing shows blank
    return "" if value is None else str(value)


def hydrate_form(record: Dict[str, Any]) -> OrderForm:
    return OrderForm(
        customer_name=_text(record.get("customer_name")),
        fb_profile=_text(record.get("fb_profile")),
        order_details=_text(record.get("order_details")),
        status=record.get("status") or DEFAULT_STATUS,
        order_date=_text(record.get("order_date")),
        delivery_method=record.get("delivery_method") or DEFAULT_DELIVERY,
        paid_product=_amount_text(record.get("paid_product")),
        paid_shipping=_amount_text(record.get("paid_shipping")),
        notes=_text(record.get("notes")),
    )


def apply_delivery_rule(form: OrderForm) -> bool:
    """Walk-in orders ship for free. Returns whether the shipping field stays editable."""
    if str(form.delivery_method) == WALKIN:
        form.paid_shipping = "0"
        return False
    return True


class OrderPayload(BaseModel):
    customer_name: str
    fb_profile: Optional[str] = None
    order_details: str
    paid_product: float = Field(default=0, ge=0)
    paid_shipping: float = Field(default=0, ge=0)
    status: str = DEFAULT_STATUS
    order_date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    notes: Optional[str] = None
    delivery_method: str = DEFAULT_DELIVERY
    created_by_email: Optional[str] = None

    @field_validator("customer_name", "order_details", mode="before")
    @classmethod
    def _trim(cls, v):
        return (v or "").strip()

    @field_validator("fb_profile", "notes", "order_date", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("paid_product", "paid_shipping", mode="before")
    @classmethod
    def _blank_amount(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="before")
    @classmethod
    def _walkin_ships_free(cls, data):
        # whatever was left in the shipping field is never parsed for walk-ins
        if isinstance(data, dict) and str(data.get("delivery_method") or "") == WALKIN:
            data = dict(data, paid_shipping=0)
        return data


FIELD_LABELS = {
    "customer_name": "Customer name",
    "fb_profile": "FB profile",
    "order_details": "Order details",
    "paid_product": "Paid (product)",
    "paid_shipping": "Paid (shipping)",
    "status": "Status",
    "order_date": "Order date",
    "notes": "Notes",
    "delivery_method": "Delivery",
}


def validation_message(err: ValidationError) -> str:
    """One 'Field: problem' line per invalid form field."""
    lines = []
    for e in err.errors():
        field = e["loc"][0] if e.get("loc") else ""
        label = FIELD_LABELS.get(str(field), str(field).replace("_", " ").capitalize())
        if e.get("type") == "string_pattern_mismatch":
            msg = "use YYYY-MM-DD"
        elif e.get("type") in ("float_parsing", "float_type"):
            msg = "enter a number"
        else:
            msg = e.get("msg", "invalid value")
        lines.append(f"{label}: {msg}" if label else msg)
    return "\n".join(lines) or "Invalid order"


def build_payload(form: OrderForm, created_by_email: Optional[str] = None) -> Dict[str, Any]:
    """
    Turn form text into the write payload.
    Raises pydantic.ValidationError (a ValueError) for unusable amounts or dates.
    """
    payload = OrderPayload(
        customer_name=form.customer_name,
        fb_profile=form.fb_profile,
        order_details=form.order_details,
        paid_product=form.paid_product,
        paid_shipping=form.paid_shipping,
        status=form.status,
        order_date=form.order_date,
        notes=form.notes,
        delivery_method=form.delivery_method,
        created_by_email=created_by_email,
    )
    return payload.model_dump()
