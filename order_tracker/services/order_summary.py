# order_tracker/services/order_summary.py
"""
Display values derived from the loaded orders: KPIs, list rows, labels.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from order_tracker.models.order import DEFAULT_DELIVERY, DEFAULT_STATUS

CURRENCY = "₱"
DETAILS_PREVIEW_CHARS = 140


def to_amount(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def money(value: Any) -> str:
    text = f"{to_amount(value):,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return CURRENCY + text


def order_total(order: Dict[str, Any]) -> float:
    return to_amount(order.get("paid_product")) + to_amount(order.get("paid_shipping"))


def count_label(n: int) -> str:
    return f"{n} order{'' if n == 1 else 's'}"


@dataclass(frozen=True)
class Kpis:
    total: str
    paid: str
    pending: str


def compute_kpis(orders: Sequence[Dict[str, Any]]) -> Kpis:
    paid = sum(order_total(o) for o in orders)
    pending = sum(1 for o in orders if str(o.get("status") or "").lower() == "pending")
    return Kpis(total=str(len(orders)), paid=money(paid), pending=str(pending))


@dataclass(frozen=True)
class OrderRow:
    record: Dict[str, Any]
    name: str
    status_badge: str
    delivery_badge: str
    order_id_badge: Optional[str]
    summary: str
    attachment_url: Optional[str]


def build_order_row(order: Dict[str, Any]) -> OrderRow:
    details = re.sub(r"\s+", " ", order.get("order_details") or "")[:DETAILS_PREVIEW_CHARS]
    parts = [
        f"📅 {order['order_date']}" if order.get("order_date") else "",
        f"💰 {money(order_total(order))}",
        details,
    ]
    return OrderRow(
        record=order,
        name=order.get("customer_name") or "(No name)",
        status_badge=str(order.get("status") or DEFAULT_STATUS).upper(),
        delivery_badge="🚚 " + str(order.get("delivery_method") or DEFAULT_DELIVERY).upper(),
        order_id_badge=order.get("order_id") or None,
        summary=" • ".join(p for p in parts if p),
        attachment_url=order.get("attachment_url") or None,
    )


@dataclass(frozen=True)
class OrdersViewModel:
    count_label: str
    kpis: Kpis
    rows: List[OrderRow]


def build_view_model(orders: Sequence[Dict[str, Any]], visible: Sequence[Dict[str, Any]]) -> OrdersViewModel:
    """KPIs cover every loaded order; rows and the count cover the visible ones."""
    return OrdersViewModel(
        count_label=count_label(len(visible)),
        kpis=compute_kpis(orders),
        rows=[build_order_row(o) for o in visible],
    )
