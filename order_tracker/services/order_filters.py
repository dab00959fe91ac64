# order_tracker/services/order_filters.py
"""
Filtering for the orders list.
Pure functions over the loaded orders; the UI decides what the filter values are.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from order_tracker.models.order import DEFAULT_DELIVERY, DEFAULT_STATUS

ALL = "all"
ALL_DATES_LABEL = "All Dates"

SEARCH_FIELDS = ("order_id", "customer_name", "fb_profile", "order_details", "notes")


@dataclass(frozen=True)
class FilterValues:
    status: str = ALL
    date: str = ALL
    query: str = ""


def _haystack(order: Dict[str, Any]) -> str:
    return " ".join(str(order[f]) for f in SEARCH_FIELDS if order.get(f)).lower()


def matches(order: Dict[str, Any], active_tab: str, filters: FilterValues) -> bool:
    dm = str(order.get("delivery_method") or DEFAULT_DELIVERY).lower()
    os_ = str(order.get("status") or DEFAULT_STATUS).lower()

    if active_tab != ALL and dm != active_tab:
        return False
    if filters.status != ALL and os_ != filters.status:
        return False
    if filters.date != ALL and str(order.get("order_date") or "") != filters.date:
        return False

    q = (filters.query or "").strip().lower()
    if not q:
        return True
    return q in _haystack(order)


def filtered_orders(orders: Sequence[Dict[str, Any]], active_tab: str = ALL,
                    filters: FilterValues = FilterValues()) -> List[Dict[str, Any]]:
    """Orders passing every filter, in their loaded order."""
    return [o for o in orders if matches(o, active_tab or ALL, filters)]


def date_filter_options(orders: Sequence[Dict[str, Any]]) -> List[Tuple[str, str]]:
    """(value, label) pairs: the 'All Dates' sentinel, then each order date, newest first."""
    dates = {str(o["order_date"]) for o in orders if o.get("order_date")}
    options = [(ALL, ALL_DATES_LABEL)]
    options.extend((d, d) for d in sorted(dates, reverse=True))
    return options


def resolve_date_selection(current: str, options: Sequence[Tuple[str, str]]) -> str:
    values = {value for value, _ in options}
    return current if current in values else ALL
