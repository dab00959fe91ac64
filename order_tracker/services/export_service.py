# order_tracker/services/export_service.py
"""
Export of the visible orders list to Excel or CSV.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from order_tracker.models.order import DEFAULT_DELIVERY, DEFAULT_STATUS

from .order_summary import order_total, to_amount

logger = logging.getLogger(__name__)

SHEET_NAME = "Orders"


def prepare_export_data(orders: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """One flat row per order, with spreadsheet-friendly column names."""
    rows = []
    for order in orders:
        rows.append({
            "Order ID": order.get("order_id") or order.get("id", ""),
            "Customer": order.get("customer_name") or "",
            "FB Profile": order.get("fb_profile") or "",
            "Details": order.get("order_details") or "",
            "Status": str(order.get("status") or DEFAULT_STATUS),
            "Delivery": str(order.get("delivery_method") or DEFAULT_DELIVERY),
            "Order Date": order.get("order_date") or "",
            "Paid Product": to_amount(order.get("paid_product")),
            "Paid Shipping": to_amount(order.get("paid_shipping")),
            "Total": order_total(order),
            "Notes": order.get("notes") or "",
            "Attachment": order.get("attachment_url") or "",
        })
    return rows


def export_to_file(rows: List[Dict[str, Any]], file_path: str) -> Tuple[bool, str]:
    """Write rows to .csv or .xlsx depending on the extension. Returns (ok, message)."""
    df = pd.DataFrame(rows)
    try:
        if file_path.lower().endswith(".csv"):
            df.to_csv(file_path, index=False, encoding="utf-8-sig")
        else:
            with pd.ExcelWriter(file_path, engine="xlsxwriter") as writer:
                df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
                ws = writer.sheets[SHEET_NAME]
                for col_idx, col in enumerate(df.columns):
                    ws.set_column(col_idx, col_idx, max(12, min(50, len(str(col)) + 6)))
    except (OSError, ValueError) as e:
        logger.error(f"Export to {file_path} failed: {e}")
        return False, f"Export failed:\n{e}"

    logger.info(f"Exported {len(rows)} orders to {file_path}")
    return True, f"Saved {len(rows)} orders to:\n{file_path}"
