# order_tracker/services/orders_service.py
"""
Service layer for the orders table.
All reads and writes of order rows go through here.
"""

import logging
from typing import Any, Callable, Dict, List

from .api_client import ApiError, SupabaseClient

logger = logging.getLogger(__name__)

ORDERS_TABLE = "orders"

# columns the app fills in when present but the table may not have
OPTIONAL_COLUMNS = ("created_by_email",)


def _missing_column(err: ApiError, column: str) -> bool:
    text = str(err).lower()
    if err.code == "PGRST204" and column in text:
        return True
    return column in text and "column" in text and ("not find" in text or "does not exist" in text)


class OrdersService:
    """Service class for order rows"""

    def __init__(self, client: SupabaseClient, table: str = ORDERS_TABLE):
        self.client = client
        self.table = table

    def list_orders(self) -> List[Dict[str, Any]]:
        """Every order, most recently updated first."""
        return self.client.select(self.table, "*", order="last_updated", ascending=False)

    def _write(self, send: Callable[[Dict[str, Any]], None], payload: Dict[str, Any]) -> None:
        try:
            send(payload)
        except ApiError as e:
            dropped = [c for c in OPTIONAL_COLUMNS if c in payload and _missing_column(e, c)]
            if not dropped:
                raise
            logger.warning(f"Table {self.table} has no {', '.join(dropped)} column, retrying without it")
            send({k: v for k, v in payload.items() if k not in dropped})

    def create_order(self, payload: Dict[str, Any]) -> None:
        self._write(lambda p: self.client.insert(self.table, p), payload)

    def update_order(self, order_id: Any, payload: Dict[str, Any]) -> None:
        self._write(lambda p: self.client.update(self.table, p, {"id": order_id}), payload)

    def delete_order(self, order_id: Any) -> None:
        self.client.delete(self.table, {"id": order_id})
