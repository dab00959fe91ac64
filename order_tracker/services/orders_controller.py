# order_tracker/services/orders_controller.py
"""
Orders page logic, independent of the widget toolkit.

Holds the loaded orders and the form mode, runs save/delete/load against the
store and tells an OrdersView what to show. Every mutation is followed by a
full reload; the list is never patched locally.
"""

import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from pydantic import ValidationError

from order_tracker.models.order import (
    OrderForm, apply_delivery_rule, build_payload, hydrate_form, validation_message,
)

from .api_client import ApiError
from .attachments import AttachmentFile, AttachmentUploader
from .auth_service import AuthService
from .order_filters import ALL, FilterValues, date_filter_options, filtered_orders, resolve_date_selection
from .order_summary import OrdersViewModel, build_view_model
from .orders_service import OrdersService
from .session_gate import SessionGate, is_admin

logger = logging.getLogger(__name__)

NEW_ORDER_TITLE = "New Order"
IDLE_MESSAGE = "—"
EDITING_MESSAGE = "Editing…"
SAVING_MESSAGE = "Saving…"
SAVED_MESSAGE = "Saved ✅"
SAVE_FAILED_MESSAGE = "Save failed"
LOAD_HINT = "If your table is empty, this is normal. If you have existing rows, check RLS + policy + table name."


class OrdersView(Protocol):
    def show_error(self, message: str) -> None: ...
    def clear_error(self) -> None: ...
    def set_user_label(self, text: str) -> None: ...
    def set_admin_visible(self, visible: bool) -> None: ...
    def filter_values(self) -> FilterValues: ...
    def set_date_options(self, options: Sequence[Tuple[str, str]], selected: str) -> None: ...
    def render(self, view_model: OrdersViewModel) -> None: ...
    def read_form(self) -> OrderForm: ...
    def write_form(self, form: OrderForm) -> None: ...
    def set_shipping_enabled(self, enabled: bool) -> None: ...
    def set_form_title(self, text: str) -> None: ...
    def set_form_message(self, text: str) -> None: ...
    def set_save_enabled(self, enabled: bool) -> None: ...
    def selected_attachment(self) -> Optional[AttachmentFile]: ...
    def clear_attachment(self) -> None: ...
    def confirm(self, message: str) -> bool: ...


@dataclass
class OrderViewState:
    orders: List[Dict[str, Any]] = field(default_factory=list)
    editing_id: Optional[Any] = None
    active_tab: str = ALL


def order_label(record: Dict[str, Any]) -> str:
    return str(record.get("order_id") or record.get("id"))


def load_error_message(err: Exception) -> str:
    return f"Failed to load orders.\n\n{err}\n\n{LOAD_HINT}"


def single_flight(name: str):
    """Reject a trigger of `name` while the same operation is still running."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            if name in self._in_flight:
                logger.warning(f"{name} already in progress, ignoring repeated request")
                return None
            self._in_flight.add(name)
            try:
                return func(self, *args, **kwargs)
            finally:
                self._in_flight.discard(name)

        return wrapper

    return decorator


class OrdersController:
    def __init__(
        self,
        auth: AuthService,
        orders_service: OrdersService,
        uploader: AttachmentUploader,
        view: OrdersView,
        redirect: Callable[[], None],
        admin_emails: Iterable[str] = (),
    ):
        self.auth = auth
        self.orders_service = orders_service
        self.uploader = uploader
        self.view = view
        self.redirect = redirect
        self.admin_emails = tuple(admin_emails)
        self.gate = SessionGate(auth, view, redirect)
        self.state = OrderViewState()
        self._in_flight: Set[str] = set()

    # ---------- lifecycle ----------
    def start(self) -> bool:
        """
        Orders-flow initializer. True when the page should be shown, which
        includes a failed session check (the error stays on the page and
        Refresh retries). False only when the user was sent to login.
        """
        if self.gate.require_session() is None:
            if self.gate.redirected:
                return False
            self.reset_form()
            return True
        self.gate.watch_sign_out()
        self.handle_delivery_change()
        self.load_orders()
        self.reset_form()
        return True

    def close(self) -> None:
        self.gate.close()

    def sign_out(self) -> None:
        watching = self.gate.watching
        self.auth.sign_out()
        if not watching:
            self.redirect()

    # ---------- store ----------
    @single_flight("load")
    def load_orders(self) -> None:
        session = self.gate.require_session()
        if session is None:
            return
        self.gate.watch_sign_out()

        self.view.set_user_label(session.email or "Logged in")
        self.view.set_admin_visible(is_admin(session.email, self.admin_emails))

        try:
            rows = self.orders_service.list_orders()
        except ApiError as e:
            self.view.show_error(load_error_message(e))
            self.state.orders = []
        else:
            self.state.orders = list(rows) if isinstance(rows, list) else []
            logger.info(f"Loaded {len(self.state.orders)} orders")

        self.rebuild_date_options()
        self.render()

    # ---------- filtering / rendering ----------
    def visible_orders(self) -> List[Dict[str, Any]]:
        return filtered_orders(self.state.orders, self.state.active_tab, self.view.filter_values())

    def rebuild_date_options(self) -> None:
        options = date_filter_options(self.state.orders)
        current = self.view.filter_values().date or ALL
        self.view.set_date_options(options, resolve_date_selection(current, options))

    def render(self) -> None:
        self.view.render(build_view_model(self.state.orders, self.visible_orders()))

    def set_active_tab(self, tab: str) -> None:
        self.state.active_tab = (tab or ALL).lower()
        self.render()

    # ---------- form ----------
    def handle_delivery_change(self) -> None:
        form = self.view.read_form()
        editable = apply_delivery_rule(form)
        if not editable:
            self.view.write_form(form)
        self.view.set_shipping_enabled(editable)

    def reset_form(self, message: str = IDLE_MESSAGE) -> None:
        self.state.editing_id = None
        self.view.write_form(OrderForm())
        self.view.set_form_title(NEW_ORDER_TITLE)
        self.handle_delivery_change()
        self.view.set_form_message(message)
        self.view.clear_attachment()

    def start_edit(self, record: Dict[str, Any]) -> None:
        self.state.editing_id = record.get("id")
        self.view.set_form_title(f"Edit Order ({order_label(record)})")
        self.view.write_form(hydrate_form(record))
        self.handle_delivery_change()
        self.view.set_form_message(EDITING_MESSAGE)

    # ---------- persistence ----------
    @single_flight("save")
    def save_order(self) -> bool:
        self.view.clear_error()
        self.view.set_form_message(SAVING_MESSAGE)
        self.view.set_save_enabled(False)
        try:
            session = self.gate.require_session()
            if session is None:
                return False

            try:
                payload = build_payload(self.view.read_form(), created_by_email=session.email)

                attachment = self.view.selected_attachment()
                if attachment is not None:
                    url = self.uploader.upload_attachment(attachment)
                    if url:
                        payload["attachment_url"] = url

                if self.state.editing_id is not None:
                    self.orders_service.update_order(self.state.editing_id, payload)
                else:
                    self.orders_service.create_order(payload)
            except ValidationError as e:
                return self._save_failed(validation_message(e))
            except (ApiError, ValueError) as e:
                return self._save_failed(str(e))

            self.view.set_form_message(SAVED_MESSAGE)
            self.load_orders()
            self.reset_form(message=SAVED_MESSAGE)
            return True
        finally:
            self.view.set_save_enabled(True)
            self.view.clear_attachment()

    def _save_failed(self, message: str) -> bool:
        logger.error(f"Saving order failed: {message}")
        self.view.show_error(message)
        self.view.set_form_message(SAVE_FAILED_MESSAGE)
        return False

    @single_flight("delete")
    def delete_order(self, record: Dict[str, Any]) -> bool:
        if not self.view.confirm(f"Delete order {order_label(record)}?"):
            return False

        try:
            self.orders_service.delete_order(record.get("id"))
        except ApiError as e:
            self.view.show_error(str(e) or "Delete failed")
            return False

        logger.info(f"Deleted order {order_label(record)}")
        self.load_orders()
        self.reset_form()
        return True
