from dataclasses import replace

import pytest

from order_tracker.models.order import OrderForm
from order_tracker.services.api_client import ApiError
from order_tracker.services.auth_service import SIGNED_OUT, Session
from order_tracker.services.order_filters import ALL, FilterValues
from order_tracker.services.orders_controller import OrdersController


class FakeView:
    """In-memory OrdersView that remembers what it was told"""

    def __init__(self):
        self.form = OrderForm()
        self.filters = FilterValues()
        self.errors = []
        self.error = ""
        self.user_label = None
        self.admin_visible = None
        self.date_options = []
        self.date_selected = ALL
        self.view_model = None
        self.render_count = 0
        self.shipping_enabled = True
        self.form_title = ""
        self.form_message = ""
        self.messages = []
        self.save_enabled = True
        self.save_enabled_history = []
        self.attachment = None
        self.attachment_cleared = 0
        self.confirm_answer = True
        self.confirm_prompts = []

    def show_error(self, message):
        self.error = message
        self.errors.append(message)

    def clear_error(self):
        self.error = ""

    def set_user_label(self, text):
        self.user_label = text

    def set_admin_visible(self, visible):
        self.admin_visible = visible

    def filter_values(self):
        return self.filters

    def set_date_options(self, options, selected):
        self.date_options = list(options)
        self.date_selected = selected
        self.filters = replace(self.filters, date=selected)

    def render(self, view_model):
        self.view_model = view_model
        self.render_count += 1

    def read_form(self):
        return replace(self.form)

    def write_form(self, form):
        self.form = replace(form)

    def set_shipping_enabled(self, enabled):
        self.shipping_enabled = enabled

    def set_form_title(self, text):
        self.form_title = text

    def set_form_message(self, text):
        self.form_message = text
        self.messages.append(text)

    def set_save_enabled(self, enabled):
        self.save_enabled = enabled
        self.save_enabled_history.append(enabled)

    def selected_attachment(self):
        return self.attachment

    def clear_attachment(self):
        self.attachment = None
        self.attachment_cleared += 1

    def confirm(self, message):
        self.confirm_prompts.append(message)
        return self.confirm_answer


class FakeAuth:
    def __init__(self, session=None, error=None):
        self.session = session
        self.error = error
        self.listeners = []
        self.signed_out = False

    def get_session(self):
        if self.error:
            raise self.error
        return self.session

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)

    def sign_out(self):
        self.signed_out = True
        self.session = None
        for cb in list(self.listeners):
            cb(SIGNED_OUT, None)


class FakeOrdersService:
    def __init__(self, orders=None):
        self.orders = [dict(o) for o in orders or []]
        self.calls = []
        self.list_error = None
        self.write_error = None
        self.delete_error = None

    def list_orders(self):
        self.calls.append(("list",))
        if self.list_error:
            raise self.list_error
        return [dict(o) for o in self.orders]

    def create_order(self, payload):
        self.calls.append(("create", payload))
        if self.write_error:
            raise self.write_error
        self.orders.insert(0, dict(payload, id=len(self.orders) + 100))

    def update_order(self, order_id, payload):
        self.calls.append(("update", order_id, payload))
        if self.write_error:
            raise self.write_error
        for o in self.orders:
            if o.get("id") == order_id:
                o.update(payload)

    def delete_order(self, order_id):
        self.calls.append(("delete", order_id))
        if self.delete_error:
            raise self.delete_error
        self.orders = [o for o in self.orders if o.get("id") != order_id]

    def writes(self):
        return [c for c in self.calls if c[0] in ("create", "update", "delete")]


class FakeUploader:
    def __init__(self, url="https://cdn.example/orders/1.jpg", error=None):
        self.url = url
        self.error = error
        self.uploaded = []

    def upload_attachment(self, file):
        if file is None:
            return None
        self.uploaded.append(file)
        if self.error:
            raise self.error
        return self.url


SAMPLE_ORDERS = [
    {"id": 1, "order_id": "SO-001", "customer_name": "Ana Cruz", "order_details": "2x Widget Set",
     "status": "pending", "delivery_method": "jnt", "order_date": "2024-01-02",
     "paid_product": 500, "paid_shipping": 80, "notes": None},
    {"id": 2, "order_id": "SO-002", "customer_name": "Bo Reyes", "order_details": "1x Gadget",
     "status": "shipped", "delivery_method": "walkin", "order_date": "2024-01-01",
     "paid_product": 250, "paid_shipping": 0, "notes": "pickup friday"},
    {"id": 3, "order_id": None, "customer_name": "Cy Lim", "order_details": "3x Gizmo",
     "status": "PENDING", "delivery_method": None, "order_date": "2024-01-02",
     "paid_product": "120.50", "paid_shipping": None, "fb_profile": "fb.com/cylim"},
]


@pytest.fixture
def session():
    return Session(access_token="tok", refresh_token="ref", expires_at=None,
                   user={"id": "u1", "email": "Owner@Example.com"})


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def auth(session):
    return FakeAuth(session)


@pytest.fixture
def orders_service():
    return FakeOrdersService(SAMPLE_ORDERS)


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def redirects():
    return []


@pytest.fixture
def controller(auth, orders_service, uploader, view, redirects):
    return OrdersController(
        auth, orders_service, uploader, view,
        redirect=lambda: redirects.append("login"),
        admin_emails=["owner@example.com"],
    )


@pytest.fixture
def api_error():
    return ApiError("permission denied for table orders", 401, "42501")
