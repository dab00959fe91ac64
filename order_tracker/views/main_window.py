# order_tracker/views/main_window.py
from typing import Callable, Iterable, Optional, Sequence, Tuple

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QLabel, QVBoxLayout, QHBoxLayout, QFrame, QPushButton,
    QMessageBox, QSplitter
)
from PySide6.QtCore import Qt, Signal

from order_tracker.models.order import OrderForm
from order_tracker.services.attachments import AttachmentFile, AttachmentUploader
from order_tracker.services.auth_service import AuthService
from order_tracker.services.order_filters import FilterValues
from order_tracker.services.order_summary import OrdersViewModel
from order_tracker.services.orders_controller import OrdersController
from order_tracker.services.orders_service import OrdersService
from order_tracker.views.widgets.kpi_bar import KpiBar
from order_tracker.views.widgets.order_form_widget import OrderFormWidget
from order_tracker.views.widgets.order_list_widget import OrderListWidget
from order_tracker.views.widgets.orders_export_widget import OrdersExportWidget
from order_tracker.views.widgets.orders_filter_bar import OrdersFilterBar


class MainWindow(QMainWindow):
    """Orders page: list, filters, KPIs and the create/edit form"""

    closed = Signal()

    def __init__(self, auth: AuthService, orders_service: OrdersService, uploader: AttachmentUploader,
                 redirect: Callable[[], None], admin_emails: Iterable[str] = ()):
        super().__init__()
        self.setWindowTitle("Supplier Tracker – Orders")
        self.resize(1280, 800)

        self.setup_ui()
        self.setup_styles()

        self.controller = OrdersController(
            auth, orders_service, uploader, view=self, redirect=redirect, admin_emails=admin_emails
        )
        self.exporter = OrdersExportWidget(self)
        self._connect()

    def setup_ui(self):
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)
        central_layout = QVBoxLayout(central_widget)
        central_layout.setContentsMargins(20, 16, 20, 16)
        central_layout.setSpacing(12)

        # ==== header ====
        header = QFrame(objectName="Header")
        hlayout = QHBoxLayout(header)
        hlayout.setContentsMargins(16, 10, 16, 10)
        title = QLabel("Supplier Tracker", objectName="Title")
        self.user_chip = QLabel("", objectName="UserChip")
        self.btn_refresh = QPushButton("Refresh")
        self.btn_logout = QPushButton("Logout")
        hlayout.addWidget(title)
        hlayout.addStretch()
        hlayout.addWidget(self.user_chip)
        hlayout.addWidget(self.btn_refresh)
        hlayout.addWidget(self.btn_logout)
        central_layout.addWidget(header)

        # ==== error banner ====
        self.error_label = QLabel("", objectName="Error")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        central_layout.addWidget(self.error_label)

        # ==== admin dashboard ====
        self.admin_panel = QFrame(objectName="AdminPanel")
        admin_layout = QVBoxLayout(self.admin_panel)
        admin_layout.setContentsMargins(0, 0, 0, 0)
        admin_layout.addWidget(QLabel("Admin dashboard", objectName="SectionTitle"))
        self.kpi_bar = KpiBar()
        admin_layout.addWidget(self.kpi_bar)
        self.admin_panel.hide()
        central_layout.addWidget(self.admin_panel)

        # ==== filters ====
        self.filter_bar = OrdersFilterBar()
        central_layout.addWidget(self.filter_bar)

        # ==== list + form ====
        splitter = QSplitter(Qt.Horizontal)
        list_side = QWidget()
        list_layout = QVBoxLayout(list_side)
        list_layout.setContentsMargins(0, 0, 0, 0)
        self.count_label = QLabel("0 orders", objectName="CountLabel")
        list_layout.addWidget(self.count_label)
        self.order_list = OrderListWidget()
        list_layout.addWidget(self.order_list, 1)
        splitter.addWidget(list_side)

        self.order_form = OrderFormWidget()
        splitter.addWidget(self.order_form)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        central_layout.addWidget(splitter, 1)

    def setup_styles(self):
        self.setStyleSheet("""
            QMainWindow { background: #f3f4f6; }
            QFrame#Header { background: white; border-radius: 12px; }
            QLabel#Title { font-size: 22px; font-weight: bold; color: #111; }
            QLabel#UserChip { color: #1e40af; background: #dbeafe; border-radius: 10px; padding: 4px 10px; }
            QLabel#SectionTitle { font-weight: 700; color: #374151; }
            QLabel#CountLabel { color: #6b7280; font-weight: 600; }
            QLabel#Error { color:#dc2626; padding:8px; background:#fef2f2; border-radius:8px; }
            QFrame#orderForm { background: white; border: 1px solid #e5e7eb; border-radius: 12px; }
            QLabel#formTitle { font-size: 16px; font-weight: 800; }
            QLabel#mutedLabel { color: #6b7280; }
            QPushButton#Primary { background:#2563eb; color:#fff; border-radius: 8px; padding: 8px 18px; }
            QPushButton#Primary:disabled { background:#93c5fd; }
        """)

    def _connect(self):
        c = self.controller
        self.btn_refresh.clicked.connect(lambda: c.load_orders())
        self.btn_logout.clicked.connect(lambda: c.sign_out())
        self.filter_bar.tab_changed.connect(c.set_active_tab)
        self.filter_bar.filter_changed.connect(lambda: c.render())
        self.filter_bar.export_requested.connect(
            lambda: self.exporter.export_orders(c.visible_orders(), c.state.active_tab)
        )
        self.order_form.save_requested.connect(lambda: c.save_order())
        self.order_form.clear_requested.connect(lambda: c.reset_form())
        self.order_form.delivery_changed.connect(lambda _: c.handle_delivery_change())
        self.order_list.edit_requested.connect(c.start_edit)
        self.order_list.delete_requested.connect(c.delete_order)

    def start(self) -> bool:
        return self.controller.start()

    def closeEvent(self, event):
        self.controller.close()
        super().closeEvent(event)
        self.closed.emit()

    # ---------- OrdersView ----------
    def show_error(self, message: str):
        self.error_label.setText(message or "")
        self.error_label.setVisible(bool(message))

    def clear_error(self):
        self.show_error("")

    def set_user_label(self, text: str):
        self.user_chip.setText(text)

    def set_admin_visible(self, visible: bool):
        self.admin_panel.setVisible(visible)

    def filter_values(self) -> FilterValues:
        return self.filter_bar.values()

    def set_date_options(self, options: Sequence[Tuple[str, str]], selected: str):
        self.filter_bar.set_date_options(options, selected)

    def render(self, view_model: OrdersViewModel):
        self.count_label.setText(view_model.count_label)
        self.kpi_bar.set_kpis(view_model.kpis)
        self.order_list.set_rows(view_model.rows)
        self.filter_bar.update_export_count(len(view_model.rows))

    def read_form(self) -> OrderForm:
        return self.order_form.read()

    def write_form(self, form: OrderForm):
        self.order_form.write(form)

    def set_shipping_enabled(self, enabled: bool):
        self.order_form.paid_shipping.setEnabled(enabled)

    def set_form_title(self, text: str):
        self.order_form.title.setText(text)

    def set_form_message(self, text: str):
        self.order_form.message.setText(text)

    def set_save_enabled(self, enabled: bool):
        self.order_form.btn_save.setEnabled(enabled)

    def selected_attachment(self) -> Optional[AttachmentFile]:
        return self.order_form.selected_attachment()

    def clear_attachment(self):
        self.order_form.clear_attachment()

    def confirm(self, message: str) -> bool:
        reply = QMessageBox.question(self, "Confirm", message, QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        return reply == QMessageBox.Yes
