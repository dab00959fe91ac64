# order_tracker/views/widgets/order_form_widget.py
"""
Create / edit form for a single order.
The widget only moves text in and out; OrdersController decides what it means.
"""

from typing import Optional

from PySide6.QtWidgets import (
    QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
    QLineEdit, QTextEdit, QComboBox, QFormLayout, QFileDialog
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QDoubleValidator

from order_tracker.models.order import DELIVERY_METHODS, STATUSES, OrderForm
from order_tracker.services.attachments import AttachmentFile


class OrderFormWidget(QFrame):
    save_requested = Signal()
    clear_requested = Signal()
    delivery_changed = Signal(str)

    def __init__(self):
        super().__init__()
        self.attachment_path: Optional[str] = None
        self.setup_ui()

    def setup_ui(self):
        self.setObjectName("orderForm")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(10)

        self.title = QLabel("New Order")
        self.title.setObjectName("formTitle")
        layout.addWidget(self.title)

        form = QFormLayout()
        form.setLabelAlignment(Qt.AlignLeft)

        self.customer_name = QLineEdit()
        self.fb_profile = QLineEdit()
        self.order_details = QTextEdit()
        self.order_details.setFixedHeight(80)

        self.status = QComboBox()
        for s in STATUSES:
            self.status.addItem(s.capitalize(), s)

        self.order_date = QLineEdit()
        self.order_date.setPlaceholderText("YYYY-MM-DD")

        self.delivery_method = QComboBox()
        for d in DELIVERY_METHODS:
            self.delivery_method.addItem(d.upper(), d)
        self.delivery_method.currentIndexChanged.connect(
            lambda _: self.delivery_changed.emit(self.delivery_method.currentData())
        )

        amount_validator = QDoubleValidator(0.0, 1e9, 2, self)
        self.paid_product = QLineEdit()
        self.paid_product.setValidator(amount_validator)
        self.paid_product.setPlaceholderText("0")
        self.paid_shipping = QLineEdit()
        self.paid_shipping.setValidator(amount_validator)
        self.paid_shipping.setPlaceholderText("0")

        self.notes = QTextEdit()
        self.notes.setFixedHeight(60)

        form.addRow("Customer name", self.customer_name)
        form.addRow("FB profile", self.fb_profile)
        form.addRow("Order details", self.order_details)
        form.addRow("Status", self.status)
        form.addRow("Order date", self.order_date)
        form.addRow("Delivery", self.delivery_method)
        form.addRow("Paid (product)", self.paid_product)
        form.addRow("Paid (shipping)", self.paid_shipping)
        form.addRow("Notes", self.notes)
        layout.addLayout(form)

        # attachment
        attach_row = QHBoxLayout()
        self.attach_btn = QPushButton("📎 Attach file…")
        self.attach_btn.clicked.connect(self._pick_attachment)
        self.attach_label = QLabel("No file selected")
        self.attach_label.setObjectName("mutedLabel")
        attach_row.addWidget(self.attach_btn)
        attach_row.addWidget(self.attach_label, 1)
        layout.addLayout(attach_row)

        buttons = QHBoxLayout()
        self.btn_save = QPushButton("Save")
        self.btn_save.setObjectName("Primary")
        self.btn_save.clicked.connect(self.save_requested.emit)
        btn_clear = QPushButton("Clear")
        btn_clear.clicked.connect(self.clear_requested.emit)
        buttons.addWidget(self.btn_save)
        buttons.addWidget(btn_clear)
        buttons.addStretch()
        layout.addLayout(buttons)

        self.message = QLabel("—")
        self.message.setObjectName("mutedLabel")
        layout.addWidget(self.message)

    # ---- attachment ----
    def _pick_attachment(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Choose attachment", "", "Images (*.png *.jpg *.jpeg *.webp);;All files (*)"
        )
        if path:
            self.attachment_path = path
            self.attach_label.setText(path.replace("\\", "/").rsplit("/", 1)[-1])

    def selected_attachment(self) -> Optional[AttachmentFile]:
        if not self.attachment_path:
            return None
        return AttachmentFile.from_path(self.attachment_path)

    def clear_attachment(self):
        self.attachment_path = None
        self.attach_label.setText("No file selected")

    # ---- fields ----
    @staticmethod
    def _select(combo: QComboBox, value: str):
        idx = combo.findData(value)
        if idx < 0 and value:
            combo.addItem(value.upper(), value)
            idx = combo.count() - 1
        combo.setCurrentIndex(max(idx, 0))

    def read(self) -> OrderForm:
        return OrderForm(
            customer_name=self.customer_name.text(),
            fb_profile=self.fb_profile.text(),
            order_details=self.order_details.toPlainText(),
            status=self.status.currentData() or "",
            order_date=self.order_date.text(),
            delivery_method=self.delivery_method.currentData() or "",
            paid_product=self.paid_product.text(),
            paid_shipping=self.paid_shipping.text(),
            notes=self.notes.toPlainText(),
        )

    def write(self, form: OrderForm):
        # no delivery_changed while we fill fields in
        self.delivery_method.blockSignals(True)
        self.customer_name.setText(form.customer_name)
        self.fb_profile.setText(form.fb_profile)
        self.order_details.setPlainText(form.order_details)
        self._select(self.status, form.status)
        self.order_date.setText(form.order_date)
        self._select(self.delivery_method, form.delivery_method)
        self.paid_product.setText(form.paid_product)
        self.paid_shipping.setText(form.paid_shipping)
        self.notes.setPlainText(form.notes)
        self.delivery_method.blockSignals(False)
