# order_tracker/views/widgets/order_list_widget.py
"""
Order list components: one row widget per order plus the scrolling container
"""

from typing import Dict, List

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
    QScrollArea, QSizePolicy
)
from PySide6.QtCore import Qt, Signal, QUrl
from PySide6.QtGui import QDesktopServices

from order_tracker.services.order_summary import OrderRow


class OrderRowWidget(QFrame):
    """Widget for displaying a single order row"""

    edit_requested = Signal(dict)
    delete_requested = Signal(dict)

    def __init__(self, row: OrderRow):
        super().__init__()
        self.row = row
        self.setup_ui()

    @staticmethod
    def _pill(text: str, extra: str = "") -> QLabel:
        label = QLabel(text)
        label.setObjectName(f"pill{extra}")
        return label

    def setup_ui(self):
        self.setObjectName("orderRow")
        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(12)

        left = QVBoxLayout()
        title = QHBoxLayout()
        title.setSpacing(6)

        name = QLabel(self.row.name)
        name.setObjectName("orderName")
        title.addWidget(name)
        title.addWidget(self._pill(self.row.status_badge))
        title.addWidget(self._pill(self.row.delivery_badge, "Accent"))
        if self.row.order_id_badge:
            title.addWidget(self._pill(self.row.order_id_badge, "Ok"))
        title.addStretch()
        left.addLayout(title)

        sub = QLabel(self.row.summary)
        sub.setObjectName("orderSub")
        sub.setWordWrap(True)
        left.addWidget(sub)
        layout.addLayout(left, 1)

        if self.row.attachment_url:
            view_btn = QPushButton("View")
            view_btn.clicked.connect(
                lambda _=False: QDesktopServices.openUrl(QUrl(self.row.attachment_url))
            )
            layout.addWidget(view_btn)

        edit_btn = QPushButton("Edit")
        edit_btn.clicked.connect(lambda _=False: self.edit_requested.emit(self.row.record))
        layout.addWidget(edit_btn)

        delete_btn = QPushButton("Delete")
        delete_btn.setObjectName("dangerBtn")
        delete_btn.clicked.connect(lambda _=False: self.delete_requested.emit(self.row.record))
        layout.addWidget(delete_btn)


class OrderListWidget(QScrollArea):
    """Scrollable list of OrderRowWidget; re-emits the row actions"""

    edit_requested = Signal(dict)
    delete_requested = Signal(dict)

    def __init__(self):
        super().__init__()
        self.setWidgetResizable(True)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setFrameShape(QFrame.NoFrame)

        self.container = QWidget()
        self.container.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Maximum)
        self.rows_layout = QVBoxLayout(self.container)
        self.rows_layout.setContentsMargins(0, 0, 0, 0)
        self.rows_layout.setSpacing(4)
        self.rows_layout.addStretch()
        self.setWidget(self.container)

        self.setStyleSheet("""
            QFrame#orderRow { background: white; border: 1px solid #e5e7eb; border-radius: 10px; }
            QLabel#orderName { font-weight: 900; font-size: 14px; color: #111827; }
            QLabel#orderSub { color: #6b7280; font-size: 12px; }
            QLabel#pill, QLabel#pillAccent, QLabel#pillOk {
                border-radius: 9px; padding: 2px 8px; font-size: 11px; font-weight: 600;
                background: #f3f4f6; color: #374151;
            }
            QLabel#pillAccent { background: #dbeafe; color: #1e40af; }
            QLabel#pillOk { background: #dcfce7; color: #166534; }
            QPushButton#dangerBtn { color: #dc2626; }
        """)

    def clear_rows(self):
        while self.rows_layout.count() > 1:
            item = self.rows_layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

    def set_rows(self, rows: List[OrderRow]):
        self.clear_rows()
        if not rows:
            empty = QLabel("No orders to show")
            empty.setAlignment(Qt.AlignCenter)
            empty.setObjectName("orderSub")
            self.rows_layout.insertWidget(0, empty)
            return
        for i, row in enumerate(rows):
            w = OrderRowWidget(row)
            w.edit_requested.connect(self._forward_edit)
            w.delete_requested.connect(self._forward_delete)
            self.rows_layout.insertWidget(i, w)

    def _forward_edit(self, record: Dict):
        self.edit_requested.emit(record)

    def _forward_delete(self, record: Dict):
        self.delete_requested.emit(record)
