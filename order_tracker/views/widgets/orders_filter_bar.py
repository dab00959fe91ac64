# order_tracker/views/widgets/orders_filter_bar.py
from typing import Sequence, Tuple

from PySide6.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout, QLabel, QPushButton, QFrame,
    QComboBox, QLineEdit, QButtonGroup
)
from PySide6.QtCore import Signal

from order_tracker.models.order import DELIVERY_METHODS, STATUSES
from order_tracker.services.order_filters import ALL, ALL_DATES_LABEL, FilterValues


class OrdersFilterBar(QWidget):
    """Delivery tabs plus status, date and free-text filters"""

    tab_changed = Signal(str)
    filter_changed = Signal()
    export_requested = Signal()

    def __init__(self):
        super().__init__()
        self.setup_ui()
        self.setup_styles()

    def setup_ui(self):
        frame = QFrame()
        frame.setObjectName("filterBar")
        outer = QVBoxLayout(frame)
        outer.setContentsMargins(16, 12, 16, 12)
        outer.setSpacing(10)

        # tabs
        tabs_layout = QHBoxLayout()
        tabs_layout.setSpacing(6)
        self.tab_group = QButtonGroup(self)
        self.tab_group.setExclusive(True)
        for value in (ALL,) + DELIVERY_METHODS:
            btn = QPushButton("All" if value == ALL else value.upper())
            btn.setObjectName("tabBtn")
            btn.setCheckable(True)
            btn.setProperty("tab", value)
            btn.setChecked(value == ALL)
            self.tab_group.addButton(btn)
            tabs_layout.addWidget(btn)
        tabs_layout.addStretch()
        self.tab_group.buttonClicked.connect(lambda b: self.tab_changed.emit(b.property("tab")))
        outer.addLayout(tabs_layout)

        # filters
        row = QHBoxLayout()
        row.setSpacing(12)

        self.search = QLineEdit()
        self.search.setObjectName("searchInput")
        self.search.setPlaceholderText("Search name, order id, details, notes…")
        self.search.textChanged.connect(lambda _: self.filter_changed.emit())
        row.addWidget(self.search, 1)

        row.addWidget(QLabel("Status:", objectName="filterLabel"))
        self.status_filter = QComboBox()
        self.status_filter.addItem("All Statuses", ALL)
        for status in STATUSES:
            self.status_filter.addItem(status.capitalize(), status)
        self.status_filter.currentIndexChanged.connect(lambda _: self.filter_changed.emit())
        row.addWidget(self.status_filter)

        row.addWidget(QLabel("Date:", objectName="filterLabel"))
        self.date_filter = QComboBox()
        self.date_filter.addItem(ALL_DATES_LABEL, ALL)
        self.date_filter.currentIndexChanged.connect(lambda _: self.filter_changed.emit())
        row.addWidget(self.date_filter)

        self.export_btn = QPushButton("📥 Export (0 orders)")
        self.export_btn.setObjectName("exportBtn")
        self.export_btn.clicked.connect(self.export_requested.emit)
        row.addWidget(self.export_btn)

        outer.addLayout(row)

        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.addWidget(frame)

    def setup_styles(self):
        self.setStyleSheet("""
        QFrame#filterBar {
            background: #dbeafe;
            border: 1px solid #93c5fd;
            border-radius: 12px;
        }
        QLabel#filterLabel { font-weight: 600; color: #1e40af; }
        QLineEdit#searchInput, QComboBox {
            padding: 6px 10px;
            border: 1px solid #93c5fd;
            border-radius: 8px;
            background: white;
            min-width: 120px;
        }
        QPushButton#tabBtn {
            background: #f9fafb;
            color: #374151;
            border: 1px solid #d1d5db;
            border-radius: 8px;
            padding: 6px 14px;
            font-weight: 500;
        }
        QPushButton#tabBtn:checked { background: #2563eb; color: white; border-color: #2563eb; }
        QPushButton#exportBtn {
            background: #3b82f6;
            color: white;
            border: none;
            border-radius: 10px;
            padding: 8px 16px;
            font-weight: 600;
        }
        QPushButton#exportBtn:hover { background: #2563eb; }
        """)

    def values(self) -> FilterValues:
        return FilterValues(
            status=self.status_filter.currentData() or ALL,
            date=self.date_filter.currentData() or ALL,
            query=self.search.text(),
        )

    def set_date_options(self, options: Sequence[Tuple[str, str]], selected: str):
        """Replace the date choices without firing a filter change per item"""
        self.date_filter.blockSignals(True)
        self.date_filter.clear()
        for value, label in options:
            self.date_filter.addItem(label, value)
        idx = self.date_filter.findData(selected)
        self.date_filter.setCurrentIndex(idx if idx >= 0 else 0)
        self.date_filter.blockSignals(False)

    def update_export_count(self, count: int):
        self.export_btn.setText(f"📥 Export ({count} order{'' if count == 1 else 's'})")
