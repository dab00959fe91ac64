# order_tracker/views/widgets/kpi_bar.py
from PySide6.QtWidgets import QFrame, QHBoxLayout, QVBoxLayout, QLabel

from order_tracker.services.order_summary import Kpis


class KpiBar(QFrame):
    """Totals across every loaded order"""

    def __init__(self):
        super().__init__()
        self.setObjectName("kpiBar")
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        self.kpi_total = self._card(layout, "Total orders")
        self.kpi_paid = self._card(layout, "Total paid")
        self.kpi_pending = self._card(layout, "Pending")

        self.setStyleSheet("""
            QFrame#kpiCard { background: white; border: 1px solid #e5e7eb; border-radius: 12px; }
            QLabel#kpiTitle { color: #6b7280; font-size: 12px; }
            QLabel#kpiValue { color: #111827; font-size: 22px; font-weight: 800; }
        """)

    @staticmethod
    def _card(layout: QHBoxLayout, title: str) -> QLabel:
        card = QFrame()
        card.setObjectName("kpiCard")
        v = QVBoxLayout(card)
        v.setContentsMargins(16, 10, 16, 10)
        v.addWidget(QLabel(title, objectName="kpiTitle"))
        value = QLabel("0", objectName="kpiValue")
        v.addWidget(value)
        layout.addWidget(card)
        return value

    def set_kpis(self, kpis: Kpis):
        self.kpi_total.setText(kpis.total)
        self.kpi_paid.setText(kpis.paid)
        self.kpi_pending.setText(kpis.pending)
