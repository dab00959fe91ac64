# order_tracker/views/widgets/orders_export_widget.py
from datetime import date
from typing import Dict, List

from PySide6.QtWidgets import QWidget, QFileDialog, QMessageBox

from order_tracker.services import export_service


class OrdersExportWidget:
    """Exports the orders currently on screen to Excel or CSV"""

    def __init__(self, parent: QWidget = None):
        self.parent = parent

    def export_orders(self, orders: List[Dict], tab: str) -> bool:
        if not orders:
            QMessageBox.information(self.parent, "Export", "No orders to export")
            return False

        suggested = f"orders_{tab}_{date.today():%Y-%m-%d}.xlsx"
        path, _ = QFileDialog.getSaveFileName(
            self.parent,
            "Save orders report",
            suggested,
            "Excel (*.xlsx);;CSV (*.csv)"
        )
        if not path:
            return False

        rows = export_service.prepare_export_data(orders)
        success, message = export_service.export_to_file(rows, path)
        if success:
            QMessageBox.information(self.parent, "Export complete", message)
        else:
            QMessageBox.critical(self.parent, "Export error", message)
        return success
