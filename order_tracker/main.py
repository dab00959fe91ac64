# order_tracker/main.py
import logging
import sys
from typing import Callable, Optional

from PySide6.QtWidgets import QApplication, QMessageBox, QDialog
from PySide6.QtCore import QTimer

from order_tracker.config import ConfigError, Settings, load_settings
from order_tracker.logging_config import setup_logging
from order_tracker.services.api_client import ApiError, SupabaseClient
from order_tracker.services.attachments import AttachmentUploader
from order_tracker.services.auth_service import AuthService
from order_tracker.services.orders_service import OrdersService
from order_tracker.views.login_dialog import LoginDialog
from order_tracker.views.main_window import MainWindow

logger = logging.getLogger(__name__)

LOGIN = "login"
ORDERS = "orders"


def select_entry(page: str, probe: Callable[[], bool]) -> str:
    """
    Which flow to open: an explicit page signal wins, otherwise a stored
    session means orders. A failing probe quietly means login.
    """
    if page in (LOGIN, ORDERS):
        return page
    try:
        return ORDERS if probe() else LOGIN
    except Exception:
        return LOGIN


class App:
    """Switches between the login dialog and the orders window"""

    def __init__(self, qt_app: QApplication, settings: Settings, auth: AuthService,
                 orders_service: OrdersService, uploader: AttachmentUploader):
        self.qt_app = qt_app
        self.settings = settings
        self.auth = auth
        self.orders_service = orders_service
        self.uploader = uploader
        self.window = None
        self._redirect_pending = False
        self._closing = False
        self._finished = False

    def run(self) -> int:
        entry = select_entry(self.settings.page, self.auth.has_stored_session)
        logger.info(f"Starting with the {entry} flow")
        if entry == LOGIN:
            self.show_login()
        else:
            self.show_orders()
        if self._finished:
            return 0
        return self.qt_app.exec()

    def quit(self):
        self._finished = True
        self.qt_app.quit()

    def show_login(self):
        self._redirect_pending = False
        self._close_window()

        # already signed in: straight to orders
        try:
            if self.auth.get_session():
                self.show_orders()
                return
        except ApiError as e:
            logger.warning(f"Session check failed: {e}")

        dialog = LoginDialog(self.auth)
        if dialog.exec() == QDialog.Accepted and dialog.session:
            self.show_orders()
        else:
            self.quit()

    def show_orders(self):
        self._close_window()
        window = MainWindow(
            self.auth,
            self.orders_service,
            self.uploader,
            redirect=self.redirect_to_login,
            admin_emails=self.settings.admin_emails,
        )
        self.window = window
        window.closed.connect(self._on_window_closed)
        if window.start():
            window.show()

    def redirect_to_login(self):
        # deferred so the caller finishes before its window goes away
        if self._redirect_pending:
            return
        self._redirect_pending = True
        QTimer.singleShot(0, self.show_login)

    def _on_window_closed(self):
        if not self._closing:
            self.quit()

    def _close_window(self):
        if self.window is not None:
            window, self.window = self.window, None
            self._closing = True
            try:
                window.close()
            finally:
                self._closing = False
            window.deleteLater()


def main(argv: Optional[list] = None) -> int:
    argv = sys.argv if argv is None else argv
    app = QApplication(argv)
    app.setStyle("Fusion")
    app.setQuitOnLastWindowClosed(False)

    try:
        settings = load_settings()
    except ConfigError as e:
        QMessageBox.critical(None, "Configuration error", str(e))
        return 1

    setup_logging(settings.log_file, settings.log_level)

    client = SupabaseClient(settings.supabase_url, settings.supabase_anon_key, settings.request_timeout)
    auth = AuthService(client, settings.session_file)
    orders_service = OrdersService(client)
    uploader = AttachmentUploader(client, settings.attachments_bucket)

    return App(app, settings, auth, orders_service, uploader).run()


if __name__ == "__main__":
    sys.exit(main())
