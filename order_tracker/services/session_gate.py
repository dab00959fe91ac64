# order_tracker/services/session_gate.py
import logging
from typing import Callable, Iterable, Optional

from .api_client import ApiError
from .auth_service import SIGNED_OUT, AuthService, Session

logger = logging.getLogger(__name__)


def is_admin(email: Optional[str], admin_emails: Iterable[str]) -> bool:
    e = str(email or "").lower()
    return e in {str(x).lower() for x in admin_emails}


class SessionGate:
    """
    Admits order-page operations only while someone is signed in.
    `view` needs show_error/clear_error; `redirect` sends the user to login.
    """

    def __init__(self, auth: AuthService, view, redirect: Callable[[], None]):
        self.auth = auth
        self.view = view
        self.redirect = redirect
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.redirected = False

    def require_session(self) -> Optional[Session]:
        """
        The active session, or None when the caller must stop.
        `redirected` tells the two None cases apart: sent to login, or a
        provider error now showing on the page.
        """
        self.view.clear_error()
        self.redirected = False
        try:
            session = self.auth.get_session()
        except ApiError as e:
            logger.warning(f"Session check failed: {e}")
            self.view.show_error(str(e))
            return None
        if session is None:
            logger.info("No active session, redirecting to login")
            self.redirected = True
            self.redirect()
            return None
        return session

    @property
    def watching(self) -> bool:
        return self._unsubscribe is not None

    def watch_sign_out(self) -> None:
        if self._unsubscribe is not None:
            return

        def on_change(event, _session):
            if event == SIGNED_OUT:
                self.redirect()

        self._unsubscribe = self.auth.on_auth_state_change(on_change)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
