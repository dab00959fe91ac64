# order_tracker/services/auth_service.py
import json
import logging
import time
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .api_client import ApiError, AuthError, SupabaseClient

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"

# refresh a little before the server considers the token dead
EXPIRY_MARGIN_SECONDS = 30

AuthCallback = Callable[[str, Optional["Session"]], None]


@dataclass
class Session:
    access_token: str
    refresh_token: str = ""
    expires_at: Optional[int] = None
    user: Dict[str, Any] = field(default_factory=dict)

    @property
    def email(self) -> Optional[str]:
        return self.user.get("email") or None

    def is_expired(self, now: Optional[float] = None) -> bool:
        if not self.expires_at:
            return False
        now = time.time() if now is None else now
        return now >= self.expires_at - EXPIRY_MARGIN_SECONDS

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> Optional["Session"]:
        """Build a Session from a token response; None when no token came back."""
        token = (data or {}).get("access_token")
        if not token:
            return None
        expires_at = data.get("expires_at")
        if not expires_at and data.get("expires_in"):
            expires_at = int(time.time()) + int(data["expires_in"])
        return cls(
            access_token=token,
            refresh_token=data.get("refresh_token") or "",
            expires_at=int(expires_at) if expires_at else None,
            user=data.get("user") or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AuthService:
    """
    Identity provider for the app: password sign-in, a session persisted
    between runs, token refresh and sign-in/out notifications.
    """

    def __init__(self, client: SupabaseClient, session_file: Optional[Path] = None):
        self.client = client
        self.session_file = session_file
        self._session: Optional[Session] = None
        self._listeners: List[AuthCallback] = []

    # ---------- notifications ----------
    def on_auth_state_change(self, callback: AuthCallback) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: str, session: Optional[Session]) -> None:
        logger.info(f"Auth event: {event}")
        for callback in list(self._listeners):
            callback(event, session)

    # ---------- persistence ----------
    def _load_stored(self) -> Optional[Session]:
        if not self.session_file or not self.session_file.exists():
            return None
        try:
            data = json.loads(self.session_file.read_text(encoding="utf-8"))
            return Session(**data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.session_file}: {e}")
            return None

    def _store(self, session: Optional[Session]) -> None:
        self._session = session
        self.client.set_access_token(session.access_token if session else None)
        if not self.session_file:
            return
        try:
            if session is None:
                self.session_file.unlink(missing_ok=True)
            else:
                self.session_file.parent.mkdir(parents=True, exist_ok=True)
                self.session_file.write_text(json.dumps(session.to_dict()), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not persist session to {self.session_file}: {e}")

    def has_stored_session(self) -> bool:
        return self._session is not None or self._load_stored() is not None

    # ---------- session ----------
    def get_session(self) -> Optional[Session]:
        """
        Current session, refreshed when expired.
        Raises ApiError when the server cannot be reached during a refresh.
        """
        session = self._session or self._load_stored()
        if session is None:
            return None

        if session.is_expired():
            if not session.refresh_token:
                self._store(None)
                self._emit(SIGNED_OUT, None)
                return None
            try:
                refreshed = Session.from_response(self.client.refresh_session(session.refresh_token))
            except AuthError as e:
                if e.status_code is None:
                    raise
                logger.warning(f"Session refresh rejected: {e}")
                refreshed = None
            if refreshed is None:
                self._store(None)
                self._emit(SIGNED_OUT, None)
                return None
            self._store(refreshed)
            self._emit(TOKEN_REFRESHED, refreshed)
            return refreshed

        if session is not self._session:
            self._store(session)
        return session

    def sign_in_with_password(self, email: str, password: str) -> Session:
        email = (email or "").strip()
        password = password or ""
        if not email or not password:
            raise AuthError("Please enter email and password.")

        session = Session.from_response(self.client.sign_in_with_password(email, password))
        if session is None:
            raise AuthError("Login failed: no session returned.")

        self._store(session)
        self._emit(SIGNED_IN, session)
        return session

    def sign_out(self) -> None:
        session = self._session or self._load_stored()
        if session is not None:
            try:
                self.client.sign_out(session.access_token)
            except ApiError as e:
                # the local session is dropped either way
                logger.warning(f"Remote sign-out failed: {e}")
        self._store(None)
        self._emit(SIGNED_OUT, None)
