# order_tracker/config.py
"""
Runtime configuration for the order tracker.
Values come from the environment, after a local .env file has been merged in.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

DEFAULT_BUCKET = "order_attachments"
DEFAULT_SESSION_FILE = Path.home() / ".order_tracker" / "session.json"


class ConfigError(RuntimeError):
    """Missing or unusable configuration; nothing else should run."""


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_anon_key: str
    attachments_bucket: str = DEFAULT_BUCKET
    admin_emails: Tuple[str, ...] = field(default_factory=tuple)
    page: str = ""
    session_file: Path = DEFAULT_SESSION_FILE
    request_timeout: float = 15.0
    log_level: str = "INFO"
    log_file: Optional[Path] = None


def _split_list(raw: str) -> Tuple[str, ...]:
    return tuple(x.strip() for x in (raw or "").split(",") if x.strip())


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.
    Passing `environ` skips the .env lookup (used by tests).
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    url = (environ.get("SUPABASE_URL") or "").strip()
    key = (environ.get("SUPABASE_ANON_KEY") or "").strip()
    if not url or not key:
        raise ConfigError(
            "Config missing. Set SUPABASE_URL / SUPABASE_ANON_KEY in the environment or in a .env file."
        )

    try:
        timeout = float(environ.get("API_TIMEOUT") or 15)
    except ValueError:
        raise ConfigError(f"API_TIMEOUT must be a number, got {environ.get('API_TIMEOUT')!r}")

    session_file = environ.get("ORDER_TRACKER_SESSION_FILE")
    log_file = environ.get("LOG_FILE")

    return Settings(
        supabase_url=url.rstrip("/"),
        supabase_anon_key=key,
        attachments_bucket=(environ.get("ATTACHMENTS_BUCKET") or DEFAULT_BUCKET).strip(),
        admin_emails=_split_list(environ.get("ADMIN_EMAILS", "")),
        page=(environ.get("ORDER_TRACKER_PAGE") or "").strip().lower(),
        session_file=Path(session_file).expanduser() if session_file else DEFAULT_SESSION_FILE,
        request_timeout=timeout,
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
    )
