# order_tracker/services/api_client.py
"""
Thin HTTP client for the hosted backend (Supabase).
Covers the three surfaces the tracker talks to: auth (/auth/v1),
table rows (/rest/v1) and file storage (/storage/v1).
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Any failed remote call; `str(err)` is the message shown to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class AuthError(ApiError):
    pass


class UploadError(ApiError):
    pass


_MESSAGE_KEYS = ("message", "msg", "error_description", "error", "detail")


def _err(resp: requests.Response, error_cls=ApiError) -> ApiError:
    try:
        j = resp.json()
    except ValueError:
        return error_cls(resp.text or f"HTTP {resp.status_code}", resp.status_code)

    if isinstance(j, dict):
        code = j.get("code") or j.get("error_code")
        for key in _MESSAGE_KEYS:
            if j.get(key):
                return error_cls(str(j[key]), resp.status_code, str(code) if code else None)
    return error_cls(str(j), resp.status_code)


class SupabaseClient:
    """Client for the auth, REST and storage endpoints of one project."""

    def __init__(self, url: str, anon_key: str, timeout: float = 15):
        self.base_url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.access_token: Optional[str] = None
        self.session = requests.Session()

    def _url(self, p: str) -> str:
        return f"{self.base_url}{p}"

    def set_access_token(self, token: Optional[str]) -> None:
        """Bearer used for data and storage calls; None falls back to the anon key."""
        self.access_token = token

    def _headers(self, extra: Optional[Dict[str, str]] = None, token: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token or self.access_token or self.anon_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, path: str, error_cls=ApiError, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        try:
            r = self.session.request(method, self._url(path), **kwargs)
        except requests.exceptions.Timeout:
            raise error_cls("The request timed out. Check your connection and try again.")
        except requests.exceptions.RequestException as e:
            raise error_cls(f"Could not reach the server: {e}")
        if r.status_code >= 400:
            err = _err(r, error_cls)
            logger.error(f"{method} {path} failed ({r.status_code}): {err}")
            raise err
        return r

    @staticmethod
    def _json(r: requests.Response, error_cls=ApiError) -> Any:
        try:
            return r.json()
        except ValueError:
            logger.error(f"Non-JSON body from {r.url} ({r.status_code}): {r.text[:200]!r}")
            raise error_cls(f"Unexpected response from the server (HTTP {r.status_code}).", r.status_code)

    # ---- Auth ----
    def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        r = self._request(
            "POST",
            "/auth/v1/token",
            error_cls=AuthError,
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers=self._headers(token=self.anon_key),
        )
        return self._json(r, AuthError)

    def refresh_session(self, refresh_token: str) -> Dict[str, Any]:
        r = self._request(
            "POST",
            "/auth/v1/token",
            error_cls=AuthError,
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            headers=self._headers(token=self.anon_key),
        )
        return self._json(r, AuthError)

    def sign_out(self, access_token: str) -> None:
        self._request("POST", "/auth/v1/logout", error_cls=AuthError, headers=self._headers(token=access_token))

    # ---- Table rows ----
    @staticmethod
    def _match_params(match: Dict[str, Any]) -> Dict[str, str]:
        return {column: f"eq.{value}" for column, value in match.items()}

    def select(self, table: str, columns: str = "*", order: Optional[str] = None,
               ascending: bool = True) -> List[Dict[str, Any]]:
        params = {"select": columns}
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
        r = self._request("GET", f"/rest/v1/{table}", params=params, headers=self._headers())
        return self._json(r)

    def insert(self, table: str, payload: Dict[str, Any]) -> None:
        self._request(
            "POST",
            f"/rest/v1/{table}",
            json=payload,
            headers=self._headers({"Prefer": "return=minimal"}),
        )

    def update(self, table: str, payload: Dict[str, Any], match: Dict[str, Any]) -> None:
        self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=self._match_params(match),
            json=payload,
            headers=self._headers({"Prefer": "return=minimal"}),
        )

    def delete(self, table: str, match: Dict[str, Any]) -> None:
        self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params=self._match_params(match),
            headers=self._headers({"Prefer": "return=minimal"}),
        )

    # ---- Storage ----
    def upload(self, bucket: str, path: str, data: bytes, cache_control: str = "3600",
               upsert: bool = False, content_type: str = "image/jpeg") -> None:
        self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{quote(path)}",
            error_cls=UploadError,
            data=data,
            headers=self._headers({
                "Content-Type": content_type,
                "cache-control": f"max-age={cache_control}",
                "x-upsert": "true" if upsert else "false",
            }),
        )

    def get_public_url(self, bucket: str, path: str) -> str:
        return self._url(f"/storage/v1/object/public/{bucket}/{quote(path)}")
