"""
backend.py
Minimal client for the hosted data store.

Each collection is a PostgREST table; "select all" is a plain GET with
``select=*``. Any object exposing ``select_all(collection)`` can stand in for
CollectionClient (tests use in-memory fakes).
"""

from typing import Any, Dict, List, Optional

import requests

from . import __version__
from .config import REST_PATH, Settings
from .exceptions import BackendError


class CollectionClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
            "User-Agent": f"aidmap/{__version__}",
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "CollectionClient":
        settings.require_backend()
        return cls(settings.supabase_url, settings.supabase_key, timeout=settings.http_timeout)

    def collection_url(self, collection: str) -> str:
        return f"{self.base_url}{REST_PATH}/{collection}"

    def select_all(self, collection: str) -> List[Dict[str, Any]]:
        """Read every record of ``collection``; raise BackendError on any failure."""
        try:
            resp = self.session.get(
                self.collection_url(collection),
                params={"select": "*"},
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise BackendError(collection, str(exc)) from exc

        if not resp.ok:
            raise BackendError(collection, _error_message(resp), status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise BackendError(collection, "response is not JSON", status=resp.status_code) from exc
        if not isinstance(data, list):
            raise BackendError(collection, "expected a list of records", status=resp.status_code)
        return data

    def close(self) -> None:
        self.session.close()


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.reason or "request failed"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
