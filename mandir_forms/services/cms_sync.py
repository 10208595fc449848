from __future__ import annotations

"""
CMS mirror: Strapi REST client
────────────────────────────────────────────────────────────
• POST {CMS_API_URL}/{resource} with {"data": ...}
• Bearer auth from CMS_API_TOKEN; no token → sync skipped (not an error)
• Explicit timeout (CMS_SYNC_TIMEOUT, default 10s)
• Never raises: every outcome is a bool, failures are logged
• sync_in_background() hands the call to the bounded executor
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from mandir_forms.errors import SyncError
from mandir_forms.extensions import emit_event, run_bg

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
_BODY_PREVIEW = 500


@dataclass
class CmsClient:
    base_url: str
    token: str = ""
    timeout: float = DEFAULT_TIMEOUT
    session: Optional[requests.Session] = None

    @classmethod
    def from_app(cls, app: Any) -> "CmsClient":
        return cls(
            base_url=str(app.config.get("CMS_API_URL") or "").rstrip("/"),
            token=str(app.config.get("CMS_API_TOKEN") or ""),
            timeout=float(app.config.get("CMS_SYNC_TIMEOUT") or DEFAULT_TIMEOUT),
        )

    @property
    def configured(self) -> bool:
        return bool(self.token.strip())

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _post(self, resource: str, data: Dict[str, Any]) -> requests.Response:
        url = f"{self.base_url}/{resource.lstrip('/')}"
        http = self.session or requests
        try:
            resp = http.post(url, json={"data": data}, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise SyncError(f"request to {url} failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            body = (resp.text or "")[:_BODY_PREVIEW]
            raise SyncError(f"{url} answered {resp.status_code}: {body}")
        return resp

    def create(self, resource: str, data: Dict[str, Any]) -> bool:
        """Create one CMS entry. True on 2xx; False when skipped or failed."""
        txn = data.get("transactionId")

        if not self.configured:
            log.warning("CMS_API_TOKEN not configured, skipping CMS sync (%s %s)", resource, txn)
            return False

        try:
            self._post(resource, data)
        except SyncError as exc:
            log.error("CMS sync failed for %s %s: %s", resource, txn, exc)
            emit_event("cms_sync_failed", {"resource": resource, "transaction_id": txn, "error": str(exc)})
            return False

        log.info("Created %s entry in CMS: %s", resource, txn)
        return True


def _sync_job(client: CmsClient, resource: str, data: Dict[str, Any]) -> bool:
    try:
        return client.create(resource, data)
    except Exception as exc:
        log.exception("Unexpected CMS sync error for %s %s", resource, data.get("transactionId"))
        emit_event(
            "cms_sync_failed",
            {"resource": resource, "transaction_id": data.get("transactionId"), "error": str(exc)},
        )
        return False


def sync_in_background(client: CmsClient, resource: str, data: Dict[str, Any]) -> Future:
    """Start the CMS call on the executor. Callers do not wait for it."""
    return run_bg(_sync_job, client, resource, dict(data))
