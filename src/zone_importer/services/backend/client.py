"""HTTP client for the marketplace backend that owns stores and delivery zones."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ...config import settings
from ...models.domain import StoreDirectoryEntry
from ...schemas.zones import DeliveryZone, DeliveryZoneDraft, DeliveryZoneUpdate

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class ZoneServiceError(ConnectionError):
    """Raised when the backend rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        parsed = response.json()
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        message = parsed.get("message") or parsed.get("error")
        if message:
            return str(message)
    return f"API Error: {response.status_code} {response.reason_phrase}"


def _unwrap_list(payload: Any) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("content", "data", "items"):
            if isinstance(payload.get(key), list):
                return payload[key]
    return []


def _store_entry(item: Any) -> StoreDirectoryEntry | None:
    if not isinstance(item, dict):
        return None
    identifier = item.get("storeUuid") or item.get("uuid") or item.get("id")
    display_name = item.get("storeName") or item.get("name")
    if identifier in (None, "") or not display_name:
        return None
    return StoreDirectoryEntry(identifier=str(identifier), display_name=str(display_name))


class ZoneServiceClient:
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.backend_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Backend base URL is not configured.")
        self.token = token if token is not None else settings.backend_token
        self.max_retries = max_retries if max_retries is not None else settings.backend_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.backend_backoff_seconds
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout or settings.backend_timeout_seconds, connect=10.0),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ZoneServiceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, payload: Any = None) -> Any:
        # Only idempotent calls are retried after the request may have reached
        # the backend; writes are retried on connection failures alone.
        retry_any = method in IDEMPOTENT_METHODS
        attempt = 0
        while True:
            try:
                response = self._client.request(method, path, json=payload)
            except httpx.HTTPError as exc:
                attempt += 1
                retryable = (retry_any and isinstance(exc, httpx.TransportError)) or isinstance(exc, httpx.ConnectError)
                if not retryable or attempt > self.max_retries:
                    raise ZoneServiceError(
                        f"Failed to reach backend at {self.base_url}: {exc}"
                    ) from exc
                wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"Backend {method} {path} failed, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {exc}")
                time.sleep(wait_time)
                continue

            if response.status_code >= 500 and retry_any and attempt < self.max_retries:
                attempt += 1
                logger.debug(f"Backend {method} {path} returned {response.status_code}, retrying (attempt {attempt}/{self.max_retries})")
                time.sleep(self.backoff_seconds * (2 ** (attempt - 1)))
                continue

            if response.is_error:
                if response.status_code == 401:
                    logger.warning("Backend rejected credentials (401); check DZI_BACKEND_TOKEN")
                message = _error_message(response)
                logger.error(f"Backend {method} {path} -> {response.status_code}: {message}")
                raise ZoneServiceError(message, status_code=response.status_code)

            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                logger.warning(f"Backend {method} {path} returned a non-JSON body")
                return response.text

    def list_stores(self) -> list[StoreDirectoryEntry]:
        payload = self._request("GET", "/stores")
        entries = [_store_entry(item) for item in _unwrap_list(payload)]
        return [entry for entry in entries if entry is not None]

    def list_zones(self, store_identifier: str) -> list[DeliveryZone]:
        if not store_identifier.strip():
            raise ValueError("store_identifier is required to list zones.")
        payload = self._request("GET", f"/vendor/zones/{store_identifier.strip()}")
        return [DeliveryZone.model_validate(item) for item in _unwrap_list(payload)]

    def create_zone(self, draft: DeliveryZoneDraft) -> DeliveryZone:
        payload = self._request("POST", "/vendor/zones", draft.to_payload())
        if not isinstance(payload, dict):
            raise ZoneServiceError("Backend returned an unexpected body for zone creation.")
        return DeliveryZone.model_validate(payload)

    def update_zone(self, zone_id: str, changes: DeliveryZoneUpdate) -> DeliveryZone:
        payload = self._request("PATCH", f"/vendor/zones/{zone_id}", changes.to_payload())
        if not isinstance(payload, dict):
            raise ZoneServiceError("Backend returned an unexpected body for zone update.")
        return DeliveryZone.model_validate(payload)

    def delete_zone(self, zone_id: str) -> None:
        self._request("DELETE", f"/vendor/zones/{zone_id}")


def check_health(client: ZoneServiceClient | None = None) -> bool:
    """Return True when the backend answers the store listing."""
    owned = client is None
    client = client or ZoneServiceClient(max_retries=0)
    try:
        client.list_stores()
        return True
    except (ZoneServiceError, ValueError) as exc:
        logger.warning(f"Backend health check failed: {exc}")
        return False
    finally:
        if owned:
            client.close()
