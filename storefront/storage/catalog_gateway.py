# storefront/storage/catalog_gateway.py

"""HTTP client for the hosted catalog database and image storage.

Talks to a PostgREST-style REST endpoint (``/rest/v1/<table>``) and the
matching object storage API (``/storage/v1/object/<bucket>``).  All calls
are blocking; async callers run them through :func:`asyncio.to_thread`.

Failures are raised as :class:`GatewayError` subclasses so callers can
tell a missing table/bucket apart from a policy denial or a plain
network error.
"""

import logging
import time
from typing import Any

from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.gateway")

# PostgREST / Postgres error codes
_MISSING_RELATION_CODES = {"42P01", "PGRST205"}
_PERMISSION_CODES = {"42501"}
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class GatewayError(Exception):
    """Generic gateway failure (network, validation, unexpected status)."""

    def __init__(
        self, message: str, *, code: str = "", status: int = 0,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status = status


class MissingSchemaError(GatewayError):
    """The products table or the image bucket does not exist."""


class PermissionDeniedError(GatewayError):
    """A row-level-security or storage policy rejected the request."""


class GatewayNotConfiguredError(GatewayError):
    """No gateway URL or API key is configured."""


def classify_error(status: int, payload: Any) -> GatewayError:
    """Map an HTTP error response to the matching GatewayError subclass."""
    body: dict[str, Any] = payload if isinstance(payload, dict) else {}
    code = str(body.get("code") or "")
    message = str(
        body.get("message") or body.get("error") or f"HTTP {status}"
    )
    lowered = message.lower()

    # A database code is authoritative; relation messages are only matched
    # for storage and proxy errors that carry none.
    if code:
        missing = (
            code in _MISSING_RELATION_CODES or "bucket not found" in lowered
        )
        denied = code in _PERMISSION_CODES
    else:
        missing = (
            "does not exist" in lowered
            or "bucket not found" in lowered
            or "could not find the table" in lowered
        )
        denied = "row-level security" in lowered

    if missing:
        return MissingSchemaError(message, code=code, status=status)
    if denied or status in (401, 403):
        return PermissionDeniedError(message, code=code, status=status)
    return GatewayError(message, code=code, status=status)


class CatalogGateway:
    """Blocking client for the remote ``products`` table and image bucket."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        session: Any = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (
            base_url if base_url is not None else self.settings.GATEWAY_URL
        ).rstrip("/")
        self.api_key = (
            api_key if api_key is not None else self.settings.GATEWAY_KEY
        )
        self.table = self.settings.PRODUCTS_TABLE
        self.bucket = self.settings.IMAGE_BUCKET
        self.session = session or curl_requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request with retries on transient failures.

        Raises a :class:`GatewayError` subclass for any error status.
        """
        if not self.configured:
            raise GatewayNotConfiguredError(
                "Catalog gateway is not configured "
                "(set SUPABASE_URL and SUPABASE_KEY)"
            )

        url = f"{self.base_url}{path}"
        resp: Any = None
        last_exc: Exception | None = None

        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    data=data,
                    headers=self._headers(headers),
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
            except Exception as exc:
                last_exc = exc
                resp = None
                logger.warning(
                    "%s %s failed on attempt %d: %s",
                    method,
                    path,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                if attempt < self.settings.MAX_RETRIES - 1:
                    time.sleep(self.settings.RETRY_BACKOFF * (attempt + 1))
                continue

            if (
                resp.status_code in _RETRYABLE_STATUS
                and attempt < self.settings.MAX_RETRIES - 1
            ):
                logger.warning(
                    "%s %s returned HTTP %d on attempt %d",
                    method,
                    path,
                    resp.status_code,
                    attempt + 1,
                )
                time.sleep(self.settings.RETRY_BACKOFF * (attempt + 1))
                continue
            break

        if resp is None:
            raise GatewayError(
                f"{method} {path} failed: {last_exc}"
            ) from last_exc

        if resp.status_code >= 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = {"message": resp.text[:200]}
            error = classify_error(resp.status_code, payload)
            logger.debug(
                "%s %s -> HTTP %d (%s): %s",
                method,
                path,
                resp.status_code,
                type(error).__name__,
                error,
            )
            raise error

        return resp

    @staticmethod
    def _json_rows(resp: Any) -> list[dict[str, Any]]:
        """Decode a JSON array body, tolerating empty responses."""
        if not resp.content:
            return []
        try:
            body = resp.json()
        except ValueError as exc:
            raise GatewayError(f"Malformed gateway response: {exc}") from exc
        if isinstance(body, dict):
            return [body]
        if not isinstance(body, list):
            return []
        return [row for row in body if isinstance(row, dict)]

    # ── Table operations ─────────────────────────────────

    def select_all(self) -> list[dict[str, Any]]:
        """Fetch every row of the products table."""
        resp = self._request(
            "GET", f"/rest/v1/{self.table}", params={"select": "*"}
        )
        rows = self._json_rows(resp)
        logger.info("Fetched %d product rows", len(rows))
        return rows

    def insert(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Insert one or many rows and return them as stored."""
        resp = self._request(
            "POST",
            f"/rest/v1/{self.table}",
            json=rows,
            headers={
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            },
        )
        inserted = self._json_rows(resp)
        logger.info("Inserted %d product rows", len(inserted))
        return inserted

    def update(self, row: dict[str, Any]) -> None:
        """Replace the row whose ``id`` matches ``row["id"]``."""
        self._request(
            "PATCH",
            f"/rest/v1/{self.table}",
            params={"id": f"eq.{row['id']}"},
            json=row,
            headers={"Content-Type": "application/json"},
        )
        logger.info("Updated product row %s", row["id"])

    def delete(self, product_id: str) -> None:
        """Delete the row with the given id."""
        self._request(
            "DELETE",
            f"/rest/v1/{self.table}",
            params={"id": f"eq.{product_id}"},
        )
        logger.info("Deleted product row %s", product_id)

    # ── Object storage ───────────────────────────────────

    def public_url(self, object_path: str) -> str:
        """Public URL of an object in the image bucket."""
        return (
            f"{self.base_url}/storage/v1/object/public/"
            f"{self.bucket}/{object_path}"
        )

    def upload_image(
        self,
        object_path: str,
        data: bytes,
        content_type: str = "image/jpeg",
    ) -> str:
        """Upload image bytes to the bucket and return the public URL."""
        self._request(
            "POST",
            f"/storage/v1/object/{self.bucket}/{object_path}",
            data=data,
            headers={"Content-Type": content_type, "x-upsert": "true"},
        )
        logger.info(
            "Uploaded %d bytes to %s/%s",
            len(data),
            self.bucket,
            object_path,
        )
        return self.public_url(object_path)

    # ── Probes ───────────────────────────────────────────

    def probe_table(self) -> None:
        """Cheap request that fails if the table is missing or denied."""
        self._request(
            "GET",
            f"/rest/v1/{self.table}",
            params={"select": "id", "limit": "1"},
        )

    def probe_bucket(self) -> None:
        """Fails if the image bucket is missing or denied."""
        self._request("GET", f"/storage/v1/bucket/{self.bucket}")
