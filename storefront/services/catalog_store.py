# storefront/services/catalog_store.py

"""In-memory product catalog with optimistic, non-reconciling remote sync.

Local state is the source of truth for what the user sees.  Every
mutation is applied locally whatever the gateway answers; the remote
call is a best-effort sync whose failure is logged and reported as a
:class:`Notification`, never raised.  Local and remote state may drift
apart; nothing reconciles them until the next :meth:`CatalogStore.load`.
"""

import asyncio
import logging
import re
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from storefront.data.seed_products import SEED_PRODUCTS
from storefront.models.notification import Notification
from storefront.models.product import Product
from storefront.services.normalizer import (
    normalize_product,
    product_to_row,
)
from storefront.storage.catalog_gateway import (
    CatalogGateway,
    GatewayNotConfiguredError,
    MissingSchemaError,
    PermissionDeniedError,
)
from storefront.storage.remediation import remediation_for

logger = logging.getLogger("storefront.catalog")


@dataclass
class LoadResult:
    """Outcome of a catalog load."""

    source: str  # "remote", "seeded", "fallback"
    count: int
    error_kind: str | None = None  # "missing_schema", "permission", "generic", "not_configured"


def _now_ms() -> int:
    return int(time.time() * 1000)


def error_kind(exc: BaseException) -> str:
    """Classify an exception into the catalog's error taxonomy."""
    if isinstance(exc, MissingSchemaError):
        return "missing_schema"
    if isinstance(exc, PermissionDeniedError):
        return "permission"
    if isinstance(exc, GatewayNotConfiguredError):
        return "not_configured"
    return "generic"


def seed_catalog() -> list[Product]:
    """The static default catalog, normalized."""
    return [normalize_product(raw) for raw in SEED_PRODUCTS]


class CatalogStore:
    """Owns the canonical product list and its gateway sync."""

    def __init__(self, gateway: CatalogGateway | None = None) -> None:
        self.gateway = gateway or CatalogGateway()
        self.products: list[Product] = []
        self.notifications: list[Notification] = []
        self.loading: bool = False
        self._seed_attempted: bool = False

    # ── Helpers ──────────────────────────────────────────

    def get(self, product_id: str) -> Product | None:
        """Look up a product by id in the current local state."""
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def _notify(self, message: str, severity: str = "warning") -> None:
        self.notifications.append(Notification(message, severity))

    def _report_sync_failure(self, action: str, exc: Exception) -> None:
        """Log a failed remote sync and tell the user the view is local-only."""
        logger.error(
            "Database %s failed: %s", action, exc, exc_info=exc,
        )
        message = f"Note: database {action} failed. Updated local view only."
        hint = remediation_for(exc)
        if hint:
            message = f"{message}\n{hint}"
        self._notify(message, "warning")

    def _next_id(self, suffixes: Sequence[str] = ("",)) -> str:
        """Timestamp-derived id stem, bumped until every stem+suffix is unused."""
        stamp = _now_ms()
        while any(self.get(f"p{stamp}{s}") is not None for s in suffixes):
            stamp += 1
        return f"p{stamp}"

    @staticmethod
    def _draft_product(draft: Any, product_id: str) -> Product:
        """Build a fresh product from an admin draft."""
        base = product_to_row(normalize_product(draft))
        base.update(id=product_id, sales=0, reviews=[], rating=0)
        return normalize_product(base)

    # ── Load / seed ──────────────────────────────────────

    async def load(self) -> LoadResult:
        """Replace local state with the remote catalog (or a fallback)."""
        self.loading = True
        try:
            rows = await asyncio.to_thread(self.gateway.select_all)
        except Exception as exc:
            return self._fallback(exc)
        finally:
            self.loading = False

        if rows:
            self.products = [normalize_product(row) for row in rows]
            return LoadResult("remote", len(self.products))

        if self._seed_attempted:
            logger.info("Catalog still empty after seeding, using defaults")
            self.products = seed_catalog()
            return LoadResult("fallback", len(self.products))
        return await self._seed()

    def _fallback(self, exc: Exception) -> LoadResult:
        """Adopt the static catalog after a failed load."""
        kind = error_kind(exc)
        if kind == "missing_schema":
            logger.warning(
                "Products table not found; falling back to local demo "
                "data. %s",
                remediation_for(exc),
            )
        elif kind == "not_configured":
            logger.info("Gateway not configured, using local demo data")
        else:
            logger.error("Error fetching products: %s", exc, exc_info=exc)
            if isinstance(exc, PermissionDeniedError):
                self._notify(
                    "Catalog could not be read.\n" + remediation_for(exc),
                    "error",
                )
            else:
                self._notify(
                    "Could not reach the catalog; showing the default "
                    "collection.",
                    "warning",
                )
        self.products = seed_catalog()
        return LoadResult("fallback", len(self.products), kind)

    async def _seed(self) -> LoadResult:
        """Insert the static defaults once and adopt what the gateway returns."""
        self._seed_attempted = True
        defaults = seed_catalog()
        try:
            rows = await asyncio.to_thread(
                self.gateway.insert, [product_to_row(p) for p in defaults]
            )
        except Exception as exc:
            logger.error("Seeding catalog failed: %s", exc, exc_info=exc)
            self.products = defaults
            return LoadResult("fallback", len(defaults), error_kind(exc))

        if not rows:
            self.products = defaults
            return LoadResult("fallback", len(defaults))
        self.products = [normalize_product(row) for row in rows]
        logger.info("Seeded catalog with %d products", len(self.products))
        return LoadResult("seeded", len(self.products))

    # ── CRUD ─────────────────────────────────────────────

    async def add(self, draft: Mapping[str, Any] | Product) -> Product:
        """Create a product and prepend it locally, whatever the gateway says."""
        product = self._draft_product(draft, self._next_id())
        added = product
        try:
            rows = await asyncio.to_thread(
                self.gateway.insert, [product_to_row(product)]
            )
            if rows:
                added = normalize_product(rows[0])
        except Exception as exc:
            self._report_sync_failure("insert", exc)

        self.products = [added, *self.products]
        logger.info("Added product %s (%s)", added.id, added.name)
        return added

    async def bulk_add(
        self, drafts: list[Mapping[str, Any]] | list[Product],
    ) -> list[Product]:
        """Add many products at once with distinct positional ids."""
        stamp = self._next_id([f"-{idx}" for idx in range(len(drafts))])
        products = [
            self._draft_product(draft, f"{stamp}-{idx}")
            for idx, draft in enumerate(drafts)
        ]
        added = products
        try:
            rows = await asyncio.to_thread(
                self.gateway.insert, [product_to_row(p) for p in products]
            )
            if rows:
                added = [normalize_product(row) for row in rows]
        except Exception as exc:
            self._report_sync_failure("import", exc)

        self.products = [*added, *self.products]
        logger.info("Bulk-added %d products", len(added))
        return added

    async def update(self, product: Product) -> Product:
        """Push a full-record update; local state takes the caller's product."""
        updated = normalize_product(product)
        try:
            await asyncio.to_thread(
                self.gateway.update, product_to_row(updated)
            )
        except Exception as exc:
            self._report_sync_failure("update", exc)

        self.products = [
            updated if p.id == updated.id else p for p in self.products
        ]
        return updated

    async def delete(self, product_id: str) -> None:
        """Delete remotely and drop the product locally regardless."""
        try:
            await asyncio.to_thread(self.gateway.delete, product_id)
        except Exception as exc:
            self._report_sync_failure("delete", exc)

        self.products = [p for p in self.products if p.id != product_id]
        logger.info("Deleted product %s", product_id)

    # ── Images ───────────────────────────────────────────

    async def upload_image(
        self,
        filename: str,
        data: bytes,
        content_type: str = "image/jpeg",
    ) -> str | None:
        """Upload an image and return its public URL, or ``None`` on failure."""
        safe_name = re.sub(r"[^A-Za-z0-9._-]+", "-", filename).strip("-")
        object_path = f"{_now_ms()}-{safe_name or 'image'}"
        try:
            return await asyncio.to_thread(
                self.gateway.upload_image, object_path, data, content_type
            )
        except Exception as exc:
            logger.error("Image upload failed: %s", exc, exc_info=exc)
            hint = remediation_for(exc, storage=True)
            self._notify(
                f"Image upload failed: {exc}" + (f"\n{hint}" if hint else ""),
                "error",
            )
            return None
