# storefront/services/health_checker.py

"""Catalog gateway connectivity and schema health checker."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from storefront.storage.catalog_gateway import (
    CatalogGateway,
    GatewayNotConfiguredError,
    MissingSchemaError,
    PermissionDeniedError,
)
from storefront.storage.remediation import remediation_for

logger = logging.getLogger("storefront.health")

_SLOW_MS = 5000


@dataclass
class HealthResult:
    """Result of a single gateway probe."""

    target: str
    status: str  # "ok", "slow", "missing", "denied", "down"
    latency_ms: float
    message: str


def probe(
    target: str, check: Callable[[], None], *, storage: bool = False,
) -> HealthResult:
    """Run one blocking probe and classify its outcome."""
    start = time.monotonic()
    try:
        check()
    except (MissingSchemaError, PermissionDeniedError) as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        status = "missing" if isinstance(exc, MissingSchemaError) else "denied"
        return HealthResult(
            target=target,
            status=status,
            latency_ms=elapsed_ms,
            message=remediation_for(exc, storage=storage),
        )
    except GatewayNotConfiguredError as exc:
        return HealthResult(
            target=target,
            status="down",
            latency_ms=0.0,
            message=remediation_for(exc),
        )
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            target=target,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    if elapsed_ms > _SLOW_MS:
        return HealthResult(
            target=target,
            status="slow",
            latency_ms=elapsed_ms,
            message="High latency",
        )
    return HealthResult(
        target=target, status="ok", latency_ms=elapsed_ms, message="",
    )


class HealthChecker:
    """Probes the products table and the image bucket concurrently."""

    def __init__(self, gateway: CatalogGateway | None = None) -> None:
        self.gateway = gateway or CatalogGateway()

    async def check_all(self) -> list[HealthResult]:
        tasks = [
            asyncio.to_thread(
                probe, f"table:{self.gateway.table}", self.gateway.probe_table
            ),
            asyncio.to_thread(
                probe,
                f"bucket:{self.gateway.bucket}",
                self.gateway.probe_bucket,
                storage=True,
            ),
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.target,
                r.status,
                r.latency_ms,
                r.message.splitlines()[0] if r.message else "",
            )
        return results
