# storefront/services/ledger.py

"""Session-local record of checked-out product ids."""

import logging
from collections.abc import Iterable

logger = logging.getLogger("storefront.ledger")


class PurchaseLedger:
    """Append-only set of product ids eligible for verified reviews.

    Lives only for the session and is never matched against a real
    payment; checkout is simulated.
    """

    def __init__(self) -> None:
        self._ids: set[str] = set()

    def record(self, product_ids: Iterable[str]) -> int:
        """Add ids to the ledger; returns how many were new."""
        before = len(self._ids)
        self._ids.update(product_ids)
        added = len(self._ids) - before
        if added:
            logger.info("Ledger now holds %d purchased ids", len(self._ids))
        return added

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)
