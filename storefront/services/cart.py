# storefront/services/cart.py

"""Shopping bag: product lines keyed by product id."""

import copy
import logging
from dataclasses import dataclass

from storefront.models.cart_line import CartLine
from storefront.models.product import Product
from storefront.services.ledger import PurchaseLedger

logger = logging.getLogger("storefront.cart")

CHECKOUT_MESSAGE = (
    "Thank you for your purchase! You can now leave verified reviews "
    "for these items."
)


@dataclass
class CheckoutResult:
    """Confirmation of a simulated checkout."""

    purchased_ids: list[str]
    total: float
    message: str = CHECKOUT_MESSAGE


class Cart:
    """In-memory bag of (product, quantity) lines.

    Lines hold a copy of the product taken when it was first added, so
    later catalog edits do not reach items already in the bag.
    """

    def __init__(self) -> None:
        self.lines: list[CartLine] = []

    def _find(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.id == product_id:
                return line
        return None

    def add(self, product: Product) -> CartLine:
        """Add one unit; repeats bump the existing line's quantity."""
        line = self._find(product.id)
        if line is not None:
            line.quantity += 1
        else:
            line = CartLine(product=copy.deepcopy(product), quantity=1)
            self.lines.append(line)
        logger.debug("Cart: %s x%d", product.id, line.quantity)
        return line

    def update_quantity(self, product_id: str, delta: int) -> None:
        """Shift a line's quantity by *delta*, never below 1."""
        line = self._find(product_id)
        if line is None:
            return
        line.quantity = max(1, line.quantity + delta)

    def remove(self, product_id: str) -> None:
        self.lines = [line for line in self.lines if line.id != product_id]

    def checkout(self, ledger: PurchaseLedger) -> CheckoutResult:
        """Record every id in the bag as purchased, then empty the bag.

        No payment, stock change or order record happens here.
        """
        purchased = list(dict.fromkeys(line.id for line in self.lines))
        result = CheckoutResult(purchased_ids=purchased, total=self.total)
        ledger.record(purchased)
        self.lines = []
        logger.info(
            "Checkout of %d products (total %.2f)",
            len(purchased),
            result.total,
        )
        return result

    @property
    def total(self) -> float:
        return sum(line.subtotal for line in self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def __len__(self) -> int:
        return len(self.lines)
