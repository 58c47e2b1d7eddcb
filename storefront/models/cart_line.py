# storefront/models/cart_line.py

"""Cart line model."""

from dataclasses import dataclass

from storefront.models.product import Product


@dataclass
class CartLine:
    """A by-value product snapshot plus the quantity in the bag."""

    product: Product
    quantity: int = 1

    @property
    def id(self) -> str:
        return self.product.id

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity
