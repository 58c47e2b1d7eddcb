# storefront/models/product.py

"""Product and review data models for inter-module data flow."""

from dataclasses import dataclass, field


@dataclass
class Review:
    """A customer review attached to a product."""

    id: str
    user_name: str
    rating: int
    comment: str
    date: str  # ISO "YYYY-MM-DD"
    helpful_count: int = 0
    verified: bool = False


@dataclass
class Product:
    """A catalog product in canonical shape."""

    id: str
    name: str
    category: str
    subcategory: str = ""
    price: float = 0.0
    original_price: float | None = None
    description: str = ""
    image: str = ""
    rating: float = 0.0
    sales: int = 0
    benefits: list[str] = field(default_factory=lambda: list[str]())
    reviews: list[Review] = field(
        default_factory=lambda: list[Review]()
    )

    @property
    def on_sale(self) -> bool:
        """True when an original price exceeds the current price."""
        return (
            self.original_price is not None
            and self.original_price > self.price
        )

    @property
    def savings(self) -> float:
        """Amount saved against the original price (0 when not on sale)."""
        if not self.on_sale or self.original_price is None:
            return 0.0
        return self.original_price - self.price

    @property
    def discount_percent(self) -> int:
        """Whole-number discount percentage, 0 when not on sale."""
        if not self.on_sale or not self.original_price:
            return 0
        return round(self.savings / self.original_price * 100)


def format_price(amount: float) -> str:
    """Render a price with thousands separators, e.g. ``3,950``."""
    if float(amount).is_integer():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}"
