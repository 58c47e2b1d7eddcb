# storefront/services/storefront.py

"""Application state for one storefront session.

One :class:`Storefront` owns the catalog, bag, purchase ledger, router
state and advisor transcript.  The TUI and CLI call its methods instead
of touching the parts directly, so every user action passes through one
place.
"""

import logging
from dataclasses import dataclass, field

from storefront.filters.product_filter import ProductFilter
from storefront.models.notification import Notification
from storefront.models.product import Product
from storefront.services.advisor import AdvisorSession
from storefront.services.auth import Authenticator, EnvCredentialAuthenticator
from storefront.services.cart import Cart, CheckoutResult
from storefront.services.catalog_store import CatalogStore, LoadResult
from storefront.services.ledger import PurchaseLedger
from storefront.services.reviews import submit_review
from storefront.services.router import (
    Action,
    AdminLoginSucceeded,
    ChangeSearch,
    CloseCart,
    Navigate,
    OpenCart,
    RouterState,
    SelectProduct,
    View,
    reduce,
)

logger = logging.getLogger("storefront.app_state")


@dataclass
class Storefront:
    """Session-wide state and the user actions that change it."""

    catalog: CatalogStore = field(default_factory=CatalogStore)
    cart: Cart = field(default_factory=Cart)
    ledger: PurchaseLedger = field(default_factory=PurchaseLedger)
    advisor: AdvisorSession = field(default_factory=AdvisorSession)
    authenticator: Authenticator = field(
        default_factory=EnvCredentialAuthenticator
    )
    state: RouterState = field(default_factory=RouterState)

    # ── Routing ──────────────────────────────────────────

    def dispatch(self, action: Action) -> RouterState:
        """Apply a user action to the router state.

        ``AdminLoginSucceeded`` is refused here; only :meth:`login` may
        apply it, after the authenticator accepts the credentials.
        """
        if isinstance(action, AdminLoginSucceeded):
            logger.warning("Rejected admin login dispatched without credentials")
            raise PermissionError("Admin login requires Storefront.login")
        return self._apply(action)

    def _apply(self, action: Action) -> RouterState:
        previous = self.state.view
        self.state = reduce(self.state, action)
        if self.state.view is not previous:
            logger.debug(
                "View %s -> %s via %s",
                previous.value,
                self.state.view.value,
                type(action).__name__,
            )
        return self.state

    def select_product(self, product: Product) -> Product:
        """Open the detail view, re-resolving *product* against the live catalog."""
        current = self.catalog.get(product.id) or product
        self.dispatch(SelectProduct(current.id))
        return current

    def search(self, query: str) -> RouterState:
        return self.dispatch(ChangeSearch(query))

    def login(self, email: str, password: str) -> bool:
        if not self.authenticator.authenticate(email, password):
            return False
        if self.state.view is not View.ADMIN_LOGIN:
            self._apply(Navigate(View.ADMIN_LOGIN))
        self._apply(AdminLoginSucceeded())
        return True

    # ── Derived views ────────────────────────────────────

    @property
    def selected_product(self) -> Product | None:
        product_id = self.state.selected_product_id
        if product_id is None:
            return None
        return self.catalog.get(product_id)

    def visible_products(self) -> list[Product]:
        return ProductFilter.filter_products(
            self.catalog.products,
            self.state.category_filter,
            self.state.search_query,
        )

    def best_sellers(self) -> list[Product]:
        return ProductFilter.best_sellers(self.catalog.products)

    def subcategories(self) -> list[str]:
        return ProductFilter.subcategories(
            self.catalog.products, self.state.category_filter
        )

    def can_review(self, product_id: str) -> bool:
        return product_id in self.ledger

    # ── Catalog ──────────────────────────────────────────

    async def load(self) -> LoadResult:
        result = await self.catalog.load()
        logger.info(
            "Catalog loaded from %s (%d products, error=%s)",
            result.source,
            result.count,
            result.error_kind,
        )
        return result

    def drain_notifications(self) -> list[Notification]:
        """Hand pending notifications to the UI and forget them."""
        pending = list(self.catalog.notifications)
        self.catalog.notifications.clear()
        return pending

    # ── Cart ─────────────────────────────────────────────

    def add_to_cart(self, product: Product) -> None:
        self.cart.add(product)
        self.dispatch(OpenCart())

    def checkout(self) -> CheckoutResult:
        result = self.cart.checkout(self.ledger)
        self.dispatch(CloseCart())
        self.catalog.notifications.append(
            Notification(result.message, "information")
        )
        return result

    # ── Reviews ──────────────────────────────────────────

    async def submit_review(
        self,
        product_id: str,
        user_name: str,
        rating: int,
        comment: str,
    ) -> Product:
        """Attach a verified review and sync the product.

        Raises ``ReviewNotAllowedError`` or ``ValueError`` before any
        state changes.
        """
        product = self.catalog.get(product_id)
        if product is None:
            raise KeyError(product_id)
        reviewed = submit_review(
            product, self.ledger, user_name, rating, comment
        )
        return await self.catalog.update(reviewed)
