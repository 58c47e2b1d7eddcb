# storefront/services/router.py

"""View routing as a pure state-transition function.

:class:`RouterState` is immutable; :func:`reduce` maps a state and an
action to the next state.  Side effects such as resolving the selected
product against the live catalog happen in the caller before dispatch.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.router")


class View(Enum):
    """Named application screens."""

    HOME = "HOME"
    SHOP = "SHOP"
    ADVISOR = "ADVISOR"
    PRODUCT_DETAILS = "PRODUCT_DETAILS"
    ADMIN_LOGIN = "ADMIN_LOGIN"
    ADMIN_DASHBOARD = "ADMIN_DASHBOARD"


@dataclass(frozen=True)
class RouterState:
    """Everything the screens branch on, apart from catalog and cart."""

    view: View = View.HOME
    selected_product_id: str | None = None
    category_filter: str = Settings.ALL_CATEGORIES
    search_query: str = ""
    cart_open: bool = False
    admin_authenticated: bool = False


# ── Actions ──────────────────────────────────────────────


@dataclass(frozen=True)
class Navigate:
    view: View


@dataclass(frozen=True)
class SelectProduct:
    product_id: str


@dataclass(frozen=True)
class ChangeSearch:
    query: str


@dataclass(frozen=True)
class SetCategory:
    category: str


@dataclass(frozen=True)
class ShopCategory:
    """Footer shortcut: open the shop filtered to one category."""

    category: str


@dataclass(frozen=True)
class ClearFilters:
    pass


@dataclass(frozen=True)
class AdminLoginSucceeded:
    pass


@dataclass(frozen=True)
class AdminLogout:
    pass


@dataclass(frozen=True)
class OpenCart:
    pass


@dataclass(frozen=True)
class CloseCart:
    pass


Action = (
    Navigate
    | SelectProduct
    | ChangeSearch
    | SetCategory
    | ShopCategory
    | ClearFilters
    | AdminLoginSucceeded
    | AdminLogout
    | OpenCart
    | CloseCart
)


def _navigate(state: RouterState, view: View) -> RouterState:
    if view is View.ADMIN_DASHBOARD and not state.admin_authenticated:
        logger.info("Dashboard requested without login, showing login")
        return replace(state, view=View.ADMIN_LOGIN)
    if view is View.PRODUCT_DETAILS and state.selected_product_id is None:
        return state
    return replace(state, view=view)


def reduce(state: RouterState, action: Action) -> RouterState:
    """Return the state that follows *action*."""
    if isinstance(action, Navigate):
        return _navigate(state, action.view)
    if isinstance(action, SelectProduct):
        return replace(
            state,
            view=View.PRODUCT_DETAILS,
            selected_product_id=action.product_id,
        )
    if isinstance(action, ChangeSearch):
        if action.query.strip() and state.view is not View.SHOP:
            return replace(
                state,
                search_query=action.query,
                view=View.SHOP,
                category_filter=Settings.ALL_CATEGORIES,
            )
        return replace(state, search_query=action.query)
    if isinstance(action, SetCategory):
        return replace(state, category_filter=action.category)
    if isinstance(action, ShopCategory):
        return replace(
            state, view=View.SHOP, category_filter=action.category
        )
    if isinstance(action, ClearFilters):
        return replace(
            state,
            category_filter=Settings.ALL_CATEGORIES,
            search_query="",
        )
    if isinstance(action, AdminLoginSucceeded):
        if state.view is not View.ADMIN_LOGIN:
            logger.warning(
                "Ignoring admin login outside the login view (%s)",
                state.view.value,
            )
            return state
        return replace(
            state, admin_authenticated=True, view=View.ADMIN_DASHBOARD
        )
    if isinstance(action, AdminLogout):
        return replace(state, admin_authenticated=False, view=View.HOME)
    if isinstance(action, OpenCart):
        return replace(state, cart_open=True)
    if isinstance(action, CloseCart):
        return replace(state, cart_open=False)
    raise TypeError(f"Unknown action: {action!r}")
