# storefront/ui/app.py

"""Terminal UI for the Rumi storefront."""

import logging
import mimetypes
import webbrowser
from pathlib import Path
from typing import cast

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import (
    Button,
    ContentSwitcher,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
    TextArea,
)

from storefront.config.settings import Settings
from storefront.filters.bulk_import import BulkImportError, parse_bulk_payload
from storefront.models.product import Product, format_price
from storefront.services.advisor import AdvisorBusyError
from storefront.services.normalizer import normalize_product, product_to_row
from storefront.services.purchase_link import build_purchase_link
from storefront.services.reviews import (
    NOT_PURCHASED_MESSAGE,
    ReviewNotAllowedError,
    sort_reviews,
)
from storefront.services.router import (
    AdminLogout,
    ClearFilters,
    CloseCart,
    Navigate,
    OpenCart,
    SetCategory,
    ShopCategory,
    View,
)
from storefront.services.storefront import Storefront

logger = logging.getLogger("storefront.ui")

_NAV_TARGETS = {
    "nav_home": View.HOME,
    "nav_shop": View.SHOP,
    "nav_advisor": View.ADVISOR,
    "nav_admin": View.ADMIN_DASHBOARD,
    "detail_back": View.SHOP,
    "login_cancel": View.HOME,
}


def _price_text(product: Product) -> Text:
    currency = Settings.CURRENCY_LABEL
    text = Text(f"{currency} {format_price(product.price)}", style="bold")
    if product.on_sale and product.original_price:
        text.append(
            f"  {currency} {format_price(product.original_price)}",
            style="strike dim",
        )
        text.append(f"  -{product.discount_percent}%", style="bold red")
    return text


class StorefrontApp(App[object]):
    """Terminal storefront: browsing, bag, advisor chat and admin."""

    TITLE = Settings.BRAND_NAME

    CSS = """
    #nav_bar { height: auto; }
    #search_input { width: 1fr; }
    #cart_panel { dock: right; width: 48; border-left: solid $accent; }
    .row { height: auto; }
    #transcript { height: 1fr; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("f2", "go_home", "Home"),
        Binding("f3", "toggle_cart", "Bag"),
    ]

    def __init__(self, storefront: Storefront | None = None) -> None:
        super().__init__()
        self.storefront = storefront or Storefront()
        self.review_sort: str = "helpful"
        self._editing_id: str | None = None

    # ── Layout ───────────────────────────────────────────

    def compose(self) -> ComposeResult:
        """Build the widget tree; one switcher pane per view."""
        yield Header()
        yield Horizontal(
            Button("Home", id="nav_home"),
            Button("Shop", id="nav_shop"),
            Button("Ask Rumi", id="nav_advisor"),
            Input(placeholder="Search products...", id="search_input"),
            Button("Bag (0)", variant="primary", id="nav_cart"),
            Button("Staff", id="nav_admin"),
            id="nav_bar",
        )
        yield Static("Loading catalog...", id="status")

        with ContentSwitcher(initial=View.HOME.value, id="views"):
            yield Vertical(
                Static(
                    f"Discover {Settings.BRAND_NAME}. Best Sellers:",
                    id="home_banner",
                ),
                DataTable(id="best_sellers", cursor_type="row"),
                Button("Shop Now", variant="primary", id="shop_now"),
                Horizontal(
                    *[
                        Button(f"Shop {cat}", id=f"shopcat_{cat}")
                        for cat in Settings.CATEGORIES
                    ],
                    classes="row",
                ),
                id=View.HOME.value,
            )
            yield Vertical(
                Horizontal(
                    *[
                        Button(cat, id=f"cat_{cat}")
                        for cat in [Settings.ALL_CATEGORIES, *Settings.CATEGORIES]
                    ],
                    Button("Clear Filters", id="clear_filters"),
                    classes="row",
                ),
                Static("", id="subcategories"),
                DataTable(id="shop_table", cursor_type="row", zebra_stripes=True),
                id=View.SHOP.value,
            )
            yield VerticalScroll(
                Static("", id="product_info"),
                Horizontal(
                    Button("Add to Bag", variant="primary", id="detail_add"),
                    Button("Buy on WhatsApp", id="detail_buy"),
                    Button("Back", id="detail_back"),
                    classes="row",
                ),
                Horizontal(
                    Button("Sort: Most Helpful", id="review_sort"),
                    classes="row",
                ),
                Static("", id="reviews"),
                Input(placeholder="Your name", id="review_name"),
                Input(placeholder="Rating 1-5", id="review_rating", value="5"),
                Input(placeholder="Your review", id="review_comment"),
                Button("Write a Review", id="review_submit"),
                id=View.PRODUCT_DETAILS.value,
            )
            yield Vertical(
                VerticalScroll(Static("", id="transcript_text"), id="transcript"),
                Horizontal(
                    Input(placeholder="Ask Rumi anything...", id="advisor_input"),
                    Button("Send", variant="primary", id="advisor_send"),
                    classes="row",
                ),
                id=View.ADVISOR.value,
            )
            yield Vertical(
                Static("Staff Login", id="login_title"),
                Input(placeholder="Email address", id="login_email"),
                Input(placeholder="Password", password=True, id="login_password"),
                Horizontal(
                    Button("Sign in", variant="primary", id="login_submit"),
                    Button("Cancel", id="login_cancel"),
                    classes="row",
                ),
                Static("", id="login_error"),
                id=View.ADMIN_LOGIN.value,
            )
            yield VerticalScroll(
                Static("", id="admin_stats"),
                DataTable(id="admin_table", cursor_type="row"),
                Horizontal(
                    Button("New", id="admin_new"),
                    Button("Delete", variant="error", id="admin_delete"),
                    Button("Log out", id="admin_logout"),
                    classes="row",
                ),
                Input(placeholder="Name", id="form_name"),
                Input(placeholder="Price", id="form_price"),
                Input(placeholder="Original price (optional)", id="form_original"),
                Select(
                    [(c, c) for c in Settings.CATEGORIES],
                    value=Settings.CATEGORIES[0],
                    allow_blank=False,
                    id="form_category",
                ),
                Input(placeholder="Subcategory, e.g. Lipstick", id="form_subcategory"),
                Input(placeholder="Description", id="form_description"),
                Input(placeholder="Image URL or local file path", id="form_image"),
                Input(placeholder="Benefits, comma-separated", id="form_benefits"),
                Button("Save Product", variant="primary", id="admin_save"),
                TextArea(id="bulk_json"),
                Button("Bulk Import JSON", id="bulk_import"),
                id=View.ADMIN_DASHBOARD.value,
            )

        yield Vertical(
            Static("Your Bag", id="cart_title"),
            DataTable(id="cart_table", cursor_type="row"),
            Static("", id="cart_total"),
            Horizontal(
                Button("+", id="cart_inc"),
                Button("-", id="cart_dec"),
                Button("Remove", id="cart_remove"),
                classes="row",
            ),
            Horizontal(
                Button("Checkout", variant="success", id="cart_checkout"),
                Button("Close", id="cart_close"),
                classes="row",
            ),
            id="cart_panel",
        )
        yield Footer()

    def _table(self, table_id: str) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text], self.query_one(f"#{table_id}", DataTable)
        )

    def on_mount(self) -> None:
        """Configure table columns and start the catalog load."""
        for table_id in ("best_sellers", "shop_table"):
            self._table(table_id).add_columns(
                "Name", "Category", "Price", "Rating"
            )
        self._table("admin_table").add_columns(
            "ID", "Name", "Category", "Price", "Sales"
        )
        self._table("cart_table").add_columns("Item", "Qty", "Subtotal")
        self.query_one("#cart_panel").display = False
        self.load_catalog()

    @work(exclusive=True, group="catalog")
    async def load_catalog(self) -> None:
        """Fetch the catalog without blocking the UI."""
        result = await self.storefront.load()
        status = self.query_one("#status", Static)
        if result.source == "fallback":
            status.update("Showing the default collection (offline)")
        else:
            status.update(f"{result.count} products")
        self.refresh_view()

    # ── Rendering ────────────────────────────────────────

    def refresh_view(self) -> None:
        """Re-render everything that depends on storefront state."""
        state = self.storefront.state
        self.query_one("#views", ContentSwitcher).current = state.view.value
        self.query_one("#cart_panel").display = state.cart_open
        self.query_one("#nav_cart", Button).label = (
            f"Bag ({self.storefront.cart.item_count})"
        )

        self._fill_products("best_sellers", self.storefront.best_sellers())
        self._fill_products("shop_table", self.storefront.visible_products())
        subs = self.storefront.subcategories()
        self.query_one("#subcategories", Static).update(
            Text(
                f"{state.category_filter}: {', '.join(subs)}" if subs
                else f"Category: {state.category_filter}"
            )
        )
        self._render_details()
        self._render_transcript()
        self._render_admin()
        self._render_cart()
        self._flush_notifications()

    def _fill_products(self, table_id: str, products: list[Product]) -> None:
        table = self._table(table_id)
        table.clear()
        for p in products:
            table.add_row(
                p.name,
                p.category,
                _price_text(p),
                f"★ {p.rating:.1f}",
                key=p.id,
            )

    def _render_details(self) -> None:
        product = self.storefront.selected_product
        for button_id in ("#detail_add", "#detail_buy", "#review_submit"):
            self.query_one(button_id, Button).disabled = product is None
        if product is None:
            self.query_one("#product_info", Static).update(
                Text("This product is no longer available.", style="dim")
            )
            self.query_one("#reviews", Static).update("")
            return
        info = Text()
        info.append(f"{product.name}\n", style="bold")
        info.append(f"{product.category} / {product.subcategory}\n", style="dim")
        info.append_text(_price_text(product))
        info.append(f"\n★ {product.rating:.1f}\n\n{product.description}\n\n")
        for benefit in product.benefits:
            info.append(f"• {benefit}\n")
        self.query_one("#product_info", Static).update(info)

        reviews = Text()
        ordered = sort_reviews(product.reviews, self.review_sort)
        if not ordered:
            reviews.append("No reviews yet.", style="dim")
        for r in ordered:
            badge = " (Verified Purchase)" if r.verified else ""
            reviews.append(f"{'★' * r.rating} {r.user_name}{badge}", style="bold")
            reviews.append(f"  {r.date}  {r.helpful_count} found helpful\n")
            reviews.append(f"{r.comment}\n\n")
        self.query_one("#reviews", Static).update(reviews)

    def _render_transcript(self) -> None:
        text = Text()
        for turn in self.storefront.advisor.transcript:
            speaker = "You" if turn.role == "user" else "Rumi"
            text.append(f"{speaker}: ", style="bold")
            text.append(turn.text or ("..." if turn.streaming else ""))
            text.append("\n\n")
        self.query_one("#transcript_text", Static).update(text)
        self.query_one("#advisor_send", Button).disabled = (
            self.storefront.advisor.busy
        )

    def _render_admin(self) -> None:
        products = self.storefront.catalog.products
        self.query_one("#admin_stats", Static).update(
            Text(
                f"Products: {len(products)}  "
                f"On sale: {sum(1 for p in products if p.on_sale)}"
            )
        )
        table = self._table("admin_table")
        table.clear()
        for p in products:
            table.add_row(
                p.id, p.name, p.category, format_price(p.price), str(p.sales),
                key=p.id,
            )

    def _render_cart(self) -> None:
        table = self._table("cart_table")
        table.clear()
        for line in self.storefront.cart.lines:
            table.add_row(
                line.product.name,
                str(line.quantity),
                format_price(line.subtotal),
                key=line.id,
            )
        total = self.storefront.cart.total
        self.query_one("#cart_total", Static).update(
            Text(f"Subtotal: {Settings.CURRENCY_LABEL} {format_price(total)}")
            if self.storefront.cart.lines
            else Text("Your bag is empty.")
        )
        self.query_one("#cart_checkout", Button).disabled = not self.storefront.cart.lines

    def _flush_notifications(self) -> None:
        for note in self.storefront.drain_notifications():
            severity = (
                note.severity
                if note.severity in ("information", "warning", "error")
                else "information"
            )
            self.notify(note.message, severity=severity)  # type: ignore[arg-type]

    # ── Navigation & search ──────────────────────────────

    def _go(self, view: View) -> None:
        if (
            self.storefront.state.view is View.ADVISOR
            and view is not View.ADVISOR
        ):
            self.workers.cancel_group(self, "advisor")
        self.storefront.dispatch(Navigate(view))
        self.refresh_view()

    def action_go_home(self) -> None:
        self._go(View.HOME)

    def action_toggle_cart(self) -> None:
        if self.storefront.state.cart_open:
            self.storefront.dispatch(CloseCart())
        else:
            self.storefront.dispatch(OpenCart())
        self.refresh_view()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search_input":
            before = self.storefront.state.view
            self.storefront.search(event.value)
            if before is View.ADVISOR and self.storefront.state.view is not View.ADVISOR:
                self.workers.cancel_group(self, "advisor")
            self.refresh_view()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "advisor_input":
            self._send_advice()
        elif event.input.id in ("login_email", "login_password"):
            self._login()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Open a product from a listing, or load it into the admin form."""
        product_id = event.row_key.value
        if product_id is None:
            return
        table_id = event.data_table.id
        product = self.storefront.catalog.get(product_id)
        if product is None:
            return
        if table_id in ("best_sellers", "shop_table"):
            self.storefront.select_product(product)
            self.refresh_view()
        elif table_id == "admin_table":
            self._fill_form(product)

    # ── Buttons ──────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Route button clicks to storefront actions."""
        button_id = event.button.id or ""

        if button_id in _NAV_TARGETS:
            self._go(_NAV_TARGETS[button_id])
        elif button_id == "shop_now":
            self._go(View.SHOP)
        elif button_id == "nav_cart" or button_id == "cart_close":
            self.action_toggle_cart()
        elif button_id.startswith("shopcat_"):
            self.storefront.dispatch(
                ShopCategory(button_id.removeprefix("shopcat_"))
            )
            self.refresh_view()
        elif button_id.startswith("cat_"):
            self.storefront.dispatch(SetCategory(button_id.removeprefix("cat_")))
            self.refresh_view()
        elif button_id == "clear_filters":
            self.storefront.dispatch(ClearFilters())
            self.query_one("#search_input", Input).value = ""
            self.refresh_view()
        elif button_id == "detail_add":
            product = self.storefront.selected_product
            if product is not None:
                self.storefront.add_to_cart(product)
                self.refresh_view()
        elif button_id == "detail_buy":
            product = self.storefront.selected_product
            if product is not None:
                webbrowser.open(build_purchase_link(product))
        elif button_id == "review_sort":
            self.review_sort = "date" if self.review_sort == "helpful" else "helpful"
            event.button.label = (
                "Sort: Newest First" if self.review_sort == "date"
                else "Sort: Most Helpful"
            )
            self.refresh_view()
        elif button_id == "review_submit":
            await self._submit_review()
        elif button_id == "advisor_send":
            self._send_advice()
        elif button_id == "login_submit":
            self._login()
        elif button_id.startswith("cart_"):
            self._cart_action(button_id)
        elif button_id == "admin_logout":
            self.storefront.dispatch(AdminLogout())
            self.refresh_view()
        elif button_id == "admin_new":
            self._clear_form()
        elif button_id == "admin_delete":
            await self._delete_selected()
        elif button_id == "admin_save":
            await self._save_form()
        elif button_id == "bulk_import":
            await self._bulk_import()

    # ── Cart ─────────────────────────────────────────────

    def _cart_action(self, button_id: str) -> None:
        cart = self.storefront.cart
        if button_id == "cart_checkout":
            if cart.lines:
                self.storefront.checkout()
            self.refresh_view()
            return

        row = self._table("cart_table").cursor_row
        if not 0 <= row < len(cart.lines):
            return
        product_id = cart.lines[row].id
        if button_id == "cart_inc":
            cart.update_quantity(product_id, 1)
        elif button_id == "cart_dec":
            cart.update_quantity(product_id, -1)
        elif button_id == "cart_remove":
            cart.remove(product_id)
        self.refresh_view()

    # ── Reviews ──────────────────────────────────────────

    async def _submit_review(self) -> None:
        product = self.storefront.selected_product
        if product is None:
            return
        if not self.storefront.can_review(product.id):
            self.notify(NOT_PURCHASED_MESSAGE, severity="warning")
            return

        name = self.query_one("#review_name", Input)
        rating = self.query_one("#review_rating", Input)
        comment = self.query_one("#review_comment", Input)
        try:
            stars = int(rating.value or "5")
            await self.storefront.submit_review(
                product.id, name.value, stars, comment.value
            )
        except ReviewNotAllowedError as exc:
            self.notify(str(exc), severity="warning")
            return
        except ValueError as exc:
            self.notify(str(exc) or "Invalid rating", severity="warning")
            return

        name.value = ""
        comment.value = ""
        rating.value = "5"
        self.refresh_view()

    # ── Advisor ──────────────────────────────────────────

    def _send_advice(self) -> None:
        field = self.query_one("#advisor_input", Input)
        message = field.value
        if not message.strip() or self.storefront.advisor.busy:
            return
        field.value = ""
        self.stream_advice(message)

    @work(exclusive=True, group="advisor")
    async def stream_advice(self, message: str) -> None:
        """Stream one advisor reply into the transcript."""
        try:
            async for _ in self.storefront.advisor.send(
                message, self.storefront.catalog.products
            ):
                self._render_transcript()
        except AdvisorBusyError:
            self.notify("Rumi is still answering.", severity="warning")
        finally:
            self._render_transcript()

    # ── Admin ────────────────────────────────────────────

    def _login(self) -> None:
        email = self.query_one("#login_email", Input)
        password = self.query_one("#login_password", Input)
        error = self.query_one("#login_error", Static)
        if self.storefront.login(email.value, password.value):
            error.update("")
            password.value = ""
        else:
            error.update(Text("Invalid credentials", style="red"))
        self.refresh_view()

    def _fill_form(self, product: Product) -> None:
        self._editing_id = product.id
        self.query_one("#form_name", Input).value = product.name
        self.query_one("#form_price", Input).value = format_price(product.price).replace(",", "")
        self.query_one("#form_original", Input).value = (
            format_price(product.original_price).replace(",", "")
            if product.original_price else ""
        )
        self.query_one("#form_category", Select).value = product.category
        self.query_one("#form_subcategory", Input).value = product.subcategory
        self.query_one("#form_description", Input).value = product.description
        self.query_one("#form_image", Input).value = product.image
        self.query_one("#form_benefits", Input).value = ", ".join(product.benefits)

    def _clear_form(self) -> None:
        self._editing_id = None
        for field_id in (
            "form_name", "form_price", "form_original", "form_subcategory",
            "form_description", "form_image", "form_benefits",
        ):
            self.query_one(f"#{field_id}", Input).value = ""
        self.query_one("#form_category", Select).value = Settings.CATEGORIES[0]

    async def _resolve_image(self, value: str) -> str:
        """Upload a local file and return its URL; URLs pass through."""
        path = Path(value).expanduser()
        if not value or value.startswith(("http://", "https://")) or not path.is_file():
            return value
        content_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        url = await self.storefront.catalog.upload_image(
            path.name, path.read_bytes(), content_type
        )
        return url or ""

    async def _save_form(self) -> None:
        try:
            price = float(self.query_one("#form_price", Input).value)
            original_raw = self.query_one("#form_original", Input).value.strip()
            original = float(original_raw) if original_raw else None
        except ValueError:
            self.notify("Price must be a number", severity="error")
            return

        draft = {
            "name": self.query_one("#form_name", Input).value,
            "discounted_price": price,
            "original_price": original,
            "category": self.query_one("#form_category", Select).value,
            "subcategory": self.query_one("#form_subcategory", Input).value,
            "description": self.query_one("#form_description", Input).value,
            "image": await self._resolve_image(
                self.query_one("#form_image", Input).value.strip()
            ),
            "benefits": [
                b.strip()
                for b in self.query_one("#form_benefits", Input).value.split(",")
            ],
        }

        existing = (
            self.storefront.catalog.get(self._editing_id)
            if self._editing_id else None
        )
        if existing is not None:
            merged = {**product_to_row(existing), **draft}
            await self.storefront.catalog.update(normalize_product(merged))
        else:
            await self.storefront.catalog.add(draft)
        self._clear_form()
        self.refresh_view()

    async def _delete_selected(self) -> None:
        table = self._table("admin_table")
        products = self.storefront.catalog.products
        if not 0 <= table.cursor_row < len(products):
            return
        product = products[table.cursor_row]
        await self.storefront.catalog.delete(product.id)
        if self._editing_id == product.id:
            self._clear_form()
        self.notify(f"Deleted {product.name}")
        self.refresh_view()

    async def _bulk_import(self) -> None:
        area = self.query_one("#bulk_json", TextArea)
        try:
            drafts = parse_bulk_payload(area.text)
        except BulkImportError as exc:
            self.notify(str(exc), severity="error")
            return
        added = await self.storefront.catalog.bulk_add(drafts)
        area.text = ""
        self.notify(f"Successfully added {len(added)} products.")
        self.refresh_view()
