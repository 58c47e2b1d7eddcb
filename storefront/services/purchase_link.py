# storefront/services/purchase_link.py

"""Messaging deep link for the "Buy Now" shortcut."""

import urllib.parse

from storefront.config.settings import Settings
from storefront.models.product import Product, format_price


def purchase_message(product: Product) -> str:
    return (
        f"Hi, I am interested in buying {product.name} for "
        f"{Settings.CURRENCY_LABEL} {format_price(product.price)}"
    )


def build_purchase_link(
    product: Product, phone: str = Settings.WHATSAPP_PHONE,
) -> str:
    """WhatsApp chat link pre-filled with a purchase-intent message."""
    text = urllib.parse.quote(purchase_message(product), safe="")
    return f"https://wa.me/{phone}?text={text}"
