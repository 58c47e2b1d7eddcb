# storefront/config/settings.py

"""Central configuration for the Rumi storefront."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the Rumi storefront."""

    # --- Catalog gateway ---
    GATEWAY_URL: str = os.getenv("SUPABASE_URL", "").rstrip("/")
    GATEWAY_KEY: str = os.getenv("SUPABASE_KEY", "")
    PRODUCTS_TABLE: str = "products"
    IMAGE_BUCKET: str = "product-images"
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Attempts on transient failures
    RETRY_BACKOFF: float = 0.5          # Linear backoff step (secs)

    # --- AI advisor ---
    ADVISOR_API_KEY: str = os.getenv(
        "GEMINI_API_KEY", os.getenv("API_KEY", "")
    )
    ADVISOR_MODEL: str = os.getenv(
        "STOREFRONT_ADVISOR_MODEL", "gemini-3-flash-preview"
    )
    ADVISOR_TEMPERATURE: float = 0.7

    # --- Storefront ---
    BRAND_NAME: str = "Rumi Makeup"
    CATEGORIES: list[str] = ["Lips", "Eyes", "Face", "Skincare"]
    ALL_CATEGORIES: str = "All"
    CURRENCY_LABEL: str = "Rs."
    PLACEHOLDER_NAME: str = "Untitled Product"
    PLACEHOLDER_IMAGE: str = "https://placehold.co/400x400?text=Rumi"
    BEST_SELLER_COUNT: int = 4
    WHATSAPP_PHONE: str = os.getenv(
        "STOREFRONT_WHATSAPP_PHONE", "923315976504"
    )

    # --- Admin ---
    ADMIN_EMAIL: str = os.getenv("STOREFRONT_ADMIN_EMAIL", "")
    ADMIN_PASSWORD: str = os.getenv("STOREFRONT_ADMIN_PASSWORD", "")

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("STOREFRONT_LOG_LEVEL", "WARNING").upper()

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
