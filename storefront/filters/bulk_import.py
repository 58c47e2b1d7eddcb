# storefront/filters/bulk_import.py

"""Validation of admin bulk-import payloads."""

import json
import logging
from typing import Any

logger = logging.getLogger("storefront.filters")


class BulkImportError(ValueError):
    """The pasted payload cannot be imported; nothing was applied."""


def parse_bulk_payload(text: str) -> list[dict[str, Any]]:
    """Parse a JSON array of product objects.

    The whole payload is rejected when any part is malformed, so a bad
    import never partially applies.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.info("Bulk import rejected: %s", exc)
        raise BulkImportError(
            "Invalid JSON format. Please check your syntax."
        ) from exc

    if not isinstance(parsed, list):
        raise BulkImportError("Invalid JSON: Root must be an array.")

    for idx, item in enumerate(parsed):
        if not isinstance(item, dict):
            raise BulkImportError(
                f"Invalid JSON: item {idx + 1} is not a product object."
            )

    return parsed
