# storefront/models/notification.py

"""User-facing notification raised by storefront operations."""

from dataclasses import dataclass


@dataclass
class Notification:
    """A message for the user, using Textual's severity vocabulary."""

    message: str
    severity: str = "information"  # "information", "warning", "error"
