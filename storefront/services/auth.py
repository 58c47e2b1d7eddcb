# storefront/services/auth.py

"""Admin authentication, injected into the storefront."""

import hmac
import logging
from typing import Protocol

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.auth")


class Authenticator(Protocol):
    """Anything that can vouch for admin credentials."""

    def authenticate(self, email: str, password: str) -> bool: ...


class EnvCredentialAuthenticator:
    """Checks against the admin pair configured in the environment.

    With no pair configured every attempt fails, so the dashboard stays
    locked by default.
    """

    def __init__(
        self, email: str | None = None, password: str | None = None,
    ) -> None:
        self._email = Settings.ADMIN_EMAIL if email is None else email
        self._password = (
            Settings.ADMIN_PASSWORD if password is None else password
        )

    def authenticate(self, email: str, password: str) -> bool:
        if not self._email or not self._password:
            logger.warning("Admin login attempted but no credentials configured")
            return False
        email_ok = hmac.compare_digest(
            email.strip().lower().encode(), self._email.lower().encode()
        )
        password_ok = hmac.compare_digest(
            password.encode(), self._password.encode()
        )
        if not (email_ok and password_ok):
            logger.info("Rejected admin login for %s", email)
        return email_ok and password_ok
