"""
Static Credential Verifier

Compares the login against one configured username/password pair
(ADMIN_USERNAME / ADMIN_PASSWORD, "admin"/"admin" out of the box).
"""

import hmac
import logging

from tabletmenu.services.auth.base import BaseCredentialVerifier, VerificationResult

logger = logging.getLogger(__name__)


class StaticCredentialVerifier(BaseCredentialVerifier):
    """
    Single fixed admin account.

    Example:
        >>> verifier = StaticCredentialVerifier("admin", "admin")
        >>> verifier.verify("admin", "admin").authenticated
        True
    """

    def __init__(self, username: str, password: str):
        self._username = username
        self._password = password

    @property
    def backend_name(self) -> str:
        return "static"

    def verify(self, username: str, password: str) -> VerificationResult:
        # Constant-time comparisons on both fields
        user_ok = hmac.compare_digest(username.encode(), self._username.encode())
        pass_ok = hmac.compare_digest(password.encode(), self._password.encode())

        if user_ok and pass_ok:
            logger.info(f"Admin login accepted for {username!r}")
            return VerificationResult(authenticated=True, username=username)

        logger.warning(f"Admin login rejected for {username!r}")
        return VerificationResult(
            authenticated=False,
            username=username,
            error_message="Invalid username or password",
        )
