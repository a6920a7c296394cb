"""
Argon2 Credential Verifier

Checks the admin password against an Argon2 hash (ADMIN_PASSWORD_HASH),
so no plain password has to live in the deployment's environment.

Generate a hash with:
    python -c "from argon2 import PasswordHasher; print(PasswordHasher().hash('secret'))"
"""

import hmac
import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from tabletmenu.services.auth.base import BaseCredentialVerifier, VerificationResult

logger = logging.getLogger(__name__)

ph = PasswordHasher()


def hash_password(password: str) -> str:
    return ph.hash(password)


class Argon2CredentialVerifier(BaseCredentialVerifier):
    """Single admin account whose password is stored as an Argon2 hash."""

    def __init__(self, username: str, password_hash: str):
        self._username = username
        self._password_hash = password_hash

    @property
    def backend_name(self) -> str:
        return "argon2"

    def verify(self, username: str, password: str) -> VerificationResult:
        rejected = VerificationResult(
            authenticated=False,
            username=username,
            error_message="Invalid username or password",
        )

        if not hmac.compare_digest(username.encode(), self._username.encode()):
            logger.warning(f"Admin login rejected for unknown user {username!r}")
            return rejected

        try:
            ph.verify(self._password_hash, password)
        except VerificationError:
            logger.warning(f"Admin login rejected for {username!r}")
            return rejected
        except InvalidHashError:
            logger.error("ADMIN_PASSWORD_HASH is not a valid Argon2 hash")
            return rejected

        logger.info(f"Admin login accepted for {username!r}")
        return VerificationResult(authenticated=True, username=username)
