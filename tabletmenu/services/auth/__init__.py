"""
Credential Verifier Factory

Provides a single entry point for obtaining the back-office credential check.

Usage:
    from tabletmenu.services.auth import get_credential_verifier

    verifier = get_credential_verifier()
    result = verifier.verify(username, password)

Backend selection:
    - ADMIN_PASSWORD_HASH set → Argon2CredentialVerifier
    - otherwise → StaticCredentialVerifier (ADMIN_USERNAME / ADMIN_PASSWORD)
"""

import logging
from functools import lru_cache

from tabletmenu.core.config import get_settings
from tabletmenu.services.auth.base import BaseCredentialVerifier, VerificationResult
from tabletmenu.services.auth.static import StaticCredentialVerifier
from tabletmenu.services.auth.hashed import Argon2CredentialVerifier, hash_password

logger = logging.getLogger(__name__)


@lru_cache()
def get_credential_verifier() -> BaseCredentialVerifier:
    """
    Get the configured credential verifier instance.

    Returns:
        BaseCredentialVerifier: Configured verifier
    """
    settings = get_settings()

    if settings.admin_password_hash:
        logger.info("Credential Verifier: Using Argon2CredentialVerifier")
        return Argon2CredentialVerifier(settings.admin_username, settings.admin_password_hash)

    if not settings.is_development:
        logger.warning(
            f"Credential Verifier: plain static password in {settings.env_mode.value} mode"
        )
    logger.info("Credential Verifier: Using StaticCredentialVerifier")
    return StaticCredentialVerifier(settings.admin_username, settings.admin_password)


def reset_credential_verifier() -> None:
    """
    Clear the cached verifier instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_credential_verifier.cache_clear()
    logger.debug("Credential verifier cache cleared")


__all__ = [
    "get_credential_verifier",
    "reset_credential_verifier",
    "hash_password",
    "BaseCredentialVerifier",
    "VerificationResult",
    "StaticCredentialVerifier",
    "Argon2CredentialVerifier",
]
