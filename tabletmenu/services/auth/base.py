"""
Credential Verifier Abstract Base Class

Defines the interface contract for back-office login checks.
StaticCredentialVerifier and Argon2CredentialVerifier both implement it,
so the login endpoint never knows how credentials are stored.

Design Pattern: Strategy Pattern
    - Swap the credential source without touching the API layer
    - Tests can supply their own verifier
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class VerificationResult:
    """
    Standardized result from a credential check.

    Attributes:
        authenticated: Whether the credentials were accepted
        username: The username that was checked
        error_message: Reason for rejection, safe to show to the user
    """
    authenticated: bool
    username: str
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "authenticated": self.authenticated,
            "username": self.username,
            "error_message": self.error_message,
        }


class BaseCredentialVerifier(ABC):
    """
    Abstract base class for credential verification.

    Example:
        >>> verifier = get_credential_verifier()
        >>> result = verifier.verify("admin", "admin")
        >>> if result.authenticated:
        ...     print("Welcome back!")
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """
        Return the name of the credential backend.

        Returns:
            str: Backend name (e.g., "static", "argon2")
        """
        pass

    @abstractmethod
    def verify(self, username: str, password: str) -> VerificationResult:
        """
        Check a username/password pair.

        Args:
            username: Login name as typed
            password: Password as typed

        Returns:
            VerificationResult: Outcome of the check
        """
        pass
