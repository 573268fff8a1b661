"""Application layer interfaces."""
from abc import ABC, abstractmethod

from core.domain.value_objects import Role


class IIdentityResolver(ABC):
    """
    Interface for bearer-credential verification.

    Implementations verify an externally issued identity token and
    return the caller's email.
    """

    @abstractmethod
    async def resolve(self, credential: str) -> str:
        """
        Verify a credential.

        Args:
            credential: Raw bearer token (without the "Bearer " prefix)

        Returns:
            Verified identity email

        Raises:
            Unauthenticated: If the credential is missing, invalid or expired
        """
        pass


class IRoleDirectory(ABC):
    """Interface for role lookup by identity email."""

    @abstractmethod
    async def lookup_role(self, email: str) -> Role:
        """
        Get the caller's role.

        Args:
            email: Verified identity email

        Returns:
            Stored role, or Role.BUYER when the user or the role is absent
        """
        pass


__all__ = ["IIdentityResolver", "IRoleDirectory"]
