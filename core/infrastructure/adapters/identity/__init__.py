"""Identity collaborators: token verification and role lookup."""

from .user_role_directory import UserRoleDirectory

__all__ = ["UserRoleDirectory"]
