#!/usr/bin/env python3
"""
Current User Provider
Who is using the recipe manager and whether they may run admin-only actions.
Role checks only; there are no credentials.
"""

from dataclasses import dataclass
from typing import List, Optional

from recipro.config import config
from recipro.error_handling import PermissionDeniedError


@dataclass(frozen=True)
class CurrentUser:
    """Signed-in user as seen by the core."""
    username: str
    display_name: str = ""
    role: str = "user"

    def is_admin(self, admin_users: Optional[List[str]] = None) -> bool:
        """
        Check admin rights.

        Args:
            admin_users: Admin names, defaults to RECIPRO_ADMIN_USERS

        Returns:
            True for the admin role, a listed username, or a display name
            containing a listed name
        """
        admins = [name.lower() for name in (admin_users if admin_users is not None else config.ADMIN_USERS)]
        if self.role.lower() == "admin":
            return True
        if self.username.lower() in admins:
            return True
        display_name = self.display_name.lower()
        return bool(display_name) and any(admin in display_name for admin in admins)


GUEST_USER = CurrentUser(username="guest", display_name="Guest User", role="guest")


def require_admin(user: CurrentUser, action: str, admin_users: Optional[List[str]] = None):
    """Raise PermissionDeniedError unless the user is an admin."""
    if not user.is_admin(admin_users):
        raise PermissionDeniedError(action, user=user.username)
