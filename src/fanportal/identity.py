"""
Identity & Role store

Maps a caller identifier to its role and to an optional display profile.
Callers arrive as opaque, already-verified strings; None and ANONYMOUS both
stand for the anonymous caller, who is always a guest.
"""
from typing import Optional, Union
import logging
from sqlalchemy.orm import Session

from fanportal.errors import InvalidInput
from fanportal.models import UserRole, UserRoleAssignment, UserProfile
from fanportal.schemas import UserProfileData

log = logging.getLogger(__name__)

ANONYMOUS = "anonymous"


def is_anonymous(caller: Optional[str]) -> bool:
    return caller is None or caller == "" or caller == ANONYMOUS


def parse_role(role: Union[UserRole, str]) -> UserRole:
    """Converts a role name to UserRole, raising InvalidInput for unknown names."""
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        raise InvalidInput(f"Unknown role: {role!r}")


class IdentityStore:
    """Role assignments and user profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_role(self, caller: Optional[str]) -> UserRole:
        """Role of the caller; anyone without an assignment is a guest."""
        if is_anonymous(caller):
            return UserRole.guest
        assignment = self.db.get(UserRoleAssignment, caller)
        if assignment is None:
            return UserRole.guest
        return UserRole(assignment.role)

    def set_role(self, principal: str, role: UserRole) -> None:
        """Writes a role assignment. Authorization is the caller's job."""
        if is_anonymous(principal):
            raise InvalidInput("Cannot assign a role to the anonymous caller")
        assignment = self.db.get(UserRoleAssignment, principal)
        if assignment is None:
            self.db.add(UserRoleAssignment(principal=principal, role=role.value))
        else:
            assignment.role = role.value
        log.info(f"Role of '{principal}' set to {role.value}")

    def is_admin(self, caller: Optional[str]) -> bool:
        return self.get_role(caller) == UserRole.admin

    def get_profile(self, principal: Optional[str]) -> Optional[UserProfileData]:
        """
        Returns the profile of a principal, or None if none was saved yet.
        The role is always read from the role assignments.
        """
        if is_anonymous(principal):
            return None
        profile = self.db.get(UserProfile, principal)
        if profile is None:
            return None
        return UserProfileData(name=profile.name, role=self.get_role(principal).value)

    def save_profile(self, principal: str, name: str) -> None:
        profile = self.db.get(UserProfile, principal)
        if profile is None:
            self.db.add(UserProfile(principal=principal, name=name))
            log.info(f"Profile created for '{principal}'")
        else:
            profile.name = name
