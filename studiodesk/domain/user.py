"""
User roles inside a studio
"""
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    PHOTOGRAPHER = "photographer"
    VIDEOGRAPHER = "videographer"
    EDITOR = "editor"
    OTHER = "other"

    @property
    def requires_firm(self) -> bool:
        """Every role except admin must belong to a firm at signup."""
        match self:
            case UserRole.ADMIN:
                return False
            case UserRole.PHOTOGRAPHER | UserRole.VIDEOGRAPHER | UserRole.EDITOR | UserRole.OTHER:
                return True

    @property
    def can_manage_firm(self) -> bool:
        """Team membership and firm settings are admin-only."""
        match self:
            case UserRole.ADMIN:
                return True
            case UserRole.PHOTOGRAPHER | UserRole.VIDEOGRAPHER | UserRole.EDITOR | UserRole.OTHER:
                return False

    @property
    def creates_firm_on_signup(self) -> bool:
        return not self.requires_firm
