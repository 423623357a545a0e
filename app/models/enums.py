"""Closed enumerations shared by models, services and schemas."""

from enum import Enum


class RoleName(str, Enum):
    """Seeded role names. Authorization role lists use these members, never raw strings."""

    ADMIN = "admin"
    MANAGER = "manager"
    CUSTOMER = "customer"

    @classmethod
    def parse(cls, value: "str | RoleName") -> "RoleName":
        """Return the member for value; raise ValueError on unknown or differently-cased names."""
        if isinstance(value, cls):
            return value
        return cls(value)


ROLE_DESCRIPTIONS: dict[RoleName, str] = {
    RoleName.ADMIN: "Administrator with full access to users and customers",
    RoleName.MANAGER: "Manager who maintains customer records",
    RoleName.CUSTOMER: "Regular user who manages their own customers",
}
