"""Persistence layer: credential store, role registry and customer repository."""

from app.repositories.customers import SqlCustomerRepository
from app.repositories.roles import RoleRegistry, SqlRoleRegistry
from app.repositories.users import CredentialStore, SqlUserStore

__all__ = [
    "CredentialStore",
    "RoleRegistry",
    "SqlCustomerRepository",
    "SqlRoleRegistry",
    "SqlUserStore",
]
