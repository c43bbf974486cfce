# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package — re-exports the Persistence Port and its in-memory store."""
from member_directory.repositories.base import (
    MemberRepository,
    PersistenceError,
    ReferenceViolation,
    RoleRepository,
    RowNotFound,
    UniqueViolation,
)
from member_directory.repositories.memory import (
    InMemoryMemberRepository,
    InMemoryRoleRepository,
    InMemoryStore,
)

__all__ = [
    "MemberRepository",
    "RoleRepository",
    "PersistenceError",
    "UniqueViolation",
    "ReferenceViolation",
    "RowNotFound",
    "InMemoryStore",
    "InMemoryRoleRepository",
    "InMemoryMemberRepository",
]
