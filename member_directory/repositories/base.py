# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Persistence Port — abstract read/write access to roles and members.

Implementations enforce unique keys and the member -> role reference at
write time and surface store failures as PersistenceError subclasses.
NO business rules here.
"""

from abc import ABC, abstractmethod
from typing import Optional

from member_directory.models.domain import Member, Role


class PersistenceError(Exception):
    """Low-level store failure (connectivity, constraint, driver)."""


class UniqueViolation(PersistenceError):
    """A write collided with an existing unique key."""

    def __init__(self, field: str, value: object = None):
        self.field = field
        self.value = value
        super().__init__(f"Unique constraint violated on '{field}'")


class ReferenceViolation(PersistenceError):
    """A write or delete would leave a member pointing at a missing role."""

    def __init__(self, message: str = "Foreign key constraint violated"):
        super().__init__(message)


class RowNotFound(PersistenceError):
    """An update targeted a row that no longer exists."""

    def __init__(self, table: str, row_id: object):
        self.table = table
        self.row_id = row_id
        super().__init__(f"No row in '{table}' with id {row_id}")


class RoleRepository(ABC):
    """Role table access."""

    @abstractmethod
    def find_all(self) -> list[Role]:
        ...

    @abstractmethod
    def find_by_id(self, role_id: int) -> Optional[Role]:
        ...

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Role]:
        ...

    @abstractmethod
    def exists_by_name(self, name: str) -> bool:
        ...

    @abstractmethod
    def save(self, role: Role) -> Role:
        """Insert when role.id is None (assigning an id), update otherwise."""
        ...

    @abstractmethod
    def delete_by_id(self, role_id: int) -> bool:
        """Remove the row. Returns False when nothing was deleted."""
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    def verify_connection(self) -> None:
        """Raise PersistenceError when the store cannot be reached."""


class MemberRepository(ABC):
    """Member table access."""

    @abstractmethod
    def find_all(self) -> list[Member]:
        ...

    @abstractmethod
    def find_active(self) -> list[Member]:
        ...

    @abstractmethod
    def find_by_id(self, member_id: int) -> Optional[Member]:
        ...

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[Member]:
        ...

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[Member]:
        ...

    @abstractmethod
    def exists_by_username(self, username: str) -> bool:
        ...

    @abstractmethod
    def exists_by_email(self, email: str) -> bool:
        ...

    @abstractmethod
    def exists_by_role(self, role_id: int) -> bool:
        ...

    @abstractmethod
    def save(self, member: Member) -> Member:
        """Insert when member.id is None (assigning an id), update otherwise."""
        ...

    @abstractmethod
    def delete_by_id(self, member_id: int) -> bool:
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def count_active(self) -> int:
        ...

    def verify_connection(self) -> None:
        """Raise PersistenceError when the store cannot be reached."""
