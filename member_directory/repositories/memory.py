# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: in-memory role and member storage.
Both repositories share one InMemoryStore so the member -> role reference
and the unique keys are checked under a single lock.
"""

import threading
from typing import Optional

from member_directory.models.domain import Member, Role
from member_directory.repositories.base import (
    MemberRepository,
    ReferenceViolation,
    RoleRepository,
    RowNotFound,
    UniqueViolation,
)


class InMemoryStore:
    """Keyed tables plus id sequences, guarded by one re-entrant lock."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.roles: dict[int, Role] = {}
        self.members: dict[int, Member] = {}
        self._role_seq = 0
        self._member_seq = 0

    def next_role_id(self) -> int:
        self._role_seq += 1
        return self._role_seq

    def next_member_id(self) -> int:
        self._member_seq += 1
        return self._member_seq

    def clear(self) -> None:
        with self.lock:
            self.roles.clear()
            self.members.clear()
            self._role_seq = 0
            self._member_seq = 0


class InMemoryRoleRepository(RoleRepository):
    """Dict-backed role table."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    # ── Read ──

    def find_all(self) -> list[Role]:
        with self._store.lock:
            return [r.model_copy() for _, r in sorted(self._store.roles.items())]

    def find_by_id(self, role_id: int) -> Optional[Role]:
        with self._store.lock:
            role = self._store.roles.get(role_id)
            return role.model_copy() if role else None

    def find_by_name(self, name: str) -> Optional[Role]:
        with self._store.lock:
            for role in self._store.roles.values():
                if role.name == name:
                    return role.model_copy()
        return None

    def exists_by_name(self, name: str) -> bool:
        return self.find_by_name(name) is not None

    def count(self) -> int:
        with self._store.lock:
            return len(self._store.roles)

    # ── Write ──

    def save(self, role: Role) -> Role:
        with self._store.lock:
            for other in self._store.roles.values():
                if other.name == role.name and other.id != role.id:
                    raise UniqueViolation("name", role.name)
            if role.id is None:
                stored = role.model_copy(update={"id": self._store.next_role_id()})
            elif role.id in self._store.roles:
                stored = role.model_copy()
            else:
                raise RowNotFound("roles", role.id)
            self._store.roles[stored.id] = stored
            return stored.model_copy()

    def delete_by_id(self, role_id: int) -> bool:
        with self._store.lock:
            if role_id not in self._store.roles:
                return False
            if any(m.role_id == role_id for m in self._store.members.values()):
                raise ReferenceViolation(f"Role {role_id} is referenced by members")
            del self._store.roles[role_id]
            return True


class InMemoryMemberRepository(MemberRepository):
    """Dict-backed member table."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    # ── Read ──

    def find_all(self) -> list[Member]:
        with self._store.lock:
            return [m.model_copy() for _, m in sorted(self._store.members.items())]

    def find_active(self) -> list[Member]:
        return [m for m in self.find_all() if m.is_active]

    def find_by_id(self, member_id: int) -> Optional[Member]:
        with self._store.lock:
            member = self._store.members.get(member_id)
            return member.model_copy() if member else None

    def find_by_username(self, username: str) -> Optional[Member]:
        return self._find_first(lambda m: m.username == username)

    def find_by_email(self, email: str) -> Optional[Member]:
        return self._find_first(lambda m: m.email is not None and m.email == email)

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def exists_by_role(self, role_id: int) -> bool:
        return self._find_first(lambda m: m.role_id == role_id) is not None

    def count(self) -> int:
        with self._store.lock:
            return len(self._store.members)

    def count_active(self) -> int:
        with self._store.lock:
            return sum(1 for m in self._store.members.values() if m.is_active)

    # ── Write ──

    def save(self, member: Member) -> Member:
        with self._store.lock:
            for other in self._store.members.values():
                if other.id == member.id:
                    continue
                if other.username == member.username:
                    raise UniqueViolation("username", member.username)
                if member.email is not None and other.email == member.email:
                    raise UniqueViolation("email", member.email)
            if member.role_id not in self._store.roles:
                raise ReferenceViolation(f"Role {member.role_id} does not exist")
            if member.id is None:
                stored = member.model_copy(update={"id": self._store.next_member_id()})
            elif member.id in self._store.members:
                stored = member.model_copy()
            else:
                raise RowNotFound("members", member.id)
            self._store.members[stored.id] = stored
            return stored.model_copy()

    def delete_by_id(self, member_id: int) -> bool:
        with self._store.lock:
            return self._store.members.pop(member_id, None) is not None

    # ── Private ──

    def _find_first(self, predicate) -> Optional[Member]:
        with self._store.lock:
            for member in self._store.members.values():
                if predicate(member):
                    return member.model_copy()
        return None
