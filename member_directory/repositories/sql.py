# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Data-access layer for roles and members over SQLAlchemy Core.
Every write runs in its own engine.begin() transaction; the table
constraints are the source of truth for unique keys and role references.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, func, insert, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from member_directory.core.database import members_table, roles_table
from member_directory.core.logging import get_logger
from member_directory.models.domain import Member, Role
from member_directory.repositories.base import (
    MemberRepository,
    PersistenceError,
    ReferenceViolation,
    RoleRepository,
    RowNotFound,
    UniqueViolation,
)

logger = get_logger(__name__)

MEMBER_UNIQUE_FIELDS = ("username", "email")


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _row_to_role(row) -> Role:
    return Role(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        created_at=_aware(row["created_at"]),
        updated_at=_aware(row["updated_at"]),
    )


def _row_to_member(row) -> Member:
    return Member(
        id=row["id"],
        username=row["username"],
        display_name=row["display_name"],
        email=row["email"],
        bio=row["bio"],
        avatar_url=row["avatar_url"],
        is_active=bool(row["is_active"]),
        role_id=row["role_id"],
        created_at=_aware(row["created_at"]),
        updated_at=_aware(row["updated_at"]),
    )


def classify_integrity_error(exc: IntegrityError, table: str,
                             fields: tuple[str, ...]) -> PersistenceError:
    """Translate a driver-specific IntegrityError into the port's errors.

    SQLite reports "UNIQUE constraint failed: members.email", PostgreSQL
    names the constraint ("uq_members_email").
    """
    message = str(exc.orig).lower()
    if "foreign key" in message:
        return ReferenceViolation(str(exc.orig))
    for field in fields:
        if f"{table}.{field}" in message or f"uq_{table}_{field}" in message:
            return UniqueViolation(field)
    return PersistenceError(str(exc.orig))


class _SqlRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def verify_connection(self) -> None:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Database unavailable: {exc}") from exc

    def _fetch_all(self, stmt) -> list[dict[str, Any]]:
        try:
            with self._engine.connect() as conn:
                return [dict(r) for r in conn.execute(stmt).mappings().all()]
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def _fetch_one(self, stmt) -> Optional[dict[str, Any]]:
        rows = self._fetch_all(stmt.limit(1))
        return rows[0] if rows else None

    def _scalar(self, stmt) -> int:
        try:
            with self._engine.connect() as conn:
                return conn.execute(stmt).scalar() or 0
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def _write(self, table, row_id: Optional[int], values: dict[str, Any],
               fields: tuple[str, ...]) -> int:
        try:
            with self._engine.begin() as conn:
                if row_id is None:
                    result = conn.execute(insert(table).values(**values))
                    return result.inserted_primary_key[0]
                result = conn.execute(
                    update(table).where(table.c.id == row_id).values(**values)
                )
                if result.rowcount == 0:
                    raise RowNotFound(table.name, row_id)
                return row_id
        except IntegrityError as exc:
            raise classify_integrity_error(exc, table.name, fields) from exc
        except SQLAlchemyError as exc:
            logger.error("Write to %s failed: %s", table.name, exc)
            raise PersistenceError(str(exc)) from exc

    def _delete(self, table, row_id: int) -> bool:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(delete(table).where(table.c.id == row_id))
                return result.rowcount > 0
        except IntegrityError as exc:
            raise classify_integrity_error(exc, table.name, ()) from exc
        except SQLAlchemyError as exc:
            logger.error("Delete from %s failed: %s", table.name, exc)
            raise PersistenceError(str(exc)) from exc


class SqlRoleRepository(_SqlRepository, RoleRepository):

    # ── Read ──

    def find_all(self) -> list[Role]:
        rows = self._fetch_all(select(roles_table).order_by(roles_table.c.id))
        return [_row_to_role(r) for r in rows]

    def find_by_id(self, role_id: int) -> Optional[Role]:
        row = self._fetch_one(select(roles_table).where(roles_table.c.id == role_id))
        return _row_to_role(row) if row else None

    def find_by_name(self, name: str) -> Optional[Role]:
        row = self._fetch_one(select(roles_table).where(roles_table.c.name == name))
        return _row_to_role(row) if row else None

    def exists_by_name(self, name: str) -> bool:
        return self.find_by_name(name) is not None

    def count(self) -> int:
        return self._scalar(select(func.count()).select_from(roles_table))

    # ── Write ──

    def save(self, role: Role) -> Role:
        values = role.model_dump(exclude={"id"})
        role_id = self._write(roles_table, role.id, values, ("name",))
        return role.model_copy(update={"id": role_id})

    def delete_by_id(self, role_id: int) -> bool:
        return self._delete(roles_table, role_id)


class SqlMemberRepository(_SqlRepository, MemberRepository):

    # ── Read ──

    def find_all(self) -> list[Member]:
        rows = self._fetch_all(select(members_table).order_by(members_table.c.id))
        return [_row_to_member(r) for r in rows]

    def find_active(self) -> list[Member]:
        rows = self._fetch_all(
            select(members_table)
            .where(members_table.c.is_active.is_(True))
            .order_by(members_table.c.id)
        )
        return [_row_to_member(r) for r in rows]

    def find_by_id(self, member_id: int) -> Optional[Member]:
        return self._find_where(members_table.c.id == member_id)

    def find_by_username(self, username: str) -> Optional[Member]:
        return self._find_where(members_table.c.username == username)

    def find_by_email(self, email: str) -> Optional[Member]:
        return self._find_where(members_table.c.email == email)

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def exists_by_role(self, role_id: int) -> bool:
        return self._find_where(members_table.c.role_id == role_id) is not None

    def count(self) -> int:
        return self._scalar(select(func.count()).select_from(members_table))

    def count_active(self) -> int:
        return self._scalar(
            select(func.count())
            .select_from(members_table)
            .where(members_table.c.is_active.is_(True))
        )

    # ── Write ──

    def save(self, member: Member) -> Member:
        values = member.model_dump(exclude={"id"})
        member_id = self._write(members_table, member.id, values, MEMBER_UNIQUE_FIELDS)
        return member.model_copy(update={"id": member_id})

    def delete_by_id(self, member_id: int) -> bool:
        return self._delete(members_table, member_id)

    # ── Private ──

    def _find_where(self, clause) -> Optional[Member]:
        row = self._fetch_one(select(members_table).where(clause))
        return _row_to_member(row) if row else None
