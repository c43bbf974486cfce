# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Member directory — CRUD with username/email uniqueness,
role references and partial updates. Every result is a MemberView
resolved against the member's current role.
"""

from typing import Any, Mapping, Optional

from member_directory.core.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    NotFoundError,
    OperationFailedError,
    RoleNotFoundError,
)
from member_directory.core.logging import get_logger
from member_directory.metrics.prometheus import (
    ACTIVE_MEMBERS,
    MEMBERS_CREATED,
    MEMBERS_TOTAL,
)
from member_directory.models.domain import (
    Member,
    MemberView,
    Role,
    refreshed_timestamp,
    utcnow,
)
from member_directory.repositories.base import (
    MemberRepository,
    ReferenceViolation,
    RoleRepository,
    RowNotFound,
    UniqueViolation,
)
from member_directory.services.base import DirectoryService
from member_directory.services.projection import to_member_view

logger = get_logger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"display_name", "email", "bio", "avatar_url", "is_active", "role_id"}
)
NULLABLE_FIELDS = frozenset({"email", "bio", "avatar_url"})


class MemberService(DirectoryService):
    """Business logic for member management."""

    def __init__(self, member_repo: MemberRepository, role_repo: RoleRepository) -> None:
        self.logger = logger
        self._members = member_repo
        self._roles = role_repo

    # ── Queries ──

    def list_members(self) -> list[MemberView]:
        with self._store_errors("list members"):
            return self._project_all(self._members.find_all())

    def list_active_members(self) -> list[MemberView]:
        with self._store_errors("list active members"):
            return self._project_all(self._members.find_active())

    def get_member(self, member_id: int) -> Optional[MemberView]:
        with self._store_errors("load member"):
            member = self._members.find_by_id(member_id)
            return self._project(member) if member else None

    def get_member_by_username(self, username: str) -> Optional[MemberView]:
        with self._store_errors("load member"):
            member = self._members.find_by_username(username)
            return self._project(member) if member else None

    def count_members(self) -> int:
        with self._store_errors("count members"):
            return self._members.count()

    def count_active_members(self) -> int:
        with self._store_errors("count members"):
            return self._members.count_active()

    # ── Commands ──

    def create_member(
        self,
        username: str,
        display_name: str,
        role_id: int,
        email: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> MemberView:
        """
        Create an active member.
        Raises DuplicateUsernameError, DuplicateEmailError, RoleNotFoundError.
        """
        with self._store_errors("create member"):
            if self._members.exists_by_username(username):
                raise self._reject(DuplicateUsernameError(username))
            if email is not None and self._members.exists_by_email(email):
                raise self._reject(DuplicateEmailError(email))
            role = self._roles.find_by_id(role_id)
            if role is None:
                raise self._reject(RoleNotFoundError(role_id))

            now = utcnow()
            member = Member(
                username=username,
                display_name=display_name,
                email=email,
                bio=bio,
                avatar_url=avatar_url,
                is_active=True,
                role_id=role.id,
                created_at=now,
                updated_at=now,
            )
            saved = self._save(member)

            MEMBERS_CREATED.inc()
            self._refresh_gauges()
        logger.info("Member created: id=%s, username=%s, role=%s",
                    saved.id, saved.username, role.name)
        return to_member_view(saved, role)

    def update_member(self, member_id: int, changes: Mapping[str, Any]) -> MemberView:
        """
        Apply a partial update. Only keys present in `changes` are written;
        a present None clears email, bio or avatar_url.
        Raises NotFoundError, DuplicateEmailError, RoleNotFoundError,
        ValueError for username, unknown keys or None on required fields.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
        cleared = {k for k, v in changes.items() if v is None and k not in NULLABLE_FIELDS}
        if cleared:
            raise ValueError(f"Fields cannot be null: {sorted(cleared)}")

        with self._store_errors("update member"):
            current = self._members.find_by_id(member_id)
            if current is None:
                raise self._reject(NotFoundError("Member", member_id))

            email = changes.get("email")
            if email is not None and email != current.email and self._members.exists_by_email(email):
                raise self._reject(DuplicateEmailError(email))

            if "role_id" in changes:
                role = self._roles.find_by_id(changes["role_id"])
                if role is None:
                    raise self._reject(RoleNotFoundError(changes["role_id"]))
            else:
                role = self._role_of(current)

            updated = Member.model_validate({
                **current.model_dump(),
                **changes,
                "updated_at": refreshed_timestamp(current.updated_at),
            })
            saved = self._save(updated)
            self._refresh_gauges()

        logger.info("Member updated: id=%s, fields=%s", member_id, sorted(changes))
        return to_member_view(saved, role)

    def delete_member(self, member_id: int) -> None:
        """Delete a member. Raises NotFoundError."""
        with self._store_errors("delete member"):
            if self._members.find_by_id(member_id) is None:
                raise self._reject(NotFoundError("Member", member_id))
            if not self._members.delete_by_id(member_id):
                raise self._reject(NotFoundError("Member", member_id))
            self._refresh_gauges()
        logger.info("Member deleted: id=%s", member_id)

    # ── Seed ──

    def seed_defaults(self) -> None:
        """Create the sample members when the directory is empty."""
        if self.count_members() > 0:
            return
        admin = self._roles.find_by_name("ADMIN")
        regular = self._roles.find_by_name("MEMBER")
        if admin is None or regular is None:
            logger.warning("Default roles missing, skipping member seed")
            return
        self.create_member("admin", "Administrator", admin.id,
                           email="admin@example.com", bio="System administrator")
        self.create_member("john_doe", "John Doe", regular.id,
                           email="john.doe@example.com", bio="Software developer")
        logger.info("Seeded default members")

    # ── Private ──

    def _save(self, member: Member) -> Member:
        """Write through the store, re-classifying constraint failures."""
        try:
            return self._members.save(member)
        except UniqueViolation as exc:
            if exc.field == "email":
                raise self._reject(DuplicateEmailError(member.email))
            raise self._reject(DuplicateUsernameError(member.username))
        except ReferenceViolation:
            raise self._reject(RoleNotFoundError(member.role_id))
        except RowNotFound:
            raise self._reject(NotFoundError("Member", member.id))

    def _role_of(self, member: Member) -> Role:
        role = self._roles.find_by_id(member.role_id)
        if role is None:
            raise OperationFailedError(
                f"Member {member.id} references missing role {member.role_id}"
            )
        return role

    def _project(self, member: Member) -> MemberView:
        return to_member_view(member, self._role_of(member))

    def _project_all(self, members: list[Member]) -> list[MemberView]:
        roles = {r.id: r for r in self._roles.find_all()}
        views = []
        for member in members:
            role = roles.get(member.role_id)
            if role is None:
                raise OperationFailedError(
                    f"Member {member.id} references missing role {member.role_id}"
                )
            views.append(to_member_view(member, role))
        return views

    def _refresh_gauges(self) -> None:
        MEMBERS_TOTAL.set(self._members.count())
        ACTIVE_MEMBERS.set(self._members.count_active())
