# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Role directory — CRUD with name uniqueness.
Roles that members still reference cannot be deleted.
"""

from typing import Optional

from member_directory.core.exceptions import (
    DuplicateNameError,
    NotFoundError,
    RoleInUseError,
)
from member_directory.core.logging import get_logger
from member_directory.metrics.prometheus import ROLES_CREATED, ROLES_TOTAL
from member_directory.models.domain import Role, RoleView, refreshed_timestamp, utcnow
from member_directory.repositories.base import (
    MemberRepository,
    ReferenceViolation,
    RoleRepository,
    RowNotFound,
    UniqueViolation,
)
from member_directory.services.base import DirectoryService
from member_directory.services.projection import to_role_view

logger = get_logger(__name__)


class RoleService(DirectoryService):
    """Business logic for role management."""

    def __init__(self, role_repo: RoleRepository, member_repo: MemberRepository) -> None:
        self.logger = logger
        self._roles = role_repo
        self._members = member_repo

    # ── Queries ──

    def list_roles(self) -> list[RoleView]:
        with self._store_errors("list roles"):
            return [to_role_view(r) for r in self._roles.find_all()]

    def get_role(self, role_id: int) -> Optional[RoleView]:
        with self._store_errors("load role"):
            role = self._roles.find_by_id(role_id)
        return to_role_view(role) if role else None

    def get_role_by_name(self, name: str) -> Optional[RoleView]:
        with self._store_errors("load role"):
            role = self._roles.find_by_name(name)
        return to_role_view(role) if role else None

    def count_roles(self) -> int:
        with self._store_errors("count roles"):
            return self._roles.count()

    # ── Commands ──

    def create_role(self, name: str, description: Optional[str] = None) -> RoleView:
        """Create a role. Raises DuplicateNameError."""
        with self._store_errors("create role"):
            if self._roles.exists_by_name(name):
                raise self._reject(DuplicateNameError(name))

            now = utcnow()
            role = Role(name=name, description=description, created_at=now, updated_at=now)
            try:
                saved = self._roles.save(role)
            except UniqueViolation:
                raise self._reject(DuplicateNameError(name))

            ROLES_CREATED.inc()
            ROLES_TOTAL.set(self._roles.count())
        logger.info("Role created: id=%s, name=%s", saved.id, saved.name)
        return to_role_view(saved)

    def update_role(self, role_id: int, name: str,
                    description: Optional[str] = None) -> RoleView:
        """Replace a role's name and description. Raises NotFoundError / DuplicateNameError."""
        with self._store_errors("update role"):
            current = self._roles.find_by_id(role_id)
            if current is None:
                raise self._reject(NotFoundError("Role", role_id))

            if name != current.name and self._roles.exists_by_name(name):
                raise self._reject(DuplicateNameError(name))

            updated = Role.model_validate({
                **current.model_dump(),
                "name": name,
                "description": description,
                "updated_at": refreshed_timestamp(current.updated_at),
            })
            try:
                saved = self._roles.save(updated)
            except UniqueViolation:
                raise self._reject(DuplicateNameError(name))
            except RowNotFound:
                raise self._reject(NotFoundError("Role", role_id))

        logger.info("Role updated: id=%s, name=%s", role_id, saved.name)
        return to_role_view(saved)

    def delete_role(self, role_id: int) -> None:
        """Delete an unreferenced role. Raises NotFoundError / RoleInUseError."""
        with self._store_errors("delete role"):
            if self._roles.find_by_id(role_id) is None:
                raise self._reject(NotFoundError("Role", role_id))
            if self._members.exists_by_role(role_id):
                raise self._reject(RoleInUseError(role_id))
            try:
                deleted = self._roles.delete_by_id(role_id)
            except ReferenceViolation:
                raise self._reject(RoleInUseError(role_id))
            if not deleted:
                raise self._reject(NotFoundError("Role", role_id))

            ROLES_TOTAL.set(self._roles.count())
        logger.info("Role deleted: id=%s", role_id)

    # ── Seed ──

    def seed_defaults(self) -> None:
        """Create the default roles when the directory has none."""
        if self.count_roles() > 0:
            return
        for name, description in (
            ("ADMIN", "Administrator role"),
            ("MEMBER", "Regular member"),
        ):
            self.create_role(name, description)
        logger.info("Seeded default roles")
