# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire repositories and services.
DATABASE_URL selects the SQL store; otherwise an in-memory store is used.
"""

from member_directory.core.config import settings
from member_directory.repositories.base import MemberRepository, RoleRepository
from member_directory.services.member_service import MemberService
from member_directory.services.role_service import RoleService


def _build_repositories():
    if settings.uses_database:
        from member_directory.core.database import create_directory_engine, init_schema
        from member_directory.repositories.sql import SqlMemberRepository, SqlRoleRepository

        engine = create_directory_engine()
        init_schema(engine)
        return engine, SqlRoleRepository(engine), SqlMemberRepository(engine)

    from member_directory.repositories.memory import (
        InMemoryMemberRepository,
        InMemoryRoleRepository,
        InMemoryStore,
    )

    store = InMemoryStore()
    return None, InMemoryRoleRepository(store), InMemoryMemberRepository(store)


# ── Singleton repository instances ──
_engine, _role_repo, _member_repo = _build_repositories()

# ── Service instances (with injected dependencies) ──
_role_service = RoleService(role_repo=_role_repo, member_repo=_member_repo)
_member_service = MemberService(member_repo=_member_repo, role_repo=_role_repo)


# ── FastAPI dependency functions ──
def get_role_service() -> RoleService:
    return _role_service


def get_member_service() -> MemberService:
    return _member_service


def get_role_repo() -> RoleRepository:
    return _role_repo


def get_member_repo() -> MemberRepository:
    return _member_repo


def get_engine():
    """SQLAlchemy engine, or None when running on the in-memory store."""
    return _engine
