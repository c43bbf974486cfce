# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Member Directory Service — Repository Tests
===========================================
Both store implementations must honour the same contract: unique keys,
member -> role references and restrict-on-delete for referenced roles.
Run:  pytest test_repositories.py -v
"""

import threading
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.pool import StaticPool

from member_directory.core.database import create_directory_engine, init_schema, is_memory_sqlite
from member_directory.models.domain import Member, Role
from member_directory.repositories.base import (
    PersistenceError,
    ReferenceViolation,
    RowNotFound,
    UniqueViolation,
)
from member_directory.repositories.memory import (
    InMemoryMemberRepository,
    InMemoryRoleRepository,
    InMemoryStore,
)
from member_directory.repositories.sql import (
    SqlMemberRepository,
    SqlRoleRepository,
    classify_integrity_error,
)


@pytest.fixture(params=["memory", "sqlite"])
def repos(request):
    if request.param == "memory":
        store = InMemoryStore()
        return InMemoryRoleRepository(store), InMemoryMemberRepository(store)
    engine = create_directory_engine("sqlite://")
    init_schema(engine)
    return SqlRoleRepository(engine), SqlMemberRepository(engine)


@pytest.fixture
def role(repos):
    roles, _ = repos
    return roles.save(Role(name="ADMIN", description="Administrator role"))


def _member(username="alice", role_id=1, **fields):
    return Member(username=username, display_name=username.title(), role_id=role_id, **fields)


class TestRoleRepository:
    def test_save_assigns_id(self, repos):
        roles, _ = repos
        saved = roles.save(Role(name="ADMIN"))
        assert saved.id == 1
        assert roles.find_by_id(1).name == "ADMIN"

    def test_find_by_name_and_exists(self, repos, role):
        roles, _ = repos
        assert roles.find_by_name("ADMIN").id == role.id
        assert roles.exists_by_name("ADMIN")
        assert not roles.exists_by_name("MEMBER")

    def test_unique_name(self, repos, role):
        roles, _ = repos
        with pytest.raises(UniqueViolation) as exc_info:
            roles.save(Role(name="ADMIN"))
        assert exc_info.value.field == "name"
        assert roles.count() == 1

    def test_update_existing(self, repos, role):
        roles, _ = repos
        roles.save(role.model_copy(update={"description": "changed"}))
        assert roles.find_by_id(role.id).description == "changed"

    def test_update_unknown_id(self, repos):
        roles, _ = repos
        with pytest.raises(RowNotFound):
            roles.save(Role(id=42, name="GHOST"))

    def test_delete(self, repos, role):
        roles, _ = repos
        assert roles.delete_by_id(role.id) is True
        assert roles.delete_by_id(role.id) is False
        assert roles.find_by_id(role.id) is None

    def test_delete_referenced_role_restricted(self, repos, role):
        roles, members = repos
        members.save(_member(role_id=role.id))
        with pytest.raises(ReferenceViolation):
            roles.delete_by_id(role.id)
        assert roles.find_by_id(role.id) is not None

    def test_find_all_ordered(self, repos):
        roles, _ = repos
        roles.save(Role(name="B"))
        roles.save(Role(name="A"))
        assert [r.name for r in roles.find_all()] == ["B", "A"]

    def test_verify_connection(self, repos):
        roles, members = repos
        roles.verify_connection()
        members.verify_connection()


class TestMemberRepository:
    def test_save_and_lookup(self, repos, role):
        _, members = repos
        saved = members.save(_member(email="alice@example.com", role_id=role.id))
        assert saved.id == 1
        assert members.find_by_username("alice").id == saved.id
        assert members.find_by_email("alice@example.com").id == saved.id
        assert members.exists_by_role(role.id)

    def test_unique_username(self, repos, role):
        _, members = repos
        members.save(_member(role_id=role.id))
        with pytest.raises(UniqueViolation) as exc_info:
            members.save(_member(role_id=role.id))
        assert exc_info.value.field == "username"

    def test_unique_email(self, repos, role):
        _, members = repos
        members.save(_member("alice", role_id=role.id, email="x@example.com"))
        with pytest.raises(UniqueViolation) as exc_info:
            members.save(_member("bob", role_id=role.id, email="x@example.com"))
        assert exc_info.value.field == "email"

    def test_null_emails_allowed_many_times(self, repos, role):
        _, members = repos
        members.save(_member("alice", role_id=role.id))
        members.save(_member("bob", role_id=role.id))
        assert members.count() == 2
        assert not members.exists_by_email("alice@example.com")

    def test_missing_role_reference(self, repos):
        _, members = repos
        with pytest.raises(ReferenceViolation):
            members.save(_member(role_id=99))
        assert members.count() == 0

    def test_active_filter(self, repos, role):
        _, members = repos
        members.save(_member("alice", role_id=role.id))
        members.save(_member("bob", role_id=role.id, is_active=False))
        assert [m.username for m in members.find_active()] == ["alice"]
        assert members.count_active() == 1
        assert members.count() == 2

    def test_update_keeps_id(self, repos, role):
        _, members = repos
        saved = members.save(_member(role_id=role.id))
        members.save(saved.model_copy(update={"bio": "hi"}))
        assert members.find_by_id(saved.id).bio == "hi"
        assert members.count() == 1

    def test_update_unknown_id(self, repos, role):
        _, members = repos
        with pytest.raises(RowNotFound):
            members.save(_member(role_id=role.id).model_copy(update={"id": 77}))

    def test_delete(self, repos, role):
        _, members = repos
        saved = members.save(_member(role_id=role.id))
        assert members.delete_by_id(saved.id) is True
        assert members.delete_by_id(saved.id) is False
        assert not members.exists_by_role(role.id)

    def test_returned_records_are_copies(self, repos, role):
        _, members = repos
        saved = members.save(_member(role_id=role.id))
        loaded = members.find_by_id(saved.id)
        loaded.bio = "local only"
        assert members.find_by_id(saved.id).bio is None

    def test_timestamps_are_utc(self, repos, role):
        _, members = repos
        saved = members.save(_member(role_id=role.id))
        loaded = members.find_by_id(saved.id)
        assert loaded.created_at.utcoffset().total_seconds() == 0
        assert loaded.created_at == saved.created_at


class TestMemoryStore:
    def test_clear_resets_sequences(self):
        store = InMemoryStore()
        roles = InMemoryRoleRepository(store)
        roles.save(Role(name="ADMIN"))
        store.clear()
        assert roles.count() == 0
        assert roles.save(Role(name="ADMIN")).id == 1

    def test_count_waits_for_writers(self):
        store = InMemoryStore()
        members = InMemoryMemberRepository(store)
        counted = []

        with store.lock:
            reader = threading.Thread(target=lambda: counted.append(members.count()))
            reader.start()
            reader.join(timeout=0.2)
            assert reader.is_alive()
            assert counted == []
        reader.join()
        assert counted == [0]


# ============================================
# IntegrityError classification
# ============================================
def _integrity_error(message):
    return IntegrityError("INSERT ...", {}, Exception(message))


class TestClassifyIntegrityError:
    def test_sqlite_unique(self):
        err = classify_integrity_error(
            _integrity_error("UNIQUE constraint failed: members.email"),
            "members", ("username", "email"),
        )
        assert isinstance(err, UniqueViolation)
        assert err.field == "email"

    def test_postgres_unique(self):
        err = classify_integrity_error(
            _integrity_error(
                'duplicate key value violates unique constraint "uq_members_username"'
            ),
            "members", ("username", "email"),
        )
        assert isinstance(err, UniqueViolation)
        assert err.field == "username"

    def test_foreign_key(self):
        err = classify_integrity_error(
            _integrity_error("FOREIGN KEY constraint failed"), "members", ("username",)
        )
        assert isinstance(err, ReferenceViolation)

    def test_postgres_foreign_key(self):
        err = classify_integrity_error(
            _integrity_error(
                'update or delete on table "roles" violates foreign key constraint'
            ),
            "roles", (),
        )
        assert isinstance(err, ReferenceViolation)

    def test_unknown(self):
        err = classify_integrity_error(
            _integrity_error("NOT NULL constraint failed: members.display_name"),
            "members", ("username", "email"),
        )
        assert type(err) is PersistenceError


class TestSqlFailures:
    def test_verify_connection_wraps_driver_error(self):
        engine = MagicMock()
        engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        with pytest.raises(PersistenceError):
            SqlRoleRepository(engine).verify_connection()

    def test_read_wraps_driver_error(self):
        engine = MagicMock()
        engine.connect.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with pytest.raises(PersistenceError):
            SqlMemberRepository(engine).find_all()


class TestEngineFactory:
    @pytest.mark.parametrize("url", ["sqlite://", "sqlite:///:memory:", "sqlite+pysqlite://"])
    def test_memory_sqlite_shares_one_connection(self, url):
        assert is_memory_sqlite(url)
        engine = create_directory_engine(url)
        assert isinstance(engine.pool, StaticPool)
        engine.dispose()

    def test_file_sqlite_pools_connections(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'directory.db'}"
        assert not is_memory_sqlite(url)
        engine = create_directory_engine(url)
        assert not isinstance(engine.pool, StaticPool)
        init_schema(engine)
        with engine.connect() as first, engine.connect() as second:
            assert first.connection.dbapi_connection is not second.connection.dbapi_connection
        engine.dispose()

    def test_file_sqlite_enforces_foreign_keys(self, tmp_path):
        engine = create_directory_engine(f"sqlite:///{tmp_path / 'directory.db'}")
        init_schema(engine)
        with pytest.raises(ReferenceViolation):
            SqlMemberRepository(engine).save(_member(role_id=99))
        engine.dispose()
