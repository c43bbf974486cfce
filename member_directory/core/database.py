# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine factory and table schema for the SQL store."""
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from member_directory.core.config import settings

# Seconds a SQLite writer waits for the file lock before failing
SQLITE_BUSY_TIMEOUT = 30

metadata = MetaData()

roles_table = Table(
    "roles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("description", String(255)),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("name", name="uq_roles_name"),
    sqlite_autoincrement=True,
)

members_table = Table(
    "members",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(100), nullable=False),
    Column("display_name", String(100), nullable=False),
    Column("email", String(255)),
    Column("bio", String(500)),
    Column("avatar_url", String(255)),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    ),
    UniqueConstraint("username", name="uq_members_username"),
    UniqueConstraint("email", name="uq_members_email"),
    sqlite_autoincrement=True,
)


def _enable_sqlite_foreign_keys(dbapi_conn, _record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def create_directory_engine(url: str | None = None) -> Engine:
    """
    Build an engine for `url` (defaults to DATABASE_URL).

    In-memory SQLite lives inside a single connection, so it is pinned with
    StaticPool and shared by every thread. That engine is for tests and local
    runs only; concurrent writers need a file or server database, which gets
    a regular pool with one connection per checkout.
    """
    url = url or settings.DATABASE_URL
    if make_url(url).get_backend_name() == "sqlite":
        if is_memory_sqlite(url):
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
            )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )


def init_schema(engine: Engine) -> None:
    metadata.create_all(engine)
