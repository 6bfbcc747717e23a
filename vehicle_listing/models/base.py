"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets a session
from get_db().
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from vehicle_listing.config import get_settings

settings = get_settings()


def enable_sqlite_savepoints(engine) -> None:
    """
    Let SQLAlchemy control transactions on pysqlite.

    The driver only opens a transaction in front of DML, so a
    SAVEPOINT issued first would be released as a commit.
    """
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


# --- Engine ---
# pool_pre_ping=True tests connections before handing them out,
# so a restarted database doesn't surface as a failed request.
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync endpoints in a threadpool
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)
if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

# --- Session Factory ---
# autocommit=False: services flush, routers decide when to commit.
# autoflush=False: nothing reaches the database until an explicit
# flush or commit. Change tracking for the audit trail relies on
# attribute history still being available before that point.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, even if the endpoint raises.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
