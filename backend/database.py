# backend/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()

DEFAULT_DATABASE_URL = "sqlite:///./demo_inventory.db"


def normalize_database_url(url: str) -> str:
    # Heroku/Azure style postgres:// is rejected by SQLAlchemy
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE SET NULL unless this is switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # Built-in lower() only folds ASCII; name search must match "Éclair" for "éc"
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def build_engine(url: str = DEFAULT_DATABASE_URL) -> Engine:
    url = normalize_database_url(url)

    if "sqlite" in url:
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _configure_sqlite_connection)
    else:
        engine = create_engine(url, pool_pre_ping=True)

    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    # Register tables on Base.metadata before creating them
    import models.category  # noqa: F401
    import models.product  # noqa: F401

    Base.metadata.create_all(bind=engine)
