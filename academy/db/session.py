# academy/db/session.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from academy.core.config import settings

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _enable_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _serialize_transactions(engine: Engine) -> None:
    # pysqlite defers BEGIN until the first write, so the reads done by the
    # admission checks would run outside the transaction. Take over BEGIN and
    # open every transaction holding the write lock.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(url: str, **kwargs) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, **kwargs)

    # SQLite 需要特殊配置来处理多线程
    connect_args = {"check_same_thread": False, "timeout": 30}
    if url in _MEMORY_URLS:
        # one shared connection; there is no second writer to serialize against
        engine = create_engine(url, connect_args=connect_args, poolclass=StaticPool, **kwargs)
        _enable_foreign_keys(engine)
        return engine

    engine = create_engine(url, connect_args=connect_args, **kwargs)
    _enable_foreign_keys(engine)
    _serialize_transactions(engine)
    return engine


engine = make_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
