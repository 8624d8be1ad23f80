"""
core/database.py -- SQLAlchemy engine factory shared by every store.

SQLite needs two tweaks that server databases do not:
  check_same_thread=False -- FastAPI runs sync handlers in a thread pool, so a
      pooled connection may be used from a thread other than its creator.
  WAL journal mode -- readers proceed without blocking during writes. Set per
      connection because SQLite PRAGMAs are not inherited from the pool.

Server databases get a bounded connection pool instead (DB_POOL_SIZE). The
pool is the only cross-request shared state in the process.
"""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str, pool_size: int = 10) -> Engine:
    """Create an Engine for db_url with the per-dialect settings above."""
    if db_url.startswith("sqlite"):
        engine = create_engine(db_url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _set_wal_mode)
        return engine
    return create_engine(db_url, pool_size=pool_size, max_overflow=0, pool_pre_ping=True)
