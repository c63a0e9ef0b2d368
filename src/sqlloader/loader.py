import logging
from pathlib import Path

from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from ._util import get_engine, redact_url, resolve_database_url
from .errors import DatabaseConnectionError, SqlExecutionError, SqlFileError

log = logging.getLogger(__name__)


def read_sql_file(path: str | Path) -> str:
    """Read a SQL script as UTF-8 text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SqlFileError(path) from e


def connect(database_url: str | URL) -> Engine:
    """Open a pool for the addressed database and check it with one connection.

    The caller owns the returned engine and is responsible for dispose().
    """
    url = database_url if isinstance(database_url, URL) else resolve_database_url(database_url)
    shown = redact_url(url)
    log.info("Connecting to %s", shown)

    engine = None
    try:
        engine = get_engine(url)
        with engine.connect():
            pass
    except (SQLAlchemyError, ImportError) as e:
        # ImportError: the backend driver (e.g. psycopg2) is not installed
        if engine is not None:
            engine.dispose()
        raise DatabaseConnectionError(shown) from e
    return engine


def run_script(dbapi_conn, backend: str, sql: str) -> None:
    """Hand ``sql`` to the DBAPI connection verbatim, with no parameters."""
    if backend == "sqlite":
        dbapi_conn.executescript(sql)
        return
    # no params: psycopg2 leaves % alone and sends the text as-is
    cur = dbapi_conn.cursor()
    try:
        cur.execute(sql)
    finally:
        cur.close()


def execute_sql(engine: Engine, sql: str) -> None:
    """Run every statement in ``sql`` as a single batch.

    Statement splitting is left to the driver: sqlite3's executescript for
    SQLite, and psycopg2's simple-query protocol (a parameterless execute) for
    PostgreSQL. No rows are returned.
    """
    if not sql.strip():
        log.debug("Empty SQL script, nothing to execute")
        return

    dbapi_error = engine.dialect.loaded_dbapi.Error
    try:
        with engine.begin() as conn:
            run_script(conn.connection.driver_connection, engine.dialect.name, sql)
    except (SQLAlchemyError, dbapi_error) as e:
        raise SqlExecutionError() from e
    log.debug("Executed %d characters of SQL on %s", len(sql), engine.dialect.name)


def load_sql_file(database_url: str, sql_file_path: str | Path) -> None:
    """Load and execute a SQL file against ``database_url``.

    Supported connection strings start with ``sqlite:`` or ``postgres:``.
    The scheme is checked first, then the file is read, and only then is a
    connection opened. The engine is disposed on every exit path.

    Example:
        load_sql_file("sqlite::memory:", "migrations.sql")
    """
    url = resolve_database_url(database_url)
    sql = read_sql_file(sql_file_path)
    log.info("Read %d characters from %s", len(sql), sql_file_path)

    engine = connect(url)
    try:
        execute_sql(engine, sql)
    finally:
        engine.dispose()
    log.info("Executed %s on %s", sql_file_path, redact_url(url))
