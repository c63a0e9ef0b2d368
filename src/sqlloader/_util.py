"""Utilities for connection handling.

This module provides the small helpers shared by the loader and the CLI:
URL resolution for the supported backends, password redaction and engine
creation.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qsl

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError

from .errors import DatabaseConnectionError, UnsupportedSchemeError

# Load .env once on import so DATABASE_URL / LOG_LEVEL can live there
load_dotenv()

SQLITE_PREFIX = "sqlite:"
POSTGRES_PREFIXES = ("postgres:", "postgresql:", "postgresql+")
PG_DRIVERNAME = "postgresql+psycopg2"

_PASSWORD_RE = re.compile(r"(://[^:/@]+:)[^/?#]*@")


def redact_url(url: str | URL) -> str:
    """Return the connection string with any password replaced by ***."""
    if isinstance(url, URL):
        return url.render_as_string(hide_password=True)
    return _PASSWORD_RE.sub(r"\1***@", url)


def _sqlite_url(raw: str) -> URL:
    """Translate the short sqlite forms into a SQLAlchemy URL.

      sqlite::memory:, sqlite:, sqlite://   -> in-memory database
      sqlite:data.db, sqlite://data/app.db  -> file relative to cwd
      sqlite:///data.db, sqlite:////abs.db  -> SQLAlchemy's own form, as-is
    """
    rest = raw[len(SQLITE_PREFIX):]
    if rest.startswith("///"):
        return make_url(raw)

    path, _, query = rest.partition("?")
    if path.startswith("//"):
        path = path[2:]
    if path == ":memory:":
        path = ""
    return URL.create("sqlite", database=path or None, query=dict(parse_qsl(query)))


def _postgres_url(raw: str) -> URL:
    # pin the driver; bare postgresql resolves to psycopg (v3) on SQLAlchemy 2.1
    for bare in ("postgres://", "postgresql://"):
        if raw.startswith(bare):
            raw = PG_DRIVERNAME + "://" + raw[len(bare):]
            break
    return make_url(raw)


def resolve_database_url(database_url: str) -> URL:
    """Map a connection string onto the backend it addresses.

    Only the ``sqlite:`` and ``postgres:`` prefixes are accepted; anything else
    raises UnsupportedSchemeError without touching the network. A string that
    has a supported prefix but cannot be parsed raises DatabaseConnectionError.
    """
    try:
        if database_url.startswith(SQLITE_PREFIX):
            return _sqlite_url(database_url)
        if database_url.startswith(POSTGRES_PREFIXES):
            return _postgres_url(database_url)
    except (ArgumentError, ValueError) as e:
        # ValueError: e.g. a non-numeric port
        raise DatabaseConnectionError(redact_url(database_url)) from e
    raise UnsupportedSchemeError(redact_url(database_url))


def get_engine(url: URL) -> Engine:
    """Create a SQLAlchemy engine (connection pool) for a resolved URL."""
    return create_engine(url, future=True, pool_pre_ping=True)
