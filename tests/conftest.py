import pytest

from sqlloader.loader import connect


@pytest.fixture
def memory_engine():
    engine = connect("sqlite::memory:")
    yield engine
    engine.dispose()


@pytest.fixture
def write_sql(tmp_path):
    def _write(sql: str, name: str = "script.sql"):
        path = tmp_path / name
        path.write_text(sql, encoding="utf-8")
        return path
    return _write
