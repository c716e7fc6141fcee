from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from app.db import bootstrap


def _empty_engine():
    return create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def test_ensure_schema_creates_missing_tables(monkeypatch):
    engine = _empty_engine()
    monkeypatch.setattr(bootstrap, "engine", engine)

    bootstrap.ensure_schema()

    assert bootstrap.REQUIRED_TABLES <= set(inspect(engine).get_table_names())


def test_ensure_schema_is_noop_when_tables_exist(monkeypatch, test_engine):
    calls = []
    monkeypatch.setattr(bootstrap, "engine", test_engine)
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: calls.append(bind))

    bootstrap.ensure_schema()

    assert calls == []
