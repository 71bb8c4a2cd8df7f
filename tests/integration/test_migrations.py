import sqlite3

import pytest

from src.adapters.sqlite.migrator import DEFAULT_MIGRATIONS_DIR, SQLiteMigrator


@pytest.fixture
def temp_db_path(tmp_path):
    return str(tmp_path / "test_db.sqlite")


@pytest.fixture
def migrations_dir():
    # Real migrations, so the SQL itself is exercised.
    return "migrations"


def test_migrator_creates_migration_table(temp_db_path, migrations_dir):
    migrator = SQLiteMigrator(temp_db_path, migrations_dir)
    migrator.run_migrations()

    conn = sqlite3.connect(temp_db_path)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='_migrations'"
    )
    assert cursor.fetchone() is not None
    conn.close()


def test_migrator_applies_documents_schema(temp_db_path, migrations_dir):
    applied = SQLiteMigrator(temp_db_path, migrations_dir).run_migrations()

    assert applied == ["001_documents.sql"]
    conn = sqlite3.connect(temp_db_path)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='documents'"
    )
    assert cursor.fetchone() is not None
    columns = {row[1] for row in conn.execute("PRAGMA table_info(documents)")}
    assert columns == {"collection", "id", "data", "created_seq", "updated_at"}
    conn.close()


def test_migrator_is_idempotent(temp_db_path, migrations_dir):
    migrator = SQLiteMigrator(temp_db_path, migrations_dir)

    migrator.run_migrations()
    assert migrator.run_migrations() == []

    conn = sqlite3.connect(temp_db_path)
    cursor = conn.execute("SELECT count(*) FROM _migrations WHERE filename='001_documents.sql'")
    assert cursor.fetchone()[0] == 1
    conn.close()


def test_default_migrations_dir_resolves(temp_db_path):
    assert SQLiteMigrator(temp_db_path).migrations_dir == DEFAULT_MIGRATIONS_DIR
    assert SQLiteMigrator(temp_db_path).run_migrations() == ["001_documents.sql"]


def test_creates_missing_parent_directory(tmp_path, migrations_dir):
    db_path = tmp_path / "nested" / "data" / "reviews.db"
    SQLiteMigrator(str(db_path), migrations_dir).run_migrations()
    assert db_path.exists()
