"""Tests for the Postgres intake store."""

import psycopg
import pytest

from resale_intake.exceptions import RecordPersistenceError
from resale_intake.listing import IntakeRow
from resale_intake.store import PostgresIntakeStore

ROW = IntakeRow(title="Rick Owens Pony Hair Ramone Sneakers", brand="Rick Owens", price_cents=90000)


@pytest.fixture
def cursor(mocker):
    connect = mocker.patch("resale_intake.store.psycopg.connect")
    conn = connect.return_value.__enter__.return_value
    cur = conn.cursor.return_value.__enter__.return_value
    cur.fetchone.return_value = (42,)
    cur.connect = connect
    return cur


def test_insert_requires_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(RecordPersistenceError, match="DATABASE_URL"):
        PostgresIntakeStore().insert(ROW)


def test_insert_returns_id(cursor):
    store = PostgresIntakeStore("postgresql://localhost/intake")

    assert store.insert(ROW) == 42

    cursor.connect.assert_called_once_with("postgresql://localhost/intake")
    params = cursor.execute.call_args.args[1]
    assert params == (ROW.title, None, "Rick Owens", None, None, 90000, None)


def test_insert_reads_database_url_from_env(monkeypatch, cursor):
    monkeypatch.setenv("DATABASE_URL", "postgresql://env/intake")

    PostgresIntakeStore().insert(ROW)

    cursor.connect.assert_called_once_with("postgresql://env/intake")


def test_missing_table(cursor):
    cursor.execute.side_effect = psycopg.errors.UndefinedTable("relation does not exist")

    with pytest.raises(RecordPersistenceError, match="inventory_items"):
        PostgresIntakeStore("postgresql://localhost/intake").insert(ROW)


def test_database_error(cursor):
    cursor.execute.side_effect = psycopg.OperationalError("connection lost")

    with pytest.raises(RecordPersistenceError, match="Failed to save"):
        PostgresIntakeStore("postgresql://localhost/intake").insert(ROW)


def test_no_returned_id(cursor):
    cursor.fetchone.return_value = None

    with pytest.raises(RecordPersistenceError):
        PostgresIntakeStore("postgresql://localhost/intake").insert(ROW)
