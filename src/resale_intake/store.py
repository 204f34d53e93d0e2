"""Postgres record store for intake rows."""

from __future__ import annotations

import logging
import os

import psycopg
from psycopg import errors, sql

from resale_intake.exceptions import RecordPersistenceError
from resale_intake.listing import IntakeRow

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "inventory_items"


class PostgresIntakeStore:
    """Inserts intake rows into the ``inventory_items`` table."""

    def __init__(self, database_url: str | None = None, table: str = DEFAULT_TABLE):
        self.database_url = database_url or os.getenv("DATABASE_URL")
        self.table = table

    def insert(self, row: IntakeRow) -> int:
        """Insert ``row`` and return its id.

        Raises:
            RecordPersistenceError: If the database is not configured, the
                table is missing, or the insert fails.
        """
        if not self.database_url:
            raise RecordPersistenceError(
                "DATABASE_URL is not configured. Set DATABASE_URL in your environment."
            )

        query = sql.SQL(
            "insert into {} (title, sku, brand, category, condition, price_cents, notes) "
            "values (%s, %s, %s, %s, %s, %s, %s) returning id"
        ).format(sql.Identifier(self.table))
        try:
            with psycopg.connect(self.database_url) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        query,
                        (
                            row.title,
                            row.sku,
                            row.brand,
                            row.category,
                            row.condition,
                            row.price_cents,
                            row.notes,
                        ),
                    )
                    inserted = cur.fetchone()
                conn.commit()
        except errors.UndefinedTable as exc:
            raise RecordPersistenceError(
                f'Database table "{self.table}" is missing. Create it before saving intake rows.'
            ) from exc
        except psycopg.Error as exc:
            raise RecordPersistenceError(f"Failed to save intake row: {exc}") from exc

        if not inserted:
            raise RecordPersistenceError("Insert did not return an id")
        logger.info("saved intake row %s", inserted[0])
        return inserted[0]
