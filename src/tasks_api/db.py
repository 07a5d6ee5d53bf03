from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .errors import StoreError
from .models import TaskChanges, TaskEntity
from .repositories import Repository, utcnow


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    completed: str = "completed"
    owner_id: str = "owner_id"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()


def _parse_id(task_id: str) -> Optional[int]:
    """Ids are integers in sqlite; anything else can never match a row."""
    try:
        return int(task_id)
    except (TypeError, ValueError):
        return None


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise StoreError(f"Could not open task database: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Task database error: {e}") from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.owner_id} TEXT NOT NULL,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_owner_created "
                f"ON {_COLS.table}({_COLS.owner_id}, {_COLS.created_at})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TaskEntity:
        return {
            "id": str(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "completed": bool(row[_COLS.completed]),
            "owner_id": str(row[_COLS.owner_id]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "updated_at": datetime.fromisoformat(row[_COLS.updated_at]),
        }

    def _select(self, conn: sqlite3.Connection, row_id: int) -> Optional[sqlite3.Row]:
        return conn.execute(
            f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (row_id,)
        ).fetchone()

    def create(self, owner_id: str, title: str) -> TaskEntity:
        now = utcnow().isoformat(timespec="microseconds")
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.completed}, {_COLS.owner_id},
                    {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, 0, ?, ?, ?)
                """,
                (title, owner_id, now, now),
            )
            row = self._select(conn, cur.lastrowid)
            assert row is not None
            return self._row_to_entity(row)

    def get(self, task_id: str) -> Optional[TaskEntity]:
        row_id = _parse_id(task_id)
        if row_id is None:
            return None
        with self._conn() as conn:
            row = self._select(conn, row_id)
            return self._row_to_entity(row) if row else None

    def update(self, task_id: str, changes: TaskChanges) -> Optional[TaskEntity]:
        row_id = _parse_id(task_id)
        if row_id is None:
            return None
        with self._conn() as conn:
            row = self._select(conn, row_id)
            if not row:
                return None
            current = self._row_to_entity(row)

            title = changes.get("title", current["title"])
            completed = changes.get("completed", current["completed"])
            conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.completed} = ?, {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (title, 1 if completed else 0, utcnow().isoformat(timespec="microseconds"), row_id),
            )
            row2 = self._select(conn, row_id)
            assert row2 is not None
            return self._row_to_entity(row2)

    def delete(self, task_id: str) -> bool:
        row_id = _parse_id(task_id)
        if row_id is None:
            return False
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (row_id,))
            return cur.rowcount > 0

    def list_for_owner(self, owner_id: str) -> List[TaskEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM {_COLS.table}
                WHERE {_COLS.owner_id} = ?
                ORDER BY {_COLS.created_at} DESC, {_COLS.id} DESC
                """,
                (owner_id,),
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]
