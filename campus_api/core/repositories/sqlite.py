"""SQLite-backed repositories sharing one connection per store."""

from __future__ import annotations

import logging
import sqlite3
import threading
import typing
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from campus_api.core.entities import Entity, EntityType
from campus_api.core.repositories.base import Repository

log = logging.getLogger("campus.store")


def _scalar_type(annotation: Any) -> Any:
    # Optional[int] -> int
    args = [a for a in typing.get_args(annotation) if a is not type(None)]
    if typing.get_origin(annotation) is typing.Union and len(args) == 1:
        return args[0]
    return annotation


def _column_sql(et: EntityType, name: str) -> str:
    t = _scalar_type(et.model.model_fields[name].annotation)
    if name == et.key_field:
        if et.surrogate:
            return f"{name} INTEGER PRIMARY KEY AUTOINCREMENT"
        return f"{name} {'INTEGER' if t is int else 'TEXT'} PRIMARY KEY"
    if t in (int, bool):
        return f"{name} INTEGER NOT NULL"
    return f"{name} TEXT NOT NULL"


def _to_db(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class SqliteStore:
    """
    Owns the sqlite3 connection. Repositories obtained from the same store
    share it, and a single lock serializes access across request threads.
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        log.info("sqlite store opened path=%s", self.db_path)

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        # commit on success, roll back on error
        with self._lock, self._conn:
            return self._conn.execute(sql, params)

    def query(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    def ping(self) -> bool:
        try:
            self.query("SELECT 1")
            return True
        except sqlite3.Error:
            log.warning("sqlite store not usable path=%s", self.db_path, exc_info=True)
            return False

    def repository(self, entity_type: EntityType) -> "SqliteRepository":
        return SqliteRepository(entity_type, self)

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class SqliteRepository(Repository[Entity]):
    def __init__(self, entity_type: EntityType, store: SqliteStore):
        super().__init__(entity_type)
        self.store = store
        self.table = entity_type.name
        self.columns = entity_type.field_names
        self._create_table()

    def _create_table(self) -> None:
        cols = ", ".join(_column_sql(self.entity_type, c) for c in self.columns)
        self.store.execute(f'CREATE TABLE IF NOT EXISTS "{self.table}" ({cols})')

    def _row_to_entity(self, row: sqlite3.Row) -> Entity:
        data: Dict[str, Any] = {c: row[c] for c in self.columns}
        return self.entity_type.model.model_validate(data)

    def find_all(self) -> List[Entity]:
        key = self.entity_type.key_field
        cols = ", ".join(self.columns)
        rows = self.store.query(f'SELECT {cols} FROM "{self.table}" ORDER BY {key}')
        return [self._row_to_entity(r) for r in rows]

    def find_by_id(self, key: Any) -> Optional[Entity]:
        cols = ", ".join(self.columns)
        rows = self.store.query(
            f'SELECT {cols} FROM "{self.table}" WHERE {self.entity_type.key_field} = ?',
            (key,),
        )
        return self._row_to_entity(rows[0]) if rows else None

    def save(self, entity: Entity) -> Entity:
        et = self.entity_type
        key = et.key_of(entity)
        values = {c: _to_db(getattr(entity, c)) for c in self.columns}

        if key is None:
            if not et.surrogate:
                raise ValueError(f"{et.name} requires a caller-supplied {et.key_param}")
            cols = [c for c in self.columns if c != et.key_field]
            placeholders = ", ".join("?" for _ in cols)
            cur = self.store.execute(
                f'INSERT INTO "{self.table}" ({", ".join(cols)}) VALUES ({placeholders})',
                tuple(values[c] for c in cols),
            )
            return et.with_key(entity, cur.lastrowid)

        placeholders = ", ".join("?" for _ in self.columns)
        self.store.execute(
            f'INSERT OR REPLACE INTO "{self.table}" ({", ".join(self.columns)}) VALUES ({placeholders})',
            tuple(values[c] for c in self.columns),
        )
        return entity.model_copy()

    def delete(self, entity: Entity) -> None:
        self.store.execute(
            f'DELETE FROM "{self.table}" WHERE {self.entity_type.key_field} = ?',
            (self.entity_type.key_of(entity),),
        )

    def healthy(self) -> bool:
        return self.store.ping()
