import sqlite3
from typing import Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordCollection(Generic[RecordT]):
    """A keyed collection of pydantic records stored as JSON documents.

    Every write replaces the whole record. Iteration follows insertion
    order; replacing an existing record keeps its position.
    """

    def __init__(self, table: str, model: Type[RecordT]) -> None:
        self.table = table
        self.model = model

    def ensure_table(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                id TEXT PRIMARY KEY,
                record_json TEXT NOT NULL
            )
            """
        )

    def get(self, conn: sqlite3.Connection, record_id: str) -> Optional[RecordT]:
        row = conn.execute(
            f"SELECT record_json FROM {self.table} WHERE id = ?",
            (record_id,),
        ).fetchone()
        if not row:
            return None
        return self.model.model_validate_json(row["record_json"])

    def insert(self, conn: sqlite3.Connection, record_id: str, record: RecordT) -> None:
        conn.execute(
            f"""
            INSERT INTO {self.table} (id, record_json)
            VALUES (?, ?)
            ON CONFLICT(id) DO UPDATE SET record_json = excluded.record_json
            """,
            (record_id, record.model_dump_json()),
        )

    def values(self, conn: sqlite3.Connection) -> List[RecordT]:
        rows = conn.execute(f"SELECT record_json FROM {self.table} ORDER BY rowid").fetchall()
        return [self.model.model_validate_json(row["record_json"]) for row in rows]

    def filter(self, conn: sqlite3.Connection, predicate: Callable[[RecordT], bool]) -> List[RecordT]:
        return [record for record in self.values(conn) if predicate(record)]
