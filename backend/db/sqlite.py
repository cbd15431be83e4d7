"""
SQLite Document Storage
Schemaless document persistence shared by every service.

Responsibilities:
- Store JSON documents grouped by collection and owning user
- Assign server identifiers and creation timestamps
- Simple field lookups for auth flows

NOT responsible for:
- Validation (done in the routers)
- Authorization (routers compare owners)
"""

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.config import get_settings


def new_object_id() -> str:
    """24 hex chars, the same shape clients already expect for _id"""
    return uuid.uuid4().hex[:24]


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DocumentStore:
    """
    SQLite persistence for JSON documents.

    Tables:
        - documents: one row per document, body stored as JSON text
    """

    def __init__(self, db_path: str = "data/student_companion.db"):
        self.db_path = db_path
        self._ensure_directory()
        self._init_schema()

    def _ensure_directory(self):
        """Create data directory"""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def _init_schema(self):
        """Initialize database schema"""
        with sqlite3.connect(self.db_path) as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    collection TEXT NOT NULL,
                    user_id TEXT,
                    body TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_documents_collection_user
                ON documents(collection, user_id, created_at);
            """)

    @staticmethod
    def _row_to_doc(row: sqlite3.Row) -> Dict[str, Any]:
        doc = json.loads(row["body"])
        doc["_id"] = row["id"]
        doc["createdAt"] = row["created_at"]
        return doc

    # =========================================================================
    # Write Operations
    # =========================================================================

    def insert(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document, returning it with _id and createdAt"""
        body = {k: v for k, v in doc.items() if k not in ("_id", "createdAt")}
        doc_id = new_object_id()
        created_at = utc_now()

        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """INSERT INTO documents (id, collection, user_id, body, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                [doc_id, collection, body.get("userId"), json.dumps(body), created_at]
            )

        return {**body, "_id": doc_id, "createdAt": created_at}

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge fields into a document; returns the updated document"""
        current = self.get(collection, doc_id)
        if current is None:
            return None

        merged = {**current, **fields}
        self._write_body(collection, doc_id, merged)
        return {**merged, "_id": doc_id, "createdAt": current["createdAt"]}

    def replace(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite an existing document body (identified by doc['_id'])"""
        self._write_body(collection, doc["_id"], doc)
        return doc

    def _write_body(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> None:
        body = {k: v for k, v in doc.items() if k not in ("_id", "createdAt")}
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "UPDATE documents SET body = ?, user_id = ? WHERE id = ? AND collection = ?",
                [json.dumps(body), body.get("userId"), doc_id, collection]
            )

    def delete(self, collection: str, doc_id: str) -> bool:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM documents WHERE id = ? AND collection = ?",
                [doc_id, collection]
            )
            return cursor.rowcount > 0

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(
                "SELECT * FROM documents WHERE id = ? AND collection = ?",
                [doc_id, collection]
            ).fetchone()
        return self._row_to_doc(row) if row else None

    def find(
        self,
        collection: str,
        user_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Newest-first documents, optionally scoped to one owner"""
        query = "SELECT * FROM documents WHERE collection = ?"
        params: List[Any] = [collection]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        query += " ORDER BY created_at DESC, rowid DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_doc(row) for row in rows]

    def find_one(self, collection: str, **fields: Any) -> Optional[Dict[str, Any]]:
        """First document whose top-level fields equal the given values"""
        query = "SELECT * FROM documents WHERE collection = ?"
        params: List[Any] = [collection]
        for name, value in fields.items():
            query += f" AND json_extract(body, '$.{name}') = ?"
            params.append(value)
        query += " LIMIT 1"

        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(query, params).fetchone()
        return self._row_to_doc(row) if row else None

    def count(self, collection: str, user_id: str) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM documents WHERE collection = ? AND user_id = ?",
                [collection, user_id]
            ).fetchone()[0]

    def sum_field(self, collection: str, user_id: str, field: str) -> float:
        with sqlite3.connect(self.db_path) as conn:
            total = conn.execute(
                f"""SELECT SUM(CAST(json_extract(body, '$.{field}') AS REAL))
                    FROM documents WHERE collection = ? AND user_id = ?""",
                [collection, user_id]
            ).fetchone()[0]
        return total or 0.0

    def get_stats(self) -> dict:
        """Get storage statistics"""
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT collection, COUNT(*) FROM documents GROUP BY collection ORDER BY collection"
            ).fetchall()
        return {
            "collections": {name: count for name, count in rows},
            "db_path": self.db_path
        }


# =============================================================================
# Singleton
# =============================================================================

_storage: Optional[DocumentStore] = None


def get_storage() -> DocumentStore:
    """Get singleton storage instance"""
    global _storage
    if _storage is None:
        _storage = DocumentStore(get_settings().db_path)
    return _storage
