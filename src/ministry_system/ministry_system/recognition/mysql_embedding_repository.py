from __future__ import annotations

import json
from typing import Sequence

from ..core.enums import FaceAngle
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, load_json
from .model import FaceEmbedding
from .repository import EmbeddingRepository


class MySQLEmbeddingRepository(EmbeddingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, student_id: int, vector: Sequence[float], angle: FaceAngle) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO face_embeddings(student_id, embedding, angle) VALUES(%s,%s,%s)",
                (int(student_id), json.dumps([float(v) for v in vector]), angle.value),
            )
            return int(cur.lastrowid)

    def list_all(self) -> Sequence[FaceEmbedding]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT embedding_id, student_id, embedding, angle, created_at FROM face_embeddings")
            return [
                FaceEmbedding(
                    embedding_id=int(r["embedding_id"]),
                    student_id=int(r["student_id"]),
                    vector=[float(v) for v in load_json(r["embedding"]) or []],
                    angle=FaceAngle(r["angle"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def delete_for_student(self, student_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM face_embeddings WHERE student_id=%s", (int(student_id),))
            return cur.rowcount
