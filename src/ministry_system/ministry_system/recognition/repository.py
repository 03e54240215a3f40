from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import FaceAngle
from .model import FaceEmbedding


class EmbeddingRepository(Protocol):
    def add(self, *, student_id: int, vector: Sequence[float], angle: FaceAngle) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[FaceEmbedding]:
        raise NotImplementedError

    def delete_for_student(self, student_id: int) -> int:
        raise NotImplementedError


class FaceEmbedder(Protocol):
    def embed(self, image_bytes: bytes) -> list[float]:
        """128-d embedding of the face in the image."""

        raise NotImplementedError
