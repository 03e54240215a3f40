from __future__ import annotations

from typing import Iterable, Optional, Sequence

import numpy as np

from .model import FaceEmbedding


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors; 0 for empty or zero-length input."""
    if a is None or b is None or len(a) == 0 or len(b) == 0:
        return 0.0
    n = min(len(a), len(b))
    va = np.asarray(a[:n], dtype=float)
    vb = np.asarray(b[:n], dtype=float)
    denom = np.linalg.norm(va) * np.linalg.norm(vb)
    if denom == 0 or not np.isfinite(denom):
        return 0.0
    score = float(np.dot(va, vb) / denom)
    return score if np.isfinite(score) else 0.0


def best_match(
    probe: Sequence[float], known: Iterable[FaceEmbedding], *, threshold: float
) -> tuple[Optional[FaceEmbedding], float]:
    """Highest-scoring stored embedding; None unless it reaches the threshold."""
    best: Optional[FaceEmbedding] = None
    best_score = 0.0
    for emb in known:
        score = cosine_similarity(probe, emb.vector)
        if best is None or score > best_score:
            best, best_score = emb, score

    if best is None or best_score < threshold:
        return None, best_score
    return best, best_score
