"""Vector literal serialization and similarity helpers."""

from typing import Sequence

import numpy as np


def embedding_to_vector(embedding: Sequence[float]) -> str:
    """Serialize an embedding to the pgvector literal ``[v1,v2,...,vn]``."""
    return "[" + ",".join(repr(float(v)) for v in embedding) + "]"


def vector_to_embedding(vector: str) -> list[float]:
    """Parse a ``[v1,v2,...,vn]`` literal back into floats."""
    vector = vector.strip()
    if not (vector.startswith("[") and vector.endswith("]")):
        raise ValueError(f"Not a vector literal: {vector!r}")
    body = vector[1:-1]
    if not body.strip():
        return []
    return [float(v) for v in body.split(",")]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors, 0.0 if either is zero."""
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.shape != vb.shape:
        raise ValueError("Vectors must have the same length")

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(va, vb) / (norm_a * norm_b))
