"""Vector math utilities for embedding operations."""
import numpy as np


def cosine_similarity(vec1: list[float], vec2: list[float]) -> float:
    """
    Calculate cosine similarity between two vectors using numpy for performance.

    Args:
        vec1: First vector
        vec2: Second vector

    Returns:
        Cosine similarity in range [-1, 1], or 0.0 if vectors have different lengths
        or either vector is zero.
    """
    if len(vec1) != len(vec2):
        return 0.0

    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(a, b) / (norm_a * norm_b))


def cosine_similarities(query: list[float], vectors: list[list[float]]) -> list[float]:
    """
    Cosine similarity of one query vector against many vectors in a single matrix pass.

    Rows whose length differs from the query, or which are all zeros, score 0.0.
    """
    if not vectors:
        return []

    q = np.asarray(query, dtype=float)
    q_norm = np.linalg.norm(q)
    scores = [0.0] * len(vectors)
    if q_norm == 0:
        return scores

    idx = [i for i, vec in enumerate(vectors) if len(vec) == len(query)]
    if not idx:
        return scores

    matrix = np.asarray([vectors[i] for i in idx], dtype=float)
    norms = np.linalg.norm(matrix, axis=1)
    dots = matrix @ q
    with np.errstate(divide="ignore", invalid="ignore"):
        sims = np.where(norms > 0, dots / (norms * q_norm), 0.0)

    for i, sim in zip(idx, sims):
        scores[i] = float(sim)
    return scores
