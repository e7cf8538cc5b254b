"""
Query limit executor.

Selects an ordered subset of similarity-ranked candidates under a QueryLimit.
Pure and stateless: safe to share across threads.
"""
import time
from typing import Callable, Optional

from ...models import LimitReason, LimitStrategy, QueryLimit, QueryMetadata, QueryResult, ScoredMemory

Selection = tuple[list[ScoredMemory], LimitReason]


def _count_reached(count: int, limit: QueryLimit) -> bool:
    return limit.max_count is not None and count >= limit.max_count


def _tokens_reached(tokens: int, limit: QueryLimit) -> bool:
    return limit.max_tokens is not None and tokens >= limit.max_tokens


def _fits(tokens: int, candidate: ScoredMemory, limit: QueryLimit) -> bool:
    return limit.max_tokens is None or tokens + candidate.memory.token_count <= limit.max_tokens


def _similar_enough(candidate: ScoredMemory, limit: QueryLimit) -> bool:
    return limit.min_similarity is None or candidate.similarity >= limit.min_similarity


def select_greedy(candidates: list[ScoredMemory], limit: QueryLimit) -> Selection:
    """Skip what does not fit, keep scanning; stop once max_count is reached.

    Best-effort packing in ranked order, never reordered. When candidates are
    skipped, the first bound that caused a skip is reported.
    """
    selected: list[ScoredMemory] = []
    tokens = 0
    reason = LimitReason.NONE
    for candidate in candidates:
        if _count_reached(len(selected), limit):
            return selected, LimitReason.MAX_COUNT
        if not _similar_enough(candidate, limit):
            if reason == LimitReason.NONE:
                reason = LimitReason.MIN_SIMILARITY
            continue
        if not _fits(tokens, candidate, limit):
            if reason == LimitReason.NONE:
                reason = LimitReason.MAX_TOKENS
            continue
        selected.append(candidate)
        tokens += candidate.memory.token_count
    return selected, reason


def select_all(candidates: list[ScoredMemory], limit: QueryLimit) -> Selection:
    """Admit the next candidate only while every bound still holds with it; stop at the first violation."""
    selected: list[ScoredMemory] = []
    tokens = 0
    for candidate in candidates:
        if _count_reached(len(selected), limit):
            return selected, LimitReason.MAX_COUNT
        if not _similar_enough(candidate, limit):
            return selected, LimitReason.MIN_SIMILARITY
        if not _fits(tokens, candidate, limit):
            return selected, LimitReason.MAX_TOKENS
        selected.append(candidate)
        tokens += candidate.memory.token_count
    return selected, LimitReason.NONE


def select_any(candidates: list[ScoredMemory], limit: QueryLimit) -> Selection:
    """Stop as soon as any bound has been reached.

    Bounds are checked against what is already selected, so the last admitted
    candidate may carry the token total past max_tokens.
    """
    selected: list[ScoredMemory] = []
    tokens = 0
    for candidate in candidates:
        if _count_reached(len(selected), limit):
            return selected, LimitReason.MAX_COUNT
        if _tokens_reached(tokens, limit):
            return selected, LimitReason.MAX_TOKENS
        if not _similar_enough(candidate, limit):
            return selected, LimitReason.MIN_SIMILARITY
        selected.append(candidate)
        tokens += candidate.memory.token_count
    return selected, LimitReason.NONE


def select_first_met(candidates: list[ScoredMemory], limit: QueryLimit) -> Selection:
    """Admit candidates until one of them meets a bound, keeping that candidate, then stop.

    The met bound is reported even when it was met by the last candidate.
    """
    selected: list[ScoredMemory] = []
    tokens = 0
    for candidate in candidates:
        selected.append(candidate)
        tokens += candidate.memory.token_count
        if _count_reached(len(selected), limit):
            return selected, LimitReason.MAX_COUNT
        if _tokens_reached(tokens, limit):
            return selected, LimitReason.MAX_TOKENS
        if not _similar_enough(candidate, limit):
            return selected, LimitReason.MIN_SIMILARITY
    return selected, LimitReason.NONE


_SELECTORS: dict[LimitStrategy, Callable[[list[ScoredMemory], QueryLimit], Selection]] = {
    LimitStrategy.GREEDY: select_greedy,
    LimitStrategy.ALL: select_all,
    LimitStrategy.ANY: select_any,
    LimitStrategy.FIRST_MET: select_first_met,
}


class QueryExecutor:
    """Applies a QueryLimit to ranked candidates and records how the result was bounded."""

    def execute(self, candidates: list[ScoredMemory], limit: Optional[QueryLimit] = None) -> QueryResult:
        start = time.perf_counter()
        limit = limit or QueryLimit.unlimited()
        candidates = list(candidates or ())

        selected, reason = _SELECTORS[limit.strategy](candidates, limit)

        similarities = [c.similarity for c in selected]
        metadata = QueryMetadata(
            total_found=len(candidates),
            returned=len(selected),
            total_tokens=sum(c.memory.token_count for c in selected),
            avg_similarity=sum(similarities) / len(similarities) if similarities else 0.0,
            limit_reason=reason,
            execution_time_ms=(time.perf_counter() - start) * 1000.0,
        )
        return QueryResult(
            memories=[c.memory for c in selected],
            similarities=similarities,
            metadata=metadata,
        )
