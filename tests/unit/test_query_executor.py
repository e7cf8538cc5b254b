"""
Tests for QueryExecutor.

Covers how each limit strategy combines count, token and similarity bounds,
and the limit reason recorded in the result metadata.
"""
import pytest
from pydantic import ValidationError as PydanticValidationError

from conftest import make_memory
from memorix_core.models import LimitReason, LimitStrategy, QueryLimit, ScoredMemory
from memorix_core.services.query import QueryExecutor


def ranked(tokens: list[int], similarities: list[float] = None) -> list[ScoredMemory]:
    """Build ranked candidates whose content sizes give the requested token counts."""
    similarities = similarities or [0.9] * len(tokens)
    candidates = []
    for i, (t, s) in enumerate(zip(tokens, similarities)):
        memory = make_memory(content=f"candidate {i}")
        memory.token_count = t
        candidates.append(ScoredMemory(memory=memory, similarity=s))
    return candidates


@pytest.fixture
def executor() -> QueryExecutor:
    return QueryExecutor()


class TestQueryLimit:

    def test_unlimited(self):
        limit = QueryLimit.unlimited()
        assert limit.is_unlimited
        assert limit.strategy == LimitStrategy.GREEDY

    @pytest.mark.parametrize("kwargs", [
        {"max_count": 0},
        {"max_tokens": -5},
        {"min_similarity": 1.5},
        {"min_similarity": -0.1},
    ])
    def test_invalid_bounds_rejected(self, kwargs):
        with pytest.raises(PydanticValidationError):
            QueryLimit(**kwargs)

    def test_limit_reason_wire_values(self):
        assert LimitReason.MAX_COUNT.value == "maxCount"
        assert LimitReason.MAX_TOKENS.value == "maxTokens"
        assert LimitReason.MIN_SIMILARITY.value == "minSimilarity"
        assert LimitReason.NONE.value == "none"


class TestGreedy:

    def test_token_budget_skips_what_does_not_fit(self, executor):
        result = executor.execute(ranked([300, 300, 300]), QueryLimit(max_tokens=500))
        assert len(result) == 1
        assert result.metadata.total_tokens == 300
        assert result.metadata.limit_reason == LimitReason.MAX_TOKENS

    def test_keeps_scanning_for_smaller_candidates(self, executor):
        candidates = ranked([300, 300, 100])
        result = executor.execute(candidates, QueryLimit(max_tokens=500))
        assert [m.id for m in result.memories] == [candidates[0].memory.id, candidates[2].memory.id]
        assert result.metadata.total_tokens == 400
        assert result.metadata.limit_reason == LimitReason.MAX_TOKENS

    def test_skips_low_similarity_without_stopping(self, executor):
        candidates = ranked([10, 10, 10], [0.9, 0.3, 0.8])
        result = executor.execute(candidates, QueryLimit(min_similarity=0.5))
        assert result.similarities == [0.9, 0.8]
        assert result.metadata.limit_reason == LimitReason.MIN_SIMILARITY

    def test_everything_fits(self, executor):
        result = executor.execute(ranked([10, 10, 10]), QueryLimit(max_count=3, max_tokens=500))
        assert len(result) == 3
        assert result.metadata.limit_reason == LimitReason.NONE


class TestStrategiesCompared:

    @pytest.mark.parametrize("strategy", list(LimitStrategy))
    def test_max_count_truncates(self, executor, strategy):
        result = executor.execute(ranked([10] * 5), QueryLimit(max_count=3, strategy=strategy))
        assert len(result) == 3
        assert result.metadata.total_found == 5
        assert result.metadata.limit_reason == LimitReason.MAX_COUNT

    def test_all_stops_at_first_violation(self, executor):
        result = executor.execute(ranked([300, 300, 100]), QueryLimit(max_tokens=500, strategy=LimitStrategy.ALL))
        assert len(result) == 1
        assert result.metadata.limit_reason == LimitReason.MAX_TOKENS

    def test_any_may_overshoot_tokens_by_one(self, executor):
        result = executor.execute(ranked([300, 300, 300]), QueryLimit(max_tokens=500, strategy=LimitStrategy.ANY))
        assert len(result) == 2
        assert result.metadata.total_tokens == 600
        assert result.metadata.limit_reason == LimitReason.MAX_TOKENS

    def test_first_met_keeps_triggering_candidate(self, executor):
        result = executor.execute(
            ranked([300, 300, 300]), QueryLimit(max_tokens=500, strategy=LimitStrategy.FIRST_MET)
        )
        assert len(result) == 2
        assert result.metadata.limit_reason == LimitReason.MAX_TOKENS

    @pytest.mark.parametrize("strategy, expected", [
        (LimitStrategy.GREEDY, [0.9, 0.8]),
        (LimitStrategy.ALL, [0.9]),
        (LimitStrategy.ANY, [0.9]),
        (LimitStrategy.FIRST_MET, [0.9, 0.3]),
    ])
    def test_min_similarity(self, executor, strategy, expected):
        candidates = ranked([10, 10, 10], [0.9, 0.3, 0.8])
        result = executor.execute(candidates, QueryLimit(min_similarity=0.5, strategy=strategy))
        assert result.similarities == expected
        assert result.metadata.limit_reason == LimitReason.MIN_SIMILARITY

    def test_first_met_reports_bound_met_by_last_candidate(self, executor):
        result = executor.execute(ranked([10] * 3), QueryLimit(max_count=3, strategy=LimitStrategy.FIRST_MET))
        assert len(result) == 3
        assert result.metadata.limit_reason == LimitReason.MAX_COUNT

        greedy = executor.execute(ranked([10] * 3), QueryLimit(max_count=3))
        assert len(greedy) == 3
        assert greedy.metadata.limit_reason == LimitReason.NONE


class TestResultMetadata:

    @pytest.mark.parametrize("strategy", list(LimitStrategy))
    def test_empty_candidates(self, executor, strategy):
        result = executor.execute([], QueryLimit(max_count=5, strategy=strategy))
        assert len(result) == 0
        assert result.metadata.total_found == 0
        assert result.metadata.returned == 0
        assert result.metadata.avg_similarity == 0.0
        assert result.metadata.limit_reason == LimitReason.NONE

    def test_no_limit_returns_everything_in_order(self, executor):
        candidates = ranked([50, 60, 70], [0.9, 0.8, 0.7])
        result = executor.execute(candidates)
        assert [m.id for m in result] == [c.memory.id for c in candidates]
        assert result.metadata.limit_reason == LimitReason.NONE
        assert result.metadata.total_tokens == 180

    def test_average_similarity_over_returned(self, executor):
        result = executor.execute(ranked([10, 10, 10], [0.9, 0.7, 0.1]), QueryLimit(max_count=2))
        assert result.metadata.returned == 2
        assert result.metadata.avg_similarity == pytest.approx(0.8)
        assert result.metadata.execution_time_ms >= 0.0
