"""배치 유틸리티 테스트 — 고정 크기 묶음과 배치 간 대기."""

import asyncio

import pytest

from talentops.utils.batching import RateLimiter, chunked


class TestChunked:
    """고정 크기 묶음 테스트"""

    def test_even_split(self):
        assert chunked([1, 2, 3, 4], 2) == [[1, 2], [3, 4]]

    def test_last_chunk_is_short(self):
        assert chunked([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]

    def test_empty(self):
        assert chunked([], 3) == []

    @pytest.mark.parametrize("size", [0, -1])
    def test_size_must_be_positive(self, size):
        with pytest.raises(ValueError):
            chunked([1], size)


class TestRateLimiter:
    """배치 속도 제한기 테스트"""

    @pytest.fixture
    def sleeps(self, monkeypatch) -> list[float]:
        calls: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            calls.append(seconds)

        monkeypatch.setattr(asyncio, "sleep", fake_sleep)
        return calls

    async def test_yields_batches_in_order(self, sleeps):
        limiter = RateLimiter(2)
        batches = [list(b) async for b in limiter.batches([1, 2, 3, 4, 5])]

        assert batches == [[1, 2], [3, 4], [5]]
        assert limiter.batches_emitted == 3

    async def test_pauses_between_batches_only(self, sleeps):
        limiter = RateLimiter(2, delay_seconds=0.5)
        async for _ in limiter.batches([1, 2, 3, 4, 5]):
            pass

        # 첫 배치 전에는 대기하지 않음 (No pause before the first batch)
        assert sleeps == [0.5, 0.5]

    async def test_zero_delay_never_sleeps(self, sleeps):
        limiter = RateLimiter(1)
        async for _ in limiter.batches([1, 2, 3]):
            pass

        assert sleeps == []

    async def test_counter_accumulates_across_runs(self, sleeps):
        limiter = RateLimiter(10)
        async for _ in limiter.batches([1, 2]):
            pass
        async for _ in limiter.batches([3]):
            pass

        assert limiter.batches_emitted == 2

    async def test_empty_input(self, sleeps):
        limiter = RateLimiter(3, delay_seconds=1.0)
        assert [b async for b in limiter.batches([])] == []
        assert sleeps == []

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            RateLimiter(0)

    def test_negative_delay(self):
        with pytest.raises(ValueError):
            RateLimiter(1, delay_seconds=-1)
