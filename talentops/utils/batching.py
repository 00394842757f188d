"""배치 처리 유틸리티 — 고정 크기 배치와 배치 간 대기.

Batch utilities — Fixed-size batches with a pause between them.
Bulk jobs run against a remote database; pacing keeps them under the
provider's rate limits. There is no retry and no cancellation.
"""

import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> list[Sequence[T]]:
    """시퀀스를 고정 크기 묶음으로 나눕니다 (Split a sequence into fixed-size chunks)."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [items[i:i + size] for i in range(0, len(items), size)]


class RateLimiter:
    """배치 속도 제한기.

    Batch rate limiter. Yields fixed-size batches and sleeps between them.

    Attributes:
        batch_size: 배치당 항목 수 (Items per batch)
        delay_seconds: 배치 간 대기 시간 (Pause between consecutive batches)
        batches_emitted: 지금까지 내보낸 배치 수 (Batches yielded so far)
    """

    def __init__(self, batch_size: int, delay_seconds: float = 0.0) -> None:
        if batch_size <= 0:
            raise ValueError("batch size must be positive")
        if delay_seconds < 0:
            raise ValueError("delay must not be negative")
        self.batch_size: int = batch_size
        self.delay_seconds: float = delay_seconds
        self.batches_emitted: int = 0

    async def batches(self, items: Sequence[T]) -> AsyncIterator[Sequence[T]]:
        """배치를 순서대로 내보냅니다. 첫 배치 이후 각 배치 전에 대기합니다.

        Yield batches in order, pausing before every batch except the first.

        Args:
            items: 처리할 항목 목록 (Items to process)

        Yields:
            Sequence[T]: 다음 배치 (Next batch)
        """
        for index, batch in enumerate(chunked(items, self.batch_size)):
            if index > 0 and self.delay_seconds:
                await asyncio.sleep(self.delay_seconds)
            self.batches_emitted += 1
            yield batch
