# =============================================================================
# File: batch_limiter.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Callable, Iterator, List, Sequence, TypeVar

from vectorcore.exceptions import InferenceError, InvalidInputError
from vectorcore.logger import get_logger

logger = get_logger("batch_limiter")

T = TypeVar("T")
R = TypeVar("R")


class BatchLimiter:
    """Splits input lists into fixed-size chunks so peak tensor memory stays bounded."""

    @staticmethod
    def validate_batch_size(batch_size: int) -> int:
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
            raise InvalidInputError(
                f"batch_size must be a positive integer, got {batch_size!r}"
            )
        return batch_size

    @staticmethod
    def chunk_batch(items: Sequence[T], batch_size: int) -> Iterator[List[T]]:
        """Yield consecutive slices of at most ``batch_size`` items, in input order."""
        BatchLimiter.validate_batch_size(batch_size)
        for i in range(0, len(items), batch_size):
            yield list(items[i : i + batch_size])

    @staticmethod
    def run_batched(
        items: Sequence[T],
        batch_size: int,
        run_batch: Callable[[List[T]], List[R]],
    ) -> List[R]:
        """Run ``run_batch`` over each chunk sequentially and concatenate the results.

        Args:
            items: Inputs, never reordered or deduplicated
            batch_size: Maximum items per call of ``run_batch``
            run_batch: Per-chunk pipeline returning one result per item

        Returns:
            Results one-to-one with ``items``
        """
        results: List[R] = []
        total = len(items)
        for index, chunk in enumerate(BatchLimiter.chunk_batch(items, batch_size)):
            logger.debug(
                "Running batch %d (%d items, %d/%d done)",
                index,
                len(chunk),
                len(results),
                total,
            )
            chunk_results = run_batch(chunk)
            if len(chunk_results) != len(chunk):
                raise InferenceError(
                    f"Batch produced {len(chunk_results)} results for {len(chunk)} inputs",
                    stage="inference",
                )
            results.extend(chunk_results)
        return results
