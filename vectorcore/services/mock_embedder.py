# =============================================================================
# File: mock_embedder.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Deterministic stand-in embedder for tests and offline development.

Vectors are derived from a SHA-256 digest of the text through a generator
created per call, so no shared random state is touched and identical text
always maps to the identical unit vector.
"""

import hashlib
from typing import List, Optional, Sequence

import numpy as np

from vectorcore.exceptions import InvalidInputError
from vectorcore.services.base_nlp_service import BaseNLPService, Preprocessor
from vectorcore.services.embedder.embedder import Embedding
from vectorcore.services.embedder.processing import vector_to_buffer
from vectorcore.utils.batch_limiter import BatchLimiter
from vectorcore.utils.constants import DEFAULT_BATCH_SIZE
from vectorcore.utils.pooling_strategies import PoolingStrategies


class MockEmbedder:
    """Same embedding surface as SentenceEmbedder, no model required."""

    def __init__(self, dimension: int = 384, batch_size: int = DEFAULT_BATCH_SIZE):
        if dimension <= 0:
            raise InvalidInputError(f"dimension must be positive, got {dimension}")
        self.dimension = dimension
        self.batch_size = BatchLimiter.validate_batch_size(batch_size)

    @staticmethod
    def _seed(text: str) -> int:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big")

    def _vector(self, text: str, normalize: bool = True) -> np.ndarray:
        rng = np.random.default_rng(self._seed(text))
        vector = rng.uniform(-1.0, 1.0, size=(1, self.dimension)).astype(np.float32)
        if normalize:
            vector = PoolingStrategies.l2_normalize(vector)
        return vector[0]

    def embed_one(
        self,
        text: str,
        preprocess: Optional[Preprocessor] = None,
        as_buffer: bool = False,
        normalize: Optional[bool] = None,
    ) -> Embedding:
        prepared = BaseNLPService._prepare_text(text, preprocess)
        vector = self._vector(prepared, True if normalize is None else normalize)
        return vector_to_buffer(vector) if as_buffer else vector.tolist()

    def embed_batch(
        self,
        texts: Sequence[str],
        batch_size: Optional[int] = None,
        preprocess: Optional[Preprocessor] = None,
        as_buffer: bool = False,
        normalize: Optional[bool] = None,
    ) -> List[Embedding]:
        batch_size = self.batch_size if batch_size is None else batch_size
        return BatchLimiter.run_batched(
            list(texts),
            batch_size,
            lambda chunk: [
                self.embed_one(
                    text, preprocess=preprocess, as_buffer=as_buffer, normalize=normalize
                )
                for text in chunk
            ],
        )

    def embed(self, text: str, **kwargs) -> Embedding:
        return self.embed_one(text, **kwargs)
