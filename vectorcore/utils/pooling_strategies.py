# =============================================================================
# File: pooling_strategies.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Optional

import numpy as np

from vectorcore.exceptions import InferenceError
from vectorcore.logger import get_logger
from vectorcore.utils.constants import MASK_NEG_INF, MASK_SUM_EPS

logger = get_logger("pooling_strategies")

SUPPORTED_STRATEGIES = ("mean", "cls", "first", "max")


class PoolingStrategies:

    @staticmethod
    def _check_shapes(embedding: np.ndarray, attention_mask: np.ndarray) -> None:
        if embedding.ndim != 3 or embedding.shape[:2] != attention_mask.shape:
            raise InferenceError(
                f"Embedding shape {embedding.shape} does not match attention mask "
                f"shape {attention_mask.shape}",
                stage="pooling",
            )

    @staticmethod
    def mean_pooling(embedding: np.ndarray, attention_mask: np.ndarray) -> np.ndarray:
        """Mean pooling with attention mask.

        Only positions whose mask is 1 contribute to the sum, and the divisor
        is the number of such positions rather than the sequence length.
        """
        PoolingStrategies._check_shapes(embedding, attention_mask)
        mask = attention_mask.astype(embedding.dtype)
        masked_embedding = embedding * mask[..., None]
        sum_embedding = masked_embedding.sum(axis=1)
        sum_mask = mask.sum(axis=1, keepdims=True)
        return sum_embedding / np.maximum(sum_mask, MASK_SUM_EPS)

    @staticmethod
    def unmasked_mean_pooling(embedding: np.ndarray) -> np.ndarray:
        """Average over every position, padding included."""
        logger.warning(
            "Mean pooling without attention mask; padding positions are averaged in"
        )
        return embedding.mean(axis=1)

    @staticmethod
    def max_pooling(embedding: np.ndarray, attention_mask: np.ndarray) -> np.ndarray:
        """Max pooling with attention mask."""
        PoolingStrategies._check_shapes(embedding, attention_mask)
        # Set masked positions to large negative value before max
        masked_embedding = np.where(
            attention_mask[..., None].astype(bool), embedding, MASK_NEG_INF
        )
        return masked_embedding.max(axis=1)

    @staticmethod
    def first_token_pooling(embedding: np.ndarray) -> np.ndarray:
        return embedding[:, 0, :]

    @staticmethod
    def l2_normalize(vectors: np.ndarray) -> np.ndarray:
        """Divide each row by its L2 norm; rows with zero norm are left unchanged."""
        norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
        safe_norms = np.where(norms > 0, norms, 1.0)
        return vectors / safe_norms

    @staticmethod
    def apply(
        embedding: np.ndarray,
        strategy: str = "mean",
        attention_mask: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """Reduce ``[batch, seq, hidden]`` hidden states to ``[batch, hidden]``."""
        logger.debug("Applying pooling strategy: %s", strategy)

        # Graph already pooled: (batch, hidden)
        if embedding.ndim == 2:
            logger.debug("Pooling skipped for pre-pooled 2D output")
            return embedding
        if embedding.ndim != 3:
            raise InferenceError(
                f"Unsupported hidden state rank {embedding.ndim}", stage="pooling"
            )

        if strategy in ("cls", "first"):
            return PoolingStrategies.first_token_pooling(embedding)

        if strategy == "max":
            if attention_mask is not None:
                return PoolingStrategies.max_pooling(embedding, attention_mask)
            return embedding.max(axis=1)

        if strategy != "mean":
            raise InferenceError(f"Unknown pooling strategy: {strategy}", stage="pooling")

        if attention_mask is not None:
            return PoolingStrategies.mean_pooling(embedding, attention_mask)
        return PoolingStrategies.unmasked_mean_pooling(embedding)
