# =============================================================================
# File: processing.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Embedding output processing: pooling, normalization and byte encoding."""

import logging
from typing import List, Optional, Union

import numpy as np
from numpy import ndarray

from vectorcore.exceptions import InferenceError, InvalidInputError
from vectorcore.logger import get_logger
from vectorcore.utils.pooling_strategies import PoolingStrategies

logger = get_logger("embedder_service.processing")

# Little-endian float32, the layout vector stores expect for raw vector fields
VECTOR_DTYPE = np.dtype("<f4")


def process_embedding_output(
    hidden_states: ndarray,
    attention_mask: Optional[ndarray],
    hidden_size: int,
    pooling_strategy: str = "mean",
    normalize: bool = True,
) -> ndarray:
    """Process ONNX model output into one embedding per input row.

    Args:
        hidden_states: Raw ONNX output, (batch, seq_len, hidden) or pre-pooled (batch, hidden)
        attention_mask: Mask used for the batch, or None for unmasked callers
        hidden_size: Expected vector length from config.json
        pooling_strategy: One of mean, cls, first, max
        normalize: Whether to L2-normalize each pooled vector

    Returns:
        Array of shape (batch, hidden_size)
    """
    hidden_states = np.asarray(hidden_states)
    if hidden_states.shape[-1] != hidden_size:
        raise InferenceError(
            f"Model output width {hidden_states.shape[-1]} does not match "
            f"hidden_size {hidden_size}",
            stage="pooling",
        )

    pooled = PoolingStrategies.apply(hidden_states, pooling_strategy, attention_mask)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("After pooling: %s", pooled.shape)

    if normalize:
        pooled = PoolingStrategies.l2_normalize(pooled)
    return pooled


def vector_to_buffer(vector: Union[ndarray, List[float]]) -> bytes:
    """Encode a vector as little-endian float32 bytes."""
    return np.asarray(vector, dtype=VECTOR_DTYPE).tobytes()


def buffer_to_vector(buffer: bytes) -> List[float]:
    """Decode little-endian float32 bytes back into a list of floats."""
    if len(buffer) % VECTOR_DTYPE.itemsize:
        raise InvalidInputError(
            f"Buffer length {len(buffer)} is not a multiple of {VECTOR_DTYPE.itemsize}"
        )
    return np.frombuffer(buffer, dtype=VECTOR_DTYPE).astype(np.float64).tolist()
