# =============================================================================
# File: inference.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Core embedding inference logic for single texts and batches."""

import logging
from typing import List

import numpy as np
from numpy import ndarray

from vectorcore.logger import get_logger
from vectorcore.services.embedder import processing
from vectorcore.services.resource_manager import LoadedModel
from vectorcore.services.tokenizer.assembler import TokenBatch
from vectorcore.utils.batch_limiter import BatchLimiter

logger = get_logger("embedder_service.inference")


def embed_token_batch(
    model: LoadedModel,
    texts: List[str],
    pooling_strategy: str = "mean",
    normalize: bool = True,
) -> ndarray:
    """Tokenize, assemble, run and pool one batch of texts.

    Args:
        model: Loaded model resources
        texts: Already validated texts, at most one batch worth
        pooling_strategy: Pooling strategy name
        normalize: Whether to L2-normalize the pooled vectors

    Returns:
        Array of shape (len(texts), hidden_size)
    """
    sequences = [model.assembler.encode(text) for text in texts]
    batch = TokenBatch.stack(sequences)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Embedding batch of %d, real tokens per row: %s",
            len(batch),
            batch.attention_mask.sum(axis=1).tolist(),
        )

    outputs = model.adapter.run(batch)
    return processing.process_embedding_output(
        outputs[0],
        batch.attention_mask,
        model.hidden_size,
        pooling_strategy=pooling_strategy,
        normalize=normalize,
    )


def embed_texts(
    model: LoadedModel,
    texts: List[str],
    batch_size: int,
    pooling_strategy: str = "mean",
    normalize: bool = True,
) -> List[ndarray]:
    """Embed texts batch by batch, one vector per input, in input order."""

    def run_batch(chunk: List[str]) -> List[ndarray]:
        pooled = embed_token_batch(model, chunk, pooling_strategy, normalize)
        return list(np.asarray(pooled, dtype=np.float32))

    return BatchLimiter.run_batched(texts, batch_size, run_batch)
