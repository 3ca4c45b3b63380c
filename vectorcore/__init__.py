# =============================================================================
# File: __init__.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Local ONNX sentence embeddings and cross-encoder reranking."""

from vectorcore.services.embedder import SentenceEmbedder, buffer_to_vector, vector_to_buffer
from vectorcore.services.mock_embedder import MockEmbedder
from vectorcore.services.reranker import CrossEncoderReranker, RerankResult

__version__ = "0.1.0"

__all__ = [
    "CrossEncoderReranker",
    "MockEmbedder",
    "RerankResult",
    "SentenceEmbedder",
    "buffer_to_vector",
    "vector_to_buffer",
]
