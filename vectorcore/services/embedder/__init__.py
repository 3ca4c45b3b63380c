# =============================================================================
# File: __init__.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Embedder service for sentence embeddings using ONNX models.

This package provides a modular embedder service with the following components:
- onnx_utils: ModelSessionAdapter and ONNX input name resolution
- processing: Embedding output processing, pooling, normalization, byte encoding
- inference: Core embedding inference logic for single texts and batches
- embedder: Main SentenceEmbedder class

Public API:
- SentenceEmbedder: Main class for text embedding
- vector_to_buffer / buffer_to_vector: little-endian float32 encoding
"""

from vectorcore.services.embedder.embedder import SentenceEmbedder
from vectorcore.services.embedder.processing import buffer_to_vector, vector_to_buffer

__all__ = [
    "SentenceEmbedder",
    "buffer_to_vector",
    "vector_to_buffer",
]
