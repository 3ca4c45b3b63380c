# =============================================================================
# File: __init__.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Cross-encoder reranking using ONNX models.

- cross_encoder: CrossEncoderReranker (score, score_and_rank, rank)
- models: RerankResult
"""

from vectorcore.services.reranker.cross_encoder import CrossEncoderReranker
from vectorcore.services.reranker.models import RerankResult

__all__ = [
    "CrossEncoderReranker",
    "RerankResult",
]
