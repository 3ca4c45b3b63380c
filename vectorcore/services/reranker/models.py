# =============================================================================
# File: models.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Result models for the cross-encoder reranker."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RerankResult(BaseModel):
    """Reranked documents, best first, with optional parallel scores."""

    model_config = ConfigDict(frozen=True)

    documents: List[Any] = Field(default_factory=list)
    scores: Optional[List[float]] = None

    @model_validator(mode="after")
    def scores_match_documents(self) -> "RerankResult":
        if self.scores is not None and len(self.scores) != len(self.documents):
            raise ValueError(
                "documents and scores must have the same size. "
                f"Documents: {len(self.documents)}, Scores: {len(self.scores)}"
            )
        return self

    @property
    def has_scores(self) -> bool:
        return self.scores is not None

    @property
    def top_score(self) -> float:
        if self.scores is None:
            raise ValueError("No scores available in this result")
        if not self.scores:
            raise ValueError("Score list is empty")
        return self.scores[0]

    def __len__(self) -> int:
        return len(self.documents)
