# =============================================================================
# File: cross_encoder.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Cross-encoder relevance scoring and reranking."""

import logging
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from vectorcore.config.settings import InferenceSettings
from vectorcore.exceptions import InferenceError, InvalidInputError
from vectorcore.logger import get_logger
from vectorcore.services.base_nlp_service import BaseNLPService
from vectorcore.services.reranker.models import RerankResult
from vectorcore.services.resource_manager import LoadedModel
from vectorcore.services.tokenizer.text_utils import ensure_text
from vectorcore.utils.batch_limiter import BatchLimiter
from vectorcore.utils.log_sanitizer import sanitize_for_log

logger = get_logger("reranker_service")


class CrossEncoderReranker(BaseNLPService):
    """Scores (query, candidate) pairs with a cross-encoder ONNX model.

    Each pair is assembled into one sequence, the model's single logit is
    read from column 0 of the first output and mapped through a sigmoid, so
    every score lies in [0, 1].
    """

    def __init__(
        self,
        model: LoadedModel,
        settings: InferenceSettings,
        limit: Optional[int] = None,
        return_score: Optional[bool] = None,
    ):
        super().__init__(model, settings)
        self.limit = self._validate_limit(settings.rerank.limit if limit is None else limit)
        self.return_score = (
            settings.rerank.return_score if return_score is None else return_score
        )
        self.batch_size = settings.embedding.batch_size

    @staticmethod
    def _validate_limit(limit: Any) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidInputError(f"Limit must be a positive integer, got: {limit!r}")
        return limit

    @staticmethod
    def _validate_query(query: Any) -> str:
        if query is None:
            raise InvalidInputError("query cannot be None")
        query = ensure_text(query)
        if not query.strip():
            raise InvalidInputError("query cannot be empty")
        return query

    def _score_batch(self, query: str, candidates: List[str]) -> List[float]:
        assembler = self.model.assembler
        sequences = [assembler.encode_pair(query, candidate) for candidate in candidates]
        outputs = self._run_sequences(sequences)

        logits = np.asarray(outputs[0])
        if logits.ndim == 2 and logits.shape[0] == len(candidates) and logits.shape[1] >= 1:
            logits = logits[:, 0]
        elif logits.ndim != 1 or logits.shape[0] != len(candidates):
            raise InferenceError(
                f"Unexpected cross-encoder output shape {logits.shape} "
                f"for {len(candidates)} pairs",
                stage="score",
            )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Cross-encoder logits: %s", logits.tolist())
        return self._sigmoid(logits).tolist()

    def score(self, query: str, candidate: str) -> float:
        """Relevance of one candidate to a query, in [0, 1]."""
        query = self._validate_query(query)
        candidate = ensure_text(candidate)
        return self._score_batch(query, [candidate])[0]

    def score_pairs(
        self, query: str, candidates: Sequence[str], batch_size: Optional[int] = None
    ) -> List[float]:
        """Scores one-to-one with ``candidates``, computed batch by batch."""
        query = self._validate_query(query)
        texts = [ensure_text(c) for c in candidates]
        if not texts:
            return []
        return BatchLimiter.run_batched(
            texts,
            self.batch_size if batch_size is None else batch_size,
            lambda chunk: self._score_batch(query, chunk),
        )

    def score_and_rank(
        self, query: str, candidates: Sequence[str], limit: Optional[int] = None
    ) -> List[Tuple[str, float]]:
        """Candidates with scores, sorted by descending score and cut to ``limit``.

        Ties keep their input order.
        """
        query = self._validate_query(query)
        limit = self.limit if limit is None else self._validate_limit(limit)
        candidates = list(candidates)
        scores = self.score_pairs(query, candidates)
        order = sorted(range(len(candidates)), key=lambda i: -scores[i])
        return [(candidates[i], scores[i]) for i in order[:limit]]

    def rank(
        self, query: str, docs: Sequence[Any], limit: Optional[int] = None
    ) -> RerankResult:
        """Rerank plain strings or dicts carrying a ``content`` key.

        Dict documents without ``content`` are skipped. Documents come back in
        the form they were given.
        """
        query = self._validate_query(query)
        if docs is None:
            raise InvalidInputError("docs cannot be None")
        limit = self.limit if limit is None else self._validate_limit(limit)

        texts: List[str] = []
        valid_docs: List[Any] = []
        for doc in docs:
            if isinstance(doc, str):
                texts.append(doc)
                valid_docs.append(doc)
            elif isinstance(doc, dict):
                if "content" in doc:
                    texts.append(str(doc["content"]))
                    valid_docs.append(doc)
                else:
                    logger.debug(
                        "Skipping document without content: %s", sanitize_for_log(doc, 80)
                    )
            else:
                raise InvalidInputError(
                    f"Documents must be str or dict, got {type(doc).__name__}"
                )

        if not valid_docs:
            return RerankResult(documents=[], scores=[] if self.return_score else None)

        scores = self.score_pairs(query, texts)
        order = sorted(range(len(valid_docs)), key=lambda i: -scores[i])[:limit]
        ranked: List[Any] = [valid_docs[i] for i in order]
        ranked_scores: Optional[List[float]] = (
            [scores[i] for i in order] if self.return_score else None
        )
        logger.debug("Reranked %d of %d documents", len(ranked), len(valid_docs))
        return RerankResult(documents=ranked, scores=ranked_scores)
