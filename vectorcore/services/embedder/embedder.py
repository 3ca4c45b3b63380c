# =============================================================================
# File: embedder.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Main SentenceEmbedder class with public embedding API."""

import time
from typing import Any, List, Optional, Sequence, Union

from vectorcore.config.settings import InferenceSettings
from vectorcore.exceptions import InvalidConfigError, InvalidInputError
from vectorcore.logger import get_logger
from vectorcore.services.base_nlp_service import BaseNLPService, Preprocessor
from vectorcore.services.embedder import inference
from vectorcore.services.embedder.processing import vector_to_buffer
from vectorcore.services.resource_manager import LoadedModel
from vectorcore.utils.batch_limiter import BatchLimiter
from vectorcore.utils.pooling_strategies import SUPPORTED_STRATEGIES

logger = get_logger("embedder_service")

Embedding = Union[List[float], bytes]


class SentenceEmbedder(BaseNLPService):
    """Sentence embeddings from a local ONNX encoder.

    Usage::

        with SentenceEmbedder.load("/models/all-MiniLM-L6-v2") as embedder:
            vector = embedder.embed_one("hello world")
    """

    def __init__(self, model: LoadedModel, settings: InferenceSettings):
        super().__init__(model, settings)
        strategy = settings.embedding.pooling_strategy
        if strategy not in SUPPORTED_STRATEGIES:
            raise InvalidConfigError(
                f"Unknown pooling strategy '{strategy}' "
                f"(expected one of {', '.join(SUPPORTED_STRATEGIES)})",
                stage="load",
            )
        self.pooling_strategy = strategy
        self.normalize = settings.embedding.normalize
        self.batch_size = settings.embedding.batch_size

        declared = model.adapter.output_width
        if declared is not None and declared != model.hidden_size:
            logger.warning(
                "ONNX output declares width %d but config hidden_size is %d",
                declared,
                model.hidden_size,
            )

    @property
    def dimension(self) -> int:
        return self.hidden_size

    def embed_one(
        self,
        text: str,
        preprocess: Optional[Preprocessor] = None,
        as_buffer: bool = False,
        normalize: Optional[bool] = None,
    ) -> Embedding:
        """Embed one text.

        Args:
            text: Input text; unknown words are not errors
            preprocess: Optional callable applied to the text before tokenization
            as_buffer: Return little-endian float32 bytes instead of a list
            normalize: Override the configured L2 normalization

        Returns:
            Vector of length hidden_size, as a list or bytes
        """
        prepared = self._prepare_text(text, preprocess)
        vector = inference.embed_texts(
            self.model,
            [prepared],
            batch_size=1,
            pooling_strategy=self.pooling_strategy,
            normalize=self.normalize if normalize is None else normalize,
        )[0]
        return vector_to_buffer(vector) if as_buffer else vector.tolist()

    def embed_batch(
        self,
        texts: Sequence[str],
        batch_size: Optional[int] = None,
        preprocess: Optional[Preprocessor] = None,
        as_buffer: bool = False,
        normalize: Optional[bool] = None,
    ) -> List[Embedding]:
        """Embed many texts, one vector per input in input order."""
        if isinstance(texts, str):
            raise InvalidInputError("embed_batch expects a sequence of texts, not a str")
        batch_size = self.batch_size if batch_size is None else batch_size
        BatchLimiter.validate_batch_size(batch_size)
        if not texts:
            return []

        prepared = [self._prepare_text(text, preprocess) for text in texts]
        start = time.time()
        vectors = inference.embed_texts(
            self.model,
            prepared,
            batch_size=batch_size,
            pooling_strategy=self.pooling_strategy,
            normalize=self.normalize if normalize is None else normalize,
        )
        logger.debug(
            "Embedded %d texts in %.3fs (batch_size=%d)",
            len(prepared),
            time.time() - start,
            batch_size,
        )
        if as_buffer:
            return [vector_to_buffer(v) for v in vectors]
        return [v.tolist() for v in vectors]

    def embed(self, text: str, **kwargs: Any) -> Embedding:
        return self.embed_one(text, **kwargs)
