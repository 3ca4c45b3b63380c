# =============================================================================
# File: base_nlp_service.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Any, Callable, List, Optional

import numpy as np
from numpy import ndarray

from vectorcore.config.config_loader import ConfigLoader
from vectorcore.config.settings import InferenceSettings
from vectorcore.exceptions import SessionClosedError, TokenizationError
from vectorcore.logger import configure_logging, get_logger
from vectorcore.services.resource_manager import LoadedModel, load_model
from vectorcore.services.tokenizer.assembler import TokenBatch, TokenSequence
from vectorcore.services.tokenizer.text_utils import ensure_text

logger = get_logger("base_nlp_service")

Preprocessor = Callable[[str], str]


class BaseNLPService:
    """
    Base class for ONNX-backed services: owns one LoadedModel, exposes the
    shared run path, and releases the session exactly once on close().
    """

    def __init__(self, model: LoadedModel, settings: InferenceSettings):
        self._model = model
        self.settings = settings

    @classmethod
    def load(cls, model_dir: str, settings: Optional[InferenceSettings] = None, **kwargs: Any):
        """Load a model directory and wrap it in a ready service instance."""
        settings = settings or ConfigLoader.get_settings()
        configure_logging(settings.logging.folder, settings.logging.level)
        model = load_model(model_dir, settings)
        try:
            return cls(model, settings, **kwargs)
        except Exception:
            model.close()
            raise

    @property
    def model(self) -> LoadedModel:
        if self._model.closed:
            raise SessionClosedError(
                f"{self.__class__.__name__} has been closed", stage="inference"
            )
        return self._model

    @property
    def closed(self) -> bool:
        return self._model.closed

    @property
    def hidden_size(self) -> int:
        return self._model.hidden_size

    @property
    def max_length(self) -> int:
        return self._model.max_length

    def close(self) -> None:
        """Release the ONNX session. Calling close() again is a no-op."""
        if not self._model.closed:
            logger.info("Closing %s for %s", self.__class__.__name__, self._model.model_dir)
        self._model.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @staticmethod
    def _prepare_text(text: Any, preprocess: Optional[Preprocessor] = None) -> str:
        """Apply an optional caller preprocessor, then validate the result as text."""
        text = ensure_text(text)
        if preprocess is not None:
            text = preprocess(text)
            if not isinstance(text, str):
                raise TokenizationError(
                    f"preprocess must return str, got {type(text).__name__}",
                    stage="tokenize",
                )
        return text

    def _run_sequences(self, sequences: List[TokenSequence]) -> List[ndarray]:
        return self.model.adapter.run(TokenBatch.stack(sequences))

    @staticmethod
    def _sigmoid(x: ndarray) -> ndarray:
        """Numerically stable logistic function."""
        x = np.asarray(x, dtype=np.float64)
        out = np.empty_like(x)
        positive = x >= 0
        out[positive] = 1.0 / (1.0 + np.exp(-x[positive]))
        exp_x = np.exp(x[~positive])
        out[~positive] = exp_x / (1.0 + exp_x)
        return out
