# =============================================================================
# File: resource_manager.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Loading of model directories into ready-to-run resources.

Both the embedder and the cross-encoder go through ``load_model``: configuration
files are parsed and validated first, and the ONNX session is created last, so
a configuration problem never leaves a live session behind.
"""

from dataclasses import dataclass
from typing import Any, Optional

import onnxruntime as ort

from vectorcore.config.config_loader import ConfigLoader
from vectorcore.config.model_config import ModelConfig, TokenizerSettings
from vectorcore.config.settings import InferenceSettings, SessionConfig
from vectorcore.exceptions import InvalidConfigError, ResourceError, VectorCoreException
from vectorcore.logger import get_logger
from vectorcore.services.embedder.onnx_utils import ModelSessionAdapter
from vectorcore.services.tokenizer.assembler import SequenceAssembler
from vectorcore.services.tokenizer.vocabulary import ModelFamily, SpecialTokens, Vocabulary
from vectorcore.services.tokenizer.wordpiece import WordPieceTokenizer
from vectorcore.utils.log_sanitizer import sanitize_for_log

logger = get_logger("resource_manager")

GRAPH_OPTIMIZATION_LEVELS = {
    "disable": ort.GraphOptimizationLevel.ORT_DISABLE_ALL,
    "basic": ort.GraphOptimizationLevel.ORT_ENABLE_BASIC,
    "extended": ort.GraphOptimizationLevel.ORT_ENABLE_EXTENDED,
    "all": ort.GraphOptimizationLevel.ORT_ENABLE_ALL,
}


@dataclass
class LoadedModel:
    """Everything built from one model directory; shared read-only after load."""

    model_dir: str
    config: ModelConfig
    family: ModelFamily
    tokenizer: WordPieceTokenizer
    assembler: SequenceAssembler
    adapter: ModelSessionAdapter

    @property
    def vocabulary(self) -> Vocabulary:
        return self.tokenizer.vocabulary

    @property
    def special_tokens(self) -> SpecialTokens:
        return self.tokenizer.special_tokens

    @property
    def hidden_size(self) -> int:
        return self.config.hidden_size

    @property
    def max_length(self) -> int:
        return self.assembler.max_length

    @property
    def closed(self) -> bool:
        return self.adapter.closed

    def close(self) -> None:
        self.adapter.close()


def resolve_max_length(
    config: ModelConfig,
    tokenizer_settings: TokenizerSettings,
    settings: InferenceSettings,
    family: ModelFamily = ModelFamily.DUAL_SPAN,
) -> int:
    """Explicit override, then tokenizer.json truncation, then config.json positions.

    The result never exceeds the model's position table. Single-span models
    offset position ids past the padding index, so two slots are unusable.
    An explicit override beyond the table is a configuration error; values
    read from the model files are clamped.
    """
    limit = config.max_position_embeddings
    if family is ModelFamily.SINGLE_SPAN:
        limit -= 2

    override = settings.embedding.max_length
    if override is not None:
        if override > limit:
            raise InvalidConfigError(
                f"max_length {override} exceeds the model's {limit} usable positions",
                stage="load",
            )
        return override

    derived = tokenizer_settings.truncation_max_length or config.max_position_embeddings
    if derived > limit:
        logger.warning("Clamping max_length %d to %d usable positions", derived, limit)
        return limit
    return derived


def create_session_options(session_config: SessionConfig) -> ort.SessionOptions:
    level = GRAPH_OPTIMIZATION_LEVELS.get(session_config.graph_optimization.lower())
    if level is None:
        raise InvalidConfigError(
            f"Unknown graph optimization level: {session_config.graph_optimization} "
            f"(expected one of {sorted(GRAPH_OPTIMIZATION_LEVELS)})",
            stage="load",
        )
    opts = ort.SessionOptions()
    opts.graph_optimization_level = level
    if session_config.intra_op_threads:
        opts.intra_op_num_threads = session_config.intra_op_threads
    return opts


def create_session(model_path: str, session_config: SessionConfig) -> Any:
    """Create an ONNX Runtime session, falling back to CPU when the provider is unavailable."""
    provider = session_config.provider or "CPUExecutionProvider"
    available_providers = ort.get_available_providers()
    if provider not in available_providers:
        logger.warning(
            "Provider %s not available, using CPUExecutionProvider",
            sanitize_for_log(provider),
        )
        provider = "CPUExecutionProvider"

    opts = create_session_options(session_config)
    logger.debug(
        "Creating ONNX session for %s with provider %s",
        sanitize_for_log(model_path),
        provider,
    )
    try:
        return ort.InferenceSession(model_path, sess_options=opts, providers=[provider])
    except Exception as e:
        logger.error(
            "Failed to create ONNX session for %s: %s",
            sanitize_for_log(model_path),
            sanitize_for_log(str(e)),
        )
        raise ResourceError(f"ONNX session creation failed: {e}", stage="load") from e


def load_model(model_dir: str, settings: Optional[InferenceSettings] = None) -> LoadedModel:
    """Parse a model directory and open its ONNX session.

    Args:
        model_dir: Directory holding config.json, tokenizer.json and the ONNX file
        settings: Inference settings; read from file/environment when omitted

    Returns:
        Fully initialized LoadedModel

    Raises:
        ConfigurationError: A file is missing or malformed
        ResourceError: The ONNX session cannot be created
    """
    settings = settings or ConfigLoader.get_settings()
    model_path = ConfigLoader.resolve_model_path(model_dir, settings)
    config = ConfigLoader.load_model_config(model_dir, settings)
    tokenizer_settings = ConfigLoader.load_tokenizer_settings(model_dir, settings)

    family = ModelFamily.from_model_type(config.model_type)
    tokenizer = WordPieceTokenizer.from_settings(tokenizer_settings, family)
    assembler = SequenceAssembler(
        tokenizer, resolve_max_length(config, tokenizer_settings, settings, family)
    )

    session = create_session(model_path, settings.session)
    try:
        adapter = ModelSessionAdapter(session, serialize=settings.session.serialize_inference)
    except VectorCoreException:
        logger.error("Releasing ONNX session for %s after failed load", sanitize_for_log(model_dir))
        del session
        raise
    except Exception as e:
        del session
        raise ResourceError(f"Cannot inspect ONNX session inputs: {e}", stage="load") from e

    logger.info(
        "Loaded %s model from %s (family=%s, hidden_size=%d, max_length=%d, vocab=%d)",
        sanitize_for_log(config.model_type),
        sanitize_for_log(model_dir),
        family.value,
        config.hidden_size,
        assembler.max_length,
        len(tokenizer.vocabulary),
    )
    return LoadedModel(
        model_dir=model_dir,
        config=config,
        family=family,
        tokenizer=tokenizer,
        assembler=assembler,
        adapter=adapter,
    )
