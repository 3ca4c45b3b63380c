# =============================================================================
# File: config_loader.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import json
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from vectorcore.config.model_config import ModelConfig, TokenizerSettings
from vectorcore.config.settings import InferenceSettings
from vectorcore.exceptions import InvalidConfigError, MissingConfigError
from vectorcore.logger import get_logger
from vectorcore.utils.log_sanitizer import sanitize_for_log

logger = get_logger("config_loader")


class ConfigLoader:
    @staticmethod
    def get_settings(settings_file: Optional[str] = None) -> InferenceSettings:
        """
        Loads InferenceSettings from an optional JSON file, then applies
        VECTORCORE_* environment overrides on top.
        """
        settings_file = settings_file or os.getenv("VECTORCORE_SETTINGS_FILE")
        data: Dict[str, Any] = {}
        if settings_file:
            data = ConfigLoader._read_json(settings_file, "settings file")
        try:
            settings = InferenceSettings(**data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid settings in {settings_file}: {e}", stage="load")

        ConfigLoader._apply_env_overrides(settings)
        return settings

    @staticmethod
    def _apply_env_overrides(settings: InferenceSettings) -> None:
        try:
            settings.embedding.batch_size = int(
                os.getenv("VECTORCORE_BATCH_SIZE", settings.embedding.batch_size)
            )
            max_length = os.getenv("VECTORCORE_MAX_LENGTH")
            if max_length:
                settings.embedding.max_length = int(max_length)
            settings.session.intra_op_threads = (
                int(os.getenv("VECTORCORE_INTRA_OP_THREADS"))
                if os.getenv("VECTORCORE_INTRA_OP_THREADS")
                else settings.session.intra_op_threads
            )
        except ValueError as e:
            raise InvalidConfigError(f"Invalid numeric environment override: {e}", stage="load")

        settings.embedding.normalize = (
            os.getenv("VECTORCORE_NORMALIZE", str(settings.embedding.normalize)).lower()
            == "true"
        )
        settings.embedding.pooling_strategy = os.getenv(
            "VECTORCORE_POOLING_STRATEGY", settings.embedding.pooling_strategy
        )
        settings.session.provider = os.getenv(
            "VECTORCORE_SESSION_PROVIDER", settings.session.provider
        )
        settings.session.serialize_inference = (
            os.getenv(
                "VECTORCORE_SERIALIZE_INFERENCE",
                str(settings.session.serialize_inference),
            ).lower()
            == "true"
        )
        settings.logging.folder = os.getenv("VECTORCORE_LOG_PATH", settings.logging.folder)
        settings.logging.level = os.getenv("VECTORCORE_LOG_LEVEL", settings.logging.level)

        if settings.embedding.batch_size <= 0:
            raise InvalidConfigError("Batch size must be a positive integer", stage="load")
        if settings.embedding.max_length is not None and settings.embedding.max_length <= 2:
            raise InvalidConfigError(
                "max_length must leave room for the begin and end tokens", stage="load"
            )

    @staticmethod
    def _read_json(path: str, what: str) -> Dict[str, Any]:
        if not os.path.isfile(path):
            raise MissingConfigError(f"{what} not found: {path}", stage="load")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise InvalidConfigError(f"Cannot read {what} {path}: {e}", stage="load")
        except json.JSONDecodeError as e:
            raise InvalidConfigError(f"{what} is not valid JSON ({path}): {e}", stage="load")
        if not isinstance(data, dict):
            raise InvalidConfigError(f"{what} must contain a JSON object: {path}", stage="load")
        return data

    @staticmethod
    def load_model_config(model_dir: str, settings: InferenceSettings) -> ModelConfig:
        """Parse config.json from the model directory."""
        path = os.path.join(model_dir, settings.files.config_file)
        data = ConfigLoader._read_json(path, settings.files.config_file)
        if "hidden_size" not in data:
            raise MissingConfigError(f"hidden_size missing from {path}", stage="load")
        try:
            config = ModelConfig(**data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid model configuration in {path}: {e}", stage="load")
        logger.debug(
            "Model config: type=%s hidden_size=%d max_positions=%d",
            sanitize_for_log(config.model_type),
            config.hidden_size,
            config.max_position_embeddings,
        )
        return config

    @staticmethod
    def load_tokenizer_settings(model_dir: str, settings: InferenceSettings) -> TokenizerSettings:
        """Parse the WordPiece description out of tokenizer.json."""
        path = os.path.join(model_dir, settings.files.tokenizer_file)
        data = ConfigLoader._read_json(path, settings.files.tokenizer_file)

        model_section = data.get("model")
        if not isinstance(model_section, dict) or "vocab" not in model_section:
            raise MissingConfigError(f"Vocabulary section missing from {path}", stage="load")
        model_kind = model_section.get("type")
        if model_kind is not None and model_kind != "WordPiece":
            raise InvalidConfigError(
                f"Unsupported tokenizer model type '{sanitize_for_log(model_kind)}' in {path}; "
                "only WordPiece vocabularies are supported",
                stage="load",
            )
        vocab = model_section["vocab"]
        if not isinstance(vocab, dict) or not vocab:
            raise InvalidConfigError(
                f"Vocabulary in {path} must be a non-empty token->id object", stage="load"
            )

        fields: Dict[str, Any] = {"vocab": vocab}
        for key in ("unk_token", "continuing_subword_prefix", "max_input_chars_per_word"):
            if model_section.get(key) is not None:
                fields[key] = model_section[key]
        fields.update(ConfigLoader._normalizer_flags(data.get("normalizer")))

        truncation = data.get("truncation")
        if isinstance(truncation, dict) and truncation.get("max_length"):
            fields["truncation_max_length"] = truncation["max_length"]

        try:
            tokenizer_settings = TokenizerSettings(**fields)
        except ValidationError as e:
            raise InvalidConfigError(f"Malformed vocabulary in {path}: {e}", stage="load")
        if any(token_id < 0 for token_id in tokenizer_settings.vocab.values()):
            raise InvalidConfigError(f"Negative token id in vocabulary of {path}", stage="load")

        logger.debug("Loaded vocabulary with %d tokens", len(tokenizer_settings.vocab))
        return tokenizer_settings

    @staticmethod
    def _normalizer_flags(normalizer: Any) -> Dict[str, Any]:
        """Map a tokenizer.json normalizer block onto TokenizerSettings flags."""
        if not isinstance(normalizer, dict):
            return {}
        kind = normalizer.get("type")
        if kind == "BertNormalizer":
            flags: Dict[str, Any] = {}
            for key in ("lowercase", "strip_accents", "handle_chinese_chars"):
                if normalizer.get(key) is not None:
                    flags[key] = normalizer[key]
            return flags
        if kind == "Sequence":
            kinds = {
                n.get("type") for n in normalizer.get("normalizers", []) if isinstance(n, dict)
            }
            return {"lowercase": "Lowercase" in kinds, "strip_accents": "StripAccents" in kinds}
        if kind == "Lowercase":
            return {"lowercase": True}
        return {}

    @staticmethod
    def resolve_model_path(model_dir: str, settings: InferenceSettings) -> str:
        """Return the ONNX model file path, failing fast when it is absent."""
        if not os.path.isdir(model_dir):
            raise MissingConfigError(f"Model directory not found: {model_dir}", stage="load")
        path = os.path.join(model_dir, settings.files.onnx_model)
        if not os.path.isfile(path):
            raise MissingConfigError(
                f"{settings.files.onnx_model} not found in {model_dir}", stage="load"
            )
        return path
