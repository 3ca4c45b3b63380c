# =============================================================================
# File: model_config.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Typed views over the files of a model directory (config.json, tokenizer.json)."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from vectorcore.utils.constants import (
    DEFAULT_CONTINUATION_PREFIX,
    DEFAULT_MAX_INPUT_CHARS_PER_WORD,
    DEFAULT_MAX_LENGTH,
)


class ModelConfig(BaseModel):
    """The subset of a HuggingFace ``config.json`` the core relies on."""

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    hidden_size: int = Field(..., gt=0)
    max_position_embeddings: int = Field(default=DEFAULT_MAX_LENGTH, gt=0)
    model_type: str = Field(default="bert")
    num_labels: Optional[int] = None


class TokenizerSettings(BaseModel):
    """The subset of a HuggingFace ``tokenizer.json`` the WordPiece pipeline uses."""

    vocab: Dict[str, int]
    unk_token: Optional[str] = None
    continuing_subword_prefix: str = Field(default=DEFAULT_CONTINUATION_PREFIX)
    max_input_chars_per_word: int = Field(default=DEFAULT_MAX_INPUT_CHARS_PER_WORD, gt=0)
    lowercase: bool = True
    strip_accents: Optional[bool] = None
    handle_chinese_chars: bool = True
    truncation_max_length: Optional[int] = Field(default=None, gt=0)

    @property
    def should_strip_accents(self) -> bool:
        # BertNormalizer strips accents whenever it lowercases unless told otherwise
        if self.strip_accents is None:
            return self.lowercase
        return self.strip_accents
