# =============================================================================
# File: __init__.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""WordPiece tokenization for BERT-family and MPNet/RoBERTa-family encoders.

This package provides:
- vocabulary: Vocabulary table, ModelFamily and special-token resolution
- text_utils: Input validation and basic whitespace/punctuation segmentation
- wordpiece: Greedy longest-match-first subword tokenizer
- assembler: Fixed-length sequence assembly for single texts and pairs
"""

from vectorcore.services.tokenizer.assembler import (
    SequenceAssembler,
    TokenBatch,
    TokenSequence,
    truncate_pair,
)
from vectorcore.services.tokenizer.text_utils import BasicSegmenter
from vectorcore.services.tokenizer.vocabulary import (
    ModelFamily,
    SpecialTokens,
    Vocabulary,
    resolve_special_tokens,
)
from vectorcore.services.tokenizer.wordpiece import WordPieceTokenizer

__all__ = [
    "BasicSegmenter",
    "ModelFamily",
    "SequenceAssembler",
    "SpecialTokens",
    "TokenBatch",
    "TokenSequence",
    "Vocabulary",
    "WordPieceTokenizer",
    "resolve_special_tokens",
    "truncate_pair",
]
