# =============================================================================
# File: wordpiece.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Greedy longest-match-first WordPiece tokenization."""

import logging
from typing import List, Optional

from vectorcore.config.model_config import TokenizerSettings
from vectorcore.logger import get_logger
from vectorcore.services.tokenizer.text_utils import BasicSegmenter
from vectorcore.services.tokenizer.vocabulary import (
    ModelFamily,
    SpecialTokens,
    Vocabulary,
    resolve_special_tokens,
)
from vectorcore.utils.constants import (
    DEFAULT_CONTINUATION_PREFIX,
    DEFAULT_MAX_INPUT_CHARS_PER_WORD,
)
from vectorcore.utils.log_sanitizer import preview_ids, sanitize_for_log

logger = get_logger("tokenizer.wordpiece")


class WordPieceTokenizer:
    """Expands word candidates into vocabulary subwords.

    A word that cannot be fully covered by vocabulary pieces becomes a
    single unknown token; partial splits are never emitted.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        special_tokens: SpecialTokens,
        family: ModelFamily = ModelFamily.DUAL_SPAN,
        segmenter: Optional[BasicSegmenter] = None,
        continuation_prefix: str = DEFAULT_CONTINUATION_PREFIX,
        max_input_chars_per_word: int = DEFAULT_MAX_INPUT_CHARS_PER_WORD,
    ):
        self.vocabulary = vocabulary
        self.special_tokens = special_tokens
        self.family = family
        self.segmenter = segmenter or BasicSegmenter()
        self.continuation_prefix = continuation_prefix
        self.max_input_chars_per_word = max_input_chars_per_word

    @classmethod
    def from_settings(
        cls, settings: TokenizerSettings, family: ModelFamily
    ) -> "WordPieceTokenizer":
        vocabulary = Vocabulary(settings.vocab)
        special_tokens = resolve_special_tokens(vocabulary, family, settings.unk_token)
        segmenter = BasicSegmenter(
            lowercase=settings.lowercase,
            strip_accents=settings.should_strip_accents,
            handle_chinese_chars=settings.handle_chinese_chars,
        )
        return cls(
            vocabulary,
            special_tokens,
            family=family,
            segmenter=segmenter,
            continuation_prefix=settings.continuing_subword_prefix,
            max_input_chars_per_word=settings.max_input_chars_per_word,
        )

    def tokenize_word(self, word: str) -> List[str]:
        """Split one word candidate into subword strings."""
        if not word:
            return []
        if word in self.vocabulary:
            return [word]
        if len(word) > self.max_input_chars_per_word:
            return [self.special_tokens.unknown_token]

        pieces: List[str] = []
        start = 0
        while start < len(word):
            end = len(word)
            match = None
            while start < end:
                candidate = word[start:end]
                if start > 0:
                    candidate = self.continuation_prefix + candidate
                if candidate in self.vocabulary:
                    match = candidate
                    break
                end -= 1
            if match is None:
                return [self.special_tokens.unknown_token]
            pieces.append(match)
            start = end
        return pieces

    def tokenize(self, text: str) -> List[str]:
        """Segment text and expand every candidate into subword strings."""
        pieces: List[str] = []
        for word in self.segmenter.segment(text):
            pieces.extend(self.tokenize_word(word))
        return pieces

    def encode(self, text: str) -> List[int]:
        """Return content subword ids for text (no special tokens)."""
        unknown = self.special_tokens.unknown
        ids = [self.vocabulary.id_of(piece, unknown) for piece in self.tokenize(text)]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Tokenized '%s' -> %s", sanitize_for_log(text, 50), preview_ids(ids)
            )
        return ids
