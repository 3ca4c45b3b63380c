# =============================================================================
# File: assembler.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Special-token wrapping, truncation, padding and mask derivation.

Every assembled sequence has exactly ``max_length`` positions. Pair
truncation uses a "longest first" policy: while the two spans do not fit,
the last subword of the longer span is dropped (the candidate span on ties),
so both spans survive whenever the budget allows at least one token each.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from vectorcore.exceptions import InvalidConfigError
from vectorcore.services.tokenizer.vocabulary import ModelFamily, SpecialTokens
from vectorcore.services.tokenizer.wordpiece import WordPieceTokenizer


@dataclass(frozen=True)
class TokenSequence:
    """One assembled model input row."""

    ids: np.ndarray
    attention_mask: np.ndarray
    token_type_ids: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return int(self.ids.shape[0])

    @property
    def num_tokens(self) -> int:
        return int(self.attention_mask.sum())


@dataclass(frozen=True)
class TokenBatch:
    """Row-stacked sequences, shaped ``[batch, max_length]``."""

    input_ids: np.ndarray
    attention_mask: np.ndarray
    token_type_ids: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return int(self.input_ids.shape[0])

    @classmethod
    def stack(cls, sequences: Sequence[TokenSequence]) -> "TokenBatch":
        if not sequences:
            raise ValueError("Cannot build a batch from zero sequences")
        token_types = None
        if all(seq.token_type_ids is not None for seq in sequences):
            token_types = np.stack([seq.token_type_ids for seq in sequences])
        return cls(
            input_ids=np.stack([seq.ids for seq in sequences]),
            attention_mask=np.stack([seq.attention_mask for seq in sequences]),
            token_type_ids=token_types,
        )


def truncate_pair(
    first: Sequence[int], second: Sequence[int], budget: int
) -> Tuple[List[int], List[int]]:
    """Trim two spans to a combined ``budget`` using longest-first removal."""
    first, second = list(first), list(second)
    budget = max(budget, 0)
    while len(first) + len(second) > budget:
        if len(first) > len(second):
            first.pop()
        else:
            second.pop()
    return first, second


class SequenceAssembler:
    """Builds fixed-length TokenSequences for single texts and (query, candidate) pairs."""

    def __init__(self, tokenizer: WordPieceTokenizer, max_length: int):
        family = tokenizer.family
        # room for both spans of a pair to keep at least one subword each
        min_length = 4 + family.pair_separator_count
        if max_length < min_length:
            raise InvalidConfigError(
                f"max_length {max_length} is too small; need at least {min_length}",
                stage="load",
            )
        self.tokenizer = tokenizer
        self.max_length = max_length

    @property
    def special_tokens(self) -> SpecialTokens:
        return self.tokenizer.special_tokens

    @property
    def family(self) -> ModelFamily:
        return self.tokenizer.family

    def encode(self, text: str) -> TokenSequence:
        return self.assemble(self.tokenizer.encode(text))

    def encode_pair(self, query: str, candidate: str) -> TokenSequence:
        return self.assemble_pair(self.tokenizer.encode(query), self.tokenizer.encode(candidate))

    def assemble(self, content_ids: Sequence[int]) -> TokenSequence:
        """``[begin] + content + [end]`` truncated to fit, then right-padded."""
        special = self.special_tokens
        content = list(content_ids)[: self.max_length - 2]
        ids = [special.begin] + content + [special.end]
        return self._pad(ids, None)

    def assemble_pair(
        self, query_ids: Sequence[int], candidate_ids: Sequence[int]
    ) -> TokenSequence:
        """``[begin] q [sep] c [end]`` with token types for dual-span models."""
        special = self.special_tokens
        separators = [special.separator] * self.family.pair_separator_count
        budget = self.max_length - 2 - len(separators)
        query, candidate = truncate_pair(query_ids, candidate_ids, budget)

        first_span = [special.begin] + query + separators
        second_span = candidate + [special.end]
        ids = first_span + second_span

        token_types = None
        if self.family.uses_token_types:
            token_types = [0] * len(first_span) + [1] * len(second_span)
        return self._pad(ids, token_types)

    def _pad(self, ids: List[int], token_types: Optional[List[int]]) -> TokenSequence:
        real = len(ids)
        padding = self.max_length - real
        input_ids = np.array(ids + [self.special_tokens.pad] * padding, dtype=np.int64)
        mask = np.array([1] * real + [0] * padding, dtype=np.int64)
        types = None
        if token_types is not None:
            types = np.array(token_types + [0] * padding, dtype=np.int64)
        return TokenSequence(ids=input_ids, attention_mask=mask, token_type_ids=types)
