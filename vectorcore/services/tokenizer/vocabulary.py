# =============================================================================
# File: vocabulary.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Vocabulary table, model families and special-token resolution."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from vectorcore.exceptions import InvalidConfigError
from vectorcore.logger import get_logger

logger = get_logger("tokenizer.vocabulary")

# model_type values (config.json) whose WordPiece encoders take no token_type_ids
SINGLE_SPAN_MODEL_TYPES: Tuple[str, ...] = ("mpnet",)


class ModelFamily(str, Enum):
    """Input layout of a model, resolved once when the model is loaded."""

    DUAL_SPAN = "dual_span"
    SINGLE_SPAN = "single_span"

    @classmethod
    def from_model_type(cls, model_type: Optional[str]) -> "ModelFamily":
        normalized = (model_type or "bert").strip().lower().replace("_", "-")
        if normalized in SINGLE_SPAN_MODEL_TYPES:
            return cls.SINGLE_SPAN
        return cls.DUAL_SPAN

    @property
    def uses_token_types(self) -> bool:
        return self is ModelFamily.DUAL_SPAN

    @property
    def pair_separator_count(self) -> int:
        # <s> A </s></s> B </s>  vs  [CLS] A [SEP] B [SEP]
        return 2 if self is ModelFamily.SINGLE_SPAN else 1


# role -> (candidate strings, default id), first string found in the vocabulary wins
_SPECIAL_TOKEN_TABLE: Dict[ModelFamily, Dict[str, Tuple[Tuple[str, ...], int]]] = {
    ModelFamily.DUAL_SPAN: {
        "begin": (("[CLS]",), 101),
        "end": (("[SEP]",), 102),
        "pad": (("[PAD]",), 0),
        "unknown": (("[UNK]",), 100),
    },
    ModelFamily.SINGLE_SPAN: {
        "begin": (("<s>",), 0),
        "end": (("</s>",), 2),
        "pad": (("<pad>",), 1),
        "unknown": (("<unk>", "[UNK]"), 104),
    },
}


class Vocabulary(Mapping[str, int]):
    """Immutable subword -> id table, built once per loaded model."""

    def __init__(self, entries: Mapping[str, int]):
        if not entries:
            raise InvalidConfigError("Vocabulary must not be empty", stage="load")
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, token: str) -> int:
        return self._entries[token]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, token: object) -> bool:
        return token in self._entries

    def id_of(self, token: str, default: int) -> int:
        return self._entries.get(token, default)


@dataclass(frozen=True)
class SpecialTokens:
    """Ids of the structural tokens wrapped around every sequence."""

    begin: int
    end: int
    pad: int
    unknown: int
    unknown_token: str = "[UNK]"

    @property
    def separator(self) -> int:
        return self.end


def resolve_special_tokens(
    vocabulary: Vocabulary, family: ModelFamily, unk_token: Optional[str] = None
) -> SpecialTokens:
    """Look up special token ids for a family, falling back to documented defaults.

    Args:
        vocabulary: Loaded vocabulary
        family: Model family resolved from config.json
        unk_token: Unknown-token string declared by tokenizer.json, tried first

    Returns:
        SpecialTokens record
    """
    table = _SPECIAL_TOKEN_TABLE[family]
    resolved: Dict[str, int] = {}
    unknown_string = table["unknown"][0][0]

    for role, (candidates, default_id) in table.items():
        if role == "unknown" and unk_token:
            candidates = (unk_token,) + tuple(c for c in candidates if c != unk_token)
        for candidate in candidates:
            if candidate in vocabulary:
                resolved[role] = vocabulary[candidate]
                if role == "unknown":
                    unknown_string = candidate
                break
        else:
            resolved[role] = default_id
            logger.warning(
                "Special token %s not in vocabulary; using default id %d",
                "/".join(candidates),
                default_id,
            )

    tokens = SpecialTokens(unknown_token=unknown_string, **resolved)
    logger.debug(
        "Special tokens: begin=%d end=%d pad=%d unknown=%d",
        tokens.begin,
        tokens.end,
        tokens.pad,
        tokens.unknown,
    )
    return tokens
