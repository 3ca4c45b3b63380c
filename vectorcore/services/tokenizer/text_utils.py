# =============================================================================
# File: text_utils.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Text validation and basic (pre-WordPiece) segmentation."""

import unicodedata
from typing import Any, List

from vectorcore.exceptions import TokenizationError


def ensure_text(text: Any) -> str:
    """Reject input that is not well-formed text.

    Unknown words are not errors; only values that are not strings or that
    cannot be encoded as UTF-8 (lone surrogates) are.
    """
    if not isinstance(text, str):
        raise TokenizationError(
            f"Expected str input, got {type(text).__name__}", stage="tokenize"
        )
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise TokenizationError(f"Input is not valid UTF-8 text: {e}", stage="tokenize")
    return text


def is_whitespace(char: str) -> bool:
    if char in (" ", "\t", "\n", "\r"):
        return True
    return unicodedata.category(char) == "Zs"


def is_control(char: str) -> bool:
    if char in ("\t", "\n", "\r"):
        return False
    return unicodedata.category(char).startswith("C")


def is_punctuation(char: str) -> bool:
    cp = ord(char)
    # ASCII symbols such as "^", "$" and "`" count as punctuation too
    if 33 <= cp <= 47 or 58 <= cp <= 64 or 91 <= cp <= 96 or 123 <= cp <= 126:
        return True
    return unicodedata.category(char).startswith("P")


def is_cjk_char(cp: int) -> bool:
    return (
        0x4E00 <= cp <= 0x9FFF
        or 0x3400 <= cp <= 0x4DBF
        or 0x20000 <= cp <= 0x2A6DF
        or 0x2A700 <= cp <= 0x2B73F
        or 0x2B740 <= cp <= 0x2B81F
        or 0x2B820 <= cp <= 0x2CEAF
        or 0xF900 <= cp <= 0xFAFF
        or 0x2F800 <= cp <= 0x2FA1F
    )


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


class BasicSegmenter:
    """Lowercases and splits raw text into whitespace/punctuation word candidates."""

    def __init__(
        self,
        lowercase: bool = True,
        strip_accents: bool = True,
        handle_chinese_chars: bool = True,
    ):
        self.lowercase = lowercase
        self.strip_accents = strip_accents
        self.handle_chinese_chars = handle_chinese_chars

    def segment(self, text: str) -> List[str]:
        text = self._clean_text(ensure_text(text))
        if self.handle_chinese_chars:
            text = self._space_cjk_chars(text)

        candidates: List[str] = []
        for word in text.split():
            if self.lowercase:
                word = word.lower()
            if self.strip_accents:
                word = strip_accents(word)
            candidates.extend(self._split_on_punctuation(word))
        return [c for c in candidates if c]

    @staticmethod
    def _clean_text(text: str) -> str:
        output = []
        for char in text:
            cp = ord(char)
            if cp == 0 or cp == 0xFFFD or is_control(char):
                continue
            output.append(" " if is_whitespace(char) else char)
        return "".join(output)

    @staticmethod
    def _space_cjk_chars(text: str) -> str:
        output = []
        for char in text:
            if is_cjk_char(ord(char)):
                output.extend((" ", char, " "))
            else:
                output.append(char)
        return "".join(output)

    @staticmethod
    def _split_on_punctuation(word: str) -> List[str]:
        pieces: List[str] = []
        current: List[str] = []
        for char in word:
            if is_punctuation(char):
                if current:
                    pieces.append("".join(current))
                    current = []
                pieces.append(char)
            else:
                current.append(char)
        if current:
            pieces.append("".join(current))
        return pieces
