# =============================================================================
# File: test_tokenizer.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import logging

import pytest

from tests.conftest import BERT_VOCAB, SINGLE_SPAN_VOCAB
from vectorcore.exceptions import InvalidConfigError, TokenizationError
from vectorcore.services.tokenizer import (
    BasicSegmenter,
    ModelFamily,
    SpecialTokens,
    Vocabulary,
    WordPieceTokenizer,
    resolve_special_tokens,
)


def _tokenizer(vocab=None, family=ModelFamily.DUAL_SPAN, **kwargs):
    vocabulary = Vocabulary(BERT_VOCAB if vocab is None else vocab)
    special = resolve_special_tokens(vocabulary, family)
    return WordPieceTokenizer(vocabulary, special, family=family, **kwargs)


class TestVocabulary:
    def test_is_read_only_mapping(self):
        vocab = Vocabulary({"a": 1, "b": 2})
        assert vocab["a"] == 1
        assert len(vocab) == 2
        assert "b" in vocab
        with pytest.raises(TypeError):
            vocab["c"] = 3  # type: ignore[index]

    def test_source_dict_mutation_does_not_leak(self):
        source = {"a": 1}
        vocab = Vocabulary(source)
        source["b"] = 2
        assert "b" not in vocab

    def test_empty_vocabulary_is_configuration_error(self):
        with pytest.raises(InvalidConfigError):
            Vocabulary({})

    def test_id_of_falls_back(self):
        vocab = Vocabulary({"a": 1})
        assert vocab.id_of("zzz", 42) == 42


class TestModelFamily:
    @pytest.mark.parametrize("model_type", ["bert", "distilbert", "electra", None, "BERT"])
    def test_dual_span_types(self, model_type):
        family = ModelFamily.from_model_type(model_type)
        assert family is ModelFamily.DUAL_SPAN
        assert family.uses_token_types
        assert family.pair_separator_count == 1

    @pytest.mark.parametrize("model_type", ["mpnet", "MPNet", " mpnet "])
    def test_single_span_types(self, model_type):
        family = ModelFamily.from_model_type(model_type)
        assert family is ModelFamily.SINGLE_SPAN
        assert not family.uses_token_types
        assert family.pair_separator_count == 2


class TestSpecialTokens:
    def test_bert_tokens_resolved_from_vocabulary(self):
        tokens = resolve_special_tokens(Vocabulary(BERT_VOCAB), ModelFamily.DUAL_SPAN)
        assert tokens == SpecialTokens(begin=101, end=102, pad=0, unknown=100)
        assert tokens.separator == tokens.end

    def test_single_span_tokens_resolved_from_vocabulary(self):
        tokens = resolve_special_tokens(Vocabulary(SINGLE_SPAN_VOCAB), ModelFamily.SINGLE_SPAN)
        assert (tokens.begin, tokens.end, tokens.pad, tokens.unknown) == (0, 2, 1, 3)
        assert tokens.unknown_token == "<unk>"

    def test_missing_strings_use_documented_defaults(self, caplog):
        with caplog.at_level(logging.WARNING):
            tokens = resolve_special_tokens(Vocabulary({"hello": 5}), ModelFamily.DUAL_SPAN)
        assert (tokens.begin, tokens.end, tokens.pad, tokens.unknown) == (101, 102, 0, 100)
        assert "[CLS]" in caplog.text

    def test_single_span_defaults(self):
        tokens = resolve_special_tokens(Vocabulary({"hello": 5}), ModelFamily.SINGLE_SPAN)
        assert (tokens.begin, tokens.end, tokens.pad, tokens.unknown) == (0, 2, 1, 104)

    def test_single_span_accepts_bracket_unknown(self):
        vocab = Vocabulary({"<s>": 0, "<pad>": 1, "</s>": 2, "[UNK]": 7})
        tokens = resolve_special_tokens(vocab, ModelFamily.SINGLE_SPAN)
        assert tokens.unknown == 7
        assert tokens.unknown_token == "[UNK]"

    def test_declared_unk_token_wins(self):
        vocab = Vocabulary({"[UNK]": 100, "<oov>": 9})
        tokens = resolve_special_tokens(vocab, ModelFamily.DUAL_SPAN, unk_token="<oov>")
        assert tokens.unknown == 9


class TestBasicSegmenter:
    def test_lowercases_and_splits_punctuation(self):
        assert BasicSegmenter().segment("Hello, World!") == ["hello", ",", "world", "!"]

    def test_whitespace_variants_and_empty_candidates(self):
        assert BasicSegmenter().segment("  the\tquick\n\nbrown  ") == ["the", "quick", "brown"]
        assert BasicSegmenter().segment("") == []
        assert BasicSegmenter().segment("   ") == []

    def test_strips_accents_when_lowercasing(self):
        assert BasicSegmenter().segment("Café") == ["cafe"]
        assert BasicSegmenter(strip_accents=False).segment("Café") == ["café"]

    def test_cased_segmenter_keeps_case(self):
        assert BasicSegmenter(lowercase=False, strip_accents=False).segment("Hello") == ["Hello"]

    def test_cjk_characters_become_candidates(self):
        assert BasicSegmenter().segment("日本語") == ["日", "本", "語"]

    def test_control_characters_dropped(self):
        assert BasicSegmenter().segment("he\x00llo�") == ["hello"]

    def test_ascii_symbols_are_punctuation(self):
        assert BasicSegmenter().segment("a$b") == ["a", "$", "b"]

    def test_non_string_input_is_tokenization_error(self):
        with pytest.raises(TokenizationError) as exc_info:
            BasicSegmenter().segment(b"bytes")  # type: ignore[arg-type]
        assert exc_info.value.stage == "tokenize"

    def test_lone_surrogate_is_tokenization_error(self):
        with pytest.raises(TokenizationError):
            BasicSegmenter().segment("bad \ud800 text")


class TestWordPiece:
    def test_whole_word_hit_and_full_fail(self):
        vocab = {"hello": 10, "##lo": 11, "he": 12, "[UNK]": 0}
        tokenizer = _tokenizer(vocab)
        assert tokenizer.encode("hello") == [10]
        assert tokenizer.encode("help") == [0]

    def test_greedy_longest_match_first(self):
        tokenizer = _tokenizer()
        assert tokenizer.tokenize("unbelievable") == ["un", "##believ", "##able"]
        assert tokenizer.encode("playing") == [12, 13]

    def test_no_partial_credit(self):
        tokenizer = _tokenizer()
        # "play" matches but "##ed" does not exist
        assert tokenizer.tokenize("played") == ["[UNK]"]

    def test_unknown_words_are_not_errors(self):
        tokenizer = _tokenizer()
        assert tokenizer.encode("hello zebra world") == [5, 100, 6]

    def test_whole_word_hit_precedes_length_limit(self):
        tokenizer = _tokenizer(max_input_chars_per_word=4)
        assert tokenizer.encode("hello fox") == [5, 4]

    def test_overlong_out_of_vocabulary_word(self):
        tokenizer = _tokenizer(max_input_chars_per_word=5)
        assert tokenizer.tokenize("unbelievable") == ["[UNK]"]

    def test_sentence_with_punctuation(self):
        tokenizer = _tokenizer()
        assert tokenizer.encode("What is the capital of France?") == [19, 18, 1, 15, 16, 17, 20]

    def test_idempotent(self):
        tokenizer = _tokenizer()
        text = "The quick brown fox, unbelievable!"
        assert tokenizer.encode(text) == tokenizer.encode(text)

    def test_unknown_string_not_in_vocab_uses_default_id(self):
        tokenizer = _tokenizer({"hello": 5})
        assert tokenizer.encode("zebra") == [100]
