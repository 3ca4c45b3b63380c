# =============================================================================
# File: test_mock_embedder.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import numpy as np
import pytest

from vectorcore import MockEmbedder, buffer_to_vector
from vectorcore.exceptions import InvalidInputError, TokenizationError


def test_same_text_same_vector():
    a = MockEmbedder(dimension=16)
    b = MockEmbedder(dimension=16)
    assert a.embed_one("hello world") == b.embed_one("hello world")


def test_different_texts_differ():
    embedder = MockEmbedder(dimension=16)
    assert embedder.embed_one("hello") != embedder.embed_one("world")


def test_unit_norm_and_dimension():
    vector = MockEmbedder(dimension=32).embed_one("paris")
    assert len(vector) == 32
    assert abs(np.linalg.norm(vector) - 1.0) < 1e-5


def test_unnormalized_vectors_in_range():
    vector = MockEmbedder(dimension=64).embed_one("paris", normalize=False)
    assert all(-1.0 <= v <= 1.0 for v in vector)


def test_batch_matches_singles():
    embedder = MockEmbedder(dimension=8, batch_size=2)
    texts = ["a", "b", "c", "a"]
    batched = embedder.embed_batch(texts)
    assert batched == [embedder.embed_one(t) for t in texts]
    assert batched[0] == batched[3]


def test_buffer_output():
    embedder = MockEmbedder(dimension=8)
    buf = embedder.embed("hello", as_buffer=True)
    assert len(buf) == 32
    assert np.allclose(buffer_to_vector(buf), embedder.embed_one("hello"))


def test_invalid_arguments():
    with pytest.raises(InvalidInputError):
        MockEmbedder(dimension=0)
    with pytest.raises(InvalidInputError):
        MockEmbedder(batch_size=0)
    with pytest.raises(TokenizationError):
        MockEmbedder().embed_one(None)  # type: ignore[arg-type]


def test_batch_normalize_override():
    embedder = MockEmbedder(dimension=16)
    raw = embedder.embed_batch(["a", "b"], normalize=False)
    assert raw == [embedder.embed_one(t, normalize=False) for t in ["a", "b"]]
