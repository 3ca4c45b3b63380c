# =============================================================================
# File: conftest.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import json
import os
from typing import Any, Dict, List

import numpy as np
import pytest

from vectorcore.config.settings import InferenceSettings
from vectorcore.services import resource_manager

BERT_VOCAB: Dict[str, int] = {
    "[PAD]": 0,
    "[UNK]": 100,
    "[CLS]": 101,
    "[SEP]": 102,
    "the": 1,
    "quick": 2,
    "brown": 3,
    "fox": 4,
    "hello": 5,
    "world": 6,
    ",": 7,
    "!": 8,
    "un": 9,
    "##believ": 10,
    "##able": 11,
    "play": 12,
    "##ing": 13,
    "paris": 14,
    "capital": 15,
    "of": 16,
    "france": 17,
    "is": 18,
    "what": 19,
    "?": 20,
    ".": 21,
    "cafe": 22,
}

SINGLE_SPAN_VOCAB: Dict[str, int] = {
    "<s>": 0,
    "<pad>": 1,
    "</s>": 2,
    "<unk>": 3,
    "hello": 4,
    "world": 5,
    "paris": 6,
    "capital": 7,
    "of": 8,
    "france": 9,
    "what": 10,
    "is": 11,
    "?": 12,
    "the": 13,
}


class _Node:
    def __init__(self, name: str, shape=None):
        self.name = name
        self.shape = shape


def fake_hidden_states(input_ids: np.ndarray, hidden_size: int) -> np.ndarray:
    """Per-token vectors that depend only on the token id at that position."""
    ids = input_ids.astype(np.float32)[..., None]
    return np.cos(ids * 0.37 + np.arange(hidden_size, dtype=np.float32)).astype(np.float32)


class FakeEncoderSession:
    """Stands in for onnxruntime.InferenceSession on an encoder graph."""

    def __init__(
        self,
        input_names: List[str],
        hidden_size: int = 8,
        output_width: Any = None,
        fail_with: Exception = None,
    ):
        self._inputs = [_Node(n, ["batch", "sequence"]) for n in input_names]
        width = hidden_size if output_width is None else output_width
        self._outputs = [_Node("last_hidden_state", ["batch", "sequence", width])]
        self.hidden_size = hidden_size
        self.fail_with = fail_with
        self.calls: List[Dict[str, np.ndarray]] = []

    def get_inputs(self):
        return list(self._inputs)

    def get_outputs(self):
        return list(self._outputs)

    def run(self, output_names, feed):
        self.calls.append({k: np.array(v, copy=True) for k, v in feed.items()})
        if self.fail_with is not None:
            raise self.fail_with
        unknown = set(feed) - {n.name for n in self._inputs}
        if unknown:
            raise ValueError(f"Invalid input name(s): {sorted(unknown)}")
        ids = next(v for k, v in feed.items() if "input" in k)
        return [fake_hidden_states(ids, self.hidden_size)]


class FakeCrossEncoderSession(FakeEncoderSession):
    """Returns one logit per row, derived from the masked token ids."""

    def __init__(self, input_names: List[str], fail_with: Exception = None):
        super().__init__(input_names, hidden_size=1, fail_with=fail_with)
        self._outputs = [_Node("logits", ["batch", 1])]

    def run(self, output_names, feed):
        self.calls.append({k: np.array(v, copy=True) for k, v in feed.items()})
        if self.fail_with is not None:
            raise self.fail_with
        ids = feed["input_ids"].astype(np.float64)
        mask = feed.get("attention_mask", np.ones_like(feed["input_ids"])).astype(np.float64)
        logits = (np.sin((ids * mask).sum(axis=1)) * 4.0)[:, None]
        return [logits.astype(np.float32)]


def write_model_dir(
    root,
    vocab: Dict[str, int] = None,
    model_type: str = "bert",
    hidden_size: int = 8,
    max_position_embeddings: int = 512,
    truncation_max_length: Any = 16,
    normalizer: Any = None,
    write_onnx: bool = True,
) -> str:
    """Write config.json, tokenizer.json and a placeholder model.onnx under ``root``."""
    os.makedirs(root, exist_ok=True)
    vocab = BERT_VOCAB if vocab is None else vocab
    config = {
        "model_type": model_type,
        "hidden_size": hidden_size,
        "max_position_embeddings": max_position_embeddings,
    }
    tokenizer: Dict[str, Any] = {
        "version": "1.0",
        "model": {
            "type": "WordPiece",
            "unk_token": "[UNK]" if model_type == "bert" else "<unk>",
            "continuing_subword_prefix": "##",
            "max_input_chars_per_word": 100,
            "vocab": vocab,
        },
        "normalizer": normalizer
        or {
            "type": "BertNormalizer",
            "clean_text": True,
            "handle_chinese_chars": True,
            "strip_accents": None,
            "lowercase": True,
        },
    }
    if truncation_max_length is not None:
        tokenizer["truncation"] = {"max_length": truncation_max_length, "strategy": "LongestFirst"}

    with open(os.path.join(root, "config.json"), "w", encoding="utf-8") as f:
        json.dump(config, f)
    with open(os.path.join(root, "tokenizer.json"), "w", encoding="utf-8") as f:
        json.dump(tokenizer, f)
    if write_onnx:
        with open(os.path.join(root, "model.onnx"), "wb") as f:
            f.write(b"placeholder")
    return str(root)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("VECTORCORE_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def settings() -> InferenceSettings:
    return InferenceSettings()


@pytest.fixture
def bert_model_dir(tmp_path) -> str:
    return write_model_dir(tmp_path / "bert")


@pytest.fixture
def mpnet_model_dir(tmp_path) -> str:
    return write_model_dir(tmp_path / "mpnet", vocab=SINGLE_SPAN_VOCAB, model_type="mpnet")


@pytest.fixture
def patch_session(monkeypatch):
    """Install a session factory on onnxruntime; returns the list of created sessions."""
    created: List[Any] = []

    def install(factory):
        def _inference_session(model_path, sess_options=None, providers=None):
            session = factory()
            session.model_path = model_path
            session.providers = providers
            created.append(session)
            return session

        monkeypatch.setattr(resource_manager.ort, "InferenceSession", _inference_session)
        return created

    return install
