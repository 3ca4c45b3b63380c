# =============================================================================
# File: onnx_utils.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""ONNX session input preparation and name resolution."""

import logging
import threading
from contextlib import contextmanager, nullcontext
from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from vectorcore.exceptions import InferenceError, InvalidConfigError, SessionClosedError
from vectorcore.logger import get_logger
from vectorcore.services.tokenizer.assembler import TokenBatch
from vectorcore.utils.constants import (
    ATTENTION_MASK_NAME,
    INPUT_IDS_NAME,
    POSITION_IDS_NAME,
    TOKEN_TYPE_IDS_NAME,
)

logger = get_logger("embedder_service.onnx")


def select_input_name(model_input_names: List[str], candidates: List[str]) -> Optional[str]:
    """Select input name using 3-tier matching: exact → case-insensitive → substring."""
    # 1. Exact match
    for cand in candidates:
        if cand in model_input_names:
            return cand

    # 2. Case-insensitive match
    model_input_names_lc = [n.lower() for n in model_input_names]
    for cand in candidates:
        lc = cand.lower()
        if lc in model_input_names_lc:
            return model_input_names[model_input_names_lc.index(lc)]

    # 3. Substring match (fallback)
    for cand in candidates:
        lc = cand.lower()
        for name, name_lc in zip(model_input_names, model_input_names_lc):
            if lc in name_lc:
                return name

    return None


class ModelSessionAdapter:
    """Feeds token batches to an ONNX Runtime session.

    The declared input names are read once from the session. Token ids are
    always supplied; attention mask, token type ids and position ids are
    supplied only when the session declares them, so token-type-free models
    never receive a token type tensor.

    ``InferenceSession.run`` may be called concurrently from several threads,
    so calls are not serialized unless ``serialize=True``.
    """

    def __init__(self, session: Any, serialize: bool = False):
        self._session = session
        self.input_names: List[str] = [inp.name for inp in session.get_inputs()]
        self.output_names: List[str] = [out.name for out in session.get_outputs()]
        if not self.input_names:
            raise InvalidConfigError("ONNX model declares no inputs", stage="load")

        self.ids_name = select_input_name(self.input_names, [INPUT_IDS_NAME, "input"])
        if self.ids_name is None:
            raise InvalidConfigError(
                f"ONNX model has no token id input (declared: {self.input_names})",
                stage="load",
            )
        self.mask_name = select_input_name(self.input_names, [ATTENTION_MASK_NAME, "mask"])
        self.token_type_name = select_input_name(
            self.input_names, [TOKEN_TYPE_IDS_NAME, "token_type", "segment_ids"]
        )
        self.position_name = select_input_name(self.input_names, [POSITION_IDS_NAME])
        self.output_width = get_native_dimension_from_session(session)
        self._lock = threading.Lock() if serialize else None

        logger.debug(
            "Session inputs: ids=%s mask=%s token_types=%s positions=%s",
            self.ids_name,
            self.mask_name,
            self.token_type_name,
            self.position_name,
        )

    @property
    def closed(self) -> bool:
        return self._session is None

    @property
    def accepts_token_types(self) -> bool:
        return self.token_type_name is not None

    @property
    def serialized(self) -> bool:
        return self._lock is not None

    @contextmanager
    def scoped_inputs(self, batch: TokenBatch) -> Iterator[Dict[str, np.ndarray]]:
        """Build the feed for one call.

        Tensors synthesized here (zero token types, position ids) exist only for
        the duration of the ``with`` block and are dropped on every exit path.
        """
        feed: Dict[str, np.ndarray] = {self.ids_name: batch.input_ids}
        if self.mask_name is not None:
            feed[self.mask_name] = batch.attention_mask
        if self.token_type_name is not None:
            if batch.token_type_ids is not None:
                feed[self.token_type_name] = batch.token_type_ids
            else:
                feed[self.token_type_name] = np.zeros_like(batch.input_ids, dtype=np.int64)
        if self.position_name is not None:
            batch_size, seq_length = batch.input_ids.shape
            feed[self.position_name] = np.broadcast_to(
                np.arange(seq_length, dtype=np.int64), (batch_size, seq_length)
            ).copy()
        try:
            yield feed
        finally:
            feed.clear()

    def run(self, batch: TokenBatch) -> List[np.ndarray]:
        """Run the session on a batch and return all outputs in declared order."""
        session = self._session
        if session is None:
            raise SessionClosedError("Model session has been released", stage="inference")

        with self.scoped_inputs(batch) as feed:
            try:
                with self._lock or nullcontext():
                    outputs = session.run(None, feed)
            except Exception as e:
                raise InferenceError(f"Model inference failed: {e}", stage="inference") from e

        if not outputs:
            raise InferenceError("Model produced no outputs", stage="inference")
        log_onnx_outputs(outputs, self.output_names)
        return outputs

    def close(self) -> None:
        """Release the session reference. Safe to call more than once."""
        if self._session is not None:
            logger.debug("Releasing ONNX session")
        self._session = None


def log_onnx_outputs(outputs: List[np.ndarray], output_names: List[str]) -> None:
    """Log ONNX output tensor information for debugging."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    for idx, output in enumerate(outputs):
        name = output_names[idx] if idx < len(output_names) else f"output_{idx}"
        logger.debug(
            "ONNX output %d (%s): shape=%s, dtype=%s",
            idx,
            name,
            getattr(output, "shape", None),
            getattr(output, "dtype", None),
        )


def get_native_dimension_from_session(session: Any) -> Optional[int]:
    """Read the hidden size from the last axis of the first declared output, if numeric."""
    try:
        outputs = session.get_outputs()
    except Exception as e:
        logger.warning("Could not inspect ONNX session outputs: %s", e)
        return None
    if outputs:
        output_shape = outputs[0].shape
        if output_shape:
            last_dim = output_shape[-1]
            # Symbolic dimensions come back as strings
            if isinstance(last_dim, (int, np.integer)):
                return int(last_dim)
    return None
