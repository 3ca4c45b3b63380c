"""Project-wide numeric constants and defaults.

Keep this module minimal and import-safe to avoid circular imports.
"""

# Epsilon used to avoid division by zero when summing attention masks
# (used in mean pooling denominator safeguards)
MASK_SUM_EPS: float = 1e-9

# Large negative value used when masking before max-pooling to ensure
# masked positions do not affect the max operation.
MASK_NEG_INF: float = -1e9

# Fallbacks when config.json / tokenizer.json are silent
DEFAULT_MAX_LENGTH: int = 512
DEFAULT_BATCH_SIZE: int = 32
DEFAULT_RERANK_LIMIT: int = 3
DEFAULT_CONTINUATION_PREFIX: str = "##"
DEFAULT_MAX_INPUT_CHARS_PER_WORD: int = 100

# Standard ONNX input names for encoder models
INPUT_IDS_NAME: str = "input_ids"
ATTENTION_MASK_NAME: str = "attention_mask"
TOKEN_TYPE_IDS_NAME: str = "token_type_ids"
POSITION_IDS_NAME: str = "position_ids"
