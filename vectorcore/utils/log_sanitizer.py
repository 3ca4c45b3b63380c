# =============================================================================
# File: log_sanitizer.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import re
from typing import Any, Sequence

_CONTROL_CHARS = re.compile(r"[\r\n\t\x00-\x1f\x7f-\x9f]")


def sanitize_for_log(value: Any, max_length: int = 200) -> str:
    """
    Sanitize input for safe logging by removing/encoding dangerous characters.

    Args:
        value: Input value to sanitize
        max_length: Longest string emitted before truncation

    Returns:
        str: Sanitized string safe for logging
    """
    if value is None:
        return "None"

    sanitized = _CONTROL_CHARS.sub("_", str(value))

    # Limit length to prevent log flooding
    if len(sanitized) > max_length:
        sanitized = sanitized[: max(max_length - 3, 0)] + "..."

    return sanitized


def preview_ids(ids: Sequence[int], limit: int = 20) -> str:
    """Render the first ``limit`` ids of a token sequence for debug logs."""
    head = [int(i) for i in list(ids)[:limit]]
    suffix = ", ..." if len(ids) > limit else ""
    return "[" + ", ".join(str(i) for i in head) + suffix + "]"
