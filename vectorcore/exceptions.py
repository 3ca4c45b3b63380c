# =============================================================================
# File: exceptions.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Custom exceptions for the vectorcore inference core."""
from typing import Optional


class VectorCoreException(Exception):
    """Base exception for all vectorcore errors.

    ``stage`` names the pipeline step that failed (``load``, ``tokenize``,
    ``assemble``, ``inference``, ``pooling``, ``score``) so callers can tell
    configuration problems apart from per-call inference problems.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        stage: Optional[str] = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.stage = stage
        super().__init__(self.message)


class ConfigurationError(VectorCoreException):
    """Model directory files missing or malformed."""

    pass


class MissingConfigError(ConfigurationError):
    """Required configuration file or section missing."""

    pass


class InvalidConfigError(ConfigurationError):
    """Configuration present but invalid."""

    pass


class ModelException(VectorCoreException):
    """Exceptions related to tokenization and inference."""

    pass


class TokenizationError(ModelException):
    """Input text cannot be tokenized (malformed encoding)."""

    pass


class InferenceError(ModelException):
    """Model inference failed."""

    pass


class ResourceError(VectorCoreException):
    """Failure to allocate or release a session or tensor."""

    pass


class SessionClosedError(ResourceError):
    """The model session was already released."""

    pass


class ValidationException(VectorCoreException):
    """Input validation errors."""

    pass


class InvalidInputError(ValidationException):
    """Invalid input parameters."""

    pass
