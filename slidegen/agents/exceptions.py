"""
Exception hierarchy for the slide generation pipeline.

Three layers mirror the pipeline boundaries:
- ModelError: raised by the model gateway, always handled by the calling stage
- AgentError: raised by a stage when its own output cannot be produced
- GenerationError: the only error the orchestrator's public entry points raise
"""

import random
from enum import Enum
from typing import Optional, Dict, Any


class SlideGenError(Exception):
    """Base exception for all pipeline errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [self.message]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


# === Gateway exceptions ===

class ModelErrorReason(str, Enum):
    TIMEOUT = "timeout"
    MALFORMED_OUTPUT = "malformed-output"
    RATE_LIMITED = "rate-limited"
    UNKNOWN = "unknown"


class ModelError(SlideGenError):
    """Model call failed at the gateway boundary"""

    def __init__(self, reason: ModelErrorReason, message: str = None, **kwargs):
        reason = ModelErrorReason(reason)
        super().__init__(message or f"Model call failed: {reason.value}", **kwargs)
        self.reason = reason
        self.context.setdefault("reason", reason.value)


class GenerationCancelledError(SlideGenError):
    """The caller cancelled an in-flight generation"""
    pass


# === Stage exceptions ===

class AgentError(SlideGenError):
    """A pipeline stage could not produce its output"""

    def __init__(
        self,
        stage: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message, cause=cause, context={"stage": stage, **(details or {})})
        self.stage = stage
        self.details = details or {}


class LayoutEngineError(AgentError):
    """Layout decision is unusable"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("design", message, details)


# === Orchestration exceptions ===

class GenerationError(SlideGenError):
    """Presentation generation aborted"""

    def __init__(
        self,
        topic: str,
        original_error: Exception,
        elapsed_time: float,
        message: str = "Presentation generation failed"
    ):
        super().__init__(
            message,
            cause=original_error,
            context={"topic": topic, "elapsed_time": round(elapsed_time, 3)}
        )
        self.topic = topic
        self.original_error = original_error
        self.elapsed_time = elapsed_time

    @property
    def stage(self) -> Optional[str]:
        return getattr(self.original_error, "stage", None)

    @property
    def cancelled(self) -> bool:
        return isinstance(self.original_error, GenerationCancelledError)


# === Configuration exceptions ===

class ConfigurationError(SlideGenError):
    """Configuration error"""
    pass


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value"""
    pass


class MissingConfigError(ConfigurationError):
    """Required configuration missing"""
    pass


# === Recovery helpers ===

RETRYABLE_REASONS = (
    ModelErrorReason.TIMEOUT,
    ModelErrorReason.RATE_LIMITED,
    ModelErrorReason.MALFORMED_OUTPUT,
)


def is_retryable(error: Exception) -> bool:
    """Check if error is retryable. Cancellation never is."""
    if isinstance(error, GenerationCancelledError):
        return False
    return isinstance(error, ModelError) and error.reason in RETRYABLE_REASONS


def get_retry_delay(
    error: Exception,
    attempt: int,
    base_delay: float = 1.0,
    multiplier: float = 2.0,
    jitter: bool = False
) -> float:
    """Exponential backoff delay for the given zero-based attempt"""
    delay = base_delay * (multiplier ** attempt)
    if isinstance(error, ModelError) and error.reason == ModelErrorReason.RATE_LIMITED:
        # Rate limits clear slower than transient timeouts
        delay *= 2
    if jitter:
        delay += random.uniform(0, delay * 0.1)
    return delay
