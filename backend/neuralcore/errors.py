"""
Caller-facing error taxonomy for structured generation.

  - ConfigurationError: backend selected but missing required fields. Never retried.
  - TransportError:     network or backend-side failure. Retried, then fails over.
  - ParseError:         backend answered but the text is not JSON. Fails over.
  - ExhaustionError:    every viable backend failed. Terminal.

Every error carries a human-readable ``message`` suitable for showing to a user.
"""

from typing import Optional


class GenerationError(Exception):
    """Base class for all errors raised by the generation pipeline."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(GenerationError):
    def __init__(self, kind, missing: list[str]):
        self.kind = kind
        self.missing = list(missing)
        label = getattr(kind, "value", kind)
        super().__init__(
            f"Backend '{label}' is missing required configuration: {', '.join(self.missing)}"
        )


class TransportError(GenerationError):
    def __init__(self, kind, message: str, status: Optional[int] = None):
        self.kind = kind
        self.status = status
        label = getattr(kind, "value", kind)
        prefix = f"{label} request failed"
        if status is not None:
            prefix += f" (status={status})"
        super().__init__(f"{prefix}: {message}")


class ParseError(GenerationError):
    def __init__(self, message: str, raw_preview: str = ""):
        self.raw_preview = raw_preview
        if raw_preview:
            message = f"{message}: {raw_preview!r}"
        super().__init__(message)


class ExhaustionError(GenerationError):
    """Raised when the active backend and every failover candidate failed.

    ``failures`` is an ordered list of ``(kind, error)`` pairs, active backend first.
    """

    def __init__(self, failures: list[tuple]):
        self.failures = list(failures)
        details = "; ".join(
            f"{getattr(kind, 'value', kind)}: {err.message if isinstance(err, GenerationError) else err}"
            for kind, err in self.failures
        )
        message = "All providers exhausted"
        if details:
            message += f" ({details})"
        super().__init__(message)
