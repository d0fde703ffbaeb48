"""
ExecutorRouter — maps each BackendKind to its transport executor.

Every kind must have exactly one executor class; a missing mapping is a
programming error caught at import time rather than at request time.

Usage:
    from neuralcore.inference import ExecutorRouter
    router = ExecutorRouter()
    raw = await router.get(BackendKind.OLLAMA).execute(config, request)
"""

import logging
from typing import Optional

import httpx

from neuralcore.config import DEFAULT_TIMEOUT
from neuralcore.inference.base import TransportExecutor
from neuralcore.inference.cloudflare import CloudflareExecutor
from neuralcore.inference.gemini import GeminiExecutor
from neuralcore.inference.ollama import OllamaExecutor
from neuralcore.inference.openai_compat import OpenAICompatExecutor
from neuralcore.profile import BackendKind

logger = logging.getLogger(__name__)

_EXECUTOR_CLASSES: dict[BackendKind, type[TransportExecutor]] = {
    BackendKind.GEMINI: GeminiExecutor,
    BackendKind.OPENAI: OpenAICompatExecutor,
    BackendKind.OLLAMA: OllamaExecutor,
    BackendKind.CLOUDFLARE: CloudflareExecutor,
}

_unmapped = set(BackendKind) - set(_EXECUTOR_CLASSES)
if _unmapped:
    raise RuntimeError(f"No executor registered for: {sorted(k.value for k in _unmapped)}")


class ExecutorRouter:
    """Holds one executor instance per BackendKind."""

    def __init__(self, default_timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 overrides: Optional[dict[BackendKind, TransportExecutor]] = None):
        self._executors: dict[BackendKind, TransportExecutor] = {
            kind: cls(default_timeout=default_timeout, transport=transport)
            for kind, cls in _EXECUTOR_CLASSES.items()
        }
        for kind, executor in (overrides or {}).items():
            logger.debug("Executor for %s overridden by %s", kind.value, type(executor).__name__)
            self._executors[kind] = executor

    def get(self, kind: BackendKind) -> TransportExecutor:
        return self._executors[kind]

    @property
    def executors(self) -> dict[BackendKind, TransportExecutor]:
        return dict(self._executors)
