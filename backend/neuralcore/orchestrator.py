"""
FailoverOrchestrator — the sole entry point for structured generation.

Per call:
  Active   -> retry-wrapped attempt on settings.active_backend
           -> success: return, settings untouched
           -> failure + failover disabled: propagate unchanged
  Scanning -> each viable candidate in BackendKind order, sequentially
           -> first success becomes the new active backend and is saved
           -> all failed: ExhaustionError, settings untouched

Candidates are never raced: paid backends are rate-limited, and "first success
wins" must be deterministic. The only shared write is the active-backend switch,
which is a compare-and-set under a lock so concurrent callers sharing one
settings object cannot clobber each other.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from neuralcore.config import INITIAL_DELAY_MS, MAX_RETRIES
from neuralcore.errors import ExhaustionError, GenerationError
from neuralcore.extraction import extract
from neuralcore.inference.router import ExecutorRouter
from neuralcore.profile import BackendKind, OrchestratorSettings
from neuralcore.retry import with_retry
from neuralcore.schema import GenerationRequest
from neuralcore.store import SettingsStore, save_settings

logger = logging.getLogger(__name__)


class FailoverOrchestrator:
    """Runs generation requests against the active backend with sticky failover."""

    def __init__(
        self,
        store: SettingsStore,
        router: Optional[ExecutorRouter] = None,
        max_retries: int = MAX_RETRIES,
        initial_delay_ms: int = INITIAL_DELAY_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        strict: bool = False,
    ):
        self.store = store
        self.router = router or ExecutorRouter()
        self.max_retries = max_retries
        self.initial_delay_ms = initial_delay_ms
        self.strict = strict
        self._sleep = sleep
        self._switch_lock = asyncio.Lock()

    async def _attempt(self, kind: BackendKind, settings: OrchestratorSettings,
                       request: GenerationRequest) -> Any:
        """One backend attempt: execute + extract, wrapped in the retry policy."""
        executor = self.router.get(kind)
        config = settings.config_for(kind)

        async def once():
            raw = await executor.execute(config, request)
            return extract(raw, request.schema, strict=self.strict)

        return await with_retry(once, self.max_retries, self.initial_delay_ms, sleep=self._sleep)

    async def _switch_active(self, settings: OrchestratorSettings,
                             expected: BackendKind, new: BackendKind):
        async with self._switch_lock:
            if settings.active_backend is not expected:
                logger.info("Active backend already changed to %s by another call — keeping it",
                            settings.active_backend.value)
                return
            settings.active_backend = new
            try:
                save_settings(self.store, settings)
            except OSError as e:
                logger.error("Failed to persist failover to %s: %s", new.value, e)
                return
        logger.info("Failover: active backend is now %s (was %s)", new.value, expected.value)

    async def generate(self, settings: OrchestratorSettings, request: GenerationRequest) -> Any:
        """Return a parsed result for ``request``, failing over if needed."""
        active = settings.active_backend
        try:
            return await self._attempt(active, settings, request)
        except GenerationError as e:
            if not settings.failover_enabled:
                logger.error("Generation on %s failed (failover disabled): %s", active.value, e.message)
                raise
            failures: list[tuple[BackendKind, GenerationError]] = [(active, e)]
            logger.warning("Generation on %s failed, scanning for failover: %s", active.value, e.message)

        for candidate in settings.failover_candidates(exclude=active):
            try:
                result = await self._attempt(candidate, settings, request)
            except GenerationError as e:
                logger.warning("Failover candidate %s failed: %s", candidate.value, e.message)
                failures.append((candidate, e))
                continue
            await self._switch_active(settings, expected=active, new=candidate)
            return result

        error = ExhaustionError(failures)
        logger.error("%s", error.message)
        raise error
