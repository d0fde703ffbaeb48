"""
Abstract base class for all transport executors.

Every executor (native structured, chat-completions, local generate, edge
inference) implements this interface so the orchestrator can treat them
interchangeably: prompt + schema in, raw response text out.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from neuralcore.config import DEFAULT_TIMEOUT, DISCOVERY_TIMEOUT, ERROR_BODY_CHARS
from neuralcore.errors import ConfigurationError, GenerationError, TransportError
from neuralcore.profile import BackendConfig, BackendKind
from neuralcore.schema import GenerationRequest, json_instruction

logger = logging.getLogger(__name__)


class TransportExecutor(ABC):
    """Abstract transport executor.

    Concrete executors implement the wire details for one BackendKind. They
    perform network I/O only and never mutate settings.
    """

    kind: BackendKind

    def __init__(self, default_timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.default_timeout = default_timeout
        self._transport = transport

    # ── Config validation ──

    def check_config(self, config: BackendConfig) -> None:
        """Raise ConfigurationError if a field this kind requires is empty."""
        missing = config.missing_fields(self.kind)
        if missing:
            raise ConfigurationError(self.kind, missing)

    # ── Generation ──

    async def execute(self, config: BackendConfig, request: GenerationRequest) -> str:
        """Run one generation call and return the raw response text.

        Raises ConfigurationError before any network call when config is
        incomplete, and TransportError on any wire failure.
        """
        self.check_config(config)
        model = config.model_for(self.kind)
        logger.debug("Executing on %s (model=%s, prompt=%d chars)",
                     self.kind.value, model, len(request.prompt))
        return await self._execute(config, model, request)

    @abstractmethod
    async def _execute(self, config: BackendConfig, model: str,
                       request: GenerationRequest) -> str:
        ...

    # ── Model Discovery ──

    @abstractmethod
    async def discover_models(self, config: BackendConfig) -> list[str]:
        """Query the backend for model identifiers it can serve."""
        ...

    # ── Diagnostics ──

    async def diagnose(self, config: BackendConfig) -> dict:
        """Check config and reachability. Reports problems instead of raising."""
        try:
            self.check_config(config)
            models = await self.discover_models(config)
        except GenerationError as e:
            return {"kind": self.kind.value, "ok": False, "detail": e.message}
        return {
            "kind": self.kind.value,
            "ok": True,
            "detail": f"{len(models)} model(s) available",
        }

    # ── HTTP helpers ──

    def _client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout or self.default_timeout,
            transport=self._transport,
        )

    @staticmethod
    def _prompt_with_instruction(request: GenerationRequest) -> str:
        return request.prompt + json_instruction(request.schema)

    async def _request_json(self, method: str, url: str, *, json_body: Optional[dict] = None,
                            headers: Optional[dict] = None,
                            timeout: Optional[float] = None):
        """Send a request and return the decoded JSON envelope.

        Non-2xx responses and connection failures become TransportError.
        """
        try:
            async with self._client(timeout) as client:
                resp = await client.request(method, url, json=json_body, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(self.kind, f"{type(e).__name__}: {e}") from e

        if resp.status_code >= 400:
            raise TransportError(self.kind, resp.text[:ERROR_BODY_CHARS], status=resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(
                self.kind, f"response envelope is not JSON: {resp.text[:ERROR_BODY_CHARS]!r}",
                status=resp.status_code,
            ) from e

    async def _get_json(self, url: str, headers: Optional[dict] = None):
        return await self._request_json("GET", url, headers=headers, timeout=DISCOVERY_TIMEOUT)

    async def _post_json(self, url: str, payload: dict, headers: Optional[dict] = None):
        return await self._request_json("POST", url, json_body=payload, headers=headers)

    def _shape_error(self, detail: str) -> TransportError:
        return TransportError(self.kind, f"unexpected response shape: {detail}")
