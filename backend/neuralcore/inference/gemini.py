"""
Native structured-output executor (Gemini via the google-genai SDK).

The schema is passed to the SDK as ``response_schema`` together with
``response_mime_type=application/json``, so no textual instruction is needed.
An ``endpoint`` is optional and, when set, overrides the SDK base URL.
"""

import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from neuralcore.errors import TransportError
from neuralcore.inference.base import TransportExecutor
from neuralcore.profile import BackendConfig, BackendKind
from neuralcore.schema import GenerationRequest

logger = logging.getLogger(__name__)


class GeminiExecutor(TransportExecutor):
    """Executor for backends that accept a schema object directly."""

    kind = BackendKind.GEMINI

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # One SDK client per (credential, endpoint), reused across calls
        self._clients: dict[tuple[str, str], genai.Client] = {}

    def _make_client(self, config: BackendConfig) -> genai.Client:
        key = (config.credential.strip(), config.endpoint.strip())
        client = self._clients.get(key)
        if client is None:
            client = self._clients[key] = self._new_client(config)
        return client

    def _new_client(self, config: BackendConfig) -> genai.Client:
        http_options = types.HttpOptions(timeout=int(self.default_timeout * 1000))
        if config.endpoint.strip():
            http_options.base_url = config.endpoint.strip()
        return genai.Client(api_key=config.credential.strip(), http_options=http_options)

    def _wrap(self, e: Exception) -> TransportError:
        if isinstance(e, genai_errors.APIError):
            return TransportError(self.kind, e.message or str(e), status=e.code)
        return TransportError(self.kind, f"{type(e).__name__}: {e}")

    async def _execute(self, config: BackendConfig, model: str,
                       request: GenerationRequest) -> str:
        client = self._make_client(config)
        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=request.prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=request.schema.to_native_schema(),
                    temperature=request.temperature,
                ),
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise self._wrap(e) from e

        text = response.text
        if not text:
            raise self._shape_error("no text in candidates")
        return text

    async def discover_models(self, config: BackendConfig) -> list[str]:
        self.check_config(config)
        client = self._make_client(config)
        models = []
        try:
            async for m in await client.aio.models.list():
                actions = getattr(m, "supported_actions", None) or []
                if actions and "generateContent" not in actions:
                    continue
                name = (m.name or "").removeprefix("models/")
                if name:
                    models.append(name)
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise self._wrap(e) from e
        return models
