"""
Ollama executor.

Uses Ollama's native API endpoints:
  - /api/generate with ``format=json`` for generation
  - /api/tags for model listing

No authentication header is sent.
"""

import logging

from neuralcore.inference.base import TransportExecutor
from neuralcore.profile import BackendConfig, BackendKind
from neuralcore.schema import GenerationRequest

logger = logging.getLogger(__name__)


class OllamaExecutor(TransportExecutor):
    """Executor for a local Ollama inference server."""

    kind = BackendKind.OLLAMA

    @staticmethod
    def _base(config: BackendConfig) -> str:
        return config.endpoint.strip().rstrip("/")

    async def _execute(self, config: BackendConfig, model: str,
                       request: GenerationRequest) -> str:
        payload = {
            "model": model,
            "prompt": self._prompt_with_instruction(request),
            "format": "json",
            "stream": False,
            "options": {"temperature": request.temperature},
        }
        data = await self._post_json(f"{self._base(config)}/api/generate", payload)
        content = data.get("response") if isinstance(data, dict) else None
        if not isinstance(content, str):
            raise self._shape_error("missing 'response' text")
        return content

    async def discover_models(self, config: BackendConfig) -> list[str]:
        """List pulled models via /api/tags."""
        self.check_config(config)
        data = await self._get_json(f"{self._base(config)}/api/tags")
        if not isinstance(data, dict):
            raise self._shape_error("tag list missing")
        return [m["name"] for m in data.get("models", []) if isinstance(m, dict) and m.get("name")]
