"""
Chat-completions executor for OpenAI-compatible servers.

Covers any server that implements the OpenAI API contract:
  - OpenAI, Mistral, DeepSeek, OpenRouter
  - vLLM / LM Studio style local servers exposing /v1

The endpoint is the API root including its version segment
(e.g. ``https://api.openai.com/v1``).
"""

import logging

from neuralcore.errors import TransportError
from neuralcore.inference.base import TransportExecutor
from neuralcore.profile import BackendConfig, BackendKind
from neuralcore.schema import GenerationRequest

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a precise assistant that only ever replies with valid JSON."


def _rejects_json_mode(err: TransportError) -> bool:
    """True for a 4xx that complains about response_format."""
    return err.status == 400 and "response_format" in err.message


class OpenAICompatExecutor(TransportExecutor):
    """Executor for /chat/completions servers with a JSON object response mode."""

    kind = BackendKind.OPENAI

    @staticmethod
    def _headers(config: BackendConfig) -> dict:
        return {"Authorization": f"Bearer {config.credential.strip()}"}

    @staticmethod
    def _base(config: BackendConfig) -> str:
        return config.endpoint.strip().rstrip("/")

    async def _execute(self, config: BackendConfig, model: str,
                       request: GenerationRequest) -> str:
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self._prompt_with_instruction(request)},
            ],
            "temperature": request.temperature,
            "response_format": {"type": "json_object"},
        }
        url = f"{self._base(config)}/chat/completions"
        try:
            data = await self._post_json(url, payload, headers=self._headers(config))
        except TransportError as e:
            if not _rejects_json_mode(e):
                raise
            # Server has no JSON mode; the prompt instruction alone has to do
            logger.info("%s rejected response_format, resending without it", url)
            payload.pop("response_format")
            data = await self._post_json(url, payload, headers=self._headers(config))

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise self._shape_error("missing choices[0].message.content") from None
        if not isinstance(content, str):
            raise self._shape_error("message content is not text")
        return content

    async def discover_models(self, config: BackendConfig) -> list[str]:
        """List models via GET /models (``data[].id``, or a bare list)."""
        self.check_config(config)
        data = await self._get_json(f"{self._base(config)}/models",
                                    headers=self._headers(config))
        entries = data.get("data") if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise self._shape_error("model list missing")
        models = []
        for m in entries:
            if isinstance(m, dict):
                mid = m.get("id") or m.get("name")
            else:
                mid = m
            if mid:
                models.append(str(mid))
        return models
