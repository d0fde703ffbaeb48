"""
Edge inference executor (Cloudflare Workers AI style).

The endpoint is the account's run root, e.g.
``https://api.cloudflare.com/client/v4/accounts/<account>/ai/run``; the model
id is appended to it (``.../ai/run/@cf/meta/llama-3-8b-instruct``).
"""

import json
import logging

from neuralcore.config import CLOUDFLARE_CATALOG
from neuralcore.inference.base import TransportExecutor
from neuralcore.profile import BackendConfig, BackendKind
from neuralcore.schema import GenerationRequest

logger = logging.getLogger(__name__)


class CloudflareExecutor(TransportExecutor):
    """Executor for model-scoped inference endpoints."""

    kind = BackendKind.CLOUDFLARE

    @staticmethod
    def _headers(config: BackendConfig) -> dict:
        return {"Authorization": f"Bearer {config.credential.strip()}"}

    @staticmethod
    def _base(config: BackendConfig) -> str:
        return config.endpoint.strip().rstrip("/")

    async def _execute(self, config: BackendConfig, model: str,
                       request: GenerationRequest) -> str:
        payload = {
            "messages": [
                {"role": "user", "content": self._prompt_with_instruction(request)},
            ],
            "temperature": request.temperature,
        }
        data = await self._post_json(f"{self._base(config)}/{model.lstrip('/')}",
                                     payload, headers=self._headers(config))
        if not isinstance(data, dict):
            raise self._shape_error("envelope is not an object")
        if data.get("success") is False:
            errors = data.get("errors") or []
            raise self._shape_error(f"success=false {errors!r}"[:250])

        result = data.get("result")
        content = result.get("response") if isinstance(result, dict) else None
        if isinstance(content, (dict, list)):
            # Some models return the JSON payload already decoded
            return json.dumps(content)
        if not isinstance(content, str):
            raise self._shape_error("missing result.response")
        return content

    async def discover_models(self, config: BackendConfig) -> list[str]:
        """Search the account's model catalog; fall back to common model ids."""
        self.check_config(config)
        base = self._base(config)
        if not base.endswith("/ai/run"):
            logger.debug("Endpoint %s is not an /ai/run root — using built-in catalog", base)
            return list(CLOUDFLARE_CATALOG)

        url = base.removesuffix("/run") + "/models/search"
        data = await self._get_json(url, headers=self._headers(config))
        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, list):
            raise self._shape_error("model search result missing")
        return [m["name"] for m in result if isinstance(m, dict) and m.get("name")]
