"""
Inference package — one transport executor per backend kind.

Quick start:
    from neuralcore.inference import ExecutorRouter
    router = ExecutorRouter()
    raw = await router.get(settings.active_backend).execute(settings.active_config, request)
"""

from neuralcore.inference.base import TransportExecutor
from neuralcore.inference.cloudflare import CloudflareExecutor
from neuralcore.inference.gemini import GeminiExecutor
from neuralcore.inference.ollama import OllamaExecutor
from neuralcore.inference.openai_compat import OpenAICompatExecutor
from neuralcore.inference.router import ExecutorRouter

__all__ = [
    "TransportExecutor",
    "GeminiExecutor",
    "OpenAICompatExecutor",
    "OllamaExecutor",
    "CloudflareExecutor",
    "ExecutorRouter",
]
