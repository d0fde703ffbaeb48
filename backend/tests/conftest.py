"""
Test fixtures for the NeuralCore test suite.
"""

import sys
from pathlib import Path

import pytest

# Add backend to path
BACKEND_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from neuralcore.inference.base import TransportExecutor  # noqa: E402
from neuralcore.profile import BackendConfig, BackendKind, OrchestratorSettings  # noqa: E402

CF_RUN = "https://api.cloudflare.com/client/v4/accounts/acct123/ai/run"


class ScriptedExecutor(TransportExecutor):
    """Executor that replays scripted outcomes instead of touching the network.

    Each call consumes the next outcome; the last one repeats. An outcome that
    is an exception instance is raised, anything else is returned as raw text.
    """

    def __init__(self, kind: BackendKind, *outcomes, on_call=None):
        super().__init__()
        self.kind = kind
        self.outcomes = list(outcomes) or ["[]"]
        self.calls = 0
        self.on_call = on_call

    async def _execute(self, config, model, request):
        self.calls += 1
        if self.on_call:
            self.on_call()
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def discover_models(self, config):
        self.check_config(config)
        return ["stub-a", "stub-b"]


def valid_config(kind: BackendKind) -> BackendConfig:
    return {
        BackendKind.GEMINI: BackendConfig(credential="gemini-test-key"),
        BackendKind.OPENAI: BackendConfig(endpoint="https://api.example.com/v1", credential="sk-test"),
        BackendKind.OLLAMA: BackendConfig(endpoint="http://localhost:11434"),
        BackendKind.CLOUDFLARE: BackendConfig(endpoint=CF_RUN, credential="cf-token"),
    }[kind]


def make_settings(active: BackendKind = BackendKind.GEMINI, failover: bool = True,
                  valid=(), **overrides) -> OrchestratorSettings:
    """Settings where only the kinds in ``valid`` (plus ``overrides``) are configured."""
    per_backend = {kind: BackendConfig() for kind in BackendKind}
    for kind in valid:
        per_backend[kind] = valid_config(kind)
    for tag, cfg in overrides.items():
        per_backend[BackendKind(tag)] = cfg
    return OrchestratorSettings(active_backend=active, per_backend=per_backend,
                                failover_enabled=failover)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def scripted():
    return ScriptedExecutor
