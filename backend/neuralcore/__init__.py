"""
NeuralCore — schema-conforming generation across interchangeable AI backends.

Quick start:
    from neuralcore import FailoverOrchestrator, GenerationRequest, JsonFileStore, load_settings
    from neuralcore.schema import array_of, string

    store = JsonFileStore()
    settings = load_settings(store)
    orchestrator = FailoverOrchestrator(store)
    words = await orchestrator.generate(
        settings, GenerationRequest("List three planets.", array_of(string())))
"""

from neuralcore.errors import (
    ConfigurationError,
    ExhaustionError,
    GenerationError,
    ParseError,
    TransportError,
)
from neuralcore.extraction import extract
from neuralcore.orchestrator import FailoverOrchestrator
from neuralcore.profile import BackendConfig, BackendKind, OrchestratorSettings, load_profile
from neuralcore.retry import with_retry
from neuralcore.schema import GenerationRequest, SchemaDescriptor
from neuralcore.store import JsonFileStore, MemoryStore, SettingsStore, load_settings, save_settings

__all__ = [
    "BackendConfig",
    "BackendKind",
    "ConfigurationError",
    "ExhaustionError",
    "FailoverOrchestrator",
    "GenerationError",
    "GenerationRequest",
    "JsonFileStore",
    "MemoryStore",
    "OrchestratorSettings",
    "ParseError",
    "SchemaDescriptor",
    "SettingsStore",
    "TransportError",
    "extract",
    "load_profile",
    "load_settings",
    "save_settings",
    "with_retry",
]
