"""
Tests for backend settings: validity rules, failover candidates, persisted
blob parsing (including legacy provider tags) and the bootstrap profile.
"""

import pytest

from neuralcore.errors import ConfigurationError
from neuralcore.profile import (
    BackendConfig,
    BackendKind,
    OrchestratorSettings,
    load_profile,
    parse_kind,
)


class TestBackendConfig:

    def test_native_needs_only_credential(self):
        assert BackendConfig(credential="k").is_viable(BackendKind.GEMINI)
        assert BackendConfig(endpoint="x").missing_fields(BackendKind.GEMINI) == ["credential"]

    def test_chat_needs_endpoint_and_credential(self):
        assert BackendConfig(credential="k").missing_fields(BackendKind.OPENAI) == ["endpoint"]
        assert BackendConfig(endpoint="e", credential="k").is_viable(BackendKind.OPENAI)

    def test_local_needs_no_credential(self):
        assert BackendConfig(endpoint="http://localhost:11434").is_viable(BackendKind.OLLAMA)

    def test_whitespace_counts_as_missing(self):
        assert BackendConfig(endpoint="  ", credential="k").missing_fields(BackendKind.CLOUDFLARE) == ["endpoint"]

    def test_model_falls_back_to_kind_default(self):
        assert BackendConfig().model_for(BackendKind.OLLAMA) == "llama3.1"
        assert BackendConfig(model="qwen2").model_for(BackendKind.OLLAMA) == "qwen2"


class TestSettings:

    def test_every_kind_has_a_config(self):
        settings = OrchestratorSettings(per_backend={})
        assert set(settings.per_backend) == set(BackendKind)
        assert settings.active_config is settings.per_backend[BackendKind.GEMINI]

    def test_failover_candidates_in_declaration_order(self, settings_factory):
        settings = settings_factory(valid=[BackendKind.CLOUDFLARE, BackendKind.OPENAI, BackendKind.OLLAMA])
        assert settings.failover_candidates(exclude=BackendKind.OPENAI) == [
            BackendKind.OLLAMA, BackendKind.CLOUDFLARE,
        ]

    def test_invalid_backends_never_candidates(self, settings_factory):
        settings = settings_factory(openai=BackendConfig(credential="sk-only"))
        assert settings.failover_candidates(exclude=BackendKind.GEMINI) == []

    def test_config_for_missing_entry(self):
        settings = OrchestratorSettings()
        del settings.per_backend[BackendKind.CLOUDFLARE]
        with pytest.raises(ConfigurationError):
            settings.config_for(BackendKind.CLOUDFLARE)


class TestBlobParsing:

    def test_round_trip(self, settings_factory):
        settings = settings_factory(active=BackendKind.OLLAMA, failover=False, valid=[BackendKind.OLLAMA])
        settings.per_backend[BackendKind.OLLAMA].available_models = ["llama3.1", "qwen2"]
        restored = OrchestratorSettings.from_dict(settings.to_dict())
        assert restored == settings

    def test_persisted_shape(self):
        blob = OrchestratorSettings().to_dict()
        assert set(blob) == {"activeBackend", "perBackend", "failoverEnabled"}
        assert set(blob["perBackend"]["openai"]) == {"endpoint", "credential", "model", "availableModels"}

    def test_legacy_provider_blob(self):
        raw = {
            "activeProvider": "mistral",
            "providers": {
                "gemini": {"baseUrl": "", "apiKey": "g", "selectedModel": "gemini-2.5-pro",
                           "availableModels": []},
                "openai": {"baseUrl": "https://api.openai.com/v1", "apiKey": "sk-openai",
                           "selectedModel": "", "availableModels": []},
                "mistral": {"baseUrl": "https://api.mistral.ai/v1", "apiKey": "mk",
                            "selectedModel": "mistral-small", "availableModels": ["mistral-small"]},
            },
        }
        settings = OrchestratorSettings.from_dict(raw)
        assert settings.active_backend is BackendKind.OPENAI
        assert settings.per_backend[BackendKind.OPENAI].endpoint == "https://api.mistral.ai/v1"
        assert settings.per_backend[BackendKind.GEMINI].model == "gemini-2.5-pro"
        assert settings.failover_enabled is True

    def test_exact_tag_beats_inactive_alias(self):
        raw = {
            "activeBackend": "gemini",
            "perBackend": {
                "deepseek": {"endpoint": "https://api.deepseek.com", "credential": "d"},
                "openai": {"endpoint": "https://api.openai.com/v1", "credential": "o"},
            },
        }
        settings = OrchestratorSettings.from_dict(raw)
        assert settings.per_backend[BackendKind.OPENAI].credential == "o"

    def test_unknown_tags_dropped(self):
        raw = {"activeBackend": "skynet", "perBackend": {"skynet": {"endpoint": "x"}}}
        settings = OrchestratorSettings.from_dict(raw)
        assert settings.active_backend is BackendKind.GEMINI
        assert set(settings.per_backend) == set(BackendKind)

    def test_parse_kind(self):
        assert parse_kind(" Ollama ") is BackendKind.OLLAMA
        assert parse_kind("openrouter") is BackendKind.OPENAI
        assert parse_kind(None) is None


class TestBootstrapProfile:

    def test_missing_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NEURALCORE_GEMINI_API_KEY", raising=False)
        settings = load_profile(tmp_path / "absent.yaml")
        assert settings.active_backend is BackendKind.GEMINI
        assert settings.per_backend[BackendKind.OLLAMA].endpoint == "http://localhost:11434"
        assert settings.failover_enabled is True

    def test_yaml_profile(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text(
            "active_backend: ollama\n"
            "failover_enabled: false\n"
            "backends:\n"
            "  ollama:\n"
            "    endpoint: http://gpu-box:11434\n"
            "    model: qwen2\n"
            "    unknown_key: ignored\n"
            "  martian: {endpoint: x}\n"
        )
        settings = load_profile(path)
        assert settings.active_backend is BackendKind.OLLAMA
        assert settings.failover_enabled is False
        assert settings.per_backend[BackendKind.OLLAMA] == BackendConfig(
            endpoint="http://gpu-box:11434", model="qwen2")

    def test_env_credentials(self, tmp_path, monkeypatch):
        monkeypatch.setenv("NEURALCORE_CLOUDFLARE_API_KEY", "cf-env")
        settings = load_profile(tmp_path / "absent.yaml")
        assert settings.per_backend[BackendKind.CLOUDFLARE].credential == "cf-env"

    def test_malformed_yaml_falls_back(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text("backends: [unclosed")
        assert load_profile(path).active_backend is BackendKind.GEMINI

    def test_blank_yaml_fields_read_as_empty(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NEURALCORE_CLOUDFLARE_API_KEY", raising=False)
        path = tmp_path / "profile.yaml"
        path.write_text(
            "backends:\n"
            "  cloudflare:\n"
            "    endpoint:\n"
            "    credential:\n"
            "  ollama:\n"
            "    endpoint: http://localhost:11434\n"
            "    model: 7\n"
        )
        settings = load_profile(path)
        cloudflare = settings.per_backend[BackendKind.CLOUDFLARE]
        assert cloudflare.endpoint == ""
        assert cloudflare.credential == ""
        assert cloudflare.missing_fields(BackendKind.CLOUDFLARE) == ["endpoint", "credential"]
        assert settings.per_backend[BackendKind.OLLAMA].model == "7"
        assert BackendKind.CLOUDFLARE not in settings.failover_candidates(exclude=BackendKind.GEMINI)

    def test_string_failover_flag_ignored(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text('failover_enabled: "false"\n')
        assert load_profile(path).failover_enabled is True


class TestFailoverFlag:

    def test_string_flag_in_blob_keeps_default(self):
        defaults = OrchestratorSettings(failover_enabled=False)
        settings = OrchestratorSettings.from_dict({"failoverEnabled": "true"}, defaults=defaults)
        assert settings.failover_enabled is False

    def test_boolean_flag_in_blob_wins(self):
        settings = OrchestratorSettings.from_dict({"failoverEnabled": False})
        assert settings.failover_enabled is False
