"""
Profile — backend registry dataclasses and the bootstrap profile.yaml.

OrchestratorSettings is the single mutable record of which backend is active and
how each backend is configured. It is loaded once per process (store.load_settings),
mutated in place by user edits or a successful failover, and saved explicitly
after every mutation. There is no module-level settings singleton.

profile.yaml only seeds the defaults used when no settings blob has been stored:

    active_backend: gemini
    failover_enabled: true
    backends:
      gemini:
        model: gemini-2.5-flash
      ollama:
        endpoint: http://localhost:11434
        model: llama3.1

Credentials may be supplied via NEURALCORE_<KIND>_API_KEY instead of the file.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml

from neuralcore.config import DEFAULT_MODELS, GEMINI_MODELS, PROFILE_PATH
from neuralcore.errors import ConfigurationError

logger = logging.getLogger(__name__)


# ── Backend kinds ──

class BackendKind(str, Enum):
    """Closed set of wire protocols. Declaration order is failover order."""

    GEMINI = "gemini"          # native structured output
    OPENAI = "openai"          # chat-completions + JSON object mode
    OLLAMA = "ollama"          # local /api/generate with format=json
    CLOUDFLARE = "cloudflare"  # model-scoped edge inference endpoint


REQUIRED_FIELDS: dict[BackendKind, tuple[str, ...]] = {
    BackendKind.GEMINI: ("credential",),
    BackendKind.OPENAI: ("endpoint", "credential"),
    BackendKind.OLLAMA: ("endpoint",),
    BackendKind.CLOUDFLARE: ("endpoint", "credential"),
}

# Provider tags written by older releases, all of which speak chat-completions
LEGACY_KINDS = {
    "mistral": BackendKind.OPENAI,
    "deepseek": BackendKind.OPENAI,
    "openrouter": BackendKind.OPENAI,
}


def _flag(value, default: bool) -> bool:
    """Only a real boolean overrides ``default``; strings like "false" do not."""
    if isinstance(value, bool):
        return value
    if value is not None:
        logger.warning("Ignoring non-boolean failover flag %r", value)
    return default


def parse_kind(tag) -> Optional[BackendKind]:
    """Map a persisted tag (current or legacy) to a BackendKind, or None."""
    if isinstance(tag, BackendKind):
        return tag
    if not isinstance(tag, str):
        return None
    tag = tag.strip().lower()
    try:
        return BackendKind(tag)
    except ValueError:
        return LEGACY_KINDS.get(tag)


# ── Dataclasses ──

@dataclass
class BackendConfig:
    endpoint: str = ""
    credential: str = ""
    model: str = ""
    available_models: list[str] = field(default_factory=list)

    def missing_fields(self, kind: BackendKind) -> list[str]:
        return [name for name in REQUIRED_FIELDS[kind] if not getattr(self, name).strip()]

    def is_viable(self, kind: BackendKind) -> bool:
        return not self.missing_fields(kind)

    def model_for(self, kind: BackendKind) -> str:
        return self.model.strip() or DEFAULT_MODELS[kind.value]

    def to_dict(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "credential": self.credential,
            "model": self.model,
            "availableModels": list(self.available_models),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "BackendConfig":
        """Parse the persisted shape; also accepts the older baseUrl/apiKey/selectedModel keys."""
        models = raw.get("availableModels", raw.get("available_models", []))
        return cls(
            endpoint=str(raw.get("endpoint", raw.get("baseUrl", "")) or ""),
            credential=str(raw.get("credential", raw.get("apiKey", "")) or ""),
            model=str(raw.get("model", raw.get("selectedModel", "")) or ""),
            available_models=[str(m) for m in models] if isinstance(models, list) else [],
        )


def default_backends() -> dict[BackendKind, BackendConfig]:
    return {
        BackendKind.GEMINI: BackendConfig(
            model=DEFAULT_MODELS["gemini"], available_models=list(GEMINI_MODELS)),
        BackendKind.OPENAI: BackendConfig(endpoint="https://api.openai.com/v1"),
        BackendKind.OLLAMA: BackendConfig(endpoint="http://localhost:11434"),
        BackendKind.CLOUDFLARE: BackendConfig(),
    }


@dataclass
class OrchestratorSettings:
    active_backend: BackendKind = BackendKind.GEMINI
    per_backend: dict[BackendKind, BackendConfig] = field(default_factory=default_backends)
    failover_enabled: bool = True

    def __post_init__(self):
        # Every kind always has a config entry, so active_backend is always a valid key
        for kind, cfg in default_backends().items():
            self.per_backend.setdefault(kind, cfg)

    def config_for(self, kind: BackendKind) -> BackendConfig:
        cfg = self.per_backend.get(kind)
        if cfg is None:
            raise ConfigurationError(kind, list(REQUIRED_FIELDS[kind]))
        return cfg

    @property
    def active_config(self) -> BackendConfig:
        return self.config_for(self.active_backend)

    def failover_candidates(self, exclude: BackendKind) -> list[BackendKind]:
        """Viable backends other than ``exclude``, in failover order."""
        return [
            kind for kind in BackendKind
            if kind is not exclude
            and kind in self.per_backend
            and self.per_backend[kind].is_viable(kind)
        ]

    def to_dict(self) -> dict:
        return {
            "activeBackend": self.active_backend.value,
            "perBackend": {k.value: cfg.to_dict() for k, cfg in self.per_backend.items()},
            "failoverEnabled": self.failover_enabled,
        }

    @classmethod
    def from_dict(cls, raw: dict, defaults: Optional["OrchestratorSettings"] = None) -> "OrchestratorSettings":
        """Parse the persisted blob. Unknown tags are dropped; missing kinds take defaults."""
        base = defaults or OrchestratorSettings()
        active_tag = raw.get("activeBackend", raw.get("activeProvider"))
        per_raw = raw.get("perBackend", raw.get("providers", {}))

        per_backend: dict[BackendKind, BackendConfig] = {
            k: dataclasses.replace(cfg, available_models=list(cfg.available_models))
            for k, cfg in base.per_backend.items()
        }
        # Exact tags win over legacy aliases; the active legacy tag wins over both
        claimed: dict[BackendKind, int] = {}
        if isinstance(per_raw, dict):
            for tag, cfg_raw in per_raw.items():
                kind = parse_kind(tag)
                if kind is None or not isinstance(cfg_raw, dict):
                    logger.warning("Ignoring unknown backend '%s' in settings", tag)
                    continue
                if tag == active_tag:
                    rank = 2
                elif tag == kind.value:
                    rank = 1
                else:
                    rank = 0
                if rank >= claimed.get(kind, -1):
                    per_backend[kind] = BackendConfig.from_dict(cfg_raw)
                    claimed[kind] = rank

        active = parse_kind(active_tag)
        if active is None:
            if active_tag is not None:
                logger.warning("Unknown active backend '%s' — using %s",
                               active_tag, base.active_backend.value)
            active = base.active_backend

        return cls(active_backend=active, per_backend=per_backend,
                   failover_enabled=_flag(raw.get("failoverEnabled"), base.failover_enabled))


# ── Bootstrap profile ──

def _settings_from_profile_dict(raw: dict) -> OrchestratorSettings:
    settings = OrchestratorSettings()

    backends_raw = raw.get("backends", {})
    if isinstance(backends_raw, dict):
        for tag, cfg_raw in backends_raw.items():
            kind = parse_kind(tag)
            if kind is None or not isinstance(cfg_raw, dict):
                logger.warning("Ignoring unknown backend '%s' in profile", tag)
                continue
            cfg = BackendConfig.from_dict(cfg_raw)
            if not cfg.available_models and kind is BackendKind.GEMINI:
                cfg.available_models = list(GEMINI_MODELS)
            settings.per_backend[kind] = cfg

    active = parse_kind(raw.get("active_backend", settings.active_backend))
    if active is not None:
        settings.active_backend = active
    settings.failover_enabled = _flag(raw.get("failover_enabled"), settings.failover_enabled)
    return settings


def _apply_env_credentials(settings: OrchestratorSettings):
    for kind, cfg in settings.per_backend.items():
        env_key = os.environ.get(f"NEURALCORE_{kind.value.upper()}_API_KEY")
        if env_key and not cfg.credential:
            cfg.credential = env_key


def load_profile(path: Optional[Path] = None) -> OrchestratorSettings:
    """Load default settings from profile.yaml. Falls back to built-in defaults."""
    profile_path = Path(path) if path else PROFILE_PATH
    settings = OrchestratorSettings()

    if not profile_path.exists():
        logger.info("No profile.yaml found at %s — using defaults", profile_path)
    else:
        try:
            raw = yaml.safe_load(profile_path.read_text()) or {}
            if not isinstance(raw, dict):
                logger.warning("profile.yaml is not a valid YAML mapping — using defaults")
            else:
                settings = _settings_from_profile_dict(raw)
                logger.info("Profile loaded: active=%s, failover=%s",
                            settings.active_backend.value, settings.failover_enabled)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load profile.yaml: %s — using defaults", e)

    _apply_env_credentials(settings)
    return settings
