"""Backend settings, model discovery and diagnostic endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Request

from neuralcore.models import SettingsModel
from neuralcore.profile import BackendConfig, BackendKind, OrchestratorSettings, parse_kind
from neuralcore.store import save_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Settings"])

_MASK = "****"


def mask_credential(credential: str) -> str:
    """Show only the last four characters of a credential."""
    if not credential:
        return ""
    return _MASK + (credential[-4:] if len(credential) > 8 else "")


def _public_settings(settings: OrchestratorSettings) -> dict:
    data = settings.to_dict()
    for cfg in data["perBackend"].values():
        cfg["credential"] = mask_credential(cfg["credential"])
    return data


def _resolve_kind(tag: str) -> BackendKind:
    kind = parse_kind(tag)
    if kind is None:
        raise HTTPException(status_code=404, detail=f"Unknown backend: {tag}")
    return kind


@router.get("/settings")
async def get_settings(request: Request):
    return _public_settings(request.app.state.settings)


@router.put("/settings")
async def update_settings(body: SettingsModel, request: Request):
    """Apply a user edit in place and save it. Masked credentials are left unchanged.

    Runs on the event loop so it never interleaves with a failover switch.
    """
    settings: OrchestratorSettings = request.app.state.settings

    active = parse_kind(body.activeBackend)
    if active is None:
        raise HTTPException(status_code=400, detail=f"Unknown backend: {body.activeBackend}")

    updated: dict[BackendKind, BackendConfig] = {}
    for tag, cfg in body.perBackend.items():
        kind = _resolve_kind(tag)
        current = settings.per_backend.get(kind, BackendConfig())
        credential = cfg.credential
        if credential.startswith(_MASK):
            credential = current.credential
        updated[kind] = BackendConfig(
            endpoint=cfg.endpoint,
            credential=credential,
            model=cfg.model,
            available_models=list(cfg.availableModels),
        )

    settings.per_backend.update(updated)
    settings.active_backend = active
    settings.failover_enabled = body.failoverEnabled
    save_settings(request.app.state.store, settings)
    logger.info("Settings updated: active=%s, failover=%s",
                settings.active_backend.value, settings.failover_enabled)
    return _public_settings(settings)


@router.get("/backends/{tag}/models")
async def discover_models(tag: str, request: Request):
    """Query a backend for its models and remember them in settings."""
    kind = _resolve_kind(tag)
    settings: OrchestratorSettings = request.app.state.settings
    executor = request.app.state.orchestrator.router.get(kind)
    cfg = settings.config_for(kind)

    models = await executor.discover_models(cfg)
    if models:
        cfg.available_models = models
        if cfg.model not in models:
            cfg.model = models[0]
        save_settings(request.app.state.store, settings)
    return {"kind": kind.value, "models": models, "model": cfg.model}


@router.post("/backends/{tag}/test")
async def test_backend(tag: str, request: Request):
    kind = _resolve_kind(tag)
    settings: OrchestratorSettings = request.app.state.settings
    executor = request.app.state.orchestrator.router.get(kind)
    return await executor.diagnose(settings.config_for(kind))
