"""
NeuralCore — structured content generation over interchangeable AI backends.
FastAPI app exposing settings, diagnostics and the learning use cases.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from neuralcore.errors import (
    ConfigurationError,
    ExhaustionError,
    GenerationError,
    ParseError,
    TransportError,
)
from neuralcore.inference.router import ExecutorRouter
from neuralcore.orchestrator import FailoverOrchestrator
from neuralcore.profile import OrchestratorSettings
from neuralcore.routes import register_routes
from neuralcore.store import JsonFileStore, SettingsStore, load_settings

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (ConfigurationError, 400),
    (ParseError, 502),
    (TransportError, 503),
    (ExhaustionError, 503),
)


async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    status = next((code for cls, code in _ERROR_STATUS if isinstance(exc, cls)), 500)
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, status, exc.message)
    return JSONResponse(status_code=status, content={"detail": exc.message})


def create_app(store: Optional[SettingsStore] = None,
               router: Optional[ExecutorRouter] = None,
               defaults: Optional[OrchestratorSettings] = None) -> FastAPI:
    """Build the app. Settings are loaded once, in the lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        app_store = store if store is not None else JsonFileStore()
        app.state.store = app_store
        app.state.settings = load_settings(app_store, defaults)
        app.state.orchestrator = FailoverOrchestrator(app_store, router=router)
        logger.info("Active backend: %s (failover %s)",
                    app.state.settings.active_backend.value,
                    "enabled" if app.state.settings.failover_enabled else "disabled")
        yield

    app = FastAPI(
        title="NeuralCore",
        description="Schema-conforming content generation with multi-backend failover",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(GenerationError, generation_error_handler)
    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=os.environ.get("NEURALCORE_HOST", "127.0.0.1"), port=8000)
