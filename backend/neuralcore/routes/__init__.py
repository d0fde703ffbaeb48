"""
Route registration — includes all API routers into the FastAPI app.
"""

from fastapi import FastAPI

from neuralcore.routes.generation import router as generation_router
from neuralcore.routes.health import router as health_router
from neuralcore.routes.settings import router as settings_router


def register_routes(app: FastAPI):
    """Mount all API routers onto the app."""
    app.include_router(health_router)
    app.include_router(settings_router)
    app.include_router(generation_router)
