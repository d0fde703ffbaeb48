"""
Configuration — code constants and environment overrides.

User-editable backend settings live in the persisted settings blob (see
profile.py / store.py). Everything here is process-level and read once.
"""

import os
from pathlib import Path as _Path

# ── Paths ──
_BACKEND_DIR = _Path(__file__).parent.parent
PROJECT_ROOT = _BACKEND_DIR.parent
PROFILE_PATH = _Path(os.environ.get("PROFILE_PATH", str(PROJECT_ROOT / "profile.yaml")))
STATE_DIR = _Path(os.environ.get("NEURALCORE_STATE_DIR", str(_BACKEND_DIR / "state")))

# ── Persisted settings ──
SETTINGS_KEY = "apiSettings"

# ── Transport ──
DEFAULT_TIMEOUT = float(os.environ.get("NEURALCORE_TIMEOUT", "120"))
DISCOVERY_TIMEOUT = 10
ERROR_BODY_CHARS = 250

# ── Retry policy (1 initial attempt + MAX_RETRIES retries) ──
MAX_RETRIES = 2
INITIAL_DELAY_MS = 1000

# ── Extraction ──
RAW_PREVIEW_CHARS = 200

# ── Sampling temperature per use case ──
TEMPERATURE = {
    "quiz": 0.8,
    "flashcards": 0.7,
    "review": 0.5,
    "default": 0.7,
}

# ── Kind defaults ──
DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4o-mini",
    "ollama": "llama3.1",
    "cloudflare": "@cf/meta/llama-3-8b-instruct",
}

GEMINI_MODELS = ["gemini-2.5-flash", "gemini-2.5-pro", "gemini-2.5-flash-lite"]

CLOUDFLARE_CATALOG = [
    "@cf/meta/llama-3-8b-instruct",
    "@cf/mistral/mistral-7b-instruct-v0.1",
    "@cf/google/gemma-7b-it",
]
