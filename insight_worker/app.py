from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers.analytics import router as analytics_router
from .routers.entries import router as entries_router
from .routers.insights import router as insights_router
from .routers.providers import router as providers_router
from .config import load_settings
from .logging import setup_logging, install_app_logging
from .errors import install_error_handlers
from .state import build_state
from .db import initialize_db


def _load_env_file(env_path: Path) -> None:
    """Minimal .env loader: KEY=VALUE lines into os.environ if not set.
    - Ignores comments and blank lines
    - Strips surrounding quotes
    - Supports optional 'export ' prefix
    """
    if not env_path.exists():
        return
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.lower().startswith("export "):
            line = line[7:].lstrip()
        if "=" not in line:
            continue
        k, v = line.split("=", 1)
        key = k.strip()
        val = v.strip().strip('"').strip("'")
        os.environ.setdefault(key, val)


def create_app() -> FastAPI:
    # Load environment from an optional .env file at the project root
    repo_root = Path(__file__).resolve().parent.parent
    try:
        _load_env_file(repo_root / ".env")
    except OSError as e:
        logging.getLogger("app").warning(f".env not loaded: {e}")

    settings = load_settings()
    setup_logging()

    app = FastAPI(title="Journal Insight Worker", version="0.1.0")

    # Attach config/state
    app.state.settings = settings
    app.state.state = build_state(settings)

    # Ensure database schema exists before handling requests
    try:
        initialize_db()
    except Exception as e:
        logging.getLogger("app").warning(f"initialize_db failed: {e}")

    # CORS
    allow = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_app_logging(app)
    install_error_handlers(app)

    # Versioned API
    app.include_router(insights_router, prefix="/v1")
    app.include_router(providers_router, prefix="/v1")
    app.include_router(entries_router, prefix="/v1")
    app.include_router(analytics_router, prefix="/v1")

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        state = app.state.state
        return {"status": "ok", "provider": state.providers.active_id}
    return app


# Convenience for `uvicorn insight_worker.app:app`
app = create_app()
