from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Header, HTTPException, Request

from .config import Settings
from .services.providers import ProviderRegistry, build_registry


@dataclass
class State:
    """Per-process state shared across requests.

    Attached to FastAPI's app.state; the provider registry is the only piece
    that changes at runtime.
    """

    providers: ProviderRegistry
    timeout_s: float = 30.0
    analysis_temperature: float = 0.3
    analysis_max_tokens: int = 1000
    # Shared client for provider calls; None opens a short-lived client per call
    http_client: Optional[httpx.AsyncClient] = None


def build_state(settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> State:
    return State(
        providers=build_registry(settings),
        timeout_s=settings.request_timeout_s,
        analysis_temperature=settings.analysis_temperature,
        analysis_max_tokens=settings.analysis_max_tokens,
        http_client=http_client,
    )


def get_state(request: Request) -> State:  # FastAPI dependency helper
    return request.app.state.state


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Current user id, supplied by the authenticating gateway."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="X-User-Id header required")
    return x_user_id.strip()
