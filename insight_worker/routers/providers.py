from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..models.insights import ProviderInfo, ProvidersResponse, SetProviderRequest
from ..state import State, get_state

router = APIRouter(tags=["providers"])


def _describe(state: State) -> ProvidersResponse:
    return ProvidersResponse(
        active=state.providers.active_id,
        providers=[
            ProviderInfo(
                id=p.id,
                model=p.model_id,
                endpoint=p.endpoint,
                reasoning=p.reasoning,
                has_credential=bool(p.credential),
            )
            for p in state.providers.all()
        ],
    )


@router.get("/providers", response_model=ProvidersResponse)
def v1_list_providers(state: State = Depends(get_state)) -> ProvidersResponse:
    return _describe(state)


@router.post("/providers/active", response_model=ProvidersResponse)
def v1_set_active_provider(payload: SetProviderRequest, state: State = Depends(get_state)) -> ProvidersResponse:
    provider = payload.provider.strip().lower()
    if provider not in state.providers:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown provider '{payload.provider}'; expected one of {', '.join(state.providers.ids())}",
        )
    state.providers.set_active(provider)
    logging.getLogger("app").info("active provider set to %s", provider)
    return _describe(state)
