from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from ..models.analysis import PersonalizationContext
from ..models.insights import AllInsightsResponse, AnalysisResponse, EntryRequest, TextInsightResponse
from ..services import insights as svc
from ..state import State, get_state

router = APIRouter(prefix="/insights", tags=["insights"])


def _context_getter(payload: EntryRequest) -> svc.ContextGetter:
    async def _get() -> Optional[PersonalizationContext]:
        return payload.context

    return _get


@router.post("/reflection", response_model=TextInsightResponse)
async def v1_reflection(payload: EntryRequest, state: State = Depends(get_state)) -> TextInsightResponse:
    text = await svc.reflect(state, payload.entry, _context_getter(payload))
    return TextInsightResponse(text=text)


@router.post("/title", response_model=TextInsightResponse)
async def v1_title(payload: EntryRequest, state: State = Depends(get_state)) -> TextInsightResponse:
    return TextInsightResponse(text=await svc.generate_title(state, payload.entry))


@router.post("/perspective", response_model=TextInsightResponse)
async def v1_perspective(payload: EntryRequest, state: State = Depends(get_state)) -> TextInsightResponse:
    text = await svc.alternative_perspective(state, payload.entry, _context_getter(payload))
    return TextInsightResponse(text=text)


@router.post("/analysis", response_model=AnalysisResponse)
async def v1_analysis(payload: EntryRequest, state: State = Depends(get_state)) -> AnalysisResponse:
    analysis = await svc.analyze_entry(state, payload.entry, _context_getter(payload))
    return AnalysisResponse(analysis=analysis)


@router.post("/all", response_model=AllInsightsResponse)
async def v1_all(payload: EntryRequest, state: State = Depends(get_state)) -> AllInsightsResponse:
    """Title, reflection, perspective and analysis for one entry in a single call."""
    results = await svc.generate_all(state, payload.entry, _context_getter(payload))
    return AllInsightsResponse(**results)
