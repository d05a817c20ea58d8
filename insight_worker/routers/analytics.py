from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from ..db import list_analyses_for_user
from ..models.analysis import AnalysisResult, PersonalizationContext
from ..models.insights import EmotionAnalyticsResponse, PromptSuggestionsResponse, ThemeAnalyticsResponse
from ..services.analytics import summarize_emotions, summarize_themes
from ..services.prompts import suggest_journal_prompts
from ..state import get_user_id

router = APIRouter(tags=["analytics"])


def _user_analyses(user_id: str) -> List[AnalysisResult]:
    return [AnalysisResult.model_validate(r["analysis"]) for r in list_analyses_for_user(user_id, limit=None)]


@router.get("/analytics/emotions", response_model=EmotionAnalyticsResponse)
def v1_emotion_analytics(user_id: str = Depends(get_user_id)) -> EmotionAnalyticsResponse:
    analyses = _user_analyses(user_id)
    return summarize_emotions(analyses, total_entries=len(analyses))


@router.get("/analytics/themes", response_model=ThemeAnalyticsResponse)
def v1_theme_analytics(user_id: str = Depends(get_user_id)) -> ThemeAnalyticsResponse:
    analyses = _user_analyses(user_id)
    return summarize_themes(analyses, total_entries=len(analyses))


@router.post("/prompts/suggestions", response_model=PromptSuggestionsResponse)
def v1_prompt_suggestions(
    context: Optional[PersonalizationContext] = Body(default=None),
) -> PromptSuggestionsResponse:
    return PromptSuggestionsResponse(prompts=suggest_journal_prompts(context))
