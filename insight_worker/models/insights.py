from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .analysis import AnalysisResult, PersonalizationContext


class EntryRequest(BaseModel):
    entry: str = Field(..., description="Raw journal entry text")
    context: Optional[PersonalizationContext] = Field(
        default=None, description="Optional onboarding answers for personalization"
    )


class TextInsightResponse(BaseModel):
    ok: bool = True
    text: str


class AnalysisResponse(BaseModel):
    ok: bool = True
    analysis: AnalysisResult


class AllInsightsResponse(BaseModel):
    ok: bool = True
    title: str
    reflection: str
    perspective: str
    analysis: AnalysisResult


class ProviderInfo(BaseModel):
    id: str
    model: str
    endpoint: str
    reasoning: bool
    has_credential: bool


class ProvidersResponse(BaseModel):
    ok: bool = True
    active: str
    providers: List[ProviderInfo]


class SetProviderRequest(BaseModel):
    provider: str = Field(..., description="Provider id to make active")


class StoredAnalysis(BaseModel):
    entry_id: str
    user_id: str
    analysis: AnalysisResult
    perspective: Optional[str] = None
    insights: Optional[str] = None
    updated_at: Optional[str] = Field(None, description="ISO timestamp of the last save")


class SaveAnalysisRequest(BaseModel):
    analysis: AnalysisResult
    perspective: Optional[str] = None
    insights: Optional[str] = None


class EmotionSummary(BaseModel):
    name: str
    total_percentage: int
    average_percentage: int
    occurrences: int
    color: str
    emoji: str


class EmotionAnalyticsResponse(BaseModel):
    most_common: Optional[EmotionSummary] = None
    total_entries: int
    breakdown: List[EmotionSummary]


class ThemeSummary(BaseModel):
    name: str
    total_count: int
    average_count: int
    occurrences: int
    emoji: str


class ThemeAnalyticsResponse(BaseModel):
    most_common: Optional[ThemeSummary] = None
    total_entries: int
    breakdown: List[ThemeSummary]


class PromptSuggestionsResponse(BaseModel):
    prompts: List[str]
