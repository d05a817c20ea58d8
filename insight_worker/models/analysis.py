from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


HEX_COLOR_PATTERN = r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$"


class Theme(BaseModel):
    name: str = Field(min_length=1)
    count: int = Field(ge=1, le=5, description="Theme importance on a 1-5 scale")
    breakdown: str = Field(min_length=1)
    insights: List[str] = Field(min_length=1)
    emoji: str = ""

    @field_validator("insights")
    @classmethod
    def _insights_not_blank(cls, value: List[str]) -> List[str]:
        if any(not item.strip() for item in value):
            raise ValueError("insights must be non-empty strings")
        return value


class Emotion(BaseModel):
    name: str = Field(min_length=1)
    percentage: int = Field(ge=0, le=100)
    color: str = Field(pattern=HEX_COLOR_PATTERN)


class AnalysisResult(BaseModel):
    """Validated structured analysis of one journal entry.

    Emotion percentages sum to exactly 100 whenever at least one emotion is
    present.
    """

    themes: List[Theme] = Field(default_factory=list)
    emotions: List[Emotion] = Field(default_factory=list)
    perspective: str = Field(min_length=1)

    @model_validator(mode="after")
    def _percentages_sum_to_100(self) -> "AnalysisResult":
        if self.emotions:
            total = sum(e.percentage for e in self.emotions)
            if total != 100:
                raise ValueError(f"emotion percentages sum to {total}, expected 100")
        return self


class Reflections(BaseModel):
    current_state: Optional[str] = None
    ideal_self: Optional[str] = None
    biggest_obstacle: Optional[str] = None


class PersonalizationContext(BaseModel):
    """Onboarding answers used only to enrich prompt text."""

    goals: List[str] = Field(default_factory=list)
    challenges: List[str] = Field(default_factory=list)
    reflections: Optional[Reflections] = None
