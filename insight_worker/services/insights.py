"""Entry points for the four AI tasks.

Each function is total: whatever the provider does, the caller gets usable
content back. Failures at any stage are logged and replaced by fallback
content; no exception reaches the caller.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from ..models.analysis import AnalysisResult, PersonalizationContext
from ..state import State
from . import transport
from .decoding import decode_structured
from .extraction import extract_text
from .fallback import (
    empty_entry_analysis,
    fallback_analysis,
    fallback_perspective,
    fallback_reflection,
    fallback_title,
)
from .normalize import normalize_analysis, normalize_text
from .prompts import TaskKind, build_prompt
from .providers import ProviderConfig

logger = logging.getLogger("app.insights")

ContextGetter = Callable[[], Awaitable[Optional[PersonalizationContext]]]


def generation_options(state: State, kind: TaskKind) -> transport.GenerationOptions:
    if kind is TaskKind.ANALYSIS:
        # lower temperature and a larger output cap reduce truncated JSON
        return transport.GenerationOptions(
            timeout=state.timeout_s,
            temperature=state.analysis_temperature,
            max_tokens=state.analysis_max_tokens,
        )
    return transport.GenerationOptions(timeout=state.timeout_s)


async def _load_context(context_getter: Optional[ContextGetter]) -> Optional[PersonalizationContext]:
    if context_getter is None:
        return None
    try:
        return await context_getter()
    except Exception as e:  # noqa: BLE001
        logger.warning("personalization context unavailable: %s", e)
        return None


def _stage(kind: TaskKind, provider: str, stage: str, **fields: str) -> Dict[str, str]:
    """Structured fields attached to stage log records (see ``JsonFormatter``)."""
    return {"task": kind.value, "provider": provider, "stage": stage, **fields}


async def complete(
    state: State, kind: TaskKind, prompt: str, config: Optional[ProviderConfig] = None
) -> Optional[str]:
    """Send ``prompt`` to a provider and extract the answer text.

    ``config`` defaults to the registry's active provider, read once.
    """
    config = config or state.providers.get_active()
    result = await transport.send(config, prompt, generation_options(state, kind), client=state.http_client)
    if result.error is not None:
        logger.warning(
            "%s: provider %s failed (%s) %s",
            kind.value, config.id, result.error.kind, result.error.detail[:200],
            extra=_stage(kind, config.id, "transport", error_kind=result.error.kind),
        )
        return None
    outcome = extract_text(result.response, reasoning=config.reasoning)
    if not outcome.ok:
        logger.warning(
            "%s: %s from provider %s", kind.value, outcome.failure, config.id,
            extra=_stage(kind, config.id, "extract", error_kind=str(outcome.failure)),
        )
        return None
    logger.debug("%s: answer found at %s", kind.value, outcome.shape)
    return outcome.text


async def _text_task(
    state: State,
    kind: TaskKind,
    entry: str,
    fallback: Callable[[], str],
    context_getter: Optional[ContextGetter] = None,
) -> str:
    if not entry or not entry.strip():
        logger.info("%s: empty entry, using fallback", kind.value)
        return fallback()
    try:
        context = await _load_context(context_getter)
        text = normalize_text(await complete(state, kind, build_prompt(kind, entry, context)), kind)
    except Exception:  # noqa: BLE001
        logger.exception("%s: unexpected failure", kind.value)
        return fallback()
    if text is None:
        return fallback()
    return text


async def reflect(state: State, entry: str, context_getter: Optional[ContextGetter] = None) -> str:
    """Short reflective reply acknowledging the entry and asking one question."""
    return await _text_task(state, TaskKind.REFLECTION, entry, fallback_reflection, context_getter)


async def generate_title(state: State, entry: str, today: Optional[date] = None) -> str:
    return await _text_task(state, TaskKind.TITLE, entry, lambda: fallback_title(today))


async def alternative_perspective(
    state: State, entry: str, context_getter: Optional[ContextGetter] = None
) -> str:
    return await _text_task(state, TaskKind.PERSPECTIVE, entry, fallback_perspective, context_getter)


async def _analyze(state: State, entry: str, context_getter: Optional[ContextGetter]) -> AnalysisResult:
    context = await _load_context(context_getter)
    config = state.providers.get_active()
    kind = TaskKind.ANALYSIS
    text = await complete(state, kind, build_prompt(kind, entry, context), config)
    if text is None:
        return fallback_analysis()
    logger.debug("raw analysis reply: %s", text[:2000])

    decoded = decode_structured(text)
    if not decoded.ok:
        logger.warning(
            "analysis reply rejected (%s): %s", decoded.failure, decoded.detail[:200],
            extra=_stage(kind, config.id, "decode", error_kind=str(decoded.failure)),
        )
        return fallback_analysis()

    try:
        result, notes = normalize_analysis(decoded.data)
    except (ValidationError, ValueError, ArithmeticError) as e:
        logger.warning(
            "analysis failed validation after normalization: %s", e,
            extra=_stage(kind, config.id, "normalize", error_kind="invalid-analysis"),
        )
        return fallback_analysis()
    if notes:
        logger.info(
            "analysis normalized with %d coercion(s): %s",
            len(notes), "; ".join(str(n) for n in notes[:10]),
            extra=_stage(kind, config.id, "normalize"),
        )
    return result


async def analyze_entry(
    state: State, entry: str, context_getter: Optional[ContextGetter] = None
) -> AnalysisResult:
    """Structured themes/emotions/perspective for one entry, always valid."""
    if not entry or not entry.strip():
        logger.info("structured-analysis: empty entry, using reflection defaults")
        return empty_entry_analysis()
    try:
        return await _analyze(state, entry, context_getter)
    except Exception:  # noqa: BLE001
        logger.exception("structured-analysis: unexpected failure")
        return fallback_analysis()


async def generate_all(
    state: State, entry: str, context_getter: Optional[ContextGetter] = None
) -> Dict[str, object]:
    """Run all four tasks concurrently for one entry."""
    title, reflection, perspective, analysis = await asyncio.gather(
        generate_title(state, entry),
        reflect(state, entry, context_getter),
        alternative_perspective(state, entry, context_getter),
        analyze_entry(state, entry, context_getter),
    )
    return {
        "title": title,
        "reflection": reflection,
        "perspective": perspective,
        "analysis": analysis,
    }
