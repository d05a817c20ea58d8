from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..config import Settings


@dataclass(frozen=True)
class ProviderConfig:
    id: str
    endpoint: str
    model_id: str
    credential: str
    reasoning: bool = False


class ProviderRegistry:
    """Fixed set of provider configs with a switchable active pointer.

    Callers read the active config once per request via ``get_active()`` and
    use that snapshot for the whole call; ``set_active`` only affects requests
    that start afterwards.
    """

    def __init__(self, providers: Iterable[ProviderConfig], active: str) -> None:
        self._providers: Dict[str, ProviderConfig] = {p.id: p for p in providers}
        if not self._providers:
            raise ValueError("at least one provider is required")
        self._lock = threading.Lock()
        self._active = ""
        self.set_active(active)

    def get_active(self) -> ProviderConfig:
        with self._lock:
            return self._providers[self._active]

    def set_active(self, provider_id: str) -> None:
        if provider_id not in self._providers:
            raise KeyError(f"unknown provider: {provider_id}")
        with self._lock:
            self._active = provider_id

    @property
    def active_id(self) -> str:
        with self._lock:
            return self._active

    def ids(self) -> List[str]:
        return list(self._providers)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def all(self) -> List[ProviderConfig]:
        return list(self._providers.values())


def build_registry(settings: Settings) -> ProviderRegistry:
    providers = [
        ProviderConfig(
            id="openai",
            endpoint=settings.openai_endpoint,
            model_id=settings.openai_model,
            credential=settings.openai_api_key,
        ),
        ProviderConfig(
            id="deepseek",
            endpoint=settings.deepseek_endpoint,
            model_id=settings.deepseek_model,
            credential=settings.deepseek_api_key,
        ),
        ProviderConfig(
            id="deepseek-reasoner",
            endpoint=settings.deepseek_endpoint,
            model_id=settings.deepseek_reasoner_model,
            credential=settings.deepseek_api_key,
            reasoning=True,
        ),
    ]
    return ProviderRegistry(providers, active=settings.active_provider.strip().lower())
