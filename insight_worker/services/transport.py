from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .providers import ProviderConfig

logger = logging.getLogger("app.transport")


@dataclass(frozen=True)
class GenerationOptions:
    timeout: float = 30.0
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class TransportError:
    kind: str  # timeout | network | http-status:<code> | invalid-body
    detail: str = ""


@dataclass(frozen=True)
class TransportResult:
    response: Any = None
    error: Optional[TransportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_payload(config: ProviderConfig, prompt: str, options: GenerationOptions) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "model": config.model_id,
        "stream": False,
        "messages": [{"role": "user", "content": prompt}],
    }
    if options.temperature is not None:
        payload["temperature"] = options.temperature
    if options.max_tokens is not None:
        payload["max_tokens"] = options.max_tokens
    return payload


async def _post(client: httpx.AsyncClient, config: ProviderConfig, payload: Dict[str, Any], timeout: float) -> httpx.Response:
    return await client.post(
        config.endpoint,
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.credential}",
        },
        json=payload,
        timeout=timeout,
    )


async def send(
    config: ProviderConfig,
    prompt: str,
    options: GenerationOptions,
    client: Optional[httpx.AsyncClient] = None,
) -> TransportResult:
    """POST one chat completion request. Failures are returned, never raised.

    No retry is attempted; the caller falls back to default content instead.
    """
    payload = build_payload(config, prompt, options)
    try:
        if client is not None:
            resp = await _post(client, config, payload, options.timeout)
        else:
            async with httpx.AsyncClient(timeout=options.timeout) as own_client:
                resp = await _post(own_client, config, payload, options.timeout)
    except httpx.TimeoutException as e:
        return TransportResult(error=TransportError("timeout", str(e) or type(e).__name__))
    except httpx.HTTPError as e:
        return TransportResult(error=TransportError("network", str(e) or type(e).__name__))
    except OSError as e:
        return TransportResult(error=TransportError("network", str(e)))

    if not resp.is_success:
        body = resp.text[:500]
        return TransportResult(error=TransportError(f"http-status:{resp.status_code}", body))
    try:
        data = resp.json()
    except ValueError as e:
        return TransportResult(error=TransportError("invalid-body", str(e)))
    logger.debug("provider %s answered with status %s", config.id, resp.status_code)
    return TransportResult(response=data)
