"""Adaptador de sugerencias (chat completions compatibles con OpenAI).

Responsabilidades:
- Construir el prompt desde un `SearchQuery` (keywords, presupuesto, TLDs,
  restricciones).
- Llamar al proveedor y parsear su salida como JSON estricto.
- Normalizar el resultado como objetos `DomainSuggestion`.

Cualquier fallo (sin key, red, rate limit, JSON inválido, esquema) acaba en
el heurístico determinista; quien llama nunca ve un error del proveedor.
"""

from __future__ import annotations

import asyncio
import json
import random
import re
from typing import Any

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI
from pydantic import BaseModel, Field

from core.config import AppSettings
from core.domain.errors import SuggestionError
from core.domain.models import DomainSuggestion, SearchQuery, SuggestionCategory
from core.logging import get_logger
from core.services.suggestions import heuristic_suggestions

log = get_logger(__name__)

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)

_SYSTEM_PROMPT = (
    "You are a domain naming assistant. Given keywords and preferences, propose concise, "
    "brandable domain ideas.\n"
    "Requirements:\n"
    "- Prefer .com where reasonable but allow modern TLDs (.io, .ai, .co) if better.\n"
    "- Output ONLY JSON matching this shape without any extra text:\n"
    '{ "suggestions": [ { "domain": string, "confidence": number, "reasoning": string, '
    '"category": "exact"|"brandable"|"compound"|"alternative" } ] }\n'
    "- Between 1 and 10 suggestions; confidence in [0,1]."
)


class _SuggestionPayload(BaseModel):
    domain: str = Field(..., min_length=3)
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = Field(default="")
    category: SuggestionCategory


class _SuggestionsPayload(BaseModel):
    suggestions: list[_SuggestionPayload] = Field(..., min_length=1, max_length=10)


def _extract_json_object(text: str) -> str:
    """Devuelve el primer objeto JSON presente en la respuesta del proveedor."""

    match = _JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()

    stripped = text.strip()
    if stripped.startswith("{") and stripped.endswith("}"):
        return stripped

    start = stripped.find("{")
    end = stripped.rfind("}")
    if 0 <= start < end:
        candidate = stripped[start : end + 1]
        try:
            json.loads(candidate)
            return candidate
        except json.JSONDecodeError:
            pass
    raise ValueError("Could not locate a valid JSON object in the AI provider response.")


def _safe_retry_after_seconds(exc: Exception) -> float | None:
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after") or headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def _is_local_base_url(url: str) -> bool:
    url_l = (url or "").strip().lower()
    return url_l.startswith(("http://localhost", "http://127.0.0.1", "http://0.0.0.0"))


def build_user_prompt(query: SearchQuery) -> str:
    def _join(values: list[str] | None, empty: str) -> str:
        return ", ".join(values) if values else empty

    lines = [
        f"Keywords: {', '.join(query.keywords)}",
        f"Budget: {query.budget if query.budget is not None else 'n/a'}",
        f"Preferred TLDs: {_join(query.preferred_tlds, 'any')}",
        f"Max length: {query.max_length if query.max_length is not None else 'n/a'}",
        f"Constraints: {_join(query.exclude_words, 'none')}",
    ]
    if query.business_type:
        lines.append(f"Business type: {query.business_type}")
    if query.target_audience:
        lines.append(f"Target audience: {query.target_audience}")
    if query.include_hyphens is False:
        lines.append("No hyphens.")
    if query.include_numbers is False:
        lines.append("No digits.")
    return "\n".join(lines) + "\n"


def _to_suggestions(parsed: _SuggestionsPayload, query: SearchQuery) -> list[DomainSuggestion]:
    excluded = [w.lower() for w in query.exclude_words or [] if w.strip()]
    out: list[DomainSuggestion] = []
    for item in parsed.suggestions:
        domain = item.domain.strip().lower()
        if any(word in domain for word in excluded):
            continue
        out.append(
            DomainSuggestion(
                domain=domain,
                confidence=item.confidence,
                reasoning=item.reasoning,
                category=item.category,
            )
        )
    return out


class OpenAISuggester:
    """`SuggestionProvider` sobre cualquier endpoint compatible con OpenAI."""

    backoff_base_seconds = 1.25

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: Any | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    def _build_client(self) -> Any | None:
        if self._client is not None:
            return self._client
        api_key = (self._settings.ai_api_key or "").strip()
        if not api_key:
            # Los servidores locales compatibles aceptan cualquier key; los hosted no.
            if not _is_local_base_url(self._settings.ai_base_url):
                return None
            api_key = "local"
        return AsyncOpenAI(
            api_key=api_key,
            base_url=self._settings.ai_base_url,
            timeout=self._settings.ai_timeout_seconds,
            max_retries=0,
        )

    async def _backoff(self, attempt: int, exc: Exception | None = None) -> None:
        retry_after = _safe_retry_after_seconds(exc) if exc is not None else None
        delay = retry_after if retry_after is not None else self.backoff_base_seconds * (2**attempt)
        if delay > 0:
            delay += random.uniform(0.0, 0.35)
        await asyncio.sleep(delay)

    async def suggest(self, query: SearchQuery) -> list[DomainSuggestion]:
        client = self._build_client()
        if client is None:
            log.info("no AI key configured, using heuristic suggestions")
            return heuristic_suggestions(query)

        settings = self._settings
        request_messages: list[dict[str, str]] = [
            {"role": "system", "content": _SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(query)},
        ]

        last_error: Exception | None = None
        content = ""
        # Reintentos: el proveedor puede dar timeout, rate limit o JSON inválido.
        for attempt in range(settings.ai_max_retries + 1):
            try:
                response = await client.chat.completions.create(
                    model=settings.ai_model,
                    messages=request_messages,
                    temperature=settings.ai_temperature,
                )
                content = (response.choices[0].message.content or "").strip()
                data: Any = json.loads(_extract_json_object(content))
                parsed = _SuggestionsPayload.model_validate(data)
                suggestions = _to_suggestions(parsed, query)
                if suggestions:
                    return suggestions
                last_error = SuggestionError("all suggestions excluded")
                break

            except APIStatusError as exc:
                last_error = exc
                status = getattr(exc, "status_code", None)
                if status == 429 or (isinstance(status, int) and status >= 500):
                    if attempt >= settings.ai_max_retries:
                        break
                    await self._backoff(attempt, exc)
                    continue
                break

            except (APITimeoutError, APIConnectionError) as exc:
                last_error = exc
                if attempt >= settings.ai_max_retries:
                    break
                await self._backoff(attempt, exc)

            except ValueError as exc:
                # json.JSONDecodeError and pydantic.ValidationError both land here.
                last_error = exc
                if attempt >= settings.ai_max_retries:
                    break
                request_messages.append({"role": "assistant", "content": content})
                request_messages.append(
                    {
                        "role": "user",
                        "content": "Your response was not valid JSON for the required shape. "
                        "Rewrite ONLY valid JSON (no extra text, no fences).",
                    }
                )

            except Exception as exc:  # noqa: BLE001 - any provider fault falls back
                last_error = exc
                break

        log.warning(
            "suggestion provider failed, using heuristic",
            extra={"reason": type(last_error).__name__ if last_error else "unknown"},
        )
        return heuristic_suggestions(query)
