"""OpenRouter generative client with optional web-search grounding."""
from __future__ import annotations

import time
from typing import Any

from studyscout.config import settings
from studyscout.errors import ConfigurationMissing, TransientUpstreamOverload
from studyscout.models.resources import Generation, GroundingChunk, WebSource
from studyscout.services import logger as log_service


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def grounding_chunks_from_annotations(annotations: list[Any] | None) -> list[GroundingChunk]:
    """Map OpenRouter message annotations to grounding chunks, keeping positions.

    ``url_citation`` annotations carry a web source; any other annotation type
    still occupies a position but has no ``web`` entry.
    """
    chunks: list[GroundingChunk] = []
    for annotation in annotations or []:
        if _field(annotation, "type") != "url_citation":
            chunks.append(GroundingChunk())
            continue
        citation = _field(annotation, "url_citation") or {}
        chunks.append(
            GroundingChunk(
                web=WebSource(
                    title=_field(citation, "title") or "",
                    uri=_field(citation, "url") or "",
                )
            )
        )
    return chunks


class GenerativeClient:
    """Thin wrapper over the OpenAI-compatible OpenRouter chat API."""

    def __init__(self, openai_client: Any, model: str):
        self._client = openai_client
        self.model = model

    async def generate(
        self,
        prompt: str,
        *,
        search_grounding: bool = False,
        caller: str = "pipeline",
    ) -> Generation:
        from openai import APIStatusError

        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if search_grounding:
            kwargs["extra_body"] = {
                "plugins": [{"id": "web", "max_results": settings.web_plugin_max_results}]
            }

        t0 = time.monotonic()
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except APIStatusError as exc:
            log_service.log_llm_call(
                model=self.model,
                caller=caller,
                duration_ms=int((time.monotonic() - t0) * 1000),
                grounded=search_grounding,
                status="error",
                error=f"{exc.status_code}: {exc.message}",
            )
            if exc.status_code == 503:
                raise TransientUpstreamOverload(str(exc.message), status_code=503) from exc
            raise
        elapsed_ms = int((time.monotonic() - t0) * 1000)

        choices = getattr(response, "choices", None) or []
        message = choices[0].message if choices else None
        text = (getattr(message, "content", None) or "") if message else ""
        annotations = getattr(message, "annotations", None) if message else None

        usage = getattr(response, "usage", None)
        generation = Generation(
            text=text,
            grounding_chunks=grounding_chunks_from_annotations(annotations),
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )
        log_service.log_llm_call(
            model=self.model,
            caller=caller,
            input_tokens=generation.input_tokens,
            output_tokens=generation.output_tokens,
            duration_ms=elapsed_ms,
            grounded=search_grounding,
        )
        return generation


def get_model() -> str:
    """Get the active OpenRouter model id."""
    if settings.openrouter_model:
        return settings.openrouter_model
    return settings.default_model


def get_client(api_key: str | None = None, model: str | None = None) -> GenerativeClient:
    """Build a generative client; raises ConfigurationMissing without an API key."""
    from openai import AsyncOpenAI

    key = (api_key if api_key is not None else settings.openrouter_api_key).strip()
    if not key:
        raise ConfigurationMissing("OPENROUTER_API_KEY")

    base_url = settings.openrouter_base_url.strip() or "https://openrouter.ai/api/v1"
    openai_client = AsyncOpenAI(
        api_key=key,
        base_url=base_url,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
    )
    return GenerativeClient(openai_client, model or get_model())
