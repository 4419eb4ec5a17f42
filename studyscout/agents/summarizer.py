from __future__ import annotations

from typing import Any

from studyscout.services import logger as log_service
from studyscout.services.backoff import retry_with_backoff
from studyscout.services.prompt_store import render_prompt

DEFAULT_INTRO = "Here are the best resources I found to help you learn about this topic."


class Summarizer:
    """Best-effort grounded intro text; any failure yields DEFAULT_INTRO."""

    name = "summarizer"

    def __init__(self, client: Any, *, max_retries: int = 3, base_delay_ms: int = 1000):
        self.client = client
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms

    async def summarize(self, message: str) -> str:
        prompt = render_prompt("summarizer.prompt", message=message)
        try:
            generation = await retry_with_backoff(
                lambda: self.client.generate(prompt, search_grounding=True, caller=self.name),
                max_retries=self.max_retries,
                base_delay_ms=self.base_delay_ms,
            )
        except Exception as e:
            log_service.log_stage_degraded(self.name, "summary generation failed, using default", error=str(e))
            return DEFAULT_INTRO

        text = (generation.text or "").strip()
        if not text:
            log_service.log_stage_degraded(self.name, "empty summary, using default")
            return DEFAULT_INTRO
        return text
