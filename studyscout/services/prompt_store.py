"""Prompt templates for the pipeline stages, read from ``prompts/prompts.json``.

Entries are addressed by dotted keys (``"summarizer.prompt"``) and use
``string.Template`` placeholders. An entry may be a single string or a list
of lines. The file is re-read whenever its mtime changes.
"""

from __future__ import annotations

import json
from pathlib import Path
from string import Template
from typing import Any

from loguru import logger

PROMPTS_PATH = Path(__file__).resolve().parents[1] / "prompts" / "prompts.json"


class PromptCatalog:
    def __init__(self, path: Path = PROMPTS_PATH):
        self.path = Path(path)
        self._templates: dict[str, Template] = {}
        self._loaded_mtime_ns: int | None = None

    def _refresh(self) -> None:
        mtime_ns = self.path.stat().st_mtime_ns
        if mtime_ns == self._loaded_mtime_ns:
            return

        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Prompt catalog must be a JSON object: {self.path}")

        templates: dict[str, Template] = {}
        self._flatten(payload, "", templates)
        self._templates = templates
        self._loaded_mtime_ns = mtime_ns
        logger.debug(f"Loaded {len(templates)} prompts from {self.path.name}")

    def _flatten(self, node: dict[str, Any], prefix: str, out: dict[str, Template]) -> None:
        for name, value in node.items():
            key = f"{prefix}{name}"
            if isinstance(value, dict):
                self._flatten(value, f"{key}.", out)
            elif isinstance(value, str):
                out[key] = Template(value)
            elif isinstance(value, list) and all(isinstance(line, str) for line in value):
                out[key] = Template("\n".join(value))
            else:
                raise TypeError(f"Prompt '{key}' must be a string or a list of lines")

    def keys(self) -> list[str]:
        self._refresh()
        return sorted(self._templates)

    def render(self, key: str, **values: Any) -> str:
        self._refresh()
        template = self._templates.get(key)
        if template is None:
            raise KeyError(f"Prompt key not found: {key}")
        try:
            return template.substitute(**values)
        except KeyError as exc:
            raise KeyError(f"Missing template value '{exc.args[0]}' for prompt '{key}'") from exc


_catalog = PromptCatalog()


def render_prompt(key: str, **values: Any) -> str:
    return _catalog.render(key, **values)
