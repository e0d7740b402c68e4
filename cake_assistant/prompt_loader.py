from __future__ import annotations

from pathlib import Path
from typing import Dict

PROMPT_NAMES = ("products", "shipping", "payments", "cakes", "general")


def load_prompt(prompt_path: Path) -> str:
    """Purpose: Load a prompt file as UTF-8 text and strip BOM if present.
    Inputs/Outputs: Input is a Path to the prompt file; output is the decoded string.
    Side Effects / State: None; pure function reading the filesystem.
    Dependencies: Uses Path.read_text/read_bytes; used by PromptLibrary.
    Failure Modes: UnicodeDecodeError triggers a fallback decode with errors ignored,
        which can drop invalid bytes.
    If Removed: Dispatcher branches cannot build instructions for the text model.
    Testing Notes: Validate BOM-stripping and fallback decoding on non-UTF8 files.
    """
    # Read as UTF-8 and fall back to a tolerant decode if needed.
    try:
        return prompt_path.read_text(encoding="utf-8").lstrip("﻿").strip()
    except UnicodeDecodeError:
        raw = prompt_path.read_bytes()
        text = raw.decode("utf-8", errors="ignore")
        return text.lstrip("﻿").strip()


class PromptLibrary:
    """Category instruction templates loaded once from a prompts directory."""

    def __init__(self, templates: Dict[str, str]) -> None:
        self._templates = dict(templates)

    @classmethod
    def from_dir(cls, prompts_dir: Path) -> "PromptLibrary":
        # Missing template files raise FileNotFoundError at startup.
        return cls({name: load_prompt(prompts_dir / f"{name}.txt") for name in PROMPT_NAMES})

    def get(self, name: str) -> str:
        return self._templates.get(name, self._templates.get("general", ""))
