from __future__ import annotations

import logging
from typing import Dict, Optional

import google.generativeai as genai

try:  # Prefer typed enums when available
    from google.generativeai import types as genai_types

    DEFAULT_SAFETY_SETTINGS = [
        {
            "category": genai_types.HarmCategory.HARM_CATEGORY_HARASSMENT,
            "threshold": genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
        },
        {
            "category": genai_types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
            "threshold": genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
        },
        {
            "category": genai_types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
            "threshold": genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
        },
        {
            "category": genai_types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
            "threshold": genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
        },
    ]
except Exception:  # pragma: no cover - fallback for older SDKs
    DEFAULT_SAFETY_SETTINGS = [
        {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    ]

from .config import Settings
from .interfaces import GenerationResult

logger = logging.getLogger("cake_assistant.gemini")


class GeminiClient:
    """Async text generator backed by the Gemini SDK."""

    def __init__(self, settings: Settings) -> None:
        """Purpose: Configure the Gemini SDK and initialize model cache.
        Inputs/Outputs: Input is Settings; no return value.
        Side Effects / State: Configures SDK global API key and caches model instances.
        Dependencies: Uses google.generativeai and Settings from config.
        Failure Modes: Raises ValueError if API key or model name is missing.
        If Removed: Fallback classification and reply phrasing cannot call the LLM.
        Testing Notes: Validate missing key raises ValueError.
        """
        self._settings = settings
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required")
        genai.configure(api_key=settings.gemini_api_key)
        self._models: Dict[str, genai.GenerativeModel] = {}
        self._default_model = _normalize_model_name(settings.gemini_model)
        if not self._default_model:
            raise ValueError("Gemini model name is required")
        self._models[self._default_model] = genai.GenerativeModel(self._default_model)

    async def generate(self, prompt: str, model: Optional[str] = None) -> GenerationResult:
        """Purpose: Generate a single text response from a string prompt.
        Inputs/Outputs: Input is prompt string and optional model; returns GenerationResult.
        Side Effects / State: May add a model to the internal cache; one network call.
        Dependencies: Uses genai.GenerativeModel.generate_content_async.
        Failure Modes: SDK errors and blocked/empty responses become success=False with
            a classified error string; nothing is raised.
        If Removed: Every dispatcher branch falls back to its apology text.
        Testing Notes: Covered through fake generators; live calls need an API key.
        """
        model_name = _normalize_model_name(model) if model else self._default_model
        if model_name not in self._models:
            self._models[model_name] = genai.GenerativeModel(model_name)
        try:
            response = await self._models[model_name].generate_content_async(
                prompt,
                generation_config={
                    "temperature": self._settings.gemini_temperature,
                    "max_output_tokens": self._settings.max_output_tokens,
                },
                safety_settings=DEFAULT_SAFETY_SETTINGS,
            )
            text: Optional[str] = getattr(response, "text", None)
        except Exception as exc:
            error = classify_error(exc)
            logger.warning("gemini generate failed model=%s error=%s detail=%s", model_name, error, exc)
            return GenerationResult(success=False, error=error)
        text = (text or "").strip()
        if not text:
            return GenerationResult(success=False, error="empty response")
        return GenerationResult(success=True, text=text)


def classify_error(exc: Exception) -> str:
    """Map SDK exceptions onto short, customer-safe error labels."""
    message = str(exc)
    if "API_KEY" in message or "API key" in message:
        return "invalid API key"
    if "QUOTA" in message.upper() or "429" in message:
        return "quota exceeded"
    if "SAFETY" in message.upper() or "blocked" in message:
        return "content blocked by safety filters"
    return message or exc.__class__.__name__


def _normalize_model_name(name: Optional[str]) -> str:
    # Strip "models/" prefix and whitespace.
    if not name:
        return ""
    cleaned = name.strip()
    if cleaned.startswith("models/"):
        return cleaned.split("/", 1)[1]
    return cleaned
