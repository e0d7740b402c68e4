from __future__ import annotations

import logging

from openai import AsyncOpenAI

from .config import Settings
from .interfaces import ImageResult

logger = logging.getLogger("cake_assistant.images")

BASE_CAKE_PROMPT = "Professional high-quality cake photography, detailed and realistic cake design"


def optimize_cake_prompt(user_prompt: str) -> str:
    """Purpose: Wrap a cake description with photography cues for image generation.
    Inputs/Outputs: Input is the description; output is the enriched prompt.
    Side Effects / State: None.
    Dependencies: None.
    Failure Modes: None; cues already present in the description are not repeated.
    If Removed: Generated images drift toward illustrations with text overlays.
    Testing Notes: A prompt mentioning "lighting" keeps a single lighting cue.
    """
    lowered = user_prompt.lower()
    prompt = f"{BASE_CAKE_PROMPT}, {user_prompt}"
    if "background" not in lowered:
        prompt += ", clean white background"
    if "lighting" not in lowered:
        prompt += ", professional studio lighting"
    if "realistic" not in lowered:
        prompt += ", photorealistic"
    return prompt + ", no text, no writing, high resolution, detailed"


def classify_error(exc: Exception) -> str:
    message = str(exc)
    if "billing" in message:
        return "Límite de créditos de OpenAI excedido"
    if "API key" in message:
        return "Error de autenticación con OpenAI"
    if "content policy" in message:
        return "Contenido bloqueado por políticas de OpenAI"
    if "rate limit" in message.lower():
        return "Límite de solicitudes excedido, intenta de nuevo en unos minutos"
    return "Error generando imagen de torta"


class DalleImageClient:
    """Async image generator backed by the OpenAI images endpoint."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings
        if client is not None:
            self._client = client
        elif settings.openai_api_key and settings.image_generation_enabled:
            self._client = AsyncOpenAI(api_key=settings.openai_api_key)
        else:
            self._client = None
            logger.warning("image generation disabled; placeholder images will be used")

    async def generate(self, prompt: str) -> ImageResult:
        if self._client is None:
            return ImageResult(success=False, error="image generation disabled")
        optimized = optimize_cake_prompt(prompt)
        try:
            response = await self._client.images.generate(
                model=self._settings.image_model,
                prompt=optimized,
                size=self._settings.image_size,
                n=1,
            )
        except Exception as exc:
            logger.warning("image generation failed model=%s detail=%s", self._settings.image_model, exc)
            return ImageResult(success=False, error=classify_error(exc))
        if not response.data:
            return ImageResult(success=False, error="No se recibieron datos de imagen")
        image = response.data[0]
        logger.info("image generated model=%s", self._settings.image_model)
        return ImageResult(
            success=True,
            url=image.url,
            revised_prompt=getattr(image, "revised_prompt", None) or optimized,
        )
