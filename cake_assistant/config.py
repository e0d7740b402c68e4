from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_PLACEHOLDER_IMAGE_URL = (
    "https://via.placeholder.com/1024x1024/FFB6C1/000000?text=Torta+Personalizada"
)


@dataclass(frozen=True)
class Settings:
    """Configuration container for models, catalog data, and classifier constants."""
    gemini_api_key: str
    gemini_model: str
    gemini_temperature: float
    max_output_tokens: int
    openai_api_key: str
    image_model: str
    image_size: str
    image_generation_enabled: bool
    catalog_path: Path
    prompts_dir: Path
    ai_fallback_enabled: bool
    escalation_threshold: float
    short_circuit_confidence: float
    placeholder_image_url: str
    max_context_length: int


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    """Purpose: Load configuration from environment variables and defaults.
    Inputs/Outputs: No inputs; returns a Settings instance.
    Side Effects / State: Reads environment variables and filesystem paths.
    Dependencies: Uses os.getenv and BASE_DIR for default paths.
    Failure Modes: Non-numeric CHATBOT_MAX_RESPONSE_LENGTH, ESCALATION_THRESHOLD,
        SHORT_CIRCUIT_CONFIDENCE or MAX_CONTEXT_LENGTH raise ValueError; threshold and
        confidence outside [0, 1] raise ValueError as well.
    If Removed: App cannot configure models, catalog, or classifier and fails at startup.
    Testing Notes: Verify defaults and overrides via environment variables.
    """
    # Resolve catalog and prompt paths, then build Settings.
    catalog_path = os.getenv("CATALOG_PATH")
    if catalog_path:
        catalog_file = Path(catalog_path)
    else:
        catalog_file = (BASE_DIR / "data" / "catalog.json").resolve()

    escalation_threshold = float(os.getenv("ESCALATION_THRESHOLD", "0.3"))
    short_circuit_confidence = float(os.getenv("SHORT_CIRCUIT_CONFIDENCE", "0.9"))
    for name, value in (
        ("ESCALATION_THRESHOLD", escalation_threshold),
        ("SHORT_CIRCUIT_CONFIDENCE", short_circuit_confidence),
    ):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be within [0, 1], got {value}")

    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
        gemini_temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.7")),
        max_output_tokens=int(os.getenv("CHATBOT_MAX_RESPONSE_LENGTH", "500")),
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        image_model=os.getenv("IMAGE_MODEL", "dall-e-3"),
        image_size=os.getenv("IMAGE_SIZE", "1024x1024"),
        image_generation_enabled=_env_flag("IMAGE_GENERATION_ENABLED", "true"),
        catalog_path=catalog_file,
        prompts_dir=(BASE_DIR / "prompts").resolve(),
        ai_fallback_enabled=_env_flag("AI_FALLBACK_ENABLED", "true"),
        escalation_threshold=escalation_threshold,
        short_circuit_confidence=short_circuit_confidence,
        placeholder_image_url=os.getenv("PLACEHOLDER_IMAGE_URL", DEFAULT_PLACEHOLDER_IMAGE_URL),
        max_context_length=int(os.getenv("MAX_CONTEXT_LENGTH", "1500")),
    )
