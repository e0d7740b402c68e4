import re
import unicodedata
from typing import Any, Dict, Iterable, Optional


def normalize_text(text: str) -> str:
    """Purpose: Normalize free-form text for accent-insensitive key matching.
    Inputs/Outputs: Input is a raw string; output is a lowercase ASCII-only string with
        diacritics removed and whitespace collapsed.
    Side Effects / State: None; pure function.
    Dependencies: Uses unicodedata and regex; called by catalog field mapping and zone
        filters.
    Failure Modes: Returns an empty string when input is falsy.
    If Removed: Catalog records keyed as "descripción" or "Nombre" stop resolving.
    Testing Notes: Validate Spanish text is normalized (e.g., "Envío" -> "envio").
    """
    # Normalize to lowercase and strip diacritics for consistent matching.
    if not text:
        return ""
    lowered = text.lower()
    decomposed = unicodedata.normalize("NFD", lowered)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    cleaned = re.sub(r"[^a-z0-9\s\-_/.]+", " ", stripped)
    return re.sub(r"\s+", " ", cleaned).strip()


def normalize_key(text: str) -> str:
    """Purpose: Collapse normalize_text output into a compact synonym key.
    Inputs/Outputs: Input is a raw key; output drops spaces and underscores.
    Side Effects / State: None.
    Dependencies: normalize_text.
    Failure Modes: Empty input yields an empty key.
    If Removed: "costo_base" and "Costo Base" stop resolving to the same field.
    Testing Notes: normalize_key("Tiempo Estimado") == "tiempoestimado".
    """
    return normalize_text(text).replace(" ", "").replace("_", "")


def has_value(value: Any) -> bool:
    """Return False for None and blank strings; every other value counts as present."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def first_value(record: Dict[str, Any], keys: Iterable[str]) -> Optional[Any]:
    """Return the first non-empty value among synonym keys (e.g. "name"/"nombre")."""
    normalized_map = {normalize_key(str(k)): k for k in record.keys()}
    for key in keys:
        actual = normalized_map.get(normalize_key(key))
        if actual is not None and has_value(record.get(actual)):
            return record[actual]
    return None


def truncate(text: str, limit: int, marker: str = "...\n[INFORMACIÓN TRUNCADA]") -> str:
    """Cut text at limit characters and append the truncation marker; non-positive limits disable it."""
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + marker


_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_SCRIPT_TAGS = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_URLS = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLERS = re.compile(r"on\w+\s*=", re.IGNORECASE)


def sanitize_message(message: str) -> str:
    """Strip control characters, script blocks, and inline handlers from user input."""
    cleaned = _CONTROL_CHARS.sub("", message)
    cleaned = _SCRIPT_TAGS.sub("", cleaned)
    cleaned = _JS_URLS.sub("", cleaned)
    cleaned = _EVENT_HANDLERS.sub("", cleaned)
    return cleaned.strip()
