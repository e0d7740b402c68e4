from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .utils import sanitize_message


class MessagePayload(BaseModel):
    """Customer message shared by the chat and classify payloads, sanitized on input."""
    message: str = Field(min_length=1, max_length=1000)

    @field_validator("message")
    @classmethod
    def _clean_message(cls, value: str) -> str:
        cleaned = sanitize_message(value)
        if not cleaned:
            raise ValueError("El mensaje no puede estar vacío")
        return cleaned


class ChatRequest(MessagePayload):
    """Request payload for chat API."""
    context: Optional[Dict[str, Any]] = Field(default=None)


class ClassifyRequest(MessagePayload):
    """Request payload for classification-only calls."""
    use_ai: Optional[bool] = Field(default=None)


class ChatResponse(BaseModel):
    """Response envelope returned by the chat API."""
    success: bool = True
    category: str
    confidence: float
    message: str
    additional_info: Dict[str, Any]
    service: str
    metadata: Dict[str, Any]
    debug: Optional[Dict[str, Any]] = None


class CategoryInfo(BaseModel):
    """Public description of one answerable category."""
    id: str
    name: str
    description: str
    examples: List[str]


class CategoriesResponse(BaseModel):
    """Category catalogue returned to the UI."""
    categories: List[CategoryInfo]
