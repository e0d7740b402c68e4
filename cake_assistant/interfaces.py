"""Contracts for the external collaborators the assistant core depends on."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

Record = Dict[str, Any]


@dataclass(frozen=True)
class GenerationResult:
    success: bool
    text: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class ImageResult:
    success: bool
    url: Optional[str] = None
    error: Optional[str] = None
    revised_prompt: Optional[str] = None


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> GenerationResult: ...


class ImageGenerator(Protocol):
    async def generate(self, prompt: str) -> ImageResult: ...


class LookupService(Protocol):
    async def lookup_products(self) -> List[Record]: ...

    async def lookup_shipping_zones(self, zone: Optional[str] = None) -> List[Record]: ...

    async def lookup_payment_methods(self, method: Optional[str] = None) -> List[Record]: ...

    async def shipping_policies(self) -> Dict[str, Record]: ...

    async def payment_policies(self) -> Dict[str, Record]: ...
