from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .keyword_tables import DEFAULT_TABLES, KeywordTables, TriggerTable

logger = logging.getLogger("cake_assistant.extractor")

SIZES = ("small", "medium", "large", "extra_large")


@dataclass
class AttributeSet:
    """Structured description of a custom cake request."""
    occasion: Optional[str] = None
    theme: Optional[str] = None
    colors: List[str] = field(default_factory=list)
    size: Optional[str] = None
    decorations: List[str] = field(default_factory=list)
    flavors: List[str] = field(default_factory=list)
    age_group: Optional[str] = None
    gender: Optional[str] = None
    style: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "occasion": self.occasion,
            "theme": self.theme,
            "colors": list(self.colors),
            "size": self.size,
            "decorations": list(self.decorations),
            "flavors": list(self.flavors),
            "age_group": self.age_group,
            "gender": self.gender,
            "style": self.style,
        }


def scan_last_match(message: str, table: TriggerTable) -> Optional[str]:
    """Scan the whole table; each hit overwrites the previous one, so the last hit wins."""
    value: Optional[str] = None
    for trigger, tag in table:
        if trigger in message:
            value = tag
    return value


def scan_all_matches(message: str, table: TriggerTable) -> List[str]:
    """Collect every tag whose trigger appears, first-detected order, without repeats."""
    found: List[str] = []
    for trigger, tag in table:
        if trigger in message and tag not in found:
            found.append(tag)
    return found


class AttributeExtractor:
    """Scans request text against the trigger tables to build an AttributeSet."""

    def __init__(self, tables: KeywordTables = DEFAULT_TABLES) -> None:
        self._tables = tables

    def detect_size(self, message: str) -> Optional[str]:
        for size, phrases in self._tables.sizes:
            if any(phrase in message for phrase in phrases):
                return size
        return None

    def extract(self, message: str) -> AttributeSet:
        """Purpose: Extract occasion, theme, colors, size, decorations, and more.
        Inputs/Outputs: Input is the request text (lower-cased here); returns an
            AttributeSet whose tags all come from the trigger tables.
        Side Effects / State: None; pure text scanning over immutable tables.
        Dependencies: KeywordTables trigger tables and size phrases.
        Failure Modes: None; unmatched domains stay unset or empty.
        If Removed: Custom designs cannot be priced or described.
        Testing Notes: Check last-match-wins on single-value domains and de-duplication
            on list domains.
        """
        lowered = (message or "").lower()
        tables = self._tables
        attributes = AttributeSet(
            occasion=scan_last_match(lowered, tables.occasions),
            theme=scan_last_match(lowered, tables.themes),
            colors=scan_all_matches(lowered, tables.colors),
            size=self.detect_size(lowered),
            decorations=scan_all_matches(lowered, tables.decorations),
            flavors=scan_all_matches(lowered, tables.flavors),
            age_group=scan_last_match(lowered, tables.age_groups),
            gender=scan_last_match(lowered, tables.genders),
            style=scan_last_match(lowered, tables.styles),
        )
        logger.debug("extracted attributes=%s", attributes.to_dict())
        return attributes
