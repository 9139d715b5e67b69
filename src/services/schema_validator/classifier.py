"""
Event Classifier - Picks the specific schema for a parsed event

Precedence, first match wins:
1. exact event type listed in a classification rule
2. any other non-empty event type -> generic event schema
3. no event type -> no specific schema (core validation only)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from models.classification import ClassifierConfig


class MatchKind(str, Enum):
    EXACT = "exact"
    GENERIC = "generic"
    NONE = "none"


@dataclass(frozen=True)
class ClassificationResult:
    schema_id: str | None
    matched_by: MatchKind
    event_type: str | None = None

    @property
    def resolved(self) -> bool:
        return self.schema_id is not None


class EventClassifier:
    """Resolves event records to schema identifiers using a ClassifierConfig."""

    def __init__(self, config: ClassifierConfig | None = None):
        self.config = config or ClassifierConfig.peevem_defaults()
        self._table = self.config.lookup_table()

    def event_type(self, event: Any) -> str | None:
        """The record's event type, or None when absent, empty or not a string."""
        if not isinstance(event, dict):
            return None
        value = event.get(self.config.event_field)
        if isinstance(value, str) and value:
            return value
        return None

    def classify(self, event: Any) -> ClassificationResult:
        event_type = self.event_type(event)
        if event_type is None:
            return ClassificationResult(None, MatchKind.NONE)

        schema_id = self._table.get(event_type)
        if schema_id is not None:
            return ClassificationResult(schema_id, MatchKind.EXACT, event_type)

        if self.config.generic_schema_id:
            return ClassificationResult(self.config.generic_schema_id, MatchKind.GENERIC, event_type)

        return ClassificationResult(None, MatchKind.NONE, event_type)
