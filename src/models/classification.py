"""
Classification Table - Declarative event type -> schema id mapping

Rules are evaluated before the generic "has an event field" fallback, so new
event kinds are added as new rules without touching the classifier.

Example JSON (the "classification" section of a config file):

    {
      "event_field": "event",
      "generic_schema_id": "https://peevem.org/schemas/event",
      "rules": [
        {"event_types": ["bookmark"], "schema_id": "https://peevem.org/schemas/bookmark"},
        {"event_types": ["contact_created", "contact_updated"],
         "schema_id": "https://peevem.org/schemas/contact"}
      ]
    }
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PEEVEM_BASE_URI = "https://peevem.org/schemas/"


class ClassificationRule(BaseModel):
    """Exact event types that map to one specific schema."""

    model_config = ConfigDict(frozen=True)

    event_types: tuple[str, ...] = Field(..., min_length=1, description="Exact event type values")
    schema_id: str = Field(..., min_length=1, description="Schema $id to validate with")

    @field_validator("event_types")
    @classmethod
    def _no_blank_types(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not t for t in value):
            raise ValueError("event_types must be non-empty strings")
        return value


class ClassifierConfig(BaseModel):
    """Ordered classification table plus the generic fallback."""

    model_config = ConfigDict(frozen=True)

    event_field: str = Field("event", min_length=1, description="Record field naming the event type")
    generic_schema_id: str | None = Field(
        None, description="Schema for events with a type no rule lists (None = core only)"
    )
    rules: tuple[ClassificationRule, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _unique_event_types(self) -> "ClassifierConfig":
        seen: dict[str, str] = {}
        for rule in self.rules:
            for event_type in rule.event_types:
                if event_type in seen:
                    raise ValueError(
                        f"Event type {event_type!r} mapped twice "
                        f"({seen[event_type]} and {rule.schema_id})"
                    )
                seen[event_type] = rule.schema_id
        return self

    def lookup_table(self) -> dict[str, str]:
        """Flatten rules into event type -> schema id."""
        return {
            event_type: rule.schema_id for rule in self.rules for event_type in rule.event_types
        }

    @classmethod
    def peevem_defaults(cls, base_uri: str = PEEVEM_BASE_URI) -> "ClassifierConfig":
        """The stock PEEVEM table: bookmark, contact, generic event."""
        return cls(
            generic_schema_id=f"{base_uri}event",
            rules=(
                ClassificationRule(event_types=("bookmark",), schema_id=f"{base_uri}bookmark"),
                ClassificationRule(
                    event_types=("contact_created", "contact_updated"),
                    schema_id=f"{base_uri}contact",
                ),
            ),
        )
