"""
Tests for EventClassifier
"""

from models.classification import ClassificationRule, ClassifierConfig
from services.schema_validator.classifier import ClassificationResult, EventClassifier, MatchKind

BASE = "https://peevem.org/schemas/"


class TestEventType:
    def setup_method(self):
        self.classifier = EventClassifier()

    def test_string_event(self):
        assert self.classifier.event_type({"event": "bookmark"}) == "bookmark"

    def test_missing_empty_or_non_string(self):
        assert self.classifier.event_type({}) is None
        assert self.classifier.event_type({"event": ""}) is None
        assert self.classifier.event_type({"event": 3}) is None
        assert self.classifier.event_type({"event": None}) is None

    def test_non_object_record(self):
        assert self.classifier.event_type(["event"]) is None
        assert self.classifier.event_type("bookmark") is None


class TestClassify:
    """Default PEEVEM table"""

    def setup_method(self):
        self.classifier = EventClassifier()

    def test_bookmark_exact(self):
        result = self.classifier.classify({"event": "bookmark"})
        assert result == ClassificationResult(f"{BASE}bookmark", MatchKind.EXACT, "bookmark")
        assert result.resolved

    def test_contact_types_share_schema(self):
        created = self.classifier.classify({"event": "contact_created"})
        updated = self.classifier.classify({"event": "contact_updated"})
        assert created.schema_id == updated.schema_id == f"{BASE}contact"

    def test_contact_prefix_is_not_exact(self):
        """Only listed types match; 'contact_deleted' falls to the generic schema."""
        result = self.classifier.classify({"event": "contact_deleted"})
        assert result.matched_by == MatchKind.GENERIC
        assert result.schema_id == f"{BASE}event"

    def test_generic(self):
        result = self.classifier.classify({"event": "page_view"})
        assert result.matched_by == MatchKind.GENERIC
        assert result.event_type == "page_view"

    def test_none(self):
        result = self.classifier.classify({"id": "x"})
        assert result.matched_by == MatchKind.NONE
        assert result.schema_id is None
        assert not result.resolved

    def test_deterministic(self):
        event = {"event": "bookmark"}
        assert self.classifier.classify(event) == self.classifier.classify(dict(event))


class TestCustomConfig:
    def test_custom_field_and_no_generic(self):
        config = ClassifierConfig(
            event_field="type",
            rules=(ClassificationRule(event_types=("note",), schema_id="urn:note"),),
        )
        classifier = EventClassifier(config)

        assert classifier.classify({"type": "note"}).schema_id == "urn:note"
        # 'event' is not the configured field
        assert classifier.classify({"event": "note"}).matched_by == MatchKind.NONE

        unknown = classifier.classify({"type": "other"})
        assert unknown.matched_by == MatchKind.NONE
        assert unknown.event_type == "other"

    def test_custom_base_uri(self):
        classifier = EventClassifier(ClassifierConfig.peevem_defaults("urn:peevem:"))
        assert classifier.classify({"event": "bookmark"}).schema_id == "urn:peevem:bookmark"
        assert classifier.classify({"event": "x"}).schema_id == "urn:peevem:event"
