"""
Tests for the Note model, patches and enrichment results.
"""

from datetime import datetime, timezone

import pytest

from quicknotes.models import EnrichResult, Note, NotePatch
from quicknotes.models.note import decode_tags, encode_tags
from quicknotes.utils.exceptions import ValidationError

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_note(**overrides) -> Note:
    fields = {
        "id": "note_1",
        "text": "Project Alpha kickoff",
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Note(**fields)


@pytest.mark.unit
class TestNoteModel:
    """Tests for Note construction and serialization."""

    def test_absent_metadata(self):
        """A fresh note has no summary and no tags."""
        note = make_note()

        assert note.summary is None
        assert note.tags is None

    def test_accepts_camel_case_input(self):
        """Timestamps can be provided with their external names."""
        note = Note(id="note_1", text="hi", createdAt=NOW, updatedAt=NOW)

        assert note.created_at == NOW
        assert note.updated_at == NOW

    def test_to_dict_uses_camel_case_and_omits_absent_fields(self):
        """External representation: camelCase keys, no null summary/tags."""
        data = make_note().to_dict()

        assert data["id"] == "note_1"
        assert "createdAt" in data
        assert "updatedAt" in data
        assert "summary" not in data
        assert "tags" not in data

    def test_to_dict_includes_metadata_when_present(self):
        """Summary and tags appear once set."""
        data = make_note(summary="Kickoff", tags=["alpha"]).to_dict()

        assert data["summary"] == "Kickoff"
        assert data["tags"] == ["alpha"]


@pytest.mark.unit
class TestNoteMatches:
    """Tests for the shared search predicate."""

    def test_no_filters_matches_everything(self):
        """None and blank filters are ignored."""
        note = make_note()

        assert note.matches()
        assert note.matches(query="", tag="   ")

    def test_query_is_case_insensitive_substring_of_text(self):
        """Query matches text regardless of case."""
        note = make_note()

        assert note.matches(query="alpha")
        assert note.matches(query="ALPHA")
        assert not note.matches(query="beta")

    def test_query_matches_summary_and_tags(self):
        """Query also looks at summary and every tag."""
        note = make_note(summary="Quarterly planning", tags=["roadmap"])

        assert note.matches(query="quarterly")
        assert note.matches(query="MAP")

    def test_tag_filter_is_exact_and_case_insensitive(self):
        """Tag filter requires a whole-tag match."""
        note = make_note(tags=["alpha", "beta"])

        assert note.matches(tag="ALPHA")
        assert not note.matches(tag="alp")
        assert not note.matches(tag="gamma")

    def test_tag_filter_without_tags(self):
        """A note without tags never passes a tag filter."""
        assert not make_note().matches(tag="alpha")

    def test_filters_are_anded(self):
        """Both filters must pass."""
        note = make_note(tags=["alpha"])

        assert note.matches(query="kickoff", tag="alpha")
        assert not note.matches(query="missing", tag="alpha")
        assert not note.matches(query="kickoff", tag="beta")


@pytest.mark.unit
class TestNotePatch:
    """Tests for partial updates."""

    def test_only_set_fields_are_changes(self):
        """Omitted fields are not part of the change set."""
        assert NotePatch(summary="s").changes() == {"summary": "s"}

    def test_empty_patch(self):
        """An empty patch changes nothing."""
        assert NotePatch().changes() == {}

    def test_explicit_none_clears(self):
        """An explicit None is kept so it can clear the field."""
        assert NotePatch(tags=None).changes() == {"tags": None}

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_text_rejected(self, text):
        """Text, when present, must not be empty."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            NotePatch(text=text).changes()

    def test_enrich_result_as_patch(self):
        """Enrichment output becomes a summary + tags patch."""
        patch = EnrichResult(summary="Short", tags=["a", "b"]).as_patch()

        assert patch.changes() == {"summary": "Short", "tags": ["a", "b"]}


@pytest.mark.unit
class TestTagEncoding:
    """Tests for the relational tags column format."""

    def test_encode_none(self):
        """Absent tags are stored as NULL."""
        assert encode_tags(None) is None

    def test_encode_keeps_order_and_unicode(self):
        """Tags are JSON text, order and non-ASCII preserved."""
        assert encode_tags(["über", "alpha"]) == '["über", "alpha"]'

    def test_decode(self):
        """JSON text and pre-decoded lists are both accepted."""
        assert decode_tags('["a", "b"]') == ["a", "b"]
        assert decode_tags(["a"]) == ["a"]
        assert decode_tags(None) is None
        assert decode_tags("") is None

    def test_empty_list_is_not_absent(self):
        """An empty tag list survives encoding."""
        assert decode_tags(encode_tags([])) == []
