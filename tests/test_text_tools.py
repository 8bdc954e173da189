"""
Tests for search, replace and speaker notes tools.
"""

import pytest

from conftest import sent_requests, text_content
from gslides_mcp.tools.text import (
    ManageSpeakerNotesInput,
    ReplaceTextInput,
    SearchTextInput,
    find_matches,
    find_notes_shape,
    manage_speaker_notes,
    match_context,
    replace_text,
    search_text
)
from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError


# ============================================================================
# Matching helpers
# ============================================================================

def test_find_matches_overlapping():
    """Test overlapping occurrences are all reported."""
    assert [start for start, _ in find_matches("aaaa", "aa")] == [0, 1, 2]


def test_find_matches_case():
    """Test case sensitivity."""
    assert len(find_matches("Report report", "report")) == 2
    assert len(find_matches("Report report", "report", case_sensitive=True)) == 1
    assert find_matches("", "x") == []


def test_match_context_is_trimmed():
    """Test the context window is cut with ellipses."""
    text = "x" * 60 + "needle" + "y" * 60
    context = match_context(text, 60, 6)
    assert context == "..." + "x" * 50 + "needle" + "y" * 50 + "..."
    assert match_context("a needle b", 2, 6) == "a needle b"


def test_find_matches_counts_utf16_units():
    """Test offsets after astral characters count two units per surrogate pair."""
    assert [start for start, _ in find_matches("😀 report", "report")] == [3]
    assert [start for start, _ in find_matches("é😀😀x", "x")] == [5]


# ============================================================================
# search_text
# ============================================================================

class TestSearchText:
    """Searching slides, tables and notes."""

    def test_finds_shapes_groups_and_notes(self, mock_services):
        result = search_text(mock_services, SearchTextInput(presentation_id="pres-123", query="report"))

        assert result["total_matches"] == 3
        assert len(result["results"]) == 1
        slide = result["results"][0]
        assert (slide["slide_index"], slide["slide_id"]) == (1, "slide_1")
        found = [(match["object_id"], match["object_type"], match["start_index"]) for match in slide["matches"]]
        assert found == [
            ("title_1", "TEXT_BOX", 10),
            ("group_shape", "RECTANGLE", 0),
            ("notes_body_1", "SPEAKER_NOTES:TEXT_BOX", 12),
        ]

    def test_case_sensitive(self, mock_services):
        result = search_text(mock_services, SearchTextInput(presentation_id="pres-123", query="Report", case_sensitive=True))
        assert result["total_matches"] == 1
        assert result["case_sensitive"] is True

    def test_table_cells(self, mock_services):
        result = search_text(mock_services, SearchTextInput(presentation_id="pres-123", query="north"))

        match = result["results"][0]["matches"][0]
        assert match["object_id"] == "table_1[1,0]"
        assert match["object_type"] == "TABLE_CELL"
        assert match["text_context"] == "North"

    def test_offsets_after_emoji(self, mock_services, presentation):
        presentation["slides"][0]["pageElements"][0]["shape"]["text"] = text_content("😀 Quarterly Report\n")
        result = search_text(mock_services, SearchTextInput(presentation_id="pres-123", query="quarterly"))
        assert result["results"][0]["matches"][0]["start_index"] == 3

    def test_no_matches(self, mock_services):
        result = search_text(mock_services, SearchTextInput(presentation_id="pres-123", query="zebra"))
        assert result["total_matches"] == 0
        assert result["results"] == []

    def test_empty_query(self, mock_services):
        with pytest.raises(InvalidArgumentError):
            search_text(mock_services, SearchTextInput(presentation_id="pres-123", query=""))


# ============================================================================
# replace_text
# ============================================================================

class TestReplaceText:
    """Replace-all requests."""

    def test_replace_everywhere(self, mock_services):
        mock_services.slides.batch_update.return_value = {"replies": [{"replaceAllText": {"occurrencesChanged": 2}}]}

        result = replace_text(mock_services, ReplaceTextInput(presentation_id="pres-123", find="report", replace_with="summary"))

        assert sent_requests(mock_services) == [{
            "replaceAllText": {
                "containsText": {"text": "report", "matchCase": False},
                "replaceText": "summary",
            }
        }]
        assert result["replacement_count"] == 2
        assert result["scope"] == "all"
        assert [item["object_id"] for item in result["affected_objects"]] == ["title_1", "group_shape"]

    def test_slide_scope(self, mock_services):
        result = replace_text(mock_services, ReplaceTextInput(
            presentation_id="pres-123", find="North", replace_with="South", case_sensitive=True,
            scope="slide", slide_id="slide_1"
        ))

        request = sent_requests(mock_services)[0]["replaceAllText"]
        assert request["pageObjectIds"] == ["slide_1"]
        assert request["containsText"]["matchCase"] is True
        assert result["affected_objects"] == [
            {"object_id": "table_1", "object_type": "TABLE", "slide_index": 1, "slide_id": "slide_1"}
        ]
        assert result["replacement_count"] == 0

    def test_object_scope_targets_containing_slide(self, mock_services):
        result = replace_text(mock_services, ReplaceTextInput(
            presentation_id="pres-123", find="report", scope="object", object_id="group_shape"
        ))

        assert sent_requests(mock_services)[0]["replaceAllText"]["pageObjectIds"] == ["slide_1"]
        assert [item["object_id"] for item in result["affected_objects"]] == ["group_shape"]

    def test_scope_requires_reference(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="slide_id is required"):
            replace_text(mock_services, ReplaceTextInput(presentation_id="pres-123", find="x", scope="slide"))
        with pytest.raises(InvalidArgumentError, match="object_id is required"):
            replace_text(mock_services, ReplaceTextInput(presentation_id="pres-123", find="x", scope="object"))

    def test_unknown_slide(self, mock_services):
        with pytest.raises(NotFoundError):
            replace_text(mock_services, ReplaceTextInput(presentation_id="pres-123", find="x", scope="slide", slide_id="ghost"))

    def test_object_on_layout_is_not_a_slide_object(self, mock_services):
        with pytest.raises(NotFoundError):
            replace_text(mock_services, ReplaceTextInput(
                presentation_id="pres-123", find="x", scope="object", object_id="layout_title_placeholder"
            ))

    def test_empty_find(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="cannot be empty"):
            replace_text(mock_services, ReplaceTextInput(presentation_id="pres-123", find=""))

    def test_invalid_scope(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="scope"):
            replace_text(mock_services, ReplaceTextInput(presentation_id="pres-123", find="x", scope="deck"))


# ============================================================================
# Speaker notes
# ============================================================================

def notes_slide(*shapes, notes_id=None):
    notes_page = {"pageElements": list(shapes)}
    if notes_id:
        notes_page["notesProperties"] = {"speakerNotesObjectId": notes_id}
    return {"objectId": "s", "slideProperties": {"notesPage": notes_page}}


def notes_shape(object_id, placeholder=None, text=None):
    shape = {"shapeType": "TEXT_BOX"}
    if placeholder:
        shape["placeholder"] = {"type": placeholder}
    if text is not None:
        shape["text"] = text_content(text)
    return {"objectId": object_id, "shape": shape}


class TestFindNotesShape:
    """Notes shape priority."""

    def test_declared_notes_shape_wins(self):
        slide = notes_slide(notes_shape("body", "BODY", "a\n"), notes_shape("declared", text="b\n"), notes_id="declared")
        assert find_notes_shape(slide) == ("declared", "b\n")

    def test_body_placeholder(self):
        slide = notes_slide(notes_shape("image", "SLIDE_IMAGE"), notes_shape("plain"), notes_shape("body", "BODY"))
        assert find_notes_shape(slide) == ("body", "")

    def test_first_plain_shape(self):
        slide = notes_slide(notes_shape("image", "SLIDE_IMAGE"), notes_shape("plain", text="x"))
        assert find_notes_shape(slide) == ("plain", "x")

    def test_no_notes_page(self):
        assert find_notes_shape({"objectId": "s"}) == (None, "")


class TestManageSpeakerNotes:
    """Reading and editing speaker notes."""

    def test_get(self, mock_services):
        result = manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
            presentation_id="pres-123", slide_index=1, action="get"
        ))
        assert result == {
            "slide_id": "slide_1",
            "slide_index": 1,
            "action": "get",
            "notes_content": "Mention the report deadline",
        }
        mock_services.slides.batch_update.assert_not_called()

    def test_get_without_notes_page(self, mock_services):
        result = manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
            presentation_id="pres-123", slide_id="slide_2", action="get"
        ))
        assert result["notes_content"] == ""

    def test_set_replaces_existing(self, mock_services):
        result = manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
            presentation_id="pres-123", slide_index=1, action="set", notes_text="New notes"
        ))

        assert sent_requests(mock_services) == [
            {"deleteText": {"objectId": "notes_body_1", "textRange": {"type": "ALL"}}},
            {"insertText": {"objectId": "notes_body_1", "insertionIndex": 0, "text": "New notes"}},
        ]
        assert result["notes_content"] == "New notes"

    def test_append_after_existing_text(self, mock_services):
        result = manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
            presentation_id="pres-123", slide_index=1, action="append", notes_text=" by Friday"
        ))

        assert sent_requests(mock_services) == [
            {"insertText": {"objectId": "notes_body_1", "insertionIndex": 27, "text": " by Friday"}},
        ]
        assert result["notes_content"] == "Mention the report deadline by Friday"

    def test_append_after_emoji_counts_utf16_units(self, mock_services, presentation):
        presentation["slides"][0]["slideProperties"]["notesPage"]["pageElements"][0]["shape"]["text"] = (
            text_content("Hi 😀\n")
        )
        manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
            presentation_id="pres-123", slide_index=1, action="append", notes_text="!"
        ))
        assert sent_requests(mock_services) == [
            {"insertText": {"objectId": "notes_body_1", "insertionIndex": 5, "text": "!"}},
        ]

    def test_clear(self, mock_services):
        result = manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
            presentation_id="pres-123", slide_index=1, action="clear"
        ))
        assert sent_requests(mock_services) == [
            {"deleteText": {"objectId": "notes_body_1", "textRange": {"type": "ALL"}}}
        ]
        assert result["notes_content"] == ""

    def test_clear_empty_notes_sends_nothing(self, mock_services, presentation):
        presentation["slides"][2]["slideProperties"]["notesPage"] = {
            "pageElements": [notes_shape("notes_body_3", "BODY", "\n")]
        }
        manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
            presentation_id="pres-123", slide_index=3, action="clear"
        ))
        mock_services.slides.batch_update.assert_not_called()

    def test_set_without_notes_shape(self, mock_services):
        with pytest.raises(NotFoundError, match="no speaker notes placeholder found on slide 2"):
            manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
                presentation_id="pres-123", slide_index=2, action="set", notes_text="x"
            ))

    def test_set_requires_text(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="notes_text is required"):
            manage_speaker_notes(mock_services, ManageSpeakerNotesInput(
                presentation_id="pres-123", slide_index=1, action="append"
            ))
