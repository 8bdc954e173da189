"""
Text tools: search, replace and speaker notes.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from gslides_mcp.core.lookup import find_element, find_slide, iter_elements
from gslides_mcp.core.text import extract_text, object_type_of, raw_text, table_cells, utf16_len
from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    PresentationInput,
    SlideRefInput,
    ToolDefinition,
    batch_update,
    fetch_presentation
)
from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import validate_choice

logger = get_logger(__name__)

CONTEXT_CHARS = 50
REPLACE_SCOPES = ["all", "slide", "object"]
NOTES_ACTIONS = ["get", "set", "append", "clear"]


class SearchTextInput(PresentationInput):
    query: str = Field(description="Text to search for")
    case_sensitive: bool = False


class ReplaceTextInput(PresentationInput):
    find: str = Field(description="Text to find")
    replace_with: str = Field(default="", description="Replacement text")
    case_sensitive: bool = False
    scope: str = Field(default="all", description="all, slide or object")
    slide_id: Optional[str] = Field(default=None, description="Slide ID (scope slide)")
    object_id: Optional[str] = Field(default=None, description="Object ID (scope object)")


class ManageSpeakerNotesInput(SlideRefInput):
    action: str = Field(description="get, set, append or clear")
    notes_text: Optional[str] = Field(default=None, description="Text for set and append")


def match_context(text: str, start: int, length: int, context_chars: int = CONTEXT_CHARS) -> str:
    """Text around a match, with "..." where the window was cut."""
    begin = max(start - context_chars, 0)
    end = min(start + length + context_chars, len(text))
    prefix = "..." if begin > 0 else ""
    suffix = "..." if end < len(text) else ""
    return prefix + text[begin:end].strip() + suffix


def find_matches(text: str, query: str, case_sensitive: bool = False) -> List[Tuple[int, str]]:
    """
    Find every occurrence of query in text, overlapping ones included.

    Returns:
        List of (start_index, context) tuples; start_index counts UTF-16
        code units like the Slides API text indices
    """
    if not text or not query:
        return []

    haystack, needle = (text, query) if case_sensitive else (text.lower(), query.lower())
    matches = []
    position = haystack.find(needle)
    while position != -1:
        matches.append((utf16_len(text[:position]), match_context(text, position, len(query))))
        position = haystack.find(needle, position + 1)
    return matches


def _search_elements(elements: List[Dict[str, Any]], query: str, case_sensitive: bool) -> List[Dict[str, Any]]:
    matches = []
    for element in iter_elements(elements):
        object_id = element.get("objectId")
        if "shape" in element and element["shape"].get("text"):
            text = raw_text(element["shape"]["text"])
            for start, context in find_matches(text, query, case_sensitive):
                matches.append({
                    "object_id": object_id,
                    "object_type": object_type_of(element),
                    "start_index": start,
                    "text_context": context,
                })
        if "table" in element:
            for row, column, cell in table_cells(element["table"]):
                text = raw_text(cell.get("text"))
                for start, context in find_matches(text, query, case_sensitive):
                    matches.append({
                        "object_id": "%s[%d,%d]" % (object_id, row, column),
                        "object_type": "TABLE_CELL",
                        "start_index": start,
                        "text_context": context,
                    })
    return matches


def search_text(services: ServiceBundle, params: SearchTextInput) -> Dict[str, Any]:
    """Search slides and their speaker notes; results are grouped by slide."""
    if not params.query:
        raise InvalidArgumentError("query is required", field="query")

    logger.info(f"Searching '{params.query}' in {params.presentation_id}")
    presentation = fetch_presentation(services, params.presentation_id)

    results = []
    total = 0
    for position, slide in enumerate(presentation.get("slides", [])):
        matches = _search_elements(slide.get("pageElements", []), params.query, params.case_sensitive)

        notes_page = slide.get("slideProperties", {}).get("notesPage", {})
        for match in _search_elements(notes_page.get("pageElements", []), params.query, params.case_sensitive):
            match["object_type"] = "SPEAKER_NOTES:" + match["object_type"]
            matches.append(match)

        if matches:
            results.append({"slide_index": position + 1, "slide_id": slide.get("objectId"), "matches": matches})
            total += len(matches)

    logger.info(f"Found {total} matches on {len(results)} slides")
    return {
        "presentation_id": params.presentation_id,
        "query": params.query,
        "case_sensitive": params.case_sensitive,
        "total_matches": total,
        "results": results,
    }


def _contains(text: str, find: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return find in text
    return find.lower() in text.lower()


def _element_contains(element: Dict[str, Any], find: str, case_sensitive: bool) -> bool:
    if "shape" in element and _contains(extract_text(element["shape"].get("text")), find, case_sensitive):
        return True
    if "table" in element:
        return any(
            _contains(extract_text(cell.get("text")), find, case_sensitive)
            for _, _, cell in table_cells(element["table"])
        )
    return False


def _affected_objects(slides: List[Dict[str, Any]], params: ReplaceTextInput, scope: str) -> List[Dict[str, Any]]:
    affected = []
    for position, slide in enumerate(slides):
        if scope == "slide" and slide.get("objectId") != params.slide_id:
            continue
        for element in iter_elements(slide.get("pageElements", [])):
            if scope == "object" and element.get("objectId") != params.object_id:
                continue
            if _element_contains(element, params.find, params.case_sensitive):
                affected.append({
                    "object_id": element.get("objectId"),
                    "object_type": object_type_of(element),
                    "slide_index": position + 1,
                    "slide_id": slide.get("objectId"),
                })
    return affected


def replace_text(services: ServiceBundle, params: ReplaceTextInput) -> Dict[str, Any]:
    """
    Replace all occurrences of a string.

    The API can only restrict replacement to whole pages, so scope "object"
    replaces on the slide containing the object.
    """
    if not params.find:
        raise InvalidArgumentError("find text cannot be empty", field="find")
    scope = validate_choice(params.scope or "all", REPLACE_SCOPES, "scope", upper=False)
    if scope == "slide" and not params.slide_id:
        raise InvalidArgumentError("slide_id is required when scope is 'slide'", field="slide_id")
    if scope == "object" and not params.object_id:
        raise InvalidArgumentError("object_id is required when scope is 'object'", field="object_id")

    presentation = fetch_presentation(services, params.presentation_id)
    slides = presentation.get("slides", [])

    page_ids: List[str] = []
    if scope == "slide":
        slide, _ = find_slide(presentation, slide_id=params.slide_id)
        page_ids = [slide["objectId"]]
    elif scope == "object":
        location = find_element(presentation, params.object_id, pages=("slides",))
        page_ids = [location.page["objectId"]]

    affected = _affected_objects(slides, params, scope)

    request: Dict[str, Any] = {
        "containsText": {"text": params.find, "matchCase": params.case_sensitive},
        "replaceText": params.replace_with,
    }
    if page_ids:
        request["pageObjectIds"] = page_ids

    response = batch_update(services, params.presentation_id, [{"replaceAllText": request}], action="replace text")
    replies = response.get("replies") or [{}]
    count = replies[0].get("replaceAllText", {}).get("occurrencesChanged", 0)

    logger.info(f"Replaced {count} occurrences of '{params.find}' ({scope})")
    return {
        "presentation_id": params.presentation_id,
        "find": params.find,
        "replace_with": params.replace_with,
        "case_sensitive": params.case_sensitive,
        "scope": scope,
        "replacement_count": count,
        "affected_objects": affected,
    }


def find_notes_shape(slide: Dict[str, Any]) -> Tuple[Optional[str], str]:
    """
    Locate the speaker notes shape of a slide.

    The notes page's speakerNotesObjectId wins, then the BODY placeholder,
    then the first shape that is not some other placeholder.

    Returns:
        (shape object ID or None, raw notes text)
    """
    notes_page = slide.get("slideProperties", {}).get("notesPage") or {}
    shapes = [element for element in notes_page.get("pageElements", []) if "shape" in element]
    notes_id = notes_page.get("notesProperties", {}).get("speakerNotesObjectId")

    candidates = (
        [shape for shape in shapes if notes_id and shape.get("objectId") == notes_id]
        + [shape for shape in shapes if shape["shape"].get("placeholder", {}).get("type") == "BODY"]
        + [shape for shape in shapes if "placeholder" not in shape["shape"]]
    )
    if not candidates:
        return None, ""
    shape = candidates[0]
    return shape.get("objectId"), raw_text(shape["shape"].get("text"))


def manage_speaker_notes(services: ServiceBundle, params: ManageSpeakerNotesInput) -> Dict[str, Any]:
    action = validate_choice(params.action, NOTES_ACTIONS, "action", upper=False)
    if action in ("set", "append") and not params.notes_text:
        raise InvalidArgumentError(f"notes_text is required for '{action}' action", field="notes_text")

    presentation = fetch_presentation(services, params.presentation_id)
    slide, position = find_slide(presentation, params.slide_index, params.slide_id)
    shape_id, current = find_notes_shape(slide)
    # Notes text always ends with a newline that cannot be edited
    current = current[:-1] if current.endswith("\n") else current

    result = {"slide_id": slide.get("objectId"), "slide_index": position + 1, "action": action}
    if action == "get":
        result["notes_content"] = current.strip()
        return result

    if not shape_id:
        raise NotFoundError(f"no speaker notes placeholder found on slide {position + 1}")

    requests: List[Dict[str, Any]] = []
    if action in ("set", "clear") and current:
        requests.append({"deleteText": {"objectId": shape_id, "textRange": {"type": "ALL"}}})

    if action == "set":
        requests.append({"insertText": {"objectId": shape_id, "insertionIndex": 0, "text": params.notes_text}})
        notes = params.notes_text
    elif action == "append":
        requests.append({
            "insertText": {"objectId": shape_id, "insertionIndex": utf16_len(current), "text": params.notes_text}
        })
        notes = current + params.notes_text
    else:
        notes = ""

    if requests:
        batch_update(services, params.presentation_id, requests, action="update speaker notes")

    logger.info(f"Speaker notes on slide {position + 1}: {action}")
    result["notes_content"] = notes
    return result


def get_text_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "search_text",
            "Search text across all slides, tables and speaker notes, with surrounding context.",
            SearchTextInput,
            search_text,
            "text"
        ),
        ToolDefinition(
            "replace_text",
            "Replace all occurrences of text in the presentation, a slide or the slide holding an object.",
            ReplaceTextInput,
            replace_text,
            "text"
        ),
        ToolDefinition(
            "manage_speaker_notes",
            "Get, set, append to or clear a slide's speaker notes.",
            ManageSpeakerNotesInput,
            manage_speaker_notes,
            "text"
        ),
    ]
