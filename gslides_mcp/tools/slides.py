"""
Slide tools: list, add, delete, duplicate and reorder slides.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from gslides_mcp.core.lookup import find_slide, iter_elements
from gslides_mcp.core.text import extract_text
from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    PresentationInput,
    SlideRefInput,
    ToolDefinition,
    batch_update,
    fetch_presentation
)
from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError, RemoteAPIError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import validate_choice

logger = get_logger(__name__)

LAYOUT_TYPES = [
    "BLANK",
    "CAPTION_ONLY",
    "TITLE",
    "TITLE_AND_BODY",
    "TITLE_AND_TWO_COLUMNS",
    "TITLE_ONLY",
    "ONE_COLUMN_TEXT",
    "MAIN_POINT",
    "BIG_NUMBER",
    "SECTION_HEADER",
    "SECTION_TITLE_AND_DESCRIPTION",
]

TITLE_PLACEHOLDERS = ("TITLE", "CENTERED_TITLE")


class ListSlidesInput(PresentationInput):
    include_thumbnails: bool = Field(default=False, description="Include a thumbnail URL for every slide")


class AddSlideInput(PresentationInput):
    position: int = Field(default=0, description="1-based position; 0 or past the end appends")
    layout: str = Field(default="BLANK", description=f"Layout type: {', '.join(LAYOUT_TYPES)}")


class DeleteSlideInput(SlideRefInput):
    pass


class DuplicateSlideInput(SlideRefInput):
    insert_at: int = Field(default=0, description="1-based position of the copy; 0 places it after the source")


class ReorderSlidesInput(PresentationInput):
    slide_indices: List[int] = Field(default_factory=list, description="1-based indices of slides to move")
    slide_ids: List[str] = Field(default_factory=list, description="Object IDs of slides to move")
    insert_at: int = Field(description="1-based position, in the current order, to move the slides before")


def _find_layout_id(layouts: List[Dict[str, Any]], layout_type: str) -> Optional[str]:
    for layout in layouts:
        if layout.get("layoutProperties", {}).get("name") == layout_type:
            return layout.get("objectId")
    return None


def add_slide(services: ServiceBundle, params: AddSlideInput) -> Dict[str, Any]:
    """
    Insert a new slide.

    The presentation's own layout with the requested name is preferred, then
    the first available layout, then the predefined layout.
    """
    layout_type = validate_choice(params.layout, LAYOUT_TYPES, "layout")
    if params.position < 0:
        raise InvalidArgumentError("position must be non-negative", field="position", value=params.position)

    presentation = fetch_presentation(services, params.presentation_id)
    slide_count = len(presentation.get("slides", []))

    if params.position == 0 or params.position > slide_count:
        insertion_index = slide_count
    else:
        insertion_index = params.position - 1

    layouts = presentation.get("layouts", [])
    layout_id = _find_layout_id(layouts, layout_type)
    if layout_id is None and layouts:
        layout_id = layouts[0].get("objectId")
        logger.warning(f"Layout {layout_type} not found, using first available layout {layout_id}")

    if layout_id:
        layout_reference = {"layoutId": layout_id}
    else:
        layout_reference = {"predefinedLayout": layout_type}

    slide_id = services.ids.new_id("slide")
    response = batch_update(services, params.presentation_id, [{
        "createSlide": {
            "objectId": slide_id,
            "insertionIndex": insertion_index,
            "slideLayoutReference": layout_reference,
        }
    }], action="add slide")

    replies = response.get("replies") or [{}]
    slide_id = replies[0].get("createSlide", {}).get("objectId", slide_id)

    logger.info(f"Added slide {slide_id} at position {insertion_index + 1}")
    return {"slide_index": insertion_index + 1, "slide_id": slide_id}


def delete_slide(services: ServiceBundle, params: DeleteSlideInput) -> Dict[str, Any]:
    presentation = fetch_presentation(services, params.presentation_id)
    slide, _ = find_slide(presentation, params.slide_index, params.slide_id)

    slide_count = len(presentation.get("slides", []))
    if slide_count <= 1:
        raise InvalidArgumentError("cannot delete the last remaining slide", field="slide_index")

    batch_update(services, params.presentation_id, [
        {"deleteObject": {"objectId": slide["objectId"]}}
    ], action="delete slide")

    logger.info(f"Deleted slide {slide['objectId']}")
    return {"deleted_slide_id": slide["objectId"], "remaining_slide_count": slide_count - 1}


def duplicate_slide(services: ServiceBundle, params: DuplicateSlideInput) -> Dict[str, Any]:
    """
    Duplicate a slide and optionally move the copy.

    The API places the copy right after the source. If moving it to the
    requested position fails, the copy stays there and that position is
    reported.
    """
    presentation = fetch_presentation(services, params.presentation_id)
    slide, source_index = find_slide(presentation, params.slide_index, params.slide_id)
    slide_count = len(presentation.get("slides", []))

    response = batch_update(services, params.presentation_id, [
        {"duplicateObject": {"objectId": slide["objectId"]}}
    ], action="duplicate slide")

    replies = response.get("replies") or [{}]
    new_slide_id = replies[0].get("duplicateObject", {}).get("objectId")
    if not new_slide_id:
        raise RemoteAPIError("failed to duplicate slide: no slide ID returned from API")

    current_index = source_index + 1
    if params.insert_at <= 0:
        target_index = current_index
    else:
        target_index = min(params.insert_at, slide_count + 1) - 1

    if target_index != current_index:
        # insertionIndex counts positions before the move, including the copy itself
        insertion_index = target_index if target_index < current_index else target_index + 1
        try:
            batch_update(services, params.presentation_id, [{
                "updateSlidesPosition": {
                    "slideObjectIds": [new_slide_id],
                    "insertionIndex": insertion_index,
                }
            }], action="move duplicated slide")
        except Exception as e:
            logger.warning(f"Failed to move duplicated slide {new_slide_id} to position {params.insert_at}: {e}")
            target_index = current_index

    logger.info(f"Duplicated slide {slide['objectId']} as {new_slide_id}")
    return {"slide_index": target_index + 1, "slide_id": new_slide_id}


def reorder_slides(services: ServiceBundle, params: ReorderSlidesInput) -> Dict[str, Any]:
    if not params.slide_indices and not params.slide_ids:
        raise InvalidArgumentError("either slide_indices or slide_ids is required", field="slide_indices")
    if params.insert_at < 1:
        raise InvalidArgumentError("insert_at must be at least 1", field="insert_at", value=params.insert_at)

    presentation = fetch_presentation(services, params.presentation_id)
    slides = presentation.get("slides", [])

    if params.slide_ids:
        existing = {slide.get("objectId") for slide in slides}
        for slide_id in params.slide_ids:
            if slide_id not in existing:
                raise NotFoundError(f"slide with ID '{slide_id}' not found")
        slide_ids = list(params.slide_ids)
    else:
        slide_ids = [find_slide(presentation, index)[0]["objectId"] for index in params.slide_indices]

    insert_at = min(params.insert_at, len(slides) + 1)
    batch_update(services, params.presentation_id, [{
        "updateSlidesPosition": {
            "slideObjectIds": slide_ids,
            "insertionIndex": insert_at - 1,
        }
    }], action="reorder slides")

    try:
        updated = services.slides.get_presentation(params.presentation_id)
    except Exception as e:
        logger.warning(f"Failed to fetch presentation after reorder: {e}")
        return {"new_order": []}

    return {
        "new_order": [
            {"index": position + 1, "slide_id": slide.get("objectId")}
            for position, slide in enumerate(updated.get("slides", []))
        ]
    }


def _layout_type(slide: Dict[str, Any], layouts: List[Dict[str, Any]]) -> Optional[str]:
    layout_id = slide.get("slideProperties", {}).get("layoutObjectId")
    for layout in layouts:
        if layout.get("objectId") == layout_id:
            properties = layout.get("layoutProperties", {})
            return properties.get("name") or properties.get("displayName")
    return None


def _slide_title(slide: Dict[str, Any]) -> str:
    for element in slide.get("pageElements", []):
        shape = element.get("shape", {})
        if shape.get("placeholder", {}).get("type") in TITLE_PLACEHOLDERS:
            return extract_text(shape.get("text"))
    return ""


def _has_notes(slide: Dict[str, Any]) -> bool:
    notes_page = slide.get("slideProperties", {}).get("notesPage") or {}
    return any(
        extract_text(element["shape"].get("text"))
        for element in notes_page.get("pageElements", [])
        if "shape" in element
    )


def list_slides(services: ServiceBundle, params: ListSlidesInput) -> Dict[str, Any]:
    """
    List slides with their title, layout and object count, plus deck statistics.

    A slide's title is the text of its TITLE or CENTERED_TITLE placeholder.
    Thumbnail failures are logged and leave the URL out.
    """
    presentation = fetch_presentation(services, params.presentation_id)
    layouts = presentation.get("layouts", [])
    slides = presentation.get("slides", [])

    items = []
    with_notes = with_videos = 0
    for position, slide in enumerate(slides):
        item: Dict[str, Any] = {
            "index": position + 1,
            "slide_id": slide.get("objectId"),
            "object_count": len(slide.get("pageElements", [])),
        }
        title = _slide_title(slide)
        if title:
            item["title"] = title
        layout_type = _layout_type(slide, layouts)
        if layout_type:
            item["layout_type"] = layout_type

        if _has_notes(slide):
            with_notes += 1
        if any("video" in element for element in iter_elements(slide.get("pageElements", []))):
            with_videos += 1

        if params.include_thumbnails:
            try:
                thumbnail = services.slides.get_thumbnail(params.presentation_id, slide["objectId"])
                item["thumbnail_url"] = thumbnail.get("contentUrl")
            except Exception as e:
                logger.warning(f"Failed to get thumbnail for slide {position + 1}: {e}")
        items.append(item)

    logger.info(f"Listed {len(items)} slides of {params.presentation_id}")
    return {
        "presentation_id": presentation.get("presentationId", params.presentation_id),
        "title": presentation.get("title", ""),
        "slides": items,
        "statistics": {
            "total_slides": len(items),
            "slides_with_notes": with_notes,
            "slides_with_videos": with_videos,
        },
    }


def get_slide_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "list_slides",
            "List slides with title, layout type and object count, plus notes and video statistics.",
            ListSlidesInput,
            list_slides,
            "slides"
        ),
        ToolDefinition(
            "add_slide",
            "Add a slide with the given layout at a 1-based position (default: end).",
            AddSlideInput,
            add_slide,
            "slides"
        ),
        ToolDefinition(
            "delete_slide",
            "Delete a slide by 1-based index or slide ID. The last slide cannot be deleted.",
            DeleteSlideInput,
            delete_slide,
            "slides"
        ),
        ToolDefinition(
            "duplicate_slide",
            "Duplicate a slide, placing the copy after the source or at insert_at.",
            DuplicateSlideInput,
            duplicate_slide,
            "slides"
        ),
        ToolDefinition(
            "reorder_slides",
            "Move one or more slides (by index or ID) to a new 1-based position.",
            ReorderSlidesInput,
            reorder_slides,
            "slides"
        ),
    ]
