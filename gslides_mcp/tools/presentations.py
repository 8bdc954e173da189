"""
Presentation-level tools: create a presentation and read its structure.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from gslides_mcp.core.lookup import iter_elements
from gslides_mcp.core.text import extract_text, object_type_of, table_text
from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    PRESENTATION_URL,
    PresentationInput,
    ToolDefinition,
    ToolInput,
    fetch_presentation,
    remote_errors
)
from gslides_mcp.utils.exceptions import ForbiddenError, NotFoundError, map_remote_error
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import validate_presentation_id, validate_required_text

logger = get_logger(__name__)


class CreatePresentationInput(ToolInput):
    title: str = Field(description="Presentation title")
    folder_id: Optional[str] = Field(default=None, description="Drive folder to move the presentation into")


class GetPresentationInput(PresentationInput):
    include_thumbnails: bool = Field(default=False, description="Include a thumbnail URL for every slide")


class CopyPresentationInput(ToolInput):
    source_id: str = Field(description="Presentation ID or URL to copy, e.g. a template")
    new_title: str = Field(description="Title of the copy")
    destination_folder_id: Optional[str] = Field(default=None, description="Drive folder for the copy")


def create_presentation(services: ServiceBundle, params: CreatePresentationInput) -> Dict[str, Any]:
    """
    Create a new empty presentation, optionally inside a Drive folder.

    A folder that is missing or inaccessible is an error. Any other failure
    to move the file is logged and the presentation stays in the root folder.
    """
    title = validate_required_text(params.title, "title").strip()
    logger.info(f"Creating presentation '{title}'")

    with remote_errors("presentation", "create presentation"):
        created = services.slides.create_presentation(title)

    presentation_id = created["presentationId"]
    result = {
        "presentation_id": presentation_id,
        "title": created.get("title", title),
        "url": PRESENTATION_URL.format(presentation_id=presentation_id),
    }

    if params.folder_id:
        try:
            with remote_errors("folder", "move presentation"):
                services.drive.move_file(presentation_id, params.folder_id)
        except (NotFoundError, ForbiddenError):
            raise
        except Exception as e:
            logger.warning(
                f"Failed to move presentation {presentation_id} to folder "
                f"{params.folder_id}, presentation created in root: {e}"
            )
        result["folder_id"] = params.folder_id

    logger.info(f"Created presentation {presentation_id}")
    return result


PARENT_ERROR_MARKERS = ("invalid parent", "parent not found")


def copy_presentation(services: ServiceBundle, params: CopyPresentationInput) -> Dict[str, Any]:
    """
    Copy a presentation through Drive, typically to start from a template.

    Errors that name the parent folder are reported against the destination
    folder rather than the source.
    """
    source_id = validate_presentation_id(params.source_id)
    title = validate_required_text(params.new_title, "new_title").strip()
    logger.info(f"Copying presentation {source_id} as '{title}'")

    try:
        copied = services.drive.copy_file(source_id, title, params.destination_folder_id)
    except Exception as e:
        if any(marker in str(e).lower() for marker in PARENT_ERROR_MARKERS):
            raise NotFoundError(
                f"destination folder not found or inaccessible: {e}",
                details={"destination_folder_id": params.destination_folder_id},
                cause=e
            ) from e
        raise map_remote_error(e, resource="source presentation", action="copy presentation") from e

    presentation_id = copied["id"]
    logger.info(f"Copied presentation {source_id} to {presentation_id}")
    return {
        "presentation_id": presentation_id,
        "title": copied.get("name", title),
        "url": PRESENTATION_URL.format(presentation_id=presentation_id),
        "source_id": source_id,
    }


def _speaker_notes(slide: Dict[str, Any]) -> str:
    notes_page = slide.get("slideProperties", {}).get("notesPage", {})
    notes_id = notes_page.get("notesProperties", {}).get("speakerNotesObjectId")
    for element in notes_page.get("pageElements", []):
        if element.get("objectId") == notes_id and "shape" in element:
            return extract_text(element["shape"].get("text"))
    return ""


def _page_content(elements: List[Dict[str, Any]]):
    text_blocks = []
    objects = []
    for element in iter_elements(elements):
        object_type = object_type_of(element)
        objects.append({"object_id": element.get("objectId"), "object_type": object_type})
        if "shape" in element:
            text = extract_text(element["shape"].get("text"))
        elif "table" in element:
            text = "\n".join(" | ".join(row) for row in table_text(element["table"])).strip()
        else:
            text = ""
        if text:
            text_blocks.append({
                "object_id": element.get("objectId"),
                "object_type": object_type,
                "text": text,
            })
    return text_blocks, objects


def get_presentation(services: ServiceBundle, params: GetPresentationInput) -> Dict[str, Any]:
    """Summarize a presentation: page size, slides with text and notes, masters and layouts."""
    presentation = fetch_presentation(services, params.presentation_id)
    layouts = presentation.get("layouts", [])
    layout_names = {
        layout.get("objectId"): layout.get("layoutProperties", {}).get("displayName")
        for layout in layouts
    }

    slides = []
    for position, slide in enumerate(presentation.get("slides", [])):
        layout_id = slide.get("slideProperties", {}).get("layoutObjectId")
        text_content, objects = _page_content(slide.get("pageElements", []))
        info = {
            "index": position + 1,
            "object_id": slide.get("objectId"),
            "layout_id": layout_id,
            "layout_name": layout_names.get(layout_id),
            "text_content": text_content,
            "speaker_notes": _speaker_notes(slide),
            "object_count": len(slide.get("pageElements", [])),
            "objects": objects,
        }
        if params.include_thumbnails:
            try:
                with remote_errors("slide", "get thumbnail"):
                    thumbnail = services.slides.get_thumbnail(params.presentation_id, slide["objectId"])
                info["thumbnail_url"] = thumbnail.get("contentUrl")
            except Exception as e:
                logger.warning(f"Failed to get thumbnail for slide {position + 1}: {e}")
        slides.append(info)

    return {
        "presentation_id": presentation.get("presentationId", params.presentation_id),
        "title": presentation.get("title", ""),
        "locale": presentation.get("locale"),
        "slides_count": len(slides),
        "page_size": presentation.get("pageSize"),
        "slides": slides,
        "masters": [
            {
                "object_id": master.get("objectId"),
                "name": master.get("masterProperties", {}).get("displayName"),
            }
            for master in presentation.get("masters", [])
        ],
        "layouts": [
            {
                "object_id": layout.get("objectId"),
                "name": layout.get("layoutProperties", {}).get("displayName"),
                "master_id": layout.get("layoutProperties", {}).get("masterObjectId"),
                "layout_type": layout.get("layoutProperties", {}).get("name"),
            }
            for layout in layouts
        ],
    }


def get_presentation_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "create_presentation",
            "Create a new empty Google Slides presentation, optionally inside a Drive folder.",
            CreatePresentationInput,
            create_presentation,
            "presentation"
        ),
        ToolDefinition(
            "get_presentation",
            "Get the structure of a presentation: slides, their text, speaker notes, layouts and masters.",
            GetPresentationInput,
            get_presentation,
            "presentation"
        ),
        ToolDefinition(
            "copy_presentation",
            "Copy a presentation, e.g. a template, under a new title and optionally into a Drive folder.",
            CopyPresentationInput,
            copy_presentation,
            "presentation"
        ),
    ]
