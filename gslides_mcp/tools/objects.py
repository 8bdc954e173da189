"""
Page element tools: text boxes, images, videos, shapes, lines, deletion and inspection.
"""

import base64
import binascii
from typing import Any, Dict, List, Optional

from pydantic import Field

from gslides_mcp.core.colors import hex_from_api_color, require_color, rgb_color
from gslides_mcp.core.lookup import collect_object_ids, find_element, find_slide
from gslides_mcp.core.text import content_preview, extract_text, object_type_of, table_text
from gslides_mcp.core.units import element_properties, size_points, transform_offset_points
from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    DRIVE_IMAGE_URL,
    PositionInput,
    PresentationInput,
    SizeInput,
    SlideRefInput,
    ToolDefinition,
    ToolInput,
    batch_update,
    fetch_presentation,
    upload_public_image
)
from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import (
    validate_choice,
    validate_non_negative,
    validate_positive,
    validate_required_text
)

logger = get_logger(__name__)

SHAPE_TYPES = [
    # Basic shapes
    "RECTANGLE", "ROUND_RECTANGLE", "ELLIPSE", "TRIANGLE", "RIGHT_TRIANGLE", "DIAMOND",
    "PENTAGON", "HEXAGON", "HEPTAGON", "OCTAGON", "DECAGON", "DODECAGON",
    "PARALLELOGRAM", "TRAPEZOID", "CAN", "CUBE", "DONUT", "HEART", "MOON", "SUN",
    "CLOUD", "SMILEY_FACE", "LIGHTNING_BOLT", "PLUS", "FRAME", "PLAQUE",
    # Stars
    "STAR_4", "STAR_5", "STAR_6", "STAR_7", "STAR_8", "STAR_10", "STAR_12",
    "STAR_16", "STAR_24", "STAR_32",
    # Arrows
    "ARROW_RIGHT", "ARROW_LEFT", "ARROW_UP", "ARROW_DOWN", "ARROW_LEFT_RIGHT",
    "ARROW_UP_DOWN", "NOTCHED_RIGHT_ARROW", "BENT_ARROW", "U_TURN_ARROW",
    "CURVED_RIGHT_ARROW", "CURVED_LEFT_ARROW", "CURVED_UP_ARROW", "CURVED_DOWN_ARROW",
    "STRIPED_RIGHT_ARROW", "CHEVRON", "HOME_PLATE",
    # Callouts and flowchart
    "WEDGE_RECTANGLE_CALLOUT", "WEDGE_ROUND_RECTANGLE_CALLOUT", "WEDGE_ELLIPSE_CALLOUT",
    "CLOUD_CALLOUT", "FLOW_CHART_PROCESS", "FLOW_CHART_DECISION",
    "FLOW_CHART_INPUT_OUTPUT", "FLOW_CHART_TERMINATOR", "FLOW_CHART_DOCUMENT",
    "FLOW_CHART_CONNECTOR",
]

VIDEO_SOURCES = ["YOUTUBE", "DRIVE"]

DASH_STYLES = ["SOLID", "DOT", "DASH", "DASH_DOT", "LONG_DASH", "LONG_DASH_DOT"]

LINE_CATEGORIES = {"STRAIGHT": "STRAIGHT", "CURVED": "CURVED", "ELBOW": "BENT", "BENT": "BENT"}

ARROW_STYLES = {
    "NONE": "NONE",
    "ARROW": "FILL_ARROW",
    "FILL_ARROW": "FILL_ARROW",
    "DIAMOND": "FILL_DIAMOND",
    "FILL_DIAMOND": "FILL_DIAMOND",
    "OVAL": "FILL_CIRCLE",
    "CIRCLE": "FILL_CIRCLE",
    "FILL_CIRCLE": "FILL_CIRCLE",
    "OPEN_ARROW": "OPEN_ARROW",
    "OPEN_CIRCLE": "OPEN_CIRCLE",
    "OPEN_DIAMOND": "OPEN_DIAMOND",
    "STEALTH_ARROW": "STEALTH_ARROW",
}

TRANSPARENT = "transparent"

# Magic numbers for the image formats the Slides API accepts
IMAGE_SIGNATURES = [
    (b"\x89PNG", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF", "image/gif"),
    (b"BM", "image/bmp"),
]

IMAGE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
}


class TextStyleInput(ToolInput):
    font_family: Optional[str] = None
    font_size: Optional[float] = Field(default=None, description="Font size in points")
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    color: Optional[str] = Field(default=None, description="Hex color, e.g. #FF0000")


class AddTextBoxInput(SlideRefInput):
    text: str = Field(description="Text content")
    position: Optional[PositionInput] = None
    size: Optional[SizeInput] = Field(default=None, description="Size in points (required)")
    style: Optional[TextStyleInput] = None


class ImageSizeInput(ToolInput):
    width: Optional[float] = None
    height: Optional[float] = None


class AddImageInput(SlideRefInput):
    image_base64: str = Field(description="Base64-encoded PNG, JPEG, GIF, WebP or BMP data")
    position: Optional[PositionInput] = None
    size: Optional[ImageSizeInput] = Field(default=None, description="Width and/or height in points")


class AddVideoInput(SlideRefInput):
    video_source: str = Field(description="youtube or drive")
    video_id: str = Field(description="YouTube video ID or Drive file ID")
    position: Optional[PositionInput] = None
    size: Optional[SizeInput] = None
    start_time: Optional[float] = Field(default=None, description="Start offset in seconds")
    end_time: Optional[float] = Field(default=None, description="End offset in seconds")
    autoplay: bool = False
    mute: bool = False


class CreateShapeInput(SlideRefInput):
    shape_type: str = Field(description="Shape type, e.g. RECTANGLE, ELLIPSE, STAR_5")
    position: Optional[PositionInput] = None
    size: Optional[SizeInput] = Field(default=None, description="Size in points (required)")
    fill_color: Optional[str] = Field(default=None, description="Hex color or 'transparent'")
    outline_color: Optional[str] = Field(default=None, description="Hex color or 'transparent'")
    outline_weight: Optional[float] = Field(default=None, description="Outline weight in points")


class PointInput(ToolInput):
    x: float = Field(description="X coordinate in points")
    y: float = Field(description="Y coordinate in points")


class CreateLineInput(SlideRefInput):
    start_point: PointInput
    end_point: PointInput
    line_type: str = Field(default="STRAIGHT", description="STRAIGHT, CURVED or ELBOW")
    start_arrow: Optional[str] = Field(default=None, description="Arrow head at the start, e.g. ARROW, DIAMOND, OVAL")
    end_arrow: Optional[str] = Field(default=None, description="Arrow head at the end")
    line_color: Optional[str] = Field(default=None, description="Hex color")
    line_weight: Optional[float] = Field(default=None, description="Line weight in points")
    line_dash: Optional[str] = Field(default=None, description=f"Dash style: {', '.join(DASH_STYLES)}")


class DeleteObjectInput(PresentationInput):
    object_id: Optional[str] = None
    multiple: List[str] = Field(default_factory=list, description="Object IDs to delete together")


class ListObjectsInput(PresentationInput):
    slide_indices: List[int] = Field(default_factory=list, description="1-based slide indices (default: all)")
    object_types: List[str] = Field(default_factory=list, description="Filter by type, e.g. SHAPE, IMAGE, TABLE")


class GetObjectInput(PresentationInput):
    object_id: str


def detect_image_mime_type(data: bytes) -> str:
    """
    Detect an image MIME type from its leading bytes.

    Returns:
        MIME type, or "" when the format is not recognized
    """
    if len(data) < 4:
        return ""
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    for signature, mime_type in IMAGE_SIGNATURES:
        if data.startswith(signature):
            return mime_type
    return ""


def decode_image(image_base64: str):
    """
    Decode base64 image data and sniff its MIME type.

    Returns:
        (bytes, mime type)

    Raises:
        InvalidArgumentError: If the data is not base64, empty or not a known image format
    """
    try:
        data = base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidArgumentError(
            "invalid image data: base64 decoding failed",
            field="image_base64",
            cause=e
        ) from e
    if not data:
        raise InvalidArgumentError("image data is empty", field="image_base64")

    mime_type = detect_image_mime_type(data)
    if not mime_type:
        raise InvalidArgumentError(
            "unsupported image format: expected PNG, JPEG, GIF, WebP or BMP",
            field="image_base64"
        )
    return data, mime_type


def _position(position: Optional[PositionInput]):
    if position is None:
        return 0.0, 0.0
    validate_non_negative(position.x, "position.x")
    validate_non_negative(position.y, "position.y")
    return position.x, position.y


def _require_size(size: Optional[SizeInput]) -> SizeInput:
    if size is None:
        raise InvalidArgumentError("size (width and height) is required", field="size")
    validate_positive(size.width, "size.width")
    validate_positive(size.height, "size.height")
    return size


def _text_style_request(object_id: str, style: TextStyleInput) -> Optional[Dict[str, Any]]:
    text_style: Dict[str, Any] = {}
    fields = []

    if style.font_family:
        text_style["fontFamily"] = style.font_family
        fields.append("fontFamily")
    if style.font_size:
        validate_positive(style.font_size, "style.font_size")
        text_style["fontSize"] = {"magnitude": style.font_size, "unit": "PT"}
        fields.append("fontSize")
    if style.bold is not None:
        text_style["bold"] = style.bold
        fields.append("bold")
    if style.italic is not None:
        text_style["italic"] = style.italic
        fields.append("italic")
    if style.color:
        color = require_color(style.color, "style.color")
        text_style["foregroundColor"] = {"opaqueColor": {"rgbColor": rgb_color(color)}}
        fields.append("foregroundColor")

    if not fields:
        return None

    return {
        "updateTextStyle": {
            "objectId": object_id,
            "style": text_style,
            "textRange": {"type": "ALL"},
            "fields": ",".join(fields),
        }
    }


def add_text_box(services: ServiceBundle, params: AddTextBoxInput) -> Dict[str, Any]:
    """Create a text box, insert its text and apply optional styling in one batch."""
    validate_required_text(params.text, "text")
    size = _require_size(params.size)
    x, y = _position(params.position)

    presentation = fetch_presentation(services, params.presentation_id)
    slide, _ = find_slide(presentation, params.slide_index, params.slide_id)

    object_id = services.ids.new_id("textbox")
    requests = [
        {
            "createShape": {
                "objectId": object_id,
                "shapeType": "TEXT_BOX",
                "elementProperties": element_properties(slide["objectId"], x, y, size.width, size.height),
            }
        },
        {
            "insertText": {
                "objectId": object_id,
                "insertionIndex": 0,
                "text": params.text,
            }
        },
    ]
    if params.style:
        style_request = _text_style_request(object_id, params.style)
        if style_request:
            requests.append(style_request)

    batch_update(services, params.presentation_id, requests, action="add text box")
    logger.info(f"Added text box {object_id} to slide {slide['objectId']}")
    return {"object_id": object_id}


def add_image(services: ServiceBundle, params: AddImageInput) -> Dict[str, Any]:
    """
    Upload an image to Drive and place it on a slide.

    The Slides API only fetches images by URL, so the bytes are uploaded and
    shared by link first.
    """
    data, mime_type = decode_image(params.image_base64)

    x, y = _position(params.position)
    width = height = None
    if params.size:
        if params.size.width is None and params.size.height is None:
            raise InvalidArgumentError("size must have a width and/or height", field="size")
        if params.size.width is not None:
            width = validate_positive(params.size.width, "size.width")
        if params.size.height is not None:
            height = validate_positive(params.size.height, "size.height")

    presentation = fetch_presentation(services, params.presentation_id)
    slide, _ = find_slide(presentation, params.slide_index, params.slide_id)

    file_name = services.ids.file_name("slides_image")
    file_id = upload_public_image(services, file_name, mime_type, data, logger)

    object_id = services.ids.new_id("image")
    batch_update(services, params.presentation_id, [{
        "createImage": {
            "objectId": object_id,
            "url": DRIVE_IMAGE_URL.format(file_id=file_id),
            "elementProperties": element_properties(slide["objectId"], x, y, width, height),
        }
    }], action="add image")

    logger.info(f"Added image {object_id} (Drive file {file_id})")
    return {"object_id": object_id, "file_id": file_id}


def add_video(services: ServiceBundle, params: AddVideoInput) -> Dict[str, Any]:
    source = validate_choice(params.video_source, VIDEO_SOURCES, "video_source")
    video_id = validate_required_text(params.video_id, "video_id").strip()
    x, y = _position(params.position)
    size = _require_size(params.size) if params.size else None

    if params.start_time is not None:
        validate_non_negative(params.start_time, "start_time")
    if params.end_time is not None:
        validate_non_negative(params.end_time, "end_time")
    if params.start_time is not None and params.end_time is not None and params.end_time <= params.start_time:
        raise InvalidArgumentError("end_time must be greater than start_time", field="end_time", value=params.end_time)

    presentation = fetch_presentation(services, params.presentation_id)
    slide, _ = find_slide(presentation, params.slide_index, params.slide_id)

    object_id = services.ids.new_id("video")
    requests = [{
        "createVideo": {
            "objectId": object_id,
            "source": source,
            "id": video_id,
            "elementProperties": element_properties(
                slide["objectId"], x, y,
                size.width if size else None,
                size.height if size else None
            ),
        }
    }]

    video_properties: Dict[str, Any] = {}
    fields = []
    if params.start_time is not None:
        video_properties["start"] = int(params.start_time * 1000)
        fields.append("start")
    if params.end_time is not None:
        video_properties["end"] = int(params.end_time * 1000)
        fields.append("end")
    if params.autoplay:
        video_properties["autoPlay"] = True
        fields.append("autoPlay")
    if params.mute:
        video_properties["mute"] = True
        fields.append("mute")
    if fields:
        requests.append({
            "updateVideoProperties": {
                "objectId": object_id,
                "videoProperties": video_properties,
                "fields": ",".join(fields),
            }
        })

    batch_update(services, params.presentation_id, requests, action="add video")
    logger.info(f"Added {source} video {object_id}")
    return {"object_id": object_id}


def shape_properties_request(
    object_id: str,
    fill_color: Optional[str] = None,
    outline_color: Optional[str] = None,
    outline_weight: Optional[float] = None,
    outline_dash: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Build an updateShapeProperties request for fill and outline.

    Colors are hex or "transparent". Returns None when nothing is set.
    """
    properties: Dict[str, Any] = {}
    fields = []

    if fill_color:
        if fill_color.strip().lower() == TRANSPARENT:
            properties["shapeBackgroundFill"] = {"propertyState": "NOT_RENDERED"}
            fields.append("shapeBackgroundFill.propertyState")
        else:
            color = require_color(fill_color, "fill_color")
            properties["shapeBackgroundFill"] = {
                "propertyState": "RENDERED",
                "solidFill": {"color": {"rgbColor": rgb_color(color)}},
            }
            fields.append("shapeBackgroundFill")

    outline: Dict[str, Any] = {}
    if outline_color:
        if outline_color.strip().lower() == TRANSPARENT:
            outline["propertyState"] = "NOT_RENDERED"
            fields.append("outline.propertyState")
        else:
            color = require_color(outline_color, "outline_color")
            outline["outlineFill"] = {"solidFill": {"color": {"rgbColor": rgb_color(color)}}}
            fields.append("outline.outlineFill.solidFill.color")
    if outline_weight is not None:
        validate_positive(outline_weight, "outline_weight")
        outline["weight"] = {"magnitude": outline_weight, "unit": "PT"}
        fields.append("outline.weight")
    if outline_dash:
        outline["dashStyle"] = validate_choice(outline_dash, DASH_STYLES, "outline_dash")
        fields.append("outline.dashStyle")
    if outline:
        properties["outline"] = outline

    if not fields:
        return None

    return {
        "updateShapeProperties": {
            "objectId": object_id,
            "shapeProperties": properties,
            "fields": ",".join(fields),
        }
    }


def create_shape(services: ServiceBundle, params: CreateShapeInput) -> Dict[str, Any]:
    shape_type = validate_choice(params.shape_type, SHAPE_TYPES, "shape_type")
    size = _require_size(params.size)
    x, y = _position(params.position)

    object_id = services.ids.new_id("shape")
    # Validates colors before any remote call
    properties_request = shape_properties_request(
        object_id, params.fill_color, params.outline_color, params.outline_weight
    )

    presentation = fetch_presentation(services, params.presentation_id)
    slide, _ = find_slide(presentation, params.slide_index, params.slide_id)

    requests = [{
        "createShape": {
            "objectId": object_id,
            "shapeType": shape_type,
            "elementProperties": element_properties(slide["objectId"], x, y, size.width, size.height),
        }
    }]
    if properties_request:
        requests.append(properties_request)

    batch_update(services, params.presentation_id, requests, action="create shape")
    logger.info(f"Created {shape_type} shape {object_id}")
    return {"object_id": object_id}


def _line_properties_request(object_id: str, params: CreateLineInput) -> Optional[Dict[str, Any]]:
    properties: Dict[str, Any] = {}
    fields = []

    if params.line_color:
        color = require_color(params.line_color, "line_color")
        properties["lineFill"] = {"solidFill": {"color": {"rgbColor": rgb_color(color)}}}
        fields.append("lineFill.solidFill.color")
    if params.line_weight is not None:
        validate_positive(params.line_weight, "line_weight")
        properties["weight"] = {"magnitude": params.line_weight, "unit": "PT"}
        fields.append("weight")
    if params.line_dash:
        properties["dashStyle"] = validate_choice(params.line_dash, DASH_STYLES, "line_dash")
        fields.append("dashStyle")
    for field, name, value in (
        ("startArrow", "start_arrow", params.start_arrow),
        ("endArrow", "end_arrow", params.end_arrow),
    ):
        if value:
            properties[field] = ARROW_STYLES[validate_choice(value, ARROW_STYLES, name)]
            fields.append(field)

    if not fields:
        return None

    return {
        "updateLineProperties": {
            "objectId": object_id,
            "lineProperties": properties,
            "fields": ",".join(fields),
        }
    }


def create_line(services: ServiceBundle, params: CreateLineInput) -> Dict[str, Any]:
    """
    Draw a line or connector between two points.

    The bounding box spans both points; a negative scale flips the line when
    the end point lies left of or above the start point.
    """
    category = LINE_CATEGORIES[validate_choice(params.line_type, LINE_CATEGORIES, "line_type")]
    start, end = params.start_point, params.end_point
    if (start.x, start.y) == (end.x, end.y):
        raise InvalidArgumentError("start_point and end_point must differ", field="end_point")

    object_id = services.ids.new_id("line")
    properties_request = _line_properties_request(object_id, params)

    presentation = fetch_presentation(services, params.presentation_id)
    slide, _ = find_slide(presentation, params.slide_index, params.slide_id)

    element = element_properties(slide["objectId"], start.x, start.y, abs(end.x - start.x), abs(end.y - start.y))
    element["transform"]["scaleX"] = -1 if end.x < start.x else 1
    element["transform"]["scaleY"] = -1 if end.y < start.y else 1

    requests = [{
        "createLine": {
            "objectId": object_id,
            "lineCategory": category,
            "elementProperties": element,
        }
    }]
    if properties_request:
        requests.append(properties_request)

    batch_update(services, params.presentation_id, requests, action="create line")
    logger.info(f"Created {category} line {object_id}")
    return {"object_id": object_id}


def delete_object(services: ServiceBundle, params: DeleteObjectInput) -> Dict[str, Any]:
    """Delete one or more objects; IDs that do not exist are reported, not sent."""
    requested = []
    for object_id in ([params.object_id] if params.object_id else []) + list(params.multiple):
        if object_id and object_id not in requested:
            requested.append(object_id)
    if not requested:
        raise InvalidArgumentError("object_id or multiple is required", field="object_id")

    presentation = fetch_presentation(services, params.presentation_id)
    existing = collect_object_ids(presentation)

    to_delete = [object_id for object_id in requested if object_id in existing]
    not_found = [object_id for object_id in requested if object_id not in existing]
    if not to_delete:
        raise NotFoundError(f"none of the objects were found: {', '.join(not_found)}")

    batch_update(services, params.presentation_id, [
        {"deleteObject": {"objectId": object_id}} for object_id in to_delete
    ], action="delete objects")

    logger.info(f"Deleted {len(to_delete)} objects, {len(not_found)} not found")
    return {
        "deleted_count": len(to_delete),
        "deleted_ids": to_delete,
        "not_found_ids": not_found,
    }


def _type_matches(object_type: str, element: Dict[str, Any], allowed: set) -> bool:
    if not allowed:
        return True
    if object_type in allowed:
        return True
    return "SHAPE" in allowed and "shape" in element


def _listings(elements, slide_index: int, allowed: set, parent_order: Optional[int] = None):
    listings = []
    for order, element in enumerate(elements or []):
        object_type = object_type_of(element)
        if not _type_matches(object_type, element, allowed):
            continue
        z_order = order if parent_order is None else parent_order * 1000 + order
        listing = {
            "slide_index": slide_index,
            "object_id": element.get("objectId"),
            "object_type": object_type,
            "position": transform_offset_points(element.get("transform")),
            "size": size_points(element.get("size")),
            "z_order": z_order,
        }
        preview = content_preview(element)
        if preview:
            listing["content_preview"] = preview
        listings.append(listing)

        if "elementGroup" in element:
            listings.extend(_listings(
                element["elementGroup"].get("children", []), slide_index, allowed, z_order
            ))
    return listings


def list_objects(services: ServiceBundle, params: ListObjectsInput) -> Dict[str, Any]:
    """
    List page elements per slide, filtered by slide index and object type.

    A "SHAPE" filter matches every shape regardless of its shape type.
    """
    presentation = fetch_presentation(services, params.presentation_id)
    allowed_slides = set(params.slide_indices)
    allowed_types = {object_type.strip().upper() for object_type in params.object_types}

    objects = []
    for position, slide in enumerate(presentation.get("slides", [])):
        slide_index = position + 1
        if allowed_slides and slide_index not in allowed_slides:
            continue
        objects.extend(_listings(slide.get("pageElements", []), slide_index, allowed_types))

    result: Dict[str, Any] = {
        "presentation_id": presentation.get("presentationId", params.presentation_id),
        "objects": objects,
        "total_count": len(objects),
    }
    if params.slide_indices or params.object_types:
        result["filtered_by"] = {
            "slide_indices": params.slide_indices,
            "object_types": sorted(allowed_types),
        }
    return result


def _shape_details(shape: Dict[str, Any]) -> Dict[str, Any]:
    properties = shape.get("shapeProperties", {})
    details: Dict[str, Any] = {
        "shape_type": shape.get("shapeType", "SHAPE"),
        "text": extract_text(shape.get("text")),
    }
    if "placeholder" in shape:
        details["placeholder_type"] = shape["placeholder"].get("type")
    solid = properties.get("shapeBackgroundFill", {}).get("solidFill")
    if solid:
        details["fill"] = {"type": "SOLID", "solid_color": hex_from_api_color(solid.get("color"))}
    outline = properties.get("outline", {})
    if outline:
        details["outline"] = {
            "color": hex_from_api_color(outline.get("outlineFill", {}).get("solidFill", {}).get("color")),
            "weight": outline.get("weight", {}).get("magnitude"),
            "dash_style": outline.get("dashStyle"),
        }
    return details


def _element_details(element: Dict[str, Any]) -> Dict[str, Any]:
    if "shape" in element:
        return {"shape": _shape_details(element["shape"])}
    if "image" in element:
        image = element["image"]
        return {"image": {
            "content_url": image.get("contentUrl"),
            "source_url": image.get("sourceUrl"),
        }}
    if "table" in element:
        table = element["table"]
        return {"table": {
            "rows": table.get("rows"),
            "columns": table.get("columns"),
            "cells": table_text(table),
        }}
    if "video" in element:
        video = element["video"]
        return {"video": {
            "video_id": video.get("id"),
            "source": video.get("source"),
            "url": video.get("url"),
        }}
    if "line" in element:
        line = element["line"]
        return {"line": {
            "line_type": line.get("lineType"),
            "line_category": line.get("lineCategory"),
        }}
    if "elementGroup" in element:
        children = element["elementGroup"].get("children", [])
        return {"group": {
            "child_count": len(children),
            "child_ids": [child.get("objectId") for child in children],
        }}
    return {}


def get_object(services: ServiceBundle, params: GetObjectInput) -> Dict[str, Any]:
    presentation = fetch_presentation(services, params.presentation_id)
    location = find_element(presentation, params.object_id)
    element = location.element

    result = {
        "presentation_id": presentation.get("presentationId", params.presentation_id),
        "object_id": params.object_id,
        "object_type": object_type_of(element),
        "page_id": location.page.get("objectId"),
        "page_type": location.page_kind,
        "slide_index": location.slide_index,
        "position": transform_offset_points(element.get("transform")),
        "size": size_points(element.get("size")),
    }
    result.update(_element_details(element))
    return result


def get_object_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "add_text_box",
            "Add a text box with optional font styling to a slide. Position and size are in points.",
            AddTextBoxInput,
            add_text_box,
            "objects"
        ),
        ToolDefinition(
            "add_image",
            "Upload a base64 image to Drive and insert it on a slide.",
            AddImageInput,
            add_image,
            "objects"
        ),
        ToolDefinition(
            "add_video",
            "Embed a YouTube or Drive video on a slide with optional start/end, autoplay and mute.",
            AddVideoInput,
            add_video,
            "objects"
        ),
        ToolDefinition(
            "create_shape",
            "Create a shape with optional fill and outline. Colors are hex or 'transparent'.",
            CreateShapeInput,
            create_shape,
            "objects"
        ),
        ToolDefinition(
            "create_line",
            "Draw a straight, curved or elbow line between two points, with optional arrows and styling.",
            CreateLineInput,
            create_line,
            "objects"
        ),
        ToolDefinition(
            "delete_object",
            "Delete one object (object_id) or several (multiple) from a presentation.",
            DeleteObjectInput,
            delete_object,
            "objects"
        ),
        ToolDefinition(
            "list_objects",
            "List objects on slides with position, size, z-order and a text preview.",
            ListObjectsInput,
            list_objects,
            "objects"
        ),
        ToolDefinition(
            "get_object",
            "Get details of one object found on a slide, layout or master.",
            GetObjectInput,
            get_object,
            "objects"
        ),
    ]
