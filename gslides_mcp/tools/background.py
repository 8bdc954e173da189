"""
Slide background tool: solid color, uploaded image or generated gradient.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from gslides_mcp.core.colors import require_color, rgb_color
from gslides_mcp.core.gradient import generate_gradient_image
from gslides_mcp.core.lookup import resolve_slides
from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    DRIVE_IMAGE_URL,
    SlideRefInput,
    ToolDefinition,
    batch_update,
    fetch_presentation,
    upload_public_image
)
from gslides_mcp.tools.objects import IMAGE_EXTENSIONS, decode_image
from gslides_mcp.utils.exceptions import InvalidArgumentError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import validate_choice

logger = get_logger(__name__)

BACKGROUND_SCOPES = ["slide", "all"]
BACKGROUND_TYPES = ["solid", "image", "gradient"]


class SetBackgroundInput(SlideRefInput):
    scope: str = Field(description="slide or all")
    background_type: str = Field(description="solid, image or gradient")
    color: Optional[str] = Field(default=None, description="Hex color (solid)")
    image_base64: Optional[str] = Field(default=None, description="Base64 image data (image)")
    start_color: Optional[str] = Field(default=None, description="Hex start color (gradient)")
    end_color: Optional[str] = Field(default=None, description="Hex end color (gradient)")
    angle: Optional[float] = Field(
        default=None,
        description="Gradient angle in degrees, 0-360 (0 is left to right, 90 top to bottom)"
    )


def _upload_background(services: ServiceBundle, mime_type: str, content: bytes) -> Dict[str, Any]:
    file_name = services.ids.file_name("slides_background", IMAGE_EXTENSIONS[mime_type])
    file_id = upload_public_image(services, file_name, mime_type, content, logger)
    return {"stretchedPictureFill": {"contentUrl": DRIVE_IMAGE_URL.format(file_id=file_id)}}


def set_background(services: ServiceBundle, params: SetBackgroundInput) -> Dict[str, Any]:
    """
    Set the background of one slide or of every slide.

    Images and gradients are uploaded to Drive and applied as a stretched
    picture fill; gradients are rendered locally as a small PNG.
    """
    scope = validate_choice(params.scope, BACKGROUND_SCOPES, "scope", upper=False)
    background_type = validate_choice(params.background_type, BACKGROUND_TYPES, "background_type", upper=False)
    if scope == "slide" and not params.slide_index and not params.slide_id:
        raise InvalidArgumentError(
            "slide_index or slide_id is required when scope is 'slide'",
            field="slide_index"
        )

    image = None
    if background_type == "solid":
        color = require_color(params.color, "color")
    elif background_type == "image":
        if not params.image_base64:
            raise InvalidArgumentError("image_base64 is required for image background", field="image_base64")
        image = decode_image(params.image_base64)
    else:
        start = require_color(params.start_color, "start_color")
        end = require_color(params.end_color, "end_color")
        angle = params.angle if params.angle is not None else 0.0
        if angle < 0 or angle > 360:
            raise InvalidArgumentError("gradient angle must be between 0 and 360", field="angle", value=angle)

    presentation = fetch_presentation(services, params.presentation_id)
    slide_ids = [
        slide["objectId"]
        for slide in resolve_slides(presentation, scope, params.slide_index, params.slide_id)
    ]

    logger.info(f"Setting {background_type} background on {len(slide_ids)} slide(s)")

    if background_type == "solid":
        fill = {"solidFill": {"color": {"rgbColor": rgb_color(color)}}}
        message = f"Solid background ({params.color}) applied successfully"
    elif background_type == "image":
        data, mime_type = image
        fill = _upload_background(services, mime_type, data)
        message = "Image background applied successfully"
    else:
        fill = _upload_background(services, "image/png", generate_gradient_image(start, end, angle))
        message = f"Gradient background ({params.start_color} to {params.end_color}) applied successfully"

    requests = [
        {
            "updatePageProperties": {
                "objectId": slide_id,
                "pageProperties": {"pageBackgroundFill": fill},
                "fields": "pageBackgroundFill",
            }
        }
        for slide_id in slide_ids
    ]
    batch_update(services, params.presentation_id, requests, action="set background")

    if scope == "all":
        message += f" to all {len(slide_ids)} slides"
    else:
        message += " to slide"

    return {"success": True, "message": message, "affected_slides": slide_ids}


def get_background_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "set_background",
            "Set a solid color, image or gradient background on one slide or all slides.",
            SetBackgroundInput,
            set_background,
            "design"
        ),
    ]
