"""
Tools that change existing page elements: move, resize and rotate them,
restyle shapes and swap image content.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from gslides_mcp.core.lookup import find_element
from gslides_mcp.core.text import object_type_of
from gslides_mcp.core.units import emu_to_points, points_to_emu
from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    DRIVE_IMAGE_URL,
    PositionInput,
    PresentationInput,
    ToolDefinition,
    ToolInput,
    batch_update,
    fetch_presentation,
    upload_public_image
)
from gslides_mcp.tools.objects import (
    DASH_STYLES,
    ImageSizeInput,
    decode_image,
    shape_properties_request
)
from gslides_mcp.utils.exceptions import InvalidArgumentError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import validate_non_negative, validate_positive

logger = get_logger(__name__)

IDENTITY_TRANSFORM = {"scaleX": 1.0, "scaleY": 1.0, "translateX": 0.0, "translateY": 0.0, "unit": "EMU"}


class TransformObjectInput(PresentationInput):
    object_id: str
    position: Optional[PositionInput] = Field(default=None, description="New top-left corner in points")
    size: Optional[ImageSizeInput] = Field(default=None, description="New width and/or height in points")
    rotation: Optional[float] = Field(default=None, description="Rotation in degrees, 0-360")
    scale_proportionally: bool = Field(
        default=True,
        description="Keep the aspect ratio when only one dimension is given"
    )


class ShapePropertiesInput(ToolInput):
    fill_color: Optional[str] = Field(default=None, description="Hex color or 'transparent'")
    outline_color: Optional[str] = Field(default=None, description="Hex color or 'transparent'")
    outline_weight: Optional[float] = Field(default=None, description="Outline weight in points")
    outline_dash: Optional[str] = Field(default=None, description=f"Dash style: {', '.join(DASH_STYLES)}")


class ModifyShapeInput(PresentationInput):
    object_id: str
    properties: Optional[ShapePropertiesInput] = None


class ReplaceImageInput(PresentationInput):
    object_id: str
    image_base64: str = Field(description="Base64-encoded PNG, JPEG, GIF, WebP or BMP data")
    preserve_size: bool = Field(default=True, description="Keep the old image's size")


def _emu(value: float, unit: Optional[str]) -> float:
    return points_to_emu(value) if unit == "PT" else value


def _base_size(element: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    size = element.get("size") or {}
    width, height = size.get("width"), size.get("height")
    if not width or not height:
        return None
    return (
        _emu(width.get("magnitude", 0.0), width.get("unit")),
        _emu(height.get("magnitude", 0.0), height.get("unit")),
    )


def compute_transform(
    current: Optional[Dict[str, Any]],
    base_size: Optional[Tuple[float, float]],
    params: TransformObjectInput
) -> Tuple[Dict[str, Any], float, float, float]:
    """
    Decompose the current affine transform into translation, scale and
    rotation, apply the requested changes and recompose it.

    Shear other than the one produced by rotation is not preserved.

    Args:
        current: The element's AffineTransform, or None for identity
        base_size: Element size in EMU before scaling, if known
        params: Requested position, size and rotation

    Returns:
        (transform in EMU, scale x, scale y, rotation in degrees)
    """
    current = current or IDENTITY_TRANSFORM
    unit = current.get("unit", "EMU")
    scale_x = current.get("scaleX", 0.0)
    scale_y = current.get("scaleY", 0.0)
    shear_x = current.get("shearX", 0.0)
    shear_y = current.get("shearY", 0.0)
    translate_x = _emu(current.get("translateX", 0.0), unit)
    translate_y = _emu(current.get("translateY", 0.0), unit)

    sx = math.hypot(scale_x, shear_y)
    sy = math.hypot(scale_y, shear_x)
    angle = math.atan2(shear_y, scale_x)

    if params.position is not None:
        translate_x = points_to_emu(params.position.x)
        translate_y = points_to_emu(params.position.y)

    if params.rotation is not None:
        angle = math.radians(params.rotation)

    if params.size is not None:
        if base_size is None:
            raise InvalidArgumentError("cannot resize object with unknown base size", field="size")
        base_width, base_height = base_size
        width, height = params.size.width, params.size.height
        old_sx, old_sy = sx, sy
        if width is not None:
            sx = points_to_emu(width) / base_width
        if height is not None:
            sy = points_to_emu(height) / base_height
        if params.scale_proportionally and width is not None and height is None:
            sy = old_sy * (sx / old_sx) if old_sx else sx
        if params.scale_proportionally and height is not None and width is None:
            sx = old_sx * (sy / old_sy) if old_sy else sy

    cos_a, sin_a = math.cos(angle), math.sin(angle)
    transform = {
        "scaleX": sx * cos_a,
        "shearY": sx * sin_a,
        "shearX": -sy * sin_a,
        "scaleY": sy * cos_a,
        "translateX": translate_x,
        "translateY": translate_y,
        "unit": "EMU",
    }
    return transform, sx, sy, math.degrees(angle) % 360


def transform_object(services: ServiceBundle, params: TransformObjectInput) -> Dict[str, Any]:
    """
    Move, resize or rotate an object with an absolute transform update.

    Sizes scale the element's base size. When only one dimension is given
    and scale_proportionally is set, the other keeps the aspect ratio.
    """
    if params.position is None and params.size is None and params.rotation is None:
        raise InvalidArgumentError("position, size or rotation is required", field="position")
    if params.position is not None:
        validate_non_negative(params.position.x, "position.x")
        validate_non_negative(params.position.y, "position.y")
    if params.size is not None:
        if params.size.width is None and params.size.height is None:
            raise InvalidArgumentError("size must have a width and/or height", field="size")
        if params.size.width is not None:
            validate_positive(params.size.width, "size.width")
        if params.size.height is not None:
            validate_positive(params.size.height, "size.height")
    if params.rotation is not None and not 0 <= params.rotation <= 360:
        raise InvalidArgumentError("rotation must be between 0 and 360", field="rotation", value=params.rotation)

    presentation = fetch_presentation(services, params.presentation_id)
    element = find_element(presentation, params.object_id, pages=("slides",)).element
    base_size = _base_size(element)

    transform, sx, sy, rotation = compute_transform(element.get("transform"), base_size, params)

    batch_update(services, params.presentation_id, [{
        "updatePageElementTransform": {
            "objectId": params.object_id,
            "transform": transform,
            "applyMode": "ABSOLUTE",
        }
    }], action="transform object")

    logger.info(f"Transformed {params.object_id}")
    return {
        "object_id": params.object_id,
        "position": {
            "x": emu_to_points(transform["translateX"]),
            "y": emu_to_points(transform["translateY"]),
        },
        "size": {
            "width": emu_to_points(base_size[0] * sx),
            "height": emu_to_points(base_size[1] * sy),
        } if base_size else None,
        "rotation": rotation,
    }


def modify_shape(services: ServiceBundle, params: ModifyShapeInput) -> Dict[str, Any]:
    """Change the fill and outline of an existing shape."""
    if params.properties is None:
        raise InvalidArgumentError("properties is required", field="properties")
    properties = params.properties
    request = shape_properties_request(
        params.object_id,
        properties.fill_color,
        properties.outline_color,
        properties.outline_weight,
        properties.outline_dash
    )
    if request is None:
        raise InvalidArgumentError("no properties to update", field="properties")

    presentation = fetch_presentation(services, params.presentation_id)
    element = find_element(presentation, params.object_id, pages=("slides",)).element
    if "shape" not in element:
        raise InvalidArgumentError(
            f"object '{params.object_id}' is not a shape (type: {object_type_of(element)})",
            field="object_id",
            value=params.object_id
        )

    batch_update(services, params.presentation_id, [request], action="modify shape")

    updated = [
        name for name in ("fill_color", "outline_color", "outline_weight", "outline_dash")
        if getattr(properties, name) is not None
    ]
    logger.info(f"Modified shape {params.object_id}: {', '.join(updated)}")
    return {"object_id": params.object_id, "updated_properties": updated}


def replace_image(services: ServiceBundle, params: ReplaceImageInput) -> Dict[str, Any]:
    """
    Replace an image's content.

    The API cannot change an image's source in place, so the old image is
    deleted and a new one is created with the same transform (and size when
    preserve_size is set) in the same batch.
    """
    data, mime_type = decode_image(params.image_base64)

    presentation = fetch_presentation(services, params.presentation_id)
    location = find_element(presentation, params.object_id, pages=("slides",))
    element = location.element
    if "image" not in element:
        raise InvalidArgumentError(
            f"object '{params.object_id}' is not an image (type: {object_type_of(element)})",
            field="object_id",
            value=params.object_id
        )

    file_name = services.ids.file_name("slides_image")
    file_id = upload_public_image(services, file_name, mime_type, data, logger)

    properties: Dict[str, Any] = {"pageObjectId": location.page["objectId"]}
    if element.get("transform"):
        properties["transform"] = dict(element["transform"])
        properties["transform"].setdefault("unit", "EMU")
    if params.preserve_size and element.get("size"):
        properties["size"] = element["size"]

    new_object_id = services.ids.new_id("image")
    batch_update(services, params.presentation_id, [
        {"deleteObject": {"objectId": params.object_id}},
        {
            "createImage": {
                "objectId": new_object_id,
                "url": DRIVE_IMAGE_URL.format(file_id=file_id),
                "elementProperties": properties,
            }
        },
    ], action="replace image")

    logger.info(f"Replaced image {params.object_id} with {new_object_id} (Drive file {file_id})")
    return {
        "object_id": params.object_id,
        "new_object_id": new_object_id,
        "file_id": file_id,
        "preserved_size": params.preserve_size,
    }


def get_object_editing_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "transform_object",
            "Move, resize or rotate an object. Position and size are in points, rotation in degrees.",
            TransformObjectInput,
            transform_object,
            "objects"
        ),
        ToolDefinition(
            "modify_shape",
            "Change a shape's fill color, outline color, outline weight or dash style.",
            ModifyShapeInput,
            modify_shape,
            "objects"
        ),
        ToolDefinition(
            "replace_image",
            "Replace an image with new base64 image data, keeping its position and optionally its size.",
            ReplaceImageInput,
            replace_image,
            "objects"
        ),
    ]
