"""Point and EMU unit conversion."""

from typing import Any, Dict, Optional

# 1 pt = 12700 EMU
EMU_PER_POINT = 12700.0


def points_to_emu(points: float) -> float:
    return points * EMU_PER_POINT


def emu_to_points(emu: float) -> float:
    return emu / EMU_PER_POINT


def dimension_to_points(dimension: Optional[Dict[str, Any]]) -> float:
    """Convert an API Dimension ({magnitude, unit}) to points."""
    if not dimension:
        return 0.0
    magnitude = dimension.get("magnitude", 0.0)
    if dimension.get("unit") == "EMU":
        return emu_to_points(magnitude)
    return magnitude


def transform_offset_points(transform: Optional[Dict[str, Any]]) -> Optional[Dict[str, float]]:
    """Read the translate component of an AffineTransform as {x, y} in points."""
    if not transform:
        return None
    x = transform.get("translateX", 0.0)
    y = transform.get("translateY", 0.0)
    if transform.get("unit", "EMU") == "EMU":
        x, y = emu_to_points(x), emu_to_points(y)
    return {"x": x, "y": y}


def size_points(size: Optional[Dict[str, Any]]) -> Optional[Dict[str, float]]:
    """Read an API Size as {width, height} in points."""
    if not size:
        return None
    return {
        "width": dimension_to_points(size.get("width")),
        "height": dimension_to_points(size.get("height")),
    }


def element_properties(
    page_id: str,
    x: float = 0.0,
    y: float = 0.0,
    width: Optional[float] = None,
    height: Optional[float] = None
) -> Dict[str, Any]:
    """
    Build PageElementProperties for a create request.

    Position and size are given in points. Size is omitted when neither
    dimension is given; a single dimension is sent alone.
    """
    properties: Dict[str, Any] = {
        "pageObjectId": page_id,
        "transform": {
            "scaleX": 1,
            "scaleY": 1,
            "translateX": points_to_emu(x),
            "translateY": points_to_emu(y),
            "unit": "EMU",
        },
    }
    size = {}
    if width is not None:
        size["width"] = {"magnitude": points_to_emu(width), "unit": "EMU"}
    if height is not None:
        size["height"] = {"magnitude": points_to_emu(height), "unit": "EMU"}
    if size:
        properties["size"] = size
    return properties
