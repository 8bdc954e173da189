"""
Theme tool: copy theme colors between presentations.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    PresentationInput,
    ToolDefinition,
    batch_update,
    fetch_presentation,
    remote_errors
)
from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError, UnsupportedError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import validate_choice, validate_presentation_id

logger = get_logger(__name__)

THEME_SOURCES = ["gallery", "presentation"]

THEME_COLOR_TYPES = [
    "DARK1",
    "LIGHT1",
    "DARK2",
    "LIGHT2",
    "ACCENT1",
    "ACCENT2",
    "ACCENT3",
    "ACCENT4",
    "ACCENT5",
    "ACCENT6",
    "HYPERLINK",
    "FOLLOWED_HYPERLINK",
]


class ApplyThemeInput(PresentationInput):
    theme_source: str = Field(description="gallery or presentation")
    theme_id: Optional[str] = Field(default=None, description="Gallery theme ID (not supported by the API)")
    source_presentation_id: Optional[str] = Field(
        default=None,
        description="Presentation to copy theme colors from (theme_source presentation)"
    )


def copy_color_scheme(source_scheme: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Copy the theme color pairs of a color scheme, in canonical order.
    Pairs without an RGB color are skipped.
    """
    by_type = {
        pair.get("type"): pair
        for pair in (source_scheme or {}).get("colors", [])
        if pair and pair.get("type")
    }
    colors = []
    for color_type in THEME_COLOR_TYPES:
        pair = by_type.get(color_type)
        if pair and pair.get("color"):
            rgb = pair["color"]
            colors.append({
                "type": color_type,
                "color": {key: rgb[key] for key in ("red", "green", "blue") if key in rgb},
            })
    return colors


def apply_theme(services: ServiceBundle, params: ApplyThemeInput) -> Dict[str, Any]:
    """
    Apply a theme to a presentation.

    Gallery themes cannot be applied through the Slides API. A theme from
    another presentation is applied by copying the color scheme of its
    first master onto the target's first master.
    """
    source = validate_choice(params.theme_source, THEME_SOURCES, "theme_source", upper=False)
    if source == "gallery":
        raise UnsupportedError(
            "gallery theme application is not available via the Google Slides API. "
            "To apply gallery themes, use the Google Slides UI (Slide > Change theme) or "
            "use theme_source='presentation' to copy theme colors from another presentation"
        )
    if not params.source_presentation_id:
        raise InvalidArgumentError(
            "source_presentation_id is required when theme_source is 'presentation'",
            field="source_presentation_id"
        )
    source_id = validate_presentation_id(params.source_presentation_id)

    logger.info(f"Copying theme colors from {source_id} to {params.presentation_id}")

    with remote_errors("source presentation", "get source presentation"):
        source_presentation = services.slides.get_presentation(source_id)
    source_masters = source_presentation.get("masters", [])
    if not source_masters:
        raise NotFoundError("no master slides found in source presentation")
    source_master = source_masters[0]
    scheme = source_master.get("pageProperties", {}).get("colorScheme")
    if not scheme:
        raise NotFoundError("no color scheme found in source presentation")

    target = fetch_presentation(services, params.presentation_id)
    target_masters = target.get("masters", [])
    if not target_masters:
        raise NotFoundError("no master slides found in target presentation")
    target_master = target_masters[0]

    colors = copy_color_scheme(scheme)
    if not colors:
        raise NotFoundError("no color scheme found in source presentation")

    batch_update(services, params.presentation_id, [{
        "updatePageProperties": {
            "objectId": target_master["objectId"],
            "pageProperties": {"colorScheme": {"colors": colors}},
            "fields": "colorScheme",
        }
    }], action="apply theme")

    return {
        "success": True,
        "message": "Theme colors applied successfully from source presentation",
        "updated_properties": [f"color_{pair['type'].lower()}" for pair in colors],
        "source_master_id": source_master.get("objectId"),
        "target_master_id": target_master.get("objectId"),
    }


def get_theme_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "apply_theme",
            "Copy theme colors from another presentation. Gallery themes are not supported by the API.",
            ApplyThemeInput,
            apply_theme,
            "design"
        ),
    ]
