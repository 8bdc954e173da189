"""
Text editing tools: change, style and format the text of an existing shape.

Text indices are Slides API indices, counted in UTF-16 code units.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from gslides_mcp.core.colors import require_color, rgb_color
from gslides_mcp.core.lookup import find_element
from gslides_mcp.core.text import raw_text, utf16_len, utf16_slice
from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    PresentationInput,
    ToolDefinition,
    ToolInput,
    batch_update,
    fetch_presentation
)
from gslides_mcp.utils.exceptions import InvalidArgumentError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import (
    validate_choice,
    validate_non_negative,
    validate_positive
)

logger = get_logger(__name__)

MODIFY_ACTIONS = ["replace", "append", "prepend", "delete"]
ALIGNMENTS = ["START", "CENTER", "END", "JUSTIFIED"]


class TextRangeInput(PresentationInput):
    object_id: str = Field(description="Shape holding the text")
    start_index: Optional[int] = Field(default=None, description="Start of the range (inclusive)")
    end_index: Optional[int] = Field(default=None, description="End of the range (exclusive)")


class ModifyTextInput(TextRangeInput):
    action: str = Field(description="replace, append, prepend or delete")
    text: Optional[str] = Field(default=None, description="Text for replace, append and prepend")


class TextStyleSpec(ToolInput):
    font_family: Optional[str] = None
    font_size: Optional[float] = Field(default=None, description="Font size in points")
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    foreground_color: Optional[str] = Field(default=None, description="Hex color, e.g. #FF0000")
    background_color: Optional[str] = Field(default=None, description="Hex highlight color")
    link_url: Optional[str] = Field(default=None, description="Hyperlink target")


class StyleTextInput(TextRangeInput):
    style: Optional[TextStyleSpec] = None


class ParagraphFormatting(ToolInput):
    alignment: Optional[str] = Field(default=None, description="START, CENTER, END or JUSTIFIED")
    line_spacing: Optional[float] = Field(default=None, description="Percent of normal, 100 is single spacing")
    space_above: Optional[float] = Field(default=None, description="Points")
    space_below: Optional[float] = Field(default=None, description="Points")
    indent_first_line: Optional[float] = Field(default=None, description="Points")
    indent_start: Optional[float] = Field(default=None, description="Points")
    indent_end: Optional[float] = Field(default=None, description="Points")


class FormatParagraphInput(PresentationInput):
    object_id: str = Field(description="Shape holding the text")
    paragraph_index: Optional[int] = Field(default=None, description="0-based paragraph; all paragraphs if omitted")
    formatting: Optional[ParagraphFormatting] = None


def _validate_range(params: TextRangeInput) -> None:
    if params.start_index is not None:
        validate_non_negative(params.start_index, "start_index")
    if params.end_index is not None:
        validate_non_negative(params.end_index, "end_index")
    if params.start_index is not None and params.end_index is not None and params.start_index > params.end_index:
        raise InvalidArgumentError(
            "start_index cannot be greater than end_index",
            field="start_index",
            value=params.start_index
        )


def _text_shape(presentation: Dict[str, Any], object_id: str, require_text: bool = True) -> Dict[str, Any]:
    """
    Find a slide shape whose text can be edited.

    Raises:
        NotFoundError: If no slide holds the object
        InvalidArgumentError: If the object is a table or holds no text
    """
    element = find_element(presentation, object_id, pages=("slides",)).element
    if "table" in element:
        raise InvalidArgumentError(
            "tables must be edited cell by cell with modify_table_cell",
            field="object_id",
            value=object_id
        )
    shape = element.get("shape")
    if shape is None or (require_text and not shape.get("text")):
        raise InvalidArgumentError(
            f"object '{object_id}' does not contain editable text",
            field="object_id",
            value=object_id
        )
    return shape


def _editable_text(shape: Dict[str, Any]) -> str:
    text = raw_text(shape.get("text"))
    # The final newline of a shape cannot be edited
    return text[:-1] if text.endswith("\n") else text


def build_modify_requests(object_id: str, action: str, current: str, text: str,
                          start_index: Optional[int] = None,
                          end_index: Optional[int] = None) -> Tuple[List[Dict[str, Any]], str]:
    """
    Build the requests for a text modification.

    A partial replace clamps the range to the current text length.

    Returns:
        (requests, expected text after the update)
    """
    length = utf16_len(current)
    delete_all = {"deleteText": {"objectId": object_id, "textRange": {"type": "ALL"}}}

    if action == "replace" and start_index is not None and end_index is not None:
        start = min(start_index, length)
        end = min(end_index, length)
        requests = []
        if end > start:
            requests.append({
                "deleteText": {
                    "objectId": object_id,
                    "textRange": {"type": "FIXED_RANGE", "startIndex": start, "endIndex": end},
                }
            })
        requests.append({"insertText": {"objectId": object_id, "insertionIndex": start, "text": text}})
        return requests, utf16_slice(current, 0, start) + text + utf16_slice(current, end)

    if action == "replace":
        requests = [delete_all] if current else []
        requests.append({"insertText": {"objectId": object_id, "insertionIndex": 0, "text": text}})
        return requests, text

    if action == "append":
        return [{"insertText": {"objectId": object_id, "insertionIndex": length, "text": text}}], current + text

    if action == "prepend":
        return [{"insertText": {"objectId": object_id, "insertionIndex": 0, "text": text}}], text + current

    return ([delete_all] if current else []), ""


def modify_text(services: ServiceBundle, params: ModifyTextInput) -> Dict[str, Any]:
    """
    Replace, append to, prepend to or delete the text of a shape.

    A replace with both start_index and end_index only swaps that range.
    """
    action = validate_choice(params.action, MODIFY_ACTIONS, "action", upper=False)
    if action != "delete" and not params.text:
        raise InvalidArgumentError(f"text is required for '{action}' action", field="text")
    _validate_range(params)
    if action == "replace" and (params.start_index is None) != (params.end_index is None):
        raise InvalidArgumentError(
            "start_index and end_index must be given together",
            field="end_index" if params.end_index is None else "start_index"
        )

    presentation = fetch_presentation(services, params.presentation_id)
    shape = _text_shape(presentation, params.object_id, require_text=False)
    current = _editable_text(shape)

    requests, updated = build_modify_requests(
        params.object_id, action, current, params.text or "", params.start_index, params.end_index
    )
    if requests:
        batch_update(services, params.presentation_id, requests, action="modify text")

    logger.info(f"Modified text of {params.object_id}: {action}")
    return {"object_id": params.object_id, "updated_text": updated, "action": action}


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_text_style(style: TextStyleSpec) -> Tuple[Dict[str, Any], List[str], List[str]]:
    """
    Translate a style spec into an API TextStyle.

    Returns:
        (text style, field mask entries, applied style descriptions)
    """
    text_style: Dict[str, Any] = {}
    fields: List[str] = []
    applied: List[str] = []

    if style.font_family:
        text_style["fontFamily"] = style.font_family
        fields.append("fontFamily")
        applied.append(f"font_family={style.font_family}")
    if style.font_size is not None:
        validate_positive(style.font_size, "style.font_size")
        text_style["fontSize"] = {"magnitude": style.font_size, "unit": "PT"}
        fields.append("fontSize")
        applied.append(f"font_size={style.font_size:g}pt")
    for name, api_name in (
        ("bold", "bold"),
        ("italic", "italic"),
        ("underline", "underline"),
        ("strikethrough", "strikethrough"),
    ):
        value = getattr(style, name)
        if value is not None:
            text_style[api_name] = value
            fields.append(api_name)
            applied.append(f"{name}={_flag(value)}")
    if style.foreground_color:
        color = require_color(style.foreground_color, "style.foreground_color")
        text_style["foregroundColor"] = {"opaqueColor": {"rgbColor": rgb_color(color)}}
        fields.append("foregroundColor")
        applied.append(f"foreground_color={style.foreground_color}")
    if style.background_color:
        color = require_color(style.background_color, "style.background_color")
        text_style["backgroundColor"] = {"opaqueColor": {"rgbColor": rgb_color(color)}}
        fields.append("backgroundColor")
        applied.append(f"background_color={style.background_color}")
    if style.link_url:
        text_style["link"] = {"url": style.link_url}
        fields.append("link")
        applied.append(f"link_url={style.link_url}")

    return text_style, fields, applied


def _style_range(start_index: Optional[int], end_index: Optional[int]) -> Tuple[Dict[str, Any], str]:
    if start_index is not None and end_index is not None:
        return (
            {"type": "FIXED_RANGE", "startIndex": start_index, "endIndex": end_index},
            f"FIXED_RANGE ({start_index}-{end_index})"
        )
    if start_index is not None:
        return {"type": "FROM_START_INDEX", "startIndex": start_index}, f"FROM_START_INDEX ({start_index})"
    if end_index is not None:
        return {"type": "FIXED_RANGE", "startIndex": 0, "endIndex": end_index}, f"FIXED_RANGE (0-{end_index})"
    return {"type": "ALL"}, "ALL"


def style_text(services: ServiceBundle, params: StyleTextInput) -> Dict[str, Any]:
    """Apply character styling to all of a shape's text or to a range of it."""
    _validate_range(params)
    if params.style is None:
        raise InvalidArgumentError("style is required", field="style")
    text_style, fields, applied = build_text_style(params.style)
    if not fields:
        raise InvalidArgumentError("no style properties provided", field="style")

    presentation = fetch_presentation(services, params.presentation_id)
    _text_shape(presentation, params.object_id)

    text_range, range_description = _style_range(params.start_index, params.end_index)
    batch_update(services, params.presentation_id, [{
        "updateTextStyle": {
            "objectId": params.object_id,
            "style": text_style,
            "textRange": text_range,
            "fields": ",".join(fields),
        }
    }], action="style text")

    logger.info(f"Applied {len(applied)} text styles to {params.object_id}")
    return {"object_id": params.object_id, "applied_styles": applied, "text_range": range_description}


def paragraph_ranges(text_content: Dict[str, Any]) -> List[Tuple[int, int]]:
    """
    (start, end) index of each paragraph, ending after its paragraph marker.
    """
    ranges = []
    start = 0
    for element in text_content.get("textElements", []):
        if "paragraphMarker" in element:
            end = element.get("endIndex", start)
            ranges.append((element.get("startIndex", start), end))
            start = end
    return ranges


def build_paragraph_style(formatting: ParagraphFormatting) -> Tuple[Dict[str, Any], List[str], List[str]]:
    """
    Translate paragraph formatting options into an API ParagraphStyle.

    Returns:
        (paragraph style, field mask entries, applied formatting descriptions)
    """
    style: Dict[str, Any] = {}
    fields: List[str] = []
    applied: List[str] = []

    if formatting.alignment:
        alignment = validate_choice(formatting.alignment, ALIGNMENTS, "formatting.alignment")
        style["alignment"] = alignment
        fields.append("alignment")
        applied.append(f"alignment={alignment}")
    if formatting.line_spacing is not None:
        validate_positive(formatting.line_spacing, "formatting.line_spacing")
        style["lineSpacing"] = formatting.line_spacing
        fields.append("lineSpacing")
        applied.append(f"line_spacing={formatting.line_spacing:.1f}%")

    for name, api_name in (
        ("space_above", "spaceAbove"),
        ("space_below", "spaceBelow"),
        ("indent_first_line", "indentFirstLine"),
        ("indent_start", "indentStart"),
        ("indent_end", "indentEnd"),
    ):
        value = getattr(formatting, name)
        if value is None:
            continue
        validate_non_negative(value, f"formatting.{name}")
        style[api_name] = {"magnitude": value, "unit": "PT"}
        fields.append(api_name)
        applied.append(f"{name}={value:.1f}pt")

    return style, fields, applied


def format_paragraph(services: ServiceBundle, params: FormatParagraphInput) -> Dict[str, Any]:
    """
    Set alignment, spacing and indentation on one paragraph or all of them.

    Paragraphs are located through the paragraph markers of the shape's text.
    """
    if params.formatting is None:
        raise InvalidArgumentError("formatting is required", field="formatting")
    if params.paragraph_index is not None:
        validate_non_negative(params.paragraph_index, "paragraph_index")
    style, fields, applied = build_paragraph_style(params.formatting)
    if not fields:
        raise InvalidArgumentError("no formatting properties provided", field="formatting")

    presentation = fetch_presentation(services, params.presentation_id)
    shape = _text_shape(presentation, params.object_id)

    if params.paragraph_index is None:
        text_range = {"type": "ALL"}
        scope = "ALL"
    else:
        ranges = paragraph_ranges(shape["text"])
        if params.paragraph_index >= len(ranges):
            raise InvalidArgumentError(
                f"paragraph index {params.paragraph_index} is out of range "
                f"(object has {len(ranges)} paragraphs)",
                field="paragraph_index",
                value=params.paragraph_index
            )
        start, end = ranges[params.paragraph_index]
        text_range = {"type": "FIXED_RANGE", "startIndex": start, "endIndex": end}
        scope = f"INDEX ({params.paragraph_index})"

    batch_update(services, params.presentation_id, [{
        "updateParagraphStyle": {
            "objectId": params.object_id,
            "style": style,
            "textRange": text_range,
            "fields": ",".join(fields),
        }
    }], action="format paragraph")

    logger.info(f"Formatted paragraphs of {params.object_id} ({scope})")
    return {"object_id": params.object_id, "applied_formatting": applied, "paragraph_scope": scope}


def get_text_editing_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "modify_text",
            "Replace, append, prepend or delete text in a shape. start_index/end_index limit a replace to a range.",
            ModifyTextInput,
            modify_text,
            "text"
        ),
        ToolDefinition(
            "style_text",
            "Apply font, size, emphasis, colors or a link to a shape's text or a range of it.",
            StyleTextInput,
            style_text,
            "text"
        ),
        ToolDefinition(
            "format_paragraph",
            "Set alignment, line spacing, paragraph spacing and indents on one paragraph or all of them.",
            FormatParagraphInput,
            format_paragraph,
            "text"
        ),
    ]
