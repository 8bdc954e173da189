"""
Table tools: create tables, change their structure, edit and merge cells.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from gslides_mcp.core.colors import require_color, rgb_color
from gslides_mcp.core.lookup import find_slide, find_table, table_dimensions
from gslides_mcp.core.units import element_properties
from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.tools.base import (
    PositionInput,
    PresentationInput,
    SizeInput,
    SlideRefInput,
    ToolDefinition,
    ToolInput,
    batch_update,
    fetch_presentation
)
from gslides_mcp.utils.exceptions import InvalidArgumentError
from gslides_mcp.utils.logging_config import get_logger
from gslides_mcp.utils.validators import validate_choice, validate_non_negative, validate_positive

logger = get_logger(__name__)

STRUCTURE_ACTIONS = ["add_row", "delete_row", "add_column", "delete_column"]
HORIZONTAL_ALIGNMENTS = ["START", "CENTER", "END", "JUSTIFIED"]
VERTICAL_ALIGNMENTS = ["TOP", "MIDDLE", "BOTTOM"]
MERGE_ACTIONS = ["merge", "unmerge"]


class CreateTableInput(SlideRefInput):
    rows: int = Field(description="Number of rows (at least 1)")
    columns: int = Field(description="Number of columns (at least 1)")
    position: Optional[PositionInput] = None
    size: Optional[SizeInput] = None


class ModifyTableStructureInput(PresentationInput):
    object_id: str = Field(description="Table object ID")
    action: str = Field(description="add_row, delete_row, add_column or delete_column")
    index: int = Field(description="0-based row or column index")
    count: int = Field(default=1, description="Number of rows or columns")
    insert_after: bool = Field(default=True, description="Insert below/right of index (add actions)")


class CellStyleInput(ToolInput):
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    foreground_color: Optional[str] = None
    background_color: Optional[str] = None


class CellAlignmentInput(ToolInput):
    horizontal: Optional[str] = Field(default=None, description="START, CENTER, END or JUSTIFIED")
    vertical: Optional[str] = Field(default=None, description="TOP, MIDDLE or BOTTOM")


class ModifyTableCellInput(PresentationInput):
    object_id: str
    row: int = Field(description="0-based row index")
    column: int = Field(description="0-based column index")
    text: Optional[str] = Field(default=None, description="Replacement text; empty string clears the cell")
    style: Optional[CellStyleInput] = None
    alignment: Optional[CellAlignmentInput] = None


class MergeCellsInput(PresentationInput):
    object_id: str
    action: str = Field(description="merge or unmerge")
    start_row: int = 0
    start_column: int = 0
    end_row: int = Field(default=0, description="Exclusive end row (merge)")
    end_column: int = Field(default=0, description="Exclusive end column (merge)")
    row: int = Field(default=0, description="Row of the merged cell (unmerge)")
    column: int = Field(default=0, description="Column of the merged cell (unmerge)")


def create_table(services: ServiceBundle, params: CreateTableInput) -> Dict[str, Any]:
    if params.rows < 1:
        raise InvalidArgumentError("rows must be at least 1", field="rows", value=params.rows)
    if params.columns < 1:
        raise InvalidArgumentError("columns must be at least 1", field="columns", value=params.columns)

    x = y = 0.0
    if params.position:
        x = validate_non_negative(params.position.x, "position.x")
        y = validate_non_negative(params.position.y, "position.y")
    width = height = None
    if params.size:
        width = validate_positive(params.size.width, "size.width")
        height = validate_positive(params.size.height, "size.height")

    presentation = fetch_presentation(services, params.presentation_id)
    slide, _ = find_slide(presentation, params.slide_index, params.slide_id)

    object_id = services.ids.new_id("table")
    batch_update(services, params.presentation_id, [{
        "createTable": {
            "objectId": object_id,
            "rows": params.rows,
            "columns": params.columns,
            "elementProperties": element_properties(slide["objectId"], x, y, width, height),
        }
    }], action="create table")

    logger.info(f"Created {params.rows}x{params.columns} table {object_id}")
    return {"object_id": object_id, "rows": params.rows, "columns": params.columns}


def _structure_requests(object_id: str, action: str, index: int, count: int, insert_after: bool, size: int):
    if action in ("add_row", "add_column"):
        # Inserting at the end is expressed relative to the last existing row/column
        reference, after = (index, insert_after) if index < size else (size - 1, True)
        if action == "add_row":
            return [{
                "insertTableRows": {
                    "tableObjectId": object_id,
                    "cellLocation": {"rowIndex": reference},
                    "insertBelow": after,
                    "number": count,
                }
            }]
        return [{
            "insertTableColumns": {
                "tableObjectId": object_id,
                "cellLocation": {"columnIndex": reference},
                "insertRight": after,
                "number": count,
            }
        }]

    # Deletions run from the highest index down so earlier indices stay valid
    if action == "delete_row":
        return [
            {"deleteTableRow": {"tableObjectId": object_id, "cellLocation": {"rowIndex": index + i}}}
            for i in reversed(range(count))
        ]
    return [
        {"deleteTableColumn": {"tableObjectId": object_id, "cellLocation": {"columnIndex": index + i}}}
        for i in reversed(range(count))
    ]


def modify_table_structure(services: ServiceBundle, params: ModifyTableStructureInput) -> Dict[str, Any]:
    """Add or delete rows or columns, keeping at least one of each."""
    action = validate_choice(params.action, STRUCTURE_ACTIONS, "action", upper=False)
    if params.index < 0:
        raise InvalidArgumentError("index must be non-negative", field="index", value=params.index)
    if params.count < 1:
        raise InvalidArgumentError("count must be at least 1", field="count", value=params.count)

    presentation = fetch_presentation(services, params.presentation_id)
    table = find_table(presentation, params.object_id)
    rows, columns = table_dimensions(table)

    is_row = action.endswith("_row")
    size = rows if is_row else columns
    noun = "row" if is_row else "column"

    if action.startswith("delete"):
        if params.index >= size:
            raise InvalidArgumentError(
                f"{noun} index {params.index} is out of range (table has {size} {noun}s)",
                field="index", value=params.index
            )
        if params.index + params.count > size:
            raise InvalidArgumentError(
                f"cannot delete {params.count} {noun}s starting at index {params.index} (table has {size} {noun}s)",
                field="count", value=params.count
            )
        if size - params.count < 1:
            raise InvalidArgumentError(
                f"cannot delete all {noun}s (table must have at least 1 {noun})",
                field="count", value=params.count
            )
    elif params.index > size:
        raise InvalidArgumentError(
            f"{noun} index {params.index} is out of range (table has {size} {noun}s, max index is {size})",
            field="index", value=params.index
        )

    requests = _structure_requests(params.object_id, action, params.index, params.count, params.insert_after, size)
    batch_update(services, params.presentation_id, requests, action="modify table structure")

    delta = params.count if action.startswith("add") else -params.count
    new_rows = rows + delta if is_row else rows
    new_columns = columns if is_row else columns + delta

    logger.info(f"Table {params.object_id}: {action} x{params.count}, now {new_rows}x{new_columns}")
    return {
        "object_id": params.object_id,
        "action": action,
        "index": params.index,
        "count": params.count,
        "new_rows": new_rows,
        "new_columns": new_columns,
    }


def _cell_style_request(object_id: str, location: Dict[str, int], style: CellStyleInput):
    text_style: Dict[str, Any] = {}
    fields = []
    modified = []

    if style.font_family:
        text_style["fontFamily"] = style.font_family
        fields.append("fontFamily")
        modified.append(f"font_family={style.font_family}")
    if style.font_size:
        validate_positive(style.font_size, "style.font_size")
        text_style["fontSize"] = {"magnitude": style.font_size, "unit": "PT"}
        fields.append("fontSize")
        modified.append(f"font_size={style.font_size:g}")
    for name, api_name in (("bold", "bold"), ("italic", "italic"),
                           ("underline", "underline"), ("strikethrough", "strikethrough")):
        value = getattr(style, name)
        if value is not None:
            text_style[api_name] = value
            fields.append(api_name)
            modified.append(f"{name}={str(value).lower()}")
    if style.foreground_color:
        color = require_color(style.foreground_color, "style.foreground_color")
        text_style["foregroundColor"] = {"opaqueColor": {"rgbColor": rgb_color(color)}}
        fields.append("foregroundColor")
        modified.append(f"foreground_color={style.foreground_color}")
    if style.background_color:
        color = require_color(style.background_color, "style.background_color")
        text_style["backgroundColor"] = {"opaqueColor": {"rgbColor": rgb_color(color)}}
        fields.append("backgroundColor")
        modified.append(f"background_color={style.background_color}")

    if not fields:
        return None, []

    return {
        "updateTextStyle": {
            "objectId": object_id,
            "cellLocation": location,
            "style": text_style,
            "textRange": {"type": "ALL"},
            "fields": ",".join(fields),
        }
    }, modified


def modify_table_cell(services: ServiceBundle, params: ModifyTableCellInput) -> Dict[str, Any]:
    """Replace a cell's text and/or apply text style and alignment."""
    if params.row < 0:
        raise InvalidArgumentError("row must be non-negative", field="row", value=params.row)
    if params.column < 0:
        raise InvalidArgumentError("column must be non-negative", field="column", value=params.column)
    if params.text is None and params.style is None and params.alignment is None:
        raise InvalidArgumentError("text, style, or alignment must be provided", field="text")

    horizontal = vertical = None
    if params.alignment:
        if params.alignment.horizontal:
            horizontal = validate_choice(params.alignment.horizontal, HORIZONTAL_ALIGNMENTS, "alignment.horizontal")
        if params.alignment.vertical:
            vertical = validate_choice(params.alignment.vertical, VERTICAL_ALIGNMENTS, "alignment.vertical")

    presentation = fetch_presentation(services, params.presentation_id)
    table = find_table(presentation, params.object_id)
    rows, columns = table_dimensions(table)
    if params.row >= rows:
        raise InvalidArgumentError(f"row {params.row} is out of range (table has {rows} rows)", field="row", value=params.row)
    if params.column >= columns:
        raise InvalidArgumentError(
            f"column {params.column} is out of range (table has {columns} columns)",
            field="column", value=params.column
        )

    location = {"rowIndex": params.row, "columnIndex": params.column}
    requests: List[Dict[str, Any]] = []
    modified: List[str] = []

    if params.text is not None:
        requests.append({
            "deleteText": {
                "objectId": params.object_id,
                "cellLocation": location,
                "textRange": {"type": "ALL"},
            }
        })
        if params.text:
            requests.append({
                "insertText": {
                    "objectId": params.object_id,
                    "cellLocation": location,
                    "insertionIndex": 0,
                    "text": params.text,
                }
            })
        modified.append("text")

    if params.style:
        style_request, style_modified = _cell_style_request(params.object_id, location, params.style)
        if style_request:
            requests.append(style_request)
            modified.extend(style_modified)

    if horizontal:
        requests.append({
            "updateParagraphStyle": {
                "objectId": params.object_id,
                "cellLocation": location,
                "style": {"alignment": horizontal},
                "textRange": {"type": "ALL"},
                "fields": "alignment",
            }
        })
        modified.append(f"horizontal_alignment={horizontal}")

    if vertical:
        requests.append({
            "updateTableCellProperties": {
                "objectId": params.object_id,
                "tableRange": {"location": location, "rowSpan": 1, "columnSpan": 1},
                "tableCellProperties": {"contentAlignment": vertical},
                "fields": "contentAlignment",
            }
        })
        modified.append(f"vertical_alignment={vertical}")

    if not requests:
        raise InvalidArgumentError("no cell modifications specified", field="style")

    batch_update(services, params.presentation_id, requests, action="modify table cell")
    return {
        "object_id": params.object_id,
        "row": params.row,
        "column": params.column,
        "modified_properties": modified,
    }


def merge_cells(services: ServiceBundle, params: MergeCellsInput) -> Dict[str, Any]:
    """
    Merge a rectangular cell range (end indices exclusive) or unmerge the
    merged cell at row/column.
    """
    action = validate_choice(params.action, MERGE_ACTIONS, "action", upper=False)

    if action == "merge":
        if params.start_row < 0 or params.start_column < 0:
            raise InvalidArgumentError("start_row and start_column must be non-negative", field="start_row")
        if params.end_row <= params.start_row:
            raise InvalidArgumentError("end_row must be greater than start_row", field="end_row", value=params.end_row)
        if params.end_column <= params.start_column:
            raise InvalidArgumentError(
                "end_column must be greater than start_column", field="end_column", value=params.end_column
            )
        if params.end_row - params.start_row == 1 and params.end_column - params.start_column == 1:
            raise InvalidArgumentError("merge range must span more than one cell", field="end_row")
    elif params.row < 0 or params.column < 0:
        raise InvalidArgumentError("row and column must be non-negative", field="row")

    presentation = fetch_presentation(services, params.presentation_id)
    table = find_table(presentation, params.object_id)
    rows, columns = table_dimensions(table)

    if action == "merge":
        if params.end_row > rows or params.end_column > columns:
            raise InvalidArgumentError(
                f"merge range exceeds table size ({rows} rows, {columns} columns)", field="end_row"
            )
        table_range = {
            "location": {"rowIndex": params.start_row, "columnIndex": params.start_column},
            "rowSpan": params.end_row - params.start_row,
            "columnSpan": params.end_column - params.start_column,
        }
        request = {"mergeTableCells": {"objectId": params.object_id, "tableRange": table_range}}
        description = (
            f"rows {params.start_row}-{params.end_row - 1}, "
            f"columns {params.start_column}-{params.end_column - 1}"
        )
    else:
        if params.row >= rows or params.column >= columns:
            raise InvalidArgumentError(
                f"cell ({params.row}, {params.column}) is out of range ({rows} rows, {columns} columns)",
                field="row"
            )
        table_range = {
            "location": {"rowIndex": params.row, "columnIndex": params.column},
            "rowSpan": 1,
            "columnSpan": 1,
        }
        request = {"unmergeTableCells": {"objectId": params.object_id, "tableRange": table_range}}
        description = f"cell at row {params.row}, column {params.column}"

    batch_update(services, params.presentation_id, [request], action=f"{action} table cells")
    logger.info(f"Table {params.object_id}: {action} {description}")
    return {"object_id": params.object_id, "action": action, "range": description}


def get_table_tools() -> List[ToolDefinition]:
    return [
        ToolDefinition(
            "create_table",
            "Create a table with the given number of rows and columns on a slide.",
            CreateTableInput,
            create_table,
            "tables"
        ),
        ToolDefinition(
            "modify_table_structure",
            "Add or delete rows or columns of a table.",
            ModifyTableStructureInput,
            modify_table_structure,
            "tables"
        ),
        ToolDefinition(
            "modify_table_cell",
            "Set a table cell's text, text style and alignment.",
            ModifyTableCellInput,
            modify_table_cell,
            "tables"
        ),
        ToolDefinition(
            "merge_cells",
            "Merge a range of table cells or unmerge a merged cell.",
            MergeCellsInput,
            merge_cells,
            "tables"
        ),
    ]
