"""
Tests for table tools.
"""

import pytest

from conftest import FIXED_NANOS, sent_requests
from gslides_mcp.tools.base import PositionInput, SizeInput
from gslides_mcp.tools.tables import (
    CellAlignmentInput,
    CellStyleInput,
    CreateTableInput,
    MergeCellsInput,
    ModifyTableCellInput,
    ModifyTableStructureInput,
    create_table,
    merge_cells,
    modify_table_cell,
    modify_table_structure
)
from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError


def structure(**kwargs):
    return ModifyTableStructureInput(presentation_id="pres-123", object_id="table_1", **kwargs)


def cell(**kwargs):
    return ModifyTableCellInput(presentation_id="pres-123", object_id="table_1", **kwargs)


def merge(**kwargs):
    return MergeCellsInput(presentation_id="pres-123", object_id="table_1", **kwargs)


# ============================================================================
# create_table
# ============================================================================

class TestCreateTable:
    """Table creation."""

    def test_create(self, mock_services):
        result = create_table(mock_services, CreateTableInput(
            presentation_id="pres-123", slide_index=3, rows=4, columns=2,
            position=PositionInput(x=10, y=10), size=SizeInput(width=300, height=200)
        ))

        request = sent_requests(mock_services)[0]["createTable"]
        assert request["objectId"] == f"table_{FIXED_NANOS}"
        assert (request["rows"], request["columns"]) == (4, 2)
        assert request["elementProperties"]["pageObjectId"] == "slide_3"
        assert result == {"object_id": f"table_{FIXED_NANOS}", "rows": 4, "columns": 2}

    def test_default_size_is_omitted(self, mock_services):
        create_table(mock_services, CreateTableInput(presentation_id="pres-123", slide_index=1, rows=1, columns=1))
        assert "size" not in sent_requests(mock_services)[0]["createTable"]["elementProperties"]

    @pytest.mark.parametrize("rows,columns", [(0, 2), (2, 0), (-1, 1)])
    def test_dimensions_must_be_positive(self, mock_services, rows, columns):
        with pytest.raises(InvalidArgumentError):
            create_table(mock_services, CreateTableInput(presentation_id="pres-123", slide_index=1, rows=rows, columns=columns))
        mock_services.slides.get_presentation.assert_not_called()


# ============================================================================
# modify_table_structure
# ============================================================================

class TestModifyTableStructure:
    """Row and column insertion and deletion."""

    def test_add_row_below(self, mock_services):
        result = modify_table_structure(mock_services, structure(action="add_row", index=0, count=2))

        assert sent_requests(mock_services) == [{
            "insertTableRows": {
                "tableObjectId": "table_1",
                "cellLocation": {"rowIndex": 0},
                "insertBelow": True,
                "number": 2,
            }
        }]
        assert result["new_rows"] == 4
        assert result["new_columns"] == 3

    def test_add_column_left(self, mock_services):
        modify_table_structure(mock_services, structure(action="ADD_COLUMN", index=1, insert_after=False))

        request = sent_requests(mock_services)[0]["insertTableColumns"]
        assert request["cellLocation"] == {"columnIndex": 1}
        assert request["insertRight"] is False

    def test_add_at_end_uses_last_index(self, mock_services):
        result = modify_table_structure(mock_services, structure(action="add_column", index=3, insert_after=False))

        request = sent_requests(mock_services)[0]["insertTableColumns"]
        assert request["cellLocation"] == {"columnIndex": 2}
        assert request["insertRight"] is True
        assert result["new_columns"] == 4

    def test_add_past_end(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="max index is 2"):
            modify_table_structure(mock_services, structure(action="add_row", index=3))

    def test_delete_columns_from_highest_index(self, mock_services):
        result = modify_table_structure(mock_services, structure(action="delete_column", index=1, count=2))

        assert sent_requests(mock_services) == [
            {"deleteTableColumn": {"tableObjectId": "table_1", "cellLocation": {"columnIndex": 2}}},
            {"deleteTableColumn": {"tableObjectId": "table_1", "cellLocation": {"columnIndex": 1}}},
        ]
        assert result["new_columns"] == 1

    def test_delete_row(self, mock_services):
        result = modify_table_structure(mock_services, structure(action="delete_row", index=1))
        assert sent_requests(mock_services) == [
            {"deleteTableRow": {"tableObjectId": "table_1", "cellLocation": {"rowIndex": 1}}}
        ]
        assert result["new_rows"] == 1

    def test_cannot_delete_every_row(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="at least 1 row"):
            modify_table_structure(mock_services, structure(action="delete_row", index=0, count=2))
        mock_services.slides.batch_update.assert_not_called()

    def test_delete_range_overflow(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="cannot delete 2 columns starting at index 2"):
            modify_table_structure(mock_services, structure(action="delete_column", index=2, count=2))

    def test_delete_index_out_of_range(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="out of range"):
            modify_table_structure(mock_services, structure(action="delete_row", index=2))

    def test_invalid_action(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="action"):
            modify_table_structure(mock_services, structure(action="split_row", index=0))

    def test_not_a_table(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="is not a table"):
            modify_table_structure(mock_services, ModifyTableStructureInput(
                presentation_id="pres-123", object_id="title_1", action="add_row", index=0
            ))

    def test_missing_table(self, mock_services):
        with pytest.raises(NotFoundError):
            modify_table_structure(mock_services, ModifyTableStructureInput(
                presentation_id="pres-123", object_id="ghost", action="add_row", index=0
            ))


# ============================================================================
# modify_table_cell
# ============================================================================

class TestModifyTableCell:
    """Cell text, style and alignment."""

    def test_text_style_and_alignment(self, mock_services):
        result = modify_table_cell(mock_services, cell(
            row=1, column=2, text="95",
            style=CellStyleInput(bold=True, font_size=12, foreground_color="#FF0000"),
            alignment=CellAlignmentInput(horizontal="center", vertical="middle"),
        ))

        requests = sent_requests(mock_services)
        assert [next(iter(request)) for request in requests] == [
            "deleteText", "insertText", "updateTextStyle", "updateParagraphStyle", "updateTableCellProperties",
        ]
        location = {"rowIndex": 1, "columnIndex": 2}
        assert requests[1]["insertText"]["cellLocation"] == location
        assert requests[2]["updateTextStyle"]["fields"] == "fontSize,bold,foregroundColor"
        assert requests[3]["updateParagraphStyle"]["style"] == {"alignment": "CENTER"}
        assert requests[4]["updateTableCellProperties"]["tableRange"] == {
            "location": location, "rowSpan": 1, "columnSpan": 1
        }
        assert result["modified_properties"] == [
            "text", "font_size=12", "bold=true", "foreground_color=#FF0000",
            "horizontal_alignment=CENTER", "vertical_alignment=MIDDLE",
        ]

    def test_empty_text_clears_cell(self, mock_services):
        result = modify_table_cell(mock_services, cell(row=0, column=0, text=""))

        assert sent_requests(mock_services) == [{
            "deleteText": {
                "objectId": "table_1",
                "cellLocation": {"rowIndex": 0, "columnIndex": 0},
                "textRange": {"type": "ALL"},
            }
        }]
        assert result["modified_properties"] == ["text"]

    def test_nothing_to_change(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="must be provided"):
            modify_table_cell(mock_services, cell(row=0, column=0))

    def test_empty_style(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="no cell modifications"):
            modify_table_cell(mock_services, cell(row=0, column=0, style=CellStyleInput()))

    def test_row_out_of_range(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="row 2 is out of range"):
            modify_table_cell(mock_services, cell(row=2, column=0, text="x"))

    def test_column_out_of_range(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="column 3 is out of range"):
            modify_table_cell(mock_services, cell(row=0, column=3, text="x"))

    def test_invalid_alignment(self, mock_services):
        with pytest.raises(InvalidArgumentError):
            modify_table_cell(mock_services, cell(row=0, column=0, alignment=CellAlignmentInput(vertical="SIDEWAYS")))
        mock_services.slides.get_presentation.assert_not_called()


# ============================================================================
# merge_cells
# ============================================================================

class TestMergeCells:
    """Merging and unmerging."""

    def test_merge(self, mock_services):
        result = merge_cells(mock_services, merge(action="merge", start_row=0, start_column=0, end_row=2, end_column=2))

        assert sent_requests(mock_services) == [{
            "mergeTableCells": {
                "objectId": "table_1",
                "tableRange": {"location": {"rowIndex": 0, "columnIndex": 0}, "rowSpan": 2, "columnSpan": 2},
            }
        }]
        assert result == {"object_id": "table_1", "action": "merge", "range": "rows 0-1, columns 0-1"}

    def test_unmerge(self, mock_services):
        result = merge_cells(mock_services, merge(action="UNMERGE", row=1, column=2))

        request = sent_requests(mock_services)[0]["unmergeTableCells"]
        assert request["tableRange"]["location"] == {"rowIndex": 1, "columnIndex": 2}
        assert result["range"] == "cell at row 1, column 2"

    def test_single_cell_merge(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="more than one cell"):
            merge_cells(mock_services, merge(action="merge", end_row=1, end_column=1))

    def test_empty_range(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="end_row"):
            merge_cells(mock_services, merge(action="merge", start_row=1, end_row=1, end_column=2))

    def test_range_exceeds_table(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="exceeds table size"):
            merge_cells(mock_services, merge(action="merge", end_row=3, end_column=2))

    def test_unmerge_out_of_range(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="out of range"):
            merge_cells(mock_services, merge(action="unmerge", row=5, column=0))
