"""
Text extraction and object classification for Slides page elements.
"""

from typing import Any, Dict, List, Optional

ELEMENT_KINDS = [
    ("image", "IMAGE"),
    ("video", "VIDEO"),
    ("table", "TABLE"),
    ("line", "LINE"),
    ("elementGroup", "GROUP"),
    ("sheetsChart", "SHEETS_CHART"),
    ("wordArt", "WORD_ART"),
]


def object_type_of(element: Dict[str, Any]) -> str:
    """
    Classify a page element.

    Shapes report their shapeType (falling back to SHAPE); other elements
    report IMAGE, VIDEO, TABLE, LINE, GROUP, SHEETS_CHART or WORD_ART.
    """
    if "shape" in element:
        return element["shape"].get("shapeType") or "SHAPE"
    for key, kind in ELEMENT_KINDS:
        if key in element:
            return kind
    return "UNKNOWN"


def raw_text(text_content: Optional[Dict[str, Any]]) -> str:
    """Concatenate textRun contents without trimming, so indices stay valid."""
    if not text_content:
        return ""
    return "".join(
        run["textRun"].get("content", "")
        for run in text_content.get("textElements", [])
        if "textRun" in run
    )


def extract_text(text_content: Optional[Dict[str, Any]]) -> str:
    return raw_text(text_content).strip()


def utf16_len(text: str) -> int:
    """Length of text in UTF-16 code units, the unit of Slides API text indices."""
    return len(text.encode("utf-16-le")) // 2


def utf16_slice(text: str, start: int, end: Optional[int] = None) -> str:
    """Slice text by UTF-16 code unit offsets."""
    encoded = text.encode("utf-16-le")
    stop = len(encoded) if end is None else end * 2
    return encoded[start * 2:stop].decode("utf-16-le", errors="replace")


def table_cells(table: Dict[str, Any]):
    """Yield (row, column, cell) for every cell of an API table."""
    for row_index, row in enumerate(table.get("tableRows", [])):
        for column_index, cell in enumerate(row.get("tableCells", [])):
            yield row_index, column_index, cell


def table_text(table: Dict[str, Any]) -> List[List[str]]:
    """Return the trimmed text of every cell as rows of columns."""
    rows: List[List[str]] = []
    for row in table.get("tableRows", []):
        rows.append([extract_text(cell.get("text")) for cell in row.get("tableCells", [])])
    return rows


def truncate_text(text: str, max_len: int) -> str:
    """
    Shorten text for previews.

    Newlines become spaces; text longer than max_len is cut to
    max_len - 3 characters followed by "...".
    """
    text = text.strip().replace("\n", " ").replace("\r", "")
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def content_preview(element: Dict[str, Any], max_len: int = 100) -> str:
    """Preview of a shape's text, or of the first non-empty table cell."""
    if "shape" in element:
        return truncate_text(extract_text(element["shape"].get("text")), max_len)
    if "table" in element:
        for _, _, cell in table_cells(element["table"]):
            text = extract_text(cell.get("text"))
            if text:
                return truncate_text(text, max_len)
    return ""
