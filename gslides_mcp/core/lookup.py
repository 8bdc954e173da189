"""
Shared lookup of slides and page elements inside a presentation document.

Every tool that targets "a slide by index or ID" or "an object by ID"
goes through these helpers so lookups and their errors are uniform.
"""

from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Sequence, Set, Tuple

from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError

PAGE_COLLECTIONS = ("slides", "layouts", "masters")


class ElementLocation(NamedTuple):
    """Where a page element was found."""

    element: Dict[str, Any]
    page: Dict[str, Any]
    page_kind: str
    # 1-based slide position, None for layouts and masters
    slide_index: Optional[int]


def find_slide(
    presentation: Dict[str, Any],
    slide_index: Optional[int] = None,
    slide_id: Optional[str] = None
) -> Tuple[Dict[str, Any], int]:
    """
    Resolve a slide by ID or by 1-based index. The ID wins when both are given.

    Args:
        presentation: Presentation document
        slide_index: 1-based slide position
        slide_id: Slide object ID

    Returns:
        (slide, zero-based index)

    Raises:
        InvalidArgumentError: If neither reference is given
        NotFoundError: If the slide does not exist
    """
    slides = presentation.get("slides", [])

    if slide_id:
        for position, slide in enumerate(slides):
            if slide.get("objectId") == slide_id:
                return slide, position
        raise NotFoundError(f"slide_id '{slide_id}' not found")

    if slide_index is None or slide_index == 0:
        raise InvalidArgumentError(
            "either slide_index or slide_id must be provided",
            field="slide_index"
        )

    if slide_index < 1 or slide_index > len(slides):
        raise NotFoundError(f"slide index {slide_index} out of range (1-{len(slides)})")

    return slides[slide_index - 1], slide_index - 1


def resolve_slides(
    presentation: Dict[str, Any],
    scope: str,
    slide_index: Optional[int] = None,
    slide_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Resolve the target slides for tools that work on one slide or all of them.

    Args:
        presentation: Presentation document
        scope: "slide" or "all"
        slide_index: 1-based slide position for scope "slide"
        slide_id: Slide object ID for scope "slide"

    Returns:
        List of slide documents
    """
    if scope == "all":
        slides = presentation.get("slides", [])
        if not slides:
            raise NotFoundError("presentation has no slides")
        return list(slides)

    slide, _ = find_slide(presentation, slide_index, slide_id)
    return [slide]


def iter_elements(elements: Sequence[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
    """Walk page elements depth-first, descending into groups."""
    for element in elements or []:
        yield element
        group = element.get("elementGroup")
        if group:
            yield from iter_elements(group.get("children", []))


def find_element(
    presentation: Dict[str, Any],
    object_id: str,
    pages: Sequence[str] = PAGE_COLLECTIONS
) -> ElementLocation:
    """
    Find a page element by ID across slides, layouts and masters.

    Args:
        presentation: Presentation document
        object_id: Page element object ID
        pages: Page collections to search, in order

    Returns:
        ElementLocation

    Raises:
        NotFoundError: If no page holds the element
    """
    for kind in pages:
        for position, page in enumerate(presentation.get(kind, [])):
            for element in iter_elements(page.get("pageElements", [])):
                if element.get("objectId") == object_id:
                    slide_index = position + 1 if kind == "slides" else None
                    return ElementLocation(element, page, kind, slide_index)

    raise NotFoundError(f"object '{object_id}' not found")


def find_table(presentation: Dict[str, Any], object_id: str) -> Dict[str, Any]:
    """
    Find a table element by ID.

    Raises:
        NotFoundError: If the object does not exist
        InvalidArgumentError: If the object is not a table
    """
    element = find_element(presentation, object_id).element
    if "table" not in element:
        raise InvalidArgumentError(f"object '{object_id}' is not a table", field="object_id", value=object_id)
    return element


def table_dimensions(table_element: Dict[str, Any]) -> Tuple[int, int]:
    table = table_element["table"]
    rows = table.get("rows", len(table.get("tableRows", [])))
    columns = table.get("columns")
    if columns is None:
        table_rows = table.get("tableRows", [])
        columns = len(table_rows[0].get("tableCells", [])) if table_rows else 0
    return rows, columns


def collect_object_ids(presentation: Dict[str, Any]) -> Set[str]:
    """
    Collect every page and element ID: slides with their notes pages,
    layouts and masters.
    """
    ids: Set[str] = set()

    def add_page(page: Dict[str, Any]) -> None:
        if page.get("objectId"):
            ids.add(page["objectId"])
        for element in iter_elements(page.get("pageElements", [])):
            if element.get("objectId"):
                ids.add(element["objectId"])

    for kind in PAGE_COLLECTIONS:
        for page in presentation.get(kind, []):
            add_page(page)
            notes_page = page.get("slideProperties", {}).get("notesPage")
            if notes_page:
                add_page(notes_page)

    return ids
