"""
Pytest configuration and fixtures for testing.
"""

import copy

import pytest
from unittest.mock import MagicMock

from gslides_mcp.core.ids import IdGenerator
from gslides_mcp.services.google_services import DriveService, ServiceBundle, SlidesService


FIXED_NANOS = 1700000000000000000


def text_content(text):
    """Build an API TextContent holding a single run."""
    return {"textElements": [{"textRun": {"content": text}}]}


def emu_transform(x_pt, y_pt):
    return {"scaleX": 1, "scaleY": 1, "translateX": x_pt * 12700, "translateY": y_pt * 12700, "unit": "EMU"}


def emu_size(width_pt, height_pt):
    return {
        "width": {"magnitude": width_pt * 12700, "unit": "EMU"},
        "height": {"magnitude": height_pt * 12700, "unit": "EMU"},
    }


PRESENTATION = {
    "presentationId": "pres-123",
    "title": "Quarterly Review",
    "locale": "en",
    "pageSize": {"width": {"magnitude": 9144000, "unit": "EMU"}, "height": {"magnitude": 5143500, "unit": "EMU"}},
    "slides": [
        {
            "objectId": "slide_1",
            "slideProperties": {
                "layoutObjectId": "layout_title",
                "notesPage": {
                    "objectId": "notes_1",
                    "notesProperties": {"speakerNotesObjectId": "notes_body_1"},
                    "pageElements": [
                        {
                            "objectId": "notes_body_1",
                            "shape": {
                                "shapeType": "TEXT_BOX",
                                "placeholder": {"type": "BODY"},
                                "text": text_content("Mention the report deadline\n"),
                            },
                        }
                    ],
                },
            },
            "pageElements": [
                {
                    "objectId": "title_1",
                    "transform": emu_transform(50, 40),
                    "size": emu_size(400, 60),
                    "shape": {
                        "shapeType": "TEXT_BOX",
                        "text": text_content("Quarterly Report\n"),
                    },
                },
                {
                    "objectId": "table_1",
                    "transform": emu_transform(50, 120),
                    "size": emu_size(300, 100),
                    "table": {
                        "rows": 2,
                        "columns": 3,
                        "tableRows": [
                            {"tableCells": [
                                {"text": text_content("Region\n")},
                                {"text": text_content("Revenue\n")},
                                {"text": text_content("Costs\n")},
                            ]},
                            {"tableCells": [
                                {"text": text_content("North\n")},
                                {"text": text_content("100\n")},
                                {"text": text_content("80\n")},
                            ]},
                        ],
                    },
                },
                {
                    "objectId": "group_1",
                    "elementGroup": {
                        "children": [
                            {
                                "objectId": "group_shape",
                                "shape": {
                                    "shapeType": "RECTANGLE",
                                    "text": text_content("report summary\n"),
                                    "shapeProperties": {
                                        "shapeBackgroundFill": {
                                            "solidFill": {"color": {"rgbColor": {"red": 1.0, "green": 0.0, "blue": 0.0}}}
                                        }
                                    },
                                },
                            },
                            {"objectId": "group_image", "image": {"contentUrl": "https://example.com/a.png"}},
                        ]
                    },
                },
            ],
        },
        {
            "objectId": "slide_2",
            "slideProperties": {"layoutObjectId": "layout_blank"},
            "pageElements": [
                {"objectId": "image_2", "image": {"contentUrl": "https://example.com/b.png"}},
            ],
        },
        {
            "objectId": "slide_3",
            "slideProperties": {"layoutObjectId": "layout_blank"},
            "pageElements": [],
        },
    ],
    "layouts": [
        {
            "objectId": "layout_blank",
            "layoutProperties": {"name": "BLANK", "displayName": "Blank", "masterObjectId": "master_1"},
            "pageElements": [],
        },
        {
            "objectId": "layout_title",
            "layoutProperties": {"name": "TITLE", "displayName": "Title slide", "masterObjectId": "master_1"},
            "pageElements": [
                {"objectId": "layout_title_placeholder", "shape": {"shapeType": "TEXT_BOX"}},
            ],
        },
    ],
    "masters": [
        {
            "objectId": "master_1",
            "masterProperties": {"displayName": "Simple Light"},
            "pageProperties": {
                "colorScheme": {
                    "colors": [
                        {"type": "DARK1", "color": {"red": 0.1, "green": 0.1, "blue": 0.1}},
                        {"type": "LIGHT1", "color": {"red": 1.0, "green": 1.0, "blue": 1.0}},
                    ]
                }
            },
            "pageElements": [
                {"objectId": "master_logo", "image": {"contentUrl": "https://example.com/logo.png"}},
            ],
        }
    ],
}


@pytest.fixture
def presentation():
    """A fresh copy of the sample presentation document."""
    return copy.deepcopy(PRESENTATION)


@pytest.fixture
def id_generator():
    """IdGenerator with a frozen clock."""
    return IdGenerator(clock=lambda: FIXED_NANOS)


@pytest.fixture
def mock_services(presentation, id_generator):
    """ServiceBundle backed by mocks of the Slides and Drive services."""
    slides = MagicMock(spec=SlidesService)
    slides.get_presentation.return_value = presentation
    slides.batch_update.return_value = {"replies": [{}]}
    slides.create_presentation.return_value = {"presentationId": "new-pres", "title": "New Deck"}
    slides.get_thumbnail.return_value = {"contentUrl": "https://example.com/thumb.png"}

    drive = MagicMock(spec=DriveService)
    drive.upload_file.return_value = "drive-file-1"
    drive.list_comments.return_value = {"comments": []}

    return ServiceBundle(slides, drive, ids=id_generator)


def sent_requests(services):
    """Requests passed to the last batch_update call."""
    args, kwargs = services.slides.batch_update.call_args
    return kwargs.get("requests", args[1] if len(args) > 1 else None)
