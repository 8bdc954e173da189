"""
Tests for background and theme tools.
"""

import base64

import pytest

from conftest import FIXED_NANOS, sent_requests
from gslides_mcp.core.png import PNG_SIGNATURE
from gslides_mcp.tools.background import SetBackgroundInput, set_background
from gslides_mcp.tools.theme import ApplyThemeInput, apply_theme, copy_color_scheme
from gslides_mcp.utils.exceptions import InvalidArgumentError, NotFoundError, UnsupportedError


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
PNG_BASE64 = base64.b64encode(PNG_BYTES).decode()
DRIVE_URL = "https://drive.google.com/uc?id=drive-file-1&export=download"


def background(**kwargs):
    return SetBackgroundInput(presentation_id="pres-123", **kwargs)


# ============================================================================
# set_background
# ============================================================================

class TestSetBackground:
    """Solid, image and gradient backgrounds."""

    def test_solid_on_one_slide(self, mock_services):
        result = set_background(mock_services, background(
            scope="slide", slide_index=2, background_type="solid", color="#FF0000"
        ))

        assert sent_requests(mock_services) == [{
            "updatePageProperties": {
                "objectId": "slide_2",
                "pageProperties": {"pageBackgroundFill": {
                    "solidFill": {"color": {"rgbColor": {"red": 1.0, "green": 0.0, "blue": 0.0}}}
                }},
                "fields": "pageBackgroundFill",
            }
        }]
        assert result == {
            "success": True,
            "message": "Solid background (#FF0000) applied successfully to slide",
            "affected_slides": ["slide_2"],
        }
        mock_services.drive.upload_file.assert_not_called()

    def test_solid_on_all_slides(self, mock_services):
        result = set_background(mock_services, background(scope="ALL", background_type="solid", color="#00FF00"))

        assert [request["updatePageProperties"]["objectId"] for request in sent_requests(mock_services)] == [
            "slide_1", "slide_2", "slide_3",
        ]
        assert result["message"].endswith(" to all 3 slides")

    def test_image(self, mock_services):
        result = set_background(mock_services, background(
            scope="slide", slide_id="slide_3", background_type="image", image_base64=PNG_BASE64
        ))

        mock_services.drive.upload_file.assert_called_once_with(
            f"slides_background_{FIXED_NANOS}.png", "image/png", PNG_BYTES, None
        )
        fill = sent_requests(mock_services)[0]["updatePageProperties"]["pageProperties"]["pageBackgroundFill"]
        assert fill == {"stretchedPictureFill": {"contentUrl": DRIVE_URL}}
        assert result["message"] == "Image background applied successfully to slide"

    @pytest.mark.parametrize("data,mime_type,extension", [
        (b"\xff\xd8\xff\xe0" + b"\x00" * 16, "image/jpeg", "jpg"),
        (b"GIF89a" + b"\x00" * 16, "image/gif", "gif"),
    ])
    def test_image_file_name_follows_format(self, mock_services, data, mime_type, extension):
        set_background(mock_services, background(
            scope="slide", slide_index=1, background_type="image", image_base64=base64.b64encode(data).decode()
        ))
        mock_services.drive.upload_file.assert_called_once_with(
            f"slides_background_{FIXED_NANOS}.{extension}", mime_type, data, None
        )

    def test_gradient_is_rendered_and_uploaded(self, mock_services):
        result = set_background(mock_services, background(
            scope="slide", slide_index=1, background_type="gradient",
            start_color="#FF0000", end_color="#0000FF", angle=90
        ))

        name, mime_type, content, _ = mock_services.drive.upload_file.call_args[0]
        assert name == f"slides_background_{FIXED_NANOS}.png"
        assert mime_type == "image/png"
        assert content.startswith(PNG_SIGNATURE)
        assert result["message"] == "Gradient background (#FF0000 to #0000FF) applied successfully to slide"

    def test_gradient_angle_range(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="angle"):
            set_background(mock_services, background(
                scope="all", background_type="gradient", start_color="#000000", end_color="#FFFFFF", angle=361
            ))
        mock_services.slides.get_presentation.assert_not_called()

    def test_gradient_needs_both_colors(self, mock_services):
        with pytest.raises(InvalidArgumentError):
            set_background(mock_services, background(scope="all", background_type="gradient", start_color="#000000"))

    def test_slide_scope_needs_reference(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="slide_index or slide_id"):
            set_background(mock_services, background(scope="slide", background_type="solid", color="#000000"))

    def test_image_requires_data(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="image_base64 is required"):
            set_background(mock_services, background(scope="all", background_type="image"))

    def test_invalid_type(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="background_type"):
            set_background(mock_services, background(scope="all", background_type="pattern"))

    def test_unknown_slide(self, mock_services):
        with pytest.raises(NotFoundError):
            set_background(mock_services, background(
                scope="slide", slide_id="ghost", background_type="solid", color="#000000"
            ))


# ============================================================================
# apply_theme
# ============================================================================

SOURCE = {
    "presentationId": "source-pres",
    "masters": [{
        "objectId": "source_master",
        "pageProperties": {"colorScheme": {"colors": [
            {"type": "ACCENT1", "color": {"red": 0.2, "green": 0.4, "blue": 0.6}},
            {"type": "DARK1", "color": {"red": 0.0, "green": 0.0, "blue": 0.0}},
            {"type": "LIGHT1", "color": {}},
            {"type": "CUSTOM", "color": {"red": 1.0}},
        ]}},
    }],
}


def test_copy_color_scheme_orders_and_filters():
    """Test pairs come out in canonical order, empty ones dropped."""
    colors = copy_color_scheme(SOURCE["masters"][0]["pageProperties"]["colorScheme"])
    assert colors == [
        {"type": "DARK1", "color": {"red": 0.0, "green": 0.0, "blue": 0.0}},
        {"type": "ACCENT1", "color": {"red": 0.2, "green": 0.4, "blue": 0.6}},
    ]
    assert copy_color_scheme(None) == []


class TestApplyTheme:
    """Copying theme colors."""

    @pytest.fixture
    def with_source(self, mock_services, presentation):
        mock_services.slides.get_presentation.side_effect = (
            lambda presentation_id: SOURCE if presentation_id == "source-pres" else presentation
        )
        return mock_services

    def test_copies_colors_to_first_master(self, with_source):
        result = apply_theme(with_source, ApplyThemeInput(
            presentation_id="pres-123", theme_source="presentation", source_presentation_id="source-pres"
        ))

        request = sent_requests(with_source)[0]["updatePageProperties"]
        assert request["objectId"] == "master_1"
        assert request["fields"] == "colorScheme"
        assert [pair["type"] for pair in request["pageProperties"]["colorScheme"]["colors"]] == ["DARK1", "ACCENT1"]
        assert result == {
            "success": True,
            "message": "Theme colors applied successfully from source presentation",
            "updated_properties": ["color_dark1", "color_accent1"],
            "source_master_id": "source_master",
            "target_master_id": "master_1",
        }

    def test_source_url_is_accepted(self, with_source):
        apply_theme(with_source, ApplyThemeInput(
            presentation_id="pres-123", theme_source="presentation",
            source_presentation_id="https://docs.google.com/presentation/d/source-pres/edit"
        ))
        with_source.slides.batch_update.assert_called_once()

    def test_gallery_is_unsupported(self, mock_services):
        with pytest.raises(UnsupportedError, match="gallery theme application is not available"):
            apply_theme(mock_services, ApplyThemeInput(presentation_id="pres-123", theme_source="gallery", theme_id="x"))
        mock_services.slides.get_presentation.assert_not_called()

    def test_source_required(self, mock_services):
        with pytest.raises(InvalidArgumentError, match="source_presentation_id is required"):
            apply_theme(mock_services, ApplyThemeInput(presentation_id="pres-123", theme_source="presentation"))

    def test_source_without_masters(self, mock_services):
        mock_services.slides.get_presentation.return_value = {"masters": []}
        with pytest.raises(NotFoundError, match="no master slides found in source presentation"):
            apply_theme(mock_services, ApplyThemeInput(
                presentation_id="pres-123", theme_source="presentation", source_presentation_id="other"
            ))

    def test_source_without_color_scheme(self, mock_services):
        mock_services.slides.get_presentation.return_value = {"masters": [{"objectId": "m", "pageProperties": {}}]}
        with pytest.raises(NotFoundError, match="no color scheme found"):
            apply_theme(mock_services, ApplyThemeInput(
                presentation_id="pres-123", theme_source="presentation", source_presentation_id="other"
            ))

    def test_target_without_masters(self, mock_services):
        mock_services.slides.get_presentation.side_effect = [SOURCE, {"masters": []}]
        with pytest.raises(NotFoundError, match="no master slides found in target presentation"):
            apply_theme(mock_services, ApplyThemeInput(
                presentation_id="pres-123", theme_source="presentation", source_presentation_id="source-pres"
            ))

    def test_missing_source(self, mock_services):
        mock_services.slides.get_presentation.side_effect = Exception("Requested entity was not found.")
        with pytest.raises(NotFoundError, match="source presentation not found"):
            apply_theme(mock_services, ApplyThemeInput(
                presentation_id="pres-123", theme_source="presentation", source_presentation_id="gone"
            ))
