"""
Shared pieces for tool handlers: the tool definition type, common input
models and remote-call helpers that translate failures into tool errors.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gslides_mcp.services.google_services import ServiceBundle
from gslides_mcp.utils.exceptions import (
    InvalidArgumentError,
    SlidesToolError,
    map_remote_error
)
from gslides_mcp.utils.validators import validate_presentation_id

DRIVE_IMAGE_URL = "https://drive.google.com/uc?id={file_id}&export=download"
PRESENTATION_URL = "https://docs.google.com/presentation/d/{presentation_id}/edit"


class ToolInput(BaseModel):
    """Base input model; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class PresentationInput(ToolInput):
    """Input for tools that act on an existing presentation."""

    presentation_id: str = Field(description="Presentation ID or Google Slides URL")

    @field_validator("presentation_id")
    @classmethod
    def normalize_presentation_id(cls, v):
        return validate_presentation_id(v)


class SlideRefInput(PresentationInput):
    """Input for tools that target one slide."""

    slide_index: Optional[int] = Field(default=None, description="1-based slide index")
    slide_id: Optional[str] = Field(default=None, description="Slide object ID (takes precedence over slide_index)")


class PositionInput(ToolInput):
    x: float = Field(default=0.0, description="X offset in points")
    y: float = Field(default=0.0, description="Y offset in points")


class SizeInput(ToolInput):
    width: float = Field(description="Width in points")
    height: float = Field(description="Height in points")


class ToolDefinition:
    """
    A tool exposed over MCP.
    Couples the name, description and input model with its handler.
    """

    def __init__(
        self,
        name: str,
        description: str,
        input_model: Type[ToolInput],
        handler: Callable[[ServiceBundle, Any], Dict[str, Any]],
        category: str
    ):
        """
        Initialize tool definition.

        Args:
            name: Tool name as advertised to clients
            description: Human-readable description
            input_model: Pydantic model validating the arguments
            handler: Function (services, params) -> result dict
            category: Tool family used for grouping
        """
        self.name = name
        self.description = description
        self.input_model = input_model
        self.handler = handler
        self.category = category

    @property
    def input_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema()

    def parse(self, arguments: Optional[Dict[str, Any]]) -> ToolInput:
        """
        Validate raw arguments.

        Raises:
            InvalidArgumentError: If the arguments do not match the input model
        """
        try:
            return self.input_model.model_validate(arguments or {})
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise InvalidArgumentError(
                f"invalid input for {self.name}: {field or 'arguments'}: {first.get('msg')}",
                field=field,
                cause=e
            ) from e

    def invoke(self, services: ServiceBundle, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return self.handler(services, self.parse(arguments))


@contextmanager
def remote_errors(resource: str = "presentation", action: str = "call remote API"):
    """
    Translate any exception raised inside the block into the tool error
    taxonomy. Tool errors pass through unchanged.
    """
    try:
        yield
    except SlidesToolError:
        raise
    except Exception as e:
        raise map_remote_error(e, resource=resource, action=action) from e


def fetch_presentation(services: ServiceBundle, presentation_id: str) -> Dict[str, Any]:
    with remote_errors("presentation", "get presentation"):
        return services.slides.get_presentation(presentation_id)


def batch_update(
    services: ServiceBundle,
    presentation_id: str,
    requests: List[Dict[str, Any]],
    action: str = "update presentation"
) -> Dict[str, Any]:
    with remote_errors("presentation", action):
        return services.slides.batch_update(presentation_id, requests)


def upload_public_image(
    services: ServiceBundle,
    name: str,
    mime_type: str,
    content: bytes,
    logger
) -> str:
    """
    Upload image bytes to Drive and share them by link.

    A failure to share is only logged; the Slides API may still be able to
    fetch the file.

    Returns:
        Drive file ID
    """
    with remote_errors("Drive folder", "upload image to Drive"):
        file_id = services.drive.upload_file(name, mime_type, content, services.upload_folder_id)

    try:
        services.drive.make_file_public(file_id)
    except Exception as e:
        logger.warning(f"Failed to make uploaded file {file_id} public: {e}")

    return file_id
