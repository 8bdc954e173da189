"""
Linear gradient rasterizer for slide backgrounds.

Only the four axis-aligned directions are rendered: the angle is bucketed
to the nearest of left-to-right, top-to-bottom, right-to-left and
bottom-to-top. The image is small and relies on the stretched picture
fill to cover the slide.
"""

from typing import NamedTuple

from gslides_mcp.core.colors import Color
from gslides_mcp.core.png import encode_png

GRADIENT_WIDTH = 100
GRADIENT_HEIGHT = 100

OPAQUE = 255


class GradientDirection(NamedTuple):
    """Interpolation axis and orientation chosen for an angle."""

    horizontal: bool
    reversed: bool


def normalize_angle(angle: float) -> float:
    """Bring an angle in degrees into [0, 360)."""
    angle = angle % 360.0
    if angle >= 360.0:
        angle -= 360.0
    return angle


def classify_angle(angle: float) -> GradientDirection:
    """
    Bucket an angle into one of four directions.

    [45, 135) is top to bottom, [135, 225) right to left,
    [225, 315) bottom to top, everything else left to right.

    Args:
        angle: Angle in degrees, any real value

    Returns:
        GradientDirection for the normalized angle
    """
    angle = normalize_angle(angle)
    if 45 <= angle < 135:
        return GradientDirection(horizontal=False, reversed=False)
    if 135 <= angle < 225:
        return GradientDirection(horizontal=True, reversed=True)
    if 225 <= angle < 315:
        return GradientDirection(horizontal=False, reversed=True)
    return GradientDirection(horizontal=True, reversed=False)


def _channel_bytes(color: Color):
    return tuple(int(round(component * 255)) for component in color)


def render_gradient(
    start: Color,
    end: Color,
    angle: float,
    width: int = GRADIENT_WIDTH,
    height: int = GRADIENT_HEIGHT
) -> bytes:
    """
    Rasterize a gradient into a row-major RGBA buffer.

    Each channel is start * (1 - t) + end * t truncated to a byte, where t
    runs from 0 to 1 along the chosen axis. Alpha is always 255.

    Args:
        start: Color at t = 0
        end: Color at t = 1
        angle: Gradient angle in degrees
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        width * height * 4 bytes
    """
    direction = classify_angle(angle)
    start_rgb = _channel_bytes(start)
    end_rgb = _channel_bytes(end)

    span = (width if direction.horizontal else height) - 1
    # One interpolated RGBA value per step along the axis
    steps = []
    for i in range(span + 1):
        t = i / span if span > 0 else 0.0
        if direction.reversed:
            t = 1.0 - t
        steps.append(bytes(
            [int(s * (1 - t) + e * t) for s, e in zip(start_rgb, end_rgb)] + [OPAQUE]
        ))

    pixels = bytearray()
    for y in range(height):
        if direction.horizontal:
            pixels += b"".join(steps)
        else:
            pixels += steps[y] * width
    return bytes(pixels)


def generate_gradient_image(start: Color, end: Color, angle: float) -> bytes:
    """
    Render a 100x100 gradient and encode it as PNG.

    Args:
        start: Start color
        end: End color
        angle: Gradient angle in degrees

    Returns:
        PNG file bytes
    """
    pixels = render_gradient(start, end, angle, GRADIENT_WIDTH, GRADIENT_HEIGHT)
    return encode_png(GRADIENT_WIDTH, GRADIENT_HEIGHT, pixels)
