"""
Object and file ID generation.

Slides object IDs must be unique within a presentation; the server derives
them from a nanosecond clock. The clock is injected so tests get stable IDs.
"""

import time
from typing import Callable, Optional


class IdGenerator:
    """Generates "<prefix>_<nanoseconds>" identifiers from an injected clock."""

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        """
        Initialize ID generator.

        Args:
            clock: Callable returning the current time in nanoseconds
                   (defaults to time.time_ns)
        """
        self._clock = clock or time.time_ns

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{self._clock()}"

    def file_name(self, prefix: str, extension: str = "") -> str:
        """Name for an uploaded Drive file, e.g. slides_background_<ns>.png."""
        name = self.new_id(prefix)
        return f"{name}.{extension}" if extension else name
