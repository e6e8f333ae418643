"""
Defines models for temporary artifacts created while validating an encode.
"""

from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from loguru import logger


class DecodedImage:
    """
    Owns the temporary PNG produced when a JPEG XL output is decoded for scoring.

    Used as a context manager: the file is removed when the block exits, whether
    the comparison succeeded, failed or raised. Nothing is created on entry; the
    decoder writes the file at `path`.

    Attributes:
        path (Path): Location of the decoded PNG.
    """

    def __init__(self, path: Path):
        self.path = path

    def __enter__(self) -> "DecodedImage":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.remove_file()

    def remove_file(self):
        """Removes the decoded file if it exists."""
        try:
            if self.path.exists() and self.path.is_file():
                self.path.unlink()
                logger.trace(f"Removed temporary decoded image {self.path}")
        except OSError as e:
            logger.warning(f"Error removing temporary decoded image {self.path}: {e}")
