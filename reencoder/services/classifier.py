"""
Decides which media category a file belongs to and where its encoded result goes.
"""

from pathlib import Path
from typing import Dict, Iterable, Optional

from ..config.media import (
    IMAGE_EXTENSIONS,
    IMAGE_OUTPUT_EXTENSION,
    VIDEO_EXTENSIONS,
    VIDEO_OUTPUT_EXTENSION,
)
from ..domain.models import EncodeTask, MediaCategory


class FileClassifier:
    """
    Maps file extensions to media categories.

    The lookup is case-insensitive and has no side effects. A file with an
    unknown extension is `MediaCategory.UNSUPPORTED`, which is a normal result
    and not an error.
    """

    def __init__(
        self,
        video_extensions: Iterable[str] = VIDEO_EXTENSIONS,
        image_extensions: Iterable[str] = IMAGE_EXTENSIONS,
        video_output_extension: str = VIDEO_OUTPUT_EXTENSION,
        image_output_extension: str = IMAGE_OUTPUT_EXTENSION,
    ):
        self._categories: Dict[str, MediaCategory] = {}
        for ext in video_extensions:
            self._categories[self._normalize(ext)] = MediaCategory.VIDEO
        for ext in image_extensions:
            self._categories[self._normalize(ext)] = MediaCategory.IMAGE

        self._output_extensions = {
            MediaCategory.VIDEO: video_output_extension,
            MediaCategory.IMAGE: image_output_extension,
        }

    @staticmethod
    def _normalize(ext: str) -> str:
        ext = ext.lower()
        return ext if ext.startswith(".") else f".{ext}"

    def classify(self, filename: str) -> MediaCategory:
        suffix = Path(filename).suffix.lower()
        return self._categories.get(suffix, MediaCategory.UNSUPPORTED)

    def output_extension(self, category: MediaCategory) -> Optional[str]:
        return self._output_extensions.get(category)

    def build_task(self, source_path: Path, output_dir: Path) -> Optional[EncodeTask]:
        """
        Creates the task for `source_path`, or returns None if it is unsupported.

        The output file keeps the source's base name and takes the category's
        target extension, e.g. `clip.MOV` becomes `<output_dir>/clip.mkv`.
        """
        category = self.classify(source_path.name)
        if category is MediaCategory.UNSUPPORTED:
            return None

        base_name = source_path.stem
        return EncodeTask(
            source_path=source_path,
            category=category,
            output_path=output_dir / f"{base_name}{self._output_extensions[category]}",
            base_name=base_name,
        )
