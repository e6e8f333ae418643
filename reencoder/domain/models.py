"""
Core data models of the re-encoding pipeline.

`EncodeTask` describes what should happen to one source file, `EncodeOutcome`
records what did happen, and `BatchSummary` is the shape handed back to the
caller once every task has run.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config.common import STATUS_FAILED, STATUS_SUCCESS


class MediaCategory(Enum):
    """Media type of a file, decided by its extension alone."""

    VIDEO = "video"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class EncodeTask:
    """
    One unit of work for the pipeline.

    Attributes:
        source_path: Absolute path of the file to re-encode.
        category: Media category of the source (never UNSUPPORTED).
        output_path: Where the encoder writes its result.
        base_name: Source file name without its extension.
    """

    source_path: Path
    category: MediaCategory
    output_path: Path
    base_name: str

    @property
    def file_name(self) -> str:
        return self.source_path.name


@dataclass
class EncodeOutcome:
    """
    Result of running one `EncodeTask` through the pipeline.

    A `success` outcome always carries both sizes. A `failed` outcome carries
    an error text and never any sizes.
    """

    file_name: str
    status: str
    output_path: Optional[Path] = None
    error_detail: Optional[str] = None
    original_size_bytes: Optional[int] = None
    encoded_size_bytes: Optional[int] = None
    quality_score: Optional[float] = None

    @classmethod
    def success(
        cls, file_name: str, output_path: Path, original_size_bytes: int, encoded_size_bytes: int
    ) -> "EncodeOutcome":
        return cls(
            file_name=file_name,
            status=STATUS_SUCCESS,
            output_path=output_path,
            original_size_bytes=original_size_bytes,
            encoded_size_bytes=encoded_size_bytes,
        )

    @classmethod
    def failed(cls, file_name: str, error_detail: str) -> "EncodeOutcome":
        return cls(file_name=file_name, status=STATUS_FAILED, error_detail=error_detail)

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the outcome into its wire shape, omitting unset fields."""
        data: Dict[str, Any] = {"file": self.file_name, "status": self.status}
        if self.output_path is not None:
            data["outputPath"] = str(self.output_path)
        if self.error_detail is not None:
            data["error"] = self.error_detail
        if self.original_size_bytes is not None:
            data["oldSize"] = self.original_size_bytes
        if self.encoded_size_bytes is not None:
            data["newSize"] = self.encoded_size_bytes
        if self.quality_score is not None:
            data["qualityScore"] = self.quality_score
        return data


@dataclass
class BatchSummary:
    message: str
    results: List[EncodeOutcome] = field(default_factory=list)
    success_count: int = 0
    failed_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "results": [outcome.to_dict() for outcome in self.results],
            "successCount": self.success_count,
            "failedCount": self.failed_count,
        }
