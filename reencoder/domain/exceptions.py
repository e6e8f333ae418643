"""
Defines custom exception types for the Media Re-encoder.

The hierarchy mirrors how far a failure reaches:

- `BatchException` subclasses stop a whole batch before any file is touched.
- `EncodingException` subclasses are caught per file and turned into a
  `failed` outcome while the rest of the batch continues.
- `QualityCheckException` never leaves the quality validator; it only ends up
  in the log.

All custom exceptions inherit from the base `ReencoderException`.
"""


class ReencoderException(Exception):
    """Base class for all custom exceptions in the Media Re-encoder."""

    pass


# --- Batch-level (fatal) Exceptions ---
class BatchException(ReencoderException):
    """Base class for failures that prevent a batch from running at all."""

    pass


class SourceFolderException(BatchException):
    """Raised when the source folder does not exist, is not a directory or cannot be listed."""

    pass


class OutputFolderException(BatchException):
    """
    Raised when the `reencoded` output folder cannot be created.

    No file can be processed without it, so the batch is aborted before any
    encoder is started.
    """

    pass


# --- Per-file Exceptions ---
class EncodingException(ReencoderException):
    """Base class for failures confined to a single file."""

    pass


class InvocationError(EncodingException):
    """
    Raised when an external encoder exits with a non-zero status, cannot be
    started, or exceeds its timeout.

    Attributes:
        file_name: Name of the source file being encoded.
        stderr_text: Diagnostic text captured from the process.
    """

    def __init__(self, file_name: str, stderr_text: str):
        super().__init__(f"Encoding failed for {file_name}: {stderr_text}")
        self.file_name = file_name
        self.stderr_text = stderr_text


# --- Diagnostic-only Exceptions ---
class QualityCheckException(ReencoderException):
    """Raised inside the quality validator when decoding or scoring fails."""

    pass


# --- Collaborator Exceptions (web layer) ---
class FolderListingException(ReencoderException):
    """Base class for errors raised while listing a folder's contents."""

    pass


class FolderNotFound(FolderListingException):
    pass


class FolderPermissionDenied(FolderListingException):
    pass


class FolderSelectionException(ReencoderException):
    """
    Raised when the native folder dialog fails, is cancelled, or is not
    available on the current platform.

    Attributes:
        detail: Text reported by the dialog process, if any.
    """

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message)
        self.detail = detail
