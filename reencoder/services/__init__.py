"""
Services Package for the Media Re-encoder.

A service performs one well-defined step for the batch pipeline or the web
layer:

- **FileClassifier:** maps a file extension to a media category and builds the
  `EncodeTask` for supported files.
- **EncoderInvoker:** runs ffmpeg or cjxl for one task and reports failures as
  `InvocationError`.
- **QualityValidator:** scores an encoded file against its source with VMAF,
  best-effort.
- **ResultReporter:** aggregates outcomes into a `BatchSummary`.
- **ErrorLog / BatchLog:** the text and YAML log files kept in the output folder.
- **Directory listing and folder picker:** thin collaborators used only by the
  HTTP service.
"""
from .classifier import FileClassifier
from .encoder_invoker import EncoderInvoker
from .quality_validator import QualityValidator, parse_vmaf_score
from .reporter import ResultReporter

__all__ = ["EncoderInvoker", "FileClassifier", "QualityValidator", "ResultReporter", "parse_vmaf_score"]
