"""
This module writes the per-batch log files kept in the output folder.

ErrorLog appends human-readable failure records to a text file, while
BatchLog writes a machine-readable YAML report of the last batch. Both are
separate from the real-time console logging done with loguru, and neither
ever raises: a log that cannot be written is reported through loguru instead.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Union

import yaml
from loguru import logger

from ..config.common import BATCH_LOG_FILE_NAME, ERROR_LOG_FILE_NAME
from ..domain.models import BatchSummary


class Log:
    """
    Base class for file logs.

    Attributes:
        log_dir: Directory holding the log file; created if missing.
        log_file_path: Full path of the log file, set by subclasses.
    """

    linesep_marker: str = "=" * 50

    def __init__(self, log_dir: Path):
        self.log_file_path: Path
        self.log_dir: Path = log_dir.resolve()
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def write(self, log_content: Union[dict, list, str]):
        raise NotImplementedError("Subclasses must implement the write() method.")


class ErrorLog(Log):
    """Appends failure records to `error.txt`, each followed by a separator line."""

    def __init__(self, error_log_dir: Path, filename: str = ERROR_LOG_FILE_NAME):
        super().__init__(error_log_dir)
        self.log_file_path = self.log_dir / filename

    def write(self, *error_messages: str):
        if not error_messages:
            return

        content_to_write = "\n".join(error_messages) + "\n" + self.linesep_marker + "\n"

        try:
            with self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(content_to_write)
        except OSError as e:
            logger.error(f"Failed to write to error log {self.log_file_path}: {e}")
            logger.error("Original error messages attempted to log:")
            for msg in error_messages:
                logger.error(f"  - {msg}")


class BatchLog(Log):
    """
    Writes the summary of one batch to `reencode_log.yaml`.

    The file is rewritten on every batch, so it always describes the latest run
    of the folder.
    """

    def __init__(self, log_dir: Path, filename: str = BATCH_LOG_FILE_NAME):
        super().__init__(log_dir)
        self.log_file_path = self.log_dir / filename

    def write(self, summary: BatchSummary):
        entries: List[Dict] = []
        for index, outcome in enumerate(summary.results, start=1):
            entry = {"index": index}
            entry.update(outcome.to_dict())
            entries.append(entry)

        document = {
            "message": summary.message,
            "ended_datetime": datetime.now().isoformat(timespec="seconds"),
            "source_dir": str(self.log_dir.parent),
            "success_count": summary.success_count,
            "failed_count": summary.failed_count,
            "results": entries,
        }

        try:
            with self.log_file_path.open("w", encoding="utf-8") as f:
                yaml.dump(
                    document,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                    indent=4,
                    width=220,
                )
            logger.debug(f"Batch log written to {self.log_file_path}")
        except OSError as e:
            logger.error(f"Failed to write batch log {self.log_file_path}: {e}")
