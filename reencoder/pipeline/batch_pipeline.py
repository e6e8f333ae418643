import concurrent.futures
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from ..config.common import MAX_WORKERS, OUTPUT_DIR_NAME
from ..domain.exceptions import InvocationError, OutputFolderException, SourceFolderException
from ..domain.models import EncodeOutcome, EncodeTask
from ..services.classifier import FileClassifier
from ..services.encoder_invoker import EncoderInvoker
from ..services.logging_service import BatchLog, ErrorLog
from ..services.quality_validator import QualityValidator
from ..services.reporter import ResultReporter
from ..utils.format_utils import format_timedelta, reduction_percent, size_in_mb


class BatchOrchestrator:
    """
    Re-encodes every supported file of one folder into its `reencoded` subfolder.

    Per file the pipeline is: classify, encode, stat both files, score quality.
    Unsupported files and subdirectories are skipped without an outcome. A file
    whose encoder fails gets a `failed` outcome and the batch moves on; only a
    missing source folder or an output folder that cannot be created stops the
    whole batch, and both are raised before any file is touched.

    Files are handed to a thread pool of `max_workers` workers (1 by default,
    i.e. strictly one file at a time). Outcomes are returned in directory
    enumeration order whatever order the workers finish in.
    """

    def __init__(
        self,
        classifier: Optional[FileClassifier] = None,
        invoker: Optional[EncoderInvoker] = None,
        validator: Optional[QualityValidator] = None,
        max_workers: int = MAX_WORKERS,
        output_dir_name: str = OUTPUT_DIR_NAME,
        write_logs: bool = True,
    ):
        self.classifier = classifier or FileClassifier()
        self.invoker = invoker or EncoderInvoker()
        self.validator = validator or QualityValidator()
        self.max_workers = max(1, max_workers)
        self.output_dir_name = output_dir_name
        self.write_logs = write_logs

    def run(self, folder: Path) -> List[EncodeOutcome]:
        """
        Processes one snapshot of `folder`.

        Raises:
            SourceFolderException: if `folder` is missing, not a directory or unreadable.
            OutputFolderException: if the output subfolder cannot be created.
        """
        source_dir = Path(folder).resolve()
        if not source_dir.is_dir():
            raise SourceFolderException(f'Folder not found: "{source_dir}"')

        output_dir = self.prepare_output_dir(source_dir)
        tasks = self.collect_tasks(source_dir, output_dir)

        logger.info(f"Starting batch in {source_dir}: {len(tasks)} file(s) to re-encode")
        if not tasks:
            outcomes: List[EncodeOutcome] = []
        else:
            logger.info(f"Using {self.max_workers} worker thread(s).")
            outcomes = self._run_tasks(tasks)

        if self.write_logs:
            self._write_logs(output_dir, outcomes)

        success_count = sum(1 for outcome in outcomes if outcome.is_success)
        logger.success(
            f"Batch finished in {source_dir}: {success_count} succeeded, {len(outcomes) - success_count} failed"
        )
        return outcomes

    def prepare_output_dir(self, source_dir: Path) -> Path:
        output_dir = source_dir / self.output_dir_name
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create output folder {output_dir}: {e}")
            raise OutputFolderException(f"Failed to create output folder {output_dir}: {e}") from e
        return output_dir

    def collect_tasks(self, source_dir: Path, output_dir: Path) -> List[EncodeTask]:
        """Builds one task per supported file, in directory enumeration order."""
        try:
            entries = list(source_dir.iterdir())
        except OSError as e:
            raise SourceFolderException(f'Failed to read folder contents of "{source_dir}": {e}') from e

        tasks: List[EncodeTask] = []
        for entry in entries:
            if entry.is_dir():
                continue
            task = self.classifier.build_task(entry, output_dir)
            if task is None:
                logger.trace(f"Skipping unsupported file: {entry.name}")
                continue
            tasks.append(task)
        return tasks

    @staticmethod
    def group_by_output(tasks: List[EncodeTask]) -> List[List[int]]:
        """
        Groups task indices by output path, keeping enumeration order.

        Sources sharing a base name (`a.png` and `a.jpg`) write the same output
        file, so each group must run on a single worker, one task after another.
        The later source overwrites the earlier one's output.
        """
        groups: Dict[Path, List[int]] = {}
        for index, task in enumerate(tasks):
            groups.setdefault(task.output_path, []).append(index)
        for indices in groups.values():
            if len(indices) > 1:
                names = ", ".join(tasks[index].file_name for index in indices)
                logger.warning(f"{names} share the output {tasks[indices[0]].output_path.name}; encoding them in order")
        return list(groups.values())

    def _process_group(self, group: List[EncodeTask]) -> List[EncodeOutcome]:
        return [self.process_single_file(task) for task in group]

    def _run_tasks(self, tasks: List[EncodeTask]) -> List[EncodeOutcome]:
        outcomes: List[Optional[EncodeOutcome]] = [None] * len(tasks)
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="encode"
        ) as executor:
            futures = {
                executor.submit(self._process_group, [tasks[index] for index in indices]): indices
                for indices in self.group_by_output(tasks)
            }
            for future in concurrent.futures.as_completed(futures):
                indices = futures[future]
                try:
                    for index, outcome in zip(indices, future.result()):
                        outcomes[index] = outcome
                except Exception as exc:
                    # process_single_file already converts failures; this guards the pool itself.
                    for index in indices:
                        logger.error(f"Unexpected error in worker for {tasks[index].file_name}: {exc}")
                        outcomes[index] = EncodeOutcome.failed(tasks[index].file_name, f"Unexpected error: {exc}")
        return [outcome for outcome in outcomes if outcome is not None]

    def process_single_file(self, task: EncodeTask) -> EncodeOutcome:
        """Runs one task through encode, size check and quality check; never raises."""
        try:
            return self._process(task)
        except Exception as e:
            tb_str = "".join(traceback.format_exception(type(e), e, e.__traceback__))
            logger.error(
                f"Unhandled error while processing {task.file_name}\n"
                f"Exception type: {type(e).__name__}\n"
                f"Exception message: {e}\n"
                f"Traceback:\n{tb_str}"
            )
            return EncodeOutcome.failed(task.file_name, f"{type(e).__name__}: {e}")

    def _process(self, task: EncodeTask) -> EncodeOutcome:
        encode_start = datetime.now()
        try:
            self.invoker.invoke(task)
        except InvocationError as e:
            return EncodeOutcome.failed(task.file_name, e.stderr_text)
        encode_time = datetime.now() - encode_start

        try:
            original_size = task.source_path.stat().st_size
            encoded_size = task.output_path.stat().st_size
        except OSError as e:
            logger.error(f"Could not read file sizes for {task.file_name}: {e}")
            return EncodeOutcome.failed(task.file_name, f"Could not read file sizes: {e}")

        outcome = EncodeOutcome.success(task.file_name, task.output_path, original_size, encoded_size)
        logger.info(
            f"Size comparison for {task.file_name}: Original: {size_in_mb(original_size)}, "
            f"Re-encoded: {size_in_mb(encoded_size)} "
            f"({reduction_percent(original_size, encoded_size):.1f}% smaller, took {format_timedelta(encode_time)})"
        )

        outcome.quality_score = self.validator.validate(task, task.output_path)
        return outcome

    def _write_logs(self, output_dir: Path, outcomes: List[EncodeOutcome]):
        try:
            BatchLog(output_dir).write(ResultReporter.summarize(outcomes))
            failures = [outcome for outcome in outcomes if not outcome.is_success]
            if failures:
                error_log = ErrorLog(output_dir)
                timestamp = datetime.now().isoformat(timespec="seconds")
                for outcome in failures:
                    error_log.write(f"[{timestamp}] Re-encoding failed for: {outcome.file_name}", outcome.error_detail or "")
        except OSError as e:
            logger.error(f"Could not write batch logs to {output_dir}: {e}")
