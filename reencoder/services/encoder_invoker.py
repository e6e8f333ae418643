"""
Runs the external encoder for one task.
"""

from typing import Dict, List, Optional

from loguru import logger

from ..config.common import PROCESS_TIMEOUT
from ..config.media import IMAGE_ENCODE_TEMPLATE, VIDEO_ENCODE_TEMPLATE
from ..domain.exceptions import InvocationError
from ..domain.models import EncodeTask, MediaCategory
from ..utils.process_utils import CommandRunner, fill_template, run_cmd
from ..utils.tool_paths import Modules


class EncoderInvoker:
    """
    Builds a category-specific encoder command from a fixed template and runs it.

    The encoder parameters come only from the templates, never from the content
    of the file. `invoke` returns normally when the encoder wrote its output and
    raises `InvocationError` otherwise; the caller decides how far that failure
    reaches.
    """

    def __init__(
        self,
        templates: Optional[Dict[MediaCategory, List[str]]] = None,
        timeout: Optional[float] = PROCESS_TIMEOUT,
        runner: CommandRunner = run_cmd,
    ):
        self.templates = templates or {
            MediaCategory.VIDEO: VIDEO_ENCODE_TEMPLATE,
            MediaCategory.IMAGE: IMAGE_ENCODE_TEMPLATE,
        }
        self.timeout = timeout
        self.runner = runner

    def build_command(self, task: EncodeTask) -> List[str]:
        template = self.templates.get(task.category)
        if template is None:
            raise InvocationError(task.file_name, f"No encoder configured for category '{task.category.value}'.")
        cmd_list = fill_template(template, {"input": task.source_path, "output": task.output_path})
        return Modules.resolve_command(cmd_list)

    def invoke(self, task: EncodeTask) -> None:
        """
        Encodes `task.source_path` into `task.output_path`.

        Raises:
            InvocationError: if the encoder exits non-zero, cannot be found or
                times out. Any partial output is removed first.
        """
        cmd_list = self.build_command(task)
        logger.info(f"Encoding {task.file_name} -> {task.output_path.name}")
        result = self.runner(cmd_list, timeout=self.timeout)

        if result.ok:
            if not task.output_path.is_file():
                raise InvocationError(
                    task.file_name, f"Encoder exited successfully but did not create {task.output_path}"
                )
            return

        logger.error(f"Error re-encoding {task.file_name} (rc={result.returncode}): {result.diagnostic()}")
        self._discard_partial_output(task)
        raise InvocationError(task.file_name, result.diagnostic())

    @staticmethod
    def _discard_partial_output(task: EncodeTask):
        try:
            if task.output_path.is_file():
                task.output_path.unlink()
                logger.debug(f"Removed incomplete output {task.output_path}")
        except OSError as e:
            logger.warning(f"Could not remove incomplete output {task.output_path}: {e}")
