"""
Measures the perceptual quality of an encoded file against its source with VMAF.

Validation is best-effort: whatever goes wrong here is logged and results in
"no score", and never changes whether the encode itself succeeded.
"""

from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..config.common import PROCESS_TIMEOUT
from ..config.media import (
    DECODED_IMAGE_SUFFIX,
    IMAGE_DECODE_TEMPLATE,
    VMAF_SCORE_PATTERN,
    VMAF_TEMPLATE,
)
from ..domain.exceptions import QualityCheckException
from ..domain.models import EncodeTask, MediaCategory
from ..domain.temp_models import DecodedImage
from ..utils.process_utils import CommandRunner, fill_template, run_cmd
from ..utils.tool_paths import Modules


def parse_vmaf_score(text: str) -> Optional[float]:
    """
    Extracts the pooled VMAF score from libvmaf's log output.

    The expected line is `VMAF score: <float>`. If several are present, the last
    one is used, since libvmaf prints the final pooled score last.

    Returns:
        The score, or None if no line matches.
    """
    if not text:
        return None
    matches = VMAF_SCORE_PATTERN.findall(text)
    for candidate in reversed(matches):
        try:
            return float(candidate)
        except ValueError:
            continue
    return None


class QualityValidator:
    """
    Scores encoded outputs with ffmpeg's libvmaf filter.

    - Video: the encoded file is compared directly with the source.
    - Image: the JPEG XL output is decoded back to PNG with djxl, the PNG is
      compared with the source, and the PNG is always deleted afterwards.
    """

    def __init__(
        self,
        enabled: bool = True,
        timeout: Optional[float] = PROCESS_TIMEOUT,
        runner: CommandRunner = run_cmd,
        vmaf_template: List[str] = VMAF_TEMPLATE,
        decode_template: List[str] = IMAGE_DECODE_TEMPLATE,
    ):
        self.enabled = enabled
        self.timeout = timeout
        self.runner = runner
        self.vmaf_template = vmaf_template
        self.decode_template = decode_template

    def validate(self, task: EncodeTask, output_path: Path) -> Optional[float]:
        """
        Returns the VMAF score of `output_path` against `task.source_path`, or None.

        Never raises: every failure is logged as a warning.
        """
        if not self.enabled:
            return None

        try:
            if task.category is MediaCategory.VIDEO:
                score = self._score(task, distorted=output_path, reference=task.source_path)
            elif task.category is MediaCategory.IMAGE:
                score = self._score_image(task, output_path)
            else:
                return None
        except (QualityCheckException, OSError) as e:
            logger.warning(f"Quality check skipped for {task.file_name}: {e}")
            return None

        if score is None:
            logger.warning(f"No VMAF score found in scorer output for {task.file_name}")
        else:
            logger.info(f"VMAF score for {task.file_name}: {score}")
        return score

    def _score_image(self, task: EncodeTask, output_path: Path) -> Optional[float]:
        decoded_path = output_path.parent / f"{task.base_name}{DECODED_IMAGE_SUFFIX}"
        with DecodedImage(decoded_path) as decoded:
            self._run(
                self.decode_template,
                {"input": output_path, "output": decoded.path},
                f"Error decoding {output_path.name}",
            )
            return self._score(task, distorted=decoded.path, reference=task.source_path)

    def _score(self, task: EncodeTask, distorted: Path, reference: Path) -> Optional[float]:
        result_text = self._run(
            self.vmaf_template,
            {"distorted": distorted, "reference": reference},
            f"Error calculating VMAF for {task.file_name}",
        )
        return parse_vmaf_score(result_text)

    def _run(self, template: List[str], values: dict, error_prefix: str) -> str:
        cmd_list = Modules.resolve_command(fill_template(template, values))
        result = self.runner(cmd_list, timeout=self.timeout)
        if not result.ok:
            raise QualityCheckException(f"{error_prefix}: {result.diagnostic()}")
        # libvmaf reports on stderr; stdout is included in case a wrapper redirects it.
        return f"{result.stderr}\n{result.stdout}"
