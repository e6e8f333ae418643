from pathlib import Path
from typing import List, Optional

import pytest

from reencoder.pipeline.batch_pipeline import BatchOrchestrator
from reencoder.services.encoder_invoker import EncoderInvoker
from reencoder.services.quality_validator import QualityValidator
from reencoder.utils.process_utils import COMMAND_NOT_FOUND_RETURNCODE, CommandResult


class FakeRunner:
    """
    Stands in for `run_cmd`: pretends to be ffmpeg, cjxl and djxl.

    Encoders and the decoder write a small output file; the scorer answers with
    `vmaf_output` on stderr. Failures can be injected per source file or per stage.
    """

    def __init__(
        self,
        fail_sources=(),
        missing_tools=(),
        vmaf_output: str = "[Parsed_libvmaf_0 @ 0x1] VMAF score: 93.512345",
        fail_vmaf: bool = False,
        fail_decode: bool = False,
        output_size: int = 1200,
        write_partial_on_failure: bool = False,
    ):
        self.fail_sources = set(fail_sources)
        self.missing_tools = set(missing_tools)
        self.vmaf_output = vmaf_output
        self.fail_vmaf = fail_vmaf
        self.fail_decode = fail_decode
        self.output_size = output_size
        self.write_partial_on_failure = write_partial_on_failure
        self.calls: List[List[str]] = []
        self.timeouts: List[Optional[float]] = []

    def __call__(self, cmd_list, timeout=None, show_cmd=True):
        self.calls.append(list(cmd_list))
        self.timeouts.append(timeout)
        tool = Path(cmd_list[0]).name

        if tool in self.missing_tools:
            return CommandResult(returncode=COMMAND_NOT_FOUND_RETURNCODE, stderr=f"Command not found: {tool}")

        if "-lavfi" in cmd_list:
            if self.fail_vmaf:
                return CommandResult(returncode=1, stderr="libvmaf: could not open input")
            return CommandResult(returncode=0, stderr=self.vmaf_output)

        if tool == "djxl":
            if self.fail_decode:
                return CommandResult(returncode=1, stderr="djxl: decoding failed")
            Path(cmd_list[2]).write_bytes(b"\x89PNG" + b"\0" * 64)
            return CommandResult(returncode=0)

        if tool == "cjxl":
            source, output = Path(cmd_list[1]), Path(cmd_list[2])
        else:
            source, output = Path(cmd_list[cmd_list.index("-i") + 1]), Path(cmd_list[-1])

        if source.name in self.fail_sources:
            if self.write_partial_on_failure:
                output.write_bytes(b"partial")
            return CommandResult(returncode=1, stderr=f"{tool}: cannot encode {source.name}")

        output.write_bytes(b"\0" * self.output_size)
        return CommandResult(returncode=0)

    def calls_for(self, tool: str) -> List[List[str]]:
        return [call for call in self.calls if Path(call[0]).name == tool]


def make_orchestrator(runner: FakeRunner, max_workers: int = 1, write_logs: bool = False, quality: bool = True):
    return BatchOrchestrator(
        invoker=EncoderInvoker(runner=runner, timeout=60),
        validator=QualityValidator(enabled=quality, runner=runner, timeout=60),
        max_workers=max_workers,
        write_logs=write_logs,
    )


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def media_folder(tmp_path: Path) -> Path:
    """A folder holding one image, one video and one unsupported file."""
    folder = tmp_path / "media"
    folder.mkdir()
    (folder / "a.png").write_bytes(b"\0" * 5000)
    (folder / "b.mp4").write_bytes(b"\0" * 20000)
    (folder / "notes.txt").write_text("not media")
    return folder
