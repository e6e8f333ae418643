"""
This module runs external command-line tools (ffmpeg, cjxl, djxl, dialog
helpers) and captures their output.

Every failure mode of starting or running a process is folded into a
`CommandResult`, so callers only ever inspect a return code and text instead
of handling subprocess exceptions themselves.
"""

import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional

from loguru import logger

# Return code reported when the executable cannot be found, as a POSIX shell would.
COMMAND_NOT_FOUND_RETURNCODE = 127

# Return code reported when the process was killed after exceeding its timeout.
TIMEOUT_RETURNCODE = -9


@dataclass
class CommandResult:
    """
    Exit status and captured text of one external process.

    Attributes:
        returncode: Process exit code, 127 if the executable was not found, or
                    -9 if the process was killed on timeout.
        stdout: Captured standard output.
        stderr: Captured standard error, or a description of why the process
                could not run.
        timed_out: True if the process was killed on timeout.
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def diagnostic(self) -> str:
        """Returns the most useful non-empty text describing this run."""
        return self.stderr.strip() or self.stdout.strip() or f"exit status {self.returncode}"


# Signature shared by `run_cmd` and any replacement injected into the services.
CommandRunner = Callable[..., CommandResult]


def format_cmd(cmd_list: List[str]) -> str:
    """Returns a copy-pasteable rendering of a command for logs."""
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def fill_template(template: List[str], values: Mapping[str, object]) -> List[str]:
    """
    Substitutes `{placeholders}` in each element of a command template.

    Args:
        template: Argument list such as `["cjxl", "{input}", "{output}"]`.
        values: Placeholder values; paths are converted with `str()`.

    Returns:
        A new argument list ready to pass to `run_cmd`.
    """
    str_values = {key: str(value) for key, value in values.items()}
    return [part.format(**str_values) for part in template]


def run_cmd(
    cmd_list: List[str],
    timeout: Optional[float] = None,
    show_cmd: bool = True,
) -> CommandResult:
    """
    Executes an external command and captures its output.

    The command is run without a shell. If `timeout` elapses, the child
    process is killed and a timed-out result is returned instead of raising.

    Args:
        cmd_list: The command and its arguments.
        timeout: Maximum run time in seconds, or None for no limit.
        show_cmd: If True, the command is logged at DEBUG level before execution.

    Returns:
        A `CommandResult`. It is never None, even if the process could not be started.
    """
    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return CommandResult(returncode=COMMAND_NOT_FOUND_RETURNCODE, stderr="Empty command.")

    display_cmd_str = format_cmd(cmd_list)
    if show_cmd:
        logger.debug(f"Executing command: {display_cmd_str}")

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.error(
            f"Command not found: '{cmd_list[0]}'. Ensure it is on your PATH or set `tools_dir` in config.user.yaml."
        )
        return CommandResult(
            returncode=COMMAND_NOT_FOUND_RETURNCODE,
            stderr=f"Command not found: {cmd_list[0]}",
        )
    except subprocess.TimeoutExpired as e:
        logger.error(f"Command timed out after {timeout}s and was killed: {display_cmd_str}")
        return CommandResult(
            returncode=TIMEOUT_RETURNCODE,
            stdout=_as_text(e.stdout),
            stderr=f"Timed out after {timeout} seconds. {_as_text(e.stderr)}".strip(),
            timed_out=True,
        )
    except OSError as e:
        logger.error(f"Could not start command {display_cmd_str}: {e}")
        return CommandResult(returncode=COMMAND_NOT_FOUND_RETURNCODE, stderr=str(e))

    if result.stdout and len(result.stdout) > 500:
        logger.trace(f"Command stdout (truncated): {result.stdout[:500]}...")
    elif result.stdout:
        logger.trace(f"Command stdout: {result.stdout}")

    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr}")

    return CommandResult(
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


def _as_text(output) -> str:
    # TimeoutExpired carries bytes even when text=True was requested.
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
