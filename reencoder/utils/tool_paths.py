"""
This module provides the Modules class to locate and verify the external tools
required by the application: ffmpeg (with libsvtav1 and libvmaf), cjxl and djxl.
"""
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..config.common import TOOLS_DIR
from ..config.media import TOOL_VERSION_ARGS
from .process_utils import run_cmd


class Modules:
    """
    Resolves external executables and checks that they can be run.

    A tool is looked up in the configured `tools_dir` first (from
    `config.user.yaml`) and falls back to the bare name, which leaves the
    lookup to the system PATH.
    """

    tools_dir: Optional[Path] = TOOLS_DIR

    @classmethod
    def resolve(cls, tool_name: str) -> str:
        """
        Returns the command to use for `tool_name`.

        Args:
            tool_name: Bare executable name, e.g. "ffmpeg".

        Returns:
            An absolute path inside `tools_dir` if the executable is there,
            otherwise `tool_name` unchanged.
        """
        exe_name = f"{tool_name}.exe" if sys.platform == "win32" else tool_name
        if cls.tools_dir and cls.tools_dir.is_dir():
            configured_path = cls.tools_dir / exe_name
            if configured_path.is_file():
                return str(configured_path)
            logger.trace(f"'{exe_name}' not found in tools_dir '{cls.tools_dir}'. Falling back to PATH.")
        return tool_name

    @classmethod
    def resolve_command(cls, cmd_list: List[str]) -> List[str]:
        """Replaces the executable of a command list with its resolved path."""
        if not cmd_list:
            return cmd_list
        return [cls.resolve(cmd_list[0])] + cmd_list[1:]

    @classmethod
    def verify_tools(cls) -> bool:
        """
        Checks that every external tool can be found and reports its version.

        Missing tools are only logged as warnings: the affected files will fail
        individually with a clear diagnostic when the batch runs.

        Returns:
            True if every tool answered its version query.
        """
        all_ok = True
        for tool_name, version_args in TOOL_VERSION_ARGS.items():
            command = cls.resolve(tool_name)
            if shutil.which(command) is None and not Path(command).is_file():
                logger.warning(
                    f"'{tool_name}' was not found. Install it or set `tools_dir` in config.user.yaml."
                )
                all_ok = False
                continue

            result = run_cmd([command] + version_args, timeout=30, show_cmd=False)
            if result.ok:
                first_line = (result.stdout or result.stderr).strip().splitlines()
                logger.info(f"{tool_name} found: {first_line[0] if first_line else command}")
            else:
                logger.warning(f"{tool_name} version check failed: {result.diagnostic()}")
                all_ok = False
        return all_ok
