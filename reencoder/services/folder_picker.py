"""
Opens the operating system's native folder dialog on the machine running the service.
"""
import sys
from typing import List, Optional

from loguru import logger

from ..domain.exceptions import FolderSelectionException
from ..utils.process_utils import CommandRunner, run_cmd

_WINDOWS_DIALOG_SCRIPT = (
    "Add-Type -AssemblyName System.Windows.Forms; "
    "$folderBrowser = New-Object System.Windows.Forms.FolderBrowserDialog; "
    "$folderBrowser.Description = 'Select a folder'; "
    "if ($folderBrowser.ShowDialog() -eq [System.Windows.Forms.DialogResult]::OK) "
    "{ $folderBrowser.SelectedPath }"
)


def dialog_command(platform: str) -> Optional[List[str]]:
    """Returns the dialog command for a `sys.platform` value, or None if unsupported."""
    if platform == "darwin":
        return [
            "osascript",
            "-e", 'tell application "Finder" to set chosenFolder to choose folder',
            "-e", "POSIX path of chosenFolder",
        ]
    if platform == "win32":
        return ["powershell", "-command", _WINDOWS_DIALOG_SCRIPT]
    if platform.startswith("linux"):
        return ["zenity", "--file-selection", "--directory"]
    return None


def launch_folder_selector(platform: str = sys.platform, runner: CommandRunner = run_cmd) -> str:
    """
    Shows the native folder dialog and waits for the user's choice.

    No timeout is applied: the dialog stays open until the user answers it.

    Returns:
        The selected folder's full path.

    Raises:
        FolderSelectionException: if the platform has no supported dialog, or the
            dialog failed or was cancelled.
    """
    cmd_list = dialog_command(platform)
    if cmd_list is None:
        raise FolderSelectionException("Unsupported operating system for native dialog.")

    logger.info(f"Launching native folder selector: {cmd_list[0]}")
    result = runner(cmd_list, timeout=None)
    if not result.ok:
        logger.error(f"Folder selector failed or was cancelled: {result.diagnostic()}")
        raise FolderSelectionException(
            "Failed to launch folder selector or user cancelled.", detail=result.diagnostic()
        )
    if result.stderr.strip():
        logger.warning(f"Stderr from folder selector: {result.stderr.strip()}")

    full_path = result.stdout.strip()
    logger.info(f'Selected folder: "{full_path}"')
    return full_path
