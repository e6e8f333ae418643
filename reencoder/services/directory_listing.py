"""
Lists a folder's entries for the gallery front-end.
"""

import errno
from pathlib import Path
from typing import Dict, List, Union

from loguru import logger

from ..domain.exceptions import FolderListingException, FolderNotFound, FolderPermissionDenied

FOLDER_SIZE_PLACEHOLDER = "N/A"
STAT_ERROR_PLACEHOLDER = "Error"


def list_folder(folder_path: Path) -> List[Dict[str, Union[str, int]]]:
    """
    Returns one `{name, type, size}` entry per item in `folder_path`.

    `type` is "file" or "folder". `size` is the byte count for files and "N/A"
    for folders. An entry that cannot be stat-ed is still listed, with size
    "Error".

    Raises:
        FolderNotFound: if the folder does not exist.
        FolderPermissionDenied: if the folder cannot be read.
        FolderListingException: for any other listing failure.
    """
    logger.info(f"Listing files in folder: {folder_path}")
    try:
        entries = list(folder_path.iterdir())
    except FileNotFoundError as e:
        raise FolderNotFound(f'Folder not found: "{folder_path}"') from e
    except PermissionError as e:
        raise FolderPermissionDenied(f'Permission denied to access folder: "{folder_path}"') from e
    except OSError as e:
        if e.errno == errno.ENOTDIR:
            raise FolderNotFound(f'Folder not found: "{folder_path}"') from e
        raise FolderListingException(f"Failed to read folder contents: {e}") from e

    files_info: List[Dict[str, Union[str, int]]] = []
    for entry in entries:
        if entry.is_dir():
            files_info.append({"name": entry.name, "type": "folder", "size": FOLDER_SIZE_PLACEHOLDER})
            continue
        try:
            files_info.append({"name": entry.name, "type": "file", "size": entry.stat().st_size})
        except OSError as e:
            logger.warning(f"Could not get stats for {entry.name}: {e}")
            files_info.append({"name": entry.name, "type": "unknown", "size": STAT_ERROR_PLACEHOLDER})
    return files_info
