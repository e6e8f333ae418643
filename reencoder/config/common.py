"""
Common configuration settings used throughout the application.

This module contains the settings shared by the CLI, the batch pipeline and the
web service: logging format, the name of the output subfolder, outcome status
strings, process limits and server defaults. It also loads user-specific
overrides from an optional `config.user.yaml` file at the project root, so
that tool locations and limits can be changed without modifying the source.
"""
from pathlib import Path

import yaml
from loguru import logger

# --- Defaults ---
# These are the values used when `config.user.yaml` is absent or does not
# override them.

# Maximum number of seconds any single external process (encode, decode,
# quality score) may run before it is killed and treated as a failure.
DEFAULT_PROCESS_TIMEOUT = 3600

# Number of files processed at the same time. Encoders are CPU heavy, so the
# batch runs one file at a time unless told otherwise.
DEFAULT_MAX_WORKERS = 1

DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 3001


# --- User-Defined Configuration ---
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# Directory holding the ffmpeg, cjxl and djxl executables. If None, the
# executables are looked up on the system PATH.
TOOLS_DIR: Path | None = None

PROCESS_TIMEOUT: int = DEFAULT_PROCESS_TIMEOUT
MAX_WORKERS: int = DEFAULT_MAX_WORKERS
QUALITY_CHECK_ENABLED: bool = True
SERVER_HOST: str = DEFAULT_SERVER_HOST
SERVER_PORT: int = DEFAULT_SERVER_PORT

if USER_CONFIG_PATH.is_file():
    try:
        with USER_CONFIG_PATH.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}

        paths_config = user_config.get("paths") or {}
        if paths_config.get("tools_dir"):
            TOOLS_DIR = Path(paths_config["tools_dir"])

        encoding_config = user_config.get("encoding") or {}
        PROCESS_TIMEOUT = int(encoding_config.get("timeout_seconds", PROCESS_TIMEOUT))
        MAX_WORKERS = max(1, int(encoding_config.get("max_workers", MAX_WORKERS)))

        quality_config = user_config.get("quality") or {}
        QUALITY_CHECK_ENABLED = bool(quality_config.get("enabled", QUALITY_CHECK_ENABLED))

        server_config = user_config.get("server") or {}
        SERVER_HOST = str(server_config.get("host", SERVER_HOST))
        SERVER_PORT = int(server_config.get("port", SERVER_PORT))
    except Exception as e:
        logger.warning(f"Could not load or parse '{USER_CONFIG_PATH}': {e}")
else:
    logger.debug(f"User config '{USER_CONFIG_PATH}' not found. Using built-in defaults.")


# --- Logging Configuration ---
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{thread.name} - <level>{message}</level>"
)


# --- Directory and File Management ---

# Name of the subfolder created beneath the source folder. Every encoded file
# and the batch log files are written here.
OUTPUT_DIR_NAME = "reencoded"

# YAML report of the last batch, written into the output folder.
BATCH_LOG_FILE_NAME = "reencode_log.yaml"

# Plain-text log of per-file failures, appended to on every batch.
ERROR_LOG_FILE_NAME = "error.txt"


# --- Outcome Status Constants ---
STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"

BATCH_COMPLETED_MESSAGE = "Re-encoding process completed"
