"""Core utilities for the QuickBooks Query Tool."""

from qbo_query.utils.app_logger import get_logger, setup_logging
from qbo_query.utils.file_utils import (
    ensure_directory,
    ensure_gitignore,
    read_json_file,
    write_json_file,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ensure_directory",
    "ensure_gitignore",
    "read_json_file",
    "write_json_file",
]
