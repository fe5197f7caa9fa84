"""File utility functions for safe file operations."""

import os
from pathlib import Path
from typing import Any

import orjson

from qbo_query.constants import GITIGNORE_PATTERN
from qbo_query.utils.app_logger import get_logger

logger = get_logger(__name__)

_GITIGNORE_HEADER = "# QuickBooks query tool credentials (per-project auth)"


def ensure_directory(path: Path, *, mode: int = 0o700) -> None:
    """Ensure a directory exists, creating parents as needed.

    Args:
        path: Path to the directory to create
        mode: Permission mode for newly created directories (default: owner only)
    """
    path.mkdir(mode=mode, parents=True, exist_ok=True)


def read_json_file(path: Path) -> Any:
    """Read and parse a JSON file.

    Args:
        path: Path to the JSON file to read

    Returns:
        Parsed JSON document

    Raises:
        FileNotFoundError: If the file does not exist
        orjson.JSONDecodeError: If the file is not valid JSON
    """
    return orjson.loads(path.read_bytes())


def write_json_file(path: Path, data: Any, *, mode: int = 0o600) -> None:
    """Write data to a JSON file atomically with restrictive permissions.

    The document is written to a sibling temp file first and then renamed
    over the target, so readers never observe a partially written file.

    Args:
        path: Path to the JSON file to write
        data: Data to serialize to JSON
        mode: Permission mode for the file (default: owner read/write only)
    """
    ensure_directory(path.parent)

    content = orjson.dumps(data, option=orjson.OPT_INDENT_2) + b"\n"
    temp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as handle:
            os.chmod(temp_path, mode)
            handle.write(content)
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def ensure_gitignore(project_dir: Path, pattern: str = GITIGNORE_PATTERN) -> bool:
    """Make sure the project's .gitignore excludes local credential files.

    Args:
        project_dir: Directory holding (or that should hold) the .gitignore
        pattern: Ignore pattern to add

    Returns:
        True if the .gitignore was created or modified, False if already present
    """
    gitignore_path = project_dir / ".gitignore"
    block = f"{_GITIGNORE_HEADER}\n{pattern}\n"

    if not gitignore_path.exists():
        gitignore_path.write_text(block, encoding="utf-8")
        logger.info("Created %s with %s", gitignore_path, pattern)
        return True

    content = gitignore_path.read_text(encoding="utf-8")
    if pattern in content.splitlines():
        return False

    if not content:
        separator = ""
    elif content.endswith("\n"):
        separator = "\n"
    else:
        separator = "\n\n"
    gitignore_path.write_text(content + separator + block, encoding="utf-8")
    logger.info("Added %s to %s", pattern, gitignore_path)
    return True
