"""Filesystem helpers for markdown-html."""

from __future__ import annotations

import os
import secrets
import stat
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "MARKDOWN_HTML_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed input file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["MARKDOWN_HTML_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def normalize_filepath(raw_path: str) -> Path:
    """Resolve and validate the path of a Markdown input file.

    Args:
        raw_path: User-supplied path to a Markdown file (absolute or relative).

    Returns:
        Path: Absolute path to the Markdown file.

    Raises:
        ValueError: If the path does not exist, is not a regular file, is a
            symlink, or uses an unsupported extension.

    Examples:
        normalize_filepath("docs/README.md")
        normalize_filepath("~/notes.markdown")
    """
    path = Path(raw_path).expanduser()

    if path.is_symlink():
        error_message = f"Symlinks are not supported: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        error_message = f"{resolved} is not a Markdown file.\n"
        error_message += f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata gathered without following symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.

    Examples:
        stat_result = collect_file_stat(Path("README.md"))
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.

    Examples:
        enforce_file_size(os.stat("README.md"), 102400, Path("README.md"))
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("README.md")) as handle:
            text = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def write_output(filepath: Path, html: str):
    """Write converted HTML to `filepath` atomically.

    The content goes to a temporary file in the target directory which then
    replaces the destination, so readers never see a partial document. An
    existing destination keeps its permission bits; a new one gets the
    defaults for the current umask.

    Args:
        filepath: Destination file.
        html: Content to write.

    Returns:
        None.

    Raises:
        IOError: If the destination is a symlink or cannot be written.

    Examples:
        write_output(Path("README.html"), "<h1>Title</h1>\\n")
    """
    if filepath.is_symlink():
        error_message = f"Refusing to write through a symlink: {filepath}"
        raise IOError(error_message)

    try:
        permissions: int | None = stat.S_IMODE(filepath.stat().st_mode)
    except FileNotFoundError:
        permissions = None

    temp_path = filepath.with_name(f".{filepath.name}.{secrets.token_hex(8)}.tmp")
    created = False
    try:
        # The kernel applies the umask to the 0o666 creation mode
        fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
        created = True
        with os.fdopen(fd, "w", encoding="UTF-8") as tmp_file:
            tmp_file.write(html)

            # Flush and sync before the rename makes the file visible
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            if permissions is not None:
                os.chmod(temp_path, permissions)

        os.replace(temp_path, filepath)
    except OSError as error:
        error_message = f"Error writing {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if created:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
