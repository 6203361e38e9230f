"""Reading and rewriting Markdown files on disk."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .constants import MARKDOWN_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "MARKDOWN_TOC_MAX_FILE_SIZE"
MAX_LINE_LENGTH_ENV_VAR = "MARKDOWN_TOC_MAX_LINE_LENGTH"


@dataclass(frozen=True)
class SourceFile:
    """A Markdown file as read from disk.

    Attributes:
        path: Resolved path of the file.
        text: Decoded content, line endings untouched.
        snapshot: Stat taken once the content was read. Writing back is
            refused when the file no longer matches it.
    """

    path: Path
    text: str
    snapshot: os.stat_result


def env_limit(variable: str, default: int) -> int:
    """Read a positive integer limit from the environment.

    Args:
        variable: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        int: The limit.

    Raises:
        ValueError: If the variable is set to anything but a positive integer.

    Examples:
        env_limit(MAX_FILE_SIZE_ENV_VAR, config.max_file_size)
    """
    raw_value = os.environ.get(variable)
    if raw_value is None:
        return default

    try:
        value = int(raw_value)
    except ValueError as error:
        error_message = f"Invalid value for {variable}: {raw_value} (expected positive integer)"
        raise ValueError(error_message) from error

    if value <= 0:
        raise ValueError(f"{variable} must be a positive integer, got {value}.")
    return value


def _is_symlink(path: Path) -> bool:
    try:
        return path.is_symlink()
    except OSError:
        return False


def resolve_markdown_path(raw_path: str, base_dir: Path) -> Path:
    """Resolve a user-supplied path to a Markdown file inside `base_dir`.

    Raises:
        ValueError: If the path or one of its parents is a symlink, the file
            is missing or not a regular file, it lies outside `base_dir`, or
            its extension is not a Markdown one.

    Examples:
        resolve_markdown_path("docs/README.md", Path.cwd().resolve())
    """
    path = Path(raw_path).expanduser()
    if any(_is_symlink(candidate) for candidate in (path, *path.parents)):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not a Markdown file.\n"
            f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        )
    return resolved


def _regular_file_stat(path: Path) -> os.stat_result:
    try:
        snapshot = os.stat(path, follow_symlinks=False)
    except OSError as error:
        raise OSError(f"Error accessing {path}: {error}") from error

    if not stat.S_ISREG(snapshot.st_mode):
        raise OSError(f"{path} is not a regular file.")
    return snapshot


def _ensure_unchanged(path: Path, expected: os.stat_result) -> os.stat_result:
    current = _regular_file_stat(path)
    before = (expected.st_ino, expected.st_dev, expected.st_size, expected.st_mtime_ns)
    after = (current.st_ino, current.st_dev, current.st_size, current.st_mtime_ns)
    if before != after:
        raise OSError(f"{path} changed during processing; refusing to overwrite.")
    return current


def read_source(path: Path, max_size: int) -> SourceFile:
    """Read a Markdown file as UTF-8, keeping its line endings.

    Args:
        path: File to read.
        max_size: Largest accepted size in bytes.

    Returns:
        SourceFile: The content and the stat it was read under.

    Raises:
        OSError: If the file is not a regular file, is larger than
            `max_size`, cannot be opened, or changes while being read.
        UnicodeDecodeError: If the content is not valid UTF-8.
    """
    before = _regular_file_stat(path)
    if before.st_size > max_size:
        raise OSError(f"{path} exceeds the maximum allowed size of {max_size} bytes.")

    try:
        with open(path, encoding="UTF-8", newline="") as stream:
            text = stream.read()
    except OSError as error:
        raise OSError(f"Error accessing {path}: {error}") from error

    return SourceFile(path, text, _ensure_unchanged(path, before))


def replace_source(
    source: SourceFile, content: str, warn: Callable[[str], None] | None = None
) -> None:
    """Atomically replace the file behind `source` with `content`.

    The new file keeps the permission bits of the old one, and its owner
    when the process may set it.

    Args:
        source: The file as it was read.
        content: Complete new document text, written as is.
        warn: Receives non-fatal warnings.

    Raises:
        OSError: If the file changed since it was read or cannot be replaced.
    """
    snapshot = _ensure_unchanged(source.path, source.snapshot)

    descriptor, temp_name = tempfile.mkstemp(
        dir=source.path.parent, prefix=f".{source.path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(descriptor, "w", encoding="UTF-8", newline="") as stream:
            stream.write(content)
            stream.flush()
            os.fsync(stream.fileno())
        os.chmod(temp_path, stat.S_IMODE(snapshot.st_mode))

        if hasattr(os, "chown"):
            try:
                os.chown(temp_path, snapshot.st_uid, snapshot.st_gid)
            except PermissionError:
                if warn is not None:
                    warn(f"Warning: Could not preserve file ownership for {source.path.name}")

        os.replace(temp_path, source.path)
    finally:
        # No-op once the rename succeeded
        temp_path.unlink(missing_ok=True)
