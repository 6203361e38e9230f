"""Configuration loading and management."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

CONFIG_TABLE = "markdown-toc"
DOTFILE_NAME = ".markdown-toc.toml"


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for rendering, locating, and following a Markdown TOC.

    Attributes:
        list_marker: List item token placed before each link (``"-"``,
            ``"*"``, ``"1."``, or the aliases ``"ordered"``/``"unordered"``).
        indent_unit: Number of spaces per nesting level.
        quote_lines: Whether each TOC entry is rendered as a blockquote line.
        start_marker: Line that opens the TOC block. Empty means no marker.
        title_line: Title placed above the TOC entries.
        end_marker: Line that closes the TOC block. Empty means no marker.
        min_level: Smallest heading level collected from documents.
        max_level: Largest heading level collected from documents.
        max_file_size: Maximum file size in bytes that will be processed.
        max_line_length: Maximum line length allowed while scanning.
        max_headers: Maximum number of headings collected from a document.

    Examples:
        RenderConfig(list_marker="*", indent_unit=4, end_marker="")
    """

    # Rendering
    list_marker: str = "-"
    indent_unit: int = 2
    quote_lines: bool = False

    # TOC markers
    start_marker: str = "<!-- markdown-toc start -->"
    title_line: str = "**Table of Contents**"
    end_marker: str = "<!-- markdown-toc end -->"

    # Heading levels
    min_level: int = 1
    max_level: int = 6

    # Limits
    max_file_size: int = 10 * 1024 * 1024
    max_line_length: int = 10_000
    max_headers: int = 10_000


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_level` must be >= `min_level`")
    """


def load_config(search_path: Path) -> RenderConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.markdown-toc]`` table from `pyproject.toml` and the
    ``[markdown-toc]`` or ``[tool.markdown-toc]`` table from
    `.markdown-toc.toml`. Files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for lookup.

    Returns:
        RenderConfig: Loaded configuration, or defaults when nothing is found.

    Raises:
        ConfigError: If a table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", CONFIG_TABLE)]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / DOTFILE_NAME,
            table_paths=[(CONFIG_TABLE,), ("tool", CONFIG_TABLE)],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return RenderConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> RenderConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> RenderConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return RenderConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    known = {item.name for item in fields(RenderConfig)}
    unknown = sorted(set(raw_config) - known)
    if unknown:
        raise ConfigError(
            f"Invalid `[{table_display}]` settings in {config_file}: "
            f"unknown keys {', '.join(unknown)}"
        )

    return RenderConfig(**raw_config)


def normalize_config(config: RenderConfig) -> RenderConfig:
    """Resolve list marker aliases."""
    list_marker = config.list_marker
    if list_marker == "ordered":
        list_marker = "1."
    elif list_marker == "unordered":
        list_marker = "-"

    if list_marker == config.list_marker:
        return config
    return replace(config, list_marker=list_marker)


def validate_config(config: RenderConfig) -> None:
    """Validate a `RenderConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If levels are inconsistent, markers span several lines,
            the block cannot be located (no start marker and no title), the
            list marker is empty or contains whitespace, or numeric values are
            out of range.

    Examples:
        validate_config(RenderConfig(min_level=2, max_level=3))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "indent_unit": config.indent_unit,
            "min_level": config.min_level,
            "max_level": config.max_level,
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
            "max_headers": config.max_headers,
        }
    )

    if config.indent_unit < 0:
        raise ConfigError("`indent_unit` must be >= 0")
    if config.min_level < 1:
        raise ConfigError("`min_level` must be >= 1")
    if config.max_level < config.min_level:
        raise ConfigError("`max_level` must be >= `min_level`")
    if config.max_level > 6:
        raise ConfigError("`max_level` must be <= 6")

    for name in ("list_marker", "start_marker", "title_line", "end_marker"):
        value = getattr(config, name)
        if not isinstance(value, str):
            raise ConfigError(f"`{name}` must be a string")
        if "\n" in value or "\r" in value:
            raise ConfigError(f"`{name}` must fit on a single line")

    if not config.list_marker or any(char.isspace() for char in config.list_marker):
        raise ConfigError("`list_marker` must be a non-empty token without whitespace")
    if not config.start_marker and not config.title_line:
        raise ConfigError("`start_marker` and `title_line` must not both be empty")
    if not isinstance(config.quote_lines, bool):
        raise ConfigError("`quote_lines` must be a boolean")

    _ensure_positive(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
            "max_headers": config.max_headers,
        }
    )


def apply_overrides(config: RenderConfig, **overrides: object) -> RenderConfig:
    """Apply override values to a `RenderConfig`.

    Args:
        config: Base configuration to update.
        overrides: Values keyed by field name; None values are ignored.

    Returns:
        RenderConfig: New configuration, or `config` itself when nothing changes.

    Raises:
        TypeError: If an override name is not defined on `RenderConfig`.

    Examples:
        updated = apply_overrides(config, title_line="## Contents", indent_unit=4)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> RenderConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by field name; None values are ignored.

    Returns:
        RenderConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), list_marker="*", indent_unit=4)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
