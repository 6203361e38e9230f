from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from markdown_toc.config import (
    ConfigError,
    RenderConfig,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".markdown-toc.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc]
        list_marker = "*"
        indent_unit = 4
        quote_lines = true
        start_marker = "<!-- CUSTOM -->"
        title_line = "## Contents"
        end_marker = ""
        min_level = 2
        max_level = 4
        max_file_size = 1
        max_line_length = 2
        max_headers = 3
        """,
    )

    config = load_config(tmp_path)

    assert config == RenderConfig(
        list_marker="*",
        indent_unit=4,
        quote_lines=True,
        start_marker="<!-- CUSTOM -->",
        title_line="## Contents",
        end_marker="",
        min_level=2,
        max_level=4,
        max_file_size=1,
        max_line_length=2,
        max_headers=3,
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [markdown-toc]
        start_marker = "<!-- DOT -->"
        title_line = "# Dotfile"
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.start_marker == "<!-- DOT -->"
    assert config.title_line == "# Dotfile"


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.markdown-toc]
        indent_unit = 3
        """,
    )

    assert load_config(tmp_path).indent_unit == 3


def test_pyproject_wins_over_dotfile_in_same_directory(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc]
        list_marker = "+"
        """,
    )
    _write_dotfile(
        tmp_path,
        """
        [markdown-toc]
        list_marker = "*"
        """,
    )

    assert load_config(tmp_path).list_marker == "+"


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc]
        start_marker = "<!-- ROOT -->"
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    config = load_config(nested)

    assert config.start_marker == "<!-- ROOT -->"


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc]
        list_marker = "*"
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [project]
        name = "unrelated"
        """,
    )

    assert load_config(child).list_marker == "*"


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc]
        start_marker = "<!-- ROOT -->"
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.markdown-toc]
        """,
    )

    config = load_config(child)

    assert config.start_marker == RenderConfig().start_marker


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    assert load_config(tmp_path) == RenderConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc]
        title_line = "## From Parent"
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()
    config = load_config(nested)

    assert config.title_line == "## From Parent"


def test_load_config_errors_on_unknown_keys(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc]
        start_marker = "<!-- OK -->"
        unexpected = true
        """,
    )

    with pytest.raises(ConfigError) as exc_info:
        load_config(tmp_path)

    assert "unexpected" in str(exc_info.value)


def test_load_config_errors_on_non_table(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool]
        markdown-toc = "yes"
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    ("marker", "expected"),
    [
        ("ordered", "1."),
        ("unordered", "-"),
        ("*", "*"),
    ],
)
def test_list_marker_accepts_aliases(tmp_path: Path, marker: str, expected: str):
    _write_pyproject(
        tmp_path,
        f"""
        [tool.markdown-toc]
        list_marker = "{marker}"
        """,
    )

    assert load_config(tmp_path).list_marker == expected


def test_render_config_is_immutable():
    config = RenderConfig()

    with pytest.raises(AttributeError):
        config.indent_unit = 4  # type: ignore[misc]


def test_apply_overrides_ignores_none():
    config = RenderConfig()

    assert apply_overrides(config, list_marker=None, indent_unit=None) is config


def test_apply_overrides_accepts_empty_markers():
    config = apply_overrides(RenderConfig(), end_marker="", quote_lines=False)

    assert config.end_marker == ""
    assert config.quote_lines is False


def test_apply_overrides_rejects_unknown_fields():
    with pytest.raises(TypeError):
        apply_overrides(RenderConfig(), bogus=1)


def test_build_config_applies_and_validates(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc]
        list_marker = "*"
        indent_unit = 4
        """,
    )

    config = build_config(tmp_path, indent_unit=3, list_marker="ordered")

    assert config.indent_unit == 3
    assert config.list_marker == "1."


def test_build_config_rejects_invalid_override(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, min_level=5, max_level=2)


@pytest.mark.parametrize(
    "config",
    [
        RenderConfig(min_level=0),
        RenderConfig(min_level=3, max_level=2),
        RenderConfig(max_level=7),
        RenderConfig(indent_unit=-1),
        RenderConfig(list_marker=""),
        RenderConfig(list_marker="- "),
        RenderConfig(start_marker="", title_line=""),
        RenderConfig(start_marker="<!--\nTOC -->"),
        RenderConfig(title_line="a\r\nb"),
        RenderConfig(max_file_size=0),
        RenderConfig(max_line_length=-1),
        RenderConfig(max_headers=0),
    ],
)
def test_validate_config_rejects_invalid_values(config: RenderConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


@pytest.mark.parametrize(
    "config",
    [
        RenderConfig(indent_unit="2"),  # type: ignore[arg-type]
        RenderConfig(indent_unit=True),  # type: ignore[arg-type]
        RenderConfig(max_headers="many"),  # type: ignore[arg-type]
        RenderConfig(min_level="2"),  # type: ignore[arg-type]
        RenderConfig(quote_lines="yes"),  # type: ignore[arg-type]
        RenderConfig(end_marker=None),  # type: ignore[arg-type]
    ],
)
def test_validate_config_rejects_wrong_types(config: RenderConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


@pytest.mark.parametrize(
    "config",
    [
        RenderConfig(),
        RenderConfig(start_marker="", end_marker=""),
        RenderConfig(title_line=""),
        RenderConfig(indent_unit=0, list_marker="1."),
    ],
)
def test_validate_config_accepts_valid_values(config: RenderConfig):
    validate_config(config)
