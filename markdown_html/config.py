"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
import tomllib


@dataclass(frozen=True)
class MarkdownConfig:
    """Configuration for converting Markdown to HTML.

    A configuration is immutable for the duration of a conversion; use
    `apply_overrides` to derive a modified copy.

    Attributes:
        tab_width: Number of spaces a tab expands to; drives every
            indentation-sensitive rule (code blocks, list outdenting).
        self_closing_tags: Emit void elements as ``<br />`` (XHTML) when True,
            ``<br>`` otherwise.
        no_markup: Disable raw HTML pass-through; HTML is then escaped as text.
        no_entities: Disable lenient ``&`` handling so that existing entities
            are escaped too.
        predefined_urls: Link ids mapped to URLs, seeded into the link table
            before every conversion.
        predefined_titles: Link ids mapped to titles for `predefined_urls`.
        max_file_size: Maximum file size in bytes accepted by the CLI.

    Examples:
        MarkdownConfig(tab_width=2, self_closing_tags=False)
    """

    # Markdown syntax
    tab_width: int = 4
    self_closing_tags: bool = True
    no_markup: bool = False
    no_entities: bool = False

    # Link tables
    predefined_urls: dict[str, str] = field(default_factory=dict)
    predefined_titles: dict[str, str] = field(default_factory=dict)

    # Limits
    max_file_size: int = 10 * 1024 * 1024

    @property
    def empty_element_suffix(self) -> str:
        return " />" if self.self_closing_tags else ">"


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Attributes:
        args: Arguments provided to the underlying `ValueError`.

    Examples:
        raise ConfigError("`tab_width` must be a positive integer")
    """


def load_config(search_path: Path) -> MarkdownConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.markdown-html]`` table from `pyproject.toml` and the
    ``[markdown-html]`` or ``[tool.markdown-html]`` table from
    `.markdown-html.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        MarkdownConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a matching table is present but is not a mapping or
            contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "markdown-html")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".markdown-html.toml",
            table_paths=[("markdown-html",), ("tool", "markdown-html")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return MarkdownConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> MarkdownConfig | None:
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
) -> MarkdownConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return MarkdownConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return MarkdownConfig()

    try:
        return MarkdownConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: MarkdownConfig) -> None:
    """Validate a `MarkdownConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If numeric values are not positive integers, flags are not
            booleans, or the link tables are not string mappings.

    Examples:
        validate_config(MarkdownConfig(tab_width=8))
    """
    _ensure_integers({"tab_width": config.tab_width, "max_file_size": config.max_file_size})
    _ensure_positive({"tab_width": config.tab_width, "max_file_size": config.max_file_size})

    for name in ("self_closing_tags", "no_markup", "no_entities"):
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")

    for name in ("predefined_urls", "predefined_titles"):
        table = getattr(config, name)
        if not isinstance(table, dict):
            raise ConfigError(f"`{name}` must be a table of strings")
        if not all(isinstance(key, str) and isinstance(value, str) for key, value in table.items()):
            raise ConfigError(f"`{name}` must map strings to strings")


def apply_overrides(config: MarkdownConfig, **overrides: object) -> MarkdownConfig:
    """Apply override values to a `MarkdownConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        MarkdownConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `MarkdownConfig`.

    Examples:
        updated = apply_overrides(config, tab_width=2, no_markup=True)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> MarkdownConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        MarkdownConfig: Validated configuration ready for conversion.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), tab_width=2)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
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
