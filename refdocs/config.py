"""Configuration loading for refdocs (.refdocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import yaml

from .models import OutputFormat

CONFIG_NAME = ".refdocs.yml"
DEFAULT_THEMES: Dict[str, str] = {"light": "default", "dark": "monokai"}

TitleFilter = Callable[[str, str], str]


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class HtmlConfig:
    """HTML-only settings."""

    out_dir: str = "docs"
    themes: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_THEMES))
    class_prefix: str = ""
    templates_dir: Optional[Path] = None


@dataclass
class DocsOptions:
    """Effective settings for one render run."""

    root: Path
    include: List[str]
    exclude: List[str] = field(default_factory=list)
    docs_include: List[str] = field(default_factory=list)
    docs_exclude: List[str] = field(default_factory=list)
    docs_types: List[str] = field(default_factory=list)
    src_dir: str = "src"
    out_dir: Optional[str] = None
    url: str = ""
    index: Optional[Path] = None
    title_filter: Optional[TitleFilter] = None
    themes: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_THEMES))
    class_prefix: str = ""
    templates_dir: Optional[Path] = None

    @property
    def result_include(self) -> List[str]:
        return self.docs_include or self.include

    @property
    def result_exclude(self) -> List[str]:
        return [*self.exclude, *self.docs_exclude]

    def relative_dir(self, dir: str) -> str:
        """``src/form/field`` -> ``form/field``; ``src_dir`` itself maps to ``""``."""
        if dir == self.src_dir:
            return ""
        prefix = f"{self.src_dir}/"
        return dir[len(prefix):] if dir.startswith(prefix) else dir


@dataclass
class DocsConfig:
    """Represents the settings defined in .refdocs.yml."""

    root: Path
    include: List[str] = field(default_factory=lambda: ["src/**/*.js", "src/**/*.ts"])
    exclude: List[str] = field(default_factory=list)
    docs_include: List[str] = field(default_factory=list)
    docs_exclude: List[str] = field(default_factory=list)
    docs_types: List[str] = field(default_factory=list)
    src_dir: str = "src"
    out_dir: Optional[str] = None
    url: str = ""
    index: Optional[Path] = None
    html: HtmlConfig = field(default_factory=HtmlConfig)

    def options(
        self, fmt: OutputFormat, *, title_filter: Optional[TitleFilter] = None
    ) -> DocsOptions:
        """Resolve the options for ``fmt``; HTML always writes below an output directory."""
        out_dir = self.html.out_dir if fmt is OutputFormat.HTML else self.out_dir
        return DocsOptions(
            root=self.root,
            include=list(self.include),
            exclude=list(self.exclude),
            docs_include=list(self.docs_include),
            docs_exclude=list(self.docs_exclude),
            docs_types=list(self.docs_types),
            src_dir=self.src_dir,
            out_dir=out_dir,
            url=self.url.rstrip("/"),
            index=self.index,
            title_filter=title_filter,
            themes=dict(self.html.themes),
            class_prefix=self.html.class_prefix,
            templates_dir=self.html.templates_dir,
        )


def load_config(config_path: Path) -> DocsConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_NAME} must contain a mapping at the root")

    config = DocsConfig(root=root)
    include = _as_str_list(data.get("include"))
    if include:
        config.include = include
    config.exclude = _as_str_list(data.get("exclude"))
    config.docs_include = _as_str_list(data.get("docs_include"))
    config.docs_exclude = _as_str_list(data.get("docs_exclude"))
    config.docs_types = _as_str_list(data.get("docs_types"))
    config.src_dir = (_as_str(data.get("src_dir")) or config.src_dir).rstrip("/")
    config.out_dir = _as_str(data.get("out_dir"))
    config.url = _as_str(data.get("url")) or ""

    index = _as_str(data.get("index"))
    config.index = root / index if index else None

    html_data = _as_dict(data.get("html"))
    if html_data:
        config.html.out_dir = _as_str(html_data.get("out_dir")) or config.html.out_dir
        themes = _as_dict(html_data.get("themes"))
        for key in ("light", "dark"):
            theme = _as_str(themes.get(key))
            if theme:
                config.html.themes[key] = theme
        config.html.class_prefix = _as_str(html_data.get("class_prefix")) or ""
        templates_dir = _as_str(html_data.get("templates_dir"))
        config.html.templates_dir = root / templates_dir if templates_dir else None

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_NAME).resolve()
    if config_path.name != CONFIG_NAME:
        return (config_path.parent / CONFIG_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_NAME",
    "ConfigError",
    "DEFAULT_THEMES",
    "DocsConfig",
    "DocsOptions",
    "HtmlConfig",
    "load_config",
]
