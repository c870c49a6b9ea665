"""Reference documentation from JSDoc records, rendered as Markdown or HTML."""

from __future__ import annotations

from .config import ConfigError, DocsConfig, DocsOptions, load_config
from .models import ContentNode, DocSet, OutputFormat, RawRecord
from .orchestrator import Orchestrator
from .sources import SourceError

__all__ = [
    "ConfigError",
    "ContentNode",
    "DocSet",
    "DocsConfig",
    "DocsOptions",
    "Orchestrator",
    "OutputFormat",
    "RawRecord",
    "SourceError",
    "load_config",
]
