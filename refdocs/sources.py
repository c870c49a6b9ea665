"""Source discovery and doc comment extraction."""

from __future__ import annotations

import json
import posixpath
import re
import subprocess
import tempfile
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .config import DocsOptions
from .logging import get_logger
from .models import DocSet, RawRecord, RecordMeta

logger = get_logger("sources")

SOURCE_SUFFIXES = (".js", ".ts")

_DOC_COMMENT = re.compile(r"/\*\*[\s\S]*?\*/")

Transpiler = Callable[[str, Path], str]


class SourceError(RuntimeError):
    """Raised when doc comments cannot be extracted or loaded."""


@dataclass
class Explained:
    """Raw record dictionaries keyed by source file, plus optional index records."""

    sources: Dict[str, List[Dict[str, Any]]]
    index: Optional[List[Dict[str, Any]]] = None


class JsdocExplainer:
    """Runs ``jsdoc -X`` over a source string and returns its records."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        executable: str = "jsdoc",
    ) -> None:
        self._runner = runner or self._default_runner
        self.executable = executable

    def explain(self, source: str, *, cwd: Path) -> List[Dict[str, Any]]:
        if not source.strip():
            return []
        with tempfile.TemporaryDirectory(prefix="refdocs-") as tmp:
            path = Path(tmp) / "source.js"
            path.write_text(source, encoding="utf-8")
            output = self._run([self.executable, "-X", str(path)], cwd=cwd)

        try:
            payload = json.loads(output)
        except json.JSONDecodeError as exc:
            raise SourceError(f"{self.executable} returned invalid JSON") from exc
        if not isinstance(payload, list):
            raise SourceError(f"{self.executable} returned {type(payload).__name__}, expected a list")
        return [item for item in payload if isinstance(item, dict)]

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        try:
            return self._runner(args, cwd=cwd, capture_output=True)
        except FileNotFoundError as exc:
            raise SourceError(
                f"Unable to locate '{self.executable}'. Install jsdoc or pass --records."
            ) from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise SourceError(f"{self.executable} failed with exit code {exc.returncode}: {stderr}") from exc

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


class SourceCollector:
    """Globs the configured sources and explains each one.

    TypeScript is reduced to its doc comments unless it is a result file and
    a ``transpile`` hook is available. Files under ``docs_types`` are always
    reduced to comments.
    """

    def __init__(
        self,
        options: DocsOptions,
        explainer: JsdocExplainer | None = None,
        transpile: Transpiler | None = None,
    ) -> None:
        self.options = options
        self.explainer = explainer or JsdocExplainer()
        self.transpile = transpile

    def collect(self) -> DocSet:
        root = self.options.root
        sources: Dict[str, List[Dict[str, Any]]] = {}

        for relative in self._discover():
            path = root / relative
            if path.suffix not in SOURCE_SUFFIXES:
                continue
            text = path.read_text(encoding="utf-8")
            source = self._prepare(relative, path, text)
            sources[relative] = self.explainer.explain(source, cwd=root) if source.strip() else []
            logger.debug("Explained %s (%d records)", relative, len(sources[relative]))

        index = self._explain_index()
        return build_docset(Explained(sources=sources, index=index), self.options)

    def _discover(self) -> List[str]:
        found: List[str] = []
        seen = set()
        for pattern in self.options.include:
            for path in sorted(self.options.root.glob(pattern)):
                if not path.is_file():
                    continue
                relative = path.relative_to(self.options.root).as_posix()
                if relative in seen or matches_any(relative, self.options.exclude):
                    continue
                seen.add(relative)
                found.append(relative)
        return found

    def _prepare(self, relative: str, path: Path, text: str) -> str:
        is_ts = path.suffix == ".ts"
        is_result = is_result_file(relative, self.options)
        is_type = matches_any(relative, self.options.docs_types)

        if is_ts and is_result and not is_type and self.transpile is not None:
            return self.transpile(text, path)
        if is_ts or is_type:
            comments = _DOC_COMMENT.findall(text)
            if comments:
                return "\n".join(comments)
            return "" if is_ts else text
        return text

    def _explain_index(self) -> Optional[List[Dict[str, Any]]]:
        index = self.options.index
        if index is None:
            return None
        if index.suffix == ".json":
            return _load_json_list(index)
        return self.explainer.explain(index.read_text(encoding="utf-8"), cwd=self.options.root)


def matches_any(path: str, patterns: Sequence[str]) -> bool:
    return any(_glob_matches(path, pattern) for pattern in patterns)


def _glob_matches(path: str, pattern: str) -> bool:
    normalized = path.replace("\\", "/")
    if fnmatch(normalized, pattern):
        return True
    # ``**/`` may also match zero directories.
    return "/**/" in pattern and fnmatch(normalized, pattern.replace("/**/", "/"))


def is_result_file(path: str, options: DocsOptions) -> bool:
    """Whether ``path`` gets its own documentation page."""
    return matches_any(path, options.result_include) and not matches_any(
        path, options.result_exclude
    )


def build_docset(
    explained: Explained,
    options: DocsOptions,
    index_records: Optional[Sequence[RawRecord]] = None,
) -> DocSet:
    """Tag records with their directory and group result files into units."""
    docset = DocSet()

    for file, items in explained.sources.items():
        dir = posixpath.dirname(file.replace("\\", "/"))
        records = [_with_meta(RawRecord.from_dict(item), dir, options) for item in items]
        docset.records.extend(records)
        if is_result_file(file, options):
            docset.units.setdefault(dir, []).extend(records)

    if index_records is not None:
        docset.index_records = list(index_records)
    elif explained.index is not None:
        docset.index_records = [RawRecord.from_dict(item) for item in explained.index]

    logger.debug(
        "Loaded %d records from %d files into %d units",
        len(docset.records),
        len(explained.sources),
        len(docset.units),
    )
    return docset


def _with_meta(record: RawRecord, dir: str, options: DocsOptions) -> RawRecord:
    code_name = record.meta.code_name if record.meta else None
    filename_out = options.relative_dir(dir) if options.out_dir else None
    record.meta = RecordMeta(filename=dir, filename_out=filename_out, code_name=code_name)
    return record


def load_explained(path: Path) -> Explained:
    """Read a records dump: ``{"sources": {file: [records]}, "index": [records]}``."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SourceError(f"{path.name} is not valid JSON: {exc}") from exc

    if not isinstance(payload, Mapping) or not isinstance(payload.get("sources"), Mapping):
        raise SourceError(f"{path.name} must contain a 'sources' mapping")

    sources = {
        str(file): [item for item in items if isinstance(item, dict)]
        for file, items in payload["sources"].items()
        if isinstance(items, list)
    }
    index = payload.get("index")
    if index is not None and not isinstance(index, list):
        raise SourceError(f"{path.name}: 'index' must be a list of records")
    return Explained(sources=sources, index=index)


def _load_json_list(path: Path) -> List[Dict[str, Any]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SourceError(f"{path.name} is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise SourceError(f"{path.name} must contain a list of records")
    return [item for item in payload if isinstance(item, dict)]


__all__ = [
    "Explained",
    "JsdocExplainer",
    "SOURCE_SUFFIXES",
    "SourceCollector",
    "SourceError",
    "Transpiler",
    "build_docset",
    "is_result_file",
    "load_explained",
    "matches_any",
]
