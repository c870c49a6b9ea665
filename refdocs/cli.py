"""CLI entrypoints for refdocs commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .models import OutputFormat
from .orchestrator import Orchestrator
from .sources import SourceError, build_docset, load_explained


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    verbose: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    quiet: dict[str, object] = {
        "action": "store_true",
        "help": "Only report warnings and errors.",
    }
    if suppress_default:
        verbose["default"] = argparse.SUPPRESS
        quiet["default"] = argparse.SUPPRESS
    else:
        verbose["default"] = False
        quiet["default"] = False
    parser.add_argument("-v", "--verbose", **verbose)
    parser.add_argument("-q", "--quiet", **quiet)


def _add_render_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root holding .refdocs.yml (defaults to current directory).",
    )
    parser.add_argument(
        "--records",
        type=Path,
        help="JSON dump of parsed records to render instead of running jsdoc.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write debug logs to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refdocs",
        description="Render API reference pages from JSDoc comments.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    markdown_parser = subparsers.add_parser(
        "markdown",
        help="Write a README.md per documented directory.",
    )
    _add_common_options(markdown_parser, suppress_default=True)
    _add_render_options(markdown_parser)

    html_parser = subparsers.add_parser(
        "html",
        help="Write an index.html per documented directory with navigation.",
    )
    _add_common_options(html_parser, suppress_default=True)
    _add_render_options(html_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for refdocs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=getattr(args, "log_file", None),
    )

    fmt = OutputFormat(args.command)
    orchestrator = Orchestrator()

    try:
        config = load_config(Path(args.path))
        options = config.options(fmt)
        docset = None
        if args.records is not None:
            docset = build_docset(load_explained(args.records), options)
        if fmt is OutputFormat.MARKDOWN:
            written = orchestrator.run_markdown(options, docset)
        else:
            written = orchestrator.run_html(options, docset)
    except (ConfigError, SourceError) as exc:
        parser.exit(1, f"refdocs {args.command} failed: {exc}\nRun with --verbose for more details.\n")
    except OSError as exc:
        parser.exit(1, f"refdocs {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    for path in written:
        print(f"Wrote {_relativize(path)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
