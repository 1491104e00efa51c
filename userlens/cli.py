"""CLI entrypoints for userlens commands."""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import ConfigError
from .errors import ArtifactIOError, CacheIOError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Log per-file cache decisions and tracebacks.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="userlens",
        description="Extract, classify and track UI components across analysis runs.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze component files and write components/patterns/workflows artifacts.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    analyze_parser.add_argument(
        "-c",
        "--config",
        help="Path to a config file (defaults to .userlens.yml in the project root).",
    )
    analyze_parser.add_argument(
        "--entry",
        help="Directory to scan for components, relative to the project root.",
    )
    analyze_parser.add_argument(
        "--output",
        help="Directory for run artifacts, relative to the project root.",
    )
    analyze_parser.add_argument(
        "--framework",
        help="Component framework to analyze (default from .userlens.yml, else react).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for userlens commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    orchestrator = Orchestrator()

    if args.command == "analyze":
        try:
            result = orchestrator.run_analyze(
                args.path,
                entry=args.entry,
                output=args.output,
                framework=args.framework,
                config_path=args.config,
            )
        except (FileNotFoundError, NotADirectoryError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        except (CacheIOError, ArtifactIOError) as exc:
            parser.exit(1, f"userlens analyze failed: {exc}\nRun with --verbose for more details.\n")
        summary = result.summary
        output_dir = _relativize(orchestrator.config.output)
        print(f"Analyzed {len(result.components)} components into {output_dir}: {summary.describe()}")
        if summary.skipped:
            print(f"Skipped {len(summary.skipped)} file(s): {', '.join(summary.skipped)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":  # pragma: no cover
    main()
