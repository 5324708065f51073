"""CLI entrypoint: a thin host adapter over the generation pipeline."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from .config import ConfigError, load_config
from .emitter import EmissionError
from .logging import configure_logging
from .pipeline import format_failure_report, generate


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsoncontext",
        description="Generate typed data-access code from sampled JSON files.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Emit the data context module described by a .jsoncontext.yml file.",
    )
    generate_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Increase log verbosity for troubleshooting.",
    )
    generate_parser.add_argument(
        "config",
        nargs="?",
        default=".",
        help="Configuration file or the directory holding .jsoncontext.yml (defaults to current directory).",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the module here instead of stdout.",
    )
    generate_parser.add_argument(
        "--manifest",
        type=Path,
        help="Also write a JSON manifest of generated classes and fields.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for jsoncontext commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command != "generate":  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if not config.inputs:
        parser.exit(1, f"No inputs configured under {config.root}\n")

    try:
        result = generate(
            config.inputs,
            config.namespace,
            config.container,
            max_workers=config.max_workers,
        )
    except EmissionError as exc:
        parser.exit(1, f"jsoncontext generate failed: {exc}\n")

    report = format_failure_report(result.failures)
    if report:
        print(report, file=sys.stderr)

    if args.output is not None:
        args.output.write_text(result.source, encoding="utf-8")
        print(f"Data context written to {_relativize(args.output)}")
    else:
        sys.stdout.write(result.source)

    if args.manifest is not None:
        payload = {
            name: [asdict(spec) for spec in fields]
            for name, fields in result.code.manifest.items()
        }
        args.manifest.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
