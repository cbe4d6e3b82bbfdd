"""CLI for otp-xor."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from importlib.metadata import version
from pathlib import Path
from typing import NoReturn

import questionary
from rich.console import Console
from rich.markup import escape

from . import config as cfg
from .combiner import combine
from .errors import IoReadError, OtpXorError, UsageError
from .file_io import read_bytes, replace_in_place, write_new
from .logging_setup import configure

logger = logging.getLogger(__name__)

console = Console(stderr=True, soft_wrap=True)
out = Console(soft_wrap=True)

PROG = "otp-xor"
USAGE_LINES = (
    f"usage: {PROG} <input_file> <output_file>",
    f"       {PROG} -over <input_file>",
)


class Mode(str, Enum):
    NEW_FILE = "new-file"
    REPLACE_IN_PLACE = "replace-in-place"


@dataclass(frozen=True)
class Destination:
    mode: Mode
    path: Path


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        usage="\n".join(USAGE_LINES)[len("usage: "):],
        description="XOR a file with a one-time-pad key file",
        allow_abbrev=False,
    )
    # Takes its file as a value so "-over" can only sit directly before it.
    parser.add_argument("-over", dest="over", action="append", metavar="INPUT_FILE",
                        help="Replace INPUT_FILE in place (atomically)")
    parser.add_argument("paths", nargs="*", metavar="FILE", help=argparse.SUPPRESS)
    parser.add_argument("--key-file", help="Key file to use instead of the configured one")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--yes", "-y", action="store_true",
                        help="Overwrite an existing output file without asking")
    parser.add_argument("--version", action="store_true", help="Show version")
    return parser


def _same_file(a: Path, b: Path) -> bool:
    try:
        if a.exists() and b.exists():
            return a.samefile(b)
        return a.resolve() == b.resolve()
    except OSError as exc:
        raise IoReadError(Path(exc.filename) if exc.filename else a, exc) from exc


def resolve_destination(args: argparse.Namespace) -> tuple[Path, Destination]:
    """Map parsed arguments onto (input path, destination)."""
    paths = [Path(p) for p in args.paths]
    if args.over is not None:
        if len(args.over) == 1 and not paths:
            source = Path(args.over[0])
            return source, Destination(Mode.REPLACE_IN_PLACE, source)
        raise UsageError("-over takes exactly one input file and nothing else")
    if len(paths) == 2:
        source, target = paths
        if _same_file(source, target):
            raise UsageError(f"{source} and {target} are the same file; use -over")
        return source, Destination(Mode.NEW_FILE, target)
    raise UsageError(f"unexpected arguments: {' '.join(args.paths) or '(none)'}")


def _is_tty() -> bool:
    return sys.stdin.isatty()


def _confirm(message: str, *, default: bool = False) -> bool:
    result = questionary.confirm(message, default=default).ask()
    return bool(result)


def execute(source: Path, destination: Destination, run_config: cfg.RunConfig, cwd: Path | None = None) -> int:
    """XOR *source* with the configured key and write it to *destination*.

    Returns the number of bytes written.
    """
    data = read_bytes(source)
    key_path = run_config.key_path(cwd)
    key = read_bytes(key_path)
    combined = combine(data, key)
    logger.info(
        "XOR %s (%d bytes) with key %s (%d bytes), mode=%s",
        source, len(data), key_path, len(key), destination.mode.value,
    )

    if destination.mode is Mode.REPLACE_IN_PLACE:
        replace_in_place(destination.path, combined)
    else:
        write_new(destination.path, combined)
    return len(combined)


def _print_usage() -> None:
    for line in USAGE_LINES:
        console.print(line, markup=False, highlight=False)


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, run once, and return the process exit status."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
        if args.version:
            out.print(version(PROG))
            return 0

        run_config = cfg.load_config().with_overrides(
            key_filename=Path(args.key_file) if args.key_file else None,
            debug=True if args.debug else None,
        )
        configure(run_config)

        source, destination = resolve_destination(args)
        if (
            destination.mode is Mode.NEW_FILE
            and destination.path.exists()
            and not args.yes
            and _is_tty()
            and not _confirm(f"{destination.path} exists. Overwrite?")
        ):
            console.print("[yellow]Aborted.[/yellow] Nothing was written.")
            return 1

        written = execute(source, destination, run_config)
    except UsageError as exc:
        logger.debug("Usage error: %s", exc)
        _print_usage()
        return exc.exit_code
    except OtpXorError as exc:
        logger.info("Run failed: %s", exc)
        console.print(f"[red]error:[/red] {escape(str(exc))}")
        return exc.exit_code

    out.print(f"[green]Done.[/green] Wrote {written} bytes to {escape(str(destination.path))}")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
