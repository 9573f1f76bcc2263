#!/usr/bin/env python3
"""Command-line interface for mac-cleanup."""
import argparse
import logging
import os
import sys

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from .core import config as config_module
from .core.config import RunConfig
from .core.errors import AuthorizationError, MeasurementError
from .core.models import TargetState
from .core.targets import build_targets
from .services.privilege_service import PrivilegeSession
from .services.sweep_service import TargetSweeper
from .services.tool_service import ToolProbe
from .utils.disk import SpaceMeter, to_human
from .utils.lifecycle import Finalizer
from .utils.output import make_console, setup_logging

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """A command line argparse could not accept."""


class ArgumentParser(argparse.ArgumentParser):
    """Raises UsageError instead of printing usage and exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="mac-cleanup",
        description="Reclaim disk space by clearing macOS and developer-tool caches, logs and temp files.",
        allow_abbrev=False,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print step-by-step diagnostics to stderr.")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    parser.add_argument("-u", "--update", action="store_true", help="Run brew update and brew upgrade before cleaning up Homebrew.")
    parser.add_argument("-n", dest="legacy_n", action="store_true", help=argparse.SUPPRESS)
    return parser


def _offending_option(parser, argv):
    """First option-like token that is not spelled exactly as one of ours, e.g. `-vx` or `--verbose=1`."""
    known = {opt for action in parser._actions for opt in action.option_strings}
    for arg in argv:
        if arg == "--":
            break
        if arg.startswith("-") and arg not in known:
            return arg
    return None


def _sample(meter, console):
    try:
        return meter.sample()
    except MeasurementError as e:
        logger.warning("%s", e)
        console.print("[yellow]Could not read free disk space; savings will be reported as unknown.[/]")
        return None


def _print_results(results, console) -> None:
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    table.add_column("Target", style="")
    table.add_column("State", style="")
    table.add_column("Freed", justify="right", style="yellow")
    table.add_column("Errors", justify="right", style="red")
    for r in results:
        if r.state is TargetState.SKIPPED:
            freed = "-"
        elif r.bytes_freed is None:
            freed = "unknown"
        else:
            freed = to_human(r.bytes_freed)
        table.add_row(r.name, r.state.value, freed, str(len(r.errors)) if r.errors else "")
    console.print()
    console.print(table)
    console.print()


def run(cfg: RunConfig, session=None, probe=None, meter=None, targets=None, err=None, out=None) -> int:
    """One privileged sweep. The privilege session is torn down exactly once however this exits."""
    err = err or make_console(cfg)
    out = out or make_console(cfg, stderr=False)
    setup_logging(cfg, err)
    session = session or PrivilegeSession(cfg.keepalive_interval)
    finalizer = Finalizer(session.release).install()
    try:
        err.print(Rule("[bold cyan]🧹 mac-cleanup[/]", style="cyan"))
        err.print("[cyan]→[/] Requesting administrator privileges...")
        try:
            session.acquire()
        except AuthorizationError as e:
            err.print(f"[red]✗ {escape(str(e))}[/]")
            return 1

        meter = meter or SpaceMeter(cfg.space_root)
        before = _sample(meter, err)
        if cfg.update:
            err.print("[cyan]→[/] Homebrew will be updated and upgraded before cleanup")

        probe = probe or ToolProbe(session, timeout=cfg.command_timeout)
        sweeper = TargetSweeper(probe, session, err)
        results = sweeper.run_all(build_targets(cfg) if targets is None else targets)

        after = _sample(meter, err) if before is not None else None
        failed = [r for r in results if r.state is TargetState.PARTIALLY_FAILED]
        if failed:
            err.print(f"[yellow]{len(failed)} target(s) were only partly cleaned. Rerun with -v for details.[/]")
        if cfg.verbose:
            _print_results(results, err)

        if before is None or after is None:
            out.print("[green]✓ Success![/] Space reclaimed: unknown")
        else:
            freed = meter.freed_between(before, after)
            out.print(f"[green]✓ Success![/] {to_human(freed)} of space was cleaned up")
        return 0
    except KeyboardInterrupt:
        err.print("\n[yellow]Interrupted.[/]")
        return 130
    finally:
        finalizer()
        finalizer.uninstall()


def main(argv=None) -> int:
    """Main function."""
    argv = list(argv) if argv is not None else sys.argv[1:]
    parser = build_parser()
    try:
        args, unknown = parser.parse_known_args(argv)
    except UsageError as e:
        logger.debug("%s", e)
        args, unknown = None, [_offending_option(parser, argv) or str(e)]
    if unknown:
        Console(stderr=True, highlight=False).print(f"[red]Unknown option: {escape(unknown[0])}[/]")
        return 1

    cfg = RunConfig.build(
        verbose=args.verbose,
        no_color=args.no_color,
        update=args.update,
        stream=sys.stderr,
        environ=os.environ,
        file_config=config_module.load(),
    )
    return run(cfg)


if __name__ == "__main__":
    raise SystemExit(main())
