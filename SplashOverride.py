#!/usr/bin/env python3
from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from splash_config import SplashConfigHolder, load_source_config_from_env
from splash_inputs import clean_local_splashes, load_splashes_from_file
from splash_logging import configure_logging
from splash_menu import pick_splash, prepare_splashes
from splash_resolver import SourceConfig, SplashResolver, SplashSource
from splash_sources import normalize_source_url

_SOURCE_STYLES = {
    SplashSource.REMOTE: "green",
    SplashSource.LOCAL: "yellow",
    SplashSource.NONE: "red",
}


def _status_printer(console: Console):
    def on_status(message: str) -> None:
        console.print(Text(message, style="dim"))

    return on_status


def _config_from_args(args: argparse.Namespace) -> SourceConfig:
    """Env config with command-line overrides applied on top."""

    config = load_source_config_from_env()

    if args.url:
        config = replace(config, remote_url=args.url.strip(), use_remote=True)
    if args.no_remote:
        config = replace(config, use_remote=False)
    if args.local_file:
        path = Path(args.local_file).expanduser()
        if not path.exists():
            raise ValueError(f"Local splash file not found: {path}")
        config = replace(config, local_splashes=load_splashes_from_file(path))
    elif args.local:
        config = replace(config, local_splashes=clean_local_splashes(args.local))

    return config


def _render_splashes(console: Console, splashes: tuple[str, ...], source: SplashSource) -> None:
    table = Table(title=f"Splashes ({len(splashes)})", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Splash")
    for index, splash in enumerate(splashes, start=1):
        table.add_row(f"{index:02d}", Text(splash))

    style = _SOURCE_STYLES[source]
    console.print(Panel(f"Source: [b {style}]{source.value}[/b {style}]", expand=False))
    if splashes:
        console.print(table)
    else:
        console.print("No custom splashes resolved; the default list would be used.")


def _cmd_resolve(args: argparse.Namespace, console: Console) -> int:
    with SplashResolver(on_status=_status_printer(console)) as resolver:
        holder = SplashConfigHolder(resolver, loader=lambda: _config_from_args(args))
        resolution = holder.resolve_detailed()
    _render_splashes(console, resolution.splashes, resolution.source)
    return 0


def _cmd_normalize(args: argparse.Namespace, console: Console) -> int:
    console.print(normalize_source_url(args.source_url), markup=False, highlight=False)
    return 0


def _cmd_pick(args: argparse.Namespace, console: Console) -> int:
    with SplashResolver() as resolver:
        holder = SplashConfigHolder(resolver, loader=lambda: _config_from_args(args))
        splash = pick_splash(prepare_splashes(resolver, holder.current))
    console.print(Text(splash, style="bold yellow") if splash else "(no splash)")
    return 0


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--url", help="Remote splash URL (GitHub blob links are converted to raw)")
    parser.add_argument("--no-remote", action="store_true", help="Skip the remote source entirely")
    parser.add_argument("--local", nargs="+", metavar="SPLASH", help="Local fallback splashes")
    parser.add_argument("--local-file", help="Text file with local fallback splashes (one per line)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="splashoverride", description="SplashOverride: remote/local splash lists")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    p_resolve = sub.add_parser("resolve", help="Resolve and list splashes (remote first, then local)")
    _add_source_arguments(p_resolve)
    p_resolve.set_defaults(func=_cmd_resolve)

    p_normalize = sub.add_parser("normalize", help="Show the URL that would actually be fetched")
    p_normalize.add_argument("source_url", help="Splash source URL")
    p_normalize.set_defaults(func=_cmd_normalize)

    p_pick = sub.add_parser("pick", help="Print one random splash")
    _add_source_arguments(p_pick)
    p_pick.set_defaults(func=_cmd_pick)

    return parser


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    console = console or Console()

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if not args.command:
        parser.print_help()
        return 0

    try:
        return int(args.func(args, console))
    except (ValueError, OSError) as error:
        console.print(f"Input error: {error}", markup=False)
        return 1
    except KeyboardInterrupt:
        console.print("Cancelled by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
