"""Command-line interface for templex."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from templex import Templex
from templex.core.config import config
from templex.core.error_handling import ParsingError, UnsupportedLanguageError
from templex.languages.lang_typescript.components.scanner import scan_template_sites
from templex.models.resolution import SiteResolution


def _resolution_to_dict(resolution: SiteResolution) -> Dict[str, Any]:
    return {
        "line": resolution.anchor.line + 1,
        "character": resolution.anchor.character,
        "values": resolution.values,
        "combinations": resolution.combinations,
        "decoration": resolution.decoration_text,
    }


def _load(file_path: str, console: Console) -> str:
    try:
        return Templex.load_file(file_path)
    except FileNotFoundError:
        console.print(f"[bold red]File not found:[/bold red] {file_path}")
        sys.exit(1)
    except UnsupportedLanguageError:
        console.print(f"[bold red]Unsupported file:[/bold red] {file_path}")
        sys.exit(1)


def _resolve(file_path: str, raw_json: bool, annotate: bool, console: Console) -> None:
    """Resolve every template literal of ``file_path`` and print the annotations."""
    code = _load(file_path, console)
    resolutions: List[SiteResolution] = asyncio.run(Templex().resolve_file(file_path, code))
    if raw_json:
        print(json.dumps({"path": file_path, "annotations": [_resolution_to_dict(r) for r in resolutions]},
                         indent=2))
        return
    if not resolutions:
        console.print(Panel("No template literals could be resolved", style="yellow"))
        return
    if annotate:
        by_line = {r.anchor.line: r for r in resolutions}
        for index, line in enumerate(code.split('\n')):
            resolution = by_line.get(index)
            if resolution is None:
                console.print(line, markup=False, highlight=False)
            else:
                console.print(Text(line) + Text(resolution.decoration_text, style="dim"), highlight=False)
        return
    for resolution in resolutions:
        console.print(f"[bold]{file_path}:{resolution.anchor.line + 1}[/bold]")
        for expression, values in resolution.values.items():
            console.print(f"  [cyan]{expression}[/cyan]: {', '.join(values)}", highlight=False)
        console.print(f"  [green]{resolution.display_text}[/green]", highlight=False)


def _sites(file_path: str, raw_json: bool, console: Console) -> None:
    """List the template literals of ``file_path`` with their variable parts."""
    code = _load(file_path, console)
    try:
        unit = Templex().parse(code, path=os.path.abspath(file_path))
    except ParsingError as e:
        console.print(f"[bold red]Cannot parse {file_path}:[/bold red] {e}")
        sys.exit(1)
    sites = scan_template_sites(unit)
    data = [
        {
            "line": site.start.line + 1,
            "parts": [{"kind": part.kind.value, "value": part.value} for part in site.parts],
        }
        for site in sites
    ]
    if raw_json:
        print(json.dumps({"path": file_path, "sites": data}, indent=2))
    else:
        console.print_json(data={"path": file_path, "sites": data})


def main() -> None:
    """Entry point for the ``templex`` command."""

    console = Console()
    parser = argparse.ArgumentParser(description="templex command-line interface")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Reduce logs to errors only")
    sub = parser.add_subparsers(dest="command")

    resolve_p = sub.add_parser("resolve", help="Resolve template literals to their possible values")
    resolve_p.add_argument("file", help="TypeScript/JavaScript source file")
    resolve_p.add_argument("--raw-json", action="store_true", help="Output raw JSON")
    resolve_p.add_argument("--annotate", action="store_true", help="Print the file with inline annotations")
    resolve_p.add_argument("--max-combinations", type=int, help="Maximum combinations per line")
    resolve_p.add_argument("--max-values", type=int, help="Maximum values used per variable")

    sites_p = sub.add_parser("sites", help="List template literals and their parts")
    sites_p.add_argument("file", help="TypeScript/JavaScript source file")
    sites_p.add_argument("--raw-json", action="store_true", help="Output raw JSON")

    args = parser.parse_args()
    # Determine logging level
    if getattr(args, "debug", False):
        log_level = logging.DEBUG
    elif getattr(args, "quiet", False):
        log_level = logging.ERROR
    elif getattr(args, "verbose", False):
        log_level = logging.INFO
    else:
        log_level = getattr(logging, str(config.get('logging', 'level', 'WARNING')).upper(), logging.WARNING)
    logging.basicConfig(level=log_level, filename=config.get('logging', 'file'))

    if args.command == "resolve":
        if args.max_combinations is not None:
            config.set('resolution', 'max_combinations', args.max_combinations)
        if args.max_values is not None:
            config.set('resolution', 'max_values_per_variable', args.max_values)
        _resolve(args.file, args.raw_json, args.annotate, console)
    elif args.command == "sites":
        _sites(args.file, args.raw_json, console)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
