#!/usr/bin/env python3
"""
MUON CLI - Inspection & Decode Front-End
----------------------------------------
Orchestrates:
1. Subcommand Routing (tokens/check/decode)
2. Malformed Line Reporting
3. Schema-driven decoding of a file into a dataclass

Author: MuON Decoder Team
Date: 2026-10-16
"""

import sys
import argparse
import importlib
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel

from muon import __version__
from muon.cli.formatter import MuonFormatter
from muon.core.config import DecodeOptions
from muon.core.engine import from_path
from muon.core.errors import MuonError, SchemaError
from muon.core.models import InvalidDefinition
from muon.parsing.lexer import MuonLexer

console = Console()
logger = logging.getLogger("muon.cli")


class MuonCLI:
    """
    CLI wrapper that translates user commands into lexer and engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="muon",
            description="MuON - schema-driven decoder for the MuON notation",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = MuonFormatter()
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("-v", "--version", action="version", version=f"muon v{__version__}")
        self.parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
        self.parser.add_argument("--comment", default="#", help="Comment marker (default: #)")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        tokens_parser = subparsers.add_parser("tokens", help="List the definitions of a file")
        tokens_parser.add_argument("path", help="Path to a MuON file")

        check_parser = subparsers.add_parser("check", help="Report malformed lines")
        check_parser.add_argument("paths", nargs="+", help="MuON files to check")

        decode_parser = subparsers.add_parser("decode", help="Decode a file into a dataclass")
        decode_parser.add_argument("path", help="Path to a MuON file")
        decode_parser.add_argument("--schema", required=True, help="Target type as module:Name")
        decode_parser.add_argument("--allow-trailing", action="store_true",
                                   help="Ignore definitions left after the top-level value")

    def print_header(self, subtitle: str):
        """Renders the splash header."""
        console.print(Panel.fit(
            f"[bold cyan]MuON v{__version__}[/bold cyan]",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def _read(self, path: Path) -> str:
        return path.read_text(encoding='utf-8-sig')

    def _load_schema(self, target: str) -> Any:
        """Imports `module:Name` and returns the named attribute."""
        module_name, sep, attr = target.partition(":")
        if not sep or not module_name or not attr:
            raise SchemaError(f"schema must look like module:Name, got '{target}'")
        # Schemas usually live next to the data, not in site-packages
        cwd = str(Path.cwd())
        if cwd not in sys.path:
            sys.path.insert(0, cwd)
        module = importlib.import_module(module_name)
        try:
            return getattr(module, attr)
        except AttributeError:
            raise SchemaError(f"'{attr}' not found in module '{module_name}'")

    def cmd_tokens(self, args: argparse.Namespace) -> int:
        path = Path(args.path)
        if not path.is_file():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 1
        lexer = MuonLexer(comment_marker=args.comment)
        items = list(lexer.definitions(self._read(path)))
        self.formatter.show_definitions(items, path.name)
        return 1 if any(isinstance(i, InvalidDefinition) for i in items) else 0

    def cmd_check(self, args: argparse.Namespace) -> int:
        lexer = MuonLexer(comment_marker=args.comment)
        reports: List[Dict[str, Any]] = []

        for raw_path in args.paths:
            path = Path(raw_path)
            if not path.is_file():
                reports.append({"file_path": raw_path, "success": False,
                                "problems": ["file not found"]})
                continue
            items = list(lexer.definitions(self._read(path)))
            problems = [i.describe() for i in items if isinstance(i, InvalidDefinition)]
            logger.info(f"Checked {path}: {len(items)} definitions, {len(problems)} malformed")
            reports.append({
                "file_path": raw_path,
                "definitions": len(items),
                "problems": problems,
                "success": not problems,
            })

        self.formatter.print_check_table(reports)
        return 0 if all(r["success"] for r in reports) else 1

    def cmd_decode(self, args: argparse.Namespace) -> int:
        path = Path(args.path)
        options = DecodeOptions(comment_marker=args.comment, allow_trailing=args.allow_trailing)
        try:
            schema = self._load_schema(args.schema)
            value = from_path(path, schema, options)
        except (MuonError, SchemaError, ImportError, OSError) as e:
            self.formatter.show_error(str(e), path.name)
            return 1
        self.formatter.show_decoded(value, path.name)
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        argv = sys.argv[1:] if argv is None else argv
        if not argv:
            self.print_header("MuON Decoder")
            self.parser.print_help()
            return 0

        args = self.parser.parse_args(argv)
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

        if args.command == "tokens":
            return self.cmd_tokens(args)
        if args.command == "check":
            return self.cmd_check(args)
        if args.command == "decode":
            return self.cmd_decode(args)
        self.parser.print_help()
        return 0


def main(argv: Optional[List[str]] = None):
    """Application entry point with interrupt handling."""
    try:
        sys.exit(MuonCLI().run(argv))
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
