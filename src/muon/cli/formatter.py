# src/muon/cli/formatter.py
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table

from muon.core.models import DefinitionItem, InvalidDefinition

# Initialize the Rich console for high-quality terminal output
console = Console()


class MuonFormatter:
    """
    Renders tokenizer output, check reports and decoded values for the CLI.
    """

    def show_definitions(self, items: List[DefinitionItem], file_name: str):
        """
        Lists every definition the tokenizer produced, malformed lines in red.
        """
        table = Table(title=f"Definitions: {escape(file_name)}", header_style="bold magenta")
        table.add_column("Line", justify="right", style="dim")
        table.add_column("Depth", justify="right")
        table.add_column("Key", style="cyan")
        table.add_column("Value")

        for item in items:
            if isinstance(item, InvalidDefinition):
                table.add_row(
                    str(item.line_no), "-",
                    f"[bold red]{item.error.name}[/bold red]",
                    f"[red]{escape(item.text.strip())}[/red]"
                )
            else:
                table.add_row(str(item.line_no), str(item.depth), escape(item.key), escape(item.value))

        console.print(table)

    def print_check_table(self, reports: List[Dict[str, Any]]):
        """
        Builds the summary table shown at the end of a check run.
        """
        table = Table(title="MuON Check Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Definitions", justify="right")
        table.add_column("Malformed", justify="right")
        table.add_column("Result", justify="center")

        for r in reports:
            ok = r.get("success", False)
            table.add_row(
                escape(r.get("file_path", "")),
                str(r.get("definitions", 0)),
                str(len(r.get("problems", []))),
                "✅" if ok else "❌"
            )

        console.print(table)

        for r in reports:
            for problem in r.get("problems", []):
                console.print(f"[bold red]{escape(problem)}[/bold red] in {escape(r['file_path'])}")

    def show_decoded(self, value: Any, file_name: str):
        console.print(Panel(Pretty(value), title=f"Decoded: {escape(file_name)}", border_style="green"))

    def show_error(self, message: str, file_name: str):
        console.print(f"[bold red]Error in {escape(file_name)}:[/bold red] {escape(message)}")
