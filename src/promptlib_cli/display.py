"""Terminal output rendering using rich."""

from __future__ import annotations

import logging
import sys
from typing import IO

import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.table import Table

from promptlib_cli.models import (
    CollectionManifest,
    ContentFile,
    ItemRef,
    ValidationReport,
)


class Display:
    """Terminal display helpers powered by rich."""

    def __init__(self, file: IO[str] | None = None) -> None:
        self._file = file or sys.stdout
        self._console = Console(file=self._file)

    @property
    def console(self) -> Console:
        return self._console

    def print_error(self, message: str) -> None:
        """Print an error message in red."""
        self._console.print(f"[bold red]Error:[/bold red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message in yellow."""
        self._console.print(f"[bold yellow]Warning:[/bold yellow] {message}")

    def print_success(self, message: str) -> None:
        """Print a success message in green."""
        self._console.print(f"[bold green]✓[/bold green] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self._console.print(f"  {message}")

    def print_report(self, report: ValidationReport) -> None:
        """Print every issue grouped by file, then a summary line."""
        if report.issues:
            table = Table(title="Validation Issues")
            table.add_column("File", style="cyan")
            table.add_column("Severity")
            table.add_column("Code")
            table.add_column("Message")
            for path, issues in report.by_path().items():
                for index, issue in enumerate(issues):
                    color = "red" if issue.severity == "error" else "yellow"
                    table.add_row(
                        path if index == 0 else "",
                        f"[{color}]{issue.severity}[/{color}]",
                        issue.code,
                        issue.message,
                        end_section=index == len(issues) - 1,
                    )
            self._console.print(table)

        summary = (
            f"Checked {report.files_checked} file"
            f"{'s' if report.files_checked != 1 else ''} and "
            f"{report.manifests_checked} manifest"
            f"{'s' if report.manifests_checked != 1 else ''}: "
            f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
        )
        if report.ok:
            self.print_success(summary)
        else:
            self.print_error(summary)

    def print_content_table(self, files: list[ContentFile]) -> None:
        """Print a table of content files."""
        table = Table(title="Prompt Library")
        table.add_column("Path", style="cyan")
        table.add_column("Kind")
        table.add_column("Description")
        table.add_column("Applies To / Tools")

        for content in files:
            if content.apply_to:
                extra = content.apply_to
            else:
                extra = ", ".join(content.tools)
            table.add_row(content.path, content.kind.value, content.description, extra)

        self._console.print(table)

    def print_content(self, content: ContentFile) -> None:
        """Print one content file: front matter then rendered body."""
        self._console.print(f"[bold cyan]{content.path}[/bold cyan] ({content.kind.value})")
        front = yaml.safe_dump(
            content.front_matter, default_flow_style=False, sort_keys=False
        )
        self._console.print(front.rstrip(), markup=False, highlight=False)
        self._console.print()
        self._console.print(Markdown(content.body))

    def print_collection(
        self, manifest: CollectionManifest, items: list[ItemRef]
    ) -> None:
        """Print a manifest's header and its items in presentation order."""
        badge = " [reverse] collection [/reverse]" if manifest.display.show_badge else ""
        self._console.print(f"[bold]{manifest.name}[/bold] ({manifest.id}){badge}")
        if manifest.description:
            self.print_info(manifest.description)
        if manifest.tags:
            self.print_info("Tags: " + ", ".join(manifest.tags))

        table = Table()
        table.add_column("#", justify="right")
        table.add_column("Path", style="cyan")
        table.add_column("Kind")
        for index, item in enumerate(items, start=1):
            table.add_row(str(index), item.path, item.kind.value)
        self._console.print(table)


def configure_logging(level: str, console: Console | None = None) -> None:
    """Route log records through rich at the given level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
