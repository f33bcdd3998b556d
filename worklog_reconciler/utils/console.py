import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape

_console = Console(highlight=False, soft_wrap=True)


def print_banner(title: str) -> None:
    """Print the run header."""
    _console.rule(f"[bold blue]{escape(title)}[/]")


def print_step(title: str) -> None:
    """Print a section header."""
    _console.print(f"\n[bold green]** {escape(title)}[/]")


def print_line(message: str) -> None:
    _console.print(escape(message))


def print_report_line(line: str) -> None:
    """Print one report line, colouring check outcomes."""
    if line.startswith("OKAY..."):
        _console.print(f"[green]{escape(line)}[/]")
    elif line.startswith("ERROR:"):
        _console.print(f"[bold red]ERROR:[/]{escape(line[len('ERROR:'):])}")
    elif line.startswith("Pre-surcharge total"):
        _console.print(f"[bold red]{escape(line)}[/]")
    else:
        _console.print(escape(line))


def print_error(message: str, exit_code: Optional[int] = None) -> None:
    """Print an error message and optionally exit."""
    _console.print(f"[bold red]ERROR:[/] {escape(message)}")

    if exit_code is not None:
        sys.exit(exit_code)


def print_json(payload: str) -> None:
    # Plain print keeps machine-readable output free of console markup.
    print(payload)
