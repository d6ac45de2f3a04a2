"""Console output formatting for the asg-dns-handler CLI."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.console import Console

from .dns import DNSRecord
from .hostname import ResolvedHostname
from .pattern import HostnamePattern


class ConsoleOutput:
    """Handles formatting and displaying output to the console."""

    def __init__(self):
        """Initialize console output with a Rich console instance."""
        self.console = Console()

    def print_hostname(self, pattern: HostnamePattern, hostname: ResolvedHostname) -> None:
        """Print a resolved hostname and the pattern it came from.

        Args:
            pattern: Parsed hostname pattern
            hostname: Hostname resolved from the pattern
        """
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Hostname", style="green")
        table.add_column("Zone", style="magenta")
        table.add_column("Mode", style="blue")
        table.add_column("Name tag", style="yellow")

        mode = "per-instance" if pattern.per_instance else "shared"
        table.add_row(hostname.fqdn, hostname.zone_id, mode, hostname.label)
        self.console.print(table)

    def print_record(self, record: Optional[DNSRecord], fqdn: str) -> None:
        """Print the current A record for a hostname.

        Args:
            record: The record, or None if it does not exist
            fqdn: Hostname that was looked up
        """
        if record is None:
            self.console.print(f"[yellow]No A record found for {fqdn}.[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Name", style="green")
        table.add_column("Type", style="blue")
        table.add_column("TTL", justify="right")
        table.add_column("Addresses", style="yellow")
        table.add_row(
            record.name,
            record.type,
            str(record.ttl),
            "\n".join(sorted(record.addresses)),
        )
        self.console.print(table)

    def print_outcomes(self, outcomes: List[Dict[str, Any]]) -> None:
        """Print the outcome of each handled lifecycle message.

        Args:
            outcomes: List of outcome dictionaries
        """
        if not outcomes:
            self.console.print("[yellow]No lifecycle messages handled.[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Instance ID", style="green")
        table.add_column("Transition", style="blue")
        table.add_column("Hostname", style="magenta")
        table.add_column("Addresses", style="yellow")
        table.add_column("Result", justify="center")
        table.add_column("Reported", justify="center")

        for outcome in outcomes:
            result = outcome.get('result', '')
            result_style = "green" if result == "CONTINUE" else "red"
            table.add_row(
                outcome.get('instance_id', ''),
                outcome.get('transition', ''),
                outcome.get('hostname') or '',
                ", ".join(outcome.get('addresses', [])),
                f"[{result_style}]{result}[/{result_style}]",
                "yes" if outcome.get('reported') else "no",
            )

        self.console.print(f"\n[bold underline]Lifecycle outcomes ({len(outcomes)})[/bold underline]")
        self.console.print(table)

        for outcome in outcomes:
            if outcome.get('error'):
                self.print_error(f"{outcome.get('instance_id', '')}: {outcome['error']}")

    def print_error(self, message: str) -> None:
        """Print an error message.

        Args:
            message: Error message to display
        """
        self.console.print(f"[red]Error: {message}[/red]")
