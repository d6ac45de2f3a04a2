"""Unit tests for asg-dns-handler console_output module."""

from unittest.mock import MagicMock, patch

from rich.table import Table

from asg_dns_handler.console_output import ConsoleOutput
from asg_dns_handler.dns import DNSRecord
from asg_dns_handler.hostname import ResolvedHostname
from asg_dns_handler.pattern import parse_pattern


class TestConsoleOutput:
    """Test ConsoleOutput initialization."""

    @patch("asg_dns_handler.console_output.Console")
    def test_init_uses_rich_console(self, mock_console_class):
        """Test that initialization uses Rich Console class."""
        mock_console_instance = MagicMock()
        mock_console_class.return_value = mock_console_instance

        console_output = ConsoleOutput()

        mock_console_class.assert_called_once()
        assert console_output.console == mock_console_instance


class TestPrinting:
    def setup_method(self):
        self.console_output = ConsoleOutput()
        self.console_output.console = MagicMock()

    def test_print_hostname_prints_table(self):
        pattern = parse_pattern("web.example.com@Z1")

        self.console_output.print_hostname(pattern, ResolvedHostname("web.example.com", "Z1"))

        table = self.console_output.console.print.call_args[0][0]
        assert isinstance(table, Table)
        assert table.row_count == 1

    def test_print_record_missing(self):
        self.console_output.print_record(None, "web.example.com")

        self.console_output.console.print.assert_called_once_with(
            "[yellow]No A record found for web.example.com.[/yellow]"
        )

    def test_print_record(self):
        record = DNSRecord(name="web.example.com", zone_id="Z1", addresses=frozenset({"10.0.1.10"}))

        self.console_output.print_record(record, "web.example.com")

        table = self.console_output.console.print.call_args[0][0]
        assert isinstance(table, Table)
        assert table.row_count == 1

    def test_print_outcomes_empty(self):
        self.console_output.print_outcomes([])

        self.console_output.console.print.assert_called_once_with(
            "[yellow]No lifecycle messages handled.[/yellow]"
        )

    def test_print_outcomes_reports_errors(self):
        outcomes = [
            {
                "instance_id": "i-1",
                "transition": "autoscaling:EC2_INSTANCE_LAUNCHING",
                "hostname": None,
                "addresses": [],
                "result": "ABANDON",
                "reported": True,
                "error": "no address",
            }
        ]

        self.console_output.print_outcomes(outcomes)

        printed = [call.args[0] for call in self.console_output.console.print.call_args_list]
        assert "[red]Error: i-1: no address[/red]" in printed
        assert any(isinstance(item, Table) and item.row_count == 1 for item in printed)
