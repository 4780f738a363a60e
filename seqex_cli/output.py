"""Output formatting utilities for CLI"""

import json
from io import StringIO
from typing import Any, Dict, List

import yaml
from rich.console import Console
from rich.table import Table


class OutputFormatter:
    """Format CLI output in different formats"""

    def format(self, data: Any, format_type: str = "table") -> str:
        """
        Format data according to specified format type

        # Arguments
            data: Data to format (dict or list of dicts)
            format_type: Output format (json, yaml, table)

        # Returns
            Formatted string
        """
        if format_type == "json":
            return self._format_json(data)
        elif format_type == "yaml":
            return self._format_yaml(data)
        elif format_type == "table":
            return self._format_table(data)
        else:
            return str(data)

    def _format_json(self, data: Any) -> str:
        """Format as JSON"""
        return json.dumps(data, indent=2, default=str)

    def _format_yaml(self, data: Any) -> str:
        """Format as YAML"""
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)

    def _format_table(self, data: Any) -> str:
        """Format as table"""
        if not data:
            return "No data to display"

        # Convert single dict to list
        if isinstance(data, dict):
            data = [data]

        if not isinstance(data, list):
            return str(data)

        return self._format_rich_table(data)

    def _format_rich_table(self, data: List[Dict]) -> str:
        """Format table using rich library"""
        # Union of keys, in order of first appearance
        headers = []
        for item in data:
            for key in item:
                if key not in headers:
                    headers.append(key)

        table = Table(show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(str(header).replace("_", " ").title())

        for item in data:
            row = []
            for header in headers:
                value = item.get(header, "")
                if value is None:
                    value = ""
                elif isinstance(value, bool):
                    value = "✓" if value else "✗"
                elif isinstance(value, (list, dict)):
                    value = json.dumps(value, default=str)
                row.append(str(value))
            table.add_row(*row)

        # Capture table output as string
        string_io = StringIO()
        console = Console(file=string_io, width=200)
        console.print(table)
        return string_io.getvalue()


def print_success(message: str, err: bool = False):
    """Print success message in green, to stderr with `err`"""
    Console(stderr=err).print(f"✓ {message}", style="bold green", markup=False, soft_wrap=True)


def print_error(message: str):
    """Print error message in red"""
    Console().print(f"✗ {message}", style="bold red", markup=False, soft_wrap=True)


def print_warning(message: str, err: bool = False):
    """Print warning message in yellow, to stderr with `err`"""
    Console(stderr=err).print(f"⚠ {message}", style="bold yellow", markup=False, soft_wrap=True)
