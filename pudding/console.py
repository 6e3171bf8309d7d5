#!/usr/bin/env python3

from rich.console import Console as RichConsole
from rich.markup import escape


class Console:
    """Console wrapper for the status trace and warnings.

    Trace output goes to stdout, log records to the stderr console.
    """

    def __init__(self):
        self._rich = RichConsole(highlight=False, soft_wrap=True)
        self._rich_err = RichConsole(stderr=True, highlight=False, soft_wrap=True)

    def print(self, *args, **kwargs):
        """Print using Rich console."""
        return self._rich.print(*args, **kwargs)

    def warn(self, message: str):
        return self._rich.print(f"[yellow]Warning: {escape(message)}[/yellow]")

    @property
    def stderr(self) -> RichConsole:
        return self._rich_err
