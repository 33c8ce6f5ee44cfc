"""Notifier implementations."""

from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tfmerge.models import Workspace
from tfmerge.services.base import Notifier


class ConsoleNotifier(Notifier):
    """Prints the check-in comment and work items to a Rich console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def notify(self, workspace: Workspace, comment: str, work_item_ids: Sequence[int]) -> None:
        """Print the pending check-in details for workspace."""
        comment_text = escape(comment) if comment else "[dim](no comment)[/dim]"
        if work_item_ids:
            items_text = ", ".join(str(i) for i in work_item_ids)
        else:
            items_text = "[dim](none)[/dim]"

        body = (
            f"Workspace: {escape(workspace.spec)}\n"
            f"Comment: {comment_text}\n"
            f"Work items: {items_text}"
        )
        self.console.print(Panel(body, title="Ready to check in", border_style="green"))


class NullNotifier(Notifier):
    """No-op notifier for testing or scripted use."""

    def notify(self, workspace: Workspace, comment: str, work_item_ids: Sequence[int]) -> None:
        """Do nothing."""
