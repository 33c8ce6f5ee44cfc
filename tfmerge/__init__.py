"""tfmerge - Changeset range merging for centralized version control.

Merges a range of changesets from a source branch into a target branch,
optionally guarding against pending changes and getting latest first, and
prepares the check-in comment and the work items to associate.
"""

__version__ = "1.0.0"

from .exceptions import MergeAborted, TfCommandError
from .models import (
    BranchLatestSelection,
    CheckInCommentMode,
    MergeRequest,
    MergeResult,
    Workspace,
)

__all__ = [
    "__version__",
    "MergeAborted",
    "TfCommandError",
    "BranchLatestSelection",
    "CheckInCommentMode",
    "MergeRequest",
    "MergeResult",
    "Workspace",
]


def main() -> None:
    """Entry point for the tfmerge CLI application.

    This function is called when the `tfmerge` command is invoked after
    package installation via pip. It imports and runs the Typer app
    from the tfmerge.cli module.
    """
    from tfmerge.cli import app
    app()
