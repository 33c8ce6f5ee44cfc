"""
tfmerge - CLI Interface.

A command-line interface for merging a range of changesets from one branch to
another and preparing the check-in comment and work items.

Usage Examples:
    # Merge changesets 120-123 from Main into Release
    tfmerge merge $/Project/Main $/Project/Release 120 121 122 123 --owner jdoe --workspace DEV

    # Get latest on both branches first and auto-resolve conflicts
    tfmerge merge $/Project/Main $/Project/Release 120 --owner jdoe --workspace DEV \\
        --latest source_and_target --resolve-conflicts

    # Preview the comment a merge would get
    tfmerge comment $/Project/Main $/Project/Release --changeset 120 --work-item 42 \\
        --mode merge_direction_and_work_items --template "Merge {0} --> {1} ({2})"
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from tfmerge.config import ConfigKey, ConfigManager
from tfmerge.exceptions import MergeAborted, TfCommandError
from tfmerge.models import (
    BranchLatestSelection,
    CheckInCommentMode,
    MergeRequest,
    MergeResult,
    Workspace,
)
from tfmerge.orchestration import CommentSynthesizer, MergeLogger, MergeOrchestrator
from tfmerge.orchestration.comment_synthesizer import join_ids
from tfmerge.orchestration.merge_orchestrator import ProgressCallback
from tfmerge.services import ConsoleNotifier, TfCommandLineService

__version__ = "1.0.0"

# Initialize Typer app
app = typer.Typer(
    name="tfmerge",
    help="Merge changeset ranges between branches and prepare the check-in.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"tfmerge v{__version__}")
        raise typer.Exit()


def validate_branch_selection(value: str) -> str:
    """Validate the --latest option against BranchLatestSelection values.

    Raises:
        typer.BadParameter: If value is not a known selection.
    """
    try:
        BranchLatestSelection(value.lower())
    except ValueError:
        choices = ", ".join(s.value for s in BranchLatestSelection)
        raise typer.BadParameter(f"Must be one of: {choices}")
    return value.lower()


def validate_comment_mode(value: str) -> str:
    """Validate the --comment-mode option against CheckInCommentMode values.

    Raises:
        typer.BadParameter: If value is not a known mode.
    """
    try:
        CheckInCommentMode(value.lower())
    except ValueError:
        choices = ", ".join(m.value for m in CheckInCommentMode)
        raise typer.BadParameter(f"Must be one of: {choices}")
    return value.lower()


def validate_changesets(values: List[int]) -> List[int]:
    """Reject non-positive changeset ids."""
    for value in values:
        if value <= 0:
            raise typer.BadParameter(f"Changeset ids must be positive, got {value}")
    return values


def validate_local_path(value: Optional[Path]) -> Optional[Path]:
    """Validate that the --local-path folder exists and is a directory.

    Raises:
        typer.BadParameter: If the path is missing or not a directory.
    """
    if value is None:
        return value

    # Check if path exists
    if not value.exists():
        raise typer.BadParameter(f"Local path does not exist: {value}")

    # Check if path is a directory
    if not value.is_dir():
        raise typer.BadParameter(f"Local path is not a directory: {value}")

    return value


def gaps_in_range(changeset_ids: List[int]) -> List[int]:
    """Return the ids between the lowest and highest changeset that were not listed.

    The merge always covers the whole range, so these are merged too.
    """
    listed = set(changeset_ids)
    return [i for i in range(min(listed), max(listed) + 1) if i not in listed]


def configure_logging(verbose: bool) -> None:
    """Route log records to the console; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _progress_sink(status, merge_log: Optional[MergeLogger]) -> ProgressCallback:
    """Build a progress callback feeding the status spinner and the log file."""

    def sink(message: Optional[str]) -> None:
        if message is not None:
            status.update(f"[bold blue]{escape(message)}[/bold blue]")
        if merge_log is not None:
            merge_log.log_progress(message)

    return sink


async def _run_merge(
    orchestrator: MergeOrchestrator,
    request: MergeRequest,
    merge_log: Optional[MergeLogger],
) -> MergeResult:
    with console.status("Starting merge...") as status:
        return await orchestrator.execute(request, progress=_progress_sink(status, merge_log))


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """tfmerge - Merge changeset ranges between branches."""
    pass


@app.command()
def merge(
    source_branch: str = typer.Argument(..., help="Server path of the branch to merge from."),
    target_branch: str = typer.Argument(..., help="Server path of the branch to merge into."),
    changesets: List[int] = typer.Argument(
        ...,
        help=(
            "Changeset ids to merge. The lowest and highest bound the range, so "
            "changesets in between are merged even when not listed."
        ),
        callback=validate_changesets,
    ),
    owner: str = typer.Option(..., "--owner", "-o", help="Owner of the workspace."),
    workspace_name: str = typer.Option(..., "--workspace", "-w", help="Workspace name."),
    local_path: Optional[Path] = typer.Option(
        None,
        "--local-path",
        help="Local folder mapped by the workspace (defaults to the current directory).",
        callback=validate_local_path,
    ),
    tf_path: str = typer.Option("tf", "--tf-path", help="Path to the tf command-line client."),
    collection_url: Optional[str] = typer.Option(
        None, "--collection", help="Project collection URL used for work item lookup."
    ),
    latest: str = typer.Option(
        BranchLatestSelection.NONE.value,
        "--latest",
        "-l",
        help="Get latest before merging: none, source, target or source_and_target.",
        callback=validate_branch_selection,
    ),
    resolve_conflicts: bool = typer.Option(
        False,
        "--resolve-conflicts/--no-resolve-conflicts",
        help="Try to resolve conflicts caused by getting latest.",
    ),
    warn_pending: bool = typer.Option(
        True,
        "--warn-pending/--no-warn-pending",
        help="Refuse to merge into a workspace with pending changes.",
    ),
    comment_mode: str = typer.Option(
        CheckInCommentMode.MERGE_DIRECTION.value,
        "--comment-mode",
        "-m",
        help="Which facts the comment template is filled with.",
        callback=validate_comment_mode,
    ),
    comment_template: Optional[str] = typer.Option(
        None,
        "--comment-template",
        "-t",
        help="Comment template with {0}, {1}, {2} placeholders.",
    ),
    show_latest_version: bool = typer.Option(
        False,
        "--show-latest-version",
        help="Write 'latest version' instead of the work item ids in the comment.",
    ),
    exclude_work_items: bool = typer.Option(
        False,
        "--exclude-work-items",
        help="Do not associate work items with the merge.",
    ),
    exclude_types: Optional[List[str]] = typer.Option(
        None,
        "--exclude-type",
        "-x",
        help="Work item type to leave out (repeatable).",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Path for log file output.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Merge a changeset range from SOURCE_BRANCH into TARGET_BRANCH.

    Runs the merge workflow:
    1. Pending changes check
    2. Get latest version and conflict check
    3. Merge of the changeset range
    4. Work item lookup
    5. Check-in comment generation

    The merge covers every changeset from the lowest to the highest id given.
    Ids left out of that range are merged anyway, but they are not named in
    the check-in comment or searched for work items.
    """
    configure_logging(verbose)

    try:
        config = ConfigManager(
            {
                ConfigKey.WARN_ON_PENDING_CHANGES: warn_pending,
                ConfigKey.LATEST_VERSION_FOR_BRANCH: latest,
                ConfigKey.RESOLVE_CONFLICTS: resolve_conflicts,
                ConfigKey.SHOW_LATEST_VERSION_IN_COMMENT: show_latest_version,
                ConfigKey.CHECK_IN_COMMENT_MODE: comment_mode,
                ConfigKey.EXCLUDE_WORK_ITEMS_FOR_MERGE: exclude_work_items,
            }
        )
        if comment_template is not None:
            config.add_value(ConfigKey.COMMENT_TEMPLATE, comment_template)
        if exclude_types:
            config.add_value(ConfigKey.WORK_ITEM_TYPES_TO_EXCLUDE, exclude_types)

        request = MergeRequest.from_changesets(
            workspace=Workspace(owner_name=owner, name=workspace_name),
            source_branch=source_branch,
            target_branch=target_branch,
            changeset_ids=changesets,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    skipped = gaps_in_range(list(request.ordered_changeset_ids))
    if skipped:
        console.print(
            f"[yellow]Warning:[/yellow] Changesets {join_ids(skipped)} are not listed "
            f"but lie inside C{min(request.ordered_changeset_ids)}"
            f"~C{max(request.ordered_changeset_ids)} and will be merged too."
        )

    # Create logger if log file specified
    merge_log: Optional[MergeLogger] = None
    if log_file:
        try:
            merge_log = MergeLogger(log_file)
            merge_log.open()
        except OSError as e:
            console.print(f"[red]Error:[/red] Failed to create log file: {escape(str(e))}")
            raise typer.Exit(1)
        merge_log.log_header()
        merge_log.log_request(request)

    orchestrator = MergeOrchestrator(
        service=TfCommandLineService(
            tf_path=tf_path, local_path=local_path, collection_url=collection_url
        ),
        notifier=ConsoleNotifier(console=console),
        config=config,
    )

    try:
        result = asyncio.run(_run_merge(orchestrator, request, merge_log))

        if merge_log is not None:
            merge_log.log_result(result)
            console.print(f"\n[dim]Log written to: {merge_log.get_log_path()}[/dim]")

    except MergeAborted as e:
        if merge_log is not None:
            merge_log.log_aborted(e.reason)
        console.print(f"[red]Merge aborted:[/red] {escape(e.reason)}")
        raise typer.Exit(1)

    except TfCommandError as e:
        if merge_log is not None:
            merge_log.log_aborted(str(e))
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Merge interrupted by user.[/yellow]")
        raise typer.Exit(130)

    finally:
        if merge_log is not None:
            merge_log.close()


@app.command()
def comment(
    source_branch: str = typer.Argument(..., help="Branch merged from."),
    target_branch: str = typer.Argument(..., help="Branch merged into."),
    changesets: Optional[List[int]] = typer.Option(
        None, "--changeset", "-c", help="Merged changeset id (repeatable)."
    ),
    work_items: Optional[List[int]] = typer.Option(
        None, "--work-item", "-i", help="Associated work item id (repeatable)."
    ),
    comment_mode: str = typer.Option(
        CheckInCommentMode.MERGE_DIRECTION.value,
        "--mode",
        "-m",
        help="Which facts the comment template is filled with.",
        callback=validate_comment_mode,
    ),
    comment_template: Optional[str] = typer.Option(
        None,
        "--template",
        "-t",
        help="Comment template with {0}, {1}, {2} placeholders.",
    ),
    show_latest_version: bool = typer.Option(
        False,
        "--show-latest-version",
        help="Write 'latest version' instead of the work item ids.",
    ),
) -> None:
    """Preview the check-in comment for a merge without touching the workspace."""
    config = ConfigManager({ConfigKey.CHECK_IN_COMMENT_MODE: comment_mode})
    if comment_template is not None:
        config.add_value(ConfigKey.COMMENT_TEMPLATE, comment_template)

    text = CommentSynthesizer(config).synthesize(
        source_branch,
        target_branch,
        work_items or [],
        sorted(changesets or []),
        show_latest_version,
    )

    if text:
        console.print(escape(text))
    else:
        console.print("[dim](no comment)[/dim]")
    if work_items:
        console.print(f"[dim]Work items: {join_ids(work_items)}[/dim]")


if __name__ == "__main__":
    app()
