"""MergeOrchestrator for merging a changeset range between two branches.

This module provides the MergeOrchestrator class that runs the complete merge
workflow for one MergeRequest:

1. Pending changes guard (optional)
2. Get latest version of source, target or both, then conflict check
3. Merge of the changeset range
4. Work item lookup for the merged changesets
5. Check-in comment generation
6. Hand-over of comment and work items to the notifier

Each step runs once, in order, and a failure stops the remaining steps.

Example:
    from tfmerge.orchestration import MergeOrchestrator

    orchestrator = MergeOrchestrator(service, notifier, config)
    result = await orchestrator.execute(request, progress=print)
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple

from tfmerge.config import ConfigKey, ConfigProvider
from tfmerge.exceptions import MergeAborted
from tfmerge.models import BranchLatestSelection, MergeRequest, MergeResult, Workspace
from tfmerge.orchestration import messages
from tfmerge.orchestration.comment_synthesizer import CommentSynthesizer
from tfmerge.services import Notifier, VersionControlService

# Configure module logger
logger = logging.getLogger(__name__)

# Receives progress messages; None clears the current message
ProgressCallback = Callable[[Optional[str]], None]


class MergeOrchestrator:
    """Runs the merge workflow against a version-control service.

    The orchestrator keeps no per-request state, so one instance can serve
    consecutive requests. Progress is reported through the callback passed to
    execute() and only for the duration of that call.

    Attributes:
        service: Version-control primitives (pending changes, get latest,
            conflicts, merge, work items).
        notifier: Receives the comment and work items of a successful merge.
        config: Provider for the workflow toggles and comment template.
    """

    def __init__(
        self,
        service: VersionControlService,
        notifier: Notifier,
        config: ConfigProvider,
        comment_synthesizer: Optional[CommentSynthesizer] = None,
    ) -> None:
        self.service = service
        self.notifier = notifier
        self.config = config
        self._synthesizer = comment_synthesizer or CommentSynthesizer(config)

    async def execute(
        self, request: MergeRequest, progress: Optional[ProgressCallback] = None
    ) -> MergeResult:
        """Merge the request's changeset range and prepare the check-in.

        Args:
            request: Workspace, branches and ordered changeset ids to merge.
            progress: Optional callback receiving a message per workflow
                phase, and None once the workflow ends.

        Returns:
            MergeResult with the comment and work items handed to the notifier.

        Raises:
            MergeAborted: If the workspace has pending changes while the guard
                is enabled, or conflicts remain after getting latest.
            Exception: Errors from the service or notifier propagate unchanged.
        """
        with self._progress_scope(progress) as report:
            workspace = request.workspace
            logger.info(
                "Merging changesets %s from %s into %s in workspace %s",
                list(request.ordered_changeset_ids),
                request.source_branch,
                request.target_branch,
                workspace.spec,
            )

            await self._check_pending_changes(workspace, report)
            await self._get_latest_version(
                workspace, request.source_branch, request.target_branch, report
            )
            work_item_ids = await self._merge(request, report)

            latest_version = bool(
                self.config.get_value(ConfigKey.SHOW_LATEST_VERSION_IN_COMMENT)
            )
            comment = self._synthesizer.synthesize(
                request.source_branch,
                request.target_branch,
                work_item_ids,
                request.ordered_changeset_ids,
                latest_version,
            )

            self.notifier.notify(workspace, comment, work_item_ids)
            logger.info("Merge completed with %d work item(s)", len(work_item_ids))

            return MergeResult(comment=comment, work_item_ids=work_item_ids)

    async def _check_pending_changes(
        self, workspace: Workspace, report: Callable[[str], None]
    ) -> None:
        """Abort if the guard is enabled and the workspace has pending changes.

        Raises:
            MergeAborted: If pending changes are present.
        """
        if not self.config.get_value(ConfigKey.WARN_ON_PENDING_CHANGES):
            return

        report(messages.CHECKING_PENDING_CHANGES)
        if await self.service.has_included_pending_changes(workspace):
            logger.warning("Workspace %s has pending changes", workspace.spec)
            raise MergeAborted(messages.PENDING_CHANGES_PRESENT)

    async def _get_latest_version(
        self,
        workspace: Workspace,
        source_branch: str,
        target_branch: str,
        report: Callable[[str], None],
    ) -> None:
        """Get latest for the configured branch(es), then check for conflicts.

        Raises:
            MergeAborted: If conflicts remain afterwards.
        """
        selection = self.config.get_value(ConfigKey.LATEST_VERSION_FOR_BRANCH)
        branches = self._branches_for_selection(selection, source_branch, target_branch)
        if not branches:
            return

        noun = "branches" if len(branches) > 1 else "branch"
        report(
            messages.GETTING_LATEST_VERSION.format(
                description=f"{selection.description} {noun}",
                branches=", ".join(branches),
            )
        )
        await self.service.get_latest_version(workspace, *branches)

        if not self.config.get_value(ConfigKey.RESOLVE_CONFLICTS):
            if await self.service.has_conflicts(workspace):
                logger.warning("Conflicts after getting latest in %s", workspace.spec)
                raise MergeAborted(messages.CONFLICTS_MUST_BE_RESOLVED_MANUALLY)
            return

        await self.service.resolve_conflicts(workspace)
        if await self.service.has_conflicts(workspace):
            logger.warning("Conflicts left unresolved in %s", workspace.spec)
            raise MergeAborted(messages.CONFLICTS_NOT_RESOLVED)

    @staticmethod
    def _branches_for_selection(
        selection: BranchLatestSelection, source_branch: str, target_branch: str
    ) -> Tuple[str, ...]:
        """Map a branch selection to the branch names passed to get latest."""
        if selection is BranchLatestSelection.NONE:
            return ()
        elif selection is BranchLatestSelection.SOURCE:
            return (source_branch,)
        elif selection is BranchLatestSelection.TARGET:
            return (target_branch,)
        elif selection is BranchLatestSelection.SOURCE_AND_TARGET:
            # target first
            return (target_branch, source_branch)
        raise ValueError(f"Unsupported branch selection: {selection!r}")

    async def _merge(self, request: MergeRequest, report: Callable[[str], None]) -> List[int]:
        """Merge the changeset range and return the associated work item ids."""
        report(
            messages.MERGING_BRANCHES.format(
                source=request.source_branch, target=request.target_branch
            )
        )

        excluded_types = list(self.config.get_value(ConfigKey.WORK_ITEM_TYPES_TO_EXCLUDE))
        exclude_work_items = self.config.get_value(ConfigKey.EXCLUDE_WORK_ITEMS_FOR_MERGE)

        min_changeset = min(request.ordered_changeset_ids)
        max_changeset = max(request.ordered_changeset_ids)
        logger.debug("Merge range C%d~C%d", min_changeset, max_changeset)

        await self.service.merge_branches(
            request.workspace,
            request.source_branch,
            request.target_branch,
            min_changeset,
            max_changeset,
        )

        if exclude_work_items:
            return []

        work_item_ids = await self.service.get_work_item_ids(
            list(request.ordered_changeset_ids), excluded_types
        )
        return list(work_item_ids)

    @contextmanager
    def _progress_scope(
        self, progress: Optional[ProgressCallback]
    ) -> Iterator[Callable[[str], None]]:
        """Yield a reporter bound to progress and clear the message on exit.

        A failing callback is logged and ignored so it cannot stop the merge.
        """

        def send(message: Optional[str]) -> None:
            if progress is None:
                return
            try:
                progress(message)
            except Exception:
                logger.exception("Progress callback failed")

        def report(message: str) -> None:
            logger.debug(message)
            send(message)

        try:
            yield report
        finally:
            send(None)
