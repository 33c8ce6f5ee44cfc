"""Contracts for the collaborators driven by the merge workflow."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from tfmerge.models import Workspace


class VersionControlService(ABC):
    """Version-control primitives the merge workflow is built on.

    Every method is a coroutine; the workflow awaits each call before
    starting the next one.
    """

    @abstractmethod
    async def has_included_pending_changes(self, workspace: Workspace) -> bool:
        """Return True if the workspace has pending changes under source control.

        Changes excluded from source control must not count.
        """

    @abstractmethod
    async def get_latest_version(self, workspace: Workspace, *branch_names: str) -> None:
        """Update the local copies of branch_names to the latest version."""

    @abstractmethod
    async def resolve_conflicts(self, workspace: Workspace) -> None:
        """Attempt to resolve the conflicts present in the workspace."""

    @abstractmethod
    async def has_conflicts(self, workspace: Workspace) -> bool:
        """Return True if the workspace has unresolved conflicts."""

    @abstractmethod
    async def merge_branches(
        self,
        workspace: Workspace,
        source_branch: str,
        target_branch: str,
        min_changeset: int,
        max_changeset: int,
    ) -> None:
        """Merge the inclusive changeset range from source_branch into target_branch."""

    @abstractmethod
    async def get_work_item_ids(
        self, changeset_ids: Sequence[int], excluded_work_item_types: Sequence[str]
    ) -> List[int]:
        """Return ids of work items linked to changeset_ids, skipping excluded types."""


class Notifier(ABC):
    """Receives the outcome of a merge for attachment to the pending change."""

    @abstractmethod
    def notify(self, workspace: Workspace, comment: str, work_item_ids: Sequence[int]) -> None:
        """Hand over the check-in comment and the work items to associate.

        Args:
            workspace: Workspace holding the merged pending changes
            comment: Generated check-in comment
            work_item_ids: Work items to associate with the check-in
        """
