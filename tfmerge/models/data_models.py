"""
Core data models for tfmerge.

This module contains the following dataclasses:
- Workspace: Identifies a local working copy (owner and workspace name)
- MergeRequest: One request to merge a changeset range between two branches
- MergeResult: Comment and work items produced by a successful merge
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class Workspace:
    """Identifies a local working copy bound to server paths."""
    owner_name: str                   # Owner of the workspace
    name: str                         # Workspace name

    @property
    def spec(self) -> str:
        """Workspace spec in the `name;owner` form the tf client expects."""
        return f"{self.name};{self.owner_name}"

    def __str__(self) -> str:
        return self.spec


@dataclass(frozen=True)
class MergeRequest:
    """Request to merge a contiguous range of changesets from source to target.

    The first and last changeset ids bound the merged range. Use
    from_changesets() when the ids are not sorted yet.
    """
    workspace: Workspace
    source_branch: str
    target_branch: str
    ordered_changeset_ids: Tuple[int, ...]

    def __post_init__(self) -> None:
        ids = tuple(self.ordered_changeset_ids)
        if not ids:
            raise ValueError("At least one changeset id is required")
        for changeset_id in ids:
            if isinstance(changeset_id, bool) or not isinstance(changeset_id, int):
                raise ValueError(f"Changeset ids must be integers, got {changeset_id!r}")
        if not self.source_branch or not self.source_branch.strip():
            raise ValueError("Source branch must not be empty")
        if not self.target_branch or not self.target_branch.strip():
            raise ValueError("Target branch must not be empty")
        # frozen dataclass: normalise lists to a tuple
        object.__setattr__(self, "ordered_changeset_ids", ids)

    @classmethod
    def from_changesets(
        cls,
        workspace: Workspace,
        source_branch: str,
        target_branch: str,
        changeset_ids: Iterable[int],
    ) -> "MergeRequest":
        """Build a request from changeset ids in any order."""
        return cls(
            workspace=workspace,
            source_branch=source_branch,
            target_branch=target_branch,
            ordered_changeset_ids=tuple(sorted(changeset_ids)),
        )


@dataclass
class MergeResult:
    """Outcome of a successful merge, as handed to the notifier."""
    comment: str                                           # Generated check-in comment
    work_item_ids: List[int] = field(default_factory=list)  # Work items to associate
