"""
Models package for tfmerge.

This package provides convenient imports for all data models:
- Workspace: Local working copy identity
- MergeRequest: Changeset range merge request
- MergeResult: Comment and work items of a completed merge
- BranchLatestSelection: Enum for the get-latest step
- CheckInCommentMode: Enum for check-in comment generation
"""

from .options import BranchLatestSelection, CheckInCommentMode
from .data_models import (
    Workspace,
    MergeRequest,
    MergeResult,
)

__all__ = [
    "BranchLatestSelection",
    "CheckInCommentMode",
    "Workspace",
    "MergeRequest",
    "MergeResult",
]
