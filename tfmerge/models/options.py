"""
Option enums that drive the merge workflow.

- BranchLatestSelection: which branch(es) get the latest version before merging
- CheckInCommentMode: which facts the check-in comment template is filled with
"""

from enum import Enum


class BranchLatestSelection(Enum):
    """Branch(es) to refresh to the latest version before merging."""
    NONE = "none"
    SOURCE = "source"
    TARGET = "target"
    SOURCE_AND_TARGET = "source_and_target"

    @property
    def description(self) -> str:
        """Human readable name used in progress messages."""
        return self.value.replace("_", " ")


class CheckInCommentMode(Enum):
    """Selects the placeholders the comment template is expected to contain."""
    NONE = "none"                                                # No comment
    FIXED = "fixed"                                              # Template verbatim
    MERGE_DIRECTION = "merge_direction"                          # {0}=source, {1}=target
    WORK_ITEM_IDS = "work_item_ids"                              # {0}=work item ids
    CHANGESET_IDS = "changeset_ids"                              # {0}=changeset ids
    MERGE_DIRECTION_AND_WORK_ITEMS = "merge_direction_and_work_items"          # {2}=work item ids
    MERGE_DIRECTION_AND_CHANGESET_IDS = "merge_direction_and_changeset_ids"    # {2}=changeset ids

    @property
    def description(self) -> str:
        return self.value.replace("_", " ")
