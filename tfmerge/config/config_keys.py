"""Configuration keys consulted by the merge workflow."""

from enum import Enum


class ConfigKey(Enum):
    """Keys understood by ConfigProvider.get_value()."""
    WARN_ON_PENDING_CHANGES = "warn-on-pending-changes"
    LATEST_VERSION_FOR_BRANCH = "latest-version-for-branch"
    RESOLVE_CONFLICTS = "resolve-conflicts"
    SHOW_LATEST_VERSION_IN_COMMENT = "show-latest-version-in-comment"
    CHECK_IN_COMMENT_MODE = "check-in-comment-mode"
    COMMENT_TEMPLATE = "comment-template"
    EXCLUDE_WORK_ITEMS_FOR_MERGE = "exclude-work-items-for-merge"
    WORK_ITEM_TYPES_TO_EXCLUDE = "work-item-types-to-exclude"
