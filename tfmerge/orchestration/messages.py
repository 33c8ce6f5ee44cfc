"""User-facing text emitted by the merge workflow."""

CHECKING_PENDING_CHANGES = "Checking pending changes"
GETTING_LATEST_VERSION = "Getting latest version of {description} ({branches})"
MERGING_BRANCHES = "Merging branches: {source} into {target}"

PENDING_CHANGES_PRESENT = (
    "The workspace has pending changes. Check in or shelve them before merging."
)
CONFLICTS_MUST_BE_RESOLVED_MANUALLY = (
    "Getting the latest version caused conflicts. They must be resolved manually."
)
CONFLICTS_NOT_RESOLVED = (
    "Not all conflicts were resolved. Resolve the remaining conflicts and merge again."
)

# Replaces the work item id list in comments when the latest version is shown
LATEST_VERSION = "latest version"
