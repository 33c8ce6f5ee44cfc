"""CommentSynthesizer for building check-in comments from a template.

The comment mode and template are read from configuration on every call. The
template uses positional placeholders:

    mode                                {0}              {1}      {2}
    fixed                               -                -        -
    merge_direction                     source           target   -
    work_item_ids                       work item ids    -        -
    changeset_ids                       changeset ids    -        -
    merge_direction_and_work_items      source           target   work item ids
    merge_direction_and_changeset_ids   source           target   changeset ids

Id lists are rendered as "1, 2, 3". When latest_version is set, work item
lists are replaced by the "latest version" phrase.
"""

import logging
from typing import Sequence

from tfmerge.config import ConfigKey, ConfigProvider
from tfmerge.models import CheckInCommentMode
from tfmerge.orchestration import messages

# Configure module logger
logger = logging.getLogger(__name__)


def join_ids(ids: Sequence[int]) -> str:
    """Render ids as base-10 integers separated by ", ", keeping their order."""
    return ", ".join(str(int(i)) for i in ids)


class CommentSynthesizer:
    """Builds the check-in comment for a merge.

    Args:
        config: Provider for the comment mode and template.
    """

    def __init__(self, config: ConfigProvider) -> None:
        self._config = config

    def synthesize(
        self,
        source_branch: str,
        target_branch: str,
        work_item_ids: Sequence[int],
        changeset_ids: Sequence[int],
        latest_version: bool,
    ) -> str:
        """Return the check-in comment for the given merge facts.

        Args:
            source_branch: Branch merged from.
            target_branch: Branch merged into.
            work_item_ids: Work items associated with the merge.
            changeset_ids: All merged changeset ids.
            latest_version: Show the "latest version" phrase instead of the
                work item ids.

        Returns:
            The comment. Empty when the mode is none.
        """
        mode = self._config.get_value(ConfigKey.CHECK_IN_COMMENT_MODE)
        template = self._config.get_value(ConfigKey.COMMENT_TEMPLATE)

        if latest_version:
            work_items = messages.LATEST_VERSION
        else:
            work_items = join_ids(work_item_ids)
        changesets = join_ids(changeset_ids)

        if mode is CheckInCommentMode.NONE:
            return ""
        elif mode is CheckInCommentMode.FIXED:
            return template
        elif mode is CheckInCommentMode.MERGE_DIRECTION:
            args = (source_branch, target_branch)
        elif mode is CheckInCommentMode.WORK_ITEM_IDS:
            args = (work_items,)
        elif mode is CheckInCommentMode.CHANGESET_IDS:
            args = (changesets,)
        elif mode is CheckInCommentMode.MERGE_DIRECTION_AND_WORK_ITEMS:
            args = (source_branch, target_branch, work_items)
        elif mode is CheckInCommentMode.MERGE_DIRECTION_AND_CHANGESET_IDS:
            args = (source_branch, target_branch, changesets)
        else:
            raise ValueError(f"Unsupported check-in comment mode: {mode!r}")

        try:
            return template.format(*args)
        except (IndexError, KeyError, ValueError) as e:
            logger.warning(
                "Comment template %r does not fit mode %s (%s); using it verbatim",
                template,
                mode.value,
                e,
            )
            return template
