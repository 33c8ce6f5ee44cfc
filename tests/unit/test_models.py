"""
Unit tests for data models and option enums.

Tests cover:
- Workspace value semantics and tf spec
- MergeRequest validation and normalisation
- MergeResult defaults
- BranchLatestSelection / CheckInCommentMode values and descriptions
"""

import dataclasses

import pytest

from tfmerge.models import (
    BranchLatestSelection,
    CheckInCommentMode,
    MergeRequest,
    MergeResult,
    Workspace,
)


@pytest.mark.unit
class TestWorkspace:
    """Tests for Workspace dataclass."""

    def test_equality_by_value(self):
        assert Workspace("owner", "ws") == Workspace(owner_name="owner", name="ws")
        assert Workspace("owner", "ws") != Workspace("owner", "other")

    def test_hashable(self):
        assert len({Workspace("owner", "ws"), Workspace("owner", "ws")}) == 1

    def test_immutable(self):
        workspace = Workspace("owner", "ws")
        with pytest.raises(dataclasses.FrozenInstanceError):
            workspace.name = "changed"

    def test_spec(self):
        workspace = Workspace(owner_name="DOMAIN\\jdoe", name="DEV")
        assert workspace.spec == "DEV;DOMAIN\\jdoe"
        assert str(workspace) == "DEV;DOMAIN\\jdoe"


@pytest.mark.unit
class TestMergeRequest:
    """Tests for MergeRequest dataclass."""

    def test_list_is_stored_as_tuple(self):
        request = MergeRequest(Workspace("o", "w"), "$/A", "$/B", [1, 2, 3])
        assert request.ordered_changeset_ids == (1, 2, 3)

    def test_empty_changesets_rejected(self):
        with pytest.raises(ValueError, match="At least one changeset"):
            MergeRequest(Workspace("o", "w"), "$/A", "$/B", ())

    @pytest.mark.parametrize("bad_id", ["12", 1.5, True, None])
    def test_non_integer_changesets_rejected(self, bad_id):
        with pytest.raises(ValueError, match="must be integers"):
            MergeRequest(Workspace("o", "w"), "$/A", "$/B", (1, bad_id))

    @pytest.mark.parametrize("source, target", [("", "$/B"), ("$/A", "  ")])
    def test_blank_branches_rejected(self, source, target):
        with pytest.raises(ValueError, match="branch must not be empty"):
            MergeRequest(Workspace("o", "w"), source, target, (1,))

    def test_from_changesets_sorts_ids(self):
        request = MergeRequest.from_changesets(Workspace("o", "w"), "$/A", "$/B", [8, 2, 7, 5])
        assert request.ordered_changeset_ids == (2, 5, 7, 8)

    def test_immutable(self):
        request = MergeRequest(Workspace("o", "w"), "$/A", "$/B", (1,))
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.source_branch = "$/C"


@pytest.mark.unit
class TestMergeResult:
    """Tests for MergeResult dataclass."""

    def test_default_work_items_not_shared(self):
        first = MergeResult(comment="a")
        second = MergeResult(comment="b")
        first.work_item_ids.append(1)
        assert second.work_item_ids == []


@pytest.mark.unit
class TestOptionEnums:
    """Tests for BranchLatestSelection and CheckInCommentMode."""

    def test_branch_selection_values(self):
        assert [s.value for s in BranchLatestSelection] == [
            "none",
            "source",
            "target",
            "source_and_target",
        ]

    def test_branch_selection_description(self):
        assert BranchLatestSelection.SOURCE.description == "source"
        assert BranchLatestSelection.SOURCE_AND_TARGET.description == "source and target"

    def test_comment_mode_count(self):
        assert len(CheckInCommentMode) == 7

    def test_comment_mode_lookup_by_value(self):
        assert (
            CheckInCommentMode("merge_direction_and_work_items")
            is CheckInCommentMode.MERGE_DIRECTION_AND_WORK_ITEMS
        )
