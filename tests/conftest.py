"""Pytest fixtures for tfmerge tests."""

import tempfile
from pathlib import Path
from typing import Generator, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from tfmerge.config import ConfigKey, ConfigManager
from tfmerge.models import MergeRequest, Workspace
from tfmerge.orchestration import MergeOrchestrator
from tfmerge.services import Notifier, VersionControlService

SOURCE_BRANCH = "$/Project/Main"
TARGET_BRANCH = "$/Project/Release"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without I/O")


class ProgressRecorder:
    """Progress callback that records every message it receives."""

    def __init__(self) -> None:
        self.messages: List[Optional[str]] = []

    def __call__(self, message: Optional[str]) -> None:
        self.messages.append(message)

    @property
    def reported(self) -> List[str]:
        """Messages other than the final clear."""
        return [m for m in self.messages if m is not None]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def workspace() -> Workspace:
    return Workspace(owner_name="MyOwnerName", name="WorkspaceName")


@pytest.fixture
def merge_request(workspace: Workspace) -> MergeRequest:
    """Request merging changesets 2, 5, 7 and 8 from Main into Release."""
    return MergeRequest(
        workspace=workspace,
        source_branch=SOURCE_BRANCH,
        target_branch=TARGET_BRANCH,
        ordered_changeset_ids=(2, 5, 7, 8),
    )


@pytest.fixture
def config() -> ConfigManager:
    """Configuration that skips every optional step.

    Tests switch individual steps on with add_value().
    """
    return ConfigManager(
        {
            ConfigKey.WARN_ON_PENDING_CHANGES: False,
            ConfigKey.LATEST_VERSION_FOR_BRANCH: "none",
            ConfigKey.RESOLVE_CONFLICTS: False,
            ConfigKey.SHOW_LATEST_VERSION_IN_COMMENT: False,
            ConfigKey.CHECK_IN_COMMENT_MODE: "none",
            ConfigKey.COMMENT_TEMPLATE: "",
            ConfigKey.EXCLUDE_WORK_ITEMS_FOR_MERGE: False,
            ConfigKey.WORK_ITEM_TYPES_TO_EXCLUDE: ["Code Review Request"],
        }
    )


@pytest.fixture
def vcs_service() -> AsyncMock:
    """VersionControlService mock with a clean workspace and no conflicts."""
    service = AsyncMock(spec=VersionControlService)
    service.has_included_pending_changes.return_value = False
    service.has_conflicts.return_value = False
    service.get_work_item_ids.return_value = [5, 75, 85]
    return service


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock(spec=Notifier)


@pytest.fixture
def progress() -> ProgressRecorder:
    return ProgressRecorder()


@pytest.fixture
def orchestrator(
    vcs_service: AsyncMock, notifier: MagicMock, config: ConfigManager
) -> MergeOrchestrator:
    return MergeOrchestrator(service=vcs_service, notifier=notifier, config=config)
