"""
Version-control service backed by the tf command-line client.

This module contains the TfCommandLineService class, which implements
VersionControlService by running `tf` commands in the local folder mapped by
the workspace. Command output is parsed for the few facts the merge workflow
needs (pending changes, conflicts, linked work items).
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from tfmerge.exceptions import TfCommandError
from tfmerge.models import Workspace
from tfmerge.services.base import VersionControlService

# Configure module logger
logger = logging.getLogger(__name__)

# tf exit codes: 0 success, 1 partial success, anything else is a failure
ACCEPTED_RETURN_CODES = (0, 1)

_NO_PENDING_CHANGES = re.compile(r"there are no pending changes", re.IGNORECASE)
_NO_CONFLICTS = re.compile(r"there are no conflicts", re.IGNORECASE)
_WORK_ITEMS_HEADER = re.compile(r"^\s*work items\s*:\s*$", re.IGNORECASE)


def parse_work_items(output: str) -> List[Tuple[int, str]]:
    """Extract (id, type) pairs from the "Work Items:" table of `tf changeset`.

    The table columns are located using the dashed underline below the
    header, so multi-word types such as "Code Review Request" survive.

    Args:
        output: Full output of `tf changeset <id> /noprompt`.

    Returns:
        List of (work item id, work item type) in table order. Empty when the
        changeset has no linked work items.
    """
    lines = output.splitlines()
    start = next((i for i, line in enumerate(lines) if _WORK_ITEMS_HEADER.match(line)), None)
    if start is None:
        return []

    # Header row followed by the dashed underline
    header_index = None
    for i in range(start + 1, len(lines) - 1):
        if lines[i].strip() and set(lines[i + 1].strip()) <= {"-", " "} and "-" in lines[i + 1]:
            header_index = i
            break
        if lines[i].strip():
            return []
    if header_index is None:
        return []

    spans = [m.span() for m in re.finditer(r"-+", lines[header_index + 1])]
    # Last column runs to the end of the line
    spans[-1] = (spans[-1][0], None)
    headers = [lines[header_index][start_:end_].strip().lower() for start_, end_ in spans]
    if "id" not in headers or "type" not in headers:
        return []
    id_col = headers.index("id")
    type_col = headers.index("type")

    items: List[Tuple[int, str]] = []
    for line in lines[header_index + 2:]:
        if not line.strip():
            break
        cells = [line[start_:end_].strip() if start_ < len(line) else "" for start_, end_ in spans]
        if not cells[id_col].isdigit():
            break
        items.append((int(cells[id_col]), cells[type_col]))
    return items


class TfCommandLineService(VersionControlService):
    """VersionControlService implementation that shells out to `tf`.

    Attributes:
        tf_path: Executable name or path of the tf client.
        local_path: Local folder mapped by the workspace; commands run there.
        collection_url: Optional project collection URL for server queries.

    Example:
        service = TfCommandLineService(local_path=Path("C:/src/project"))
        await service.merge_branches(workspace, "$/P/Main", "$/P/Release", 10, 12)
    """

    def __init__(
        self,
        tf_path: str = "tf",
        local_path: Optional[Path] = None,
        collection_url: Optional[str] = None,
    ) -> None:
        self.tf_path = tf_path
        self.local_path = local_path
        self.collection_url = collection_url

    async def _run(self, *args: str) -> Tuple[int, str]:
        """Run tf with args and return (exit code, combined output).

        Raises:
            TfCommandError: If tf cannot be started or exits with a failure code.
        """
        command = [self.tf_path, *args]
        logger.debug("Running %s", " ".join(command))
        if self.local_path is not None and not Path(self.local_path).is_dir():
            raise TfCommandError(
                command, -1, f"Working folder is not a directory: {self.local_path}"
            )
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(self.local_path) if self.local_path else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise TfCommandError(
                command, -1, f"tf executable not found: {self.tf_path}"
            ) from e
        except NotADirectoryError as e:
            # cwd removed or replaced between the check and the spawn
            raise TfCommandError(
                command, -1, f"Working folder is not a directory: {self.local_path}"
            ) from e

        stdout, _ = await process.communicate()
        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        returncode = process.returncode if process.returncode is not None else -1

        if returncode not in ACCEPTED_RETURN_CODES:
            raise TfCommandError(command, returncode, output)
        return returncode, output

    async def has_included_pending_changes(self, workspace: Workspace) -> bool:
        # tf status only reports changes included in the workspace
        _, output = await self._run(
            "status", f"/workspace:{workspace.spec}", "/format:brief", "/noprompt"
        )
        return _NO_PENDING_CHANGES.search(output) is None

    async def get_latest_version(self, workspace: Workspace, *branch_names: str) -> None:
        if not branch_names:
            return
        await self._run("get", *branch_names, "/recursive", "/noprompt")

    async def resolve_conflicts(self, workspace: Workspace) -> None:
        await self._run("resolve", "/auto:AutoMerge", "/recursive", "/noprompt")

    async def has_conflicts(self, workspace: Workspace) -> bool:
        _, output = await self._run("resolve", "/preview", "/recursive", "/noprompt")
        return _NO_CONFLICTS.search(output) is None

    async def merge_branches(
        self,
        workspace: Workspace,
        source_branch: str,
        target_branch: str,
        min_changeset: int,
        max_changeset: int,
    ) -> None:
        await self._run(
            "merge",
            "/recursive",
            "/noprompt",
            f"/version:C{min_changeset}~C{max_changeset}",
            source_branch,
            target_branch,
        )

    async def get_work_item_ids(
        self, changeset_ids: Sequence[int], excluded_work_item_types: Sequence[str]
    ) -> List[int]:
        excluded = {t.strip().lower() for t in excluded_work_item_types}
        found: Dict[int, None] = {}

        for changeset_id in changeset_ids:
            args = ["changeset", str(changeset_id), "/noprompt"]
            if self.collection_url:
                args.append(f"/collection:{self.collection_url}")
            _, output = await self._run(*args)

            for work_item_id, work_item_type in parse_work_items(output):
                if work_item_type.lower() in excluded:
                    logger.debug(
                        "Skipping work item %d of excluded type %s", work_item_id, work_item_type
                    )
                    continue
                found.setdefault(work_item_id, None)

        return list(found)
