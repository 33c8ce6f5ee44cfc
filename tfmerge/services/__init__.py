"""Collaborator services for tfmerge.

This package contains the contracts the merge workflow drives and their
implementations:

- VersionControlService: Pending changes, get latest, conflicts, merge and
  work item lookup.
- TfCommandLineService: VersionControlService on top of the tf client.
- Notifier: Receives the generated comment and work items.
- ConsoleNotifier / NullNotifier: Notifier implementations.

Example:
    >>> from tfmerge.services import TfCommandLineService, ConsoleNotifier
    >>> service = TfCommandLineService(local_path=Path("C:/src/project"))
    >>> notifier = ConsoleNotifier()
"""

from .base import Notifier, VersionControlService
from .notifiers import ConsoleNotifier, NullNotifier
from .tf_service import TfCommandLineService, parse_work_items

__all__ = [
    "Notifier",
    "VersionControlService",
    "ConsoleNotifier",
    "NullNotifier",
    "TfCommandLineService",
    "parse_work_items",
]
