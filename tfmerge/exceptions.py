"""Exceptions raised by tfmerge."""

from typing import Sequence


class MergeAborted(Exception):
    """The merge workflow stopped on one of its own guard conditions.

    Raised when the workspace has pending changes while the guard is enabled,
    or when conflicts remain after getting the latest version.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TfCommandError(Exception):
    """A tf command-line invocation failed."""

    def __init__(self, command: Sequence[str], returncode: int, output: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        message = f"'{' '.join(self.command)}' failed with exit code {returncode}"
        if output.strip():
            message += f": {output.strip()}"
        super().__init__(message)
