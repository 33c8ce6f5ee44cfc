"""MergeLogger for writing a structured log file of a merge run.

This module provides the MergeLogger class that records the request, the
progress of the workflow and its outcome in a plain text log file.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from tfmerge.models import MergeRequest, MergeResult
from tfmerge.orchestration.comment_synthesizer import join_ids


class MergeLogger:
    """Logger for merge runs with structured output format.

    Generates log files with sections for header, request, progress and
    result (or abort reason).

    Usage:
        with MergeLogger(log_file_path) as merge_log:
            merge_log.log_header()
            merge_log.log_request(request)
            result = await orchestrator.execute(request, progress=merge_log.log_progress)
            merge_log.log_result(result)

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(self, log_file_path: Optional[Path] = None) -> None:
        """Initialize the MergeLogger.

        Args:
            log_file_path: Optional path for the log file. If not provided,
                generates a timestamped filename in the current directory.

        Raises:
            OSError: If the log file path is not writable.
        """
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None
        self._progress_started = False

        if log_file_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._log_file_path = Path.cwd() / f"tfmerge_{timestamp_str}.log"
        else:
            self._log_file_path = Path(log_file_path)

        self._validate_path()

    def _validate_path(self) -> None:
        """Validate that the log file's parent directory exists.

        Raises:
            OSError: If the parent directory doesn't exist or is not a directory.
        """
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")

    def open(self) -> None:
        """Open the log file for writing.

        Raises:
            OSError: If the file cannot be opened for writing.
        """
        try:
            self._file_handle = open(self._log_file_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")

    def close(self) -> None:
        """Close the log file if it is open."""
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def __enter__(self) -> "MergeLogger":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_log_path(self) -> Path:
        return self._log_file_path

    def log_header(self) -> None:
        """Write the title and start timestamp."""
        self._write_separator()
        self._write_line("tfmerge - Merge Log")
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        self._write_line("")

    def log_request(self, request: MergeRequest) -> None:
        """Write the request section.

        Args:
            request: The MergeRequest about to be executed.
        """
        ids = request.ordered_changeset_ids
        self._write_separator()
        self._write_line("REQUEST")
        self._write_separator()
        self._write_line(f"Workspace: {request.workspace.spec}")
        self._write_line(f"Source branch: {request.source_branch}")
        self._write_line(f"Target branch: {request.target_branch}")
        self._write_line(f"Changesets: {join_ids(ids)}")
        self._write_line(f"Range: C{min(ids)}~C{max(ids)}")
        self._write_line("")

    def log_progress(self, message: Optional[str]) -> None:
        """Write a timestamped progress line.

        Matches the progress callback signature of MergeOrchestrator.execute();
        None (end of workflow) is ignored.
        """
        if message is None:
            return
        if not self._progress_started:
            self._write_separator()
            self._write_line("PROGRESS")
            self._write_separator()
            self._progress_started = True
        self._write_line(f"[{self._format_timestamp(datetime.now())}] {message}")

    def log_result(self, result: MergeResult) -> None:
        """Write the result section of a successful merge."""
        self._write_line("")
        self._write_separator()
        self._write_line("RESULT")
        self._write_separator()
        self._write_line(f"Comment: {result.comment}")
        if result.work_item_ids:
            self._write_line(f"Work items: {join_ids(result.work_item_ids)}")
        else:
            self._write_line("Work items: (none)")
        self._write_line(f"Duration: {self._format_duration()}")
        self._write_separator()

    def log_aborted(self, reason: str) -> None:
        """Write the abort section with the reason the merge stopped."""
        self._write_line("")
        self._write_separator()
        self._write_line("ABORTED")
        self._write_separator()
        self._write_line(f"Reason: {reason}")
        self._write_line(f"Duration: {self._format_duration()}")
        self._write_separator()

    def _format_duration(self) -> str:
        """Format the time elapsed since construction, e.g. "45s" or "1m 5s"."""
        total_seconds = int((datetime.now() - self._start_timestamp).total_seconds())
        if total_seconds < 60:
            return f"{total_seconds}s"
        minutes, secs = divmod(total_seconds, 60)
        return f"{minutes}m {secs}s"

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str) -> None:
        """Write a line to the log file."""
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed log file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(text + "\n")
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
