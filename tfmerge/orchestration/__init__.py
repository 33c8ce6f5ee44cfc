"""Workflow orchestration package for tfmerge.

This package contains the components that run a merge:
- CommentSynthesizer: Builds the check-in comment from the configured template.
- MergeOrchestrator: Runs the pending changes, get latest, merge, work item
  and comment steps for one MergeRequest.
- MergeLogger: Structured log file of a merge run.
"""

from tfmerge.orchestration.comment_synthesizer import CommentSynthesizer
from tfmerge.orchestration.merge_logger import MergeLogger
from tfmerge.orchestration.merge_orchestrator import MergeOrchestrator, ProgressCallback

__all__ = ["CommentSynthesizer", "MergeLogger", "MergeOrchestrator", "ProgressCallback"]
