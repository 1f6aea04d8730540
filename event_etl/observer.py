"""Run observers: progress and failure reporting for the pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from event_etl.pipeline import FileResult, RunSummary


class PipelineObserver:
    """No-op base; subclasses override the hooks they care about.

    ``file_succeeded`` and ``file_failed`` are called from worker threads.
    """

    def run_started(self, total: int, skipped: int) -> None:
        pass

    def file_succeeded(self, result: FileResult) -> None:
        pass

    def file_failed(self, result: FileResult) -> None:
        pass

    def run_completed(self, summary: RunSummary) -> None:
        pass


class LoggingObserver(PipelineObserver):
    """Reports pipeline progress through a (possibly injected) logger."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("event_etl.pipeline")

    def run_started(self, total: int, skipped: int) -> None:
        self._logger.info("Found %d input file(s), skipped %d other entr%s",
                          total, skipped, "y" if skipped == 1 else "ies")

    def file_succeeded(self, result: FileResult) -> None:
        self._logger.info("Processed %s: %d record(s) -> %s",
                          result.name, result.records, result.output_path)

    def file_failed(self, result: FileResult) -> None:
        stage = result.failed_in.value if result.failed_in else "unknown"
        exc_info = result.exc_info if result.error_kind == "UnexpectedError" else None
        self._logger.error("Failed %s while %s (%s): %s", result.name, stage,
                           result.error_kind, result.error, exc_info=exc_info)

    def run_completed(self, summary: RunSummary) -> None:
        self._logger.info("Run complete: total=%d processed=%d failed=%d in %.2fs",
                          summary.total, summary.processed, summary.failed, summary.elapsed_s)
