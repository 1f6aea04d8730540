"""Per-file extract -> transform -> load orchestration on a bounded worker pool.

Run lifecycle:   IDLE -> LISTING -> PROCESSING_FILES -> COMPLETE
File lifecycle:  PENDING -> DECODING -> TRANSFORMING -> WRITING -> DONE,
                 with FAILED reachable from any of the three active states.

A failure in one file is recorded on its FileResult and never aborts the
run or its sibling workers. Only an unreadable input directory
(ListingError) or an output directory that cannot be created (WriteError)
is fatal.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum

from event_etl.config import Config
from event_etl.decoder import decode_file, has_required_suffix, strip_suffix
from event_etl.errors import EtlError, ListingError, WriteError
from event_etl.observer import LoggingObserver, PipelineObserver
from event_etl.transformer import transform_record
from event_etl.writer import OutputWriter

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    LISTING = "listing"
    PROCESSING_FILES = "processing_files"
    COMPLETE = "complete"


class FileState(Enum):
    PENDING = "pending"
    DECODING = "decoding"
    TRANSFORMING = "transforming"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FileResult:
    name: str
    state: FileState = FileState.PENDING
    records: int = 0
    output_path: str | None = None
    failed_in: FileState | None = None
    error_kind: str | None = None
    error: str | None = None
    exc_info: BaseException | None = field(default=None, repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.state is FileState.DONE

    def fail(self, exc: BaseException, kind: str) -> None:
        self.failed_in = self.state
        self.state = FileState.FAILED
        self.error_kind = kind
        self.error = str(exc)
        self.exc_info = exc


@dataclass(frozen=True)
class RunSummary:
    total: int
    processed: int
    failed: int
    results: tuple[FileResult, ...] = ()
    elapsed_s: float = 0.0

    @property
    def failures(self) -> list[FileResult]:
        return [r for r in self.results if not r.ok]


class EtlPipeline:
    """Discovers ``*.json.gz`` files in the input directory and normalizes each one."""

    def __init__(
        self,
        config: Config,
        observer: PipelineObserver | None = None,
        writer: OutputWriter | None = None,
    ):
        self._config = config
        self._observer = observer or LoggingObserver()
        self._writer = writer or OutputWriter(config.output_dir)
        self._state = RunState.IDLE

    @property
    def state(self) -> RunState:
        return self._state

    def run(self) -> RunSummary:
        """Process every eligible input file and return the run summary.

        Returns only after all in-flight files have finished.

        Raises:
            ListingError: the input directory cannot be read.
            WriteError: the output directory cannot be created.
        """
        start = time.perf_counter()
        self._state = RunState.LISTING

        try:
            os.makedirs(self._config.output_dir, exist_ok=True)
        except OSError as exc:
            raise WriteError(f"Cannot create output directory {self._config.output_dir}: {exc}") from exc

        names, skipped = self._list_inputs()
        self._observer.run_started(len(names), skipped)

        self._state = RunState.PROCESSING_FILES
        results: list[FileResult] = []
        if names:
            workers = min(self._config.max_workers, len(names))
            logger.debug("Processing %d file(s) with %d worker(s)", len(names), workers)
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="etl-worker") as executor:
                futures = {executor.submit(self._process_file, name): name for name in names}
                for future in as_completed(futures):
                    results.append(future.result())

        results.sort(key=lambda r: r.name)
        processed = sum(1 for r in results if r.ok)
        summary = RunSummary(
            total=len(results),
            processed=processed,
            failed=len(results) - processed,
            results=tuple(results),
            elapsed_s=time.perf_counter() - start,
        )

        self._state = RunState.COMPLETE
        self._observer.run_completed(summary)
        return summary

    def _list_inputs(self) -> tuple[list[str], int]:
        """Return (sorted eligible file names, number of skipped entries)."""
        names: list[str] = []
        skipped = 0
        try:
            with os.scandir(self._config.input_dir) as entries:
                for entry in entries:
                    if has_required_suffix(entry.name) and entry.is_file():
                        names.append(entry.name)
                    else:
                        skipped += 1
        except OSError as exc:
            raise ListingError(f"Cannot list input directory {self._config.input_dir}: {exc}") from exc
        names.sort()
        return names, skipped

    def _process_file(self, name: str) -> FileResult:
        result = FileResult(name=name)
        path = os.path.join(self._config.input_dir, name)
        try:
            result.state = FileState.DECODING
            raw = decode_file(path)

            result.state = FileState.TRANSFORMING
            records = transform_record(raw)

            result.state = FileState.WRITING
            result.output_path = self._writer.write(strip_suffix(name), records)
            result.records = len(records)
            result.state = FileState.DONE
        except EtlError as exc:
            result.fail(exc, exc.kind)
        except Exception as exc:
            # Contained here so one bad file cannot take down its siblings.
            result.fail(exc, "UnexpectedError")

        hook = self._observer.file_succeeded if result.ok else self._observer.file_failed
        try:
            hook(result)
        except Exception:
            # The file outcome stands; a broken observer must not abort the run.
            logger.exception("Observer %s raised while reporting %s", hook.__name__, name)
        return result
