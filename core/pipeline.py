"""core.pipeline

Bounded-concurrency fetch pipeline: rows go through ``fetch`` (TTS request)
and ``store`` (write into the media folder) on a fixed pool of worker
threads, fed by a bounded queue so the producer blocks once ``concurrency``
rows are waiting.

The first fetch/store failure wins: it is kept, no further rows are admitted
and rows still waiting in the queue are skipped. Requests already running are
not interrupted, they simply finish. The module is UI-agnostic; both the CLI
and the Streamlit app drive it.
"""
from __future__ import annotations

import logging
import os
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from core.audio import AudioAsset
from core.media import sound_tag
from core.parsing import Row

__all__ = [
    "EnrichedRow",
    "PipelineOutcome",
    "TtsPipeline",
    "default_concurrency",
    "run_pipeline",
]

logger = logging.getLogger(__name__)

FetchFn = Callable[[Row], AudioAsset]
StoreFn = Callable[[AudioAsset], str]
ProgressFn = Callable[[int, int], None]
AdmitFn = Callable[[int, Row], None]

_SENTINEL = None


@dataclass(frozen=True)
class EnrichedRow:
    """A row whose front side carries an ``[sound:...]`` reference."""

    front: str
    back: str
    sound_file: str
    delimiter: str
    index: int = 0

    @property
    def front_with_audio(self) -> str:
        return f"{sound_tag(self.sound_file)}{self.front}"

    def to_line(self) -> str:
        return f"{self.front_with_audio}{self.delimiter}{self.back}"


@dataclass
class PipelineOutcome:
    """Terminal state of a run.

    On failure ``rows`` is empty and whatever finished before the failure was
    observed lives in ``partial_rows``; it is never meant to be exported.
    """

    rows: List[EnrichedRow] = field(default_factory=list)
    error: Optional[BaseException] = None
    partial_rows: List[EnrichedRow] = field(default_factory=list)
    admitted: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def default_concurrency() -> int:
    return max(1, os.cpu_count() or 1)


class _FirstError:
    """Write-once failure cell; later failures are only logged."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None
        self.stop = threading.Event()

    def record(self, error: BaseException) -> bool:
        with self._lock:
            if self._error is not None:
                logger.warning("Ignoring failure after the first one: %s", error)
                return False
            self._error = error
        self.stop.set()
        return True

    @property
    def error(self) -> Optional[BaseException]:
        with self._lock:
            return self._error


class _Collector:
    """Append-only, lock-protected result bag (completion order)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: List[EnrichedRow] = []

    def add(self, item: EnrichedRow) -> int:
        with self._lock:
            self._items.append(item)
            return len(self._items)

    def snapshot(self) -> List[EnrichedRow]:
        with self._lock:
            return list(self._items)


class TtsPipeline:
    """Run ``fetch`` + ``store`` over rows with at most ``concurrency`` in flight.

    ``progress_cb(done, total)`` is called from worker threads, ``on_admit(idx, row)``
    from the thread calling :meth:`run`.
    """

    def __init__(
        self,
        fetch: FetchFn,
        store: StoreFn,
        *,
        field_delimiter: str,
        use_first_side: bool = True,
        concurrency: Optional[int] = None,
        preserve_order: bool = True,
        progress_cb: Optional[ProgressFn] = None,
        on_admit: Optional[AdmitFn] = None,
    ) -> None:
        if concurrency is None or concurrency == 0:
            concurrency = default_concurrency()
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.fetch = fetch
        self.store = store
        self.field_delimiter = field_delimiter
        self.use_first_side = use_first_side
        self.concurrency = int(concurrency)
        self.preserve_order = preserve_order
        self.progress_cb = progress_cb
        self.on_admit = on_admit

    def run(self, rows: Sequence[Row]) -> PipelineOutcome:
        rows = list(rows)
        total = len(rows)
        if total == 0:
            if self.progress_cb:
                self.progress_cb(0, 0)
            return PipelineOutcome()

        failure = _FirstError()
        collector = _Collector()
        work: "queue.Queue[Optional[Tuple[int, Row]]]" = queue.Queue(maxsize=self.concurrency)
        admitted = 0

        if self.progress_cb:
            self.progress_cb(0, total)

        logger.info("Starting TTS pipeline: %s rows, %s workers", total, self.concurrency)
        with ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="tts") as executor:
            for _ in range(self.concurrency):
                executor.submit(self._worker, work, failure, collector, total)

            try:
                for idx, row in enumerate(rows):
                    if failure.stop.is_set():
                        logger.info("Stopping admission after %s/%s rows", admitted, total)
                        break
                    work.put((idx, row))
                    if failure.stop.is_set():
                        # Failure landed while blocked in put: a worker will skip this row
                        logger.info("Stopping admission after %s/%s rows", admitted, total)
                        break
                    admitted += 1
                    if self.on_admit:
                        self.on_admit(idx, row)
            finally:
                # One sentinel per worker; the executor then waits for the drain
                for _ in range(self.concurrency):
                    work.put(_SENTINEL)

        completed = collector.snapshot()
        if self.preserve_order:
            completed.sort(key=lambda item: item.index)

        error = failure.error
        if error is not None:
            logger.info("TTS pipeline failed after %s completed rows: %s", len(completed), error)
            return PipelineOutcome(error=error, partial_rows=completed, admitted=admitted)

        logger.info("TTS pipeline finished: %s rows", len(completed))
        return PipelineOutcome(rows=completed, admitted=admitted)

    def _worker(
        self,
        work: "queue.Queue[Optional[Tuple[int, Row]]]",
        failure: _FirstError,
        collector: _Collector,
        total: int,
    ) -> None:
        while True:
            item = work.get()
            try:
                if item is _SENTINEL:
                    return
                if failure.stop.is_set():
                    # Admitted but not started: skip once the run has failed
                    continue
                idx, row = item
                try:
                    enriched = self._process(idx, row)
                    done = collector.add(enriched)
                    if self.progress_cb:
                        self.progress_cb(done, total)
                except Exception as err:
                    failure.record(err)
            finally:
                work.task_done()

    def _process(self, idx: int, row: Row) -> EnrichedRow:
        asset = self.fetch(row)
        filename = self.store(asset)
        if self.use_first_side:
            front, back = row.side_a, row.side_b
        else:
            front, back = row.side_b, row.side_a
        return EnrichedRow(
            front=front,
            back=back,
            sound_file=filename,
            delimiter=self.field_delimiter,
            index=idx,
        )


def run_pipeline(
    rows: Sequence[Row],
    *,
    fetch: FetchFn,
    store: StoreFn,
    field_delimiter: str,
    use_first_side: bool = True,
    concurrency: Optional[int] = None,
    preserve_order: bool = True,
    progress_cb: Optional[ProgressFn] = None,
    on_admit: Optional[AdmitFn] = None,
) -> PipelineOutcome:
    """Functional shortcut around :class:`TtsPipeline`."""

    pipeline = TtsPipeline(
        fetch,
        store,
        field_delimiter=field_delimiter,
        use_first_side=use_first_side,
        concurrency=concurrency,
        preserve_order=preserve_order,
        progress_cb=progress_cb,
        on_admit=on_admit,
    )
    return pipeline.run(rows)
