"""Chunked batch scheduling for document reconciliation.

Documents are split into contiguous chunks of at most ``parallels`` items.
Each chunk runs on its own thread pool, one worker per document, and the
scheduler waits for the slowest worker before it moves on.  Chunks never
overlap, so a document in chunk ``n + 1`` always starts after every
document of chunk ``n`` finished.

Every worker reports exactly one ``ReconciliationOutcome`` into a queue
sized to the whole batch.  Errors never escape a worker and never stop the
batch; they are drained, reported and counted once all chunks are done.

Example:
    >>> scheduler = BatchScheduler(Operation.DEPLOY, reconciler.deploy, parallels=5)
    >>> result = scheduler.run(documents)
    >>> result.raise_for_failures()   # "2 of 12 documents failed deploy"
"""

from __future__ import annotations

import concurrent.futures
import contextvars
import queue
import time
import uuid
from collections import Counter
from collections.abc import Callable, Iterator, Sequence
from typing import TypeVar

from ssm_document.core.errors import InvalidConfigError
from ssm_document.core.logging import LogContext, get_logger
from ssm_document.documents.models import DocumentDescriptor
from ssm_document.execution.reconciler import Reporter
from ssm_document.execution.results import (
    BatchResult,
    DocumentAction,
    Operation,
    ReconciliationOutcome,
    utcnow,
)

logger = get_logger(__name__)

DEFAULT_PARALLELS = 5
DEFAULT_CHUNK_PAUSE_SECONDS = 2.0

T = TypeVar("T")

DocumentHandler = Callable[[DocumentDescriptor], DocumentAction]


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield contiguous slices of at most ``size`` items, in order."""
    if size <= 0:
        raise InvalidConfigError("parallels", size, message=f"parallels must be a positive integer, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def duplicate_names(documents: Sequence[DocumentDescriptor]) -> list[str]:
    """Names that appear more than once in ``documents``."""
    counts = Counter(d.name for d in documents)
    return [name for name, count in counts.items() if count > 1]


class BatchScheduler:
    """Run a per-document operation over many documents in bounded chunks.

    Args:
        operation: Operation name used in logs and the failure summary
        handler: Per-document callable; returns the action taken or raises
        parallels: Maximum documents in flight at once (chunk size)
        chunk_pause: Seconds to wait between chunks
        sleep: Sleep function (injectable for tests)
        reporter: Receives the printed failure lines
    """

    def __init__(
        self,
        operation: Operation,
        handler: DocumentHandler,
        *,
        parallels: int = DEFAULT_PARALLELS,
        chunk_pause: float = DEFAULT_CHUNK_PAUSE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        reporter: Reporter | None = None,
    ):
        if isinstance(parallels, bool) or not isinstance(parallels, int) or parallels <= 0:
            raise InvalidConfigError(
                "parallels", parallels, message=f"parallels must be a positive integer, got {parallels!r}"
            )
        if chunk_pause < 0:
            raise InvalidConfigError("chunk_pause", chunk_pause)

        self._operation = Operation(operation)
        self._handler = handler
        self._parallels = parallels
        self._chunk_pause = chunk_pause
        self._sleep = sleep
        self._reporter = reporter

    @property
    def parallels(self) -> int:
        return self._parallels

    def _execute(
        self,
        document: DocumentDescriptor,
        outcomes: queue.Queue[ReconciliationOutcome],
    ) -> None:
        """Run the handler for one document and report exactly one outcome."""
        outcome = ReconciliationOutcome(name=document.name, operation=self._operation, started_at=utcnow())
        try:
            outcome.action = self._handler(document)
        except Exception as e:
            outcome.error = e
            logger.debug(
                "batch.item_failed",
                document=document.name,
                error_type=type(e).__name__,
                error=str(e),
            )
        finally:
            outcome.completed_at = utcnow()
            outcomes.put_nowait(outcome)

    def _run_chunk(
        self,
        chunk: Sequence[DocumentDescriptor],
        outcomes: queue.Queue[ReconciliationOutcome],
    ) -> None:
        duplicates = duplicate_names(chunk)
        if duplicates:
            logger.warning("batch.duplicate_names", names=duplicates)

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=len(chunk),
            thread_name_prefix=f"{self._operation.value}-worker",
        ) as executor:
            # workers do not inherit contextvars; each gets a copy of the caller's
            futures = [
                executor.submit(contextvars.copy_context().run, self._execute, document, outcomes)
                for document in chunk
            ]
            concurrent.futures.wait(futures)

    def run(self, documents: Sequence[DocumentDescriptor]) -> BatchResult:
        """Reconcile every document; always runs the whole batch."""
        result = BatchResult(batch_id=uuid.uuid4().hex[:12], operation=self._operation)
        outcomes: queue.Queue[ReconciliationOutcome] = queue.Queue(maxsize=max(len(documents), 1))

        with LogContext(operation=self._operation.value, batch_id=result.batch_id):
            logger.info("batch.start", documents=len(documents), parallels=self._parallels)

            for index, chunk in enumerate(chunked(documents, self._parallels)):
                if index > 0 and self._chunk_pause > 0:
                    self._sleep(self._chunk_pause)
                self._run_chunk(chunk, outcomes)
                result.chunks += 1
                logger.debug("batch.chunk_complete", chunk=index, size=len(chunk))

            while True:
                try:
                    outcome = outcomes.get_nowait()
                except queue.Empty:
                    break
                result.outcomes.append(outcome)
                if not outcome.succeeded:
                    if self._reporter is not None:
                        self._reporter(str(outcome.error))
                    logger.error(
                        "batch.document_failed",
                        document=outcome.name,
                        stage=outcome.stage.value if outcome.stage else None,
                        error=str(outcome.error),
                    )

            result.completed_at = utcnow()
            logger.info(
                "batch.complete",
                total=result.total,
                succeeded=result.succeeded,
                failed=result.failed,
                chunks=result.chunks,
                duration_seconds=result.duration_seconds,
            )

        return result


__all__ = [
    "BatchScheduler",
    "DEFAULT_CHUNK_PAUSE_SECONDS",
    "DEFAULT_PARALLELS",
    "DocumentHandler",
    "chunked",
    "duplicate_names",
]
