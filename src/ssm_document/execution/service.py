"""Entry points that reconcile a whole set of documents against a registry."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from ssm_document.documents.models import DocumentDescriptor
from ssm_document.execution.batch import DEFAULT_CHUNK_PAUSE_SECONDS, DEFAULT_PARALLELS, BatchScheduler
from ssm_document.execution.reconciler import DocumentReconciler, Reporter
from ssm_document.execution.results import BatchResult, Operation
from ssm_document.registry.protocol import DocumentRegistry


def _run(
    operation: Operation,
    registry: DocumentRegistry,
    documents: Sequence[DocumentDescriptor],
    parallels: int,
    chunk_pause: float,
    reporter: Reporter | None,
    sleep: Callable[[float], None],
) -> BatchResult:
    reconciler = DocumentReconciler(registry, reporter=reporter)
    handler = reconciler.deploy if operation is Operation.DEPLOY else reconciler.remove
    scheduler = BatchScheduler(
        operation,
        handler,
        parallels=parallels,
        chunk_pause=chunk_pause,
        sleep=sleep,
        reporter=reporter,
    )
    result = scheduler.run(documents)
    result.raise_for_failures()
    return result


def deploy_documents(
    registry: DocumentRegistry,
    documents: Sequence[DocumentDescriptor],
    parallels: int = DEFAULT_PARALLELS,
    *,
    chunk_pause: float = DEFAULT_CHUNK_PAUSE_SECONDS,
    reporter: Reporter | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    """Create or update every document, then sync its permissions and tags.

    Raises:
        BatchFailedError: One or more documents failed; every document was
            still attempted.
    """
    return _run(Operation.DEPLOY, registry, documents, parallels, chunk_pause, reporter, sleep)


def remove_documents(
    registry: DocumentRegistry,
    documents: Sequence[DocumentDescriptor],
    parallels: int = DEFAULT_PARALLELS,
    *,
    chunk_pause: float = DEFAULT_CHUNK_PAUSE_SECONDS,
    reporter: Reporter | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    """Unshare or delete every document.

    Shared documents are only unshared in this pass.

    Raises:
        BatchFailedError: One or more documents failed.
    """
    return _run(Operation.REMOVE, registry, documents, parallels, chunk_pause, reporter, sleep)


__all__ = ["deploy_documents", "remove_documents"]
