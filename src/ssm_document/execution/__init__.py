"""
Execution layer: single-document reconciliation, chunked batch scheduling,
and the result types both report through.
"""

from ssm_document.execution.batch import BatchScheduler, chunked, duplicate_names
from ssm_document.execution.reconciler import DocumentReconciler, Reporter
from ssm_document.execution.results import (
    BatchResult,
    DocumentAction,
    Operation,
    ReconciliationOutcome,
)
from ssm_document.execution.service import deploy_documents, remove_documents

__all__ = [
    "BatchResult",
    "BatchScheduler",
    "DocumentAction",
    "DocumentReconciler",
    "Operation",
    "ReconciliationOutcome",
    "Reporter",
    "chunked",
    "deploy_documents",
    "duplicate_names",
    "remove_documents",
]
