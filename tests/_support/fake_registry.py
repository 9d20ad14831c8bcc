"""
In-memory document registry for deterministic reconciliation tests.

Records every call in ``calls`` so tests can assert exactly which registry
operations a reconciliation issued.  Failures are injected per operation
(and optionally per document) with :meth:`FakeRegistry.fail_on`.

Usage in test code::

    registry = FakeRegistry()
    registry.seed("demo", content="{}", shared_with=["111"], tags={"Env": "dev"})
    registry.fail_on("add_tags", document="demo")

    DocumentReconciler(registry).deploy(descriptor)
    assert registry.mutating_calls() == [...]
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ssm_document.core.errors import DuplicateContentError, RegistryError
from ssm_document.documents.models import DocumentFormat

MUTATING_OPERATIONS = frozenset(
    {
        "create_document",
        "update_document",
        "update_default_version",
        "modify_permission",
        "add_tags",
        "remove_tags",
        "delete_document",
    }
)


@dataclass
class StoredDocument:
    """A document as the fake registry holds it."""

    name: str
    document_format: DocumentFormat
    document_type: str
    versions: list[str] = field(default_factory=list)
    default_version: str = "1"
    shared_with: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def latest(self) -> str:
        return self.versions[-1]

    @property
    def latest_version(self) -> str:
        return str(len(self.versions))


@dataclass
class Call:
    operation: str
    args: tuple[Any, ...]


class FakeRegistry:
    """Thread-safe in-memory ``DocumentRegistry``."""

    def __init__(self) -> None:
        self.documents: dict[str, StoredDocument] = {}
        self.calls: list[Call] = []
        self._faults: dict[tuple[str, str | None], RegistryError] = {}
        self._lock = threading.Lock()

    # ── Test helpers ──────────────────────────────────────────────

    def seed(
        self,
        name: str,
        *,
        content: str = "{}",
        document_format: DocumentFormat = DocumentFormat.JSON,
        document_type: str = "Command",
        shared_with: Sequence[str] = (),
        tags: Mapping[str, str] | None = None,
    ) -> StoredDocument:
        document = StoredDocument(
            name=name,
            document_format=document_format,
            document_type=document_type,
            versions=[content],
            shared_with=list(shared_with),
            tags=dict(tags or {}),
        )
        self.documents[name] = document
        return document

    def fail_on(self, operation: str, *, document: str | None = None, code: str = "InternalServerError") -> None:
        """Make ``operation`` raise ``RegistryError`` (for one document, or all)."""
        self._faults[(operation, document)] = RegistryError(f"injected {operation} failure", code=code)

    def operations(self) -> list[str]:
        return [c.operation for c in self.calls]

    def mutating_calls(self) -> list[Call]:
        return [c for c in self.calls if c.operation in MUTATING_OPERATIONS]

    def calls_for(self, operation: str) -> list[Call]:
        return [c for c in self.calls if c.operation == operation]

    def _record(self, operation: str, name: str, *args: Any) -> None:
        with self._lock:
            self.calls.append(Call(operation, (name, *args)))
        fault = self._faults.get((operation, name)) or self._faults.get((operation, None))
        if fault is not None:
            raise fault

    def _require(self, name: str) -> StoredDocument:
        document = self.documents.get(name)
        if document is None:
            raise RegistryError(f"Document {name} not found", code="InvalidDocument")
        return document

    # ── DocumentRegistry ──────────────────────────────────────────

    def get_document(self, name: str) -> bool:
        self._record("get_document", name)
        return name in self.documents

    def create_document(
        self,
        name: str,
        document_format: DocumentFormat,
        document_type: str,
        content: str,
        tags: Mapping[str, str],
    ) -> None:
        self._record("create_document", name, document_format, document_type, content, dict(tags))
        with self._lock:
            if name in self.documents:
                raise RegistryError(f"Document {name} already exists", code="DocumentAlreadyExists")
            self.seed(name, content=content, document_format=document_format, document_type=document_type, tags=tags)

    def update_document(
        self,
        name: str,
        document_format: DocumentFormat,
        content: str,
        version: str = "$LATEST",
    ) -> str:
        self._record("update_document", name, document_format, content, version)
        document = self._require(name)
        with self._lock:
            if document.latest == content:
                raise DuplicateContentError(
                    "The content of the association document matches another document",
                    code="DuplicateDocumentContent",
                )
            document.versions.append(content)
            document.document_format = document_format
            return document.latest_version

    def update_default_version(self, name: str, version: str) -> None:
        self._record("update_default_version", name, version)
        self._require(name).default_version = version

    def describe_permission(self, name: str, permission_type: str = "Share") -> list[str]:
        self._record("describe_permission", name, permission_type)
        return list(self._require(name).shared_with)

    def modify_permission(
        self,
        name: str,
        permission_type: str,
        to_add: Sequence[str],
        to_remove: Sequence[str],
    ) -> None:
        self._record("modify_permission", name, permission_type, list(to_add), list(to_remove))
        document = self._require(name)
        shared = [p for p in document.shared_with if p not in to_remove]
        shared.extend(p for p in to_add if p not in shared)
        document.shared_with = shared

    def list_tags(self, resource_id: str, resource_type: str = "Document") -> dict[str, str]:
        self._record("list_tags", resource_id, resource_type)
        return dict(self._require(resource_id).tags)

    def add_tags(self, resource_id: str, resource_type: str, tags: Mapping[str, str]) -> None:
        self._record("add_tags", resource_id, resource_type, dict(tags))
        self._require(resource_id).tags.update(tags)

    def remove_tags(self, resource_id: str, resource_type: str, keys: Sequence[str]) -> None:
        self._record("remove_tags", resource_id, resource_type, list(keys))
        document = self._require(resource_id)
        for key in keys:
            document.tags.pop(key, None)

    def delete_document(self, name: str) -> None:
        self._record("delete_document", name)
        self._require(name)
        with self._lock:
            del self.documents[name]
