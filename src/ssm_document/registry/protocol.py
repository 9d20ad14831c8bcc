"""
Registry protocol: the remote operations the reconciler depends on.

The reconciler only ever talks to this shape, so the boto3 adapter and the
in-memory fake used by tests are interchangeable.

Implementations raise :class:`~ssm_document.core.errors.RegistryError` for
every failed call, and :class:`~ssm_document.core.errors.DuplicateContentError`
from ``update_document`` when the submitted content equals the latest
version.  Implementations are shared by all workers of a chunk and must be
safe for concurrent calls.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from ssm_document.documents.models import DocumentFormat

LATEST_VERSION = "$LATEST"
SHARE_PERMISSION = "Share"
DOCUMENT_RESOURCE = "Document"


@runtime_checkable
class DocumentRegistry(Protocol):
    """Remote document registry operations."""

    def get_document(self, name: str) -> bool:
        """Return whether a document with this name exists."""
        ...

    def create_document(
        self,
        name: str,
        document_format: DocumentFormat,
        document_type: str,
        content: str,
        tags: Mapping[str, str],
    ) -> None:
        """Create a new document, tagged at creation time."""
        ...

    def update_document(
        self,
        name: str,
        document_format: DocumentFormat,
        content: str,
        version: str = LATEST_VERSION,
    ) -> str:
        """Submit new content; return the new document version."""
        ...

    def update_default_version(self, name: str, version: str) -> None:
        """Promote a version to be the default one."""
        ...

    def describe_permission(self, name: str, permission_type: str = SHARE_PERMISSION) -> list[str]:
        """Return the principals the document is shared with."""
        ...

    def modify_permission(
        self,
        name: str,
        permission_type: str,
        to_add: Sequence[str],
        to_remove: Sequence[str],
    ) -> None:
        """Add and remove shared principals in one call."""
        ...

    def list_tags(self, resource_id: str, resource_type: str = DOCUMENT_RESOURCE) -> dict[str, str]:
        """Return the resource's tags."""
        ...

    def add_tags(self, resource_id: str, resource_type: str, tags: Mapping[str, str]) -> None:
        """Add or overwrite tags."""
        ...

    def remove_tags(self, resource_id: str, resource_type: str, keys: Sequence[str]) -> None:
        """Remove tags by key."""
        ...

    def delete_document(self, name: str) -> None:
        """Delete the document and all its versions."""
        ...


__all__ = [
    "DOCUMENT_RESOURCE",
    "DocumentRegistry",
    "LATEST_VERSION",
    "SHARE_PERMISSION",
]
