"""Single-document reconciliation.

``DocumentReconciler.deploy`` drives one document through::

    resolve content ──▶ exists? ──no──▶ create (with tags) ──────────────┐
                          │                                              ▼
                          └─yes─▶ update $LATEST ──▶ promote ──▶ sync permissions
                                  (duplicate content = no-op)            │
                                                                         ▼
                                                    sync tags (update path only)

``DocumentReconciler.remove`` is the reverse: absent documents succeed
untouched, shared documents are unshared (and left in place until the next
pass), unshared documents are deleted.

Every stage failure is raised as the stage's ``DocumentError`` subclass.
Only registry state is touched; nothing is written locally.
"""

from __future__ import annotations

from collections.abc import Callable

from ssm_document.core.errors import (
    DeleteError,
    DuplicateContentError,
    PermissionSyncError,
    RegistryCreateUpdateError,
    RegistryError,
    TagSyncError,
)
from ssm_document.core.logging import get_logger
from ssm_document.documents.content import ResolvedContent, resolve_content
from ssm_document.documents.diff import diff_principals, diff_tags
from ssm_document.documents.models import DocumentDescriptor
from ssm_document.execution.results import DocumentAction
from ssm_document.registry.protocol import (
    DOCUMENT_RESOURCE,
    LATEST_VERSION,
    SHARE_PERMISSION,
    DocumentRegistry,
)

logger = get_logger(__name__)

Reporter = Callable[[str], None]


class DocumentReconciler:
    """Bring one document's registry state in line with its descriptor.

    Args:
        registry: Registry shared (read-only) by every worker
        reporter: Receives plain progress lines such as ``[demo] Creating..``
    """

    def __init__(self, registry: DocumentRegistry, reporter: Reporter | None = None):
        self._registry = registry
        self._reporter = reporter

    def _report(self, name: str, message: str) -> None:
        if self._reporter is not None:
            self._reporter(f"[{name}] {message}")

    # ── Deploy ────────────────────────────────────────────────────

    def deploy(self, document: DocumentDescriptor) -> DocumentAction:
        """Create or update a document, then sync permissions and tags."""
        name = document.name
        content = resolve_content(document)

        try:
            exists = self._registry.get_document(name)
        except RegistryError as e:
            raise RegistryCreateUpdateError(f"Cannot check if document exists: {e.message}", document=name, cause=e)

        if not exists:
            self._report(name, "Creating..")
            action = self._create(document, content)
        else:
            self._report(name, "Updating..")
            action = self._update(document, content)

        self.sync_permissions(document)

        if exists:
            self.sync_tags(document)

        self._report(name, "Deploy completed!")
        logger.info(f"reconcile.{action.value}", document=name)
        return action

    def _create(self, document: DocumentDescriptor, content: ResolvedContent) -> DocumentAction:
        try:
            self._registry.create_document(
                document.name,
                content.format,
                document.type,
                content.payload,
                dict(document.tags),
            )
        except RegistryError as e:
            raise RegistryCreateUpdateError(f"Cannot create document: {e.message}", document=document.name, cause=e)
        return DocumentAction.CREATED

    def _update(self, document: DocumentDescriptor, content: ResolvedContent) -> DocumentAction:
        name = document.name
        try:
            version = self._registry.update_document(name, content.format, content.payload, LATEST_VERSION)
        except DuplicateContentError:
            logger.debug("reconcile.content_unchanged", document=name)
            return DocumentAction.UNCHANGED
        except RegistryError as e:
            raise RegistryCreateUpdateError(f"Cannot update document: {e.message}", document=name, cause=e)

        try:
            self._registry.update_default_version(name, version)
        except RegistryError as e:
            raise RegistryCreateUpdateError(
                f"Cannot set version {version} as default: {e.message}", document=name, cause=e
            )
        logger.debug("reconcile.version_promoted", document=name, version=version)
        return DocumentAction.UPDATED

    def sync_permissions(self, document: DocumentDescriptor) -> bool:
        """Share the document with exactly its authorized principals.

        Returns whether a modify call was issued.
        """
        name = document.name
        try:
            current = self._registry.describe_permission(name, SHARE_PERMISSION)
        except RegistryError as e:
            raise PermissionSyncError(f"Cannot describe permissions: {e.message}", document=name, cause=e)

        desired = document.authorized_principals
        if not desired and not current:
            return False

        diff = diff_principals(desired, current)
        if not diff.has_changes:
            return False

        self._report(name, "Updating permissions..")
        try:
            self._registry.modify_permission(name, SHARE_PERMISSION, diff.to_add, diff.to_remove)
        except RegistryError as e:
            raise PermissionSyncError(f"Cannot modify permissions: {e.message}", document=name, cause=e)

        logger.info(
            "reconcile.permissions_synced",
            document=name,
            added=len(diff.to_add),
            removed=len(diff.to_remove),
        )
        return True

    def sync_tags(self, document: DocumentDescriptor) -> bool:
        """Write changed tags and drop undeclared ones. Returns whether anything changed."""
        name = document.name
        try:
            current = self._registry.list_tags(name, DOCUMENT_RESOURCE)
        except RegistryError as e:
            raise TagSyncError(f"Cannot list tags: {e.message}", document=name, cause=e)

        if not document.tags and not current:
            return False

        diff = diff_tags(document.tags, current)
        if not diff.has_changes:
            return False

        self._report(name, "Updating tags..")
        try:
            if diff.to_add:
                self._registry.add_tags(name, DOCUMENT_RESOURCE, diff.to_add)
            if diff.to_remove:
                self._registry.remove_tags(name, DOCUMENT_RESOURCE, diff.to_remove)
        except RegistryError as e:
            raise TagSyncError(f"Cannot update tags: {e.message}", document=name, cause=e)

        logger.info(
            "reconcile.tags_synced",
            document=name,
            added=len(diff.to_add),
            removed=len(diff.to_remove),
        )
        return True

    # ── Remove ────────────────────────────────────────────────────

    def remove(self, document: DocumentDescriptor) -> DocumentAction:
        """Unshare, or delete, a deployed document.

        A shared document is only unshared in this pass; running the removal
        again deletes it.
        """
        name = document.name
        try:
            exists = self._registry.get_document(name)
        except RegistryError as e:
            raise DeleteError(f"Cannot check if document exists: {e.message}", document=name, cause=e)

        if not exists:
            self._report(name, "Remove completed!")
            return DocumentAction.ABSENT

        self._report(name, "Removing..")
        try:
            current = self._registry.describe_permission(name, SHARE_PERMISSION)
        except RegistryError as e:
            raise DeleteError(f"Cannot describe permissions: {e.message}", document=name, cause=e)

        if current:
            try:
                self._registry.modify_permission(name, SHARE_PERMISSION, [], current)
            except RegistryError as e:
                raise PermissionSyncError(f"Cannot unshare document: {e.message}", document=name, cause=e)
            self._report(name, f"Unshared from {len(current)} accounts, run remove again to delete it")
            logger.info("reconcile.unshared", document=name, removed=len(current))
            return DocumentAction.UNSHARED

        try:
            self._registry.delete_document(name)
        except RegistryError as e:
            raise DeleteError(f"Cannot delete document: {e.message}", document=name, cause=e)

        self._report(name, "Remove completed!")
        logger.info("reconcile.removed", document=name)
        return DocumentAction.REMOVED


__all__ = ["DocumentReconciler", "Reporter"]
