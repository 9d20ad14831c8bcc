"""AWS Systems Manager document registry backed by boto3."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ssm_document.core.errors import DuplicateContentError, RegistryError
from ssm_document.core.logging import get_logger
from ssm_document.documents.models import DocumentFormat
from ssm_document.registry.protocol import DOCUMENT_RESOURCE, LATEST_VERSION, SHARE_PERMISSION

logger = get_logger(__name__)

NOT_FOUND_CODE = "InvalidDocument"
DUPLICATE_CONTENT_CODE = "DuplicateDocumentContent"


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


@contextmanager
def _wrap_errors(action: str, name: str) -> Iterator[None]:
    """Translate botocore failures into ``RegistryError``."""
    try:
        yield
    except ClientError as e:
        code = _error_code(e)
        raise RegistryError(f"{action} failed for {name}: {e}", code=code, cause=e).with_context(document=name)
    except BotoCoreError as e:
        raise RegistryError(f"{action} failed for {name}: {e}", cause=e).with_context(document=name)


def _tag_list(tags: Mapping[str, str]) -> list[dict[str, str]]:
    return [{"Key": key, "Value": value} for key, value in tags.items()]


class SSMDocumentRegistry:
    """
    Document registry over the SSM API.

    Works with AWS and with SSM-compatible endpoints (LocalStack).  The
    boto3 client is created once and shared by every worker thread; boto3
    clients are thread-safe, sessions are not, so a session is only used
    here to build the client.
    """

    def __init__(
        self,
        session: boto3.Session | None = None,
        *,
        client: Any | None = None,
        endpoint_url: str | None = None,
    ):
        if client is None:
            session = session or boto3.Session()
            client_kwargs: dict[str, Any] = {}
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            client = session.client("ssm", **client_kwargs)
        self.client = client

    # ── Documents ─────────────────────────────────────────────────

    def get_document(self, name: str) -> bool:
        try:
            self.client.get_document(Name=name)
        except ClientError as e:
            if _error_code(e) == NOT_FOUND_CODE:
                return False
            raise RegistryError(f"GetDocument failed for {name}: {e}", code=_error_code(e), cause=e).with_context(
                document=name
            )
        except BotoCoreError as e:
            raise RegistryError(f"GetDocument failed for {name}: {e}", cause=e).with_context(document=name)
        return True

    def create_document(
        self,
        name: str,
        document_format: DocumentFormat,
        document_type: str,
        content: str,
        tags: Mapping[str, str],
    ) -> None:
        request: dict[str, Any] = {
            "Name": name,
            "DocumentFormat": DocumentFormat(document_format).value,
            "DocumentType": document_type,
            "Content": content,
        }
        if tags:
            request["Tags"] = _tag_list(tags)

        with _wrap_errors("CreateDocument", name):
            self.client.create_document(**request)
        logger.debug("ssm.document_created", document=name)

    def update_document(
        self,
        name: str,
        document_format: DocumentFormat,
        content: str,
        version: str = LATEST_VERSION,
    ) -> str:
        try:
            response = self.client.update_document(
                Name=name,
                DocumentFormat=DocumentFormat(document_format).value,
                Content=content,
                DocumentVersion=version,
            )
        except ClientError as e:
            code = _error_code(e)
            if code == DUPLICATE_CONTENT_CODE:
                raise DuplicateContentError(
                    f"Content of {name} is identical to the latest version", code=code, cause=e
                ).with_context(document=name)
            raise RegistryError(f"UpdateDocument failed for {name}: {e}", code=code, cause=e).with_context(
                document=name
            )
        except BotoCoreError as e:
            raise RegistryError(f"UpdateDocument failed for {name}: {e}", cause=e).with_context(document=name)

        new_version = response["DocumentDescription"]["DocumentVersion"]
        logger.debug("ssm.document_updated", document=name, version=new_version)
        return new_version

    def update_default_version(self, name: str, version: str) -> None:
        with _wrap_errors("UpdateDocumentDefaultVersion", name):
            self.client.update_document_default_version(Name=name, DocumentVersion=version)

    def delete_document(self, name: str) -> None:
        with _wrap_errors("DeleteDocument", name):
            self.client.delete_document(Name=name)
        logger.debug("ssm.document_deleted", document=name)

    # ── Permissions ───────────────────────────────────────────────

    def describe_permission(self, name: str, permission_type: str = SHARE_PERMISSION) -> list[str]:
        principals: list[str] = []
        request: dict[str, Any] = {"Name": name, "PermissionType": permission_type}

        with _wrap_errors("DescribeDocumentPermission", name):
            while True:
                response = self.client.describe_document_permission(**request)
                principals.extend(response.get("AccountIds", []))
                next_token = response.get("NextToken")
                if not next_token:
                    break
                request["NextToken"] = next_token

        return principals

    def modify_permission(
        self,
        name: str,
        permission_type: str,
        to_add: Sequence[str],
        to_remove: Sequence[str],
    ) -> None:
        request: dict[str, Any] = {"Name": name, "PermissionType": permission_type}
        if to_add:
            request["AccountIdsToAdd"] = list(to_add)
        if to_remove:
            request["AccountIdsToRemove"] = list(to_remove)

        with _wrap_errors("ModifyDocumentPermission", name):
            self.client.modify_document_permission(**request)

    # ── Tags ──────────────────────────────────────────────────────

    def list_tags(self, resource_id: str, resource_type: str = DOCUMENT_RESOURCE) -> dict[str, str]:
        with _wrap_errors("ListTagsForResource", resource_id):
            response = self.client.list_tags_for_resource(ResourceType=resource_type, ResourceId=resource_id)
        return {tag["Key"]: tag["Value"] for tag in response.get("TagList", [])}

    def add_tags(self, resource_id: str, resource_type: str, tags: Mapping[str, str]) -> None:
        with _wrap_errors("AddTagsToResource", resource_id):
            self.client.add_tags_to_resource(
                ResourceType=resource_type,
                ResourceId=resource_id,
                Tags=_tag_list(tags),
            )

    def remove_tags(self, resource_id: str, resource_type: str, keys: Sequence[str]) -> None:
        with _wrap_errors("RemoveTagsFromResource", resource_id):
            self.client.remove_tags_from_resource(
                ResourceType=resource_type,
                ResourceId=resource_id,
                TagKeys=list(keys),
            )


__all__ = ["SSMDocumentRegistry"]
