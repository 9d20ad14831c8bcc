"""
Remote document registry: the protocol the reconciler depends on, the
boto3-backed SSM implementation, and session/identity helpers.
"""

from ssm_document.registry.protocol import (
    DOCUMENT_RESOURCE,
    LATEST_VERSION,
    SHARE_PERMISSION,
    DocumentRegistry,
)
from ssm_document.registry.session import create_session, get_caller_account_id, get_caller_region
from ssm_document.registry.ssm import SSMDocumentRegistry

__all__ = [
    "DOCUMENT_RESOURCE",
    "DocumentRegistry",
    "LATEST_VERSION",
    "SHARE_PERMISSION",
    "SSMDocumentRegistry",
    "create_session",
    "get_caller_account_id",
    "get_caller_region",
]
