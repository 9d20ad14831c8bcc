"""
Core primitives shared by every ssm-document module: errors, logging,
settings and env-file loading.
"""

from ssm_document.core.errors import (
    BatchFailedError,
    ContentReadError,
    DeleteError,
    DocumentError,
    DocumentToolError,
    DuplicateContentError,
    ErrorCategory,
    ErrorContext,
    MissingCredentialsError,
    NoContentError,
    PermissionSyncError,
    RegistryCreateUpdateError,
    RegistryError,
    SerializationError,
    Stage,
    TagSyncError,
    UnsupportedExtensionError,
)
from ssm_document.core.logging import configure_logging, get_logger
from ssm_document.core.settings import DocumentToolSettings, get_settings, reset_settings

__all__ = [
    "BatchFailedError",
    "ContentReadError",
    "DeleteError",
    "DocumentError",
    "DocumentToolError",
    "DocumentToolSettings",
    "DuplicateContentError",
    "ErrorCategory",
    "ErrorContext",
    "MissingCredentialsError",
    "NoContentError",
    "PermissionSyncError",
    "RegistryCreateUpdateError",
    "RegistryError",
    "SerializationError",
    "Stage",
    "TagSyncError",
    "UnsupportedExtensionError",
    "configure_logging",
    "get_logger",
    "get_settings",
    "reset_settings",
]
