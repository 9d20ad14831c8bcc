"""
Structured error types for ssm-document.

Every failure the tool can report is a ``DocumentToolError``.  Errors carry a
category for routing, an ``ErrorContext`` with structured metadata, and an
optional chained cause.  Per-document failures additionally carry the
reconciliation ``Stage`` they happened in, so the batch summary can tell a
content problem apart from a registry problem.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure stage
    - **Rich Context:** Errors carry the document name and AWS error code
    - **Error Chaining:** The underlying botocore/OS exception is kept as cause
    - **No Retry Semantics:** Nothing in this tool retries, so no retry flags

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                      DocumentToolError                          │
        │                  (category, context, cause)                     │
        ├─────────────────────────────────────────────────────────────────┤
        │  DocumentError (stage)      RegistryError      ConfigError      │
        │   ├ ContentReadError         └ Duplicate-       ├ MissingConfig │
        │   ├ SerializationError         ContentError     ├ InvalidConfig │
        │   ├ UnsupportedExtension                        ├ ParserNot-    │
        │   ├ NoContentError          AuthError           │  Supported    │
        │   ├ RegistryCreateUpdate     └ Missing-         └ Documents-    │
        │   ├ PermissionSyncError        Credentials        NotFound      │
        │   ├ TagSyncError                                                │
        │   └ DeleteError             SelectionError   BatchFailedError   │
        └─────────────────────────────────────────────────────────────────┘

Usage:
    from ssm_document.core.errors import ContentReadError

    try:
        text = path.read_text()
    except OSError as e:
        raise ContentReadError(f"Cannot read {path}", document=name, cause=e)

Tags:
    error-handling, exception-hierarchy, error-context, reconciliation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONTENT = "CONTENT"           # Reading or serializing document content
    REGISTRY = "REGISTRY"         # Remote document registry calls
    CONFIG = "CONFIG"             # Missing or invalid configuration
    AUTH = "AUTH"                 # Credentials / caller identity
    SELECTION = "SELECTION"       # Interactive selection and confirmation
    BATCH = "BATCH"               # Aggregate batch failure
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


class Stage(str, Enum):
    """Reconciliation stage a per-document failure originated in."""

    CONTENT = "content"
    CREATE_OR_UPDATE = "create-or-update"
    PERMISSION_SYNC = "permission-sync"
    TAG_SYNC = "tag-sync"
    DELETE = "delete"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        document: Name of the document being reconciled
        operation: ``deploy`` or ``remove``
        path: File path involved (config file, script, content file)
        aws_error_code: Error code returned by the AWS API, when known
        metadata: Additional key-value pairs
    """

    document: str | None = None
    operation: str | None = None
    path: str | None = None
    aws_error_code: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["document", "operation", "path", "aws_error_code"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DocumentToolError(Exception):
    """
    Base exception for all ssm-document errors.

    Subclasses set ``default_category`` so callers never have to pass one.

    Examples:
        >>> error = DocumentToolError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(document="demo").context.document
        'demo'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DocumentToolError:
        """
        Add context to this error (fluent API).

        Usage:
            raise RegistryError("Failed").with_context(document="demo")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# PER-DOCUMENT ERRORS
# =============================================================================


class DocumentError(DocumentToolError):
    """
    A failure that ends one document's reconciliation.

    The message is prefixed with ``[name]`` so printed batch summaries read
    the same way as the progress lines.
    """

    stage: Stage = Stage.CREATE_OR_UPDATE

    def __init__(
        self,
        message: str,
        *,
        document: str | None = None,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, category=category, context=context, cause=cause)
        if document is not None:
            self.context.document = document

    @property
    def document(self) -> str | None:
        return self.context.document

    def __str__(self) -> str:
        if self.context.document:
            return f"[{self.context.document}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["stage"] = self.stage.value
        return result


class ContentError(DocumentError):
    """Base class for content-stage failures."""

    default_category = ErrorCategory.CONTENT
    stage = Stage.CONTENT


class ContentReadError(ContentError):
    """A script or content file could not be read."""


class SerializationError(ContentError):
    """Structured content could not be encoded to JSON."""


class UnsupportedExtensionError(ContentError):
    """A referenced content file has an extension the registry cannot take."""


class NoContentError(ContentError):
    """The descriptor declares neither a shell flag, inline content nor a file."""


class RegistryCreateUpdateError(DocumentError):
    """Creating, updating or promoting a document version failed."""

    default_category = ErrorCategory.REGISTRY
    stage = Stage.CREATE_OR_UPDATE


class PermissionSyncError(DocumentError):
    """Reading or modifying shared principals failed."""

    default_category = ErrorCategory.REGISTRY
    stage = Stage.PERMISSION_SYNC


class TagSyncError(DocumentError):
    """Reading, adding or removing tags failed."""

    default_category = ErrorCategory.REGISTRY
    stage = Stage.TAG_SYNC


class DeleteError(DocumentError):
    """Deleting a document failed."""

    default_category = ErrorCategory.REGISTRY
    stage = Stage.DELETE


# =============================================================================
# REGISTRY ERRORS
# =============================================================================


class RegistryError(DocumentToolError):
    """A call to the remote document registry failed."""

    default_category = ErrorCategory.REGISTRY

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, context=context, cause=cause)
        if code is not None:
            self.context.aws_error_code = code

    @property
    def code(self) -> str | None:
        return self.context.aws_error_code


class DuplicateContentError(RegistryError):
    """The submitted content is identical to the latest document version."""


# =============================================================================
# CONFIGURATION / AUTH / SELECTION ERRORS
# =============================================================================


class ConfigError(DocumentToolError):
    """Base class for configuration errors."""

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        super().__init__(message or f"Missing required configuration: {key}")
        self.context.metadata["key"] = key


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")
        self.context.metadata["key"] = key
        self.context.metadata["value"] = str(value)


class ParserNotSupportedError(ConfigError):
    """The configured config-file parser is not ``json``, ``yml`` or ``yaml``."""

    def __init__(self, parser: str):
        super().__init__(f"Parser {parser} not supported")
        self.context.metadata["parser"] = parser


class DocumentsNotFoundError(ConfigError):
    """A search directory contained no matching document config files."""


class AuthError(DocumentToolError):
    """Base class for authentication errors."""

    default_category = ErrorCategory.AUTH


class MissingCredentialsError(AuthError):
    """No caller identity could be resolved; nothing may run."""

    def __init__(self, message: str = "No valid AWS credentials found", cause: Exception | None = None):
        super().__init__(message, cause=cause)


class SelectionError(DocumentToolError):
    """Nothing was selected, or a destructive operation was not confirmed."""

    default_category = ErrorCategory.SELECTION


class BatchFailedError(DocumentToolError):
    """One or more documents in a batch failed."""

    default_category = ErrorCategory.BATCH

    def __init__(self, failures: int, total: int, operation: str):
        super().__init__(f"{failures} of {total} documents failed {operation}")
        self.failures = failures
        self.total = total
        self.operation = operation


__all__ = [
    "AuthError",
    "BatchFailedError",
    "ConfigError",
    "ContentError",
    "ContentReadError",
    "DeleteError",
    "DocumentError",
    "DocumentToolError",
    "DocumentsNotFoundError",
    "DuplicateContentError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidConfigError",
    "MissingConfigError",
    "MissingCredentialsError",
    "NoContentError",
    "ParserNotSupportedError",
    "PermissionSyncError",
    "RegistryCreateUpdateError",
    "RegistryError",
    "SelectionError",
    "SerializationError",
    "Stage",
    "TagSyncError",
    "UnsupportedExtensionError",
]
