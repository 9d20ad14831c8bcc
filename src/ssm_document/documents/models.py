"""Document descriptor models.

A ``DocumentDescriptor`` is the desired state of one registry document, as
declared in a ``document.yml`` (or JSON) config file::

    name: restart-nginx
    type: Command
    file: restart.sh
    workingDirectory: /etc/nginx
    timeoutSeconds: 60
    accountIds:
      - "111111111111, 222222222222"
    tags:
      team: platform

Key Concepts:
    ContentSource: Tagged variant telling the content resolver where the
        document body comes from.  It is decided once, when the descriptor
        is validated, using the priority chain shell flag > inline content
        > file reference.
    authorized_principals: ``accountIds`` exploded on commas, trimmed and
        de-duplicated.  Config files commonly inject a comma-joined list
        from a single environment variable.

Descriptors are frozen; the loader normalizes ``file`` relative to the
config file before validation and nothing mutates them afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SHELL_FORMAT_FLAG = "SHELL"


class DocumentFormat(str, Enum):
    """Content formats accepted by the document registry."""

    JSON = "JSON"
    YAML = "YAML"
    TEXT = "TEXT"


# ---------------------------------------------------------------------------
# Content sources
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShellScriptSource:
    """Shell script wrapped into a single ``aws:runShellScript`` step."""

    path: Path


@dataclass(frozen=True)
class InlineContentSource:
    """Structured content declared directly in the config file."""

    content: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FileSource:
    """Content file classified by its extension at resolution time."""

    path: Path


ContentSource = ShellScriptSource | InlineContentSource | FileSource


def select_content_source(
    format_flag: str | None,
    content: dict[str, Any] | None,
    file: str | None,
) -> ContentSource | None:
    """Pick the content source for the raw descriptor fields.

    The checks form a priority chain, not independent tests: the shell flag
    wins over inline content, which wins over a file reference.
    """
    if (format_flag or "").upper() == SHELL_FORMAT_FLAG:
        return ShellScriptSource(path=Path(file or ""))
    if isinstance(content, dict) and content.get("schemaVersion"):
        inline = dict(content)
        inline["schemaVersion"] = str(inline["schemaVersion"])
        return InlineContentSource(content=inline)
    if file:
        return FileSource(path=Path(file))
    return None


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


class DocumentParameter(BaseModel):
    """A document parameter declaration (``parameters:`` block)."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = "String"
    description: str = ""
    default: Any = None

    @field_validator("default", mode="before")
    @classmethod
    def _scalar_default_as_text(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return "true" if v else "false"
        if v is None or isinstance(v, (str, list, dict)):
            return v
        return str(v)

    def to_content(self) -> dict[str, Any]:
        """Serialize for the document body, dropping empty optional keys."""
        data = self.model_dump(exclude_none=True)
        if not data.get("description"):
            data.pop("description", None)
        return data


class DocumentDescriptor(BaseModel):
    """Desired state of a single registry document."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    name: str = Field(min_length=1)
    description: str = ""
    type: str = "Command"
    account_ids: list[str] = Field(default_factory=list, alias="accountIds")
    tags: dict[str, str] = Field(default_factory=dict)
    content: dict[str, Any] = Field(default_factory=dict)
    parameters: dict[str, DocumentParameter] = Field(default_factory=dict)
    working_directory: str = Field(default="", alias="workingDirectory")
    timeout_seconds: str = Field(default="", alias="timeoutSeconds")
    format: str = ""
    file: str = ""

    source: ContentSource | None = Field(default=None, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _resolve_source(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["source"] = select_content_source(
            data.get("format"),
            data.get("content"),
            data.get("file"),
        )
        return data

    @field_validator("account_ids", mode="before")
    @classmethod
    def _coerce_account_ids(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str | int):
            return [str(value)]
        if isinstance(value, list):
            return [str(item) for item in value]
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    @field_validator("content", "parameters", mode="before")
    @classmethod
    def _empty_mapping(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("timeout_seconds", "working_directory", "description", "format", "file", mode="before")
    @classmethod
    def _stringify_scalars(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def authorized_principals(self) -> tuple[str, ...]:
        """Account ids with comma-joined entries exploded, trimmed and de-duplicated."""
        seen: dict[str, None] = {}
        for entry in self.account_ids:
            for part in entry.split(","):
                part = part.strip(" ")
                if part:
                    seen.setdefault(part, None)
        return tuple(seen)

    @property
    def is_shell(self) -> bool:
        return isinstance(self.source, ShellScriptSource)


__all__ = [
    "ContentSource",
    "DocumentDescriptor",
    "DocumentFormat",
    "DocumentParameter",
    "FileSource",
    "InlineContentSource",
    "ShellScriptSource",
    "select_content_source",
]
