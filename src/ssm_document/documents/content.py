"""Content resolution.

Turns a descriptor's content source into the ``(format, payload)`` pair
submitted to the registry:

    ShellScriptSource   → script lines wrapped in a runShellScript step → JSON
    InlineContentSource → inline mapping                                 → JSON
    FileSource          → by extension: .txt TEXT, .yml/.yaml YAML,
                          .json JSON, .sh → shell wrapping
    None                → NoContentError
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ssm_document.core.errors import (
    ContentReadError,
    NoContentError,
    SerializationError,
    UnsupportedExtensionError,
)
from ssm_document.documents.models import (
    DocumentDescriptor,
    DocumentFormat,
    FileSource,
    InlineContentSource,
    ShellScriptSource,
)

SHELL_SCHEMA_VERSION = "2.2"
SHELL_ACTION = "aws:runShellScript"
SHELL_STEP_NAME = "RunShellScript"

EXTENSION_FORMATS: dict[str, DocumentFormat | None] = {
    ".txt": DocumentFormat.TEXT,
    ".yml": DocumentFormat.YAML,
    ".yaml": DocumentFormat.YAML,
    ".json": DocumentFormat.JSON,
    ".sh": None,  # wrapped as a shell document
}


@dataclass(frozen=True)
class ResolvedContent:
    """Final document body and the format it is written in."""

    format: DocumentFormat
    payload: str


def _read_text(descriptor: DocumentDescriptor, path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContentReadError(
            f"Cannot read content file {path}: {e}",
            document=descriptor.name,
            cause=e,
        ).with_context(path=str(path))


def _to_json(descriptor: DocumentDescriptor, content: Any) -> str:
    try:
        return json.dumps(content, separators=(",", ":"), ensure_ascii=False, default=str)
    except (TypeError, ValueError) as e:
        raise SerializationError(
            f"Cannot serialize document content: {e}",
            document=descriptor.name,
            cause=e,
        )


def build_shell_content(descriptor: DocumentDescriptor, path: Path) -> dict[str, Any]:
    """Wrap a shell script into a single-step command document."""
    script = _read_text(descriptor, path)

    inputs: dict[str, Any] = {
        "workingDirectory": descriptor.working_directory,
        "runCommand": script.split(os.linesep),
    }
    if descriptor.timeout_seconds:
        inputs["timeoutSeconds"] = descriptor.timeout_seconds

    content: dict[str, Any] = {
        "schemaVersion": SHELL_SCHEMA_VERSION,
        "description": descriptor.description,
    }
    if descriptor.parameters:
        content["parameters"] = {
            name: parameter.to_content() for name, parameter in descriptor.parameters.items()
        }
    content["mainSteps"] = [
        {
            "action": SHELL_ACTION,
            "name": SHELL_STEP_NAME,
            "inputs": inputs,
        }
    ]
    return content


def resolve_content(descriptor: DocumentDescriptor) -> ResolvedContent:
    """Derive the registry format and payload for a descriptor.

    Raises:
        ContentReadError: script or content file unreadable
        SerializationError: structured content could not be encoded
        UnsupportedExtensionError: file extension has no registry format
        NoContentError: nothing to deploy
    """
    source = descriptor.source

    if isinstance(source, ShellScriptSource):
        return _resolve_shell(descriptor, source.path)

    if isinstance(source, InlineContentSource):
        return ResolvedContent(DocumentFormat.JSON, _to_json(descriptor, source.content))

    if isinstance(source, FileSource):
        extension = source.path.suffix.lower()
        if extension not in EXTENSION_FORMATS:
            raise UnsupportedExtensionError(
                f"Provided file {source.path} has an unsupported extension",
                document=descriptor.name,
            ).with_context(path=str(source.path))

        document_format = EXTENSION_FORMATS[extension]
        if document_format is None:
            return _resolve_shell(descriptor, source.path)
        return ResolvedContent(document_format, _read_text(descriptor, source.path))

    raise NoContentError("Cannot generate SSM document: no content, file or shell script declared", document=descriptor.name)


def _resolve_shell(descriptor: DocumentDescriptor, path: Path) -> ResolvedContent:
    content = build_shell_content(descriptor, path)
    return ResolvedContent(DocumentFormat.JSON, _to_json(descriptor, content))
