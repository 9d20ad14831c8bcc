"""Document config discovery and parsing.

Search paths are either directories or config files:

* a directory is walked recursively and every file whose basename matches
  the ``config_file`` glob (default ``document.yml``) is loaded;
* a file is loaded directly whatever its name.

Each config file is read, ``$VAR`` / ``${VAR}`` references are replaced with
values from the environment (unset variables become empty strings), and the
result is parsed with the configured parser into a ``DocumentDescriptor``.
The document name defaults to the config file stem, and a relative ``file``
reference is rewritten relative to the config file's directory.
"""

from __future__ import annotations

import fnmatch
import json
import os
import re
import time
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ssm_document.core.errors import (
    ConfigError,
    DocumentsNotFoundError,
    InvalidConfigError,
    ParserNotSupportedError,
)
from ssm_document.core.logging import get_logger
from ssm_document.documents.models import DocumentDescriptor

logger = get_logger(__name__)

SEARCH_PATH_ENV = "SSM_DOCUMENT_PATH"

_ENV_REF_RE = re.compile(r"\$\{(?P<braced>[^}]*)\}|\$(?P<bare>[A-Za-z_][A-Za-z0-9_]*)")


def interpolate_env(text: str, environ: Mapping[str, str] | None = None) -> str:
    """Replace ``$VAR`` and ``${VAR}`` with environment values (unset → ``""``)."""
    env = os.environ if environ is None else environ

    def _replace(match: re.Match[str]) -> str:
        name = match.group("braced") if match.group("braced") is not None else match.group("bare")
        return env.get(name, "")

    return _ENV_REF_RE.sub(_replace, text)


def parse_config(text: str, parser: str) -> dict[str, Any]:
    """Parse config text with the ``json``, ``yml`` or ``yaml`` parser."""
    parser = parser.lower()
    try:
        if parser == "json":
            data = json.loads(text)
        elif parser in ("yml", "yaml"):
            data = yaml.safe_load(text)
        else:
            raise ParserNotSupportedError(parser)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config with {parser} parser: {e}", cause=e)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")
    return data


def load_document_file(path: Path, parser: str) -> DocumentDescriptor:
    """Load a single document config file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", cause=e).with_context(path=str(path))

    data = parse_config(interpolate_env(raw), parser)
    data.setdefault("name", path.stem)

    file_ref = data.get("file")
    if file_ref:
        data["file"] = str(path.parent / str(file_ref))

    try:
        document = DocumentDescriptor.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigError(
            str(path),
            data.get("name"),
            message=f"Invalid document config {path}: {e}",
        ) from e

    logger.debug("config.document_loaded", document=document.name, path=str(path))
    return document


def load_documents_from_dir(directory: Path, config_file: str, parser: str) -> list[DocumentDescriptor]:
    """Walk ``directory`` and load every file whose name matches ``config_file``."""
    start = time.monotonic()
    files_count = 0
    documents: list[DocumentDescriptor] = []

    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for file_name in sorted(files):
            files_count += 1
            if not fnmatch.fnmatchcase(file_name, config_file):
                continue
            documents.append(load_document_file(Path(root) / file_name, parser))

    if not documents:
        elapsed = time.monotonic() - start
        raise DocumentsNotFoundError(
            f"No documents found in path {directory} ({files_count} files scanned in {elapsed:.3f}s)"
        ).with_context(path=str(directory))

    return documents


def default_search_paths(paths: Iterable[str] | None = None) -> list[str]:
    """Explicit paths, else ``SSM_DOCUMENT_PATH``, else the working directory."""
    explicit = [p for p in (paths or []) if p]
    if explicit:
        return explicit
    env_path = os.environ.get(SEARCH_PATH_ENV, "")
    if env_path:
        return [env_path]
    return ["."]


def load_documents(
    paths: Iterable[str] | None = None,
    config_file: str = "document.yml",
    parser: str = "yml",
) -> list[DocumentDescriptor]:
    """Load every document declared under the given search paths, in order."""
    documents: list[DocumentDescriptor] = []

    for search_path in default_search_paths(paths):
        path = Path(search_path)
        if path.is_dir():
            documents.extend(load_documents_from_dir(path, config_file, parser))
        elif path.is_file():
            documents.append(load_document_file(path, parser))
        elif not path.exists():
            raise ConfigError(f"Path {search_path} does not exist").with_context(path=search_path)
        else:
            raise ConfigError(f"Path {search_path} has an unsupported type").with_context(path=search_path)

    logger.info("config.documents_loaded", count=len(documents))
    return documents


__all__ = [
    "default_search_paths",
    "interpolate_env",
    "load_document_file",
    "load_documents",
    "load_documents_from_dir",
    "parse_config",
]
