"""
Document descriptors, content resolution, desired-vs-live diffing and
config loading.
"""

from ssm_document.documents.content import ResolvedContent, build_shell_content, resolve_content
from ssm_document.documents.diff import SetDiff, TagDiff, diff_principals, diff_tags
from ssm_document.documents.models import (
    ContentSource,
    DocumentDescriptor,
    DocumentFormat,
    DocumentParameter,
    FileSource,
    InlineContentSource,
    ShellScriptSource,
)

__all__ = [
    "ContentSource",
    "DocumentDescriptor",
    "DocumentFormat",
    "DocumentParameter",
    "FileSource",
    "InlineContentSource",
    "ResolvedContent",
    "SetDiff",
    "ShellScriptSource",
    "TagDiff",
    "build_shell_content",
    "diff_principals",
    "diff_tags",
    "resolve_content",
]
