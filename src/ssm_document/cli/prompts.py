"""
Interactive document selection and removal confirmation.

Both prompts are skipped by flags (``--all`` / ``--yes``) so that every
command can run unattended.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ssm_document.core.errors import SelectionError
from ssm_document.documents.models import DocumentDescriptor

_SEPARATORS = re.compile(r"[,\s]+")


def parse_selection(answer: str, count: int) -> list[int]:
    """Turn ``"1, 3 4"`` (1-based) or ``"all"`` into 0-based indexes, in order."""
    tokens = [t for t in _SEPARATORS.split(answer.strip()) if t]
    if any(t.lower() == "all" for t in tokens):
        return list(range(count))

    indexes: list[int] = []
    for token in tokens:
        if not token.isdigit() or not 1 <= int(token) <= count:
            raise SelectionError(f"Invalid selection {token!r}, expected a number between 1 and {count}")
        index = int(token) - 1
        if index not in indexes:
            indexes.append(index)
    return indexes


def _documents_table(documents: Sequence[DocumentDescriptor]) -> Table:
    table = Table(title="Documents", show_lines=False, pad_edge=False)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Name", overflow="fold")
    table.add_column("Type")
    table.add_column("Shared with", overflow="fold")
    for number, document in enumerate(documents, start=1):
        table.add_row(
            str(number),
            document.name,
            document.type,
            ", ".join(document.authorized_principals) or "-",
        )
    return table


def select_documents(
    documents: Sequence[DocumentDescriptor],
    select_all: bool = False,
    *,
    console: Console | None = None,
) -> list[DocumentDescriptor]:
    """Ask which documents to operate on.

    A single document, or ``select_all``, skips the prompt.

    Raises:
        SelectionError: Nothing was selected.
    """
    if len(documents) == 1 or select_all:
        return list(documents)

    console = console or Console()
    console.print(_documents_table(documents))
    answer = Prompt.ask(
        "Select documents (numbers separated by comma or space, or 'all')",
        console=console,
        default="",
        show_default=False,
    )

    indexes = parse_selection(answer, len(documents))
    if not indexes:
        raise SelectionError("No documents selected")
    return [documents[i] for i in indexes]


def confirm_removal(count: int, assume_yes: bool = False, *, console: Console | None = None) -> None:
    """Ask before removing ``count`` documents.

    Raises:
        SelectionError: The removal was not confirmed.
    """
    if assume_yes:
        return

    confirmed = Confirm.ask(
        f"Are you sure you want to remove {count} documents?",
        console=console or Console(),
        default=False,
    )
    if not confirmed:
        raise SelectionError("Not confirmed documents remove, skip operation")


__all__ = ["confirm_removal", "parse_selection", "select_documents"]
