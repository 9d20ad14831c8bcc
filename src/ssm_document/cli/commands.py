"""
CLI: ``ssm-document deploy`` / ``ssm-document remove``.

Usage::

    ssm-document deploy                      # documents under . (or $SSM_DOCUMENT_PATH)
    ssm-document deploy ./docs --all         # every document under ./docs, no prompt
    ssm-document up ./docs/demo/document.yml # single config file

    ssm-document remove --all --yes          # unshare/delete without prompts
    ssm-document down ./docs                 # alias
"""

from __future__ import annotations

import typer

from ssm_document.cli.prompts import confirm_removal, select_documents
from ssm_document.cli.utils import CliState, connect_registry, console, echo_progress, fail
from ssm_document.core.errors import DocumentToolError
from ssm_document.core.logging import get_logger
from ssm_document.core.settings import DocumentToolSettings, get_settings
from ssm_document.documents.loader import load_documents
from ssm_document.execution.results import BatchResult
from ssm_document.execution.service import deploy_documents, remove_documents

logger = get_logger(__name__)

PATHS_ARGUMENT = typer.Argument(None, help="Directories or config files to load documents from.", show_default=False)
ALL_OPTION = typer.Option(False, "--all", "-a", help="Select all documents.")
YES_OPTION = typer.Option(False, "--yes", "-y", help="Answer yes for all confirmations.")


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj if isinstance(ctx.obj, CliState) else CliState()


def _settings_paths(settings: DocumentToolSettings) -> list[str] | None:
    return [settings.path] if settings.path else None


def _print_summary(result: BatchResult) -> None:
    console.print(f"[green]✓[/green] {result.summary}")


def deploy(
    ctx: typer.Context,
    paths: list[str] | None = PATHS_ARGUMENT,
    select_all: bool = ALL_OPTION,
    assume_yes: bool = YES_OPTION,
    parallels: int | None = typer.Option(
        None, "--parallels", min=1, help="Max deploys executed in parallel.  [default: 5]"
    ),
) -> None:
    """Deploy SSM documents.

    Creates missing documents, updates changed ones, then syncs sharing
    permissions and tags.
    """
    state = _state(ctx)
    settings = get_settings()

    try:
        registry = connect_registry(state)
        documents = load_documents(paths or _settings_paths(settings), state.config_file, state.config_parser)
        documents = select_documents(documents, select_all)
        result = deploy_documents(
            registry,
            documents,
            parallels or settings.parallels,
            chunk_pause=settings.chunk_pause_seconds,
            reporter=echo_progress,
        )
    except DocumentToolError as e:
        fail(e)

    _print_summary(result)


def remove(
    ctx: typer.Context,
    paths: list[str] | None = PATHS_ARGUMENT,
    select_all: bool = ALL_OPTION,
    assume_yes: bool = YES_OPTION,
    parallels: int | None = typer.Option(
        None, "--parallels", min=1, help="Max removes executed in parallel.  [default: 5]"
    ),
) -> None:
    """Remove SSM documents.

    Shared documents are unshared first; run remove again to delete them.
    """
    state = _state(ctx)
    settings = get_settings()

    try:
        registry = connect_registry(state)
        documents = load_documents(paths or _settings_paths(settings), state.config_file, state.config_parser)
        documents = select_documents(documents, select_all)
        confirm_removal(len(documents), assume_yes)
        result = remove_documents(
            registry,
            documents,
            parallels or settings.parallels,
            chunk_pause=settings.chunk_pause_seconds,
            reporter=echo_progress,
        )
    except DocumentToolError as e:
        fail(e)

    _print_summary(result)
