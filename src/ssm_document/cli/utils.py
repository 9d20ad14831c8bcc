"""
CLI utility helpers: output formatting and registry pre-flight.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from ssm_document.core.errors import DocumentToolError, MissingCredentialsError
from ssm_document.core.logging import get_logger
from ssm_document.registry import SSMDocumentRegistry, create_session, get_caller_account_id, get_caller_region

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    """Global options shared by every command (stored on ``ctx.obj``)."""

    profile: str | None = None
    region: str | None = None
    config_file: str = "document.yml"
    config_parser: str = "yml"


# ── Output helpers ───────────────────────────────────────────────────────


def echo_progress(line: str) -> None:
    """Print a plain progress line; ``[name]`` prefixes are not markup."""
    console.print(line, markup=False, highlight=False)


def fail(error: Exception) -> NoReturn:
    """Print ``error`` to stderr and exit with status 1."""
    if isinstance(error, DocumentToolError):
        logger.debug("cli.failed", **error.to_dict())
    err_console.print(f"[bold red]Error[/bold red]: {escape(str(error))}")
    raise typer.Exit(code=1)


# ── Registry helper ──────────────────────────────────────────────────────


def connect_registry(state: CliState) -> SSMDocumentRegistry:
    """Build the shared registry client after checking the caller identity.

    Raises:
        MissingCredentialsError: No account id could be resolved.
    """
    session = create_session(state.profile, state.region)
    account_id = get_caller_account_id(session)
    if account_id is None:
        raise MissingCredentialsError()

    logger.info("cli.caller_identity", account_id=account_id, region=get_caller_region(session))
    return SSMDocumentRegistry(session)
