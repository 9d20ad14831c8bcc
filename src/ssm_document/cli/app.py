"""
Root Typer application for the ssm-document CLI.

Global options (profile, region, config discovery, logging) are handled by
the root callback and shared with commands through ``ctx.obj``.
"""

from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

import typer
from typer import Typer

from ssm_document.cli.commands import deploy, remove
from ssm_document.cli.utils import CliState
from ssm_document.core.envfiles import ENV_SELECTOR, load_dotenv
from ssm_document.core.logging import configure_logging, get_logger
from ssm_document.core.settings import get_settings, reset_settings

logger = get_logger(__name__)

app = Typer(
    name="ssm-document",
    help="AWS Systems Manager document helper: deploy and remove SSM documents.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        try:
            v = pkg_version("ssm-document")
        except PackageNotFoundError:
            from ssm_document import __version__ as v
        typer.echo(f"ssm-document {v}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    profile: str | None = typer.Option(
        None,
        "--profile",
        "-p",
        envvar=["AWS_PROFILE", "AWS_DEFAULT_PROFILE"],
        help="AWS profile name.",
    ),
    region: str | None = typer.Option(
        None,
        "--region",
        "-r",
        envvar=["AWS_REGION", "AWS_DEFAULT_REGION"],
        help="AWS region.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config-file",
        "--cf",
        envvar="SSM_DOCUMENT_CONFIG_FILE",
        help="Config file name (glob).  [default: document.yml]",
    ),
    config_parser: str | None = typer.Option(
        None,
        "--config-parser",
        "--cp",
        envvar="SSM_DOCUMENT_CONFIG_PARSER",
        help='Config file parser, valid values are "yml" or "json".  [default: yml]',
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Deploy and remove AWS Systems Manager documents."""
    settings = get_settings()

    level = "DEBUG" if verbose else (log_level or settings.log_level)
    configure_logging(level=level, json_format=settings.json_logs)

    ctx.obj = CliState(
        profile=profile,
        region=region,
        config_file=config_file or settings.config_file,
        config_parser=config_parser or settings.config_parser,
    )
    logger.debug("cli.options", profile=profile, region=region, config_file=ctx.obj.config_file)


# ── Command registration ─────────────────────────────────────────────────

app.command("deploy")(deploy)
app.command("up", hidden=True, help="Alias of deploy.")(deploy)
app.command("remove")(remove)
app.command("delete", hidden=True, help="Alias of remove.")(remove)
app.command("down", hidden=True, help="Alias of remove.")(remove)


def run() -> None:
    """Console-script entry point: load ``.env`` then dispatch."""
    loaded = load_dotenv(env=os.environ.get(ENV_SELECTOR))
    if loaded is not None:
        reset_settings()
    app()
