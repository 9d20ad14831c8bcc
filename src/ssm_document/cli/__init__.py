"""
CLI layer for ssm-document.

Provides a Typer application that delegates to the execution layer
(``ssm_document.execution``).  This package only handles terminal
transport: argument parsing, prompts and coloured output.

Entry point::

    ssm-document --help
"""

from ssm_document.cli.app import app, run

__all__ = ["app", "run"]
