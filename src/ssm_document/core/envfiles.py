"""
Environment-file loading.

Before any command runs, ``.env`` (or ``.env.<name>`` when
``SSM_DOCUMENT_ENV=<name>`` is set) in the working directory is exported
into the process environment.  Variables that are already set are left
alone, so real environment variables always win over file values.
"""

from __future__ import annotations

import os
from pathlib import Path

from ssm_document.core.logging import get_logger

logger = get_logger(__name__)

ENV_SELECTOR = "SSM_DOCUMENT_ENV"

_QUOTES = ('"', "'")


def env_file_name(env: str | None = None) -> str:
    """Return ``.env`` or ``.env.<env>`` for the selected environment."""
    env = env if env is not None else os.environ.get(ENV_SELECTOR, "")
    return f".env.{env}" if env else ".env"


def _split_assignment(line: str) -> tuple[str, str] | None:
    key, sep, value = line.removeprefix("export ").partition("=")
    key = key.strip()
    if not sep or not key.isidentifier():
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return key, value[1:-1]
    return key, value.split(" #", 1)[0].rstrip()


def parse_env_file(path: Path) -> dict[str, str]:
    """Read ``KEY=value`` lines; comments, blanks and junk lines are skipped."""
    values: dict[str, str] = {}
    for number, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        assignment = _split_assignment(line)
        if assignment is None:
            logger.debug("envfile.line_skipped", path=str(path), line=number)
            continue
        key, value = assignment
        values[key] = value
    return values


def load_dotenv(directory: Path | None = None, env: str | None = None) -> Path | None:
    """Export variables from the selected env file into ``os.environ``.

    Returns the loaded file, or ``None`` when it does not exist.
    """
    path = (directory or Path.cwd()) / env_file_name(env)
    if not path.is_file():
        return None

    for key, value in parse_env_file(path).items():
        os.environ.setdefault(key, value)
    logger.debug("envfile.loaded", path=str(path))
    return path
