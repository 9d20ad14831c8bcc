"""Allow ``python -m ssm_document``."""

from ssm_document.cli.app import run

if __name__ == "__main__":
    run()
