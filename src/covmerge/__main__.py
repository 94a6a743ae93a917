"""Allow ``python -m covmerge``."""

from covmerge.cli import cli

if __name__ == "__main__":
    cli()
