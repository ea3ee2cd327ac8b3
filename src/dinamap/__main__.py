"""Entry point for python -m dinamap."""

from dinamap.cli import cli

if __name__ == "__main__":
    cli()
