"""Entry point for the dm command."""

from darkmatter.core.config import setup_logging


def main():
    """Configure logging and run the CLI."""
    setup_logging()

    from darkmatter.interfaces.cli.app import run_cli

    run_cli()


if __name__ == "__main__":
    main()
