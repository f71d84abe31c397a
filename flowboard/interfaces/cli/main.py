"""Entry point for the FlowBoard CLI.

Usage:
    python -m flowboard.interfaces.cli.main

Or via installed entry point:
    flowboard <command>
"""

from flowboard.interfaces.cli import app


def main() -> None:
    """Run the FlowBoard CLI application."""
    app()


if __name__ == "__main__":
    main()
