"""FlowBoard CLI.

Re-exports the CLI from flowboard.interfaces.cli so ``python -m flowboard.cli``
works.
"""

from flowboard.interfaces.cli import app
from flowboard.interfaces.cli.main import main

__all__ = ["app", "main"]

if __name__ == "__main__":
    main()
