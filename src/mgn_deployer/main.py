"""Entry point for the mgn-deployer CLI."""

from __future__ import annotations

import sys

from .cli import run_cli
from .utils.logging import get_logger

logger = get_logger(__name__)


def app_main() -> None:
    try:
        exit_code = run_cli()
    except KeyboardInterrupt:
        logger.error("Interrupted; re-run the same command to resume from the checkpoint")
        exit_code = 130
    except Exception as exc:
        logger.error("❌ %s: %s", type(exc).__name__, exc)
        logger.debug("Traceback", exc_info=True)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    app_main()
