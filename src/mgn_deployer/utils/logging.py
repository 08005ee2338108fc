"""Logging helpers for the deployer CLI."""

from __future__ import annotations

import logging
import os
from typing import Optional

_LOGGING_CONFIGURED = False

# RPC 库在 DEBUG 级别会打印每个请求
_NOISY_LOGGERS = ("web3", "urllib3", "asyncio")


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger, configuring the root handler on first use.

    The initial level comes from ``MGN_DEPLOYER_LOG_LEVEL`` (default INFO).
    """
    global _LOGGING_CONFIGURED
    if not _LOGGING_CONFIGURED:
        level_name = os.getenv("MGN_DEPLOYER_LOG_LEVEL", "INFO").upper()
        logging.basicConfig(
            level=getattr(logging, level_name, logging.INFO),
            format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        for noisy in _NOISY_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)
        _LOGGING_CONFIGURED = True
    return logging.getLogger(name)


def set_verbose(verbose: bool) -> None:
    """Switch the root logger to DEBUG (``--verbose``); otherwise leave it alone."""
    get_logger()
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("web3").setLevel(logging.INFO)
