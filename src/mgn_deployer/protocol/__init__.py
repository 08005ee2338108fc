"""Concrete MGN deployment graphs."""

from . import core, router, tokens

__all__ = ["core", "router", "tokens"]
