"""CLI command modules."""

from . import config, export, view

__all__ = [
    "config",
    "export",
    "view",
]
