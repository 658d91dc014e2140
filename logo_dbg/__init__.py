"""
logo-dbg CLI package.

Interactive console host for the stepped execution bridge.  Use
``python -m logo_dbg`` or the ``logo-dbg`` script, pointing ``--interpreter``
at a ``module:factory`` that builds the Logo interpreter.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
