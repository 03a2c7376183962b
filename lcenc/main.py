"""Public entry points for the engine and the command line.

The codec lives in `engine.py`; the command line in `cli.py`.
"""

from .engine import lcenc
from .cli import cli, main

__all__ = ["lcenc", "cli", "main"]
