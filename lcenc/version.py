"""Runtime engine version."""

from .engine import lcenc

__version__ = lcenc.ENGINE_VERSION

__all__ = ["__version__"]
