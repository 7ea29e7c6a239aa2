"""
Falkor command-line runner.
"""

from .main import main

__all__ = ["main"]
