"""stmtnorm Command Line Interface.

- main: parse / analyze / validate statement files
"""

from .main import main

__all__ = ["main"]
