"""
acc8 Command-Line Interface
===========================

This package provides the command-line tools for acc8:

- **acc8c**: compiler (with token/AST dumps and a --run mode on the
  reference machine)

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["acc8c"]
