"""Entry point for running bgit as a module.

This module allows bgit to be run as a Python module using the -m flag:
    python -m bgit
"""

from . import cli

if __name__ == "__main__":
    cli._main()
