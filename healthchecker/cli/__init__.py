"""Health checker command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``health-checker`` script).
"""

from healthchecker.cli.main import cli

__all__ = ["cli"]
