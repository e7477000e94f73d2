"""Command line interface for iam2cfn."""

from .export import cli, main

__all__ = ["cli", "main"]
