#!/usr/bin/env python3
"""Main CLI entry point for iam2cfn."""

from .export import main

if __name__ == "__main__":
    main()
