#!/usr/bin/env python
"""
Thin wrapper script to invoke the commit_split CLI.

Running ``python cmsplit.py`` is equivalent to running the ``cmsplit``
console script installed via ``pyproject.toml``.
"""

from commit_split.cli import main


if __name__ == "__main__":
    main(prog_name="cmsplit")
