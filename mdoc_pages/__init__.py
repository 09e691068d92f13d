"""Compile Markdoc documents and their partials into Hugo content files.

This package exposes the CLI entry points used by ``mdoc-pages`` together
with the parsing pipeline: document parsing, front matter validation,
recursive partial resolution, and error collection.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``parse_mdoc_file``: Parse one document with its partials.

Examples
--------
>>> from mdoc_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main
from .file_parser import ParsedFile, ParsingError, parse_mdoc_file

__all__ = ["ParsedFile", "ParsingError", "app", "main", "parse_mdoc_file"]
