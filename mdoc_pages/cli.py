"""Cyclopts CLI entrypoint for compiling Markdoc sites into Hugo content.

The ``mdoc-pages`` console script defined here can compile every ``.mdoc``
document of a site into Hugo-ready Markdown (``build``) or parse and validate
the documents without writing anything (``check``). Both commands read the
integration configuration from ``mdoc.yaml`` unless told otherwise.

Examples
--------
Build every page for the default configuration:

>>> from mdoc_pages.cli import main
>>> main()  # doctest: +SKIP

Validate a site from a custom configuration file:

>>> from mdoc_pages.cli import app
>>> app(["check", "--config", "site/mdoc.yaml"])  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .compiler import CompilationResult, SiteCompiler
from .config import load_integration_config
from .logging import configure_logging

DEFAULT_CONFIG = Path("mdoc.yaml")

app = App(name="mdoc-pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _report_errors(result: CompilationResult) -> None:
    for source, problems in result.errors.items():
        for problem in problems:
            print(f"{_format_path(source)}: {problem}")


@app.command(help="Compile Markdoc documents into Hugo content files.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to integration config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    strict: typ.Annotated[
        bool, Parameter(help="Exit non-zero when any document reports errors")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Compile every configured language and print the written paths.

    Parameters
    ----------
    config : Path, optional
        Path to the ``mdoc.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    strict : bool, optional
        When ``True``, exit with status 1 if any document reported parsing or
        filter errors. Pages are still written.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    SystemExit
        With status 1 when ``strict`` is set and errors were reported.
    """
    configure_logging(verbose=verbose)
    integration_config = load_integration_config(config)
    result = SiteCompiler(integration_config).run()
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    _report_errors(result)
    if strict and result.has_errors:
        raise SystemExit(1)


@app.command(help="Parse and validate Markdoc documents without writing output.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to integration config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Report every parsing and filter error found across the site.

    Raises
    ------
    SystemExit
        With status 1 when any document reported errors.
    """
    configure_logging(verbose=verbose)
    integration_config = load_integration_config(config)
    result = SiteCompiler(integration_config).check()
    _report_errors(result)
    if result.has_errors:
        raise SystemExit(1)
    print("no errors found")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``mdoc-pages`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
