"""Compile every Markdoc document of a site into Hugo content files.

:class:`SiteCompiler` walks ``<content>/<language>/**/*.mdoc`` for each
configured language, parses each document with its partials, joins its
filters against the language's option catalog, and writes the built page
beside the source file (``colors.mdoc`` becomes ``colors.md``).

Hard failures (missing files, malformed partial tags, invalid front matter or
option files) abort the run. Node-level parsing errors and manifest problems
are gathered per file and returned to the caller.

Example
-------
>>> from pathlib import Path
>>> from mdoc_pages.compiler import SiteCompiler
>>> from mdoc_pages.config import load_integration_config
>>> config = load_integration_config(Path("site/mdoc.yaml"))  # doctest: +SKIP
>>> result = SiteCompiler(config).run()  # doctest: +SKIP
>>> result.has_errors  # doctest: +SKIP
False
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from mdoc_pages._constants import MDOC_SUFFIX
from mdoc_pages.builder import PageBuilder
from mdoc_pages.file_parser import ParsingError, parse_mdoc_file
from mdoc_pages.filters import (
    build_page_filters_manifest,
    get_filter_options_for_page,
    load_allowlist_from_lang_dir,
    load_filters_config_from_lang_dir,
)
from mdoc_pages.logging import get_logger

if typ.TYPE_CHECKING:
    from pathlib import Path

    from mdoc_pages.config import IntegrationConfig
    from mdoc_pages.filters import Allowlist, FilterOptionsConfig

logger = get_logger("compiler")


def format_parsing_error(error: ParsingError) -> str:
    """Return a one-line description of a parsing error with 1-based lines."""
    start, end = error.lines
    first = start + 1
    last = max(end, first)
    where = f"line {first}" if first == last else f"lines {first}-{last}"
    return f"{where}: {error.message}"


@dc.dataclass(slots=True)
class CompilationResult:
    """Files written during a run and the problems found per source file."""

    written: list[Path] = dc.field(default_factory=list)
    errors: dict[Path, list[str]] = dc.field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        """Return ``True`` when any file reported a problem."""
        return any(self.errors.values())


class SiteCompiler:
    """Compile all documents described by an integration configuration."""

    def __init__(
        self, config: IntegrationConfig, *, builder: PageBuilder | None = None
    ) -> None:
        self.config = config
        self.builder = builder or PageBuilder()

    def run(self) -> CompilationResult:
        """Build and write every document for every configured language."""
        return self._compile(write=True)

    def check(self) -> CompilationResult:
        """Parse and validate every document without writing output."""
        return self._compile(write=False)

    def _compile(self, *, write: bool) -> CompilationResult:
        result = CompilationResult()
        for language in self.config.languages:
            content_dir = self.config.language_content_dir(language)
            if not content_dir.is_dir():
                logger.warning("no content directory for '%s': %s", language, content_dir)
                continue
            options_dir = self.config.language_options_dir(language)
            allowlist = load_allowlist_from_lang_dir(options_dir)
            catalog = load_filters_config_from_lang_dir(options_dir, allowlist)
            for source in sorted(content_dir.rglob(f"*{MDOC_SUFFIX}")):
                self._compile_file(
                    source,
                    language=language,
                    allowlist=allowlist,
                    catalog=catalog,
                    result=result,
                    write=write,
                )
        return result

    def _compile_file(
        self,
        source: Path,
        *,
        language: str,
        allowlist: Allowlist,
        catalog: FilterOptionsConfig,
        result: CompilationResult,
        write: bool,
    ) -> None:
        logger.debug("compiling %s", source)
        parsed = parse_mdoc_file(source, self.config.dirs.partials)
        manifest = build_page_filters_manifest(parsed.frontmatter, catalog, allowlist)
        problems = [format_parsing_error(error) for error in parsed.errors]
        problems.extend(manifest.errors)
        if write:
            built = self.builder.build(
                parsed_file=parsed,
                filter_options=get_filter_options_for_page(parsed.frontmatter, catalog),
                site_config=self.config,
                filters_manifest=manifest,
                language=language,
            )
            output_path = source.with_suffix(self.config.output_suffix)
            output_path.write_text(built.markdown, encoding="utf-8")
            result.written.append(output_path)
        if problems:
            for problem in problems:
                logger.debug("%s: %s", source, problem)
            result.errors[source] = problems


__all__ = ["CompilationResult", "SiteCompiler", "format_parsing_error"]
