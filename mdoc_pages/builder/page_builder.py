"""Assemble a Hugo content file from a parsed Markdoc document.

:class:`PageBuilder` takes the output of
:func:`~mdoc_pages.file_parser.parse_mdoc_file`, the option sets the page can
draw from, the integration configuration, and the page's filters manifest. It
renders the document tree (inlining partials), a filter selector, the
further-reading block, and the minified filters payload into a single
Markdown file whose body is HTML.

Example
-------
>>> from mdoc_pages.builder import PageBuilder
>>> builder = PageBuilder()  # doctest: +SKIP
>>> result = builder.build(
...     parsed_file=parsed,
...     filter_options=options,
...     site_config=config,
...     filters_manifest=manifest,
...     language="en",
... )  # doctest: +SKIP
>>> result.markdown.startswith("---")  # doctest: +SKIP
True
"""

from __future__ import annotations

import typing as typ
from html import escape
from pathlib import Path

import msgspec.json as msgspec_json
from jinja2 import Environment, FileSystemLoader, select_autoescape

from mdoc_pages._constants import FILTERS_MANIFEST_ELEMENT_ID
from mdoc_pages.builder.image_rewriter import _build_image_rewriter
from mdoc_pages.builder.models import BuildResult
from mdoc_pages.builder.renderer import HtmlContentRenderer, MarkupRenderer

if typ.TYPE_CHECKING:
    from mdoc_pages.config import IntegrationConfig
    from mdoc_pages.file_parser import ParsedFile
    from mdoc_pages.filters import FilterOptionsConfig, PageFiltersManifest


class PageBuilder:
    """Render parsed documents into Hugo-ready Markdown files."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the builder with its Jinja environment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("page.md.jinja")

    def build(
        self,
        *,
        parsed_file: ParsedFile,
        filter_options: FilterOptionsConfig,
        site_config: IntegrationConfig,
        filters_manifest: PageFiltersManifest,
        language: str,
    ) -> BuildResult:
        """Render one page.

        Parameters
        ----------
        parsed_file : ParsedFile
            Document tree, front matter, and resolved partials.
        filter_options : dict[str, list[FilterOption]]
            Option sets the page's filters can draw from.
        site_config : IntegrationConfig
            Integration configuration (image host, highlighting style).
        filters_manifest : PageFiltersManifest
            The page's filters joined against the option catalog.
        language : str
            Language code of the page.

        Returns
        -------
        BuildResult
            The complete content file, the body HTML, and manifest errors.

        Raises
        ------
        PartialReferenceError
            If the tree references a partial missing from
            ``parsed_file.partials``.
        """
        content = HtmlContentRenderer(
            site_config.pygments_style,
            image_extension=_build_image_rewriter(site_config),
        )
        renderer = MarkupRenderer(content, parsed_file.partials)
        sections = [
            self._render_filter_selector(filters_manifest, filter_options),
            renderer.render(parsed_file.ast),
        ]
        body = "\n".join(section for section in sections if section)

        filters_json = (
            self._encode_manifest(filters_manifest)
            if filters_manifest.filters_by_id
            else ""
        )

        markdown = self.template.render(
            frontmatter=parsed_file.ast.frontmatter.strip(),
            stylesheet=content.stylesheet if renderer.has_code else "",
            language=language,
            body=body,
            further_reading=parsed_file.frontmatter.further_reading or [],
            filters_json=filters_json,
            filters_element_id=FILTERS_MANIFEST_ELEMENT_ID,
        )
        return BuildResult(
            markdown=markdown, html=body, errors=list(filters_manifest.errors)
        )

    @staticmethod
    def _encode_manifest(manifest: PageFiltersManifest) -> str:
        """Return the minified filters JSON, safe to embed in a script element."""
        payload = msgspec_json.encode(manifest.minified()).decode("utf-8")
        return payload.replace("</", "<\\/")

    @staticmethod
    def _render_filter_selector(
        manifest: PageFiltersManifest, filter_options: FilterOptionsConfig
    ) -> str:
        """Render a static selector listing each filter's options."""
        if not manifest.filters_by_id:
            return ""
        rows: list[str] = []
        for filter_id, entry in manifest.filters_by_id.items():
            labels: dict[str, str] = {}
            for source_id in entry.options_source_ids:
                for option in filter_options.get(source_id, []):
                    labels.setdefault(option.id, option.display_name)
            items = "".join(
                f'<li data-option-id="{escape(option_id, quote=True)}"'
                f'{" data-default" if option_id == entry.default_value else ""}>'
                f"{escape(label)}</li>"
                for option_id, label in labels.items()
            )
            safe_id = escape(filter_id, quote=True)
            label = escape(entry.config.display_name)
            rows.append(
                f'<div class="mdoc-filter" data-filter-id="{safe_id}">'
                f"<span>{label}</span><ul>{items}</ul></div>"
            )
        return '<div class="mdoc-filter-selector">' + "".join(rows) + "</div>"


__all__ = ["PageBuilder"]
