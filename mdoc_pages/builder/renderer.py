"""Render Markdoc trees into HTML with highlighted code blocks."""

from __future__ import annotations

import typing as typ
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from mdoc_pages._constants import PARTIAL_TAG
from mdoc_pages.file_parser import PartialReferenceError, partial_file_path

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown.extensions import Extension

    from mdoc_pages.markup import Node
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any


class HtmlContentRenderer:
    """Render markdown and code snippets with consistent styling."""

    def __init__(
        self, pygments_style: str = "monokai", image_extension: Extension | None = None
    ) -> None:
        """Initialize a renderer with optional pygments style and image extension.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        image_extension : Extension, optional
            Markdown extension used to rewrite image sources; pass ``None`` to
            leave them untouched.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")
        self._image_extension = image_extension

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render markdown into HTML using the configured extensions."""
        if not text.strip():
            return ""
        extensions: list[Extension | str] = ["tables", "sane_lists"]
        if self._image_extension:
            extensions.append(self._image_extension)
        md = Markdown(extensions=extensions)
        return md.convert(text)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with an optional language tag.

        Unknown or missing languages fall back to the plain ``text`` lexer.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        safe_lang = escape(lang, quote=True)
        return html.replace(
            '<div class="codehilite">',
            f'<div class="codehilite" data-language="{safe_lang}">',
            1,
        )


def _format_attribute(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class MarkupRenderer:
    """Walk a document tree and render each node kind to HTML.

    Partial tags are replaced by the rendering of the partial's own tree,
    looked up by the same relative path the resolver recorded.
    """

    def __init__(
        self, content: HtmlContentRenderer, partials: cabc.Mapping[str, Node]
    ) -> None:
        self.content = content
        self.partials = partials
        self.has_code = False

    def render(self, node: Node) -> str:
        """Return the HTML for ``node`` and its descendants."""
        match node.type:
            case "document":
                return self._render_children(node)
            case "text":
                return self.content.markdown(str(node.attributes.get("content", "")))
            case "fence":
                self.has_code = True
                return self.content.code_block(
                    str(node.attributes.get("content", "")),
                    node.attributes.get("language") or None,
                )
            case "tag" if node.tag == PARTIAL_TAG:
                return self._render_partial(node)
            case "tag":
                return self._render_tag(node)
            case _:
                return ""

    def _render_children(self, node: Node) -> str:
        rendered = (self.render(child) for child in node.children)
        return "\n".join(html for html in rendered if html)

    def _render_partial(self, node: Node) -> str:
        path = partial_file_path(node)
        try:
            partial = self.partials[path]
        except KeyError as exc:
            msg = f"Partial '{path}' was not resolved before rendering."
            raise PartialReferenceError(msg) from exc
        return self.render(partial)

    def _render_tag(self, node: Node) -> str:
        classes = [f"mdoc-{node.tag}"]
        attrs: list[str] = []
        for name, value in node.attributes.items():
            if value is None:
                continue
            if name == "class":
                classes.append(str(value))
            elif name == "id":
                attrs.append(f'id="{escape(str(value), quote=True)}"')
            else:
                safe_value = escape(_format_attribute(value), quote=True)
                attrs.append(f'data-{escape(name, quote=True)}="{safe_value}"')
        opening = " ".join(
            [f'<div class="{escape(" ".join(classes), quote=True)}"', *attrs]
        )
        inner = self._render_children(node)
        return f"{opening}>\n{inner}\n</div>" if inner else f"{opening}></div>"


__all__ = ["HtmlContentRenderer", "MarkupRenderer"]
