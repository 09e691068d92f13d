"""Helpers for pointing relative markdown image sources at the image host."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from mdoc_pages.config import IntegrationConfig
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any
    IntegrationConfig = typ.Any


def _build_image_rewriter(site_config: IntegrationConfig) -> Extension | None:
    """Return an ImageUrlExtension configured for the site's image host."""
    if not site_config.site_params.img_url:
        return None
    return ImageUrlExtension(site_config.site_params.img_url)


class ImageUrlExtension(Extension):
    """Rewrite relative image sources to absolute URLs on the image host.

    Documents reference images relative to the site's ``images`` directory
    (``colors/swatch.png``); Hugo serves them from ``site_params.img_url``.
    """

    def __init__(self, img_url: str) -> None:
        self.img_url = img_url.rstrip("/")

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the image treeprocessor on the Markdown instance."""
        processor = ImageUrlTreeprocessor(md, self.img_url)
        md.treeprocessors.register(processor, "mdoc_image_urls", 15)


class ImageUrlTreeprocessor(Treeprocessor):
    """Rewrite relative ``img`` sources in the parsed markdown tree."""

    def __init__(self, md: Markdown, img_url: str) -> None:
        super().__init__(md)
        self.img_url = img_url

    def run(self, root: Element) -> Element:
        """Rewrite relative image sources in place."""
        for element in root.iter():
            if element.tag == "img":
                rewritten = self._rewrite(element.get("src"))
                if rewritten:
                    element.set("src", rewritten)
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Return the absolute image URL for a relative ``target``, if applicable."""
        if not target or target.startswith(("#", "//", "data:")):
            return None
        parsed = urlsplit(target)
        if parsed.scheme or parsed.netloc or not parsed.path:
            return None
        joined = posixpath.normpath(parsed.path.lstrip("/"))
        while joined.startswith("../"):
            joined = joined[3:]
        if joined in (".", "", ".."):
            return None
        url = f"{self.img_url}/{joined}"
        if parsed.query:
            url = f"{url}?{parsed.query}"
        return url


__all__ = ["ImageUrlExtension", "ImageUrlTreeprocessor", "_build_image_rewriter"]
