"""Utilities for rendering parsed Markdoc documents into Hugo content files."""

from .image_rewriter import ImageUrlExtension
from .models import BuildResult
from .page_builder import PageBuilder
from .renderer import HtmlContentRenderer, MarkupRenderer

__all__ = [
    "BuildResult",
    "HtmlContentRenderer",
    "ImageUrlExtension",
    "MarkupRenderer",
    "PageBuilder",
]
