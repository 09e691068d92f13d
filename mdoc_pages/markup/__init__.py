"""Parse Markdoc-dialect documents into immutable syntax trees.

The :func:`parse` entry point is a pure function from source text to a
:class:`Node` tree. Front matter is kept verbatim on the document root, and
tag misuse is reported through node-level errors instead of exceptions.

Examples
--------
>>> from mdoc_pages.markup import parse
>>> root = parse("{% alert %}\nCareful.\n")
>>> root.children[0].errors[0].message
"Node 'alert' is missing closing"
"""

from .nodes import Annotation, Node, NodeError
from .parser import parse

__all__ = ["Annotation", "Node", "NodeError", "parse"]
