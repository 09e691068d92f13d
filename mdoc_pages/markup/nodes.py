"""Dataclasses describing the Markdoc abstract syntax tree."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from mdoc_pages._constants import FRONTMATTER_ATTRIBUTE


@dc.dataclass(frozen=True, slots=True)
class Annotation:
    """A single ``name=value`` (or ``.class``/``#id``) entry inside a tag.

    Attributes
    ----------
    type : str
        ``"attribute"`` for ``name=value`` pairs, ``"class"`` or ``"id"`` for
        shorthand annotations.
    name : str
        Attribute name as written in the source.
    value : object
        Decoded value; strings, numbers, booleans, or ``None``.
    """

    type: str
    name: str
    value: typ.Any = None


@dc.dataclass(frozen=True, slots=True)
class NodeError:
    """Validation problem the parser attached to a node."""

    id: str
    message: str
    level: str = "error"


@dc.dataclass(frozen=True, slots=True)
class Node:
    """Tagged tree node produced by :func:`mdoc_pages.markup.parse`.

    Attributes
    ----------
    type : str
        Node kind: ``"document"``, ``"text"``, ``"fence"``, ``"tag"`` or
        ``"error"``.
    tag : str or None
        Tag name for ``"tag"`` nodes (for example ``"partial"``).
    attributes : dict[str, object]
        Decoded attributes keyed by name. The document root stores its raw
        front matter under ``"frontmatter"``.
    annotations : tuple[Annotation, ...]
        Attribute annotations in source order, duplicates preserved.
    children : tuple[Node, ...]
        Child nodes in document order.
    errors : tuple[NodeError, ...]
        Errors attached directly to this node.
    lines : tuple[int, int]
        Zero-based ``(start, end)`` line range, end exclusive.
    """

    type: str
    tag: str | None = None
    attributes: dict[str, typ.Any] = dc.field(default_factory=dict)
    annotations: tuple[Annotation, ...] = ()
    children: tuple[Node, ...] = ()
    errors: tuple[NodeError, ...] = ()
    lines: tuple[int, int] = (0, 0)

    @property
    def frontmatter(self) -> str:
        """Return the raw front matter block stored on a document root."""
        return str(self.attributes.get(FRONTMATTER_ATTRIBUTE, "") or "")

    def walk(self) -> typ.Iterator[Node]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


__all__ = ["Annotation", "Node", "NodeError"]
