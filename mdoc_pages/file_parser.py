"""Parse ``.mdoc`` files together with every partial they include.

A document is parsed into a :class:`~mdoc_pages.markup.Node` tree, its front
matter is validated, and every ``{% partial file="..." /%}`` tag is resolved
against the partials directory. Partials may include further partials; the
resolver walks them depth first and returns a flat mapping from the partial's
relative path to its tree.

Two kinds of problems are distinguished:

* Hard failures raise and abort the whole parse: malformed partial tags,
  unreadable files, cyclic includes, and invalid front matter.
* Node-level errors reported by the markup parser are collected into
  :class:`ParsingError` records so callers can report every issue at once.

Example
-------
>>> from pathlib import Path
>>> from mdoc_pages.file_parser import parse_mdoc_file
>>> parsed = parse_mdoc_file(
...     Path("content/en/colors.mdoc"), Path("partials")
... )  # doctest: +SKIP
>>> sorted(parsed.partials)  # doctest: +SKIP
['header.mdoc']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
from pathlib import Path

from mdoc_pages._constants import PARTIAL_FILE_ATTRIBUTE, PARTIAL_TAG
from mdoc_pages.frontmatter import Frontmatter, FrontmatterError, load_frontmatter
from mdoc_pages.logging import get_logger
from mdoc_pages.markup import Node, parse

logger = get_logger("file_parser")


class PartialReferenceError(ValueError):
    """Raised when a partial tag does not carry exactly one usable file attribute."""


class CyclicPartialError(PartialReferenceError):
    """Raised when a partial includes itself directly or transitively."""


@dc.dataclass(frozen=True, slots=True)
class ParsingError:
    """A node-level validation error and the lines it came from."""

    message: str
    lines: tuple[int, int]


@dc.dataclass(frozen=True, slots=True)
class PartialResolution:
    """Partials discovered beneath a tree and the errors found inside them.

    Attributes
    ----------
    partials : dict[str, Node]
        Partial trees keyed by their path relative to the partials directory,
        in discovery order. A later inclusion of the same path replaces the
        earlier tree.
    errors : tuple[ParsingError, ...]
        Errors from every resolved partial, each partial's own errors followed
        by those of the partials it includes.
    """

    partials: dict[str, Node] = dc.field(default_factory=dict)
    errors: tuple[ParsingError, ...] = ()

    def merge(self, other: PartialResolution) -> PartialResolution:
        """Return a new resolution with ``other`` appended after this one."""
        return PartialResolution(
            partials={**self.partials, **other.partials},
            errors=self.errors + other.errors,
        )


@dc.dataclass(frozen=True, slots=True)
class ParsedFile:
    """Everything the page builder needs from one primary document."""

    ast: Node
    frontmatter: Frontmatter
    partials: dict[str, Node]
    errors: tuple[ParsingError, ...]


def collect_errors(node: Node) -> list[ParsingError]:
    """Flatten every node error beneath ``node`` in pre-order.

    A node's own errors precede its children's, and children are visited left
    to right. Repeated messages are kept.
    """
    errors = [ParsingError(error.message, node.lines) for error in node.errors]
    for child in node.children:
        errors.extend(collect_errors(child))
    return errors


def partial_file_path(node: Node) -> str:
    """Return the ``file`` attribute of a partial tag.

    Raises
    ------
    PartialReferenceError
        If the tag has no ``file`` attribute, more than one, or an empty or
        non-string value.
    """
    matches = [
        annotation
        for annotation in node.annotations
        if annotation.name == PARTIAL_FILE_ATTRIBUTE and annotation.type == "attribute"
    ]
    start = node.lines[0] + 1
    if not matches:
        msg = f"Partial tag on line {start} must have a file attribute."
        raise PartialReferenceError(msg)
    if len(matches) != 1:
        msg = f"Partial tag on line {start} must have exactly one file attribute."
        raise PartialReferenceError(msg)
    value = matches[0].value
    if not isinstance(value, str) or not value:
        msg = f"Partial tag on line {start} has an empty file attribute."
        raise PartialReferenceError(msg)
    return value


def _read_partial(partials_dir: Path, relative_path: str) -> Node:
    path = partials_dir / relative_path
    if not path.is_file():
        msg = f"Partial file '{path}' not found."
        raise FileNotFoundError(msg)
    logger.debug("parsing partial %s", path)
    return parse(path.read_text(encoding="utf-8"))


def _partial_paths(node: Node) -> list[str]:
    """Return the validated ``file`` attribute of every partial tag in pre-order."""
    return [
        partial_file_path(candidate)
        for candidate in node.walk()
        if candidate.tag == PARTIAL_TAG
    ]


def resolve_partials(
    node: Node,
    partials_dir: Path,
    *,
    include_chain: cabc.Sequence[str] = (),
) -> PartialResolution:
    """Recursively resolve every partial reachable from ``node``.

    Every partial tag in ``node`` is validated before any partial file is
    read, so a malformed tag anywhere in the tree fails without touching the
    filesystem. Each partial is then read and resolved in discovery order.

    Parameters
    ----------
    node : Node
        Tree to search for ``partial`` tags.
    partials_dir : Path
        Directory that partial ``file`` attributes are relative to, for the
        root document and for every nested partial alike.
    include_chain : Sequence[str], optional
        Partial paths currently being resolved above ``node``; used to detect
        cycles.

    Returns
    -------
    PartialResolution
        Partial trees by relative path and the errors found inside them.

    Raises
    ------
    PartialReferenceError
        If a partial tag's ``file`` attribute is missing, duplicated, or empty.
    CyclicPartialError
        If a partial appears in its own include chain.
    FileNotFoundError
        If a referenced partial file does not exist.
    """
    resolution = PartialResolution()
    for relative_path in _partial_paths(node):
        if relative_path in include_chain:
            chain = " -> ".join([*include_chain, relative_path])
            msg = f"Cyclic partial reference: {chain}"
            raise CyclicPartialError(msg)
        partial_ast = _read_partial(partials_dir, relative_path)
        nested = resolve_partials(
            partial_ast, partials_dir, include_chain=[*include_chain, relative_path]
        )
        resolution = resolution.merge(
            PartialResolution(
                partials={relative_path: partial_ast},
                errors=tuple(collect_errors(partial_ast)),
            ).merge(nested)
        )
    return resolution


def parse_mdoc_file(file: Path, partials_dir: Path) -> ParsedFile:
    """Parse a primary ``.mdoc`` document and all of the partials it includes.

    Parameters
    ----------
    file : Path
        Path to the document.
    partials_dir : Path
        Root directory for resolving partial ``file`` attributes.

    Returns
    -------
    ParsedFile
        The document tree, validated front matter, partial trees, and the
        combined error list (document errors first, then partial errors in
        discovery order).

    Raises
    ------
    FileNotFoundError
        If ``file`` or any referenced partial does not exist.
    FrontmatterError
        If the document's front matter is invalid; the message names ``file``.
    PartialReferenceError
        If a partial tag is malformed or partials include each other cyclically.
    """
    if not file.is_file():
        msg = f"Markdoc file '{file}' not found."
        raise FileNotFoundError(msg)
    ast = parse(file.read_text(encoding="utf-8"))
    try:
        frontmatter = load_frontmatter(ast.frontmatter)
    except FrontmatterError as exc:
        msg = f"{file}: {exc}"
        raise type(exc)(msg) from exc
    try:
        resolution = resolve_partials(ast, partials_dir)
    except PartialReferenceError as exc:
        msg = f"{file}: {exc}"
        raise type(exc)(msg) from exc
    errors = tuple(collect_errors(ast)) + resolution.errors
    if errors:
        logger.debug("%s: %d parsing error(s)", file, len(errors))
    return ParsedFile(
        ast=ast,
        frontmatter=frontmatter,
        partials=resolution.partials,
        errors=errors,
    )


__all__ = [
    "CyclicPartialError",
    "ParsedFile",
    "ParsingError",
    "PartialReferenceError",
    "PartialResolution",
    "collect_errors",
    "parse_mdoc_file",
    "resolve_partials",
]
