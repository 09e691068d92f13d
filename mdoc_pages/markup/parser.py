r"""Tokenize Markdoc-dialect markup into a :class:`~mdoc_pages.markup.nodes.Node` tree.

The parser is line oriented. It recognises a leading ``---`` front matter
block, fenced code blocks, and ``{% tag %}`` constructs (opening, closing, and
self-closing forms). Everything else is kept as Markdown text for the
renderer. Problems with tag usage never raise: they are attached to the
offending node as :class:`~mdoc_pages.markup.nodes.NodeError` entries so a
caller can report every issue in one pass.

Example
-------
>>> from mdoc_pages.markup import parse
>>> root = parse('---\ntitle: Intro\n---\n{% partial file="header.mdoc" /%}\n')
>>> root.frontmatter
'title: Intro'
>>> [child.tag for child in root.children]
['partial']
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

import msgspec
import msgspec.json as msgspec_json

from mdoc_pages._constants import FRONTMATTER_ATTRIBUTE

from .nodes import Annotation, Node, NodeError

FRONTMATTER_FENCE = "---"
FENCE_PATTERN = re.compile(r"^[ ]{0,3}(`{3,}|~{3,})\s*([A-Za-z0-9_+#.-]*)")
TAG_PATTERN = re.compile(r"\{%(?P<body>.*?)%\}")
TAG_BODY_PATTERN = re.compile(
    r"^\s*(?P<close>/)?(?P<name>[A-Za-z][\w-]*)(?P<rest>.*?)(?P<self_closing>/)?\s*$",
    re.DOTALL,
)
ANNOTATION_PATTERN = re.compile(
    r"\s*(?:"
    r"(?P<name>[A-Za-z_][\w-]*)="
    r'(?P<value>"(?:[^"\\]|\\.)*"|-?\d+(?:\.\d+)?|true|false|null)'
    r"|\.(?P<css_class>[\w-]+)"
    r"|#(?P<element_id>[\w-]+)"
    r")"
)


@dc.dataclass(slots=True)
class _Frame:
    """Mutable build state for a node whose closing tag is still pending."""

    type: str
    tag: str | None
    start: int
    attributes: dict[str, typ.Any] = dc.field(default_factory=dict)
    annotations: list[Annotation] = dc.field(default_factory=list)
    children: list[Node] = dc.field(default_factory=list)
    errors: list[NodeError] = dc.field(default_factory=list)

    def freeze(self, end: int) -> Node:
        return Node(
            type=self.type,
            tag=self.tag,
            attributes=dict(self.attributes),
            annotations=tuple(self.annotations),
            children=tuple(self.children),
            errors=tuple(self.errors),
            lines=(self.start, end),
        )


@dc.dataclass(slots=True)
class _Fence:
    marker: str
    language: str
    start: int
    content: list[str] = dc.field(default_factory=list)


def _split_frontmatter(lines: list[str]) -> tuple[str, int]:
    """Return the raw front matter text and the index of the first body line."""
    if not lines or lines[0].strip() != FRONTMATTER_FENCE:
        return "", 0
    for idx in range(1, len(lines)):
        if lines[idx].strip() == FRONTMATTER_FENCE:
            return "\n".join(lines[1:idx]), idx + 1
    return "", 0


def _parse_annotations(source: str) -> tuple[list[Annotation], list[NodeError]]:
    """Decode ``name=value``, ``.class`` and ``#id`` entries from a tag body."""
    annotations: list[Annotation] = []
    errors: list[NodeError] = []
    pos = 0
    while source[pos:].strip():
        match = ANNOTATION_PATTERN.match(source, pos)
        if match is None:
            remainder = source[pos:].strip()
            errors.append(
                NodeError(
                    id="attribute-invalid",
                    message=f"Invalid attribute syntax near '{remainder}'",
                )
            )
            break
        if match.group("name"):
            raw_value = match.group("value")
            try:
                value = msgspec_json.decode(raw_value)
            except msgspec.DecodeError:
                errors.append(
                    NodeError(
                        id="attribute-value-invalid",
                        message=f"Invalid value for attribute '{match.group('name')}'",
                    )
                )
            else:
                annotations.append(Annotation("attribute", match.group("name"), value))
        elif match.group("css_class"):
            annotations.append(Annotation("class", "class", match.group("css_class")))
        else:
            annotations.append(Annotation("id", "id", match.group("element_id")))
        pos = match.end()
    return annotations, errors


def _attributes_from(annotations: list[Annotation]) -> dict[str, typ.Any]:
    """Collapse annotations into an attribute mapping (last value wins)."""
    attributes: dict[str, typ.Any] = {}
    classes: list[str] = []
    for annotation in annotations:
        if annotation.type == "class":
            classes.append(str(annotation.value))
        else:
            attributes[annotation.name] = annotation.value
    if classes:
        attributes["class"] = " ".join(classes)
    return attributes


class _MarkupParser:
    """Single-use builder that turns source lines into a node tree."""

    def __init__(self, lines: list[str], body_start: int, frontmatter: str) -> None:
        self._lines = lines
        self._body_start = body_start
        root = _Frame(type="document", tag=None, start=0)
        root.attributes[FRONTMATTER_ATTRIBUTE] = frontmatter
        self._stack: list[_Frame] = [root]
        self._text: list[str] = []
        self._text_start = 0
        self._text_end = 0
        self._fence: _Fence | None = None

    def run(self) -> Node:
        for index in range(self._body_start, len(self._lines)):
            self._consume_line(index, self._lines[index])
        return self._finish()

    def _consume_line(self, index: int, line: str) -> None:
        if self._fence is not None:
            self._consume_fence_line(index, line)
            return
        fence_match = FENCE_PATTERN.match(line)
        if fence_match:
            self._flush_text()
            self._fence = _Fence(
                marker=fence_match.group(1),
                language=fence_match.group(2),
                start=index,
            )
            return
        matches = list(TAG_PATTERN.finditer(line))
        if not matches:
            self._add_text(line + "\n", index)
            return
        pos = 0
        for match in matches:
            before = line[pos : match.start()]
            if before.strip():
                self._add_text(before, index)
            self._consume_tag(index, match.group("body"))
            pos = match.end()
        after = line[pos:]
        if after.strip():
            self._add_text(after + "\n", index)

    def _consume_fence_line(self, index: int, line: str) -> None:
        fence = typ.cast("_Fence", self._fence)
        stripped = line.strip()
        if (
            stripped.startswith(fence.marker)
            and set(stripped) == {fence.marker[0]}
        ):
            self._append(self._fence_node(fence, end=index + 1))
            self._fence = None
            return
        fence.content.append(line)

    @staticmethod
    def _fence_node(fence: _Fence, *, end: int, errors: tuple[NodeError, ...] = ()) -> Node:
        content = "\n".join(fence.content)
        if fence.content:
            content += "\n"
        return Node(
            type="fence",
            attributes={"content": content, "language": fence.language},
            errors=errors,
            lines=(fence.start, end),
        )

    def _consume_tag(self, index: int, body: str) -> None:
        self._flush_text()
        match = TAG_BODY_PATTERN.match(body)
        if match is None:
            self._append(
                Node(
                    type="error",
                    errors=(
                        NodeError(
                            id="tag-invalid",
                            message=f"Invalid tag syntax: '{{%{body}%}}'",
                        ),
                    ),
                    lines=(index, index + 1),
                )
            )
            return

        name = match.group("name")
        if match.group("close"):
            self._close_tag(index, name)
            return

        annotations, errors = _parse_annotations(match.group("rest"))
        frame = _Frame(
            type="tag",
            tag=name,
            start=index,
            attributes=_attributes_from(annotations),
            annotations=annotations,
            errors=errors,
        )
        if match.group("self_closing"):
            self._append(frame.freeze(index + 1))
        else:
            self._stack.append(frame)

    def _close_tag(self, index: int, name: str) -> None:
        open_tags = [frame.tag for frame in self._stack[1:]]
        if name not in open_tags:
            self._append(
                Node(
                    type="error",
                    errors=(
                        NodeError(
                            id="missing-opening",
                            message=f"Closing tag '{name}' has no matching opening tag",
                        ),
                    ),
                    lines=(index, index + 1),
                )
            )
            return
        while True:
            frame = self._stack.pop()
            if frame.tag == name:
                self._append(frame.freeze(index + 1))
                return
            frame.errors.append(_missing_closing(frame))
            self._append(frame.freeze(index))

    def _add_text(self, text: str, index: int) -> None:
        if not self._text:
            if not text.strip():
                return
            self._text_start = index
        self._text.append(text)
        if text.strip():
            self._text_end = index + 1

    def _flush_text(self) -> None:
        if not self._text:
            return
        content = "".join(self._text)
        self._text = []
        if not content.strip():
            return
        self._append(
            Node(
                type="text",
                attributes={"content": content},
                lines=(self._text_start, self._text_end),
            )
        )

    def _append(self, node: Node) -> None:
        self._stack[-1].children.append(node)

    def _finish(self) -> Node:
        end = len(self._lines)
        if self._fence is not None:
            error = NodeError(id="fence-unterminated", message="Code fence is never closed")
            self._append(self._fence_node(self._fence, end=end, errors=(error,)))
            self._fence = None
        self._flush_text()
        while len(self._stack) > 1:
            frame = self._stack.pop()
            frame.errors.append(_missing_closing(frame))
            self._append(frame.freeze(end))
        return self._stack[0].freeze(end)


def _missing_closing(frame: _Frame) -> NodeError:
    return NodeError(id="missing-closing", message=f"Node '{frame.tag}' is missing closing")


def parse(text: str) -> Node:
    """Parse Markdoc markup into a document node.

    Parameters
    ----------
    text : str
        Full document source, optionally starting with a ``---`` delimited
        front matter block.

    Returns
    -------
    Node
        Root ``"document"`` node. Its ``frontmatter`` attribute holds the raw
        front matter text (empty when absent); tag misuse is reported through
        node-level ``errors`` rather than exceptions.
    """
    lines = text.splitlines()
    frontmatter, body_start = _split_frontmatter(lines)
    return _MarkupParser(lines, body_start, frontmatter).run()


__all__ = ["parse"]
