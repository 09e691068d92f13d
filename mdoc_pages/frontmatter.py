"""Validate document front matter into typed ``msgspec`` structs.

Front matter is decoded from the YAML block at the top of each ``.mdoc``
document. Validation happens in two phases:

1. Structural conversion with :func:`msgspec.convert`. Filter configs and
   further-reading links are strict (unknown keys are rejected); unknown
   top-level keys are ignored.
2. Whole-list checks over ``page_filters``: display names must be unique, and
   every ``<name>`` placeholder embedded in a display name must reference the
   display name of a filter defined earlier in the list.

The module also owns the minified filter shape (``n``/``i``/``o``/``d``)
embedded into generated pages.

Examples
--------
>>> from mdoc_pages.frontmatter import validate_frontmatter
>>> fm = validate_frontmatter({"title": "Paint", "draft": True})
>>> fm.title, fm.page_filters
('Paint', None)
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import msgspec
import msgspec.json as msgspec_json
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from mdoc_pages._constants import (
    FILTER_OPTIONS_ID_REGEX,
    PLACEHOLDER_PATTERN,
    SNAKE_CASE_REGEX,
)
from mdoc_pages.logging import get_logger

logger = get_logger("frontmatter")

SnakeCase = typ.Annotated[str, msgspec.Meta(pattern=SNAKE_CASE_REGEX)]
FilterOptionsId = typ.Annotated[str, msgspec.Meta(pattern=FILTER_OPTIONS_ID_REGEX)]


class FrontmatterError(ValueError):
    """Raised when front matter fails structural or cross-field validation."""


class DuplicateFilterNameError(FrontmatterError):
    """Raised when two page filters share a display name."""


class UndefinedPlaceholderError(FrontmatterError):
    """Raised when a display name placeholder does not name an earlier filter."""


class PageFilterConfig(
    msgspec.Struct, frozen=True, forbid_unknown_fields=True, omit_defaults=True
):
    """A page filter as declared in front matter.

    Attributes
    ----------
    display_name : str
        Label shown to readers; may embed ``<name>`` placeholders that refer
        to earlier filters' display names.
    id : str
        Snake-case identifier of the filter.
    options_source : str
        Identifier of the option set (``*_options``) the filter draws from;
        may embed ``<filter_id>`` placeholders.
    default_value : str, optional
        Snake-case option id overriding the option set's default.
    """

    display_name: str
    id: SnakeCase
    options_source: FilterOptionsId
    default_value: SnakeCase | None = None


class MinifiedPageFilterConfig(
    msgspec.Struct, frozen=True, forbid_unknown_fields=True, omit_defaults=True
):
    """Short-key projection of :class:`PageFilterConfig` for embedded payloads."""

    n: str
    i: SnakeCase
    o: FilterOptionsId
    d: SnakeCase | None = None


class FurtherReadingLink(
    msgspec.Struct, frozen=True, forbid_unknown_fields=True, omit_defaults=True
):
    """A further-reading entry rendered at the foot of a page."""

    link: str
    text: str
    tag: str | None = None


class Frontmatter(msgspec.Struct, frozen=True, omit_defaults=True):
    """Validated front matter; unknown top-level keys are dropped."""

    title: str
    page_filters: list[PageFilterConfig] | None = None
    further_reading: (
        typ.Annotated[list[FurtherReadingLink], msgspec.Meta(min_length=1)] | None
    ) = None


def _check_unique_display_names(filters: cabc.Sequence[PageFilterConfig]) -> None:
    names = [config.display_name for config in filters]
    if len(names) != len(set(names)):
        logger.error("Duplicate page filter display names found in list: %s", names)
        duplicates = sorted({name for name in names if names.count(name) > 1})
        msg = f"Duplicate page filter display names: {', '.join(duplicates)}"
        raise DuplicateFilterNameError(msg)


def _check_placeholder_references(filters: cabc.Sequence[PageFilterConfig]) -> None:
    defined: set[str] = set()
    for config in filters:
        defined.add(config.display_name)
        for match in PLACEHOLDER_PATTERN.finditer(config.display_name):
            if match.group(1) not in defined:
                logger.error("Invalid placeholder reference found: %s", match.group(0))
                msg = (
                    f"Invalid placeholder reference {match.group(0)} in page filter "
                    f"'{config.display_name}': placeholders must name a filter "
                    "defined earlier in the list"
                )
                raise UndefinedPlaceholderError(msg)


def validate_page_filters(filters: cabc.Sequence[PageFilterConfig]) -> None:
    """Run the whole-list invariants over structurally valid page filters.

    Raises
    ------
    DuplicateFilterNameError
        If two filters share a display name.
    UndefinedPlaceholderError
        If a ``<name>`` placeholder refers to a display name that is not
        defined earlier in the list.
    """
    _check_unique_display_names(filters)
    _check_placeholder_references(filters)


def validate_frontmatter(raw: cabc.Mapping[typ.Any, typ.Any]) -> Frontmatter:
    """Validate a decoded front matter mapping.

    Parameters
    ----------
    raw : Mapping[Any, Any]
        Key/value pairs decoded from the document's YAML block. Keys are
        converted to strings before validation.

    Returns
    -------
    Frontmatter
        The validated, normalized front matter.

    Raises
    ------
    FrontmatterError
        If a required field is missing, a field has the wrong type or format,
        a strict sub-object carries unknown keys, or a whole-list invariant
        on ``page_filters`` fails.
    """
    try:
        fields = {str(key): value for key, value in raw.items()}
        frontmatter = msgspec.convert(fields, type=Frontmatter)
    except msgspec.ValidationError as exc:
        msg = f"Invalid front matter: {exc}"
        raise FrontmatterError(msg) from exc
    if frontmatter.page_filters:
        validate_page_filters(frontmatter.page_filters)
    return frontmatter


def load_frontmatter(text: str) -> Frontmatter:
    """Decode a raw YAML front matter block and validate it.

    An empty block decodes to an empty mapping, which fails on the missing
    ``title``.
    """
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(text) if text.strip() else {}
    except YAMLError as exc:
        msg = f"Front matter is not valid YAML: {exc}"
        raise FrontmatterError(msg) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = "Front matter must be a YAML mapping."
        raise FrontmatterError(msg)
    return validate_frontmatter(loaded)


def minify_page_filters(
    filters: cabc.Iterable[PageFilterConfig],
) -> list[MinifiedPageFilterConfig]:
    """Project page filters onto their short-key shape."""
    return [
        MinifiedPageFilterConfig(
            n=config.display_name,
            i=config.id,
            o=config.options_source,
            d=config.default_value,
        )
        for config in filters
    ]


def expand_page_filters(
    minified: cabc.Iterable[MinifiedPageFilterConfig],
) -> list[PageFilterConfig]:
    """Map short-key filter configs back onto the full-key shape."""
    return [
        PageFilterConfig(
            display_name=config.n,
            id=config.i,
            options_source=config.o,
            default_value=config.d,
        )
        for config in minified
    ]


def encode_minified_page_filters(filters: cabc.Iterable[PageFilterConfig]) -> bytes:
    """Serialize page filters into compact ``n``/``i``/``o``/``d`` JSON."""
    return msgspec_json.encode(minify_page_filters(filters))


def decode_minified_page_filters(data: bytes | str) -> list[MinifiedPageFilterConfig]:
    """Decode a minified filters payload, enforcing the same field constraints."""
    try:
        return msgspec_json.decode(data, type=list[MinifiedPageFilterConfig])
    except msgspec.DecodeError as exc:
        msg = f"Invalid minified page filters: {exc}"
        raise FrontmatterError(msg) from exc


__all__ = [
    "DuplicateFilterNameError",
    "Frontmatter",
    "FrontmatterError",
    "FurtherReadingLink",
    "MinifiedPageFilterConfig",
    "PageFilterConfig",
    "UndefinedPlaceholderError",
    "decode_minified_page_filters",
    "encode_minified_page_filters",
    "expand_page_filters",
    "load_frontmatter",
    "minify_page_filters",
    "validate_frontmatter",
    "validate_page_filters",
]
