"""Structs describing filter option catalogs, allow-lists, and manifests."""

from __future__ import annotations

import msgspec
import msgspec.structs

from mdoc_pages.frontmatter import (
    MinifiedPageFilterConfig,
    PageFilterConfig,
    SnakeCase,
    minify_page_filters,
)


class FilterOptionsConfigError(ValueError):
    """Raised when an allow-list or filter options file is invalid."""


class FilterOption(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """One selectable value within an option set."""

    id: SnakeCase
    display_name: str
    default: bool = False


class AllowlistEntry(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """An identifier approved for use in a language directory."""

    id: SnakeCase
    display_name: str


class Allowlist(msgspec.Struct, frozen=True):
    """Filter and option identifiers approved for one language."""

    filters_by_id: dict[str, AllowlistEntry]
    options_by_id: dict[str, AllowlistEntry]


FilterOptionsConfig = dict[str, list[FilterOption]]


class ManifestFilterEntry(msgspec.Struct, frozen=True):
    """A page filter joined against the option catalog.

    Attributes
    ----------
    config : PageFilterConfig
        The filter as declared in front matter.
    default_value : str or None
        The explicit ``default_value`` or, failing that, the default option of
        the set selected by earlier filters' defaults.
    possible_values : list[str]
        Option ids across every resolved option set, first-seen order.
    options_source_ids : list[str]
        Concrete option set ids after placeholder expansion.
    """

    config: PageFilterConfig
    default_value: str | None
    possible_values: list[str]
    options_source_ids: list[str]


class PageFiltersManifest(msgspec.Struct, frozen=True):
    """Page-scoped summary of the filters a page declares."""

    filters_by_id: dict[str, ManifestFilterEntry]
    option_sets_by_id: dict[str, list[FilterOption]]
    errors: list[str]

    @property
    def defaults_by_filter_id(self) -> dict[str, str | None]:
        """Return each filter's resolved default value."""
        return {key: entry.default_value for key, entry in self.filters_by_id.items()}

    def minified(self) -> list[MinifiedPageFilterConfig]:
        """Return the compact ``n``/``i``/``o``/``d`` projection of the filters."""
        return minify_page_filters(
            msgspec.structs.replace(entry.config, default_value=entry.default_value)
            for entry in self.filters_by_id.values()
        )


__all__ = [
    "Allowlist",
    "AllowlistEntry",
    "FilterOption",
    "FilterOptionsConfig",
    "FilterOptionsConfigError",
    "ManifestFilterEntry",
    "PageFiltersManifest",
]
