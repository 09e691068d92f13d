"""Join a page's declared filters against the option catalog.

An ``options_source`` may embed ``<filter_id>`` placeholders naming filters
declared earlier on the same page, e.g. ``<finish>_<color>_paint_options``.
Such a source expands to one option set per combination of the referenced
filters' possible values.
"""

from __future__ import annotations

import itertools
import re
import typing as typ

from mdoc_pages._constants import PLACEHOLDER_PATTERN

from .models import (
    Allowlist,
    FilterOption,
    FilterOptionsConfig,
    ManifestFilterEntry,
    PageFiltersManifest,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from mdoc_pages.frontmatter import Frontmatter, PageFilterConfig


def _options_source_pattern(options_source: str) -> re.Pattern[str]:
    """Return a regex matching every concrete id ``options_source`` can expand to."""
    pieces = PLACEHOLDER_PATTERN.split(options_source)
    # split() alternates literal text and captured placeholder names.
    parts = [
        re.escape(piece) if idx % 2 == 0 else "[a-z0-9_]+"
        for idx, piece in enumerate(pieces)
    ]
    return re.compile("".join(parts))


def _substitute(options_source: str, values: cabc.Mapping[str, str]) -> str:
    return PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(1)], options_source)


def _default_option(options: list[FilterOption]) -> str | None:
    return next((option.id for option in options if option.default), None)


def get_filter_options_for_page(
    frontmatter: Frontmatter, catalog: FilterOptionsConfig
) -> FilterOptionsConfig:
    """Return the subset of ``catalog`` the page's filters can draw from."""
    selected: FilterOptionsConfig = {}
    for config in frontmatter.page_filters or []:
        pattern = _options_source_pattern(config.options_source)
        for set_id, options in catalog.items():
            if pattern.fullmatch(set_id):
                selected[set_id] = options
    return selected


def _expand_options_source(
    config: PageFilterConfig, resolved: cabc.Mapping[str, ManifestFilterEntry]
) -> tuple[list[str], list[str]]:
    """Return concrete option set ids for ``config`` and any expansion errors."""
    names = PLACEHOLDER_PATTERN.findall(config.options_source)
    if not names:
        return [config.options_source], []
    missing = [name for name in dict.fromkeys(names) if name not in resolved]
    if missing:
        errors = [
            f"Filter '{config.id}': placeholder <{name}> in options source "
            f"'{config.options_source}' does not name an earlier filter"
            for name in missing
        ]
        return [], errors
    unique_names = list(dict.fromkeys(names))
    value_lists = [resolved[name].possible_values for name in unique_names]
    source_ids = [
        _substitute(config.options_source, dict(zip(unique_names, combo, strict=True)))
        for combo in itertools.product(*value_lists)
    ]
    return source_ids, []


def _resolve_default(
    config: PageFilterConfig,
    resolved: cabc.Mapping[str, ManifestFilterEntry],
    catalog: FilterOptionsConfig,
) -> str | None:
    """Return the option set default reached through earlier filters' defaults."""
    names = PLACEHOLDER_PATTERN.findall(config.options_source)
    defaults: dict[str, str] = {}
    for name in names:
        entry = resolved.get(name)
        if entry is None or entry.default_value is None:
            return None
        defaults[name] = entry.default_value
    options = catalog.get(_substitute(config.options_source, defaults))
    return _default_option(options) if options else None


def build_page_filters_manifest(
    frontmatter: Frontmatter,
    catalog: FilterOptionsConfig,
    allowlist: Allowlist,
) -> PageFiltersManifest:
    """Build the filters manifest for one page.

    Parameters
    ----------
    frontmatter : Frontmatter
        Validated front matter of the page.
    catalog : dict[str, list[FilterOption]]
        Option sets available for the page's language.
    allowlist : Allowlist
        Filter and option ids approved for the page's language.

    Returns
    -------
    PageFiltersManifest
        Joined filter entries, the option sets they reference, and any
        problems found along the way. Problems are reported, not raised, so
        one pass surfaces all of them.
    """
    entries: dict[str, ManifestFilterEntry] = {}
    option_sets: dict[str, list[FilterOption]] = {}
    errors: list[str] = []
    for config in frontmatter.page_filters or []:
        if config.id in entries:
            errors.append(f"Duplicate filter id '{config.id}'")
        if config.id not in allowlist.filters_by_id:
            errors.append(f"Unrecognized filter id '{config.id}': not in allow-list")

        source_ids, expansion_errors = _expand_options_source(config, entries)
        errors.extend(expansion_errors)
        possible_values: list[str] = []
        for source_id in source_ids:
            options = catalog.get(source_id)
            if options is None:
                errors.append(
                    f"Filter '{config.id}': unknown options source '{source_id}'"
                )
                continue
            option_sets[source_id] = options
            for option in options:
                if option.id not in possible_values:
                    possible_values.append(option.id)

        default_value = config.default_value
        if default_value is None:
            default_value = _resolve_default(config, entries, catalog)
        elif possible_values and default_value not in possible_values:
            errors.append(
                f"Filter '{config.id}': default value '{default_value}' is not "
                f"one of {', '.join(possible_values)}"
            )

        entries[config.id] = ManifestFilterEntry(
            config=config,
            default_value=default_value,
            possible_values=possible_values,
            options_source_ids=source_ids,
        )
    return PageFiltersManifest(
        filters_by_id=entries, option_sets_by_id=option_sets, errors=errors
    )


__all__ = ["build_page_filters_manifest", "get_filter_options_for_page"]
