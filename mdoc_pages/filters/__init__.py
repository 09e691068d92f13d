"""Filter option catalogs, allow-lists, and per-page filter manifests.

Examples
--------
>>> from pathlib import Path
>>> from mdoc_pages.filters import (
...     build_page_filters_manifest,
...     load_allowlist_from_lang_dir,
...     load_filters_config_from_lang_dir,
... )
>>> lang_dir = Path("preferences_config/options/en")
>>> allowlist = load_allowlist_from_lang_dir(lang_dir)  # doctest: +SKIP
>>> catalog = load_filters_config_from_lang_dir(lang_dir, allowlist)  # doctest: +SKIP
"""

from .loader import load_allowlist_from_lang_dir, load_filters_config_from_lang_dir
from .manifest import build_page_filters_manifest, get_filter_options_for_page
from .models import (
    Allowlist,
    AllowlistEntry,
    FilterOption,
    FilterOptionsConfig,
    FilterOptionsConfigError,
    ManifestFilterEntry,
    PageFiltersManifest,
)

__all__ = [
    "Allowlist",
    "AllowlistEntry",
    "FilterOption",
    "FilterOptionsConfig",
    "FilterOptionsConfigError",
    "ManifestFilterEntry",
    "PageFiltersManifest",
    "build_page_filters_manifest",
    "get_filter_options_for_page",
    "load_allowlist_from_lang_dir",
    "load_filters_config_from_lang_dir",
]
