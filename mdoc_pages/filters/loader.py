"""Load per-language allow-lists and filter option catalogs from YAML.

Each language directory under the options root holds an ``allowlist.yaml``
naming the filter and option ids approved for that language, plus any number
of option files mapping option set ids (``*_options``) to their options:

.. code-block:: yaml

    # allowlist.yaml
    filters:
      - id: color
        display_name: Color
    options:
      - id: red
        display_name: Red

    # color.yaml
    color_options:
      - id: red
        display_name: Red
        default: true
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML

from mdoc_pages._constants import (
    ALLOWLIST_FILENAME,
    FILTER_OPTIONS_ID_PATTERN,
    PLACEHOLDER_PATTERN,
    YAML_SUFFIXES,
)
from mdoc_pages.logging import get_logger

from .models import (
    Allowlist,
    AllowlistEntry,
    FilterOption,
    FilterOptionsConfig,
    FilterOptionsConfigError,
)

logger = get_logger("filters")


def _load_yaml_mapping(path: Path) -> dict[str, typ.Any]:
    """Load ``path`` with the safe YAML 1.2 loader and require a mapping."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"'{path}': top-level YAML structure must be a mapping."
        raise FilterOptionsConfigError(msg)
    return loaded


def _convert_entries(
    payload: object, *, kind: str, path: Path
) -> dict[str, AllowlistEntry]:
    """Convert an allow-list section into entries keyed by id."""
    try:
        entries = msgspec.convert(payload or [], type=list[AllowlistEntry])
    except msgspec.ValidationError as exc:
        msg = f"'{path}': invalid {kind} allow-list: {exc}"
        raise FilterOptionsConfigError(msg) from exc
    by_id: dict[str, AllowlistEntry] = {}
    for entry in entries:
        if entry.id in by_id:
            msg = f"'{path}': duplicate {kind} id '{entry.id}' in allow-list."
            raise FilterOptionsConfigError(msg)
        by_id[entry.id] = entry
    return by_id


def load_allowlist_from_lang_dir(directory: Path) -> Allowlist:
    """Load the allow-list stored in a language's options directory.

    Raises
    ------
    FileNotFoundError
        If ``allowlist.yaml`` does not exist in ``directory``.
    FilterOptionsConfigError
        If the file is malformed or repeats an id.
    """
    path = directory / ALLOWLIST_FILENAME
    if not path.is_file():
        msg = f"Allow-list file '{path}' not found."
        raise FileNotFoundError(msg)
    raw = _load_yaml_mapping(path)
    return Allowlist(
        filters_by_id=_convert_entries(raw.get("filters"), kind="filter", path=path),
        options_by_id=_convert_entries(raw.get("options"), kind="option", path=path),
    )


def _validate_option_set(
    set_id: str, payload: object, path: Path
) -> list[FilterOption]:
    """Convert one option set and check its shape."""
    concrete = not PLACEHOLDER_PATTERN.search(set_id)
    if not (concrete and FILTER_OPTIONS_ID_PATTERN.match(set_id)):
        msg = f"'{path}': invalid options source id '{set_id}'."
        raise FilterOptionsConfigError(msg)
    try:
        options = msgspec.convert(payload, type=list[FilterOption])
    except msgspec.ValidationError as exc:
        msg = f"'{path}': invalid options in '{set_id}': {exc}"
        raise FilterOptionsConfigError(msg) from exc
    if not options:
        msg = f"'{path}': options source '{set_id}' has no options."
        raise FilterOptionsConfigError(msg)
    ids = [option.id for option in options]
    if len(ids) != len(set(ids)):
        msg = f"'{path}': options source '{set_id}' repeats an option id."
        raise FilterOptionsConfigError(msg)
    defaults = [option.id for option in options if option.default]
    if len(defaults) != 1:
        msg = (
            f"'{path}': options source '{set_id}' must mark exactly one default, "
            f"found {len(defaults)}."
        )
        raise FilterOptionsConfigError(msg)
    return options


def _option_files(directory: Path) -> list[Path]:
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file()
        and path.suffix in YAML_SUFFIXES
        and path.name != ALLOWLIST_FILENAME
    )


def load_filters_config_from_lang_dir(
    directory: Path, allowlist: Allowlist
) -> FilterOptionsConfig:
    """Load every option set defined in a language's options directory.

    Option sets that use an option id missing from ``allowlist`` are left out
    of the catalog and logged.

    Parameters
    ----------
    directory : Path
        Language directory (for example ``preferences_config/options/en``).
    allowlist : Allowlist
        Identifiers approved for this language.

    Returns
    -------
    dict[str, list[FilterOption]]
        Option sets keyed by options source id, ordered by file then by
        position within the file.

    Raises
    ------
    FileNotFoundError
        If ``directory`` does not exist.
    FilterOptionsConfigError
        If a file is malformed, an option set is invalid, or two files define
        the same options source id.
    """
    if not directory.is_dir():
        msg = f"Filter options directory '{directory}' not found."
        raise FileNotFoundError(msg)
    catalog: FilterOptionsConfig = {}
    for path in _option_files(directory):
        for set_id, payload in _load_yaml_mapping(path).items():
            key = str(set_id)
            if key in catalog:
                msg = f"'{path}': duplicate options source id '{key}'."
                raise FilterOptionsConfigError(msg)
            options = _validate_option_set(key, payload, path)
            unknown = [
                option.id
                for option in options
                if option.id not in allowlist.options_by_id
            ]
            if unknown:
                logger.warning(
                    "skipping options source '%s' in %s: ids not in allow-list: %s",
                    key,
                    path,
                    ", ".join(unknown),
                )
                continue
            catalog[key] = options
    return catalog


__all__ = ["load_allowlist_from_lang_dir", "load_filters_config_from_lang_dir"]
