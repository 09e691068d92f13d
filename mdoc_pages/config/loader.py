"""Load integration configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_site_params,
    _normalize_languages,
    _optional_str,
    _require_env,
    _resolve_dirs,
)
from .models import IntegrationConfig, IntegrationConfigError


def load_integration_config(path: Path) -> IntegrationConfig:
    """Load the YAML configuration describing the site being compiled.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``mdoc.yaml``). Relative directories inside it resolve against the
        file's parent unless ``site_dir`` is given.

    Returns
    -------
    IntegrationConfig
        Parsed configuration, including the environment, languages, site
        parameters, and resolved content/options/partials directories.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    IntegrationConfigError
        If the top-level structure is not a mapping or required fields are
        missing or invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from mdoc_pages.config import load_integration_config
    >>> config = load_integration_config(Path("mdoc.yaml"))  # doctest: +SKIP
    >>> config.languages  # doctest: +SKIP
    ['en', 'ja']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise IntegrationConfigError(msg)
    return build_integration_config(loaded, base_dir=path.parent)


def build_integration_config(
    raw: typ.Mapping[str, typ.Any], *, base_dir: Path
) -> IntegrationConfig:
    """Build an IntegrationConfig from an already decoded mapping."""
    env = _require_env(raw.get("env"))
    languages = _normalize_languages(raw.get("languages"))
    site_params = _build_site_params(raw.get("site_params"), env)

    site_config = raw.get("site_config") or {}
    if not isinstance(site_config, dict):
        msg = "'site_config' must be a mapping."
        raise IntegrationConfigError(msg)
    base_url = _optional_str(site_config.get("base_url"))
    if not base_url:
        msg = "'site_config.base_url' is required."
        raise IntegrationConfigError(msg)

    site_dir = Path(raw.get("site_dir") or base_dir)
    if not site_dir.is_absolute():
        site_dir = base_dir / site_dir
    dirs = _resolve_dirs(site_dir, raw.get("dirs"))

    return IntegrationConfig(
        env=env,
        languages=languages,
        site_params=site_params,
        base_url=base_url,
        site_dir=site_dir,
        dirs=dirs,
        pygments_style=raw.get("pygments_style", "monokai"),
        output_suffix=raw.get("output_suffix", ".md"),
    )


__all__ = ["build_integration_config", "load_integration_config"]
