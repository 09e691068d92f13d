"""Load and validate the mdoc integration configuration.

This subpackage parses the site's ``mdoc.yaml`` file, checks the keys each
environment requires, resolves the content, options, and partials directories
against the site root, and produces an :class:`IntegrationConfig` that the
compiler consumes. The primary entry point is
:func:`load_integration_config`.

Examples
--------
>>> from pathlib import Path
>>> from mdoc_pages.config import load_integration_config
>>> config = load_integration_config(Path("site/mdoc.yaml"))  # doctest: +SKIP
>>> config.dirs.partials  # doctest: +SKIP
PosixPath('site/partials')
"""

from .loader import build_integration_config, load_integration_config
from .models import (
    ENVIRONMENTS,
    IntegrationConfig,
    IntegrationConfigError,
    SiteDirs,
    SiteParams,
)

__all__ = [
    "ENVIRONMENTS",
    "IntegrationConfig",
    "IntegrationConfigError",
    "SiteDirs",
    "SiteParams",
    "build_integration_config",
    "load_integration_config",
]
