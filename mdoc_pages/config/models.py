"""Typed dataclasses describing the mdoc integration configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

ENVIRONMENTS = ("development", "preview", "live")


class IntegrationConfigError(ValueError):
    """Raised when the integration configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SiteDirs:
    """Directories the integration reads from, resolved against the site root."""

    content: Path
    options: Path
    partials: Path
    images: Path


@dc.dataclass(slots=True)
class SiteParams:
    """Hugo site parameters the generated pages depend on."""

    img_url: str
    branch: str | None = None


@dc.dataclass(slots=True)
class IntegrationConfig:
    """A fully resolved integration configuration sourced from YAML."""

    env: str
    languages: list[str]
    site_params: SiteParams
    base_url: str
    site_dir: Path
    dirs: SiteDirs
    pygments_style: str = "monokai"
    output_suffix: str = ".md"

    @property
    def is_preview(self) -> bool:
        """Return ``True`` when building a branch preview."""
        return self.env == "preview"

    def language_content_dir(self, language: str) -> Path:
        """Return the content directory holding ``language`` documents."""
        return self.dirs.content / language

    def language_options_dir(self, language: str) -> Path:
        """Return the filter options directory for ``language``."""
        return self.dirs.options / language


__all__ = [
    "ENVIRONMENTS",
    "IntegrationConfig",
    "IntegrationConfigError",
    "SiteDirs",
    "SiteParams",
]
