"""Utility helpers shared by the integration configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import ENVIRONMENTS, IntegrationConfigError, SiteDirs, SiteParams

DEFAULT_DIRS: dict[str, str] = {
    "content": "content",
    "options": "preferences_config/options",
    "partials": "partials",
    "images": "images",
}


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_env(value: object | None) -> str:
    """Return a supported environment name or raise."""
    env = _optional_str(value)
    if env is None:
        msg = "Integration configuration requires an 'env'."
        raise IntegrationConfigError(msg)
    if env not in ENVIRONMENTS:
        expected = ", ".join(ENVIRONMENTS)
        msg = f"Unknown env '{env}'. Expected one of: {expected}"
        raise IntegrationConfigError(msg)
    return env


def _normalize_languages(value: object | None) -> list[str]:
    """Normalize language definitions into a non-empty list of codes."""
    match value:
        case str() as text:
            languages = [segment for segment in text.split() if segment]
        case list() as items:
            languages = [str(item).strip() for item in items if str(item).strip()]
        case _:
            languages = []
    if not languages:
        msg = "Integration configuration requires at least one language."
        raise IntegrationConfigError(msg)
    return languages


def _build_site_params(
    payload: typ.Mapping[str, typ.Any] | None, env: str
) -> SiteParams:
    """Build SiteParams, enforcing the keys each environment needs."""
    match payload:
        case dict() as data:
            img_url = _optional_str(data.get("img_url"))
            branch = _optional_str(data.get("branch"))
        case None:
            img_url = branch = None
        case _:
            msg = "'site_params' must be a mapping."
            raise IntegrationConfigError(msg)
    if not img_url:
        msg = "'site_params.img_url' is required."
        raise IntegrationConfigError(msg)
    if env == "preview" and not branch:
        msg = "'site_params.branch' is required when env is 'preview'."
        raise IntegrationConfigError(msg)
    return SiteParams(img_url=img_url, branch=branch)


def _resolve_dirs(
    site_dir: Path, payload: typ.Mapping[str, typ.Any] | None
) -> SiteDirs:
    """Resolve configured directories against ``site_dir`` using defaults."""
    combined: dict[str, typ.Any] = dict(DEFAULT_DIRS)
    if payload:
        combined.update({key: value for key, value in payload.items() if value})
    resolved: dict[str, Path] = {}
    for key in DEFAULT_DIRS:
        path = Path(str(combined[key]))
        resolved[key] = path if path.is_absolute() else site_dir / path
    return SiteDirs(**resolved)


__all__ = [
    "DEFAULT_DIRS",
    "_build_site_params",
    "_normalize_languages",
    "_optional_str",
    "_require_env",
    "_resolve_dirs",
]
