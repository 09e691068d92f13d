"""Shared dataclasses used by the page build pipeline."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class BuildResult:
    """Output of building one page.

    Attributes
    ----------
    markdown : str
        Complete Hugo content file: front matter followed by the HTML body.
    html : str
        Rendered body HTML without front matter.
    errors : list[str]
        Problems found while joining the page's filters against the option
        catalog.
    """

    markdown: str
    html: str
    errors: list[str] = dc.field(default_factory=list)


__all__ = ["BuildResult"]
