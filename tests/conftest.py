"""Shared fixtures that lay out a small Markdoc site on disk.

The sample site mirrors the Hugo layout the integration expects:

* ``mdoc.yaml``: integration configuration at the site root.
* ``content/en/primary_colors.mdoc``: a document with page filters, further
  reading links, a partial include, a tag, an image, and a code fence.
* ``partials/header.mdoc``: a partial that includes
  ``partials/shared/footer_note.mdoc``.
* ``preferences_config/options/en``: the allow-list and option sets for the
  colour, finish, and paint filters.
"""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

PRIMARY_COLORS_DOC = dedent(
    """\
    ---
    title: Primary Colors
    draft: false
    page_filters:
      - display_name: Color
        id: color
        options_source: color_options
      - display_name: Finish
        id: finish
        options_source: finish_options
      - display_name: Paint
        id: paint
        options_source: "<finish>_<color>_paint_options"
    further_reading:
      - link: https://example.com/color-theory
        text: Color theory
        tag: blog
      - link: https://example.com/paint
        text: Paint guide
    ---
    {% partial file="header.mdoc" /%}

    ## Choosing a color

    Pick a color that suits the room.

    ![Swatch](swatches/red.png)

    {% alert level="warning" .wide %}
    Test a small patch first.
    {% /alert %}

    ```python
    print("mix paint")
    ```
    """
)

ALLOWLIST_YAML = dedent(
    """\
    filters:
      - id: color
        display_name: Color
      - id: finish
        display_name: Finish
      - id: paint
        display_name: Paint
    options:
      - id: red
        display_name: Red
      - id: blue
        display_name: Blue
      - id: matte
        display_name: Matte
      - id: gloss
        display_name: Gloss
      - id: brick_red
        display_name: Brick red
      - id: cherry
        display_name: Cherry
      - id: navy
        display_name: Navy
      - id: sky
        display_name: Sky
    """
)

BASE_OPTIONS_YAML = dedent(
    """\
    color_options:
      - id: red
        display_name: Red
        default: true
      - id: blue
        display_name: Blue
    finish_options:
      - id: matte
        display_name: Matte
        default: true
      - id: gloss
        display_name: Gloss
    """
)

PAINT_OPTIONS_YAML = dedent(
    """\
    matte_red_paint_options:
      - id: brick_red
        display_name: Brick red
        default: true
      - id: cherry
        display_name: Cherry
    matte_blue_paint_options:
      - id: navy
        display_name: Navy
        default: true
    gloss_red_paint_options:
      - id: cherry
        display_name: Cherry
        default: true
    gloss_blue_paint_options:
      - id: navy
        display_name: Navy
        default: true
      - id: sky
        display_name: Sky
    """
)

CONFIG_YAML = dedent(
    """\
    env: development
    languages: [en]
    site_params:
      img_url: https://images.example.com/
    site_config:
      base_url: https://example.com/
    """
)


def write_sample_site(root: Path) -> Path:
    """Write the sample site beneath ``root`` and return the config path."""
    files = {
        "mdoc.yaml": CONFIG_YAML,
        "content/en/primary_colors.mdoc": PRIMARY_COLORS_DOC,
        "partials/header.mdoc": (
            "Welcome to the paint guide.\n\n"
            '{% partial file="shared/footer_note.mdoc" /%}\n'
        ),
        "partials/shared/footer_note.mdoc": "Prices exclude tax.\n",
        "preferences_config/options/en/allowlist.yaml": ALLOWLIST_YAML,
        "preferences_config/options/en/base.yaml": BASE_OPTIONS_YAML,
        "preferences_config/options/en/paint.yaml": PAINT_OPTIONS_YAML,
    }
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root / "mdoc.yaml"


@pytest.fixture
def sample_site(tmp_path: Path) -> Path:
    """Return the path to the sample site's ``mdoc.yaml``."""
    return write_sample_site(tmp_path / "site")


@pytest.fixture
def options_dir(sample_site: Path) -> Path:
    """Return the sample site's English filter options directory."""
    return sample_site.parent / "preferences_config" / "options" / "en"
