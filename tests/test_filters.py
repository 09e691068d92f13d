"""Unit tests for filter option catalogs, allow-lists, and page manifests."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from mdoc_pages.filters import (
    FilterOptionsConfigError,
    build_page_filters_manifest,
    get_filter_options_for_page,
    load_allowlist_from_lang_dir,
    load_filters_config_from_lang_dir,
)
from mdoc_pages.frontmatter import MinifiedPageFilterConfig, validate_frontmatter

if typ.TYPE_CHECKING:
    from pathlib import Path

    from mdoc_pages.frontmatter import Frontmatter

PAINT_SETS = [
    "matte_red_paint_options",
    "matte_blue_paint_options",
    "gloss_red_paint_options",
    "gloss_blue_paint_options",
]


def _frontmatter(*filters: tuple[str, str, str] | dict[str, str]) -> Frontmatter:
    page_filters = [
        item
        if isinstance(item, dict)
        else {"display_name": item[0], "id": item[1], "options_source": item[2]}
        for item in filters
    ]
    return validate_frontmatter({"title": "Paint", "page_filters": page_filters})


def _paint_frontmatter() -> Frontmatter:
    return _frontmatter(
        ("Color", "color", "color_options"),
        ("Finish", "finish", "finish_options"),
        ("Paint", "paint", "<finish>_<color>_paint_options"),
    )


def _write_lang_dir(directory: Path, files: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "allowlist.yaml").write_text(
        dedent(
            """\
            filters:
              - id: color
                display_name: Color
            options:
              - id: red
                display_name: Red
              - id: blue
                display_name: Blue
            """
        ),
        encoding="utf-8",
    )
    for name, text in files.items():
        (directory / name).write_text(dedent(text), encoding="utf-8")
    return directory


def test_load_allowlist(options_dir: Path) -> None:
    """The allow-list maps filter and option ids to their entries."""
    allowlist = load_allowlist_from_lang_dir(options_dir)

    assert list(allowlist.filters_by_id) == [
        "color",
        "finish",
        "paint",
    ], "filter ids should be loaded in order"
    assert allowlist.options_by_id["brick_red"].display_name == "Brick red", (
        "option display names should be kept"
    )


def test_load_allowlist_requires_file(tmp_path: Path) -> None:
    """A language directory without an allow-list cannot be loaded."""
    with pytest.raises(FileNotFoundError, match="allowlist.yaml"):
        load_allowlist_from_lang_dir(tmp_path)


def test_load_allowlist_rejects_duplicate_ids(tmp_path: Path) -> None:
    """Allow-list ids must be unique within their section."""
    (tmp_path / "allowlist.yaml").write_text(
        "filters:\n"
        "  - {id: color, display_name: Color}\n"
        "  - {id: color, display_name: Colour}\n",
        encoding="utf-8",
    )

    with pytest.raises(FilterOptionsConfigError, match="duplicate filter id"):
        load_allowlist_from_lang_dir(tmp_path)


def test_load_filters_config(options_dir: Path) -> None:
    """Option sets load from every file except the allow-list."""
    allowlist = load_allowlist_from_lang_dir(options_dir)

    catalog = load_filters_config_from_lang_dir(options_dir, allowlist)

    assert list(catalog) == [
        "color_options",
        "finish_options",
        *PAINT_SETS,
    ], "sets should be ordered by file then position"
    assert [option.id for option in catalog["color_options"]] == [
        "red",
        "blue",
    ], "option order should be preserved"
    assert catalog["color_options"][0].default, "default flag should be loaded"


def test_sets_with_unlisted_options_are_skipped(tmp_path: Path) -> None:
    """Option sets that use ids missing from the allow-list are left out."""
    lang_dir = _write_lang_dir(
        tmp_path / "en",
        {
            "colors.yaml": """\
                color_options:
                  - {id: red, display_name: Red, default: true}
                shade_options:
                  - {id: teal, display_name: Teal, default: true}
            """,
        },
    )
    allowlist = load_allowlist_from_lang_dir(lang_dir)

    catalog = load_filters_config_from_lang_dir(lang_dir, allowlist)

    assert list(catalog) == ["color_options"], "unlisted set should be skipped"


@pytest.mark.parametrize(
    ("files", "message"),
    [
        (
            {
                "a.yaml": """\
                    color_options:
                      - {id: red, display_name: Red, default: true}
                      - {id: blue, display_name: Blue, default: true}
                """
            },
            "exactly one default",
        ),
        (
            {"a.yaml": "color_options:\n  - {id: red, display_name: Red}\n"},
            "exactly one default",
        ),
        ({"a.yaml": "color_options: []\n"}, "has no options"),
        (
            {
                "a.yaml": """\
                    color_options:
                      - {id: red, display_name: Red, default: true}
                      - {id: red, display_name: Crimson}
                """
            },
            "repeats an option id",
        ),
        (
            {"a.yaml": "<color>_options:\n  - {id: red, display_name: Red}\n"},
            "invalid options source id",
        ),
        (
            {"a.yaml": "colors:\n  - {id: red, display_name: Red}\n"},
            "invalid options source id",
        ),
        (
            {
                "a.yaml": (
                    "color_options:\n"
                    "  - {id: red, display_name: Red, default: true}\n"
                ),
                "b.yml": (
                    "color_options:\n"
                    "  - {id: blue, display_name: Blue, default: true}\n"
                ),
            },
            "duplicate options source id",
        ),
    ],
    ids=[
        "two-defaults",
        "no-default",
        "empty",
        "repeated-option",
        "placeholder-id",
        "bad-suffix",
        "duplicate-across-files",
    ],
)
def test_invalid_option_files_raise(
    files: dict[str, str], message: str, tmp_path: Path
) -> None:
    """Malformed option sets abort catalog loading."""
    lang_dir = _write_lang_dir(tmp_path / "en", files)
    allowlist = load_allowlist_from_lang_dir(lang_dir)

    with pytest.raises(FilterOptionsConfigError, match=message):
        load_filters_config_from_lang_dir(lang_dir, allowlist)


def test_get_filter_options_for_page_expands_placeholders(options_dir: Path) -> None:
    """Placeholder sources select every concrete set they can expand to."""
    allowlist = load_allowlist_from_lang_dir(options_dir)
    catalog = load_filters_config_from_lang_dir(options_dir, allowlist)

    selected = get_filter_options_for_page(_paint_frontmatter(), catalog)

    assert set(selected) == {
        "color_options",
        "finish_options",
        *PAINT_SETS,
    }, "every referenced set should be selected"


def test_get_filter_options_for_page_without_filters(options_dir: Path) -> None:
    """Pages without filters select nothing."""
    allowlist = load_allowlist_from_lang_dir(options_dir)
    catalog = load_filters_config_from_lang_dir(options_dir, allowlist)

    frontmatter = validate_frontmatter({"title": "Plain"})

    assert get_filter_options_for_page(frontmatter, catalog) == {}, (
        "no filters means no option sets"
    )


def test_build_manifest_resolves_defaults_through_placeholders(
    options_dir: Path,
) -> None:
    """Dependent filters draw their default from earlier filters' defaults."""
    allowlist = load_allowlist_from_lang_dir(options_dir)
    catalog = load_filters_config_from_lang_dir(options_dir, allowlist)

    manifest = build_page_filters_manifest(_paint_frontmatter(), catalog, allowlist)

    assert manifest.errors == [], "sample filters should join cleanly"
    assert manifest.defaults_by_filter_id == {
        "color": "red",
        "finish": "matte",
        "paint": "brick_red",
    }, "defaults should follow the default combination"
    paint = manifest.filters_by_id["paint"]
    assert paint.options_source_ids == PAINT_SETS, "product order should be kept"
    assert paint.possible_values == [
        "brick_red",
        "cherry",
        "navy",
        "sky",
    ], "possible values should be de-duplicated in first-seen order"
    assert set(manifest.option_sets_by_id) == {
        "color_options",
        "finish_options",
        *PAINT_SETS,
    }, "manifest should carry every referenced option set"
    assert manifest.minified() == [
        MinifiedPageFilterConfig("Color", "color", "color_options", "red"),
        MinifiedPageFilterConfig("Finish", "finish", "finish_options", "matte"),
        MinifiedPageFilterConfig(
            "Paint", "paint", "<finish>_<color>_paint_options", "brick_red"
        ),
    ], "minified filters should embed resolved defaults"


def test_explicit_default_drives_dependent_default(options_dir: Path) -> None:
    """An explicit default on an earlier filter selects the dependent set."""
    allowlist = load_allowlist_from_lang_dir(options_dir)
    catalog = load_filters_config_from_lang_dir(options_dir, allowlist)
    frontmatter = _frontmatter(
        {
            "display_name": "Color",
            "id": "color",
            "options_source": "color_options",
            "default_value": "blue",
        },
        ("Finish", "finish", "finish_options"),
        ("Paint", "paint", "<finish>_<color>_paint_options"),
    )

    manifest = build_page_filters_manifest(frontmatter, catalog, allowlist)

    assert manifest.defaults_by_filter_id["paint"] == "navy", (
        "matte_blue_paint_options should supply the default"
    )


@pytest.mark.parametrize(
    ("filters", "message"),
    [
        (
            [("Texture", "texture", "color_options")],
            "Unrecognized filter id 'texture'",
        ),
        (
            [("Finish", "finish", "gloss_options")],
            "unknown options source 'gloss_options'",
        ),
        (
            [
                ("Paint", "paint", "<finish>_<color>_paint_options"),
                ("Color", "color", "color_options"),
            ],
            "placeholder <finish>",
        ),
        (
            [
                {
                    "display_name": "Color",
                    "id": "color",
                    "options_source": "color_options",
                    "default_value": "green",
                }
            ],
            "default value 'green'",
        ),
        (
            [
                ("Color", "color", "color_options"),
                ("Colour", "color", "color_options"),
            ],
            "Duplicate filter id 'color'",
        ),
    ],
    ids=[
        "unlisted-filter",
        "unknown-source",
        "forward-placeholder",
        "bad-default",
        "duplicate-id",
    ],
)
def test_build_manifest_reports_problems(
    filters: list[tuple[str, str, str] | dict[str, str]],
    message: str,
    options_dir: Path,
) -> None:
    """Manifest problems are collected rather than raised."""
    allowlist = load_allowlist_from_lang_dir(options_dir)
    catalog = load_filters_config_from_lang_dir(options_dir, allowlist)

    manifest = build_page_filters_manifest(_frontmatter(*filters), catalog, allowlist)

    assert any(message in error for error in manifest.errors), (
        f"expected an error containing {message!r}, got {manifest.errors}"
    )
