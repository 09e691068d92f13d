"""Common literal values used across mdoc_pages.

These constants keep regexes, filenames, and attribute keys centralized so the
parser, validators, and tests can import the same values without drifting.
Intended for internal use within the mdoc_pages package.

Examples
--------
>>> from mdoc_pages import _constants
>>> bool(_constants.SNAKE_CASE_PATTERN.match("paint_color"))
True
>>> bool(_constants.FILTER_OPTIONS_ID_PATTERN.match("<finish>_paint_options"))
True
"""

import re

SNAKE_CASE_REGEX = r"^[a-z0-9]+(_[a-z0-9]+)*$"
FILTER_OPTIONS_ID_REGEX = r"^([a-z0-9_]|<[a-z0-9_]+>)+_options$"
PLACEHOLDER_REGEX = r"<([a-z0-9_]+)>"

SNAKE_CASE_PATTERN = re.compile(SNAKE_CASE_REGEX)
FILTER_OPTIONS_ID_PATTERN = re.compile(FILTER_OPTIONS_ID_REGEX)
PLACEHOLDER_PATTERN = re.compile(PLACEHOLDER_REGEX)

PARTIAL_TAG = "partial"
PARTIAL_FILE_ATTRIBUTE = "file"
FRONTMATTER_ATTRIBUTE = "frontmatter"

MDOC_SUFFIX = ".mdoc"
ALLOWLIST_FILENAME = "allowlist.yaml"
YAML_SUFFIXES = (".yaml", ".yml")
FILTERS_MANIFEST_ELEMENT_ID = "mdoc-page-filters"
