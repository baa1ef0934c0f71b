"""Common literal values used across decldoc.

These constants keep output filenames and reserved names centralized so the
generator, templates, and tests can import the same values without drifting.
Intended for internal use within the decldoc package.

Examples
--------
>>> from decldoc import _constants
>>> _constants.PAGE_FILE_TEMPLATE.format(page=_constants.ROOT_PAGE_NAME)
'_.html'
>>> "helper" + _constants.EXPORT_SET_MARKER
'helper+'
"""

PAGE_FILE_TEMPLATE = "{page}.html"
ROOT_PAGE_NAME = "_"
ROOT_DISPLAY_NAME = "(root module)"
TOC_FILENAME = "index.html"
NAME_INDEX_FILENAME = "nameindex.html"
STYLESHEET_FILENAME = "styles.css"
DETAIL_ANCHOR = "decl-detail"
EXPORT_SET_MARKER = "+"
ANONYMOUS_CTOR_NAME = "_ctor"
CONFIG_FILENAME = "decldoc.yaml"
