"""Common literal values used across txttv_pages.

These constants keep the identifier domain, fragment element names, and the
template placeholder vocabulary centralized so the resolver, assembler,
validators, and tests can import the same values without drifting. Intended
for internal use within the txttv_pages package.

Examples
--------
>>> from txttv_pages import _constants
>>> _constants.FRAGMENT_FILENAME_TEMPLATE.format(page_id=101)
'page-101.xml'
>>> _constants.MAX_FRAGMENT_BYTES
262144
"""

MIN_PAGE_ID = 100
MAX_PAGE_ID = 999

DEFAULT_FIRST_PAGE = 100
DEFAULT_LAST_PAGE = 110
DEFAULT_INDEX_PAGE = 100
DEFAULT_LINK_TEMPLATE = "?page={page_id}"

FRAGMENT_FILENAME_TEMPLATE = "page-{page_id}.xml"
FRAGMENT_ROOT_ELEMENT = "fragment"
FRAGMENT_BODY_ELEMENT = "set-body"

MAX_FRAGMENT_BYTES = 256 * 1024
MAX_FRAGMENT_COUNT = 50
MAX_CONTENT_BYTES = 256 * 1024

CONTENT_SUFFIX = ".txt"

TEMPLATE_FILENAME = "page.jinja"
STYLESHEET_FILENAME = "teletext.css"
SCRIPT_FILENAME = "navigation.js"

PLACEHOLDERS = frozenset(
    {
        "page_id",
        "title",
        "category",
        "content",
        "prev_href",
        "next_href",
        "index_href",
        "first_page",
        "last_page",
        "stylesheet",
        "script",
    }
)
REQUIRED_PLACEHOLDERS = frozenset(
    {"content", "page_id", "prev_href", "next_href", "index_href"}
)
