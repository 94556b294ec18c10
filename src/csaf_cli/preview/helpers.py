"""
Template helpers for the HTML preview.

Each helper receives the already rendered text of a template block and
returns the text to emit in its place. They are registered as Jinja2 filters
and used as filter blocks, e.g. ``{% filter upper_case %}{{ category }}{% endfilter %}``.
"""

import html
import re
from typing import Callable, Dict

from markupsafe import Markup

ALLOWED_HREF_PREFIXES = ("#", "mailto", "tel", "http", "ftp")
ALLOWED_DATA_MIME_TYPES = ("image/png", "image/jpeg", "image/gif")

_BASE64 = re.compile(
    r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=|[A-Za-z0-9+/]{4})$"
)


def is_base64(value: str) -> bool:
    return bool(value) and _BASE64.match(value) is not None


def is_safe_href(value: str) -> bool:
    """
    True when a link target may be emitted.

    Allowed are fragment, mailto, tel, http(s) and ftp targets, and base64
    data URIs of PNG, JPEG or GIF images.
    """
    if not isinstance(value, str):
        return False
    if value.startswith(ALLOWED_HREF_PREFIXES):
        return True
    for mime_type in ALLOWED_DATA_MIME_TYPES:
        prefix = f"data:{mime_type};base64,"
        if value.startswith(prefix):
            return is_base64(value[len(prefix):])
    return False


def remove_trailing_comma(text: str) -> str:
    """Drops one dangling ', ' left behind by a comma-joined list."""
    stripped = str(text).rstrip()
    if len(stripped) > 1 and stripped.endswith(","):
        return Markup(stripped[:-1]) if isinstance(text, Markup) else stripped[:-1]
    return text


def upper_case(text: str) -> str:
    """Capitalizes the first character only."""
    return text[:1].upper() + text[1:]


def replace_underscores(text: str) -> str:
    return text.replace("_", " ")


def secure_href(text: str) -> Markup:
    """Renders an href attribute for allow-listed targets and nothing otherwise."""
    href = html.unescape(str(text)).strip()
    if not is_safe_href(href):
        return Markup("")
    return Markup('href="{}"').format(href)


TEMPLATE_HELPERS: Dict[str, Callable] = {
    "remove_trailing_comma": remove_trailing_comma,
    "upper_case": upper_case,
    "replace_underscores": replace_underscores,
    "secure_href": secure_href,
}
