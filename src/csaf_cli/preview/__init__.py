from .helpers import TEMPLATE_HELPERS, secure_href
from .html_template import render_html, render_preview
from .labels import create_html_template_translations, load_label_lookup, make_label_lookup
from .markdown_fields import MARKDOWN_FIELDS, modify_nested_values, parse_markdown

__all__ = [
    'TEMPLATE_HELPERS',
    'secure_href',
    'render_html',
    'render_preview',
    'create_html_template_translations',
    'load_label_lookup',
    'make_label_lookup',
    'MARKDOWN_FIELDS',
    'modify_nested_values',
    'parse_markdown',
]
