"""
Markdown rendering of rich-text fields in a CSAF document.

CSAF text fields may contain Markdown. Before the preview is rendered every
field listed in MARKDOWN_FIELDS is compiled to HTML. Patterns are dotted
paths where '*' stands for every element of the array at that position.
"""

import html
import logging
import re
from typing import Any, Callable, List, Optional, Sequence

import markdown
from markdown import util
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .helpers import is_safe_href

logger = logging.getLogger(__name__)

WILDCARD = "*"

MARKDOWN_FIELDS = [
    "document.acknowledgments.*.summary",
    "document.distribution.text",
    "document.notes.*.text",
    "document.publisher.issuing_authority",
    "document.references.*.summary",
    "document.tracking.revision_history.*.summary",
    "product_tree.product_groups.*.summary",
    "vulnerabilities.*.acknowledgments.*.summary",
    "vulnerabilities.*.involvements.*.summary",
    "vulnerabilities.*.notes.*.text",
    "vulnerabilities.*.references.*.summary",
    "vulnerabilities.*.remediations.*.details",
    "vulnerabilities.*.remediations.*.entitlements.*",
    "vulnerabilities.*.remediations.*.restart_required.details",
    "vulnerabilities.*.threats.*.details",
]

MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "sane_lists"]

_SINGLE_PARAGRAPH = re.compile(r"^<p>(.*)</p>$")


class _SafeLinkTreeprocessor(Treeprocessor):
    """Removes link and image targets that fail the href allow-list."""

    def _decode(self, value: str) -> str:
        # Backslash escapes and the entity-obfuscated mailto of email autolinks
        # are only resolved after the tree processors have run.
        value = self.md.treeprocessors["unescape"].unescape(value)
        return html.unescape(value.replace(util.AMP_SUBSTITUTE, "&"))

    def run(self, root):
        for element in root.iter():
            for attribute in ("href", "src"):
                value = element.get(attribute)
                if value is not None and not is_safe_href(self._decode(value)):
                    logger.debug(f"Dropping unsafe {attribute} '{value}' from Markdown output")
                    del element.attrib[attribute]


class SafeMarkdownExtension(Extension):
    """Escapes raw HTML instead of passing it through and filters link targets."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.treeprocessors.register(_SafeLinkTreeprocessor(md), "safe_links", 5)


def render_markdown(text: str) -> str:
    """
    Compile Markdown to sanitized HTML.

    Text without Markdown syntax (rendered as a single paragraph identical to
    the input) is returned unchanged.
    """
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS + [SafeMarkdownExtension()])
    rendered = md.convert(text)

    match = _SINGLE_PARAGRAPH.match(rendered)
    if match and match.group(1) == text:
        return text
    return rendered


def split_pattern(pattern: str) -> List[str]:
    """'vulnerabilities.*.notes.*.text' -> ['vulnerabilities', '*', 'notes', '*', 'text']"""
    return [segment for segment in pattern.split(".") if segment]


def _get(obj: Any, path: Sequence[str]) -> Optional[Any]:
    current = obj
    for segment in path:
        if isinstance(current, dict):
            current = current.get(segment)
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            return None
        if current is None:
            return None
    return current


def _modify_segments(obj: Any, segments: Sequence[str], modifier: Callable[[str], str]) -> None:
    if WILDCARD not in segments:
        if not segments:
            return
        parent = _get(obj, segments[:-1])
        key = segments[-1]
        if isinstance(parent, dict) and isinstance(parent.get(key), str):
            parent[key] = modifier(parent[key])
        elif isinstance(parent, list) and key.isdigit() and int(key) < len(parent) \
                and isinstance(parent[int(key)], str):
            parent[int(key)] = modifier(parent[int(key)])
        return

    position = list(segments).index(WILDCARD)
    elements = _get(obj, segments[:position]) if position else obj
    if not isinstance(elements, list):
        return

    rest = segments[position + 1:]
    if rest:
        for element in elements:
            if isinstance(element, dict):
                _modify_segments(element, rest, modifier)
    else:
        elements[:] = [modifier(v) if isinstance(v, str) else v for v in elements]


def modify_nested_values(obj: Any, pattern: str, modifier: Callable[[str], str]) -> Any:
    """
    Apply modifier to every string matched by pattern, in place.

    Non-string and missing values are left untouched.

    Args:
        obj: Nested dict/list structure
        pattern: Dotted path, '*' matching every element of an array
        modifier: Function applied to each matching string

    Returns:
        The same obj
    """
    _modify_segments(obj, split_pattern(pattern), modifier)
    return obj


def parse_markdown(document: dict, fields: Sequence[str] = MARKDOWN_FIELDS,
                   modifier: Callable[[str], str] = render_markdown) -> dict:
    """Render every rich-text field of a CSAF document to HTML, in place."""
    for field in fields:
        modify_nested_values(document, field, modifier)
    return document
