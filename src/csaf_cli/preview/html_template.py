"""
HTML preview of a CSAF document.

The page is produced from the Jinja2 templates in templates.py. The document
is first passed through the Markdown field walker so rich-text fields arrive
as sanitized HTML, then rendered together with the resolved 't_*' labels and
the template helpers.
"""

import copy
import logging
from typing import Any, Dict, Iterator, List, Optional

from jinja2 import ChainableUndefined, DictLoader, Environment

from .helpers import TEMPLATE_HELPERS
from .labels import LabelLookup, create_html_template_translations, make_label_lookup
from .markdown_fields import parse_markdown
from .templates import DOCUMENT_TEMPLATE, PARTIALS

logger = logging.getLogger(__name__)

DOCUMENT_TEMPLATE_NAME = "document"

# Order in which product status tables appear in the preview
PREVIEW_STATUS_ORDER = [
    "known_affected",
    "first_affected",
    "last_affected",
    "known_not_affected",
    "recommended",
    "fixed",
    "first_fixed",
    "under_investigation",
]


def create_environment() -> Environment:
    """Jinja2 environment holding the document template, its partials and helpers."""
    templates = dict(PARTIALS)
    templates[DOCUMENT_TEMPLATE_NAME] = DOCUMENT_TEMPLATE
    env = Environment(
        loader=DictLoader(templates),
        autoescape=True,
        undefined=ChainableUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters.update(TEMPLATE_HELPERS)
    return env


def _iter_branch_products(branches: Any) -> Iterator[Dict[str, Any]]:
    if not isinstance(branches, list):
        return
    for branch in branches:
        if not isinstance(branch, dict):
            continue
        product = branch.get("product")
        if isinstance(product, dict):
            yield product
        yield from _iter_branch_products(branch.get("branches"))


def _dicts(value: Any) -> List[Dict[str, Any]]:
    """The dictionary elements of a list; anything else yields nothing."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def build_product_names(document: Dict[str, Any]) -> Dict[str, str]:
    """Maps every product id of the product tree to its display name."""
    product_tree = document.get("product_tree")
    if not isinstance(product_tree, dict):
        return {}
    names = {}
    for product in _iter_branch_products(product_tree.get("branches")):
        if isinstance(product.get("product_id"), str):
            names[product["product_id"]] = product.get("name", "")
    for product in _dicts(product_tree.get("full_product_names")):
        if isinstance(product.get("product_id"), str):
            names[product["product_id"]] = product.get("name", "")
    for relationship in _dicts(product_tree.get("relationships")):
        full_product_name = relationship.get("full_product_name")
        if isinstance(full_product_name, dict) and isinstance(full_product_name.get("product_id"), str):
            names[full_product_name["product_id"]] = full_product_name.get("name", "")
    return names


def lookup_product_name(product_names: Dict[str, str], product_id: Any) -> str:
    """Display name of a product id, the id itself when it is unknown."""
    if not isinstance(product_id, str):
        return str(product_id)
    return product_names.get(product_id, product_id)


def find_score(vulnerability: Dict[str, Any], product_id: str) -> Optional[Dict[str, Any]]:
    """The CVSS block of the first score that covers product_id."""
    for score in _dicts(vulnerability.get("scores")):
        products = score.get("products")
        if not isinstance(products, list) or product_id not in products:
            continue
        cvss = score.get("cvss_v3") or score.get("cvss_v4")
        return cvss if isinstance(cvss, dict) else None
    return None


def build_product_status_tables(
    vulnerability: Dict[str, Any],
    product_names: Dict[str, str],
    translations: Dict[str, str],
) -> List[Dict[str, Any]]:
    """One table per product status present in the vulnerability, rows carrying the product's score."""
    if not isinstance(vulnerability, dict):
        return []
    product_status = vulnerability.get("product_status")
    if not isinstance(product_status, dict):
        return []

    tables = []
    for status in PREVIEW_STATUS_ORDER:
        product_ids = product_status.get(status)
        if not product_ids or not isinstance(product_ids, list):
            continue
        rows = []
        for product_id in product_ids:
            cvss = find_score(vulnerability, product_id) or {}
            rows.append({
                "name": lookup_product_name(product_names, product_id),
                "vectorString": cvss.get("vectorString", ""),
                "baseScore": cvss.get("baseScore", ""),
                "baseSeverity": cvss.get("baseSeverity", ""),
            })
        tables.append({
            "status": status,
            "label": translations.get(f"t_{status}", status),
            "rows": rows,
        })
    return tables


def render_html(document: Dict[str, Any], translations: Dict[str, str]) -> str:
    """
    Render a CSAF document (rich-text fields already converted) to an HTML page.

    Args:
        document: CSAF document
        translations: The 't_*' labels

    Returns:
        str: The HTML page
    """
    product_names = build_product_names(document)
    env = create_environment()
    template = env.get_template(DOCUMENT_TEMPLATE_NAME)

    vulnerabilities = document.get("vulnerabilities")
    context = dict(translations)
    context.update({
        "document": document.get("document") or {},
        "product_tree": document.get("product_tree") or {},
        "vulnerabilities": vulnerabilities if isinstance(vulnerabilities, list) else [],
        "product_name": lambda product_id: lookup_product_name(product_names, product_id),
        "product_status_tables": lambda vulnerability: build_product_status_tables(
            vulnerability, product_names, translations
        ),
    })
    return template.render(**context)


def render_preview(document: Dict[str, Any], lookup: Optional[LabelLookup] = None) -> str:
    """
    Produce the HTML preview of a CSAF document.

    The input document is not modified.

    Args:
        document: CSAF document
        lookup: Label lookup (key, fallback) -> str, English texts by default

    Returns:
        str: The HTML page
    """
    translations = create_html_template_translations(lookup or make_label_lookup())
    prepared = parse_markdown(copy.deepcopy(document))
    html = render_html(prepared, translations)
    logger.debug(f"Rendered HTML preview with {len(prepared.get('vulnerabilities') or [])} vulnerabilities")
    return html
