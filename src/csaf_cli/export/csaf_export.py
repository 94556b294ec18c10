"""
CSAF document composition.

This module turns a draft (the editing model of an advisory) into a CSAF 2.0
security advisory. It owns the export pass: one product id generator is
created per call and shared by the product tree, relationship expansion,
product status lists, remediations and scores, so a product keeps the same
id everywhere in the document.

Composition is best-effort. Invalid CVSS vectors, empty sections or missing
optional fields never abort the export; structural validation of the result
is left to a CSAF validator.
"""

import copy
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .. import __version__
from .latest_version import retrieve_latest_version
from .pid_generator import PidGenerator
from .product_tree import build_full_product_names, get_products, parse_product_tree_branches
from .relationships import generate_relationships
from .score_evaluator import parse_score

logger = logging.getLogger(__name__)

ENGINE_NAME = "csaf-cli"
DEFAULT_DOCUMENT_CATEGORY = "csaf_security_advisory"
DEFAULT_CSAF_VERSION = "2.0"

PRODUCT_STATUSES = [
    "known_affected",
    "fixed",
    "first_fixed",
    "first_affected",
    "known_not_affected",
    "last_affected",
    "recommended",
    "under_investigation",
]

PRODUCT_DESCRIPTION_TITLES = {
    "en": "Product description for",
    "de": "Produktbeschreibung für",
}


def get_filename(tracking_id: str) -> str:
    """File name stem for a document, derived from its tracking id."""
    return re.sub(r"[^+\-a-z0-9]+", "_", (tracking_id or "").lower())


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def prune_none(value: Any) -> Any:
    """Recursively drop dictionary keys whose value is None."""
    if isinstance(value, dict):
        return {k: prune_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [prune_none(v) for v in value]
    return value


def deep_merge(base: Any, override: Any) -> Any:
    """
    Merge override into a copy of base.

    Dictionaries merge key by key, lists merge index by index and any other
    value in override replaces the one in base. None in override never
    replaces a value.
    """
    if override is None:
        return copy.deepcopy(base)
    if isinstance(base, dict) and isinstance(override, dict):
        merged = copy.deepcopy(base)
        for key, value in override.items():
            merged[key] = deep_merge(merged.get(key), value)
        return merged
    if isinstance(base, list) and isinstance(override, list):
        merged = copy.deepcopy(base)
        for index, value in enumerate(override):
            if index < len(merged):
                merged[index] = deep_merge(merged[index], value)
            else:
                merged.append(copy.deepcopy(value))
        return merged
    return copy.deepcopy(override)


def parse_note(note: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "category": note.get("category"),
        "text": note.get("content", ""),
        "title": note.get("title", ""),
    }


def parse_notes(draft: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Document notes followed by one description note per described product."""
    info = draft.get("document_information") or {}
    notes = [parse_note(n) for n in info.get("notes") or []]

    lang = (info.get("lang") or "en").lower().split("-")[0]
    title_prefix = PRODUCT_DESCRIPTION_TITLES.get(lang, PRODUCT_DESCRIPTION_TITLES["en"])
    for product in get_products(draft.get("products") or []):
        description = product.get("description") or ""
        if description:
            notes.append({
                "category": "description",
                "text": description,
                "title": f"{title_prefix} {product.get('name', '')}",
            })

    return notes


def _parse_acknowledgment(ack: Dict[str, Any]) -> Dict[str, Any]:
    names = [n for n in ack.get("names") or [] if n]
    return prune_none({
        "organization": ack.get("organization") or None,
        "names": names or None,
        "summary": ack.get("summary") or None,
        "urls": [ack["url"]] if ack.get("url") else None,
    })


def _build_tracking(info: Dict[str, Any], generated_at: str) -> Dict[str, Any]:
    history = info.get("revision_history") or []
    return {
        "generator": {
            "date": generated_at,
            "engine": {
                "version": __version__,
                "name": ENGINE_NAME,
            },
        },
        "current_release_date": (history[-1].get("date") if history else None) or generated_at,
        "initial_release_date": (history[0].get("date") if history else None) or generated_at,
        "revision_history": [
            {
                "date": entry.get("date"),
                "number": entry.get("number"),
                "summary": entry.get("summary"),
            }
            for entry in history
        ],
        "status": info.get("status"),
        "version": retrieve_latest_version(history) if history else "1",
        "id": info.get("id"),
    }


def _build_document(draft: Dict[str, Any], generated_at: str) -> Dict[str, Any]:
    info = draft.get("document_information") or {}
    publisher = info.get("publisher") or {}
    notes = parse_notes(draft)
    references = info.get("references") or []
    acknowledgments = info.get("acknowledgments") or []

    return {
        "category": info.get("category") or DEFAULT_DOCUMENT_CATEGORY,
        "csaf_version": info.get("csaf_version") or DEFAULT_CSAF_VERSION,
        "distribution": info.get("distribution"),
        "tracking": _build_tracking(info, generated_at),
        "lang": info.get("lang"),
        "title": info.get("title"),
        "publisher": {
            "category": publisher.get("category"),
            "contact_details": publisher.get("contact_details"),
            "issuing_authority": publisher.get("issuing_authority") or None,
            "name": publisher.get("name"),
            "namespace": publisher.get("namespace"),
        },
        "notes": notes or None,
        "references": [
            {
                "summary": reference.get("summary"),
                "url": reference.get("url"),
                "category": reference.get("category"),
            }
            for reference in references
        ] or None,
        "acknowledgments": [_parse_acknowledgment(ack) for ack in acknowledgments] or None,
    }


def _filter_product_status(
    products: List[Dict[str, Any]],
    status: str,
    pid_generator: PidGenerator,
) -> Optional[List[str]]:
    matching = [p for p in products if p.get("status") == status and p.get("versions")]
    if not matching:
        return None
    return [pid_generator.get_id(v) for p in matching for v in p["versions"]]


def _build_vulnerability(vulnerability: Dict[str, Any], pid_generator: PidGenerator) -> Dict[str, Any]:
    products = vulnerability.get("products") or []
    product_status = {}
    for status in PRODUCT_STATUSES:
        ids = _filter_product_status(products, status, pid_generator)
        if ids is not None:
            product_status[status] = ids

    cwe = vulnerability.get("cwe")
    return {
        "cve": vulnerability.get("cve") or None,
        "title": vulnerability.get("title"),
        "cwe": {"id": cwe.get("id"), "name": cwe.get("name")} if cwe else None,
        "notes": [parse_note(n) for n in vulnerability.get("notes") or []],
        "product_status": product_status,
        "remediations": [
            {
                "category": remediation.get("category"),
                "date": remediation.get("date") or None,
                "details": remediation.get("details"),
                "url": remediation.get("url") or None,
                "product_ids": [pid_generator.get_id(pid) for pid in remediation.get("product_ids") or []],
            }
            for remediation in vulnerability.get("remediations") or []
        ],
        "scores": [parse_score(score, pid_generator) for score in vulnerability.get("scores") or []],
        "threats": [
            {
                "category": threat.get("category"),
                "date": threat.get("date") or None,
                "details": threat.get("details"),
                "product_ids": [pid_generator.get_id(pid) for pid in threat.get("product_ids") or []] or None,
            }
            for threat in vulnerability.get("threats") or []
        ] or None,
    }


def create_csaf_document(
    draft: Dict[str, Any],
    *,
    base_document: Optional[Dict[str, Any]] = None,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build a CSAF security advisory from a draft.

    Args:
        draft: Editing model with 'document_information', 'products',
            'relationships' and 'vulnerabilities'
        base_document: Previously imported CSAF document; the composed document
            is merged over it and wins on conflicts
        generated_at: Generation timestamp (defaults to now)

    Returns:
        Dict: The CSAF document, free of None values
    """
    pid_generator = PidGenerator()
    timestamp = format_timestamp(generated_at or datetime.now(timezone.utc))

    branches = draft.get("products") or []
    relationships = draft.get("relationships") or []

    document = _build_document(draft, timestamp)
    product_tree = {
        "branches": parse_product_tree_branches(branches, pid_generator, build_full_product_names(branches)),
        "relationships": generate_relationships(relationships, pid_generator) if relationships else None,
    }
    vulnerabilities = [_build_vulnerability(v, pid_generator) for v in draft.get("vulnerabilities") or []]

    csaf_document = prune_none({
        "document": document,
        "product_tree": product_tree,
        "vulnerabilities": vulnerabilities,
    })
    logger.debug(f"Composed CSAF document with {len(pid_generator)} product ids")

    if base_document:
        csaf_document = deep_merge(base_document, csaf_document)

    return csaf_document
