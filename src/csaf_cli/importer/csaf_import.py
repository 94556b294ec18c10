# csaf_cli/importer/csaf_import.py

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import UnsupportedVersionError, ValidationError
from ..export.csaf_export import PRODUCT_STATUSES

logger = logging.getLogger("csaf-cli")

SUPPORTED_CSAF_VERSIONS = ["2.0"]


def get_csaf_version(obj: Any) -> Optional[str]:
    """The declared 'document.csaf_version', or None when absent."""
    if not isinstance(obj, dict):
        return None
    document = obj.get("document")
    if not isinstance(document, dict):
        return None
    version = document.get("csaf_version")
    return version if isinstance(version, str) else None


def is_csaf_document(obj: Any) -> bool:
    return get_csaf_version(obj) is not None


def is_csaf_version_supported(obj: Any) -> bool:
    return get_csaf_version(obj) in SUPPORTED_CSAF_VERSIONS


def _new_id() -> str:
    return uuid.uuid4().hex


def _parse_branches(
    csaf_branches: List[Dict[str, Any]],
    parents: Dict[str, Optional[str]],
    parent_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Converts CSAF branches into draft branches.

    Product branches keep their product id as branch id so that every
    product reference of the document stays resolvable. 'parents' is filled
    with product id -> parent branch id.
    """
    branches = []
    for csaf_branch in csaf_branches or []:
        product = csaf_branch.get("product") or {}
        branch_id = product.get("product_id") or _new_id()
        branch: Dict[str, Any] = {
            "id": branch_id,
            "category": csaf_branch.get("category"),
            "name": csaf_branch.get("name", ""),
            "sub_branches": _parse_branches(csaf_branch.get("branches") or [], parents, branch_id),
        }
        if product:
            branch["product_name"] = product.get("name", "")
            if product.get("product_identification_helper"):
                branch["identification_helper"] = dict(product["product_identification_helper"])
            parents[branch_id] = parent_id
        branches.append(branch)
    return branches


def _parse_relationships(
    csaf_relationships: List[Dict[str, Any]],
    parents: Dict[str, Optional[str]],
) -> List[Dict[str, Any]]:
    """Regroups expanded relationships into declarations, in first-seen order."""
    declarations: Dict[Tuple, Dict[str, Any]] = {}
    for relationship in csaf_relationships or []:
        source = relationship.get("product_reference")
        target = relationship.get("relates_to_product_reference")
        if source not in parents or target not in parents:
            logger.warning(
                f"Skipping relationship between unknown products '{source}' and '{target}'"
            )
            continue

        name = (relationship.get("full_product_name") or {}).get("name", "")
        key = (relationship.get("category"), name, parents[source], parents[target])
        declaration = declarations.setdefault(key, {
            "id": _new_id(),
            "category": relationship.get("category"),
            "name": name,
            "product1_version_ids": [],
            "product2_version_ids": [],
        })
        if source not in declaration["product1_version_ids"]:
            declaration["product1_version_ids"].append(source)
        if target not in declaration["product2_version_ids"]:
            declaration["product2_version_ids"].append(target)

    return list(declarations.values())


def _parse_product_status(
    product_status: Dict[str, List[str]],
    parents: Dict[str, Optional[str]],
) -> List[Dict[str, Any]]:
    """
    Maps product status lists back to per-product version lists.

    Consecutive versions sharing a parent product are grouped together, so the
    flattened order of every status list is preserved.
    """
    products = []
    for status in PRODUCT_STATUSES:
        current = None
        for version_id in product_status.get(status) or []:
            if version_id not in parents:
                logger.warning(f"Dropping unknown product '{version_id}' from status '{status}'")
                continue
            product_id = parents[version_id] or version_id
            if current is None or current["product_id"] != product_id:
                current = {"product_id": product_id, "status": status, "versions": []}
                products.append(current)
            current["versions"].append(version_id)
    return products


def _parse_score(score: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    cvss = score.get("cvss_v3") or score.get("cvss_v4")
    if not cvss:
        logger.warning("Dropping score without a CVSS v3 or v4 object")
        return None
    return {
        "cvss_version": cvss.get("version", ""),
        "vector_string": cvss.get("vectorString", ""),
        "product_ids": list(score.get("products") or []),
    }


def _parse_note(note: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "category": note.get("category"),
        "title": note.get("title", ""),
        "content": note.get("text", ""),
    }


def _parse_vulnerability(
    vulnerability: Dict[str, Any],
    parents: Dict[str, Optional[str]],
) -> Dict[str, Any]:
    draft_vulnerability: Dict[str, Any] = {
        "id": _new_id(),
        "title": vulnerability.get("title", ""),
        "notes": [_parse_note(n) for n in vulnerability.get("notes") or []],
        "products": _parse_product_status(vulnerability.get("product_status") or {}, parents),
        "remediations": [
            {
                "category": remediation.get("category"),
                "date": remediation.get("date"),
                "details": remediation.get("details", ""),
                "url": remediation.get("url"),
                "product_ids": list(remediation.get("product_ids") or []),
            }
            for remediation in vulnerability.get("remediations") or []
        ],
        "scores": [s for s in (_parse_score(score) for score in vulnerability.get("scores") or []) if s],
    }
    if vulnerability.get("cve"):
        draft_vulnerability["cve"] = vulnerability["cve"]
    if vulnerability.get("cwe"):
        draft_vulnerability["cwe"] = {
            "id": vulnerability["cwe"].get("id"),
            "name": vulnerability["cwe"].get("name"),
        }
    if vulnerability.get("threats"):
        draft_vulnerability["threats"] = [
            {
                "category": threat.get("category"),
                "details": threat.get("details", ""),
                "date": threat.get("date"),
                "product_ids": list(threat.get("product_ids") or []),
            }
            for threat in vulnerability["threats"]
        ]
    return draft_vulnerability


def _parse_acknowledgment(ack: Dict[str, Any]) -> Dict[str, Any]:
    parsed = {}
    for key in ("organization", "names", "summary"):
        if ack.get(key):
            parsed[key] = ack[key]
    urls = ack.get("urls") or []
    if urls:
        parsed["url"] = urls[0]
        if len(urls) > 1:
            logger.debug(f"Keeping only the first of {len(urls)} acknowledgment URLs in the draft")
    return parsed


def _parse_document_information(document: Dict[str, Any]) -> Dict[str, Any]:
    tracking = document.get("tracking") or {}
    publisher = document.get("publisher") or {}
    info = {
        "id": tracking.get("id", ""),
        "title": document.get("title", ""),
        "lang": document.get("lang", "en"),
        "status": tracking.get("status", "draft"),
        "category": document.get("category"),
        "csaf_version": document.get("csaf_version"),
        "publisher": {
            "name": publisher.get("name", ""),
            "category": publisher.get("category", ""),
            "namespace": publisher.get("namespace", ""),
            "contact_details": publisher.get("contact_details", ""),
            "issuing_authority": publisher.get("issuing_authority", ""),
        },
        "revision_history": [
            {
                "date": revision.get("date"),
                "number": revision.get("number"),
                "summary": revision.get("summary", ""),
            }
            for revision in tracking.get("revision_history") or []
        ],
        "notes": [_parse_note(n) for n in document.get("notes") or []],
        "references": [
            {
                "summary": reference.get("summary", ""),
                "url": reference.get("url", ""),
                "category": reference.get("category"),
            }
            for reference in document.get("references") or []
        ],
        "acknowledgments": [_parse_acknowledgment(a) for a in document.get("acknowledgments") or []],
    }
    if document.get("distribution"):
        info["distribution"] = document["distribution"]
    return info


def parse_csaf_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Converts a CSAF document into a draft.

    Exporting the resulting draft with the document as base reproduces the
    document, apart from the generator date.

    Args:
        document: Parsed CSAF JSON

    Returns:
        Dict: The draft

    Raises:
        ValidationError: If the object is not a CSAF document
        UnsupportedVersionError: If its CSAF version is not supported
    """
    if not is_csaf_document(document):
        raise ValidationError("Not a CSAF document: 'document.csaf_version' is missing")
    if not is_csaf_version_supported(document):
        raise UnsupportedVersionError(
            f"Unsupported CSAF version '{get_csaf_version(document)}'",
            details={"supported_versions": ", ".join(SUPPORTED_CSAF_VERSIONS)},
        )

    product_tree = document.get("product_tree") or {}
    parents: Dict[str, Optional[str]] = {}
    products = _parse_branches(product_tree.get("branches") or [], parents)
    relationships = _parse_relationships(product_tree.get("relationships") or [], parents)
    vulnerabilities = [_parse_vulnerability(v, parents) for v in document.get("vulnerabilities") or []]

    logger.debug(
        f"Imported CSAF document with {len(parents)} products, "
        f"{len(relationships)} relationship declarations and {len(vulnerabilities)} vulnerabilities"
    )
    return {
        "document_information": _parse_document_information(document.get("document") or {}),
        "products": products,
        "relationships": relationships,
        "vulnerabilities": vulnerabilities,
    }
