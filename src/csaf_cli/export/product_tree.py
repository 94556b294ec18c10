"""
Product tree conversion for CSAF export.

The draft keeps a tree of vendor / product_name / product_version branches.
Childless product branches become CSAF products with stable ids; every other
branch only groups its descendants.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from packageurl import PackageURL

from .pid_generator import PidGenerator

logger = logging.getLogger(__name__)

GROUPING_CATEGORIES = {"vendor", "product_family"}


def iter_branches(
    branches: List[Dict[str, Any]],
    parents: Tuple[Dict[str, Any], ...] = (),
) -> Iterator[Tuple[Dict[str, Any], Tuple[Dict[str, Any], ...]]]:
    """Depth-first walk yielding (branch, ancestors) pairs."""
    for branch in branches or []:
        yield branch, parents
        yield from iter_branches(branch.get("sub_branches") or [], parents + (branch,))


def build_full_product_names(branches: List[Dict[str, Any]]) -> Dict[str, str]:
    """Map every branch id to its ancestors' names and its own joined by spaces."""
    names: Dict[str, str] = {}
    for branch, parents in iter_branches(branches):
        parts = [p.get("name", "") for p in parents] + [branch.get("name", "")]
        names[branch.get("id", "")] = " ".join(parts)
    return names


def get_products(branches: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """All product_name branches of the tree, in tree order."""
    return [b for b, _ in iter_branches(branches) if b.get("category") == "product_name"]


def is_product_leaf(branch: Dict[str, Any]) -> bool:
    return not branch.get("sub_branches") and branch.get("category") not in GROUPING_CATEGORIES


def normalize_identification_helper(helper: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Return a copy of a product identification helper with a canonical purl.

    An unparseable purl is exported unchanged so validation can flag it.
    """
    if not helper:
        return None

    normalized = dict(helper)
    purl = normalized.get("purl")
    if purl:
        try:
            normalized["purl"] = PackageURL.from_string(purl).to_string()
        except ValueError as e:
            logger.warning(f"Keeping invalid purl '{purl}' as-is: {e}")
    return normalized


def parse_product_tree_branches(
    branches: List[Dict[str, Any]],
    pid_generator: PidGenerator,
    full_product_names: Optional[Dict[str, str]] = None,
) -> List[Dict[str, Any]]:
    """
    Convert draft branches into CSAF product tree branches.

    Args:
        branches: Draft branches with 'id', 'category', 'name' and 'sub_branches'
        pid_generator: Generator shared with the rest of the export pass
        full_product_names: Precomputed branch id -> full name map (computed when omitted)

    Returns:
        List of CSAF branch dictionaries
    """
    if full_product_names is None:
        full_product_names = build_full_product_names(branches)

    parsed = []
    for branch in branches or []:
        csaf_branch: Dict[str, Any] = {
            "category": branch.get("category"),
            "name": branch.get("name", ""),
        }

        sub_branches = branch.get("sub_branches") or []
        if sub_branches:
            csaf_branch["branches"] = parse_product_tree_branches(
                sub_branches, pid_generator, full_product_names
            )
        elif is_product_leaf(branch):
            branch_id = branch.get("id", "")
            csaf_branch["product"] = {
                "name": branch.get("product_name") or full_product_names.get(branch_id, branch.get("name", "")),
                "product_id": pid_generator.get_id(branch_id),
                "product_identification_helper": normalize_identification_helper(
                    branch.get("identification_helper")
                ),
            }

        parsed.append(csaf_branch)

    return parsed
