"""
Expansion of relationship declarations into CSAF relationships.

A draft relationship links a set of source versions to a set of target
versions. CSAF needs one relationship per concrete (source, target) pair,
each introducing its own product in the 'CSAFRID' id namespace.
"""

import logging
import uuid
from typing import Any, Dict, List

from .pid_generator import PidGenerator, RELATIONSHIP_ID_PREFIX

logger = logging.getLogger(__name__)


def generate_relationships(
    relationships: List[Dict[str, Any]],
    pid_generator: PidGenerator,
) -> List[Dict[str, Any]]:
    """
    Expand relationship declarations into the cartesian set of CSAF relationships.

    Records are emitted per declaration, with source versions as the outer loop
    and target versions as the inner loop, both in input order.

    Args:
        relationships: Draft declarations with 'category', 'name',
            'product1_version_ids' and 'product2_version_ids'
        pid_generator: Product id generator shared with the rest of the export pass

    Returns:
        List of CSAF relationship dictionaries
    """
    csaf_relationships: List[Dict[str, Any]] = []
    rid_generator = PidGenerator(prefix=RELATIONSHIP_ID_PREFIX)

    for relationship in relationships:
        sources = relationship.get("product1_version_ids") or []
        targets = relationship.get("product2_version_ids") or []
        if not sources or not targets:
            logger.debug(f"Relationship '{relationship.get('name', '')}' has an empty side, nothing to expand")
            continue

        for source_version in sources:
            for target_version in targets:
                csaf_relationships.append({
                    "category": relationship.get("category"),
                    "product_reference": pid_generator.get_id(source_version),
                    "relates_to_product_reference": pid_generator.get_id(target_version),
                    "full_product_name": {
                        "name": relationship.get("name", ""),
                        "product_id": rid_generator.get_id(uuid.uuid4().hex),
                    },
                })

    return csaf_relationships
