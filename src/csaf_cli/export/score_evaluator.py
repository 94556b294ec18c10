"""
CVSS base score evaluation for CSAF score objects.

Scores are computed best-effort: a vector that cannot be parsed yields a
base score of 0 and an empty severity. The unmodified vector string is still
exported, so document validation can report it to the author.
"""

import logging
from typing import Any, Dict, TYPE_CHECKING

from cvss import CVSS3, CVSS4, CVSSError

if TYPE_CHECKING:
    from .pid_generator import PidGenerator

logger = logging.getLogger(__name__)

LEGACY_FAMILY_PREFIX = "3"


def is_legacy_version(declared_version: str) -> bool:
    """True for CVSS v3.x declarations, which use the cvss_v3 object."""
    return str(declared_version or "").startswith(LEGACY_FAMILY_PREFIX)


def score_key(declared_version: str) -> str:
    return "cvss_v3" if is_legacy_version(declared_version) else "cvss_v4"


def evaluate(vector_string: str, declared_version: str) -> Dict[str, Any]:
    """
    Compute base score and qualitative severity for a CVSS vector.

    Args:
        vector_string: CVSS vector, e.g. 'CVSS:3.1/AV:N/AC:L/...'
        declared_version: CVSS version selected by the author ('3.0', '3.1', '4.0')

    Returns:
        Dict with 'baseScore' (float) and 'baseSeverity' (upper-case str).
        Invalid vectors give {'baseScore': 0, 'baseSeverity': ''}.
    """
    if not isinstance(vector_string, str) or not vector_string:
        return {"baseScore": 0, "baseSeverity": ""}

    try:
        if is_legacy_version(declared_version):
            cvss = CVSS3(vector_string)
            severity = cvss.severities()[0]
        else:
            cvss = CVSS4(vector_string)
            severity = cvss.severity
        base_score = float(cvss.base_score)
        base_severity = str(severity).upper()
    except (CVSSError, ValueError, KeyError, IndexError) as e:
        logger.debug(f"Invalid CVSS {declared_version} vector '{vector_string}': {e}")
        return {"baseScore": 0, "baseSeverity": ""}

    return {"baseScore": base_score, "baseSeverity": base_severity}


def parse_score(score: Dict[str, Any], pid_generator: "PidGenerator") -> Dict[str, Any]:
    """
    Convert a draft score into a CSAF score object.

    Args:
        score: Draft score with 'cvss_version', 'vector_string' and 'product_ids'
        pid_generator: Generator shared with the rest of the export pass

    Returns:
        Dict with a 'cvss_v3' or 'cvss_v4' object and the referenced 'products'
    """
    version = score.get("cvss_version", "")
    vector_string = score.get("vector_string", "")
    evaluated = evaluate(vector_string, version)

    return {
        score_key(version): {
            "version": version,
            "vectorString": vector_string,
            "baseScore": evaluated["baseScore"],
            "baseSeverity": evaluated["baseSeverity"],
        },
        "products": [pid_generator.get_id(pid) for pid in score.get("product_ids") or []],
    }
