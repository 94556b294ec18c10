"""
Resolution of the current document version from the revision history.
"""

import functools
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

import semver

from ..exceptions import EmptyHistoryError

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)", re.IGNORECASE)


def _parse_int_prefix(value: str) -> float:
    """Leading integer of a string, NaN when there is none (like parseInt)."""
    match = _LEADING_INT.match(value or "")
    if not match:
        return math.nan
    return float(int(match.group(1)))


def compare_versions(v1: str, v2: str) -> Union[int, float]:
    """
    Compares two version strings.

    Args:
        v1: First version string
        v2: Second version string

    Returns:
        1 if v2 is greater than or equal to v1, -1 if v2 is less than v1 when
        both are semantic versions. Otherwise the difference between the
        leading integers of v2 and v1, which is NaN when either has none.
    """
    if semver.Version.is_valid(v1) and semver.Version.is_valid(v2):
        return 1 if semver.Version.parse(v2) >= semver.Version.parse(v1) else -1
    return _parse_int_prefix(v2) - _parse_int_prefix(v1)


def _normalize_fraction(match: re.Match) -> str:
    # fromisoformat before Python 3.11 only accepts 3 or 6 fractional digits
    return match.group(1) + "." + (match.group(2) + "000000")[:6]


def _parse_date(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    normalized = _FRACTION.sub(_normalize_fraction, value.strip().replace("Z", "+00:00").replace("z", "+00:00"))
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        logger.debug(f"Unparseable revision date '{value}'")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _compare_entries(a: Dict[str, Any], z: Dict[str, Any]) -> int:
    date_a = _parse_date(a.get("date"))
    date_z = _parse_date(z.get("date"))
    if date_a is not None and date_z is not None:
        delta = (date_z - date_a).total_seconds()
        if delta:
            return 1 if delta > 0 else -1

    result = compare_versions(str(a.get("number", "")), str(z.get("number", "")))
    if math.isnan(result) or result == 0:
        return 0
    return 1 if result > 0 else -1


def retrieve_latest_version(history: List[Dict[str, Any]]) -> str:
    """
    Retrieves the version number of the most recent revision.

    The history is sorted by date (most recent first) and then by version
    number. The number of the first entry after sorting is returned.

    Args:
        history: Revision history entries with 'date' and 'number' keys

    Returns:
        str: Version number of the latest revision

    Raises:
        EmptyHistoryError: If the history is empty
    """
    if not history:
        raise EmptyHistoryError("Revision history is empty, cannot retrieve latest version.")

    ordered = sorted(history, key=functools.cmp_to_key(_compare_entries))
    return ordered[0].get("number", "")
