"""
CVE record retrieval for vulnerability drafts.

Fetches a CVE record from the CVE Services API (CVE JSON 5 format) and
copies the CNA container's descriptions, CVSS vectors, CWE and title into a
draft vulnerability.
"""

import copy
import logging
import re
import uuid
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import ApiError, NetworkError, ValidationError

logger = logging.getLogger(__name__)

CVE_API_URL = "https://cveawg.mitre.org/api/cve"
REQUEST_TIMEOUT = 30  # seconds
FALLBACK_LANGUAGE = "en"

DESCRIPTION_TITLES = {
    "en": "Description",
    "de": "Beschreibung",
}

# CVE JSON metric key -> draft cvss_version
CVSS_METRICS = {
    "cvssV3_1": "3.1",
    "cvssV4_0": "4.0",
}

_CWE_PREFIX = re.compile(r"^CWE-\d+\s*:?\s*")


def fetch_cve_record(cve_id: str, api_url: str = CVE_API_URL, timeout: int = REQUEST_TIMEOUT) -> Dict[str, Any]:
    """
    Fetch a CVE record.

    Args:
        cve_id: CVE identifier, e.g. 'CVE-2024-1234'
        api_url: Base URL of the CVE Services record endpoint
        timeout: Request timeout in seconds

    Returns:
        Dict: The CVE JSON record

    Raises:
        NetworkError: If the service cannot be reached
        ApiError: If the service answers with an error status or invalid JSON
    """
    url = f"{api_url.rstrip('/')}/{cve_id}"
    headers = {"Accept": "application/json", "User-Agent": "csaf-cli/1.0"}
    logger.debug(f"Fetching CVE record from {url}")

    try:
        response = requests.get(url, timeout=timeout, headers=headers)
    except requests.exceptions.Timeout as e:
        raise NetworkError(f"Timed out fetching {cve_id} from {api_url}", details={"error": str(e)}) from e
    except requests.exceptions.RequestException as e:
        raise NetworkError(f"Failed to fetch {cve_id} from {api_url}", details={"error": str(e)}) from e

    if not 200 <= response.status_code < 300:
        raise ApiError(
            f"CVE service returned HTTP {response.status_code} for {cve_id}",
            code=str(response.status_code),
            details={"response": response.text[:500]},
        )

    try:
        record = response.json()
    except ValueError as e:
        raise ApiError(f"CVE service returned invalid JSON for {cve_id}") from e

    if not isinstance(record, dict):
        raise ApiError(f"Unexpected CVE record format for {cve_id}")
    return record


def _select_descriptions(descriptions: List[Dict[str, Any]], lang: str) -> List[Dict[str, Any]]:
    """Descriptions in the document language, English ones when there are none."""
    selected = [d for d in descriptions if str(d.get("lang", "")).lower() == lang]
    if not selected:
        selected = [d for d in descriptions if d.get("lang") == FALLBACK_LANGUAGE]
    return selected


def _find_cwe(cna: Dict[str, Any]) -> Optional[Dict[str, str]]:
    """First CWE problem type of the CNA container."""
    for problem_type in cna.get("problemTypes") or []:
        for description in problem_type.get("descriptions") or []:
            if description.get("type") == "CWE" and description.get("cweId"):
                name = _CWE_PREFIX.sub("", description.get("description", ""))
                return {"id": description["cweId"], "name": name}
    return None


def apply_cve_record(vulnerability: Dict[str, Any], record: Dict[str, Any], lang: str = "en") -> Dict[str, Any]:
    """
    Copy CVE record data into a draft vulnerability.

    Description notes and scores are appended to the existing ones; cwe and
    title are replaced.

    Args:
        vulnerability: Draft vulnerability (not modified)
        record: CVE JSON record
        lang: Document language

    Returns:
        Dict: The updated vulnerability

    Raises:
        ValidationError: If the record has no CNA descriptions
    """
    cna = (record.get("containers") or {}).get("cna") or {}
    descriptions = cna.get("descriptions") or []
    if not descriptions:
        raise ValidationError(f"CVE record for {vulnerability.get('cve', '')} contains no descriptions")

    lang = (lang or FALLBACK_LANGUAGE).lower()
    updated = copy.deepcopy(vulnerability)
    cve_id = updated.get("cve", "")
    title = DESCRIPTION_TITLES.get(lang.split("-")[0], DESCRIPTION_TITLES[FALLBACK_LANGUAGE])

    notes = updated.setdefault("notes", [])
    if notes:
        logger.warning(f"Appending CVE descriptions to {len(notes)} existing notes")
    for index, description in enumerate(_select_descriptions(descriptions, lang), start=1):
        notes.append({
            "id": uuid.uuid4().hex,
            "category": "description",
            "title": f"{title} - {cve_id} - {index}",
            "content": description.get("value", ""),
        })

    scores = updated.setdefault("scores", [])
    for metric in cna.get("metrics") or []:
        for key, cvss_version in CVSS_METRICS.items():
            if metric.get(key):
                scores.append({
                    "cvss_version": cvss_version,
                    "vector_string": metric[key].get("vectorString", ""),
                    "product_ids": [],
                })

    cwe = _find_cwe(cna)
    if cwe:
        updated["cwe"] = cwe
    updated["title"] = cna.get("title", "")

    logger.debug(f"Applied CVE record {cve_id}: {len(notes)} notes, {len(scores)} scores")
    return updated
