# csaf_cli/handlers/fetch_cve.py

import logging
import argparse
import uuid
from typing import Any, Dict, List

from ..utilities.error_handling import handler_error_wrapper
from ..utilities.document_io import load_draft, save_json_file
from ..cve import apply_cve_record, fetch_cve_record

logger = logging.getLogger("csaf-cli")


def _find_vulnerability_index(vulnerabilities: List[Dict[str, Any]], cve_id: str) -> int:
    """Index of the vulnerability carrying cve_id; a new one is appended when none does."""
    for index, vulnerability in enumerate(vulnerabilities):
        if (vulnerability.get("cve") or "").upper() == cve_id.upper():
            return index

    logger.info(f"No vulnerability with {cve_id} in the draft, adding one")
    vulnerabilities.append({
        "id": uuid.uuid4().hex,
        "cve": cve_id,
        "title": "",
        "notes": [],
        "products": [],
        "remediations": [],
        "scores": [],
    })
    return len(vulnerabilities) - 1


@handler_error_wrapper
def handle_fetch_cve(params: argparse.Namespace) -> bool:
    """
    Handler for the 'fetch-cve' command. Fills a draft vulnerability from
    its CVE record.

    Args:
        params: Command line parameters

    Returns:
        bool: True if the operation was successful
    """
    print(f"\n--- Running {params.command.upper()} Command ---")

    draft = load_draft(params.path)
    vulnerabilities = draft["vulnerabilities"]
    index = _find_vulnerability_index(vulnerabilities, params.cve)

    print(f"\n🌐 Fetching {params.cve} from {params.cve_api_url}...")
    record = fetch_cve_record(params.cve, params.cve_api_url, params.timeout)

    lang = draft["document_information"].get("lang") or "en"
    before = vulnerabilities[index]
    updated = apply_cve_record(before, record, lang)
    vulnerabilities[index] = updated

    added_notes = len(updated.get("notes", [])) - len(before.get("notes", []))
    added_scores = len(updated.get("scores", [])) - len(before.get("scores", []))

    output_path = getattr(params, 'output', None) or params.path
    save_json_file(output_path, draft)
    logger.info(f"Draft with {params.cve} data written to {output_path}")

    print(f"\n✅ Added {added_notes} notes and {added_scores} scores from {params.cve}")
    if updated.get("cwe"):
        print(f"   • CWE: {updated['cwe']['id']}")
    print(f"📄 Draft saved to: {output_path}")
    return True
