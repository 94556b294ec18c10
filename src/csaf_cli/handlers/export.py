# csaf_cli/handlers/export.py

import logging
import argparse
import os
from typing import Any, Dict, Optional

from ..utilities.error_handling import handler_error_wrapper
from ..utilities.document_io import load_draft, load_json_file, save_json_file, save_text_file
from ..export import create_csaf_document, get_filename
from ..importer import is_csaf_document
from ..exceptions import ValidationError

logger = logging.getLogger("csaf-cli")


def _load_base_document(path: Optional[str]) -> Optional[Dict[str, Any]]:
    if not path:
        return None
    base_document = load_json_file(path)
    if not is_csaf_document(base_document):
        raise ValidationError(f"Base document {path} is not a CSAF document")
    return base_document


def resolve_output_path(output: Optional[str], tracking_id: str, suffix: str) -> str:
    """Output file from --output, or '<tracking id>.<suffix>' in the working directory."""
    if output:
        return output
    stem = get_filename(tracking_id) or "csaf_document"
    return os.path.join(os.getcwd(), f"{stem}.{suffix}")


@handler_error_wrapper
def handle_export(params: argparse.Namespace) -> bool:
    """
    Handler for the 'export' command. Composes a CSAF document from a draft.

    Args:
        params: Command line parameters

    Returns:
        bool: True if the operation was successful
    """
    print(f"\n--- Running {params.command.upper()} Command ---")

    print(f"\n📥 Loading draft from {params.path}...")
    draft = load_draft(params.path)
    base_document = _load_base_document(getattr(params, 'base', None))
    if base_document:
        print(f"   • Merging over base document {params.base}")

    document = create_csaf_document(draft, base_document=base_document)

    tracking_id = document.get("document", {}).get("tracking", {}).get("id", "")
    output_path = resolve_output_path(getattr(params, 'output', None), tracking_id, "json")
    save_json_file(output_path, document)
    logger.info(f"CSAF document written to {output_path}")

    vulnerability_count = len(document.get("vulnerabilities", []))
    print(f"\n✅ Exported '{tracking_id}' with {vulnerability_count} vulnerabilities")
    print(f"📄 Document saved to: {output_path}")

    if getattr(params, 'html', False):
        from ..preview import load_label_lookup, render_preview

        html_path = os.path.splitext(output_path)[0] + ".html"
        save_text_file(html_path, render_preview(document, load_label_lookup(getattr(params, 'labels', None))))
        print(f"📄 HTML preview saved to: {html_path}")

    return True
