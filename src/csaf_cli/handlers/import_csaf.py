# csaf_cli/handlers/import_csaf.py

import logging
import argparse
import os

from ..utilities.error_handling import handler_error_wrapper
from ..utilities.document_io import load_json_file, save_json_file
from ..export import get_filename
from ..importer import get_csaf_version, parse_csaf_document

logger = logging.getLogger("csaf-cli")


@handler_error_wrapper
def handle_import(params: argparse.Namespace) -> bool:
    """
    Handler for the 'import' command. Converts a CSAF document into a draft.

    Args:
        params: Command line parameters

    Returns:
        bool: True if the operation was successful
    """
    print(f"\n--- Running {params.command.upper()} Command ---")

    document = load_json_file(params.path)
    print(f"\n📥 Importing CSAF {get_csaf_version(document) or '?'} document from {params.path}...")
    draft = parse_csaf_document(document)

    output_path = getattr(params, 'output', None)
    if not output_path:
        stem = get_filename(draft["document_information"].get("id", "")) or "csaf_document"
        output_path = os.path.join(os.getcwd(), f"{stem}.draft.json")
    save_json_file(output_path, draft)
    logger.info(f"Draft written to {output_path}")

    print(f"\n✅ Imported {len(draft['vulnerabilities'])} vulnerabilities "
          f"and {len(draft['relationships'])} relationship declarations")
    print(f"📄 Draft saved to: {output_path}")
    print(f"💡 Export it with --base {params.path} to keep fields the draft does not model")
    return True
