# csaf_cli/handlers/preview.py

import logging
import argparse

from ..utilities.error_handling import handler_error_wrapper
from ..utilities.document_io import is_draft, load_json_file, save_text_file
from ..export import create_csaf_document
from ..importer import is_csaf_document
from ..preview import load_label_lookup, render_preview
from ..exceptions import ValidationError
from .export import resolve_output_path

logger = logging.getLogger("csaf-cli")


@handler_error_wrapper
def handle_preview(params: argparse.Namespace) -> bool:
    """
    Handler for the 'preview' command. Renders a CSAF document, or a draft
    composed on the fly, to an HTML page.

    Args:
        params: Command line parameters

    Returns:
        bool: True if the operation was successful
    """
    print(f"\n--- Running {params.command.upper()} Command ---")

    document = load_json_file(params.path)
    if is_draft(document):
        print(f"\n🛠️  {params.path} is a draft, composing the CSAF document first...")
        document.setdefault("relationships", [])
        document = create_csaf_document(document)
    elif not is_csaf_document(document):
        raise ValidationError(f"{params.path} is neither a CSAF document nor a draft")

    lookup = load_label_lookup(getattr(params, 'labels', None))
    html = render_preview(document, lookup)

    tracking_id = document.get("document", {}).get("tracking", {}).get("id", "")
    output_path = resolve_output_path(getattr(params, 'output', None), tracking_id, "html")
    save_text_file(output_path, html)
    logger.info(f"HTML preview written to {output_path}")

    print(f"\n✅ Rendered preview of '{tracking_id}'")
    print(f"📄 Preview saved to: {output_path}")
    return True
