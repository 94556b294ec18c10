# csaf_cli/cli.py

import argparse
import os
import re
import logging
from argparse import RawTextHelpFormatter

from .cve import CVE_API_URL
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

CVE_ID_PATTERN = re.compile(r"^CVE-\d{4}-\d{4,}$", re.IGNORECASE)


# --- Helper functions for common arguments ---
def add_common_output_options(subparser, what: str):
    output_args = subparser.add_argument_group("Output Options")
    output_args.add_argument("--output", help=f"File to write the {what} to.", metavar="PATH")


def add_common_label_options(subparser):
    label_args = subparser.add_argument_group("Preview Options")
    label_args.add_argument(
        "--labels",
        help="JSON file with translated preview labels. Overrides CSAF_LABELS env var.",
        default=os.getenv("CSAF_LABELS"),
        metavar="PATH"
    )


# --- Main Parsing Function ---
def parse_cmdline_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments

    Raises:
        ValidationError: If required arguments are missing or invalid
    """
    parser = argparse.ArgumentParser(
        description="CSAF CLI - Compose, preview and import CSAF 2.0 security advisories.",
        formatter_class=RawTextHelpFormatter,
        epilog="""
Environment Variables:
  CSAF_CVE_API_URL : CVE record endpoint (Default: https://cveawg.mitre.org/api/cve)
  CSAF_LABELS      : JSON file with translated preview labels

Example Usage:
  # Compose a CSAF document from a draft
  csaf-cli export --path ./advisory.draft.json --output ./advisory.json

  # Compose over a previously imported document, keeping its extra fields
  csaf-cli export --path ./advisory.draft.json --base ./advisory.json --html

  # Render an HTML preview of a CSAF document
  csaf-cli preview --path ./advisory.json --output ./advisory.html

  # Turn a CSAF document into an editable draft
  csaf-cli import --path ./advisory.json --output ./advisory.draft.json

  # Fill a draft vulnerability from its CVE record
  csaf-cli fetch-cve --path ./advisory.draft.json --cve CVE-2024-1234
"""
    )

    # --- Global Arguments (apply to all subcommands) ---
    global_args = parser.add_argument_group("Global Arguments")
    global_args.add_argument(
        "--log",
        help="Logging level (Default: INFO)",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )

    # --- Subparsers ---
    subparsers = parser.add_subparsers(dest='command', help='Available commands', required=True, metavar='COMMAND')

    # --- 'export' Subcommand ---
    export_parser = subparsers.add_parser(
        'export',
        help='Compose a CSAF document from a draft.',
        description='Compose a CSAF 2.0 security advisory from a draft file.',
        formatter_class=RawTextHelpFormatter
    )
    export_parser.add_argument("--path", help="Draft file to export.", required=True, metavar="PATH")
    export_parser.add_argument("--base", help="Previously imported CSAF document to merge the result over.", metavar="PATH")
    export_parser.add_argument("--html", help="Also write an HTML preview next to the document.", action="store_true", default=False)
    add_common_output_options(export_parser, "CSAF document")
    add_common_label_options(export_parser)

    # --- 'preview' Subcommand ---
    preview_parser = subparsers.add_parser(
        'preview',
        help='Render a CSAF document or draft as HTML.',
        description='Render a CSAF document, or a draft composed on the fly, as an HTML page.',
        formatter_class=RawTextHelpFormatter
    )
    preview_parser.add_argument("--path", help="CSAF document or draft to render.", required=True, metavar="PATH")
    add_common_output_options(preview_parser, "HTML preview")
    add_common_label_options(preview_parser)

    # --- 'import' Subcommand ---
    import_parser = subparsers.add_parser(
        'import',
        help='Convert a CSAF document into a draft.',
        description='Convert a CSAF 2.0 document into an editable draft.',
        formatter_class=RawTextHelpFormatter
    )
    import_parser.add_argument("--path", help="CSAF document to import.", required=True, metavar="PATH")
    add_common_output_options(import_parser, "draft")

    # --- 'fetch-cve' Subcommand ---
    fetch_cve_parser = subparsers.add_parser(
        'fetch-cve',
        help='Fill a draft vulnerability from its CVE record.',
        description='Fetch a CVE record and copy its descriptions, CVSS vectors, CWE and title into the draft.',
        formatter_class=RawTextHelpFormatter
    )
    fetch_cve_parser.add_argument("--path", help="Draft file to update.", required=True, metavar="PATH")
    fetch_cve_parser.add_argument("--cve", help="CVE identifier, e.g. CVE-2024-1234.", required=True, metavar="ID")
    fetch_cve_parser.add_argument(
        "--cve-api-url",
        help="CVE record endpoint. Overrides CSAF_CVE_API_URL env var.",
        default=os.getenv("CSAF_CVE_API_URL", CVE_API_URL),
        metavar="URL"
    )
    fetch_cve_parser.add_argument("--timeout", help="Request timeout in seconds (Default: 30)", type=int, default=30)
    add_common_output_options(fetch_cve_parser, "updated draft (Default: update in place)")

    # --- Validate args after parsing ---
    args = parser.parse_args(argv)

    if not os.path.exists(args.path):
        raise ValidationError(f"Path does not exist: {args.path}")
    if not os.path.isfile(args.path):
        raise ValidationError(f"Path must be a file: {args.path}")

    if args.command == 'export' and args.base and not os.path.isfile(args.base):
        raise ValidationError(f"Base document does not exist: {args.base}")

    elif args.command == 'fetch-cve':
        if not CVE_ID_PATTERN.match(args.cve):
            raise ValidationError(f"Invalid CVE identifier '{args.cve}', expected CVE-YYYY-NNNN")
        args.cve = args.cve.upper()
        if args.timeout <= 0:
            raise ValidationError("Timeout must be a positive number of seconds")
        if not args.cve_api_url:
            raise ValidationError("CVE API URL must not be empty")

    return args
