# csaf_cli/handlers/__init__.py

import logging

# Common logger for all handlers
logger = logging.getLogger("csaf-cli")

from .export import handle_export
from .preview import handle_preview
from .import_csaf import handle_import
from .fetch_cve import handle_fetch_cve

__all__ = [
    'handle_export',
    'handle_preview',
    'handle_import',
    'handle_fetch_cve',
]
