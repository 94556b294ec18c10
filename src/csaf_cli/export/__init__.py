"""
CSAF export utilities.

This package turns a draft advisory into a CSAF 2.0 document:
- stable product ids (pid_generator)
- current version resolution (latest_version)
- CVSS score evaluation (score_evaluator)
- relationship expansion (relationships)
- product tree conversion (product_tree)
- document composition (csaf_export)
"""

from .csaf_export import create_csaf_document, get_filename
from .latest_version import compare_versions, retrieve_latest_version
from .pid_generator import PidGenerator
from .relationships import generate_relationships
from .score_evaluator import evaluate

__all__ = [
    "create_csaf_document",
    "get_filename",
    "compare_versions",
    "retrieve_latest_version",
    "PidGenerator",
    "generate_relationships",
    "evaluate",
]
