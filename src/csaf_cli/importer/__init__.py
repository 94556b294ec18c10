from .csaf_import import (
    SUPPORTED_CSAF_VERSIONS,
    get_csaf_version,
    is_csaf_document,
    is_csaf_version_supported,
    parse_csaf_document,
)

__all__ = [
    'SUPPORTED_CSAF_VERSIONS',
    'get_csaf_version',
    'is_csaf_document',
    'is_csaf_version_supported',
    'parse_csaf_document',
]
