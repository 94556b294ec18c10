from .document_io import (
    is_draft,
    load_draft,
    load_json_file,
    save_json_file,
    save_text_file,
)
from .error_handling import format_and_print_error, handler_error_wrapper

__all__ = [
    'is_draft',
    'load_draft',
    'load_json_file',
    'save_json_file',
    'save_text_file',
    'format_and_print_error',
    'handler_error_wrapper',
]
