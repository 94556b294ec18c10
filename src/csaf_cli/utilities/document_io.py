# csaf_cli/utilities/document_io.py

import json
import logging
import os
from typing import Any, Dict, Optional, Union

from ..exceptions import FileSystemError, ValidationError

logger = logging.getLogger("csaf-cli")

DRAFT_LIST_KEYS = ("products", "vulnerabilities")


def load_json_file(file_path: str) -> Dict[str, Any]:
    """
    Reads a JSON object from disk.

    Raises:
        FileSystemError: If the file doesn't exist or can't be read
        ValidationError: If the content is not a JSON object
    """
    if not os.path.exists(file_path):
        raise FileSystemError(f"File does not exist: {file_path}")
    if not os.path.isfile(file_path):
        raise ValidationError(f"Path must be a file: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {file_path}: {e}") from e
    except (IOError, OSError) as e:
        raise FileSystemError(f"Failed to read {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Expected a JSON object in {file_path}, got {type(data).__name__}")

    logger.debug(f"Loaded JSON document from {file_path}")
    return data


def save_json_file(file_path: str, data: Any, indent: Optional[int] = 2) -> None:
    """Writes data as JSON, creating the parent directory if needed."""
    _write_text(file_path, json.dumps(data, indent=indent, ensure_ascii=False))


def save_text_file(file_path: str, content: str) -> None:
    _write_text(file_path, content)


def _write_text(file_path: str, content: str) -> None:
    output_dir = os.path.dirname(file_path) or "."
    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)
    except (IOError, OSError) as e:
        raise FileSystemError(f"Failed to write {file_path}: {e}") from e
    logger.debug(f"Wrote {len(content)} characters to {file_path}")


def get_draft(document: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Returns the document if it has the shape of a draft, None otherwise."""
    if not isinstance(document.get("document_information"), dict):
        return None
    for key in DRAFT_LIST_KEYS:
        if not isinstance(document.get(key), list):
            return None
    return document


def is_draft(document: Union[Dict[str, Any], Any]) -> bool:
    return isinstance(document, dict) and get_draft(document) is not None


def load_draft(file_path: str) -> Dict[str, Any]:
    """
    Loads and shape-checks a draft file.

    Raises:
        ValidationError: If the file is not a draft
    """
    document = load_json_file(file_path)
    draft = get_draft(document)
    if draft is None:
        raise ValidationError(
            f"{file_path} is not a draft: expected 'document_information', 'products' and 'vulnerabilities'"
        )
    draft.setdefault("relationships", [])
    return draft
