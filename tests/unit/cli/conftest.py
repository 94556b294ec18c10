import json

import pytest
from unittest.mock import patch


@pytest.fixture
def arg_parser():
    """Parse an argv list through parse_cmdline_args without touching the real sys.argv."""
    def _parse(args_list):
        from csaf_cli.cli import parse_cmdline_args
        with patch('sys.argv', args_list):
            return parse_cmdline_args()
    return _parse


@pytest.fixture
def draft_file(tmp_path):
    """An existing (minimal) draft file for path validation."""
    path = tmp_path / "advisory.draft.json"
    path.write_text(json.dumps({"document_information": {}, "products": [], "vulnerabilities": []}), encoding="utf-8")
    return str(path)
