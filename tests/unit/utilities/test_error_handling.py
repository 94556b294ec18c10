import pytest
import argparse
from unittest.mock import patch

from csaf_cli.utilities.error_handling import (
    format_and_print_error,
    handler_error_wrapper
)
from csaf_cli.exceptions import (
    CsafCLIError,
    ApiError,
    NetworkError,
    ConfigurationError,
    FileSystemError,
    ValidationError,
    EmptyHistoryError,
)


# --- Fixtures ---
@pytest.fixture
def mock_params(mocker):
    params = mocker.MagicMock(spec=argparse.Namespace)
    params.command = "fetch-cve"
    params.cve = "CVE-2024-1234"
    params.cve_api_url = "https://cve.example/api/cve"
    params.path = "/test/draft.json"
    params.log = "INFO"
    return params


def _printed(mock_print):
    return [call.args[0] for call in mock_print.call_args_list if call.args]


# --- Tests for format_and_print_error ---
@patch('builtins.print')
def test_format_network_error(mock_print, mock_params):
    """Test error formatting for NetworkError."""
    format_and_print_error(NetworkError("Connection refused"), "handle_fetch_cve", mock_params)
    print_calls = _printed(mock_print)
    assert any("Network connectivity issue" in c for c in print_calls)
    assert any("https://cve.example/api/cve" in c for c in print_calls)


@patch('builtins.print')
def test_format_api_not_found(mock_print, mock_params):
    """Test that a 404 from the CVE service names the CVE."""
    format_and_print_error(ApiError("HTTP 404", code="404"), "handle_fetch_cve", mock_params)
    print_calls = _printed(mock_print)
    assert any("CVE-2024-1234" in c and "unknown" in c for c in print_calls)


@patch('builtins.print')
def test_format_file_system_error(mock_print, mock_params):
    format_and_print_error(FileSystemError("Cannot read"), "handle_export", mock_params)
    print_calls = _printed(mock_print)
    assert any("File system error" in c for c in print_calls)
    assert any("/test/draft.json" in c for c in print_calls)


@patch('builtins.print')
def test_format_empty_history(mock_print, mock_params):
    format_and_print_error(EmptyHistoryError("empty"), "handle_export", mock_params)
    assert any("revision_history" in c for c in _printed(mock_print))


@patch('builtins.print')
def test_format_configuration_error(mock_print, mock_params):
    format_and_print_error(ConfigurationError("bad labels"), "handle_preview", mock_params)
    assert any("Configuration error" in c for c in _printed(mock_print))


@patch('builtins.print')
def test_format_generic_error(mock_print, mock_params):
    format_and_print_error(RuntimeError("boom"), "handle_export", mock_params)
    assert any("Error executing 'fetch-cve' command: boom" in c for c in _printed(mock_print))


@patch('builtins.print')
def test_details_shown_in_debug_mode(mock_print, mock_params):
    mock_params.log = "DEBUG"
    format_and_print_error(ValidationError("bad", details={"field": "title"}), "handle_export", mock_params)
    assert any("field: title" in c for c in _printed(mock_print))


# --- Tests for handler_error_wrapper ---
class TestHandlerErrorWrapper:
    """Test the handler error decorator."""

    @patch('builtins.print')
    def test_success_passthrough(self, mock_print, mock_params):
        @handler_error_wrapper
        def handle_ok(params):
            return "done"

        assert handle_ok(mock_params) == "done"
        mock_print.assert_not_called()

    @patch('builtins.print')
    def test_expected_error_reraised(self, mock_print, mock_params):
        @handler_error_wrapper
        def handle_bad(params):
            raise ValidationError("bad input")

        with pytest.raises(ValidationError, match="bad input"):
            handle_bad(mock_params)
        assert any("Invalid input" in c for c in _printed(mock_print))

    @patch('builtins.print')
    def test_unexpected_error_wrapped(self, mock_print, mock_params):
        @handler_error_wrapper
        def handle_crash(params):
            raise KeyError("missing")

        with pytest.raises(CsafCLIError) as exc_info:
            handle_crash(mock_params)
        assert "Failed to execute fetch-cve" in exc_info.value.message
        assert exc_info.value.details["handler"] == "handle_crash"

    def test_preserves_metadata(self):
        @handler_error_wrapper
        def handle_documented(params):
            """Docstring."""

        assert handle_documented.__name__ == "handle_documented"
        assert handle_documented.__doc__ == "Docstring."
