"""
Error handling utilities for the CSAF CLI.

This module contains functions for standardized error handling and formatting
across all CLI handlers.
"""

import logging
import argparse
import functools
from typing import Callable

from ..exceptions import (
    CsafCLIError,
    ApiError,
    NetworkError,
    ConfigurationError,
    FileSystemError,
    ValidationError,
    EmptyHistoryError,
    UnsupportedVersionError,
)

logger = logging.getLogger("csaf-cli")


def format_and_print_error(error: Exception, handler_name: str, params: argparse.Namespace):
    """
    Formats and prints a standardized error message for CLI users.

    Args:
        error: The exception that occurred
        handler_name: Name of the handler where the error occurred
        params: Command line parameters
    """
    command = getattr(params, 'command', 'unknown')

    error_message = getattr(error, 'message', str(error))
    error_code = getattr(error, 'code', None)
    error_details = getattr(error, 'details', {})

    if isinstance(error, NetworkError):
        print(f"\n❌ Network connectivity issue")
        print(f"   {error_message}")
        print(f"\n💡 Please check:")
        print(f"   • The CVE service is reachable from this machine")
        print(f"   • The API URL is correct: {getattr(params, 'cve_api_url', '<not specified>')}")

    elif isinstance(error, ApiError):
        print(f"\n❌ CVE service error")
        print(f"   {error_message}")
        if error_code == "404":
            print(f"\n💡 The CVE '{getattr(params, 'cve', 'unknown')}' is unknown or not yet published")
        elif error_code:
            print(f"   Error code: {error_code}")

    elif isinstance(error, FileSystemError):
        print(f"\n❌ File system error")
        print(f"   {error_message}")
        print(f"\n💡 Please check:")
        print(f"   • File permissions are correct")
        print(f"   • All specified paths exist")
        if hasattr(params, 'path'):
            print(f"   • Path specified: {params.path}")

    elif isinstance(error, EmptyHistoryError):
        print(f"\n❌ Cannot determine the document version")
        print(f"   {error_message}")
        print(f"\n💡 Add at least one entry to 'document_information.revision_history'")

    elif isinstance(error, UnsupportedVersionError):
        print(f"\n❌ Unsupported CSAF version")
        print(f"   {error_message}")
        supported = error_details.get('supported_versions') if error_details else None
        if supported:
            print(f"\n💡 Supported versions: {supported}")

    elif isinstance(error, ValidationError):
        print(f"\n❌ Invalid input")
        print(f"   {error_message}")
        print(f"\n💡 Please check your command-line arguments and input files")

    elif isinstance(error, ConfigurationError):
        print(f"\n❌ Configuration error")
        print(f"   {error_message}")
        print(f"\n💡 Please check your command-line arguments and environment variables")

    else:
        print(f"\n❌ Error executing '{command}' command: {error_message}")

    if error_code and not isinstance(error, ApiError):
        print(f"\nError code: {error_code}")

    if getattr(params, 'log', 'INFO') == 'DEBUG' and error_details:
        print("\nDetailed error information:")
        for key, value in error_details.items():
            print(f"  • {key}: {value}")

    print(f"\nFor more details, run with --log DEBUG for verbose output")


def handler_error_wrapper(handler_func: Callable) -> Callable:
    """
    A decorator that wraps handler functions with standardized error handling.

    Expected errors are printed and re-raised unchanged; anything else is
    logged with its traceback and re-raised as a CsafCLIError so main() can
    map it to an exit code.

    Args:
        handler_func: The handler function to wrap

    Returns:
        The wrapped handler function with error handling

    Example:
        @handler_error_wrapper
        def handle_export(params):
            # Implementation without try/except blocks
            ...
    """
    @functools.wraps(handler_func)
    def wrapper(params):
        try:
            handler_name = handler_func.__name__
            command_name = params.command if hasattr(params, 'command') else 'unknown'
            logger.debug(f"Starting {handler_name} for command '{command_name}'")

            return handler_func(params)

        except (FileSystemError, ApiError, NetworkError, ValidationError, ConfigurationError) as e:
            logger.debug(f"Expected error in {handler_func.__name__}: {type(e).__name__}: {getattr(e, 'message', str(e))}")
            format_and_print_error(e, handler_func.__name__, params)
            raise

        except Exception as e:
            logger.error(f"Unexpected error in {handler_func.__name__}: {e}", exc_info=True)

            cli_error = CsafCLIError(
                f"Failed to execute {params.command if hasattr(params, 'command') else 'command'}: {str(e)}",
                details={"error": str(e), "handler": handler_func.__name__}
            )
            format_and_print_error(cli_error, handler_func.__name__, params)
            raise cli_error

    return wrapper
