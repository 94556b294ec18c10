import sys
import time
import logging

from .cli import parse_cmdline_args
from .exceptions import (
    CsafCLIError,
    ApiError,
    NetworkError,
    ConfigurationError,
    FileSystemError,
    ValidationError,
)
from .handlers import (
    handle_export,
    handle_preview,
    handle_import,
    handle_fetch_cve,
)

LOG_FILE = "csaf-cli-log.txt"


def format_duration(duration_seconds: float) -> str:
    """Formats a duration in seconds as 'X.YZ seconds'."""
    return f"{duration_seconds:.2f} seconds"


def main(argv=None) -> int:
    """
    Main function to parse arguments, set up logging and dispatch to the
    appropriate command handler.
    Returns an exit code (0 for success, non-zero for failure).
    """
    start_time = time.monotonic()
    exit_code = 1 # Default to failure
    logger = None

    try:
        params = parse_cmdline_args(argv)

        # Setup logging
        log_level = getattr(logging, params.log.upper(), logging.INFO)
        # Configure file handler (overwrite mode) and stream handler
        logging.basicConfig(level=log_level,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                            handlers=[logging.FileHandler(LOG_FILE, mode='w')],
                            force=True)

        # Console handler added separately to control its format independently
        console_handler = logging.StreamHandler(sys.stdout)
        console_formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(log_level)
        logging.getLogger().addHandler(console_handler)

        logger = logging.getLogger("csaf-cli")

        # Print Configuration for this Run
        print("--- CSAF CLI Configuration ---")
        print(f"Command: {params.command}")
        for k, v in sorted(params.__dict__.items()):
            if k == 'command': continue
            print(f"  {k:<30} = {v}")
        print("------------------------------")
        logger.debug("Parsed parameters: %s", params)

        # --- Command Dispatch ---
        COMMAND_HANDLERS = {
            "export": handle_export,
            "preview": handle_preview,
            "import": handle_import,
            "fetch-cve": handle_fetch_cve,
        }

        handler = COMMAND_HANDLERS.get(params.command)

        if handler:
            handler(params) # Handlers raise exceptions on failure
            exit_code = 0
            print("\nCSAF CLI finished successfully.")
        else:
            print(f"Error: Unknown command '{params.command}'.")
            logger.error(f"Unknown command '{params.command}' encountered in main dispatch.")
            exit_code = 1

    # --- Unified Exception Handling ---
    except (ConfigurationError, ValidationError) as e:
        # Errors due to user input/setup, no traceback needed in the log
        print(f"\nDetailed Error Information:")
        print(f"Runtime Error: {e.message}")
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=False)
        return 1
    except (ApiError, NetworkError, FileSystemError) as e:
        print(f"\nDetailed Error Information:")
        print(f"Runtime Error: {e.message}")
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=True)
        return 1
    except CsafCLIError as e:
        print(f"\nDetailed Error Information:")
        print(f"CSAF CLI Error: {e.message}")
        if logger: logger.error("Unhandled CsafCLIError: %s", e.message, exc_info=True)
        return 1
    except Exception as e:
        print(f"\nDetailed Error Information:")
        print(f"Unexpected Error: {e}")
        if logger: logger.critical("Unexpected error occurred", exc_info=True)
        return 1
    finally:
        duration_str = format_duration(time.monotonic() - start_time)
        print(f"\nTotal Execution Time: {duration_str}")
        if logger: logger.info("Total execution time: %s", duration_str)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
