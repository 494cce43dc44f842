"""Logging utilities with color support."""

import sys

DEBUG = 10
INFO = 20
ERROR = 40

_level = ERROR


class Colors:
    """ANSI color codes for terminal output."""
    GREY = "\033[90m"
    BLUE = "\033[94m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    RESET = "\033[0m"


def set_verbosity(verbose: bool = False, very_verbose: bool = False):
    """Set the minimum level of messages that get printed.

    Args:
        verbose: Print warnings, info and success messages
        very_verbose: Additionally print debug messages
    """
    global _level
    if very_verbose:
        _level = DEBUG
    elif verbose:
        _level = INFO
    else:
        _level = ERROR


def log_debug(msg: str):
    """Log debug message in grey."""
    if _level <= DEBUG:
        print(f"{Colors.GREY}[DEBUG]{Colors.RESET} {msg}")


def log_info(msg: str):
    """Log informational message in blue.

    Args:
        msg: Message to log
    """
    if _level <= INFO:
        print(f"{Colors.BLUE}[INFO]{Colors.RESET} {msg}")


def log_success(msg: str):
    """Log success message in green.

    Args:
        msg: Message to log
    """
    if _level <= INFO:
        print(f"{Colors.GREEN}[SUCCESS]{Colors.RESET} {msg}")


def log_warning(msg: str):
    """Log warning message in yellow to stderr.

    Args:
        msg: Message to log
    """
    if _level <= INFO:
        print(f"{Colors.YELLOW}[WARNING]{Colors.RESET} {msg}", file=sys.stderr)


def log_error(msg: str):
    """Log error message in red to stderr.

    Args:
        msg: Message to log
    """
    print(f"{Colors.RED}[ERROR]{Colors.RESET} {msg}", file=sys.stderr)
