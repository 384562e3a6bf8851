"""
Unified logging for the path extractor.

Console output with optional mirroring to a log file.
Warnings and errors are collected for an end-of-run summary.

Usage:
    from gtasa_extractor.utils import log, logWarning, logError, logDebug, init_logging, print_summary

    init_logging(Path("extract.log"))    # or init_logging() for console only

    log("Decoding nodes0.dat")           # Info - progress and section headers
    logWarning("link index out of range")  # Output is usable but incomplete
    logError("nodes3.dat: truncated")    # A file could not be decoded
    logDebug("read 1432 path nodes")     # Log file only

    print_summary()
"""

import sys
import atexit
from pathlib import Path
from datetime import datetime
from typing import List, Optional, Tuple


class Colors:
    YELLOW = '\033[93m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    BOLD = '\033[1m'
    RESET = '\033[0m'


# Module state
_log_file = None
_log_path: Optional[Path] = None
_initialized = False
_warnings: List[str] = []
_errors: List[str] = []


def init_logging(log_path: Optional[Path] = None):
    """
    Initialize logging.

    Args:
        log_path: Optional log file. When None, messages only go to the console
                  and debug messages are dropped.
    """
    global _log_file, _log_path, _initialized, _warnings, _errors

    if _initialized:
        return

    _warnings = []
    _errors = []
    _initialized = True

    if log_path is None:
        return

    _log_path = Path(log_path)
    _log_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        _log_file = open(_log_path, 'w', encoding='utf-8')

        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        _log_file.write(f"Extraction started: {timestamp}\n")
        _log_file.write("=" * 70 + "\n\n")
        _log_file.flush()

        atexit.register(close_logging)

    except OSError as e:
        print(f"Warning: Could not open log file {_log_path}: {e}", file=sys.stderr)
        _log_file = None


def close_logging():
    """Close the log file and reset state."""
    global _log_file, _initialized

    if _log_file is not None:
        try:
            timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
            _log_file.write(f"\n{'=' * 70}\n")
            _log_file.write(f"Extraction finished: {timestamp}\n")
            _log_file.close()
        except OSError:
            pass
        _log_file = None

    _initialized = False


def print_summary():
    """Print warning and error details followed by the final counts."""
    log("\n" + "=" * 70)
    log("EXTRACTION SUMMARY")
    log("=" * 70)

    if _errors:
        print(f"\n{Colors.RED}{Colors.BOLD}Errors ({len(_errors)}):{Colors.RESET}")
        for err in _errors:
            print(f"  {Colors.RED}- {err}{Colors.RESET}")
        if _log_file:
            _log_file.write(f"\nErrors ({len(_errors)}):\n")
            for err in _errors:
                _log_file.write(f"  - {err}\n")

    if _warnings:
        print(f"\n{Colors.YELLOW}{Colors.BOLD}Warnings ({len(_warnings)}):{Colors.RESET}")
        for warn in _warnings:
            print(f"  {Colors.YELLOW}- {warn}{Colors.RESET}")
        if _log_file:
            _log_file.write(f"\nWarnings ({len(_warnings)}):\n")
            for warn in _warnings:
                _log_file.write(f"  - {warn}\n")

    print()
    if _errors:
        print(f"{Colors.RED}{Colors.BOLD}{len(_errors)} Error(s){Colors.RESET}", end="")
    else:
        print(f"{Colors.GREEN}0 Errors{Colors.RESET}", end="")

    print(" | ", end="")

    if _warnings:
        print(f"{Colors.YELLOW}{Colors.BOLD}{len(_warnings)} Warning(s){Colors.RESET}")
    else:
        print(f"{Colors.GREEN}0 Warnings{Colors.RESET}")

    if _log_file:
        _log_file.write(f"\n{len(_errors)} Error(s) | {len(_warnings)} Warning(s)\n")
        _log_file.flush()


def get_counts() -> Tuple[int, int]:
    """Return (error_count, warning_count)."""
    return len(_errors), len(_warnings)


def _write_to_file(msg: str, end: str = "\n"):
    if _log_file is not None:
        try:
            _log_file.write(msg + end)
            _log_file.flush()
        except OSError:
            pass


def log(msg: str = "", end: str = "\n"):
    """Log an info message to the console and the log file."""
    if not _initialized:
        init_logging()

    print(msg, end=end)
    _write_to_file(msg, end)


def logWarning(msg: str, end: str = "\n"):
    """
    Log a warning. Shown in yellow and tracked for the summary.
    """
    if not _initialized:
        init_logging()

    formatted = f"Warning: {msg}"
    print(f"{Colors.YELLOW}{formatted}{Colors.RESET}", end=end)
    _write_to_file(formatted, end)
    _warnings.append(msg)


def logError(msg: str, end: str = "\n"):
    """
    Log an error. Shown in red on stderr and tracked for the summary.
    """
    if not _initialized:
        init_logging()

    formatted = f"ERROR: {msg}"
    print(f"{Colors.RED}{formatted}{Colors.RESET}", end=end, file=sys.stderr)
    _write_to_file(formatted, end)
    _errors.append(msg)


def logDebug(msg: str, end: str = "\n"):
    """Log a debug message. Only written to the log file."""
    if not _initialized:
        init_logging()

    _write_to_file(f"[DEBUG] {msg}", end)
