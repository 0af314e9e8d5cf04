import sys
from typing import Optional, List


def fatal_error(message: str,
                context: str = "",
                suggestions: Optional[List[str]] = None,
                exit_code: int = 1):
    """
    Print a formatted error message and exit the application.

    Args:
        message: The main error message
        context: Optional context about what was being done when the error occurred
        suggestions: Optional list of suggestions for fixing the error
        exit_code: Exit code to use (default: 1)
    """
    print(f"FATAL ERROR: {message}")

    if context:
        print(f"Context: {context}")

    if suggestions:
        print("\nSuggestions:")
        for i, suggestion in enumerate(suggestions, 1):
            print(f"  {i}. {suggestion}")

    print()
    sys.exit(exit_code)


def validation_error(item: str,
                     value: str,
                     expected: str,
                     suggestions: Optional[List[str]] = None):
    """
    Print a validation error and exit.

    Args:
        item: What was being validated (e.g., "ISIN prefix")
        value: The invalid value
        expected: What was expected
        suggestions: Suggestions for fixing the issue
    """
    fatal_error(f"Invalid {item}: '{value}'", f"Expected {expected}", suggestions)


def file_error(operation: str,
               file_path: str,
               reason: str,
               suggestions: Optional[List[str]] = None):
    """Print a file operation error and exit."""
    if not suggestions:
        suggestions = [
            "Check that the file exists and is readable",
            "Verify the file is not corrupted or in use by another program",
        ]

    fatal_error(f"Failed {operation} file: {file_path}", f"Reason: {reason}", suggestions)


def network_error(operation: str,
                  url: str,
                  reason: str,
                  suggestions: Optional[List[str]] = None):
    """Print a network operation error and exit."""
    if not suggestions:
        suggestions = [
            "Check your internet connection",
            "Verify the URL points to an XML country list",
            "Use --countries with a local copy of the list instead",
        ]

    fatal_error(f"Failed {operation}: {url}", f"Reason: {reason}", suggestions)


def data_error(data_type: str,
               issue: str,
               location: str = "",
               suggestions: Optional[List[str]] = None):
    """
    Print a data error and exit.

    Args:
        data_type: Type of data that had an issue (e.g., "ISIN list", "country list")
        issue: What the issue was
        location: Where the issue occurred (e.g., a file name)
        suggestions: Suggestions for fixing the issue
    """
    context = f"Location: {location}" if location else ""
    fatal_error(f"Data error in {data_type}: {issue}", context, suggestions)
